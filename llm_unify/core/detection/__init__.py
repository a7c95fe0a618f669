from .detector import ProviderDetector
from .signals import Signal, header_signal, model_signal, url_signal

__all__ = ["ProviderDetector", "Signal", "header_signal", "model_signal", "url_signal"]
