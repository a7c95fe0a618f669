from .models import MODEL_CATALOG
from .settings import Settings, load_settings

__all__ = ["MODEL_CATALOG", "Settings", "load_settings"]
