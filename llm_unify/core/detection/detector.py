"""
Multi-signal provider detection.

Signals are evaluated in priority order: headers, URL, response shape and
finally the model name. The first signal whose confidence clears the
acceptance threshold decides, even when a later signal would report a
higher confidence for another provider.
"""

from typing import Any, Callable, List, Mapping, Optional

from ...config.settings import Settings, resolve_settings
from ...models.results import DetectionResult
from ...observability.logging import ParserLogger
from ..catalog import ModelCatalog, get_catalog
from .fingerprints import chunk_fingerprint, response_fingerprint
from .signals import Signal, header_signal, model_id_of, model_signal, url_signal


class ProviderDetector:
    """Detect which provider produced a decoded payload."""

    def __init__(
        self,
        catalog: Optional[ModelCatalog] = None,
        threshold: Optional[float] = None,
        settings: Optional[Settings] = None,
    ):
        self.catalog = catalog or get_catalog()
        self.threshold = threshold if threshold is not None else resolve_settings(settings).detection_threshold
        self.logger = ParserLogger("detection", component="core")

    def detect(
        self,
        payload: Any,
        headers: Optional[Mapping[str, Any]] = None,
        url: Optional[str] = None,
        stream: bool = False,
    ) -> DetectionResult:
        """
        Detect the provider of a payload.

        Args:
            payload: Decoded JSON body or streaming chunk
            headers: Response headers, if available
            url: Request URL, if available
            stream: Whether ``payload`` is a streaming chunk

        Returns:
            DetectionResult; ``provider`` is None when no signal was confident
        """
        model_id = model_id_of(payload)
        model = model_signal(model_id, self.catalog)
        fingerprint = chunk_fingerprint if stream else response_fingerprint

        candidates: List[Callable[[], Optional[Signal]]] = [
            lambda: header_signal(headers),
            lambda: url_signal(url),
            lambda: fingerprint(payload, model_id, model),
            lambda: model,
        ]

        for candidate in candidates:
            signal = candidate()
            if signal is None:
                continue
            if signal.confidence >= self.threshold:
                self.logger.debug(
                    "Provider detected",
                    model=model_id,
                    detected=signal.provider.value,
                    method=signal.method.value,
                    confidence=signal.confidence,
                )
                return DetectionResult(
                    provider=signal.provider,
                    confidence=signal.confidence,
                    method=signal.method,
                    warnings=list(signal.warnings),
                )
            self.logger.debug(
                "Ignoring weak detection signal",
                candidate=signal.provider.value,
                method=signal.method.value,
                confidence=signal.confidence,
                threshold=self.threshold,
            )

        return DetectionResult()
