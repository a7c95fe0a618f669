"""
Provider registry.

Holds one parser per provider and dispatches parse calls to it, running
detection first when the caller does not name a provider. Registration
replaces the parser map under a lock (copy-on-write), so reads never lock
and always see a complete map.
"""

import threading
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ...config.constants import UNABLE_TO_DETECT_MESSAGE
from ...config.settings import Settings, resolve_settings
from ...errors import DetectionFailure, ParserError
from ...models.provider_metadata import ProviderMetadata
from ...models.results import DetectionResult, ParseResult
from ...models.unified import Provider
from ...observability.logging import ParserLogger
from ...providers import BUILTIN_PARSERS, ProviderParser
from ..catalog import ModelCatalog, get_catalog
from ..detection import ProviderDetector
from ..normalization import coerce_payload, transport_hints

ProviderLike = Union[Provider, str]


def _as_provider(provider: ProviderLike) -> Provider:
    """Accept enum members or their string values (case-insensitive)."""
    if isinstance(provider, Provider):
        return provider
    return Provider(str(provider).strip().lower())


class ProviderRegistry:
    """
    Registry of provider parsers with detection and dispatch.

    Construct one directly to control its parsers, settings and catalog, or
    use ``get_registry()`` for the process-wide default.
    """

    def __init__(
        self,
        detector: Optional[ProviderDetector] = None,
        settings: Optional[Settings] = None,
        catalog: Optional[ModelCatalog] = None,
    ):
        self.settings = resolve_settings(settings)
        self.catalog = catalog or get_catalog()
        self.detector = detector or ProviderDetector(catalog=self.catalog, settings=self.settings)
        self.logger = ParserLogger("registry", component="core")
        self._parsers: Dict[Provider, ProviderParser] = {}
        self._lock = threading.Lock()

    # Registration

    def register(self, provider: ProviderLike, parser: ProviderParser) -> None:
        """
        Add or replace the parser for ``provider``.

        Raises:
            ValueError: If ``provider`` is not a known provider name
            TypeError: If ``parser`` is not a ProviderParser
        """
        provider = _as_provider(provider)
        if not isinstance(parser, ProviderParser):
            raise TypeError(f"parser must be a ProviderParser, got {type(parser).__name__}")
        with self._lock:
            parsers = dict(self._parsers)
            replaced = provider in parsers
            parsers[provider] = parser
            self._parsers = parsers
        self.logger.debug("Registered parser", registered=provider.value, parser=type(parser).__name__, replaced=replaced)

    def register_all_providers(self) -> None:
        """Register the built-in parsers. Idempotent; custom registrations are kept."""
        with self._lock:
            parsers = dict(self._parsers)
            added = []
            for parser_class in BUILTIN_PARSERS:
                if parser_class.provider not in parsers:
                    parsers[parser_class.provider] = parser_class(settings=self.settings, catalog=self.catalog)
                    added.append(parser_class.provider.value)
            self._parsers = parsers
        if added:
            self.logger.debug("Registered built-in parsers", count=len(added))

    def unregister(self, provider: ProviderLike) -> bool:
        """Remove a parser; returns False when none was registered."""
        provider = _as_provider(provider)
        with self._lock:
            if provider not in self._parsers:
                return False
            parsers = dict(self._parsers)
            del parsers[provider]
            self._parsers = parsers
        return True

    # Lookup

    def get_parser(self, provider: ProviderLike) -> Optional[ProviderParser]:
        try:
            return self._parsers.get(_as_provider(provider))
        except ValueError:
            return None

    def is_registered(self, provider: ProviderLike) -> bool:
        return self.get_parser(provider) is not None

    def get_providers(self) -> List[Provider]:
        return list(self._parsers)

    def get_metadata(self, provider: ProviderLike) -> Optional[ProviderMetadata]:
        parser = self.get_parser(provider)
        return parser.get_metadata() if parser is not None else None

    def get_all_metadata(self) -> Dict[Provider, ProviderMetadata]:
        return {provider: parser.get_metadata() for provider, parser in self._parsers.items()}

    # Detection and dispatch

    def detect_provider(
        self,
        raw: Any,
        headers: Optional[Mapping[str, Any]] = None,
        url: Optional[str] = None,
        stream: bool = False,
    ) -> DetectionResult:
        """
        Detect the provider of a raw response or chunk.

        Headers and URL carried by an ``httpx.Response`` are used as signals;
        explicitly passed values take precedence.
        """
        try:
            payload = coerce_payload(raw)
            return self._detect(raw, payload, headers, url, stream)
        except ParserError as e:
            return DetectionResult(warnings=[str(e)])
        except Exception as e:
            self.logger.error("Unexpected error in detect_provider", error=e)
            return DetectionResult(warnings=[f"Unexpected error during detection: {e}"])

    def _detect(self, raw, payload, headers, url, stream) -> DetectionResult:
        hint_headers, hint_url = transport_hints(raw)
        merged_headers = {**hint_headers, **dict(headers or {})}
        return self.detector.detect(payload, headers=merged_headers, url=url or hint_url, stream=stream)

    def parse_response(
        self,
        raw: Any,
        provider: Optional[ProviderLike] = None,
        headers: Optional[Mapping[str, Any]] = None,
        url: Optional[str] = None,
    ) -> ParseResult:
        """
        Parse a complete response.

        Args:
            raw: Response body in any form ``coerce_payload`` accepts
            provider: Skip detection and use this provider's parser
            headers: Response headers used for detection
            url: Request URL used for detection

        Returns:
            ParseResult. Detection warnings precede the parser's own warnings.
        """
        parser, warnings, failure = self._resolve(raw, provider, headers, url, stream=False)
        if failure is not None:
            return failure
        return parser.parse(raw).with_leading_warnings(warnings)

    def parse_stream_chunk(
        self,
        chunk: Any,
        provider: Optional[ProviderLike] = None,
        headers: Optional[Mapping[str, Any]] = None,
        url: Optional[str] = None,
    ) -> ParseResult:
        """Parse one streaming chunk in isolation; nothing is buffered between calls."""
        parser, warnings, failure = self._resolve(chunk, provider, headers, url, stream=True)
        if failure is not None:
            return failure
        return parser.parse_stream_chunk(chunk).with_leading_warnings(warnings)

    def _resolve(
        self,
        raw: Any,
        provider: Optional[ProviderLike],
        headers: Optional[Mapping[str, Any]],
        url: Optional[str],
        stream: bool,
    ) -> Tuple[Optional[ProviderParser], List[str], Optional[ParseResult]]:
        """Pick the parser for a call: (parser, detection warnings, failure)."""
        if provider is not None:
            try:
                provider = _as_provider(provider)
            except ValueError:
                return None, [], ParseResult.failure([f"Unknown provider: {provider!r}"])
            return self._registered(provider, [])

        try:
            payload = coerce_payload(raw)
            detection = self._detect(raw, payload, headers, url, stream)
        except ParserError as e:
            return None, [], ParseResult.failure([str(e)])
        except Exception as e:
            # Nothing escapes the parse API
            self.logger.error("Unexpected error during detection", stream=stream, error=e)
            return None, [], ParseResult.failure([f"Unexpected error during detection: {e}"])
        if not detection.detected:
            self.logger.info(UNABLE_TO_DETECT_MESSAGE, stream=stream)
            return None, [], ParseResult.failure([str(DetectionFailure())], detection.warnings)
        return self._registered(detection.provider, detection.warnings)

    def _registered(self, provider: Provider, warnings: List[str]):
        parser = self._parsers.get(provider)
        if parser is None:
            return None, [], ParseResult.failure([f"Provider '{provider.value}' is not registered"], warnings)
        return parser, warnings, None


_default_registry: Optional[ProviderRegistry] = None
_default_lock = threading.Lock()


def get_registry() -> ProviderRegistry:
    """Return the process-wide registry, creating it with the built-ins on first use."""
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                registry = ProviderRegistry()
                registry.register_all_providers()
                _default_registry = registry
    return _default_registry


def register_all_providers() -> None:
    get_registry().register_all_providers()


def register(provider: ProviderLike, parser: ProviderParser) -> None:
    get_registry().register(provider, parser)


def detect_provider(
    raw: Any,
    headers: Optional[Mapping[str, Any]] = None,
    url: Optional[str] = None,
    stream: bool = False,
) -> DetectionResult:
    return get_registry().detect_provider(raw, headers=headers, url=url, stream=stream)


def parse_response(
    raw: Any,
    provider: Optional[ProviderLike] = None,
    headers: Optional[Mapping[str, Any]] = None,
    url: Optional[str] = None,
) -> ParseResult:
    return get_registry().parse_response(raw, provider=provider, headers=headers, url=url)


def parse_stream_chunk(
    chunk: Any,
    provider: Optional[ProviderLike] = None,
    headers: Optional[Mapping[str, Any]] = None,
    url: Optional[str] = None,
) -> ParseResult:
    return get_registry().parse_stream_chunk(chunk, provider=provider, headers=headers, url=url)
