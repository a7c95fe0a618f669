"""
Structured logging utility for parsers and the registry.

Every component logs through a ParserLogger so that lines carry the same
``[provider=... key=value]`` prefix.
"""

import logging
import time
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Optional


class ParserLogger:
    """Structured logger for one provider parser (or the registry)."""

    def __init__(self, provider_name: str, component: str = "providers"):
        """
        Initialize logger for a specific provider.

        Args:
            provider_name: Name of the provider (e.g., "openai", "anthropic")
            component: Logger namespace below ``llm_unify``
        """
        self.provider = provider_name
        self.logger = logging.getLogger(f"llm_unify.{component}.{provider_name}")

    def _format_message(self, message: str, **kwargs) -> str:
        """Format message with structured fields."""
        fields = [f"provider={self.provider}"]

        for key, value in kwargs.items():
            if value is not None:
                fields.append(f"{key}={value}")

        return f"[{' '.join(fields)}] {message}"

    def debug(self, message: str, model: Optional[str] = None,
              parse_id: Optional[str] = None, **kwargs):
        """Log debug message with structured fields."""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                self._format_message(message, model=model, parse_id=parse_id, **kwargs)
            )

    def info(self, message: str, model: Optional[str] = None,
             parse_id: Optional[str] = None, **kwargs):
        """Log info message with structured fields."""
        self.logger.info(
            self._format_message(message, model=model, parse_id=parse_id, **kwargs)
        )

    def warning(self, message: str, model: Optional[str] = None,
                parse_id: Optional[str] = None, **kwargs):
        """Log warning message with structured fields."""
        self.logger.warning(
            self._format_message(message, model=model, parse_id=parse_id, **kwargs)
        )

    def error(self, message: str, model: Optional[str] = None,
              parse_id: Optional[str] = None, error: Optional[Exception] = None, **kwargs):
        """Log error message with structured fields."""
        if error:
            kwargs['error_type'] = type(error).__name__
            kwargs['error_msg'] = str(error)

        self.logger.error(
            self._format_message(message, model=model, parse_id=parse_id, **kwargs),
            exc_info=error is not None,
        )

    @contextmanager
    def track_parse(self, method: str, parse_id: Optional[str] = None):
        """
        Context manager to time a parse call and log its outcome.

        Args:
            method: The operation (e.g., "parse", "parse_stream_chunk")
            parse_id: Optional correlation id (generated if not provided)

        Yields:
            Dict the caller fills with ``success``, ``model`` and counts
        """
        if parse_id is None:
            parse_id = str(uuid.uuid4())[:8]

        start_time = time.time()
        self.debug(f"Starting {method}", parse_id=parse_id, method=method)

        metadata: Dict[str, Any] = {
            'parse_id': parse_id,
            'method': method,
            'start_time': start_time,
        }

        try:
            yield metadata
        except Exception as e:
            duration = time.time() - start_time
            self.error(
                f"Failed {method}",
                parse_id=parse_id,
                method=method,
                duration_ms=int(duration * 1000),
                error=e
            )
            raise

        duration = time.time() - start_time
        self.debug(
            f"Completed {method}",
            model=metadata.get('model'),
            parse_id=parse_id,
            method=method,
            success=metadata.get('success'),
            errors=metadata.get('errors') or None,
            warnings=metadata.get('warnings') or None,
            duration_ms=int(duration * 1000)
        )

    def log_usage(self, usage: Any, model: Optional[str], parse_id: Optional[str] = None):
        """Log normalized token usage at debug level."""
        metadata = getattr(usage, 'metadata', {}) or {}
        cache_read = metadata.get('cache_read_input_tokens') or metadata.get('cached_tokens')
        self.debug(
            "Token usage",
            model=model,
            parse_id=parse_id,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            total_tokens=usage.total_tokens,
            cache_read_tokens=cache_read if cache_read else None,
            reasoning_tokens=metadata.get('reasoning_tokens') or None
        )
