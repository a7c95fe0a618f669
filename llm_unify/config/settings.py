"""
Runtime settings.

Values come from environment variables, with a ``.env`` file loaded through
python-dotenv. Invalid values fall back to the defaults with a logged
warning rather than failing at import time.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from ..models.unified import MessageRole
from .constants import (
    DEFAULT_ACCEPTANCE_THRESHOLD,
    DETECTION_THRESHOLD_ENV_VAR,
    FALLBACK_ROLE_ENV_VAR,
)

load_dotenv()

logger = logging.getLogger("llm_unify.config")


class Settings(BaseModel):
    """Tunable parsing and detection settings."""
    detection_threshold: float = Field(
        DEFAULT_ACCEPTANCE_THRESHOLD, ge=0.0, le=1.0,
        description="Minimum confidence a detection signal must reach"
    )
    fallback_role: MessageRole = Field(
        MessageRole.USER,
        description="Role substituted for unrecognized role strings"
    )


def _threshold_from_env() -> float:
    value = os.getenv(DETECTION_THRESHOLD_ENV_VAR)
    if value is None:
        return DEFAULT_ACCEPTANCE_THRESHOLD
    try:
        threshold = float(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {DETECTION_THRESHOLD_ENV_VAR}={value!r}")
        return DEFAULT_ACCEPTANCE_THRESHOLD
    if not 0.0 <= threshold <= 1.0:
        logger.warning(f"Ignoring out of range {DETECTION_THRESHOLD_ENV_VAR}={value!r}")
        return DEFAULT_ACCEPTANCE_THRESHOLD
    return threshold


def _fallback_role_from_env() -> MessageRole:
    value = os.getenv(FALLBACK_ROLE_ENV_VAR)
    if value is None:
        return MessageRole.USER
    try:
        return MessageRole(value.strip().lower())
    except ValueError:
        logger.warning(f"Ignoring invalid {FALLBACK_ROLE_ENV_VAR}={value!r}")
        return MessageRole.USER


def load_settings(**overrides) -> Settings:
    """
    Build settings from the environment.

    Args:
        **overrides: Explicit values that take precedence over the environment

    Returns:
        Settings instance
    """
    values = {
        "detection_threshold": _threshold_from_env(),
        "fallback_role": _fallback_role_from_env(),
    }
    values.update({key: value for key, value in overrides.items() if value is not None})
    return Settings(**values)


def resolve_settings(settings: Optional[Settings] = None) -> Settings:
    return settings if settings is not None else load_settings()
