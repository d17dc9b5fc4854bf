"""Environment-driven settings for the planner."""
from __future__ import annotations

import logging
import os

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_MAX_UPLOAD_BYTES = 1 * 1024 * 1024  # 1 MB
_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_log_level() -> str:
    """Return the configured log level name, defaulting to INFO."""

    override = os.environ.get("LOG_LEVEL")
    if override and override.strip():
        return override.strip().upper()
    return DEFAULT_LOG_LEVEL


def get_max_upload_bytes() -> int:
    override = os.environ.get("MAX_UPLOAD_BYTES")
    if override and override.strip():
        try:
            value = int(override.strip())
        except ValueError as exc:
            raise ValueError(f"MAX_UPLOAD_BYTES must be an integer, got {override!r}") from exc
        if value > 0:
            return value
    return DEFAULT_MAX_UPLOAD_BYTES


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=(level or get_log_level()).upper(), format=_LOG_FORMAT)
