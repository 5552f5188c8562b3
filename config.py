# config.py
"""Environment-driven settings for the CLI, the store and the analytics service."""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = "data/habitpulse.json"
DEFAULT_ANALYTICS_PORT = 5570
DEFAULT_TIMEOUT_MS = 1500


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using default %s", name, raw, default)
        return default


@dataclass(frozen=True)
class Settings:
    data_path: str = DEFAULT_DATA_PATH
    log_level: str = "INFO"
    analytics_host: str = "localhost"
    analytics_port: int = DEFAULT_ANALYTICS_PORT
    analytics_timeout_ms: int = DEFAULT_TIMEOUT_MS

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            data_path=os.getenv("HABITPULSE_DATA_PATH", DEFAULT_DATA_PATH),
            log_level=os.getenv("HABITPULSE_LOG_LEVEL", "INFO").upper(),
            analytics_host=os.getenv("ANALYTICS_HOST", "localhost"),
            analytics_port=_int_env("ANALYTICS_PORT", DEFAULT_ANALYTICS_PORT),
            analytics_timeout_ms=_int_env("ANALYTICS_TIMEOUT_MS", DEFAULT_TIMEOUT_MS),
        )


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
