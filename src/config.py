"""Runtime configuration for the payments engine."""

import logging
import os
from dataclasses import dataclass

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_FORMAT = "%(levelname)s: %(message)s"


@dataclass
class EngineConfig:
    """Settings the CLI reads before processing a file."""

    log_level: str = DEFAULT_LOG_LEVEL
    log_format: str = DEFAULT_LOG_FORMAT

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables."""
        return cls(
            log_level=_level_or_default(os.getenv("PAYMENTS_LOG_LEVEL", DEFAULT_LOG_LEVEL)),
            log_format=os.getenv("PAYMENTS_LOG_FORMAT", DEFAULT_LOG_FORMAT),
        )


def _level_or_default(name: str) -> str:
    level = name.strip().upper()
    # getLevelName maps known names to their int value and anything else to a string
    if isinstance(logging.getLevelName(level), int):
        return level
    return DEFAULT_LOG_LEVEL
