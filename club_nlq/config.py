# club_nlq/config.py
"""
Runtime configuration for club_nlq.

Values come from environment variables (optionally loaded from a local
.env file) with sensible defaults, so the library works out of the box.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# ============================================================================
# ENVIRONMENT CONFIGURATION
# ============================================================================


@dataclass
class ClubNLQConfig:
    """Question-understanding and streak settings from environment variables."""

    log_level: str
    max_entities_per_type: int
    max_stat_types: int
    enable_metrics: bool

    @classmethod
    def from_env(cls) -> "ClubNLQConfig":
        """Load configuration from environment variables with defaults."""
        return cls(
            log_level=os.getenv("CLUB_NLQ_LOG_LEVEL", "INFO").upper(),
            max_entities_per_type=int(
                os.getenv("CLUB_NLQ_MAX_ENTITIES_PER_TYPE", "3")
            ),
            max_stat_types=int(os.getenv("CLUB_NLQ_MAX_STAT_TYPES", "3")),
            enable_metrics=os.getenv("CLUB_NLQ_ENABLE_METRICS", "true").lower()
            == "true",
        )


# Global config singleton
_config: Optional[ClubNLQConfig] = None


def get_config() -> ClubNLQConfig:
    """Get global configuration, loading .env on first use."""
    global _config
    if _config is None:
        _env_path = Path.cwd() / ".env"
        load_dotenv(dotenv_path=_env_path)
        _config = ClubNLQConfig.from_env()
        logger.debug(
            f"club_nlq config: max_entities_per_type={_config.max_entities_per_type}, "
            f"max_stat_types={_config.max_stat_types}, metrics={_config.enable_metrics}"
        )
    return _config


def reset_config() -> None:
    """Drop the cached configuration (next get_config() re-reads the environment)."""
    global _config
    _config = None


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for applications embedding the library."""
    logging.basicConfig(
        level=level or get_config().log_level,
        format=LOG_FORMAT,
    )
