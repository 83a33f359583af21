"""Centralized configuration for the EcoQuest marker API.

Every setting can be overridden with an environment variable so the same
code runs locally, in a container, or under the test suite.

Usage:
    from ecoquest.config import get_settings

    settings = get_settings()
    print(settings.data_file)
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


API_VERSION = "1.0.0"

DEFAULT_DATA_FILE = "markers.json"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3001
DEFAULT_MAX_LIST_LIMIT = 1000

_TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _env_list(name: str, default: List[str]) -> List[str]:
    value = os.environ.get(name)
    if value is None:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""
    data_file: Path
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    environment: str = "production"
    log_level: str = "INFO"
    log_file: Optional[str] = None
    seed_samples: bool = False
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    max_list_limit: int = DEFAULT_MAX_LIST_LIMIT
    version: str = API_VERSION

    @property
    def is_development(self) -> bool:
        """True when internal fault detail may be shown to clients."""
        return self.environment.lower() in ("development", "dev")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current process environment."""
        return cls(
            data_file=Path(os.environ.get("ECOQUEST_DATA_FILE", DEFAULT_DATA_FILE)),
            host=os.environ.get("ECOQUEST_HOST", DEFAULT_HOST),
            port=_env_int("ECOQUEST_PORT", DEFAULT_PORT),
            environment=os.environ.get("ECOQUEST_ENV", "production"),
            log_level=os.environ.get("ECOQUEST_LOG_LEVEL", "INFO"),
            log_file=os.environ.get("ECOQUEST_LOG_FILE") or None,
            seed_samples=_env_bool("ECOQUEST_SEED_SAMPLES"),
            cors_origins=_env_list("ECOQUEST_CORS_ORIGINS", ["*"]),
            max_list_limit=_env_int("ECOQUEST_MAX_LIST_LIMIT", DEFAULT_MAX_LIST_LIMIT),
        )


# Global instance for easy import
_settings = None


def get_settings() -> Settings:
    """Get the global settings instance.

    Returns:
        Settings read from the environment on first access
    """
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next access re-reads the environment."""
    global _settings
    _settings = None
