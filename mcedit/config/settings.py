"""
Configuration settings for the application.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv

from mcedit.exceptions import ConfigurationError

# Load environment variables from .env file
_ = load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.project_dir: Optional[str] = self._get_optional_env(
            "MCEDIT_PROJECT_DIR"
        ) or self._get_optional_env("PROJECT_DIR")
        self.config_path: Optional[str] = self._get_optional_env("MCEDIT_CONFIG")
        self.log_level: int = self._get_level("MCEDIT_LOG_LEVEL", "INFO")
        client_level = self._get_optional_env("MCEDIT_CLIENT_LOG_LEVEL")
        self.client_log_level: Optional[int] = (
            self._parse_level("MCEDIT_CLIENT_LOG_LEVEL", client_level)
            if client_level
            else None
        )
        self.max_backups: Optional[int] = self._get_int("MCEDIT_MAX_BACKUPS")

    def _get_optional_env(self, key: str) -> Optional[str]:
        """Get an environment variable, treating empty values as unset."""
        value = os.getenv(key)
        if not value or not value.strip():
            return None
        return value.strip()

    def _get_env(self, key: str, default: str) -> str:
        """Get an environment variable with a default value."""
        return os.getenv(key, default)

    def _get_int(self, key: str) -> Optional[int]:
        raw = self._get_optional_env(key)
        if raw is None:
            return None
        try:
            value = int(raw)
        except ValueError as e:
            raise ConfigurationError(
                f"Environment variable {key} must be an integer, got {raw!r}"
            ) from e
        if value < 1:
            raise ConfigurationError(f"Environment variable {key} must be at least 1, got {value}")
        return value

    def _get_level(self, key: str, default: str) -> int:
        return self._parse_level(key, self._get_env(key, default))

    @staticmethod
    def _parse_level(key: str, raw: str) -> int:
        level = logging.getLevelName(raw.strip().upper())
        if not isinstance(level, int):
            raise ConfigurationError(f"Environment variable {key} is not a log level: {raw!r}")
        return level


# Global settings instance
settings = Settings()
