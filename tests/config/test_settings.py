"""
Tests for environment settings.
"""

import logging

import pytest

from mcedit.config.settings import Settings
from mcedit.exceptions import ConfigurationError


class TestSettings:
    """Test cases for the Settings class."""

    def test_defaults(self):
        """Test settings with no environment variables."""
        settings = Settings()

        assert settings.project_dir is None
        assert settings.config_path is None
        assert settings.log_level == logging.INFO
        assert settings.client_log_level is None
        assert settings.max_backups is None

    def test_project_dir_precedence(self, monkeypatch):
        """Test that MCEDIT_PROJECT_DIR beats PROJECT_DIR."""
        monkeypatch.setenv("PROJECT_DIR", "/generic")
        assert Settings().project_dir == "/generic"

        monkeypatch.setenv("MCEDIT_PROJECT_DIR", "/specific")
        assert Settings().project_dir == "/specific"

    def test_blank_values_are_unset(self, monkeypatch):
        """Test that whitespace-only values count as unset."""
        monkeypatch.setenv("MCEDIT_CONFIG", "   ")

        assert Settings().config_path is None

    def test_log_levels(self, monkeypatch):
        """Test parsing log levels case-insensitively."""
        monkeypatch.setenv("MCEDIT_LOG_LEVEL", "debug")
        monkeypatch.setenv("MCEDIT_CLIENT_LOG_LEVEL", "Warning")

        settings = Settings()

        assert settings.log_level == logging.DEBUG
        assert settings.client_log_level == logging.WARNING

    def test_invalid_log_level(self, monkeypatch):
        """Test that an unknown level name is a configuration error."""
        monkeypatch.setenv("MCEDIT_LOG_LEVEL", "chatty")

        with pytest.raises(ConfigurationError, match="MCEDIT_LOG_LEVEL"):
            Settings()

    def test_max_backups(self, monkeypatch):
        """Test reading the backup retention override."""
        monkeypatch.setenv("MCEDIT_MAX_BACKUPS", "4")

        assert Settings().max_backups == 4

    @pytest.mark.parametrize("value", ["zero", "0", "-2"])
    def test_invalid_max_backups(self, monkeypatch, value):
        """Test that non-positive or non-numeric retention is rejected."""
        monkeypatch.setenv("MCEDIT_MAX_BACKUPS", value)

        with pytest.raises(ConfigurationError, match="MCEDIT_MAX_BACKUPS"):
            Settings()
