"""
JSON configuration file models and loading.

Search order when no explicit path is given: ``~/.config/mcedit/config.json``,
then ``./mcedit.json``; defaults apply when neither exists.
"""

import json
import logging
import os
from typing import Optional

from pydantic import BaseModel, Field, PositiveInt, ValidationError

from mcedit.exceptions import ConfigurationError

ALL_TOOLS: list[str] = [
    "read_file",
    "write_file",
    "list_files",
    "search_files",
    "analyze_project",
    "apply_suggestion",
    "generate_diff",
    "change_directory",
    "create_file",
    "rename_file",
    "delete_file",
]


class ProjectConfig(BaseModel):
    directory: Optional[str] = Field(None, description="Default project directory")
    exclude_patterns: list[str] = Field(
        default_factory=lambda: [".git", "node_modules", "target", ".backup"],
        description="Entry names skipped when scanning the project",
    )


class BackupConfig(BaseModel):
    enabled: bool = Field(True, description="Backups cannot be disabled; kept for compatibility")
    max_backups_per_file: PositiveInt = Field(10, description="Backups kept per file")
    backup_directory: Optional[str] = Field(None, description="Backup root override")


class McpConfig(BaseModel):
    tools: list[str] = Field(default_factory=lambda: list(ALL_TOOLS))


class AppConfig(BaseModel):
    """Schema for the mcedit configuration file."""

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    backups: BackupConfig = Field(default_factory=BackupConfig)
    mcp: McpConfig = Field(default_factory=McpConfig)


def default_config_paths() -> list[str]:
    return [
        os.path.join(os.path.expanduser("~"), ".config", "mcedit", "config.json"),
        os.path.join(os.getcwd(), "mcedit.json"),
    ]


def load_config_file(path: str) -> AppConfig:
    """
    Load a configuration file.

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    if not os.path.isfile(path):
        raise ConfigurationError(f"Config file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Failed to parse config file {path}: {str(e)}") from e
    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config file {path}: {str(e)}") from e


def load_config(
    path: Optional[str] = None, logger: logging.Logger | None = None
) -> AppConfig:
    """Load the explicit config file, else the first default one found, else defaults."""
    logger = logger or logging.getLogger(__name__)
    if path:
        config = load_config_file(os.path.expanduser(path))
        logger.info(f"Loaded configuration from {path}")
        return config

    for candidate in default_config_paths():
        if os.path.isfile(candidate):
            config = load_config_file(candidate)
            logger.info(f"Loaded configuration from {candidate}")
            return config
    return AppConfig()


def resolve_project_directory(
    cli_dir: Optional[str], env_dir: Optional[str], config: AppConfig
) -> str:
    """
    Pick the project directory: CLI flag, then environment, then config file, then
    the current directory (``~/project`` when the current directory is ``/``).

    The directory is made absolute but not created.
    """
    for candidate in (cli_dir, env_dir, config.project.directory):
        if candidate:
            return os.path.abspath(os.path.expanduser(candidate))
    cwd = os.getcwd()
    if cwd == os.path.sep:
        return os.path.join(os.path.expanduser("~"), "project")
    return cwd
