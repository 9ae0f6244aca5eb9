"""
Dependency injection container for managing application dependencies.
"""

import logging
import os
from typing import Optional, TextIO

from mcedit.adapters.backups.local_backup_adapter import LocalBackupManager
from mcedit.adapters.files.local_file_editor import LocalFileEditor
from mcedit.adapters.project.local_project_analyzer import LocalProjectAnalyzer
from mcedit.adapters.suggestions.regex_suggestion_parser import RegexSuggestionParser
from mcedit.adapters.transport.stdio_transport import StdioTransport
from mcedit.config.app_config import AppConfig, load_config, resolve_project_directory
from mcedit.config.settings import Settings, settings as default_settings
from mcedit.mcp.handler import McpHandler
from mcedit.ports.backups.backup_port import BackupPort
from mcedit.ports.files.file_editor_port import FileEditorPort
from mcedit.ports.project.project_analyzer_port import ProjectAnalyzerPort
from mcedit.ports.suggestions.suggestion_parser_port import SuggestionParserPort
from mcedit.ports.tools.tools_port import ToolsHandlerPort
from mcedit.ports.transport.transport_port import TransportPort
from mcedit.use_cases.diff.diff_generator import DiffGenerator
from mcedit.use_cases.files.file_service import FileService
from mcedit.use_cases.tools.editor_tools import EditorToolsHandler


class DependencyContainer:
    """
    Container for managing application dependencies using dependency injection.
    """

    def __init__(
        self,
        project_dir: Optional[str] = None,
        config_path: Optional[str] = None,
        app_settings: Optional[Settings] = None,
        input_stream: Optional[TextIO] = None,
        output_stream: Optional[TextIO] = None,
    ):
        """
        Initialize the container. Nothing is built until first requested.

        Args:
            project_dir: Project directory from the command line
            config_path: Configuration file from the command line
            app_settings: Environment settings, the global ones by default
            input_stream: Protocol input stream, stdin by default
            output_stream: Protocol output stream, stdout by default
        """
        self._instances = {}
        self._logger = logging.getLogger(__name__)
        self._project_dir = project_dir
        self._config_path = config_path
        self._settings = app_settings or default_settings
        self._input_stream = input_stream
        self._output_stream = output_stream

    def get_config(self) -> AppConfig:
        """
        Get the configuration file contents.

        Returns:
            Loaded AppConfig, or defaults when no file is found
        """
        if "config" not in self._instances:
            path = self._config_path or self._settings.config_path
            self._instances["config"] = load_config(path, logger=self._logger)
        return self._instances["config"]

    def get_project_directory(self) -> str:
        """Initial project directory chosen from CLI, environment, config and cwd."""
        if "project_directory" not in self._instances:
            self._instances["project_directory"] = resolve_project_directory(
                self._project_dir, self._settings.project_dir, self.get_config()
            )
        return self._instances["project_directory"]

    def get_file_editor(self) -> FileEditorPort:
        if "file_editor" not in self._instances:
            self._instances["file_editor"] = LocalFileEditor(self._logger)
        return self._instances["file_editor"]

    def create_backup_manager(self, base_directory: str) -> BackupPort:
        """
        Build the backup manager for a project directory.

        A relative ``backup_directory`` in the config is resolved against the
        project directory.
        """
        backups = self.get_config().backups
        backup_directory = backups.backup_directory
        if backup_directory:
            backup_directory = os.path.expanduser(backup_directory)
            if not os.path.isabs(backup_directory):
                backup_directory = os.path.join(base_directory, backup_directory)
        return LocalBackupManager(
            base_directory,
            backup_directory=backup_directory,
            max_backups=self._settings.max_backups or backups.max_backups_per_file,
            logger=self._logger,
        )

    def create_project_analyzer(self, base_directory: str) -> ProjectAnalyzerPort:
        return LocalProjectAnalyzer(
            base_directory,
            exclude_patterns=self.get_config().project.exclude_patterns,
            logger=self._logger,
        )

    def get_diff_generator(self) -> DiffGenerator:
        if "diff_generator" not in self._instances:
            self._instances["diff_generator"] = DiffGenerator(logger=self._logger)
        return self._instances["diff_generator"]

    def get_suggestion_parser(self) -> SuggestionParserPort:
        if "suggestion_parser" not in self._instances:
            self._instances["suggestion_parser"] = RegexSuggestionParser(self._logger)
        return self._instances["suggestion_parser"]

    def get_file_service(self) -> FileService:
        """
        Get the file service with injected dependencies.

        Returns:
            Configured FileService rooted at the project directory
        """
        if "file_service" not in self._instances:
            if not self.get_config().backups.enabled:
                self._logger.warning(
                    "backups.enabled=false is ignored; files are always backed up before changes"
                )
            self._instances["file_service"] = FileService(
                self.get_project_directory(),
                self.get_file_editor(),
                self.create_backup_manager,
                diff_generator=self.get_diff_generator(),
                logger=self._logger,
            )
        return self._instances["file_service"]

    def get_project_analyzer(self) -> ProjectAnalyzerPort:
        """Analyzer for the file service's current project directory."""
        return self.create_project_analyzer(self.get_file_service().base_directory)

    def get_tools_handler(self) -> ToolsHandlerPort:
        """
        Registry of the editor tools backed by the file service.
        """
        if "tools_handler" not in self._instances:
            self._instances["tools_handler"] = EditorToolsHandler(
                self.get_file_service(),
                self.create_project_analyzer,
                self.get_suggestion_parser(),
                diff_generator=self.get_diff_generator(),
                enabled_tools=self.get_config().mcp.tools,
                logger=self._logger,
            )
        return self._instances["tools_handler"]

    def get_transport(self) -> TransportPort:
        if "transport" not in self._instances:
            self._instances["transport"] = StdioTransport(
                self._input_stream, self._output_stream, logger=self._logger
            )
        return self._instances["transport"]

    def get_mcp_handler(self) -> McpHandler:
        """
        Protocol handler wired to the stdio transport and the editor tools.
        """
        if "mcp_handler" not in self._instances:
            self._instances["mcp_handler"] = McpHandler(
                self.get_transport(), self.get_tools_handler(), logger=self._logger
            )
        return self._instances["mcp_handler"]

    def reset(self):
        """Reset all instances (useful for testing)."""
        self._instances.clear()
