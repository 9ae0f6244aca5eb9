"""
Pytest configuration and shared fixtures.
"""

import io
import os
import tempfile
import pytest
from unittest.mock import MagicMock

from mcedit.adapters.backups.local_backup_adapter import LocalBackupManager
from mcedit.adapters.files.local_file_editor import LocalFileEditor
from mcedit.config.settings import Settings
from mcedit.container import DependencyContainer
from mcedit.use_cases.files.file_service import FileService

_ENV_KEYS = (
    "MCEDIT_PROJECT_DIR",
    "PROJECT_DIR",
    "MCEDIT_CONFIG",
    "MCEDIT_LOG_LEVEL",
    "MCEDIT_CLIENT_LOG_LEVEL",
    "MCEDIT_MAX_BACKUPS",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's mcedit environment variables out of the tests."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def temp_directory():
    """
    Create a temporary project directory for testing file operations.

    Returns:
        Path to the temporary directory
    """
    with tempfile.TemporaryDirectory() as temp_dir:
        # Create some test files
        test_file1 = os.path.join(temp_dir, "test1.txt")
        test_file2 = os.path.join(temp_dir, "test2.py")

        with open(test_file1, "w") as f:
            f.write("This is a test file.")

        with open(test_file2, "w") as f:
            f.write("print('Hello, world!')")

        # Create a subdirectory with a file
        subdir = os.path.join(temp_dir, "subdir")
        os.makedirs(subdir)

        test_file3 = os.path.join(subdir, "test3.md")
        with open(test_file3, "w") as f:
            f.write("# Test Markdown\n\nThis is a test.")

        yield os.path.realpath(temp_dir)


@pytest.fixture
def lines_file(temp_directory):
    """A five line file a..e with a trailing newline."""
    path = os.path.join(temp_directory, "lines.txt")
    with open(path, "w") as f:
        f.write("a\nb\nc\nd\ne\n")
    return path


@pytest.fixture
def mock_logger():
    """
    Create a mock logger for testing.

    Returns:
        Mock logger instance
    """
    return MagicMock()


@pytest.fixture
def config_file(tmp_path):
    """An empty configuration file so no user config leaks into tests."""
    path = tmp_path / "mcedit.json"
    path.write_text("{}")
    return str(path)


@pytest.fixture
def file_service(temp_directory, mock_logger):
    """File service rooted at the temporary project directory."""
    return FileService(
        temp_directory,
        LocalFileEditor(mock_logger),
        lambda base: LocalBackupManager(base, logger=mock_logger),
        logger=mock_logger,
    )


@pytest.fixture
def dependency_container(temp_directory, config_file, mock_logger):
    """
    Create a dependency container with mocked dependencies for testing.

    Returns:
        DependencyContainer instance with mocked logger
    """
    container = DependencyContainer(
        project_dir=temp_directory,
        config_path=config_file,
        app_settings=Settings(),
        input_stream=io.StringIO(""),
        output_stream=io.StringIO(),
    )
    # Replace the logger with our mock
    container._logger = mock_logger
    return container

