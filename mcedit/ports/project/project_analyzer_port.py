"""
Project analyzer port interface.
"""

from abc import ABC, abstractmethod
from typing import Any


class ProjectAnalyzerPort(ABC):
    """Port interface for scanning the project directory."""

    @abstractmethod
    def analyze_project(self) -> dict[str, Any]:
        """
        Describe the project: type, file statistics, languages and key files.

        Raises:
            ProjectAnalysisError: If the directory cannot be scanned
        """
        pass

    @abstractmethod
    def list_files(self, pattern: str | None = None) -> list[str]:
        """
        List files recursively, optionally filtered by a regex on the file name.

        Args:
            pattern: Regular expression matched against file names

        Returns:
            Absolute file paths

        Raises:
            ProjectAnalysisError: If the pattern is invalid or scanning fails
        """
        pass

    @abstractmethod
    def search_files(self, query: str) -> list[dict[str, Any]]:
        """
        Search text files for lines matching a regex.

        Args:
            query: Regular expression searched for in each line

        Returns:
            One entry per matching file with its relative path and matching lines

        Raises:
            ProjectAnalysisError: If the query is invalid or scanning fails
        """
        pass
