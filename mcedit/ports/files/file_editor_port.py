"""
File editor port interface defining the contract for raw file and line primitives.

Implementations only ever receive ``SandboxedPath`` values; resolving user input and
taking backups is the job of the file service.
"""

from abc import ABC, abstractmethod

from mcedit.entities.sandboxed_path import SandboxedPath


class FileEditorPort(ABC):
    """Port interface for file editing primitives."""

    @abstractmethod
    def read_file(self, path: SandboxedPath) -> str:
        """
        Read a whole file as UTF-8 text.

        Raises:
            NotFoundError: If the file does not exist
            InvalidPathError: If the path is not a regular file
            FileServiceError: If reading fails
        """
        pass

    @abstractmethod
    def write_file(self, path: SandboxedPath, content: str) -> None:
        """
        Replace the whole content of a file, creating parent directories.

        Raises:
            FileServiceError: If writing fails
        """
        pass

    @abstractmethod
    def append_to_file(self, path: SandboxedPath, content: str) -> None:
        """
        Append text to an existing file.

        Raises:
            NotFoundError: If the file does not exist
        """
        pass

    @abstractmethod
    def read_lines(self, path: SandboxedPath) -> list[str]:
        """
        Read a file as a list of lines without terminators.

        Raises:
            NotFoundError: If the file does not exist
        """
        pass

    @abstractmethod
    def insert_line(self, path: SandboxedPath, line: int, content: str) -> None:
        """
        Insert ``content`` before line ``line`` (``line == count`` appends).

        Raises:
            LineOutOfRangeError: If ``line`` is outside ``[0, count]``
        """
        pass

    @abstractmethod
    def replace_line(self, path: SandboxedPath, line: int, content: str) -> None:
        """
        Replace line ``line``.

        Raises:
            LineOutOfRangeError: If ``line`` is outside ``[0, count)``
        """
        pass

    @abstractmethod
    def delete_line(self, path: SandboxedPath, line: int) -> None:
        """
        Delete line ``line``.

        Raises:
            LineOutOfRangeError: If ``line`` is outside ``[0, count)``
        """
        pass

    @abstractmethod
    def edit_region(
        self, path: SandboxedPath, start: int, end: int, content: str
    ) -> None:
        """
        Replace the half-open line span ``[start, end)`` with the lines of ``content``.

        ``end`` is clamped to the line count.

        Raises:
            InvalidRangeError: If ``start > end``
            LineOutOfRangeError: If ``start`` is not below the line count
        """
        pass
