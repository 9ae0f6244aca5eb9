"""
Local file editor adapter implementing whole-file and line-level primitives.

Line edits read the entire file, mutate an in-memory list of lines and rewrite the
whole file. Lines are split on ``\\n`` with one trailing ``\\r`` stripped per line;
a trailing newline present in the original file is kept on rewrite.
"""

import logging
import os

from typing_extensions import override

from mcedit.entities.sandboxed_path import SandboxedPath
from mcedit.exceptions import (
    FileServiceError,
    InvalidPathError,
    InvalidRangeError,
    LineOutOfRangeError,
    NotFoundError,
)
from mcedit.ports.files.file_editor_port import FileEditorPort


def split_lines(text: str) -> tuple[list[str], bool]:
    """Split text into lines and report whether it ended with a newline."""
    parts = text.split("\n")
    if parts and parts[-1] == "":
        parts.pop()
    lines = [p[:-1] if p.endswith("\r") else p for p in parts]
    return lines, text.endswith("\n")


def join_lines(lines: list[str], trailing_newline: bool) -> str:
    text = "\n".join(lines)
    if trailing_newline and lines:
        text += "\n"
    return text


class LocalFileEditor(FileEditorPort):
    """Local file system implementation of the file editor port."""

    def __init__(self, logger: logging.Logger | None = None):
        """
        Initialize the editor with an optional logger.

        Args:
            logger: Logger instance to use for logging. If None, a default logger will be created.
        """
        self._logger: logging.Logger = logger or logging.getLogger(__name__)

    def _require_file(self, path: SandboxedPath) -> None:
        if not os.path.exists(path):
            raise NotFoundError(f"File not found: {path}")
        if not os.path.isfile(path):
            raise InvalidPathError(f"Not a file: {path}")

    @override
    def read_file(self, path: SandboxedPath) -> str:
        self._require_file(path)
        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except UnicodeDecodeError as e:
            raise FileServiceError(f"File is not valid UTF-8 text: {path}") from e
        except OSError as e:
            raise FileServiceError(f"Failed to read {path}: {str(e)}") from e

    @override
    def write_file(self, path: SandboxedPath, content: str) -> None:
        if os.path.isdir(path):
            raise InvalidPathError(f"Not a file: {path}")
        try:
            os.makedirs(os.path.dirname(os.fspath(path)), exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise FileServiceError(f"Failed to write {path}: {str(e)}") from e
        self._logger.debug(f"Wrote {len(content)} characters to {path}")

    @override
    def append_to_file(self, path: SandboxedPath, content: str) -> None:
        self._require_file(path)
        try:
            with open(path, "a", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise FileServiceError(f"Failed to append to {path}: {str(e)}") from e

    @override
    def read_lines(self, path: SandboxedPath) -> list[str]:
        lines, _ = split_lines(self.read_file(path))
        return lines

    def _rewrite(self, path: SandboxedPath, edit) -> None:
        lines, trailing = split_lines(self.read_file(path))
        edit(lines)
        self.write_file(path, join_lines(lines, trailing))

    @override
    def insert_line(self, path: SandboxedPath, line: int, content: str) -> None:
        def _insert(lines: list[str]) -> None:
            if line < 0 or line > len(lines):
                raise LineOutOfRangeError(
                    f"Line {line} is out of range (file has {len(lines)} lines)"
                )
            lines.insert(line, content)

        self._rewrite(path, _insert)

    @override
    def replace_line(self, path: SandboxedPath, line: int, content: str) -> None:
        def _replace(lines: list[str]) -> None:
            if line < 0 or line >= len(lines):
                raise LineOutOfRangeError(
                    f"Line {line} is out of range (file has {len(lines)} lines)"
                )
            lines[line] = content

        self._rewrite(path, _replace)

    @override
    def delete_line(self, path: SandboxedPath, line: int) -> None:
        def _delete(lines: list[str]) -> None:
            if line < 0 or line >= len(lines):
                raise LineOutOfRangeError(
                    f"Line {line} is out of range (file has {len(lines)} lines)"
                )
            del lines[line]

        self._rewrite(path, _delete)

    @override
    def edit_region(
        self, path: SandboxedPath, start: int, end: int, content: str
    ) -> None:
        def _edit(lines: list[str]) -> None:
            if start > end:
                raise InvalidRangeError(
                    f"Invalid range: start ({start}) is after end ({end})"
                )
            if start < 0 or start >= len(lines):
                raise LineOutOfRangeError(
                    f"Start line {start} is out of range (file has {len(lines)} lines)"
                )
            effective_end = min(end, len(lines))
            replacement, _ = split_lines(content)
            lines[start:effective_end] = replacement

        self._rewrite(path, _edit)
