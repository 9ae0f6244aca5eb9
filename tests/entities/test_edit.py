"""
Tests for the domain entities.
"""

import os

from mcedit.entities.backup import BackupRecord
from mcedit.entities.edit import (
    CreateInstruction,
    DeleteLine,
    EditsInstruction,
    InsertLine,
    RegionEdit,
    ReplaceInstruction,
    ReplaceLine,
)
from mcedit.entities.sandboxed_path import SandboxedPath
from mcedit.entities.session import Session


class TestEditEntities:
    """Test cases for edit operations and instructions."""

    def test_describe(self):
        """Test the result summaries of each operation."""
        assert InsertLine(1, "x").describe() == {"action": "insert", "line": 1}
        assert ReplaceLine(2, "x").describe() == {"action": "replace", "line": 2}
        assert DeleteLine(3).describe() == {"action": "delete", "line": 3}
        assert RegionEdit(1, 4, "x").describe() == {"action": "region", "start": 1, "end": 4}

    def test_instruction_actions(self):
        """Test the action names of the instructions."""
        assert ReplaceInstruction("x").action == "replace"
        assert EditsInstruction().action == "edit"
        assert EditsInstruction().edits == []
        assert CreateInstruction("x").action == "create"
        assert CreateInstruction("x").overwrite is False


class TestBackupRecord:
    """Test cases for BackupRecord."""

    def test_path_and_timestamp(self):
        """Test deriving the path and embedded timestamp."""
        record = BackupRecord(
            source_path="/p/a_b.txt",
            bucket="/p/.backups/0123456789abcdef",
            filename="a_b.txt_1700000000123.bak",
            mtime_ns=1_700_000_000_123_000_000,
            size_bytes=5,
        )

        assert record.path == os.path.join("/p/.backups/0123456789abcdef", record.filename)
        assert record.timestamp_ms == 1700000000123

    def test_details(self):
        """Test the serialized details."""
        record = BackupRecord("/p/f", "/b", "f_0.bak", mtime_ns=0, size_bytes=2)

        assert record.get_details() == {
            "path": os.path.join("/b", "f_0.bak"),
            "modified": "1970-01-01T00:00:00+00:00",
            "size_bytes": 2,
        }

    def test_unparseable_timestamp(self):
        """Test that a foreign file name has timestamp 0."""
        assert BackupRecord("/p/f", "/b", "f_x.bak", mtime_ns=0).timestamp_ms == 0


class TestSandboxedPathAndSession:
    """Test cases for SandboxedPath and Session."""

    def test_sandboxed_path(self):
        """Test the path accessors."""
        path = SandboxedPath("/base/dir/file.txt", "/base")

        assert os.fspath(path) == "/base/dir/file.txt"
        assert str(path) == "/base/dir/file.txt"
        assert path.name == "file.txt"
        assert path.parent == "/base/dir"
        assert path.relative() == os.path.join("dir", "file.txt")
        assert path.provisional is False

    def test_session_initializes_once(self):
        """Test the session state transition."""
        session = Session()
        assert not session.initialized

        session.mark_initialized()
        session.mark_initialized()

        assert session.initialized
