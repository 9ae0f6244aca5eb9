"""
Backup record entity.
"""

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class BackupRecord:
    """
    A snapshot of a file's bytes taken immediately before a mutation.

    Attributes:
        source_path: Canonical path of the file the snapshot was taken from
        bucket: Directory holding every backup of that file
        filename: ``{name}_{timestamp_ms}.bak``
        mtime_ns: Modification time of the backup file in nanoseconds
        size_bytes: Size of the backup file
    """

    source_path: str
    bucket: str
    filename: str
    mtime_ns: int
    size_bytes: int = 0

    @property
    def path(self) -> str:
        """Absolute path of the backup file."""
        return os.path.join(self.bucket, self.filename)

    @property
    def timestamp_ms(self) -> int:
        """Timestamp embedded in the file name, 0 when it cannot be parsed."""
        stem = self.filename[: -len(".bak")] if self.filename.endswith(".bak") else self.filename
        _, _, raw = stem.rpartition("_")
        try:
            return int(raw)
        except ValueError:
            return 0

    def get_details(self) -> dict[str, Any]:
        modified = datetime.fromtimestamp(self.mtime_ns / 1_000_000_000, tz=timezone.utc)
        return {
            "path": self.path,
            "modified": modified.isoformat(),
            "size_bytes": self.size_bytes,
        }
