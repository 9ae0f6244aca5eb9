"""
Local backup adapter storing versioned snapshots under the project directory.

Layout::

    <backup_root>/<bucket>/<name>_<timestamp_ms>.bak

The bucket is a 64-bit BLAKE2b digest of the canonical source path, used purely as
a sharding key. Entries are additionally filtered by the ``<name>_`` prefix.
"""

import hashlib
import logging
import os
import shutil
import time
from typing import Any

from typing_extensions import override

from mcedit.entities.backup import BackupRecord
from mcedit.exceptions import BackupError, NoBackupAvailableError
from mcedit.ports.backups.backup_port import BackupPort

DEFAULT_MAX_BACKUPS = 10
BACKUP_DIRNAME = ".backups"


class LocalBackupManager(BackupPort):
    """Local file system implementation of the backup port."""

    def __init__(
        self,
        base_directory: str,
        backup_directory: str | None = None,
        max_backups: int = DEFAULT_MAX_BACKUPS,
        logger: logging.Logger | None = None,
    ):
        """
        Initialize the backup manager and create its root directory.

        Args:
            base_directory: Project directory the backups belong to
            backup_directory: Explicit backup root; defaults to ``<base>/.backups``
            max_backups: Number of backups kept per file
            logger: Logger instance to use for logging. If None, a default logger will be created.

        Raises:
            BackupError: If the backup root cannot be created
        """
        self._logger: logging.Logger = logger or logging.getLogger(__name__)
        if max_backups < 1:
            raise BackupError(f"max_backups must be at least 1, got {max_backups}")
        self._max_backups = max_backups
        self._root = backup_directory or os.path.join(base_directory, BACKUP_DIRNAME)
        try:
            os.makedirs(self._root, exist_ok=True)
        except OSError as e:
            raise BackupError(
                f"Failed to create backup directory {self._root}: {str(e)}"
            ) from e

    @property
    def backup_root(self) -> str:
        return self._root

    @property
    def max_backups(self) -> int:
        return self._max_backups

    def bucket_for(self, path: str | os.PathLike[str]) -> str:
        """Return the bucket directory holding the backups of ``path``."""
        canonical = os.path.realpath(os.fspath(path))
        digest = hashlib.blake2b(canonical.encode("utf-8"), digest_size=8).hexdigest()
        return os.path.join(self._root, digest)

    def _records(self, path: str | os.PathLike[str]) -> list[BackupRecord]:
        source = os.path.realpath(os.fspath(path))
        bucket = self.bucket_for(source)
        if not os.path.isdir(bucket):
            return []

        prefix = f"{os.path.basename(source)}_"
        records: list[BackupRecord] = []
        with os.scandir(bucket) as entries:
            for entry in entries:
                name = entry.name
                if not (name.startswith(prefix) and name.endswith(".bak")):
                    continue
                if not name[len(prefix) : -len(".bak")].isdigit():
                    continue
                try:
                    st = entry.stat()
                except OSError as e:
                    self._logger.warning(f"Could not stat backup {entry.path}: {e}")
                    continue
                records.append(
                    BackupRecord(
                        source_path=source,
                        bucket=bucket,
                        filename=name,
                        mtime_ns=st.st_mtime_ns,
                        size_bytes=st.st_size,
                    )
                )

        records.sort(key=lambda r: (r.mtime_ns, r.timestamp_ms), reverse=True)
        return records

    def _prune(self, path: str) -> None:
        for record in self._records(path)[self._max_backups :]:
            try:
                os.remove(record.path)
                self._logger.info(f"Pruned old backup {record.path}")
            except OSError as e:
                self._logger.warning(f"Could not prune backup {record.path}: {e}")

    def _copy_into(self, source: str, target: str) -> None:
        parent = os.path.dirname(target)
        if parent:
            os.makedirs(parent, exist_ok=True)
        shutil.copyfile(source, target)

    @override
    def create_backup(self, path: str | os.PathLike[str]) -> BackupRecord:
        source = os.path.realpath(os.fspath(path))
        if not os.path.exists(source):
            raise BackupError(f"Cannot back up missing file: {source}")
        if not os.path.isfile(source):
            raise BackupError(f"Cannot back up, not a regular file: {source}")

        try:
            bucket = self.bucket_for(source)
            os.makedirs(bucket, exist_ok=True)

            name = os.path.basename(source)
            # Timestamps only move forward, even after older names were pruned
            existing = self._records(source)
            timestamp_ms = int(time.time() * 1000)
            if existing:
                timestamp_ms = max(
                    timestamp_ms, max(r.timestamp_ms for r in existing) + 1
                )
            while os.path.exists(os.path.join(bucket, f"{name}_{timestamp_ms}.bak")):
                timestamp_ms += 1
            filename = f"{name}_{timestamp_ms}.bak"
            target = os.path.join(bucket, filename)

            # copyfile rather than copy2: the backup's mtime must be its creation time
            shutil.copyfile(source, target)
            st = os.stat(target)
        except OSError as e:
            raise BackupError(f"Failed to create backup of {source}: {str(e)}") from e

        self._logger.info(f"Created backup {target}")
        self._prune(source)
        return BackupRecord(
            source_path=source,
            bucket=bucket,
            filename=filename,
            mtime_ns=st.st_mtime_ns,
            size_bytes=st.st_size,
        )

    @override
    def list_backups(self, path: str | os.PathLike[str]) -> list[BackupRecord]:
        return self._records(path)

    @override
    def restore_latest(self, path: str | os.PathLike[str]) -> BackupRecord:
        target = os.fspath(path)
        records = self._records(target)
        if not records:
            raise NoBackupAvailableError(f"No backups available for {target}")

        latest = records[0]
        try:
            self._copy_into(latest.path, target)
        except OSError as e:
            raise BackupError(
                f"Failed to restore {target} from {latest.path}: {str(e)}"
            ) from e
        self._logger.info(f"Restored {target} from {latest.path}")
        return latest

    @override
    def restore_specific(
        self, backup_path: str | os.PathLike[str], target_path: str | os.PathLike[str]
    ) -> None:
        source = os.fspath(backup_path)
        target = os.fspath(target_path)
        if not os.path.isfile(source):
            raise BackupError(f"Backup file does not exist: {source}")
        try:
            self._copy_into(source, target)
        except OSError as e:
            raise BackupError(f"Failed to restore {target} from {source}: {str(e)}") from e
        self._logger.info(f"Restored {target} from {source}")

    @override
    def get_backup_stats(self, path: str | os.PathLike[str]) -> dict[str, Any]:
        records = self._records(path)
        return {
            "file": os.fspath(path),
            "backup_count": len(records),
            "backups": [r.get_details() for r in records],
        }
