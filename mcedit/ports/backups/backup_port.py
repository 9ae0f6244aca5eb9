"""
Backup port interface defining the contract for versioned file snapshots.
"""

from abc import ABC, abstractmethod
from typing import Any

from mcedit.entities.backup import BackupRecord


class BackupPort(ABC):
    """Port interface for backup operations."""

    @abstractmethod
    def create_backup(self, path: str) -> BackupRecord:
        """
        Snapshot a file's bytes and prune its bucket to the retention limit.

        Args:
            path: Path of an existing regular file

        Returns:
            The record of the new backup

        Raises:
            BackupError: If the file is missing, not a regular file, or copying fails
        """
        pass

    @abstractmethod
    def list_backups(self, path: str) -> list[BackupRecord]:
        """
        List the backups of a file, newest first.

        Args:
            path: Path of the file whose backups are wanted

        Returns:
            Backup records ordered newest first, empty if none exist
        """
        pass

    @abstractmethod
    def restore_latest(self, path: str) -> BackupRecord:
        """
        Overwrite a file with its newest backup.

        Args:
            path: Path of the file to restore

        Returns:
            The record that was restored

        Raises:
            NoBackupAvailableError: If the file has no backups
            BackupError: If copying fails
        """
        pass

    @abstractmethod
    def restore_specific(self, backup_path: str, target_path: str) -> None:
        """
        Overwrite ``target_path`` with the bytes of ``backup_path``.

        Raises:
            BackupError: If the backup is missing or copying fails
        """
        pass

    @abstractmethod
    def get_backup_stats(self, path: str) -> dict[str, Any]:
        """
        Summarize the backups of a file.

        Returns:
            Mapping with the file path, the backup count and per-backup details
        """
        pass
