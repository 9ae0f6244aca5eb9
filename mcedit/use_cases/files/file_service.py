"""
File service use case.

Owns the active project directory. Every user path is resolved through the
workspace sandbox, and every mutation of a pre-existing file is preceded by a
backup; if the backup fails the mutation does not happen.
"""

import logging
import os
from typing import Any, Callable

from mcedit.entities.backup import BackupRecord
from mcedit.entities.edit import (
    CreateInstruction,
    DeleteLine,
    EditInstruction,
    EditOp,
    EditsInstruction,
    InsertLine,
    RegionEdit,
    ReplaceInstruction,
    ReplaceLine,
)
from mcedit.entities.sandboxed_path import SandboxedPath
from mcedit.exceptions import (
    AlreadyExistsError,
    FileServiceError,
    InvalidPathError,
    NotFoundError,
)
from mcedit.ports.backups.backup_port import BackupPort
from mcedit.ports.files.file_editor_port import FileEditorPort
from mcedit.use_cases.diff.diff_generator import DiffGenerator
from mcedit.utils.workspace import normalize_dir, resolve_within

BackupFactory = Callable[[str], BackupPort]


class FileService:
    """Sandboxed, backed-up file editing over a mutable project directory."""

    def __init__(
        self,
        base_directory: str,
        file_editor: FileEditorPort,
        backup_factory: BackupFactory,
        diff_generator: DiffGenerator | None = None,
        logger: logging.Logger | None = None,
    ):
        """
        Initialize the file service.

        Args:
            base_directory: Initial project directory; created if missing
            file_editor: Raw file and line primitives
            backup_factory: Builds the backup manager for a project directory
            diff_generator: Diff generator used for change previews
            logger: Logger instance to use for logging
        """
        self._logger = logger or logging.getLogger(__name__)
        self._editor = file_editor
        self._backup_factory = backup_factory
        self._diff = diff_generator or DiffGenerator(logger=self._logger)
        self._base = self._prepare_directory(normalize_dir(base_directory))
        self._backups = backup_factory(self._base)

    @staticmethod
    def _prepare_directory(directory: str) -> str:
        if "\x00" in directory:
            raise InvalidPathError("Directory must not contain a NUL byte")
        if os.path.exists(directory) and not os.path.isdir(directory):
            raise InvalidPathError(f"Not a directory: {directory}")
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            raise FileServiceError(f"Failed to create directory {directory}: {str(e)}") from e
        return directory

    @property
    def base_directory(self) -> str:
        return self._base

    @property
    def backups(self) -> BackupPort:
        return self._backups

    def resolve(self, path: str) -> SandboxedPath:
        """Resolve a user path against the current project directory."""
        return resolve_within(self._base, path)

    def _existing_file(self, path: str) -> SandboxedPath:
        resolved = self.resolve(path)
        if not os.path.exists(resolved):
            raise NotFoundError(f"File not found: {resolved}")
        if not os.path.isfile(resolved):
            raise InvalidPathError(f"Not a file: {resolved}")
        return resolved

    def _backup_if_exists(self, resolved: SandboxedPath) -> BackupRecord | None:
        if os.path.isfile(resolved):
            return self._backups.create_backup(resolved)
        return None

    # ------------------------- queries -------------------------
    def read_file(self, path: str) -> str:
        resolved = self.resolve(path)
        self._logger.info(f"Reading file {resolved}")
        return self._editor.read_file(resolved)

    def file_exists(self, path: str) -> bool:
        return os.path.exists(self.resolve(path))

    def is_file(self, path: str) -> bool:
        return os.path.isfile(self.resolve(path))

    def is_directory(self, path: str) -> bool:
        return os.path.isdir(self.resolve(path))

    def list_backups(self, path: str) -> list[BackupRecord]:
        return self._backups.list_backups(self.resolve(path))

    def backup_stats(self, path: str) -> dict[str, Any]:
        return self._backups.get_backup_stats(self._existing_file(path))

    def preview_file_changes(self, path: str, new_content: str) -> str:
        """Unified diff of the file's current content against ``new_content``."""
        resolved = self.resolve(path)
        current = self._editor.read_file(resolved) if os.path.isfile(resolved) else ""
        return self._diff.generate_unified_diff(current, new_content)

    # ------------------------- whole-file mutations -------------------------
    def write_file(self, path: str, content: str) -> SandboxedPath:
        resolved = self.resolve(path)
        if os.path.isdir(resolved):
            raise InvalidPathError(f"Not a file: {resolved}")
        self._backup_if_exists(resolved)
        self._editor.write_file(resolved, content)
        self._logger.info(f"Wrote file {resolved}")
        return resolved

    def append_to_file(self, path: str, content: str) -> SandboxedPath:
        resolved = self._existing_file(path)
        self._backups.create_backup(resolved)
        self._editor.append_to_file(resolved, content)
        self._logger.info(f"Appended to file {resolved}")
        return resolved

    def create_file(self, path: str, content: str) -> SandboxedPath:
        resolved = self.resolve(path)
        if os.path.exists(resolved):
            raise AlreadyExistsError(f"File already exists: {resolved}")
        self._editor.write_file(resolved, content)
        self._logger.info(f"Created file {resolved}")
        return resolved

    def delete_file(self, path: str) -> SandboxedPath:
        resolved = self._existing_file(path)
        self._backups.create_backup(resolved)
        try:
            os.remove(resolved)
        except OSError as e:
            raise FileServiceError(f"Failed to delete {resolved}: {str(e)}") from e
        self._logger.info(f"Deleted file {resolved}")
        return resolved

    def rename_file(
        self, from_path: str, to_path: str
    ) -> tuple[SandboxedPath, SandboxedPath]:
        source = self._existing_file(from_path)
        target = self.resolve(to_path)
        if os.path.exists(target):
            raise AlreadyExistsError(f"Destination already exists: {target}")

        self._backups.create_backup(source)
        try:
            os.makedirs(target.parent, exist_ok=True)
            os.rename(source, target)
        except OSError as e:
            raise FileServiceError(
                f"Failed to rename {source} to {target}: {str(e)}"
            ) from e
        self._logger.info(f"Renamed {source} to {target}")
        return source, target

    # ------------------------- line mutations -------------------------
    def insert_line(self, path: str, line: int, content: str) -> SandboxedPath:
        resolved = self._existing_file(path)
        self._backups.create_backup(resolved)
        self._editor.insert_line(resolved, line, content)
        self._logger.info(f"Inserted line {line} in {resolved}")
        return resolved

    def replace_line(self, path: str, line: int, content: str) -> SandboxedPath:
        resolved = self._existing_file(path)
        self._backups.create_backup(resolved)
        self._editor.replace_line(resolved, line, content)
        self._logger.info(f"Replaced line {line} in {resolved}")
        return resolved

    def delete_line(self, path: str, line: int) -> SandboxedPath:
        resolved = self._existing_file(path)
        self._backups.create_backup(resolved)
        self._editor.delete_line(resolved, line)
        self._logger.info(f"Deleted line {line} in {resolved}")
        return resolved

    def edit_region(
        self, path: str, start: int, end: int, content: str
    ) -> SandboxedPath:
        resolved = self._existing_file(path)
        self._backups.create_backup(resolved)
        self._editor.edit_region(resolved, start, end, content)
        self._logger.info(f"Edited region [{start}, {end}) in {resolved}")
        return resolved

    # ------------------------- suggestions -------------------------
    def _apply_op(self, resolved: SandboxedPath, op: EditOp) -> None:
        if isinstance(op, InsertLine):
            self._editor.insert_line(resolved, op.line, op.content)
        elif isinstance(op, ReplaceLine):
            self._editor.replace_line(resolved, op.line, op.content)
        elif isinstance(op, DeleteLine):
            self._editor.delete_line(resolved, op.line)
        elif isinstance(op, RegionEdit):
            self._editor.edit_region(resolved, op.start, op.end, op.content)
        else:
            raise FileServiceError(f"Unsupported edit operation: {op!r}")

    def apply_suggestion(self, path: str, instruction: EditInstruction) -> dict[str, Any]:
        """
        Apply a structured edit instruction to a file.

        ``Edit`` operations run in order against the file as already modified by
        earlier operations. A failing operation is reported in ``results`` and does
        not stop the remaining ones.

        Returns:
            Result mapping with ``success``, ``action`` and ``path``, plus
            ``overwritten`` for creates and ``results`` for edits
        """
        resolved = self.resolve(path)

        if isinstance(instruction, ReplaceInstruction):
            if os.path.isdir(resolved):
                raise InvalidPathError(f"Not a file: {resolved}")
            self._backup_if_exists(resolved)
            self._editor.write_file(resolved, instruction.content)
            self._logger.info(f"Applied replace suggestion to {resolved}")
            return {"success": True, "action": instruction.action, "path": str(resolved)}

        if isinstance(instruction, CreateInstruction):
            existed = os.path.exists(resolved)
            if existed and not instruction.overwrite:
                raise AlreadyExistsError(f"File already exists: {resolved}")
            if existed and not os.path.isfile(resolved):
                raise InvalidPathError(f"Not a file: {resolved}")
            self._backup_if_exists(resolved)
            self._editor.write_file(resolved, instruction.content)
            self._logger.info(f"Applied create suggestion to {resolved}")
            return {
                "success": True,
                "action": instruction.action,
                "path": str(resolved),
                "overwritten": existed,
            }

        if isinstance(instruction, EditsInstruction):
            resolved = self._existing_file(path)
            self._backups.create_backup(resolved)

            results: list[dict[str, Any]] = []
            applied = 0
            for op in instruction.edits:
                outcome = op.describe()
                try:
                    self._apply_op(resolved, op)
                except FileServiceError as e:
                    self._logger.warning(f"Edit {outcome} failed on {resolved}: {e}")
                    outcome.update({"status": "error", "message": str(e)})
                else:
                    applied += 1
                    outcome["status"] = "success"
                results.append(outcome)

            self._logger.info(
                f"Applied {applied}/{len(instruction.edits)} edits to {resolved}"
            )
            return {
                "success": applied > 0 or not instruction.edits,
                "action": instruction.action,
                "path": str(resolved),
                "edits_applied": applied,
                "results": results,
            }

        raise FileServiceError(f"Unsupported edit instruction: {instruction!r}")

    # ------------------------- backups -------------------------
    def restore_backup(self, path: str, backup_path: str | None = None) -> str:
        """
        Restore a file from its newest backup, or from ``backup_path`` when given.

        Restoring does not take a backup of the state it overwrites.

        Returns:
            Path of the backup that was restored
        """
        resolved = self.resolve(path)
        if backup_path is None:
            record = self._backups.restore_latest(resolved)
            restored_from = record.path
        else:
            self._backups.restore_specific(backup_path, resolved)
            restored_from = backup_path
        self._logger.info(f"Restored {resolved} from {restored_from}")
        return restored_from

    # ------------------------- project directory -------------------------
    def change_directory(self, directory: str) -> str:
        """
        Switch the project directory.

        Relative directories are resolved against the current one; the directory is
        created when missing. Only paths resolved afterwards are affected.
        """
        new_base = self._prepare_directory(normalize_dir(directory, relative_to=self._base))
        backups = self._backup_factory(new_base)
        self._base = new_base
        self._backups = backups
        self._logger.info(f"Changed project directory to {new_base}")
        return new_base
