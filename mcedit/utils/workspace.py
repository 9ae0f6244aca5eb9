from __future__ import annotations

import os
from pathlib import Path

from mcedit.entities.sandboxed_path import SandboxedPath
from mcedit.exceptions import AccessDeniedError, InvalidPathError

"""Project root utilities to constrain file access.

Every user supplied path goes through ``resolve_within`` before any file
operation. Containment is checked component-wise, so ``/base-other`` is never
considered inside ``/base``.
"""


def is_within(root: str, path: str) -> bool:
    """Return True if ``path`` equals ``root`` or is one of its descendants."""
    try:
        common = os.path.commonpath([root, path])
    except ValueError:
        return False
    return common == root


def normalize_dir(path: str, relative_to: str | None = None) -> str:
    s = os.path.expanduser(str(path or "").strip())
    if not os.path.isabs(s):
        s = os.path.join(relative_to or os.getcwd(), s)
    return os.path.normpath(os.path.abspath(s))


def resolve_within(base: str, requested: str) -> SandboxedPath:
    """Resolve ``requested`` against the project directory ``base``.

    Absolute paths must already sit under ``base``; relative paths are joined onto
    it. The joined path is then canonicalized (symlinks and ``..`` resolved) and the
    result must lie under the canonical base.

    When the target does not exist yet the canonical form cannot be computed, so
    the lexically normalized path is checked instead and returned with
    ``provisional=True``. A missing path reached through a symlink is therefore
    only checked textually until it exists.

    Raises:
        InvalidPathError: If ``requested`` is empty or contains a NUL byte
        AccessDeniedError: If the path escapes the project directory
    """
    if not isinstance(requested, str) or not requested.strip():
        raise InvalidPathError("Path must be a non-empty string")
    if "\x00" in requested:
        raise InvalidPathError("Path must not contain a NUL byte")

    base_abs = os.path.normpath(os.path.abspath(os.path.expanduser(base)))
    base_real = os.path.realpath(base_abs)
    roots = (base_abs, base_real)

    if os.path.isabs(requested):
        joined = os.path.normpath(requested)
        if not any(is_within(root, joined) for root in roots):
            raise AccessDeniedError(
                f"Path is outside of the project directory: {requested}"
            )
    else:
        joined = os.path.join(base_abs, requested)

    try:
        canonical = str(Path(joined).resolve(strict=True))
    except (OSError, RuntimeError):
        normalized = os.path.normpath(joined)
        if not any(is_within(root, normalized) for root in roots):
            raise AccessDeniedError(
                f"Path is outside of the project directory: {requested}"
            )
        return SandboxedPath(normalized, base_abs, provisional=True)

    if not is_within(base_real, canonical):
        raise AccessDeniedError(f"Path is outside of the project directory: {requested}")
    return SandboxedPath(canonical, base_real)
