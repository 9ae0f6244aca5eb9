"""
Sandboxed path entity.
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class SandboxedPath:
    """
    Absolute path proven to lie inside the active project directory.

    Instances are produced by the workspace resolver only and are recomputed for
    every operation. When the target did not exist at resolution time the
    containment check is purely lexical and ``provisional`` is set.
    """

    path: str
    base: str
    provisional: bool = False

    def __fspath__(self) -> str:
        return self.path

    def __str__(self) -> str:
        return self.path

    @property
    def name(self) -> str:
        """File name component of the path."""
        return os.path.basename(self.path)

    @property
    def parent(self) -> str:
        return os.path.dirname(self.path)

    def relative(self) -> str:
        """Path relative to the project directory it was resolved against."""
        return os.path.relpath(self.path, self.base)
