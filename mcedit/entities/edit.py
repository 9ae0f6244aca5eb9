"""
Edit instruction domain entities.

An ``EditInstruction`` describes a file mutation independently of the text it was
derived from. ``Edit`` instructions carry an ordered list of ``EditOp`` values whose
line indices are zero-based and interpreted against the file as already mutated by
the previous operations of the same instruction.
"""

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class InsertLine:
    line: int
    content: str

    action = "insert"

    def describe(self) -> dict[str, Any]:
        return {"action": self.action, "line": self.line}


@dataclass(frozen=True)
class ReplaceLine:
    line: int
    content: str

    action = "replace"

    def describe(self) -> dict[str, Any]:
        return {"action": self.action, "line": self.line}


@dataclass(frozen=True)
class DeleteLine:
    line: int

    action = "delete"

    def describe(self) -> dict[str, Any]:
        return {"action": self.action, "line": self.line}


@dataclass(frozen=True)
class RegionEdit:
    """Replace the half-open line span ``[start, end)`` with ``content``."""

    start: int
    end: int
    content: str

    action = "region"

    def describe(self) -> dict[str, Any]:
        return {"action": self.action, "start": self.start, "end": self.end}


EditOp = Union[InsertLine, ReplaceLine, DeleteLine, RegionEdit]


@dataclass(frozen=True)
class ReplaceInstruction:
    """Overwrite the whole file."""

    content: str

    action = "replace"


@dataclass(frozen=True)
class EditsInstruction:
    """Apply line-level operations in order."""

    edits: list[EditOp] = field(default_factory=list)

    action = "edit"


@dataclass(frozen=True)
class CreateInstruction:
    """Create a file, refusing to clobber an existing one unless ``overwrite``."""

    content: str
    overwrite: bool = False

    action = "create"


EditInstruction = Union[ReplaceInstruction, EditsInstruction, CreateInstruction]
