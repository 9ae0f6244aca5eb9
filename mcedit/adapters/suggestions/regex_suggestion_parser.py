"""
Suggestion parser turning JSON or plain-English edit requests into instructions.

Recognized forms, tried in order:

1. A JSON object with a ``type`` of ``replace``, ``edit`` or ``create``. Line
   numbers in JSON are zero-based.
2. The same JSON inside a fenced code block.
3. Line edits such as ``replace lines 3-5 with:``, ``insert after line 2:``,
   ``delete lines 4-6`` or ``remove line 7``. Line numbers here are one-based.
4. ``replace the file with:`` / ``create a new file with:`` followed by content.

Anything else becomes a whole-file replacement with the text as content.
"""

import json
import logging
import re
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, TypeAdapter, ValidationError
from typing_extensions import override

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
from mcedit.exceptions import SuggestionParseError
from mcedit.ports.suggestions.suggestion_parser_port import SuggestionParserPort


class _InsertOp(BaseModel):
    model_config = ConfigDict(strict=True)

    action: Literal["insert"]
    line: NonNegativeInt
    content: str


class _ReplaceLineOp(BaseModel):
    model_config = ConfigDict(strict=True)

    action: Literal["replace", "replace_line"]
    line: NonNegativeInt
    content: str


class _DeleteLineOp(BaseModel):
    model_config = ConfigDict(strict=True)

    action: Literal["delete", "delete_line"]
    line: NonNegativeInt


class _RegionOp(BaseModel):
    model_config = ConfigDict(strict=True)

    action: Literal["region"]
    start: NonNegativeInt
    end: NonNegativeInt
    content: str = ""


class _ReplaceSuggestion(BaseModel):
    model_config = ConfigDict(strict=True)

    type: Literal["replace"]
    content: str


class _EditSuggestion(BaseModel):
    model_config = ConfigDict(strict=True)

    type: Literal["edit"]
    edits: list[
        Annotated[
            Union[_InsertOp, _ReplaceLineOp, _DeleteLineOp, _RegionOp],
            Field(discriminator="action"),
        ]
    ]


class _CreateSuggestion(BaseModel):
    model_config = ConfigDict(strict=True)

    type: Literal["create"]
    content: str
    overwrite: bool = False


_SUGGESTION = TypeAdapter(
    Annotated[
        Union[_ReplaceSuggestion, _EditSuggestion, _CreateSuggestion],
        Field(discriminator="type"),
    ]
)

_FLAGS = re.IGNORECASE

_CODE_BLOCK_RE = re.compile(r"```(?:json|javascript)\s*\n([\s\S]*?)\n\s*```", _FLAGS)
_ANY_CODE_BLOCK_RE = re.compile(r"```[^\n]*\n([\s\S]*?)\n\s*```")

_REPLACE_LINES_RE = re.compile(
    r"(?:replace|change|modify)\s+lines?\s+(\d+)(?:\s*-\s*|\s+to\s+)(\d+)(?:\s+with)?:?[ \t]*\n([\s\S]+)",
    _FLAGS,
)
_INSERT_RE = re.compile(
    r"(?:insert|add)\s+(at|after|before)\s+lines?\s+(\d+):?[ \t]*\n([\s\S]+)", _FLAGS
)
_DELETE_RE = re.compile(
    r"(?:delete|remove)\s+lines?\s+(\d+)(?:(?:\s*-\s*|\s+to\s+)(\d+))?", _FLAGS
)
_REPLACE_FILE_RE = re.compile(
    r"(?:replace the (?:file|content)|update the entire file)(?:\s+with|\s+to)?:?[ \t]*\n([\s\S]+)",
    _FLAGS,
)
_CREATE_FILE_RE = re.compile(
    r"(?:create a new file|make a file)(?:\s+with|\s+containing)?:?[ \t]*\n([\s\S]+)",
    _FLAGS,
)


def _clean_content(raw: str) -> str:
    return raw.lstrip("\r\n").rstrip()


def _zero_based(line: int) -> int:
    if line < 1:
        raise SuggestionParseError(f"Line numbers start at 1, got {line}")
    return line - 1


class RegexSuggestionParser(SuggestionParserPort):
    """Regex and JSON based implementation of the suggestion parser port."""

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger(__name__)

    @override
    def parse(self, text: str) -> EditInstruction:
        if not isinstance(text, str) or not text.strip():
            raise SuggestionParseError("Suggestion is empty")

        instruction = self._from_json(text)
        if instruction is None:
            block = self._extract_code_block(text)
            if block is not None:
                instruction = self._from_json(block)
        if instruction is None:
            instruction = self._from_line_edit(text)
        if instruction is None:
            instruction = self._from_whole_file(text)
        if instruction is None:
            self._logger.info("Suggestion not structured; treating it as a full replacement")
            instruction = ReplaceInstruction(content=text)

        self._logger.info(f"Parsed suggestion as '{instruction.action}'")
        return instruction

    def _from_json(self, text: str) -> Optional[EditInstruction]:
        try:
            data: Any = json.loads(text)
        except ValueError:
            return None
        if not isinstance(data, dict) or "type" not in data:
            return None

        try:
            model = _SUGGESTION.validate_python(data)
        except ValidationError as e:
            raise SuggestionParseError(f"Invalid structured suggestion: {e}") from e

        if isinstance(model, _ReplaceSuggestion):
            return ReplaceInstruction(content=model.content)
        if isinstance(model, _CreateSuggestion):
            return CreateInstruction(content=model.content, overwrite=model.overwrite)
        return EditsInstruction(edits=[self._to_op(op) for op in model.edits])

    @staticmethod
    def _to_op(op: BaseModel) -> EditOp:
        if isinstance(op, _InsertOp):
            return InsertLine(line=op.line, content=op.content)
        if isinstance(op, _ReplaceLineOp):
            return ReplaceLine(line=op.line, content=op.content)
        if isinstance(op, _DeleteLineOp):
            return DeleteLine(line=op.line)
        if isinstance(op, _RegionOp):
            return RegionEdit(start=op.start, end=op.end, content=op.content)
        raise SuggestionParseError(f"Unsupported edit action: {op!r}")

    @staticmethod
    def _extract_code_block(text: str) -> Optional[str]:
        match = _CODE_BLOCK_RE.search(text) or _ANY_CODE_BLOCK_RE.search(text)
        return match.group(1) if match else None

    def _from_line_edit(self, text: str) -> Optional[EditInstruction]:
        match = _REPLACE_LINES_RE.search(text)
        if match:
            start, end = int(match.group(1)), int(match.group(2))
            return EditsInstruction(
                edits=[
                    RegionEdit(
                        start=_zero_based(start),
                        end=end,
                        content=_clean_content(match.group(3)),
                    )
                ]
            )

        match = _INSERT_RE.search(text)
        if match:
            where, line = match.group(1).lower(), int(match.group(2))
            position = line if where == "after" else _zero_based(line)
            return EditsInstruction(
                edits=[InsertLine(line=position, content=_clean_content(match.group(3)))]
            )

        match = _DELETE_RE.search(text)
        if match:
            start = int(match.group(1))
            end = int(match.group(2)) if match.group(2) else start
            if end != start:
                return EditsInstruction(
                    edits=[RegionEdit(start=_zero_based(start), end=end, content="")]
                )
            return EditsInstruction(edits=[DeleteLine(line=_zero_based(start))])

        return None

    @staticmethod
    def _from_whole_file(text: str) -> Optional[EditInstruction]:
        match = _REPLACE_FILE_RE.search(text)
        if match:
            return ReplaceInstruction(content=_clean_content(match.group(1)))
        match = _CREATE_FILE_RE.search(text)
        if match:
            return CreateInstruction(content=_clean_content(match.group(1)))
        return None
