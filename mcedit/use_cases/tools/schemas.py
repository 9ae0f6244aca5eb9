"""
Pydantic models validating tool arguments before any file operation runs.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class ToolArguments(BaseModel):
    """Base schema for tool arguments: strict types, unknown keys ignored."""

    model_config = ConfigDict(strict=True, extra="ignore")


class PathArguments(ToolArguments):
    path: StrictStr = Field(..., description="Path of the file, relative to the project directory")


class ReadFileArguments(PathArguments):
    pass


class DeleteFileArguments(PathArguments):
    pass


class WriteFileArguments(PathArguments):
    content: StrictStr = Field(..., description="Content to write to the file")


class CreateFileArguments(PathArguments):
    content: StrictStr = Field(..., description="Content of the new file")


class ListFilesArguments(ToolArguments):
    pattern: Optional[StrictStr] = Field(None, description="Regex matched against file names")


class SearchFilesArguments(ToolArguments):
    query: StrictStr = Field(..., description="Regex searched for in each line")


class AnalyzeProjectArguments(ToolArguments):
    pass


class ApplySuggestionArguments(PathArguments):
    suggestion: StrictStr = Field(..., description="Suggestion text describing the changes")


class GenerateDiffArguments(ToolArguments):
    original: StrictStr = Field(..., description="Original text")
    modified: StrictStr = Field(..., description="Modified text")


class ChangeDirectoryArguments(ToolArguments):
    directory: StrictStr = Field(..., description="New project directory")


class RenameFileArguments(ToolArguments):
    from_path: StrictStr = Field(..., description="Current path of the file")
    to_path: StrictStr = Field(..., description="New path of the file")
