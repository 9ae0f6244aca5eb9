"""
Editor tools mapped to the file service, the project analyzer and the diff generator.
"""

import json
import logging
from typing import Any, Callable, Iterable, Optional

from pydantic import ValidationError

from mcedit.exceptions import (
    FileServiceError,
    ProjectAnalysisError,
    SuggestionParseError,
    ToolArgumentsError,
    ToolExecutionError,
)
from mcedit.ports.project.project_analyzer_port import ProjectAnalyzerPort
from mcedit.ports.suggestions.suggestion_parser_port import SuggestionParserPort
from mcedit.ports.tools.tools_port import ToolsHandlerPort, ToolSpec
from mcedit.use_cases.diff.diff_generator import DiffGenerator
from mcedit.use_cases.files.file_service import FileService
from mcedit.use_cases.tools.schemas import (
    AnalyzeProjectArguments,
    ApplySuggestionArguments,
    ChangeDirectoryArguments,
    CreateFileArguments,
    DeleteFileArguments,
    GenerateDiffArguments,
    ListFilesArguments,
    ReadFileArguments,
    RenameFileArguments,
    SearchFilesArguments,
    ToolArguments,
    WriteFileArguments,
)

AnalyzerFactory = Callable[[str], ProjectAnalyzerPort]


def _string(description: str) -> dict[str, object]:
    return {"type": "string", "description": description}


def _boolean(description: str) -> dict[str, object]:
    return {"type": "boolean", "description": description}


def _object(properties: dict[str, object], required: list[str]) -> dict[str, object]:
    schema: dict[str, object] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def format_validation_error(error: ValidationError) -> str:
    """Turn the first pydantic error into a short parameter message."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or "arguments"
    if first.get("type") == "missing":
        return f"Missing required parameter: {field}"
    return f"Invalid parameter '{field}': {first.get('msg', 'invalid value')}"


class EditorToolsHandler(ToolsHandlerPort):
    """Handler for the file editing tools served to protocol clients."""

    def __init__(
        self,
        file_service: FileService,
        analyzer_factory: AnalyzerFactory,
        suggestion_parser: SuggestionParserPort,
        diff_generator: DiffGenerator | None = None,
        enabled_tools: Iterable[str] | None = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the editor tools handler.

        Args:
            file_service: Sandboxed file operations
            analyzer_factory: Builds a project analyzer for a project directory
            suggestion_parser: Turns suggestion text into edit instructions
            diff_generator: Diff generator for generate_diff
            enabled_tools: Names of the tools to serve; all tools when None
            logger: Logger instance to use for logging
        """
        self._files = file_service
        self._analyzer_factory = analyzer_factory
        self._parser = suggestion_parser
        self._diff = diff_generator or DiffGenerator()
        self._logger = logger or logging.getLogger(__name__)

        # name -> (argument model, failure verb, handler)
        self._tools: dict[
            str, tuple[type[ToolArguments], str, Callable[[Any], dict[str, Any]]]
        ] = {
            "read_file": (ReadFileArguments, "read file", self._read_file),
            "write_file": (WriteFileArguments, "write file", self._write_file),
            "list_files": (ListFilesArguments, "list files", self._list_files),
            "search_files": (SearchFilesArguments, "search files", self._search_files),
            "analyze_project": (
                AnalyzeProjectArguments,
                "analyze project",
                self._analyze_project,
            ),
            "apply_suggestion": (
                ApplySuggestionArguments,
                "apply suggestion",
                self._apply_suggestion,
            ),
            "generate_diff": (GenerateDiffArguments, "generate diff", self._generate_diff),
            "change_directory": (
                ChangeDirectoryArguments,
                "change directory",
                self._change_directory,
            ),
            "create_file": (CreateFileArguments, "create file", self._create_file),
            "rename_file": (RenameFileArguments, "rename file", self._rename_file),
            "delete_file": (DeleteFileArguments, "delete file", self._delete_file),
        }
        if enabled_tools is None:
            self._enabled = set(self._tools)
        else:
            requested = set(enabled_tools)
            for unknown in sorted(requested - set(self._tools)):
                self._logger.warning(f"Ignoring unknown tool in configuration: {unknown}")
            self._enabled = requested & set(self._tools)

    def available_tools(self) -> list[ToolSpec]:
        return [spec for spec in self._catalog() if spec["name"] in self._enabled]

    def _catalog(self) -> list[ToolSpec]:
        return [
            {
                "name": "read_file",
                "description": "Read the content of a file",
                "inputSchema": _object({"path": _string("Path to the file to read")}, ["path"]),
                "outputSchema": _object(
                    {
                        "content": _string("Content of the file"),
                        "path": _string("Path to the file that was read"),
                    },
                    ["content", "path"],
                ),
            },
            {
                "name": "write_file",
                "description": "Write content to a file, backing up the previous version",
                "inputSchema": _object(
                    {
                        "path": _string("Path to the file to write"),
                        "content": _string("Content to write to the file"),
                    },
                    ["path", "content"],
                ),
                "outputSchema": _object(
                    {
                        "success": _boolean("Whether the write operation was successful"),
                        "path": _string("Path to the file that was written"),
                    },
                    ["success", "path"],
                ),
            },
            {
                "name": "list_files",
                "description": "List files in the project directory that match a pattern",
                "inputSchema": _object(
                    {"pattern": _string("Pattern to match file names against (regex)")}, []
                ),
                "outputSchema": _object(
                    {
                        "files": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "List of file paths matching the pattern",
                        }
                    },
                    ["files"],
                ),
            },
            {
                "name": "search_files",
                "description": "Search for text in files in the project",
                "inputSchema": _object({"query": _string("Text or regex to search for")}, ["query"]),
                "outputSchema": _object(
                    {
                        "query": _string("The query that was searched for"),
                        "results": {
                            "type": "array",
                            "description": "List of matches found",
                            "items": _object(
                                {
                                    "file": _string("File path where the match was found"),
                                    "matches": {
                                        "type": "array",
                                        "items": _object(
                                            {
                                                "line_number": {
                                                    "type": "integer",
                                                    "description": "1-based line number of the match",
                                                },
                                                "line": _string("Content of the matching line"),
                                            },
                                            [],
                                        ),
                                    },
                                },
                                [],
                            ),
                        },
                    },
                    ["results"],
                ),
            },
            {
                "name": "analyze_project",
                "description": "Analyze the structure of the project",
                "inputSchema": _object({}, []),
                "outputSchema": _object(
                    {
                        "project_directory": _string("Base directory of the project"),
                        "project_type": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "Detected project types",
                        },
                        "stats": {"type": "object", "description": "Project statistics"},
                        "languages": {
                            "type": "array",
                            "description": "Programming languages used in the project",
                        },
                        "key_files": {
                            "type": "array",
                            "description": "Important files in the project",
                        },
                    },
                    ["project_directory", "project_type"],
                ),
            },
            {
                "name": "apply_suggestion",
                "description": "Apply suggested changes to a file",
                "inputSchema": _object(
                    {
                        "path": _string("Path to the file to modify"),
                        "suggestion": _string(
                            "Suggestion text describing the changes (JSON or plain English)"
                        ),
                    },
                    ["path", "suggestion"],
                ),
                "outputSchema": _object(
                    {
                        "success": _boolean("Whether the suggestion was applied successfully"),
                        "action": _string("Type of action performed"),
                        "path": _string("Path to the file that was modified"),
                        "results": {
                            "type": "array",
                            "description": "Per-edit outcome for 'edit' suggestions",
                        },
                    },
                    ["success", "action", "path"],
                ),
            },
            {
                "name": "generate_diff",
                "description": "Generate diff between original and modified text",
                "inputSchema": _object(
                    {
                        "original": _string("Original text"),
                        "modified": _string("Modified text"),
                    },
                    ["original", "modified"],
                ),
                "outputSchema": _object(
                    {"diff": _string("Unified diff between original and modified text")},
                    ["diff"],
                ),
            },
            {
                "name": "change_directory",
                "description": "Change the project directory used to resolve paths",
                "inputSchema": _object({"directory": _string("New directory path")}, ["directory"]),
                "outputSchema": _object(
                    {
                        "success": _boolean("Whether the directory change was successful"),
                        "directory": _string("New project directory"),
                    },
                    ["success", "directory"],
                ),
            },
            {
                "name": "create_file",
                "description": "Create a new file with the specified content",
                "inputSchema": _object(
                    {
                        "path": _string("Path to the file to create"),
                        "content": _string("Content to write to the file"),
                    },
                    ["path", "content"],
                ),
                "outputSchema": _object(
                    {
                        "success": _boolean("Whether the file was created successfully"),
                        "path": _string("Path to the created file"),
                    },
                    ["success", "path"],
                ),
            },
            {
                "name": "rename_file",
                "description": "Rename or move a file",
                "inputSchema": _object(
                    {
                        "from_path": _string("Original path of the file"),
                        "to_path": _string("New path for the file"),
                    },
                    ["from_path", "to_path"],
                ),
                "outputSchema": _object(
                    {
                        "success": _boolean("Whether the file was renamed successfully"),
                        "from_path": _string("Original path of the file"),
                        "to_path": _string("New path of the file"),
                    },
                    ["success", "from_path", "to_path"],
                ),
            },
            {
                "name": "delete_file",
                "description": "Delete a file, backing it up first",
                "inputSchema": _object({"path": _string("Path to the file to delete")}, ["path"]),
                "outputSchema": _object(
                    {
                        "success": _boolean("Whether the file was deleted successfully"),
                        "path": _string("Path to the deleted file"),
                    },
                    ["success", "path"],
                ),
            },
        ]

    def dispatch(self, name: str, arguments: dict[str, object] | None) -> str:
        """
        Dispatch a tool invocation.

        Args:
            name: Name of the tool to invoke
            arguments: Raw arguments object from the client

        Returns:
            JSON text of the tool result

        Raises:
            ValueError: If the tool name is unknown
            ToolArgumentsError: If the arguments are missing, mistyped or unparseable
            ToolExecutionError: If the file operation fails
        """
        if name not in self._enabled:
            raise ValueError(f"Unknown tool: {name}")
        model, verb, handler = self._tools[name]

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise ToolArgumentsError("Tool arguments must be an object")
        try:
            args = model.model_validate(arguments)
        except ValidationError as e:
            raise ToolArgumentsError(format_validation_error(e)) from e

        self._logger.info(f"Executing {name} tool")
        try:
            result = handler(args)
        except (FileServiceError, ProjectAnalysisError) as e:
            self._logger.error(f"Tool {name} failed: {e}")
            raise ToolExecutionError(f"Failed to {verb}: {e}", cause=e) from e
        return json.dumps(result, ensure_ascii=False)

    # ------------------------- handlers -------------------------
    def _read_file(self, args: ReadFileArguments) -> dict[str, Any]:
        content = self._files.read_file(args.path)
        return {"content": content, "path": args.path}

    def _write_file(self, args: WriteFileArguments) -> dict[str, Any]:
        self._files.write_file(args.path, args.content)
        return {"success": True, "path": args.path}

    def _analyzer(self) -> ProjectAnalyzerPort:
        return self._analyzer_factory(self._files.base_directory)

    def _list_files(self, args: ListFilesArguments) -> dict[str, Any]:
        return {"files": self._analyzer().list_files(args.pattern)}

    def _search_files(self, args: SearchFilesArguments) -> dict[str, Any]:
        return {"query": args.query, "results": self._analyzer().search_files(args.query)}

    def _analyze_project(self, args: AnalyzeProjectArguments) -> dict[str, Any]:
        return self._analyzer().analyze_project()

    def _apply_suggestion(self, args: ApplySuggestionArguments) -> dict[str, Any]:
        try:
            instruction = self._parser.parse(args.suggestion)
        except SuggestionParseError as e:
            raise ToolArgumentsError(f"Failed to parse suggestion: {e}") from e
        result = self._files.apply_suggestion(args.path, instruction)
        result["path"] = args.path
        return result

    def _generate_diff(self, args: GenerateDiffArguments) -> dict[str, Any]:
        return {"diff": self._diff.generate_unified_diff(args.original, args.modified)}

    def _change_directory(self, args: ChangeDirectoryArguments) -> dict[str, Any]:
        directory = self._files.change_directory(args.directory)
        return {"success": True, "directory": directory}

    def _create_file(self, args: CreateFileArguments) -> dict[str, Any]:
        self._files.create_file(args.path, args.content)
        return {"success": True, "path": args.path}

    def _rename_file(self, args: RenameFileArguments) -> dict[str, Any]:
        self._files.rename_file(args.from_path, args.to_path)
        return {"success": True, "from_path": args.from_path, "to_path": args.to_path}

    def _delete_file(self, args: DeleteFileArguments) -> dict[str, Any]:
        self._files.delete_file(args.path)
        return {"success": True, "path": args.path}
