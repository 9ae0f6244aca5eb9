"""
Custom exceptions for the application.
"""


class BaseAppError(Exception):
    """Base exception class for application errors."""

    pass


class FileServiceError(BaseAppError):
    """Exception raised for file editing errors."""

    pass


class NotFoundError(FileServiceError):
    """Raised when a file or directory does not exist."""

    pass


class AccessDeniedError(FileServiceError):
    """Raised when a path resolves outside of the project directory."""

    pass


class InvalidPathError(FileServiceError):
    """Raised when a path exists but has the wrong kind (e.g. a directory)."""

    pass


class AlreadyExistsError(FileServiceError):
    """Raised when creating or renaming onto an existing file."""

    pass


class LineOutOfRangeError(FileServiceError):
    """Raised when a line index falls outside the file's line sequence."""

    pass


class InvalidRangeError(FileServiceError):
    """Raised when a region's start lies after its end."""

    pass


class BackupError(FileServiceError):
    """Exception raised for backup creation or restore errors."""

    pass


class NoBackupAvailableError(BackupError):
    """Raised when restoring a file that has no backups."""

    pass


class TransportError(BaseAppError):
    """Exception raised for stdio transport errors."""

    pass


class TransportIOError(TransportError):
    """Raised when reading from or writing to the stream fails."""

    pass


class SerializationError(TransportError):
    """Raised when an outgoing message cannot be serialized."""

    pass


class MessageParseError(TransportError):
    """Raised (or published) when an inbound line is not a valid message."""

    def __init__(self, message: str, line: str = ""):
        super().__init__(message)
        self.line = line


class SuggestionParseError(BaseAppError):
    """Exception raised when a suggestion cannot be turned into an edit instruction."""

    pass


class ProjectAnalysisError(BaseAppError):
    """Exception raised for project scanning errors."""

    pass


class ConfigurationError(BaseAppError):
    """Exception raised for configuration errors."""

    pass


class ToolArgumentsError(BaseAppError):
    """Exception raised when tool arguments fail validation."""

    pass


class ToolExecutionError(BaseAppError):
    """Exception raised when a tool fails while running.

    The message is already prefixed with the failing action, e.g.
    "Failed to read file: ...".
    """

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class ProtocolError(BaseAppError):
    """Raised inside the dispatcher to produce a JSON-RPC error response."""

    def __init__(self, code: int, message: str, data: object | None = None):
        super().__init__(message)
        self.code = int(code)
        self.message = message
        self.data = data
