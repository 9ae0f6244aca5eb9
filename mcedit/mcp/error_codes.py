"""
JSON-RPC error codes used by the protocol handler.
"""

from enum import IntEnum


class JsonRpcErrorCode(IntEnum):
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # Implementation-defined range
    FILE_NOT_FOUND = -32000
    PERMISSION_DENIED = -32001
    INVALID_PATH = -32002
    # Reserved: diffing two strings cannot fail
    DIFF_ERROR = -32003
