"""
Protocol handler: session state machine and request dispatch.

Messages are processed one at a time in arrival order. Every request receives a
response correlated by id; handler failures become error responses and never stop
the serving loop.
"""

import logging
from typing import Any, Callable

from mcedit import __version__
from mcedit.entities.session import Session
from mcedit.exceptions import (
    AccessDeniedError,
    InvalidPathError,
    MessageParseError,
    NotFoundError,
    ProtocolError,
    ToolArgumentsError,
    ToolExecutionError,
    TransportError,
)
from mcedit.mcp.error_codes import JsonRpcErrorCode
from mcedit.mcp.schemas import (
    Notification,
    Request,
    Response,
    error_response,
    success_response,
    text_content,
)
from mcedit.ports.tools.tools_port import ToolsHandlerPort
from mcedit.ports.transport.transport_port import ReceivedItem, TransportPort

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "mcedit"
NOT_INITIALIZED_MESSAGE = "Server not initialized. Send 'initialize' request first."

# Implementation-defined codes attached as error data on tool failures
_FAILURE_CODES: tuple[tuple[type[Exception], JsonRpcErrorCode, str], ...] = (
    (NotFoundError, JsonRpcErrorCode.FILE_NOT_FOUND, "FileNotFound"),
    (AccessDeniedError, JsonRpcErrorCode.PERMISSION_DENIED, "PermissionDenied"),
    (InvalidPathError, JsonRpcErrorCode.INVALID_PATH, "InvalidPath"),
)


def _failure_data(error: ToolExecutionError) -> dict[str, Any] | None:
    for exc_type, code, kind in _FAILURE_CODES:
        if isinstance(error.cause, exc_type):
            return {"code": int(code), "kind": kind}
    return None


class McpHandler:
    """Serves protocol requests read from a transport."""

    def __init__(
        self,
        transport: TransportPort,
        tools_handler: ToolsHandlerPort,
        session: Session | None = None,
        logger: logging.Logger | None = None,
    ):
        """
        Initialize the handler.

        Args:
            transport: Transport delivering inbound items and sending responses
            tools_handler: Catalog and dispatcher for tools/call
            session: Session state, a fresh uninitialized one by default
            logger: Logger instance to use for logging
        """
        self._transport = transport
        self._tools = tools_handler
        self._session = session or Session()
        self._logger = logger or logging.getLogger(__name__)
        self._tool_names = {spec["name"] for spec in tools_handler.available_tools()}
        self._methods: dict[str, Callable[[Any], Any]] = {
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
            "resources/list": self._resources_list,
            "prompts/list": self._prompts_list,
        }

    @property
    def session(self) -> Session:
        return self._session

    def serve(self) -> None:
        """Process inbound items until the input ends."""
        subscription = self._transport.receive()
        self._logger.info("MCP stdio server started, waiting for JSON messages on stdin")
        for item in subscription:
            self.handle_item(item)
        self._logger.info("Input stream ended, shutting down")

    def handle_item(self, item: ReceivedItem) -> None:
        if isinstance(item, Request):
            self._send(self.respond(item))
        elif isinstance(item, Notification):
            self._logger.debug(f"Received notification: {item.method}")
        elif isinstance(item, Response):
            self._logger.debug(f"Received response for id={item.id}, ignoring")
        elif isinstance(item, MessageParseError):
            self._logger.error(f"Transport error: {item}")
            self._send(error_response(None, JsonRpcErrorCode.PARSE_ERROR, str(item)))
        elif isinstance(item, TransportError):
            self._logger.error(f"Transport error: {item}")
        else:
            self._logger.warning(f"Ignoring unexpected inbound item: {item!r}")

    def respond(self, request: Request) -> Response:
        """Build the response to a request; never raises."""
        self._logger.debug(f"Received request id={request.id} method={request.method}")
        try:
            result = self.route(request.method, request.params)
        except ProtocolError as e:
            self._logger.warning(f"Request {request.id} ({request.method}) rejected: {e}")
            return error_response(request.id, e.code, e.message, e.data)
        except Exception as e:
            self._logger.error(f"Request {request.id} ({request.method}) failed: {e}")
            return error_response(
                request.id,
                JsonRpcErrorCode.INTERNAL_ERROR,
                f"Failed to handle request: {e}",
            )
        return success_response(request.id, result)

    def route(self, method: str, params: Any) -> Any:
        """
        Route a method call.

        Raises:
            ProtocolError: For uninitialized sessions, unknown methods and tool errors
        """
        if method == "initialize":
            return self._initialize(params)
        if not self._session.initialized:
            raise ProtocolError(JsonRpcErrorCode.INVALID_REQUEST, NOT_INITIALIZED_MESSAGE)

        handler = self._methods.get(method)
        if handler is None:
            raise ProtocolError(JsonRpcErrorCode.METHOD_NOT_FOUND, f"Method not found: {method}")
        return handler(params)

    def _send(self, response: Response) -> None:
        try:
            self._transport.send(response)
        except TransportError as e:
            self._logger.error(f"Failed to send response for id={response.id}: {e}")

    # ------------------------- methods -------------------------
    def _initialize(self, params: Any) -> dict[str, Any]:
        if isinstance(params, dict) and isinstance(params.get("clientInfo"), dict):
            client = params["clientInfo"]
            self._logger.info(
                f"Initializing session for client {client.get('name')} {client.get('version', '')}".rstrip()
            )
        self._session.mark_initialized()
        return {
            "capabilities": {
                "experimental": {},
                "prompts": {"listChanged": False},
                "resources": {"listChanged": False, "subscribe": False},
                "tools": {"listChanged": False},
            },
            "protocolVersion": PROTOCOL_VERSION,
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }

    def _tools_list(self, params: Any) -> dict[str, Any]:
        return {"tools": self._tools.available_tools()}

    def _resources_list(self, params: Any) -> dict[str, Any]:
        return {"resources": []}

    def _prompts_list(self, params: Any) -> dict[str, Any]:
        return {"prompts": []}

    def _tools_call(self, params: Any) -> dict[str, Any]:
        if not isinstance(params, dict):
            raise ProtocolError(JsonRpcErrorCode.INVALID_PARAMS, "Missing params for tools/call")
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise ProtocolError(
                JsonRpcErrorCode.INVALID_PARAMS, "Missing required parameter: name"
            )
        if name not in self._tool_names:
            raise ProtocolError(JsonRpcErrorCode.METHOD_NOT_FOUND, f"Tool not found: {name}")

        try:
            text = self._tools.dispatch(name, params.get("arguments"))
        except ToolArgumentsError as e:
            raise ProtocolError(JsonRpcErrorCode.INVALID_PARAMS, str(e)) from e
        except ToolExecutionError as e:
            raise ProtocolError(
                JsonRpcErrorCode.INTERNAL_ERROR, str(e), _failure_data(e)
            ) from e
        return text_content(text)
