"""
Pydantic models for JSON-RPC messages exchanged over the transport.
"""

import json
from typing import Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    StrictInt,
    StrictStr,
    ValidationError,
    model_validator,
)

JSONRPC_VERSION = "2.0"


class ErrorObject(BaseModel):
    """Schema for the error member of a response."""

    code: StrictInt = Field(..., description="Numeric error code")
    message: StrictStr = Field(..., description="Human-readable description")
    data: Optional[Any] = Field(None, description="Additional error details")


class Request(BaseModel):
    """Schema for a request expecting a correlated response."""

    jsonrpc: Literal["2.0"] = Field(JSONRPC_VERSION, description="Protocol version")
    id: NonNegativeInt = Field(..., strict=True, description="Request id")
    method: StrictStr = Field(..., description="Method name")
    params: Optional[Any] = Field(None, description="Method parameters")


class Notification(BaseModel):
    """Schema for a one-way message without an id."""

    model_config = ConfigDict(extra="forbid")

    jsonrpc: Literal["2.0"] = Field(JSONRPC_VERSION, description="Protocol version")
    method: StrictStr = Field(..., description="Method name")
    params: Optional[Any] = Field(None, description="Method parameters")


class Response(BaseModel):
    """Schema for a response; ``id`` is null only for unattributable errors."""

    jsonrpc: Literal["2.0"] = Field(JSONRPC_VERSION, description="Protocol version")
    id: Optional[StrictInt] = Field(..., description="Id of the answered request")
    result: Optional[Any] = Field(None, description="Result on success")
    error: Optional[ErrorObject] = Field(None, description="Error on failure")

    @model_validator(mode="after")
    def _result_or_error(self) -> "Response":
        if self.result is None and self.error is None:
            raise ValueError("response must carry a result or an error")
        return self


Message = Union[Request, Notification, Response]

_DECODE_ORDER: tuple[type[BaseModel], ...] = (Request, Notification, Response)


def decode_message(data: Any) -> Message:
    """
    Decode a JSON value into a message.

    Variants are tried in order: request, notification, response.

    Raises:
        ValueError: If the value matches no variant
    """
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")

    errors: list[str] = []
    for model in _DECODE_ORDER:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            errors.append(f"{model.__name__}: {e.error_count()} validation errors")
    raise ValueError("not a JSON-RPC message (" + "; ".join(errors) + ")")


def parse_json_message(line: str) -> Message:
    """Strictly decode one line of JSON into a message."""
    return decode_message(json.loads(line))


def message_to_wire(message: Message) -> dict[str, Any]:
    """
    Convert a message to its JSON object form.

    Responses always carry ``id`` (possibly null) and exactly one of ``result`` or
    ``error``; absent optional members are omitted elsewhere.
    """
    if isinstance(message, Response):
        wire: dict[str, Any] = {"jsonrpc": message.jsonrpc, "id": message.id}
        if message.error is not None:
            wire["error"] = message.error.model_dump(exclude_none=True)
        else:
            wire["result"] = message.result
        return wire
    return message.model_dump(exclude_none=True)


def success_response(request_id: Optional[int], result: Any) -> Response:
    return Response(id=request_id, result=result)


def error_response(
    request_id: Optional[int], code: int, message: str, data: Any = None
) -> Response:
    return Response(
        id=request_id, error=ErrorObject(code=int(code), message=message, data=data)
    )


def text_content(payload: Any) -> dict[str, Any]:
    """Wrap a tool result as a single text content item holding its JSON."""
    text = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
    return {"content": [{"type": "text", "text": text}]}
