"""
Tests for the stdio transport.
"""

import io
import json

import pytest

from mcedit.adapters.transport.stdio_transport import StdioTransport, normalize_line
from mcedit.exceptions import MessageParseError, SerializationError, TransportIOError
from mcedit.mcp.schemas import Notification, Request, Response, error_response


def make_transport(lines="", logger=None):
    return StdioTransport(io.StringIO(lines), io.StringIO(), logger=logger)


class TestParseMessage:
    """Test cases for decoding one input line."""

    def test_request(self, mock_logger):
        """Test decoding a request."""
        transport = make_transport(logger=mock_logger)

        message = transport.parse_message(
            '{"jsonrpc":"2.0","id":1,"method":"tools/list","params":{}}'
        )

        assert isinstance(message, Request)
        assert message.id == 1
        assert message.method == "tools/list"

    def test_notification(self, mock_logger):
        """Test decoding a notification."""
        transport = make_transport(logger=mock_logger)

        message = transport.parse_message('{"jsonrpc":"2.0","method":"initialized"}')

        assert isinstance(message, Notification)

    def test_response(self, mock_logger):
        """Test decoding a response."""
        transport = make_transport(logger=mock_logger)

        message = transport.parse_message('{"jsonrpc":"2.0","id":3,"result":{"ok":true}}')

        assert isinstance(message, Response)
        assert message.result == {"ok": True}

    def test_malformed_line(self, mock_logger):
        """Test that garbage becomes a parse error value, not an exception."""
        transport = make_transport(logger=mock_logger)

        result = transport.parse_message("this is not json")

        assert isinstance(result, MessageParseError)
        assert str(result).startswith("Failed to parse message")
        assert result.line == "this is not json"
        mock_logger.warning.assert_called_once()

    def test_negative_id_is_rejected(self, mock_logger):
        """Test that a negative request id is not a valid message."""
        transport = make_transport(logger=mock_logger)

        result = transport.parse_message('{"jsonrpc":"2.0","id":-1,"method":"x"}')

        assert isinstance(result, MessageParseError)

    def test_control_characters_are_normalized(self, mock_logger):
        """Test that a raw control character inside a string is retried as a space."""
        transport = make_transport(logger=mock_logger)

        message = transport.parse_message(
            '{"jsonrpc":"2.0","id":1,"method":"a\tb"}'
        )

        assert isinstance(message, Request)
        assert message.method == "a b"

    def test_normalize_line(self):
        """Test the normalization rules."""
        assert normalize_line("a\x01b") == "a b"
        assert normalize_line('\\"x\\"') == '"x"'
        assert normalize_line("a\\\\b") == "a\\b"


class TestSend:
    """Test cases for writing messages."""

    def test_send_writes_one_line(self, mock_logger):
        """Test that a message is written as a single JSON line."""
        transport = make_transport(logger=mock_logger)

        transport.send(Response(id=1, result={"text": "héllo"}))

        output = transport._output.getvalue()
        assert output.endswith("\n")
        assert output.count("\n") == 1
        assert json.loads(output) == {"jsonrpc": "2.0", "id": 1, "result": {"text": "héllo"}}
        assert "héllo" in output

    def test_null_id_is_written(self, mock_logger):
        """Test that an error response without an id still carries id null."""
        transport = make_transport(logger=mock_logger)

        transport.send(error_response(None, -32700, "Parse error"))

        wire = json.loads(transport._output.getvalue())
        assert "id" in wire and wire["id"] is None
        assert wire["error"] == {"code": -32700, "message": "Parse error"}

    def test_send_after_close(self, mock_logger):
        """Test that sending on a closed transport fails."""
        transport = make_transport(logger=mock_logger)
        transport.close()

        with pytest.raises(TransportIOError, match="closed"):
            transport.send(Response(id=1, result={}))

    def test_unserializable_payload(self, mock_logger):
        """Test that a payload json cannot encode raises SerializationError."""
        transport = make_transport(logger=mock_logger)

        with pytest.raises(SerializationError):
            transport.send(Response(id=1, result={"value": object()}))

    def test_write_failure(self, mock_logger):
        """Test that a broken output stream raises TransportIOError."""
        output = io.StringIO()
        output.close()
        transport = StdioTransport(io.StringIO(), output, logger=mock_logger)

        with pytest.raises(TransportIOError):
            transport.send(Response(id=1, result={}))


class TestReceive:
    """Test cases for reading messages."""

    def test_receive_yields_messages_then_ends(self, mock_logger):
        """Test that every line is delivered and the stream ends at EOF."""
        lines = (
            '{"jsonrpc":"2.0","id":1,"method":"initialize"}\n'
            "\n"
            "garbage\n"
            '{"jsonrpc":"2.0","method":"initialized"}\n'
        )
        transport = make_transport(lines, logger=mock_logger)

        items = list(transport.receive())
        transport.join(timeout=5)

        assert len(items) == 3
        assert isinstance(items[0], Request)
        assert isinstance(items[1], MessageParseError)
        assert isinstance(items[2], Notification)
        mock_logger.info.assert_any_call("Input stream reached end of file")

    def test_receive_on_empty_input(self, mock_logger):
        """Test that an empty input ends the stream immediately."""
        transport = make_transport("", logger=mock_logger)

        assert list(transport.receive()) == []
