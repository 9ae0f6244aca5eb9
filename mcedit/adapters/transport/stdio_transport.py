"""
Newline-delimited JSON transport over standard input and output.

A single daemon thread reads the input one line at a time and publishes parsed
messages (or parse errors) to a bounded broadcast queue. Writes are serialized by
a lock so concurrent senders never interleave partial lines.
"""

import json
import logging
import re
import sys
import threading
from typing import TextIO

from typing_extensions import override

from mcedit.adapters.transport.broadcast import DEFAULT_CAPACITY, BroadcastQueue, Subscription
from mcedit.exceptions import MessageParseError, SerializationError, TransportIOError
from mcedit.mcp.schemas import Message, message_to_wire, parse_json_message
from mcedit.ports.transport.transport_port import ReceivedItem, TransportPort

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f]")

LOG_PREVIEW_CHARS = 500


def normalize_line(line: str) -> str:
    """Collapse control characters to spaces and un-double escaped backslashes/quotes."""
    text = _CONTROL_CHARS_RE.sub(" ", line)
    return text.replace("\\\\", "\\").replace('\\"', '"')


class StdioTransport(TransportPort):
    """Transport speaking one JSON message per line."""

    def __init__(
        self,
        input_stream: TextIO | None = None,
        output_stream: TextIO | None = None,
        capacity: int = DEFAULT_CAPACITY,
        logger: logging.Logger | None = None,
    ):
        """
        Initialize the transport.

        Args:
            input_stream: Stream to read messages from (defaults to stdin)
            output_stream: Stream to write messages to (defaults to stdout)
            capacity: Per-subscriber buffer size of the inbound queue
            logger: Logger instance to use for logging
        """
        self._input = input_stream if input_stream is not None else sys.stdin
        self._output = output_stream if output_stream is not None else sys.stdout
        self._logger = logger or logging.getLogger(__name__)
        self._queue: BroadcastQueue[ReceivedItem] = BroadcastQueue(
            capacity, logger=self._logger
        )
        self._write_lock = threading.Lock()
        self._reader_lock = threading.Lock()
        self._reader: threading.Thread | None = None
        self._closed = False

    def parse_message(self, line: str) -> Message | MessageParseError:
        """
        Parse one input line.

        A line that fails strict decoding is normalized and retried. If it is still
        invalid a ``MessageParseError`` is returned instead of raised, so one bad
        line never ends the stream.
        """
        text = line.strip()
        try:
            return parse_json_message(text)
        except ValueError as first:
            self._logger.debug(f"Strict parse failed, retrying normalized: {first}")

        try:
            return parse_json_message(normalize_line(text))
        except ValueError as e:
            preview = text[:LOG_PREVIEW_CHARS]
            self._logger.warning(f"Failed to parse message: {e}; line: {preview}")
            return MessageParseError(f"Failed to parse message: {e}", line=text)

    @override
    def send(self, message: Message) -> None:
        try:
            line = json.dumps(message_to_wire(message), ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to serialize message: {str(e)}") from e

        with self._write_lock:
            if self._closed:
                raise TransportIOError("Transport is closed")
            try:
                self._output.write(line + "\n")
                self._output.flush()
            except (OSError, ValueError) as e:
                raise TransportIOError(f"Failed to write message: {str(e)}") from e
        self._logger.debug(f"Sent: {line[:LOG_PREVIEW_CHARS]}")

    @override
    def receive(self) -> Subscription[ReceivedItem]:
        subscription = self._queue.subscribe()
        self._ensure_reader()
        return subscription

    def _ensure_reader(self) -> None:
        with self._reader_lock:
            if self._reader is None and not self._closed:
                self._reader = threading.Thread(
                    target=self._read_loop, name="mcedit-stdio-reader", daemon=True
                )
                self._reader.start()

    def _read_loop(self) -> None:
        try:
            while True:
                line = self._input.readline()
                if line == "":
                    self._logger.info("Input stream reached end of file")
                    break
                if not line.strip():
                    continue
                self._queue.publish(self.parse_message(line))
        except (OSError, ValueError) as e:
            self._logger.error(f"Failed to read from input stream: {e}")
            self._queue.publish(TransportIOError(f"Failed to read input: {str(e)}"))
        finally:
            self._queue.close()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the reader thread to finish."""
        reader = self._reader
        if reader is not None:
            reader.join(timeout)

    @override
    def close(self) -> None:
        with self._write_lock:
            self._closed = True
        self._queue.close()
