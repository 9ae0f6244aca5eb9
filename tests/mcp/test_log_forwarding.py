"""
Tests for forwarding log records to the client.
"""

import logging
from unittest.mock import MagicMock

from mcedit.exceptions import TransportIOError
from mcedit.mcp.log_forwarding import LOG_METHOD, ClientLogHandler
from mcedit.mcp.schemas import Notification


def make_logger(handler):
    logger = logging.getLogger("mcedit.tests.forwarding")
    logger.handlers = [handler]
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    return logger


class TestClientLogHandler:
    """Test cases for ClientLogHandler."""

    def test_record_is_sent_as_notification(self):
        """Test that a record becomes a $/log notification."""
        transport = MagicMock()
        logger = make_logger(ClientLogHandler(transport, logging.INFO))

        logger.warning("disk almost full")

        (notification,) = transport.send.call_args[0]
        assert isinstance(notification, Notification)
        assert notification.method == LOG_METHOD
        assert notification.params == {"level": "warning", "message": "disk almost full"}

    def test_records_below_level_are_dropped(self):
        """Test the handler level."""
        transport = MagicMock()
        logger = make_logger(ClientLogHandler(transport, logging.WARNING))

        logger.info("chatter")

        transport.send.assert_not_called()

    def test_records_emitted_while_sending_are_skipped(self):
        """Test that logging from inside send does not recurse."""
        transport = MagicMock()
        handler = ClientLogHandler(transport, logging.DEBUG)
        logger = make_logger(handler)
        transport.send.side_effect = lambda message: logger.debug("sending")

        logger.info("hello")

        assert transport.send.call_count == 1

    def test_send_failure_does_not_raise(self, monkeypatch):
        """Test that a broken transport never breaks the caller."""
        monkeypatch.setattr(logging, "raiseExceptions", False)
        transport = MagicMock()
        transport.send.side_effect = TransportIOError("closed")
        logger = make_logger(ClientLogHandler(transport, logging.INFO))

        logger.error("still fine")

        transport.send.assert_called_once()
