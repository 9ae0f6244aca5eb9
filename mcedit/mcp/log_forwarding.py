"""
Logging handler forwarding records to the client as ``$/log`` notifications.
"""

import logging
import threading

from mcedit.mcp.schemas import Notification
from mcedit.ports.transport.transport_port import TransportPort

LOG_METHOD = "$/log"


class ClientLogHandler(logging.Handler):
    """Sends each record as ``{"level", "message"}`` over the transport."""

    def __init__(self, transport: TransportPort, level: int = logging.INFO):
        super().__init__(level)
        self._transport = transport
        self._local = threading.local()

    def emit(self, record: logging.LogRecord) -> None:
        # Sending logs at DEBUG itself; skip records produced while forwarding.
        if getattr(self._local, "busy", False):
            return
        self._local.busy = True
        try:
            notification = Notification(
                method=LOG_METHOD,
                params={"level": record.levelname.lower(), "message": self.format(record)},
            )
            self._transport.send(notification)
        except Exception:
            self.handleError(record)
        finally:
            self._local.busy = False
