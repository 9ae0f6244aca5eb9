"""
Transport port interface for exchanging protocol messages.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Union

from mcedit.exceptions import TransportError
from mcedit.mcp.schemas import Message

ReceivedItem = Union[Message, TransportError]


class TransportPort(ABC):
    """Port interface for a message transport."""

    @abstractmethod
    def send(self, message: Message) -> None:
        """
        Send one message.

        Raises:
            SerializationError: If the message cannot be serialized
            TransportIOError: If writing fails
        """
        pass

    @abstractmethod
    def receive(self) -> Iterator[ReceivedItem]:
        """
        Subscribe to inbound items.

        Each call returns an independent subscription that starts with the next
        published item. Items are parsed messages or transport errors; the
        iterator ends when the input ends.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Stop the transport and end every subscription."""
        pass
