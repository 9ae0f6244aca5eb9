"""
Bounded, lossy broadcast queue feeding transport subscribers.

Each subscriber owns a buffer of ``capacity`` items. Publishing to a full buffer
drops that subscriber's oldest undelivered item, so a slow consumer never blocks
the reader thread. Subscribers only see items published after they subscribed.
"""

import logging
import threading
from collections import deque
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

DEFAULT_CAPACITY = 100


class Subscription(Generic[T]):
    """Iterator over the items published after subscribing."""

    def __init__(self, queue: "BroadcastQueue[T]", capacity: int):
        self._queue = queue
        self._items: deque[T] = deque()
        self._capacity = capacity
        self._cancelled = False
        self.dropped = 0

    def _offer(self, item: T) -> bool:
        """Buffer an item; return True if an older item had to be dropped."""
        overflow = len(self._items) >= self._capacity
        if overflow:
            self._items.popleft()
            self.dropped += 1
        self._items.append(item)
        return overflow

    def __iter__(self) -> "Subscription[T]":
        return self

    def __next__(self) -> T:
        item = self.get()
        if item is None:
            raise StopIteration
        return item

    def get(self, timeout: Optional[float] = None) -> Optional[T]:
        """
        Wait for the next item.

        Returns:
            The next item, or None when the queue is closed and drained, the
            subscription was cancelled, or the timeout expired
        """
        with self._queue._cond:
            self._queue._cond.wait_for(
                lambda: self._items or self._queue._closed or self._cancelled,
                timeout=timeout,
            )
            if self._items and not self._cancelled:
                return self._items.popleft()
            return None

    def close(self) -> None:
        self._queue._unsubscribe(self)


class BroadcastQueue(Generic[T]):
    """Fan-out queue with drop-oldest overflow per subscriber."""

    def __init__(
        self, capacity: int = DEFAULT_CAPACITY, logger: logging.Logger | None = None
    ):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._cond = threading.Condition()
        self._subscribers: list[Subscription[T]] = []
        self._closed = False
        self._logger = logger or logging.getLogger(__name__)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self) -> Subscription[T]:
        subscription: Subscription[T] = Subscription(self, self._capacity)
        with self._cond:
            self._subscribers.append(subscription)
        return subscription

    def _unsubscribe(self, subscription: Subscription[T]) -> None:
        with self._cond:
            subscription._cancelled = True
            if subscription in self._subscribers:
                self._subscribers.remove(subscription)
            self._cond.notify_all()

    def publish(self, item: T) -> int:
        """
        Deliver an item to every current subscriber.

        Returns:
            Number of subscribers the item was delivered to
        """
        with self._cond:
            if self._closed:
                return 0
            for subscription in self._subscribers:
                if subscription._offer(item):
                    self._logger.warning(
                        "Subscriber lagging behind; dropped oldest undelivered message "
                        f"(total dropped: {subscription.dropped})"
                    )
            self._cond.notify_all()
            return len(self._subscribers)

    def close(self) -> None:
        """Stop accepting items; subscribers drain what is buffered, then end."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()
