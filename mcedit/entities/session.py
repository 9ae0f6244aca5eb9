"""
Protocol session entity.
"""


class Session:
    """
    State of one protocol conversation.

    The session starts uninitialized and moves to initialized exactly once, when an
    ``initialize`` request is handled. There is no way back.
    """

    def __init__(self):
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def mark_initialized(self) -> None:
        self._initialized = True
