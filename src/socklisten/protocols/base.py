"""Base class of protocol handlers."""

from abc import ABCMeta, abstractmethod
from trio.abc import Stream
from typing import Any, Optional

__all__ = ("ProtocolHandler",)


class ProtocolHandler(metaclass=ABCMeta):
    """Base class for objects that process a single connection accepted by
    a listener.

    A listener only stores the *type* of its protocol handler; the acceptor
    that accepts the connections creates a new handler instance for each
    incoming connection and then calls its `handle()` method.
    """

    def __init__(self, stream: Stream, listener: Optional[Any] = None):
        """Constructor.

        Parameters:
            stream: the Trio stream of the accepted connection
            listener: the listener that accepted the connection
        """
        self.stream = stream
        self.listener = listener

    @abstractmethod
    async def handle(self) -> None:
        """Processes the connection until the peer closes it or the handler
        decides to close it.
        """
        raise NotImplementedError
