"""Listeners that turn address descriptors such as ``3000``,
``0.0.0.0:3000``, ``[::]:3000`` or ``unix:/tmp/app.sock`` into listening
sockets.

A listener resolves its address and its protocol handler type when it is
constructed, creates its socket lazily on first access, binds and listens
when `Listener.listen()` is called and releases the socket (removing the
Unix domain socket file, if any) when `Listener.close()` is called.
Accepting connections and running the protocol handlers is left to the
caller; `Listener.to_trio_listener()` hands the socket over to Trio.
"""

from .addressing import Endpoint, InetEndpoint, UnixEndpoint, parse_address
from .config import ListenerConfig
from .errors import (
    AddressError,
    BindError,
    InvalidAddressError,
    InvalidOptionError,
    InvalidProtocolError,
    ListenerClosedError,
    ListenerError,
    SocketCreationError,
)
from .factory import create_listener, create_listener_factory
from .listener import Listener, ListenerState
from .protocols import Echo, Http, ProtocolHandler, ProtocolRegistry, protocols
from .version import __version__

__all__ = (
    "AddressError",
    "BindError",
    "Echo",
    "Endpoint",
    "Http",
    "InetEndpoint",
    "InvalidAddressError",
    "InvalidOptionError",
    "InvalidProtocolError",
    "Listener",
    "ListenerClosedError",
    "ListenerConfig",
    "ListenerError",
    "ListenerState",
    "ProtocolHandler",
    "ProtocolRegistry",
    "SocketCreationError",
    "UnixEndpoint",
    "__version__",
    "create_listener",
    "create_listener_factory",
    "parse_address",
    "protocols",
)
