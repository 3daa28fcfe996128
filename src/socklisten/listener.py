"""Listener class that owns a listening socket bound to an endpoint."""

import logging

from blinker import Signal
from enum import Enum
from socket import AF_INET6, AddressFamily, SocketType
from trio import Event, SocketListener
from trio.lowlevel import in_trio_run
from trio.socket import SocketType as TrioSocketType, from_stdlib_socket
from typing import Any, Mapping, Optional, Tuple, Union

from .addressing import Endpoint, parse_address
from .config import ListenerConfig
from .errors import (
    BindError,
    InvalidOptionError,
    ListenerClosedError,
    SocketCreationError,
)
from .networking import (
    create_socket,
    enable_tcp_no_delay,
    get_socket_address,
    get_socket_family,
    remove_socket_file,
    set_ipv6_only,
)
from .protocols import ProtocolRegistry, protocols

__all__ = ("Listener", "ListenerState")


class ListenerState(Enum):
    UNBOUND = "UNBOUND"
    CREATED = "CREATED"
    LISTENING = "LISTENING"
    CLOSED = "CLOSED"


log = logging.getLogger(__name__.rpartition(".")[0])


class Listener:
    """A socket bound to an endpoint, together with its configuration and the
    type of the protocol handler that serves the connections accepted on it.

    Listener objects may be in one of the following four states:

        - ``UNBOUND``: no socket was created yet

        - ``CREATED``: the socket exists and its options are applied, but it
          is not bound yet

        - ``LISTENING``: the socket is bound and accepts incoming connections

        - ``CLOSED``: the socket was released; this state is terminal

    The address and the protocol are resolved when the listener is
    constructed; an invalid address or an unknown protocol is reported
    immediately. The socket itself is created on first access to `socket()`.

    Listeners are meant to be set up and torn down from a single thread.
    `socket()` does not guard against concurrent first use, and no two
    listeners may use the same Unix socket path at the same time.
    """

    listening = Signal(
        doc="Signal sent after the listener started listening for incoming connections."
    )
    closed = Signal(doc="Signal sent after the listener was closed.")
    state_changed = Signal(
        doc="""\
        Signal sent whenever the state of the listener changes.

        Parameters:
            new_state: the new state
            old_state: the old state
        """
    )

    _endpoint: Endpoint
    _config: ListenerConfig
    _protocol_handler_type: type
    _socket: Optional[SocketType]
    _trio_socket: Optional[TrioSocketType]

    def __init__(
        self,
        address: Union[int, str, Endpoint],
        config: Union[ListenerConfig, Mapping[str, Any], None] = None,
        *,
        registry: Optional[ProtocolRegistry] = None,
        **options,
    ):
        """Constructor.

        Parameters:
            address: the address descriptor of the listener; see
                `parse_address()` for the accepted formats
            config: the configuration of the listener, or a mapping of
                options; defaults are used for every option that is not
                specified here
            registry: the protocol registry used to resolve the protocol
                specifier; defaults to the global protocol registry
            options: additional options that override the ones in ``config``;
                see ListenerConfig_ for the recognized options

        Raises:
            InvalidAddressError: if the address cannot be parsed
            InvalidOptionError: if an option is unknown or invalid
            InvalidProtocolError: if the protocol cannot be resolved
        """
        self._endpoint = parse_address(address)
        if config is None or isinstance(config, Mapping):
            config = ListenerConfig.from_options(config)
        elif not isinstance(config, ListenerConfig):
            raise InvalidOptionError(
                f"config must be a ListenerConfig or a mapping, got {config!r}"
            )
        self._config = config.replace(options)
        self._protocol_handler_type = (registry or protocols).resolve(
            self._config.protocol
        )

        self._socket = None
        self._trio_socket = None
        self._state = ListenerState.UNBOUND

        self._listening_event = Event()
        self._closed_event = Event()

    @classmethod
    def from_options(
        cls, address: Union[int, str, Endpoint], options: Mapping[str, Any]
    ) -> "Listener":
        """Creates a listener from an address descriptor and a mapping of
        options.
        """
        return cls(address, ListenerConfig.from_options(options))

    @property
    def address(self) -> Union[str, Tuple[str, int], None]:
        """The address that the socket is actually bound to, or ``None`` if
        the listener is not listening. Useful to find out the port that was
        chosen by the OS when the listener was created with port zero.
        """
        if self._state is ListenerState.LISTENING and self._socket is not None:
            return get_socket_address(self._socket)
        else:
            return None

    @property
    def config(self) -> ListenerConfig:
        """The configuration of the listener."""
        return self._config

    @property
    def endpoint(self) -> Endpoint:
        """The endpoint that the listener binds to."""
        return self._endpoint

    @property
    def host(self) -> Optional[str]:
        """The host that the socket binds to; ``None`` for Unix domain
        sockets.
        """
        return None if self.is_unix_domain else self._endpoint.host

    @property
    def is_closed(self) -> bool:
        return self._state is ListenerState.CLOSED

    @property
    def is_listening(self) -> bool:
        return self._state is ListenerState.LISTENING

    @property
    def is_unix_domain(self) -> bool:
        """Returns whether the listener binds to a Unix domain socket. Peers
        of Unix domain sockets have no remote host and port.
        """
        return self._endpoint.is_unix_domain

    @property
    def path(self) -> Optional[str]:
        """The path of the Unix domain socket; ``None`` for IPv4 and IPv6
        listeners.
        """
        return self._endpoint.path if self.is_unix_domain else None

    @property
    def port(self) -> Optional[int]:
        """The port that the socket binds to; ``None`` for Unix domain
        sockets.
        """
        return None if self.is_unix_domain else self._endpoint.port

    @property
    def protocol(self) -> str:
        """Short name of the protocol handler type."""
        klass = self._protocol_handler_type
        return getattr(klass, "__qualname__", klass.__name__).rpartition(".")[2]

    @property
    def protocol_handler_type(self) -> type:
        """The protocol handler type that should be instantiated for each
        connection accepted on this listener.
        """
        return self._protocol_handler_type

    @property
    def socket_family(self) -> AddressFamily:
        """The address family of the socket of this listener."""
        return get_socket_family(self._endpoint)

    @property
    def state(self) -> ListenerState:
        """The state of the listener."""
        return self._state

    def _set_state(self, new_state: ListenerState) -> None:
        """Sets the state of the listener to a new value and sends the
        appropriate signals.
        """
        old_state = self._state
        if new_state == old_state:
            return

        self._state = new_state

        self.state_changed.send(self, old_state=old_state, new_state=new_state)

        # Both states are entered at most once since CLOSED is terminal
        if new_state is ListenerState.LISTENING:
            self._listening_event.set()
            self.listening.send(self)
        elif new_state is ListenerState.CLOSED:
            self._closed_event.set()
            self.closed.send(self)

    def socket(self) -> SocketType:
        """Returns the socket of the listener, creating it and applying the
        socket options if needed.

        Repeated calls return the same socket.

        Raises:
            ListenerClosedError: if the listener was closed already
            SocketCreationError: if the socket cannot be created or one of
                its options cannot be applied
        """
        if self._socket is not None:
            return self._socket

        if self._state is ListenerState.CLOSED:
            raise ListenerClosedError()

        try:
            family = self.socket_family
        except RuntimeError as ex:
            raise SocketCreationError(None, str(ex)) from ex

        try:
            sock = create_socket(family)
        except OSError as ex:
            raise SocketCreationError(family) from ex

        try:
            if not self.is_unix_domain:
                enable_tcp_no_delay(sock, self._config.tcp_no_delay)
                if family == AF_INET6:
                    set_ipv6_only(sock, self._config.ipv6_only)
        except OSError as ex:
            sock.close()
            raise SocketCreationError(
                family, f"Cannot configure {family.name} socket"
            ) from ex

        log.debug("Created {0} socket for {1}".format(family.name, self._endpoint))

        self._socket = sock
        self._set_state(ListenerState.CREATED)

        return sock

    def listen(self) -> None:
        """Binds the socket to the endpoint of the listener and starts
        listening for incoming connections. No-op if the listener is
        listening already.

        A stale Unix domain socket left at the path of the endpoint is
        removed first. Regular files and directories are never removed; the
        bind fails in that case.

        Raises:
            BindError: if the socket cannot be bound or cannot listen
            ListenerClosedError: if the listener was closed already
            SocketCreationError: if the socket cannot be created
        """
        if self._state is ListenerState.LISTENING:
            return

        sock = self.socket()
        self._delete_socket_file()

        try:
            sock.bind(self._endpoint.sockaddr)
            sock.listen(self._config.backlog)
        except OSError as ex:
            raise BindError(self._endpoint, ex) from ex

        self._set_state(ListenerState.LISTENING)
        log.info(f"Listening: {self}")

    def close(self) -> None:
        """Closes the socket of the listener and removes the Unix domain
        socket file, if any. No-op if the listener is closed already.
        """
        if self._state is ListenerState.CLOSED:
            return

        if self._trio_socket is not None and in_trio_run():
            # Wakes up Trio tasks blocked on the socket
            self._trio_socket.close()
        self._trio_socket = None

        if self._socket is not None:
            self._socket.close()
            self._socket = None

        self._delete_socket_file()

        self._set_state(ListenerState.CLOSED)
        log.info(f"Closed: {self}")

    def to_trio_listener(self) -> SocketListener:
        """Wraps the socket of the listener in a Trio socket listener so it
        can be passed to `trio.serve_listeners()` or accepted from directly.

        The Trio listener shares the socket with this listener; closing
        either of them closes the socket. `close()` called from within Trio
        wakes up tasks blocked in `accept()` on the returned listener. When
        the listener is closed from outside Trio, cancel the tasks using the
        Trio listener first.

        Raises:
            RuntimeError: if the listener is not listening
        """
        if self._state is not ListenerState.LISTENING:
            raise RuntimeError(
                "You must call listen() on a {!r} before wrapping it".format(
                    self.__class__
                )
            )
        if self._trio_socket is None:
            self._trio_socket = from_stdlib_socket(self.socket())
        return SocketListener(self._trio_socket)

    async def wait_until_closed(self) -> None:
        """Blocks the current task until the listener becomes closed."""
        await self._closed_event.wait()

    async def wait_until_listening(self) -> None:
        """Blocks the current task until the listener starts listening."""
        await self._listening_event.wait()

    def _delete_socket_file(self) -> None:
        if not self.is_unix_domain:
            return

        path = self._endpoint.path
        if remove_socket_file(path):
            log.info(f"Removed socket file {path}")

    def __enter__(self) -> "Listener":
        self.listen()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def __repr__(self) -> str:
        return "<{0} {1!r} {2}>".format(
            self.__class__.__name__, str(self), self._state.value
        )

    def __str__(self) -> str:
        return f"{self.protocol} on {self._endpoint}"
