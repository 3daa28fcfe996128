"""Parsing of address descriptors into endpoints that a listener socket can
be bound to.

An address descriptor may be an integer (a bare port number) or a string in
one of the following forms::

    3000                 all interfaces, port 3000
    *:3000               all interfaces, port 3000
    0.0.0.0:3000         IPv4 address and port
    [::]:3000            IPv6 address and port
    /tmp/app.sock        Unix domain socket
    unix:/tmp/app.sock   Unix domain socket

Parsing is a pure function; no socket or filesystem is touched here.
"""

import re

from dataclasses import dataclass
from typing import Any, Tuple, Union

from .errors import InvalidAddressError

__all__ = ("Endpoint", "InetEndpoint", "UnixEndpoint", "parse_address")


MAX_PORT = 65535


@dataclass(frozen=True)
class UnixEndpoint:
    """Endpoint of a Unix domain socket, identified by a filesystem path."""

    path: str

    def __post_init__(self):
        if not self.path:
            raise ValueError("Unix socket path must not be empty")
        if "\x00" in self.path:
            raise ValueError("Unix socket path must not contain NUL bytes")

    @property
    def is_unix_domain(self) -> bool:
        return True

    @property
    def sockaddr(self) -> str:
        """The address to pass to ``socket.bind()``."""
        return self.path

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class InetEndpoint:
    """Endpoint of an IPv4 or IPv6 socket, identified by a host and a port.

    An empty host means that the socket will bind to all interfaces.
    """

    host: str
    port: int

    def __post_init__(self):
        if not 0 <= self.port <= MAX_PORT:
            raise ValueError(f"port must be between 0 and {MAX_PORT}")

    @property
    def is_ipv6(self) -> bool:
        return ":" in self.host

    @property
    def is_unix_domain(self) -> bool:
        return False

    @property
    def sockaddr(self) -> Tuple[str, int]:
        """The address to pass to ``socket.bind()``."""
        return self.host, self.port

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


Endpoint = Union[UnixEndpoint, InetEndpoint]


_UNIX_PATH = re.compile(r"(/.*)")
_UNIX_URL = re.compile(r"unix:(.*)")
_ANY_HOST = re.compile(r"(?:\*:)?([0-9]+)")
_IPV4 = re.compile(r"((?:[0-9]{1,3}\.){3}[0-9]{1,3}):([0-9]+)")
_IPV6 = re.compile(r"\[([a-fA-F0-9:]+)\]:([0-9]+)")


def _to_port(address: Any, value: Union[int, str]) -> int:
    try:
        port = int(value)
    except ValueError:
        raise InvalidAddressError(address, "invalid port number") from None
    if not 0 <= port <= MAX_PORT:
        raise InvalidAddressError(
            address, f"port must be between 0 and {MAX_PORT}"
        )
    return port


def parse_address(address: Union[int, str, Endpoint]) -> Endpoint:
    """Parses an address descriptor into an endpoint.

    Parameters:
        address: the address descriptor to parse; an integer port number,
            a string in one of the accepted formats, or an endpoint that was
            parsed earlier (returned as is)

    Returns:
        a UnixEndpoint_ if the descriptor refers to a Unix domain socket, an
        InetEndpoint_ otherwise

    Raises:
        InvalidAddressError: if the descriptor is not in any of the accepted
            formats or if the port number is out of range
    """
    if isinstance(address, (UnixEndpoint, InetEndpoint)):
        return address

    if isinstance(address, int) and not isinstance(address, bool):
        return InetEndpoint("", _to_port(address, address))

    if not isinstance(address, str):
        raise InvalidAddressError(address)

    match = _UNIX_PATH.fullmatch(address) or _UNIX_URL.fullmatch(address)
    if match:
        path = match.group(1)
        if not path:
            raise InvalidAddressError(address, "empty Unix socket path")
        if "\x00" in path:
            raise InvalidAddressError(address, "NUL byte in Unix socket path")
        return UnixEndpoint(path)

    match = _ANY_HOST.fullmatch(address)
    if match:
        return InetEndpoint("", _to_port(address, match.group(1)))

    match = _IPV4.fullmatch(address) or _IPV6.fullmatch(address)
    if match:
        host, port = match.groups()
        return InetEndpoint(host, _to_port(address, port))

    raise InvalidAddressError(address)
