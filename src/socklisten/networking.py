"""Low-level socket utility functions used by listeners."""

import os
import socket as _socket
import stat

from socket import AddressFamily, socket
from typing import Tuple, Union

from .addressing import Endpoint

__all__ = (
    "create_socket",
    "enable_tcp_no_delay",
    "format_socket_address",
    "get_socket_address",
    "get_socket_family",
    "is_socket_file",
    "remove_socket_file",
    "set_ipv6_only",
)


def get_socket_family(endpoint: Endpoint) -> AddressFamily:
    """Returns the address family of the socket needed to bind to the given
    endpoint.

    Raises:
        RuntimeError: if the endpoint is a Unix domain socket and the current
            platform does not support them
    """
    if endpoint.is_unix_domain:
        try:
            from socket import AF_UNIX
        except ImportError:
            raise RuntimeError(
                "UNIX domain sockets are not supported on this platform"
            ) from None
        return AF_UNIX
    elif endpoint.is_ipv6:
        return _socket.AF_INET6
    else:
        return _socket.AF_INET


def create_socket(family: AddressFamily, socket_type=_socket.SOCK_STREAM) -> socket:
    """Creates a blocking socket with the given family and type, with address
    reuse enabled.

    Parameters:
        family: the address family of the socket
        socket_type: the type of the socket (``socket.SOCK_STREAM`` for
            TCP sockets, ``socket.SOCK_DGRAM`` for UDP sockets)

    Returns:
        the newly created socket
    """
    sock = socket(family, socket_type)
    if hasattr(_socket, "SO_REUSEADDR"):
        # SO_REUSEADDR does not exist on Windows, but we don't really need
        # it on Windows either
        try:
            sock.setsockopt(_socket.SOL_SOCKET, _socket.SO_REUSEADDR, 1)
        except OSError:
            sock.close()
            raise
    return sock


def enable_tcp_no_delay(sock: socket, value: bool = True) -> None:
    """Enables or disables Nagle's algorithm on the given TCP socket."""
    sock.setsockopt(_socket.IPPROTO_TCP, _socket.TCP_NODELAY, 1 if value else 0)


def set_ipv6_only(sock: socket, value: bool) -> None:
    """Sets whether the given IPv6 socket accepts IPv6 connections only or
    also IPv4-mapped ones.
    """
    sock.setsockopt(_socket.IPPROTO_IPV6, _socket.IPV6_V6ONLY, 1 if value else 0)


def is_socket_file(path: str) -> bool:
    """Returns whether the given path exists and is itself a socket node.

    Symbolic links are not followed; a link pointing to a socket is not a
    socket.
    """
    try:
        return stat.S_ISSOCK(os.lstat(path).st_mode)
    except FileNotFoundError:
        return False


def remove_socket_file(path: str) -> bool:
    """Removes the socket node at the given path. Regular files, directories
    and anything that is not a socket are left alone.

    Returns:
        whether a socket node was removed
    """
    if not is_socket_file(path):
        return False

    try:
        os.unlink(path)
    except FileNotFoundError:
        return False

    return True


def get_socket_address(sock: socket) -> Union[str, Tuple[str, int]]:
    """Gets the address that the given socket is bound to.

    Parameters:
        sock: the socket for which we need its address

    Returns:
        the path of the socket for Unix domain sockets, the host and port
        where the socket is bound to otherwise
    """
    address = sock.getsockname()
    if isinstance(address, (str, bytes)):
        return os.fsdecode(address)

    host, port = address[:2]

    # Canonicalize the value of 'host'
    if host in ("0.0.0.0", "::"):
        host = ""

    return host, port


def format_socket_address(sock: socket, format: str = "{host}:{port}") -> str:
    """Formats the address that the given socket is bound to in the
    standard hostname-port format.

    Parameters:
        sock: the socket to format
        format: format string in brace-style that is used by
            ``str.format()``. The tokens ``{host}`` and ``{port}`` will be
            replaced by the hostname and port. Unix domain sockets are
            formatted as their path.

    Returns:
        str: a formatted representation of the address of the socket
    """
    address = get_socket_address(sock)
    if isinstance(address, str):
        return address

    host, port = address
    return format.format(host=host, port=port)
