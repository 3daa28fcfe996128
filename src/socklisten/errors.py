from socket import AddressFamily
from typing import Any, Optional

__all__ = (
    "AddressError",
    "BindError",
    "InvalidAddressError",
    "InvalidOptionError",
    "InvalidProtocolError",
    "ListenerClosedError",
    "ListenerError",
    "SocketCreationError",
)


ACCEPTED_ADDRESS_FORMATS = (
    "3000, *:3000, 0.0.0.0:3000, [::]:3000, /file.sock or unix:file.sock"
)


class ListenerError(RuntimeError):
    """Base class for listener-related errors."""

    pass


class AddressError(ListenerError):
    """Base class for addressing-related errors."""

    pass


class InvalidAddressError(AddressError):
    """Exception thrown when an address descriptor cannot be parsed into an
    endpoint.
    """

    def __init__(self, address: Any, reason: str = ""):
        """Constructor.

        Parameters:
            address: the address descriptor that the user tried to use
            reason: optional explanation of why the address was rejected
        """
        message = f"Invalid address {address!r}. "
        if reason:
            message += f"{reason}. "
        message += f"Accepted formats are: {ACCEPTED_ADDRESS_FORMATS}"
        super().__init__(message)
        self.address = address


class InvalidProtocolError(ListenerError):
    """Exception thrown when a protocol specifier cannot be resolved to a
    protocol handler type.
    """

    def __init__(self, protocol: Any, reason: str = ""):
        message = f"Invalid protocol: {protocol!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.protocol = protocol


class InvalidOptionError(ListenerError):
    """Exception thrown when a listener is configured with an unknown option
    or with an invalid option value.
    """

    pass


class SocketCreationError(ListenerError):
    """Exception thrown when the operating system refuses to create the socket
    of a listener or to apply one of its options.
    """

    def __init__(self, family: Optional[AddressFamily], message: str = ""):
        name = family.name if family is not None else "unknown family"
        super().__init__(message or f"Cannot create {name} socket")
        self.family = family


class BindError(ListenerError):
    """Exception thrown when a listener cannot bind to its address or cannot
    start listening on it.

    The original OS-level error is available in the ``__cause__`` attribute;
    its error code is also copied to the ``errno`` attribute.
    """

    def __init__(self, address: Any, cause: OSError):
        """Constructor.

        Parameters:
            address: the endpoint that the listener tried to bind to
            cause: the error reported by the operating system
        """
        detail = cause.strerror or str(cause)
        super().__init__(f"Cannot listen on {address}: {detail}")
        self.address = address
        self.errno = cause.errno


class ListenerClosedError(ListenerError):
    """Exception thrown when trying to use a listener that was closed already."""

    def __init__(self, message: str = ""):
        super().__init__(message or "Listener is closed")
