"""Configuration object of listeners."""

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional

from .errors import InvalidOptionError

__all__ = ("ListenerConfig",)


DEFAULT_BACKLOG = 1024
DEFAULT_PROTOCOL = "http"


@dataclass(frozen=True)
class ListenerConfig:
    """Immutable set of options that determine how the socket of a listener
    is configured and which protocol handler serves its connections.
    """

    backlog: int = DEFAULT_BACKLOG
    """Maximum number of pending connections waiting to be accepted."""

    protocol: Any = DEFAULT_PROTOCOL
    """Protocol specifier; a handler class, a type name or a symbolic name."""

    tcp_no_delay: bool = True
    """Whether to disable Nagle's algorithm; ignored for Unix domain sockets."""

    ipv6_only: bool = False
    """Whether an IPv6 socket refuses IPv4-mapped connections; ignored for
    IPv4 and Unix domain sockets.
    """

    def __post_init__(self):
        if (
            not isinstance(self.backlog, int)
            or isinstance(self.backlog, bool)
            or self.backlog <= 0
        ):
            raise InvalidOptionError(
                f"backlog must be a positive integer, got {self.backlog!r}"
            )

    @classmethod
    def from_options(
        cls, options: Optional[Mapping[str, Any]] = None, **kwds
    ) -> "ListenerConfig":
        """Creates a configuration object from a mapping of options and/or
        keyword arguments. Options not given keep their default values.

        Raises:
            InvalidOptionError: if an option is not recognized or its value
                is invalid
        """
        return cls().replace(options, **kwds)

    def replace(
        self, options: Optional[Mapping[str, Any]] = None, **kwds
    ) -> "ListenerConfig":
        """Returns a copy of this configuration with some of the options
        replaced.

        Raises:
            InvalidOptionError: if an option is not recognized or its value
                is invalid
        """
        merged = dict(options or {})
        merged.update(kwds)

        known = {field.name for field in fields(self)}
        unknown = sorted(str(key) for key in merged if key not in known)
        if unknown:
            raise InvalidOptionError(
                "Unknown listener option(s): {0}; recognized options are: {1}".format(
                    ", ".join(unknown), ", ".join(sorted(known))
                )
            )

        return replace(self, **merged) if merged else self
