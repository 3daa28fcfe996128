"""Protocol handler types that process the connections accepted on a
listener, and the registry that maps symbolic protocol names to them.
"""

from .base import ProtocolHandler
from .echo import Echo
from .http import Http
from .registry import ProtocolRegistry, protocols, register_builtin_protocols

__all__ = (
    "Echo",
    "Http",
    "ProtocolHandler",
    "ProtocolRegistry",
    "protocols",
    "register_builtin_protocols",
)
