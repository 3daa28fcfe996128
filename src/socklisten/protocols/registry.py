"""Registry that resolves protocol specifiers to protocol handler types.

See :meth:`ProtocolRegistry.resolve()`_ for the accepted specifier formats.
"""

from contextlib import contextmanager
from functools import partial
from typing import Any, Dict, Iterator, List, Optional, Set

from ..errors import InvalidProtocolError

from .base import ProtocolHandler

__all__ = ("ProtocolRegistry", "protocols", "register_builtin_protocols")


def _all_subclasses(klass: type) -> Set[type]:
    result = set()
    queue = [klass]
    while queue:
        for subclass in queue.pop().__subclasses__():
            if subclass not in result:
                result.add(subclass)
                queue.append(subclass)
    return result


def _names_of(klass: type) -> Set[str]:
    qualname = getattr(klass, "__qualname__", klass.__name__)
    return {klass.__name__, qualname, f"{klass.__module__}.{qualname}"}


class ProtocolRegistry:
    """Registry mapping short symbolic protocol names (like ``http``) to
    protocol handler types.
    """

    _registry: Dict[str, type]
    """Dictionary mapping symbolic names to protocol handler types."""

    def __init__(self):
        """Constructor."""
        self._registry = {}

    @property
    def names(self) -> List[str]:
        """Returns the sorted list of registered symbolic names."""
        return sorted(self._registry)

    def find_by_type_name(self, name: str) -> Optional[type]:
        """Finds a known protocol handler type by its name.

        Known types are the ones registered in this registry and all the
        subclasses of ProtocolHandler_. The name may be the fully qualified
        name of the type (module name and qualified name, separated by a
        dot), its qualified name or its bare class name.

        Returns:
            the type with the given name or ``None`` if there is no such type

        Raises:
            InvalidProtocolError: if more than one known type matches the name
        """
        candidates = set(self._registry.values()) | _all_subclasses(ProtocolHandler)
        matches = [klass for klass in candidates if name in _names_of(klass)]
        if len(matches) > 1:
            raise InvalidProtocolError(name, "ambiguous type name")
        return matches[0] if matches else None

    def register(self, name: str, klass: Optional[type] = None):
        """Registers the given protocol handler type with the given symbolic
        name, or returns a decorator that will register an arbitrary class
        with the given name (if no class is specified).

        Overwrites the existing type with the same name when already
        registered.

        Parameters:
            name: the symbolic name of the protocol
            klass: the protocol handler type

        Returns:
            when ``klass`` is not ``None``, returns the class itself. When
            ``klass`` is ``None``, returns a decorator that can be applied
            on a class to register it with the given name in this registry.
        """
        if klass is None:
            return partial(self.register, name)
        else:
            self._registry[name] = klass
            return klass

    def resolve(self, specifier: Any) -> type:
        """Resolves a protocol specifier to a protocol handler type.

        The specifier may be:

        - a class, which is returned as is;

        - a registered symbolic name such as ``http``;

        - the name of a known protocol handler type (see
          `find_by_type_name()`_).

        Raises:
            InvalidProtocolError: if the specifier cannot be resolved
        """
        if isinstance(specifier, type):
            return specifier

        if not isinstance(specifier, str):
            raise InvalidProtocolError(specifier, "use a class or a string")

        klass = self._registry.get(specifier)
        if klass is None:
            klass = self.find_by_type_name(specifier)
        if klass is None:
            raise InvalidProtocolError(
                specifier,
                "known protocols are: {0}".format(", ".join(self.names) or "none"),
            )

        return klass

    def unregister(self, name: str) -> None:
        """Unregisters the protocol handler type registered with the given
        symbolic name.
        """
        del self._registry[name]

    @contextmanager
    def use(self, klass: type, name: str) -> Iterator[None]:
        """Context manager that temporarily registers the given class with the
        given name and unregisters it when the context is exited.

        If the name is already taken by another class, the old class will be
        restored upon exiting the context.
        """
        old_klass = self._registry.get(name)
        try:
            self.register(name, klass)
            yield
        finally:
            self.unregister(name)
            if old_klass is not None:
                self.register(name, old_klass)

    def __contains__(self, name: str) -> bool:
        return name in self._registry

    def __call__(self, specifier: Any) -> type:
        """Forwards the invocation to the `resolve()`_ method."""
        return self.resolve(specifier)


def register_builtin_protocols(registry: ProtocolRegistry) -> None:
    """Registers the protocol handlers that come with the `protocols` module
    in the given registry.

    Currently registered protocols are:

    - `echo`: sends back everything it receives
    - `http`: placeholder HTTP handler that responds with 501 Not Implemented
    """
    from .echo import Echo
    from .http import Http

    registry.register("echo", Echo)
    registry.register("http", Http)


protocols = ProtocolRegistry()
"""Singleton protocol registry"""

register_builtin_protocols(protocols)
