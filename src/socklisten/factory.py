from functools import partial
from typing import Union

from .addressing import Endpoint
from .listener import Listener

__all__ = ("create_listener", "create_listener_factory")


def create_listener(address: Union[int, str, Endpoint], **options) -> Listener:
    """Creates a listener for the given address descriptor, configured with
    the given options.
    """
    return Listener(address, **options)


def create_listener_factory(*args, **kwds):
    """Returns a function that creates a new, unbound listener with the
    given address and options each time it is called without arguments.
    """
    return partial(create_listener, *args, **kwds)
