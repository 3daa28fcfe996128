from .base import ProtocolHandler

__all__ = ("Http",)


class Http(ProtocolHandler):
    """Default handler for the ``http`` protocol.

    Requests are not parsed; every connection receives a
    ``501 Not Implemented`` response and is then closed. HTTP servers built
    on top of listeners register their own handler for the ``http`` name.
    """

    response = (
        b"HTTP/1.1 501 Not Implemented\r\n"
        b"Content-Length: 0\r\n"
        b"Connection: close\r\n"
        b"\r\n"
    )

    async def handle(self) -> None:
        async with self.stream:
            await self.stream.send_all(self.response)
