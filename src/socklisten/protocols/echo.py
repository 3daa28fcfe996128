from .base import ProtocolHandler

__all__ = ("Echo",)


class Echo(ProtocolHandler):
    """Protocol handler that sends back everything it receives."""

    async def handle(self) -> None:
        async with self.stream:
            while True:
                data = await self.stream.receive_some()
                if not data:
                    break
                await self.stream.send_all(data)
