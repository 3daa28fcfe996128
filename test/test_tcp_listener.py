from pytest import mark, raises
from trio import (
    ClosedResourceError,
    Event,
    fail_after,
    open_nursery,
    open_tcp_stream,
    serve_listeners,
)
from trio.testing import wait_all_tasks_blocked

from socklisten import Listener


async def receive_all(stream):
    response = []
    while True:
        chunk = await stream.receive_some()
        if chunk:
            response.append(chunk)
        else:
            break
    return b"".join(response)


async def serve(listener, *, task_status):
    async def handler(stream):
        await listener.protocol_handler_type(stream, listener).handle()

    await serve_listeners(
        handler, [listener.to_trio_listener()], task_status=task_status
    )


@mark.anyio
async def test_tcp_listener_echo():
    listener = Listener("127.0.0.1:0", protocol="echo")
    listener.listen()
    _, port = listener.address

    async def _sender(event):
        stream = await open_tcp_stream("127.0.0.1", port)
        async with stream:
            await stream.send_all(b"hello world")
            await stream.send_eof()
            assert await receive_all(stream) == b"hello world"
        event.set()

    try:
        with fail_after(10):
            async with open_nursery() as nursery:
                await nursery.start(serve, listener)

                events = []
                for _ in range(3):
                    event = Event()
                    nursery.start_soon(_sender, event)
                    events.append(event)

                for event in events:
                    await event.wait()

                nursery.cancel_scope.cancel()
    finally:
        listener.close()


@mark.anyio
async def test_tcp_listener_default_http_handler():
    listener = Listener("127.0.0.1:0")
    listener.listen()
    _, port = listener.address

    try:
        with fail_after(10):
            async with open_nursery() as nursery:
                await nursery.start(serve, listener)

                stream = await open_tcp_stream("127.0.0.1", port)
                async with stream:
                    response = await receive_all(stream)

                assert response.startswith(b"HTTP/1.1 501 Not Implemented\r\n")

                nursery.cancel_scope.cancel()
    finally:
        listener.close()


@mark.anyio
async def test_wait_until_listening_and_closed():
    listener = Listener("127.0.0.1:0")
    states = []

    async def _waiter():
        await listener.wait_until_listening()
        states.append("listening")
        await listener.wait_until_closed()
        states.append("closed")

    with fail_after(10):
        async with open_nursery() as nursery:
            nursery.start_soon(_waiter)
            await wait_all_tasks_blocked()
            assert states == []

            listener.listen()
            await wait_all_tasks_blocked()
            assert states == ["listening"]

            listener.close()

    assert states == ["listening", "closed"]


@mark.anyio
async def test_close_wakes_up_pending_accept():
    listener = Listener("127.0.0.1:0")
    listener.listen()
    trio_listener = listener.to_trio_listener()
    woken = Event()

    async def _acceptor():
        with raises(ClosedResourceError):
            await trio_listener.accept()
        woken.set()

    with fail_after(10):
        async with open_nursery() as nursery:
            nursery.start_soon(_acceptor)
            await wait_all_tasks_blocked()
            assert not woken.is_set()

            listener.close()
            await woken.wait()

    assert listener.is_closed
