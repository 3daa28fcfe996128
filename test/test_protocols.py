from pytest import fixture, raises

from socklisten.errors import InvalidProtocolError
from socklisten.protocols import (
    Echo,
    Http,
    ProtocolHandler,
    ProtocolRegistry,
    protocols,
    register_builtin_protocols,
)


class LineProtocol(ProtocolHandler):
    async def handle(self) -> None:
        pass


class NotAHandler:
    pass


@fixture
def registry():
    result = ProtocolRegistry()
    register_builtin_protocols(result)
    return result


def test_builtin_protocols():
    assert "http" in protocols
    assert "echo" in protocols
    assert protocols.names == ["echo", "http"]
    assert protocols.resolve("http") is Http
    assert protocols.resolve("echo") is Echo


def test_resolve_class_is_returned_as_is(registry):
    assert registry.resolve(LineProtocol) is LineProtocol
    assert registry.resolve(NotAHandler) is NotAHandler


def test_resolve_type_name(registry):
    assert registry.resolve("LineProtocol") is LineProtocol
    assert registry.resolve(f"{__name__}.LineProtocol") is LineProtocol
    assert registry.resolve("Http") is Http
    assert registry.resolve("socklisten.protocols.echo.Echo") is Echo


def test_resolve_registered_type_by_name(registry):
    with raises(InvalidProtocolError):
        registry.resolve("NotAHandler")

    registry.register("plain", NotAHandler)
    assert registry.resolve("plain") is NotAHandler
    assert registry.resolve("NotAHandler") is NotAHandler


def test_resolve_unknown(registry):
    with raises(InvalidProtocolError, match="gopher.*known protocols are: echo, http"):
        registry.resolve("gopher")

    with raises(InvalidProtocolError):
        registry.resolve("HTTP")

    with raises(InvalidProtocolError, match="use a class or a string"):
        registry.resolve(42)

    with raises(InvalidProtocolError):
        registry.resolve(None)


def test_resolve_ambiguous_type_name(registry):
    def make_handler():
        class Ambiguous(ProtocolHandler):
            async def handle(self) -> None:
                pass

        return Ambiguous

    first, second = make_handler(), make_handler()
    assert first is not second

    with raises(InvalidProtocolError, match="ambiguous"):
        registry.resolve("Ambiguous")


def test_register_as_decorator(registry):
    @registry.register("line")
    class Line(LineProtocol):
        pass

    assert registry.resolve("line") is Line

    registry.unregister("line")
    assert "line" not in registry


def test_use(registry):
    with registry.use(LineProtocol, "http"):
        assert registry.resolve("http") is LineProtocol
    assert registry.resolve("http") is Http

    with registry.use(LineProtocol, "line"):
        assert registry("line") is LineProtocol
    assert "line" not in registry


def test_handler_base_class_is_abstract():
    with raises(TypeError):
        ProtocolHandler(None)

    handler = Echo(None)
    assert handler.stream is None
    assert handler.listener is None
