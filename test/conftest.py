import socket

from pytest import fixture, skip


@fixture
def socket_path(tmp_path_factory):
    tmp_path = tmp_path_factory.mktemp("u")  # make it as short as possible
    return str(
        tmp_path / "t"
    )  # same here; on macOS, it is easy to hit the socket path length limit


@fixture
def ipv6():
    try:
        sock = socket.socket(socket.AF_INET6, socket.SOCK_STREAM)
    except OSError:
        skip("IPv6 is not available")
    else:
        sock.close()


@fixture
def anyio_backend():
    return "trio"
