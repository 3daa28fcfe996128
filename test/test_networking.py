import os
import socket

from socklisten.addressing import parse_address
from socklisten.networking import (
    create_socket,
    format_socket_address,
    get_socket_address,
    get_socket_family,
    is_socket_file,
    remove_socket_file,
)


def test_get_socket_family():
    assert get_socket_family(parse_address(80)) == socket.AF_INET
    assert get_socket_family(parse_address("1.2.3.4:80")) == socket.AF_INET
    assert get_socket_family(parse_address("[::]:80")) == socket.AF_INET6
    assert get_socket_family(parse_address("/tmp/x.sock")) == socket.AF_UNIX


def test_is_socket_file(socket_path, tmp_path):
    assert not is_socket_file(socket_path)

    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.bind(socket_path)
        assert is_socket_file(socket_path)
    finally:
        sock.close()

    link = str(tmp_path / "link")
    os.symlink(socket_path, link)
    assert not is_socket_file(link)

    regular = tmp_path / "regular"
    regular.write_text("data")
    assert not is_socket_file(str(regular))
    assert not is_socket_file(str(tmp_path))


def test_remove_socket_file(socket_path, tmp_path):
    assert not remove_socket_file(socket_path)

    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    sock.bind(socket_path)
    sock.close()

    assert remove_socket_file(socket_path)
    assert not os.path.exists(socket_path)

    regular = tmp_path / "regular"
    regular.write_text("data")
    assert not remove_socket_file(str(regular))
    assert regular.read_text() == "data"


def test_socket_address_formatting():
    sock = create_socket(socket.AF_INET)
    try:
        assert sock.getsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR) != 0

        sock.bind(("", 0))
        host, port = get_socket_address(sock)
        assert host == ""
        assert format_socket_address(sock) == f":{port}"
        assert format_socket_address(sock, "tcp://{host}:{port}") == f"tcp://:{port}"
    finally:
        sock.close()


def test_unix_socket_address_formatting(socket_path):
    sock = create_socket(socket.AF_UNIX)
    try:
        sock.bind(socket_path)
        assert get_socket_address(sock) == socket_path
        assert format_socket_address(sock) == socket_path
    finally:
        sock.close()
