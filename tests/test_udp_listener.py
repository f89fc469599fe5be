import socket
import time

import pytest

from trophysim.udp_listener import RawMessage, UdpListener, decode_integers


def _receive(listener, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        message = listener.listen()
        if message is not None:
            return message
        time.sleep(0.01)
    return None


def test_decode_integers_keeps_every_byte_unsigned():
    assert decode_integers(bytes(range(256))) == list(range(256))


def test_decode_integers_of_empty_data():
    assert decode_integers(b"") == []


def test_listen_without_packet_returns_none():
    with UdpListener(0) as listener:
        assert listener.listen() is None
        assert listener.received_packages == 0


def test_receives_a_packet_with_its_source():
    with UdpListener(0) as listener, socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as client:
        port = listener.address[1]
        client.sendto(b"\x01\xff\x05", ("127.0.0.1", port))
        message = _receive(listener)
        client_port = client.getsockname()[1]
        assert message == RawMessage(values=[1, 255, 5], source=f"127.0.0.1:{client_port}")
        assert listener.received_packages == 1


def test_counts_each_received_packet():
    with UdpListener(0) as listener, socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as client:
        port = listener.address[1]
        client.sendto(b"\x02\x00", ("127.0.0.1", port))
        client.sendto(b"\x02\x01", ("127.0.0.1", port))
        first = _receive(listener)
        second = _receive(listener)
        assert [first.values, second.values] == [[2, 0], [2, 1]]
        assert listener.received_packages == 2


def test_runs_on_compares_the_configured_port():
    with UdpListener(0) as listener:
        assert listener.runs_on(0)
        assert not listener.runs_on(3413)


def test_port_in_use_raises():
    with UdpListener(0) as first:
        port = first.address[1]
        with pytest.raises(OSError, match="already in use"):
            UdpListener(port)