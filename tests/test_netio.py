import socket

import pytest

from discimage.netio import recv_exact, send_exact


class _TrickleSocket:
    """Hands out or accepts at most a few bytes per call."""

    def __init__(self, incoming=b"", step=3):
        self.incoming = incoming
        self.outgoing = bytearray()
        self.step = step
        self.flags_seen = []

    def recv(self, size, flags=0):
        self.flags_seen.append(flags)
        n = min(size, self.step)
        chunk, self.incoming = self.incoming[:n], self.incoming[n:]
        return chunk

    def send(self, data, flags=0):
        self.flags_seen.append(flags)
        chunk = bytes(data[: self.step])
        self.outgoing.extend(chunk)
        return len(chunk)


class _FailingSocket:
    def recv(self, size, flags=0):
        raise ConnectionResetError("reset")

    def send(self, data, flags=0):
        raise BrokenPipeError("broken")


def test_recv_exact_collects_short_reads():
    sock = _TrickleSocket(incoming=b"abcdefghij", step=3)
    assert recv_exact(sock, 10) == b"abcdefghij"


def test_recv_exact_stops_at_end_of_stream():
    sock = _TrickleSocket(incoming=b"abcd", step=3)
    assert recv_exact(sock, 10) == b"abcd"


def test_recv_exact_leaves_extra_data_unread():
    sock = _TrickleSocket(incoming=b"abcdef", step=4)
    assert recv_exact(sock, 5) == b"abcde"
    assert sock.incoming == b"f"


def test_recv_exact_zero_size_reads_nothing():
    sock = _TrickleSocket(incoming=b"abc")
    assert recv_exact(sock, 0) == b""
    assert sock.flags_seen == []


def test_recv_exact_passes_flags():
    sock = _TrickleSocket(incoming=b"xyz", step=1)
    recv_exact(sock, 3, 7)
    assert sock.flags_seen == [7, 7, 7]


def test_send_exact_writes_everything():
    sock = _TrickleSocket(step=2)
    assert send_exact(sock, b"hello world") == 11
    assert bytes(sock.outgoing) == b"hello world"


def test_send_exact_empty_data():
    sock = _TrickleSocket()
    assert send_exact(sock, b"") == 0
    assert sock.outgoing == bytearray()


def test_errors_propagate():
    with pytest.raises(ConnectionResetError):
        recv_exact(_FailingSocket(), 4)
    with pytest.raises(BrokenPipeError):
        send_exact(_FailingSocket(), b"data")


def test_round_trip_over_socketpair():
    left, right = socket.socketpair()
    with left, right:
        payload = bytes(range(256)) * 64
        assert send_exact(left, payload) == len(payload)
        assert recv_exact(right, len(payload)) == payload
        left.close()
        assert recv_exact(right, 16) == b""