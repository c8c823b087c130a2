"""Socket helpers that transfer an exact number of bytes."""

from __future__ import annotations

import socket


def recv_exact(sock: socket.socket, size: int, flags: int = 0) -> bytes:
    """Receive up to ``size`` bytes, looping over short reads.

    Stops early only when the peer closes the connection; the returned
    data is then shorter than ``size``. Socket errors propagate.
    """
    chunks: list[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = sock.recv(remaining, flags)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def send_exact(sock: socket.socket, data: bytes, flags: int = 0) -> int:
    """Send all of ``data``, looping over short writes.

    Returns the number of bytes sent, which is less than ``len(data)``
    only if the socket stops accepting data. Socket errors propagate.
    """
    view = memoryview(data)
    total = 0
    while total < len(view):
        sent = sock.send(view[total:], flags)
        if sent <= 0:
            break
        total += sent
    return total