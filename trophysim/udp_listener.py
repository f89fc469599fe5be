"""Non-blocking reception of UDP packets carrying LED data."""

from __future__ import annotations

import socket
from dataclasses import dataclass

DEFAULT_PORT = 3413
# UDP message size as limited by the realtime protocol senders.
MAX_MESSAGE_SIZE = 1024


@dataclass
class RawMessage:
    """The bytes of one received packet, as integers, and who sent it."""

    values: list[int]
    source: str


def decode_integers(data: bytes) -> list[int]:
    """Each byte of ``data`` as an unsigned integer."""
    return list(data)


class UdpListener:
    """Listens on an IPv4 UDP port without ever blocking."""

    def __init__(self, port: int = DEFAULT_PORT) -> None:
        self.port = port
        self.received_packages = 0
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            self._socket.bind(("0.0.0.0", port))
        except (OSError, OverflowError) as error:
            self._socket.close()
            raise OSError(
                f"Socket cannot listen under port {port}, is it already in use?"
            ) from error
        self._socket.setblocking(False)
        self._closed = False
        print(f"[Socket] Listening for UDP packets on port {port}")

    @property
    def address(self) -> tuple[str, int]:
        """The local address the socket is bound to."""
        return self._socket.getsockname()

    def listen(self) -> RawMessage | None:
        """The next waiting packet, or None if there is none."""
        try:
            data, (host, port) = self._socket.recvfrom(MAX_MESSAGE_SIZE)
        except (BlockingIOError, InterruptedError, ConnectionResetError):
            return None
        self.received_packages += 1
        return RawMessage(values=decode_integers(data), source=f"{host}:{port}")

    def runs_on(self, port: int) -> bool:
        return self.port == port

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._socket.close()
        print(f"[Socket] Stopped listening on port {self.port}")

    def __enter__(self) -> UdpListener:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()