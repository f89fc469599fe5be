"""Listening to the live view of an LED controller over a websocket."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

import websocket

from trophysim.geometry import Size
from trophysim.led import Led
from trophysim.timefmt import format_time

START_MESSAGE = '{"lv": true}'
_JOIN_SECONDS = 0.1


class ConnectionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass
class LiveviewMessage:
    """One live view frame: its header, dimensions and colours."""

    header: str
    version: int
    size: Size = field(default_factory=Size)
    colors: list[Led] = field(default_factory=list)
    error: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    def formatted_time(self) -> str:
        return format_time(self.timestamp)


def interpret_liveview(message: bytes | str) -> LiveviewMessage:
    """Parse a live view frame; problems are reported in ``error``."""
    data = message.encode("utf-8") if isinstance(message, str) else bytes(message)
    header = chr(data[0]) if data else "\0"
    version = data[1] if len(data) > 1 else 0
    result = LiveviewMessage(header=header, version=version)
    if header != "L":
        result.error = 'First Byte has to be "L" (76)'
        return result

    if version == 1:
        result.size = Size(len(data) - 2, 1)
        start = 2
    elif version == 2:
        if len(data) < 4:
            result.error = "Message too short for its size bytes"
            return result
        result.size = Size(data[2], data[3])
        start = 4
    else:
        result.error = "Version Byte is not known"
        return result

    for i in range(start, len(data), 3):
        try:
            result.colors.append(Led.from_values(data, i))
        except (IndexError, ValueError):
            result.error = f"Incomplete colour at byte {i}"
            break
    return result


def _log(message: str) -> None:
    print(f"[WebSocketListener][{format_time()}] {message}")


class WebSocketListener:
    """Connects to ``ws://<endpoint>`` in a thread and queues live view frames."""

    def __init__(self, endpoint: str) -> None:
        self._endpoint = ""
        self._queue: deque[LiveviewMessage] = deque()
        self._queue_lock = threading.Lock()
        self._state = ConnectionState.DISCONNECTED
        self._has_error = False
        self._app: websocket.WebSocketApp | None = None
        self._thread: threading.Thread | None = None
        self.connect(endpoint)

    def connection_state(self) -> ConnectionState:
        return self._state

    def connect(self, endpoint: str) -> None:
        """Drop any current connection and start connecting to ``endpoint``."""
        if self._thread is not None or self._state is not ConnectionState.DISCONNECTED:
            self.disconnect()
        self._endpoint = endpoint
        url = f"ws://{endpoint}"
        self._state = ConnectionState.CONNECTING
        app = websocket.WebSocketApp(
            url,
            on_open=self._on_open,
            on_message=self._on_message,
            on_error=self._on_error,
            on_close=self._on_close,
            on_ping=lambda _ws, _data: _log("Ping"),
            on_pong=lambda _ws, _data: _log("Pong"),
            on_cont_message=lambda _ws, _data, _final: _log("Fragment"),
        )
        self._app = app
        self._thread = threading.Thread(target=self._run, args=(app, url), daemon=True)
        self._thread.start()

    def disconnect(self) -> None:
        """Close the connection and wait for its thread to end."""
        app, thread = self._app, self._thread
        if app is not None and thread is not None:
            while thread.is_alive():
                app.close()
                thread.join(_JOIN_SECONDS)
        self._app = None
        self._thread = None
        self._state = ConnectionState.DISCONNECTED
        self._has_error = False

    def listen(self) -> LiveviewMessage | None:
        """The oldest queued frame, if connected and one is waiting."""
        if self._state is not ConnectionState.CONNECTED:
            return None
        with self._queue_lock:
            return self._queue.popleft() if self._queue else None

    def is_running_under(self, endpoint: str) -> bool:
        return self._state is ConnectionState.CONNECTED and endpoint == self._endpoint

    def _run(self, app: websocket.WebSocketApp, url: str) -> None:
        _log(f"Initiating Websocket under {url}")
        app.run_forever()
        if app is self._app:
            self._state = ConnectionState.DISCONNECTED
        _log("Stopped listening.")

    def _on_open(self, ws: websocket.WebSocketApp) -> None:
        _log("Open")
        if ws is not self._app:
            return
        self._state = ConnectionState.CONNECTED
        ws.send(START_MESSAGE)
        _log("Listening.")

    def _on_message(self, ws: websocket.WebSocketApp, message: bytes | str) -> None:
        frame = interpret_liveview(message)
        with self._queue_lock:
            self._queue.append(frame)

    def _on_error(self, ws: websocket.WebSocketApp, error: Exception) -> None:
        _log(f"Error: {error}")
        if ws is self._app:
            self._has_error = True

    def _on_close(self, ws: websocket.WebSocketApp, status: int | None, reason: str | None) -> None:
        _log("Close")