"""Interpretation of realtime LED protocol packets."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from trophysim.led import Led
from trophysim.timefmt import format_time
from trophysim.udp_listener import RawMessage

# The timeout byte value senders use for "no timeout".
NO_TIMEOUT = 255


class RealtimeProtocol(Enum):
    """Supported realtime protocols, valued by their header byte."""

    # <2 header bytes>; INDEX R G B INDEX R G B ...
    WARLS = 1
    # <2 header bytes>; R G B R G B ...
    DRGB = 2
    # <2 header bytes> <2 start index bytes>; R G B R G B ...
    DNRGB = 4


@dataclass(frozen=True)
class IndexStride:
    """Where the LED data starts and how many bytes each LED takes."""

    step: int
    start: int


PROTOCOL_STRIDE: dict[RealtimeProtocol, IndexStride] = {
    RealtimeProtocol.WARLS: IndexStride(step=4, start=2),
    RealtimeProtocol.DRGB: IndexStride(step=3, start=2),
    RealtimeProtocol.DNRGB: IndexStride(step=3, start=4),
}


@dataclass
class ProtocolMessage:
    """A packet that was understood: the colours it sets per LED index."""

    protocol: RealtimeProtocol
    timeout_sec: int | None
    mapping: dict[int, Led] = field(default_factory=dict)
    source: str = ""
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class UnreadableMessage:
    """A packet that could not be understood, and why."""

    reason: str
    original: RawMessage
    timestamp: datetime = field(default_factory=datetime.now)

    def debug_line(self) -> str:
        return f"[UDP MESSAGE][{format_time(self.timestamp)}] Unreadable. {self.reason}"


def int16_from(high_byte: int, low_byte: int) -> int:
    """A 16-bit unsigned integer from its two bytes."""
    return ((high_byte << 8) | low_byte) & 0xFFFF


def as_protocol(number: int) -> RealtimeProtocol | None:
    """The protocol of a header byte, or None if it is not supported."""
    try:
        return RealtimeProtocol(number)
    except ValueError:
        return None


def interpret(message: RawMessage) -> ProtocolMessage | UnreadableMessage:
    """Turn a raw packet into LED colours per index."""
    values = message.values
    if len(values) < 2:
        return UnreadableMessage("Message too short (needs 2 header bytes)", message)

    protocol = as_protocol(values[0])
    if protocol is None:
        return UnreadableMessage(f"Unsupported Protocol: {values[0]}", message)

    timeout: int | None = values[1]
    if timeout < 0 or timeout >= NO_TIMEOUT:
        timeout = None

    stride = PROTOCOL_STRIDE[protocol]
    first_index = 0
    if protocol is RealtimeProtocol.DNRGB and len(values) > stride.start:
        first_index = int16_from(values[2], values[3])

    mapping: dict[int, Led] = {}
    for i in range(stride.start, len(values), stride.step):
        if protocol is RealtimeProtocol.WARLS:
            led_index, colour_start = values[i], i + 1
        else:
            led_index = (i - stride.start) // stride.step + first_index
            colour_start = i
        try:
            led = Led.from_values(values, colour_start)
        except (IndexError, ValueError):
            return UnreadableMessage(f"Message ends inside the LED at byte {i}", message)
        mapping[led_index & 0xFF] = led

    return ProtocolMessage(
        protocol=protocol, timeout_sec=timeout, mapping=mapping, source=message.source
    )