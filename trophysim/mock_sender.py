"""A test sender that plays LED patterns over UDP in realtime protocol packets."""

from __future__ import annotations

import argparse
import math
import socket
import sys
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

FIRST_LOGO_INDEX = 0
N_LOGO = 106
FIRST_BASE_INDEX = N_LOGO
N_BASE = 64
N_SINGLE = 2

WARLS_HEADER = 1
DRGB_HEADER = 2

TIMEOUT_SEC = 255

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 3413
DEFAULT_PATTERN = "logoblink"
DEFAULT_REPEATS = 10


def _byte(value: float) -> int:
    """Truncate a number to an integer and wrap it into one unsigned byte."""
    return int(value) & 0xFF


@dataclass
class Rgb:
    """A colour whose components are wrapped into single bytes."""

    r: int = 0
    g: int = 0
    b: int = 0

    def __post_init__(self) -> None:
        self.r = _byte(self.r)
        self.g = _byte(self.g)
        self.b = _byte(self.b)


@dataclass
class Message:
    """One packet to send and how long to wait before sending it."""

    values: bytes
    delay_ms: int = 0


@dataclass
class SenderConfig:
    """Where to send which messages, and how often to repeat them."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    messages: list[Message] = field(default_factory=list)
    repeats: int = DEFAULT_REPEATS
    debug: bool = False


ColourFunc = Callable[[int], Rgb]


class _DatagramSender(Protocol):
    def sendto(self, data: bytes, address: tuple[str, int], /) -> int: ...


def number_range(start: int, count: int, step: int = 1) -> list[int]:
    """``count`` integers from ``start`` on, ``step`` apart."""
    return [start + step * x for x in range(count)]


def create_warls(indices: Sequence[int], func: ColourFunc) -> bytes:
    """A WARLS packet: header, then index and colour for every LED."""
    message = bytearray((WARLS_HEADER, TIMEOUT_SEC))
    for index in indices:
        led = func(index)
        message += bytes((_byte(index), led.r, led.g, led.b))
    return bytes(message)


def create_drgb(indices: Sequence[int], func: ColourFunc) -> bytes:
    """A DRGB packet: header, then the colour of every LED in order."""
    message = bytearray((DRGB_HEADER, TIMEOUT_SEC))
    for index in indices:
        led = func(index)
        message += bytes((led.r, led.g, led.b))
    return bytes(message)


def _as_bytes(values: Sequence[int]) -> list[int]:
    return [_byte(value) for value in values]


def range_of_all() -> list[int]:
    return _as_bytes(number_range(0, N_LOGO + N_BASE + N_SINGLE))


def range_of_logo() -> list[int]:
    return _as_bytes(number_range(FIRST_LOGO_INDEX, N_LOGO))


def range_of_base(edge: int = -1) -> list[int]:
    """Indices of one edge of the base (0 to 3), or of the whole base."""
    n_edge = N_BASE // 4
    if edge == 0:
        values = number_range(FIRST_BASE_INDEX, n_edge)
    elif edge in (1, 2):
        values = number_range(FIRST_BASE_INDEX + n_edge + edge - 1, n_edge, 2)
    elif edge == 3:
        values = number_range(FIRST_BASE_INDEX + 3 * n_edge, n_edge)
    else:
        values = number_range(FIRST_BASE_INDEX, N_BASE)
    return _as_bytes(values)


def range_of_single_leds() -> list[int]:
    return _as_bytes(number_range(N_LOGO + N_BASE, N_SINGLE))


def _running_light(position: float) -> ColourFunc:
    def colour(index: int) -> Rgb:
        value = 0.0
        for edge in range(4):
            i = float(index - FIRST_BASE_INDEX + edge)
            edge_value = 0.0 if i > position else math.exp(1.2 * (i - position)) * 255.0
            value = max(value, edge_value)
        return Rgb(0, 0.4 * value, value)

    return colour


def create_pattern(pattern_name: str, use_drgb: bool = False) -> list[Message]:
    """The messages of a named pattern: "logoblink", "lauflichter" or a default."""
    create = create_drgb if use_drgb else create_warls
    pattern: list[Message] = []

    if pattern_name == "logoblink":
        delay = 200
        logo = range_of_logo()
        pattern.append(Message(create(range_of_single_leds(), lambda _: Rgb(100, 255, 0)), 0))
        pattern.append(Message(create(range_of_base(), lambda _: Rgb(0, 255, 200)), 0))
        for i in range(25):
            pattern.append(Message(create(logo, lambda _, i=i: Rgb(10 * i, 0, 255)), delay))
            pattern.append(Message(create(logo, lambda _: Rgb()), delay))
        for i in range(25):
            pattern.append(
                Message(create(logo, lambda _, i=i: Rgb(255 - 10 * i, 0, 255)), delay)
            )
            pattern.append(Message(create(logo, lambda _: Rgb()), delay))

    elif pattern_name == "lauflichter":
        delay = 100
        base = range_of_base()
        for i in range(2 * 64):
            position = math.fmod(0.5 * i, float(N_BASE))
            pattern.append(Message(create(base, _running_light(position)), delay))

    else:
        every = range_of_all()
        pattern.append(Message(create(every, lambda _: Rgb(0, 120, 255)), 0))
        pattern.append(Message(create(every, lambda _: Rgb()), 2000))
        pattern.append(Message(create(every, lambda _: Rgb(0, 80, 150)), 2000))

    return pattern


def send_all(config: SenderConfig, sock: _DatagramSender) -> int:
    """Send all messages ``repeats + 1`` times; return the number of packets sent."""
    remote = (config.host, config.port)
    sent = 0
    for _ in range(config.repeats + 1):
        for message in config.messages:
            if message.delay_ms > 0:
                time.sleep(message.delay_ms / 1000.0)
            sock.sendto(message.values, remote)
            sent += 1
            if config.debug:
                print(
                    f"Sent UDP to {config.host}:{config.port} ({len(message.values)} bytes)"
                )
    return sent


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Send LED patterns as UDP packets.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument(
        "--pattern",
        default=DEFAULT_PATTERN,
        help='"logoblink", "lauflichter" or anything else for the standard pattern',
    )
    parser.add_argument("--repeats", type=int, default=DEFAULT_REPEATS)
    parser.add_argument("--drgb", action="store_true", help="send DRGB instead of WARLS")
    parser.add_argument("--debug", action="store_true")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    print("Mock Sender: Test UDP package sending.")

    config = SenderConfig(
        host=args.host,
        port=args.port,
        messages=create_pattern(args.pattern, args.drgb),
        repeats=args.repeats,
        debug=args.debug,
    )

    try:
        sender = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError:
        print("Failed to open UDP Sender.", file=sys.stderr)
        return 1

    with sender:
        try:
            send_all(config, sender)
        except OSError as error:
            print(f"Failed to send UDP: {error}", file=sys.stderr)
            return 1

    print("Mock Sender Finished without errors.")
    return 0


if __name__ == "__main__":
    sys.exit(main())