import re

from trophysim.led import Led
from trophysim.udp_interpreter import (
    ProtocolMessage,
    RealtimeProtocol,
    UnreadableMessage,
    as_protocol,
    int16_from,
    interpret,
)
from trophysim.udp_listener import RawMessage


def test_too_short_message_is_unreadable():
    raw = RawMessage([1], "somewhere")
    result = interpret(raw)
    assert isinstance(result, UnreadableMessage)
    assert result.reason == "Message too short (needs 2 header bytes)"
    assert result.original is raw


def test_unsupported_protocol_is_unreadable():
    result = interpret(RawMessage([3, 10, 1, 2, 3], "somewhere"))
    assert isinstance(result, UnreadableMessage)
    assert result.reason == "Unsupported Protocol: 3"


def test_warls_maps_given_indices():
    result = interpret(RawMessage([1, 2, 5, 10, 20, 30, 7, 1, 2, 3], "host:1"))
    assert isinstance(result, ProtocolMessage)
    assert result.protocol is RealtimeProtocol.WARLS
    assert result.timeout_sec == 2
    assert result.mapping == {5: Led(10, 20, 30), 7: Led(1, 2, 3)}
    assert result.source == "host:1"


def test_timeout_255_means_no_timeout():
    result = interpret(RawMessage([2, 255, 1, 2, 3], "x"))
    assert result.timeout_sec is None


def test_drgb_counts_indices_from_zero():
    result = interpret(RawMessage([2, 1, 1, 2, 3, 4, 5, 6], "x"))
    assert result.protocol is RealtimeProtocol.DRGB
    assert result.mapping == {0: Led(1, 2, 3), 1: Led(4, 5, 6)}


def test_dnrgb_starts_at_given_index():
    result = interpret(RawMessage([4, 1, 0, 10, 9, 8, 7, 6, 5, 4], "x"))
    assert result.protocol is RealtimeProtocol.DNRGB
    assert result.mapping == {10: Led(9, 8, 7), 11: Led(6, 5, 4)}


def test_dnrgb_index_wraps_to_a_byte():
    result = interpret(RawMessage([4, 1, 0x01, 0x02, 9, 8, 7], "x"))
    assert result.mapping == {2: Led(9, 8, 7)}


def test_header_only_message_sets_nothing():
    result = interpret(RawMessage([1, 5], "x"))
    assert isinstance(result, ProtocolMessage)
    assert result.mapping == {}


def test_truncated_led_is_unreadable():
    raw = RawMessage([1, 5, 3, 100, 100], "x")
    result = interpret(raw)
    assert isinstance(result, UnreadableMessage)
    assert result.original is raw
    assert len(result.reason) > 0


def test_later_entry_overwrites_same_index():
    result = interpret(RawMessage([1, 5, 3, 1, 1, 1, 3, 2, 2, 2], "x"))
    assert result.mapping == {3: Led(2, 2, 2)}


def test_int16_from_combines_bytes():
    assert int16_from(0x12, 0x34) == 0x1234
    assert int16_from(0, 200) == 200


def test_as_protocol():
    assert as_protocol(1) is RealtimeProtocol.WARLS
    assert as_protocol(2) is RealtimeProtocol.DRGB
    assert as_protocol(4) is RealtimeProtocol.DNRGB
    assert as_protocol(3) is None


def test_debug_line_names_reason():
    result = interpret(RawMessage([], "x"))
    line = result.debug_line()
    assert re.fullmatch(
        r"\[UDP MESSAGE\]\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{3}\] Unreadable\. .+", line
    )
    assert line.endswith(result.reason)