import random
import struct

import pytest

from trophysim.geometry import Rect
from trophysim.led import Led
from trophysim.shader_state import (
    UNINITIALIZED,
    ExtraOutputs,
    Parameters,
    ShaderOptions,
    ShaderState,
)
from trophysim.trophy import BACK_LED_INDEX, LOGO_START_INDEX, N_LEDS, Trophy


@pytest.fixture
def state():
    return ShaderState(Trophy())


def test_initial_leds_are_off(state):
    assert state.n_leds == N_LEDS
    assert all(led == Led() for led in state.leds)


def test_total_size_matches_packed_buffer(state):
    assert state.aligned_size_for_leds() == N_LEDS * 16
    assert state.aligned_total_size() == len(state.pack())


def test_options_pack_bytes():
    assert ShaderOptions(True, False, False, True).pack() == b"\x01\x00\x00\x01"
    assert ShaderOptions().only_pyramid_frame is True


def test_parameters_pack_roundtrip():
    params = Parameters(trace_max_steps=17, cam_x=0.25)
    unpacked = struct.unpack("<30f2i4f", params.pack())
    assert unpacked[30] == 17
    assert unpacked[2] == 0.25
    assert struct.unpack("<30f2i4f", Parameters().pack())[30] == 40


def test_set_rgb_led_keeps_colour(state):
    state.set(LOGO_START_INDEX, Led(10, 20, 30))
    assert state.leds[LOGO_START_INDEX] == Led(10, 20, 30)


def test_set_single_colour_led_uses_gray(state):
    led = Led(100, 150, 200)
    state.set(BACK_LED_INDEX, led)
    gray = led.gray()
    assert state.leds[BACK_LED_INDEX] == Led(gray, gray, gray)


def test_set_out_of_range(state):
    with pytest.raises(IndexError):
        state.set(N_LEDS, Led(1, 2, 3))
    with pytest.raises(IndexError):
        state.set_rgb(-1, 1, 2, 3)
    before = [Led(l.r, l.g, l.b) for l in state.leds]
    state.set(N_LEDS, Led(1, 2, 3), silent=True)
    assert state.leds == before


def test_set_multiple(state):
    state.set_multiple({0: Led(1, 2, 3), 5: Led(4, 5, 6)})
    assert state.leds[0] == Led(1, 2, 3)
    assert state.leds[5] == Led(4, 5, 6)
    assert state.leds[1] == Led()


def test_set_each_and_set_all(state):
    state.set_each(lambda i: Led(i % 256, 0, 0))
    assert state.leds[7] == Led(7, 0, 0)
    state.set_all(9, 9, 9)
    assert all(led == Led(9, 9, 9) for led in state.leds)


def test_randomize_deterministic(state):
    state.randomize(random.Random(3))
    other = ShaderState(Trophy())
    other.randomize(random.Random(3))
    assert state.leds == other.leds
    assert all(0 <= c <= 255 for led in state.leds for c in (led.r, led.g, led.b))


def test_pack_starts_with_first_led(state):
    state.set_rgb(0, 1, 2, 3)
    assert state.pack()[:16] == struct.pack("<4I", 1, 2, 3, 0)


def test_extra_outputs_initialize():
    outputs = ExtraOutputs()
    rect = Rect(x=1, y=1, width=2, height=2)
    outputs.initialize(rect)
    assert len(outputs.values) == 4 * rect.extent().area()
    assert all(v == UNINITIALIZED for v in outputs.values)
    assert outputs.clicked_led_index is None


def test_extra_outputs_finds_clicked_led():
    outputs = ExtraOutputs()
    outputs.initialize(Rect(x=0, y=0, width=3, height=2))
    outputs.values[:] = [0.0] * len(outputs.values)
    outputs.values[4:8] = [1.0, 5.0, 0.0, 0.0]
    report = outputs.interpret_values((0.0, 0.0, 1.0, 0.0))
    assert outputs.clicked_led_index == 5
    assert "Cursor: 1, 0;" in report
    assert report.endswith("LedIndex: 5 .. 5 -- ")
    assert outputs.test_output[1] == 1.0


def test_extra_outputs_no_led_clicked():
    outputs = ExtraOutputs()
    outputs.initialize(Rect(x=0, y=0, width=2, height=2))
    outputs.values[:] = [0.0] * len(outputs.values)
    outputs.values[0:4] = [1.0, -1.0, 0.0, 0.0]
    outputs.interpret_values((0.0, 0.0, -1.0, -1.0))
    assert outputs.clicked_led_index is None