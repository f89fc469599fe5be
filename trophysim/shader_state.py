"""LED colours, render parameters and options handed to the shader."""

from __future__ import annotations

import random
import struct
from collections.abc import Callable, Mapping, Sequence
from dataclasses import astuple, dataclass, field
from itertools import product

from trophysim.geometry import Rect, describe_vec4, same_pixel
from trophysim.led import Led
from trophysim.trophy import Trophy

_LED_FORMAT = "<4I"
_PARAMS_FORMAT = "<30f2i4f"
_OPTIONS_FORMAT = "<4?"


@dataclass
class ShaderOptions:
    """Boolean switches of the renderer, packed as four bytes."""

    show_grid: bool = False
    accumulate_forever: bool = False
    no_stochastic_variation: bool = False
    only_pyramid_frame: bool = True

    def pack(self) -> bytes:
        return struct.pack(_OPTIONS_FORMAT, *astuple(self))


@dataclass
class Parameters:
    """Tunable scene and tracing parameters, in uniform buffer order."""

    led_size: float = 0.015
    led_glow: float = 8.0
    cam_x: float = 0.0
    cam_y: float = 0.17
    cam_z: float = -1.8
    cam_fov: float = 1.3
    cam_tilt: float = 12.3
    fog_scaling: float = 0.0001
    fog_grading: float = 2.2
    background_spin: float = 0.1
    floor_level: float = -4.0
    floor_graytone: float = 0.1
    floor_line_brightness: float = 0.8
    floor_spacing_x: float = 2.21
    floor_spacing_z: float = 5.21
    floor_line_width: float = 0.05
    floor_exponent: float = 30.0
    floor_grading: float = 0.5
    pyramid_x: float = 0.0
    pyramid_y: float = -0.5
    pyramid_z: float = 0.0
    pyramid_scale: float = 1.26
    pyramid_height: float = 0.85
    pyramid_angle: float = -10.0
    pyramid_angular_velocity: float = 0.0
    epoxy_permittivity: float = 1.6
    blend_previous_mixing: float = 0.35
    trace_min_distance: float = 1.0e-3
    trace_max_distance: float = 60.0
    trace_fixed_step: float = 0.1
    trace_max_steps: int = 40
    trace_max_recursions: int = 6
    led_blur_samples: float = 32.0
    led_blur_radius: float = 4.8
    led_blur_precision: float = 420.0
    led_blur_mixing: float = 0.6

    def pack(self) -> bytes:
        return struct.pack(_PARAMS_FORMAT, *astuple(self))


class ShaderState:
    """The current colour of every trophy LED plus the render settings."""

    def __init__(self, trophy: Trophy) -> None:
        self.trophy = trophy
        self.n_leds = len(trophy.positions)
        self.leds = [Led() for _ in range(self.n_leds)]
        self.params = Parameters()
        self.options = ShaderOptions()
        self.verbose = False

    def aligned_size_for_leds(self) -> int:
        return len(self.leds) * struct.calcsize(_LED_FORMAT)

    def aligned_total_size(self) -> int:
        return (
            self.aligned_size_for_leds()
            + struct.calcsize(_PARAMS_FORMAT)
            + struct.calcsize(_OPTIONS_FORMAT)
        )

    def set(self, index: int, led: Led, silent: bool = False) -> None:
        """Set one LED; single-colour LEDs take the gray value."""
        if not 0 <= index < self.n_leds:
            if silent:
                return
            raise IndexError(f"Trophy has no LED at index {index}")
        if self.trophy.is_single_color[index]:
            self.leds[index].set_white(led.gray())
        else:
            self.leds[index].set(led)

    def set_rgb(self, index: int, r: int = 0, g: int = 0, b: int = 0) -> None:
        self.set(index, Led(r, g, b))

    def set_multiple(self, mapping: Mapping[int, Led]) -> None:
        for index, led in mapping.items():
            self.set(index, led)

    def set_each(self, func: Callable[[int], Led]) -> None:
        """Set every LED to what ``func`` returns for its index."""
        for index in range(self.n_leds):
            self.set(index, func(index))

    def set_all(self, r: int, g: int, b: int) -> None:
        led = Led(r & 0xFF, g & 0xFF, b & 0xFF)
        self.set_each(lambda _index: led)

    def randomize(self, rng: random.Random | None = None) -> None:
        source = rng if rng is not None else random
        for index in range(self.n_leds):
            self.set_rgb(
                index, source.randrange(256), source.randrange(256), source.randrange(256)
            )

    def pack(self) -> bytes:
        """The state buffer: LEDs, then parameters, then options."""
        leds = b"".join(struct.pack(_LED_FORMAT, led.r, led.g, led.b, 0) for led in self.leds)
        return leds + self.params.pack() + self.options.pack()


NO_LED_CLICKED = -1.0
UNINITIALIZED = -0.123


@dataclass
class ExtraOutputs:
    """The extra RGBA float output of the render pass, read per pixel."""

    rect: Rect = field(default_factory=Rect)
    values: list[float] = field(default_factory=list)
    test_output: list[float] = field(default_factory=list)
    clicked_led_index: int | None = None

    def initialize(self, rect: Rect) -> None:
        self.rect = rect
        total = rect.extent().area()
        self.values = [UNINITIALIZED] * (4 * total)
        self.test_output = [0.0] * total
        self.clicked_led_index = None

    def interpret_values(self, mouse: Sequence[float]) -> str:
        """Find the clicked LED in the read values; return a debug report."""
        self.clicked_led_index = None
        led_min, led_max = 10000, -10000
        _, _, mouse_z, mouse_w = mouse
        width = self.rect.width
        lines = []
        for y, x in product(range(self.rect.height), range(width)):
            index = x + width * y
            value = tuple(self.values[4 * index : 4 * index + 4])
            self.test_output[index] = value[0]
            if value[0] != 0.0 and value[1] != NO_LED_CLICKED:
                led_index = int(value[1])
                self.clicked_led_index = led_index
                led_min = min(led_min, led_index)
                led_max = max(led_max, led_index)
            if same_pixel(x, y, mouse_z, mouse_w):
                lines.append(
                    f"Cursor: {mouse_z:g}, {mouse_w:g}; " + describe_vec4("ExtraOutput", value)
                )
        lines.append(f" -- LedIndex: {led_min} .. {led_max} -- ")
        return "\n".join(lines)