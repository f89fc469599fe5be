"""Geometry of the trophy's LEDs: the logo, the base and two single LEDs."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

N_LEDS_IN_BASE = 64
N_LEDS_IN_LOGO = 106
N_RGB_LEDS = N_LEDS_IN_BASE + N_LEDS_IN_LOGO
N_SINGLE_LEDS = 2
N_LEDS = N_RGB_LEDS + N_SINGLE_LEDS

BASE_START_INDEX = 0
LOGO_START_INDEX = N_LEDS_IN_BASE
BACK_LED_INDEX = N_LEDS - 2
FLOOR_LED_INDEX = N_LEDS - 1

N_LOGO_WIDTH = 27
N_LOGO_HEIGHT = 21

_ = -1
# Grid of the logo LEDs, row by row from the top; -1 marks an empty spot.
LOGO_ORDER: tuple[int, ...] = (
    _, _, _, 97, _, 98, _, 99, _, 100, _, 101, _, 102, _, 103, _, 104, _, 105, _, _, _, _, _, _, _,
    _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _,
    _, _, 96, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _,
    _, 95, _, 94, _, 93, _, 92, _, 91, _, 90, _, 89, _, 88, _, 87, _, 86, _, 85, _, _, _, _, _,
    _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _,
    73, _, 74, _, 75, _, 76, _, 77, _, 78, _, 79, _, 80, _, 81, _, 82, _, 83, _, 84, _, _, _, _,
    _, 72, _, 71, _, 70, _, 69, _, 68, _, 67, _, 66, _, 65, _, 64, _, 63, _, 62, _, 61, _, _, _,
    _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _,
    _, _, 0, _, 1, _, 2, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, 59, _, 60, _, _,
    _, _, _, 5, _, 4, _, 3, _, _, _, _, _, _, _, _, _, _, _, _, _, 58, _, 57, _, 56, _,
    _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _,
    _, _, _, _, 6, _, 7, _, 8, _, _, _, _, _, _, _, _, _, _, _, 53, _, 54, _, 55, _, _,
    _, _, _, _, _, 11, _, 10, _, 9, _, _, _, _, _, _, _, _, _, 52, _, 51, _, 50, _, _, _,
    _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _,
    _, _, _, _, _, _, 12, _, 13, _, 14, _, _, _, _, _, _, _, 47, _, 48, _, 49, _, _, _, _,
    _, _, _, _, _, _, _, 17, _, 16, _, 15, _, _, _, _, _, _, _, 46, _, 45, _, _, _, _, _,
    _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _,
    _, _, _, _, _, _, _, _, 18, _, 19, _, 20, _, 21, _, 22, _, 23, _, 24, _, 25, _, 26, _, _,
    _, _, _, _, _, _, _, _, _, 35, _, 34, _, 33, _, 32, _, 31, _, 30, _, 29, _, 28, _, 27, _,
    _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _, _,
    _, _, _, _, _, _, _, _, _, _, 36, _, 37, _, 38, _, 39, _, 40, _, 41, _, 42, _, 43, _, 44,
)
del _

_COS60 = math.cos(math.radians(60.0))
_SIN60 = math.sin(math.radians(60.0))


@dataclass
class Vec2:
    x: float = 0.0
    y: float = 0.0


@dataclass
class Vec3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


def parse_logo_order(logo_index: int) -> tuple[float, float]:
    """Relative position of a logo LED, rotated by 60 degrees and shifted."""
    try:
        index = LOGO_ORDER.index(logo_index)
    except ValueError:
        index = len(LOGO_ORDER)
    index_x = float(index % N_LOGO_WIDTH)
    index_y = -(index - index_x) / N_LOGO_WIDTH
    x = -0.5 + index_x / N_LOGO_WIDTH
    y = -0.5 + index_y / N_LOGO_HEIGHT
    return (
        _COS60 * x - _SIN60 * y - 0.5,
        _SIN60 * x + _COS60 * y - 0.5,
    )


def calc_base_order(base_index: int) -> tuple[float, float]:
    """Relative (x, z) position of a base LED on the square's four edges."""
    n_edge = N_LEDS_IN_BASE // 4
    edge_step = 1.0 / (n_edge - 1 + 2)
    base_edge = base_index // n_edge

    if 0 < base_edge < 3:
        y_index = (base_index % (2 * n_edge)) // 2
        return (-0.5 + base_index % 2, -0.5 + edge_step * (1 + y_index))
    x_index = base_index % n_edge
    return (-0.5 + edge_step * (1 + x_index), -0.5 + (1 if base_edge > 0 else 0))


_VEC4_SIZE = 4 * 4


@dataclass
class Trophy:
    """Positions and kinds of all LEDs of the trophy."""

    logo_center: Vec3 = field(default_factory=lambda: Vec3(-0.175, 0.262, 0.0))
    logo_size: Vec2 = field(default_factory=lambda: Vec2(0.5, 0.375))
    base_center: Vec3 = field(default_factory=lambda: Vec3(0.0, -0.35, 0.0))
    base_size: float = 1.0
    back_led_pos: Vec3 = field(default_factory=lambda: Vec3(-0.05, -0.1, 0.02))
    floor_led_pos: Vec3 = field(default_factory=lambda: Vec3(0.0, -0.35, 0.0))

    positions: list[tuple[float, float, float, float]] = field(init=False)
    is_single_color: list[bool] = field(init=False)
    is_logo: list[bool] = field(init=False)
    is_base: list[bool] = field(init=False)
    pos_min: Vec3 = field(init=False)
    pos_max: Vec3 = field(init=False)

    def __post_init__(self) -> None:
        self.rebuild()

    def _led_position(self, i: int) -> tuple[float, float, float]:
        if self.is_logo[i]:
            rx, ry = parse_logo_order(i - LOGO_START_INDEX)
            c, s = self.logo_center, self.logo_size
            return (c.x + s.x * rx, c.y + s.y * ry, c.z)
        if self.is_base[i]:
            rx, ry = calc_base_order(i - BASE_START_INDEX)
            c = self.base_center
            return (c.x + self.base_size * rx, c.y, c.z + self.base_size * ry)
        pos = self.floor_led_pos if i == FLOOR_LED_INDEX else self.back_led_pos
        return (pos.x, pos.y, pos.z)

    def rebuild(self) -> None:
        """Recompute all LED positions and their bounding ranges."""
        self.is_base = [
            BASE_START_INDEX <= i < BASE_START_INDEX + N_LEDS_IN_BASE for i in range(N_LEDS)
        ]
        self.is_logo = [
            LOGO_START_INDEX <= i < LOGO_START_INDEX + N_LEDS_IN_LOGO for i in range(N_LEDS)
        ]
        self.is_single_color = [
            not logo and not base for logo, base in zip(self.is_logo, self.is_base)
        ]
        self.positions = [(*self._led_position(i), 0.0) for i in range(N_LEDS)]

        xs, ys, zs = (list(axis) for axis in zip(*(p[:3] for p in self.positions)))
        self.pos_min = Vec3(min(0.0, *xs), min(0.0, *ys), min(0.0, *zs))
        self.pos_max = Vec3(max(0.0, *xs), max(0.0, *ys), max(0.0, *zs))

    def aligned_size_of_number(self) -> int:
        """Bytes the LED count takes in the uniform buffer, padded to a vec4."""
        return _VEC4_SIZE

    def aligned_size_of_positions(self) -> int:
        """Bytes the positions take in the uniform buffer."""
        return len(self.positions) * _VEC4_SIZE

    def aligned_total_size(self) -> int:
        return self.aligned_size_of_number() + self.aligned_size_of_positions()

    def debug_report(self) -> str:
        """A listing of all LED positions and their ranges."""
        width = len(str(N_LEDS))
        lines = [f"=== DEBUG TROPHY LED POSITIONS === N = {N_LEDS}"]
        for i, (x, y, z, _w) in enumerate(self.positions):
            if i == LOGO_START_INDEX:
                lines.append("  LOGO:")
            elif i == BASE_START_INDEX:
                lines.append("  BASE:")
            elif i == N_RGB_LEDS:
                lines.append("  WHITE-ONLY:")
            lines.append(f"    {i:0{width}d}: {x:g}, {y:g}, {z:g}")
        lo, hi = self.pos_min, self.pos_max
        lines += [
            "-> Ranges: ",
            f"   X [{lo.x:g}, {hi.x:g}]",
            f"   Y [{lo.y:g}, {hi.y:g}]",
            f"   Z [{lo.z:g}, {hi.z:g}]",
            "==================================",
        ]
        return "\n".join(lines)