"""Small geometry value types and helpers for pixels and window areas."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass
class Size:
    """An integer width/height pair."""

    width: int = 0
    height: int = 0

    def __bool__(self) -> bool:
        return self.width > 0 and self.height > 0

    def area(self) -> int:
        return self.width * self.height


@dataclass
class Coord:
    """An integer x/y position."""

    x: int = 0
    y: int = 0

    def move_to_smaller(self, other: Coord) -> None:
        """Take over each component of ``other`` that is smaller than ours."""
        if other.x < self.x:
            self.x = other.x
        if other.y < self.y:
            self.y = other.y

    def move_to_larger(self, other: Coord) -> None:
        """Take over each component of ``other`` that is larger than ours."""
        if other.x > self.x:
            self.x = other.x
        if other.y > self.y:
            self.y = other.y


@dataclass
class Rect(Size, Coord):
    """A rectangle given by its origin and its size."""

    def max_x(self) -> int:
        return self.x + self.width

    def max_y(self) -> int:
        return self.y + self.height

    def extent(self) -> Size:
        """The size measured from (0, 0) up to the far corner."""
        return Size(self.max_x(), self.max_y())


@dataclass
class RelativeRect:
    """A rectangle in fractions of some total area."""

    width: float
    height: float
    x: float
    y: float


def same_pixel(x1: float, y1: float, x2: float, y2: float) -> bool:
    """Whether two positions fall onto the same pixel."""
    return abs(x2 - x1) < 0.5 and abs(y2 - y1) < 0.5


def outside_rect(pos_x: float, pos_y: float, rect: Sequence[float]) -> bool:
    """Whether a position lies outside ``rect`` given as (x, y, width, height)."""
    x, y, width, height = rect
    return pos_x < x or pos_x >= x + width or pos_y < y or pos_y >= y + height


def _number(value: float) -> str:
    if isinstance(value, int):
        return str(value)
    return f"{value:g}"


def describe_rect(label: str, rect: Rect) -> str:
    """One line describing the origin and size of ``rect``."""
    return (
        f"{label}: {_number(rect.x)}, {_number(rect.y)}, "
        f"size: {_number(rect.width)}, {_number(rect.height)}"
    )


def describe_vec4(label: str, vec: Sequence[float]) -> str:
    """One line listing the four components of ``vec``."""
    x, y, z, w = vec
    return f"{label}: ({_number(x)}, {_number(y)}, {_number(z)}, {_number(w)})"