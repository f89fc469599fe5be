"""A single RGB LED value."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass
class Led:
    """Red, green and blue components of one LED."""

    r: int = 0
    g: int = 0
    b: int = 0

    @classmethod
    def from_values(cls, values: Sequence[int], start: int = 0) -> Led:
        """Read three consecutive values starting at ``start``."""
        r, g, b = values[start : start + 3]
        if start < 0 or len(values) < start + 3:
            raise IndexError("not enough values for an LED")
        return cls(r, g, b)

    def set(self, other: Led) -> None:
        """Copy the colour of another LED."""
        self.r, self.g, self.b = other.r, other.g, other.b

    def set_white(self, w: int) -> None:
        """Set all three components to ``w``."""
        self.r = self.g = self.b = w

    def gray(self) -> int:
        """The luminance of this colour, truncated to an integer."""
        return int(0.299 * self.r + 0.587 * self.g + 0.114 * self.b)

    def __str__(self) -> str:
        return f"[{self.r:03d},{self.g:03d},{self.b:03d}]"