"""Small immutable 2D vector type and scalar helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Union

Number = Union[int, float]


@dataclass(frozen=True)
class Vec2:
    """An immutable two-component float vector."""

    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def __mul__(self, other: Union[Vec2, Number]) -> Vec2:
        if isinstance(other, Vec2):
            return Vec2(self.x * other.x, self.y * other.y)
        if isinstance(other, (int, float)):
            return Vec2(self.x * other, self.y * other)
        return NotImplemented

    def __rmul__(self, other: Number) -> Vec2:
        if isinstance(other, (int, float)):
            return Vec2(self.x * other, self.y * other)
        return NotImplemented

    def __truediv__(self, other: Union[Vec2, Number]) -> Vec2:
        if isinstance(other, Vec2):
            return Vec2(self.x / other.x, self.y / other.y)
        if isinstance(other, (int, float)):
            return Vec2(self.x / other, self.y / other)
        return NotImplemented

    def dot(self, other: Vec2) -> float:
        """Return the dot product with another vector."""
        return self.x * other.x + self.y * other.y

    def length(self) -> float:
        """Return the Euclidean length."""
        return math.hypot(self.x, self.y)

    def min(self, other: Vec2) -> Vec2:
        """Return the component-wise minimum."""
        return Vec2(min(self.x, other.x), min(self.y, other.y))

    def max(self, other: Vec2) -> Vec2:
        """Return the component-wise maximum."""
        return Vec2(max(self.x, other.x), max(self.y, other.y))


def clamp(value: float, low: float, high: float) -> float:
    """Restrict a value to the closed range [low, high]."""
    return min(max(value, low), high)