"""Core geometry value objects and unit conversions."""

from __future__ import annotations

from dataclasses import dataclass

CUBIC_INCHES_PER_CUBIC_FOOT = 1728.0
SQUARE_INCHES_PER_SQUARE_FOOT = 144.0


def to_cubic_feet(cubic_inches: float) -> float:
    """Convert cubic inches to cubic feet."""
    return cubic_inches / CUBIC_INCHES_PER_CUBIC_FOOT


def to_cubic_inches(cubic_feet: float) -> float:
    """Convert cubic feet to cubic inches."""
    return cubic_feet * CUBIC_INCHES_PER_CUBIC_FOOT


@dataclass(frozen=True)
class Dimensions:
    """Immutable box dimensions in inches."""

    width: float
    height: float
    depth: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0 or self.depth <= 0:
            raise ValueError("All dimensions must be positive")

    @property
    def face_area(self) -> float:
        """Front face area (width x height) in square inches."""
        return self.width * self.height

    @property
    def volume(self) -> float:
        """Volume in cubic inches."""
        return self.width * self.height * self.depth

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.width, self.height, self.depth)
