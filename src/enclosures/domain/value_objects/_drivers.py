"""Driver (loudspeaker) mounting specifications."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ValueRange:
    """Inclusive recommended range, e.g. box volume or tuning frequency."""

    min: float
    max: float

    def __post_init__(self) -> None:
        if self.min > self.max:
            raise ValueError("Range minimum cannot exceed maximum")

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


@dataclass(frozen=True)
class DriverSpec:
    """Physical mounting data for one loudspeaker model.

    Attributes:
        cutout_diameter: Baffle cutout diameter in inches.
        mounting_depth: Depth behind the baffle in inches.
        displacement: Air volume displaced by the driver body in cubic feet.
        brand: Manufacturer name, if known.
        model: Model name, if known.
        size: Nominal size in inches.
        recommended_sealed: Recommended sealed box volume range (cubic feet).
        recommended_ported: Recommended ported box volume range (cubic feet).
        recommended_tuning: Recommended tuning range (Hz).
        xmax: One-way linear excursion in millimetres, if known.
    """

    cutout_diameter: float
    mounting_depth: float
    displacement: float
    brand: str = ""
    model: str = ""
    size: float = 12.0
    recommended_sealed: ValueRange | None = None
    recommended_ported: ValueRange | None = None
    recommended_tuning: ValueRange | None = None
    xmax: float | None = None

    def __post_init__(self) -> None:
        if self.cutout_diameter <= 0:
            raise ValueError("Cutout diameter must be positive")
        if self.mounting_depth <= 0:
            raise ValueError("Mounting depth must be positive")
        if self.displacement < 0:
            raise ValueError("Displacement cannot be negative")

    @property
    def display_name(self) -> str:
        name = f"{self.brand} {self.model}".strip()
        return name or f'Generic {self.size:g}"'
