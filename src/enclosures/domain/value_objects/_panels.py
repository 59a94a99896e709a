"""Panel types and cutting specifications."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class PanelType(str, Enum):
    """Types of panels in an enclosure."""

    BAFFLE = "baffle"
    INNER_BAFFLE = "inner_baffle"
    FRONT = "front"
    BACK = "back"
    TOP = "top"
    BOTTOM = "bottom"
    LEFT_SIDE = "left_side"
    RIGHT_SIDE = "right_side"
    PORT_WALL = "port_wall"
    PORT_END_CAP = "port_end_cap"
    WINDOW_BRACE = "window_brace"
    CHAMBER_DIVIDER = "chamber_divider"
    BANDPASS_BAFFLE = "bandpass_baffle"


@dataclass(frozen=True)
class CircularCutout:
    """Circular hole cut through a panel.

    Offsets are measured to the hole center from the panel's left and
    bottom edges.

    Attributes:
        diameter: Hole diameter in inches.
        offset_x: Center distance from the left edge in inches.
        offset_y: Center distance from the bottom edge in inches.
    """

    diameter: float
    offset_x: float
    offset_y: float

    def __post_init__(self) -> None:
        if self.diameter <= 0:
            raise ValueError("Cutout diameter must be positive")

    @property
    def area(self) -> float:
        return math.pi * (self.diameter / 2) ** 2


@dataclass(frozen=True)
class Panel:
    """A named, dimensioned panel to be cut from sheet stock.

    Attributes:
        name: Display name, e.g. "Front Baffle".
        width: Panel width in inches.
        height: Panel height in inches.
        quantity: Number of identical instances to cut.
        panel_type: Structural role of the panel.
        cutouts: Circular cutouts (driver holes, terminal cup, brace window).
        notes: Free-text fabrication note.
    """

    name: str
    width: float
    height: float
    quantity: int = 1
    panel_type: PanelType = PanelType.BACK
    cutouts: tuple[CircularCutout, ...] = ()
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Panel '{self.name}' dimensions must be positive")
        if self.quantity < 1:
            raise ValueError("Quantity must be at least 1")

    @property
    def has_cutout(self) -> bool:
        return bool(self.cutouts)

    @property
    def cutout(self) -> CircularCutout | None:
        """First cutout, or None for a plain panel."""
        return self.cutouts[0] if self.cutouts else None

    @property
    def area(self) -> float:
        """Area of one instance in square inches."""
        return self.width * self.height

    @property
    def total_area(self) -> float:
        """Area of all instances in square inches."""
        return self.area * self.quantity
