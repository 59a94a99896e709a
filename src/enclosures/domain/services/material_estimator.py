"""Material estimation service."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..value_objects import SQUARE_INCHES_PER_SQUARE_FOOT

if TYPE_CHECKING:
    from ..value_objects import Panel

__all__ = ["MaterialEstimate", "MaterialEstimator"]


@dataclass(frozen=True)
class MaterialEstimate:
    """Area-based estimate of sheet stock needed for a panel list.

    This is the lower bound implied by total area alone; a nesting run
    reports the sheet count actually achievable.
    """

    total_area_sqin: float
    sheet_area_sqin: float
    sheet_count: int
    kerf: float

    @property
    def total_area_sqft(self) -> float:
        return self.total_area_sqin / SQUARE_INCHES_PER_SQUARE_FOOT

    @property
    def utilization_percent(self) -> float:
        if self.sheet_count == 0:
            return 0.0
        return self.total_area_sqin / (self.sheet_count * self.sheet_area_sqin) * 100

    @property
    def description(self) -> str:
        """Human-readable description of material needs."""
        return (
            f"{self.total_area_sqft:.1f} sq ft total "
            f"({self.sheet_count} sheets, {self.utilization_percent:.1f}% utilized)"
        )


class MaterialEstimator:
    """Estimates sheet stock from total panel area."""

    SHEET_4X8_SQIN = 48 * 96  # 4608 sq in

    def __init__(self, sheet_area: float = SHEET_4X8_SQIN, kerf: float = 0.125) -> None:
        """Initialize with sheet area (default 4x8) and blade kerf."""
        if sheet_area <= 0:
            raise ValueError("Sheet area must be positive")
        if kerf < 0:
            raise ValueError("Kerf cannot be negative")
        self.sheet_area = sheet_area
        self.kerf = kerf

    def estimate(self, panels: list[Panel]) -> MaterialEstimate:
        """Estimate stock for panels, padding each dimension by the kerf."""
        total_area = sum(
            (panel.width + self.kerf) * (panel.height + self.kerf) * panel.quantity
            for panel in panels
        )
        return MaterialEstimate(
            total_area_sqin=total_area,
            sheet_area_sqin=self.sheet_area,
            sheet_count=math.ceil(total_area / self.sheet_area),
            kerf=self.kerf,
        )
