"""Volume model for enclosure air space.

This module provides VolumeModel, which derives internal dimensions and the
net acoustic volume of a box from its external envelope, material thickness
and the elements that displace air inside it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from ..exceptions import InvalidGeometry
from ..value_objects import Dimensions, EnclosureConfig, to_cubic_inches

logger = logging.getLogger(__name__)

__all__ = [
    "TERMINAL_CUP_DISPLACEMENT",
    "WINDOW_OPENING_RATIO",
    "VolumeBreakdown",
    "VolumeModel",
]

# 3" x 3" x 1.5" deep terminal cup
TERMINAL_CUP_DISPLACEMENT = 3.0 * 3.0 * 1.5

WINDOW_OPENING_RATIO = 0.6


@dataclass(frozen=True)
class VolumeBreakdown:
    """Gross internal volume and each displacement subtracted from it.

    All values are in cubic inches. ``net`` may be negative.
    """

    gross: float
    drivers: float
    double_baffle: float
    bracing: float
    terminal_cup: float

    @property
    def total_displacement(self) -> float:
        return self.drivers + self.double_baffle + self.bracing + self.terminal_cup

    @property
    def net(self) -> float:
        return self.gross - self.total_displacement


class VolumeModel:
    """Computes internal dimensions and net air volume of a box."""

    def internal_dimensions(
        self, width: float, height: float, depth: float, thickness: float
    ) -> Dimensions:
        """Subtract two material thicknesses from each external axis.

        Raises:
            InvalidGeometry: If any resulting dimension is zero or negative.
        """
        inner = (width - 2 * thickness, height - 2 * thickness, depth - 2 * thickness)
        if min(inner) <= 0:
            raise InvalidGeometry(
                f"Material thickness {thickness}\" leaves no interior in a "
                f"{width}\" x {height}\" x {depth}\" envelope",
                dimensions=inner,
            )
        return Dimensions(*inner)

    def driver_displacement(self, config: EnclosureConfig) -> float:
        return to_cubic_inches(config.driver.displacement) * config.driver_count

    def double_baffle_displacement(
        self,
        width: float,
        height: float,
        thickness: float,
        cutout_diameter: float,
        cutout_count: int = 1,
    ) -> float:
        """Volume of a second baffle layer less its driver cutouts."""
        cutout_area = cutout_count * math.pi * (cutout_diameter / 2) ** 2
        return (width * height - cutout_area) * thickness

    def bracing_displacement(
        self,
        internal_width: float,
        internal_height: float,
        thickness: float,
        window_ratio: float = WINDOW_OPENING_RATIO,
    ) -> float:
        """Volume of a window brace with four 45 degree corner blocks.

        The frame spans the internal cross-section with a centered opening
        covering ``window_ratio`` of each dimension. Corner blocks are right
        triangles whose legs equal the remaining margin on each side.
        """
        frame_area = internal_width * internal_height - (
            internal_width * window_ratio * internal_height * window_ratio
        )
        leg = (1 - window_ratio) / 2
        corner_area = 4 * (0.5 * (internal_width * leg) * (internal_height * leg))
        return (frame_area + corner_area) * thickness

    def breakdown(self, config: EnclosureConfig) -> VolumeBreakdown:
        """Compute the gross volume and every displacement for a config."""
        inner = self.internal_dimensions(
            config.max_width, config.max_height, config.max_depth, config.material_thickness
        )
        return self._breakdown(config, inner)

    def _breakdown(self, config: EnclosureConfig, inner: Dimensions) -> VolumeBreakdown:
        double_baffle = 0.0
        if config.double_baffle:
            double_baffle = self.double_baffle_displacement(
                inner.width,
                inner.height,
                config.material_thickness,
                config.driver.cutout_diameter,
                config.driver_count,
            )
        bracing = 0.0
        if config.extra_bracing:
            bracing = self.bracing_displacement(
                inner.width, inner.height, config.material_thickness
            )
        return VolumeBreakdown(
            gross=inner.volume,
            drivers=self.driver_displacement(config),
            double_baffle=double_baffle,
            bracing=bracing,
            terminal_cup=TERMINAL_CUP_DISPLACEMENT,
        )

    def net_volume(self, config: EnclosureConfig) -> float:
        """Net air volume in cubic inches.

        The result is not clamped at zero; callers decide how to report a
        box whose displacements exceed its gross volume.
        """
        result = self.breakdown(config)
        logger.debug(
            "Net volume %.1f in^3 (gross %.1f, displaced %.1f)",
            result.net,
            result.gross,
            result.total_displacement,
        )
        return result.net

    def optimize_depth(self, config: EnclosureConfig, target_volume: float) -> float:
        """Find the envelope depth whose net volume lands closest to a target.

        Depth is reduced in 0.1" steps from ``config.max_depth`` down to four
        material thicknesses, stopping once the net volume drops to or below
        the target.

        Args:
            config: Design inputs; only the depth is varied.
            target_volume: Target net volume in cubic feet.

        Returns:
            The best external depth in inches.
        """
        target = to_cubic_inches(target_volume)
        t = config.material_thickness
        best_depth = config.max_depth
        best_diff = math.inf

        for step in range(int(config.max_depth * 10), int(4 * t * 10) - 1, -1):
            depth = step / 10.0
            try:
                inner = self.internal_dimensions(
                    config.max_width, config.max_height, depth, t
                )
            except InvalidGeometry:
                break
            volume = self._breakdown(config, inner).net
            diff = abs(volume - target)
            if diff < best_diff:
                best_diff = diff
                best_depth = depth
            if volume <= target:
                break

        logger.debug("Optimized depth %.1f\" for %.3f ft^3", best_depth, target_volume)
        return best_depth

