"""Slot port synthesis using the Helmholtz resonance model.

This module provides PortSynthesizer, which sizes a slot port for a target
tuning frequency and net box volume, checks that the port fits the path
available inside the box, and suggests remedies when it does not.

The model relates tuning frequency Fb, box volume Vb, port area Sp and
effective port length Lp:

    Fb = (c / 2pi) * sqrt(Sp / (Vb * Lp))

where Lp is the physical length plus an end correction of 0.825 * sqrt(Sp)
for each open port end. Lengths are in inches and volumes in cubic inches.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from enum import Enum

from ..value_objects import (
    PathType,
    PortRemedy,
    PortSpec,
    PowerTier,
    RemedyType,
    to_cubic_feet,
)

logger = logging.getLogger(__name__)

__all__ = [
    "END_CORRECTION_FACTOR",
    "SPEED_OF_SOUND",
    "NoiseLevel",
    "PortSynthesizer",
    "noise_estimate",
    "port_velocity",
]

SPEED_OF_SOUND = 13504.0  # inches/second at ~70F
END_CORRECTION_FACTOR = 0.825

SQUARE_METERS_PER_SQUARE_INCH = 0.00064516


class NoiseLevel(str, Enum):
    """Rough audibility class of port air turbulence."""

    QUIET = "quiet"
    MODERATE = "moderate"
    LOUD = "loud"


def port_velocity(
    port_area: float, cone_area: float, xmax: float, frequency: float
) -> float:
    """Estimate peak port air velocity in m/s.

    Args:
        port_area: Port cross-section in square inches.
        cone_area: Total radiating cone area in square inches.
        xmax: One-way linear excursion in millimetres.
        frequency: Frequency of interest in Hz.
    """
    if port_area <= 0:
        raise ValueError("Port area must be positive")
    cone_velocity = 2 * math.pi * frequency * (xmax / 1000.0)
    return cone_velocity * (
        (cone_area * SQUARE_METERS_PER_SQUARE_INCH)
        / (port_area * SQUARE_METERS_PER_SQUARE_INCH)
    )


def noise_estimate(velocity: float) -> NoiseLevel:
    """Classify port velocity; turbulence becomes audible past ~25-30 m/s."""
    if velocity <= 20:
        return NoiseLevel.QUIET
    if velocity <= 30:
        return NoiseLevel.MODERATE
    return NoiseLevel.LOUD


class PortSynthesizer:
    """Service for sizing slot ports.

    A slot port uses box walls for two of its sides and a single port wall
    panel for the third. Its width is bounded by the internal box width and
    its height is kept within a buildable band.
    """

    SLOT_CLEARANCE = 0.5
    MIN_SLOT_WIDTH = 3.0
    MIN_SLOT_HEIGHT = 2.0
    MAX_SLOT_HEIGHT = 6.0
    MIN_PORT_LENGTH = 1.0

    def __init__(self, end_corrections: int = 1) -> None:
        if end_corrections < 0:
            raise ValueError("End corrections cannot be negative")
        self.end_corrections = end_corrections

    def end_correction(self, port_area: float) -> float:
        """Total end correction length for a port of the given area."""
        return self.end_corrections * END_CORRECTION_FACTOR * math.sqrt(port_area)

    def port_length(
        self, tuning_frequency: float, box_volume: float, port_area: float
    ) -> float:
        """Physical port length needed to reach a tuning frequency.

        Lengths shorter than ``MIN_PORT_LENGTH`` are clamped up to it. Returns
        0.0 when any input is non-positive.
        """
        if tuning_frequency <= 0 or box_volume <= 0 or port_area <= 0:
            return 0.0
        effective = self._coefficient(tuning_frequency, box_volume) * port_area
        return max(effective - self.end_correction(port_area), self.MIN_PORT_LENGTH)

    def tuning_frequency(
        self, box_volume: float, port_area: float, port_length: float
    ) -> float:
        """Tuning frequency of a box and port; the inverse of port_length."""
        if box_volume <= 0 or port_area <= 0 or port_length <= 0:
            return 0.0
        effective = port_length + self.end_correction(port_area)
        return (SPEED_OF_SOUND / (2 * math.pi)) * math.sqrt(
            port_area / (box_volume * effective)
        )

    def minimum_port_area(self, box_volume_cu_ft: float, power_tier: PowerTier) -> float:
        """Minimum port area in square inches for a net volume in cubic feet."""
        return box_volume_cu_ft * power_tier.port_area_per_cubic_foot

    def slot_dimensions(
        self, port_area: float, internal_width: float, thickness: float
    ) -> tuple[float, float]:
        """Choose slot width and height for a target area.

        Width starts at the usable internal width (less the port wall and a
        clearance), never below ``MIN_SLOT_WIDTH``. Height is the remaining
        factor of the area, clamped into the buildable band, after which the
        width is re-derived and capped at its starting bound.

        Returns:
            A ``(width, height)`` tuple in inches.
        """
        bound = max(internal_width - thickness - self.SLOT_CLEARANCE, self.MIN_SLOT_WIDTH)
        height = port_area / bound
        clamped = min(max(height, self.MIN_SLOT_HEIGHT), self.MAX_SLOT_HEIGHT)
        if clamped == height:
            return bound, height
        return min(port_area / clamped, bound), clamped

    def synthesize(
        self,
        tuning_frequency: float,
        net_volume: float,
        internal_width: float,
        internal_depth: float,
        power_tier: PowerTier = PowerTier.SQL,
        thickness: float = 0.75,
    ) -> PortSpec:
        """Solve a single slot port against a fixed net volume.

        Args:
            tuning_frequency: Target tuning in Hz.
            net_volume: Net box volume in cubic inches.
            internal_width: Internal box width in inches.
            internal_depth: Internal box (or chamber) depth in inches.
            power_tier: Tier for minimum port area.
            thickness: Port wall material thickness.

        Returns:
            PortSpec with remedies populated when the port does not fit.
        """
        if tuning_frequency <= 0:
            raise ValueError("Tuning frequency must be positive")
        if net_volume <= 0:
            raise ValueError("Cannot synthesize a port for a non-positive volume")

        area_target = self.minimum_port_area(to_cubic_feet(net_volume), power_tier)
        width, height = self.slot_dimensions(area_target, internal_width, thickness)
        area = width * height
        length = self.port_length(tuning_frequency, net_volume, area)

        available = internal_depth + internal_width - width - 2 * thickness
        fits = length <= available
        path_type = PathType.STRAIGHT if length <= internal_depth else PathType.FOLDED

        port = PortSpec(
            requested_tuning=tuning_frequency,
            achieved_tuning=self.tuning_frequency(net_volume, area, length),
            width=width,
            height=height,
            area=area,
            length=length,
            path_type=path_type,
            fits_in_envelope=fits,
            available_path_length=available,
            box_volume=net_volume,
            power_tier=power_tier,
            material_thickness=thickness,
            end_corrections=self.end_corrections,
        )
        if not fits:
            port = replace(port, remedies=self.remedies(port))
        return port

    def refine(
        self,
        tuning_frequency: float,
        base_volume: float,
        internal_width: float,
        internal_depth: float,
        power_tier: PowerTier = PowerTier.SQL,
        thickness: float = 0.75,
        max_passes: int = 20,
        tolerance: float = 0.01,
    ) -> PortSpec:
        """Solve the port and the volume its own wall displaces together.

        The port wall takes air out of the box, which lowers the net volume
        and lengthens the port. Each pass subtracts the current port's wall
        displacement from ``base_volume`` and re-solves, stopping when the
        corrected volume moves by no more than ``tolerance`` cubic inches or
        ``max_passes`` solves have been made. ``max_passes=2`` gives the
        classic single-correction result.

        Returns:
            The final PortSpec; its ``box_volume`` is the corrected net volume.
            When the wall alone displaces the whole box, solving stops and
            ``box_volume`` carries the non-positive corrected volume.
        """
        if max_passes < 1:
            raise ValueError("At least one pass is required")

        volume = base_volume
        port = self.synthesize(
            tuning_frequency, volume, internal_width, internal_depth, power_tier, thickness
        )
        passes = 1
        converged = False

        while passes < max_passes:
            corrected = base_volume - port.wall_displacement
            if corrected <= 0:
                logger.warning(
                    "Port wall displacement %.1f in^3 exceeds box volume %.1f in^3",
                    port.wall_displacement,
                    base_volume,
                )
                port = replace(port, box_volume=corrected)
                break
            port = self.synthesize(
                tuning_frequency,
                corrected,
                internal_width,
                internal_depth,
                power_tier,
                thickness,
            )
            passes += 1
            delta = abs(corrected - volume)
            volume = corrected
            logger.debug(
                "Refinement pass %d: volume %.2f in^3, length %.3f\", delta %.4f",
                passes,
                volume,
                port.length,
                delta,
            )
            if delta <= tolerance:
                converged = True
                break

        if not converged:
            logger.debug("Port refinement stopped after %d passes", passes)
        return replace(port, refinement_passes=passes, converged=converged)

    def remedies(self, port: PortSpec) -> tuple[PortRemedy, ...]:
        """Independent suggestions for a port longer than its available path.

        Each remedy is computed on its own against the original port; none is
        applied. Resizing and retuning require a positive path length.
        """
        available = port.available_path_length
        excess = port.length - available
        suggestions: list[PortRemedy] = []

        if available > 0:
            area = self.area_for_length(port.requested_tuning, port.box_volume, available)
            suggestions.append(
                PortRemedy(
                    remedy_type=RemedyType.RESIZE_PORT_AREA,
                    message=(
                        f"Resize port area from {port.area:.1f} to {area:.1f} sq in "
                        f"to fit a {available:.1f}\" path"
                    ),
                    port_area=area,
                    port_height=area / port.width,
                )
            )
            raised = self.tuning_frequency(port.box_volume, port.area, available)
            suggestions.append(
                PortRemedy(
                    remedy_type=RemedyType.RAISE_TUNING,
                    message=f"Raise tuning to ~{raised:.0f} Hz to fit port",
                    tuning_frequency=raised,
                )
            )

        suggestions.append(
            PortRemedy(
                remedy_type=RemedyType.EXTERNAL_PORT,
                message=f"Use external port extending {excess:.1f}\" outside box",
                external_length=excess,
            )
        )
        return tuple(suggestions)

    def area_for_length(
        self, tuning_frequency: float, box_volume: float, port_length: float
    ) -> float:
        """Port area whose required physical length equals ``port_length``.

        Solves ``a*Sp - e*sqrt(Sp) = L`` for Sp, where ``a`` is the Helmholtz
        coefficient and ``e`` the total end correction factor.
        """
        if port_length <= 0:
            raise ValueError("Port length must be positive")
        a = self._coefficient(tuning_frequency, box_volume)
        e = self.end_corrections * END_CORRECTION_FACTOR
        root = (e + math.sqrt(e * e + 4 * a * port_length)) / (2 * a)
        return root * root

    def _coefficient(self, tuning_frequency: float, box_volume: float) -> float:
        return SPEED_OF_SOUND**2 / (
            4 * math.pi**2 * tuning_frequency**2 * box_volume
        )

