"""Enclosure configuration and design result value objects.

Design results form a tagged union with one case per topology:
``SealedResult``, ``PortedResult`` and ``BandpassResult``. Consumers
dispatch on the concrete type (or its ``topology`` tag).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union

from ._drivers import DriverSpec
from ._geometry import Dimensions, to_cubic_feet


class Topology(str, Enum):
    """Enclosure topologies supported by the designer."""

    SEALED = "sealed"
    PORTED = "ported"
    BANDPASS = "bandpass"


class PowerTier(str, Enum):
    """Power level tier used to size the minimum port area.

    Attributes:
        DAILY: Daily-driver listening levels.
        SQL: Sound quality loud.
        SPL: Competition sound pressure level.
    """

    DAILY = "daily"
    SQL = "sql"
    SPL = "spl"

    @property
    def port_area_per_cubic_foot(self) -> float:
        """Minimum port area (sq in) per cubic foot of net volume."""
        return _PORT_AREA_MULTIPLIERS[self]


_PORT_AREA_MULTIPLIERS: dict[PowerTier, float] = {
    PowerTier.DAILY: 12.0,
    PowerTier.SQL: 14.0,
    PowerTier.SPL: 18.0,
}


class PathType(str, Enum):
    """How a slot port is routed inside the box."""

    STRAIGHT = "straight"
    FOLDED = "folded"


class RemedyType(str, Enum):
    """Advisory remedies for a port that does not fit the envelope."""

    RESIZE_PORT_AREA = "resize_port_area"
    RAISE_TUNING = "raise_tuning"
    EXTERNAL_PORT = "external_port"


class AdvisoryKind(str, Enum):
    """Categories of non-fatal design advisories."""

    NEGATIVE_VOLUME = "negative_volume"
    PORT_TOO_LONG = "port_too_long"
    BELOW_TARGET = "below_target"


@dataclass(frozen=True)
class EnclosureConfig:
    """Immutable inputs for one design run.

    Volumes are in cubic feet, lengths in inches.

    Attributes:
        topology: Enclosure topology tag (a Topology or its string value).
        target_volume: Target net volume per driver in cubic feet.
        tuning_frequency: Target tuning in Hz (ported and bandpass only).
        driver_count: Number of drivers mounted in the box.
        driver: Mounting data for the driver model.
        max_width: External envelope width.
        max_height: External envelope height.
        max_depth: External envelope depth.
        material_thickness: Sheet material thickness.
        double_baffle: Add a second inner layer behind the front baffle.
        extra_bracing: Add a window brace.
        separate_chambers: Give each driver its own sub-chamber.
        power_tier: Port sizing tier.
        bandpass_ratio: Sealed:ported volume split for bandpass boxes.
        max_refinement_passes: Upper bound on port/volume refinement passes.
        refinement_tolerance: Volume change (cubic inches) treated as converged.
    """

    topology: Topology | str
    target_volume: float
    driver: DriverSpec
    max_width: float
    max_height: float
    max_depth: float
    tuning_frequency: float | None = None
    driver_count: int = 1
    material_thickness: float = 0.75
    double_baffle: bool = False
    extra_bracing: bool = False
    separate_chambers: bool = False
    power_tier: PowerTier = PowerTier.SQL
    bandpass_ratio: tuple[float, float] = (1.0, 2.0)
    max_refinement_passes: int = 20
    refinement_tolerance: float = 0.01

    def __post_init__(self) -> None:
        if self.driver_count < 1:
            raise ValueError("Driver count must be at least 1")
        if self.material_thickness <= 0:
            raise ValueError("Material thickness must be positive")
        if self.target_volume <= 0:
            raise ValueError("Target volume must be positive")
        if self.tuning_frequency is not None and self.tuning_frequency <= 0:
            raise ValueError("Tuning frequency must be positive")
        if len(self.bandpass_ratio) != 2 or min(self.bandpass_ratio) <= 0:
            raise ValueError("Bandpass ratio must be two positive numbers")
        if self.max_refinement_passes < 1:
            raise ValueError("At least one refinement pass is required")

    @property
    def envelope(self) -> tuple[float, float, float]:
        return (self.max_width, self.max_height, self.max_depth)


@dataclass(frozen=True)
class PortRemedy:
    """One advisory fix for a port that is too long for the envelope.

    Only the fields relevant to the remedy type are populated.
    """

    remedy_type: RemedyType
    message: str
    port_area: float | None = None
    port_height: float | None = None
    tuning_frequency: float | None = None
    external_length: float | None = None


@dataclass(frozen=True)
class PortSpec:
    """Synthesized slot port.

    Attributes:
        requested_tuning: Target tuning in Hz.
        achieved_tuning: Tuning recomputed from width, height and length.
        width: Slot width in inches.
        height: Slot height in inches.
        area: Cross-section area in square inches (width x height).
        length: Physical port length in inches.
        path_type: Straight along the depth, or folded around a corner.
        fits_in_envelope: True if the length fits the folded path.
        available_path_length: Folded path capacity in inches.
        box_volume: Net volume after the port wall (cubic inches). Non-positive
            when the wall displaces more than the box holds.
        power_tier: Tier used for minimum port area.
        material_thickness: Thickness of the port wall.
        end_corrections: Number of open ends receiving end correction.
        refinement_passes: Port/volume solve passes performed.
        converged: True if refinement met its tolerance.
        remedies: Advisory remedies when the port does not fit.
    """

    requested_tuning: float
    achieved_tuning: float
    width: float
    height: float
    area: float
    length: float
    path_type: PathType
    fits_in_envelope: bool
    available_path_length: float
    box_volume: float
    power_tier: PowerTier = PowerTier.SQL
    material_thickness: float = 0.75
    end_corrections: int = 1
    refinement_passes: int = 1
    converged: bool = True
    remedies: tuple[PortRemedy, ...] = ()

    @property
    def air_volume(self) -> float:
        """Air volume inside the port in cubic inches."""
        return self.area * self.length

    @property
    def wall_displacement(self) -> float:
        """Volume of the port wall panel in cubic inches."""
        return self.length * self.height * self.material_thickness

    @property
    def excess_length(self) -> float:
        return max(0.0, self.length - self.available_path_length)


@dataclass(frozen=True)
class InfeasibleDesign:
    """Non-fatal advisory attached to a design result.

    Attributes:
        kind: Category of the advisory.
        message: Human-readable description.
        remedies: Suggested fixes, if any apply.
    """

    kind: AdvisoryKind
    message: str
    remedies: tuple[PortRemedy, ...] = ()


@dataclass(frozen=True)
class BoxResult:
    """Fields shared by single-chamber (sealed and ported) results.

    Volumes are in cubic inches unless the attribute says otherwise.
    """

    external: Dimensions
    internal: Dimensions
    gross_volume: float
    net_volume: float
    target_volume: float
    meets_target: bool
    driver_count: int
    separate_chambers: bool = False
    advisories: tuple[InfeasibleDesign, ...] = ()

    @property
    def net_volume_cu_ft(self) -> float:
        return to_cubic_feet(self.net_volume)

    @property
    def per_driver_volume_cu_ft(self) -> float:
        return self.net_volume_cu_ft / self.driver_count

    @property
    def feasible(self) -> bool:
        return self.net_volume > 0 and not any(
            a.kind != AdvisoryKind.BELOW_TARGET for a in self.advisories
        )


@dataclass(frozen=True)
class SealedResult(BoxResult):
    """Design for a sealed (acoustic suspension) box."""

    topology: ClassVar[Topology] = Topology.SEALED


@dataclass(frozen=True)
class PortedResult(BoxResult):
    """Design for a ported (bass reflex) box.

    ``port`` is None only when the net volume is non-positive, in which case
    no port can be solved and the result carries a negative-volume advisory.
    """

    topology: ClassVar[Topology] = Topology.PORTED

    port: PortSpec | None = None
    tuning_frequency: float | None = None


@dataclass(frozen=True)
class ChamberResult:
    """One chamber of a two-chamber bandpass box.

    Attributes:
        gross_volume: Chamber share of the usable volume (cubic inches).
        net_volume: Volume after displacements (cubic inches).
        depth: Chamber depth along the box depth axis (inches).
        port: Port serving the chamber, if any.
    """

    gross_volume: float
    net_volume: float
    depth: float
    port: PortSpec | None = None

    @property
    def net_volume_cu_ft(self) -> float:
        return to_cubic_feet(self.net_volume)


@dataclass(frozen=True)
class BandpassResult:
    """Design for a two-chamber (4th order) bandpass box.

    Attributes:
        divider_position: Distance of the divider from the front outer face.
    """

    topology: ClassVar[Topology] = Topology.BANDPASS

    external: Dimensions
    internal: Dimensions
    sealed_chamber: ChamberResult
    ported_chamber: ChamberResult
    divider_position: float
    bandpass_ratio: tuple[float, float]
    driver_count: int
    tuning_frequency: float | None = None
    advisories: tuple[InfeasibleDesign, ...] = field(default=())

    @property
    def net_volume(self) -> float:
        return self.sealed_chamber.net_volume + self.ported_chamber.net_volume

    @property
    def port(self) -> PortSpec | None:
        return self.ported_chamber.port

    @property
    def feasible(self) -> bool:
        return (
            self.sealed_chamber.net_volume > 0
            and self.ported_chamber.net_volume > 0
            and not any(a.kind != AdvisoryKind.BELOW_TARGET for a in self.advisories)
        )


DesignResult = Union[SealedResult, PortedResult, BandpassResult]
