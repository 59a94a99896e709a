"""Data Transfer Objects for the application layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from enclosures.domain import DesignResult, EnclosureConfig, MaterialEstimate, Panel
from enclosures.domain.services import NoiseLevel
from enclosures.domain.value_objects import InfeasibleDesign

if TYPE_CHECKING:
    from enclosures.infrastructure.panel_nesting import CutListEntry, NestingResult


@dataclass(frozen=True)
class PortNoise:
    """Estimated port air velocity at the tuning frequency."""

    velocity: float
    level: NoiseLevel


@dataclass
class DesignOutput:
    """Output DTO containing one design run's results.

    Attributes:
        name: Project or client label.
        config: The domain inputs the design was run with.
        design: Design result, or None if the run failed.
        panels: Ordered panel list.
        cut_list: Panels expanded to individual pieces, largest first.
        nesting: Sheet nesting result, if nesting was enabled.
        material: Area-based sheet estimate.
        port_noise: Port velocity estimate when the driver's Xmax is known.
        errors: Fatal error messages; non-empty means the run failed.
    """

    name: str
    config: EnclosureConfig | None
    design: DesignResult | None = None
    panels: list[Panel] = field(default_factory=list)
    cut_list: list[CutListEntry] = field(default_factory=list)
    nesting: NestingResult | None = None
    material: MaterialEstimate | None = None
    port_noise: PortNoise | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """True if the design completed without fatal errors."""
        return not self.errors and self.design is not None

    @property
    def advisories(self) -> list[InfeasibleDesign]:
        return list(self.design.advisories) if self.design is not None else []

    @property
    def warnings(self) -> list[str]:
        """All non-fatal messages: design advisories and unplaced panels."""
        messages = [a.message for a in self.advisories]
        if self.nesting is not None:
            messages.extend(u.message for u in self.nesting.unplaced)
        return messages


@dataclass
class BatchOutput:
    """Output DTO for a batch of independent design runs.

    Attributes:
        outputs: One DesignOutput per input, in input order.
    """

    outputs: list[DesignOutput] = field(default_factory=list)

    @property
    def succeeded(self) -> list[DesignOutput]:
        return [o for o in self.outputs if o.is_valid]

    @property
    def failed(self) -> list[DesignOutput]:
        return [o for o in self.outputs if not o.is_valid]
