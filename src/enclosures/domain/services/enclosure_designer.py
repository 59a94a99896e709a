"""Enclosure design service.

EnclosureDesigner selects a design path from the configured topology and
composes VolumeModel and PortSynthesizer into a complete, dimensioned
result. Fatal problems raise; infeasible but computable designs are returned
with advisories attached so batch runs can carry on.
"""

from __future__ import annotations

import logging

from ..exceptions import EnclosureDesignError, UnsupportedTopology
from ..value_objects import (
    AdvisoryKind,
    BandpassResult,
    ChamberResult,
    DesignResult,
    Dimensions,
    EnclosureConfig,
    InfeasibleDesign,
    Panel,
    PortedResult,
    PortSpec,
    SealedResult,
    Topology,
    to_cubic_feet,
)
from .panel_generation import PanelGenerationService
from .port_synthesizer import PortSynthesizer
from .volume_model import VolumeModel

logger = logging.getLogger(__name__)

__all__ = ["EnclosureDesigner", "TARGET_TOLERANCE", "resolve_topology"]

# Achieved volume may fall this far short of target and still meet it
TARGET_TOLERANCE = 0.05

_TOPOLOGY_ALIASES = {"bandpass_4th": Topology.BANDPASS}


def resolve_topology(tag: Topology | str) -> Topology:
    """Resolve a topology tag, accepting ``bandpass_4th`` as an alias.

    Raises:
        UnsupportedTopology: If the tag names no known topology.
    """
    if isinstance(tag, Topology):
        return tag
    if isinstance(tag, str):
        key = tag.strip().lower()
        if key in _TOPOLOGY_ALIASES:
            return _TOPOLOGY_ALIASES[key]
        try:
            return Topology(key)
        except ValueError:
            pass
    raise UnsupportedTopology(tag)


class EnclosureDesigner:
    """Designs sealed, ported and bandpass enclosures.

    Args:
        volume_model: Net volume calculator. A default is created if omitted.
        port_synthesizer: Port sizing service. A default is created if omitted.
        panel_service: Panel list generator. A default is created if omitted.
    """

    def __init__(
        self,
        volume_model: VolumeModel | None = None,
        port_synthesizer: PortSynthesizer | None = None,
        panel_service: PanelGenerationService | None = None,
    ) -> None:
        self.volume_model = volume_model or VolumeModel()
        self.port_synthesizer = port_synthesizer or PortSynthesizer()
        self.panel_service = panel_service or PanelGenerationService()

    def design(self, config: EnclosureConfig) -> DesignResult:
        """Produce a design for the configured topology.

        Raises:
            UnsupportedTopology: If the topology tag is unknown.
            InvalidGeometry: If the material leaves no interior.
            EnclosureDesignError: If a ported design has no tuning frequency.
        """
        topology = resolve_topology(config.topology)
        if topology == Topology.SEALED:
            result: DesignResult = self._design_sealed(config)
        elif topology == Topology.PORTED:
            result = self._design_ported(config)
        else:
            result = self._design_bandpass(config)

        for advisory in result.advisories:
            logger.warning("%s design advisory: %s", topology.value, advisory.message)
        logger.info(
            "Designed %s enclosure %.2f x %.2f x %.2f, net %.3f ft^3",
            topology.value,
            result.external.width,
            result.external.height,
            result.external.depth,
            to_cubic_feet(result.net_volume),
        )
        return result

    def generate_panels(self, config: EnclosureConfig, result: DesignResult) -> list[Panel]:
        """Return the ordered panel list for a design."""
        return self.panel_service.get_all_panels(config, result)

    def _design_sealed(self, config: EnclosureConfig) -> SealedResult:
        breakdown = self.volume_model.breakdown(config)
        internal = self._internal(config)
        net = breakdown.net
        meets = self._meets_target(net, config)
        return SealedResult(
            external=self._external(config),
            internal=internal,
            gross_volume=breakdown.gross,
            net_volume=net,
            target_volume=config.target_volume,
            meets_target=meets,
            driver_count=config.driver_count,
            separate_chambers=config.separate_chambers,
            advisories=self._volume_advisories(net, meets, config),
        )

    def _design_ported(self, config: EnclosureConfig) -> PortedResult:
        tuning = self._require_tuning(config)
        sealed = self._design_sealed(config)

        if sealed.net_volume <= 0:
            return PortedResult(
                external=sealed.external,
                internal=sealed.internal,
                gross_volume=sealed.gross_volume,
                net_volume=sealed.net_volume,
                target_volume=sealed.target_volume,
                meets_target=False,
                driver_count=sealed.driver_count,
                separate_chambers=sealed.separate_chambers,
                advisories=sealed.advisories,
                port=None,
                tuning_frequency=tuning,
            )

        port = self._refine_port(config, tuning, sealed.net_volume, sealed.internal.depth)
        net = port.box_volume
        meets = self._meets_target(net, config)
        advisories = list(self._volume_advisories(net, meets, config))
        advisories.extend(self._port_advisories(port))

        return PortedResult(
            external=sealed.external,
            internal=sealed.internal,
            gross_volume=sealed.gross_volume,
            net_volume=net,
            target_volume=sealed.target_volume,
            meets_target=meets,
            driver_count=sealed.driver_count,
            separate_chambers=sealed.separate_chambers,
            advisories=tuple(advisories),
            port=port,
            tuning_frequency=tuning,
        )

    def _design_bandpass(self, config: EnclosureConfig) -> BandpassResult:
        tuning = self._require_tuning(config)
        t = config.material_thickness
        internal = self._internal(config)
        face = internal.face_area

        usable = internal.volume - face * t
        sealed_share, ported_share = config.bandpass_ratio
        total_share = sealed_share + ported_share
        sealed_gross = usable * sealed_share / total_share
        ported_gross = usable * ported_share / total_share
        sealed_depth = sealed_gross / face
        ported_depth = ported_gross / face

        sealed_net = sealed_gross - self.volume_model.driver_displacement(config)

        advisories: list[InfeasibleDesign] = []
        port: PortSpec | None = None
        ported_net = ported_gross
        if ported_gross > 0:
            port = self._refine_port(config, tuning, ported_gross, ported_depth)
            ported_net = port.box_volume
            if ported_net <= 0:
                advisories.append(
                    InfeasibleDesign(
                        kind=AdvisoryKind.NEGATIVE_VOLUME,
                        message=(
                            f"Ported chamber net volume is {ported_net:.1f} in^3 after "
                            "the port wall"
                        ),
                    )
                )
            advisories.extend(self._port_advisories(port))
        else:
            advisories.append(
                InfeasibleDesign(
                    kind=AdvisoryKind.NEGATIVE_VOLUME,
                    message=(
                        f"Ported chamber volume is {ported_gross:.1f} in^3; "
                        "no port can be sized"
                    ),
                )
            )
        if sealed_net <= 0:
            advisories.insert(
                0,
                InfeasibleDesign(
                    kind=AdvisoryKind.NEGATIVE_VOLUME,
                    message=(
                        f"Sealed chamber net volume is {sealed_net:.1f} in^3 after "
                        "driver displacement"
                    ),
                ),
            )

        return BandpassResult(
            external=self._external(config),
            internal=internal,
            sealed_chamber=ChamberResult(
                gross_volume=sealed_gross, net_volume=sealed_net, depth=sealed_depth
            ),
            ported_chamber=ChamberResult(
                gross_volume=ported_gross,
                net_volume=ported_net,
                depth=ported_depth,
                port=port,
            ),
            divider_position=sealed_depth + t,
            bandpass_ratio=config.bandpass_ratio,
            driver_count=config.driver_count,
            tuning_frequency=tuning,
            advisories=tuple(advisories),
        )

    def _refine_port(
        self, config: EnclosureConfig, tuning: float, volume: float, depth: float
    ) -> PortSpec:
        internal = self._internal(config)
        return self.port_synthesizer.refine(
            tuning,
            volume,
            internal.width,
            depth,
            power_tier=config.power_tier,
            thickness=config.material_thickness,
            max_passes=config.max_refinement_passes,
            tolerance=config.refinement_tolerance,
        )

    def _internal(self, config: EnclosureConfig) -> Dimensions:
        return self.volume_model.internal_dimensions(
            config.max_width, config.max_height, config.max_depth, config.material_thickness
        )

    @staticmethod
    def _external(config: EnclosureConfig) -> Dimensions:
        return Dimensions(config.max_width, config.max_height, config.max_depth)

    @staticmethod
    def _require_tuning(config: EnclosureConfig) -> float:
        if config.tuning_frequency is None:
            topology = resolve_topology(config.topology).value
            raise EnclosureDesignError(
                f"A tuning frequency is required for {topology} enclosures"
            )
        return config.tuning_frequency

    @staticmethod
    def _meets_target(net_volume: float, config: EnclosureConfig) -> bool:
        per_driver = to_cubic_feet(net_volume) / config.driver_count
        return per_driver >= config.target_volume * (1 - TARGET_TOLERANCE)

    @staticmethod
    def _volume_advisories(
        net_volume: float, meets_target: bool, config: EnclosureConfig
    ) -> tuple[InfeasibleDesign, ...]:
        if net_volume <= 0:
            return (
                InfeasibleDesign(
                    kind=AdvisoryKind.NEGATIVE_VOLUME,
                    message=(
                        f"Net volume is {net_volume:.1f} in^3; displacements exceed "
                        "the internal volume"
                    ),
                ),
            )
        if not meets_target:
            per_driver = to_cubic_feet(net_volume) / config.driver_count
            return (
                InfeasibleDesign(
                    kind=AdvisoryKind.BELOW_TARGET,
                    message=(
                        f"{per_driver:.3f} ft^3 per driver is below the "
                        f"{config.target_volume:.3f} ft^3 target"
                    ),
                ),
            )
        return ()

    @staticmethod
    def _port_advisories(port: PortSpec) -> tuple[InfeasibleDesign, ...]:
        if port.fits_in_envelope:
            return ()
        return (
            InfeasibleDesign(
                kind=AdvisoryKind.PORT_TOO_LONG,
                message=(
                    f'Port length {port.length:.2f}" exceeds the '
                    f'{port.available_path_length:.2f}" available path'
                ),
                remedies=port.remedies,
            ),
        )
