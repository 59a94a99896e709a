"""JSON exporter for enclosure designs.

Exports the resolved inputs, the design result (volumes, chambers, port and
remedies), the panel list, the cut list, sheet layouts and all advisories.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from enclosures.domain.value_objects import (
    BandpassResult,
    Dimensions,
    EnclosureConfig,
    Panel,
    PortedResult,
    PortSpec,
    Topology,
)
from enclosures.infrastructure.exporters.base import ExporterRegistry

if TYPE_CHECKING:
    from enclosures.application.dtos import DesignOutput
    from enclosures.domain.value_objects import (
        CircularCutout,
        DesignResult,
        InfeasibleDesign,
        PortRemedy,
    )
    from enclosures.infrastructure.panel_nesting import NestingResult


logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"


@ExporterRegistry.register("json")
class JsonDesignExporter:
    """Exports a complete design run as JSON.

    Attributes:
        format_name: "json"
        file_extension: "json"
    """

    format_name: ClassVar[str] = "json"
    file_extension: ClassVar[str] = "json"

    def __init__(self, include_nesting: bool = True, indent: int = 2) -> None:
        self.include_nesting = include_nesting
        self.indent = indent

    def export(self, output: DesignOutput, path: Path) -> None:
        path.write_text(self.export_string(output))
        logger.info(f"Exported JSON to {path}")

    def export_string(self, output: DesignOutput) -> str:
        return json.dumps(self.to_dict(output), indent=self.indent)

    def to_dict(self, output: DesignOutput) -> dict[str, Any]:
        data: dict[str, Any] = {
            "schema_version": SCHEMA_VERSION,
            "name": output.name,
            "valid": output.is_valid,
            "errors": list(output.errors),
        }
        if output.config is not None:
            data["config"] = _config_dict(output.config)
        if output.design is not None:
            data["design"] = _design_dict(output.design)
            data["advisories"] = [_advisory_dict(a) for a in output.advisories]
        data["panels"] = [_panel_dict(p) for p in output.panels]
        data["cut_list"] = [
            {
                "label": entry.label,
                "width": round(entry.width, 3),
                "height": round(entry.height, 3),
                "panel_type": entry.panel_type.value,
            }
            for entry in output.cut_list
        ]
        if self.include_nesting and output.nesting is not None:
            data["nesting"] = _nesting_dict(output.nesting)
        if output.material is not None:
            data["material"] = {
                "total_area_sqft": round(output.material.total_area_sqft, 2),
                "sheet_count": output.material.sheet_count,
                "kerf": output.material.kerf,
            }
        if output.port_noise is not None:
            data["port_noise"] = {
                "velocity_m_s": round(output.port_noise.velocity, 2),
                "level": output.port_noise.level.value,
            }
        return data


def _dims(dims: Dimensions) -> dict[str, float]:
    return {
        "width": round(dims.width, 3),
        "height": round(dims.height, 3),
        "depth": round(dims.depth, 3),
    }


def _config_dict(config: EnclosureConfig) -> dict[str, Any]:
    topology = config.topology
    if isinstance(topology, Topology):
        topology = topology.value
    return {
        "topology": topology,
        "target_volume": config.target_volume,
        "tuning_frequency": config.tuning_frequency,
        "driver_count": config.driver_count,
        "driver": {
            "brand": config.driver.brand,
            "model": config.driver.model,
            "size": config.driver.size,
            "cutout_diameter": config.driver.cutout_diameter,
            "mounting_depth": config.driver.mounting_depth,
            "displacement": config.driver.displacement,
        },
        "envelope": _dims(Dimensions(*config.envelope)),
        "material_thickness": config.material_thickness,
        "double_baffle": config.double_baffle,
        "extra_bracing": config.extra_bracing,
        "separate_chambers": config.separate_chambers,
        "power_tier": config.power_tier.value,
        "bandpass_ratio": list(config.bandpass_ratio),
    }


def _design_dict(design: DesignResult) -> dict[str, Any]:
    data: dict[str, Any] = {
        "topology": design.topology.value,
        "external": _dims(design.external),
        "internal": _dims(design.internal),
        "net_volume_cu_in": round(design.net_volume, 2),
        "feasible": design.feasible,
    }
    if isinstance(design, BandpassResult):
        data["divider_position"] = round(design.divider_position, 3)
        data["bandpass_ratio"] = list(design.bandpass_ratio)
        data["tuning_frequency"] = design.tuning_frequency
        for key, chamber in (
            ("sealed_chamber", design.sealed_chamber),
            ("ported_chamber", design.ported_chamber),
        ):
            data[key] = {
                "gross_volume_cu_in": round(chamber.gross_volume, 2),
                "net_volume_cu_in": round(chamber.net_volume, 2),
                "depth": round(chamber.depth, 3),
                "port": _port_dict(chamber.port) if chamber.port else None,
            }
        return data

    data.update(
        gross_volume_cu_in=round(design.gross_volume, 2),
        net_volume_cu_ft=round(design.net_volume_cu_ft, 3),
        per_driver_volume_cu_ft=round(design.per_driver_volume_cu_ft, 3),
        target_volume_cu_ft=design.target_volume,
        meets_target=design.meets_target,
        driver_count=design.driver_count,
    )
    if isinstance(design, PortedResult):
        data["tuning_frequency"] = design.tuning_frequency
        data["port"] = _port_dict(design.port) if design.port else None
    return data


def _port_dict(port: PortSpec) -> dict[str, Any]:
    return {
        "requested_tuning": port.requested_tuning,
        "achieved_tuning": round(port.achieved_tuning, 2),
        "width": round(port.width, 3),
        "height": round(port.height, 3),
        "area": round(port.area, 3),
        "length": round(port.length, 3),
        "path_type": port.path_type.value,
        "fits_in_envelope": port.fits_in_envelope,
        "available_path_length": round(port.available_path_length, 3),
        "refinement_passes": port.refinement_passes,
        "converged": port.converged,
        "remedies": [_remedy_dict(r) for r in port.remedies],
    }


def _remedy_dict(remedy: PortRemedy) -> dict[str, Any]:
    data: dict[str, Any] = {"type": remedy.remedy_type.value, "message": remedy.message}
    for key in ("port_area", "port_height", "tuning_frequency", "external_length"):
        value = getattr(remedy, key)
        if value is not None:
            data[key] = round(value, 3)
    return data


def _advisory_dict(advisory: InfeasibleDesign) -> dict[str, Any]:
    return {
        "kind": advisory.kind.value,
        "message": advisory.message,
        "remedies": [_remedy_dict(r) for r in advisory.remedies],
    }


def _cutout_dict(cutout: CircularCutout) -> dict[str, float]:
    return {
        "diameter": round(cutout.diameter, 3),
        "offset_x": round(cutout.offset_x, 3),
        "offset_y": round(cutout.offset_y, 3),
    }


def _panel_dict(panel: Panel) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": panel.name,
        "width": round(panel.width, 3),
        "height": round(panel.height, 3),
        "quantity": panel.quantity,
        "panel_type": panel.panel_type.value,
        "cutouts": [_cutout_dict(c) for c in panel.cutouts],
    }
    if panel.notes:
        data["notes"] = panel.notes
    return data


def _nesting_dict(nesting: NestingResult) -> dict[str, Any]:
    return {
        "sheet_count": nesting.sheet_count,
        "efficiency_percent": round(nesting.usage.efficiency_percent, 1),
        "sheets": [
            {
                "index": layout.sheet_index,
                "width": layout.sheet_config.width,
                "length": layout.sheet_config.length,
                "efficiency_percent": round(layout.efficiency_percent, 1),
                "placements": [
                    {
                        "label": p.label,
                        "x": round(p.x, 3),
                        "y": round(p.y, 3),
                        "width": round(p.width, 3),
                        "height": round(p.height, 3),
                        "rotated": p.rotated,
                    }
                    for p in layout.placements
                ],
            }
            for layout in nesting.layouts
        ],
        "unplaced": [
            {
                "label": u.label,
                "width": round(u.width, 3),
                "height": round(u.height, 3),
                "message": u.message,
            }
            for u in nesting.unplaced
        ],
    }
