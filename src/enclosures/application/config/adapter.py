"""Adapters from EnclosureConfiguration to domain and infrastructure values.

The pydantic schema is the file format; the engine works on immutable domain
objects. These functions are the only place the two meet.
"""

from dataclasses import replace

from enclosures.application.config.schema import DriverSection, EnclosureConfiguration
from enclosures.domain.value_objects import DriverSpec, EnclosureConfig
from enclosures.infrastructure.driver_catalog import default_spec_for_size, extract_size
from enclosures.infrastructure.driver_repository import DriverRepository, resolve_driver
from enclosures.infrastructure.panel_nesting import NestingConfig, SheetConfig


def config_to_enclosure(config: EnclosureConfiguration, driver: DriverSpec) -> EnclosureConfig:
    """Convert a configuration and a resolved driver to an EnclosureConfig."""
    section = config.enclosure
    return EnclosureConfig(
        topology=section.topology,
        target_volume=section.target_volume,
        driver=driver,
        max_width=section.width,
        max_height=section.height,
        max_depth=section.depth,
        tuning_frequency=section.tuning_frequency,
        driver_count=section.driver_count,
        material_thickness=section.material_thickness,
        double_baffle=section.double_baffle,
        extra_bracing=section.extra_bracing,
        separate_chambers=section.separate_chambers,
        power_tier=section.power_level,
        bandpass_ratio=section.ratio,
        max_refinement_passes=section.refinement.max_passes,
        refinement_tolerance=section.refinement.tolerance,
    )


def config_to_nesting(config: EnclosureConfiguration) -> NestingConfig:
    nesting = config.nesting
    return NestingConfig(
        enabled=nesting.enabled,
        sheet=SheetConfig(width=nesting.sheet_size.width, length=nesting.sheet_size.length),
        kerf=nesting.kerf,
        merge_tolerance=nesting.merge_tolerance,
    )


def config_to_driver(
    section: DriverSection, repository: DriverRepository | None = None
) -> DriverSpec:
    """Resolve the driver section to mounting data.

    A fully explicit section is used as-is. Otherwise the model name is
    resolved through the repository, catalog and size defaults, and any
    explicit values in the section override the resolved ones.
    """
    if section.is_explicit:
        return DriverSpec(
            cutout_diameter=section.cutout_diameter,
            mounting_depth=section.mounting_depth,
            displacement=section.displacement,
            brand=section.brand,
            model=section.model,
            size=section.size or extract_size(section.model),
            xmax=section.xmax,
        )

    if section.model.strip():
        query = f"{section.brand} {section.model}".strip()
        spec = resolve_driver(query, repository, size=section.size)
    else:
        spec = default_spec_for_size(section.size or 12, brand=section.brand)

    overrides = {
        key: value
        for key, value in (
            ("cutout_diameter", section.cutout_diameter),
            ("mounting_depth", section.mounting_depth),
            ("displacement", section.displacement),
            ("xmax", section.xmax),
        )
        if value is not None
    }
    return replace(spec, **overrides) if overrides else spec
