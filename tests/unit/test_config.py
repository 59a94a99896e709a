"""Tests for configuration schema, loader and domain adapters."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from pydantic import ValidationError

from enclosures.application.config import (
    ConfigError,
    DriverSection,
    EnclosureConfiguration,
    EnclosureSection,
    config_to_driver,
    config_to_enclosure,
    config_to_nesting,
    load_config,
    load_config_from_dict,
    parse_ratio,
)
from enclosures.domain.value_objects import PowerTier, Topology
from enclosures.infrastructure.driver_catalog import KNOWN_DRIVERS
from enclosures.infrastructure.driver_repository import DriverRepository


def write_config(tmp_path: Path, data: Any) -> Path:
    path = tmp_path / "enclosure.json"
    path.write_text(data if isinstance(data, str) else json.dumps(data))
    return path


class TestParseRatio:
    def test_valid(self) -> None:
        assert parse_ratio("1:2") == (1.0, 2.0)
        assert parse_ratio(" 1.5 : 3 ") == (1.5, 3.0)

    @pytest.mark.parametrize("value", ["1", "1:2:3", "a:b", "0:2", "1:-1"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(ValueError):
            parse_ratio(value)


class TestSchema:
    def test_minimal_config_defaults(self, config_data: dict[str, Any]) -> None:
        config = EnclosureConfiguration.model_validate(config_data)

        assert config.enclosure.topology == Topology.PORTED
        assert config.enclosure.power_level == PowerTier.SQL
        assert config.enclosure.material_thickness == 0.75
        assert config.enclosure.refinement.max_passes == 20
        assert config.nesting.sheet_size.width == 48.0
        assert config.nesting.kerf == 0.125
        assert config.output.format == "all"
        assert config.output.formats == []

    def test_bandpass_alias(self) -> None:
        section = EnclosureSection(
            topology="bandpass_4th",
            target_volume=2.0,
            tuning_frequency=45,
            width=36,
            height=15,
            depth=20,
        )
        assert section.topology == Topology.BANDPASS
        assert section.ratio == (1.0, 2.0)

    @pytest.mark.parametrize("topology", ["ported", "bandpass"])
    def test_tuning_required_for_ports(self, topology: str) -> None:
        with pytest.raises(ValidationError, match="tuning_frequency is required"):
            EnclosureSection(
                topology=topology, target_volume=2.0, width=36, height=15, depth=20
            )

    def test_sealed_needs_no_tuning(self) -> None:
        section = EnclosureSection(
            topology="sealed", target_volume=2.0, width=36, height=15, depth=20
        )
        assert section.tuning_frequency is None

    def test_unknown_topology_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EnclosureSection(
                topology="horn", target_volume=2.0, width=36, height=15, depth=20
            )

    def test_bad_ratio_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Ratio"):
            EnclosureSection(
                topology="bandpass",
                target_volume=2.0,
                tuning_frequency=45,
                width=36,
                height=15,
                depth=20,
                bandpass_ratio="2",
            )

    def test_extra_fields_forbidden(self, config_data: dict[str, Any]) -> None:
        config_data["enclosure"]["colour"] = "black"
        with pytest.raises(ValidationError):
            EnclosureConfiguration.model_validate(config_data)

    @pytest.mark.parametrize("version,ok", [("1.0", True), ("1.3", True), ("2.0", False)])
    def test_schema_version(self, config_data: dict[str, Any], version: str, ok: bool) -> None:
        config_data["schema_version"] = version
        if ok:
            assert EnclosureConfiguration.model_validate(config_data).schema_version == version
        else:
            with pytest.raises(ValidationError, match="Unsupported schema version"):
                EnclosureConfiguration.model_validate(config_data)

    def test_explicit_driver_section(self) -> None:
        assert DriverSection(cutout_diameter=11, mounting_depth=6, displacement=0.1).is_explicit
        assert not DriverSection(model="Skar VXF-12").is_explicit


class TestLoader:
    """Tests for loading configuration files from disk."""

    def test_loads_valid_file(self, tmp_path: Path, config_data: dict[str, Any]) -> None:
        config = load_config(write_config(tmp_path, config_data))
        assert config.name == "Trunk Box"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "missing.json")
        assert exc_info.value.error_type == "file_not_found"
        assert "not found" in str(exc_info.value)

    def test_invalid_json_reports_position(self, tmp_path: Path) -> None:
        path = write_config(tmp_path, '{\n  "schema_version": "1.0",\n  oops\n}')
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        error = exc_info.value
        assert error.error_type == "json_parse"
        assert error.details[0]["line"] == 3
        assert error.path == path

    def test_validation_error_lists_fields(
        self, tmp_path: Path, config_data: dict[str, Any]
    ) -> None:
        config_data["enclosure"]["material_thickness"] = -1
        config_data["enclosure"]["driver_count"] = 20
        with pytest.raises(ConfigError) as exc_info:
            load_config(write_config(tmp_path, config_data))

        error = exc_info.value
        assert error.error_type == "validation"
        paths = {d["path"] for d in error.details}
        assert paths == {"enclosure.material_thickness", "enclosure.driver_count"}
        assert "enclosure.material_thickness" in error.message
        assert "(got: -1)" in error.message

    def test_model_level_error_has_location(self, config_data: dict[str, Any]) -> None:
        del config_data["enclosure"]["tuning_frequency"]
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_dict(config_data)
        assert exc_info.value.details[0]["path"] == "enclosure"
        assert exc_info.value.path is None


class TestAdapters:
    """Tests for conversion to domain values."""

    def test_config_to_enclosure(self, config_data: dict[str, Any], driver) -> None:
        config_data["enclosure"].update(
            {"power_level": "spl", "refinement": {"max_passes": 2}}
        )
        config = EnclosureConfiguration.model_validate(config_data)
        domain = config_to_enclosure(config, driver)

        assert domain.topology == Topology.PORTED
        assert domain.envelope == (36, 15, 20)
        assert domain.tuning_frequency == 32
        assert domain.driver_count == 2
        assert domain.power_tier == PowerTier.SPL
        assert domain.max_refinement_passes == 2
        assert domain.driver is driver

    def test_config_to_nesting(self, config_data: dict[str, Any]) -> None:
        config_data["nesting"] = {"sheet_size": {"width": 60, "length": 60}, "kerf": 0.1}
        nesting = config_to_nesting(EnclosureConfiguration.model_validate(config_data))
        assert nesting.sheet.area == 3600
        assert nesting.kerf == 0.1
        assert nesting.enabled

    def test_explicit_driver_used_as_is(self) -> None:
        spec = config_to_driver(
            DriverSection(
                model="Test TW-12", cutout_diameter=11.125, mounting_depth=6.5, displacement=0.11
            )
        )
        assert spec.cutout_diameter == 11.125
        assert spec.size == 12.0

    def test_catalog_driver_with_override(self) -> None:
        spec = config_to_driver(DriverSection(brand="Skar", model="VXF-12", mounting_depth=7.0))
        catalog = KNOWN_DRIVERS["skar_vxf_12"]
        assert spec.cutout_diameter == catalog.cutout_diameter
        assert spec.mounting_depth == 7.0

    def test_size_only_driver(self) -> None:
        spec = config_to_driver(DriverSection(size=15))
        assert spec.size == 15.0
        assert spec.cutout_diameter == 13.875

    def test_unknown_model_recorded_in_repository(self, tmp_path: Path) -> None:
        repo = DriverRepository(tmp_path / "drivers.json")
        spec = config_to_driver(DriverSection(model="Mystery 10"), repo)
        assert spec.size == 10.0
        assert "Mystery 10" in repo
