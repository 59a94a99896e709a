"""Integration tests for the design command and the batch runner.

These run the full pipeline from a configuration through the designer, panel
generation, nesting and material estimation.
"""

from __future__ import annotations

import copy
from dataclasses import replace
from pathlib import Path
from typing import Any

import pytest

from enclosures.application import BatchDesignRunner, DesignEnclosureCommand
from enclosures.application.config import EnclosureConfiguration
from enclosures.domain.services import NoiseLevel
from enclosures.domain.value_objects import AdvisoryKind, Topology
from enclosures.infrastructure import DriverRepository
from enclosures.infrastructure.panel_nesting import NestingConfig, SheetConfig


@pytest.fixture
def command() -> DesignEnclosureCommand:
    return DesignEnclosureCommand()


def configuration(data: dict[str, Any], **enclosure: Any) -> EnclosureConfiguration:
    data = copy.deepcopy(data)
    data["enclosure"].update(enclosure)
    return EnclosureConfiguration.model_validate(data)


class TestDesignEnclosureCommand:
    """Tests for a single design run."""

    def test_sealed_pipeline(self, command, make_config) -> None:
        output = command.execute(make_config(), name="Sealed")

        assert output.is_valid
        assert output.design.topology == Topology.SEALED
        assert len(output.panels) == 6
        assert len(output.cut_list) == 6
        assert output.nesting.sheet_count == 1
        assert output.nesting.total_pieces_placed == 6
        assert output.material.sheet_count == 1
        assert output.port_noise is None
        assert output.warnings == []

    def test_ported_pipeline_reports_advisory_and_noise(self, command, make_config) -> None:
        output = command.execute(make_config(topology="ported", tuning_frequency=32.0))

        assert output.is_valid
        assert [a.kind for a in output.advisories] == [AdvisoryKind.PORT_TOO_LONG]
        assert output.warnings[0].startswith("Port length")
        assert output.port_noise is not None
        assert output.port_noise.level in set(NoiseLevel)
        assert [p.name for p in output.panels][-2:] == ["Port Wall", "Port End Cap"]

    def test_port_noise_needs_xmax(self, command, make_config, driver) -> None:
        no_xmax = replace(driver, xmax=None)
        output = command.execute(
            make_config(topology="ported", tuning_frequency=32.0, driver=no_xmax)
        )
        assert output.port_noise is None

    def test_bandpass_reports_port_noise(self, command, make_config) -> None:
        output = command.execute(make_config(topology="bandpass", tuning_frequency=45.0))
        assert output.port_noise is not None
        assert output.port_noise.velocity > 0

    def test_nesting_disabled(self, command, make_config) -> None:
        output = command.execute(make_config(), NestingConfig(enabled=False))
        assert output.nesting is None
        assert output.material is not None

    def test_custom_sheet_drives_estimate(self, command, make_config) -> None:
        nesting = NestingConfig(sheet=SheetConfig(width=24.0, length=48.0))
        output = command.execute(make_config(), nesting)
        assert output.material.sheet_area_sqin == 24.0 * 48.0
        assert output.nesting.layouts[0].sheet_config.width == 24.0

    def test_oversized_panels_are_warnings(self, command, make_config) -> None:
        config = make_config(max_width=60.0, max_height=30.0, max_depth=20.0)
        output = command.execute(config, NestingConfig(sheet=SheetConfig(24.0, 48.0)))

        assert output.is_valid
        assert output.nesting.unplaced
        assert any("doesn't fit" in w for w in output.warnings)

    def test_design_error_is_captured(self, command, make_config) -> None:
        output = command.execute(make_config(material_thickness=8.0), name="Thick")
        assert not output.is_valid
        assert output.name == "Thick"
        assert output.panels == []
        assert "leaves no interior" in output.errors[0]

    def test_execute_configuration(self, command, config_data) -> None:
        output = command.execute_configuration(configuration(config_data))

        assert output.is_valid
        assert output.name == "Trunk Box"
        assert output.config.tuning_frequency == 32
        assert output.config.driver.model == "Test TW-12"

    def test_execute_configuration_with_catalog_driver(self, command, config_data) -> None:
        config_data = copy.deepcopy(config_data)
        config_data["driver"] = {"brand": "Sundown", "model": "X-12"}
        output = command.execute_configuration(configuration(config_data))

        assert output.config.driver.cutout_diameter == 11.125
        assert output.port_noise is not None


class TestBatchDesignRunner:
    """Tests for concurrent batch runs."""

    def test_empty_batch(self) -> None:
        batch = BatchDesignRunner().run([])
        assert batch.outputs == []

    def test_preserves_input_order(self, config_data) -> None:
        configs = []
        for i, tuning in enumerate([28, 32, 36, 40, 44, 48]):
            data = copy.deepcopy(config_data)
            data["name"] = f"box-{i}"
            configs.append(configuration(data, tuning_frequency=tuning))

        batch = BatchDesignRunner(max_workers=4).run(configs)

        assert [o.name for o in batch.outputs] == [f"box-{i}" for i in range(6)]
        assert [o.design.tuning_frequency for o in batch.outputs] == [28, 32, 36, 40, 44, 48]

    def test_failure_does_not_stop_others(self, config_data) -> None:
        good = configuration(config_data)
        bad_data = copy.deepcopy(config_data)
        bad_data["name"] = "too-thick"
        bad = configuration(
            bad_data, width=5, height=5, depth=5, material_thickness=3.0
        )

        batch = BatchDesignRunner(max_workers=2).run([bad, good, good])

        assert [o.name for o in batch.failed] == ["too-thick"]
        assert len(batch.succeeded) == 2

    def test_shared_repository_records_unknown_driver_once(
        self, tmp_path: Path, config_data
    ) -> None:
        data = copy.deepcopy(config_data)
        data["driver"] = {"model": "Mystery Bass 12"}
        configs = [configuration(data) for _ in range(4)]
        repository = DriverRepository(tmp_path / "drivers.json").load()

        batch = BatchDesignRunner(repository=repository, max_workers=4).run(configs)

        assert len(batch.succeeded) == 4
        stored = DriverRepository(tmp_path / "drivers.json").load()
        assert len(stored) == 1
        assert "Mystery Bass 12" in stored
