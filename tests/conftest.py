"""Pytest configuration and shared fixtures for enclosure tests."""

from __future__ import annotations

from typing import Any

import pytest

from enclosures.domain.value_objects import DriverSpec, EnclosureConfig, PowerTier


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


# =============================================================================
# Shared domain fixtures
# =============================================================================


@pytest.fixture
def driver() -> DriverSpec:
    """A typical 12" driver displacing 0.11 cubic feet."""
    return DriverSpec(
        cutout_diameter=11.125,
        mounting_depth=6.5,
        displacement=0.11,
        brand="Test",
        model="TW-12",
        size=12.0,
        xmax=18.0,
    )


@pytest.fixture
def make_config(driver: DriverSpec):
    """Factory for EnclosureConfig with a 36 x 15 x 20 envelope by default."""

    def _make(**overrides: Any) -> EnclosureConfig:
        values: dict[str, Any] = {
            "topology": "sealed",
            "target_volume": 2.0,
            "driver": driver,
            "max_width": 36.0,
            "max_height": 15.0,
            "max_depth": 20.0,
            "driver_count": 2,
            "material_thickness": 0.75,
            "power_tier": PowerTier.SQL,
        }
        values.update(overrides)
        return EnclosureConfig(**values)

    return _make


@pytest.fixture
def config_data() -> dict[str, Any]:
    """Minimal valid ported configuration file contents."""
    return {
        "schema_version": "1.0",
        "name": "Trunk Box",
        "enclosure": {
            "topology": "ported",
            "target_volume": 2.25,
            "tuning_frequency": 32,
            "driver_count": 2,
            "width": 36,
            "height": 15,
            "depth": 20,
        },
        "driver": {
            "model": "Test TW-12",
            "cutout_diameter": 11.125,
            "mounting_depth": 6.5,
            "displacement": 0.11,
        },
    }
