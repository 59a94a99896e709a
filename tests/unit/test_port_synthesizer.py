"""Tests for PortSynthesizer slot port sizing, refinement and remedies."""

from __future__ import annotations

import math

import pytest

from enclosures.domain.services.port_synthesizer import (
    END_CORRECTION_FACTOR,
    NoiseLevel,
    PortSynthesizer,
    noise_estimate,
    port_velocity,
)
from enclosures.domain.value_objects import PathType, PowerTier, RemedyType

# Sealed-net volume of the 36 x 15 x 20 two-driver box
NET_VOLUME = 34.5 * 13.5 * 18.5 - 2 * 0.11 * 1728 - 13.5
INTERNAL_WIDTH = 34.5
INTERNAL_DEPTH = 18.5


@pytest.fixture
def synth() -> PortSynthesizer:
    return PortSynthesizer()


class TestHelmholtzModel:
    """Tests for the Helmholtz length and tuning relations."""

    def test_length_and_tuning_are_inverse(self, synth: PortSynthesizer) -> None:
        length = synth.port_length(32.0, NET_VOLUME, 60.0)
        assert synth.tuning_frequency(NET_VOLUME, 60.0, length) == pytest.approx(32.0)

    def test_end_correction_per_open_end(self) -> None:
        one = PortSynthesizer(end_corrections=1).end_correction(16.0)
        two = PortSynthesizer(end_corrections=2).end_correction(16.0)
        assert one == pytest.approx(END_CORRECTION_FACTOR * 4.0)
        assert two == pytest.approx(2 * one)

    def test_lower_tuning_needs_longer_port(self, synth: PortSynthesizer) -> None:
        assert synth.port_length(28.0, NET_VOLUME, 60.0) > synth.port_length(
            36.0, NET_VOLUME, 60.0
        )

    def test_short_lengths_clamp_to_minimum(self, synth: PortSynthesizer) -> None:
        assert synth.port_length(200.0, NET_VOLUME, 4.0) == synth.MIN_PORT_LENGTH

    @pytest.mark.parametrize(
        "tuning,volume,area",
        [(0.0, NET_VOLUME, 60.0), (32.0, 0.0, 60.0), (32.0, NET_VOLUME, 0.0)],
    )
    def test_non_positive_inputs_give_zero(
        self, synth: PortSynthesizer, tuning: float, volume: float, area: float
    ) -> None:
        assert synth.port_length(tuning, volume, area) == 0.0

    def test_minimum_area_by_tier(self, synth: PortSynthesizer) -> None:
        assert synth.minimum_port_area(2.0, PowerTier.DAILY) == 24.0
        assert synth.minimum_port_area(2.0, PowerTier.SQL) == 28.0
        assert synth.minimum_port_area(2.0, PowerTier.SPL) == 36.0


class TestSlotDimensions:
    """Tests for slot width and height clamping."""

    def test_full_width_when_height_in_band(self, synth: PortSynthesizer) -> None:
        width, height = synth.slot_dimensions(100.0, 34.5, 0.75)
        assert width == pytest.approx(33.25)
        assert height == pytest.approx(100.0 / 33.25)

    def test_small_area_clamps_height_up(self, synth: PortSynthesizer) -> None:
        width, height = synth.slot_dimensions(20.0, 34.5, 0.75)
        assert height == synth.MIN_SLOT_HEIGHT
        assert width == pytest.approx(10.0)

    def test_large_area_clamps_height_down(self, synth: PortSynthesizer) -> None:
        width, height = synth.slot_dimensions(300.0, 20.0, 0.75)
        assert height == synth.MAX_SLOT_HEIGHT
        assert width == pytest.approx(18.75)
        assert width * height < 300.0

    def test_narrow_box_uses_minimum_width(self, synth: PortSynthesizer) -> None:
        width, _ = synth.slot_dimensions(10.0, 3.0, 0.75)
        assert width == synth.MIN_SLOT_WIDTH


class TestSynthesize:
    def test_sql_port_in_two_driver_box(self, synth: PortSynthesizer) -> None:
        port = synth.synthesize(32.0, NET_VOLUME, INTERNAL_WIDTH, INTERNAL_DEPTH)

        assert 2.0 <= port.height <= 6.0
        assert port.width <= INTERNAL_WIDTH - 0.75 - 0.5
        assert port.area == pytest.approx(port.width * port.height)
        assert port.area >= synth.minimum_port_area(NET_VOLUME / 1728, PowerTier.SQL) - 1e-6
        assert abs(port.achieved_tuning - 32.0) < 0.5

    def test_long_port_does_not_fit_and_gets_remedies(self, synth: PortSynthesizer) -> None:
        port = synth.synthesize(32.0, NET_VOLUME, INTERNAL_WIDTH, INTERNAL_DEPTH)

        assert port.available_path_length == pytest.approx(
            INTERNAL_DEPTH + INTERNAL_WIDTH - port.width - 1.5
        )
        assert port.length > port.available_path_length
        assert not port.fits_in_envelope
        assert port.path_type == PathType.FOLDED
        assert [r.remedy_type for r in port.remedies] == [
            RemedyType.RESIZE_PORT_AREA,
            RemedyType.RAISE_TUNING,
            RemedyType.EXTERNAL_PORT,
        ]

    def test_short_port_is_straight(self, synth: PortSynthesizer) -> None:
        port = synth.synthesize(60.0, NET_VOLUME, INTERNAL_WIDTH, INTERNAL_DEPTH)
        assert port.length <= INTERNAL_DEPTH
        assert port.path_type == PathType.STRAIGHT
        assert port.fits_in_envelope
        assert port.remedies == ()

    def test_rejects_non_positive_volume(self, synth: PortSynthesizer) -> None:
        with pytest.raises(ValueError):
            synth.synthesize(32.0, -5.0, INTERNAL_WIDTH, INTERNAL_DEPTH)


class TestRemedies:
    """Tests for advisory remedies on ports that do not fit."""

    def test_resized_area_fits_available_path(self, synth: PortSynthesizer) -> None:
        port = synth.synthesize(32.0, NET_VOLUME, INTERNAL_WIDTH, INTERNAL_DEPTH)
        resize = port.remedies[0]

        length = synth.port_length(32.0, port.box_volume, resize.port_area)
        assert length == pytest.approx(port.available_path_length)
        assert resize.port_height == pytest.approx(resize.port_area / port.width)

    def test_raised_tuning_is_higher(self, synth: PortSynthesizer) -> None:
        port = synth.synthesize(32.0, NET_VOLUME, INTERNAL_WIDTH, INTERNAL_DEPTH)
        raise_tuning = port.remedies[1]
        assert raise_tuning.tuning_frequency > 32.0
        assert "Hz" in raise_tuning.message

    def test_external_port_carries_excess(self, synth: PortSynthesizer) -> None:
        port = synth.synthesize(32.0, NET_VOLUME, INTERNAL_WIDTH, INTERNAL_DEPTH)
        external = port.remedies[-1]
        assert external.external_length == pytest.approx(port.excess_length)

    def test_no_path_leaves_only_external_port(self, synth: PortSynthesizer) -> None:
        # Depth too shallow for any path
        port = synth.synthesize(25.0, NET_VOLUME, 3.0, 0.5)
        assert port.available_path_length <= 0
        assert [r.remedy_type for r in port.remedies] == [RemedyType.EXTERNAL_PORT]


class TestRefine:
    """Tests for the port and volume refinement loop."""

    def test_converges_and_records_passes(self, synth: PortSynthesizer) -> None:
        port = synth.refine(32.0, NET_VOLUME, INTERNAL_WIDTH, INTERNAL_DEPTH)

        assert port.converged
        assert 2 <= port.refinement_passes <= 20
        assert port.box_volume == pytest.approx(NET_VOLUME - port.wall_displacement, abs=0.01)

    def test_two_passes_reproduce_single_correction(self, synth: PortSynthesizer) -> None:
        first = synth.synthesize(32.0, NET_VOLUME, INTERNAL_WIDTH, INTERNAL_DEPTH)
        legacy = synth.refine(
            32.0, NET_VOLUME, INTERNAL_WIDTH, INTERNAL_DEPTH, max_passes=2
        )
        assert legacy.refinement_passes == 2
        assert legacy.box_volume == pytest.approx(NET_VOLUME - first.wall_displacement)

    def test_refined_port_is_longer_than_first_pass(self, synth: PortSynthesizer) -> None:
        first = synth.synthesize(32.0, NET_VOLUME, INTERNAL_WIDTH, INTERNAL_DEPTH)
        refined = synth.refine(32.0, NET_VOLUME, INTERNAL_WIDTH, INTERNAL_DEPTH)
        assert refined.length > first.length

    def test_single_pass_is_unrefined(self, synth: PortSynthesizer) -> None:
        port = synth.refine(
            32.0, NET_VOLUME, INTERNAL_WIDTH, INTERNAL_DEPTH, max_passes=1
        )
        assert port.refinement_passes == 1
        assert not port.converged
        assert port.box_volume == NET_VOLUME

    def test_wall_exceeding_volume_reports_negative_volume(
        self, synth: PortSynthesizer
    ) -> None:
        port = synth.refine(33.0, 40.0, 18.5, 18.5)

        assert port.wall_displacement > 40.0
        assert port.box_volume == pytest.approx(40.0 - port.wall_displacement)
        assert port.refinement_passes == 1
        assert not port.converged


class TestPortVelocity:
    def test_velocity_scales_with_area_ratio(self) -> None:
        v = port_velocity(port_area=50.0, cone_area=100.0, xmax=10.0, frequency=30.0)
        expected = 2 * math.pi * 30.0 * 0.010 * 2.0
        assert v == pytest.approx(expected)

    def test_rejects_zero_port_area(self) -> None:
        with pytest.raises(ValueError):
            port_velocity(0.0, 100.0, 10.0, 30.0)

    @pytest.mark.parametrize(
        "velocity,level",
        [
            (12.0, NoiseLevel.QUIET),
            (20.0, NoiseLevel.QUIET),
            (25.0, NoiseLevel.MODERATE),
            (30.0, NoiseLevel.MODERATE),
            (31.0, NoiseLevel.LOUD),
        ],
    )
    def test_noise_thresholds(self, velocity: float, level: NoiseLevel) -> None:
        assert noise_estimate(velocity) == level
