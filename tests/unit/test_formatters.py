"""Tests for the text report formatters."""

from __future__ import annotations

import pytest

from enclosures.application import DesignEnclosureCommand
from enclosures.domain import MaterialEstimator
from enclosures.domain.value_objects import Panel
from enclosures.infrastructure.formatters import (
    CutListFormatter,
    DesignReportFormatter,
    DesignSummaryFormatter,
    MaterialReportFormatter,
    NestingFormatter,
)
from enclosures.infrastructure.panel_nesting import PanelNester, generate_cut_list


@pytest.fixture
def command() -> DesignEnclosureCommand:
    return DesignEnclosureCommand()


class TestDesignSummaryFormatter:
    """Tests for the dimensions and volume summary."""

    def test_sealed_summary(self, command, make_config) -> None:
        output = command.execute(make_config())
        text = DesignSummaryFormatter().format(output.design)

        assert text.startswith("SEALED ENCLOSURE")
        assert 'External: 36.000" W x 15.000" H x 20.000" D' in text
        assert "(meets 2 ft^3 target)" in text
        assert "SLOT PORT" not in text
        assert "ADVISORIES" not in text

    def test_ported_summary_lists_port_and_remedies(self, command, make_config) -> None:
        output = command.execute(make_config(topology="ported", tuning_frequency=32.0))
        text = DesignSummaryFormatter().format(output.design)

        assert "SLOT PORT" in text
        assert "(requested 32 Hz)" in text
        assert "DOES NOT FIT" in text
        assert "ADVISORIES" in text
        assert text.count("    - ") == 3

    def test_bandpass_summary(self, command, make_config) -> None:
        output = command.execute(make_config(topology="bandpass", tuning_frequency=45.0))
        text = DesignSummaryFormatter().format(output.design)

        assert "Chamber ratio (sealed:ported): 1:2" in text
        assert "Sealed chamber:" in text
        assert "Divider:" in text


class TestCutListFormatter:
    """Tests for the cut list table."""

    def test_empty(self) -> None:
        assert CutListFormatter().format([]) == "No pieces in cut list."

    def test_rows_and_total(self) -> None:
        cut_list = generate_cut_list([Panel("Side", 12.0, 12.0, quantity=2)])
        text = CutListFormatter().format(cut_list)

        assert "Side (1/2)" in text
        assert "Side (2/2)" in text
        assert "288.0" in text
        assert "(2.00 sq ft)" in text

    def test_cutouts_in_notes(self, command, make_config) -> None:
        output = command.execute(make_config())
        text = CutListFormatter().format(output.cut_list)
        assert '11.125" dia @ (9.00", 7.50")' in text
        assert "Terminal cup cutout" in text


class TestNestingFormatter:
    def test_sheet_lines_and_warning(self) -> None:
        panels = [Panel("Big", 40.0, 90.0), Panel("Strip", 90.0, 6.0), Panel("Huge", 60.0, 100.0)]
        text = NestingFormatter().format(PanelNester().nest(panels))

        assert 'Sheet 1 (48" x 96")' in text
        assert "(rotated)" in text
        assert "Sheets needed: 1" in text
        assert "WARNING: Panel 'Huge'" in text


class TestMaterialReportFormatter:
    def test_format(self) -> None:
        estimate = MaterialEstimator(kerf=0.0).estimate([Panel("Half", 48.0, 48.0)])
        text = MaterialReportFormatter().format(estimate)
        assert "16.00 sq ft" in text
        assert "Sheets:      1 (50.0% utilization)" in text


class TestDesignReportFormatter:
    def test_full_report_sections(self, command, make_config) -> None:
        output = command.execute(
            make_config(topology="ported", tuning_frequency=32.0), name="Trunk Box"
        )
        text = DesignReportFormatter().format(output)

        assert text.startswith("Project: Trunk Box")
        for heading in ("PORTED ENCLOSURE", "CUT LIST", "MATERIAL ESTIMATE", "SHEET NESTING"):
            assert heading in text
        assert "Port velocity:" in text

    def test_errors_only(self, command, make_config) -> None:
        output = command.execute(make_config(topology="ported"))
        text = DesignReportFormatter().format(output)
        assert text.startswith("ERROR: A tuning frequency is required")
        assert "CUT LIST" not in text
