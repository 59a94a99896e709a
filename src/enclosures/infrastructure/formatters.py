"""Text formatters for enclosure designs, cut lists and nesting results."""

from __future__ import annotations

from typing import TYPE_CHECKING

from enclosures.domain.value_objects import (
    BandpassResult,
    BoxResult,
    DesignResult,
    PortedResult,
    PortSpec,
    to_cubic_feet,
)

if TYPE_CHECKING:
    from enclosures.application.dtos import DesignOutput
    from enclosures.domain import MaterialEstimate

    from .panel_nesting import CutListEntry, NestingResult


class DesignSummaryFormatter:
    """Formats the dimensions, volumes and port of a design."""

    def format(self, design: DesignResult) -> str:
        ext = design.external
        inner = design.internal
        lines = [
            f"{design.topology.value.upper()} ENCLOSURE",
            "=" * 60,
            f'External: {ext.width:.3f}" W x {ext.height:.3f}" H x {ext.depth:.3f}" D',
            f'Internal: {inner.width:.3f}" W x {inner.height:.3f}" H x {inner.depth:.3f}" D',
        ]

        if isinstance(design, BandpassResult):
            lines.extend(self._bandpass_lines(design))
        else:
            lines.extend(self._box_lines(design))

        port = design.port if isinstance(design, (PortedResult, BandpassResult)) else None
        if port is not None:
            lines.append("")
            lines.extend(self.format_port(port).splitlines())

        if design.advisories:
            lines.append("")
            lines.append("ADVISORIES")
            lines.append("-" * 60)
            for advisory in design.advisories:
                lines.append(f"! {advisory.message}")
                for remedy in advisory.remedies:
                    lines.append(f"    - {remedy.message}")

        return "\n".join(lines)

    def format_port(self, port: PortSpec) -> str:
        """Format a slot port specification."""
        fit = "fits" if port.fits_in_envelope else "DOES NOT FIT"
        status = "converged" if port.converged else "not converged"
        return "\n".join(
            [
                "SLOT PORT",
                "-" * 60,
                f"  Tuning:  {port.achieved_tuning:.1f} Hz "
                f"(requested {port.requested_tuning:g} Hz)",
                f'  Width:   {port.width:.2f}"',
                f'  Height:  {port.height:.2f}"',
                f"  Area:    {port.area:.2f} sq in ({port.power_tier.value} tier)",
                f'  Length:  {port.length:.2f}" ({port.path_type.value}, {fit}; '
                f'{port.available_path_length:.2f}" available)',
                f"  Air:     {to_cubic_feet(port.air_volume):.3f} ft^3",
                f"  Refined: {port.refinement_passes} passes, {status}",
            ]
        )

    def _box_lines(self, design: BoxResult) -> list[str]:
        target = "meets" if design.meets_target else "below"
        return [
            f"Gross internal volume: {to_cubic_feet(design.gross_volume):.3f} ft^3",
            f"Net volume: {design.net_volume_cu_ft:.3f} ft^3",
            f"Per driver: {design.per_driver_volume_cu_ft:.3f} ft^3 "
            f"({target} {design.target_volume:g} ft^3 target)",
        ]

    def _bandpass_lines(self, design: BandpassResult) -> list[str]:
        sealed, ported = design.sealed_chamber, design.ported_chamber
        ratio = ":".join(f"{part:g}" for part in design.bandpass_ratio)
        return [
            f"Chamber ratio (sealed:ported): {ratio}",
            f'Sealed chamber: {sealed.net_volume_cu_ft:.3f} ft^3 net, {sealed.depth:.2f}" deep',
            f'Ported chamber: {ported.net_volume_cu_ft:.3f} ft^3 net, {ported.depth:.2f}" deep',
            f'Divider: {design.divider_position:.2f}" from front',
        ]


class CutListFormatter:
    """Formats cut lists for display."""

    def format(self, cut_list: list[CutListEntry]) -> str:
        """Format cut list as a table."""
        if not cut_list:
            return "No pieces in cut list."

        lines = [
            "CUT LIST (all dimensions in inches)",
            "=" * 90,
            f"{'Piece':<30} {'Width':<10} {'Height':<10} {'Area':<10} {'Notes'}",
            "-" * 90,
        ]

        total_area = 0.0
        for entry in cut_list:
            lines.append(
                f"{entry.label[:30]:<30} {entry.width:<10.3f} {entry.height:<10.3f} "
                f"{entry.area:<10.1f} {self._notes(entry)}"
            )
            total_area += entry.area

        lines.append("-" * 90)
        lines.append(f"{'TOTAL':<30} {'':<10} {'':<10} {total_area:<10.1f}")
        lines.append(f"{'':>50} ({total_area / 144:.2f} sq ft)")

        return "\n".join(lines)

    def _notes(self, entry: CutListEntry) -> str:
        parts: list[str] = []
        for cutout in entry.cutouts:
            parts.append(
                f'{cutout.diameter:.3f}" dia @ ({cutout.offset_x:.2f}", {cutout.offset_y:.2f}")'
            )
        if entry.notes:
            parts.append(entry.notes)
        return "; ".join(parts) or "-"


class NestingFormatter:
    """Formats sheet nesting layouts and usage statistics."""

    def format(self, result: NestingResult) -> str:
        usage = result.usage
        lines = [
            "SHEET NESTING",
            "=" * 60,
        ]
        for layout in result.layouts:
            sheet = layout.sheet_config
            lines.append(
                f'Sheet {layout.sheet_index + 1} ({sheet.width:g}" x {sheet.length:g}"): '
                f"{layout.piece_count} pieces, {layout.efficiency_percent:.1f}% used"
            )
            for placed in layout.placements:
                rotated = " (rotated)" if placed.rotated else ""
                lines.append(
                    f'  {placed.label:<30} @ ({placed.x:.2f}, {placed.y:.2f}) '
                    f'{placed.cut_width:.3f}" x {placed.cut_height:.3f}"{rotated}'
                )

        lines.append("-" * 60)
        lines.append(f"Sheets needed: {usage.sheet_count}")
        lines.append(f"Material used: {usage.used_area_sqft:.2f} sq ft")
        lines.append(f"Waste: {usage.waste_area_sqft:.2f} sq ft")
        lines.append(f"Efficiency: {usage.efficiency_percent:.1f}%")

        for warning in result.unplaced:
            lines.append(f"WARNING: {warning.message}")

        return "\n".join(lines)


class MaterialReportFormatter:
    """Formats the area-based material estimate."""

    def format(self, estimate: MaterialEstimate) -> str:
        return "\n".join(
            [
                "MATERIAL ESTIMATE",
                "=" * 60,
                f"  Area needed: {estimate.total_area_sqft:.2f} sq ft "
                f'(with {estimate.kerf:g}" kerf)',
                f"  Sheets:      {estimate.sheet_count} "
                f"({estimate.utilization_percent:.1f}% utilization)",
            ]
        )


class DesignReportFormatter:
    """Formats a complete design run as a text report."""

    def __init__(self) -> None:
        self._summary = DesignSummaryFormatter()
        self._cut_list = CutListFormatter()
        self._nesting = NestingFormatter()
        self._material = MaterialReportFormatter()

    def format(self, output: DesignOutput) -> str:
        if output.errors or output.design is None:
            return "\n".join(f"ERROR: {e}" for e in output.errors)

        sections = [f"Project: {output.name}", self._summary.format(output.design)]
        if output.port_noise is not None:
            sections.append(
                f"Port velocity: {output.port_noise.velocity:.1f} m/s "
                f"({output.port_noise.level.value})"
            )
        sections.append(self._cut_list.format(output.cut_list))
        if output.material is not None:
            sections.append(self._material.format(output.material))
        if output.nesting is not None:
            sections.append(self._nesting.format(output.nesting))
        return "\n\n".join(sections)
