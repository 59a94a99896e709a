"""DXF format exporter for enclosure cut sheets.

Generates 2D DXF files (R2010 format) for CNC routing. With nesting results,
each sheet is drawn with its placed panels; without, the cut list is laid out
in a grid.
"""

from __future__ import annotations

import logging
from io import StringIO
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar, cast

import ezdxf

from enclosures.infrastructure.exporters.base import ExporterRegistry

if TYPE_CHECKING:
    from ezdxf.document import Drawing
    from ezdxf.layouts import Modelspace

    from enclosures.application.dtos import DesignOutput
    from enclosures.domain.value_objects import CircularCutout
    from enclosures.infrastructure.panel_nesting import (
        CutListEntry,
        PlacedPanel,
        SheetLayout,
    )


logger = logging.getLogger(__name__)


LAYERS = {
    "SHEETS": {"color": 8},  # Grey - sheet stock outlines
    "OUTLINE": {"color": 7},  # White - panel outlines
    "CUTOUTS": {"color": 1},  # Red - driver, terminal and brace holes
    "LABELS": {"color": 5},  # Blue - text labels
}


@ExporterRegistry.register("dxf")
class DxfExporter:
    """Exports panel outlines and circular cutouts to DXF.

    Attributes:
        format_name: "dxf"
        file_extension: "dxf"
    """

    format_name: ClassVar[str] = "dxf"
    file_extension: ClassVar[str] = "dxf"

    def __init__(
        self,
        units: str = "inches",
        sheet_spacing: float = 6.0,
        panel_spacing: float = 2.0,
        panels_per_row: int = 4,
    ) -> None:
        if units not in ("inches", "mm"):
            raise ValueError(f"Invalid units: {units}. Must be 'inches' or 'mm'")
        self.units = units
        self.scale = 25.4 if units == "mm" else 1.0
        self.sheet_spacing = sheet_spacing * self.scale
        self.panel_spacing = panel_spacing * self.scale
        self.panels_per_row = panels_per_row

    def export(self, output: DesignOutput, path: Path) -> None:
        if not output.cut_list:
            logger.warning("No panels to export")
            return
        doc = self._build(output)
        doc.saveas(path)
        logger.info(f"Exported DXF to {path}")

    def export_string(self, output: DesignOutput) -> str:
        if not output.cut_list:
            return ""
        stream = StringIO()
        self._build(output).write(stream)
        return stream.getvalue()

    def _build(self, output: DesignOutput) -> Drawing:
        doc = ezdxf.new("R2010")
        for name, props in LAYERS.items():
            doc.layers.add(name, color=cast(int, props["color"]))
        msp = doc.modelspace()
        if output.nesting is not None and output.nesting.layouts:
            self._draw_sheets(msp, output.nesting.layouts)
        else:
            self._draw_grid(msp, output.cut_list)
        return doc

    def _draw_sheets(self, msp: Modelspace, layouts: tuple[SheetLayout, ...]) -> None:
        offset_x = 0.0
        for layout in layouts:
            sheet_w = layout.sheet_config.width * self.scale
            sheet_h = layout.sheet_config.length * self.scale
            self._rectangle(msp, offset_x, 0.0, sheet_w, sheet_h, "SHEETS")
            msp.add_mtext(
                f"Sheet {layout.sheet_index + 1}",
                dxfattribs={
                    "layer": "LABELS",
                    "char_height": 1.0 * self.scale,
                    "insert": (offset_x, sheet_h + self.panel_spacing),
                },
            )
            for placed in layout.placements:
                self._draw_placement(msp, placed, offset_x)
            offset_x += sheet_w + self.sheet_spacing

    def _draw_placement(self, msp: Modelspace, placed: PlacedPanel, offset_x: float) -> None:
        x = offset_x + placed.x * self.scale
        y = placed.y * self.scale
        width = placed.cut_width * self.scale
        height = placed.cut_height * self.scale
        self._rectangle(msp, x, y, width, height, "OUTLINE")
        for cutout in placed.panel.cutouts:
            cx, cy = cutout.offset_x, cutout.offset_y
            if placed.rotated:
                # Quarter turn: panel x runs up the sheet
                cx, cy = placed.panel.height - cutout.offset_y, cutout.offset_x
            self._circle(msp, x + cx * self.scale, y + cy * self.scale, cutout)
        self._label(msp, placed.label, x, y, width, height)

    def _draw_grid(self, msp: Modelspace, cut_list: list[CutListEntry]) -> None:
        current_y = 0.0
        for start in range(0, len(cut_list), self.panels_per_row):
            row = cut_list[start : start + self.panels_per_row]
            row_bottom = current_y - max(entry.height for entry in row) * self.scale
            current_x = 0.0
            for entry in row:
                width = entry.width * self.scale
                height = entry.height * self.scale
                self._rectangle(msp, current_x, row_bottom, width, height, "OUTLINE")
                for cutout in entry.cutouts:
                    self._circle(
                        msp,
                        current_x + cutout.offset_x * self.scale,
                        row_bottom + cutout.offset_y * self.scale,
                        cutout,
                    )
                self._label(msp, entry.label, current_x, row_bottom, width, height)
                current_x += width + self.panel_spacing
            current_y = row_bottom - self.panel_spacing

    @staticmethod
    def _rectangle(
        msp: Modelspace, x: float, y: float, width: float, height: float, layer: str
    ) -> None:
        points = [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]
        msp.add_lwpolyline(points, close=True, dxfattribs={"layer": layer})

    def _circle(self, msp: Modelspace, cx: float, cy: float, cutout: CircularCutout) -> None:
        msp.add_circle(
            (cx, cy), radius=cutout.diameter / 2 * self.scale, dxfattribs={"layer": "CUTOUTS"}
        )

    def _label(
        self, msp: Modelspace, text: str, x: float, y: float, width: float, height: float
    ) -> None:
        text_height = max(0.15 * self.scale, min(1.0 * self.scale, min(width, height) * 0.08))
        msp.add_mtext(
            text,
            dxfattribs={
                "layer": "LABELS",
                "char_height": text_height,
                "insert": (x + width / 2, y + height / 2),
                "attachment_point": 5,
            },
        )
