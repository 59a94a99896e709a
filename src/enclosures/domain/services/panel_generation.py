"""Panel generation service for enclosure construction.

This module provides a service that turns a finished design into the ordered
list of panels to cut. Order is fixed so cut lists and nesting output are
reproducible:

- Sealed and ported boxes: front baffle, optional inner baffle, back, top,
  bottom, left side, right side, then port wall and end cap, window brace
  and chamber dividers as the design calls for them.
- Bandpass boxes: sealed front, ported back, top, bottom, sides, the
  chamber divider that carries the drivers, then the port wall and end cap.

Front and back panels cover the full external face. Top and bottom sit
between them, and the sides sit inside all four.
"""

from __future__ import annotations

from ..value_objects import (
    BandpassResult,
    BoxResult,
    CircularCutout,
    DesignResult,
    EnclosureConfig,
    Panel,
    PanelType,
    PathType,
    PortedResult,
    PortSpec,
)

__all__ = ["PanelGenerationService", "TERMINAL_CUTOUT_DIAMETER"]

TERMINAL_CUTOUT_DIAMETER = 3.0
BRACE_WINDOW_RATIO = 0.6


class PanelGenerationService:
    """Service for generating panels from an enclosure design.

    Example:
        >>> service = PanelGenerationService()
        >>> panels = service.get_all_panels(config, designer.design(config))
        >>> [p.name for p in panels][:3]
        ['Front Baffle', 'Back Panel', 'Top Panel']
    """

    def get_all_panels(self, config: EnclosureConfig, result: DesignResult) -> list[Panel]:
        """Return every panel for the design in cutting order."""
        if isinstance(result, BandpassResult):
            return self._bandpass_panels(config, result)
        return self._box_panels(config, result)

    def _box_panels(self, config: EnclosureConfig, result: BoxResult) -> list[Panel]:
        t = config.material_thickness
        ext = result.external
        inner = result.internal
        diameter = config.driver.cutout_diameter
        count = config.driver_count

        panels = [
            Panel(
                name="Front Baffle",
                width=ext.width,
                height=ext.height,
                panel_type=PanelType.BAFFLE,
                cutouts=self._driver_cutouts(diameter, count, ext.width, ext.height),
                notes="Double baffle outer layer" if config.double_baffle else None,
            )
        ]
        if config.double_baffle:
            # Holes line up with the outer layer's, shifted by one thickness
            panels.append(
                Panel(
                    name="Inner Baffle",
                    width=inner.width,
                    height=inner.height,
                    panel_type=PanelType.INNER_BAFFLE,
                    cutouts=self._driver_cutouts(
                        diameter, count, ext.width, ext.height, inset=t
                    ),
                    notes="Double baffle inner layer",
                )
            )

        panels.append(
            Panel(
                name="Back Panel",
                width=ext.width,
                height=ext.height,
                panel_type=PanelType.BACK,
                cutouts=(
                    CircularCutout(
                        diameter=TERMINAL_CUTOUT_DIAMETER,
                        offset_x=ext.width / 2,
                        offset_y=ext.height - TERMINAL_CUTOUT_DIAMETER,
                    ),
                ),
                notes="Terminal cup cutout",
            )
        )
        panels.extend(self._shell_panels(config, result))

        if isinstance(result, PortedResult) and result.port is not None:
            panels.extend(self._port_panels(result.port, t, "Slot port divider wall"))

        if config.extra_bracing:
            panels.append(
                Panel(
                    name="Window Brace",
                    width=inner.width,
                    height=inner.height,
                    panel_type=PanelType.WINDOW_BRACE,
                    cutouts=(
                        CircularCutout(
                            diameter=min(inner.width, inner.height) * BRACE_WINDOW_RATIO,
                            offset_x=inner.width / 2,
                            offset_y=inner.height / 2,
                        ),
                    ),
                    notes="Window brace with 45° corner blocks",
                )
            )

        if config.separate_chambers and count > 1:
            panels.append(
                Panel(
                    name="Chamber Divider",
                    width=inner.depth,
                    height=inner.height,
                    quantity=count - 1,
                    panel_type=PanelType.CHAMBER_DIVIDER,
                    notes="Divides chambers for each driver",
                )
            )
        return panels

    def _bandpass_panels(
        self, config: EnclosureConfig, result: BandpassResult
    ) -> list[Panel]:
        ext = result.external
        inner = result.internal
        port = result.port

        if port is not None:
            exit_note = f'Port exit opening: {port.width:.2f}" x {port.height:.2f}"'
        else:
            exit_note = "Port exit opening: no port could be sized"

        panels = [
            Panel(
                name="Front Panel (Sealed)",
                width=ext.width,
                height=ext.height,
                panel_type=PanelType.FRONT,
                notes="Sealed chamber front - no cutouts",
            ),
            Panel(
                name="Back Panel (Ported)",
                width=ext.width,
                height=ext.height,
                panel_type=PanelType.BACK,
                notes=exit_note,
            ),
        ]
        panels.extend(self._shell_panels(config, result))
        panels.append(
            Panel(
                name="Chamber Divider/Baffle",
                width=inner.width,
                height=inner.height,
                quantity=2 if config.double_baffle else 1,
                panel_type=PanelType.BANDPASS_BAFFLE,
                cutouts=self._driver_cutouts(
                    config.driver.cutout_diameter,
                    config.driver_count,
                    inner.width,
                    inner.height,
                ),
                notes="Drivers mount here, firing into the ported chamber",
            )
        )
        if port is not None:
            panels.extend(
                self._port_panels(port, config.material_thickness, "Ported chamber slot port")
            )
        return panels

    def _shell_panels(
        self, config: EnclosureConfig, result: BoxResult | BandpassResult
    ) -> list[Panel]:
        """Top, bottom, left and right panels."""
        ext = result.external
        inner = result.internal
        return [
            Panel(name="Top Panel", width=ext.width, height=inner.depth, panel_type=PanelType.TOP),
            Panel(
                name="Bottom Panel",
                width=ext.width,
                height=inner.depth,
                panel_type=PanelType.BOTTOM,
            ),
            Panel(
                name="Left Side",
                width=inner.depth,
                height=inner.height,
                panel_type=PanelType.LEFT_SIDE,
            ),
            Panel(
                name="Right Side",
                width=inner.depth,
                height=inner.height,
                panel_type=PanelType.RIGHT_SIDE,
            ),
        ]

    def _port_panels(self, port: PortSpec, thickness: float, note: str) -> list[Panel]:
        panels = [
            Panel(
                name="Port Wall",
                width=port.length,
                height=port.height,
                panel_type=PanelType.PORT_WALL,
                notes=note,
            )
        ]
        if port.path_type == PathType.FOLDED:
            panels.append(
                Panel(
                    name="Port End Cap",
                    width=port.width + thickness,
                    height=port.height,
                    panel_type=PanelType.PORT_END_CAP,
                    notes="Closes port at turn",
                )
            )
        return panels

    @staticmethod
    def _driver_cutouts(
        diameter: float,
        count: int,
        face_width: float,
        face_height: float,
        inset: float = 0.0,
    ) -> tuple[CircularCutout, ...]:
        """Driver holes spaced evenly across a face and centered vertically.

        ``inset`` shifts the holes into the coordinates of a panel that sits
        that far inside the face on every edge.
        """
        return tuple(
            CircularCutout(
                diameter=diameter,
                offset_x=(i + 0.5) * face_width / count - inset,
                offset_y=face_height / 2 - inset,
            )
            for i in range(count)
        )
