"""Exporter framework for enclosure design outputs.

Registered exporters:
- dxf: DXF sheet layouts with panel outlines and cutouts for CNC routing
- json: Full design, panels, cut list, nesting and advisories

Usage:
    from enclosures.infrastructure.exporters import ExportManager, ExporterRegistry

    formats = ExporterRegistry.available_formats()
    manager = ExportManager(output_dir=Path("./output"))
    results = manager.export_all(["json", "dxf"], design_output)
"""

from enclosures.infrastructure.exporters.base import (
    Exporter,
    ExporterRegistry,
    ExportManager,
    safe_filename,
)
from enclosures.infrastructure.exporters.design_json import (
    SCHEMA_VERSION,
    JsonDesignExporter,
)
from enclosures.infrastructure.exporters.dxf import DxfExporter

__all__ = [
    "DxfExporter",
    "ExportManager",
    "Exporter",
    "ExporterRegistry",
    "JsonDesignExporter",
    "SCHEMA_VERSION",
    "safe_filename",
]
