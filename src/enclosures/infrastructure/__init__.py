"""Infrastructure layer - driver data, nesting, formatters and exporters."""

from .driver_catalog import (
    KNOWN_DRIVERS,
    default_spec_for_size,
    extract_size,
    find_known_driver,
    match_driver,
    normalize_key,
)
from .driver_repository import (
    DriverRepository,
    DriverRepositoryError,
    resolve_driver,
)
from .formatters import (
    CutListFormatter,
    DesignReportFormatter,
    DesignSummaryFormatter,
    MaterialReportFormatter,
    NestingFormatter,
)
from .panel_nesting import (
    CutListEntry,
    FreeRectangle,
    NestingConfig,
    NestingResult,
    PanelNester,
    PlacedPanel,
    SheetConfig,
    SheetLayout,
    UnplaceablePanel,
    UsageStats,
    generate_cut_list,
)

# Exporter framework; importing the package registers the exporters
from .exporters import (
    DxfExporter,
    Exporter,
    ExporterRegistry,
    ExportManager,
    JsonDesignExporter,
)

__all__ = [
    # Driver data
    "KNOWN_DRIVERS",
    "DriverRepository",
    "DriverRepositoryError",
    "default_spec_for_size",
    "extract_size",
    "find_known_driver",
    "match_driver",
    "normalize_key",
    "resolve_driver",
    # Nesting
    "CutListEntry",
    "FreeRectangle",
    "NestingConfig",
    "NestingResult",
    "PanelNester",
    "PlacedPanel",
    "SheetConfig",
    "SheetLayout",
    "UnplaceablePanel",
    "UsageStats",
    "generate_cut_list",
    # Formatters
    "CutListFormatter",
    "DesignReportFormatter",
    "DesignSummaryFormatter",
    "MaterialReportFormatter",
    "NestingFormatter",
    # Exporters
    "DxfExporter",
    "Exporter",
    "ExporterRegistry",
    "ExportManager",
    "JsonDesignExporter",
]
