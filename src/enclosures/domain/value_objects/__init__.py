"""Value objects for the enclosure domain.

This module provides immutable data types used throughout the enclosure
system. All classes are re-exported from sub-modules for convenience.
"""

from __future__ import annotations

# Core geometry and unit conversions
from ._geometry import (
    CUBIC_INCHES_PER_CUBIC_FOOT,
    SQUARE_INCHES_PER_SQUARE_FOOT,
    Dimensions,
    to_cubic_feet,
    to_cubic_inches,
)

# Driver mounting data
from ._drivers import DriverSpec, ValueRange

# Panels and cutouts
from ._panels import CircularCutout, Panel, PanelType

# Configuration, ports and design results
from ._enclosures import (
    AdvisoryKind,
    BandpassResult,
    BoxResult,
    ChamberResult,
    DesignResult,
    EnclosureConfig,
    InfeasibleDesign,
    PathType,
    PortedResult,
    PortRemedy,
    PortSpec,
    PowerTier,
    RemedyType,
    SealedResult,
    Topology,
)

__all__ = [
    # Geometry
    "CUBIC_INCHES_PER_CUBIC_FOOT",
    "SQUARE_INCHES_PER_SQUARE_FOOT",
    "Dimensions",
    "to_cubic_feet",
    "to_cubic_inches",
    # Drivers
    "DriverSpec",
    "ValueRange",
    # Panels
    "CircularCutout",
    "Panel",
    "PanelType",
    # Enclosures
    "AdvisoryKind",
    "BandpassResult",
    "BoxResult",
    "ChamberResult",
    "DesignResult",
    "EnclosureConfig",
    "InfeasibleDesign",
    "PathType",
    "PortedResult",
    "PortRemedy",
    "PortSpec",
    "PowerTier",
    "RemedyType",
    "SealedResult",
    "Topology",
]
