"""Domain layer - enclosure design engine."""

from .exceptions import EnclosureDesignError, InvalidGeometry, UnsupportedTopology
from .services import (
    EnclosureDesigner,
    MaterialEstimate,
    MaterialEstimator,
    PanelGenerationService,
    PortSynthesizer,
    VolumeModel,
)
from .value_objects import (
    BandpassResult,
    DesignResult,
    Dimensions,
    DriverSpec,
    EnclosureConfig,
    Panel,
    PanelType,
    PortedResult,
    PortSpec,
    PowerTier,
    SealedResult,
    Topology,
)

__all__ = [
    "BandpassResult",
    "DesignResult",
    "Dimensions",
    "DriverSpec",
    "EnclosureConfig",
    "EnclosureDesignError",
    "EnclosureDesigner",
    "InvalidGeometry",
    "MaterialEstimate",
    "MaterialEstimator",
    "Panel",
    "PanelGenerationService",
    "PanelType",
    "PortSynthesizer",
    "PortedResult",
    "PortSpec",
    "PowerTier",
    "SealedResult",
    "Topology",
    "UnsupportedTopology",
    "VolumeModel",
]
