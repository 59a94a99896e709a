"""Domain services for enclosure design.

This package provides the design engine:
- VolumeModel for internal dimensions and net air volume
- PortSynthesizer for Helmholtz slot port sizing
- EnclosureDesigner for topology selection and result assembly
- PanelGenerationService for the ordered panel list
"""

from .enclosure_designer import TARGET_TOLERANCE, EnclosureDesigner, resolve_topology
from .material_estimator import MaterialEstimate, MaterialEstimator
from .panel_generation import TERMINAL_CUTOUT_DIAMETER, PanelGenerationService
from .port_synthesizer import (
    END_CORRECTION_FACTOR,
    SPEED_OF_SOUND,
    NoiseLevel,
    PortSynthesizer,
    noise_estimate,
    port_velocity,
)
from .volume_model import (
    TERMINAL_CUP_DISPLACEMENT,
    WINDOW_OPENING_RATIO,
    VolumeBreakdown,
    VolumeModel,
)

__all__ = [
    "END_CORRECTION_FACTOR",
    "EnclosureDesigner",
    "MaterialEstimate",
    "MaterialEstimator",
    "NoiseLevel",
    "PanelGenerationService",
    "PortSynthesizer",
    "SPEED_OF_SOUND",
    "TARGET_TOLERANCE",
    "TERMINAL_CUP_DISPLACEMENT",
    "TERMINAL_CUTOUT_DIAMETER",
    "VolumeBreakdown",
    "VolumeModel",
    "WINDOW_OPENING_RATIO",
    "noise_estimate",
    "port_velocity",
    "resolve_topology",
]
