"""Application layer - use cases and orchestration."""

from .commands import BatchDesignRunner, DesignEnclosureCommand
from .dtos import BatchOutput, DesignOutput, PortNoise

__all__ = [
    "BatchDesignRunner",
    "BatchOutput",
    "DesignEnclosureCommand",
    "DesignOutput",
    "PortNoise",
]
