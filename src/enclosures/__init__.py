"""Loudspeaker enclosure designer.

Derives box dimensions, chamber volumes and port geometry from acoustic
targets, emits the panels needed to build the box, and nests those panels
onto stock sheets.
"""

__version__ = "0.1.0"
