"""Exceptions raised by the enclosure design engine.

Only conditions that abort a design run are exceptions. Infeasible designs
and unplaceable panels are reported as advisory records on the results.
"""


class EnclosureDesignError(Exception):
    """Base class for fatal design errors."""

    pass


class InvalidGeometry(EnclosureDesignError):
    """Raised when a derived dimension is zero or negative."""

    def __init__(self, message: str, dimensions: tuple[float, ...] = ()) -> None:
        self.dimensions = dimensions
        super().__init__(message)


class UnsupportedTopology(EnclosureDesignError):
    """Raised when the topology tag is not one the designer knows."""

    def __init__(self, topology: object) -> None:
        self.topology = topology
        super().__init__(f"Unsupported enclosure topology: {topology!r}")
