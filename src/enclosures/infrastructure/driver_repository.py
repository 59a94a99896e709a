"""JSON-backed store of custom driver specifications.

Drivers that are not in the built-in catalog are recorded here the first
time they are resolved, so later designs reuse the same mounting data.
Writes are serialized by a lock and persisted atomically, which keeps the
store safe when batch designs resolve drivers concurrently.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from enclosures.domain.value_objects import DriverSpec, ValueRange

from .driver_catalog import (
    default_spec_for_size,
    extract_size,
    find_known_driver,
    match_driver,
    normalize_key,
)

logger = logging.getLogger(__name__)

__all__ = ["DriverRecord", "DriverRepository", "DriverRepositoryError", "resolve_driver"]


class DriverRepositoryError(Exception):
    """Raised when the driver store cannot be written."""

    def __init__(self, message: str, path: Path) -> None:
        self.path = path
        super().__init__(message)


class RangeRecord(BaseModel):
    """Serialized min/max range."""

    model_config = ConfigDict(extra="forbid")

    min: float
    max: float


class DriverRecord(BaseModel):
    """On-disk form of a DriverSpec."""

    model_config = ConfigDict(extra="ignore")

    brand: str = ""
    model: str = ""
    size: float = Field(default=12.0, gt=0)
    cutout_diameter: float = Field(..., gt=0)
    mounting_depth: float = Field(..., gt=0)
    displacement: float = Field(..., ge=0)
    recommended_sealed: RangeRecord | None = None
    recommended_ported: RangeRecord | None = None
    recommended_tuning: RangeRecord | None = None
    xmax: float | None = None

    @classmethod
    def from_spec(cls, spec: DriverSpec) -> DriverRecord:
        def _range(value: ValueRange | None) -> RangeRecord | None:
            return RangeRecord(min=value.min, max=value.max) if value else None

        return cls(
            brand=spec.brand,
            model=spec.model,
            size=spec.size,
            cutout_diameter=spec.cutout_diameter,
            mounting_depth=spec.mounting_depth,
            displacement=spec.displacement,
            recommended_sealed=_range(spec.recommended_sealed),
            recommended_ported=_range(spec.recommended_ported),
            recommended_tuning=_range(spec.recommended_tuning),
            xmax=spec.xmax,
        )

    def to_spec(self) -> DriverSpec:
        def _range(value: RangeRecord | None) -> ValueRange | None:
            return ValueRange(value.min, value.max) if value else None

        return DriverSpec(
            cutout_diameter=self.cutout_diameter,
            mounting_depth=self.mounting_depth,
            displacement=self.displacement,
            brand=self.brand,
            model=self.model,
            size=self.size,
            recommended_sealed=_range(self.recommended_sealed),
            recommended_ported=_range(self.recommended_ported),
            recommended_tuning=_range(self.recommended_tuning),
            xmax=self.xmax,
        )


class DriverRepository:
    """Custom driver specifications keyed by normalized model name.

    Args:
        path: JSON file holding an object of ``{key: record}``. It need not
            exist yet.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._drivers: dict[str, DriverSpec] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._drivers)

    def __contains__(self, key: str) -> bool:
        return normalize_key(key) in self._drivers

    def load(self) -> DriverRepository:
        """Read the store from disk, replacing anything held in memory.

        A missing file loads as empty. An unparseable file, or entries that
        fail validation, are skipped with a warning.
        """
        drivers: dict[str, DriverSpec] = {}
        if self.path.exists():
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("Could not parse custom driver file %s: %s", self.path, e)
                data = {}
            if not isinstance(data, dict):
                logger.warning("Custom driver file %s is not a JSON object", self.path)
                data = {}
            for key, raw in data.items():
                try:
                    drivers[normalize_key(key)] = DriverRecord.model_validate(raw).to_spec()
                except (ValidationError, ValueError) as e:
                    logger.warning("Skipping invalid driver '%s' in %s: %s", key, self.path, e)

        with self._lock:
            self._drivers = drivers
        logger.debug("Loaded %d custom drivers from %s", len(drivers), self.path)
        return self

    def find(self, query: str) -> DriverSpec | None:
        """Find a stored driver by exact key or fuzzy model match."""
        with self._lock:
            return match_driver(query, self._drivers)

    def upsert(self, key: str, spec: DriverSpec) -> str:
        """Insert or replace a driver; returns the normalized key used."""
        normalized = normalize_key(key)
        if not normalized:
            raise ValueError("Driver key must contain letters or digits")
        with self._lock:
            self._drivers[normalized] = spec
        return normalized

    def add_if_missing(self, key: str, spec: DriverSpec) -> DriverSpec:
        """Store and persist ``spec`` unless ``key`` already resolves.

        The lookup, insert and write happen under one lock, so concurrent
        callers for the same model write it once and all get the stored spec.
        """
        with self._lock:
            existing = match_driver(key, self._drivers)
            if existing is not None:
                return existing
            self.upsert(key, spec)
            self.persist()
            return spec

    def items(self) -> list[tuple[str, DriverSpec]]:
        with self._lock:
            return list(self._drivers.items())

    def persist(self) -> None:
        """Write the store to disk atomically.

        Raises:
            DriverRepositoryError: If the file cannot be written.
        """
        with self._lock:
            payload = {
                key: DriverRecord.from_spec(spec).model_dump(mode="json")
                for key, spec in self._drivers.items()
            }
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
                )
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as f:
                        json.dump(payload, f, indent=2)
                    os.replace(tmp_name, self.path)
                except BaseException:
                    Path(tmp_name).unlink(missing_ok=True)
                    raise
            except OSError as e:
                raise DriverRepositoryError(
                    f"Cannot write custom driver file {self.path}: {e}", self.path
                ) from e
        logger.debug("Persisted %d custom drivers to %s", len(payload), self.path)


def resolve_driver(
    query: str,
    repository: DriverRepository | None = None,
    size: float | None = None,
) -> DriverSpec:
    """Resolve a model name to mounting data.

    Lookup order is the custom repository, then the built-in catalog, then
    size-based defaults. A default is recorded in the repository (and
    persisted) so the same model resolves identically next time.

    Args:
        query: Brand and model text, e.g. "Skar VXF-12".
        repository: Custom driver store, if any.
        size: Nominal size in inches when known; otherwise parsed from query.
    """
    if repository is not None:
        spec = repository.find(query)
        if spec is not None:
            logger.debug("Driver '%s' found in custom store", query)
            return spec

    spec = find_known_driver(query)
    if spec is not None:
        logger.debug("Driver '%s' matched catalog model %s", query, spec.display_name)
        return spec

    nominal = size if size is not None else extract_size(query)
    brand = query.split()[0] if query.split() else ""
    spec = default_spec_for_size(nominal, brand=brand, model=query.strip())
    logger.warning(
        "Driver '%s' not found; using %g\" size defaults", query, spec.size
    )
    if repository is not None and normalize_key(query):
        return repository.add_if_missing(query, spec)
    return spec
