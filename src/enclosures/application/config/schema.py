"""Pydantic configuration schema models for enclosure designs.

A configuration file describes one design: the enclosure envelope and
topology, the driver (by model name and/or explicit mounting data), sheet
nesting options and output options. Domain enums are reused directly so the
configuration and the engine share one vocabulary.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from enclosures.domain.value_objects import PowerTier, Topology

# Supported schema versions for configuration files
# Version 1.0: Sealed, ported and bandpass designs with sheet nesting
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})


def parse_ratio(value: str) -> tuple[float, float]:
    """Parse an "S:P" ratio string into two positive numbers.

    Raises:
        ValueError: If the string is not two positive numbers separated by ':'.
    """
    parts = value.split(":")
    if len(parts) != 2:
        raise ValueError(f"Ratio must look like '1:2', got {value!r}")
    try:
        sealed, ported = (float(p.strip()) for p in parts)
    except ValueError:
        raise ValueError(f"Ratio parts must be numbers, got {value!r}") from None
    if sealed <= 0 or ported <= 0:
        raise ValueError(f"Ratio parts must be positive, got {value!r}")
    return sealed, ported


class RefinementConfig(BaseModel):
    """Port/volume refinement loop limits.

    Attributes:
        max_passes: Maximum solve passes (2 reproduces the legacy two-pass result).
        tolerance: Volume change in cubic inches treated as converged.
    """

    model_config = ConfigDict(extra="forbid")

    max_passes: int = Field(default=20, ge=1, le=100)
    tolerance: float = Field(default=0.01, gt=0)


class EnclosureSection(BaseModel):
    """Envelope, topology and construction options.

    Attributes:
        topology: sealed, ported or bandpass (bandpass_4th is accepted as an alias).
        target_volume: Target net volume per driver in cubic feet.
        tuning_frequency: Port tuning in Hz; required for ported and bandpass.
        driver_count: Number of drivers in the box.
        width: Maximum external width in inches.
        height: Maximum external height in inches.
        depth: Maximum external depth in inches.
        material_thickness: Sheet thickness in inches.
        double_baffle: Add a second layer behind the front baffle.
        extra_bracing: Add a window brace.
        separate_chambers: Give each driver its own sub-chamber.
        power_level: Port sizing tier (daily, sql or spl).
        bandpass_ratio: Sealed:ported split such as "1:2".
        refinement: Port refinement loop limits.
    """

    model_config = ConfigDict(extra="forbid")

    topology: Topology
    target_volume: float = Field(..., gt=0, description="Net volume per driver, ft^3")
    tuning_frequency: float | None = Field(default=None, gt=0, le=200)
    driver_count: int = Field(default=1, ge=1, le=8)
    width: float = Field(..., gt=0, le=120)
    height: float = Field(..., gt=0, le=120)
    depth: float = Field(..., gt=0, le=120)
    material_thickness: float = Field(default=0.75, gt=0, le=3.0)
    double_baffle: bool = False
    extra_bracing: bool = False
    separate_chambers: bool = False
    power_level: PowerTier = PowerTier.SQL
    bandpass_ratio: str = "1:2"
    refinement: RefinementConfig = Field(default_factory=RefinementConfig)

    @field_validator("topology", mode="before")
    @classmethod
    def accept_topology_alias(cls, v: object) -> object:
        if isinstance(v, str) and v.strip().lower() == "bandpass_4th":
            return Topology.BANDPASS
        return v

    @field_validator("bandpass_ratio")
    @classmethod
    def validate_ratio(cls, v: str) -> str:
        parse_ratio(v)
        return v

    @model_validator(mode="after")
    def require_tuning_for_ports(self) -> "EnclosureSection":
        if self.topology != Topology.SEALED and self.tuning_frequency is None:
            raise ValueError(
                f"tuning_frequency is required for {self.topology.value} enclosures"
            )
        return self

    @property
    def ratio(self) -> tuple[float, float]:
        return parse_ratio(self.bandpass_ratio)


class DriverSection(BaseModel):
    """Driver identification and optional explicit mounting data.

    Explicit values override whatever the catalog or repository supplies.

    Attributes:
        model: Free-text model name used for catalog lookup.
        brand: Manufacturer name.
        size: Nominal size in inches.
        cutout_diameter: Baffle cutout diameter in inches.
        mounting_depth: Mounting depth in inches.
        displacement: Driver displacement in cubic feet.
        xmax: One-way excursion in millimetres, for port velocity estimates.
    """

    model_config = ConfigDict(extra="forbid")

    model: str = ""
    brand: str = ""
    size: float | None = Field(default=None, gt=0, le=24)
    cutout_diameter: float | None = Field(default=None, gt=0)
    mounting_depth: float | None = Field(default=None, gt=0)
    displacement: float | None = Field(default=None, ge=0)
    xmax: float | None = Field(default=None, gt=0)

    @property
    def is_explicit(self) -> bool:
        """True if the section alone fully describes the driver."""
        return (
            self.cutout_diameter is not None
            and self.mounting_depth is not None
            and self.displacement is not None
        )


class SheetSizeConfigSchema(BaseModel):
    """Sheet stock dimensions (default 4'x8')."""

    model_config = ConfigDict(extra="forbid")

    width: float = Field(default=48.0, gt=0, le=120, description="Sheet width in inches")
    length: float = Field(default=96.0, gt=0, le=120, description="Sheet length in inches")


class NestingConfigSchema(BaseModel):
    """Sheet nesting configuration.

    Attributes:
        enabled: Whether panels are nested onto sheets.
        sheet_size: Sheet dimensions.
        kerf: Saw blade kerf width in inches.
        merge_tolerance: Coordinate tolerance for merging free rectangles.
    """

    model_config = ConfigDict(extra="forbid")

    enabled: bool = Field(default=True, description="Nest panels onto sheets")
    sheet_size: SheetSizeConfigSchema = Field(default_factory=SheetSizeConfigSchema)
    kerf: float = Field(default=0.125, ge=0, le=0.5, description="Saw kerf width in inches")
    merge_tolerance: float = Field(default=0.01, ge=0, le=0.25)


class OutputConfig(BaseModel):
    """Output format configuration.

    Attributes:
        format: Console report format.
        formats: File export formats (registered exporter names).
        output_dir: Directory for exported files.
        project_name: Base name for exported files; defaults to the config name.
    """

    model_config = ConfigDict(extra="forbid")

    format: Literal["all", "summary", "cutlist", "nesting", "json"] = "all"
    formats: list[Literal["json", "dxf"]] = Field(default_factory=list)
    output_dir: str | None = None
    project_name: str | None = None


class EnclosureConfiguration(BaseModel):
    """Root configuration model for an enclosure design.

    Example:
        >>> config = EnclosureConfiguration(
        ...     schema_version="1.0",
        ...     enclosure=EnclosureSection(
        ...         topology="sealed", target_volume=1.25,
        ...         width=30, height=15, depth=16,
        ...     ),
        ...     driver=DriverSection(model="Sundown SA-12"),
        ... )
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(..., pattern=r"^\d+\.\d+$")
    name: str = Field(default="enclosure", min_length=1, max_length=120)
    enclosure: EnclosureSection
    driver: DriverSection = Field(default_factory=DriverSection)
    nesting: NestingConfigSchema = Field(default_factory=NestingConfigSchema)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Accept supported versions and newer minors of a supported major."""
        if v in SUPPORTED_VERSIONS:
            return v

        major_version = int(v.split(".")[0])
        supported_majors = {int(sv.split(".")[0]) for sv in SUPPORTED_VERSIONS}
        if major_version in supported_majors:
            return v

        raise ValueError(
            f"Unsupported schema version '{v}'. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}"
        )
