"""Configuration schema and loading for enclosure designs.

Public API:
    - EnclosureConfiguration: Root configuration model
    - EnclosureSection, DriverSection, NestingConfigSchema, OutputConfig
    - load_config / load_config_from_dict: Load and validate configurations
    - ConfigError: Exception for configuration errors
    - config_to_enclosure, config_to_nesting, config_to_driver: Adapters

Example:
    >>> from pathlib import Path
    >>> from enclosures.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     config = load_config(Path("my-enclosure.json"))
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from enclosures.application.config.adapter import (
    config_to_driver,
    config_to_enclosure,
    config_to_nesting,
)
from enclosures.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
)
from enclosures.application.config.schema import (
    SUPPORTED_VERSIONS,
    DriverSection,
    EnclosureConfiguration,
    EnclosureSection,
    NestingConfigSchema,
    OutputConfig,
    RefinementConfig,
    SheetSizeConfigSchema,
    parse_ratio,
)

__all__ = [
    "ConfigError",
    "DriverSection",
    "EnclosureConfiguration",
    "EnclosureSection",
    "NestingConfigSchema",
    "OutputConfig",
    "RefinementConfig",
    "SUPPORTED_VERSIONS",
    "SheetSizeConfigSchema",
    "config_to_driver",
    "config_to_enclosure",
    "config_to_nesting",
    "load_config",
    "load_config_from_dict",
    "parse_ratio",
]
