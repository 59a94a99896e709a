"""Configuration file loader.

Loads JSON enclosure configurations and turns file system, JSON syntax and
pydantic validation failures into a single ConfigError type carrying an
``error_type`` category and per-field details.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from enclosures.application.config.schema import EnclosureConfiguration


class ConfigError(Exception):
    """Raised when a configuration cannot be loaded or validated.

    Attributes:
        message: The primary error message.
        error_type: One of file_not_found, permission_denied, file_read_error,
            json_parse or validation.
        path: Path to the configuration file, if loaded from disk.
        details: Per-error details (JSON path and message for validation,
            line and column for JSON syntax errors).
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def _format_json_path(loc: tuple[str | int, ...]) -> str:
    """Format a pydantic location tuple as a JSON path.

    Examples:
        >>> _format_json_path(("enclosure", "material_thickness"))
        'enclosure.material_thickness'
        >>> _format_json_path(("output", "formats", 1))
        'output.formats[1]'
    """
    parts: list[str] = []
    for segment in loc:
        if isinstance(segment, int):
            if parts:
                parts[-1] = f"{parts[-1]}[{segment}]"
            else:
                parts.append(f"[{segment}]")
        else:
            parts.append(str(segment))
    return ".".join(parts)


def _validation_error(error: PydanticValidationError, path: Path | None) -> ConfigError:
    details = [
        {
            "path": _format_json_path(err["loc"]),
            "message": err["msg"],
            "value": err.get("input"),
            "error_type": err["type"],
        }
        for err in error.errors()
    ]
    lines = ["Configuration validation failed:"]
    for detail in details:
        # Model-level failures have no location and carry the whole input
        if detail["path"] and not isinstance(detail["value"], dict):
            lines.append(
                f"  - {detail['path']}: {detail['message']} (got: {detail['value']!r})"
            )
        else:
            lines.append(f"  - {detail['path'] or '<root>'}: {detail['message']}")
    return ConfigError(
        message="\n".join(lines), error_type="validation", path=path, details=details
    )


def load_config(path: Path) -> EnclosureConfiguration:
    """Load and validate an enclosure configuration from a JSON file.

    Raises:
        ConfigError: If the file is missing, unreadable, not valid JSON, or
            does not match the schema.
    """
    if not path.exists():
        raise ConfigError(
            message=f"Config file not found: {path}",
            error_type="file_not_found",
            path=path,
        )

    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError:
        raise ConfigError(
            message=f"Permission denied reading config file: {path}",
            error_type="permission_denied",
            path=path,
        )
    except OSError as e:
        raise ConfigError(
            message=f"Error reading config file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        )

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            message=(
                f"Invalid JSON in config file: {path} "
                f"(line {e.lineno}, column {e.colno}): {e.msg}"
            ),
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        )

    try:
        return EnclosureConfiguration.model_validate(data)
    except PydanticValidationError as e:
        raise _validation_error(e, path)


def load_config_from_dict(data: dict[str, Any]) -> EnclosureConfiguration:
    """Validate an enclosure configuration held in memory.

    Raises:
        ConfigError: If the data fails validation.
    """
    try:
        return EnclosureConfiguration.model_validate(data)
    except PydanticValidationError as e:
        raise _validation_error(e, None)
