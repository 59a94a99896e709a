"""Base exporter framework with Protocol, Registry, and Manager."""

from __future__ import annotations

import logging
from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

if TYPE_CHECKING:
    from enclosures.application.dtos import DesignOutput


logger = logging.getLogger(__name__)


@runtime_checkable
class Exporter(Protocol):
    """Protocol for all exporters.

    Exporters convert a DesignOutput to a specific file format.

    Attributes:
        format_name: Registry name of the format (e.g., "json", "dxf").
        file_extension: File extension without leading dot.
    """

    format_name: ClassVar[str]
    file_extension: ClassVar[str]

    @abstractmethod
    def export(self, output: DesignOutput, path: Path) -> None:
        """Export a design output to a file.

        Args:
            output: The design output to export.
            path: Path where the file will be saved.
        """
        ...

    def export_string(self, output: DesignOutput) -> str:
        """Export a design output as a string.

        Raises:
            NotImplementedError: If the format does not support string export.
        """
        raise NotImplementedError(
            f"Format '{self.format_name}' does not support string export"
        )


class ExporterRegistry:
    """Registry for exporter classes.

    Exporters register themselves using the @ExporterRegistry.register
    decorator.

    Example:
        @ExporterRegistry.register("json")
        class JsonDesignExporter:
            format_name = "json"
            file_extension = "json"
            ...
    """

    _exporters: ClassVar[dict[str, type[Exporter]]] = {}

    @classmethod
    def register(cls, format_name: str) -> type:
        """Decorator to register an exporter class under a format name."""

        def decorator(exporter_class: type[Exporter]) -> type[Exporter]:
            if format_name in cls._exporters:
                logger.warning(
                    f"Overwriting existing exporter for format '{format_name}'"
                )
            cls._exporters[format_name] = exporter_class
            logger.debug(f"Registered exporter '{format_name}': {exporter_class.__name__}")
            return exporter_class

        return decorator

    @classmethod
    def get(cls, format_name: str) -> type[Exporter]:
        """Get an exporter class by format name.

        Raises:
            KeyError: If no exporter is registered for the format.
        """
        if format_name not in cls._exporters:
            available = ", ".join(sorted(cls._exporters.keys()))
            raise KeyError(
                f"No exporter registered for format '{format_name}'. "
                f"Available formats: {available or 'none'}"
            )
        return cls._exporters[format_name]

    @classmethod
    def available_formats(cls) -> list[str]:
        return sorted(cls._exporters.keys())

    @classmethod
    def is_registered(cls, format_name: str) -> bool:
        return format_name in cls._exporters


class ExportManager:
    """Writes a design output to one or more registered formats.

    Attributes:
        output_dir: Directory where exported files will be saved.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)

    def export_all(
        self,
        formats: list[str],
        output: DesignOutput,
        project_name: str | None = None,
    ) -> dict[str, Path]:
        """Export a design output to multiple formats.

        Files are named ``{project_name}.{ext}``; the project name defaults
        to a filesystem-safe form of the output name.

        Returns:
            Dictionary mapping format names to output file paths.

        Raises:
            KeyError: If any format is not registered.
            OSError: If file operations fail.
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        stem = project_name or safe_filename(output.name)

        results: dict[str, Path] = {}
        for format_name in formats:
            exporter = ExporterRegistry.get(format_name)()
            filepath = self.output_dir / f"{stem}.{exporter.file_extension}"

            logger.info(f"Exporting to {format_name}: {filepath}")
            exporter.export(output, filepath)
            results[format_name] = filepath

        return results

    def export_single(
        self, format_name: str, output: DesignOutput, project_name: str | None = None
    ) -> Path:
        return self.export_all([format_name], output, project_name)[format_name]


def safe_filename(name: str) -> str:
    """Reduce a free-text label to a filename stem."""
    stem = "".join(c if c.isalnum() or c in "-_" else "_" for c in name.strip())
    return stem.strip("_") or "enclosure"
