"""Driver lookup and registration commands."""

from pathlib import Path
from typing import Annotated

import typer

from enclosures.domain.value_objects import DriverSpec
from enclosures.infrastructure.driver_catalog import (
    default_spec_for_size,
    extract_size,
    find_known_driver,
)
from enclosures.infrastructure.driver_repository import (
    DriverRepository,
    DriverRepositoryError,
)

DEFAULT_STORE = Path("custom_drivers.json")

drivers_app = typer.Typer(help="Look up and register driver specifications.")

StoreOption = Annotated[
    Path,
    typer.Option("--store", help="Custom driver JSON file"),
]


def format_driver(spec: DriverSpec) -> str:
    lines = [
        spec.display_name,
        f'  Size:           {spec.size:g}"',
        f'  Cutout:         {spec.cutout_diameter:.3f}"',
        f'  Mounting depth: {spec.mounting_depth:.3f}"',
        f"  Displacement:   {spec.displacement:.3f} ft^3",
    ]
    for label, rng, unit in (
        ("Sealed", spec.recommended_sealed, "ft^3"),
        ("Ported", spec.recommended_ported, "ft^3"),
        ("Tuning", spec.recommended_tuning, "Hz"),
    ):
        if rng is not None:
            lines.append(f"  {label + ':':<16}{rng.min:g}-{rng.max:g} {unit}")
    if spec.xmax is not None:
        lines.append(f"  Xmax:           {spec.xmax:g} mm")
    return "\n".join(lines)


@drivers_app.command("lookup")
def lookup(
    query: Annotated[str, typer.Argument(help="Brand and model, e.g. 'Sundown SA-12'")],
    store: StoreOption = DEFAULT_STORE,
) -> None:
    """Show mounting data for a driver from the custom store or catalog.

    Exits 1 when the driver is unknown, after showing the size-based
    defaults a design would fall back to.
    """
    repository = DriverRepository(store).load()
    spec = repository.find(query)
    source = "custom store"
    if spec is None:
        spec = find_known_driver(query)
        source = "catalog"
    if spec is None:
        fallback = default_spec_for_size(extract_size(query), model=query)
        typer.echo(f"No match for '{query}'. Size defaults:", err=True)
        typer.echo(format_driver(fallback), err=True)
        raise typer.Exit(code=1)

    typer.echo(f"[{source}] {format_driver(spec)}")


@drivers_app.command("add")
def add(
    model: Annotated[str, typer.Argument(help="Model name to register")],
    cutout: Annotated[float, typer.Option("--cutout", help="Cutout diameter (in)")],
    mounting_depth: Annotated[
        float, typer.Option("--mounting-depth", help="Mounting depth (in)")
    ],
    displacement: Annotated[
        float, typer.Option("--displacement", help="Displacement (ft^3)")
    ],
    brand: Annotated[str, typer.Option("--brand", help="Manufacturer")] = "",
    size: Annotated[
        float | None, typer.Option("--size", help="Nominal size (in)")
    ] = None,
    xmax: Annotated[float | None, typer.Option("--xmax", help="Xmax (mm)")] = None,
    store: StoreOption = DEFAULT_STORE,
) -> None:
    """Register or replace a driver in the custom store."""
    try:
        spec = DriverSpec(
            cutout_diameter=cutout,
            mounting_depth=mounting_depth,
            displacement=displacement,
            brand=brand,
            model=model,
            size=size if size is not None else float(extract_size(model)),
            xmax=xmax,
        )
        repository = DriverRepository(store).load()
        key = repository.upsert(f"{brand} {model}".strip(), spec)
        repository.persist()
    except (ValueError, DriverRepositoryError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Saved '{key}' to {store}")
