"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.console import Console
from rich.table import Table

from .classifiers import label_min_zoom, line_min_zoom
from .errors import GridTilesError, SettingsError, SourceDataError
from .geojson_io import load_records
from .layer import PowerLayer
from .models import GeometryKind
from .settings import load_settings
from .tiling import classify_records, encode_tile, render_tile
from .utils.logging import configure_logging

app = typer.Typer(help="Classify power infrastructure into zoom-aware vector tile shapes")

SettingsOption = typer.Option(None, "--settings", "-s", exists=True, dir_okay=False, help="Layer settings JSON")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Enable debug logging")


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (SourceDataError, SettingsError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except GridTilesError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _layer(settings_path: Optional[Path], verbose: bool) -> PowerLayer:
    configure_logging(logging.DEBUG if verbose else logging.WARNING)
    return PowerLayer(load_settings(settings_path))


@app.command()
@_handle_errors
def classify(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="GeoJSON input"),
    settings: Optional[Path] = SettingsOption,
    verbose: bool = VerboseOption,
) -> None:
    """Print the rendering instructions emitted for every power record."""

    layer = _layer(settings, verbose)
    instructions = classify_records(layer, load_records(source))

    table = Table(title=f"{len(instructions)} rendering instructions")
    table.add_column("id")
    table.add_column("shape")
    table.add_column("zooms")
    table.add_column("attributes (minzoom)")
    for instruction in instructions:
        attrs = ", ".join(f"{b.key}={b.value} ({b.min_zoom})" for b in instruction.bindings)
        zooms = f"{instruction.zoom_range.min_zoom}-{instruction.zoom_range.max_zoom}"
        table.add_row(str(instruction.record_id), instruction.shape.value, zooms, attrs)
    Console().print(table)


@app.command()
@_handle_errors
def zooms(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="GeoJSON input"),
    verbose: bool = VerboseOption,
) -> None:
    """Print the computed minimum zooms for every power record."""

    layer = _layer(None, verbose)
    table = Table()
    table.add_column("id")
    table.add_column("power")
    table.add_column("branch")
    table.add_column("minzoom")
    for record in load_records(source):
        if not layer.filter(record):
            continue
        kind = record.kind()
        if kind is GeometryKind.LINE:
            zoom = str(line_min_zoom(record.tags))
        elif kind is GeometryKind.NONE:
            zoom = "-"
        else:
            zoom = str(label_min_zoom(record.tags))
        table.add_row(str(record.id), record.get_string("power") or "", kind.value, zoom)
    Console().print(table)


@app.command()
@_handle_errors
def tile(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="GeoJSON input"),
    z: int = typer.Argument(..., min=0, max=15),
    x: int = typer.Argument(..., min=0),
    y: int = typer.Argument(..., min=0),
    output: Path = typer.Option(..., "--output", "-o", dir_okay=False, help="Where to write the .pbf"),
    settings: Optional[Path] = SettingsOption,
    verbose: bool = VerboseOption,
) -> None:
    """Render and encode the power layer of tile Z/X/Y."""

    if x >= (1 << z) or y >= (1 << z):
        typer.echo(f"Error: tile {z}/{x}/{y} is outside the pyramid", err=True)
        raise typer.Exit(1)
    layer = _layer(settings, verbose)
    instructions = classify_records(layer, load_records(source))
    features = render_tile(layer, instructions, z, x, y)
    output.write_bytes(encode_tile(features, layer.name))
    print(f"[green]Wrote {len(features)} features to {output}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
