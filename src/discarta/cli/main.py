"""DisCarta CLI - slippy map tiling and rendering.

Command-line interface for inspecting which tiles a view needs, rendering
viewport snapshots and preprocessing rasters into tile pyramids.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from discarta import __version__
from discarta.config import settings
from discarta.geometry import GeoArea, GeoPoint, Size
from discarta.projections import Projection, get_projection
from discarta.utils.logging import configure_logging, get_logger

app = typer.Typer(
    name="discarta",
    help="DisCarta: slippy map tiling and rendering",
    add_completion=False,
)


class ProjectionName(str, Enum):
    """Map projection."""

    equirectangular = "equirectangular"  # 512x256 tiles, linear lat/lon
    pseudo_mercator = "pseudo-mercator"  # 256x256 tiles, Web Mercator


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show version information."""
    if json_output:
        typer.echo(json.dumps({"version": __version__}))
    else:
        typer.echo(f"discarta {__version__}")


@app.command()
def tiles(  # noqa: PLR0913
    projection: Annotated[
        ProjectionName | None,
        typer.Option("--projection", "-p", help="Map projection"),
    ] = None,
    zoom: Annotated[
        int | None,
        typer.Option("--zoom", "-z", min=0, help="Zoom level (default: fit screen)"),
    ] = None,
    latitude: Annotated[
        float | None, typer.Option("--lat", help="Latitude to center on")
    ] = None,
    longitude: Annotated[
        float | None, typer.Option("--lon", help="Longitude to center on")
    ] = None,
    width: Annotated[int, typer.Option("--width", min=1, help="Screen width")] = 1024,
    height: Annotated[int, typer.Option("--height", min=1, help="Screen height")] = 512,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity (-v, -vv, -vvv)"
        ),
    ] = 0,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """List the tiles visible in a view."""
    from discarta.cli.runners import build_viewport, describe_visible_tiles  # noqa: PLC0415

    _configure_logging(verbose)

    viewport = build_viewport(
        _resolve_projection(projection),
        _screen_size(width, height),
        zoom,
        _center(latitude, longitude),
    )
    visible = describe_visible_tiles(viewport)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "projection": viewport.projection.key,
                    "zoom": viewport.extent.zoom_level,
                    "offset": [viewport.horizontal_offset, viewport.vertical_offset],
                    "tiles": visible,
                },
                indent=2,
            )
        )
        return

    typer.echo(
        f"{viewport.projection.name} at zoom {viewport.extent.zoom_level}: "
        f"{len(visible)} tile(s)"
    )
    for tile in visible:
        area = tile["area"]
        typer.echo(
            f"  {tile['y']}-{tile['x']}  "
            f"N {area['north']:.4f}  E {area['east']:.4f}  "
            f"S {area['south']:.4f}  W {area['west']:.4f}"
        )


@app.command()
def render(  # noqa: PLR0913
    output: Annotated[Path, typer.Argument(help="PNG file to write")],
    projection: Annotated[
        ProjectionName | None,
        typer.Option("--projection", "-p", help="Map projection"),
    ] = None,
    zoom: Annotated[
        int | None,
        typer.Option("--zoom", "-z", min=0, help="Zoom level (default: fit screen)"),
    ] = None,
    latitude: Annotated[
        float | None, typer.Option("--lat", help="Latitude to center on")
    ] = None,
    longitude: Annotated[
        float | None, typer.Option("--lon", help="Longitude to center on")
    ] = None,
    width: Annotated[int, typer.Option("--width", min=1, help="Screen width")] = 1024,
    height: Annotated[int, typer.Option("--height", min=1, help="Screen height")] = 512,
    tile_root: Annotated[
        Path | None,
        typer.Option(
            "--tile-root",
            exists=True,
            file_okay=False,
            help="Preprocessed tile directory (default: draw graticule)",
        ),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity (-v, -vv, -vvv)"
        ),
    ] = 0,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Render a snapshot of a view to a PNG file."""
    from discarta.cli.runners import (  # noqa: PLC0415
        build_viewport,
        create_tile_manager,
        render_snapshot,
    )

    _configure_logging(verbose)
    logger = get_logger(__name__)

    try:
        viewport = build_viewport(
            _resolve_projection(projection),
            _screen_size(width, height),
            zoom,
            _center(latitude, longitude),
            create_tile_manager(tile_root),
        )
        count = render_snapshot(viewport, output)
    except Exception as e:
        logger.exception("Render failed")
        if json_output:
            typer.echo(json.dumps({"error": str(e)}))
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "output": str(output),
                    "zoom": viewport.extent.zoom_level,
                    "tiles": count,
                }
            )
        )
    else:
        typer.echo(f"Wrote {output} ({count} tiles, zoom {viewport.extent.zoom_level})")


@app.command()
def preprocess(  # noqa: PLR0913
    raster: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Source image, already in the target projection",
        ),
    ],
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Tile root (default: TILE_ROOT)"),
    ] = None,
    projection: Annotated[
        ProjectionName | None,
        typer.Option("--projection", "-p", help="Target projection"),
    ] = None,
    north: Annotated[
        float | None, typer.Option("--north", help="Northern bound (default: world)")
    ] = None,
    east: Annotated[
        float | None, typer.Option("--east", help="Eastern bound (default: world)")
    ] = None,
    south: Annotated[
        float | None, typer.Option("--south", help="Southern bound (default: world)")
    ] = None,
    west: Annotated[
        float | None, typer.Option("--west", help="Western bound (default: world)")
    ] = None,
    min_zoom: Annotated[int, typer.Option("--min-zoom", min=0)] = 0,
    max_zoom: Annotated[
        int | None,
        typer.Option("--max-zoom", min=0, help="Default: the raster's native level"),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity (-v, -vv, -vvv)"
        ),
    ] = 0,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Cut a raster into a tile pyramid for the file tile manager."""
    from discarta.cli.runners import preprocess_raster  # noqa: PLC0415
    from discarta.raster import Status  # noqa: PLC0415

    _configure_logging(verbose)
    logger = get_logger(__name__)

    def show_progress(status: Status) -> None:
        if not json_output and status.total:
            typer.echo(f"\r{status.message} {status.percent:6.1%}", nl=False)

    target = _resolve_projection(projection)
    world = target.world
    map_area = GeoArea.from_bounds(
        north=world.north if north is None else north,
        east=world.east if east is None else east,
        south=world.south if south is None else south,
        west=world.west if west is None else west,
    )

    try:
        root = output_dir or Path(settings.require_tile_root())
        result = preprocess_raster(
            raster,
            map_area,
            root,
            target,
            min_zoom,
            max_zoom,
            show_progress,
        )
    except Exception as e:
        logger.exception("Preprocessing failed")
        if json_output:
            typer.echo(json.dumps({"error": str(e)}))
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "raster": str(result.raster),
                    "projection": result.projection,
                    "zoom_levels": result.zoom_levels,
                    "tiles": result.tiles_written,
                    "output_dir": str(result.output_root),
                },
                indent=2,
            )
        )
    else:
        typer.echo("")
        typer.echo(
            f"Wrote {result.tiles_written} tiles for zoom "
            f"{result.zoom_levels[0]}-{result.zoom_levels[-1]} to {result.output_root}"
        )


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """DisCarta: slippy map tiling and rendering."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


# =============================================================================
# Helpers
# =============================================================================


def _configure_logging(verbose: int) -> None:
    """Configure logging based on verbosity level."""
    if verbose == 0:
        level = "WARNING"
    elif verbose == 1:
        level = "INFO"
    else:  # verbose >= 2
        level = "DEBUG"

    configure_logging(level=level)


def _resolve_projection(name: ProjectionName | None) -> Projection:
    return get_projection(name.value if name is not None else settings.DEFAULT_PROJECTION)


def _screen_size(width: int, height: int) -> Size:
    return Size(width=width, height=height)


def _center(latitude: float | None, longitude: float | None) -> GeoPoint | None:
    if latitude is None and longitude is None:
        return None
    return GeoPoint(latitude=latitude or 0.0, longitude=longitude or 0.0)


if __name__ == "__main__":  # pragma: no cover
    app()
