"""CLI application entry point for polyclean.

This module provides the main CLI interface using Typer. Every cleaning
command reads a DXF drawing, processes its LWPOLYLINE entities and writes
a new drawing next to it ({name}-Cleaned.dxf unless --output is given).
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Any

import typer

from polyclean import __version__
from polyclean.cli.output import (
    console,
    create_progress,
    print_cancellation_notice,
    print_cancellation_summary,
    print_drawing_info,
    print_error,
    print_extents,
    print_header,
    print_landing,
    print_processing_info,
    print_self_intersections,
    print_step,
    print_success,
    print_vertex_table,
)
from polyclean.config import (
    LoggingConfig,
    PolycleanSettings,
    ProcessingConfig,
    get_default_settings,
)
from polyclean.core import CurveProcessor, Direction, as_polyline, describe, extents, landing
from polyclean.domain import CurveMetadata, Point, Polyline
from polyclean.exceptions import DocumentLoadError, DocumentSaveError, PolycleanError
from polyclean.io import DxfReader, DxfWriter

_DEFAULTS = get_default_settings()

# Create the Typer app
app = typer.Typer(
    name="polyclean",
    help="Clean up, split, snap and orient polylines in DXF drawings.",
    add_completion=False,
    no_args_is_help=True,
)

InputDrawing = Annotated[
    Path,
    typer.Argument(
        help="Path to input DXF drawing",
        show_default=False,
    ),
]
OutputOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Output path (default: {name}-Cleaned.dxf)",
    ),
]
WorkersOption = Annotated[
    int | None,
    typer.Option(
        "--workers",
        "-j",
        help="Number of parallel workers (default: auto, 1 = no worker processes)",
        min=1,
    ),
]
LogFileOption = Annotated[
    Path | None,
    typer.Option(
        "--log-file",
        help="Write detailed logs to file",
    ),
]
LogLevelOption = Annotated[
    str,
    typer.Option(
        "--log-level",
        help="Logging level (DEBUG|INFO|WARNING|ERROR)",
    ),
]
QuietOption = Annotated[
    bool,
    typer.Option(
        "--quiet",
        "-q",
        help="Minimal console output",
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Polyclean[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_options(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Clean up, split, snap and orient polylines in DXF drawings."""


def _check_input(input_path: Path) -> None:
    if not input_path.exists():
        print_error(
            f"Input file not found: {input_path}",
            details=f"The file '{input_path}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not input_path.is_file():
        print_error(
            f"Input path is not a file: {input_path}",
            details="Please provide a path to a DXF drawing.",
        )
        raise typer.Exit(code=1)


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Turn processing errors into a printed message and exit code 1."""
    try:
        yield
    except DocumentLoadError as e:
        print_error(f"Could not load drawing: {e.reason}")
        raise typer.Exit(code=1)
    except DocumentSaveError as e:
        print_error(f"Could not save drawing: {e.reason}")
        raise typer.Exit(code=1)
    except PolycleanError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def _run_operation(
    input_path: Path,
    output: Path | None,
    operation: str,
    options: dict[str, Any],
    workers: int | None,
    log_file: Path | None,
    log_level: str,
    quiet: bool,
    visible_only: bool = False,
) -> None:
    """Shared driver for the drawing-modifying commands."""
    _check_input(input_path)

    if not quiet:
        print_header(__version__)

    settings = PolycleanSettings(
        tolerances=_DEFAULTS.tolerances,
        processing=ProcessingConfig(
            max_workers=workers,
            iterate_reduce=options.get("iterate", False),
        ),
        logging=LoggingConfig(
            log_file=log_file,
            log_level=log_level if not quiet else "WARNING",
        ),
    )

    with _handle_errors():
        if not quiet:
            print_step("Loading drawing")
            with DxfReader(input_path) as reader:
                print_drawing_info(str(input_path), reader.dxf_version, reader.entity_count)

        actual_output_path = output if output is not None else DxfWriter.get_cleaned_path(input_path)
        processor = CurveProcessor(settings, quiet=quiet)
        stats = None

        try:
            if not quiet:
                print_step("Processing")
                print_processing_info(operation, workers)
                with create_progress() as progress:
                    task_id = progress.add_task(f"Processing {operation}", total=None)

                    def update_progress(completed: int, total: int, *_: object) -> None:
                        progress.update(task_id, completed=completed, total=total)

                    stats = processor.process(
                        input_path=input_path,
                        operation=operation,
                        options=options,
                        output_path=actual_output_path,
                        max_workers=workers,
                        visible_only=visible_only,
                        progress_callback=update_progress,
                    )
            else:
                stats = processor.process(
                    input_path=input_path,
                    operation=operation,
                    options=options,
                    output_path=actual_output_path,
                    max_workers=workers,
                    visible_only=visible_only,
                )
        except KeyboardInterrupt:
            if not quiet:
                print_cancellation_notice()
                print_cancellation_summary(
                    processed=stats.processed_count if stats else 0,
                    cancelled=stats.cancelled_count if stats else 0,
                )
            raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code

        if not quiet:
            print_success(
                output_path=str(actual_output_path),
                file_size=_format_file_size(actual_output_path),
                total_time_s=stats.duration_seconds,
                processed=stats.processed_count,
                changed=stats.changed_count,
                vertices_removed=stats.vertices_removed,
                errors=stats.error_count,
                avg_time_ms=stats.avg_time_ms,
                min_time_ms=stats.min_time_ms,
                max_time_ms=stats.max_time_ms,
            )


@app.command()
def dedupe(
    input_drawing: InputDrawing,
    tolerance: Annotated[
        float,
        typer.Option(
            "--tolerance",
            "-t",
            help="Merge consecutive vertices closer than this",
            min=0.0,
        ),
    ] = _DEFAULTS.tolerances.duplicate_tolerance,
    output: OutputOption = None,
    workers: WorkersOption = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Remove duplicate consecutive vertices.

    Example:
        polyclean dedupe drawing.dxf --tolerance 0.001
    """
    _run_operation(
        input_drawing, output, "dedupe", {"tolerance": tolerance},
        workers, log_file, log_level, quiet,
    )


@app.command()
def reduce(
    input_drawing: InputDrawing,
    epsilon: Annotated[
        float,
        typer.Option(
            "--epsilon",
            "-e",
            help="Maximum deviation of a removed vertex",
            min=0.0,
        ),
    ] = _DEFAULTS.tolerances.reduce_epsilon,
    iterate: Annotated[
        bool,
        typer.Option(
            "--iterate",
            help="Repeat until no more vertices are removed",
        ),
    ] = _DEFAULTS.processing.iterate_reduce,
    output: OutputOption = None,
    workers: WorkersOption = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Reduce vertices of straight runs within a tolerance."""
    _run_operation(
        input_drawing, output, "reduce", {"epsilon": epsilon, "iterate": iterate},
        workers, log_file, log_level, quiet,
    )


@app.command()
def colinear(
    input_drawing: InputDrawing,
    angle: Annotated[
        float,
        typer.Option(
            "--angle",
            "-a",
            help="Maximum direction change in radians",
            min=0.0,
        ),
    ] = _DEFAULTS.tolerances.colinear_angle,
    output: OutputOption = None,
    workers: WorkersOption = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Remove collinear vertices."""
    _run_operation(
        input_drawing, output, "colinear", {"angle_epsilon": angle},
        workers, log_file, log_level, quiet,
    )


@app.command("fit-arcs")
def fit_arcs_command(
    input_drawing: InputDrawing,
    segments: Annotated[
        int,
        typer.Option(
            "--segments",
            "-n",
            help="Chords per arc (0 = choose from the arc sweep)",
            min=0,
        ),
    ] = 0,
    degrees_per_chord: Annotated[
        float,
        typer.Option(
            "--degrees-per-chord",
            help="Sweep covered by one chord when --segments is 0",
            min=0.1,
            max=180.0,
        ),
    ] = _DEFAULTS.tolerances.degrees_per_chord,
    output: OutputOption = None,
    workers: WorkersOption = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Replace arc segments with straight chords."""
    _run_operation(
        input_drawing, output, "fit-arcs",
        {"segments_per_arc": segments, "degrees_per_chord": degrees_per_chord},
        workers, log_file, log_level, quiet,
    )


@app.command()
def direction(
    input_drawing: InputDrawing,
    convention: Annotated[
        int,
        typer.Option(
            "--direction",
            "-d",
            help="1 = right to left, 2 = bottom to top, 3 = left to right, 4 = top to bottom",
            min=1,
            max=4,
        ),
    ] = Direction.LEFT_TO_RIGHT.value,
    output: OutputOption = None,
    workers: WorkersOption = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Orient polylines along an axis direction."""
    _run_operation(
        input_drawing, output, "direction", {"direction": convention},
        workers, log_file, log_level, quiet,
    )


@app.command()
def close(
    input_drawing: InputDrawing,
    output: OutputOption = None,
    workers: WorkersOption = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Add a closing vertex at the start of open polylines."""
    _run_operation(input_drawing, output, "close", {}, workers, log_file, log_level, quiet)


@app.command()
def purge(
    input_drawing: InputDrawing,
    output: OutputOption = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Erase zero-length polylines."""
    _run_operation(input_drawing, output, "purge", {}, 1, log_file, log_level, quiet)


@app.command()
def split(
    input_drawing: InputDrawing,
    output: OutputOption = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Split polylines where they cross each other."""
    _run_operation(input_drawing, output, "split", {}, 1, log_file, log_level, quiet)


@app.command("trim-extend")
def trim_extend_command(
    input_drawing: InputDrawing,
    epsilon: Annotated[
        float,
        typer.Option(
            "--epsilon",
            "-e",
            help="Maximum gap or overshoot to close",
            min=0.0,
        ),
    ] = _DEFAULTS.tolerances.snap_epsilon,
    all_layers: Annotated[
        bool,
        typer.Option(
            "--all-layers",
            help="Include polylines that are invisible or on hidden layers",
        ),
    ] = False,
    output: OutputOption = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Snap polyline ends onto nearby polylines (trim overshoots, extend gaps)."""
    _run_operation(
        input_drawing, output, "trim-extend", {"epsilon": epsilon},
        1, log_file, log_level, quiet, visible_only=not all_layers,
    )


@app.command()
def detect(
    input_drawing: InputDrawing,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Report polylines that intersect themselves."""
    _check_input(input_drawing)
    settings = PolycleanSettings(
        logging=LoggingConfig(log_file=log_file, log_level=log_level),
    )

    with _handle_errors():
        with DxfReader(input_drawing) as reader:
            items = list(reader.iter_items(("LWPOLYLINE",)))

        processor = CurveProcessor(settings, quiet=quiet)
        found = processor.detect(items)
        if not quiet:
            print_step("Self-intersections")
        print_self_intersections(found, len(items))


@app.command()
def info(
    input_drawing: InputDrawing,
    handle: Annotated[
        str | None,
        typer.Option(
            "--handle",
            help="Only show the polyline with this entity handle",
        ),
    ] = None,
) -> None:
    """List the vertices and bulges of polylines."""
    _check_input(input_drawing)

    with _handle_errors():
        with DxfReader(input_drawing) as reader:
            print_drawing_info(str(input_drawing), reader.dxf_version, reader.entity_count)
            items = [
                item
                for item in reader.iter_items(("LWPOLYLINE",))
                if handle is None or item.handle == handle
            ]

        if handle is not None and not items:
            print_error(f"No polyline with handle {handle}")
            raise typer.Exit(code=1)

        for item in items:
            poly = item.curve
            if isinstance(poly, Polyline):
                print_vertex_table(item.handle, poly.closed, describe(poly))
                console.print(f"  length {poly.length:.4f}")


@app.command("extents")
def extents_command(input_drawing: InputDrawing) -> None:
    """Show the combined bounding box of all curves."""
    _check_input(input_drawing)

    with _handle_errors():
        with DxfReader(input_drawing) as reader:
            curves = [item.curve for item in reader.iter_items()]
        print_step("Extents")
        print_extents(extents(curves))


@app.command("landing")
def landing_command(
    input_drawing: InputDrawing,
    x: Annotated[float, typer.Option("--x", help="X of the point to land")],
    y: Annotated[float, typer.Option("--y", help="Y of the point to land")],
    layer: Annotated[
        str,
        typer.Option("--layer", help="Layer for the connector polyline"),
    ] = "0",
    output: OutputOption = None,
) -> None:
    """Draw the shortest connector from a point to the nearest curve."""
    _check_input(input_drawing)

    with _handle_errors():
        reader = DxfReader(input_drawing)
        reader.load()
        try:
            items = list(reader.iter_items())
            result = landing(Point(x, y), [item.curve for item in items])
            if result is None:
                print_error("No curves to land on")
                raise typer.Exit(code=1)

            target = items[result.index].handle
            print_landing(result.connector.start, result.connector.end, result.distance, target)

            actual_output_path = output if output is not None else DxfWriter.get_cleaned_path(input_drawing)
            writer = DxfWriter(reader.document, actual_output_path)
            writer.add([as_polyline(result.connector, CurveMetadata(layer=layer))])
            writer.save()
        finally:
            reader.close()


def _format_file_size(path: Path) -> str:
    """Format file size in human-readable form.

    Args:
        path: Path to file

    Returns:
        Human-readable file size (e.g., "428 KB")
    """
    try:
        size_bytes = path.stat().st_size
        if size_bytes < 1024:
            return f"{size_bytes} B"
        elif size_bytes < 1024 * 1024:
            return f"{size_bytes / 1024:.0f} KB"
        else:
            return f"{size_bytes / (1024 * 1024):.1f} MB"
    except OSError:
        return "unknown"


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
