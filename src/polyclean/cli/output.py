"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and formatted messages.
"""

from collections.abc import Sequence

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from polyclean.domain import IntersectionPoint, Point

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for polyline processing.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Polyclean[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_drawing_info(path: str, dxf_version: str, curve_count: int) -> None:
    """Print drawing information.

    Args:
        path: Path to the drawing file
        dxf_version: DXF version string (e.g., "AC1024")
        curve_count: Number of supported curve entities
    """
    line = Text("  ")
    line.append(path)
    line.append(f" ({dxf_version})")
    console.print(line)
    console.print(f"  {curve_count:,} curves")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_processing_info(operation: str, workers: int | None) -> None:
    """Print processing configuration.

    Args:
        operation: Operation name
        workers: Number of parallel workers (None = auto)
    """
    worker_str = "auto workers" if workers is None else f"{workers} workers"
    console.print(f"  {operation} {SYM_DOT} {worker_str} {SYM_DOT} Ctrl+C to cancel")


def print_success(
    output_path: str,
    file_size: str,
    total_time_s: float,
    processed: int,
    changed: int,
    vertices_removed: int,
    errors: int,
    avg_time_ms: float | None = None,
    min_time_ms: float | None = None,
    max_time_ms: float | None = None,
) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file
        file_size: Human-readable file size string
        total_time_s: Total processing time in seconds
        processed: Number of polylines processed
        changed: Number of polylines changed
        vertices_removed: Total vertices removed
        errors: Number of errors encountered
        avg_time_ms: Average processing time per polyline in milliseconds
        min_time_ms: Minimum processing time per polyline in milliseconds
        max_time_ms: Maximum processing time per polyline in milliseconds
    """
    time_str = _format_time(total_time_s)

    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    line = Text("  ")
    line.append(output_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)

    error_style = "red" if errors > 0 else "green"
    console.print(
        f"  {processed} polylines {SYM_DOT} {changed} changed {SYM_DOT} "
        f"{vertices_removed} vertices removed {SYM_DOT} "
        f"[{error_style}]{errors} errors[/{error_style}]"
    )

    if avg_time_ms is not None:
        timing_str = f"{avg_time_ms:.2f}ms avg"
        if min_time_ms is not None and max_time_ms is not None:
            timing_str += f" ({min_time_ms:.2f}–{max_time_ms:.2f}ms range)"
        console.print(f"  {timing_str}")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_cancellation_notice() -> None:
    """Print cancellation acknowledgment."""
    console.print(f"\n{SYM_DOT} Cancelling... waiting for in-progress polylines")


def print_cancellation_summary(processed: int, cancelled: int) -> None:
    """Print cancellation summary.

    Args:
        processed: Number of polylines processed before cancellation
        cancelled: Number of pending tasks that were cancelled
    """
    console.print(f"\n{SYM_DOT} [bold]Cancelled[/bold]")
    console.print(f"  {processed} polylines completed {SYM_DOT} {cancelled} tasks cancelled")
    console.print("  No output file created")


def _fmt(point: Point) -> str:
    return f"({point.x:.4f}, {point.y:.4f})"


def print_vertex_table(
    handle: str, closed: bool, rows: Sequence[tuple[int, Point, float]]
) -> None:
    """Print the vertex listing of one polyline.

    Args:
        handle: Entity handle
        closed: Whether the polyline is closed
        rows: (index, point, bulge) per vertex
    """
    table = Table(title=f"Polyline {handle}{' (closed)' if closed else ''}", title_justify="left")
    table.add_column("#", justify="right")
    table.add_column("X", justify="right")
    table.add_column("Y", justify="right")
    table.add_column("Bulge", justify="right")
    for index, point, bulge in rows:
        table.add_row(str(index), f"{point.x:.4f}", f"{point.y:.4f}", f"{bulge:.6f}")
    console.print(table)


def print_extents(bounds: tuple[float, float, float, float] | None) -> None:
    """Print a bounding box, or a notice when there is nothing to measure."""
    if bounds is None:
        console.print("  No curves found")
        return
    min_x, min_y, max_x, max_y = bounds
    console.print(f"  Min  ({min_x:.4f}, {min_y:.4f})")
    console.print(f"  Max  ({max_x:.4f}, {max_y:.4f})")
    console.print(f"  Size {max_x - min_x:.4f} {SYM_DOT} {max_y - min_y:.4f}")


def print_self_intersections(found: dict[str, list[IntersectionPoint]], scanned: int) -> None:
    """Print the result of a self-intersection scan.

    Args:
        found: Mapping from handle to crossing points
        scanned: Number of polylines scanned
    """
    style = "red" if found else "green"
    console.print(f"  [{style}]{len(found)}[/{style}] of {scanned} polylines intersect themselves")
    for handle, hits in found.items():
        points = ", ".join(_fmt(hit.point) for hit in hits)
        console.print(f"  {handle}: {points}")


def print_landing(start: Point, end: Point, distance: float, target: str) -> None:
    """Print a landing connector."""
    console.print(f"  {_fmt(start)} → {_fmt(end)} {SYM_DOT} {distance:.4f} to {target}")
