"""Batch processing orchestration for the cleaning commands.

This module runs cleaning operations over every polyline of a drawing,
serially or in worker processes, and turns the results into one
erase-and-insert step for the drawing.

Key components:
- process_polyline: Top-level picklable function for parallel execution
- apply_operation: Dispatch of a per-polyline operation by name
- BatchResult: Polylines to insert and handles to erase
- CurveProcessor: Main orchestrator class for drawing processing
"""

import time
import traceback
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from polyclean.config import PolycleanSettings
from polyclean.core.curve import close_with_vertex, fit_arcs
from polyclean.core.direction import Direction, set_direction
from polyclean.core.intersect import detect_self_intersections, split_at_intersections
from polyclean.core.simplify import (
    reduce_points,
    remove_colinear_points,
    remove_duplicate_vertices,
)
from polyclean.core.snap import trim_extend
from polyclean.domain import IntersectionPoint, Polyline, SelectionItem
from polyclean.io import DxfReader, DxfWriter
from polyclean.utils import ProcessingLogger, ProcessingStats, configure_logging

ProgressCallback = Callable[[int, int, str, bool], None]

# Operations applied to each polyline independently
PER_POLYLINE_OPERATIONS = ("dedupe", "reduce", "colinear", "fit-arcs", "direction", "close")

# Operations that look at the whole set at once
SET_OPERATIONS = ("purge", "split", "trim-extend")


@dataclass
class BatchResult:
    """Outcome of one batch: what to insert and what to erase.

    Attributes:
        polylines: New polylines to add to the drawing
        retired: Handles of source entities to erase
    """

    polylines: list[Polyline] = field(default_factory=list)
    retired: list[str] = field(default_factory=list)


def apply_operation(
    poly: Polyline, operation: str, options: dict[str, Any]
) -> tuple[Polyline, int, bool]:
    """Apply a per-polyline operation.

    Args:
        poly: Polyline to process
        operation: One of PER_POLYLINE_OPERATIONS
        options: Operation parameters (tolerance, epsilon, iterate,
            angle_epsilon, segments_per_arc, degrees_per_chord, direction)

    Returns:
        Tuple of (polyline, vertices_removed, changed)

    Raises:
        ValueError: If the operation is unknown
    """
    if operation == "dedupe":
        result, removed = remove_duplicate_vertices(poly, options.get("tolerance", 0.0))
        return result, removed, removed > 0
    if operation == "reduce":
        result, removed = reduce_points(
            poly, options.get("epsilon", 1.0), options.get("iterate", False)
        )
        return result, removed, removed > 0
    if operation == "colinear":
        result, removed = remove_colinear_points(poly, options.get("angle_epsilon", 1e-6))
        return result, removed, removed > 0
    if operation == "fit-arcs":
        result = fit_arcs(
            poly,
            options.get("segments_per_arc", 0),
            options.get("degrees_per_chord", 10.0),
        )
        return result, 0, result != poly
    if operation == "direction":
        result, changed = set_direction(poly, Direction(options.get("direction", 3)))
        return result, 0, changed
    if operation == "close":
        result, changed = close_with_vertex(poly)
        return result, 0, changed
    raise ValueError(f"Unknown operation: {operation}")


def process_polyline(
    poly_dict: dict[str, Any],
    operation: str,
    options: dict[str, Any],
) -> dict[str, Any]:
    """Process a single polyline.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.
    Deserializes the polyline, applies the operation, and returns the result.

    Args:
        poly_dict: Serialized polyline (from Polyline.to_dict())
        operation: Operation name
        options: Operation parameters

    Returns:
        Dictionary containing either:
        - Success: {"polyline": dict, "removed": int, "changed": bool, "duration_ms": float}
        - Error: {"error": str, "handle": str, "traceback": str, "duration_ms": float}
    """
    start_time = time.time()

    try:
        poly = Polyline.from_dict(poly_dict)
        result, removed, changed = apply_operation(poly, operation, options)

        duration_ms = (time.time() - start_time) * 1000
        return {
            "polyline": result.to_dict(),
            "removed": removed,
            "changed": changed,
            "duration_ms": duration_ms,
        }

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        return {
            "error": str(e),
            "handle": poly_dict.get("metadata", {}).get("handle") or "unknown",
            "traceback": traceback.format_exc(),
            "duration_ms": duration_ms,
        }


def _handle_of(poly: Polyline, index: int) -> str:
    return poly.metadata.handle or f"#{index}"


class CurveProcessor:
    """Orchestrates batch cleaning of drawing polylines.

    Manages the complete workflow:
    1. Load the drawing
    2. Collect the polylines to process
    3. Run the operation (in worker processes for per-polyline operations)
    4. Collect results and update statistics
    5. Erase changed entities, insert results and save

    Example:
        settings = PolycleanSettings()
        processor = CurveProcessor(settings)
        stats = processor.process(
            input_path=Path("drawing.dxf"),
            operation="dedupe",
            options={"tolerance": 0.01},
        )
    """

    def __init__(self, config: PolycleanSettings, quiet: bool = False) -> None:
        """Initialize the processor with configuration.

        Args:
            config: Polyclean settings containing processing and logging config
            quiet: Suppress console log output except errors
        """
        self.config = config
        self.logger = configure_logging(
            log_file=config.logging.log_file,
            console_level=config.logging.log_level,
            file_level=config.logging.file_log_level,
            quiet=quiet,
        )
        self.processing_logger = ProcessingLogger(self.logger)

    def process(
        self,
        input_path: Path,
        operation: str,
        options: dict[str, Any] | None = None,
        output_path: Path | None = None,
        max_workers: int | None = None,
        visible_only: bool = False,
        progress_callback: ProgressCallback | None = None,
    ) -> ProcessingStats:
        """Process every polyline of a drawing and save the result.

        Args:
            input_path: Path to the input DXF drawing
            operation: Operation name (see PER_POLYLINE_OPERATIONS, SET_OPERATIONS)
            options: Operation parameters
            output_path: Path for the output drawing (auto-generated if None)
            max_workers: Maximum worker processes (None = config default)
            visible_only: Only process polylines on visible entities and layers
            progress_callback: Optional callback(completed, total, handle, success)

        Returns:
            ProcessingStats with counts, timing, and error details

        Raises:
            FileNotFoundError: If the drawing does not exist
            DocumentLoadError: If the drawing cannot be read
            DocumentSaveError: If the output cannot be written
            KeyboardInterrupt: If processing is cancelled by user
        """
        stats = ProcessingStats()
        stats.start_time = time.time()
        options = options or {}

        if max_workers is None:
            max_workers = self.config.processing.max_workers
        if output_path is None:
            output_path = DxfWriter.get_cleaned_path(input_path)

        self.logger.info(
            "Starting drawing processing",
            input=str(input_path),
            output=str(output_path),
            operation=operation,
            max_workers=max_workers,
        )

        reader = DxfReader(input_path)
        reader.load()

        try:
            polylines = [
                item.curve
                for item in reader.iter_items(("LWPOLYLINE",))
                if isinstance(item.curve, Polyline) and (item.visible or not visible_only)
            ]
            self.logger.info(
                "Drawing loaded",
                dxf_version=reader.dxf_version,
                polylines=len(polylines),
            )

            result = self.run(
                polylines,
                operation,
                options,
                stats=stats,
                max_workers=max_workers,
                progress_callback=progress_callback,
            )

            writer = DxfWriter(reader.document, output_path)
            writer.retire(result.retired)
            writer.add(result.polylines)
            writer.save()
            stats.curves_retired = len(result.retired)
            stats.curves_added = len(result.polylines)

            self.logger.info(
                "Drawing saved",
                output=str(output_path),
                retired=stats.curves_retired,
                added=stats.curves_added,
            )
        finally:
            reader.close()

        stats.end_time = time.time()

        self.logger.info(
            "Processing complete",
            processed=stats.processed_count,
            unchanged=stats.unchanged_count,
            errors=stats.error_count,
            vertices_removed=stats.vertices_removed,
            duration_seconds=round(stats.duration_seconds, 2),
        )

        return stats

    def run(
        self,
        polylines: Sequence[Polyline],
        operation: str,
        options: dict[str, Any] | None = None,
        stats: ProcessingStats | None = None,
        max_workers: int | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> BatchResult:
        """Run an operation over polylines without touching any drawing.

        Args:
            polylines: Polylines to process
            operation: Operation name
            options: Operation parameters
            stats: Statistics object to update (a fresh one if None)
            max_workers: Maximum worker processes (1 runs in-process)
            progress_callback: Optional callback(completed, total, handle, success)

        Returns:
            BatchResult with the polylines to insert and handles to retire

        Raises:
            ValueError: If the operation is unknown
        """
        options = options or {}
        stats = stats if stats is not None else ProcessingStats()

        if operation in PER_POLYLINE_OPERATIONS:
            if max_workers == 1:
                return self._run_serial(polylines, operation, options, stats, progress_callback)
            return self._run_parallel(
                polylines, operation, options, stats, max_workers, progress_callback
            )
        if operation == "purge":
            return self._purge(polylines, stats, progress_callback)
        if operation == "split":
            return self._split(polylines, stats, progress_callback)
        if operation == "trim-extend":
            return self._trim_extend(
                polylines, options.get("epsilon", 20.0), stats, progress_callback
            )
        raise ValueError(f"Unknown operation: {operation}")

    def _record(
        self,
        poly: Polyline,
        index: int,
        result: dict[str, Any],
        batch: BatchResult,
        stats: ProcessingStats,
    ) -> bool:
        """Fold one worker result into the batch and statistics."""
        handle = _handle_of(poly, index)

        if "error" in result:
            self.processing_logger.log_polyline_error(
                handle=handle,
                error=Exception(result["error"]),
                traceback=result.get("traceback"),
            )
            stats.error_count += 1
            stats.errors.append((handle, result["error"]))
            return False

        changed = result["changed"]
        removed = result["removed"]
        stats.processed_count += 1
        stats.vertices_removed += removed
        stats.timings_ms.append(result.get("duration_ms", 0.0))
        if changed:
            batch.polylines.append(Polyline.from_dict(result["polyline"]))
            if poly.metadata.handle:
                batch.retired.append(poly.metadata.handle)
        else:
            stats.unchanged_count += 1

        self.processing_logger.log_polyline_complete(
            handle=handle,
            changed=changed,
            vertices_removed=removed,
            duration_ms=result.get("duration_ms", 0.0),
        )
        return True

    def _run_serial(
        self,
        polylines: Sequence[Polyline],
        operation: str,
        options: dict[str, Any],
        stats: ProcessingStats,
        progress_callback: ProgressCallback | None,
    ) -> BatchResult:
        batch = BatchResult()
        total = len(polylines)
        for index, poly in enumerate(polylines):
            self.processing_logger.log_polyline_start(_handle_of(poly, index), operation)
            result = process_polyline(poly.to_dict(), operation, options)
            success = self._record(poly, index, result, batch, stats)
            if progress_callback is not None:
                progress_callback(index + 1, total, _handle_of(poly, index), success)
        return batch

    def _run_parallel(
        self,
        polylines: Sequence[Polyline],
        operation: str,
        options: dict[str, Any],
        stats: ProcessingStats,
        max_workers: int | None,
        progress_callback: ProgressCallback | None,
    ) -> BatchResult:
        """Process polylines in parallel using ProcessPoolExecutor.

        Results are folded back in input order so the output drawing does
        not depend on worker scheduling.
        """
        results: dict[int, dict[str, Any]] = {}
        total = len(polylines)
        completed = 0
        pending_futures: dict[Future[dict[str, Any]], int] = {}

        self.logger.info(
            "Starting parallel processing",
            polyline_count=total,
            max_workers=max_workers,
        )

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            for index, poly in enumerate(polylines):
                future = executor.submit(process_polyline, poly.to_dict(), operation, options)
                pending_futures[future] = index

            try:
                for future in as_completed(list(pending_futures)):
                    index = pending_futures.pop(future)
                    handle = _handle_of(polylines[index], index)

                    try:
                        result = future.result()
                    except Exception as e:
                        result = {
                            "error": str(e),
                            "handle": handle,
                            "traceback": traceback.format_exc(),
                        }
                    results[index] = result

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, handle, "error" not in result)

            except KeyboardInterrupt:
                self.logger.info("Cancellation requested by user")
                for f in pending_futures:
                    f.cancel()

                stats.was_cancelled = True
                stats.cancelled_count = len(pending_futures)

                executor.shutdown(wait=True, cancel_futures=True)
                raise

        batch = BatchResult()
        for index, poly in enumerate(polylines):
            self._record(poly, index, results[index], batch, stats)
        return batch

    def _purge(
        self,
        polylines: Sequence[Polyline],
        stats: ProcessingStats,
        progress_callback: ProgressCallback | None,
    ) -> BatchResult:
        """Retire polylines that have no extent."""
        batch = BatchResult()
        total = len(polylines)
        for index, poly in enumerate(polylines):
            stats.processed_count += 1
            if poly.is_zero_length():
                if poly.metadata.handle:
                    batch.retired.append(poly.metadata.handle)
                self.logger.debug("Zero-length polyline purged", handle=_handle_of(poly, index))
            else:
                stats.unchanged_count += 1
            if progress_callback is not None:
                progress_callback(index + 1, total, _handle_of(poly, index), True)
        return batch

    def _split(
        self,
        polylines: Sequence[Polyline],
        stats: ProcessingStats,
        progress_callback: ProgressCallback | None,
    ) -> BatchResult:
        """Split every polyline at its intersections with the others.

        The whole set is replaced: polylines without intersections come
        back as copies.
        """

        def report(completed: int, total: int, index: int, success: bool) -> None:
            stats.processed_count += 1
            if progress_callback is not None:
                progress_callback(completed, total, _handle_of(polylines[index], index), success)

        pieces = split_at_intersections(polylines, progress=report)
        retired = [poly.metadata.handle for poly in polylines if poly.metadata.handle]
        self.logger.info("Split complete", inputs=len(polylines), pieces=len(pieces))
        return BatchResult(polylines=pieces, retired=retired)

    def _trim_extend(
        self,
        polylines: Sequence[Polyline],
        epsilon: float,
        stats: ProcessingStats,
        progress_callback: ProgressCallback | None,
    ) -> BatchResult:
        """Snap polyline ends onto nearby curves of the same set."""

        def report(completed: int, total: int, index: int, success: bool) -> None:
            if progress_callback is not None:
                progress_callback(completed, total, _handle_of(polylines[index], index), success)

        snapped = trim_extend(polylines, epsilon, progress=report)
        batch = BatchResult()
        for index, (before, after) in enumerate(zip(polylines, snapped)):
            stats.processed_count += 1
            if after is before:
                stats.unchanged_count += 1
                continue
            batch.polylines.append(after)
            if before.metadata.handle:
                batch.retired.append(before.metadata.handle)
            self.logger.debug("Endpoint snapped", handle=_handle_of(before, index))
        return batch

    def detect(
        self,
        items: Sequence[SelectionItem],
        progress_callback: ProgressCallback | None = None,
    ) -> dict[str, list[IntersectionPoint]]:
        """Find self-intersecting polylines among selection items.

        Returns:
            Mapping from entity handle to crossing points
        """
        polylines = [item.curve for item in items if isinstance(item.curve, Polyline)]
        handles = [item.handle for item in items if isinstance(item.curve, Polyline)]

        def report(completed: int, total: int, index: int, success: bool) -> None:
            if progress_callback is not None:
                progress_callback(completed, total, handles[index], success)

        found = detect_self_intersections(polylines, progress=report)
        result: dict[str, list[IntersectionPoint]] = {}
        for index, hits in found.items():
            result[handles[index]] = hits
            self.processing_logger.log_self_intersection(
                handles[index], [hit.point.to_tuple() for hit in hits]
            )
        return result
