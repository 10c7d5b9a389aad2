"""Exception hierarchy for Polyclean."""


class PolycleanError(Exception):
    """Base exception for all Polyclean errors."""

    pass


class DocumentError(PolycleanError):
    """Errors related to drawing loading or saving."""

    pass


class DocumentLoadError(DocumentError):
    """Error loading a drawing file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load drawing '{path}': {reason}")


class DocumentSaveError(DocumentError):
    """Error saving a drawing file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save drawing '{path}': {reason}")


class EntityNotFoundError(DocumentError):
    """Requested entity handle not found in drawing."""

    def __init__(self, handle: str) -> None:
        self.handle = handle
        super().__init__(f"Entity '{handle}' not found in drawing")


class GeometryError(PolycleanError):
    """Errors in geometric calculations."""

    pass


class ParameterError(GeometryError, ValueError):
    """A curve parameter lies outside the curve's valid range.

    Split and evaluation never clamp parameters, so an out-of-range value
    is always reported instead of being moved onto the curve.
    """

    def __init__(self, param: float, lower: float, upper: float) -> None:
        self.param = param
        self.lower = lower
        self.upper = upper
        super().__init__(
            f"Parameter {param} outside valid range [{lower}, {upper}]"
        )


class PointNotOnCurveError(GeometryError):
    """A point expected on a curve lies too far away from it."""

    def __init__(self, distance: float, tolerance: float) -> None:
        self.distance = distance
        self.tolerance = tolerance
        super().__init__(
            f"Point is {distance:g} away from curve (tolerance {tolerance:g})"
        )


class ProcessingCancelledError(PolycleanError):
    """Processing was cancelled by user."""

    def __init__(self, processed_count: int, pending_count: int) -> None:
        self.processed_count = processed_count
        self.pending_count = pending_count
        super().__init__(
            f"Processing cancelled: {processed_count} completed, {pending_count} pending"
        )
