"""Selection items handed to the engine by a host document.

The engine never filters by metadata itself; callers drop hidden or frozen
items before invoking simplification or snapping.
"""

from dataclasses import dataclass

from polyclean.domain.polyline import Curve


@dataclass(frozen=True)
class SelectionItem:
    """A curve selected from a drawing.

    Attributes:
        handle: Handle of the source entity
        curve: The curve value (Polyline, LineSegment or ArcSegment)
        layer: Layer the entity lives on
        visible: False when the entity or its layer is hidden, off or frozen
    """

    handle: str
    curve: Curve
    layer: str = "0"
    visible: bool = True
