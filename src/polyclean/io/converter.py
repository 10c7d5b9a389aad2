"""Converters between ezdxf entities and domain models.

This module handles the conversion between DXF entities (LWPOLYLINE,
LINE, ARC) and our domain models (Polyline, LineSegment, ArcSegment).
"""

import math
from typing import Any

from ezdxf.entities import Arc, DXFGraphic, Line, LWPolyline
from ezdxf.math import Vec3

from polyclean.domain import (
    ArcSegment,
    Curve,
    CurveMetadata,
    LineSegment,
    Point,
    Polyline,
    Vertex,
)

# Entity types the reader turns into curves
SUPPORTED_TYPES = ("LWPOLYLINE", "LINE", "ARC")


# Group code that opens each application's block of extended data
XDATA_APPID = 1001


def _xdata(entity: DXFGraphic) -> tuple[tuple[int, Any], ...]:
    """Extended data of every registered application as flat pairs.

    Each application's block starts with a (1001, appid) pair, the same
    layout as in a DXF file. Point values become plain tuples.
    """
    if entity.doc is None:
        return ()
    pairs: list[tuple[int, Any]] = []
    for appid in entity.doc.appids:
        name = appid.dxf.name
        if not entity.has_xdata(name):
            continue
        pairs.append((XDATA_APPID, name))
        for tag in entity.get_xdata(name):
            value = tuple(tag.value) if isinstance(tag.value, Vec3) else tag.value
            pairs.append((tag.code, value))
    return tuple(pairs)


def xdata_blocks(xdata: tuple[tuple[int, Any], ...]) -> list[tuple[str, list[tuple[int, Any]]]]:
    """Group flat extended data pairs by application.

    Pairs before the first (1001, appid) marker belong to no application
    and are dropped.
    """
    blocks: list[tuple[str, list[tuple[int, Any]]]] = []
    for code, value in xdata:
        if code == XDATA_APPID:
            blocks.append((str(value), []))
        elif blocks:
            blocks[-1][1].append((code, value))
    return blocks


def _metadata(entity: DXFGraphic) -> CurveMetadata:
    constant_width = None
    if entity.dxftype() == "LWPOLYLINE":
        width = entity.dxf.get("const_width", 0.0)
        constant_width = width if width else None
    return CurveMetadata(
        layer=entity.dxf.get("layer", "0"),
        constant_width=constant_width,
        xdata=_xdata(entity),
        handle=entity.dxf.handle,
    )


def lwpolyline_to_domain(entity: LWPolyline) -> Polyline:
    """Convert an LWPOLYLINE entity to a Polyline.

    Per-vertex widths of 0 are read as "no override".

    Args:
        entity: ezdxf LWPOLYLINE entity

    Returns:
        Polyline with layer, constant width and handle in its metadata
    """
    vertices = []
    for x, y, start_width, end_width, bulge in entity.get_points(format="xyseb"):
        vertices.append(
            Vertex(
                Point(float(x), float(y)),
                float(bulge),
                float(start_width) if start_width else None,
                float(end_width) if end_width else None,
            )
        )
    return Polyline(tuple(vertices), bool(entity.closed), _metadata(entity))


def line_to_domain(entity: Line) -> LineSegment:
    """Convert a LINE entity to a LineSegment (z is dropped)."""
    start = entity.dxf.start
    end = entity.dxf.end
    return LineSegment(Point(start.x, start.y), Point(end.x, end.y))


def arc_to_domain(entity: Arc) -> ArcSegment:
    """Convert an ARC entity to a counter-clockwise ArcSegment.

    DXF arcs always run counter-clockwise from start_angle to end_angle
    (degrees), so the end angle is unwrapped to lie above the start.
    """
    center = entity.dxf.center
    start = math.radians(entity.dxf.start_angle)
    end = math.radians(entity.dxf.end_angle)
    while end <= start:
        end += 2.0 * math.pi
    return ArcSegment(Point(center.x, center.y), float(entity.dxf.radius), start, end)


def entity_to_domain(entity: DXFGraphic) -> Curve | None:
    """Convert any supported entity, or return None for other types."""
    kind = entity.dxftype()
    if kind == "LWPOLYLINE":
        return lwpolyline_to_domain(entity)
    if kind == "LINE":
        return line_to_domain(entity)
    if kind == "ARC":
        return arc_to_domain(entity)
    return None


def polyline_to_points(poly: Polyline) -> list[tuple[float, float, float, float, float]]:
    """Vertex rows in ezdxf "xyseb" format."""
    return [
        (
            v.point.x,
            v.point.y,
            v.start_width or 0.0,
            v.end_width or 0.0,
            v.bulge,
        )
        for v in poly.vertices
    ]


def polyline_dxfattribs(poly: Polyline, layer: str | None = None) -> dict[str, Any]:
    """DXF attributes for a new LWPOLYLINE carrying the polyline's metadata."""
    attribs: dict[str, Any] = {"layer": layer or poly.metadata.layer}
    if poly.metadata.constant_width is not None:
        attribs["const_width"] = poly.metadata.constant_width
    return attribs
