"""Polyclean - Clean up and repair 2D polylines made of lines and arcs.

Polyclean is a toolbox of curve-cleaning and topology algorithms for polylines
whose segments are straight lines or circular arcs (bulge encoding, as used by
DXF LWPOLYLINE entities). It removes duplicate and redundant vertices, brings
polylines into a common direction, detects self-intersections, breaks curves
at their mutual intersections and snaps dangling endpoints onto neighbours.

Example:
    $ polyclean dedupe drawing.dxf

This will create drawing-Cleaned.dxf with duplicate vertices removed from
every polyline.
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

__all__ = ["__author__", "__version__"]
