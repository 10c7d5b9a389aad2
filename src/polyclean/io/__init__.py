"""Drawing I/O layer for polyclean.

This module handles reading and writing DXF drawings using ezdxf.
It provides a clean abstraction layer between ezdxf and the
domain models.

Key responsibilities:
- Load DXF drawings
- Convert LWPOLYLINE, LINE and ARC entities to domain models
- Replace source entities with cleaned polylines
- Write drawings with the "-Cleaned" naming convention

Key classes:
- DxfReader: Load drawings and extract curves
- DxfWriter: Replace entities and save drawings
"""

from polyclean.io.reader import DxfReader
from polyclean.io.writer import DxfWriter

__all__ = [
    "DxfReader",
    "DxfWriter",
]
