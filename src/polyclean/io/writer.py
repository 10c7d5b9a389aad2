"""Drawing writer for saving cleaned drawings.

This module provides the DxfWriter class, which replaces source entities
with cleaned polylines and saves with the "-Cleaned" naming convention.
"""

from collections.abc import Iterable
from pathlib import Path

import ezdxf
from ezdxf.document import Drawing

from polyclean.domain import Polyline
from polyclean.exceptions import DocumentSaveError, EntityNotFoundError
from polyclean.io.converter import polyline_dxfattribs, polyline_to_points, xdata_blocks


class DxfWriter:
    """Writes cleaned polylines back into a drawing.

    Source entities are retired (erased) and the resulting polylines are
    added as new LWPOLYLINE entities, so each batch is applied as one
    replace step.

    Example:
        writer = DxfWriter(reader.document, Path("drawing-Cleaned.dxf"))
        writer.retire(result.retired)
        writer.add(result.polylines)
        writer.save()
    """

    def __init__(self, doc: Drawing, output_path: Path) -> None:
        """Initialize the drawing writer.

        Args:
            doc: The ezdxf document to modify
            output_path: Path where the drawing will be saved
        """
        self._doc = doc
        self._output_path = output_path

    @classmethod
    def new(cls, output_path: Path) -> "DxfWriter":
        """Writer for a new, empty R2010 drawing."""
        return cls(ezdxf.new(dxfversion="R2010", setup=False), output_path)

    @property
    def document(self) -> Drawing:
        return self._doc

    def retire(self, handles: Iterable[str]) -> int:
        """Erase source entities by handle.

        Returns:
            Number of entities erased

        Raises:
            EntityNotFoundError: If a handle is not in the drawing
        """
        msp = self._doc.modelspace()
        count = 0
        for handle in handles:
            entity = self._doc.entitydb.get(handle)
            if entity is None:
                raise EntityNotFoundError(handle)
            msp.delete_entity(entity)
            count += 1
        return count

    def add(self, polylines: Iterable[Polyline], layer: str | None = None) -> list[str]:
        """Add polylines as LWPOLYLINE entities.

        Extended data in the metadata is written back, registering any
        application name the drawing does not know yet.

        Args:
            polylines: Polylines to add
            layer: Override layer (defaults to each polyline's own layer)

        Returns:
            Handles of the new entities
        """
        msp = self._doc.modelspace()
        handles: list[str] = []
        for poly in polylines:
            if not poly.vertices:
                continue
            entity = msp.add_lwpolyline(
                polyline_to_points(poly),
                format="xyseb",
                close=poly.closed,
                dxfattribs=polyline_dxfattribs(poly, layer),
            )
            for appid, tags in xdata_blocks(poly.metadata.xdata):
                if not self._doc.appids.has_entry(appid):
                    self._doc.appids.new(appid)
                entity.set_xdata(appid, tags)
            handles.append(entity.dxf.handle)
        return handles

    def save(self) -> None:
        """Save the drawing to the output path.

        Raises:
            DocumentSaveError: If the file cannot be written
        """
        try:
            self._doc.saveas(str(self._output_path))
        except OSError as e:
            raise DocumentSaveError(str(self._output_path), str(e)) from e

    @staticmethod
    def get_cleaned_path(input_path: Path) -> Path:
        """Generate output path with the cleaned naming convention.

        Converts: drawing.dxf -> drawing-Cleaned.dxf

        Args:
            input_path: Original drawing path

        Returns:
            Path with -Cleaned suffix before extension
        """
        return input_path.parent / f"{input_path.stem}-Cleaned{input_path.suffix}"
