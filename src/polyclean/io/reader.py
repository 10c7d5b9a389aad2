"""Drawing reader for loading DXF files.

This module provides the DxfReader class for loading drawings and
extracting curve entities into domain models.
"""

from collections.abc import Iterator
from pathlib import Path

import ezdxf
from ezdxf.document import Drawing
from ezdxf.entities import DXFGraphic

from polyclean.domain import Polyline, SelectionItem
from polyclean.exceptions import DocumentLoadError
from polyclean.io.converter import SUPPORTED_TYPES, entity_to_domain


class DxfReader:
    """Loads DXF drawings and extracts curve entities.

    The DxfReader provides a high-level interface for loading drawings
    and converting ezdxf entities to domain models.

    Example:
        reader = DxfReader(Path("drawing.dxf"))
        reader.load()
        for item in reader.iter_items():
            print(item.handle, item.layer)
    """

    def __init__(self, path: Path) -> None:
        """Initialize the drawing reader.

        Args:
            path: Path to the DXF file
        """
        self._path = path
        self._doc: Drawing | None = None

    def load(self) -> None:
        """Load the drawing file.

        Raises:
            FileNotFoundError: If the file does not exist
            DocumentLoadError: If the file is not a readable DXF drawing
        """
        if not self._path.exists():
            raise FileNotFoundError(f"Drawing file not found: {self._path}")

        try:
            self._doc = ezdxf.readfile(str(self._path))
        except (OSError, ezdxf.DXFStructureError) as e:
            raise DocumentLoadError(str(self._path), str(e)) from e

    @property
    def document(self) -> Drawing:
        """The loaded ezdxf document.

        Raises:
            RuntimeError: If the drawing has not been loaded yet
        """
        if self._doc is None:
            raise RuntimeError("Drawing not loaded. Call load() first.")
        return self._doc

    @property
    def dxf_version(self) -> str:
        return self.document.dxfversion

    @property
    def entity_count(self) -> int:
        """Number of supported curve entities in model space."""
        return len(self.document.modelspace().query(" ".join(SUPPORTED_TYPES)))

    def _is_visible(self, entity: DXFGraphic) -> bool:
        if entity.dxf.get("invisible", 0):
            return False
        layer_name = entity.dxf.get("layer", "0")
        layers = self.document.layers
        if not layers.has_entry(layer_name):
            return True
        layer = layers.get(layer_name)
        return not (layer.is_off() or layer.is_frozen())

    def iter_items(self, types: tuple[str, ...] = SUPPORTED_TYPES) -> Iterator[SelectionItem]:
        """Iterate over curve entities in model space, in drawing order.

        Args:
            types: DXF entity types to include

        Yields:
            SelectionItem per entity
        """
        for entity in self.document.modelspace().query(" ".join(types)):
            curve = entity_to_domain(entity)
            if curve is None:
                continue
            yield SelectionItem(
                handle=entity.dxf.handle,
                curve=curve,
                layer=entity.dxf.get("layer", "0"),
                visible=self._is_visible(entity),
            )

    def polylines(self, visible_only: bool = False) -> list[Polyline]:
        """All LWPOLYLINE entities as polylines."""
        return [
            item.curve
            for item in self.iter_items(("LWPOLYLINE",))
            if isinstance(item.curve, Polyline) and (item.visible or not visible_only)
        ]

    def close(self) -> None:
        """Release the loaded document."""
        self._doc = None

    def __enter__(self) -> "DxfReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
