"""
Map Document Emitter
====================

Builds Tiled TMX documents (XML) from tile grids and placed objects.

The writer is a small line builder rather than a DOM serializer so the
output layout is exactly the one the downstream engine was tuned against:
one-space indentation per level, CSV layer data with one row per line and
properties in insertion order. Everything is deterministic; the same
inputs always give byte-identical documents.

Usage:
    writer = TmxMapWriter(width, height)
    writer.start_map()
    writer.tileset(TILESET_SOURCE)
    writer.layer_csv(1, FLOOR_LAYER, canvas.floor)
    writer.object_group_open(3, OBJECT_GROUP)
    writer.add_object(player)
    writer.object_group_close()
    writer.end_map()
    text = writer.build()
"""

import logging
from typing import List, Optional

import numpy as np

from arena_riddles.core.definitions import (
    DEFAULT_TILED_VERSION,
    MAP_FORMAT_VERSION,
    OBJECT_GROUP,
    TILE_SIZE,
)
from arena_riddles.core.models import PlacedObject

logger = logging.getLogger(__name__)


def escape_xml(text: str) -> str:
    return (
        str(text)
        .replace('&', '&amp;')
        .replace('"', '&quot;')
        .replace('<', '&lt;')
        .replace('>', '&gt;')
    )


def format_float(value: float) -> str:
    """Pixel coordinates always carry a decimal point (16 -> '16.0')."""
    return repr(float(value))


def grid_to_csv(grid: np.ndarray) -> str:
    """Comma after every value except the last, one row per line, negatives as 0."""
    clipped = np.maximum(np.asarray(grid), 0)
    rows = [','.join(str(int(v)) for v in row) for row in clipped]
    return ',\n'.join(rows)


class TmxMapWriter:
    """Accumulates the lines of one TMX document."""

    def __init__(self, width: int, height: int, tile_size: int = TILE_SIZE,
                 tiled_version: str = DEFAULT_TILED_VERSION,
                 next_layer_id: Optional[int] = None,
                 next_object_id: Optional[int] = None):
        self.width = width
        self.height = height
        self.tile_size = tile_size
        self.tiled_version = tiled_version
        self.next_layer_id = next_layer_id
        self.next_object_id = next_object_id
        self._lines: List[str] = []
        self._object_id = 1
        self._objects_written = 0

    def start_map(self, first_object_id: int = 1) -> 'TmxMapWriter':
        self._object_id = first_object_id
        attrs = (
            f'version="{MAP_FORMAT_VERSION}" tiledversion="{escape_xml(self.tiled_version)}" '
            f'orientation="orthogonal" renderorder="right-down" '
            f'width="{self.width}" height="{self.height}" '
            f'tilewidth="{self.tile_size}" tileheight="{self.tile_size}" infinite="0"'
        )
        if self.next_layer_id is not None:
            attrs += f' nextlayerid="{self.next_layer_id}"'
        if self.next_object_id is not None:
            attrs += f' nextobjectid="{self.next_object_id}"'
        self._lines.append('<?xml version="1.0" encoding="UTF-8"?>')
        self._lines.append(f'<map {attrs}>')
        return self

    def tileset(self, source: str, first_gid: int = 1) -> 'TmxMapWriter':
        self._lines.append(f' <tileset firstgid="{first_gid}" source="{escape_xml(source)}"/>')
        return self

    def layer_csv(self, layer_id: int, name: str, grid: np.ndarray) -> 'TmxMapWriter':
        """
        Raises:
            ValueError: if the grid shape is not (height, width).
        """
        shape = np.shape(grid)
        if shape != (self.height, self.width):
            raise ValueError(
                f"Layer '{name}' has shape {shape}, map is {self.height}x{self.width} (rows x cols)"
            )
        self._lines.append(
            f' <layer id="{layer_id}" name="{escape_xml(name)}" '
            f'width="{self.width}" height="{self.height}">'
        )
        self._lines.append('  <data encoding="csv">')
        self._lines.append(grid_to_csv(grid))
        self._lines.append('  </data>')
        self._lines.append(' </layer>')
        return self

    def object_group_open(self, group_id: int, name: str) -> 'TmxMapWriter':
        self._lines.append(f' <objectgroup id="{group_id}" name="{escape_xml(name)}">')
        return self

    def object_group_close(self) -> 'TmxMapWriter':
        self._lines.append(' </objectgroup>')
        return self

    def add_object(self, obj: PlacedObject) -> int:
        """
        Append one object and return the id assigned to it.

        Raises:
            ValueError: if the object has no ``type`` property.
        """
        if obj.type is None:
            raise ValueError(f"Object '{obj.name}' has no 'type' property")
        object_id = self._object_id
        self._object_id += 1
        self._objects_written += 1

        self._lines.append(
            f'  <object id="{object_id}" name="{escape_xml(obj.name)}" '
            f'x="{format_float(obj.x)}" y="{format_float(obj.y)}" '
            f'width="{format_float(obj.width)}" height="{format_float(obj.height)}">'
        )
        self._lines.append('   <properties>')
        for prop in obj.properties:
            type_attr = f' type="{prop.type}"' if prop.type else ''
            self._lines.append(
                f'    <property name="{escape_xml(prop.name)}"{type_attr} '
                f'value="{escape_xml(prop.value)}"/>'
            )
        self._lines.append('   </properties>')
        self._lines.append('  </object>')
        return object_id

    def end_map(self) -> 'TmxMapWriter':
        self._lines.append('</map>')
        return self

    def build(self) -> str:
        logger.debug(f"Built TMX {self.width}x{self.height} with {self._objects_written} objects")
        return '\n'.join(self._lines) + '\n'


def render_map(canvas, objects, tileset_source: str,
               tiled_version: str = DEFAULT_TILED_VERSION,
               next_layer_id: Optional[int] = None,
               next_object_id: Optional[int] = None,
               first_object_id: int = 1) -> str:
    """
    Standard document layout: tileset, one CSV layer per canvas layer
    (floor, walls, then symbols when present) and a single object group.
    """
    writer = TmxMapWriter(canvas.width, canvas.height, tiled_version=tiled_version,
                          next_layer_id=next_layer_id, next_object_id=next_object_id)
    writer.start_map(first_object_id)
    writer.tileset(tileset_source)
    layer_id = 1
    for name, grid in canvas.layers().items():
        writer.layer_csv(layer_id, name, grid)
        layer_id += 1
    writer.object_group_open(layer_id, OBJECT_GROUP)
    for obj in objects:
        writer.add_object(obj)
    writer.object_group_close()
    writer.end_map()
    return writer.build()
