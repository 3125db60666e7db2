"""
Map Document Loader
===================

Reads TMX documents written by the emitter back into numpy layers, object
records and a per-level PuzzleTable.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import xml.etree.ElementTree as ET

import numpy as np

from arena_riddles.core.definitions import TILE_SIZE, ObjectType
from arena_riddles.data.puzzle_table import PuzzleTable

logger = logging.getLogger(__name__)


@dataclass
class MapObject:
    id: int
    name: str
    x: float
    y: float
    width: float
    height: float
    properties: Dict[str, Any] = field(default_factory=dict)

    @property
    def type(self) -> Optional[str]:
        return self.properties.get('type')

    @property
    def tile_x(self) -> int:
        return int(self.x) // TILE_SIZE

    @property
    def tile_y(self) -> int:
        return int(self.y) // TILE_SIZE


@dataclass
class LoadedMap:
    width: int
    height: int
    tile_width: int
    tile_height: int
    attributes: Dict[str, str]
    tileset_sources: List[str]
    layers: Dict[str, np.ndarray]
    objects: List[MapObject]
    puzzles: PuzzleTable

    def objects_of_type(self, object_type: Union[str, ObjectType]) -> List[MapObject]:
        value = object_type.value if isinstance(object_type, ObjectType) else object_type
        return [o for o in self.objects if o.type == value]


def _convert(value: str, type_name: Optional[str]) -> Any:
    if type_name == 'bool':
        return value == 'true'
    if type_name == 'int':
        return int(value)
    if type_name == 'float':
        return float(value)
    return value


def parse_csv_layer(text: str, width: int, height: int, name: str = '') -> np.ndarray:
    """
    Raises:
        ValueError: if a row other than the last lacks its trailing
            separator, or the cell count is not width * height.
    """
    rows = [line.strip() for line in (text or '').splitlines() if line.strip()]
    for i, row in enumerate(rows[:-1]):
        if not row.endswith(','):
            raise ValueError(f"Layer '{name}' row {i} is missing its trailing separator")
    cells = [c.strip() for row in rows for c in row.split(',')]
    cells = [c for c in cells if c]
    if len(cells) != width * height:
        raise ValueError(
            f"Layer '{name}' has {len(cells)} cells, expected {width}x{height}={width * height}"
        )
    return np.array([int(c) for c in cells], dtype=np.int32).reshape(height, width)


def parse_map(text: str) -> LoadedMap:
    """
    Raises:
        ValueError: for malformed XML, a non-map root or a bad CSV layer.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ValueError(f"Malformed map document: {e}") from e
    if root.tag != 'map':
        raise ValueError(f"Root element is <{root.tag}>, expected <map>")
    width = int(root.get('width'))
    height = int(root.get('height'))

    layers: Dict[str, np.ndarray] = {}
    for layer in root.findall('layer'):
        data = layer.find('data')
        if data is None or data.get('encoding') != 'csv':
            raise ValueError(f"Layer '{layer.get('name')}' is not CSV encoded")
        layers[layer.get('name')] = parse_csv_layer(
            data.text, int(layer.get('width')), int(layer.get('height')), layer.get('name'))

    objects: List[MapObject] = []
    for group in root.findall('objectgroup'):
        for node in group.findall('object'):
            props = {}
            for prop in node.findall('properties/property'):
                props[prop.get('name')] = _convert(prop.get('value', ''), prop.get('type'))
            objects.append(MapObject(
                id=int(node.get('id')),
                name=node.get('name', ''),
                x=float(node.get('x', 0)),
                y=float(node.get('y', 0)),
                width=float(node.get('width', 0)),
                height=float(node.get('height', 0)),
                properties=props,
            ))

    puzzle_doors = [o.properties for o in objects if o.type == ObjectType.PUZZLE_DOOR.value]
    loaded = LoadedMap(
        width=width,
        height=height,
        tile_width=int(root.get('tilewidth')),
        tile_height=int(root.get('tileheight')),
        attributes=dict(root.attrib),
        tileset_sources=[t.get('source') for t in root.findall('tileset')],
        layers=layers,
        objects=objects,
        puzzles=PuzzleTable.from_properties(puzzle_doors),
    )
    logger.debug(f"Parsed map {width}x{height}: {len(layers)} layers, {len(objects)} objects, "
                 f"{len(loaded.puzzles)} puzzles")
    return loaded


def load_map(path: Union[str, Path]) -> LoadedMap:
    return parse_map(Path(path).read_text(encoding='utf-8'))
