"""
Core Data Model
===============

Plain value types passed between the generation stages.

Every instance is created once per generation run. The only change an
entity ever sees is the coordinate shift applied after cropping, and that
shift produces a new instance (``translated``) instead of mutating.
"""

from dataclasses import dataclass, field, replace
from typing import Any, FrozenSet, List, Optional, Tuple

from arena_riddles.core.definitions import TILE_SIZE


@dataclass(frozen=True)
class Arena:
    """
    Rectangular room footprint on the canvas.

    ``origin``/``width``/``height`` describe the full footprint including the
    one-tile wall ring; walkable floor starts one tile inside.
    """
    id: str
    index: int
    grid_x: int
    grid_y: int
    origin_x: int
    origin_y: int
    width: int
    height: int

    @property
    def center_x(self) -> int:
        return self.origin_x + self.width // 2

    @property
    def center_y(self) -> int:
        return self.origin_y + self.height // 2

    @property
    def right(self) -> int:
        return self.origin_x + self.width - 1

    @property
    def bottom(self) -> int:
        return self.origin_y + self.height - 1

    def contains(self, x: int, y: int) -> bool:
        return self.origin_x <= x <= self.right and self.origin_y <= y <= self.bottom

    def interior_bounds(self, inset: int = 1) -> Tuple[int, int, int, int]:
        """(x_min, y_min, x_max, y_max) inclusive, ``inset`` tiles inside the footprint."""
        return (
            self.origin_x + inset,
            self.origin_y + inset,
            self.right - inset,
            self.bottom - inset,
        )

    def translated(self, dx: int, dy: int) -> 'Arena':
        return replace(self, origin_x=self.origin_x + dx, origin_y=self.origin_y + dy)


@dataclass(frozen=True)
class GateDescriptor:
    """
    One directional opening between two arenas.

    ``side`` names the corridor end the gate sits on (left/right/top/bottom),
    which is also the arena the gate belongs to. Puzzle-locked barriers have
    a ``group`` and no lane symbol because they span every lane.
    """
    source_arena_id: str
    target_arena_id: str
    x: int
    y: int
    width: int
    height: int
    lane_symbol: Optional[str]
    side: str
    group: Optional[str] = None

    @property
    def locked(self) -> bool:
        return self.group is not None

    @property
    def rect(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)

    def cells(self) -> List[Tuple[int, int]]:
        return [
            (self.x + dx, self.y + dy)
            for dy in range(self.height)
            for dx in range(self.width)
        ]

    def translated(self, dx: int, dy: int) -> 'GateDescriptor':
        return replace(self, x=self.x + dx, y=self.y + dy)


@dataclass(frozen=True)
class PuzzleNode:
    """Vertex of a puzzle graph embedded at a tile position."""
    id: str
    index: int
    embed_x: int
    embed_y: int
    neighbor_ids: FrozenSet[str] = frozenset()
    state: Any = None

    def translated(self, dx: int, dy: int) -> 'PuzzleNode':
        return replace(self, embed_x=self.embed_x + dx, embed_y=self.embed_y + dy)


@dataclass
class DifficultyResult:
    """Chosen starting configuration and its distance to a solved state."""
    start_state: Tuple
    min_moves: int
    presses: Tuple[bool, ...] = ()
    tier: str = 'search'


@dataclass(frozen=True)
class CropRegion:
    """Sub-rectangle kept by the cropper; ``translation`` maps old coordinates to new."""
    min_x: int
    min_y: int
    width: int
    height: int

    @property
    def translation(self) -> Tuple[int, int]:
        return (-self.min_x, -self.min_y)

    def apply(self, x: int, y: int) -> Tuple[int, int]:
        return (x - self.min_x, y - self.min_y)


@dataclass
class MapProperty:
    name: str
    value: str
    type: Optional[str] = None


@dataclass
class PlacedObject:
    """
    Entity handed to the document emitter.

    Position and size are in pixels. Properties keep insertion order so the
    emitted document is byte-stable.
    """
    name: str
    x: float
    y: float
    width: float
    height: float
    properties: List[MapProperty] = field(default_factory=list)

    @classmethod
    def at_tile(cls, name: str, tile_x: int, tile_y: int,
                width: float = TILE_SIZE, height: float = TILE_SIZE) -> 'PlacedObject':
        return cls(name, float(tile_x * TILE_SIZE), float(tile_y * TILE_SIZE),
                   float(width), float(height))

    def add(self, name: str, value: Any, type: Optional[str] = None) -> 'PlacedObject':
        if isinstance(value, bool):
            self.properties.append(MapProperty(name, 'true' if value else 'false', 'bool'))
        else:
            self.properties.append(MapProperty(name, str(value), type))
        return self

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        for prop in self.properties:
            if prop.name == name:
                return prop.value
        return default

    @property
    def type(self) -> Optional[str]:
        return self.get('type')


@dataclass
class GeneratedMap:
    """
    Everything one generation run produced. Coordinates are already
    translated into the cropped canvas.
    """
    variant: str
    seed: int
    document: str
    canvas: Any
    objects: List[PlacedObject]
    arenas: List[Arena] = field(default_factory=list)
    gates: List[GateDescriptor] = field(default_factory=list)
    puzzles: List[PuzzleNode] = field(default_factory=list)
    difficulty: Optional[DifficultyResult] = None

    def objects_of_type(self, object_type: str) -> List[PlacedObject]:
        return [o for o in self.objects if o.type == object_type]
