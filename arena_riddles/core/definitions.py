"""
Arena Riddles Definitions
=========================

Tile ids, layer names and object vocabulary shared by every generator.

The tile ids are global ids into the roguelike tileset referenced by every
emitted map (firstgid=1), so they are written into the layers as-is and
0 always means "empty".

Usage:
    from arena_riddles.core.definitions import FLOOR_TILE_ID, ObjectType

    canvas.floor[y, x] = FLOOR_TILE_ID
    obj = PlacedObject(ObjectType.GATE.value, ...)
"""

from enum import Enum
from typing import Tuple


# ==========================================
# TILE GEOMETRY
# ==========================================

# Pixel size of one tile; object coordinates are tile coordinates times this.
TILE_SIZE: int = 16

# Player sprite footprint in pixels (not a whole number of tiles).
PLAYER_WIDTH_PX: int = 20
PLAYER_HEIGHT_PX: int = 32


# ==========================================
# TILE IDS
# ==========================================

EMPTY_TILE_ID: int = 0
FLOOR_TILE_ID: int = 921
WALL_TILE_ID: int = 936

# Gates look like walls but are logically openable; walkability treats them
# as passable.
GATE_TILE_ID: int = 212


# ==========================================
# LAYERS AND TILESET
# ==========================================

FLOOR_LAYER: str = "floor"
WALLS_LAYER: str = "walls"
SYMBOLS_LAYER: str = "symbols"
OBJECT_GROUP: str = "objects"

TILESET_SOURCE: str = "tilesets/roguelikeSheet_magenta.tsx"
TILESET_IMAGE: str = "tilesets/img/roguelikeSheet_magenta.png"

MAP_FORMAT_VERSION: str = "1.10"
DEFAULT_TILED_VERSION: str = "1.10.2"


# ==========================================
# LANES
# ==========================================

LANE_A_SYMBOL: str = "H"
LANE_B_SYMBOL: str = "V"
LANE_SYMBOLS: Tuple[str, str] = (LANE_A_SYMBOL, LANE_B_SYMBOL)


# ==========================================
# OBJECT VOCABULARY
# ==========================================

class ObjectType(Enum):
    """Value of the ``type`` property carried by every emitted object."""
    PLAYER = "player"
    ENEMY = "enemy"
    GATE = "gate"
    SOCKET = "socket"
    TERMINAL = "terminal"
    TOKEN = "token"
    PUZZLE_DOOR = "puzzledoor"
    ARENA_BOUNDS = "arena_bounds"


class Variant(Enum):
    """Puzzle variants the pipeline can generate."""
    TRAVERSAL = "traversal"
    LIGHTS_OUT = "lights_out"
    REGISTER_ALLOCATION = "register_allocation"
    ALGEBRA_FORGE = "algebra_forge"


# puzzleType values understood by the downstream engine
PUZZLE_TYPE_LIGHTS_OUT: str = "graph_lights_out"
PUZZLE_TYPE_REGISTER: str = "register_allocation"
PUZZLE_TYPE_CIPHER: str = "cipher"

DEFAULT_ENEMY_TYPE: str = "DEFAULT"
