"""
Core definitions, data model and tile canvas.
"""

from .definitions import (
    TILE_SIZE,
    EMPTY_TILE_ID,
    FLOOR_TILE_ID,
    WALL_TILE_ID,
    GATE_TILE_ID,
    ObjectType,
    Variant,
)
from .models import (
    Arena,
    GateDescriptor,
    PuzzleNode,
    DifficultyResult,
    CropRegion,
    MapProperty,
    PlacedObject,
    GeneratedMap,
)
from .canvas import Canvas
from .config import (
    TraversalConfig,
    LightsOutConfig,
    RegisterAllocationConfig,
    AlgebraForgeConfig,
    CONFIG_BY_VARIANT,
    default_config,
)

__all__ = [
    # Definitions
    'TILE_SIZE',
    'EMPTY_TILE_ID',
    'FLOOR_TILE_ID',
    'WALL_TILE_ID',
    'GATE_TILE_ID',
    'ObjectType',
    'Variant',
    # Models
    'Arena',
    'GateDescriptor',
    'PuzzleNode',
    'DifficultyResult',
    'CropRegion',
    'MapProperty',
    'PlacedObject',
    'GeneratedMap',
    'Canvas',
    # Config
    'TraversalConfig',
    'LightsOutConfig',
    'RegisterAllocationConfig',
    'AlgebraForgeConfig',
    'CONFIG_BY_VARIANT',
    'default_config',
]
