"""
Layout generation: arena placement, corridors, puzzle graphs and cropping.
"""

from .arena_layout import ArenaLayoutPlanner, plan_arena_layout, arena_grid_adjacency
from .corridor_carver import (
    CorridorProfile,
    CorridorCarver,
    carve_connection,
    carve_locked_connection,
    carve_dogleg_connection,
    carve_elbow_connection,
    doorway_clearance_rects,
)
from .puzzle_graph import (
    build_coloring_graph,
    build_lights_out_graph,
    ring_positions,
    TokenCatalog,
    find_clear_spot,
    find_clear_spot_in_arena,
)
from .cropper import crop_canvas
from .spawner import EnemySpawner, place_pillars

__all__ = [
    'ArenaLayoutPlanner',
    'plan_arena_layout',
    'arena_grid_adjacency',
    'CorridorProfile',
    'CorridorCarver',
    'carve_connection',
    'carve_locked_connection',
    'carve_dogleg_connection',
    'carve_elbow_connection',
    'doorway_clearance_rects',
    'build_coloring_graph',
    'build_lights_out_graph',
    'ring_positions',
    'TokenCatalog',
    'find_clear_spot',
    'find_clear_spot_in_arena',
    'crop_canvas',
    'EnemySpawner',
    'place_pillars',
]
