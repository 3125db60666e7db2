"""
Puzzle variants and the end-to-end map pipeline.
"""

from .map_pipeline import GENERATORS, generate_map, write_map
from .traversal_arena import generate_traversal
from .lights_out import generate_lights_out
from .register_allocation import generate_register_allocation
from .algebra_forge import generate_algebra_forge

__all__ = [
    'GENERATORS',
    'generate_map',
    'write_map',
    'generate_traversal',
    'generate_lights_out',
    'generate_register_allocation',
    'generate_algebra_forge',
]
