"""
Map documents: TMX emitter and loader, puzzle table, tileset assets.
"""

from .tmx_writer import TmxMapWriter, render_map
from .tmx_loader import LoadedMap, MapObject, load_map, parse_map
from .puzzle_table import Puzzle, PuzzleTable
from .assets import copy_tileset_assets

__all__ = [
    'TmxMapWriter',
    'render_map',
    'LoadedMap',
    'MapObject',
    'load_map',
    'parse_map',
    'Puzzle',
    'PuzzleTable',
    'copy_tileset_assets',
]
