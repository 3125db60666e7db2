"""
Arena Riddles
=============

Seeded procedural generator for puzzle arenas: rooms on a grid joined by
two-lane gated corridors, puzzle graphs embedded in the layout, calibrated
starting states, and Tiled (TMX) map documents for the game engine.

Submodules:
- core: tile vocabulary, data model, canvas, variant configuration
- generation: layout planner, corridor carver, puzzle graphs, cropper, spawner
- evaluation: difficulty calibration and map validation
- data: TMX writer and loader, puzzle table, tileset assets
- pipeline: the four puzzle variants and the atomic map writer
"""

__version__ = "1.0.0"

__all__ = ['core', 'generation', 'evaluation', 'data', 'utils', 'pipeline']
