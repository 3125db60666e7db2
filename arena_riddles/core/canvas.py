"""
Tile Canvas
===========

Owns the parallel tile grids every carving step writes into.

Grids are numpy int32 arrays of shape (height, width) indexed ``[y, x]``.
A single Canvas is created per generation run and passed explicitly to each
carving call; functions read its current state and write only inside the
region they were asked to touch.
"""

import logging
from typing import Dict, Optional

import numpy as np

from arena_riddles.core.definitions import (
    EMPTY_TILE_ID,
    FLOOR_TILE_ID,
    WALL_TILE_ID,
    GATE_TILE_ID,
    FLOOR_LAYER,
    WALLS_LAYER,
    SYMBOLS_LAYER,
)

logger = logging.getLogger(__name__)


class Canvas:
    """Floor, walls and optional symbols grids of identical shape."""

    def __init__(self, width: int, height: int, with_symbols: bool = False):
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")
        self.floor = np.full((height, width), EMPTY_TILE_ID, dtype=np.int32)
        self.walls = np.full((height, width), EMPTY_TILE_ID, dtype=np.int32)
        self.symbols: Optional[np.ndarray] = (
            np.full((height, width), EMPTY_TILE_ID, dtype=np.int32) if with_symbols else None
        )

    @classmethod
    def from_layers(cls, floor: np.ndarray, walls: np.ndarray,
                    symbols: Optional[np.ndarray] = None) -> 'Canvas':
        if floor.shape != walls.shape or (symbols is not None and symbols.shape != floor.shape):
            raise ValueError("All canvas layers must share one shape")
        height, width = floor.shape
        canvas = cls(width, height, with_symbols=symbols is not None)
        canvas.floor[:] = floor
        canvas.walls[:] = walls
        if symbols is not None:
            canvas.symbols[:] = symbols
        return canvas

    @property
    def width(self) -> int:
        return self.floor.shape[1]

    @property
    def height(self) -> int:
        return self.floor.shape[0]

    def layers(self) -> Dict[str, np.ndarray]:
        out = {FLOOR_LAYER: self.floor, WALLS_LAYER: self.walls}
        if self.symbols is not None:
            out[SYMBOLS_LAYER] = self.symbols
        return out

    def copy(self) -> 'Canvas':
        return Canvas.from_layers(
            self.floor.copy(),
            self.walls.copy(),
            None if self.symbols is None else self.symbols.copy(),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def occupied_mask(self) -> np.ndarray:
        """Cells holding any non-empty tile in any layer."""
        mask = (self.floor != EMPTY_TILE_ID) | (self.walls != EMPTY_TILE_ID)
        if self.symbols is not None:
            mask |= self.symbols != EMPTY_TILE_ID
        return mask

    def is_empty(self) -> bool:
        return not self.occupied_mask().any()

    def walkable_mask(self, gates_passable: bool = True) -> np.ndarray:
        """
        Floor cells whose wall entry is empty (or a gate when ``gates_passable``).
        """
        open_wall = self.walls == EMPTY_TILE_ID
        if gates_passable:
            open_wall |= self.walls == GATE_TILE_ID
        return (self.floor == FLOOR_TILE_ID) & open_wall

    def is_walkable(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return False
        wall = self.walls[y, x]
        return self.floor[y, x] == FLOOR_TILE_ID and wall in (EMPTY_TILE_ID, GATE_TILE_ID)

    def has_plus_clearance(self, x: int, y: int) -> bool:
        """Floor cell off the border with no wall on it or its 4-neighbourhood."""
        if x <= 0 or y <= 0 or x >= self.width - 1 or y >= self.height - 1:
            return False
        if self.floor[y, x] != FLOOR_TILE_ID:
            return False
        return (
            self.walls[y, x] == EMPTY_TILE_ID
            and self.walls[y - 1, x] == EMPTY_TILE_ID
            and self.walls[y + 1, x] == EMPTY_TILE_ID
            and self.walls[y, x - 1] == EMPTY_TILE_ID
            and self.walls[y, x + 1] == EMPTY_TILE_ID
        )

    # ------------------------------------------------------------------
    # Stamps (out-of-bounds writes are ignored)
    # ------------------------------------------------------------------

    def set_floor(self, x: int, y: int, tile: int = FLOOR_TILE_ID) -> None:
        if self.in_bounds(x, y):
            self.floor[y, x] = tile

    def set_wall(self, x: int, y: int, tile: int = WALL_TILE_ID) -> None:
        if self.in_bounds(x, y):
            self.walls[y, x] = tile

    def stamp_wall_if_empty(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            return
        if self.floor[y, x] != EMPTY_TILE_ID or self.walls[y, x] != EMPTY_TILE_ID:
            return
        self.walls[y, x] = WALL_TILE_ID

    def fill_floor(self, x: int, y: int, w: int, h: int) -> None:
        x0, y0 = max(0, x), max(0, y)
        x1, y1 = min(self.width, x + w), min(self.height, y + h)
        if x0 < x1 and y0 < y1:
            self.floor[y0:y1, x0:x1] = FLOOR_TILE_ID

    def stamp_gate(self, x: int, y: int, w: int, h: int) -> None:
        """Gate tiles over floor so the cell stays walkable once opened."""
        x0, y0 = max(0, x), max(0, y)
        x1, y1 = min(self.width, x + w), min(self.height, y + h)
        if x0 < x1 and y0 < y1:
            self.walls[y0:y1, x0:x1] = GATE_TILE_ID
            self.floor[y0:y1, x0:x1] = FLOOR_TILE_ID

    def carve_opening(self, x: int, y: int, w: int, h: int) -> None:
        """Clear walls and make sure floor exists inside the rectangle."""
        x0, y0 = max(0, x), max(0, y)
        x1, y1 = min(self.width, x + w), min(self.height, y + h)
        if x0 >= x1 or y0 >= y1:
            return
        self.walls[y0:y1, x0:x1] = EMPTY_TILE_ID
        region = self.floor[y0:y1, x0:x1]
        region[region == EMPTY_TILE_ID] = FLOOR_TILE_ID

    def wall_ring(self, x0: int, y0: int, x1: int, y1: int) -> None:
        """Wall tiles on the border of the inclusive rectangle."""
        for x in range(x0, x1 + 1):
            self.set_wall(x, y0)
            self.set_wall(x, y1)
        for y in range(y0, y1 + 1):
            self.set_wall(x0, y)
            self.set_wall(x1, y)

    def rebuild_walls_around(self, x0: int, y0: int, x1: int, y1: int) -> None:
        """Close any floor in the inclusive region that touches void orthogonally."""
        for y in range(max(0, y0), min(self.height - 1, y1) + 1):
            for x in range(max(0, x0), min(self.width - 1, x1) + 1):
                if self.floor[y, x] != FLOOR_TILE_ID:
                    continue
                self.stamp_wall_if_empty(x - 1, y)
                self.stamp_wall_if_empty(x + 1, y)
                self.stamp_wall_if_empty(x, y - 1)
                self.stamp_wall_if_empty(x, y + 1)

    def outline_walls_from_floor(self) -> None:
        """
        Rebuild the walls layer: every non-floor cell in the 8-neighbourhood of
        floor becomes a wall, everything else is cleared.
        """
        floor_mask = self.floor == FLOOR_TILE_ID
        padded = np.pad(floor_mask, 1, mode='constant', constant_values=False)
        h, w = floor_mask.shape
        near = np.zeros_like(floor_mask)
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                near |= padded[1 + dy:1 + dy + h, 1 + dx:1 + dx + w]
        self.walls = np.where(~floor_mask & near, WALL_TILE_ID, EMPTY_TILE_ID).astype(np.int32)
        logger.debug(f"Outlined {int((self.walls == WALL_TILE_ID).sum())} wall tiles from floor")
