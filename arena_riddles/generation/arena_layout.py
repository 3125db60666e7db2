"""
Arena Layout Planner
====================

Places arenas on a logical grid with a randomized flood fill.

The fill starts at the grid centre and only ever claims cells next to an
already claimed cell, so the result is one 4-connected component without any
post-hoc connectivity check. When the frontier runs dry before ``count``
cells are claimed (a boxed-in grid) the planner returns what it has; callers
must accept a shorter list.

Usage:
    planner = ArenaLayoutPlanner(grid_cols=7, grid_rows=7,
                                 arena_width=15, arena_height=15,
                                 spacing_x=35, spacing_y=35)
    arenas = planner.plan(10, random.Random(seed))
    pairs = planner.adjacent_pairs(arenas)
"""

import logging
import random
from typing import Dict, List, Tuple

from arena_riddles.core.models import Arena

logger = logging.getLogger(__name__)

DIRECTIONS: Tuple[Tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


class ArenaLayoutPlanner:
    """Randomized BFS placement of arenas on a ``grid_cols`` x ``grid_rows`` grid."""

    def __init__(
        self,
        grid_cols: int,
        grid_rows: int,
        arena_width: int,
        arena_height: int,
        spacing_x: int,
        spacing_y: int,
        offset_x: int = 0,
        offset_y: int = 0,
        id_prefix: str = 'arena_',
    ):
        if grid_cols <= 0 or grid_rows <= 0:
            raise ValueError(f"Grid must be non-empty, got {grid_cols}x{grid_rows}")
        self.grid_cols = grid_cols
        self.grid_rows = grid_rows
        self.arena_width = arena_width
        self.arena_height = arena_height
        self.spacing_x = spacing_x
        self.spacing_y = spacing_y
        self.offset_x = offset_x
        self.offset_y = offset_y
        self.id_prefix = id_prefix

    def plan_cells(self, count: int, rng: random.Random) -> List[Tuple[int, int]]:
        """Claimed (grid_x, grid_y) cells in claim order."""
        if count <= 0:
            return []

        start = (self.grid_cols // 2, self.grid_rows // 2)
        cells = [start]
        used = {start}
        frontier = [start]

        while len(cells) < count and frontier:
            bx, by = frontier.pop(rng.randrange(len(frontier)))
            dirs = list(DIRECTIONS)
            rng.shuffle(dirs)

            for dx, dy in dirs:
                if len(cells) >= count:
                    break
                nx, ny = bx + dx, by + dy
                if not (0 <= nx < self.grid_cols and 0 <= ny < self.grid_rows):
                    continue
                if (nx, ny) in used:
                    continue
                used.add((nx, ny))
                cells.append((nx, ny))
                frontier.append((nx, ny))

        if len(cells) < count:
            logger.info(f"Layout frontier exhausted: placed {len(cells)}/{count} arenas")
        return cells

    def plan(self, count: int, rng: random.Random) -> List[Arena]:
        """Arena ``i`` is the i-th claimed cell; arena 0 sits at the grid centre."""
        arenas = []
        for i, (gx, gy) in enumerate(self.plan_cells(count, rng)):
            arenas.append(Arena(
                id=f"{self.id_prefix}{i}",
                index=i,
                grid_x=gx,
                grid_y=gy,
                origin_x=self.offset_x + gx * self.spacing_x,
                origin_y=self.offset_y + gy * self.spacing_y,
                width=self.arena_width,
                height=self.arena_height,
            ))
        logger.debug(f"Planned {len(arenas)} arenas")
        return arenas

    def adjacent_pairs(self, arenas: List[Arena]) -> List[Tuple[Arena, Arena]]:
        """
        Grid-neighbour pairs to connect, each listed once (right and down
        neighbours, scanned in arena order).
        """
        return arena_grid_adjacency(arenas)


def plan_arena_layout(count: int, grid_cols: int, grid_rows: int, rng: random.Random,
                      arena_width: int, arena_height: int,
                      spacing_x: int, spacing_y: int) -> List[Arena]:
    """Functional form of ``ArenaLayoutPlanner.plan`` with zero offset."""
    planner = ArenaLayoutPlanner(grid_cols, grid_rows, arena_width, arena_height,
                                 spacing_x, spacing_y)
    return planner.plan(count, rng)


def arena_grid_adjacency(arenas: List[Arena]) -> List[Tuple[Arena, Arena]]:
    by_cell: Dict[Tuple[int, int], Arena] = {(a.grid_x, a.grid_y): a for a in arenas}
    pairs = []
    for a in arenas:
        for dx, dy in ((1, 0), (0, 1)):
            other = by_cell.get((a.grid_x + dx, a.grid_y + dy))
            if other is not None:
                pairs.append((a, other))
    return pairs
