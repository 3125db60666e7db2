"""
Arena Spawner
=============

Random placement of enemies and pillar obstacles inside arenas.

Placement is rejection sampling with a fixed attempt budget. Running out of
attempts is not an error: the spawner keeps what it placed and logs the
shortfall.
"""

import logging
import random
from typing import List, Sequence, Tuple

from arena_riddles.core.canvas import Canvas
from arena_riddles.core.definitions import EMPTY_TILE_ID, FLOOR_TILE_ID, WALL_TILE_ID
from arena_riddles.core.models import Arena, GateDescriptor
from arena_riddles.generation.corridor_carver import Rect, in_any_rect, is_near_any_gate

logger = logging.getLogger(__name__)


class EnemySpawner:
    """
    Picks enemy tiles inside an arena's interior.

    Args:
        inset: Tiles between the footprint border and the sampling box.
        attempts: Samples drawn per arena before giving up.
        require_clearance: Demand plus clearance instead of plain walkability.
    """

    def __init__(self, inset: int = 2, attempts: int = 200, require_clearance: bool = False):
        self.inset = inset
        self.attempts = attempts
        self.require_clearance = require_clearance

    def spawn(self, canvas: Canvas, arena: Arena, count: int, rng: random.Random,
              forbidden: Sequence[Rect] = (),
              gates: Sequence[GateDescriptor] = (),
              gate_margin: int = 0) -> List[Tuple[int, int]]:
        if count <= 0:
            return []
        x0, y0, x1, y1 = arena.interior_bounds(self.inset)
        if x0 > x1 or y0 > y1:
            return []

        spots: List[Tuple[int, int]] = []
        taken = set()
        for _ in range(self.attempts):
            if len(spots) >= count:
                break
            x = rng.randint(x0, x1)
            y = rng.randint(y0, y1)
            if (x, y) in taken or in_any_rect(x, y, forbidden):
                continue
            if gates and is_near_any_gate(x, y, gates, gate_margin):
                continue
            if self.require_clearance:
                if not canvas.has_plus_clearance(x, y):
                    continue
            elif not canvas.is_walkable(x, y):
                continue
            taken.add((x, y))
            spots.append((x, y))

        if len(spots) < count:
            logger.info(f"Placed {len(spots)}/{count} enemies in {arena.id}")
        return spots


def place_pillars(canvas: Canvas, arena: Arena, count: int, rng: random.Random,
                  gates: Sequence[GateDescriptor], gate_clearance: int = 4,
                  inset: int = 4, attempts: int = 300,
                  large_probability: float = 0.3) -> List[Rect]:
    """
    Stamp rectangular wall pillars into the arena interior. Each side is 2
    tiles, or 3 with probability ``large_probability``.

    A pillar lands only on open floor with a free ring of at least one tile
    around it, so pillars never touch walls or each other and never seal off
    part of the arena. Cells within ``gate_clearance`` of a gate are refused.

    Returns:
        Inclusive (x0, y0, x1, y1) rectangles of the placed pillars.
    """
    x0, y0, x1, y1 = arena.interior_bounds(inset)
    placed: List[Rect] = []
    for _ in range(attempts):
        if len(placed) >= count:
            break
        px = rng.randint(x0, x1)
        py = rng.randint(y0, y1)
        pw = 3 if rng.random() < large_probability else 2
        ph = 3 if rng.random() < large_probability else 2
        if not _pillar_fits(canvas, px, py, pw, ph, gates, gate_clearance):
            continue
        canvas.walls[py:py + ph, px:px + pw] = WALL_TILE_ID
        placed.append((px, py, px + pw - 1, py + ph - 1))

    if len(placed) < count:
        logger.info(f"Placed {len(placed)}/{count} pillars in {arena.id}")
    return placed


def _pillar_fits(canvas: Canvas, px: int, py: int, pw: int, ph: int,
                 gates: Sequence[GateDescriptor], gate_clearance: int) -> bool:
    for y in range(py - 1, py + ph + 1):
        for x in range(px - 1, px + pw + 1):
            if not canvas.in_bounds(x, y):
                return False
            if canvas.floor[y, x] != FLOOR_TILE_ID or canvas.walls[y, x] != EMPTY_TILE_ID:
                return False
    for y in range(py, py + ph):
        for x in range(px, px + pw):
            if is_near_any_gate(x, y, gates, gate_clearance):
                return False
    return True
