"""
Tests for enemy and pillar placement.
"""

import logging
import random

import numpy as np
import pytest

from arena_riddles.core.canvas import Canvas
from arena_riddles.core.definitions import WALL_TILE_ID
from arena_riddles.core.models import Arena
from arena_riddles.evaluation.validator import reachable_mask
from arena_riddles.generation.corridor_carver import CorridorCarver, CorridorProfile, is_near_any_gate
from arena_riddles.generation.spawner import EnemySpawner, place_pillars


def stamped_arena(width=30, height=20):
    canvas = Canvas(width + 10, height + 10)
    arena = Arena('room', 0, 0, 0, 5, 5, width, height)
    CorridorCarver(CorridorProfile()).stamp_arena(canvas, arena)
    return canvas, arena


class TestEnemySpawner:
    """Rejection sampling inside arena interiors."""

    def test_spots_are_walkable_and_distinct(self):
        canvas, arena = stamped_arena()
        spots = EnemySpawner().spawn(canvas, arena, 5, random.Random(0))
        assert len(spots) == 5
        assert len(set(spots)) == 5
        for x, y in spots:
            assert canvas.is_walkable(x, y)
            assert arena.contains(x, y)

    def test_forbidden_rects_respected(self):
        canvas, arena = stamped_arena()
        x0, y0, x1, y1 = arena.interior_bounds(2)
        forbidden = [(x0, y0, x1, (y0 + y1) // 2)]
        spots = EnemySpawner().spawn(canvas, arena, 10, random.Random(3), forbidden)
        assert all(y > (y0 + y1) // 2 for _, y in spots)

    def test_clearance_mode(self):
        canvas, arena = stamped_arena()
        canvas.walls[12:14, 12:20] = WALL_TILE_ID
        spots = EnemySpawner(inset=3, require_clearance=True).spawn(
            canvas, arena, 8, random.Random(1))
        assert all(canvas.has_plus_clearance(x, y) for x, y in spots)

    def test_shortfall_is_not_an_error(self, caplog):
        caplog.set_level(logging.INFO)
        canvas = Canvas(30, 30)
        arena = Arena('void', 0, 0, 0, 5, 5, 15, 15)
        spots = EnemySpawner(attempts=50).spawn(canvas, arena, 3, random.Random(0))
        assert spots == []
        assert "0/3" in caplog.text

    def test_zero_count(self):
        canvas, arena = stamped_arena()
        assert EnemySpawner().spawn(canvas, arena, 0, random.Random(0)) == []


class TestPillars:
    """Wall pillars that never split an arena."""

    @pytest.mark.parametrize("seed", range(6))
    def test_floor_stays_connected(self, seed):
        canvas, arena = stamped_arena()
        pillars = place_pillars(canvas, arena, 4, random.Random(seed), gates=[])

        assert pillars
        walkable = canvas.walkable_mask()
        start = next((x, y) for y in range(arena.origin_y, arena.bottom)
                     for x in range(arena.origin_x, arena.right) if walkable[y, x])
        seen = reachable_mask(canvas, start)
        assert seen.sum() == walkable.sum()

    def test_pillar_sizes(self):
        canvas, arena = stamped_arena()
        for x0, y0, x1, y1 in place_pillars(canvas, arena, 4, random.Random(2), gates=[]):
            assert x1 - x0 + 1 in (2, 3)
            assert y1 - y0 + 1 in (2, 3)
            assert np.all(canvas.walls[y0:y1 + 1, x0:x1 + 1] == WALL_TILE_ID)

    def test_pillars_keep_away_from_gates(self):
        canvas = Canvas(80, 40)
        carver = CorridorCarver(CorridorProfile())
        a = Arena('a', 0, 0, 0, 5, 5, 30, 20)
        b = Arena('b', 1, 1, 0, 45, 5, 30, 20)
        carver.stamp_arena(canvas, a)
        carver.stamp_arena(canvas, b)
        gates = carver.carve(canvas, a, b)

        pillars = place_pillars(canvas, a, 6, random.Random(4), gates, gate_clearance=4)

        for x0, y0, x1, y1 in pillars:
            for y in range(y0, y1 + 1):
                for x in range(x0, x1 + 1):
                    assert not is_near_any_gate(x, y, gates, 4)
