"""
Tests for the Corridor Carver
=============================

Straight, locked, dogleg and elbow connections between arenas, plus the
doorway clearance rectangles the spawner keeps free.
"""

import random
import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from arena_riddles.core.canvas import Canvas
from arena_riddles.core.definitions import FLOOR_TILE_ID, GATE_TILE_ID, WALL_TILE_ID
from arena_riddles.core.models import Arena
from arena_riddles.evaluation.validator import reachable_mask
from arena_riddles.generation.corridor_carver import (
    CorridorCarver,
    CorridorProfile,
    carve_connection,
    carve_dogleg_connection,
    carve_elbow_connection,
    carve_locked_connection,
    doorway_clearance_rects,
    in_any_rect,
)


def make_arena(arena_id, x, y, size=15, index=0):
    return Arena(arena_id, index, 0, 0, x, y, size, size)


def stamped(canvas, carver, *arenas):
    for arena in arenas:
        carver.stamp_arena(canvas, arena)


class TestCorridorProfile:
    """Band layout of the corridor cross-section."""

    def test_default_bands(self):
        profile = CorridorProfile()
        assert profile.total_width == 13
        assert profile.start_offset == -6
        assert profile.lane_a_offset == -5
        assert profile.lane_b_offset == 1

    def test_lane_bands(self):
        profile = CorridorProfile()
        lanes = [i for i in range(profile.total_width) if profile.is_lane(i)]
        assert lanes == [1, 2, 3, 4, 5, 7, 8, 9, 10, 11]

    def test_no_separator_makes_contiguous_lanes(self):
        profile = CorridorProfile(lane_width=3, separator_width=0, side_wall_width=1)
        assert profile.total_width == 8
        assert profile.lane_b_offset == profile.lane_a_offset + 3


class TestStraightCarve:
    """Straight two-lane corridors between aligned arenas."""

    def setup_method(self):
        self.canvas = Canvas(80, 40)
        self.carver = CorridorCarver(CorridorProfile())
        self.a = make_arena('a', 10, 10)
        self.b = make_arena('b', 45, 10, index=1)
        stamped(self.canvas, self.carver, self.a, self.b)

    def test_horizontal_gates(self):
        gates = self.carver.carve(self.canvas, self.a, self.b)

        assert len(gates) == 4
        assert [g.side for g in gates] == ['left', 'left', 'right', 'right']
        assert [g.lane_symbol for g in gates] == ['H', 'V', 'H', 'V']
        assert all(not g.locked for g in gates)

        first = gates[0]
        assert (first.source_arena_id, first.target_arena_id) == ('a', 'b')
        assert (first.x, first.y, first.width, first.height) == (24, 12, 1, 5)
        assert gates[2].x == 45

    def test_gate_tiles_sit_on_floor(self):
        gates = self.carver.carve(self.canvas, self.a, self.b)
        for gate in gates:
            for x, y in gate.cells():
                assert self.canvas.walls[y, x] == GATE_TILE_ID
                assert self.canvas.floor[y, x] == FLOOR_TILE_ID

    def test_separator_is_wall(self):
        self.carver.carve(self.canvas, self.a, self.b)
        # centre line of the corridor, halfway between the arenas
        assert self.canvas.walls[17, 34] == WALL_TILE_ID
        assert self.canvas.floor[12, 34] == FLOOR_TILE_ID
        assert self.canvas.floor[18, 34] == FLOOR_TILE_ID

    def test_arenas_become_mutually_reachable(self):
        self.carver.carve(self.canvas, self.a, self.b)
        seen = reachable_mask(self.canvas, (self.a.center_x, self.a.center_y))
        assert seen[self.b.center_y, self.b.center_x]

    def test_order_of_arguments_does_not_matter(self):
        gates = carve_connection(self.canvas, self.b, self.a, CorridorProfile())
        assert gates[0].source_arena_id == 'a'

    def test_vertical_gates(self):
        canvas = Canvas(40, 80)
        top = make_arena('top', 10, 10)
        bottom = make_arena('bottom', 10, 45, index=1)
        stamped(canvas, self.carver, top, bottom)

        gates = self.carver.carve(canvas, top, bottom)

        assert [g.side for g in gates] == ['top', 'top', 'bottom', 'bottom']
        assert all(g.height == 1 and g.width == 5 for g in gates)
        assert gates[0].y == top.bottom
        assert gates[2].y == bottom.origin_y

    def test_diagonal_pair_rejected(self):
        other = make_arena('c', 45, 45, index=2)
        with pytest.raises(ValueError):
            self.carver.carve(self.canvas, self.a, other)

    def test_self_connection_rejected(self):
        with pytest.raises(ValueError):
            self.carver.carve(self.canvas, self.a, self.a)


class TestLockedCarve:
    """Far doorway replaced by one barrier spanning every lane."""

    def test_barrier_descriptor(self):
        canvas = Canvas(80, 40)
        carver = CorridorCarver(CorridorProfile())
        a, b = make_arena('a', 10, 10), make_arena('b', 45, 10, index=1)
        stamped(canvas, carver, a, b)

        gates = carver.carve_locked(canvas, a, b, 'vault')

        assert len(gates) == 3
        near, barrier = gates[:2], gates[2]
        assert all(g.source_arena_id == 'a' and not g.locked for g in near)
        assert barrier.locked
        assert barrier.group == 'vault'
        assert barrier.lane_symbol is None
        assert barrier.source_arena_id == 'b'
        assert (barrier.x, barrier.y, barrier.width, barrier.height) == (45, 12, 1, 11)


class TestTurningCarves:
    """Dogleg and elbow corridors."""

    def test_dogleg_connects_offset_columns(self):
        canvas = Canvas(100, 100)
        carver = CorridorCarver(CorridorProfile())
        near, far = make_arena('near', 10, 10), make_arena('far', 30, 60, index=1)
        stamped(canvas, carver, near, far)

        gates = carver.carve_dogleg(canvas, near, far)

        assert len(gates) == 4
        assert [g.source_arena_id for g in gates] == ['near', 'near', 'far', 'far']
        seen = reachable_mask(canvas, (near.center_x, near.center_y))
        assert seen[far.center_y, far.center_x]

    def test_dogleg_with_group_locks_far_side(self):
        canvas = Canvas(100, 100)
        carver = CorridorCarver(CorridorProfile())
        near, far = make_arena('near', 10, 10), make_arena('far', 30, 60, index=1)
        stamped(canvas, carver, near, far)

        gates = carver.carve_dogleg(canvas, near, far, group='g')

        assert [g.locked for g in gates] == [False, False, True]
        blocked = gates[-1].cells()
        seen = reachable_mask(canvas, (near.center_x, near.center_y), blocked)
        assert not seen[far.center_y, far.center_x]

    def test_dogleg_needs_vertical_room(self):
        canvas = Canvas(100, 100)
        carver = CorridorCarver(CorridorProfile())
        near, far = make_arena('near', 10, 10), make_arena('far', 30, 28, index=1)
        with pytest.raises(ValueError):
            carver.carve_dogleg(canvas, near, far)

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_elbow_connects_diagonal_arenas(self, seed):
        canvas = Canvas(90, 90)
        carver = CorridorCarver(CorridorProfile())
        a, b = make_arena('a', 10, 10), make_arena('b', 50, 50, index=1)
        stamped(canvas, carver, a, b)

        gates = carver.carve_elbow(canvas, a, b, random.Random(seed))

        assert len(gates) == 4
        assert gates[0].source_arena_id == 'a'
        seen = reachable_mask(canvas, (a.center_x, a.center_y))
        assert seen[b.center_y, b.center_x]


class TestDoorwayClearance:
    """Rectangles reaching into each arena from its doorways."""

    def test_rects_span_both_lanes(self):
        canvas = Canvas(80, 40)
        carver = CorridorCarver(CorridorProfile())
        a, b = make_arena('a', 10, 10), make_arena('b', 45, 10, index=1)
        stamped(canvas, carver, a, b)
        gates = carver.carve(canvas, a, b)

        rects = doorway_clearance_rects(gates, depth=3)

        assert rects['a'] == [(21, 12, 23, 22)]
        assert rects['b'] == [(46, 12, 48, 22)]
        assert in_any_rect(22, 17, rects['a'])
        assert not in_any_rect(20, 17, rects['a'])


class TestFunctionalForms:
    """Module-level carve functions match the carver methods."""

    def pair(self, size, a_pos, b_pos):
        canvases = [Canvas(size, size), Canvas(size, size)]
        a, b = make_arena('a', *a_pos), make_arena('b', *b_pos, index=1)
        carver = CorridorCarver(CorridorProfile())
        for canvas in canvases:
            stamped(canvas, carver, a, b)
        return canvases, carver, a, b

    def assert_same(self, canvases, gates, expected):
        assert gates == expected
        np.testing.assert_array_equal(canvases[0].floor, canvases[1].floor)
        np.testing.assert_array_equal(canvases[0].walls, canvases[1].walls)

    def test_locked_connection(self):
        canvases, carver, a, b = self.pair(80, (10, 10), (45, 10))
        gates = carve_locked_connection(canvases[0], a, b, CorridorProfile(), 'vault')
        expected = carver.carve_locked(canvases[1], a, b, 'vault')
        self.assert_same(canvases, gates, expected)
        assert gates[-1].locked

    def test_dogleg_connection(self):
        canvases, carver, near, far = self.pair(100, (10, 10), (30, 60))
        gates = carve_dogleg_connection(canvases[0], near, far, CorridorProfile())
        expected = carver.carve_dogleg(canvases[1], near, far)
        self.assert_same(canvases, gates, expected)
        assert len(gates) == 4

    def test_elbow_connection(self):
        canvases, carver, a, b = self.pair(90, (10, 10), (50, 50))
        gates = carve_elbow_connection(canvases[0], a, b, CorridorProfile(), random.Random(7))
        expected = carver.carve_elbow(canvases[1], a, b, random.Random(7))
        self.assert_same(canvases, gates, expected)
        seen = reachable_mask(canvases[0], (a.center_x, a.center_y))
        assert seen[b.center_y, b.center_x]
