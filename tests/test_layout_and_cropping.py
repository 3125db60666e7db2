"""
Tests for arena layout, the tile canvas and cropping.
"""

import random

import networkx as nx
import numpy as np
import pytest

from arena_riddles.core.canvas import Canvas
from arena_riddles.core.definitions import EMPTY_TILE_ID, FLOOR_TILE_ID, GATE_TILE_ID, WALL_TILE_ID
from arena_riddles.core.models import Arena
from arena_riddles.generation.arena_layout import (
    ArenaLayoutPlanner,
    arena_grid_adjacency,
    plan_arena_layout,
)
from arena_riddles.generation.corridor_carver import CorridorCarver, CorridorProfile
from arena_riddles.generation.cropper import content_bounds, crop_canvas


class TestArenaLayoutPlanner:
    """Randomized flood-fill placement on the logical grid."""

    def make_planner(self, cols=7, rows=7):
        return ArenaLayoutPlanner(cols, rows, 15, 15, 35, 35, offset_x=10, offset_y=10)

    def test_places_requested_count(self):
        arenas = self.make_planner().plan(10, random.Random(1))
        assert len(arenas) == 10
        assert [a.id for a in arenas] == [f"arena_{i}" for i in range(10)]

    def test_first_arena_at_grid_centre(self):
        arenas = self.make_planner().plan(10, random.Random(5))
        assert (arenas[0].grid_x, arenas[0].grid_y) == (3, 3)
        assert (arenas[0].origin_x, arenas[0].origin_y) == (10 + 3 * 35, 10 + 3 * 35)

    @pytest.mark.parametrize("seed", range(10))
    def test_layout_is_connected(self, seed):
        planner = self.make_planner()
        arenas = planner.plan(10, random.Random(seed))
        graph = nx.Graph()
        graph.add_nodes_from(a.id for a in arenas)
        graph.add_edges_from((a.id, b.id) for a, b in planner.adjacent_pairs(arenas))
        assert nx.is_connected(graph)

    def test_cells_are_distinct(self):
        cells = self.make_planner().plan_cells(20, random.Random(3))
        assert len(set(cells)) == len(cells)

    def test_same_seed_same_layout(self):
        a = self.make_planner().plan(10, random.Random(42))
        b = self.make_planner().plan(10, random.Random(42))
        assert a == b

    def test_small_grid_returns_fewer(self):
        arenas = self.make_planner(cols=2, rows=2).plan(10, random.Random(0))
        assert len(arenas) == 4

    def test_zero_count(self):
        assert self.make_planner().plan(0, random.Random(0)) == []

    def test_empty_grid_rejected(self):
        with pytest.raises(ValueError):
            ArenaLayoutPlanner(0, 3, 15, 15, 35, 35)

    def test_functional_form(self):
        arenas = plan_arena_layout(3, 5, 5, random.Random(2), 15, 15, 35, 35)
        assert len(arenas) == 3
        assert arenas[0].origin_x == 2 * 35


class TestGridAdjacency:
    """Neighbour pairs are listed once, right and down."""

    def test_pairs(self):
        arenas = [
            Arena('a', 0, 0, 0, 0, 0, 15, 15),
            Arena('b', 1, 1, 0, 35, 0, 15, 15),
            Arena('c', 2, 0, 1, 0, 35, 15, 15),
            Arena('d', 3, 2, 2, 70, 70, 15, 15),
        ]
        pairs = [(a.id, b.id) for a, b in arena_grid_adjacency(arenas)]
        assert pairs == [('a', 'b'), ('a', 'c')]


class TestCanvas:
    """Parallel tile grids and walkability."""

    def test_new_canvas_is_empty(self):
        canvas = Canvas(5, 4)
        assert canvas.floor.shape == (4, 5)
        assert canvas.is_empty()
        assert list(canvas.layers()) == ['floor', 'walls']

    def test_symbols_layer_is_optional(self):
        canvas = Canvas(5, 4, with_symbols=True)
        assert list(canvas.layers()) == ['floor', 'walls', 'symbols']

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            Canvas(0, 3)

    def test_gate_is_walkable_wall_is_not(self):
        canvas = Canvas(5, 5)
        canvas.fill_floor(0, 0, 5, 5)
        canvas.set_wall(1, 1)
        canvas.stamp_gate(2, 2, 1, 1)
        assert not canvas.is_walkable(1, 1)
        assert canvas.is_walkable(2, 2)
        assert not canvas.walkable_mask(gates_passable=False)[2, 2]

    def test_out_of_bounds_stamps_ignored(self):
        canvas = Canvas(3, 3)
        canvas.set_floor(-1, 0)
        canvas.set_wall(3, 3)
        canvas.fill_floor(-5, -5, 2, 2)
        assert canvas.is_empty()

    def test_plus_clearance(self):
        canvas = Canvas(5, 5)
        canvas.fill_floor(0, 0, 5, 5)
        assert canvas.has_plus_clearance(2, 2)
        canvas.set_wall(2, 1)
        assert not canvas.has_plus_clearance(2, 2)
        assert not canvas.has_plus_clearance(0, 2)

    def test_outline_walls_from_floor(self):
        canvas = Canvas(7, 7)
        canvas.fill_floor(2, 2, 3, 3)
        canvas.outline_walls_from_floor()
        assert (canvas.walls == WALL_TILE_ID).sum() == 16
        assert canvas.walls[1, 1] == WALL_TILE_ID
        assert canvas.walls[3, 3] == EMPTY_TILE_ID
        assert canvas.walls[0, 0] == EMPTY_TILE_ID

    def test_carve_opening_clears_walls(self):
        canvas = Canvas(5, 5)
        canvas.wall_ring(0, 0, 4, 4)
        canvas.carve_opening(0, 2, 1, 1)
        assert canvas.walls[2, 0] == EMPTY_TILE_ID
        assert canvas.floor[2, 0] == FLOOR_TILE_ID

    def test_copy_is_independent(self):
        canvas = Canvas(3, 3)
        clone = canvas.copy()
        clone.set_floor(1, 1)
        assert canvas.floor[1, 1] == EMPTY_TILE_ID


class TestCropper:
    """Bounding-box crop with margin."""

    def test_single_arena_crop(self):
        canvas = Canvas(220, 220)
        arena = Arena('a', 0, 0, 0, 100, 100, 15, 15)
        CorridorCarver(CorridorProfile()).stamp_arena(canvas, arena)

        cropped, region = crop_canvas(canvas, margin=3)

        assert (cropped.width, cropped.height) == (21, 21)
        assert region.translation == (-97, -97)
        moved = arena.translated(*region.translation)
        assert (moved.origin_x, moved.origin_y) == (3, 3)
        assert cropped.walls[3, 3] == WALL_TILE_ID

    def test_crop_preserves_tiles(self):
        canvas = Canvas(50, 50, with_symbols=True)
        canvas.fill_floor(10, 20, 5, 3)
        canvas.stamp_gate(12, 21, 1, 1)
        cropped, region = crop_canvas(canvas, margin=0)
        assert (cropped.width, cropped.height) == (5, 3)
        x, y = region.apply(12, 21)
        assert cropped.walls[y, x] == GATE_TILE_ID
        assert cropped.symbols is not None

    def test_margin_clamped_to_canvas(self):
        canvas = Canvas(10, 10)
        canvas.set_floor(0, 0)
        cropped, region = crop_canvas(canvas, margin=5)
        assert (region.min_x, region.min_y) == (0, 0)
        assert (cropped.width, cropped.height) == (6, 6)

    def test_content_bounds(self):
        canvas = Canvas(10, 10)
        canvas.set_wall(2, 3)
        canvas.set_floor(7, 5)
        assert content_bounds(canvas) == (2, 3, 7, 5)

    def test_empty_canvas_raises(self):
        with pytest.raises(RuntimeError):
            crop_canvas(Canvas(10, 10), margin=2)

    def test_crop_returns_copy(self):
        canvas = Canvas(10, 10)
        canvas.fill_floor(2, 2, 3, 3)
        cropped, _ = crop_canvas(canvas, margin=0)
        cropped.floor[:] = 0
        assert np.count_nonzero(canvas.floor) == 9
