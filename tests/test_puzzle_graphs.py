"""
Tests for the puzzle graph builders and graph helpers.
"""

import random

import pytest

from arena_riddles.core.canvas import Canvas
from arena_riddles.core.models import Arena
from arena_riddles.evaluation.validator import check_coloring_graph
from arena_riddles.generation.puzzle_graph import (
    TokenCatalog,
    build_coloring_graph,
    build_lights_out_graph,
    embed_nodes,
    find_clear_spot,
    find_clear_spot_in_arena,
    ring_positions,
    to_puzzle_nodes,
)
from arena_riddles.utils.graph_utils import (
    adjacency_lists,
    closed_neighborhoods,
    count_triangles,
    is_two_colorable,
    neighbors_csv,
)


class TestColoringGraph:
    """Ring plus chords: the interference graph of the register puzzle."""

    def test_default_ring(self):
        graph = build_coloring_graph()
        assert graph.number_of_nodes() == 10
        assert graph.number_of_edges() == 12
        assert list(graph.nodes)[0] == 'var_0'

    def test_two_triangles_and_not_bipartite(self):
        graph = build_coloring_graph()
        assert count_triangles(graph) == 2
        assert not is_two_colorable(graph)

    def test_check_passes_for_default(self):
        result = check_coloring_graph(build_coloring_graph())
        assert result.is_valid
        assert result.metrics['triangles'] == 2

    def test_even_ring_without_chords_is_flagged(self):
        result = check_coloring_graph(build_coloring_graph(10, chords=()))
        assert not result.is_valid
        assert result.metrics['two_colorable']
        assert result.metrics['triangles'] == 0

    def test_too_small(self):
        with pytest.raises(ValueError):
            build_coloring_graph(2)

    def test_neighbors_csv_follows_node_order(self):
        graph = build_coloring_graph()
        assert neighbors_csv(graph, 'var_0') == 'var_1,var_2,var_9'
        assert adjacency_lists(graph)['var_5'] == ['var_4', 'var_6', 'var_7']


class TestRingPositions:

    def test_positions(self):
        positions = ring_positions((110, 110), 55, 10)
        assert len(positions) == 10
        assert positions[0] == (165, 110)
        assert positions[5] == (55, 110)


class TestLightsOutGraph:
    """Jittered lantern grid with two excluded corners."""

    def test_structure(self):
        graph = build_lights_out_graph(random.Random(0))
        assert graph.number_of_nodes() == 14
        # 20 grid edges survive the excluded corners; two extra edges repeat grid edges
        assert graph.number_of_edges() == 23
        assert graph.nodes['lantern_0']['cell'] == 1
        assert graph.nodes['lantern_13']['cell'] == 14

    def test_jitter_bounded(self):
        graph = build_lights_out_graph(random.Random(9))
        for node in graph.nodes:
            data = graph.nodes[node]
            col, row = data['cell'] % 4, data['cell'] // 4
            assert abs(data['x'] - (55 + col * 38)) <= 3
            assert abs(data['y'] - (42 + row * 34)) <= 3

    def test_same_seed_same_graph(self):
        a = build_lights_out_graph(random.Random(4))
        b = build_lights_out_graph(random.Random(4))
        assert dict(a.nodes(data=True)) == dict(b.nodes(data=True))

    def test_bad_extra_edge(self):
        with pytest.raises(ValueError):
            build_lights_out_graph(random.Random(0), extra_edges=((0, 40),))

    def test_closed_neighborhoods(self):
        graph = build_lights_out_graph(random.Random(0))
        groups = closed_neighborhoods(graph)
        assert len(groups) == 14
        assert all(group[0] == i for i, group in enumerate(groups))

    def test_puzzle_nodes(self):
        graph = build_lights_out_graph(random.Random(0))
        states = [i % 2 == 0 for i in range(14)]
        nodes = to_puzzle_nodes(graph, states)
        assert [n.index for n in nodes] == list(range(14))
        assert nodes[1].state is False
        assert 'lantern_0' in nodes[1].neighbor_ids


class TestTokenCatalog:

    def test_goal_is_not_a_candidate(self):
        catalog = TokenCatalog()
        assert catalog.goal_kind not in catalog.candidate_kinds
        assert catalog.goal_token_id == 'glyph_7'
        assert catalog.token_id(3) == 'glyph_3'


class TestClearSpot:
    """Nearest plus-clear cell search."""

    def make_room(self):
        canvas = Canvas(20, 20)
        canvas.fill_floor(1, 1, 18, 18)
        canvas.wall_ring(0, 0, 19, 19)
        return canvas

    def test_clear_request_is_kept(self):
        assert find_clear_spot(self.make_room(), 10, 10, 4) == (10, 10)

    def test_moves_off_wall(self):
        canvas = self.make_room()
        canvas.set_wall(10, 10)
        x, y = find_clear_spot(canvas, 10, 10, 4)
        assert canvas.has_plus_clearance(x, y)
        assert (x, y) == (9, 9)

    def test_fallback_is_clamped_request(self):
        canvas = Canvas(10, 10)
        assert find_clear_spot(canvas, 50, -3, 2) == (8, 1)

    def test_arena_bounds_respected(self):
        canvas = self.make_room()
        arena = Arena('a', 0, 0, 0, 0, 0, 20, 20)
        x, y = find_clear_spot_in_arena(canvas, arena, 0, 0)
        assert (x, y) == (3, 3)

    def test_embed_nodes(self):
        canvas = self.make_room()
        graph = build_coloring_graph(3, chords=())
        for node in graph.nodes:
            graph.nodes[node]['x'], graph.nodes[node]['y'] = 0, 0
        embed_nodes(canvas, graph)
        for node in graph.nodes:
            assert canvas.has_plus_clearance(graph.nodes[node]['x'], graph.nodes[node]['y'])
