"""
Tests for Difficulty Calibration
================================

Lights-out press calibration and the hidden-algebra token economy.
"""

import itertools
import random

import pytest

from arena_riddles.evaluation.difficulty_calibrator import (
    HiddenAlgebra,
    TokenEconomyCalibrator,
    apply_presses,
    calibrate_lights_out,
    calibrate_token_economy,
    counts_of,
    has_one_step_goal,
    pack_counts,
    permutation_for,
    shortest_steps_to_goal,
    unpack_counts,
)
from arena_riddles.generation.puzzle_graph import build_lights_out_graph

IDENTITY = list(range(8))


class TestLightsOutCalibration:
    """Presses applied to the solved state, and their inverse."""

    @pytest.mark.parametrize("seed", [0, 1, 7, 42])
    def test_replaying_presses_solves(self, seed):
        rng = random.Random(seed)
        graph = build_lights_out_graph(rng)
        result = calibrate_lights_out(graph, rng)

        solved = apply_presses(graph, result.start_state, result.presses)

        assert all(solved)
        assert result.min_moves == sum(result.presses)
        assert result.tier == 'presses'
        assert len(result.start_state) == graph.number_of_nodes()

    def test_zero_probability_leaves_solved(self, caplog):
        graph = build_lights_out_graph(random.Random(0))
        result = calibrate_lights_out(graph, random.Random(0), press_probability=0.0)
        assert all(result.start_state)
        assert result.min_moves == 0
        assert "no presses" in caplog.text

    def test_single_press_toggles_closed_neighbourhood(self):
        graph = build_lights_out_graph(random.Random(0))
        presses = [False] * 14
        presses[0] = True
        state = apply_presses(graph, [True] * 14, presses)
        off = {i for i, on in enumerate(state) if not on}
        assert off == {0, 1, 4}

    def test_length_mismatch(self):
        graph = build_lights_out_graph(random.Random(0))
        with pytest.raises(ValueError):
            apply_presses(graph, [True] * 3, [False] * 14)


class TestHiddenAlgebra:
    """Relabelled dihedral group of order 8."""

    def test_permutation_is_stable(self):
        assert permutation_for('cathedral_42') == permutation_for('cathedral_42')
        assert sorted(permutation_for('cathedral_42')) == IDENTITY

    def test_rejects_non_permutation(self):
        with pytest.raises(ValueError):
            HiddenAlgebra([0, 0, 1, 2, 3, 4, 5, 6])

    @pytest.mark.parametrize("op_id", [None, 'cathedral_0', 'cathedral_1234'])
    def test_group_axioms(self, op_id):
        algebra = HiddenAlgebra.for_operation(op_id)
        identity = algebra.inverse[0]
        for a in range(8):
            assert algebra.multiply(identity, a) == a
            assert algebra.multiply(a, identity) == a
            assert any(algebra.multiply(a, b) == identity for b in range(8))
        for a, b, c in itertools.product(range(8), repeat=3):
            left = algebra.multiply(algebra.multiply(a, b), c)
            right = algebra.multiply(a, algebra.multiply(b, c))
            assert left == right

    def test_not_abelian(self):
        algebra = HiddenAlgebra(IDENTITY)
        # r * s = s r but s * r = s r^3
        assert algebra.multiply(1, 4) == 5
        assert algebra.multiply(4, 1) == 7


class TestPackedCounts:

    def test_round_trip(self):
        counts = [1, 0, 3, 15, 0, 2, 0, 1]
        assert unpack_counts(pack_counts(counts)) == counts

    def test_counts_clamp(self):
        assert unpack_counts(pack_counts([20, -1, 0, 0, 0, 0, 0, 0]))[:2] == [15, 0]

    def test_counts_of(self):
        assert counts_of([0, 1, 0, 3]) == [2, 1, 0, 1, 0, 0, 0, 0]


class TestTokenSearch:
    """BFS over combine steps with the identity relabelling."""

    def setup_method(self):
        self.algebra = HiddenAlgebra(IDENTITY)

    def test_one_step(self):
        counts = counts_of([3, 4])
        assert has_one_step_goal(counts, self.algebra)
        assert shortest_steps_to_goal(counts, self.algebra) == 1

    def test_two_steps(self):
        # r * r = r^2, then r^2 * s r = s r^3
        counts = counts_of([1, 1, 5])
        assert not has_one_step_goal(counts, self.algebra)
        assert shortest_steps_to_goal(counts, self.algebra) == 2

    def test_rotations_never_reach_reflection(self):
        counts = counts_of([0, 1, 2, 3, 1, 2])
        assert shortest_steps_to_goal(counts, self.algebra) == -1

    def test_goal_already_present(self):
        assert shortest_steps_to_goal(counts_of([7]), self.algebra) == 0

    def test_depth_limit(self):
        counts = counts_of([1, 1, 5])
        assert shortest_steps_to_goal(counts, self.algebra, max_depth=1) == -1


class TestTokenEconomyCalibrator:
    """Starting token multisets for the forge."""

    @pytest.mark.parametrize("seed", [0, 3, 11])
    def test_result_is_consistent(self, seed):
        op_id = f"cathedral_{seed}"
        calibrator = TokenEconomyCalibrator(op_id)
        result = calibrator.calibrate(random.Random(seed))

        tokens = list(result.start_state)
        counts = counts_of(tokens)
        assert len(tokens) == 6
        assert 7 not in tokens
        assert result.tier in ('search', 'relaxed', 'default')
        assert result.min_moves == shortest_steps_to_goal(counts, calibrator.algebra)
        if result.tier == 'search':
            assert result.min_moves >= 3
            assert not has_one_step_goal(counts, calibrator.algebra)

    def test_deterministic(self):
        a = calibrate_token_economy('cathedral_5', random.Random(5))
        b = calibrate_token_economy('cathedral_5', random.Random(5))
        assert a.start_state == b.start_state
        assert a.min_moves == b.min_moves

    def test_default_tier_when_search_is_impossible(self):
        calibrator = TokenEconomyCalibrator('cathedral_0', min_steps=99, attempts=0)
        result = calibrator.calibrate(random.Random(0))
        counts = counts_of(result.start_state)
        assert result.tier == 'default'
        assert len(result.start_state) == 6
        assert not has_one_step_goal(counts, calibrator.algebra)
        assert 2 <= result.min_moves <= 10
        assert result.min_moves == shortest_steps_to_goal(counts, calibrator.algebra)

    @pytest.mark.parametrize("op_id", [f'cathedral_{i}' for i in range(0, 64, 7)])
    def test_default_tier_is_solvable(self, op_id):
        calibrator = TokenEconomyCalibrator(op_id, attempts=0)
        counts = calibrator.safe_default()
        assert sum(counts) == 6
        assert not has_one_step_goal(counts, calibrator.algebra)
        assert 2 <= shortest_steps_to_goal(counts, calibrator.algebra) <= 10
        assert calibrator.safe_default() == counts
