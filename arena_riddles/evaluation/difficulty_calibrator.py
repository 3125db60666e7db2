"""
Difficulty Calibrator
=====================

Chooses puzzle starting states with a known distance to a solved state.

Lights-out (network toggle)
    Start from the solved state (every node on) and apply a random set of
    presses. Pressing toggles a node and its neighbours, and presses commute
    and cancel in pairs, so replaying the same presses on the start state
    returns to all-on. The puzzle is solvable by construction and the press
    count bounds the optimal solution length.

Token economy (algebra forge)
    Tokens combine pairwise under a hidden group operation: the dihedral
    group of order 8, relabelled through a permutation derived from the
    operation id. A starting multiset is good when the goal token cannot be
    crafted in one step but can be within ``max_depth`` steps. Random
    multisets are sampled and scored by BFS over packed count vectors.
"""

import itertools
import logging
import random
import zlib
from collections import deque
from typing import Dict, List, Optional, Sequence, Tuple

import networkx as nx
import numpy as np

from arena_riddles.core.models import DifficultyResult
from arena_riddles.generation.puzzle_graph import TokenCatalog
from arena_riddles.utils.graph_utils import closed_neighborhoods

logger = logging.getLogger(__name__)

KIND_COUNT = 8
COUNT_BITS = 4
COUNT_MAX = (1 << COUNT_BITS) - 1
DEFAULT_TOKENS: Tuple[int, ...] = (0, 1, 0, 1, 2, 3)


# ==========================================
# LIGHTS-OUT
# ==========================================

def apply_presses(graph: nx.Graph, state: Sequence[bool], presses: Sequence[bool]) -> Tuple[bool, ...]:
    """XOR the closed neighbourhood of every pressed node into ``state``."""
    if len(state) != graph.number_of_nodes() or len(presses) != graph.number_of_nodes():
        raise ValueError("State and presses must have one entry per graph node")
    out = list(state)
    for i, group in enumerate(closed_neighborhoods(graph)):
        if presses[i]:
            for j in group:
                out[j] = not out[j]
    return tuple(out)


def calibrate_lights_out(graph: nx.Graph, rng: random.Random,
                         press_probability: float = 0.55) -> DifficultyResult:
    presses = tuple(rng.random() < press_probability for _ in graph.nodes)
    solved = tuple(True for _ in graph.nodes)
    start = apply_presses(graph, solved, presses)
    moves = sum(presses)
    if moves == 0:
        logger.warning("Lights-out calibration drew no presses; start state is already solved")
    logger.info(f"Lights-out start: {sum(start)}/{len(start)} on, {moves} presses")
    return DifficultyResult(start_state=start, min_moves=moves, presses=presses, tier='presses')


# ==========================================
# HIDDEN ALGEBRA
# ==========================================

def permutation_for(op_id: Optional[str]) -> List[int]:
    """
    Deterministic relabelling of the 8 group elements for an operation id.

    The seed comes from CRC32, so it is stable across interpreter runs
    (unlike ``hash``).
    """
    seed = 0xC0FFEE if op_id is None else zlib.crc32(op_id.encode('utf-8')) ^ 0x9E3779B9
    perm = list(range(KIND_COUNT))
    random.Random(seed).shuffle(perm)
    return perm


class HiddenAlgebra:
    """
    Token product table for one operation id.

    Token kind ``g`` stands for group element ``perm[g]``. Elements 0-3 are
    rotations r^k, elements 4-7 are reflections s*r^k.
    """

    def __init__(self, perm: Sequence[int]):
        if sorted(perm) != list(range(KIND_COUNT)):
            raise ValueError(f"Not a permutation of 0..{KIND_COUNT - 1}: {list(perm)}")
        self.perm = list(perm)
        self.inverse = [0] * KIND_COUNT
        for kind, element in enumerate(self.perm):
            self.inverse[element] = kind

        self.table = np.zeros((KIND_COUNT, KIND_COUNT), dtype=np.int8)
        for a in range(KIND_COUNT):
            for b in range(KIND_COUNT):
                self.table[a, b] = self._multiply(a, b)
        # plain nested lists are much faster to index from the BFS loop
        self._rows: List[List[int]] = self.table.tolist()

    @classmethod
    def for_operation(cls, op_id: Optional[str]) -> 'HiddenAlgebra':
        return cls(permutation_for(op_id))

    def _multiply(self, a: int, b: int) -> int:
        ea, eb = self.perm[a], self.perm[b]
        a_k, a_f = ea % 4, ea // 4
        b_k, b_f = eb % 4, eb // 4
        sign = 1 if a_f == 0 else -1
        k = (a_k + sign * b_k) % 4
        f = a_f ^ b_f
        return self.inverse[f * 4 + k]

    def multiply(self, a: int, b: int) -> int:
        return self._rows[a][b]


# ==========================================
# PACKED COUNTS
# ==========================================

def pack_counts(counts: Sequence[int]) -> int:
    """Eight 4-bit fields, kind 0 in the lowest bits; counts clamp to 0..15."""
    packed = 0
    for i in range(KIND_COUNT):
        c = max(0, min(COUNT_MAX, counts[i]))
        packed |= c << (i * COUNT_BITS)
    return packed


def unpack_counts(packed: int) -> List[int]:
    return [(packed >> (i * COUNT_BITS)) & COUNT_MAX for i in range(KIND_COUNT)]


def counts_of(tokens: Sequence[int]) -> List[int]:
    counts = [0] * KIND_COUNT
    for kind in tokens:
        counts[kind] += 1
    return counts


def _combinations(counts: Sequence[int]):
    """Ordered (a, b) token pairs available in ``counts``."""
    for a in range(KIND_COUNT):
        if counts[a] <= 0:
            continue
        for b in range(KIND_COUNT):
            need = 2 if a == b else 1
            if counts[b] >= need:
                yield a, b


def has_one_step_goal(counts: Sequence[int], algebra: HiddenAlgebra, goal: int = 7) -> bool:
    return any(algebra.multiply(a, b) == goal for a, b in _combinations(counts))


def shortest_steps_to_goal(counts: Sequence[int], algebra: HiddenAlgebra,
                           goal: int = 7, max_depth: int = 10) -> int:
    """
    Fewest combine steps until a ``goal`` token exists, or -1.

    Each step consumes two tokens and yields their product.
    """
    start = pack_counts(counts)
    queue = deque([(start, 0)])
    seen = {start}
    while queue:
        packed, depth = queue.popleft()
        current = unpack_counts(packed)
        if current[goal] > 0:
            return depth
        if depth >= max_depth or sum(current) < 2:
            continue
        for a, b in _combinations(current):
            nxt = list(current)
            nxt[a] -= 1
            nxt[b] -= 1
            nxt[algebra.multiply(a, b)] += 1
            np_ = pack_counts(nxt)
            if np_ not in seen:
                seen.add(np_)
                queue.append((np_, depth + 1))
    return -1


# ==========================================
# TOKEN ECONOMY CALIBRATION
# ==========================================

class TokenEconomyCalibrator:
    """
    Samples starting token multisets for one operation id.

    Tiers, tried in order:
        search  - hardest roll with at least ``min_steps`` steps
        relaxed - first roll with at least 2 steps
        default - first safe multiset in a fixed enumeration order
    """

    def __init__(self, op_id: str, catalog: TokenCatalog = TokenCatalog(),
                 token_count: int = 6, min_steps: int = 3,
                 attempts: int = 6000, max_depth: int = 10):
        self.op_id = op_id
        self.catalog = catalog
        self.algebra = HiddenAlgebra.for_operation(op_id)
        self.token_count = token_count
        self.min_steps = min_steps
        self.attempts = attempts
        self.max_depth = max_depth
        self._steps_cache: Dict[int, int] = {}

    def _roll(self, rng: random.Random) -> Tuple[List[int], int]:
        counts = [0] * KIND_COUNT
        candidates = self.catalog.candidate_kinds
        for _ in range(self.token_count):
            counts[candidates[rng.randrange(len(candidates))]] += 1
        distinct = sum(1 for c in counts if c > 0)
        return counts, distinct

    def steps(self, counts: Sequence[int]) -> int:
        key = pack_counts(counts)
        if key not in self._steps_cache:
            self._steps_cache[key] = shortest_steps_to_goal(
                counts, self.algebra, self.catalog.goal_kind, self.max_depth)
        return self._steps_cache[key]

    def _acceptable(self, counts: Sequence[int], distinct: int) -> int:
        """Step count of a usable roll, or -1."""
        if distinct < 3:
            return -1
        if has_one_step_goal(counts, self.algebra, self.catalog.goal_kind):
            return -1
        return self.steps(counts)

    def calibrate(self, rng: random.Random) -> DifficultyResult:
        best: Optional[List[int]] = None
        best_steps = -1
        for t in range(self.attempts):
            counts, distinct = self._roll(rng)
            steps = self._acceptable(counts, distinct)
            if steps < self.min_steps:
                continue
            if steps > best_steps:
                best_steps = steps
                best = counts
            if best_steps >= max(self.min_steps, 4) and t > self.attempts // 2:
                break

        if best is not None:
            return self._result(best, best_steps, 'search')

        for _ in range(self.attempts):
            counts, distinct = self._roll(rng)
            steps = self._acceptable(counts, distinct)
            if steps >= 2:
                return self._result(counts, steps, 'relaxed')

        counts = self.safe_default()
        return self._result(counts, self.steps(counts), 'default')

    def safe_default(self) -> List[int]:
        """
        First multiset over the candidate kinds, in combination order, whose
        goal is not one step away but is reachable within ``max_depth``.
        """
        for combo in itertools.combinations_with_replacement(self.catalog.candidate_kinds,
                                                             self.token_count):
            counts = counts_of(combo)
            if has_one_step_goal(counts, self.algebra, self.catalog.goal_kind):
                continue
            if 2 <= self.steps(counts) <= self.max_depth:
                return counts
        logger.warning(f"No safe token multiset for {self.op_id}, using {DEFAULT_TOKENS}")
        return counts_of(DEFAULT_TOKENS)

    def _result(self, counts: List[int], steps: int, tier: str) -> DifficultyResult:
        tokens = [kind for kind in range(KIND_COUNT) for _ in range(counts[kind])]
        random.Random(pack_counts(counts) ^ 0xBADC0DE).shuffle(tokens)
        logger.info(f"Token economy for {self.op_id}: tier={tier}, steps={steps}, tokens={tokens}")
        return DifficultyResult(start_state=tuple(tokens), min_moves=steps, tier=tier)


def calibrate_token_economy(op_id: str, rng: random.Random, token_count: int = 6,
                            min_steps: int = 3, attempts: int = 6000,
                            max_depth: int = 10) -> DifficultyResult:
    calibrator = TokenEconomyCalibrator(op_id, token_count=token_count, min_steps=min_steps,
                                        attempts=attempts, max_depth=max_depth)
    return calibrator.calibrate(rng)
