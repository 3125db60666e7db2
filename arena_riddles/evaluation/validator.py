"""
Map Validator
=============

Structural checks on generated maps.

Components:
1. Arena connectivity: arena graph built from open (unlocked) gates
2. Tile reachability: BFS over walkable tiles, gates passable unless locked
3. Coloring checks: triangle count and 2-colourability of a puzzle graph
4. Document checks: layer sizes, object bounds, required properties

Results are collected into a ValidationResult rather than raised, so the
CLI can report every issue at once.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

import networkx as nx
import numpy as np

from arena_riddles.core.canvas import Canvas
from arena_riddles.core.definitions import TILE_SIZE, ObjectType
from arena_riddles.core.models import Arena, GateDescriptor
from arena_riddles.data.tmx_loader import LoadedMap, parse_map
from arena_riddles.utils.graph_utils import count_triangles, is_two_colorable

logger = logging.getLogger(__name__)

GATE_ROUTE_KEYS = ('sourceArenaId', 'targetArenaId', 'traversalSymbol')


# ============================================================================
# DATA STRUCTURES
# ============================================================================

@dataclass
class ValidationResult:
    """Outcome of validating one map."""
    is_valid: bool = True
    issues: List[str] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    def fail(self, message: str) -> None:
        self.is_valid = False
        self.issues.append(message)

    def merge(self, other: 'ValidationResult') -> 'ValidationResult':
        for issue in other.issues:
            self.fail(issue)
        self.metrics.update(other.metrics)
        return self


# ============================================================================
# ARENA CONNECTIVITY
# ============================================================================

def arena_graph(arenas: Sequence[Arena], gates: Iterable[GateDescriptor]) -> nx.Graph:
    """Undirected graph of arenas joined by at least one unlocked gate."""
    graph = nx.Graph()
    graph.add_nodes_from(a.id for a in arenas)
    for g in gates:
        if not g.locked:
            graph.add_edge(g.source_arena_id, g.target_arena_id)
    return graph


def arenas_connected(arenas: Sequence[Arena], gates: Iterable[GateDescriptor]) -> bool:
    if not arenas:
        return True
    return nx.is_connected(arena_graph(arenas, gates))


# ============================================================================
# TILE REACHABILITY
# ============================================================================

def reachable_mask(canvas: Canvas, start: Tuple[int, int],
                   blocked_cells: Iterable[Tuple[int, int]] = ()) -> np.ndarray:
    """
    4-connected flood fill from ``start`` over walkable tiles. Gate tiles
    count as open; ``blocked_cells`` are treated as solid.
    """
    walkable = canvas.walkable_mask(gates_passable=True)
    for x, y in blocked_cells:
        if canvas.in_bounds(x, y):
            walkable[y, x] = False

    seen = np.zeros_like(walkable, dtype=bool)
    sx, sy = start
    if not canvas.in_bounds(sx, sy) or not walkable[sy, sx]:
        return seen

    h, w = walkable.shape
    seen[sy, sx] = True
    queue = deque([(sx, sy)])
    while queue:
        x, y = queue.popleft()
        for nx_, ny_ in ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)):
            if 0 <= nx_ < w and 0 <= ny_ < h and walkable[ny_, nx_] and not seen[ny_, nx_]:
                seen[ny_, nx_] = True
                queue.append((nx_, ny_))
    return seen


def locked_gate_cells(gates: Iterable[GateDescriptor]) -> Set[Tuple[int, int]]:
    cells: Set[Tuple[int, int]] = set()
    for g in gates:
        if g.locked:
            cells.update(g.cells())
    return cells


def reachable_arena_ids(canvas: Canvas, arenas: Sequence[Arena], start: Tuple[int, int],
                        blocked_cells: Iterable[Tuple[int, int]] = ()) -> Set[str]:
    """Arenas with at least one reachable interior tile."""
    seen = reachable_mask(canvas, start, blocked_cells)
    out = set()
    for arena in arenas:
        x0, y0, x1, y1 = arena.interior_bounds(1)
        if seen[max(0, y0):y1 + 1, max(0, x0):x1 + 1].any():
            out.add(arena.id)
    return out


# ============================================================================
# PUZZLE GRAPH CHECKS
# ============================================================================

def check_coloring_graph(graph: nx.Graph, expected_triangles: Optional[int] = 2) -> ValidationResult:
    result = ValidationResult()
    triangles = count_triangles(graph)
    result.metrics['triangles'] = triangles
    result.metrics['two_colorable'] = is_two_colorable(graph)
    if expected_triangles is not None and triangles != expected_triangles:
        result.fail(f"Coloring graph has {triangles} triangles, expected {expected_triangles}")
    if result.metrics['two_colorable']:
        result.fail("Coloring graph is 2-colourable; a third register is never needed")
    return result


# ============================================================================
# DOCUMENT CHECKS
# ============================================================================

def check_document(loaded: LoadedMap) -> ValidationResult:
    """Layer shapes, object bounds and required object properties."""
    result = ValidationResult()
    for name, layer in loaded.layers.items():
        if layer.shape != (loaded.height, loaded.width):
            result.fail(f"Layer '{name}' has shape {layer.shape}")

    max_x = loaded.width * TILE_SIZE
    max_y = loaded.height * TILE_SIZE
    for obj in loaded.objects:
        if obj.type is None:
            result.fail(f"Object {obj.id} '{obj.name}' has no type")
        if not (0 <= obj.x and obj.x + obj.width <= max_x and 0 <= obj.y and obj.y + obj.height <= max_y):
            result.fail(f"Object {obj.id} '{obj.name}' lies outside the map")
        if obj.type == ObjectType.GATE.value and 'group' not in obj.properties:
            missing = [k for k in GATE_ROUTE_KEYS if k not in obj.properties]
            if missing:
                result.fail(f"Gate {obj.id} '{obj.name}' is missing {missing}")

    result.metrics['objects'] = len(loaded.objects)
    result.metrics['puzzles'] = len(loaded.puzzles)
    return result


def validate_document(text: str) -> ValidationResult:
    try:
        loaded = parse_map(text)
    except ValueError as e:
        result = ValidationResult()
        result.fail(f"Document does not parse: {e}")
        return result
    return check_document(loaded)


def validate_generated(generated) -> ValidationResult:
    """
    Full check of a GeneratedMap: document structure, arena reachability
    for arena layouts and reachability of every socket from the player.
    """
    result = validate_document(generated.document)
    canvas = generated.canvas
    player = next((o for o in generated.objects if o.type == ObjectType.PLAYER.value), None)
    if player is None:
        result.fail("Map has no player")
        return result
    start = (int(player.x) // TILE_SIZE, int(player.y) // TILE_SIZE)

    if generated.arenas:
        reachable = reachable_arena_ids(canvas, generated.arenas, start,
                                        locked_gate_cells(generated.gates))
        unlocked_targets = {a.id for a in generated.arenas} - _locked_only_arenas(generated)
        unreached = sorted(unlocked_targets - reachable)
        if unreached:
            result.fail(f"Arenas unreachable from the player: {unreached}")
        result.metrics['reachable_arenas'] = len(reachable)

    seen = reachable_mask(canvas, start, locked_gate_cells(generated.gates))
    for obj in generated.objects:
        if obj.type != ObjectType.SOCKET.value:
            continue
        tx, ty = int(obj.x) // TILE_SIZE, int(obj.y) // TILE_SIZE
        if not seen[ty, tx]:
            result.fail(f"Socket '{obj.name}' at ({tx}, {ty}) is unreachable")

    if result.is_valid:
        logger.info(f"{generated.variant} seed {generated.seed}: valid")
    else:
        logger.warning(f"{generated.variant} seed {generated.seed}: {len(result.issues)} issues")
    return result


def _locked_only_arenas(generated) -> Set[str]:
    """Arenas reachable only through a connection that has a locked barrier."""
    ids = {a.id for a in generated.arenas}
    graph = arena_graph(generated.arenas, generated.gates)
    for g in generated.gates:
        if g.locked and graph.has_edge(g.source_arena_id, g.target_arena_id):
            graph.remove_edge(g.source_arena_id, g.target_arena_id)
    start_id = generated.arenas[0].id
    return ids - nx.node_connected_component(graph, start_id)
