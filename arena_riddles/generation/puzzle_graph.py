"""
Puzzle Graph Builder
====================

Builds the abstract puzzle graphs and places their nodes on the canvas.

Three families are supported:

- Coloring: a ring of ``node_count`` vertices plus chords. Each chord that
  skips exactly one vertex closes a triangle, so the default ring of ten
  with chords 0-2 and 5-7 has two triangles and needs three colours.
- Network toggle (lights-out): a jittered grid of pads with some cells
  excluded, grid edges between included neighbours and a few extra local
  edges.
- Token economy: a catalog of token kinds with one goal kind that is never
  handed out directly.

Graphs are ``networkx.Graph`` objects keyed by string node ids with an
``index`` attribute and an embedding position (``x``, ``y``) in tiles.
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import networkx as nx

from arena_riddles.core.canvas import Canvas
from arena_riddles.core.models import Arena, PuzzleNode
from arena_riddles.utils.graph_utils import neighbors_csv, ordered_neighbors

logger = logging.getLogger(__name__)

Bounds = Tuple[int, int, int, int]


# ==========================================
# COLORING RING
# ==========================================

def build_coloring_graph(node_count: int = 10,
                         chords: Sequence[Tuple[int, int]] = ((0, 2), (5, 7)),
                         id_prefix: str = 'var_') -> nx.Graph:
    """Cycle over ``node_count`` nodes plus chord edges (by node index)."""
    if node_count < 3:
        raise ValueError(f"A ring needs at least 3 nodes, got {node_count}")
    graph = nx.Graph()
    for i in range(node_count):
        graph.add_node(f"{id_prefix}{i}", index=i)
    for i in range(node_count):
        graph.add_edge(f"{id_prefix}{i}", f"{id_prefix}{(i + 1) % node_count}")
    for a, b in chords:
        graph.add_edge(f"{id_prefix}{a}", f"{id_prefix}{b}")
    return graph


def ring_positions(center: Tuple[int, int], radius: int, count: int) -> List[Tuple[int, int]]:
    cx, cy = center
    positions = []
    for i in range(count):
        angle = 2.0 * math.pi * i / count
        positions.append((cx + int(round(radius * math.cos(angle))),
                          cy + int(round(radius * math.sin(angle)))))
    return positions


# ==========================================
# LIGHTS-OUT GRID
# ==========================================

def build_lights_out_graph(
    rng: random.Random,
    cols: int = 4,
    rows: int = 4,
    excluded: Sequence[int] = (0, 15),
    base: Tuple[int, int] = (55, 42),
    spacing: Tuple[int, int] = (38, 34),
    jitter: int = 3,
    extra_edges: Sequence[Tuple[int, int]] = ((0, 4), (2, 7), (5, 9), (8, 11), (10, 13)),
    id_prefix: str = 'lantern_',
) -> nx.Graph:
    """
    One node per included grid cell, numbered in row-major cell order, with a
    jittered embedding. Extra edges refer to node indices, not cell indices.
    """
    cells = [c for c in range(cols * rows) if c not in set(excluded)]
    node_of_cell = {cell: i for i, cell in enumerate(cells)}

    graph = nx.Graph()
    for i, cell in enumerate(cells):
        col, row = cell % cols, cell // cols
        x = base[0] + col * spacing[0] + rng.randint(-jitter, jitter)
        y = base[1] + row * spacing[1] + rng.randint(-jitter, jitter)
        graph.add_node(f"{id_prefix}{i}", index=i, cell=cell, x=x, y=y)

    for cell in cells:
        col, row = cell % cols, cell // cols
        here = f"{id_prefix}{node_of_cell[cell]}"
        if col + 1 < cols and cell + 1 in node_of_cell:
            graph.add_edge(here, f"{id_prefix}{node_of_cell[cell + 1]}")
        if row + 1 < rows and cell + cols in node_of_cell:
            graph.add_edge(here, f"{id_prefix}{node_of_cell[cell + cols]}")

    for a, b in extra_edges:
        if a >= len(cells) or b >= len(cells):
            raise ValueError(f"Extra edge ({a}, {b}) refers to a missing node")
        graph.add_edge(f"{id_prefix}{a}", f"{id_prefix}{b}")

    logger.debug(f"Lights-out graph: {graph.number_of_nodes()} nodes, "
                 f"{graph.number_of_edges()} edges")
    return graph


def node_position(graph: nx.Graph, node: str) -> Tuple[int, int]:
    data = graph.nodes[node]
    return data['x'], data['y']


def to_puzzle_nodes(graph: nx.Graph, states: Optional[Sequence] = None) -> List[PuzzleNode]:
    """Freeze graph nodes (in node order) into PuzzleNode records."""
    nodes = []
    for i, node in enumerate(graph.nodes):
        data = graph.nodes[node]
        nodes.append(PuzzleNode(
            id=node,
            index=data.get('index', i),
            embed_x=data.get('x', 0),
            embed_y=data.get('y', 0),
            neighbor_ids=frozenset(ordered_neighbors(graph, node)),
            state=None if states is None else states[i],
        ))
    return nodes


# ==========================================
# TOKEN CATALOG
# ==========================================

@dataclass(frozen=True)
class TokenCatalog:
    """Token kinds of the forge economy; the goal kind is only ever crafted."""
    kind_count: int = 8
    goal_kind: int = 7
    candidate_kinds: Tuple[int, ...] = (0, 1, 2, 3, 4, 5)

    @staticmethod
    def token_id(kind: int) -> str:
        return f"glyph_{kind}"

    @property
    def goal_token_id(self) -> str:
        return self.token_id(self.goal_kind)


# ==========================================
# NODE EMBEDDING
# ==========================================

def find_clear_spot(canvas: Canvas, x: int, y: int, radius: int,
                    bounds: Optional[Bounds] = None) -> Tuple[int, int]:
    """
    Nearest cell with plus clearance to (x, y), searched over concentric
    square rings out to ``radius``. Falls back to the clamped request.

    ``bounds`` is an inclusive (x0, y0, x1, y1) box; it defaults to the
    canvas minus its border.
    """
    x0, y0, x1, y1 = bounds if bounds is not None else (1, 1, canvas.width - 2, canvas.height - 2)
    cx = max(x0, min(x1, x))
    cy = max(y0, min(y1, y))
    if canvas.has_plus_clearance(cx, cy):
        return cx, cy

    for r in range(1, radius + 1):
        for dy in range(-r, r + 1):
            for dx in range(-r, r + 1):
                if max(abs(dx), abs(dy)) != r:
                    continue
                nx_, ny_ = cx + dx, cy + dy
                if not (x0 <= nx_ <= x1 and y0 <= ny_ <= y1):
                    continue
                if canvas.has_plus_clearance(nx_, ny_):
                    return nx_, ny_

    logger.debug(f"No clear spot within {radius} of ({x}, {y}); using ({cx}, {cy})")
    return cx, cy


def find_clear_spot_in_arena(canvas: Canvas, arena: Arena, x: int, y: int,
                             radius: int = 8, inset: int = 3) -> Tuple[int, int]:
    return find_clear_spot(canvas, x, y, radius, arena.interior_bounds(inset))


def embed_nodes(canvas: Canvas, graph: nx.Graph, radius: int = 4) -> None:
    """Snap every node's (x, y) attribute to the nearest clear cell."""
    for node in graph.nodes:
        data = graph.nodes[node]
        data['x'], data['y'] = find_clear_spot(canvas, data['x'], data['y'], radius)


__all__ = [
    'build_coloring_graph',
    'ring_positions',
    'build_lights_out_graph',
    'node_position',
    'to_puzzle_nodes',
    'neighbors_csv',
    'TokenCatalog',
    'find_clear_spot',
    'find_clear_spot_in_arena',
    'embed_nodes',
]
