"""
Graph Utilities
===============

Small networkx helpers shared by the puzzle graph builder, the calibrator
and the validator. Puzzle graphs use string node ids and keep insertion
order, so every helper that lists nodes follows ``graph.nodes`` order.
"""

from typing import Dict, List

import networkx as nx


def count_triangles(graph: nx.Graph) -> int:
    """Number of distinct 3-cliques."""
    return sum(nx.triangles(graph).values()) // 3


def is_two_colorable(graph: nx.Graph) -> bool:
    return nx.is_bipartite(graph)


def ordered_neighbors(graph: nx.Graph, node: str) -> List[str]:
    """Neighbours of ``node`` in graph node order."""
    adjacent = set(graph.neighbors(node))
    return [n for n in graph.nodes if n in adjacent]


def neighbors_csv(graph: nx.Graph, node: str) -> str:
    return ','.join(ordered_neighbors(graph, node))


def adjacency_lists(graph: nx.Graph) -> Dict[str, List[str]]:
    return {node: ordered_neighbors(graph, node) for node in graph.nodes}


def closed_neighborhoods(graph: nx.Graph) -> List[List[int]]:
    """
    For node i (in node order), the indices of i and its neighbours. This is
    the toggle set of pressing node i in a lights-out puzzle.
    """
    index = {node: i for i, node in enumerate(graph.nodes)}
    return [
        [index[node]] + [index[n] for n in ordered_neighbors(graph, node)]
        for node in graph.nodes
    ]
