"""
Graph Lights-Out Variant
========================

Lantern pads on a jittered grid, joined by zig-zag corridors. Each pad holds
a socket; pressing one toggles it and its graph neighbours. Lighting every
lantern fires the win trigger, which opens the gate to the reward pad where
the finale terminal waits.
"""

import logging
import random
from typing import List, Tuple

import networkx as nx

from arena_riddles.core.canvas import Canvas
from arena_riddles.core.config import LightsOutConfig
from arena_riddles.core.definitions import PUZZLE_TYPE_LIGHTS_OUT, TILESET_SOURCE, Variant
from arena_riddles.core.models import GateDescriptor, GeneratedMap
from arena_riddles.data.tmx_writer import render_map
from arena_riddles.evaluation.difficulty_calibrator import calibrate_lights_out
from arena_riddles.generation.corridor_carver import (
    paint_diamond_pad,
    paint_three_leg_corridor,
    paint_zigzag_corridor,
)
from arena_riddles.generation.cropper import crop_canvas
from arena_riddles.generation.puzzle_graph import (
    build_lights_out_graph,
    node_position,
    to_puzzle_nodes,
)
from arena_riddles.pipeline.objects import (
    finale_objects,
    gate_object,
    graph_socket_object,
    player_object,
    win_trigger_object,
)
from arena_riddles.utils.cipher import vigenere_encrypt
from arena_riddles.utils.graph_utils import neighbors_csv

logger = logging.getLogger(__name__)

REWARD_ID = "reward"


def ordered_edges(graph: nx.Graph) -> List[Tuple[str, str]]:
    """Edges as (lower index, higher index) pairs, sorted by index."""
    index = {node: i for i, node in enumerate(graph.nodes)}
    pairs = []
    for u, v in graph.edges:
        if index[u] > index[v]:
            u, v = v, u
        pairs.append((u, v))
    return sorted(pairs, key=lambda e: (index[e[0]], index[e[1]]))


def reward_gate(source_id: str, door_x: int, door_y: int,
                corridor_width: int, group: str) -> GateDescriptor:
    """Vertical gate band across the full painted corridor width."""
    half = corridor_width // 2
    return GateDescriptor(source_id, REWARD_ID, door_x, door_y - half, 1, 2 * half + 1,
                          None, 'left', group)


def route_to_reward(canvas: Canvas, start: Tuple[int, int], reward: Tuple[int, int],
                    corridor_width: int) -> None:
    """Deterministic three-leg route so the door position is stable."""
    (x0, y0), (x1, y1) = start, reward
    mid_x = max(min(x0, x1), min(max(x0, x1), (x0 + x1) // 2 + 8))
    paint_three_leg_corridor(canvas, x0, y0, x1, y1, mid_x, corridor_width)


def generate_lights_out(seed: int, config: LightsOutConfig = LightsOutConfig()) -> GeneratedMap:
    rng = random.Random(seed)
    width, height = config.canvas_width, config.canvas_height
    canvas = Canvas(width, height)

    graph = build_lights_out_graph(
        rng, config.grid_cols, config.grid_rows, config.excluded_cells,
        config.base, config.spacing, config.jitter, config.extra_edges)
    nodes = list(graph.nodes)

    for node in nodes:
        x, y = node_position(graph, node)
        paint_diamond_pad(canvas, x, y, config.pad_radius)
    for u, v in ordered_edges(graph):
        (x0, y0), (x1, y1) = node_position(graph, u), node_position(graph, v)
        paint_zigzag_corridor(canvas, x0, y0, x1, y1, config.corridor_width, rng, config.zigzag_jitter)

    start = config.start
    reward = (width - config.reward_inset[0], height - config.reward_inset[1])
    paint_diamond_pad(canvas, start[0], start[1], config.pad_radius + 1)
    paint_diamond_pad(canvas, reward[0], reward[1], config.pad_radius + 1)
    first = node_position(graph, nodes[0])
    paint_zigzag_corridor(canvas, start[0], start[1], first[0], first[1],
                          config.corridor_width, rng, config.zigzag_jitter)
    route_to_reward(canvas, node_position(graph, nodes[-1]), reward, config.corridor_width)

    door_x = max(1, min(width - 2, reward[0] - (config.pad_radius + 2)))
    door_y = max(1, min(height - 2, reward[1]))
    group = f"lantern_reward_{seed}"
    gate = reward_gate(nodes[-1], door_x, door_y, config.corridor_width, group)
    canvas.fill_floor(gate.x, gate.y, gate.width, gate.height)

    canvas.outline_walls_from_floor()
    canvas.stamp_gate(gate.x, gate.y, gate.width, gate.height)

    difficulty = calibrate_lights_out(graph, rng, config.press_probability)

    cropped, region = crop_canvas(canvas, config.crop_margin)
    dx, dy = region.translation
    for node in nodes:
        graph.nodes[node]['x'] += dx
        graph.nodes[node]['y'] += dy
    start = (start[0] + dx, start[1] + dy)
    reward = (reward[0] + dx, reward[1] + dy)
    gate = gate.translated(dx, dy)
    door_x, door_y = door_x + dx, door_y + dy

    objects = [player_object(*start)]
    for i, node in enumerate(nodes):
        x, y = node_position(graph, node)
        objects.append(graph_socket_object(x, y, PUZZLE_TYPE_LIGHTS_OUT, node,
                                           neighbors_csv(graph, node),
                                           on=difficulty.start_state[i]))
    objects.append(gate_object(gate, with_tile_id=True, name='gate'))
    objects.append(win_trigger_object(door_x - 2, door_y + 2, group, PUZZLE_TYPE_LIGHTS_OUT))
    objects.extend(finale_objects(
        door_id=f"lantern_finale_terminal_{seed}",
        puzzle_id=f"lantern_finale_puzzle_{seed}",
        door_pos=reward,
        terminal_pos=reward,
        ciphertext=vigenere_encrypt(config.finale_plaintext, config.finale_key),
        key=f"VIGENERE:{config.finale_key}",
        answer=config.finale_plaintext,
    ))

    document = render_map(cropped, objects, TILESET_SOURCE)
    logger.info(f"Lights-out seed {seed}: {len(nodes)} lanterns, "
                f"{difficulty.min_moves} presses, map {cropped.width}x{cropped.height}")
    return GeneratedMap(
        variant=Variant.LIGHTS_OUT.value,
        seed=seed,
        document=document,
        canvas=cropped,
        objects=objects,
        gates=[gate],
        puzzles=to_puzzle_nodes(graph, difficulty.start_state),
        difficulty=difficulty,
    )
