"""
Register Allocation Variant
===========================

Ten variable arenas sit on a ring; corridors follow the interference graph
(ring plus two chords). The player assigns a register (colour) at each
socket so neighbours differ. The chords close triangles, so two registers
never suffice and the player has to discover the third.
"""

import logging
import random

from arena_riddles.core.canvas import Canvas
from arena_riddles.core.config import RegisterAllocationConfig
from arena_riddles.core.definitions import PUZZLE_TYPE_REGISTER, TILESET_SOURCE, Variant
from arena_riddles.core.models import Arena, GeneratedMap
from arena_riddles.data.tmx_writer import render_map
from arena_riddles.evaluation.validator import check_coloring_graph
from arena_riddles.generation.corridor_carver import paint_arena_floor, paint_l_corridor
from arena_riddles.generation.cropper import crop_canvas
from arena_riddles.generation.puzzle_graph import (
    build_coloring_graph,
    ring_positions,
    to_puzzle_nodes,
)
from arena_riddles.pipeline.lights_out import ordered_edges, reward_gate, route_to_reward
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


def make_odd(value: int) -> int:
    return value if value % 2 else value + 1


def centered_arena(arena_id: str, index: int, cx: int, cy: int, w: int, h: int) -> Arena:
    return Arena(arena_id, index, 0, 0, cx - w // 2, cy - h // 2, w, h)


def _roll_arena(rng: random.Random, config: RegisterAllocationConfig, arena_id: str,
                index: int, cx: int, cy: int) -> Arena:
    w = make_odd(rng.randint(config.arena_min_w, config.arena_max_w))
    h = make_odd(rng.randint(config.arena_min_h, config.arena_max_h))
    return centered_arena(arena_id, index, cx, cy, w, h)


def generate_register_allocation(seed: int,
                                 config: RegisterAllocationConfig = RegisterAllocationConfig()) -> GeneratedMap:
    rng = random.Random(seed)
    width, height = config.canvas_width, config.canvas_height
    canvas = Canvas(width, height)
    cx, cy = width // 2, height // 2
    radius = config.ring_radius

    graph = build_coloring_graph(config.node_count, config.chords)
    nodes = list(graph.nodes)
    arenas = []
    for i, (x, y) in enumerate(ring_positions((cx, cy), radius, config.node_count)):
        arenas.append(_roll_arena(rng, config, nodes[i], i, x, y))
        graph.nodes[nodes[i]]['x'] = x
        graph.nodes[nodes[i]]['y'] = y

    for arena in arenas:
        paint_arena_floor(canvas, arena)
    for u, v in ordered_edges(graph):
        a, b = arenas[graph.nodes[u]['index']], arenas[graph.nodes[v]['index']]
        paint_l_corridor(canvas, a.center_x, a.center_y, b.center_x, b.center_y,
                         config.corridor_width, rng)

    start = _roll_arena(rng, config, 'start', config.node_count,
                        cx - radius - config.outer_offset, cy + config.outer_dy)
    reward = _roll_arena(rng, config, 'reward', config.node_count + 1,
                         cx + radius + config.outer_offset, cy + config.outer_dy)
    paint_arena_floor(canvas, start)
    paint_arena_floor(canvas, reward)

    first = arenas[0]
    paint_l_corridor(canvas, start.center_x, start.center_y, first.center_x, first.center_y,
                     config.corridor_width, rng)
    gated = arenas[config.reward_node]
    route_to_reward(canvas, (gated.center_x, gated.center_y),
                    (reward.center_x, reward.center_y), config.corridor_width)

    door_x = max(1, min(width - 2, reward.center_x - (max(1, reward.width // 2) + 2)))
    door_y = max(1, min(height - 2, reward.center_y))
    group = f"register_reward_{seed}"
    gate = reward_gate(gated.id, door_x, door_y, config.corridor_width, group)
    canvas.fill_floor(gate.x, gate.y, gate.width, gate.height)

    canvas.outline_walls_from_floor()
    canvas.stamp_gate(gate.x, gate.y, gate.width, gate.height)

    check = check_coloring_graph(graph)
    if not check.is_valid:
        logger.warning(f"Register graph for seed {seed}: {check.issues}")

    cropped, region = crop_canvas(canvas, config.crop_margin)
    dx, dy = region.translation
    for node in nodes:
        graph.nodes[node]['x'] += dx
        graph.nodes[node]['y'] += dy
    start = start.translated(dx, dy)
    reward = reward.translated(dx, dy)
    gate = gate.translated(dx, dy)
    door_x, door_y = door_x + dx, door_y + dy

    objects = [player_object(start.center_x, start.center_y)]
    for node in nodes:
        data = graph.nodes[node]
        objects.append(graph_socket_object(data['x'], data['y'], PUZZLE_TYPE_REGISTER, node,
                                           neighbors_csv(graph, node)))
    objects.append(gate_object(gate, with_tile_id=True, name='gate'))
    objects.append(win_trigger_object(door_x - 2, door_y + 2, group, PUZZLE_TYPE_REGISTER))
    objects.extend(finale_objects(
        door_id=f"register_finale_terminal_{seed}",
        puzzle_id=f"register_finale_puzzle_{seed}",
        door_pos=(reward.center_x, reward.center_y),
        terminal_pos=(reward.center_x, reward.center_y),
        ciphertext=vigenere_encrypt(config.finale_plaintext, config.finale_key),
        key=f"VIGENERE:{config.finale_key}",
        answer=config.finale_plaintext,
    ))

    document = render_map(cropped, objects, TILESET_SOURCE)
    logger.info(f"Register allocation seed {seed}: {len(nodes)} variables, "
                f"{check.metrics['triangles']} triangles, map {cropped.width}x{cropped.height}")
    return GeneratedMap(
        variant=Variant.REGISTER_ALLOCATION.value,
        seed=seed,
        document=document,
        canvas=cropped,
        objects=objects,
        gates=[gate],
        puzzles=to_puzzle_nodes(graph),
    )
