"""
Traversal Arena Variant
=======================

Randomly laid out arenas joined by two-lane corridors, with roaming enemies
and a hidden cipher finale in the last arena.

Pipeline:
    plan layout -> stamp arenas -> carve corridors -> roll enemies
    -> crop -> emit objects
"""

import logging
import random
from typing import List, Tuple

from arena_riddles.core.canvas import Canvas
from arena_riddles.core.config import TraversalConfig
from arena_riddles.core.definitions import TILESET_SOURCE, Variant
from arena_riddles.core.models import Arena, GeneratedMap, PlacedObject
from arena_riddles.data.tmx_writer import render_map
from arena_riddles.generation.arena_layout import ArenaLayoutPlanner
from arena_riddles.generation.corridor_carver import (
    CorridorCarver,
    CorridorProfile,
    doorway_clearance_rects,
)
from arena_riddles.generation.cropper import crop_canvas
from arena_riddles.generation.spawner import EnemySpawner
from arena_riddles.pipeline.objects import (
    arena_bounds_object,
    enemy_object,
    finale_objects,
    gate_object,
    player_object,
)
from arena_riddles.utils.cipher import caesar_encrypt

logger = logging.getLogger(__name__)

FINALE_DOOR_ID = "finale_door"
FINALE_PROMPT = "Finale: decrypt the message. Enter the plaintext (letters/numbers only)."


def roll_enemy_count(rng: random.Random, arena_index: int) -> int:
    """The start arena stays empty; elsewhere most arenas get one or two."""
    if arena_index == 0:
        return 0
    roll = rng.randrange(100)
    if roll < 40:
        return 0
    if roll < 75:
        return 1
    if roll < 90:
        return 2
    return 3 + rng.randint(0, 1)


def canvas_size(config: TraversalConfig) -> Tuple[int, int]:
    width = 2 * config.border + (config.grid_cols - 1) * config.spacing_x + config.arena_width
    height = 2 * config.border + (config.grid_rows - 1) * config.spacing_y + config.arena_height
    return width, height


def generate_traversal(seed: int, config: TraversalConfig = TraversalConfig()) -> GeneratedMap:
    rng = random.Random(seed)

    planner = ArenaLayoutPlanner(
        config.grid_cols, config.grid_rows,
        config.arena_width, config.arena_height,
        config.spacing_x, config.spacing_y,
        offset_x=config.border, offset_y=config.border,
    )
    arenas = planner.plan(config.arena_count, rng)
    if not arenas:
        raise ValueError("Traversal layout needs at least one arena")

    width, height = canvas_size(config)
    canvas = Canvas(width, height, with_symbols=True)
    carver = CorridorCarver(CorridorProfile(
        config.lane_width, config.separator_width, config.side_wall_width))

    for arena in arenas:
        carver.stamp_arena(canvas, arena)
    gates = []
    for a, b in planner.adjacent_pairs(arenas):
        gates.extend(carver.carve(canvas, a, b))

    enemy_counts = [roll_enemy_count(rng, a.index) for a in arenas]
    clearance = doorway_clearance_rects(gates, config.door_clearance_depth)
    spawner = EnemySpawner(inset=2, attempts=config.enemy_attempts)
    enemies = []
    for arena, count in zip(arenas, enemy_counts):
        for x, y in spawner.spawn(canvas, arena, count, rng, clearance.get(arena.id, ())):
            enemies.append((x, y, arena.id))

    cropped, region = crop_canvas(canvas, config.crop_margin)
    dx, dy = region.translation
    arenas = [a.translated(dx, dy) for a in arenas]
    gates = [g.translated(dx, dy) for g in gates]
    enemies = [(x + dx, y + dy, arena_id) for x, y, arena_id in enemies]

    objects = _build_objects(seed, config, arenas, gates, enemies)
    document = render_map(
        cropped, objects, TILESET_SOURCE,
        tiled_version=config.tiled_version,
        next_layer_id=config.next_layer_id,
        next_object_id=config.next_object_id,
    )
    logger.info(f"Traversal seed {seed}: {len(arenas)} arenas, {len(gates)} gates, "
                f"{len(enemies)} enemies, map {cropped.width}x{cropped.height}")
    return GeneratedMap(
        variant=Variant.TRAVERSAL.value,
        seed=seed,
        document=document,
        canvas=cropped,
        objects=objects,
        arenas=arenas,
        gates=gates,
    )


def _build_objects(seed: int, config: TraversalConfig, arenas: List[Arena], gates,
                   enemies) -> List[PlacedObject]:
    start = arenas[0]
    objects = [player_object(start.center_x, start.center_y)]
    objects.extend(arena_bounds_object(a, is_start=a.index == 0) for a in arenas)
    objects.extend(enemy_object(x, y, arena_id) for x, y, arena_id in enemies)
    objects.extend(gate_object(g) for g in gates)

    end = arenas[-1]
    shift = config.finale_shift
    objects.extend(finale_objects(
        door_id=FINALE_DOOR_ID,
        puzzle_id=f"finale_cipher_{seed}",
        door_pos=(end.center_x, end.center_y),
        terminal_pos=(end.center_x, end.center_y + 1),
        ciphertext=caesar_encrypt(config.finale_plaintext, shift),
        key=f"CAESAR+{shift}",
        answer=config.finale_plaintext,
        hint=f"Shift each letter {shift} back (Caesar).",
        prompt=FINALE_PROMPT,
        allow_hidden_door=False,
    ))
    return objects
