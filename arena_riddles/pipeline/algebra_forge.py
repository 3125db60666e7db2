"""
Algebra Forge Variant
=====================

Seven fixed arenas. Tokens (glyphs) combine pairwise at forge terminals
under a hidden group operation; oracle terminals answer a limited number of
"what is a * b" queries. The vault opens only when the goal glyph is
crafted and placed in the socket on the vault approach.

Layout (interior origins, 28x18 interiors):

    arena_0 (start) -- arena_1 -- arena_2
       |                 |           |
    arena_3 -------- arena_4 (lab) - arena_5
                                     :  dogleg, locked
                           arena_6 (vault)
"""

import logging
import random
from typing import Dict, List, Tuple

from arena_riddles.core.canvas import Canvas
from arena_riddles.core.config import AlgebraForgeConfig
from arena_riddles.core.definitions import TILESET_SOURCE, Variant
from arena_riddles.core.models import Arena, GateDescriptor, GeneratedMap, PlacedObject
from arena_riddles.data.tmx_writer import render_map
from arena_riddles.evaluation.difficulty_calibrator import TokenEconomyCalibrator
from arena_riddles.generation.corridor_carver import CorridorCarver, CorridorProfile
from arena_riddles.generation.cropper import crop_canvas
from arena_riddles.generation.puzzle_graph import (
    TokenCatalog,
    find_clear_spot,
    find_clear_spot_in_arena,
)
from arena_riddles.generation.spawner import EnemySpawner, place_pillars
from arena_riddles.pipeline.objects import (
    algebra_terminal_object,
    arena_bounds_object,
    enemy_object,
    finale_objects,
    gate_object,
    player_object,
    token_object,
    token_socket_object,
)
from arena_riddles.utils.cipher import vigenere_encrypt

logger = logging.getLogger(__name__)

START, A1, A2, A3, LAB, A5, VAULT = range(7)

STRAIGHT_CONNECTIONS: Tuple[Tuple[int, int], ...] = (
    (START, A1), (A1, A2), (START, A3), (A1, LAB), (A2, A5), (A3, LAB), (LAB, A5),
)

PILLAR_COUNTS: Dict[int, int] = {A1: 3, A2: 3, A3: 3, LAB: 4, A5: 3, VAULT: 2}

# (arena, dx, dy) from the arena centre, one per starting token
TOKEN_SPOTS: Tuple[Tuple[int, int, int], ...] = (
    (START, 2, 1), (START, 2, -1), (A1, -3, 2), (A2, 3, 2), (LAB, -4, 0), (A3, 4, 0),
)

# (arena, dx, dy, terminal type, oracle charges)
TERMINAL_SPOTS: Tuple[Tuple[int, int, int, str, int], ...] = (
    (START, -4, 3, 'oracle', 5),
    (A1, 0, -4, 'oracle', 6),
    (LAB, -4, 3, 'forge', 0),
    (LAB, 4, 3, 'forge', 0),
    (LAB, 0, -4, 'oracle', 12),
    (A3, 0, 4, 'forge', 0),
    (A3, 0, -4, 'oracle', 8),
)


def build_arenas(config: AlgebraForgeConfig) -> List[Arena]:
    """Footprints one tile outside each configured interior origin."""
    w = config.arena_interior_w + 2
    h = config.arena_interior_h + 2
    arenas = []
    for i, (x, y) in enumerate(config.arena_origins):
        grid_x, grid_y = (i % 3, i // 3) if i < VAULT else (2, 2)
        arenas.append(Arena(f"arena_{i}", i, grid_x, grid_y, x - 1, y - 1, w, h))
    return arenas


def roll_enemy_count(rng: random.Random, arena_index: int) -> int:
    if arena_index == START:
        return 0
    if arena_index == VAULT:
        return 0 if rng.randrange(100) < 60 else 1
    roll = rng.randrange(100)
    if roll < 35:
        return 0
    if roll < 75:
        return 1
    return 2


def generate_algebra_forge(seed: int, config: AlgebraForgeConfig = AlgebraForgeConfig()) -> GeneratedMap:
    rng = random.Random(seed ^ config.rng_salt)
    canvas = Canvas(config.canvas_width, config.canvas_height)
    arenas = build_arenas(config)
    carver = CorridorCarver(CorridorProfile(
        config.lane_width, config.separator_width, config.side_wall_width))

    for arena in arenas:
        carver.stamp_arena(canvas, arena)
    gates: List[GateDescriptor] = []
    for a, b in STRAIGHT_CONNECTIONS:
        gates.extend(carver.carve(canvas, arenas[a], arenas[b]))
    group = f"algebra_vault_{seed}"
    gates.extend(carver.carve_dogleg(canvas, arenas[A5], arenas[VAULT], group))

    for index, count in PILLAR_COUNTS.items():
        place_pillars(canvas, arenas[index], count, rng, gates, config.door_clearance)

    vault = arenas[VAULT]
    socket = _vault_socket_spot(canvas, carver.profile, vault)

    enemies = []
    spawner = EnemySpawner(inset=3, require_clearance=True)
    for arena in arenas:
        count = roll_enemy_count(rng, arena.index)
        for x, y in spawner.spawn(canvas, arena, count, rng, gates=gates,
                                  gate_margin=config.door_clearance):
            enemies.append((x, y, arena.id))

    op_id = f"cathedral_{seed & 0xFFFF}"
    catalog = TokenCatalog()
    calibrator = TokenEconomyCalibrator(
        op_id, catalog, token_count=config.token_count, min_steps=config.min_craft_steps,
        attempts=config.search_attempts, max_depth=config.search_max_depth)
    difficulty = calibrator.calibrate(rng)
    vault_reward = catalog.candidate_kinds[rng.randrange(len(catalog.candidate_kinds))]

    tokens = []
    for kind, (index, ox, oy) in zip(difficulty.start_state, TOKEN_SPOTS):
        a = arenas[index]
        tokens.append((find_clear_spot_in_arena(canvas, a, a.center_x + ox, a.center_y + oy), kind))
    tokens.append((find_clear_spot_in_arena(canvas, vault, vault.center_x, vault.center_y - 2),
                   vault_reward))
    terminals = []
    for index, ox, oy, kind, charges in TERMINAL_SPOTS:
        a = arenas[index]
        spot = find_clear_spot_in_arena(canvas, a, a.center_x + ox, a.center_y + oy)
        terminals.append((spot, kind, charges))
    finale = find_clear_spot_in_arena(canvas, vault, vault.center_x, vault.center_y)

    cropped, region = crop_canvas(canvas, config.crop_margin)
    shift = region.apply

    objects: List[PlacedObject] = []
    arenas = [a.translated(*region.translation) for a in arenas]
    gates = [g.translated(*region.translation) for g in gates]
    start = arenas[START]
    objects.append(player_object(start.center_x, start.center_y))
    objects.extend(arena_bounds_object(a) for a in arenas)
    objects.extend(enemy_object(*shift(x, y), arena_id) for x, y, arena_id in enemies)
    objects.extend(token_object(*shift(*spot), catalog.token_id(kind)) for spot, kind in tokens)
    for spot, kind, charges in terminals:
        objects.append(algebra_terminal_object(*shift(*spot), kind, op_id,
                                               charges if kind == 'oracle' else None))
    objects.append(token_socket_object(*shift(*socket), group, catalog.goal_token_id))
    objects.extend(gate_object(g, with_tile_id=True) for g in gates if not g.locked)
    objects.extend(gate_object(g, with_tile_id=True, name='gate') for g in gates if g.locked)
    objects.extend(finale_objects(
        door_id=f"algebra_finale_terminal_{seed}",
        puzzle_id=f"algebra_finale_puzzle_{seed}",
        door_pos=shift(*finale),
        terminal_pos=shift(*finale),
        ciphertext=vigenere_encrypt(config.finale_plaintext, config.finale_key),
        key=f"VIGENERE:{config.finale_key}",
        answer=config.finale_plaintext,
    ))

    document = render_map(cropped, objects, TILESET_SOURCE, first_object_id=config.first_object_id)
    logger.info(f"Algebra forge seed {seed}: op {op_id}, tokens {list(difficulty.start_state)} "
                f"({difficulty.tier}, {difficulty.min_moves} steps), map {cropped.width}x{cropped.height}")
    return GeneratedMap(
        variant=Variant.ALGEBRA_FORGE.value,
        seed=seed,
        document=document,
        canvas=cropped,
        objects=objects,
        arenas=arenas,
        gates=gates,
        difficulty=difficulty,
    )


def _vault_socket_spot(canvas: Canvas, profile: CorridorProfile, vault: Arena) -> Tuple[int, int]:
    """Clear tile two rows above the vault doorway, on the first approach lane."""
    x = vault.center_x + profile.lane_a_offset + profile.lane_width // 2
    y = vault.origin_y - 2
    x, y = find_clear_spot(canvas, x, y, 6)
    canvas.carve_opening(x, y, 1, 1)
    return x, y
