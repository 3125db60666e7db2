"""
Variant Configuration
=====================

Fixed layout constants for each puzzle variant. Generation takes no runtime
configuration besides the seed and the variant, so these are frozen
dataclasses with defaults; tests build smaller variants by overriding fields.
"""

from dataclasses import dataclass
from typing import Dict, Tuple, Type


@dataclass(frozen=True)
class TraversalConfig:
    """Random arena layout with two-lane corridors between grid neighbours."""
    grid_cols: int = 7
    grid_rows: int = 7
    arena_count: int = 10
    arena_width: int = 15
    arena_height: int = 15
    cell_gap: int = 20
    border: int = 10
    crop_margin: int = 10
    lane_width: int = 5
    separator_width: int = 1
    side_wall_width: int = 1
    door_clearance_depth: int = 3
    enemy_attempts: int = 200
    tiled_version: str = "1.11.2"
    next_layer_id: int = 5
    next_object_id: int = 200
    finale_plaintext: str = "PROFMS"
    finale_shift: int = 5

    @property
    def spacing_x(self) -> int:
        return self.arena_width + self.cell_gap

    @property
    def spacing_y(self) -> int:
        return self.arena_height + self.cell_gap


@dataclass(frozen=True)
class LightsOutConfig:
    """Lantern pads on a jittered grid joined by zig-zag corridors."""
    canvas_width: int = 260
    canvas_height: int = 210
    crop_margin: int = 3
    corridor_width: int = 4
    pad_radius: int = 6
    grid_cols: int = 4
    grid_rows: int = 4
    excluded_cells: Tuple[int, ...] = (0, 15)
    base: Tuple[int, int] = (55, 42)
    spacing: Tuple[int, int] = (38, 34)
    jitter: int = 3
    extra_edges: Tuple[Tuple[int, int], ...] = ((0, 4), (2, 7), (5, 9), (8, 11), (10, 13))
    zigzag_jitter: int = 10
    start: Tuple[int, int] = (25, 25)
    reward_inset: Tuple[int, int] = (35, 45)
    press_probability: float = 0.55
    finale_key: str = "LANTERN"
    finale_plaintext: str = "ALLLIGHT"


@dataclass(frozen=True)
class RegisterAllocationConfig:
    """Variable arenas on a ring whose chords force a third register."""
    canvas_width: int = 220
    canvas_height: int = 220
    crop_margin: int = 3
    corridor_width: int = 5
    arena_min_w: int = 15
    arena_max_w: int = 19
    arena_min_h: int = 13
    arena_max_h: int = 17
    node_count: int = 10
    ring_radius: int = 55
    chords: Tuple[Tuple[int, int], ...] = ((0, 2), (5, 7))
    outer_offset: int = 45
    outer_dy: int = 10
    reward_node: int = 5
    finale_key: str = "REGISTER"
    finale_plaintext: str = "THREECOLORS"


@dataclass(frozen=True)
class AlgebraForgeConfig:
    """Fixed arena plan whose vault is unlocked by crafting the goal glyph."""
    canvas_width: int = 180
    canvas_height: int = 160
    crop_margin: int = 1
    arena_interior_w: int = 28
    arena_interior_h: int = 18
    lane_width: int = 3
    separator_width: int = 0
    side_wall_width: int = 1
    door_clearance: int = 4
    rng_salt: int = 0xA17EBA5E
    token_count: int = 6
    min_craft_steps: int = 3
    search_attempts: int = 6000
    search_max_depth: int = 10
    first_object_id: int = 100
    finale_key: str = "FORGE"
    finale_plaintext: str = "FINALTRIAL"
    # interior origins of start, a1, a2, a3, lab, a5 and the vault
    arena_origins: Tuple[Tuple[int, int], ...] = (
        (10, 10), (70, 10), (130, 10),
        (10, 70), (70, 70), (130, 70),
        (110, 120),
    )


CONFIG_BY_VARIANT: Dict[str, Type] = {
    'traversal': TraversalConfig,
    'lights_out': LightsOutConfig,
    'register_allocation': RegisterAllocationConfig,
    'algebra_forge': AlgebraForgeConfig,
}


def default_config(variant: str):
    """Default configuration instance for a variant name."""
    try:
        return CONFIG_BY_VARIANT[variant]()
    except KeyError:
        raise ValueError(
            f"Unknown variant '{variant}', expected one of {sorted(CONFIG_BY_VARIANT)}"
        ) from None
