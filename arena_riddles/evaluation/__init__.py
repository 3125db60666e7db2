"""
Evaluation Module
=================

- Difficulty calibration for lights-out and token-economy puzzles
- Structural validation of generated maps
"""

from .difficulty_calibrator import (
    apply_presses,
    calibrate_lights_out,
    HiddenAlgebra,
    permutation_for,
    pack_counts,
    unpack_counts,
    has_one_step_goal,
    shortest_steps_to_goal,
    TokenEconomyCalibrator,
    calibrate_token_economy,
)
from .validator import (
    ValidationResult,
    arenas_connected,
    reachable_mask,
    check_coloring_graph,
    validate_document,
    validate_generated,
)

__all__ = [
    # Calibration
    'apply_presses',
    'calibrate_lights_out',
    'HiddenAlgebra',
    'permutation_for',
    'pack_counts',
    'unpack_counts',
    'has_one_step_goal',
    'shortest_steps_to_goal',
    'TokenEconomyCalibrator',
    'calibrate_token_economy',
    # Validation
    'ValidationResult',
    'arenas_connected',
    'reachable_mask',
    'check_coloring_graph',
    'validate_document',
    'validate_generated',
]
