"""
Canvas Cropper
==============

Shrinks a canvas to the bounding box of its non-empty cells plus a margin.

The crop never changes tile content, only the window. Callers shift every
coordinate they hold (arenas, gates, objects) by ``region.translation``.
"""

import logging
from typing import Tuple

import numpy as np

from arena_riddles.core.canvas import Canvas
from arena_riddles.core.models import CropRegion

logger = logging.getLogger(__name__)


def content_bounds(canvas: Canvas) -> Tuple[int, int, int, int]:
    """Inclusive (min_x, min_y, max_x, max_y) of occupied cells."""
    mask = canvas.occupied_mask()
    if not mask.any():
        raise RuntimeError("Cannot crop an empty canvas: no tile in any layer")
    ys = np.flatnonzero(mask.any(axis=1))
    xs = np.flatnonzero(mask.any(axis=0))
    return int(xs[0]), int(ys[0]), int(xs[-1]), int(ys[-1])


def crop_region(canvas: Canvas, margin: int) -> CropRegion:
    min_x, min_y, max_x, max_y = content_bounds(canvas)
    min_x = max(0, min_x - margin)
    min_y = max(0, min_y - margin)
    max_x = min(canvas.width - 1, max_x + margin)
    max_y = min(canvas.height - 1, max_y + margin)
    return CropRegion(min_x, min_y, max_x - min_x + 1, max_y - min_y + 1)


def crop_canvas(canvas: Canvas, margin: int) -> Tuple[Canvas, CropRegion]:
    """
    Returns the cropped copy and the region it was cut from.

    Raises:
        RuntimeError: if no layer holds a single non-empty tile.
    """
    region = crop_region(canvas, margin)
    ys = slice(region.min_y, region.min_y + region.height)
    xs = slice(region.min_x, region.min_x + region.width)
    cropped = Canvas.from_layers(
        canvas.floor[ys, xs].copy(),
        canvas.walls[ys, xs].copy(),
        None if canvas.symbols is None else canvas.symbols[ys, xs].copy(),
    )
    logger.info(f"Cropped {canvas.width}x{canvas.height} -> {region.width}x{region.height} "
                f"(origin {region.min_x},{region.min_y})")
    return cropped, region
