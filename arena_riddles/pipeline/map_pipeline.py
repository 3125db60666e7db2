"""
Map Pipeline
============

Single entry point for generating and writing puzzle maps.

Usage:
    generated = generate_map('lights_out', seed=42)
    path = write_map(generated, 'maps/lights_out_42.tmx')
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from arena_riddles.core.config import default_config
from arena_riddles.core.definitions import Variant
from arena_riddles.core.models import GeneratedMap
from arena_riddles.data.assets import copy_tileset_assets
from arena_riddles.pipeline.algebra_forge import generate_algebra_forge
from arena_riddles.pipeline.lights_out import generate_lights_out
from arena_riddles.pipeline.register_allocation import generate_register_allocation
from arena_riddles.pipeline.traversal_arena import generate_traversal

logger = logging.getLogger(__name__)

GENERATORS: Dict[str, Callable[..., GeneratedMap]] = {
    Variant.TRAVERSAL.value: generate_traversal,
    Variant.LIGHTS_OUT.value: generate_lights_out,
    Variant.REGISTER_ALLOCATION.value: generate_register_allocation,
    Variant.ALGEBRA_FORGE.value: generate_algebra_forge,
}


def generate_map(variant: Union[str, Variant], seed: int, config=None) -> GeneratedMap:
    """
    Run one variant end to end. ``config`` defaults to the variant's
    standard configuration.

    Raises:
        ValueError: for an unknown variant.
    """
    name = variant.value if isinstance(variant, Variant) else variant
    if name not in GENERATORS:
        raise ValueError(f"Unknown variant '{name}', expected one of {sorted(GENERATORS)}")
    if config is None:
        config = default_config(name)
    logger.info(f"Generating {name} map for seed {seed}")
    return GENERATORS[name](seed, config)


def write_map(generated: GeneratedMap, path: Union[str, Path], copy_assets: bool = True,
              assets_dir: Optional[Union[str, Path]] = None) -> Path:
    """
    Write the document atomically (temp file in the target directory, then
    rename) and copy the tileset next to it.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix='.tmp', dir=target.parent)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8', newline='\n') as f:
            f.write(generated.document)
        os.replace(tmp_name, target)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    logger.info(f"Wrote {generated.variant} map ({len(generated.document)} bytes) to {target}")

    if copy_assets:
        copy_tileset_assets(target.parent, assets_dir)
    return target
