"""
Tileset Assets
==============

Copies the tileset definition (and its image, when present) next to an
emitted map so the relative ``tilesets/...`` reference resolves.

Missing or unreadable assets never fail generation: each one is logged and
skipped, and the map is still written.
"""

import logging
import shutil
from pathlib import Path
from typing import List, Optional, Sequence, Union

from arena_riddles.core.definitions import TILESET_IMAGE, TILESET_SOURCE

logger = logging.getLogger(__name__)

DEFAULT_ASSETS_DIR = Path(__file__).resolve().parent.parent / 'assets'
TILESET_ASSETS: Sequence[str] = (TILESET_SOURCE, TILESET_IMAGE)


def copy_tileset_assets(map_dir: Union[str, Path],
                        assets_dir: Optional[Union[str, Path]] = None,
                        relative_paths: Sequence[str] = TILESET_ASSETS) -> List[Path]:
    """
    Copy each asset from ``assets_dir`` to the same relative path under
    ``map_dir``. Returns the destination paths that were written.
    """
    src_root = Path(assets_dir) if assets_dir is not None else DEFAULT_ASSETS_DIR
    dst_root = Path(map_dir)
    copied = []
    for rel in relative_paths:
        src = src_root / rel
        dst = dst_root / rel
        if not src.is_file():
            logger.warning(f"Tileset asset not found, skipping: {src}")
            continue
        try:
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(src, dst)
        except OSError as e:
            logger.warning(f"Could not copy {src} -> {dst}: {e}")
            continue
        copied.append(dst)
    logger.debug(f"Copied {len(copied)}/{len(relative_paths)} tileset assets to {dst_root}")
    return copied
