"""
ARENA RIDDLES MAP GENERATOR - Main Entry Point
==============================================
Generate -> Validate -> Write

Usage:
    # One map for a variant and seed
    python main.py --variant lights_out --seed 42 --output maps/lights_out.tmx

    # Every variant for one seed into a directory
    python main.py --all --seed 7 --output maps/

    # Skip copying the tileset next to the map
    python main.py --variant traversal --seed 1 --no-assets

    # Validate the generated map structure before writing
    python main.py --variant algebra_forge --seed 3 --validate
"""

import argparse
import sys
import logging
from pathlib import Path

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from arena_riddles.core.definitions import Variant
from arena_riddles.evaluation.validator import validate_generated
from arena_riddles.pipeline.map_pipeline import GENERATORS, generate_map, write_map


def default_output_name(variant: str, seed: int) -> str:
    return f"{variant}_{seed}.tmx"


def run_variant(variant: str, seed: int, output: Path, copy_assets: bool = True,
                assets_dir: str = None, validate: bool = False) -> dict:
    """
    Generate one map, optionally validate it, and write it to ``output``.

    Returns:
        Summary dict with the written path and validation outcome
    """
    generated = generate_map(variant, seed)

    result = {'variant': variant, 'seed': seed, 'valid': None, 'path': None}
    if validate:
        report = validate_generated(generated)
        result['valid'] = report.is_valid
        for issue in report.issues:
            logger.warning(f"[{variant}] {issue}")
        if not report.is_valid:
            logger.error(f"Validation failed for {variant} seed {seed}")
            return result

    result['path'] = write_map(generated, output, copy_assets=copy_assets, assets_dir=assets_dir)
    # User-facing output - keep print() for CLI summary
    print(f"{variant}: {len(generated.objects)} objects -> {result['path']}")
    return result


def resolve_output(output: str, variant: str, seed: int, many: bool) -> Path:
    if output is None:
        return Path(default_output_name(variant, seed))
    path = Path(output)
    if many or path.suffix.lower() != '.tmx':
        return path / default_output_name(variant, seed)
    return path


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description='Arena Riddles - seeded puzzle map generator (Tiled TMX output)'
    )

    parser.add_argument(
        '--variant', '-v', choices=[v.value for v in Variant],
        help='Puzzle variant to generate'
    )
    parser.add_argument(
        '--seed', '-s', type=int, default=0,
        help='Generation seed (default: 0)'
    )
    parser.add_argument(
        '--output', '-o', type=str,
        help='Output .tmx file, or directory when used with --all'
    )
    parser.add_argument(
        '--all', '-a', action='store_true',
        help='Generate every variant'
    )
    parser.add_argument(
        '--no-assets', action='store_true',
        help='Do not copy the tileset next to the map'
    )
    parser.add_argument(
        '--assets-dir', type=str,
        help='Directory holding tilesets/ (default: bundled assets)'
    )
    parser.add_argument(
        '--validate', action='store_true',
        help='Check structural rules before writing'
    )
    parser.add_argument(
        '--verbose', action='store_true',
        help='Debug logging'
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.all:
        variants = list(GENERATORS)
    elif args.variant is not None:
        variants = [args.variant]
    else:
        parser.error("Either --variant or --all is required")

    failed = 0
    for variant in variants:
        output = resolve_output(args.output, variant, args.seed, many=args.all)
        try:
            result = run_variant(
                variant,
                args.seed,
                output,
                copy_assets=not args.no_assets,
                assets_dir=args.assets_dir,
                validate=args.validate,
            )
        except (ValueError, RuntimeError, OSError):
            logger.exception(f"Error generating {variant} map")
            failed += 1
            continue
        if result['path'] is None:
            failed += 1

    if failed:
        logger.error(f"{failed}/{len(variants)} maps failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
