"""
LEVELFORGE - Main Entry Point
=============================
Generate -> Validate -> Summarize

Developer entry point for inspecting generated levels.

Usage:
    # Generate and summarize a level
    python main.py --seed abc --rooms 8

    # Harder level, print every room grid
    python main.py --seed xyz --difficulty 3 --ascii

    # Dump the level as JSON
    python main.py --seed abc --export level.json

"""

import argparse
import json
import sys
import logging
from pathlib import Path

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from levelforge import GenerationOptions, generate_level
from levelforge.core.definitions import Theme
from levelforge.utils.graph_utils import summarize_level, validate_level


def run_pipeline(options: GenerationOptions, verbose: bool = True) -> dict:
    """
    Generate and validate one level.

    Args:
        options: Generation options
        verbose: Print the summary

    Returns:
        Dict with 'level', 'valid', 'errors' and 'summary'
    """
    level = generate_level(options)
    is_valid, errors = validate_level(level)
    summary = summarize_level(level)

    if verbose:
        print("=" * 60)
        print(f"LEVEL {level.id}")
        print("=" * 60)
        for key, value in summary.items():
            print(f"  {key:<10} {value}")
        for room in level.rooms:
            links = ", ".join(f"{d.direction.value}->{d.target_room_id}" for d in room.doors)
            print(f"  {room.id:<8} {room.role.value:<9} {room.template.value:<15} "
                  f"{room.width}x{room.height}  enemies={len(room.enemies)} "
                  f"treasures={len(room.treasures)}  [{links}]")
        print(f"  valid: {is_valid}")
        for error in errors:
            print(f"    - {error}")

    return {'level': level, 'valid': is_valid, 'errors': errors, 'summary': summary}


def main():
    parser = argparse.ArgumentParser(
        description='Levelforge - Procedural Dungeon Level Generator'
    )

    parser.add_argument(
        '--seed', '-s', type=str, default='default',
        help='Seed string (default: default)'
    )
    parser.add_argument(
        '--rooms', '-r', type=int, default=10,
        help='Total room count (default: 10)'
    )
    parser.add_argument(
        '--difficulty', '-d', type=float, default=1.0,
        help='Difficulty (default: 1.0)'
    )
    parser.add_argument(
        '--main-path', type=int, default=7,
        help='Main path length including entrance and boss (default: 7)'
    )
    parser.add_argument(
        '--branching', type=float, default=0.4,
        help='Branching factor 0-1 (default: 0.4)'
    )
    parser.add_argument(
        '--theme', '-t', action='append',
        choices=[t.value for t in Theme],
        help='Candidate theme (repeatable, default: castle)'
    )
    parser.add_argument(
        '--rng', choices=['pcg64', 'sine'], default='pcg64',
        help='Random stream algorithm (default: pcg64)'
    )
    parser.add_argument(
        '--export', '-e', type=str,
        help='Export level to a JSON file'
    )
    parser.add_argument(
        '--ascii', action='store_true',
        help='Print ASCII rendering of every room'
    )
    parser.add_argument(
        '--quiet', '-q', action='store_true',
        help='Suppress output'
    )

    args = parser.parse_args()

    options = GenerationOptions(
        seed=args.seed,
        room_count=args.rooms,
        difficulty=args.difficulty,
        main_path_length=args.main_path,
        branching_factor=args.branching,
        themes=args.theme or [Theme.CASTLE],
        rng_algorithm=args.rng,
    )

    result = run_pipeline(options, verbose=not args.quiet)
    level = result['level']

    if args.ascii:
        for room in level.rooms:
            print("\n" + "=" * 60)
            print(f"{room.id} ({room.template.value})")
            print("=" * 60)
            print(room.render_ascii())

    if args.export:
        output_path = Path(args.export)
        with open(output_path, 'w') as f:
            json.dump(level.to_dict(), f, indent=2)
        logger.info(f"Exported level to: {output_path}")

    return 0 if result['valid'] else 1


if __name__ == '__main__':
    sys.exit(main())
