"""
Levelforge - Procedural Dungeon Level Generator
===============================================

Deterministic generation of connected room graphs with synthesized tile
layouts, door placements, enemies and treasure.

Submodules:
- core: Tile encoding and shared enumerations
- constants: Size ranges, template weights, stat and name tables
- generation: Random source, noise, room templates, connectivity,
  population and level assembly
- utils: Level validation and graph helpers

Usage:
    from levelforge import generate_level
    level = generate_level(seed="abc", room_count=8)
"""

from levelforge.generation.level_assembler import LevelAssembler, generate_level
from levelforge.generation.models import GenerationOptions, ForcedRoom, Level

__version__ = "1.0.0"

__all__ = [
    'LevelAssembler',
    'generate_level',
    'GenerationOptions',
    'ForcedRoom',
    'Level',
    'core',
    'constants',
    'generation',
    'utils',
]
