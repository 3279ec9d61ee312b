"""
Levelforge Generation Module
============================

Components:
    - SeededRandomSource: Deterministic random stream from a string seed
    - NoiseField: Seeded 2D simplex noise
    - RoomTemplateSynthesizer: Ten room layout algorithms
    - ConnectivityPlanner / RoomGraph: Level graph construction
    - PopulationEngine / LootGenerator: Enemies, treasure and equipment
    - LevelAssembler / generate_level: Full generation pass
"""

from .seeded_random import SeededRandomSource, hash_seed, weighted_choice
from .noise_field import NoiseField
from .room_templates import RoomTemplateSynthesizer
from .connectivity import ConnectivityPlanner, RoomGraph
from .loot import LootGenerator
from .entity_spawner import PopulationEngine
from .models import (
    Ability,
    DoorLink,
    DropEntry,
    Enemy,
    EnemyBehavior,
    Equipment,
    EquipmentStats,
    ForcedRoom,
    GenerationOptions,
    Level,
    Room,
    Treasure,
)
from .level_assembler import LevelAssembler, assign_door_links, generate_level

__all__ = [
    'SeededRandomSource',
    'hash_seed',
    'weighted_choice',
    'NoiseField',
    'RoomTemplateSynthesizer',
    'ConnectivityPlanner',
    'RoomGraph',
    'LootGenerator',
    'PopulationEngine',
    'Ability',
    'DoorLink',
    'DropEntry',
    'Enemy',
    'EnemyBehavior',
    'Equipment',
    'EquipmentStats',
    'ForcedRoom',
    'GenerationOptions',
    'Level',
    'Room',
    'Treasure',
    'LevelAssembler',
    'assign_door_links',
    'generate_level',
]
