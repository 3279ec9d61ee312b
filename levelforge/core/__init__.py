"""
Levelforge Core Module
======================

Shared enumerations and tile encoding for level generation.

Usage:
    from levelforge.core import TileKind, RoomRole, RoomTemplate
"""

from levelforge.core.definitions import (
    TileKind,
    RoomRole,
    RoomTemplate,
    Theme,
    DoorDirection,
    EnemyTier,
    Rarity,
    TreasureKind,
    EquipmentSlot,
    WALKABLE_TILES,
    SPECIAL_MARKER_TILES,
    ID_TO_NAME,
    TILE_TO_CHAR,
)

__all__ = [
    'TileKind',
    'RoomRole',
    'RoomTemplate',
    'Theme',
    'DoorDirection',
    'EnemyTier',
    'Rarity',
    'TreasureKind',
    'EquipmentSlot',
    'WALKABLE_TILES',
    'SPECIAL_MARKER_TILES',
    'ID_TO_NAME',
    'TILE_TO_CHAR',
]
