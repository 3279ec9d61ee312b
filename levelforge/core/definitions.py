"""
LEVELFORGE DEFINITIONS
======================
Central enumerations and type definitions for the level generator.

This file is the SINGLE SOURCE OF TRUTH for:
- Tile kinds (integer encoding of room grids)
- Room roles and room templates
- Level themes
- Enemy tiers, treasure kinds, rarities and equipment slots

Import from here instead of duplicating string literals across modules.

"""

from typing import Dict, Set
from enum import Enum, IntEnum

# ==========================================
# TILE KINDS (CRITICAL CONSTANTS)
# ==========================================
# These IDs MUST stay stable: renderers and physics read them directly

class TileKind(IntEnum):
    """Tile kinds for room grid representation."""
    WALL = 0                # Solid wall (impassable)
    FLOOR = 1               # Walkable floor
    ELEVATED_PLATFORM = 2   # Raised boss platform
    PEDESTAL = 3            # Treasure pedestal
    SHOP_ITEM = 4           # Item on display in a shop
    DOOR = 5                # Door marker at a cardinal midpoint
    HAZARD = 6              # Damaging tile
    DECORATION = 7          # Cosmetic prop


# Tiles an enemy or player can stand on
WALKABLE_TILES: Set[int] = {
    TileKind.FLOOR,
    TileKind.ELEVATED_PLATFORM,
    TileKind.DOOR,
}

# Tiles that block marker placement in their 8-neighbourhood
SPECIAL_MARKER_TILES: Set[int] = {
    TileKind.PEDESTAL,
    TileKind.SHOP_ITEM,
    TileKind.DOOR,
}

ID_TO_NAME: Dict[int, str] = {kind.value: kind.name.lower() for kind in TileKind}

# Character mapping used by Room.render_ascii()
TILE_TO_CHAR: Dict[int, str] = {
    TileKind.WALL: '#',
    TileKind.FLOOR: '.',
    TileKind.ELEVATED_PLATFORM: '^',
    TileKind.PEDESTAL: 'P',
    TileKind.SHOP_ITEM: '$',
    TileKind.DOOR: 'D',
    TileKind.HAZARD: 'x',
    TileKind.DECORATION: '*',
}


# ==========================================
# ROOMS
# ==========================================

class RoomRole(Enum):
    """Gameplay role of a room in the level graph."""
    ENTRANCE = "entrance"
    NORMAL = "normal"
    ELITE = "elite"
    TREASURE = "treasure"
    BOSS = "boss"


class RoomTemplate(Enum):
    """Layout algorithm used to synthesize a room's tile grid."""
    STANDARD = "standard"
    CIRCULAR = "circular"
    CROSS = "cross"
    CORRIDOR_NS = "corridorN"
    CORRIDOR_EW = "corridorE"
    CHAMBERS = "chambers"
    HUB = "hub"
    BOSS_ARENA = "boss-arena"
    TREASURE_VAULT = "treasure-vault"
    SHOP = "shop"


class Theme(Enum):
    """Visual theme of a level."""
    CASTLE = "castle"
    DUNGEON = "dungeon"
    FOREST = "forest"
    VOID = "void"


class DoorDirection(Enum):
    """Cardinal door slots, in the order connections are assigned to them."""
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"


# ==========================================
# ENTITIES
# ==========================================

class EnemyTier(Enum):
    """Strength tier of an enemy."""
    NORMAL = "normal"
    ELITE = "elite"
    BOSS = "boss"


class Rarity(Enum):
    """Reward rarity tiers, lowest first."""
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class TreasureKind(Enum):
    """What a treasure contains."""
    EQUIPMENT = "equipment"
    RESOURCE = "resource"


class EquipmentSlot(Enum):
    """Slot an equipment piece occupies."""
    WEAPON = "weapon"
    ARMOR = "armor"
    ACCESSORY = "accessory"
