"""
Generation Constants - Tables Module
====================================

This module holds every static table the level generator draws from:
room size ranges, template weights per role, enemy tier statistics,
reward defaults and the name tables used for equipment and bosses.

**CRITICAL**: Table ORDER matters. Weighted selection walks these tables
front to back, so reordering entries changes generated levels for a seed.

"""

from typing import Dict, List, Tuple

from levelforge.core.definitions import (
    EnemyTier,
    EquipmentSlot,
    Rarity,
    RoomRole,
    RoomTemplate,
)

# ==========================================
# ROOM DIMENSIONS
# ==========================================

# (base, span) per axis: size = base + floor(draw * span)
# Order is (width, height)
ROOM_SIZE_RANGES: Dict[RoomTemplate, Tuple[Tuple[int, int], Tuple[int, int]]] = {
    RoomTemplate.STANDARD: ((20, 10), (20, 10)),
    RoomTemplate.CIRCULAR: ((25, 10), (25, 10)),      # height mirrors width
    RoomTemplate.CORRIDOR_NS: ((15, 5), (30, 10)),
    RoomTemplate.CORRIDOR_EW: ((30, 10), (15, 5)),
    RoomTemplate.CROSS: ((30, 8), (30, 8)),
    RoomTemplate.CHAMBERS: ((35, 10), (35, 10)),
    RoomTemplate.HUB: ((40, 10), (40, 10)),
    RoomTemplate.BOSS_ARENA: ((40, 20), (40, 20)),
    RoomTemplate.TREASURE_VAULT: ((15, 10), (15, 10)),
    RoomTemplate.SHOP: ((20, 8), (20, 8)),
}

# Templates whose rooms are always square
SQUARE_TEMPLATES = {RoomTemplate.CIRCULAR}

# Smallest grid any template is asked to fill
MIN_ROOM_SIZE: int = 7


# ==========================================
# TEMPLATE SELECTION
# ==========================================

# Weighted template tables per role; zero weights never win
TEMPLATE_WEIGHTS: Dict[RoomRole, List[Tuple[RoomTemplate, float]]] = {
    RoomRole.NORMAL: [
        (RoomTemplate.STANDARD, 1.0),
        (RoomTemplate.CIRCULAR, 0.7),
        (RoomTemplate.CROSS, 0.5),
        (RoomTemplate.CORRIDOR_NS, 0.4),
        (RoomTemplate.CORRIDOR_EW, 0.4),
        (RoomTemplate.CHAMBERS, 0.3),
        (RoomTemplate.HUB, 0.2),
    ],
    RoomRole.ELITE: [
        (RoomTemplate.STANDARD, 0.6),
        (RoomTemplate.CIRCULAR, 0.8),
        (RoomTemplate.CROSS, 0.7),
        (RoomTemplate.CORRIDOR_NS, 0.3),
        (RoomTemplate.CORRIDOR_EW, 0.3),
        (RoomTemplate.CHAMBERS, 0.6),
        (RoomTemplate.HUB, 0.5),
    ],
    RoomRole.TREASURE: [
        (RoomTemplate.TREASURE_VAULT, 1.0),
    ],
    RoomRole.BOSS: [
        (RoomTemplate.BOSS_ARENA, 1.0),
    ],
    RoomRole.ENTRANCE: [
        (RoomTemplate.STANDARD, 1.0),
    ],
}

DEFAULT_TEMPLATE: RoomTemplate = RoomTemplate.STANDARD


# ==========================================
# OPTION DEFAULTS
# ==========================================

DEFAULT_DIFFICULTY: float = 1.0
DEFAULT_ROOM_COUNT: int = 10
DEFAULT_MAIN_PATH_LENGTH: int = 7
DEFAULT_BRANCHING_FACTOR: float = 0.4

DEFAULT_SPECIAL_ROOM_CHANCE: Dict[str, float] = {
    'treasure': 0.25,
    'elite': 0.2,
    'shop': 0.15,
}

DEFAULT_REWARD_CHANCE: Dict[Rarity, float] = {
    Rarity.COMMON: 0.7,
    Rarity.RARE: 0.2,
    Rarity.EPIC: 0.08,
    Rarity.LEGENDARY: 0.02,
}

# Room graph degree cap (four cardinal doors)
MAX_ROOM_DEGREE: int = 4


# ==========================================
# ENEMIES
# ==========================================

# (health, damage, experience)
TIER_STATS: Dict[EnemyTier, Tuple[int, int, int]] = {
    EnemyTier.NORMAL: (100, 10, 50),
    EnemyTier.ELITE: (200, 15, 100),
    EnemyTier.BOSS: (1000, 50, 500),
}

NORMAL_BEHAVIORS: List[str] = ['melee', 'ranged', 'charger', 'bomber', 'summoner']
ELITE_BEHAVIORS: List[str] = ['elite', 'ranged', 'charger']

ENEMY_PLACEMENT_ATTEMPTS: int = 50
MIN_ENEMY_SPACING_SQ: int = 9    # squared tile distance to doors and other enemies

# Chance the first enemy of a normal room is promoted to Elite tier
NORMAL_ROOM_ELITE_CHANCE: float = 0.2


# ==========================================
# REWARDS
# ==========================================

RARITY_MULTIPLIER: Dict[Rarity, float] = {
    Rarity.COMMON: 1.0,
    Rarity.RARE: 1.5,
    Rarity.EPIC: 2.0,
    Rarity.LEGENDARY: 3.0,
}

EQUIPMENT_CHANCE: float = 0.7    # otherwise a resource

NAME_PREFIXES: Dict[Rarity, List[str]] = {
    Rarity.COMMON: ['Basic', 'Simple', 'Sturdy', 'Plain'],
    Rarity.RARE: ['Quality', 'Enhanced', 'Superior', 'Fine'],
    Rarity.EPIC: ['Exquisite', 'Magnificent', 'Radiant', 'Mighty'],
    Rarity.LEGENDARY: ['Legendary', 'Ancient', 'Divine', 'Mythical'],
}

ITEM_NOUNS: Dict[EquipmentSlot, List[str]] = {
    EquipmentSlot.WEAPON: ['Sword', 'Axe', 'Spear', 'Dagger', 'Hammer', 'Staff'],
    EquipmentSlot.ARMOR: ['Armor', 'Breastplate', 'Helmet', 'Gauntlets', 'Boots', 'Shield'],
    EquipmentSlot.ACCESSORY: ['Ring', 'Amulet', 'Charm', 'Talisman', 'Bracelet', 'Belt'],
}

NAME_SUFFIXES: List[str] = [
    'of Power', 'of Might', 'of the Titan', 'of the Whale',
    'of the Eagle', 'of the Fox', 'of the Owl', 'of the Bear',
    'of Swiftness', 'of Protection', 'of Warding', 'of Vitality',
    'of the Void', 'of Flames', 'of Frost', 'of Thunder',
]

SUFFIX_CHANCE: float = 0.7


# ==========================================
# BOSSES
# ==========================================

BOSS_TITLES: List[str] = [
    'Lord', 'Master', 'Overlord', 'Guardian', 'Keeper', 'Warden',
    'King', 'Queen', 'Prince', 'Duke', 'Baron',
]

BOSS_NAMES: List[str] = [
    'Morbius', 'Thanatos', 'Azrael', 'Zephyr', 'Kron', 'Vex',
    'Malgrim', 'Noctis', 'Skarr', 'Drakath', 'Morgoth',
]

BOSS_EPITHETS: List[str] = [
    'the Eternal', 'the Undying', 'the Dreadful', 'the Merciless',
    'the Nefarious', 'the Malevolent', 'the Corrupted', 'the Fallen',
    'of Shadows', 'of Despair', 'of Ruin', 'of Madness',
]

BOSS_ABILITY: Dict[str, object] = {
    'name': 'Ground Slam',
    'damage': 30,
    'cooldown': 5.0,
    'radius': 5.0,
}
