"""
Levelforge Constants
====================

Static tables for room sizing, template selection, enemy tiers and loot.
"""

from levelforge.constants.generation_constants import (
    ROOM_SIZE_RANGES,
    TEMPLATE_WEIGHTS,
    TIER_STATS,
    RARITY_MULTIPLIER,
    MAX_ROOM_DEGREE,
)

__all__ = [
    'ROOM_SIZE_RANGES',
    'TEMPLATE_WEIGHTS',
    'TIER_STATS',
    'RARITY_MULTIPLIER',
    'MAX_ROOM_DEGREE',
]
