"""
Loot Generator
==============

Rarity rolls, procedurally named equipment, room treasure and boss names.

Rarity tables:
- normal rooms:            configured reward weights as cumulative thresholds
- elite / treasure rooms:  common halved, epic scaled by 1.5
- boss rooms:              epic or legendary, even odds
"""

import logging
from typing import Dict, List

from levelforge.constants.generation_constants import (
    BOSS_EPITHETS,
    BOSS_NAMES,
    BOSS_TITLES,
    EQUIPMENT_CHANCE,
    ITEM_NOUNS,
    NAME_PREFIXES,
    NAME_SUFFIXES,
    RARITY_MULTIPLIER,
    SUFFIX_CHANCE,
)
from levelforge.core.definitions import EquipmentSlot, Rarity, RoomRole, TreasureKind
from levelforge.generation.models import Equipment, EquipmentStats, Room, Treasure
from levelforge.generation.seeded_random import SeededRandomSource

logger = logging.getLogger(__name__)

EQUIPMENT_SLOTS: List[EquipmentSlot] = [
    EquipmentSlot.WEAPON,
    EquipmentSlot.ARMOR,
    EquipmentSlot.ACCESSORY,
]


class LootGenerator:
    """
    Generates treasure and equipment from a shared random source.

    Equipment ids come from a per-instance counter, so ids restart for
    every level.
    """

    def __init__(self, rng: SeededRandomSource, reward_chance: Dict[Rarity, float]):
        self.rng = rng
        self.reward_chance = reward_chance
        self._equipment_counter = 0

    # ==========================================
    # RARITY
    # ==========================================

    def roll_rarity(self, role: RoomRole) -> Rarity:
        """Roll a rarity tier for treasure found in a room of this role."""
        if role == RoomRole.BOSS:
            return Rarity.EPIC if self.rng.next() < 0.5 else Rarity.LEGENDARY

        chances = dict(self.reward_chance)
        if role in (RoomRole.ELITE, RoomRole.TREASURE):
            chances[Rarity.COMMON] = chances[Rarity.COMMON] / 2
            chances[Rarity.EPIC] = chances[Rarity.EPIC] * 1.5

        roll = self.rng.next()
        threshold = 0.0
        for rarity in (Rarity.COMMON, Rarity.RARE, Rarity.EPIC):
            threshold += chances[rarity]
            if roll < threshold:
                return rarity
        return Rarity.LEGENDARY

    # ==========================================
    # EQUIPMENT
    # ==========================================

    def generate_name(self, slot: EquipmentSlot, rarity: Rarity) -> str:
        """Prefix + item noun, plus a suffix for most non-common items."""
        name = f"{self.rng.choice(NAME_PREFIXES[rarity])} {self.rng.choice(ITEM_NOUNS[slot])}"
        if rarity != Rarity.COMMON and self.rng.chance(SUFFIX_CHANCE):
            name = f"{name} {self.rng.choice(NAME_SUFFIXES)}"
        return name

    def generate_equipment(self, rarity: Rarity) -> Equipment:
        """
        Create an equipment piece of the given rarity.

        Stats are floor(draw * 5 * multiplier) where the multiplier is
        1 / 1.5 / 2 / 3 for common / rare / epic / legendary. Weapons also
        roll critical chance and get a fixed critical damage bonus.
        """
        slot = self.rng.choice(EQUIPMENT_SLOTS)
        multiplier = RARITY_MULTIPLIER[rarity]
        name = self.generate_name(slot, rarity)

        stats = EquipmentStats(
            strength=int(self.rng.next() * 5 * multiplier),
            agility=int(self.rng.next() * 5 * multiplier),
            vitality=int(self.rng.next() * 5 * multiplier),
            wisdom=int(self.rng.next() * 5 * multiplier),
        )
        if slot == EquipmentSlot.WEAPON:
            stats.critical_chance = self.rng.next() * 0.05 * multiplier
            stats.critical_damage = 0.1 * multiplier

        self._equipment_counter += 1
        return Equipment(
            id=f"equip-{self._equipment_counter}",
            name=name,
            slot=slot,
            rarity=rarity,
            stats=stats,
        )

    # ==========================================
    # TREASURE
    # ==========================================

    def treasure_count(self, role: RoomRole) -> int:
        if role == RoomRole.TREASURE:
            return 1 + self.rng.randint(2)
        if role == RoomRole.ELITE:
            return 1 if self.rng.chance(0.7) else 0
        if role == RoomRole.BOSS:
            return 1
        return 1 if self.rng.chance(0.2) else 0

    def generate_treasures(self, room: Room) -> List[Treasure]:
        """Roll the treasure found in a room."""
        treasures = []
        for i in range(self.treasure_count(room.role)):
            rarity = self.roll_rarity(room.role)
            if self.rng.chance(EQUIPMENT_CHANCE):
                kind = TreasureKind.EQUIPMENT
                content = self.generate_equipment(rarity)
            else:
                kind = TreasureKind.RESOURCE
                content = f"{rarity.value} resource"

            treasures.append(Treasure(
                id=f"treasure-{room.id}-{i}",
                kind=kind,
                rarity=rarity,
                content=content,
                room_id=room.id,
            ))
        return treasures

    # ==========================================
    # BOSSES
    # ==========================================

    def boss_name(self) -> str:
        """Compose a boss name from title, name and epithet tables."""
        pattern = self.rng.randint(3)
        if pattern == 0:
            return f"{self.rng.choice(BOSS_TITLES)} {self.rng.choice(BOSS_NAMES)}"
        if pattern == 1:
            return f"{self.rng.choice(BOSS_NAMES)} {self.rng.choice(BOSS_EPITHETS)}"
        title = self.rng.choice(BOSS_TITLES)
        name = self.rng.choice(BOSS_NAMES)
        return f"{title} {name} {self.rng.choice(BOSS_EPITHETS)}"
