"""
Population Engine
=================
Fills generated rooms with enemies and treasure.

Enemies are placed by rejection sampling on floor tiles, kept away from
door midpoints and from each other. Treasure and boss rewards come from
LootGenerator.
"""

import logging
from typing import Dict, List, Optional, Tuple

from levelforge.constants.generation_constants import (
    BOSS_ABILITY,
    ELITE_BEHAVIORS,
    ENEMY_PLACEMENT_ATTEMPTS,
    MIN_ENEMY_SPACING_SQ,
    NORMAL_BEHAVIORS,
    NORMAL_ROOM_ELITE_CHANCE,
    TIER_STATS,
)
from levelforge.core.definitions import EnemyTier, Rarity, RoomRole, TileKind
from levelforge.generation.loot import LootGenerator
from levelforge.generation.models import (
    Ability,
    DropEntry,
    Enemy,
    EnemyBehavior,
    Room,
    Treasure,
)
from levelforge.generation.seeded_random import SeededRandomSource

logger = logging.getLogger(__name__)


class PopulationEngine:
    """
    Spawns enemies and treasure in generated rooms.

    Placement rules:
    - Entrance and treasure rooms stay free of enemies
    - Enemies stand on floor, at least 3 tiles from every door midpoint
    - Enemies keep at least 3 tiles from each other
    - Boss rooms get a single named Boss-tier enemy with a drop table
    """

    def __init__(self, rng: SeededRandomSource, difficulty: float,
                 loot: LootGenerator, config: Optional[Dict] = None):
        """
        Args:
            rng: Random source shared with the rest of the level
            difficulty: Level difficulty (>= 0)
            loot: Treasure and equipment generator
            config: Placement parameters
                {
                    'placement_attempts': 50,
                    'min_spacing_sq': 9,   # squared tiles from doors/enemies
                    'normal_elite_chance': 0.2,
                }
        """
        self.rng = rng
        self.difficulty = difficulty
        self.loot = loot
        self.config = config or {}
        self.placement_attempts = self.config.get('placement_attempts', ENEMY_PLACEMENT_ATTEMPTS)
        self.min_spacing_sq = self.config.get('min_spacing_sq', MIN_ENEMY_SPACING_SQ)
        self.normal_elite_chance = self.config.get('normal_elite_chance', NORMAL_ROOM_ELITE_CHANCE)

    def populate(self, rooms: List[Room]) -> Tuple[List[Enemy], List[Treasure], Optional[Enemy]]:
        """
        Populate every room in order: enemies first, then treasure.

        Args:
            rooms: Rooms with synthesized grids; their enemy and treasure
                lists are filled in place

        Returns:
            (all enemies, all treasures, boss enemy or None)
        """
        for room in rooms:
            room.enemies = self.spawn_enemies(room)

        for room in rooms:
            room.treasures = self.loot.generate_treasures(room)

        enemies = [e for room in rooms for e in room.enemies]
        treasures = [t for room in rooms for t in room.treasures]
        boss = next((e for e in enemies if e.tier == EnemyTier.BOSS), None)

        logger.info(
            f"Populated {len(rooms)} rooms: {len(enemies)} enemies, "
            f"{len(treasures)} treasures"
        )
        return enemies, treasures, boss

    # ==========================================
    # ENEMIES
    # ==========================================

    def enemy_count(self, role: RoomRole) -> int:
        if role in (RoomRole.ENTRANCE, RoomRole.TREASURE):
            return 0
        if role == RoomRole.BOSS:
            return 1
        if role == RoomRole.ELITE:
            return int(1 + self.difficulty * 1.5)
        return int(1 + self.difficulty)

    def spawn_enemies(self, room: Room) -> List[Enemy]:
        """Generate the enemies of a single room."""
        count = self.enemy_count(room.role)
        if count == 0:
            return []

        if room.role == RoomRole.ELITE:
            include_elite = True
        elif room.role == RoomRole.NORMAL:
            include_elite = self.rng.chance(self.normal_elite_chance)
        else:
            include_elite = False

        enemies: List[Enemy] = []
        for i in range(count):
            position = self.find_enemy_position(room, enemies)
            if room.role == RoomRole.BOSS:
                tier = EnemyTier.BOSS
            elif i == 0 and include_elite:
                tier = EnemyTier.ELITE
            else:
                tier = EnemyTier.NORMAL

            enemy = self._create_enemy(f"enemy-{room.id}-{i}", tier, room.id, position)
            enemies.append(enemy)

        logger.debug(f"Room {room.id} ({room.role.value}): spawned {len(enemies)} enemies")
        return enemies

    def find_enemy_position(self, room: Room, placed: List[Enemy]) -> Tuple[int, int]:
        """Rejection-sample a valid tile, falling back to the room centre."""
        for _ in range(self.placement_attempts):
            x = 1 + self.rng.randint(room.width - 2)
            y = 1 + self.rng.randint(room.height - 2)
            if self.is_valid_enemy_position(room, x, y, placed):
                return (x, y)

        logger.debug(f"Room {room.id}: no valid enemy tile after "
                     f"{self.placement_attempts} attempts, using centre")
        return room.center

    def is_valid_enemy_position(self, room: Room, x: int, y: int,
                                placed: List[Enemy]) -> bool:
        if room.grid[y, x] != TileKind.FLOOR:
            return False
        for dx, dy in room.door_positions():
            if (x - dx) ** 2 + (y - dy) ** 2 < self.min_spacing_sq:
                return False
        for enemy in placed:
            ex, ey = enemy.position
            if (x - ex) ** 2 + (y - ey) ** 2 < self.min_spacing_sq:
                return False
        return True

    def _create_enemy(self, enemy_id: str, tier: EnemyTier, room_id: str,
                      position: Tuple[int, int]) -> Enemy:
        if tier == EnemyTier.BOSS:
            return self._create_boss(enemy_id, room_id, position)

        health, damage, experience = TIER_STATS[tier]

        elite = tier == EnemyTier.ELITE
        behaviors = ELITE_BEHAVIORS if elite else NORMAL_BEHAVIORS
        behavior = EnemyBehavior(
            kind=self.rng.choice(behaviors),
            detection_range=15,
            attack_range=2,
            movement_speed=4 if elite else 3,
            attack_speed=1.5 if elite else 1,
        )
        return Enemy(
            id=enemy_id,
            tier=tier,
            room_id=room_id,
            position=position,
            health=health,
            max_health=health,
            damage=damage,
            experience=experience,
            behavior=behavior,
        )

    def _create_boss(self, enemy_id: str, room_id: str, position: Tuple[int, int]) -> Enemy:
        health, damage, experience = TIER_STATS[EnemyTier.BOSS]
        name = self.loot.boss_name()
        ability = Ability(**BOSS_ABILITY)
        drop = self.loot.generate_equipment(Rarity.LEGENDARY)

        logger.debug(f"Boss '{name}' guards {room_id}")
        return Enemy(
            id=enemy_id,
            tier=EnemyTier.BOSS,
            room_id=room_id,
            position=position,
            health=health,
            max_health=health,
            damage=damage,
            experience=experience,
            behavior=EnemyBehavior(
                kind='boss',
                detection_range=20,
                attack_range=5,
                movement_speed=3,
                attack_speed=2,
                attack_patterns=['slam'],
            ),
            abilities=[ability],
            name=name,
            drop_table=[DropEntry(item=drop, chance=1.0)],
        )
