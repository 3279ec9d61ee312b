"""
Level Assembler
===============

Orchestrates one generation pass:

1. Seed the random source and noise field
2. Pick the level theme
3. Build entrance, mid-path, boss and branch rooms
4. Connect rooms into a level graph
5. Populate enemies and treasure
6. Bind connections to door slots

Usage:
    from levelforge import generate_level
    level = generate_level(seed="abc", room_count=8, difficulty=2)
"""

import math
import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Union

from levelforge.core.definitions import DoorDirection, RoomRole, RoomTemplate
from levelforge.generation.connectivity import ConnectivityPlanner
from levelforge.generation.entity_spawner import PopulationEngine
from levelforge.generation.loot import LootGenerator
from levelforge.generation.models import DoorLink, GenerationOptions, Level, Room
from levelforge.generation.noise_field import NoiseField
from levelforge.generation.room_templates import RoomTemplateSynthesizer
from levelforge.generation.seeded_random import SeededRandomSource

logger = logging.getLogger(__name__)

DOOR_ORDER: List[DoorDirection] = [
    DoorDirection.NORTH,
    DoorDirection.EAST,
    DoorDirection.SOUTH,
    DoorDirection.WEST,
]


def assign_door_links(room: Room) -> List[DoorLink]:
    """
    Bind a room's connections, in order, to the N, E, S, W door slots.

    The slot does not depend on where the neighbouring room lies.
    """
    positions = room.door_positions()
    return [
        DoorLink(direction=DOOR_ORDER[i], target_room_id=target, position=positions[i])
        for i, target in enumerate(room.connections[:len(DOOR_ORDER)])
    ]


class LevelAssembler:
    """
    Generates a Level from GenerationOptions.

    The random stream is re-seeded at the start of every generate() call,
    so repeated calls on one assembler return identical levels.

    Args:
        options: Generation options; numeric values are clamped
    """

    def __init__(self, options: Optional[GenerationOptions] = None):
        self.options = (options or GenerationOptions()).normalized()
        self.rng: Optional[SeededRandomSource] = None
        self.synthesizer: Optional[RoomTemplateSynthesizer] = None

    def generate(self) -> Level:
        """
        Generate a complete level.

        Returns:
            Immutable Level aggregate
        """
        opts = self.options
        logger.info(f"Generating level '{opts.seed}': {opts.room_count} rooms, "
                    f"difficulty {opts.difficulty}")

        # Step 1: Seed random source and noise
        self.rng = SeededRandomSource(opts.seed, opts.rng_algorithm)
        self.synthesizer = RoomTemplateSynthesizer(self.rng, NoiseField(self.rng))

        # Step 2: Theme
        theme = self.rng.choice(opts.themes)

        # Step 3: Rooms
        rooms = self._generate_rooms()

        # Step 4: Connectivity
        planner = ConnectivityPlanner(self.rng, opts.main_path_length, opts.branching_factor)
        graph = planner.plan(rooms)
        for room in rooms:
            room.connections = graph.neighbors(room.id)

        # Step 5: Enemies and treasure
        loot = LootGenerator(self.rng, opts.reward_chance)
        engine = PopulationEngine(self.rng, opts.difficulty, loot)
        enemies, treasures, boss = engine.populate(rooms)

        # Step 6: Door links
        for room in rooms:
            room.doors = assign_door_links(room)

        level = Level(
            id=f"level-{opts.seed}",
            difficulty=opts.difficulty,
            theme=theme,
            rooms=tuple(rooms),
            enemies=tuple(enemies),
            treasures=tuple(treasures),
            boss=boss,
            seed=opts.seed,
        )

        logger.info(f"Generated {level.id}: {len(rooms)} rooms, "
                    f"{len(enemies)} enemies, {len(treasures)} treasures, "
                    f"theme {theme.value}")
        return level

    def _generate_rooms(self) -> List[Room]:
        opts = self.options
        room_count = opts.room_count
        path_length = opts.main_path_length
        special = opts.special_room_chance

        elite_rooms = int(room_count * special['elite'])
        treasure_rooms = int(room_count * special['treasure'])
        shop_rooms = int(room_count * special['shop'])
        branch_total = room_count - 2 - elite_rooms - treasure_rooms - shop_rooms
        mid_count = path_length - 2
        per_branch = math.ceil(branch_total / mid_count) if mid_count > 0 else 0
        forced = {f.position: f for f in opts.forced_rooms}

        rooms = [self._build_room(0, RoomRole.ENTRANCE, RoomTemplate.STANDARD, is_entrance=True)]

        for position in range(1, path_length - 1):
            if position < path_length - 2:
                branch_rooms = per_branch
            else:
                branch_rooms = branch_total - (position - 1) * per_branch
            multiplier = 1 / branch_rooms if branch_rooms > 0 else 1

            if position in forced:
                role, template = forced[position].role, forced[position].template
            else:
                elite_chance = (special['elite']
                                * (0.5 + (position / (path_length - 1)) * 1.5)
                                * (1 + opts.difficulty * 0.2)
                                * multiplier)
                role = RoomRole.ELITE if self.rng.next() < elite_chance else RoomRole.NORMAL
                template = self.synthesizer.choose_template(role)

            rooms.append(self._build_room(len(rooms), role, template))

        rooms.append(self._build_room(len(rooms), RoomRole.BOSS, RoomTemplate.BOSS_ARENA))

        for _ in range(treasure_rooms):
            if len(rooms) >= room_count:
                break
            rooms.append(self._build_room(len(rooms), RoomRole.TREASURE,
                                          RoomTemplate.TREASURE_VAULT))
        for _ in range(shop_rooms):
            if len(rooms) >= room_count:
                break
            rooms.append(self._build_room(len(rooms), RoomRole.NORMAL, RoomTemplate.SHOP))
        while len(rooms) < room_count:
            template = self.synthesizer.choose_template(RoomRole.NORMAL)
            rooms.append(self._build_room(len(rooms), RoomRole.NORMAL, template))

        return rooms

    def _build_room(self, index: int, role: RoomRole, template: RoomTemplate,
                    is_entrance: bool = False) -> Room:
        width, height = self.synthesizer.room_size(template)
        grid = self.synthesizer.synthesize(width, height, template)
        logger.debug(f"room-{index}: {role.value} / {template.value} {width}x{height}")
        return Room(
            id=f"room-{index}",
            role=role,
            template=template,
            width=width,
            height=height,
            grid=grid,
            is_entrance=is_entrance,
        )


def generate_level(options: Union[GenerationOptions, Dict[str, Any], None] = None,
                   **overrides) -> Level:
    """
    Generate a level.

    Args:
        options: GenerationOptions, a plain mapping accepted by
            GenerationOptions.from_dict(), or None for defaults
        **overrides: Option fields replacing those in options

    Returns:
        Generated Level

    Example:
        >>> level = generate_level(seed="abc", room_count=2)
        >>> len(level.rooms)
        2
    """
    if options is None:
        options = GenerationOptions(**overrides)
    elif isinstance(options, dict):
        options = GenerationOptions.from_dict({**options, **overrides})
    elif overrides:
        options = replace(options, **overrides)
    return LevelAssembler(options).generate()
