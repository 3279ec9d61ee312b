"""
Level Data Model
================

Plain dataclasses describing generation options and the generated Level
aggregate (rooms, enemies, treasure, equipment, door links).

Every record offers to_dict() for export to rendering, physics and UI
collaborators.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple, Union

import networkx as nx
import numpy as np

from levelforge.constants.generation_constants import (
    DEFAULT_BRANCHING_FACTOR,
    DEFAULT_DIFFICULTY,
    DEFAULT_MAIN_PATH_LENGTH,
    DEFAULT_REWARD_CHANCE,
    DEFAULT_ROOM_COUNT,
    DEFAULT_SPECIAL_ROOM_CHANCE,
)
from levelforge.core.definitions import (
    DoorDirection,
    EnemyTier,
    EquipmentSlot,
    Rarity,
    RoomRole,
    RoomTemplate,
    Theme,
    TILE_TO_CHAR,
    TreasureKind,
)
from levelforge.generation.seeded_random import RNG_ALGORITHMS

logger = logging.getLogger(__name__)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# ============================================================================
# OPTIONS
# ============================================================================

@dataclass
class ForcedRoom:
    """Pin a role and template to a main-path position."""
    template: RoomTemplate
    role: RoomRole
    position: int

    def __post_init__(self):
        self.template = RoomTemplate(self.template)
        self.role = RoomRole(self.role)
        self.position = int(self.position)

    def to_dict(self) -> Dict:
        return {
            'template': self.template.value,
            'role': self.role.value,
            'position': self.position,
        }


@dataclass
class GenerationOptions:
    """
    Configuration for one level generation call.

    Enum-valued fields accept either the enum or its string value; unknown
    values raise ValueError. Numeric fields are clamped by normalized(),
    never rejected.

    Attributes:
        difficulty: Scales enemy counts and elite odds (>= 0)
        room_count: Total rooms including entrance and boss (>= 2)
        seed: Seed string; identical options reproduce identical levels
        main_path_length: Rooms on the entrance-to-boss path, both included
        branching_factor: Fraction of room_count bounding extra loop edges
        themes: Candidate themes, one is picked per level
        special_room_chance: Fractions for 'treasure', 'elite' and 'shop'
        reward_chance: Rarity weights for treasure rolls
        forced_rooms: Role/template overrides for main-path positions
        rng_algorithm: 'pcg64' or the legacy 'sine' stream
    """
    difficulty: float = DEFAULT_DIFFICULTY
    room_count: int = DEFAULT_ROOM_COUNT
    seed: str = "default"
    main_path_length: int = DEFAULT_MAIN_PATH_LENGTH
    branching_factor: float = DEFAULT_BRANCHING_FACTOR
    themes: List[Theme] = field(default_factory=lambda: [Theme.CASTLE])
    special_room_chance: Dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_SPECIAL_ROOM_CHANCE))
    reward_chance: Dict[Rarity, float] = field(
        default_factory=lambda: dict(DEFAULT_REWARD_CHANCE))
    forced_rooms: List[ForcedRoom] = field(default_factory=list)
    rng_algorithm: str = 'pcg64'

    def __post_init__(self):
        self.seed = str(self.seed)
        if not self.themes:
            raise ValueError("themes must name at least one theme")
        self.themes = [Theme(t) for t in self.themes]

        unknown = set(self.special_room_chance) - set(DEFAULT_SPECIAL_ROOM_CHANCE)
        if unknown:
            raise ValueError(f"Unknown special room kinds: {sorted(unknown)}")
        special = dict(DEFAULT_SPECIAL_ROOM_CHANCE)
        special.update(self.special_room_chance)
        self.special_room_chance = special

        rewards = {Rarity(k): v for k, v in self.reward_chance.items()}
        self.reward_chance = {r: rewards.get(r, 0.0) for r in Rarity}

        self.forced_rooms = [
            f if isinstance(f, ForcedRoom) else ForcedRoom(**f)
            for f in self.forced_rooms
        ]

        if self.rng_algorithm not in RNG_ALGORITHMS:
            raise ValueError(
                f"Unknown rng algorithm '{self.rng_algorithm}', "
                f"expected one of {RNG_ALGORITHMS}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GenerationOptions':
        """
        Build options from a plain mapping.

        Accepts snake_case keys or the camelCase keys used by game clients
        (roomCount, mainPath or mainPathLength, branchingFactor, specialRoomChance, rewards,
        forcedRooms). Forced rooms may use 'type' for the role.
        """
        aliases = {
            'roomCount': 'room_count',
            'mainPath': 'main_path_length',
            'mainPathLength': 'main_path_length',
            'branchingFactor': 'branching_factor',
            'specialRoomChance': 'special_room_chance',
            'rewards': 'reward_chance',
            'forcedRooms': 'forced_rooms',
            'rngAlgorithm': 'rng_algorithm',
        }
        kwargs = {aliases.get(k, k): v for k, v in data.items()}
        if 'forced_rooms' in kwargs:
            forced = []
            for entry in kwargs['forced_rooms']:
                if isinstance(entry, dict) and 'type' in entry:
                    entry = dict(entry)
                    entry['role'] = entry.pop('type')
                forced.append(entry)
            kwargs['forced_rooms'] = forced
        return cls(**kwargs)

    def normalized(self) -> 'GenerationOptions':
        """
        Return a copy with every numeric field clamped into range.

        difficulty >= 0, room_count >= 2, main_path_length in
        [2, room_count], branching factor and all chances in [0, 1].
        """
        room_count = max(2, int(self.room_count))
        main_path = int(_clamp(int(self.main_path_length), 2, room_count))
        difficulty = max(0.0, float(self.difficulty))
        branching = _clamp(float(self.branching_factor), 0.0, 1.0)

        if room_count != self.room_count:
            logger.warning(f"room_count {self.room_count} clamped to {room_count}")
        if main_path != self.main_path_length:
            logger.warning(
                f"main_path_length {self.main_path_length} clamped to {main_path}"
            )
        if difficulty != self.difficulty:
            logger.warning(f"difficulty {self.difficulty} clamped to {difficulty}")

        special = {k: _clamp(float(v), 0.0, 1.0)
                   for k, v in self.special_room_chance.items()}
        rewards = {k: _clamp(float(v), 0.0, 1.0)
                   for k, v in self.reward_chance.items()}

        forced = []
        for entry in self.forced_rooms:
            if not 1 <= entry.position <= main_path - 2:
                logger.warning(f"Ignoring forced room at position {entry.position}: "
                               f"not on the mid path (1..{main_path - 2})")
            elif entry.role in (RoomRole.ENTRANCE, RoomRole.BOSS):
                logger.warning(f"Ignoring forced {entry.role.value} room at "
                               f"position {entry.position}")
            else:
                forced.append(entry)

        return replace(
            self,
            difficulty=difficulty,
            room_count=room_count,
            main_path_length=main_path,
            branching_factor=branching,
            themes=list(self.themes),
            special_room_chance=special,
            reward_chance=rewards,
            forced_rooms=forced,
        )

    def to_dict(self) -> Dict:
        return {
            'difficulty': self.difficulty,
            'room_count': self.room_count,
            'seed': self.seed,
            'main_path_length': self.main_path_length,
            'branching_factor': self.branching_factor,
            'themes': [t.value for t in self.themes],
            'special_room_chance': dict(self.special_room_chance),
            'reward_chance': {r.value: v for r, v in self.reward_chance.items()},
            'forced_rooms': [f.to_dict() for f in self.forced_rooms],
            'rng_algorithm': self.rng_algorithm,
        }


# ============================================================================
# ENTITIES
# ============================================================================

@dataclass
class EquipmentStats:
    """Stat deltas granted by an equipment piece."""
    strength: int = 0
    agility: int = 0
    vitality: int = 0
    wisdom: int = 0
    critical_chance: float = 0.0
    critical_damage: float = 0.0

    def to_dict(self) -> Dict:
        return {
            'strength': self.strength,
            'agility': self.agility,
            'vitality': self.vitality,
            'wisdom': self.wisdom,
            'critical_chance': self.critical_chance,
            'critical_damage': self.critical_damage,
        }


@dataclass
class Equipment:
    """A procedurally named equipment piece."""
    id: str
    name: str
    slot: EquipmentSlot
    rarity: Rarity
    stats: EquipmentStats

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'slot': self.slot.value,
            'rarity': self.rarity.value,
            'stats': self.stats.to_dict(),
        }


@dataclass
class Treasure:
    """Reward placed in a room."""
    id: str
    kind: TreasureKind
    rarity: Rarity
    content: Union[Equipment, str]
    room_id: str

    def to_dict(self) -> Dict:
        content = self.content.to_dict() if isinstance(self.content, Equipment) else self.content
        return {
            'id': self.id,
            'type': self.kind.value,
            'rarity': self.rarity.value,
            'content': content,
            'room_id': self.room_id,
        }


@dataclass
class EnemyBehavior:
    """Behaviour descriptor consumed by the enemy runtime."""
    kind: str
    detection_range: float
    attack_range: float
    movement_speed: float
    attack_speed: float
    attack_patterns: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'type': self.kind,
            'detection_range': self.detection_range,
            'attack_range': self.attack_range,
            'movement_speed': self.movement_speed,
            'attack_speed': self.attack_speed,
            'attack_patterns': list(self.attack_patterns),
        }


@dataclass
class Ability:
    """Special attack of an enemy."""
    name: str
    damage: int
    cooldown: float
    radius: float

    def to_dict(self) -> Dict:
        return {
            'name': self.name,
            'damage': self.damage,
            'cooldown': self.cooldown,
            'radius': self.radius,
        }


@dataclass
class DropEntry:
    """One entry of an enemy drop table."""
    item: Equipment
    chance: float

    def to_dict(self) -> Dict:
        return {'item': self.item.to_dict(), 'chance': self.chance}


@dataclass
class Enemy:
    """An enemy placed in a room. Position is room-local (x, y), y = row."""
    id: str
    tier: EnemyTier
    room_id: str
    position: Tuple[int, int]
    health: int
    max_health: int
    damage: int
    experience: int
    behavior: EnemyBehavior
    abilities: List[Ability] = field(default_factory=list)
    name: Optional[str] = None
    drop_table: List[DropEntry] = field(default_factory=list)

    def to_dict(self) -> Dict:
        data = {
            'id': self.id,
            'type': self.tier.value,
            'room_id': self.room_id,
            'position': {'x': self.position[0], 'y': self.position[1]},
            'health': self.health,
            'max_health': self.max_health,
            'damage': self.damage,
            'experience': self.experience,
            'behavior': self.behavior.to_dict(),
            'abilities': [a.to_dict() for a in self.abilities],
            'drop_table': [d.to_dict() for d in self.drop_table],
        }
        if self.name is not None:
            data['name'] = self.name
        return data


# ============================================================================
# ROOMS AND LEVEL
# ============================================================================

@dataclass
class DoorLink:
    """A door slot of a room bound to a neighbouring room."""
    direction: DoorDirection
    target_room_id: str
    position: Tuple[int, int]

    def to_dict(self) -> Dict:
        return {
            'direction': self.direction.value,
            'target': self.target_room_id,
            'position': {'x': self.position[0], 'y': self.position[1]},
        }


@dataclass(eq=False)
class Room:
    """
    A room node of the level graph with its synthesized tile grid.

    The grid has shape (height, width); index it as grid[y, x].
    """
    id: str
    role: RoomRole
    template: RoomTemplate
    width: int
    height: int
    grid: np.ndarray
    is_entrance: bool = False
    connections: List[str] = field(default_factory=list)
    doors: List[DoorLink] = field(default_factory=list)
    enemies: List[Enemy] = field(default_factory=list)
    treasures: List[Treasure] = field(default_factory=list)

    @property
    def center(self) -> Tuple[int, int]:
        """Centre tile (x, y)."""
        return (self.width // 2, self.height // 2)

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def is_shop(self) -> bool:
        return self.template == RoomTemplate.SHOP

    def door_positions(self) -> List[Tuple[int, int]]:
        """The four cardinal door midpoints (x, y): N, E, S, W."""
        w, h = self.width, self.height
        return [(w // 2, 0), (w - 1, h // 2), (w // 2, h - 1), (0, h // 2)]

    def render_ascii(self) -> str:
        """Text rendering of the grid, one character per tile."""
        return "\n".join(
            "".join(TILE_TO_CHAR.get(int(v), '?') for v in row)
            for row in self.grid
        )

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'type': self.role.value,
            'template': self.template.value,
            'size': {'width': self.width, 'height': self.height},
            'layout': self.grid.tolist(),
            'is_entrance': self.is_entrance,
            'connections': list(self.connections),
            'doors': [d.to_dict() for d in self.doors],
            'enemies': [e.to_dict() for e in self.enemies],
            'treasures': [t.to_dict() for t in self.treasures],
        }


@dataclass(frozen=True)
class Level:
    """
    The generated level aggregate.

    Built once by LevelAssembler and not mutated afterwards; tile grids are
    read-only arrays.
    """
    id: str
    difficulty: float
    theme: Theme
    rooms: Tuple[Room, ...]
    enemies: Tuple[Enemy, ...]
    treasures: Tuple[Treasure, ...]
    boss: Optional[Enemy] = None
    seed: str = ""

    def get_room(self, room_id: str) -> Room:
        """Look up a room by id. Raises KeyError for unknown ids."""
        for room in self.rooms:
            if room.id == room_id:
                return room
        raise KeyError(room_id)

    @property
    def entrance(self) -> Room:
        return next(r for r in self.rooms if r.is_entrance)

    @property
    def boss_room(self) -> Room:
        return next(r for r in self.rooms if r.role == RoomRole.BOSS)

    def to_networkx(self) -> nx.Graph:
        """Undirected room graph with role/template node attributes."""
        G = nx.Graph()
        for room in self.rooms:
            G.add_node(room.id, role=room.role.value, template=room.template.value,
                       is_entrance=room.is_entrance)
        for room in self.rooms:
            for other in room.connections:
                G.add_edge(room.id, other)
        return G

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'seed': self.seed,
            'difficulty': self.difficulty,
            'theme': self.theme.value,
            'rooms': [r.to_dict() for r in self.rooms],
            'enemies': [e.to_dict() for e in self.enemies],
            'treasures': [t.to_dict() for t in self.treasures],
            'boss': self.boss.to_dict() if self.boss is not None else None,
        }
