"""
Level Graph Utilities
=====================

Validation and inspection helpers for generated levels.

Invariants checked by validate_level():
- exactly one entrance room and one boss room
- every room reachable from the entrance
- connections symmetric, degree at most 4
- sealed borders with doors at the four cardinal midpoints
- enemies on floor tiles away from door midpoints
"""

import logging
from collections import Counter
from typing import Dict, List, Tuple

import networkx as nx
import numpy as np
from scipy import ndimage

from levelforge.constants.generation_constants import MAX_ROOM_DEGREE, MIN_ENEMY_SPACING_SQ
from levelforge.core.definitions import ID_TO_NAME, RoomRole, TileKind, WALKABLE_TILES
from levelforge.generation.models import Enemy, Level, Room

logger = logging.getLogger(__name__)


def reachable_rooms(level: Level) -> List[str]:
    """Room ids reachable from the entrance, BFS order."""
    G = level.to_networkx()
    start = level.entrance.id
    return [start] + [v for _, v in nx.bfs_edges(G, start)]


def check_room_border(room: Room) -> List[str]:
    """
    Verify the border is wall except for the four door midpoints.

    Returns:
        List of error messages (empty if valid)
    """
    errors = []
    grid = room.grid
    doors = set(room.door_positions())

    border = np.zeros(grid.shape, dtype=bool)
    border[0, :] = border[-1, :] = border[:, 0] = border[:, -1] = True

    for y, x in np.argwhere(border):
        value = grid[y, x]
        if (int(x), int(y)) in doors:
            if value != TileKind.DOOR:
                errors.append(f"{room.id}: missing door at ({x}, {y})")
        elif value != TileKind.WALL:
            errors.append(f"{room.id}: border tile ({x}, {y}) is {ID_TO_NAME.get(int(value), value)}")
    return errors


def is_centre_fallback(room: Room, enemy: Enemy) -> bool:
    """True when no valid tile was found and the enemy sits on a non-floor centre."""
    x, y = enemy.position
    return enemy.position == room.center and room.grid[y, x] != TileKind.FLOOR


def walkable_regions(room: Room) -> int:
    """Number of 4-connected walkable regions in a room grid."""
    mask = np.isin(room.grid, [int(t) for t in WALKABLE_TILES])
    _, count = ndimage.label(mask)
    return int(count)


def validate_level(level: Level) -> Tuple[bool, List[str]]:
    """
    Check structural invariants of a generated level.

    Args:
        level: Level to validate

    Returns:
        (is_valid, list of error messages)
    """
    errors: List[str] = []

    entrances = [r for r in level.rooms if r.is_entrance]
    bosses = [r for r in level.rooms if r.role == RoomRole.BOSS]
    if len(entrances) != 1:
        errors.append(f"Expected 1 entrance room, found {len(entrances)}")
    if len(bosses) != 1:
        errors.append(f"Expected 1 boss room, found {len(bosses)}")

    ids = {r.id for r in level.rooms}
    for room in level.rooms:
        if len(room.connections) > MAX_ROOM_DEGREE:
            errors.append(f"{room.id}: degree {len(room.connections)} exceeds {MAX_ROOM_DEGREE}")
        for other in room.connections:
            if other not in ids:
                errors.append(f"{room.id}: connection to unknown room {other}")
            elif room.id not in level.get_room(other).connections:
                errors.append(f"{room.id} -> {other} is not symmetric")

    if len(entrances) == 1:
        unreachable = ids - set(reachable_rooms(level))
        if unreachable:
            errors.append(f"Unreachable rooms: {sorted(unreachable)}")

    for room in level.rooms:
        errors.extend(check_room_border(room))
        for enemy in room.enemies:
            x, y = enemy.position
            if is_centre_fallback(room, enemy):
                logger.warning(f"{enemy.id}: placed by centre fallback on "
                               f"{ID_TO_NAME.get(int(room.grid[y, x]))} in {room.id}")
                continue
            if room.grid[y, x] != TileKind.FLOOR:
                errors.append(f"{enemy.id}: not on floor at ({x}, {y})")
            for dx, dy in room.door_positions():
                if (x - dx) ** 2 + (y - dy) ** 2 < MIN_ENEMY_SPACING_SQ:
                    errors.append(f"{enemy.id}: too close to door ({dx}, {dy})")

    if errors:
        logger.warning(f"{level.id}: {len(errors)} validation errors")
    return len(errors) == 0, errors


def summarize_level(level: Level) -> Dict:
    """Compact statistics for logging and demos."""
    G = level.to_networkx()
    return {
        'id': level.id,
        'theme': level.theme.value,
        'rooms': len(level.rooms),
        'edges': G.number_of_edges(),
        'roles': dict(Counter(r.role.value for r in level.rooms)),
        'templates': dict(Counter(r.template.value for r in level.rooms)),
        'enemies': len(level.enemies),
        'treasures': len(level.treasures),
        'boss': level.boss.name if level.boss is not None else None,
        'diameter': nx.diameter(G) if nx.is_connected(G) else None,
    }
