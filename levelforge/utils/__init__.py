"""
Utility Module for Levelforge
=============================

Components:
    - validate_level: Structural invariant checks returning (is_valid, errors)
    - check_room_border: Border and door checks for a single room
    - is_centre_fallback: Enemy parked on a non-floor room centre
    - reachable_rooms: BFS over the room graph
    - walkable_regions: Walkable region count of a room grid
    - summarize_level: Compact level statistics
"""

from .graph_utils import (
    check_room_border,
    is_centre_fallback,
    reachable_rooms,
    summarize_level,
    validate_level,
    walkable_regions,
)

__all__ = [
    'check_room_border',
    'is_centre_fallback',
    'reachable_rooms',
    'summarize_level',
    'validate_level',
    'walkable_regions',
]
