"""
Connectivity Planner
====================

Wires generated rooms into a connected, undirected level graph.

Policies:
1. Main path: entrance -> shuffled mid rooms (treasure last) -> boss
2. Branches: every remaining room hangs off a main-path room
3. Loops: up to floor(room_count * branching_factor) extra edges

All edges go through RoomGraph, which keeps them symmetric, free of self
loops and within the four-door degree cap.
"""

import math
import logging
from typing import List, Optional, Sequence

import networkx as nx

from levelforge.constants.generation_constants import MAX_ROOM_DEGREE
from levelforge.core.definitions import RoomRole
from levelforge.generation.models import Room
from levelforge.generation.seeded_random import SeededRandomSource

logger = logging.getLogger(__name__)


class RoomGraph:
    """
    Undirected room adjacency backed by a networkx Graph.

    Neighbour order is the order edges were added, which later decides
    which door slot each connection uses.
    """

    def __init__(self, room_ids: Sequence[str], max_degree: int = MAX_ROOM_DEGREE):
        self.max_degree = max_degree
        self.graph = nx.Graph()
        self.graph.add_nodes_from(room_ids)

    def _require(self, room_id: str) -> None:
        if room_id not in self.graph:
            raise KeyError(f"Unknown room '{room_id}'")

    def add_edge(self, a: str, b: str) -> bool:
        """
        Connect two rooms.

        Returns:
            True if the edge was added; False for self loops, existing
            edges, or when either room is at the degree cap

        Raises:
            KeyError: Either room is unknown
        """
        self._require(a)
        self._require(b)
        if a == b or self.graph.has_edge(a, b):
            return False
        if self.degree(a) >= self.max_degree or self.degree(b) >= self.max_degree:
            return False
        self.graph.add_edge(a, b)
        return True

    def has_edge(self, a: str, b: str) -> bool:
        return self.graph.has_edge(a, b)

    def degree(self, room_id: str) -> int:
        self._require(room_id)
        return self.graph.degree(room_id)

    def has_capacity(self, room_id: str) -> bool:
        return self.degree(room_id) < self.max_degree

    def neighbors(self, room_id: str) -> List[str]:
        """Neighbours in edge insertion order."""
        self._require(room_id)
        return list(self.graph.adj[room_id])

    def is_connected(self) -> bool:
        return self.graph.number_of_nodes() > 0 and nx.is_connected(self.graph)

    def reachable_from(self, room_id: str) -> List[str]:
        """Rooms reachable from room_id, in BFS order."""
        self._require(room_id)
        return [room_id] + [v for _, v in nx.bfs_edges(self.graph, room_id)]

    def to_networkx(self) -> nx.Graph:
        return self.graph.copy()

    def __len__(self) -> int:
        return self.graph.number_of_nodes()


class ConnectivityPlanner:
    """
    Builds the level graph for an ordered list of rooms.

    Args:
        rng: Random source
        main_path_length: Rooms on the entrance-to-boss path, both included
        branching_factor: Bounds the number of extra loop edges
        max_degree: Door slots per room

    Example:
        >>> planner = ConnectivityPlanner(rng, main_path_length=5, branching_factor=0.3)
        >>> graph = planner.plan(rooms)
        >>> graph.is_connected()
        True
    """

    def __init__(self, rng: SeededRandomSource, main_path_length: int,
                 branching_factor: float, max_degree: int = MAX_ROOM_DEGREE):
        self.rng = rng
        self.main_path_length = main_path_length
        self.branching_factor = branching_factor
        self.max_degree = max_degree
        self.main_path: List[str] = []

    def plan(self, rooms: List[Room]) -> RoomGraph:
        """
        Connect rooms into a single component.

        Args:
            rooms: Ordered rooms containing one entrance and one boss room

        Returns:
            RoomGraph with every room reachable from the entrance
        """
        graph = RoomGraph([r.id for r in rooms], self.max_degree)

        if len(rooms) == 2:
            graph.add_edge(rooms[0].id, rooms[1].id)
            self.main_path = [rooms[0].id, rooms[1].id]
            return graph

        entrance = next(r for r in rooms if r.is_entrance)
        boss = next(r for r in rooms if r.role == RoomRole.BOSS)
        pool = [r for r in rooms if r is not entrance and r is not boss]

        self.rng.shuffle(pool)
        pool.sort(key=lambda r: r.role == RoomRole.TREASURE)

        path_length = min(self.main_path_length, len(rooms))
        on_path = pool[:max(0, path_length - 2)]
        branches = pool[len(on_path):]

        self.main_path = [entrance.id] + [r.id for r in on_path] + [boss.id]
        for a, b in zip(self.main_path, self.main_path[1:]):
            graph.add_edge(a, b)

        self._attach_branches(graph, branches)
        self._add_loops(graph, [r.id for r in rooms])

        logger.debug(
            f"Planned graph: path={len(self.main_path)} rooms, "
            f"edges={graph.graph.number_of_edges()}"
        )
        return graph

    def _attach_branches(self, graph: RoomGraph, branches: List[Room]) -> None:
        attached: List[str] = []
        path = self.main_path
        n = len(path)

        for room in branches:
            if room.role == RoomRole.TREASURE:
                index = self.rng.randint(math.ceil(n / 2))
            else:
                index = self.rng.randint(n)

            target = self._first_with_capacity(graph, path[index:] + path[:index] + attached)
            if target is None:
                raise RuntimeError(f"No room with a free door for branch '{room.id}'")
            if target != path[index]:
                logger.debug(f"{path[index]} is full, attaching {room.id} to {target}")

            graph.add_edge(target, room.id)
            attached.append(room.id)

    @staticmethod
    def _first_with_capacity(graph: RoomGraph, candidates: List[str]) -> Optional[str]:
        for room_id in candidates:
            if graph.has_capacity(room_id):
                return room_id
        return None

    def _add_loops(self, graph: RoomGraph, room_ids: List[str]) -> int:
        if self.branching_factor <= 0:
            return 0

        max_extra = int(len(room_ids) * self.branching_factor)
        extra = self.rng.randint(max_extra + 1)
        added = 0
        for _ in range(extra):
            eligible = [r for r in room_ids if graph.has_capacity(r)]
            if len(eligible) < 2:
                break
            i = self.rng.randint(len(eligible))
            j = self.rng.randint(len(eligible) - 1)
            if j >= i:
                j += 1
            if graph.add_edge(eligible[i], eligible[j]):
                added += 1
        return added
