"""
Tests for Connectivity Planner
==============================

Covers:
1. RoomGraph edge rules (symmetry, self loops, degree cap)
2. Main path construction
3. Branch attachment and loop edges
4. Connectivity across many seeds

Run: pytest tests/test_connectivity.py -v
"""

import sys
from pathlib import Path

import networkx as nx
import numpy as np
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from levelforge.core.definitions import RoomRole, RoomTemplate
from levelforge.generation.connectivity import ConnectivityPlanner, RoomGraph
from levelforge.generation.models import Room
from levelforge.generation.seeded_random import SeededRandomSource


def make_rooms(n_normal: int, n_treasure: int = 0, n_elite: int = 0):
    """Entrance, boss, then the requested filler rooms."""
    roles = ([RoomRole.ENTRANCE, RoomRole.BOSS]
             + [RoomRole.NORMAL] * n_normal
             + [RoomRole.TREASURE] * n_treasure
             + [RoomRole.ELITE] * n_elite)
    rooms = []
    for i, role in enumerate(roles):
        rooms.append(Room(
            id=f"room-{i}",
            role=role,
            template=RoomTemplate.STANDARD,
            width=10,
            height=10,
            grid=np.zeros((10, 10), dtype=np.int8),
            is_entrance=role == RoomRole.ENTRANCE,
        ))
    return rooms


class TestRoomGraph:
    """Adjacency abstraction."""

    def test_symmetric_edges(self):
        """Adding a->b makes b a neighbour of a and a of b."""
        g = RoomGraph(["a", "b"])
        assert g.add_edge("a", "b")
        assert g.has_edge("a", "b") and g.has_edge("b", "a")
        assert g.neighbors("a") == ["b"]
        assert g.neighbors("b") == ["a"]

    def test_rejects_self_loop_and_duplicate(self):
        """Self loops and duplicate edges are refused."""
        g = RoomGraph(["a", "b"])
        assert not g.add_edge("a", "a")
        assert g.add_edge("a", "b")
        assert not g.add_edge("b", "a")
        assert g.degree("a") == 1

    def test_degree_cap(self):
        """A room never exceeds four connections."""
        ids = ["hub"] + [f"n{i}" for i in range(6)]
        g = RoomGraph(ids)
        added = [g.add_edge("hub", f"n{i}") for i in range(6)]
        assert added == [True] * 4 + [False] * 2
        assert g.degree("hub") == 4
        assert not g.has_capacity("hub")

    def test_unknown_room(self):
        """Unknown rooms raise KeyError."""
        g = RoomGraph(["a"])
        with pytest.raises(KeyError):
            g.add_edge("a", "zzz")
        with pytest.raises(KeyError):
            g.degree("zzz")

    def test_neighbour_order_is_insertion_order(self):
        """Neighbours come back in the order edges were added."""
        g = RoomGraph(["a", "b", "c", "d"])
        g.add_edge("a", "c")
        g.add_edge("a", "b")
        g.add_edge("d", "a")
        assert g.neighbors("a") == ["c", "b", "d"]

    def test_reachability(self):
        """BFS reachability and connectivity."""
        g = RoomGraph(["a", "b", "c"])
        g.add_edge("a", "b")
        assert not g.is_connected()
        assert set(g.reachable_from("a")) == {"a", "b"}
        g.add_edge("b", "c")
        assert g.is_connected()
        assert isinstance(g.to_networkx(), nx.Graph)


class TestConnectivityPlanner:
    """Level graph construction."""

    def test_two_rooms(self):
        """Two rooms are connected directly."""
        rooms = make_rooms(0)
        planner = ConnectivityPlanner(SeededRandomSource("two"), 7, 0.4)
        g = planner.plan(rooms)
        assert g.has_edge("room-0", "room-1")
        assert g.graph.number_of_edges() == 1

    def test_main_path_shape(self):
        """Main path runs entrance -> mid rooms -> boss."""
        rooms = make_rooms(8)
        planner = ConnectivityPlanner(SeededRandomSource("path"), 5, 0.0)
        g = planner.plan(rooms)
        path = planner.main_path
        assert len(path) == 5
        assert path[0] == "room-0"
        assert path[-1] == "room-1"
        for a, b in zip(path, path[1:]):
            assert g.has_edge(a, b)

    def test_treasure_rooms_kept_off_main_path(self):
        """Treasure rooms sort behind other mid rooms."""
        rooms = make_rooms(6, n_treasure=2)
        planner = ConnectivityPlanner(SeededRandomSource("treasure"), 6, 0.0)
        planner.plan(rooms)
        roles = {r.id: r.role for r in rooms}
        assert all(roles[rid] != RoomRole.TREASURE for rid in planner.main_path)

    def test_no_branching_builds_tree(self):
        """Without loops the graph is a spanning tree."""
        rooms = make_rooms(12, n_treasure=3)
        planner = ConnectivityPlanner(SeededRandomSource("tree"), 6, 0.0)
        g = planner.plan(rooms)
        G = g.to_networkx()
        assert nx.is_tree(G)

    def test_loops_bounded(self):
        """Extra edges never exceed floor(room_count * branching_factor)."""
        rooms = make_rooms(10)
        planner = ConnectivityPlanner(SeededRandomSource("loops"), 6, 0.5)
        g = planner.plan(rooms)
        extra = g.graph.number_of_edges() - (len(rooms) - 1)
        assert 0 <= extra <= int(len(rooms) * 0.5)

    @pytest.mark.parametrize("seed", [f"conn-{i}" for i in range(25)])
    def test_connected_with_degree_cap(self, seed):
        """Every plan is connected and within the degree cap."""
        rng = SeededRandomSource(seed)
        n_normal = 3 + rng.randint(20)
        rooms = make_rooms(n_normal, n_treasure=rng.randint(5), n_elite=rng.randint(3))
        planner = ConnectivityPlanner(rng, 2 + rng.randint(8), rng.next())
        g = planner.plan(rooms)
        assert g.is_connected()
        assert set(g.reachable_from("room-0")) == {r.id for r in rooms}
        assert max(d for _, d in g.graph.degree()) <= 4

    def test_short_main_path_with_many_branches(self):
        """A two-room main path still absorbs many branch rooms."""
        rooms = make_rooms(20)
        planner = ConnectivityPlanner(SeededRandomSource("star"), 2, 0.0)
        g = planner.plan(rooms)
        assert planner.main_path == ["room-0", "room-1"]
        assert g.is_connected()
        assert max(d for _, d in g.graph.degree()) <= 4

    def test_deterministic(self):
        """Same seed, same edges."""
        def edges(seed):
            planner = ConnectivityPlanner(SeededRandomSource(seed), 5, 0.4)
            g = planner.plan(make_rooms(10, n_treasure=2))
            return {r: g.neighbors(r) for r in g.graph.nodes}

        assert edges("det") == edges("det")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
