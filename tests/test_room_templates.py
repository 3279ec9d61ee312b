"""
Tests for Room Template Synthesizer
===================================

Covers:
1. Border and door invariant for every template
2. Template-specific structure (platform, pedestals, shop items)
3. Size ranges and template selection
4. Determinism and error handling

Run: pytest tests/test_room_templates.py -v
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from levelforge.constants.generation_constants import ROOM_SIZE_RANGES
from levelforge.core.definitions import RoomRole, RoomTemplate, TileKind
from levelforge.generation.noise_field import NoiseField
from levelforge.generation.room_templates import RoomTemplateSynthesizer
from levelforge.generation.seeded_random import SeededRandomSource

SEEDS = [f"tmpl-{i}" for i in range(8)]


class FixedRandom(SeededRandomSource):
    """Random source returning the same draw forever."""

    def __init__(self, value):
        super().__init__("fixed")
        self.value = value

    def next(self):
        return self.value


def make_synth(seed: str) -> RoomTemplateSynthesizer:
    rng = SeededRandomSource(seed)
    return RoomTemplateSynthesizer(rng, NoiseField(rng))


def build(seed: str, template: RoomTemplate) -> np.ndarray:
    synth = make_synth(seed)
    w, h = synth.room_size(template)
    return synth.synthesize(w, h, template)


def door_midpoints(grid):
    h, w = grid.shape
    return [(w // 2, 0), (w - 1, h // 2), (w // 2, h - 1), (0, h // 2)]


class TestBorderInvariant:
    """Sealed borders with four doors."""

    @pytest.mark.parametrize("template", list(RoomTemplate))
    @pytest.mark.parametrize("seed", SEEDS)
    def test_border_is_wall_except_doors(self, template, seed):
        """Border tiles are wall apart from the four door midpoints."""
        grid = build(seed, template)
        doors = set(door_midpoints(grid))
        h, w = grid.shape
        for y in range(h):
            for x in range(w):
                if 0 < x < w - 1 and 0 < y < h - 1:
                    continue
                expected = TileKind.DOOR if (x, y) in doors else TileKind.WALL
                assert grid[y, x] == expected, (template, x, y)

    @pytest.mark.parametrize("template", list(RoomTemplate))
    def test_door_approach_is_floor(self, template):
        """The three tiles just inside each door are floor."""
        for seed in SEEDS:
            grid = build(seed, template)
            h, w = grid.shape
            cx, cy = w // 2, h // 2
            for d in (-1, 0, 1):
                assert grid[1, cx + d] == TileKind.FLOOR
                assert grid[h - 2, cx + d] == TileKind.FLOOR
                assert grid[cy + d, 1] == TileKind.FLOOR
                assert grid[cy + d, w - 2] == TileKind.FLOOR

    @pytest.mark.parametrize("template", list(RoomTemplate))
    def test_grid_format(self, template):
        """Grids are read-only int8 arrays holding known tile kinds."""
        synth = make_synth("format")
        w, h = synth.room_size(template)
        grid = synth.synthesize(w, h, template)
        assert grid.shape == (h, w)
        assert grid.dtype == np.int8
        assert not grid.flags.writeable
        assert set(np.unique(grid).tolist()) <= {int(t) for t in TileKind}
        with pytest.raises(ValueError):
            grid[1, 1] = TileKind.FLOOR


class TestTemplates:
    """Template-specific structure."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_boss_arena_platform_and_hazards(self, seed):
        """Boss arena centre is the raised platform; eight hazards are placed."""
        grid = build(seed, RoomTemplate.BOSS_ARENA)
        h, w = grid.shape
        assert grid[h // 2, w // 2] == TileKind.ELEVATED_PLATFORM
        assert np.count_nonzero(grid == TileKind.HAZARD) == 8
        assert np.count_nonzero(grid == TileKind.DECORATION) == 0

    @pytest.mark.parametrize("seed", SEEDS)
    def test_treasure_vault_has_pedestal(self, seed):
        """Every vault variant holds at least one pedestal and no hazards."""
        grid = build(seed, RoomTemplate.TREASURE_VAULT)
        assert np.count_nonzero(grid == TileKind.PEDESTAL) >= 1
        assert np.count_nonzero(grid == TileKind.HAZARD) == 0
        assert np.count_nonzero(grid == TileKind.DECORATION) <= 5

    @pytest.mark.parametrize("seed", SEEDS)
    def test_shop_items_without_markers(self, seed):
        """Shops display items and carry no hazards or decorations."""
        grid = build(seed, RoomTemplate.SHOP)
        assert np.count_nonzero(grid == TileKind.SHOP_ITEM) >= 1
        assert np.count_nonzero(grid == TileKind.HAZARD) == 0
        assert np.count_nonzero(grid == TileKind.DECORATION) == 0

    @pytest.mark.parametrize("template", [
        RoomTemplate.STANDARD, RoomTemplate.CROSS, RoomTemplate.HUB,
        RoomTemplate.CORRIDOR_NS, RoomTemplate.CORRIDOR_EW,
    ])
    def test_centre_is_floor(self, template):
        """Templates carved through the centre keep it walkable."""
        for seed in SEEDS:
            grid = build(seed, template)
            h, w = grid.shape
            assert grid[h // 2, w // 2] == TileKind.FLOOR

    def test_standard_has_open_corridors(self):
        """Standard rooms keep a floor column through the centre near the doors."""
        grid = build("corridors", RoomTemplate.STANDARD)
        h, w = grid.shape
        cx, cy = w // 2, h // 2
        walkable = np.isin(grid, [TileKind.FLOOR, TileKind.HAZARD, TileKind.DECORATION])
        assert walkable[1:h - 1, cx].all()
        assert walkable[cy, 1:w - 1].all()

    @pytest.mark.parametrize("template", [
        RoomTemplate.STANDARD, RoomTemplate.CIRCULAR, RoomTemplate.CROSS,
        RoomTemplate.CORRIDOR_NS, RoomTemplate.CORRIDOR_EW,
        RoomTemplate.CHAMBERS, RoomTemplate.HUB,
    ])
    def test_marker_limits(self, template):
        """Ordinary rooms get at most three hazards and three decorations."""
        for seed in SEEDS:
            grid = build(seed, template)
            assert np.count_nonzero(grid == TileKind.HAZARD) <= 3
            assert np.count_nonzero(grid == TileKind.DECORATION) <= 3

    def test_markers_avoid_doors_and_centre(self):
        """Markers never touch a door or the centre box."""
        for seed in SEEDS:
            for template in RoomTemplate:
                grid = build(seed, template)
                h, w = grid.shape
                for y, x in np.argwhere(np.isin(grid, [TileKind.HAZARD, TileKind.DECORATION])):
                    assert not (abs(x - w / 2) < 3 and abs(y - h / 2) < 3)
                    for dx, dy in door_midpoints(grid):
                        assert max(abs(x - dx), abs(y - dy)) > 1

    def test_floor_present(self):
        """Every template carves some floor."""
        for template in RoomTemplate:
            grid = build("floor", template)
            assert np.count_nonzero(grid == TileKind.FLOOR) > 20


class TestSizing:
    """Room sizes and template choice."""

    @pytest.mark.parametrize("template", list(RoomTemplate))
    def test_size_ranges(self, template):
        """Sizes fall inside the template's range."""
        (wb, ws), (hb, hs) = ROOM_SIZE_RANGES[template]
        synth = make_synth("sizes")
        for _ in range(30):
            w, h = synth.room_size(template)
            assert wb <= w < wb + ws
            assert hb <= h < hb + hs

    def test_circular_is_square(self):
        """Circular rooms are square."""
        synth = make_synth("square")
        for _ in range(20):
            w, h = synth.room_size(RoomTemplate.CIRCULAR)
            assert w == h

    def test_boss_role_always_arena(self):
        """Boss rooms always use the arena template."""
        synth = make_synth("boss")
        assert all(synth.choose_template(RoomRole.BOSS) == RoomTemplate.BOSS_ARENA
                   for _ in range(20))

    def test_treasure_role_always_vault(self):
        """Treasure rooms always use the vault template."""
        synth = make_synth("treasure")
        picks = {synth.choose_template(RoomRole.TREASURE) for _ in range(200)}
        assert picks == {RoomTemplate.TREASURE_VAULT}

    def test_normal_role_excludes_special_templates(self):
        """Normal rooms never roll arena, vault or shop layouts."""
        synth = make_synth("normal")
        picks = {synth.choose_template(RoomRole.NORMAL) for _ in range(300)}
        assert RoomTemplate.BOSS_ARENA not in picks
        assert RoomTemplate.TREASURE_VAULT not in picks
        assert RoomTemplate.SHOP not in picks
        assert RoomTemplate.STANDARD in picks


class TestErrors:
    """Determinism and failures."""

    def test_deterministic(self):
        """Same seed, same grid."""
        for template in RoomTemplate:
            assert build("same", template).tobytes() == build("same", template).tobytes()

    def test_accepts_string_template(self):
        """Template string values are accepted."""
        grid = make_synth("str").synthesize(25, 25, "hub")
        assert grid.shape == (25, 25)

    def test_unknown_template(self):
        """Unknown templates raise ValueError."""
        with pytest.raises(ValueError):
            make_synth("bad").synthesize(25, 25, "spiral")

    def test_too_small(self):
        """Grids below the minimum size are rejected."""
        with pytest.raises(ValueError):
            make_synth("small").synthesize(4, 30, RoomTemplate.STANDARD)


class TestTemplateDetails:
    """Exact layouts under a fixed random stream."""

    def _synth(self, value):
        rng = FixedRandom(value)
        return RoomTemplateSynthesizer(rng, NoiseField(rng))

    def test_shop_items_reach_three_quarters(self):
        """Counterless shops stock items up to 75% of each edge inclusive."""
        grid = self._synth(0.99).synthesize(24, 24, RoomTemplate.SHOP)
        assert grid[2, 18] == TileKind.SHOP_ITEM
        assert grid[21, 18] == TileKind.SHOP_ITEM
        assert grid[18, 2] == TileKind.SHOP_ITEM
        assert grid[18, 21] == TileKind.SHOP_ITEM

    def test_circular_vault_integer_radius(self):
        """The circular vault disc uses a whole-tile radius."""
        grid = self._synth(0.0).synthesize(19, 19, RoomTemplate.TREASURE_VAULT)
        assert grid[9, 12] == TileKind.PEDESTAL
        assert grid[11, 16] == TileKind.WALL
        assert grid[9 + 7, 9] != TileKind.WALL


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
