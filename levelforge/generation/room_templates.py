"""
Room Template Synthesizer
=========================

Produces the tile grid of a room from one of ten layout algorithms.

Templates:
- standard:        noise-carved cave with a walkable centre and door corridors
- circular:        disc room, optionally a donut pierced by passages
- corridorN/E:     long corridor with rectangular side chambers
- cross:           two perpendicular corridors through the centre
- chambers:        3-5 attached rectangles joined by L-shaped corridors
- hub:             central disc with spokes ending in round chambers
- boss-arena:      open arena with obstacles and a raised central platform
- treasure-vault:  circular, pillared or partitioned vault with pedestals
- shop:            bordered hall with an optional counter and item displays

Every grid goes through the same finalisation: the border is sealed, a
3-wide approach is cleared inside each door midpoint, doors are stamped,
then hazards and decorations are overlaid.

Grids are numpy int8 arrays of shape (height, width), indexed grid[y, x],
returned read-only.
"""

import math
import logging
from typing import List, Tuple

import numpy as np
from scipy import ndimage

from levelforge.constants.generation_constants import (
    DEFAULT_TEMPLATE,
    MIN_ROOM_SIZE,
    ROOM_SIZE_RANGES,
    SQUARE_TEMPLATES,
    TEMPLATE_WEIGHTS,
)
from levelforge.core.definitions import RoomRole, RoomTemplate, SPECIAL_MARKER_TILES, TileKind
from levelforge.generation.noise_field import NoiseField
from levelforge.generation.seeded_random import SeededRandomSource

logger = logging.getLogger(__name__)

WALL = TileKind.WALL
FLOOR = TileKind.FLOOR

NOISE_FREQUENCY = 0.1
NOISE_FLOOR_THRESHOLD = 0.3
DOOR_APPROACH_DEPTH = 2

EIGHT_NEIGHBOURHOOD = np.ones((3, 3), dtype=bool)


# ==========================================
# GRID HELPERS
# ==========================================

def _fill_rect(grid: np.ndarray, x0: int, y0: int, x1: int, y1: int, value: int) -> None:
    """Fill the inclusive rectangle (x0, y0)-(x1, y1), clipped to the interior."""
    h, w = grid.shape
    x0, x1 = max(1, min(x0, x1)), min(w - 2, max(x0, x1))
    y0, y1 = max(1, min(y0, y1)), min(h - 2, max(y0, y1))
    if x0 > x1 or y0 > y1:
        return
    grid[y0:y1 + 1, x0:x1 + 1] = value


def _disc_mask(shape: Tuple[int, int], cx: float, cy: float, radius: float,
               strict: bool = False) -> np.ndarray:
    """Boolean mask of tiles within radius of (cx, cy)."""
    h, w = shape
    ys, xs = np.ogrid[0:h, 0:w]
    dist_sq = (xs - cx) ** 2 + (ys - cy) ** 2
    if strict:
        return dist_sq < radius * radius
    return dist_sq <= radius * radius


def _interior_mask(shape: Tuple[int, int]) -> np.ndarray:
    mask = np.zeros(shape, dtype=bool)
    mask[1:-1, 1:-1] = True
    return mask


def _fill_disc(grid: np.ndarray, cx: float, cy: float, radius: float, value: int) -> None:
    """Fill a disc, clipped to the interior."""
    grid[_disc_mask(grid.shape, cx, cy, radius) & _interior_mask(grid.shape)] = value


def _carve_walkable_paths(grid: np.ndarray) -> None:
    """Carve 3-wide straight corridors from the centre to each door."""
    h, w = grid.shape
    cx, cy = w // 2, h // 2
    _fill_rect(grid, cx - 1, 1, cx + 1, h - 2, FLOOR)
    _fill_rect(grid, 1, cy - 1, w - 2, cy + 1, FLOOR)


# ==========================================
# SYNTHESIZER
# ==========================================

class RoomTemplateSynthesizer:
    """
    Builds room tile grids from templates using a shared random source.

    Args:
        rng: Random source; every draw advances the level's stream
        noise: Noise field for organic carving

    Example:
        >>> rng = SeededRandomSource("abc")
        >>> synth = RoomTemplateSynthesizer(rng, NoiseField(rng))
        >>> grid = synth.synthesize(25, 25, RoomTemplate.STANDARD)
        >>> grid.shape
        (25, 25)
    """

    def __init__(self, rng: SeededRandomSource, noise: NoiseField):
        self.rng = rng
        self.noise = noise
        self._builders = {
            RoomTemplate.STANDARD: self._build_standard,
            RoomTemplate.CIRCULAR: self._build_circular,
            RoomTemplate.CORRIDOR_NS: self._build_corridor_ns,
            RoomTemplate.CORRIDOR_EW: self._build_corridor_ew,
            RoomTemplate.CROSS: self._build_cross,
            RoomTemplate.CHAMBERS: self._build_chambers,
            RoomTemplate.HUB: self._build_hub,
            RoomTemplate.BOSS_ARENA: self._build_boss_arena,
            RoomTemplate.TREASURE_VAULT: self._build_treasure_vault,
            RoomTemplate.SHOP: self._build_shop,
        }

    def choose_template(self, role: RoomRole) -> RoomTemplate:
        """Weighted template pick for a room role."""
        role = RoomRole(role)
        return self.rng.weighted_choice(TEMPLATE_WEIGHTS[role], DEFAULT_TEMPLATE)

    def room_size(self, template: RoomTemplate) -> Tuple[int, int]:
        """Draw (width, height) for a template."""
        template = RoomTemplate(template)
        (w_base, w_span), (h_base, h_span) = ROOM_SIZE_RANGES[template]
        width = self.rng.randrange(w_base, w_span)
        if template in SQUARE_TEMPLATES:
            return width, width
        height = self.rng.randrange(h_base, h_span)
        return width, height

    def synthesize(self, width: int, height: int, template: RoomTemplate) -> np.ndarray:
        """
        Build the tile grid for a room.

        Args:
            width: Grid width in tiles
            height: Grid height in tiles
            template: Layout algorithm (enum or its string value)

        Returns:
            Read-only int8 array of shape (height, width)

        Raises:
            ValueError: Unknown template or grid smaller than MIN_ROOM_SIZE
        """
        template = RoomTemplate(template)
        if width < MIN_ROOM_SIZE or height < MIN_ROOM_SIZE:
            raise ValueError(
                f"Room {width}x{height} is smaller than {MIN_ROOM_SIZE}x{MIN_ROOM_SIZE}"
            )

        grid = np.full((height, width), WALL, dtype=np.int8)
        self._builders[template](grid)
        self._finalize(grid, template)

        grid.setflags(write=False)
        return grid

    # ==========================================
    # FINALISATION
    # ==========================================

    def _finalize(self, grid: np.ndarray, template: RoomTemplate) -> None:
        h, w = grid.shape
        cx, cy = w // 2, h // 2

        grid[0, :] = WALL
        grid[-1, :] = WALL
        grid[:, 0] = WALL
        grid[:, -1] = WALL

        depth = DOOR_APPROACH_DEPTH
        _fill_rect(grid, cx - 1, 1, cx + 1, depth, FLOOR)
        _fill_rect(grid, cx - 1, h - 1 - depth, cx + 1, h - 2, FLOOR)
        _fill_rect(grid, 1, cy - 1, depth, cy + 1, FLOOR)
        _fill_rect(grid, w - 1 - depth, cy - 1, w - 2, cy + 1, FLOOR)

        grid[0, cx] = TileKind.DOOR
        grid[h - 1, cx] = TileKind.DOOR
        grid[cy, 0] = TileKind.DOOR
        grid[cy, w - 1] = TileKind.DOOR

        self._add_environmental_details(grid, template)

    def _add_environmental_details(self, grid: np.ndarray, template: RoomTemplate) -> None:
        if template == RoomTemplate.BOSS_ARENA:
            self._scatter(grid, TileKind.HAZARD, 8)
        elif template == RoomTemplate.TREASURE_VAULT:
            self._scatter(grid, TileKind.DECORATION, 5)
        elif template == RoomTemplate.SHOP:
            return
        else:
            if self.rng.chance(0.3):
                self._scatter(grid, TileKind.HAZARD, 3)
            if self.rng.chance(0.5):
                self._scatter(grid, TileKind.DECORATION, 3)

    def _marker_candidates(self, grid: np.ndarray, marker: TileKind) -> np.ndarray:
        """Floor tiles (y, x) eligible for a marker, in row-major order."""
        h, w = grid.shape
        blockers = [int(t) for t in SPECIAL_MARKER_TILES]
        if marker == TileKind.DECORATION:
            blockers.append(int(TileKind.HAZARD))

        near_special = ndimage.binary_dilation(
            np.isin(grid, blockers), structure=EIGHT_NEIGHBOURHOOD
        )
        ys, xs = np.ogrid[0:h, 0:w]
        near_centre = (np.abs(xs - w / 2) < 3) & (np.abs(ys - h / 2) < 3)

        eligible = (grid == FLOOR) & ~near_special & ~near_centre & _interior_mask(grid.shape)
        return np.argwhere(eligible)

    def _scatter(self, grid: np.ndarray, marker: TileKind, count: int) -> int:
        """Place up to count markers on random eligible floor tiles."""
        placed = 0
        for _ in range(count):
            candidates = self._marker_candidates(grid, marker)
            if len(candidates) == 0:
                logger.debug(f"No room for more {marker.name.lower()} markers after {placed}")
                break
            y, x = candidates[self.rng.randint(len(candidates))]
            grid[y, x] = marker
            placed += 1
        return placed

    # ==========================================
    # TEMPLATES
    # ==========================================

    def _build_standard(self, grid: np.ndarray) -> None:
        h, w = grid.shape
        xs = np.arange(1, w - 1) * NOISE_FREQUENCY
        ys = np.arange(1, h - 1) * NOISE_FREQUENCY
        values = self.noise.sample_grid(xs, ys)
        grid[1:-1, 1:-1] = np.where(values > NOISE_FLOOR_THRESHOLD, FLOOR, WALL)

        radius = int(min(w, h) * 0.25)
        _fill_disc(grid, w // 2, h // 2, radius, FLOOR)
        _carve_walkable_paths(grid)

    def _build_circular(self, grid: np.ndarray) -> None:
        h, w = grid.shape
        cx, cy = w // 2, h // 2
        max_radius = min(cx, cy) - 1
        inner_radius = max_radius * 0.3
        donut = self.rng.chance(0.4)

        grid[_disc_mask(grid.shape, cx, cy, max_radius, strict=True)] = FLOOR
        if not donut:
            return

        grid[_disc_mask(grid.shape, cx, cy, inner_radius, strict=True)] = WALL
        passages = 2 + self.rng.randint(3)
        for i in range(passages):
            angle = (i / passages) * math.pi * 2
            px = int(math.floor(cx + math.cos(angle) * inner_radius))
            py = int(math.floor(cy + math.sin(angle) * inner_radius))
            _fill_rect(grid, px - 1, py - 1, px + 1, py + 1, FLOOR)

    def _build_corridor_ns(self, grid: np.ndarray) -> None:
        h, w = grid.shape
        corridor_width = max(5, int(w * 0.3))
        x0 = (w - corridor_width) // 2
        x1 = x0 + corridor_width - 1
        _fill_rect(grid, x0, 1, x1, h - 2, FLOOR)

        chambers = 1 + self.rng.randint(3)
        spacing = h // (chambers + 1)
        for i in range(1, chambers + 1):
            y = i * spacing
            left = self.rng.chance(0.5)
            side_width = self.rng.randrange(4, 4)
            side_height = self.rng.randrange(3, 3)
            top = y - side_height // 2
            if left:
                _fill_rect(grid, x0 - side_width, top, x0 - 1, top + side_height - 1, FLOOR)
            else:
                _fill_rect(grid, x1 + 1, top, x1 + side_width, top + side_height - 1, FLOOR)

    def _build_corridor_ew(self, grid: np.ndarray) -> None:
        h, w = grid.shape
        corridor_height = max(5, int(h * 0.3))
        y0 = (h - corridor_height) // 2
        y1 = y0 + corridor_height - 1
        _fill_rect(grid, 1, y0, w - 2, y1, FLOOR)

        chambers = 1 + self.rng.randint(3)
        spacing = w // (chambers + 1)
        for i in range(1, chambers + 1):
            x = i * spacing
            above = self.rng.chance(0.5)
            chamber_width = self.rng.randrange(3, 3)
            chamber_height = self.rng.randrange(4, 4)
            left = x - chamber_width // 2
            if above:
                _fill_rect(grid, left, y0 - chamber_height, left + chamber_width - 1, y0 - 1, FLOOR)
            else:
                _fill_rect(grid, left, y1 + 1, left + chamber_width - 1, y1 + chamber_height, FLOOR)

    def _build_cross(self, grid: np.ndarray) -> None:
        h, w = grid.shape
        band_height = max(5, int(h * 0.3))
        band_width = max(5, int(w * 0.3))
        y0 = (h - band_height) // 2
        x0 = (w - band_width) // 2
        _fill_rect(grid, 1, y0, w - 2, y0 + band_height - 1, FLOOR)
        _fill_rect(grid, x0, 1, x0 + band_width - 1, h - 2, FLOOR)

    def _build_chambers(self, grid: np.ndarray) -> None:
        h, w = grid.shape
        count = 3 + self.rng.randint(3)

        first_w, first_h = max(3, int(w * 0.3)), max(3, int(h * 0.3))
        chambers: List[Tuple[int, int, int, int]] = [
            ((w - first_w) // 2, (h - first_h) // 2, first_w, first_h)
        ]

        for _ in range(1, count):
            px, py, pw, ph = chambers[self.rng.randint(len(chambers))]
            side = self.rng.randint(4)
            new_w = self.rng.randrange(5, 10)
            new_h = self.rng.randrange(5, 10)

            if side == 0:      # top
                new_x = px + self.rng.randint(max(1, pw - 3))
                new_y = py - new_h
            elif side == 1:    # right
                new_x = px + pw
                new_y = py + self.rng.randint(max(1, ph - 3))
            elif side == 2:    # bottom
                new_x = px + self.rng.randint(max(1, pw - 3))
                new_y = py + ph
            else:              # left
                new_x = px - new_w
                new_y = py + self.rng.randint(max(1, ph - 3))

            new_x = max(1, min(new_x, w - new_w - 1))
            new_y = max(1, min(new_y, h - new_h - 1))
            chambers.append((new_x, new_y, new_w, new_h))

        for x, y, cw, ch in chambers:
            _fill_rect(grid, x, y, x + cw - 1, y + ch - 1, FLOOR)

        centres = [(x + cw // 2, y + ch // 2) for x, y, cw, ch in chambers]
        for i in range(1, len(centres)):
            x1, y1 = centres[i]
            x2, y2 = min(centres[:i], key=lambda c: (c[0] - x1) ** 2 + (c[1] - y1) ** 2)
            width = self.rng.randrange(2, 2)
            if self.rng.chance(0.5):
                _fill_rect(grid, x1, y1, x2, y1 + width - 1, FLOOR)
                _fill_rect(grid, x2, y1, x2 + width - 1, y2, FLOOR)
            else:
                _fill_rect(grid, x1, y1, x1 + width - 1, y2, FLOOR)
                _fill_rect(grid, x1, y2, x2, y2 + width - 1, FLOOR)

    def _build_hub(self, grid: np.ndarray) -> None:
        h, w = grid.shape
        cx, cy = w // 2, h // 2
        min_dim = min(w, h)
        _fill_disc(grid, cx, cy, min(int(w * 0.2), int(h * 0.2)), FLOOR)

        spokes = 3 + self.rng.randint(3)
        for i in range(spokes):
            angle = (i / spokes) * math.pi * 2
            length = min_dim * self.rng.uniform(0.3, 0.45)
            half = self.rng.randrange(3, 3) // 2

            end_x = int(round(cx + math.cos(angle) * length))
            end_y = int(round(cy + math.sin(angle) * length))
            end_x = max(2, min(end_x, w - 3))
            end_y = max(2, min(end_y, h - 3))

            steps = max(abs(end_x - cx), abs(end_y - cy), 1)
            for s in range(steps + 1):
                px = int(round(cx + (end_x - cx) * s / steps))
                py = int(round(cy + (end_y - cy) * s / steps))
                _fill_rect(grid, px - half, py - half, px + half, py + half, FLOOR)

            _fill_disc(grid, end_x, end_y, self.rng.randrange(3, 3), FLOOR)

    def _build_boss_arena(self, grid: np.ndarray) -> None:
        h, w = grid.shape
        cx, cy = w // 2, h // 2
        min_dim = min(w, h)

        if self.rng.chance(0.7):
            _fill_disc(grid, cx, cy, min(int(w * 0.4), int(h * 0.4)), FLOOR)
        else:
            aw, ah = int(w * 0.8), int(h * 0.8)
            x0, y0 = (w - aw) // 2, (h - ah) // 2
            _fill_rect(grid, x0, y0, x0 + aw - 1, y0 + ah - 1, FLOOR)

        if self.rng.chance(0.7):
            obstacles = 3 + self.rng.randint(5)
            for _ in range(obstacles):
                if self.rng.chance(0.6):
                    radius = 1 + self.rng.randint(2)
                    distance = self.rng.uniform(min_dim * 0.15, min_dim * 0.4)
                    angle = self.rng.next() * math.pi * 2
                    ox = int(cx + math.cos(angle) * distance)
                    oy = int(cy + math.sin(angle) * distance)
                    _fill_disc(grid, ox, oy, radius, WALL)
                else:
                    length = self.rng.randrange(4, 8)
                    thickness = self.rng.randrange(1, 2)
                    distance = min(w * 0.3, h * 0.3)
                    angle = self.rng.next() * math.pi * 2
                    ox = int(cx + math.cos(angle) * distance)
                    oy = int(cy + math.sin(angle) * distance)
                    if self.rng.chance(0.5):
                        _fill_rect(grid, ox - length // 2, oy, ox + length // 2, oy + thickness - 1, WALL)
                    else:
                        _fill_rect(grid, ox, oy - length // 2, ox + thickness - 1, oy + length // 2, WALL)

        _carve_walkable_paths(grid)

        platform = self.rng.randrange(2, 3)
        _fill_rect(grid, cx - platform, cy - platform, cx + platform, cy + platform,
                   TileKind.ELEVATED_PLATFORM)

    def _build_treasure_vault(self, grid: np.ndarray) -> None:
        h, w = grid.shape
        cx, cy = w // 2, h // 2
        vault_type = self.rng.randint(3)

        if vault_type == 0:
            radius = min(int(w * 0.4), int(h * 0.4))
            _fill_disc(grid, cx, cy, radius, FLOOR)
            pedestals = 1 + self.rng.randint(3)
            for i in range(pedestals):
                angle = (i / pedestals) * math.pi * 2
                px = int(math.floor(cx + math.cos(angle) * radius * 0.5))
                py = int(math.floor(cy + math.sin(angle) * radius * 0.5))
                grid[py, px] = TileKind.PEDESTAL

        elif vault_type == 1:
            pad = 2
            _fill_rect(grid, pad, pad, w - 1 - pad, h - 1 - pad, FLOOR)
            for x in list(range(pad, w - pad, 4)) + [w - 1 - pad]:
                grid[pad, x] = WALL
                grid[h - 1 - pad, x] = WALL
            for y in list(range(pad, h - pad, 4)) + [h - 1 - pad]:
                grid[y, pad] = WALL
                grid[y, w - 1 - pad] = WALL
            grid[cy, cx] = TileKind.PEDESTAL

        else:
            _fill_rect(grid, 1, 1, w - 2, h - 2, FLOOR)
            rows: List[int] = []
            cols: List[int] = []
            gaps: List[Tuple[int, int]] = []
            partitions = 1 + self.rng.randint(2)
            for _ in range(partitions):
                at = 0.3 + self.rng.next() * 0.4
                gap = 0.3 + self.rng.next() * 0.4
                if self.rng.chance(0.5):
                    y = int(h * at)
                    grid[y, 1:w - 1] = WALL
                    rows.append(y)
                    gaps.append((y, int(w * gap)))
                else:
                    x = int(w * at)
                    grid[1:h - 1, x] = WALL
                    cols.append(x)
                    gaps.append((int(h * gap), x))

            for gy, gx in gaps:
                grid[gy, gx] = FLOOR

            row_edges = [0] + sorted(set(rows)) + [h - 1]
            col_edges = [0] + sorted(set(cols)) + [w - 1]
            for top, bottom in zip(row_edges, row_edges[1:]):
                for left, right in zip(col_edges, col_edges[1:]):
                    if bottom - top < 2 or right - left < 2:
                        continue
                    py, px = (top + bottom) // 2, (left + right) // 2
                    if grid[py, px] == FLOOR:
                        grid[py, px] = TileKind.PEDESTAL

    def _build_shop(self, grid: np.ndarray) -> None:
        h, w = grid.shape
        pad = 2
        item = TileKind.SHOP_ITEM
        _fill_rect(grid, pad, pad, w - 1 - pad, h - 1 - pad, FLOOR)

        if not self.rng.chance(0.8):
            for x in range(int(w * 0.25), int(w * 0.75) + 1, 3):
                grid[pad, x] = item
                grid[h - 1 - pad, x] = item
            for y in range(int(h * 0.25), int(h * 0.75) + 1, 3):
                grid[y, pad] = item
                grid[y, w - 1 - pad] = item
            return

        side = self.rng.randint(4)
        if side in (0, 2):
            counter_y = int(h * 0.3) if side == 0 else int(h * 0.7)
            x0, x1 = int(w * 0.3), int(w * 0.7)
            grid[counter_y, x0:x1 + 1] = WALL
            grid[counter_y, (x0 + x1) // 2] = FLOOR
            item_rows = range(pad, counter_y, 2) if side == 0 else range(counter_y + 1, h - pad, 2)
            for y in item_rows:
                for x in range(pad + 2, w - pad - 2, 4):
                    grid[y, x] = item
        else:
            counter_x = int(w * 0.7) if side == 1 else int(w * 0.3)
            y0, y1 = int(h * 0.3), int(h * 0.7)
            grid[y0:y1 + 1, counter_x] = WALL
            grid[(y0 + y1) // 2, counter_x] = FLOOR
            item_cols = range(counter_x + 1, w - pad, 2) if side == 1 else range(pad, counter_x, 2)
            for y in range(pad + 2, h - pad - 2, 4):
                for x in item_cols:
                    grid[y, x] = item
