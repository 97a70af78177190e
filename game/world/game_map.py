# game/world/game_map.py
from typing import Final, List, NamedTuple

import numpy as np
import structlog

log = structlog.get_logger()

TILE_ID_FLOOR: Final[int] = 0
TILE_ID_WALL: Final[int] = 1


class Tile(NamedTuple):
    """Pass-through properties of a single map cell."""

    blocked: bool
    block_sight: bool

    @classmethod
    def empty(cls) -> "Tile":
        return cls(blocked=False, block_sight=False)

    @classmethod
    def wall(cls) -> "Tile":
        return cls(blocked=True, block_sight=True)


TILE_TYPES: Final[dict[int, Tile]] = {
    TILE_ID_FLOOR: Tile.empty(),
    TILE_ID_WALL: Tile.wall(),
}

# Lookup tables indexed by tile id
_BLOCKED_LUT = np.array(
    [TILE_TYPES[i].blocked for i in sorted(TILE_TYPES)], dtype=bool
)
_BLOCK_SIGHT_LUT = np.array(
    [TILE_TYPES[i].block_sight for i in sorted(TILE_TYPES)], dtype=bool
)


class GameMap:
    def __init__(self, width: int, height: int):
        """
        Initializes the map with every cell set to wall.
        """
        if width <= 0 or height <= 0:
            log.error("Invalid map dimensions", width=width, height=height)
            raise ValueError("Map width and height must be positive integers.")
        self._width = width
        self._height = height
        log.info("Initializing GameMap", width=self._width, height=self._height)

        # Indexed [y, x]
        self.tiles: np.ndarray = np.full(
            (height, width), fill_value=TILE_ID_WALL, dtype=np.uint8, order="C"
        )
        self.blocked: np.ndarray = np.ones((height, width), dtype=bool, order="C")
        self.block_sight: np.ndarray = np.ones((height, width), dtype=bool, order="C")
        log.debug("GameMap arrays initialized", shape=(height, width))

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def in_bounds(self, x: int, y: int) -> bool:
        """Checks if the given coordinates are within the map boundaries."""
        return 0 <= x < self._width and 0 <= y < self._height

    def tile_at(self, x: int, y: int) -> Tile:
        if not self.in_bounds(x, y):
            raise IndexError(f"Tile ({x}, {y}) outside {self._width}x{self._height} map")
        return TILE_TYPES[int(self.tiles[y, x])]

    def set_tile(self, x: int, y: int, tile_id: int) -> None:
        """Replaces the tile at (x, y) wholesale."""
        self.fill_rect(slice(x, x + 1), slice(y, y + 1), tile_id)

    def fill_rect(self, x_slice: slice, y_slice: slice, tile_id: int) -> None:
        if tile_id not in TILE_TYPES:
            raise ValueError(f"Unknown tile id: {tile_id}")
        if not (0 <= x_slice.start and x_slice.stop <= self._width):
            raise IndexError(f"Column range {x_slice} outside map width {self._width}")
        if not (0 <= y_slice.start and y_slice.stop <= self._height):
            raise IndexError(f"Row range {y_slice} outside map height {self._height}")
        self.tiles[y_slice, x_slice] = tile_id
        self.blocked[y_slice, x_slice] = _BLOCKED_LUT[tile_id]
        self.block_sight[y_slice, x_slice] = _BLOCK_SIGHT_LUT[tile_id]

    def is_blocked(self, x: int, y: int) -> bool:
        """Out-of-bounds cells count as blocked."""
        if not self.in_bounds(x, y):
            return True
        return bool(self.blocked[y, x])

    def count(self, tile_id: int) -> int:
        return int(np.count_nonzero(self.tiles == tile_id))

    def to_ascii(self) -> List[str]:
        """Rows of ``#`` (wall) and ``.`` (floor), top row first."""
        glyphs = np.where(self.tiles == TILE_ID_FLOOR, ".", "#")
        return ["".join(row) for row in glyphs]
