# game/world/procgen.py
from dataclasses import dataclass, field
from typing import List, NamedTuple, Sequence, Tuple, Union

import structlog

try:
    from game.world.game_map import TILE_ID_FLOOR, GameMap
except ImportError as e:
    structlog.get_logger().error(
        "CRITICAL: GameMap class or TILE_ID_FLOOR not found.", error=str(e)
    )
    raise

from utils.config import MapConfig

log = structlog.get_logger()


class Rect(NamedTuple):
    """A room's bounds; x2/y2 are exclusive of the carved interior."""
    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_size(cls, x: int, y: int, w: int, h: int) -> "Rect":
        return cls(x, y, x + w, y + h)

    @property
    def center(self) -> Tuple[int, int]:
        """Center coordinates of the rectangle."""
        return (self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2

    def intersects(self, other: "Rect") -> bool:
        """Returns True if this rectangle intersects with another one."""
        return (
            self.x1 <= other.x2
            and self.x2 >= other.x1
            and self.y1 <= other.y2
            and self.y2 >= other.y1
        )


class Tunnel(NamedTuple):
    """A one-cell-wide corridor. ``at`` is the row (horizontal) or column (vertical)."""
    orientation: str
    start: int
    end: int
    at: int


Feature = Union[Rect, Tunnel]


def _carve(game_map: GameMap, x_start: int, x_end: int, y_start: int, y_end: int, what: str) -> int:
    """Carves floor over the half-open ranges, clamped to the map. Returns cells carved."""
    cx_start, cx_end = max(0, x_start), min(game_map.width, x_end)
    cy_start, cy_end = max(0, y_start), min(game_map.height, y_end)
    log_context = {
        "feature": what,
        "x_slice": f"{x_start}:{x_end}",
        "y_slice": f"{y_start}:{y_end}",
    }
    if (cx_start, cx_end, cy_start, cy_end) != (x_start, x_end, y_start, y_end):
        log.warning("Carve area clamped to map bounds", **log_context)
    if cx_start >= cx_end or cy_start >= cy_end:
        log.warning("Attempted to carve zero-size area", **log_context)
        return 0
    game_map.fill_rect(slice(cx_start, cx_end), slice(cy_start, cy_end), TILE_ID_FLOOR)
    log.debug("Carved area", **log_context)
    return (cx_end - cx_start) * (cy_end - cy_start)


def carve_room(game_map: GameMap, room: Rect) -> int:
    """Opens the strict interior of ``room``, leaving a one-cell wall border."""
    return _carve(game_map, room.x1 + 1, room.x2, room.y1 + 1, room.y2, "room")


def carve_h_tunnel(game_map: GameMap, x1: int, x2: int, y: int) -> int:
    # min/max in case x1 > x2
    return _carve(game_map, min(x1, x2), max(x1, x2) + 1, y, y + 1, "h_tunnel")


def carve_v_tunnel(game_map: GameMap, y1: int, y2: int, x: int) -> int:
    return _carve(game_map, x, x + 1, min(y1, y2), max(y1, y2) + 1, "v_tunnel")


@dataclass
class DungeonLayout:
    """Ordered rooms and tunnels to carve into an all-wall map."""
    features: List[Feature] = field(default_factory=list)

    def add_room(self, room: Rect) -> "DungeonLayout":
        self.features.append(room)
        return self

    def add_tunnel(self, tunnel: Tunnel) -> "DungeonLayout":
        if tunnel.orientation not in ("horizontal", "vertical"):
            raise ValueError(f"Unknown tunnel orientation: {tunnel.orientation}")
        self.features.append(tunnel)
        return self

    @property
    def rooms(self) -> List[Rect]:
        return [f for f in self.features if isinstance(f, Rect)]

    @property
    def tunnels(self) -> List[Tunnel]:
        return [f for f in self.features if isinstance(f, Tunnel)]

    @classmethod
    def from_config(cls, map_cfg: MapConfig) -> "DungeonLayout":
        """Tunnels first, then rooms, as listed in the config."""
        layout = cls()
        for t in map_cfg.tunnels:
            layout.add_tunnel(Tunnel(t.orientation, t.start, t.end, t.at))
        for x, y, w, h in map_cfg.rooms:
            layout.add_room(Rect.from_size(x, y, w, h))
        return layout


def generate_dungeon(game_map: GameMap, layout: DungeonLayout | Sequence[Feature]) -> GameMap:
    """Carves every feature of ``layout`` into ``game_map`` in order."""
    features = layout.features if isinstance(layout, DungeonLayout) else list(layout)
    log.info("Generating dungeon", features=len(features))
    written = 0
    for feature in features:
        if isinstance(feature, Rect):
            written += carve_room(game_map, feature)
        elif feature.orientation == "horizontal":
            written += carve_h_tunnel(game_map, feature.start, feature.end, feature.at)
        elif feature.orientation == "vertical":
            written += carve_v_tunnel(game_map, feature.start, feature.end, feature.at)
        else:
            raise ValueError(f"Unknown tunnel orientation: {feature.orientation}")
    log.info(
        "Dungeon generated",
        cells_written=written,
        floor_cells=game_map.count(TILE_ID_FLOOR),
    )
    return game_map


def make_map(map_cfg: MapConfig | None = None) -> GameMap:
    """Builds the session map from ``map_cfg`` (defaults: two rooms, one tunnel)."""
    map_cfg = map_cfg or MapConfig()
    game_map = GameMap(map_cfg.width, map_cfg.height)
    return generate_dungeon(game_map, DungeonLayout.from_config(map_cfg))
