# utils/config.py
"""
Configuration loading and the typed config objects handed to the map
generator, the window and the game state.

``config/config.yaml`` layout::

    screen_width: 160          # root console size, in cells
    screen_height: 90
    map_width: 80
    map_height: 45
    limit_fps: 20
    title: "Roguelike"
    font:
      path: "fonts/arial10x10.png"   # relative to the config file's parent dir
      layout: "tcod"                 # tcod | ascii_inrow
      type: "greyscale"              # greyscale | default
      cell_width: 10
      cell_height: 10
    colors:
      dark_wall: [0, 0, 100]
      dark_ground: [50, 50, 150]
    dungeon:
      rooms: [[20, 15, 10, 15], [50, 15, 10, 15]]   # x, y, w, h
      tunnels:
        - {orientation: horizontal, start: 25, end: 55, at: 23}
    entities:
      - {name: player, x: 25, y: 23, glyph: "@", color: [255, 255, 255]}

Every key is optional; missing keys fall back to the defaults below.
"""
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from typing import Dict as PyDict
from typing import List, Tuple

import structlog
import yaml

log = structlog.get_logger(__name__)

Color = Tuple[int, int, int]

DEFAULT_SCREEN_WIDTH = 160
DEFAULT_SCREEN_HEIGHT = 90
DEFAULT_MAP_WIDTH = 80
DEFAULT_MAP_HEIGHT = 45
DEFAULT_LIMIT_FPS = 20
DEFAULT_TITLE = "Roguelike"
DEFAULT_FONT_PATH = "fonts/arial10x10.png"
DEFAULT_CELL_SIZE = 10

COLOR_DARK_WALL: Color = (0, 0, 100)
COLOR_DARK_GROUND: Color = (50, 50, 150)
WHITE: Color = (255, 255, 255)
YELLOW: Color = (255, 255, 0)

FONT_LAYOUTS = ("tcod", "ascii_inrow")
FONT_TYPES = ("greyscale", "default")
TUNNEL_ORIENTATIONS = ("horizontal", "vertical")

DEFAULT_ROOMS: List[Tuple[int, int, int, int]] = [(20, 15, 10, 15), (50, 15, 10, 15)]


# --- File Loading ---
def load_yaml_config(config_path: Path, config_name: str) -> PyDict[str, Any]:
    """Loads a YAML configuration file. Missing files and parse errors raise."""
    if not config_path.is_file():
        log.error(f"{config_name} config file not found", path=str(config_path))
        raise FileNotFoundError(
            f"{config_name} configuration file not found: {config_path}"
        )
    try:
        with config_path.open("r") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        log.error(
            f"Error parsing YAML for {config_name}",
            path=str(config_path),
            error=str(e),
        )
        raise
    if config_data is None:
        log.warning(f"{config_name} config file is empty.", path=str(config_path))
        return {}
    if not isinstance(config_data, dict):
        raise ValueError(f"{config_name} config must be a mapping: {config_path}")
    log.info(f"{config_name} config loaded", path=str(config_path))
    return config_data


def load_toml_config(config_path: Path, config_name: str) -> PyDict[str, Any]:
    """Loads a TOML configuration file, returning ``{}`` when unusable."""
    if not config_path.is_file():
        log.error(f"{config_name} config file not found", path=str(config_path))
        return {}
    try:
        with config_path.open("rb") as f:  # tomllib requires bytes mode
            config_data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        log.error(
            f"Error parsing TOML for {config_name}",
            path=str(config_path),
            error=str(e),
        )
        return {}
    log.info(f"{config_name} config loaded", path=str(config_path))
    return config_data


# --- Value Helpers ---
def parse_color(value: Any, name: str) -> Color:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ValueError(f"Color '{name}' must be a list of three integers, got {value!r}")
    r, g, b = (int(c) for c in value)
    for channel in (r, g, b):
        if not 0 <= channel <= 255:
            raise ValueError(f"Color '{name}' channel out of range: {value!r}")
    return (r, g, b)


def _positive_int(value: Any, name: str) -> int:
    number = int(value)
    if number <= 0:
        raise ValueError(f"'{name}' must be a positive integer, got {value!r}")
    return number


# --- Config Objects ---
@dataclass(frozen=True)
class DisplayConfig:
    """Everything the window needs to open and draw the root console."""

    font_path: Path
    font_layout: str = "tcod"
    font_type: str = "greyscale"
    cell_width: int = DEFAULT_CELL_SIZE
    cell_height: int = DEFAULT_CELL_SIZE
    screen_width: int = DEFAULT_SCREEN_WIDTH
    screen_height: int = DEFAULT_SCREEN_HEIGHT
    title: str = DEFAULT_TITLE
    limit_fps: int = DEFAULT_LIMIT_FPS

    @property
    def pixel_size(self) -> Tuple[int, int]:
        return (
            self.screen_width * self.cell_width,
            self.screen_height * self.cell_height,
        )


@dataclass(frozen=True)
class TunnelConfig:
    orientation: str
    start: int
    end: int
    at: int


@dataclass(frozen=True)
class MapConfig:
    width: int = DEFAULT_MAP_WIDTH
    height: int = DEFAULT_MAP_HEIGHT
    rooms: Tuple[Tuple[int, int, int, int], ...] = tuple(DEFAULT_ROOMS)
    tunnels: Tuple[TunnelConfig, ...] = (
        TunnelConfig(orientation="horizontal", start=25, end=55, at=23),
    )


@dataclass(frozen=True)
class EntityConfig:
    name: str
    x: int
    y: int
    glyph: str
    color: Color


@dataclass(frozen=True)
class GameConfig:
    display: DisplayConfig
    map: MapConfig
    color_dark_wall: Color = COLOR_DARK_WALL
    color_dark_ground: Color = COLOR_DARK_GROUND
    entities: Tuple[EntityConfig, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: PyDict[str, Any], base_dir: Path) -> "GameConfig":
        """Builds a validated config from raw YAML data.

        ``base_dir`` anchors relative asset paths such as the font atlas.
        """
        map_cfg = _parse_map_config(data)
        display_cfg = _parse_display_config(data, base_dir)
        colors = data.get("colors", {}) or {}
        entities = _parse_entities(data.get("entities"), map_cfg)
        return cls(
            display=display_cfg,
            map=map_cfg,
            color_dark_wall=parse_color(
                colors.get("dark_wall", COLOR_DARK_WALL), "dark_wall"
            ),
            color_dark_ground=parse_color(
                colors.get("dark_ground", COLOR_DARK_GROUND), "dark_ground"
            ),
            entities=entities,
        )


def _parse_display_config(data: PyDict[str, Any], base_dir: Path) -> DisplayConfig:
    font = data.get("font", {}) or {}
    layout = str(font.get("layout", "tcod")).lower()
    if layout not in FONT_LAYOUTS:
        raise ValueError(f"Unknown font layout '{layout}', expected one of {FONT_LAYOUTS}")
    font_type = str(font.get("type", "greyscale")).lower()
    if font_type not in FONT_TYPES:
        raise ValueError(f"Unknown font type '{font_type}', expected one of {FONT_TYPES}")
    font_path = Path(font.get("path", DEFAULT_FONT_PATH))
    if not font_path.is_absolute():
        font_path = base_dir / font_path
    return DisplayConfig(
        font_path=font_path,
        font_layout=layout,
        font_type=font_type,
        cell_width=_positive_int(font.get("cell_width", DEFAULT_CELL_SIZE), "font.cell_width"),
        cell_height=_positive_int(font.get("cell_height", DEFAULT_CELL_SIZE), "font.cell_height"),
        screen_width=_positive_int(data.get("screen_width", DEFAULT_SCREEN_WIDTH), "screen_width"),
        screen_height=_positive_int(data.get("screen_height", DEFAULT_SCREEN_HEIGHT), "screen_height"),
        title=str(data.get("title", DEFAULT_TITLE)),
        limit_fps=_positive_int(data.get("limit_fps", DEFAULT_LIMIT_FPS), "limit_fps"),
    )


def _parse_map_config(data: PyDict[str, Any]) -> MapConfig:
    width = _positive_int(data.get("map_width", DEFAULT_MAP_WIDTH), "map_width")
    height = _positive_int(data.get("map_height", DEFAULT_MAP_HEIGHT), "map_height")
    dungeon = data.get("dungeon")
    if dungeon is None:
        return MapConfig(width=width, height=height)

    rooms = []
    for raw_room in dungeon.get("rooms", []) or []:
        if not isinstance(raw_room, (list, tuple)) or len(raw_room) != 4:
            raise ValueError(f"Room must be [x, y, w, h], got {raw_room!r}")
        rooms.append(tuple(int(v) for v in raw_room))

    tunnels = []
    for raw_tunnel in dungeon.get("tunnels", []) or []:
        orientation = str(raw_tunnel.get("orientation", "")).lower()
        if orientation not in TUNNEL_ORIENTATIONS:
            raise ValueError(
                f"Unknown tunnel orientation '{orientation}', expected one of {TUNNEL_ORIENTATIONS}"
            )
        tunnels.append(
            TunnelConfig(
                orientation=orientation,
                start=int(raw_tunnel["start"]),
                end=int(raw_tunnel["end"]),
                at=int(raw_tunnel["at"]),
            )
        )
    return MapConfig(width=width, height=height, rooms=tuple(rooms), tunnels=tuple(tunnels))


def default_entities(map_cfg: MapConfig) -> Tuple[EntityConfig, ...]:
    """Player in the tunnel, npc offset from the map centre."""
    return (
        EntityConfig(name="player", x=25, y=23, glyph="@", color=WHITE),
        EntityConfig(
            name="npc",
            x=map_cfg.width // 2 - 10,
            y=map_cfg.height // 2 + 10,
            glyph="@",
            color=YELLOW,
        ),
    )


def _parse_entities(raw: Any, map_cfg: MapConfig) -> Tuple[EntityConfig, ...]:
    if not raw:
        return default_entities(map_cfg)
    entities = []
    for entry in raw:
        glyph = str(entry.get("glyph", "@"))
        if len(glyph) != 1:
            raise ValueError(f"Entity glyph must be a single character, got {glyph!r}")
        name = str(entry.get("name", f"entity_{len(entities)}"))
        entities.append(
            EntityConfig(
                name=name,
                x=int(entry["x"]),
                y=int(entry["y"]),
                glyph=glyph,
                color=parse_color(entry.get("color", WHITE), f"{name}.color"),
            )
        )
    return tuple(entities)
