# main.py
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from typing import Dict as PyDict
from typing import List, Sequence

import structlog
from PySide6.QtWidgets import QApplication

# Use absolute imports relative to project root
from engine.font_loader import FontAtlas
from engine.main_loop import MainLoop
from engine.renderer import RenderConfig
from engine.window_manager import WindowManager
from game.entities.objects import GameObject
from game.game_state import GameState
from game.world.game_map import GameMap
from game.world.procgen import make_map
from utils.config import EntityConfig, GameConfig, load_toml_config, load_yaml_config
from utils.logging_utils import setup_logging

# --- Paths relative to this script's location ---
SCRIPT_DIR = Path(__file__).parent.resolve()
CONFIG_DIR = SCRIPT_DIR / "config"

CONFIG_FILE = CONFIG_DIR / "config.yaml"
KEYBINDINGS_FILE = CONFIG_DIR / "keybindings.toml"
# --- End Paths ---

log = structlog.get_logger()  # module-level logger


@dataclass
class Configs:
    """Raw and parsed configuration loaded at startup."""
    main: PyDict[str, Any]
    game: GameConfig
    keybindings: PyDict[str, Any]


def load_configs(
    config_file: Path = CONFIG_FILE, keybindings_file: Path = KEYBINDINGS_FILE
) -> Configs:
    main_cfg = load_yaml_config(config_file, "Main")
    game_cfg = GameConfig.from_dict(main_cfg, base_dir=config_file.parent.parent)
    keybindings_cfg = load_toml_config(keybindings_file, "Keybindings")
    log.info(
        "Configurations loaded",
        keybinding_sets=len(keybindings_cfg.get("bindings", {})),
        entities=len(game_cfg.entities),
    )
    return Configs(main=main_cfg, game=game_cfg, keybindings=keybindings_cfg)


# --- Debug Map Printing Function ---
def print_map_section(game_map: GameMap, center_x: int, center_y: int, radius: int = 5):
    """Prints a section of the map centered around (x, y) to the console."""
    y_min = max(0, center_y - radius); y_max = min(game_map.height, center_y + radius + 1)
    x_min = max(0, center_x - radius); x_max = min(game_map.width, center_x + radius + 1)
    rows = game_map.to_ascii()
    print(f"\n--- Map Section around ({center_x},{center_y}) ---")
    header = "   " + "".join([f"{x:<3}" for x in range(x_min, x_max)])
    print(header); print("  " + "-" * (len(header) - 2))
    for y in range(y_min, y_max):
        row_str = f"{y:<2}|"
        for x in range(x_min, x_max):
            char = rows[y][x]
            if x == center_x and y == center_y: row_str += f"[{char}]"
            else: row_str += f" {char} "
        print(row_str)
    print("------------------------------------\n")
# --- End Debug Map Printing ---


def init_game_state(configs: Configs) -> GameState:
    game_cfg = configs.game
    log.info("Creating game map", width=game_cfg.map.width, height=game_cfg.map.height)
    game_map = make_map(game_cfg.map)
    objects = [
        GameObject(x=e.x, y=e.y, glyph=e.glyph, color=e.color, name=e.name)
        for e in game_cfg.entities
    ]
    return GameState(existing_map=game_map, objects=objects)


def check_entity_glyphs(atlas: FontAtlas, entities: Sequence[EntityConfig]) -> List[str]:
    """Returns the names of entities whose glyph the font cannot draw."""
    missing = [e.name for e in entities if not atlas.has_glyph(e.glyph)]
    if missing:
        log.warning("Font has no glyph for some entities", entities=missing)
    return missing


def init_window(configs: Configs, game_state: GameState) -> WindowManager:
    log.info("Creating main window...")
    window = WindowManager(
        display_config=configs.game.display,
        keybindings_config=configs.keybindings,
    )
    check_entity_glyphs(window.font_atlas, configs.game.entities)
    main_loop = MainLoop(
        game_state=game_state,
        window=window,
        render_config=RenderConfig(
            color_dark_wall=configs.game.color_dark_wall,
            color_dark_ground=configs.game.color_dark_ground,
        ),
    )
    window.set_main_loop(main_loop)
    return window


def main() -> None:
    """Main entry point for the application."""
    setup_logging()
    log.info("Application starting...", config_dir=str(CONFIG_DIR))

    app = QApplication(sys.argv)

    try:
        configs = load_configs()
        game_state = init_game_state(configs)
        px, py = game_state.player_position
        print_map_section(game_state.game_map, px, py, radius=10)
        window = init_window(configs, game_state)
    # --- Exception Handling ---
    except FileNotFoundError as e:
        log.critical("Required file not found during init", error=str(e), exc_info=True)
        sys.exit(f"Initialization failed: File not found - {e}")
    except KeyError as e:
        log.critical("Missing required key, possibly in config", key=str(e), exc_info=True)
        sys.exit(f"Configuration failed: Missing key {e}")
    except ValueError as e:
        log.critical("Invalid configuration value", error=str(e), exc_info=True)
        sys.exit(f"Configuration failed: {e}")
    except TypeError as e:
        log.critical("Fatal Type Error during init", error=str(e), exc_info=True)
        sys.exit(f"Initialization failed (TypeError): {e}")
    except Exception as e:
        log.critical("Fatal initialization error", error=str(e), exc_info=True)
        sys.exit(f"Initialization failed: {e}")
    # --- End Exception Handling ---

    log.info("Showing window and starting application loop...")
    window.show()
    sys.exit(app.exec())  # Start the Qt event loop


if __name__ == "__main__":
    main()
