from pathlib import Path

import pytest
import yaml

from utils.config import (
    COLOR_DARK_GROUND,
    COLOR_DARK_WALL,
    GameConfig,
    TunnelConfig,
    load_toml_config,
    load_yaml_config,
    parse_color,
)

CONFIG_FILE = Path(__file__).resolve().parent.parent / "config" / "config.yaml"


def test_defaults_from_empty_mapping(tmp_path):
    cfg = GameConfig.from_dict({}, base_dir=tmp_path)
    assert (cfg.map.width, cfg.map.height) == (80, 45)
    assert cfg.map.rooms == ((20, 15, 10, 15), (50, 15, 10, 15))
    assert cfg.map.tunnels == (TunnelConfig("horizontal", 25, 55, 23),)
    assert cfg.color_dark_wall == COLOR_DARK_WALL
    assert cfg.color_dark_ground == COLOR_DARK_GROUND
    assert cfg.display.pixel_size == (1600, 900)
    assert cfg.display.limit_fps == 20
    assert cfg.display.font_path == tmp_path / "fonts" / "arial10x10.png"


def test_default_entities():
    cfg = GameConfig.from_dict({}, base_dir=Path("."))
    player, npc = cfg.entities
    assert (player.name, player.x, player.y, player.color) == ("player", 25, 23, (255, 255, 255))
    assert (npc.name, npc.x, npc.y, npc.color) == ("npc", 30, 32, (255, 255, 0))


def test_shipped_config_file():
    data = load_yaml_config(CONFIG_FILE, "Main")
    cfg = GameConfig.from_dict(data, base_dir=CONFIG_FILE.parent.parent)
    assert cfg.display.title == "Roguelike rust game"
    assert (cfg.display.screen_width, cfg.display.screen_height) == (160, 90)
    assert cfg.display.font_layout == "tcod"
    assert cfg.display.font_type == "greyscale"
    assert [e.name for e in cfg.entities] == ["player", "npc"]
    assert cfg.map.tunnels[0] == TunnelConfig("horizontal", 25, 55, 23)


def test_custom_dungeon(tmp_path):
    cfg = GameConfig.from_dict(
        {
            "map_width": 30,
            "map_height": 20,
            "dungeon": {
                "rooms": [[1, 1, 5, 5]],
                "tunnels": [{"orientation": "Vertical", "start": 2, "end": 9, "at": 3}],
            },
        },
        base_dir=tmp_path,
    )
    assert cfg.map.rooms == ((1, 1, 5, 5),)
    assert cfg.map.tunnels == (TunnelConfig("vertical", 2, 9, 3),)
    # npc default follows map size
    assert (cfg.entities[1].x, cfg.entities[1].y) == (5, 20)


@pytest.mark.parametrize(
    "data",
    [
        {"map_width": 0},
        {"limit_fps": -5},
        {"font": {"layout": "cp437"}},
        {"font": {"type": "colour"}},
        {"colors": {"dark_wall": [0, 0]}},
        {"colors": {"dark_ground": [0, 0, 300]}},
        {"dungeon": {"rooms": [[1, 2, 3]]}},
        {"dungeon": {"tunnels": [{"orientation": "diagonal", "start": 0, "end": 1, "at": 0}]}},
        {"entities": [{"name": "p", "x": 1, "y": 1, "glyph": "ab"}]},
    ],
)
def test_invalid_values_raise(data, tmp_path):
    with pytest.raises(ValueError):
        GameConfig.from_dict(data, base_dir=tmp_path)


def test_entity_missing_position_raises(tmp_path):
    with pytest.raises(KeyError):
        GameConfig.from_dict({"entities": [{"name": "p", "x": 1}]}, base_dir=tmp_path)


def test_parse_color():
    assert parse_color([1, 2, 3], "c") == (1, 2, 3)
    with pytest.raises(ValueError):
        parse_color("red", "c")


def test_load_yaml_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_yaml_config(tmp_path / "missing.yaml", "Main")


def test_load_yaml_empty_and_non_mapping(tmp_path):
    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    assert load_yaml_config(empty, "Main") == {}
    listing = tmp_path / "list.yaml"
    listing.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        load_yaml_config(listing, "Main")


def test_load_yaml_parse_error(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("a: [1, 2\n")
    with pytest.raises(yaml.YAMLError):
        load_yaml_config(bad, "Main")


def test_load_toml_failures_return_empty(tmp_path):
    assert load_toml_config(tmp_path / "missing.toml", "Keybindings") == {}
    bad = tmp_path / "bad.toml"
    bad.write_text("[bindings\n")
    assert load_toml_config(bad, "Keybindings") == {}
