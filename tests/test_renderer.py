import numpy as np

from engine.console import Console
from engine.font_loader import FontAtlas
from engine.renderer import RenderConfig, compose_image, render_all
from game.entities.objects import GameObject

RENDER_CFG = RenderConfig(color_dark_wall=(0, 0, 100), color_dark_ground=(50, 50, 150))


def solid_atlas():
    """'@' fills its whole 2x2 cell, everything else is blank."""
    masks = np.stack([np.zeros((2, 2), np.float32), np.ones((2, 2), np.float32)])
    return FontAtlas(masks, {ord(" "): 0, ord("@"): 1}, cell_width=2, cell_height=2)


def test_render_all_background_colors(game_state):
    con = Console(80, 45)
    render_all(con, game_state.game_map, game_state.objects, RENDER_CFG)
    assert tuple(con.bg[10, 30]) == (0, 0, 100)  # wall
    assert tuple(con.bg[23, 30]) == (50, 50, 150)  # tunnel
    assert tuple(con.bg[20, 25]) == (50, 50, 150)  # room
    floor = ~game_state.game_map.block_sight
    assert (con.bg[floor] == (50, 50, 150)).all()
    assert (con.bg[~floor] == (0, 0, 100)).all()


def test_render_all_draws_objects(game_state):
    con = Console(80, 45)
    render_all(con, game_state.game_map, game_state.objects, RENDER_CFG)
    assert con.get_char(25, 23) == "@"
    assert tuple(con.fg[23, 25]) == (255, 255, 255)
    assert con.get_char(30, 32) == "@"
    assert tuple(con.fg[32, 30]) == (255, 255, 0)


def test_later_objects_draw_on_top(game_state):
    game_state.objects[1].x, game_state.objects[1].y = 25, 23
    con = Console(80, 45)
    render_all(con, game_state.game_map, game_state.objects, RENDER_CFG)
    assert tuple(con.fg[23, 25]) == (255, 255, 0)


def test_compose_image():
    con = Console(2, 1)
    con.put_char(0, 0, "@")
    con.set_char_background(1, 0, (0, 0, 100))
    image = compose_image(con, solid_atlas())
    assert image.mode == "RGB"
    assert image.size == (4, 2)
    assert image.getpixel((0, 0)) == (255, 255, 255)
    assert image.getpixel((1, 1)) == (255, 255, 255)
    assert image.getpixel((2, 0)) == (0, 0, 100)
    assert image.getpixel((3, 1)) == (0, 0, 100)


def test_compose_image_partial_coverage():
    masks = np.stack([np.zeros((1, 1), np.float32), np.full((1, 1), 0.5, np.float32)])
    atlas = FontAtlas(masks, {ord("x"): 1}, cell_width=1, cell_height=1)
    con = Console(1, 1)
    con.set_default_foreground((200, 0, 0))
    con.put_char(0, 0, "x")
    con.set_char_background(0, 0, (0, 0, 100))
    assert compose_image(con, atlas).getpixel((0, 0)) == (100, 0, 50)


def test_game_object_draw():
    con = Console(3, 3)
    GameObject(x=1, y=2, glyph="k", color=(1, 2, 3)).draw(con)
    assert con.get_char(1, 2) == "k"
    assert tuple(con.fg[2, 1]) == (1, 2, 3)
