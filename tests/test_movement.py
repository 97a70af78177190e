import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from game.entities.objects import GameObject
from game.systems.movement_system import try_move
from game.world.game_map import TILE_ID_FLOOR, GameMap


def open_map(width=5, height=5):
    gm = GameMap(width=width, height=height)
    gm.fill_rect(slice(0, width), slice(0, height), TILE_ID_FLOOR)
    return gm


def test_try_move_commits_on_open_tile():
    gm = open_map()
    obj = GameObject(x=2, y=2, glyph="@", color=(255, 255, 255))
    assert try_move(obj, 1, 1, gm) is True
    assert obj.position == (3, 3)


def test_try_move_rejects_blocked_tile():
    gm = open_map()
    gm.set_tile(3, 2, 1)
    obj = GameObject(x=2, y=2, glyph="@", color=(255, 255, 255))
    assert try_move(obj, 1, 0, gm) is False
    assert obj.position == (2, 2)


def test_try_move_rejects_leaving_the_map():
    gm = open_map()
    obj = GameObject(x=0, y=4, glyph="@", color=(255, 255, 255))
    assert try_move(obj, -1, 0, gm) is False
    assert try_move(obj, 0, 1, gm) is False
    assert obj.position == (0, 4)


def test_move_by_positive_dy_goes_up_the_screen():
    gm = open_map()
    obj = GameObject(x=2, y=2, glyph="@", color=(255, 255, 255))
    assert obj.move_by(0, 1, gm)
    assert obj.position == (2, 1)
    assert obj.move_by(0, -1, gm)
    assert obj.move_by(0, -1, gm)
    assert obj.position == (2, 3)


def test_player_walks_tunnel(game_state):
    player = game_state.player
    assert player.position == (25, 23)
    assert game_state.move_player(1, 0)
    assert player.position == (26, 23)
    assert game_state.moves_made == 1


def test_player_blocked_by_tunnel_wall(game_state):
    # Between the rooms the tunnel is one cell high
    game_state.player.x = 35
    assert game_state.move_player(0, -1) is False
    assert game_state.player_position == (35, 23)
    assert game_state.moves_made == 0


def test_player_enters_room_from_tunnel(game_state):
    # (25, 22) is inside room A's interior
    assert game_state.move_player(0, 1)
    assert game_state.player_position == (25, 22)


def test_game_object_requires_single_glyph():
    import pytest

    with pytest.raises(ValueError):
        GameObject(x=0, y=0, glyph="@@", color=(0, 0, 0))
