import os
import sys

import pytest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from game.entities.objects import GameObject
from game.game_state import GameState
from game.world.procgen import make_map


@pytest.fixture
def game_map():
    """The default two-room, one-tunnel map."""
    return make_map()


@pytest.fixture
def game_state(game_map):
    player = GameObject(x=25, y=23, glyph="@", color=(255, 255, 255), name="player")
    npc = GameObject(x=30, y=32, glyph="@", color=(255, 255, 0), name="npc")
    return GameState(existing_map=game_map, objects=[player, npc])
