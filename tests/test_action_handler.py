import pytest

from engine import action_handler


def test_move_action(game_state):
    assert action_handler.process_player_action({"type": "move", "dx": 1, "dy": 0}, game_state)
    assert game_state.player_position == (26, 23)


def test_blocked_move_reports_no_change(game_state):
    game_state.player.x = 35
    moved = action_handler.process_player_action({"type": "move", "dx": 0, "dy": 1}, game_state)
    assert moved is False
    assert game_state.player_position == (35, 23)


def test_quit_action(game_state):
    assert action_handler.process_player_action({"type": "quit"}, game_state) is False
    assert game_state.is_exiting


@pytest.mark.parametrize(
    "action",
    [
        {"type": "move", "dx": 2, "dy": 0},
        {"type": "move", "dx": 0},
        {"type": "move", "dx": None, "dy": 0},
        {"type": "teleport"},
        {},
    ],
)
def test_invalid_actions_raise(action, game_state):
    with pytest.raises(ValueError):
        action_handler.process_player_action(action, game_state)
    assert game_state.player_position == (25, 23)
