# engine/action_handler.py
"""Applies game actions produced by the input handler to the game state."""
from typing import TYPE_CHECKING, Any, Dict

import structlog

if TYPE_CHECKING:
    from game.game_state import GameState

log = structlog.get_logger()


def _handle_player_move(dx: int, dy: int, gs: "GameState") -> bool:
    """Moves the player one step. ``dy > 0`` is up the screen."""
    if abs(dx) > 1 or abs(dy) > 1:
        raise ValueError(f"Move delta must be a single step, got ({dx}, {dy})")
    return gs.move_player(dx, dy)


def process_player_action(action: Dict[str, Any], gs: "GameState") -> bool:
    """
    Executes ``action`` against ``gs``.
    Returns True if the game state changed (the player moved).
    Raises ValueError for malformed or unknown actions.
    """
    action_type = action.get("type")
    log.debug("Processing player action", action=action)

    match action_type:
        case "move":
            try:
                dx = int(action["dx"])
                dy = int(action["dy"])
            except (KeyError, TypeError) as e:
                raise ValueError(f"Malformed move action: {action}") from e
            moved = _handle_player_move(dx, dy, gs)
            if not moved:
                log.debug("Player move rejected", dx=dx, dy=dy, pos=gs.player_position)
            return moved
        case "quit":
            gs.request_exit()
            return False
        case _:
            raise ValueError(f"Unknown action type: {action_type!r}")
