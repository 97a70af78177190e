# engine/main_loop.py
from typing import TYPE_CHECKING, Any, Dict, Self

import structlog

from game.game_state import GameState

from . import action_handler
from .console import Console, blit
from .renderer import RenderConfig, render_all

if TYPE_CHECKING:
    from .window_manager import WindowManager

log = structlog.get_logger()


class MainLoop:
    """
    Coordinates action handling and per-frame rendering of the game state.
    """

    def __init__(
        self: Self,
        game_state: GameState,
        window: "WindowManager",
        render_config: RenderConfig,
    ):
        """
        Initializes the MainLoop.

        Args:
            game_state: The central GameState object.
            window: The WindowManager handling display and input.
            render_config: Colours used to paint the map.
        """
        self.game_state: GameState = game_state
        self.window: "WindowManager" = window
        self.render_config: RenderConfig = render_config
        # Off-screen console sized to the map
        self.con: Console = Console(game_state.map_width, game_state.map_height)
        self.frames_rendered: int = 0
        log.info("MainLoop initialized successfully")

    def handle_action(self: Self, action: Dict[str, Any]) -> bool:
        """
        Processes an action via the action_handler and requests a redraw if
        the game state changed. Malformed actions are logged and rejected.
        """
        gs = self.game_state
        try:
            changed = action_handler.process_player_action(action, gs)
        except ValueError as e:
            log.error("Rejected invalid action", action=action, error=str(e))
            return False

        if changed:
            log.debug("Action changed game state", action_type=action.get("type"))
            self.window.request_frame()
        if gs.is_exiting:
            self.window.ui_quit_game()
        return changed

    def render_frame(self: Self, root: Console) -> Console:
        """Clears the map console, draws the state onto it and blits it to ``root``."""
        gs = self.game_state
        self.con.clear()
        render_all(self.con, gs.game_map, gs.objects, self.render_config)
        blit(
            self.con,
            (0, 0),
            (gs.map_width, gs.map_height),
            root,
            (0, 0),
            1.0,
            1.0,
        )
        self.frames_rendered += 1
        return root
