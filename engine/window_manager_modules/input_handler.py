# engine/window_manager_modules/input_handler.py
"""
Handles processing of raw keyboard inputs, mapping them to game actions
or UI commands based on keybindings.

Every key press is one transition of the run state machine: movement keys
move the player, Ctrl+Enter toggles fullscreen, Escape moves the game to
``EXITING`` and anything else is ignored.
"""
# Standard Imports
from typing import TYPE_CHECKING, Any, FrozenSet
from typing import Dict as PyDict
from typing import List

# Third-party Imports
import structlog

# PySide6 Imports
from PySide6.QtCore import Qt
from PySide6.QtGui import QKeyEvent

# --- Type Checking Imports ---
if TYPE_CHECKING:
    from engine.main_loop import MainLoop
    from engine.window_manager import WindowManager
    from game.game_state import GameState

log = structlog.get_logger(__name__)

DEFAULT_KEYBINDINGS: PyDict[str, Any] = {
    "bindings": {
        "arrows": {
            "move_up": {"key": "Up", "action_type": "move", "dx": 0, "dy": 1, "desc": "Move up"},
            "move_down": {"key": "Down", "action_type": "move", "dx": 0, "dy": -1, "desc": "Move down"},
            "move_left": {"key": "Left", "action_type": "move", "dx": -1, "dy": 0, "desc": "Move left"},
            "move_right": {"key": "Right", "action_type": "move", "dx": 1, "dy": 0, "desc": "Move right"},
        },
        "common": {
            "toggle_fullscreen": {
                "key": "Return", "mods": ["Ctrl"], "action_type": "ui",
                "desc": "Toggle fullscreen",
            },
            "toggle_fullscreen_kp": {
                "key": "Enter", "mods": ["Ctrl"], "action_type": "ui",
                "ui_action": "toggle_fullscreen", "desc": "Toggle fullscreen",
            },
        },
    }
}

_MODIFIER_NAMES = {
    "ctrl": Qt.KeyboardModifier.ControlModifier,
    "shift": Qt.KeyboardModifier.ShiftModifier,
    "alt": Qt.KeyboardModifier.AltModifier,
    "meta": Qt.KeyboardModifier.MetaModifier,
}
_MODIFIER_ALIASES = {"control": "ctrl", "option": "alt", "cmd": "meta"}


class InputHandler:
    """
    Processes keyboard events and translates them into game actions or UI calls.
    """

    def __init__(
        self,
        keybindings_config: PyDict[str, Any],
        window_manager_ref: "WindowManager",
    ):
        if not keybindings_config.get("bindings"):
            log.warning("No keybindings configured, using built-in defaults.")
            keybindings_config = DEFAULT_KEYBINDINGS
        self.keybindings_config: PyDict[str, Any] = keybindings_config
        self.window_manager_ref: "WindowManager" = window_manager_ref
        self.active_keybinding_sets: List[str] = list(
            self.keybindings_config.get("bindings", {}).keys()
        )
        log.debug("InputHandler initialized.", sets=self.active_keybinding_sets)

    # --- Key Parsing Methods ---
    def _get_qt_key_enum(self, key_str: str | None) -> Qt.Key | None:
        """Converts a key string (e.g., "A", "F1", "Up") to a Qt.Key enum value."""
        if not key_str:
            return None
        qt_key = getattr(Qt.Key, f"Key_{key_str}", None)
        if qt_key is not None:
            return qt_key
        if len(key_str) == 1:
            qt_key_upper = getattr(Qt.Key, f"Key_{key_str.upper()}", None)
            if qt_key_upper is not None:
                return qt_key_upper
        common_map = {
            "up": Qt.Key.Key_Up,
            "down": Qt.Key.Key_Down,
            "left": Qt.Key.Key_Left,
            "right": Qt.Key.Key_Right,
            "return": Qt.Key.Key_Return,
            "enter": Qt.Key.Key_Enter,
            "escape": Qt.Key.Key_Escape,
            "space": Qt.Key.Key_Space,
        }
        key_str_lower = key_str.lower()
        if key_str_lower in common_map:
            return common_map[key_str_lower]
        log.warning("Could not map key string to Qt.Key", key_str=key_str)
        return None

    @staticmethod
    def _modifier_names(modifiers: Qt.KeyboardModifier) -> FrozenSet[str]:
        """Names of the held modifiers. The keypad flag is not a modifier here."""
        return frozenset(
            name for name, flag in _MODIFIER_NAMES.items() if modifiers & flag
        )

    @staticmethod
    def _binding_modifier_names(mods_list: List[str]) -> FrozenSet[str]:
        names = set()
        for mod_str in mods_list or []:
            mod_lower = mod_str.lower()
            names.add(_MODIFIER_ALIASES.get(mod_lower, mod_lower))
        return frozenset(names)

    def _get_action_for_key(
        self,
        key_code: int,
        modifiers: Qt.KeyboardModifier,
        active_keybinding_sets: List[str],
    ) -> PyDict[str, Any] | None:
        """Finds the action dictionary corresponding to a key press and active binding sets."""
        bindings = self.keybindings_config.get("bindings", {})
        held = self._modifier_names(modifiers)
        for set_name in active_keybinding_sets:
            binding_set = bindings.get(set_name)
            if not binding_set or not isinstance(binding_set, dict):
                continue
            for action_name, binding_data in binding_set.items():
                if not isinstance(binding_data, dict):
                    continue
                bound_key_enum = self._get_qt_key_enum(binding_data.get("key"))
                if bound_key_enum is None or int(key_code) != int(bound_key_enum):
                    continue
                # Listed mods must be held; extra held mods are ignored
                if not self._binding_modifier_names(binding_data.get("mods", [])) <= held:
                    continue
                action_type: str | None = binding_data.get("action_type")
                if action_type == "move":
                    return {
                        "type": "move",
                        "dx": binding_data.get("dx", 0),
                        "dy": binding_data.get("dy", 0),
                    }
                elif action_type == "ui":
                    return {
                        "type": "ui",
                        "ui_action": binding_data.get("ui_action", action_name),
                    }
                else:
                    log.warning(
                        "Unknown action_type in keybinding",
                        action_name=action_name,
                        type=action_type,
                    )
                    return None
        return None

    # --- End Key Parsing Methods ---

    def process_key(
        self,
        key: int,
        modifiers: Qt.KeyboardModifier,
        game_state: "GameState",
        main_loop_ref: "MainLoop",
    ) -> bool:
        """
        Applies one key press. Returns True when the game should exit.
        """
        log.debug("Processing key", key=key, ui_state=game_state.ui_state)

        # Escape quits whatever else is held
        if int(key) == int(Qt.Key.Key_Escape):
            log.info("Quit key (Escape) pressed.")
            game_state.request_exit()
            return True

        if game_state.is_exiting:
            return True

        action = self._get_action_for_key(key, modifiers, self.active_keybinding_sets)
        if action is None:
            return False

        if action["type"] == "move":
            main_loop_ref.handle_action(action)
        elif action["type"] == "ui":
            ui_action_name = action["ui_action"]
            if ui_action_name == "toggle_fullscreen":
                self.window_manager_ref.ui_toggle_fullscreen()
            else:
                log.warning("Unhandled UI action", ui_action=ui_action_name)

        return game_state.is_exiting

    def process_key_event(
        self,
        event: QKeyEvent,
        game_state: "GameState",
        main_loop_ref: "MainLoop",
    ) -> bool:
        """Unpacks a QKeyEvent and forwards it to :meth:`process_key`."""
        if event.isAutoRepeat():
            # One action per physical press
            return game_state.is_exiting
        return self.process_key(event.key(), event.modifiers(), game_state, main_loop_ref)
