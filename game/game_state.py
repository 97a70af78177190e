# game/game_state.py
from typing import List, Literal, Sequence, Tuple

import structlog

from game.entities.objects import GameObject
from game.world.game_map import GameMap

log = structlog.get_logger()

RunState = Literal["RUNNING", "EXITING"]


class GameState:
    """Central container for the session's mutable game data.

    Holds the one map built at startup, the drawable objects (player first)
    and the run state read by the main loop. The map is never replaced.
    """

    def __init__(
        self,
        existing_map: GameMap,
        objects: Sequence[GameObject],
        player_index: int = 0,
    ):
        log.info("Initializing GameState...")

        if not isinstance(existing_map, GameMap):
            raise TypeError("GameState requires a valid GameMap instance.")
        if not objects:
            raise ValueError("GameState requires at least one object (the player).")
        if not 0 <= player_index < len(objects):
            raise ValueError(f"player_index {player_index} out of range")

        self._game_map: GameMap = existing_map
        self.objects: List[GameObject] = list(objects)
        self._player_index: int = player_index
        self.ui_state: RunState = "RUNNING"
        self.moves_made: int = 0

        for obj in self.objects:
            if not existing_map.in_bounds(obj.x, obj.y):
                log.warning("Object starts outside the map", name=obj.name, pos=obj.position)
            elif existing_map.is_blocked(obj.x, obj.y):
                log.warning("Object starts on a blocked tile", name=obj.name, pos=obj.position)

        log.debug(
            "GameState ready",
            objects=[o.name for o in self.objects],
            player_pos=self.player.position,
        )

    @property
    def game_map(self) -> GameMap:
        return self._game_map

    @property
    def map_width(self) -> int:
        return self._game_map.width

    @property
    def map_height(self) -> int:
        return self._game_map.height

    @property
    def player(self) -> GameObject:
        return self.objects[self._player_index]

    @property
    def player_position(self) -> Tuple[int, int]:
        return self.player.position

    @property
    def is_exiting(self) -> bool:
        return self.ui_state == "EXITING"

    def request_exit(self) -> None:
        if self.ui_state != "EXITING":
            log.info("Exit requested")
        self.ui_state = "EXITING"

    def move_player(self, dx: int, dy: int) -> bool:
        """Moves the player by an input delta (``dy > 0`` is up)."""
        moved = self.player.move_by(dx, dy, self._game_map)
        if moved:
            self.moves_made += 1
            log.debug("Player moved", pos=self.player.position)
        return moved
