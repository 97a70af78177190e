"""Drawable, movable map objects (the player and the npc)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

from game.systems import movement_system

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from engine.console import Console
    from game.world.game_map import GameMap


@dataclass
class GameObject:
    """A positioned glyph on the map.

    ``x``/``y`` are map cell coordinates with row 0 at the top.
    """

    x: int
    y: int
    glyph: str
    color: Tuple[int, int, int]
    name: str = "object"

    def __post_init__(self) -> None:
        if len(self.glyph) != 1:
            raise ValueError(f"Glyph must be a single character, got {self.glyph!r}")

    @property
    def position(self) -> Tuple[int, int]:
        return self.x, self.y

    def move_by(self, dx: int, dy: int, game_map: GameMap) -> bool:
        """Step by an input delta where positive ``dy`` means up the screen.

        Returns ``True`` if the object moved. Blocked or out-of-map targets
        leave the object where it is.
        """
        return movement_system.try_move(self, dx, -dy, game_map)

    def draw(self, con: Console) -> None:
        con.set_default_foreground(self.color)
        con.put_char(self.x, self.y, self.glyph)
