"""Movement helper utilities.

This module exposes the helper used to move objects around the game map. It
centralises the map bounds and tile blocking checks before committing the
object's new position.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from game.entities.objects import GameObject
    from game.world.game_map import GameMap

log = structlog.get_logger(__name__)


def try_move(obj: GameObject, dx: int, dy: int, game_map: GameMap) -> bool:
    """Attempt to move an object.

    Parameters
    ----------
    obj:
        The object to move. Its position is only changed on success.
    dx, dy:
        Delta values in map coordinates (``dy > 0`` moves down a row).
    game_map:
        The map providing bounds and tile blocking data.

    Returns
    -------
    bool
        ``True`` if the movement succeeded, ``False`` otherwise.

    Notes
    -----
    The destination is bounds-checked before the tile lookup, so a move off
    the edge of the map is a plain rejection rather than an indexing error.
    """

    dest_x, dest_y = obj.x + dx, obj.y + dy

    if not game_map.in_bounds(dest_x, dest_y):
        log.debug("Move rejected: out of bounds", name=obj.name, dest=(dest_x, dest_y))
        return False

    if game_map.is_blocked(dest_x, dest_y):
        log.debug("Move rejected: blocked", name=obj.name, dest=(dest_x, dest_y))
        return False

    obj.x, obj.y = dest_x, dest_y
    return True
