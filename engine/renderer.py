# engine/renderer.py
"""
Draws the game state onto a console and turns consoles into PIL Images
using the loaded font atlas.
"""
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
import structlog
from PIL import Image

from engine.console import Console
from engine.font_loader import FontAtlas
from game.entities.objects import GameObject
from game.world.game_map import GameMap

log = structlog.get_logger()


@dataclass(frozen=True)
class RenderConfig:
    """Colours used when painting the map background."""
    color_dark_wall: Tuple[int, int, int]
    color_dark_ground: Tuple[int, int, int]


def render_all(
    con: Console,
    game_map: GameMap,
    objects: Sequence[GameObject],
    render_config: RenderConfig,
) -> None:
    """Draws every object, then repaints the background of every map cell."""
    # List order is draw order: later objects overwrite earlier ones
    for obj in objects:
        obj.draw(con)

    wall_mask = game_map.block_sight
    con.fill_background(wall_mask, render_config.color_dark_wall)
    con.fill_background(~wall_mask, render_config.color_dark_ground)


def compose_image(console: Console, atlas: FontAtlas) -> Image.Image:
    """Composites glyphs over backgrounds into an RGB image.

    Each cell becomes ``atlas.cell_width x atlas.cell_height`` pixels:
    ``bg + (fg - bg) * coverage``.
    """
    rows, cols = console.height, console.width
    cell_h, cell_w = atlas.cell_height, atlas.cell_width

    coverage = atlas.masks[atlas.mask_indices(console.ch)][..., np.newaxis]
    fg = console.fg.astype(np.float32)[:, :, np.newaxis, np.newaxis, :]
    bg = console.bg.astype(np.float32)[:, :, np.newaxis, np.newaxis, :]
    pixels = bg + (fg - bg) * coverage  # [rows, cols, cell_h, cell_w, 3]

    pixels = pixels.transpose(0, 2, 1, 3, 4).reshape(rows * cell_h, cols * cell_w, 3)
    image = Image.fromarray(np.clip(np.rint(pixels), 0, 255).astype(np.uint8), "RGB")
    log.debug("Console composed", cells=(cols, rows), pixels=image.size)
    return image
