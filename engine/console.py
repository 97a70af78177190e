# engine/console.py
"""
Character-cell consoles backed by NumPy arrays.

A console stores a glyph codepoint plus foreground and background colours for
every cell. The window owns the root console and presents it; map drawing
happens on an off-screen console that is blitted onto the root once per frame.
All arrays are indexed ``[y, x]``.
"""
from enum import Enum, auto
from typing import Tuple

import numpy as np
import structlog

log = structlog.get_logger(__name__)

Color = Tuple[int, int, int]

BLACK: Color = (0, 0, 0)
WHITE: Color = (255, 255, 255)
SPACE: int = ord(" ")


class BackgroundFlag(Enum):
    """How a draw call treats the cell background."""
    NONE = auto()  # leave background untouched
    SET = auto()  # replace background with the given/default colour


class Console:
    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            log.error("Invalid console dimensions", width=width, height=height)
            raise ValueError("Console width and height must be positive integers.")
        self._width = width
        self._height = height
        self.default_fg: Color = WHITE
        self.default_bg: Color = BLACK
        self.ch: np.ndarray = np.full((height, width), SPACE, dtype=np.int32)
        self.fg: np.ndarray = np.zeros((height, width, 3), dtype=np.uint8)
        self.bg: np.ndarray = np.zeros((height, width, 3), dtype=np.uint8)
        self.clear()

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def clear(self) -> None:
        """Blanks every cell using the default colours."""
        self.ch.fill(SPACE)
        self.fg[:] = self.default_fg
        self.bg[:] = self.default_bg

    def set_default_foreground(self, color: Color) -> None:
        self.default_fg = tuple(color)

    def put_char(
        self, x: int, y: int, char: str | int, flag: BackgroundFlag = BackgroundFlag.NONE
    ) -> None:
        """Draws ``char`` at (x, y) in the default foreground colour.

        Writes outside the console are ignored.
        """
        if not self.in_bounds(x, y):
            log.debug("put_char outside console ignored", x=x, y=y)
            return
        self.ch[y, x] = ord(char) if isinstance(char, str) else int(char)
        self.fg[y, x] = self.default_fg
        if flag is BackgroundFlag.SET:
            self.bg[y, x] = self.default_bg

    def set_char_background(
        self, x: int, y: int, color: Color, flag: BackgroundFlag = BackgroundFlag.SET
    ) -> None:
        if flag is BackgroundFlag.NONE or not self.in_bounds(x, y):
            return
        self.bg[y, x] = color

    def fill_background(self, mask: np.ndarray, color: Color) -> None:
        """Sets the background of every cell where ``mask`` is true.

        ``mask`` covers the console from its top-left corner and may be smaller
        than the console.
        """
        h = min(mask.shape[0], self._height)
        w = min(mask.shape[1], self._width)
        self.bg[:h, :w][mask[:h, :w]] = color

    def get_char(self, x: int, y: int) -> str:
        return chr(int(self.ch[y, x]))


def blit(
    src: Console,
    src_xy: Tuple[int, int],
    size: Tuple[int, int],
    dest: Console,
    dest_xy: Tuple[int, int],
    fg_alpha: float = 1.0,
    bg_alpha: float = 1.0,
) -> None:
    """Copies a ``size`` region of ``src`` onto ``dest``.

    Alphas of 1.0 copy cells verbatim; lower values blend colours and a
    ``fg_alpha`` of 0.0 leaves the destination glyphs untouched. The region is
    clipped to both consoles.
    """
    sx, sy = src_xy
    dx, dy = dest_xy
    w, h = size
    if w <= 0 or h <= 0:
        # Zero size means "the whole source", as in libtcod
        w, h = src.width - sx, src.height - sy

    # Clip against source then destination
    if sx < 0:
        w += sx; dx -= sx; sx = 0
    if sy < 0:
        h += sy; dy -= sy; sy = 0
    if dx < 0:
        w += dx; sx -= dx; dx = 0
    if dy < 0:
        h += dy; sy -= dy; dy = 0
    w = min(w, src.width - sx, dest.width - dx)
    h = min(h, src.height - sy, dest.height - dy)
    if w <= 0 or h <= 0:
        log.debug("Blit region empty after clipping", src_xy=src_xy, dest_xy=dest_xy, size=size)
        return

    s_y, s_x = slice(sy, sy + h), slice(sx, sx + w)
    d_y, d_x = slice(dy, dy + h), slice(dx, dx + w)

    if bg_alpha >= 1.0:
        dest.bg[d_y, d_x] = src.bg[s_y, s_x]
    elif bg_alpha > 0.0:
        dest.bg[d_y, d_x] = _blend(dest.bg[d_y, d_x], src.bg[s_y, s_x], bg_alpha)

    if fg_alpha >= 1.0:
        dest.ch[d_y, d_x] = src.ch[s_y, s_x]
        dest.fg[d_y, d_x] = src.fg[s_y, s_x]
    elif fg_alpha > 0.0:
        dest.ch[d_y, d_x] = src.ch[s_y, s_x]
        dest.fg[d_y, d_x] = _blend(dest.fg[d_y, d_x], src.fg[s_y, s_x], fg_alpha)


def _blend(base: np.ndarray, top: np.ndarray, alpha: float) -> np.ndarray:
    mixed = base.astype(np.float32) * (1.0 - alpha) + top.astype(np.float32) * alpha
    return np.clip(np.rint(mixed), 0, 255).astype(np.uint8)
