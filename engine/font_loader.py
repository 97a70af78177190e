# === engine/font_loader.py ===
"""
Loads a bitmap font atlas into per-glyph coverage masks used when the root
console is composited into an image.

Supported atlas layouts:

``tcod``
    32 columns by 8 rows in libtcod's own order (punctuation and digits,
    symbols and box drawing, arrows and double lines, upper case, lower case).
``ascii_inrow``
    16 by 16 cells, codepoint ``n`` at column ``n % 16`` of row ``n // 16``.

Render types: ``greyscale`` uses pixel brightness as coverage, ``default``
uses the alpha channel when the atlas has one.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

import numpy as np
import structlog
from PIL import Image, ImageDraw, ImageFont

log = structlog.get_logger()

_TCOD_ROW_0 = list(range(0x20, 0x40))
_TCOD_ROW_1 = [
    0x40, 0x5B, 0x5C, 0x5D, 0x5E, 0x5F, 0x60, 0x7B, 0x7C, 0x7D, 0x7E,
    0x2591, 0x2592, 0x2593, 0x2502, 0x2500, 0x253C, 0x2524, 0x2534, 0x251C,
    0x252C, 0x2514, 0x250C, 0x2510, 0x2518, 0x2598, 0x259D, 0x2580, 0x2596,
    0x259A, 0x2590, 0x2597,
]
_TCOD_ROW_2 = [
    0x2191, 0x2193, 0x2190, 0x2192, 0x25B2, 0x25BC, 0x25C4, 0x25BA, 0x2195,
    0x2194, 0x2610, 0x2611, 0x25CB, 0x25C9, 0x2551, 0x2550, 0x256C, 0x2563,
    0x2569, 0x2560, 0x2566, 0x255A, 0x2554, 0x2557, 0x255D,
] + [0] * 7
_TCOD_ROW_3 = list(range(0x41, 0x5B)) + [0] * 6
_TCOD_ROW_4 = list(range(0x61, 0x7B)) + [0] * 6

# Cell index -> codepoint, 0 marks an unused cell
CHARMAP_TCOD: List[int] = _TCOD_ROW_0 + _TCOD_ROW_1 + _TCOD_ROW_2 + _TCOD_ROW_3 + _TCOD_ROW_4
CHARMAP_ASCII_INROW: List[int] = list(range(256))

LAYOUT_GRIDS = {"tcod": (32, 8), "ascii_inrow": (16, 16)}
LAYOUT_CHARMAPS = {"tcod": CHARMAP_TCOD, "ascii_inrow": CHARMAP_ASCII_INROW}


@dataclass
class FontAtlas:
    """Glyph masks (``[n, cell_h, cell_w]`` floats in 0..1) and a codepoint lookup.

    Mask 0 is always blank and is used for unknown codepoints.
    """
    masks: np.ndarray
    codepoint_to_mask: Dict[int, int]
    cell_width: int
    cell_height: int

    def __post_init__(self) -> None:
        size = max(self.codepoint_to_mask, default=0) + 1
        self._lut = np.zeros(size, dtype=np.int32)
        for codepoint, mask_index in self.codepoint_to_mask.items():
            self._lut[codepoint] = mask_index

    def mask_indices(self, codepoints: np.ndarray) -> np.ndarray:
        """Vectorised codepoint -> mask index lookup."""
        inside = (codepoints >= 0) & (codepoints < len(self._lut))
        indices = np.zeros(codepoints.shape, dtype=np.int32)
        indices[inside] = self._lut[codepoints[inside]]
        return indices

    def has_glyph(self, char: str) -> bool:
        return ord(char) in self.codepoint_to_mask


def _coverage(cell: Image.Image, font_type: str) -> np.ndarray:
    if font_type == "default" and cell.mode in ("RGBA", "LA"):
        data = np.asarray(cell.getchannel("A"), dtype=np.float32)
    else:
        data = np.asarray(cell.convert("L"), dtype=np.float32)
    return data / 255.0


def load_font_atlas(path: Path, layout: str, font_type: str) -> FontAtlas:
    """Slices an atlas image into glyph masks according to ``layout``."""
    if layout not in LAYOUT_GRIDS:
        raise ValueError(f"Unknown font layout: {layout}")
    if not path.is_file():
        log.error("Font atlas not found", path=str(path))
        raise FileNotFoundError(f"Font atlas not found: {path}")

    columns, rows = LAYOUT_GRIDS[layout]
    charmap = LAYOUT_CHARMAPS[layout]
    img = Image.open(path)
    img.load()
    cell_w, cell_h = img.width // columns, img.height // rows
    if cell_w <= 0 or cell_h <= 0:
        raise ValueError(f"Font atlas {path} too small for {layout} layout")
    log.info(
        "Loading font atlas",
        path=str(path),
        layout=layout,
        font_type=font_type,
        cell_w=cell_w,
        cell_h=cell_h,
    )

    masks = [np.zeros((cell_h, cell_w), dtype=np.float32)]
    lookup: Dict[int, int] = {}
    for cell_index, codepoint in enumerate(charmap[: columns * rows]):
        if codepoint == 0 and cell_index != 0:
            continue
        col, row = cell_index % columns, cell_index // columns
        box = (col * cell_w, row * cell_h, (col + 1) * cell_w, (row + 1) * cell_h)
        lookup[codepoint] = len(masks)
        masks.append(_coverage(img.crop(box), font_type))
    # Space is always blank regardless of atlas content
    lookup[ord(" ")] = 0

    log.info("Font atlas loaded", glyphs=len(lookup))
    return FontAtlas(np.stack(masks), lookup, cell_w, cell_h)


def rasterize_default_font(cell_width: int, cell_height: int) -> FontAtlas:
    """Builds printable-ASCII masks from Pillow's built-in font."""
    log.debug("Rasterizing default font", cell_w=cell_width, cell_h=cell_height)
    font = ImageFont.load_default()
    masks = [np.zeros((cell_height, cell_width), dtype=np.float32)]
    lookup: Dict[int, int] = {ord(" "): 0}
    for codepoint in range(0x21, 0x7F):
        char = chr(codepoint)
        cell = Image.new("L", (cell_width, cell_height), 0)
        draw = ImageDraw.Draw(cell)
        left, top, right, bottom = draw.textbbox((0, 0), char, font=font)
        offset_x = (cell_width - (right - left)) // 2 - left
        offset_y = (cell_height - (bottom - top)) // 2 - top
        draw.text((offset_x, offset_y), char, fill=255, font=font)
        lookup[codepoint] = len(masks)
        masks.append(np.asarray(cell, dtype=np.float32) / 255.0)
    return FontAtlas(np.stack(masks), lookup, cell_width, cell_height)


def load_font(
    path: Path, layout: str, font_type: str, cell_width: int, cell_height: int
) -> FontAtlas:
    """Loads the configured atlas, falling back to the built-in font if it is missing."""
    try:
        return load_font_atlas(path, layout, font_type)
    except FileNotFoundError:
        log.warning(
            "Using built-in font instead of missing atlas",
            path=str(path),
            cell_w=cell_width,
            cell_h=cell_height,
        )
        return rasterize_default_font(cell_width, cell_height)
