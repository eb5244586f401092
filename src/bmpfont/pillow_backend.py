from __future__ import annotations

import io
import logging
import os
from typing import FrozenSet, Optional, Tuple

from fontTools.ttLib import TTFont, TTLibError
from PIL import Image, ImageDraw, ImageFont

from .backend import FontSelection
from .errors import FontUnavailable, GlyphMissing

LOGGER = logging.getLogger(__name__)

INK = (0, 0, 0)


class PillowBackend:
    """Renders through FreeType via Pillow, hinted and without anti-aliasing.

    Symbols absent from the face's character map raise GlyphMissing instead
    of being drawn as the font's ``.notdef`` box.
    """

    def __init__(self, font: ImageFont.FreeTypeFont, coverage: Optional[FrozenSet[int]] = None) -> None:
        self.font = font
        self.coverage = coverage

    @classmethod
    def open(cls, selection: FontSelection) -> "PillowBackend":
        if selection.size <= 0:
            raise FontUnavailable(f"invalid font size {selection.size}")
        try:
            if selection.family == "default":
                font = ImageFont.load_default(size=selection.size)
            else:
                font = ImageFont.truetype(selection.family, selection.size)
        except OSError as exc:
            raise FontUnavailable(f"cannot load font {selection.describe()}: {exc}") from exc
        if not isinstance(font, ImageFont.FreeTypeFont):
            raise FontUnavailable(f"{selection.describe()} is not an outline font")
        if selection.style:
            _apply_style(font, selection)
        LOGGER.debug("Loaded font %s as %s", selection.describe(), " ".join(font.getname()))
        return cls(font, character_map(font))

    def _check(self, symbol: str) -> None:
        if self.coverage is not None and ord(symbol) not in self.coverage:
            raise GlyphMissing(symbol)

    def measure_line_height(self) -> int:
        ascent, descent = self.font.getmetrics()
        return ascent + descent

    def measure_bounding_box(self, symbol: str) -> Tuple[int, int]:
        self._check(symbol)
        left, _, right, _ = self.font.getbbox(symbol, mode="1")
        if right <= left:
            return 0, 0
        return left, right - left

    def measure_advance(self, symbol: str) -> int:
        self._check(symbol)
        return int(round(self.font.getlength(symbol, mode="1")))

    def rasterize(self, symbol: str, canvas: Image.Image) -> None:
        self._check(symbol)
        draw = ImageDraw.Draw(canvas)
        draw.fontmode = "1"
        draw.text((0, 0), symbol, fill=INK, font=self.font)


def character_map(font: ImageFont.FreeTypeFont) -> Optional[FrozenSet[int]]:
    """Code points the face maps to a glyph, or None when fontTools cannot read it."""
    source = font.path
    if not isinstance(source, (str, bytes, os.PathLike)):
        # loaded from a file object, e.g. Pillow's bundled default font
        source = io.BytesIO(font.font_bytes)
    try:
        with TTFont(source, fontNumber=font.index, lazy=True) as ttfont:
            cmap = ttfont.getBestCmap()
    except (TTLibError, OSError) as exc:
        LOGGER.warning("Cannot read the character map of %s (%s); missing glyphs will not be detected",
                       " ".join(font.getname()), exc)
        return None
    if cmap is None:
        LOGGER.warning("%s has no Unicode character map; missing glyphs will not be detected",
                       " ".join(font.getname()))
        return None
    return frozenset(cmap)


def _apply_style(font: ImageFont.FreeTypeFont, selection: FontSelection) -> None:
    wanted = selection.style.lower()
    _, style = font.getname()
    if style and style.lower() == wanted:
        return
    try:
        names = font.get_variation_names()
    except OSError as exc:
        raise FontUnavailable(
            f"font {selection.family} has style {style!r}, not {selection.style!r}"
        ) from exc
    for name in names:
        decoded = name.decode("utf-8", "replace") if isinstance(name, bytes) else name
        if decoded.lower() == wanted:
            font.set_variation_by_name(name)
            return
    raise FontUnavailable(f"font {selection.family} has no style {selection.style!r}")
