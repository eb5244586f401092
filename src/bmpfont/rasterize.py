from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from PIL import Image

from . import config
from .backend import FontBackend
from .errors import GlyphMissing

LOGGER = logging.getLogger(__name__)

BACKGROUND = (255, 255, 255)


@dataclass(frozen=True)
class RasterGlyph:
    x: int
    width: int
    height: int
    pixels: Tuple[Tuple[bool, ...], ...]
    missing: bool = False

    @classmethod
    def blank(cls, height: int, missing: bool = False) -> "RasterGlyph":
        return cls(x=0, width=0, height=height, pixels=((),) * height, missing=missing)


@dataclass(frozen=True)
class GlyphMetrics:
    width: int
    advance: int


class ScratchCanvas:
    """Reusable RGB drawing surface; never share one between threads."""

    def __init__(self, size: int = config.SCRATCH_SIZE) -> None:
        self.image = Image.new("RGB", (size, size), BACKGROUND)

    def reset(self, width: int, height: int) -> Image.Image:
        if width > self.image.width or height > self.image.height:
            size = (max(width, self.image.width), max(height, self.image.height))
            self.image = Image.new("RGB", size, BACKGROUND)
        else:
            self.image.paste(BACKGROUND, (0, 0, self.image.width, self.image.height))
        return self.image


def folded_width(backend: FontBackend, symbol: str) -> int:
    x, width = backend.measure_bounding_box(symbol)
    return max(x + width, 0)


def classify(image: Image.Image, width: int, height: int) -> Tuple[Tuple[bool, ...], ...]:
    blue = image.crop((0, 0, width, height)).getchannel("B").tobytes()
    threshold = config.INK_THRESHOLD
    return tuple(
        tuple(value < threshold for value in blue[row * width:(row + 1) * width])
        for row in range(height)
    )


def rasterize_glyph(
    symbol: str,
    backend: FontBackend,
    line_height: int,
    canvas: ScratchCanvas,
) -> RasterGlyph:
    try:
        width = folded_width(backend, symbol)
        if width == 0:
            return RasterGlyph.blank(line_height)
        image = canvas.reset(width, line_height)
        backend.rasterize(symbol, image)
    except GlyphMissing as exc:
        LOGGER.warning("%s; exporting a blank cell", exc)
        return RasterGlyph.blank(line_height, missing=True)
    return RasterGlyph(x=0, width=width, height=line_height, pixels=classify(image, width, line_height))


def glyph_advance(symbol: str, backend: FontBackend) -> int:
    try:
        return max(backend.measure_advance(symbol), 0)
    except GlyphMissing:
        return 0


def extract_metrics(symbol: str, backend: FontBackend) -> GlyphMetrics:
    try:
        width = folded_width(backend, symbol)
    except GlyphMissing:
        return GlyphMetrics(width=0, advance=0)
    return GlyphMetrics(width=width, advance=glyph_advance(symbol, backend))
