from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

import pytest
from PIL import Image

from bmpfont.backend import FontSelection
from bmpfont.errors import GlyphMissing


@dataclass(frozen=True)
class FakeGlyph:
    rows: Tuple[str, ...]
    advance: int
    x: int = 0

    @property
    def width(self) -> int:
        return max((len(row) for row in self.rows), default=0)


def glyph(rows: Sequence[str], advance: int, x: int = 0) -> FakeGlyph:
    return FakeGlyph(rows=tuple(rows), advance=advance, x=x)


class FakeBackend:
    """In-memory font: each glyph is drawn from '#'/'.' rows."""

    def __init__(
        self,
        glyphs: Dict[str, FakeGlyph],
        line_height: int = 16,
        default: Optional[FakeGlyph] = None,
        ink=(0, 0, 0),
    ) -> None:
        self.glyphs = glyphs
        self.line_height = line_height
        self.default = default
        self.ink = ink
        self.rasterized = []
        self.measured = []

    def _glyph(self, symbol: str) -> FakeGlyph:
        found = self.glyphs.get(symbol, self.default)
        if found is None:
            raise GlyphMissing(symbol)
        return found

    def measure_line_height(self) -> int:
        return self.line_height

    def measure_bounding_box(self, symbol: str) -> Tuple[int, int]:
        self.measured.append(symbol)
        found = self._glyph(symbol)
        return found.x, found.width

    def measure_advance(self, symbol: str) -> int:
        return self._glyph(symbol).advance

    def rasterize(self, symbol: str, canvas: Image.Image) -> None:
        found = self._glyph(symbol)
        self.rasterized.append(symbol)
        for y, row in enumerate(found.rows):
            for x, cell in enumerate(row):
                px = found.x + x
                if cell == "#" and 0 <= px < canvas.width and y < canvas.height:
                    canvas.putpixel((px, y), self.ink)


SOLID_A = glyph(["########"] * 16, advance=10)
BANG = glyph([".#."] * 16, advance=4)
SPACE = glyph([], advance=5)
BOX = glyph(["#....#"] + ["......"] * 14 + ["#....#"], advance=7)


@pytest.fixture
def monospace_backend() -> FakeBackend:
    return FakeBackend({"A": SOLID_A, "!": BANG, " ": SPACE}, default=BOX)


@pytest.fixture
def selection() -> FontSelection:
    return FontSelection(family="fake", size=16)
