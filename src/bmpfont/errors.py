"""Exceptions raised while exporting a glyph table."""

from __future__ import annotations


class ExportError(Exception):
    """Base class for failures surfaced to the caller of an export."""


class CatalogError(ExportError):
    pass


class FontUnavailable(ExportError):
    pass


class DestinationUnwritable(ExportError):
    pass


class GlyphMissing(Exception):
    """The selected font has nothing to draw for one symbol.

    Recovered inside the rasterizer; never escapes an export.
    """

    def __init__(self, symbol: str) -> None:
        super().__init__(f"no glyph for {symbol!r} (U+{ord(symbol):04X})")
        self.symbol = symbol
