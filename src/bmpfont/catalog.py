"""The fixed, ordered set of symbols exported into every glyph table.

A symbol's position in ``GLYPH_CATALOG`` is the index the embedded renderer
uses to find its bitmap, width and advance. Entries may only be appended.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from .errors import CatalogError

# fmt: off
GLYPH_CATALOG: tuple[str, ...] = (
    " ", "!", "\"", "#", "$", "%", "&", "'", "(", ")", "*", "+", ",", "-", ".", "/",
    "0", "1", "2", "3", "4", "5", "6", "7", "8", "9", ":", ";", "<", "=", ">", "?",
    "@", "A", "B", "C", "D", "E", "F", "G", "H", "I", "J", "K", "L", "M", "N", "O",
    "P", "Q", "R", "S", "T", "U", "V", "W", "X", "Y", "Z", "[", "\\", "]", "^", "_",
    "`", "a", "b", "c", "d", "e", "f", "g", "h", "i", "j", "k", "l", "m", "n", "o",
    "p", "q", "r", "s", "t", "u", "v", "w", "x", "y", "z", "{", "|", "}", "~", "ᴇ",
    "∞", "×", "÷", "±", "°", "∀", "∅", "∈", "∉", "∙", "∫", "≈", "≤", "≥", "⋂", "⋃",
    "←", "↑", "→", "↓", "↵", "⬏", "α", "β", "Γ", "γ", "Δ", "δ", "ϵ", "ϝ", "ζ", "η",
    "Θ", "θ", "ι", "κ", "Λ", "λ", "μ", "ν", "Ξ", "ξ", "Π", "π", "ρ", "Σ", "σ", "τ",
    "υ", "Φ", "ϕ", "χ", "Ψ", "ψ", "Ω", "ω", "…", "▪", "◂", "▴", "▸", "▾", "≠", "≷",
    "∡", "²", "³", "ˣ", "₂", "ℹ", "⟪", "⟫", "⦗", "⦘",
)
# fmt: on

ASCII_FIRST = 0x20
ASCII_LAST = 0x7E

_INDEX: Dict[str, int] = {symbol: index for index, symbol in enumerate(GLYPH_CATALOG)}


def validate_catalog(symbols: Iterable[str] = GLYPH_CATALOG) -> None:
    seen: Dict[str, int] = {}
    for index, symbol in enumerate(symbols):
        if not isinstance(symbol, str) or len(symbol) != 1:
            raise CatalogError(f"catalog entry {index} is not a single code point: {symbol!r}")
        try:
            symbol.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise CatalogError(f"catalog entry {index} cannot be encoded: {symbol!r}") from exc
        if symbol in seen:
            raise CatalogError(
                f"catalog entry {index} duplicates entry {seen[symbol]}: {symbol!r}"
            )
        seen[symbol] = index


def index_of(symbol: str) -> int:
    return _INDEX[symbol]


def ascii_index(code: int) -> Optional[int]:
    """Index used by the renderer for a printable ASCII byte, else None."""
    if ASCII_FIRST <= code <= ASCII_LAST:
        return code - ASCII_FIRST
    return None
