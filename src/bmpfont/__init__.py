"""Compile outline fonts into packed monochrome glyph tables."""

from .backend import FontBackend, FontSelection, open_backend
from .catalog import GLYPH_CATALOG
from .errors import CatalogError, DestinationUnwritable, ExportError, FontUnavailable, GlyphMissing
from .export import build_font, export_font
from .serialize import PackedFont, format_rust, format_table, parse_table

__all__ = [
    "GLYPH_CATALOG",
    "CatalogError",
    "DestinationUnwritable",
    "ExportError",
    "FontBackend",
    "FontSelection",
    "FontUnavailable",
    "GlyphMissing",
    "PackedFont",
    "build_font",
    "export_font",
    "format_rust",
    "format_table",
    "open_backend",
    "parse_table",
]
