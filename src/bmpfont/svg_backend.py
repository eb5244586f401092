from __future__ import annotations

import io
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Tuple

from cairosvg import svg2png
from PIL import Image
from svgpathtools import parse_path

from .backend import FontSelection
from .errors import FontUnavailable, GlyphMissing

LOGGER = logging.getLogger(__name__)


@dataclass
class OutlineMetrics:
    font_key: str
    min_y: float
    max_y: float

    @property
    def unit_height(self) -> float:
        return self.max_y - self.min_y

    @property
    def baseline_units(self) -> float:
        return -self.min_y

    def unit_to_px(self, target_height: float) -> float:
        if self.unit_height == 0:
            return 1.0
        return target_height / self.unit_height


@dataclass
class OutlineGlyph:
    symbol: str
    advance_width: float
    path_data: str


def iter_outline_glyphs(font_entry: dict) -> Iterator[OutlineGlyph]:
    glyphs = font_entry.get("glyphs", {})
    for symbol, payload in glyphs.items():
        if not isinstance(payload, dict):
            continue
        if payload.get("type", "path") != "path":
            continue
        yield OutlineGlyph(
            symbol=str(symbol),
            advance_width=float(payload.get("advanceWidth", 0.0)),
            path_data=payload.get("path") or "",
        )


def build_outline_metrics(font_entry: dict) -> OutlineMetrics | None:
    min_y: float | None = None
    max_y: float | None = None
    for glyph in iter_outline_glyphs(font_entry):
        if not glyph.path_data:
            continue
        try:
            _, _, glyph_min_y, glyph_max_y = parse_path(glyph.path_data).bbox()
        except (ValueError, IndexError):
            continue
        min_y = glyph_min_y if min_y is None else min(min_y, glyph_min_y)
        max_y = glyph_max_y if max_y is None else max(max_y, glyph_max_y)

    if min_y is None or max_y is None:
        return None
    return OutlineMetrics(font_key=str(font_entry.get("fontKey", "")), min_y=min_y, max_y=max_y)


def _select_entry(fonts_data: list, font_key: str | None, source: Path) -> dict:
    if not fonts_data:
        raise FontUnavailable(f"no fonts in {source}")
    if font_key is None:
        return fonts_data[0]
    for entry in fonts_data:
        if str(entry.get("fontKey")) == font_key:
            return entry
    raise FontUnavailable(f"font {font_key!r} not found in {source}")


class SvgOutlineBackend:
    """Rasterizes glyph outlines given as SVG path data, scaled to a pixel line height."""

    def __init__(self, metrics: OutlineMetrics, glyphs: Dict[str, OutlineGlyph], line_height: int) -> None:
        self.metrics = metrics
        self.glyphs = glyphs
        self.line_height = line_height
        self.scale = metrics.unit_to_px(line_height)

    @classmethod
    def open(cls, selection: FontSelection) -> "SvgOutlineBackend":
        source = Path(selection.family)
        if selection.size <= 0:
            raise FontUnavailable(f"invalid font size {selection.size}")
        try:
            fonts_data = json.loads(source.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise FontUnavailable(f"cannot read outline font {source}: {exc}") from exc
        if isinstance(fonts_data, dict):
            fonts_data = [fonts_data]

        font_entry = _select_entry(fonts_data, selection.style, source)
        metrics = build_outline_metrics(font_entry)
        if metrics is None:
            raise FontUnavailable(f"font {font_entry.get('fontKey')!r} in {source} has no outlines")
        glyphs = {glyph.symbol: glyph for glyph in iter_outline_glyphs(font_entry)}
        LOGGER.debug("Loaded %d outlines for %s from %s", len(glyphs), metrics.font_key, source)
        return cls(metrics, glyphs, selection.size)

    def _glyph(self, symbol: str) -> OutlineGlyph:
        glyph = self.glyphs.get(symbol)
        if glyph is None:
            raise GlyphMissing(symbol)
        return glyph

    def measure_line_height(self) -> int:
        return self.line_height

    def measure_bounding_box(self, symbol: str) -> Tuple[int, int]:
        glyph = self._glyph(symbol)
        if not glyph.path_data:
            return 0, 0
        xmin, xmax, _, _ = parse_path(glyph.path_data).bbox()
        left = int(round(xmin * self.scale))
        right = int(round(xmax * self.scale))
        if right <= left:
            return 0, 0
        return left, right - left

    def measure_advance(self, symbol: str) -> int:
        return int(round(self._glyph(symbol).advance_width * self.scale))

    def rasterize(self, symbol: str, canvas: Image.Image) -> None:
        glyph = self._glyph(symbol)
        if not glyph.path_data:
            return
        width_units = canvas.width / self.scale
        height_units = canvas.height / self.scale
        svg = (
            f'<svg xmlns="http://www.w3.org/2000/svg" '
            f'viewBox="0 0 {width_units} {height_units}">'
            f'<rect width="100%" height="100%" fill="#ffffff" />'
            f'<g transform="translate(0,{self.metrics.baseline_units})">'
            f'<path d="{glyph.path_data}" fill="#000000" shape-rendering="crispEdges" />'
            "</g></svg>"
        )
        png_bytes = svg2png(
            bytestring=svg.encode("utf-8"),
            output_width=canvas.width,
            output_height=canvas.height,
        )
        image = Image.open(io.BytesIO(png_bytes)).convert("RGB")
        canvas.paste(image, (0, 0))
