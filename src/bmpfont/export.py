from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Sequence, Tuple, Union

from . import config
from .backend import BackendFactory, FontBackend, FontSelection, open_backend
from .catalog import GLYPH_CATALOG, validate_catalog
from .errors import FontUnavailable
from .packing import pack_rows
from .rasterize import GlyphMetrics, ScratchCanvas, glyph_advance, rasterize_glyph
from .serialize import FORMATTERS, PackedFont, write_atomic

LOGGER = logging.getLogger(__name__)

BackendSpec = Union[str, BackendFactory]


def _factory(backend: BackendSpec) -> BackendFactory:
    if isinstance(backend, str):
        return lambda selection: open_backend(backend, selection)
    return backend


def process_glyph(
    symbol: str,
    backend: FontBackend,
    line_height: int,
    canvas: ScratchCanvas,
    align_tail: str = "left",
) -> Tuple[bytes, GlyphMetrics]:
    raster = rasterize_glyph(symbol, backend, line_height, canvas)
    if raster.missing:
        metrics = GlyphMetrics(width=0, advance=0)
    else:
        metrics = GlyphMetrics(width=raster.width, advance=glyph_advance(symbol, backend))
    LOGGER.debug("%r: width=%d advance=%d", symbol, metrics.width, metrics.advance)
    return pack_rows(raster.pixels, raster.width, align_tail), metrics


def build_font(
    selection: FontSelection,
    *,
    backend: BackendSpec = config.DEFAULT_BACKEND,
    align_tail: str = "left",
    workers: int = 1,
    symbols: Sequence[str] = GLYPH_CATALOG,
) -> PackedFont:
    """Rasterize and pack every symbol, in catalog order."""
    if align_tail not in config.TAIL_ALIGNMENTS:
        raise ValueError(f"align_tail must be one of {config.TAIL_ALIGNMENTS}, not {align_tail!r}")
    validate_catalog(symbols)
    factory = _factory(backend)
    main_backend = factory(selection)
    line_height = main_backend.measure_line_height()
    if line_height <= 0:
        raise FontUnavailable(f"{selection.describe()} reports line height {line_height}")
    LOGGER.info("Exporting %d glyphs from %s, line height %d", len(symbols), selection.describe(), line_height)

    if workers <= 1:
        canvas = ScratchCanvas()
        results = [process_glyph(symbol, main_backend, line_height, canvas, align_tail) for symbol in symbols]
    else:
        results = _build_parallel(symbols, factory, selection, line_height, align_tail, workers)

    return PackedFont(
        line_height=line_height,
        glyphs=tuple(data for data, _ in results),
        widths=tuple(metrics.width for _, metrics in results),
        advances=tuple(metrics.advance for _, metrics in results),
    )


def _build_parallel(
    symbols: Sequence[str],
    factory: BackendFactory,
    selection: FontSelection,
    line_height: int,
    align_tail: str,
    workers: int,
) -> List[Tuple[bytes, GlyphMetrics]]:
    local = threading.local()

    def task(symbol: str) -> Tuple[bytes, GlyphMetrics]:
        # one backend and one canvas per worker thread
        if not hasattr(local, "backend"):
            local.backend = factory(selection)
            local.canvas = ScratchCanvas()
        return process_glyph(symbol, local.backend, line_height, local.canvas, align_tail)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(task, symbols))


def export_font(
    selection: FontSelection,
    destination: Union[str, Path],
    *,
    backend: BackendSpec = config.DEFAULT_BACKEND,
    output_format: str = config.DEFAULT_FORMAT,
    align_tail: str = "left",
    workers: int = 1,
) -> PackedFont:
    """Build the glyph table for ``selection`` and publish it at ``destination``.

    Raises FontUnavailable before anything is rendered and
    DestinationUnwritable when the file cannot be published; in both cases
    nothing is left at ``destination``.
    """
    formatter = FORMATTERS.get(output_format)
    if formatter is None:
        raise ValueError(f"output_format must be one of {sorted(FORMATTERS)}, not {output_format!r}")
    font = build_font(selection, backend=backend, align_tail=align_tail, workers=workers)
    write_atomic(Path(destination), formatter(font))
    return font
