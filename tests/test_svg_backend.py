import json
import os

import pytest

try:
    import cairosvg
except (ImportError, OSError):
    cairosvg = None

from bmpfont.backend import FontSelection, open_backend
from bmpfont.catalog import index_of
from bmpfont.errors import FontUnavailable
from bmpfont.export import build_font

pytestmark = pytest.mark.skipif(cairosvg is None, reason="cairo library not available")

FONTS = [
    {
        "fontKey": "blocks",
        "glyphs": {
            "A": {"type": "path", "path": "M0 0 L8 0 L8 16 L0 16 Z", "advanceWidth": 10},
            "!": {"type": "path", "path": "M1 0 L2 0 L2 16 L1 16 Z", "advanceWidth": 4},
            " ": {"type": "path", "path": "", "advanceWidth": 5},
        },
    },
    {
        "fontKey": "half",
        "glyphs": {
            "A": {"type": "path", "path": "M0 0 L16 0 L16 32 L0 32 Z", "advanceWidth": 20},
        },
    },
]


@pytest.fixture
def font_file(tmp_path):
    path = tmp_path / "glyphs.json"
    path.write_text(json.dumps(FONTS))
    return path


def test_solid_outline(font_file):
    font = build_font(FontSelection(str(font_file), 16), backend="svg")
    index = index_of("A")
    assert font.line_height == 16
    assert font.glyphs[index] == b"\xff" * 16
    assert font.widths[index] == 8
    assert font.advances[index] == 10


def test_thin_outline(font_file):
    font = build_font(FontSelection(str(font_file), 16), backend="svg")
    index = index_of("!")
    assert font.widths[index] == 2
    assert set(font.glyphs[index]) == {0x40}


def test_empty_outline_and_missing_symbols(font_file):
    font = build_font(FontSelection(str(font_file), 16), backend="svg")
    space = index_of(" ")
    assert (font.glyphs[space], font.widths[space], font.advances[space]) == (b"", 0, 5)
    tilde = index_of("~")
    assert (font.glyphs[tilde], font.widths[tilde], font.advances[tilde]) == (b"", 0, 0)


def test_outlines_scale_to_line_height(font_file):
    font = build_font(FontSelection(str(font_file), 16, style="half"), backend="svg")
    index = index_of("A")
    assert font.widths[index] == 8
    assert font.advances[index] == 10
    assert font.glyphs[index] == b"\xff" * 16


def test_unknown_font_key(font_file):
    with pytest.raises(FontUnavailable):
        open_backend("svg", FontSelection(str(font_file), 16, style="serif"))


def test_unreadable_font_file(tmp_path):
    with pytest.raises(FontUnavailable):
        open_backend("svg", FontSelection(str(tmp_path / "missing.json"), 16))


def test_import_leaves_library_paths_alone(monkeypatch):
    import importlib

    import bmpfont.svg_backend

    monkeypatch.delenv("LD_LIBRARY_PATH", raising=False)
    monkeypatch.delenv("DYLD_LIBRARY_PATH", raising=False)
    importlib.reload(bmpfont.svg_backend)
    assert "LD_LIBRARY_PATH" not in os.environ
    assert "DYLD_LIBRARY_PATH" not in os.environ
