import pytest

from bmpfont import cli
from bmpfont.backend import BACKENDS
from bmpfont.catalog import GLYPH_CATALOG
from bmpfont.errors import FontUnavailable
from bmpfont.serialize import parse_table

from conftest import BANG, SOLID_A, SPACE, FakeBackend


@pytest.fixture
def fake_backend(monkeypatch):
    monkeypatch.setitem(BACKENDS, "fake", lambda selection: FakeBackend({"A": SOLID_A, "!": BANG, " ": SPACE}))


def test_catalog_command(capsys):
    assert cli.main(["catalog"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == len(GLYPH_CATALOG)
    assert lines[33] == "33\tU+0041\tA"
    assert lines[-1] == "169\tU+2998\t⦘"


def test_export_and_show(fake_backend, tmp_path, capsys):
    target = tmp_path / "font.txt"
    assert cli.main(["export", "whatever", str(target), "--backend", "fake", "--size", "16"]) == 0
    font = parse_table(target.read_text(encoding="utf-8"))
    assert font.widths[33] == 8
    capsys.readouterr()

    assert cli.main(["show", str(target), "!"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "[1] '!' width=3 advance=4"
    assert lines[1:] == [".#."] * 16


def test_export_rust_with_workers(fake_backend, tmp_path):
    target = tmp_path / "font.rs"
    args = ["export", "x", str(target), "--backend", "fake", "--format", "rust", "--workers", "2"]
    assert cli.main(args) == 0
    assert "pub const FONT" in target.read_text(encoding="utf-8")


def test_export_failure_exit_code(monkeypatch, tmp_path, capsys):
    def unavailable(selection):
        raise FontUnavailable(f"cannot load {selection.family}")

    monkeypatch.setitem(BACKENDS, "broken", unavailable)
    target = tmp_path / "font.txt"
    assert cli.main(["export", "Missing Sans", str(target), "--backend", "broken"]) == 2
    assert "ERROR: cannot load Missing Sans" in capsys.readouterr().err
    assert not target.exists()


def test_show_unknown_symbol(fake_backend, tmp_path, capsys):
    target = tmp_path / "font.txt"
    cli.main(["export", "x", str(target), "--backend", "fake"])
    assert cli.main(["show", str(target), "é"]) == 2
    assert "not in the glyph catalog" in capsys.readouterr().err


def test_format_default_from_environment(monkeypatch):
    monkeypatch.setenv("BMPFONT_FORMAT", "rust")
    args = cli.parse_args(["export", "font.ttf", "out.rs"])
    assert args.output_format == "rust"
    assert args.backend == "pillow"


def test_invalid_size_from_environment(monkeypatch, tmp_path, capsys):
    monkeypatch.setenv("BMPFONT_SIZE", "big")
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["export", "font.ttf", str(tmp_path / "font.txt")])
    assert excinfo.value.code == 2
    assert "invalid int value: 'big'" in capsys.readouterr().err


def test_invalid_log_level(tmp_path, capsys):
    assert cli.main(["--log-level", "chatty", "catalog"]) == 2
    assert "ERROR: unknown log level 'chatty'" in capsys.readouterr().err


def test_show_symbol_beyond_table(tmp_path, capsys):
    target = tmp_path / "short.txt"
    target.write_text("lineHeight: 1\nglyphs: [[], []]\nwidths: [0, 0]\nadvances: [3, 3]\n")
    assert cli.main(["show", str(target), "A"]) == 2
    assert "has no entry 33 for 'A'" in capsys.readouterr().err


def test_export_summary_line(fake_backend, tmp_path, capsys):
    target = tmp_path / "font.txt"
    assert cli.main(["export", "x", str(target), "--backend", "fake"]) == 0
    assert capsys.readouterr().out == f"Wrote {len(GLYPH_CATALOG)} glyphs, line height 16, to {target}\n"
