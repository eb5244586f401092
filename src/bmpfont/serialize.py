from __future__ import annotations

import logging
import os
import re
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Sequence, Tuple

from . import config
from .catalog import index_of
from .errors import DestinationUnwritable
from .packing import row_bytes, unpack_rows

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackedFont:
    line_height: int
    glyphs: Tuple[bytes, ...]
    widths: Tuple[int, ...]
    advances: Tuple[int, ...]

    def __post_init__(self) -> None:
        if not len(self.glyphs) == len(self.widths) == len(self.advances):
            raise ValueError(
                f"section lengths differ: {len(self.glyphs)} glyphs, "
                f"{len(self.widths)} widths, {len(self.advances)} advances"
            )
        for index, (data, width) in enumerate(zip(self.glyphs, self.widths)):
            expected = self.line_height * row_bytes(width)
            if len(data) != expected:
                raise ValueError(f"glyph {index} has {len(data)} bytes, expected {expected}")

    def glyph_rows(self, index: int, align_tail: str = "left") -> Tuple[Tuple[bool, ...], ...]:
        return unpack_rows(self.glyphs[index], self.widths[index], self.line_height, align_tail)

    def _indices(self, text: str) -> Iterator[int]:
        for ch in text:
            try:
                index = index_of(ch)
            except KeyError:
                continue
            if index < len(self.glyphs):
                yield index

    def advance(self, text: str) -> int:
        """Cursor movement after drawing ``text``."""
        return sum(self.advances[index] for index in self._indices(text))

    def width(self, text: str) -> int:
        """Drawn width of ``text``, including ink hanging past the last advance."""
        result = 0
        extra = 0
        for index in self._indices(text):
            extra = max(self.widths[index], self.advances[index]) - self.advances[index]
            result += self.advances[index]
        return result + extra


def _wrapped(values: Sequence[int], indent: str) -> List[str]:
    lines = []
    for start in range(0, len(values), config.WRAP_EVERY):
        chunk = values[start:start + config.WRAP_EVERY]
        lines.append(indent + " ".join(f"{value}," for value in chunk))
    return lines


def format_table(font: PackedFont) -> str:
    lines = [f"lineHeight: {font.line_height}", "glyphs: ["]
    for data in font.glyphs:
        lines.append("  [" + ", ".join(f"0x{value:x}" for value in data) + "],")
    lines.append("]")
    for name, values in (("widths", font.widths), ("advances", font.advances)):
        lines.append(f"{name}: [")
        lines.extend(_wrapped(values, "  "))
        lines.append("]")
    return "\n".join(lines) + "\n"


def format_rust(font: PackedFont) -> str:
    lines = [
        "#[allow(dead_code)]",
        "pub const FONT: crate::screen::Font = crate::screen::Font {",
        f"    height: {font.line_height},",
        "    chars: &[",
    ]
    for data in font.glyphs:
        lines.append("        &[" + "".join(f"0x{value:x}," for value in data) + "],")
    lines.append("    ],")
    for name, values in (("width", font.widths), ("advance", font.advances)):
        lines.append(f"    {name}: &[")
        lines.extend(_wrapped(values, "        "))
        lines.append("    ],")
    lines.append("};")
    return "\n".join(lines) + "\n"


FORMATTERS = {
    "table": format_table,
    "rust": format_rust,
}

_TOKEN_RE = re.compile(r"[A-Za-z_]\w*\s*:|\[|\]|0[xX][0-9a-fA-F]+|-?\d+")
_COMMENT_RE = re.compile(r"//[^\n]*")


def _parse_value(tokens: List[str], pos: int) -> Tuple[Any, int]:
    token = tokens[pos]
    if token == "[":
        items = []
        pos += 1
        while pos < len(tokens) and tokens[pos] != "]":
            item, pos = _parse_value(tokens, pos)
            items.append(item)
        if pos >= len(tokens):
            raise ValueError("unterminated list")
        return items, pos + 1
    if token == "]" or token.endswith(":"):
        raise ValueError(f"unexpected token {token!r}")
    return int(token, 0), pos + 1


def parse_table(text: str) -> PackedFont:
    """Parse the ``format_table`` layout; line breaks and comments are ignored."""
    tokens = _TOKEN_RE.findall(_COMMENT_RE.sub("", text))
    sections: Dict[str, Any] = {}
    pos = 0
    while pos < len(tokens):
        key = tokens[pos]
        if not key.endswith(":"):
            raise ValueError(f"expected a section name, found {key!r}")
        value, pos = _parse_value(tokens, pos + 1)
        sections[key[:-1].strip()] = value

    missing = [name for name in ("lineHeight", "glyphs", "widths", "advances") if name not in sections]
    if missing:
        raise ValueError(f"missing sections: {', '.join(missing)}")
    return PackedFont(
        line_height=int(sections["lineHeight"]),
        glyphs=tuple(bytes(glyph) for glyph in sections["glyphs"]),
        widths=tuple(sections["widths"]),
        advances=tuple(sections["advances"]),
    )


def _published_mode(destination: Path) -> int:
    """Mode of the file being replaced, else what open() would create under the umask."""
    try:
        return stat.S_IMODE(destination.stat().st_mode)
    except FileNotFoundError:
        pass
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_atomic(destination: Path, text: str) -> None:
    """Publish ``text`` at ``destination`` in one rename; never leave a partial file."""
    destination = Path(destination)
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            delete=False,
            encoding="utf-8",
            dir=destination.parent,
            prefix=f".{destination.name}.",
            suffix=".tmp",
        ) as tf:
            temp_path = Path(tf.name)
            tf.write(text)
            tf.flush()
            os.fsync(tf.fileno())
        os.chmod(temp_path, _published_mode(destination))
        os.replace(temp_path, destination)
    except OSError as exc:
        if temp_path is not None:
            try:
                temp_path.unlink()
            except FileNotFoundError:
                pass
        raise DestinationUnwritable(f"cannot write {destination}: {exc}") from exc
    LOGGER.info("Wrote %s", destination)
