"""Row-aligned 1-bit packing of glyph bitmaps.

Each row is split into 8-pixel groups from the left. The first pixel of a
group lands in bit 7. A short final group leaves its low bits clear unless
``align_tail="right"`` is asked for, in which case its last pixel lands in
bit 0. Rows always start on a byte boundary.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple


def row_bytes(width: int) -> int:
    return (width + 7) // 8


def pack_row(row: Sequence[bool], width: int, align_tail: str = "left") -> bytes:
    out = bytearray()
    for start in range(0, width, 8):
        count = min(8, width - start)
        shift = 8 - count if align_tail == "left" else 0
        value = 0
        for i in range(count):
            if row[start + i]:
                value |= 1 << (count - 1 - i + shift)
        out.append(value)
    return bytes(out)


def pack_rows(pixels: Sequence[Sequence[bool]], width: int, align_tail: str = "left") -> bytes:
    if align_tail not in ("left", "right"):
        raise ValueError(f"align_tail must be 'left' or 'right', not {align_tail!r}")
    return b"".join(pack_row(row, width, align_tail) for row in pixels)


def unpack_rows(
    data: bytes, width: int, height: int, align_tail: str = "left"
) -> Tuple[Tuple[bool, ...], ...]:
    stride = row_bytes(width)
    if len(data) != stride * height:
        raise ValueError(f"expected {stride * height} bytes for {width}x{height}, got {len(data)}")
    rows: List[Tuple[bool, ...]] = []
    for y in range(height):
        chunk = data[y * stride:(y + 1) * stride]
        row = []
        for index, value in enumerate(chunk):
            count = min(8, width - index * 8)
            shift = 8 - count if align_tail == "left" else 0
            row.extend(bool(value >> (count - 1 - i + shift) & 1) for i in range(count))
        rows.append(tuple(row))
    return tuple(rows)
