"""Font selection and the capability a rendering backend must provide."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Tuple

from PIL import Image

from .errors import FontUnavailable


@dataclass(frozen=True)
class FontSelection:
    family: str
    size: int
    style: Optional[str] = None

    def describe(self) -> str:
        if self.style:
            return f"{self.family} {self.style} {self.size}px"
        return f"{self.family} {self.size}px"


class FontBackend(Protocol):
    def measure_line_height(self) -> int:
        ...

    def measure_bounding_box(self, symbol: str) -> Tuple[int, int]:
        """Return ``(x, width)`` of the symbol's ink box on its own line."""
        ...

    def measure_advance(self, symbol: str) -> int:
        ...

    def rasterize(self, symbol: str, canvas: Image.Image) -> None:
        """Draw the symbol in black at the canvas origin, top of line at y=0."""
        ...


BackendFactory = Callable[[FontSelection], FontBackend]


def _open_pillow(selection: FontSelection) -> FontBackend:
    from .pillow_backend import PillowBackend

    return PillowBackend.open(selection)


def _open_svg(selection: FontSelection) -> FontBackend:
    # cairosvg needs the native cairo library, only load it when asked for
    from .svg_backend import SvgOutlineBackend

    return SvgOutlineBackend.open(selection)


BACKENDS: Dict[str, BackendFactory] = {
    "pillow": _open_pillow,
    "svg": _open_svg,
}


def open_backend(name: str, selection: FontSelection) -> FontBackend:
    factory = BACKENDS.get(name)
    if factory is None:
        raise FontUnavailable(f"unknown font backend {name!r} (expected one of {sorted(BACKENDS)})")
    return factory(selection)
