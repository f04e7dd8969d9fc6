"""Color helpers for the color channel."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import TypeAlias

from s2_layer.errors import LayerConfigError

RGB: TypeAlias = tuple[int, int, int]

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6})$")

NO_VALUE_COLOR: tuple[int, int, int, int] = (0, 0, 0, 0)


def hex_to_rgb(value: str) -> RGB:
    if not isinstance(value, str):
        raise LayerConfigError(f"color must be a hex string, got {value!r}")
    m = _HEX_COLOR.match(value.strip())
    if m is None:
        raise LayerConfigError(f"invalid hex color: {value!r}")
    h = m.group(1)
    return (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))


@dataclass(frozen=True)
class ColorRange:
    name: str
    colors: tuple[str, ...]
    type: str = "sequential"
    category: str = "Uber"

    def __post_init__(self) -> None:
        if not self.colors:
            raise LayerConfigError("color range must contain at least one color")
        for c in self.colors:
            hex_to_rgb(c)

    def to_rgb(self) -> list[RGB]:
        return [hex_to_rgb(c) for c in self.colors]


DEFAULT_COLOR_RANGE = ColorRange(
    name="Global Warming",
    colors=("#5A1846", "#900C3F", "#C70039", "#E3611C", "#F1920E", "#FFC300"),
)
