from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

from s2_layer.colors import DEFAULT_COLOR_RANGE, ColorRange, hex_to_rgb
from s2_layer.columns import ColumnBinding, Field, LayerColumns
from s2_layer.errors import LayerConfigError
from s2_layer.scales import SCALE_TYPES, check_domain

# Registered vis-config keys and the names the settings panel stores them under.
S2_VIS_CONFIGS: dict[str, str] = {
    "opacity": "opacity",
    "color_range": "colorRange",
    "coverage": "coverage",
    "size_range": "elevationRange",
    "coverage_range": "coverageRange",
    "elevation_scale": "elevationScale",
}

_VIS_CONFIG_ALIASES: dict[str, str] = {
    **{key: key for key in S2_VIS_CONFIGS},
    **{panel: key for key, panel in S2_VIS_CONFIGS.items()},
    "sizeRange": "size_range",
}

DEFAULT_LAYER_COLOR: tuple[int, int, int] = (18, 147, 154)


@dataclass(frozen=True)
class VisConfig:
    opacity: float = 0.8
    color_range: ColorRange = DEFAULT_COLOR_RANGE
    coverage: float = 1.0
    size_range: tuple[float, float] = (0.0, 500.0)
    coverage_range: tuple[float, float] = (0.0, 1.0)
    elevation_scale: float = 5.0


DEFAULT_VIS_CONFIG = VisConfig()


@dataclass(frozen=True)
class VisualChannel:
    property: str
    field: str
    scale: str
    domain: str
    range: str
    key: str
    channel_scale_type: str


S2_VISUAL_CHANNELS: dict[str, VisualChannel] = {
    "color": VisualChannel(
        property="color",
        field="color_field",
        scale="color_scale",
        domain="color_domain",
        range="color_range",
        key="color",
        channel_scale_type="color",
    ),
    "size": VisualChannel(
        property="height",
        field="size_field",
        scale="size_scale",
        domain="size_domain",
        range="size_range",
        key="size",
        channel_scale_type="size",
    ),
    "coverage": VisualChannel(
        property="coverage",
        field="coverage_field",
        scale="coverage_scale",
        domain="coverage_domain",
        range="coverage_range",
        key="coverage",
        channel_scale_type="radius",
    ),
}


@dataclass(frozen=True)
class LayerConfig:
    """Column bindings and visual channel settings of one S2 layer."""

    columns: LayerColumns = field(default_factory=lambda: {"s2_id": ColumnBinding()})
    label: str = "S2"
    is_visible: bool = True
    color: tuple[int, int, int] = DEFAULT_LAYER_COLOR

    color_field: Field | None = None
    color_scale: str = "quantile"
    color_domain: tuple[Any, ...] = (0, 1)

    size_field: Field | None = None
    size_scale: str = "linear"
    size_domain: tuple[Any, ...] = (0, 1)

    coverage_field: Field | None = None
    coverage_scale: str = "linear"
    coverage_domain: tuple[Any, ...] = (0, 1)

    vis_config: VisConfig = DEFAULT_VIS_CONFIG

    def __post_init__(self) -> None:
        object.__setattr__(self, "color", parse_color(self.color))
        for channel in S2_VISUAL_CHANNELS.values():
            scale = getattr(self, channel.scale)
            if str(scale).lower() not in SCALE_TYPES:
                raise LayerConfigError(f"unsupported {channel.key} scale: {scale}")
            if getattr(self, channel.field) is not None:
                check_domain(scale, getattr(self, channel.domain))

    def with_updates(self, **changes: Any) -> "LayerConfig":
        return replace(self, **changes)

    def is_channel_active(self, key: str) -> bool:
        return getattr(self, S2_VISUAL_CHANNELS[key].field) is not None


def validate_vis_config(overrides: Mapping[str, Any] | None = None, base: VisConfig = DEFAULT_VIS_CONFIG) -> VisConfig:
    """Merge vis-config overrides over `base`, rejecting unknown or malformed values.

    Keys may use either the attribute name (`size_range`) or the settings
    panel name (`elevationRange`).
    """

    raw: dict[str, Any] = {f.name: getattr(base, f.name) for f in fields(base)}
    if overrides:
        for key, value in overrides.items():
            name = _VIS_CONFIG_ALIASES.get(key)
            if name is None:
                raise LayerConfigError(f"Unknown vis config: {key}")
            raw[name] = value

    opacity = _as_float(raw["opacity"], "opacity")
    if not 0.0 <= opacity <= 1.0:
        raise LayerConfigError("`opacity` must be within [0, 1]")

    coverage = _as_float(raw["coverage"], "coverage")
    if not 0.0 <= coverage <= 1.0:
        raise LayerConfigError("`coverage` must be within [0, 1]")

    color_range = raw["color_range"]
    if isinstance(color_range, Mapping):
        color_range = ColorRange(
            name=str(color_range.get("name", "Custom")),
            colors=tuple(color_range.get("colors") or ()),
            type=str(color_range.get("type", "sequential")),
            category=str(color_range.get("category", "Custom")),
        )
    if not isinstance(color_range, ColorRange):
        raise LayerConfigError("`color_range` must be a ColorRange or a mapping with `colors`")

    return VisConfig(
        opacity=opacity,
        color_range=color_range,
        coverage=coverage,
        size_range=_as_range(raw["size_range"], "size_range"),
        coverage_range=_as_range(raw["coverage_range"], "coverage_range"),
        elevation_scale=_as_float(raw["elevation_scale"], "elevation_scale"),
    )


def parse_color(value: Any) -> tuple[int, int, int]:
    if isinstance(value, str):
        return hex_to_rgb(value)
    try:
        r, g, b = (int(c) for c in value)
    except (TypeError, ValueError) as exc:
        raise LayerConfigError(f"color must be a hex string or an RGB triple, got {value!r}") from exc
    if not all(0 <= c <= 255 for c in (r, g, b)):
        raise LayerConfigError(f"color channels must be within [0, 255], got {value!r}")
    return (r, g, b)


def _as_float(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise LayerConfigError(f"`{key}` must be a number")
    return float(value)


def _as_range(value: Any, key: str) -> tuple[float, float]:
    try:
        lo, hi = value
    except (TypeError, ValueError) as exc:
        raise LayerConfigError(f"`{key}` must be a two-element range") from exc
    return (_as_float(lo, key), _as_float(hi, key))
