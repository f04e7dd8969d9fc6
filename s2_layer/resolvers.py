"""Per-record channel resolvers handed to the renderer.

Each resolver closes over a scale and a field only. It reads the record and
never writes to it, so the renderer may call it in any order and any number
of times (picking, partial updates).
"""

from __future__ import annotations

import math
from typing import Any, Callable

from s2_layer.colors import NO_VALUE_COLOR
from s2_layer.columns import Field
from s2_layer.frame import DerivedPoint
from s2_layer.scales import Scale

Resolver = Callable[[DerivedPoint], Any]

DEFAULT_ELEVATION = 0
DEFAULT_COVERAGE = 1


def get_encoded_channel_value(scale: Scale, row: Any, field: Field, default: Any = NO_VALUE_COLOR) -> Any:
    value = field.channel_value(row)
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return default
    encoded = scale(value)
    if encoded is None:
        return default
    return encoded


def constant_resolver(value: Any) -> Resolver:
    def resolve(_: DerivedPoint) -> Any:
        return value

    return resolve


def elevation_resolver(scale: Scale | None, field: Field | None) -> Resolver:
    if scale is None or field is None:
        return constant_resolver(DEFAULT_ELEVATION)

    def get_elevation(point: DerivedPoint) -> Any:
        return get_encoded_channel_value(scale, point.data, field, 0)

    return get_elevation


def color_resolver(scale: Scale | None, field: Field | None, static_color: Any) -> Resolver:
    if scale is None or field is None:
        return constant_resolver(static_color)

    def get_color(point: DerivedPoint) -> Any:
        return get_encoded_channel_value(scale, point.data, field)

    return get_color


def coverage_resolver(scale: Scale | None, field: Field | None) -> Resolver:
    if scale is None or field is None:
        return constant_resolver(DEFAULT_COVERAGE)

    def get_coverage(point: DerivedPoint) -> Any:
        return get_encoded_channel_value(scale, point.data, field, 0)

    return get_coverage
