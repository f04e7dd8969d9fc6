from __future__ import annotations

import math
from typing import Any, Callable, Iterable, Sequence

import numpy as np

from s2_layer.columns import Field
from s2_layer.errors import LayerConfigError

Scale = Callable[[Any], Any]

CONTINUOUS_SCALES = ("linear", "sqrt", "log")
SCALE_TYPES = CONTINUOUS_SCALES + ("quantize", "quantile", "ordinal")


def build_scale(scale_kind: str, domain: Sequence[Any], range_: Sequence[Any], fallback: Any = None) -> Scale:
    """Build an encoder from raw field values to visual values.

    `fallback` is returned for values the scale cannot place (None, NaN,
    unknown categories, non-positive input to a log scale).
    """
    kind = str(scale_kind).strip().lower()
    values = _as_list(range_)
    if not values:
        raise LayerConfigError("scale range must not be empty")
    if kind in CONTINUOUS_SCALES:
        return _continuous_scale(kind, domain, values, fallback)
    if kind == "quantize":
        return _quantize_scale(domain, values, fallback)
    if kind == "quantile":
        return _quantile_scale(domain, values, fallback)
    if kind == "ordinal":
        return _ordinal_scale(domain, values, fallback)
    raise LayerConfigError(f"unsupported scale type: {scale_kind}")


def compute_domain(
    rows: Sequence[Any],
    indices: Iterable[int] | None,
    field: Field,
    scale_kind: str,
) -> list[Any]:
    if indices is None:
        indices = range(len(rows))
    raw = [field.channel_value(rows[i]) for i in indices]
    kind = str(scale_kind).strip().lower()

    if kind == "ordinal":
        seen: dict[Any, None] = {}
        for v in raw:
            if v is None or _is_nan(v):
                continue
            seen.setdefault(v, None)
        try:
            return sorted(seen)
        except TypeError:
            # Mixed category types have no order; keep first-seen order.
            return list(seen)

    numbers = [x for x in (_to_number(v) for v in raw) if x is not None]
    if kind == "quantile":
        return sorted(numbers)
    if not numbers:
        return [0.0, 1.0]
    return [min(numbers), max(numbers)]


def check_domain(scale_kind: str, domain: Sequence[Any]) -> None:
    """Raise LayerConfigError when `domain` cannot drive a scale of `scale_kind`."""
    kind = str(scale_kind).strip().lower()
    if kind in CONTINUOUS_SCALES:
        _transformed_ends(kind, domain)
    elif kind == "quantize":
        _numeric_pair(domain, label="domain")


def _transformed_ends(kind: str, domain: Sequence[Any]) -> tuple[float, float]:
    transform = _TRANSFORMS[kind]
    d0, d1 = _numeric_pair(domain, label="domain")
    t0 = transform(d0)
    t1 = transform(d1)
    if t0 is None or t1 is None:
        raise LayerConfigError(f"{kind} scale domain must be positive: {_as_list(domain)!r}")
    return t0, t1


def _continuous_scale(kind: str, domain: Sequence[Any], values: list[Any], fallback: Any) -> Scale:
    transform = _TRANSFORMS[kind]
    t0, t1 = _transformed_ends(kind, domain)

    stops, is_color = _numeric_stops(values)
    r0 = stops[0]
    r1 = stops[1] if stops.shape[0] > 1 else stops[0]

    if t0 == t1:
        midpoint = _emit((r0 + r1) / 2.0, is_color)

        def encode_flat(value: Any) -> Any:
            x = _to_number(value)
            if x is None or transform(x) is None:
                return fallback
            return midpoint

        return encode_flat

    span = t1 - t0

    def encode(value: Any) -> Any:
        x = _to_number(value)
        if x is None:
            return fallback
        tx = transform(x)
        if tx is None:
            return fallback
        t = (tx - t0) / span
        return _emit(r0 + t * (r1 - r0), is_color)

    return encode


def _quantize_scale(domain: Sequence[Any], values: list[Any], fallback: Any) -> Scale:
    d0, d1 = _numeric_pair(domain, label="domain")
    n = len(values)
    width = d1 - d0

    def encode(value: Any) -> Any:
        x = _to_number(value)
        if x is None:
            return fallback
        if width == 0:
            return values[0]
        i = int(math.floor((x - d0) / width * n))
        return values[min(max(i, 0), n - 1)]

    return encode


def _quantile_scale(domain: Sequence[Any], values: list[Any], fallback: Any) -> Scale:
    numbers = [x for x in (_to_number(v) for v in _as_list(domain)) if x is not None]
    samples = np.sort(np.asarray(numbers, dtype=np.float64))
    n = len(values)
    flat = samples.size == 0 or samples[0] == samples[-1] or n == 1
    thresholds = np.empty(0, dtype=np.float64)
    if not flat:
        thresholds = np.quantile(samples, np.arange(1, n, dtype=np.float64) / n)

    def encode(value: Any) -> Any:
        x = _to_number(value)
        if x is None:
            return fallback
        if flat:
            return values[0]
        return values[int(np.searchsorted(thresholds, x, side="right"))]

    return encode


def _ordinal_scale(domain: Sequence[Any], values: list[Any], fallback: Any) -> Scale:
    lookup: dict[Any, Any] = {}
    for i, category in enumerate(_as_list(domain)):
        lookup.setdefault(category, values[i % len(values)])

    def encode(value: Any) -> Any:
        try:
            return lookup.get(value, fallback)
        except TypeError:
            return fallback

    return encode


def _identity(x: float) -> float:
    return x


def _sqrt(x: float) -> float:
    return math.copysign(math.sqrt(abs(x)), x)


def _log(x: float) -> float | None:
    if x <= 0:
        return None
    return math.log(x)


_TRANSFORMS: dict[str, Callable[[float], float | None]] = {
    "linear": _identity,
    "sqrt": _sqrt,
    "log": _log,
}


def _to_number(value: Any) -> float | None:
    if value is None or isinstance(value, (str, bytes)):
        return None
    try:
        x = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(x):
        return None
    return x


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _numeric_pair(domain: Sequence[Any], *, label: str) -> tuple[float, float]:
    items = _as_list(domain)
    if len(items) < 2:
        raise LayerConfigError(f"{label} must have two numeric ends, got {items!r}")
    lo = _to_number(items[0])
    hi = _to_number(items[-1])
    if lo is None or hi is None:
        raise LayerConfigError(f"{label} must have two numeric ends, got {items!r}")
    return lo, hi


def _numeric_stops(values: list[Any]) -> tuple[np.ndarray, bool]:
    try:
        stops = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise LayerConfigError(f"continuous scale range must be numeric: {values!r}") from exc
    if stops.ndim not in (1, 2):
        raise LayerConfigError(f"continuous scale range has unsupported shape {stops.shape}")
    return stops, stops.ndim == 2


def _emit(value: Any, is_color: bool) -> Any:
    if is_color:
        channels = np.clip(np.rint(value), 0, 255).astype(np.int64)
        return tuple(int(c) for c in channels.tolist())
    return float(value)


def _as_list(values: Sequence[Any] | None) -> list[Any]:
    return [] if values is None else list(values)
