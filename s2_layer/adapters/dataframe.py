from __future__ import annotations

from typing import Any

import pandas as pd

from s2_layer.columns import Field
from s2_layer.errors import LayerConfigError


def rows_from_frame(df: Any) -> list[tuple[Any, ...]]:
    """Flatten a DataFrame into positional rows; missing values become None."""
    if not isinstance(df, pd.DataFrame):
        raise LayerConfigError("`df` must be a pandas DataFrame")
    return [tuple(_none_if_missing(v) for v in row) for row in df.itertuples(index=False, name=None)]


def fields_from_frame(df: Any) -> list[Field]:
    if not isinstance(df, pd.DataFrame):
        raise LayerConfigError("`df` must be a pandas DataFrame")
    return [Field(name=str(name), field_idx=i, type=_field_type(df[name])) for i, name in enumerate(df.columns)]


def _field_type(series: pd.Series) -> str:
    dtype = series.dtype
    if pd.api.types.is_bool_dtype(dtype):
        return "boolean"
    if pd.api.types.is_integer_dtype(dtype):
        return "integer"
    if pd.api.types.is_float_dtype(dtype):
        return "real"
    if pd.api.types.is_datetime64_any_dtype(dtype):
        return "timestamp"
    return "string"


def _none_if_missing(value: Any) -> Any:
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return None
    return value
