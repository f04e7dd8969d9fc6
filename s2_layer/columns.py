from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence, TypeAlias

import pandas as pd

S2_REQUIRED_COLUMNS: tuple[str, ...] = ("s2_id",)

S2_ID_FIELDS: dict[str, tuple[str, ...]] = {
    "s2_id": ("s2_id", "s2_token"),
}


@dataclass(frozen=True)
class Field:
    """One input column of the tabular dataset."""

    name: str
    field_idx: int
    type: str = "real"

    def value_accessor(self, row: Any) -> Any:
        return read_index(row, self.field_idx)

    def channel_value(self, row: Any) -> Any:
        """Value as fed to a scale; timestamps become epoch milliseconds."""
        value = self.value_accessor(row)
        if self.type == "timestamp":
            return to_epoch_ms(value)
        return value


@dataclass(frozen=True)
class ColumnBinding:
    value: str | None = None
    field_idx: int = -1

    @property
    def is_bound(self) -> bool:
        return self.value is not None and self.field_idx >= 0


LayerColumns: TypeAlias = Mapping[str, ColumnBinding]


def read_index(row: Any, field_idx: int | None) -> Any:
    if row is None or field_idx is None or field_idx < 0:
        return None
    try:
        return row[field_idx]
    except (IndexError, KeyError, TypeError):
        return None


def bind_field(field: Field) -> ColumnBinding:
    return ColumnBinding(value=field.name, field_idx=field.field_idx)


def _normalize_name(name: str) -> str:
    return str(name).strip().lower()


def find_default_columns(
    fields: Iterable[Field],
    required: Mapping[str, Sequence[str]] = S2_ID_FIELDS,
) -> list[dict[str, ColumnBinding]]:
    """Return one column set per field matching a known alias of each role.

    Only single-role layers are discovered: every role listed in `required`
    must resolve, and the first role drives the number of candidates.
    """
    fields = list(fields)
    candidates: dict[str, list[ColumnBinding]] = {}
    for role, aliases in required.items():
        wanted = {_normalize_name(a) for a in aliases}
        matches = [bind_field(f) for f in fields if _normalize_name(f.name) in wanted]
        if not matches:
            return []
        candidates[role] = matches

    roles = list(candidates)
    lead = roles[0]
    out: list[dict[str, ColumnBinding]] = []
    for binding in candidates[lead]:
        columns = {lead: binding}
        for role in roles[1:]:
            columns[role] = candidates[role][0]
        out.append(columns)
    return out


def to_epoch_ms(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        # Numeric timestamps are already epoch milliseconds.
        return float(value)
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError):
        return None
    if pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return (ts - pd.Timestamp(0)) / pd.Timedelta(milliseconds=1)
