from __future__ import annotations

from typing import Any, Callable, Hashable

from s2_layer.columns import LayerColumns, read_index

IdAccessor = Callable[[Any], Any]


def s2_id_resolver(columns: LayerColumns | None) -> int | None:
    binding = (columns or {}).get("s2_id")
    if binding is None or binding.field_idx < 0:
        return None
    return binding.field_idx


def s2_id_accessor(columns: LayerColumns | None) -> IdAccessor:
    field_idx = s2_id_resolver(columns)

    def get_s2_id(row: Any) -> Any:
        return read_index(row, field_idx)

    return get_s2_id


class AccessorMemoizer:
    """Caches accessors by a projected key of the column binding.

    Bindings that project to the same key share one accessor object, so
    callers can detect a changed binding with an identity check.
    """

    def __init__(
        self,
        factory: Callable[[LayerColumns | None], IdAccessor] = s2_id_accessor,
        resolver: Callable[[LayerColumns | None], Hashable] = s2_id_resolver,
    ) -> None:
        self._factory = factory
        self._resolver = resolver
        self._cache: dict[Hashable, IdAccessor] = {}

    def __call__(self, columns: LayerColumns | None) -> IdAccessor:
        key = self._resolver(columns)
        accessor = self._cache.get(key)
        if accessor is None:
            accessor = self._factory(columns)
            self._cache[key] = accessor
        return accessor

    def __len__(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        self._cache.clear()
