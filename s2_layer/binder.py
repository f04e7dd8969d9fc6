from __future__ import annotations

import logging
from typing import Any, Callable, Protocol, Sequence

from s2_layer.accessors import AccessorMemoizer, IdAccessor
from s2_layer.columns import LayerColumns
from s2_layer.frame import DerivedFrame, DerivedPoint, GeometryCache


LOGGER = logging.getLogger(__name__)

GeometryRefresh = Callable[[Sequence[Any], IdAccessor], "GeometryCache | None"]


class PreviousFrame(Protocol):
    data: Sequence[DerivedPoint]
    get_s2_id: IdAccessor


def needs_geometry_refresh(previous: PreviousFrame | None, get_s2_id: IdAccessor) -> bool:
    return previous is None or previous.get_s2_id is not get_s2_id


def can_reuse(previous: PreviousFrame | None, get_s2_id: IdAccessor, same_data: bool) -> bool:
    # Filter changes alone do not invalidate; callers pass same_data=False for that.
    if previous is None or not previous.data:
        return False
    if not same_data:
        return False
    return previous.get_s2_id is get_s2_id


def build_derived_points(
    all_data: Sequence[Any],
    filtered_index: Sequence[int],
    get_s2_id: IdAccessor,
    geometry: GeometryCache,
) -> list[DerivedPoint]:
    points: list[DerivedPoint] = []
    for i, index in enumerate(filtered_index):
        centroid = geometry.centroid_for(index)
        if centroid is None:
            continue
        row = all_data[index]
        points.append(DerivedPoint(index=i, data=row, id=get_s2_id(row), centroid=centroid))
    return points


class IncrementalDataBinder:
    """Decides between reusing the previous derived data and rebuilding it.

    The binder keeps no frame state between calls; the caller hands back the
    previous frame. Only the accessor memo lives here so that an unchanged
    column binding keeps yielding the identical accessor.
    """

    def __init__(self, memoizer: AccessorMemoizer | None = None) -> None:
        self.accessors = memoizer if memoizer is not None else AccessorMemoizer()

    def resolve_accessor(self, columns: LayerColumns | None) -> IdAccessor:
        return self.accessors(columns)

    def bind(
        self,
        all_data: Sequence[Any],
        filtered_index: Sequence[int],
        previous: PreviousFrame | None = None,
        *,
        columns: LayerColumns | None,
        geometry: GeometryCache,
        same_data: bool = False,
        on_geometry_stale: GeometryRefresh | None = None,
    ) -> DerivedFrame:
        get_s2_id = self.resolve_accessor(columns)

        refresh = needs_geometry_refresh(previous, get_s2_id)
        if refresh and on_geometry_stale is not None:
            refreshed = on_geometry_stale(all_data, get_s2_id)
            if refreshed is not None:
                geometry = refreshed

        if previous is not None and can_reuse(previous, get_s2_id, same_data):
            LOGGER.debug("s2 binder reusing %d derived points", len(previous.data))
            return DerivedFrame(
                data=previous.data,  # type: ignore[arg-type]
                get_s2_id=get_s2_id,
                geometry_refresh=refresh,
                reused=True,
            )

        points = build_derived_points(all_data, filtered_index, get_s2_id, geometry)
        dropped = len(filtered_index) - len(points)
        if dropped:
            LOGGER.debug("s2 binder dropped %d of %d rows without geometry", dropped, len(filtered_index))
        LOGGER.debug("s2 binder rebuilt %d derived points (geometry_refresh=%s)", len(points), refresh)
        return DerivedFrame(data=points, get_s2_id=get_s2_id, geometry_refresh=refresh)
