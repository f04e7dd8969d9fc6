from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

Centroid = Sequence[float]


@dataclass
class GeometryCache:
    """Per raw-record geometry produced by the external geometry component.

    `centroids` is indexed by raw record position; a missing or `None` entry
    means the record has no geometry and is left out of the derived data.
    """

    centroids: Mapping[int, Centroid | None] | Sequence[Centroid | None] = field(default_factory=dict)
    hexagon_vertices: Any = None
    hexagon_center: Any = None

    def centroid_for(self, index: int) -> Centroid | None:
        if isinstance(self.centroids, Mapping):
            return self.centroids.get(index)
        if 0 <= index < len(self.centroids):
            return self.centroids[index]
        return None


@dataclass(frozen=True)
class DerivedPoint:
    index: int
    data: Any
    id: Any
    centroid: Centroid


@dataclass(frozen=True)
class DerivedFrame:
    data: list[DerivedPoint]
    get_s2_id: Callable[[Any], Any]
    geometry_refresh: bool = False
    reused: bool = False


@dataclass(frozen=True)
class LayerData:
    """Everything the renderer needs for one frame of the S2 layer."""

    data: list[DerivedPoint]
    get_elevation: Callable[[DerivedPoint], Any]
    get_color: Callable[[DerivedPoint], Any]
    get_coverage: Callable[[DerivedPoint], Any]
    get_s2_id: Callable[[Any], Any]
    hexagon_vertices: Any = None
    hexagon_center: Any = None
