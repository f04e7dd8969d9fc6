from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Sequence

from s2_layer.accessors import AccessorMemoizer, IdAccessor, s2_id_accessor, s2_id_resolver
from s2_layer.binder import IncrementalDataBinder, PreviousFrame
from s2_layer.columns import S2_ID_FIELDS, S2_REQUIRED_COLUMNS, Field, find_default_columns
from s2_layer.config import S2_VIS_CONFIGS, S2_VISUAL_CHANNELS, LayerConfig, VisualChannel
from s2_layer.frame import GeometryCache, LayerData
from s2_layer.resolvers import color_resolver, coverage_resolver, elevation_resolver
from s2_layer.scales import Scale, build_scale


LOGGER = logging.getLogger(__name__)

GeometryBuilder = Callable[[Sequence[Any], IdAccessor], GeometryCache]


class S2GeometryLayer:
    """Binds S2-indexed rows to derived points and channel resolvers.

    Geometry comes from `geometry_builder`, which is called with the full
    dataset and the id accessor whenever the accessor changes.
    """

    type = "s2"
    name = "S2"
    vis_config_keys = S2_VIS_CONFIGS

    def __init__(
        self,
        config: LayerConfig | None = None,
        *,
        geometry_builder: GeometryBuilder | None = None,
        layer_id: str | None = None,
    ) -> None:
        self.id = layer_id or f"{self.type}-layer"
        self.config = config if config is not None else self.get_default_layer_config()
        self.geometry_builder = geometry_builder
        self.data_to_feature = GeometryCache()
        self.get_s2_id = AccessorMemoizer(s2_id_accessor, s2_id_resolver)
        self._binder = IncrementalDataBinder(self.get_s2_id)

    @property
    def required_layer_columns(self) -> tuple[str, ...]:
        return S2_REQUIRED_COLUMNS

    @property
    def visual_channels(self) -> dict[str, VisualChannel]:
        return dict(S2_VISUAL_CHANNELS)

    @classmethod
    def find_default_layer_props(cls, fields: Iterable[Field] = ()) -> dict[str, list[dict[str, Any]]]:
        found = find_default_columns(fields, S2_ID_FIELDS)
        if not found:
            return {"props": []}
        return {"props": [{"is_visible": True, "label": cls.name, "columns": columns} for columns in found]}

    @staticmethod
    def get_default_layer_config(**props: Any) -> LayerConfig:
        defaults: dict[str, Any] = {
            "coverage_field": None,
            "coverage_domain": (0, 1),
            "coverage_scale": "linear",
        }
        defaults.update(props)
        return LayerConfig(**defaults)

    def update_config(self, **changes: Any) -> LayerConfig:
        self.config = self.config.with_updates(**changes)
        return self.config

    def update_layer_meta(self, all_data: Sequence[Any], get_s2_id: IdAccessor) -> GeometryCache:
        if self.geometry_builder is None:
            LOGGER.warning("layer %s: geometry refresh requested but no geometry builder is set", self.id)
            return self.data_to_feature
        LOGGER.debug("layer %s: refreshing geometry for %d rows", self.id, len(all_data))
        self.data_to_feature = self.geometry_builder(all_data, get_s2_id)
        return self.data_to_feature

    def build_channel_scales(self) -> dict[str, Scale | None]:
        cfg = self.config
        vis = cfg.vis_config
        scales: dict[str, Scale | None] = {"color": None, "size": None, "coverage": None}
        if cfg.color_field is not None:
            scales["color"] = build_scale(cfg.color_scale, cfg.color_domain, vis.color_range.to_rgb())
        if cfg.size_field is not None:
            scales["size"] = build_scale(cfg.size_scale, cfg.size_domain, vis.size_range, 0)
        if cfg.coverage_field is not None:
            scales["coverage"] = build_scale(cfg.coverage_scale, cfg.coverage_domain, vis.coverage_range, 0)
        return scales

    def format_layer_data(
        self,
        all_data: Sequence[Any],
        filtered_index: Sequence[int],
        old_layer_data: PreviousFrame | None = None,
        *,
        same_data: bool = False,
    ) -> LayerData:
        cfg = self.config
        scales = self.build_channel_scales()

        frame = self._binder.bind(
            all_data,
            filtered_index,
            old_layer_data,
            columns=cfg.columns,
            geometry=self.data_to_feature,
            same_data=same_data,
            on_geometry_stale=self.update_layer_meta,
        )

        return LayerData(
            data=frame.data,
            get_elevation=elevation_resolver(scales["size"], cfg.size_field),
            get_color=color_resolver(scales["color"], cfg.color_field, cfg.color),
            get_coverage=coverage_resolver(scales["coverage"], cfg.coverage_field),
            get_s2_id=frame.get_s2_id,
            hexagon_vertices=self.data_to_feature.hexagon_vertices,
            hexagon_center=self.data_to_feature.hexagon_center,
        )
