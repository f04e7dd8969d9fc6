from s2_layer.accessors import AccessorMemoizer, s2_id_accessor, s2_id_resolver
from s2_layer.binder import IncrementalDataBinder, can_reuse, needs_geometry_refresh
from s2_layer.colors import DEFAULT_COLOR_RANGE, NO_VALUE_COLOR, ColorRange, hex_to_rgb
from s2_layer.columns import S2_ID_FIELDS, S2_REQUIRED_COLUMNS, ColumnBinding, Field, find_default_columns
from s2_layer.config import LayerConfig, VisConfig, validate_vis_config
from s2_layer.errors import LayerConfigError
from s2_layer.frame import DerivedFrame, DerivedPoint, GeometryCache, LayerData
from s2_layer.layer import S2GeometryLayer
from s2_layer.scales import SCALE_TYPES, build_scale, compute_domain

__all__ = [
    "AccessorMemoizer",
    "ColorRange",
    "ColumnBinding",
    "DEFAULT_COLOR_RANGE",
    "DerivedFrame",
    "DerivedPoint",
    "Field",
    "GeometryCache",
    "IncrementalDataBinder",
    "LayerConfig",
    "LayerConfigError",
    "LayerData",
    "NO_VALUE_COLOR",
    "S2GeometryLayer",
    "S2_ID_FIELDS",
    "S2_REQUIRED_COLUMNS",
    "SCALE_TYPES",
    "VisConfig",
    "build_scale",
    "can_reuse",
    "compute_domain",
    "find_default_columns",
    "hex_to_rgb",
    "needs_geometry_refresh",
    "s2_id_accessor",
    "s2_id_resolver",
    "validate_vis_config",
]
