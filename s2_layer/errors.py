from __future__ import annotations


class LayerConfigError(ValueError):
    """Raised for invalid layer configuration, never for missing data."""
