from __future__ import annotations

import unittest

from s2_layer import ColorRange, Field, LayerConfig, LayerConfigError, VisConfig, validate_vis_config


class VisConfigValidationTests(unittest.TestCase):
    def test_defaults(self) -> None:
        vis = validate_vis_config()
        self.assertEqual(vis, VisConfig())
        self.assertEqual(vis.size_range, (0.0, 500.0))
        self.assertEqual(vis.color_range.name, "Global Warming")

    def test_accepts_panel_names(self) -> None:
        vis = validate_vis_config({"elevationRange": [0, 1000], "elevationScale": 2})
        self.assertEqual(vis.size_range, (0.0, 1000.0))
        self.assertEqual(vis.elevation_scale, 2.0)

    def test_accepts_color_range_mapping(self) -> None:
        vis = validate_vis_config({"colorRange": {"name": "Mono", "colors": ["#000000", "#ffffff"]}})
        self.assertEqual(vis.color_range.to_rgb(), [(0, 0, 0), (255, 255, 255)])

    def test_overrides_merge_over_base(self) -> None:
        base = validate_vis_config({"opacity": 0.5})
        vis = validate_vis_config({"coverage": 0.3}, base=base)
        self.assertEqual((vis.opacity, vis.coverage), (0.5, 0.3))

    def test_rejects_unknown_key(self) -> None:
        with self.assertRaises(LayerConfigError):
            validate_vis_config({"radius": 10})

    def test_rejects_out_of_range_opacity(self) -> None:
        with self.assertRaises(LayerConfigError):
            validate_vis_config({"opacity": 2})

    def test_rejects_malformed_ranges_and_colors(self) -> None:
        with self.assertRaises(LayerConfigError):
            validate_vis_config({"coverage_range": [0, 1, 2]})
        with self.assertRaises(LayerConfigError):
            validate_vis_config({"size_range": ["a", "b"]})
        with self.assertRaises(LayerConfigError):
            validate_vis_config({"color_range": {"colors": ["red"]}})
        with self.assertRaises(LayerConfigError):
            validate_vis_config({"color_range": ["#000000"]})


class LayerConfigTests(unittest.TestCase):
    def test_rejects_unknown_scale(self) -> None:
        with self.assertRaises(LayerConfigError):
            LayerConfig(size_scale="threshold")

    def test_color_is_normalized_to_rgb(self) -> None:
        self.assertEqual(LayerConfig(color="#00ff00").color, (0, 255, 0))
        self.assertEqual(LayerConfig(color=[1, 2, 3]).color, (1, 2, 3))
        with self.assertRaises(LayerConfigError):
            LayerConfig(color=(0, 0, 300))

    def test_with_updates_returns_copy(self) -> None:
        cfg = LayerConfig()
        updated = cfg.with_updates(size_field=Field(name="count", field_idx=3))
        self.assertIsNone(cfg.size_field)
        self.assertTrue(updated.is_channel_active("size"))
        self.assertFalse(updated.is_channel_active("color"))

    def test_active_channel_domain_must_suit_its_scale(self) -> None:
        count = Field(name="count", field_idx=3)
        with self.assertRaises(LayerConfigError):
            LayerConfig(size_field=count, size_scale="log")
        with self.assertRaises(LayerConfigError):
            LayerConfig(coverage_field=count, coverage_domain=("low", "high"))
        cfg = LayerConfig(size_field=count, size_scale="log", size_domain=(1, 1000))
        self.assertEqual(cfg.size_scale, "log")

    def test_inactive_channel_domain_is_not_checked(self) -> None:
        self.assertIsNone(LayerConfig(size_scale="log").size_field)

    def test_with_updates_rechecks_domain(self) -> None:
        cfg = LayerConfig(size_field=Field(name="count", field_idx=3))
        with self.assertRaises(LayerConfigError):
            cfg.with_updates(size_scale="log")
        self.assertEqual(cfg.with_updates(size_scale="log", size_domain=(1, 10)).size_domain, (1, 10))

    def test_color_range_requires_colors(self) -> None:
        with self.assertRaises(LayerConfigError):
            ColorRange(name="empty", colors=())


if __name__ == "__main__":
    unittest.main()
