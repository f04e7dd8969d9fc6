from __future__ import annotations

import datetime
import unittest

import numpy as np
import pandas as pd

from s2_layer import ColumnBinding, Field, LayerConfigError, find_default_columns, hex_to_rgb
from s2_layer.columns import to_epoch_ms


class FieldAccessTests(unittest.TestCase):
    def test_value_accessor_reads_by_index(self) -> None:
        field = Field(name="value", field_idx=1)
        self.assertEqual(field.value_accessor(("a", 2)), 2)
        self.assertEqual(field.value_accessor({1: "mapped"}), "mapped")

    def test_value_accessor_degrades_to_none(self) -> None:
        self.assertIsNone(Field(name="value", field_idx=5).value_accessor(("a", 2)))
        self.assertIsNone(Field(name="value", field_idx=-1).value_accessor(("a", 2)))
        self.assertIsNone(Field(name="value", field_idx=0).value_accessor(None))
        self.assertIsNone(Field(name="value", field_idx=0).value_accessor({}))

    def test_timestamp_field_yields_epoch_milliseconds(self) -> None:
        field = Field(name="t", field_idx=0, type="timestamp")
        self.assertEqual(field.channel_value((pd.Timestamp("2021-01-01"),)), 1609459200000.0)
        self.assertEqual(field.channel_value(("1970-01-01T00:00:01",)), 1000.0)
        self.assertIsNone(field.channel_value((None,)))

    def test_non_timestamp_channel_value_is_raw(self) -> None:
        self.assertEqual(Field(name="v", field_idx=0).channel_value(("2021-01-01",)), "2021-01-01")

    def test_binding_state(self) -> None:
        self.assertFalse(ColumnBinding().is_bound)
        self.assertTrue(ColumnBinding(value="s2_id", field_idx=0).is_bound)


class DefaultColumnTests(unittest.TestCase):
    def test_matches_aliases_case_insensitively(self) -> None:
        found = find_default_columns([Field(name="lat", field_idx=0), Field(name="S2_ID", field_idx=1)])
        self.assertEqual(found, [{"s2_id": ColumnBinding(value="S2_ID", field_idx=1)}])

    def test_no_match(self) -> None:
        self.assertEqual(find_default_columns([Field(name="hex_id", field_idx=0)]), [])


class EpochMillisecondsTests(unittest.TestCase):
    def test_accepts_datetime_like_values(self) -> None:
        self.assertEqual(to_epoch_ms(datetime.datetime(1970, 1, 1, 0, 0, 2)), 2000.0)
        self.assertEqual(to_epoch_ms(np.datetime64("1970-01-01T00:00:00.500")), 500.0)
        self.assertEqual(to_epoch_ms(pd.Timestamp("1970-01-01 01:00", tz="Europe/Paris")), 0.0)

    def test_numbers_pass_through_as_milliseconds(self) -> None:
        self.assertEqual(to_epoch_ms(1609459200000), 1609459200000.0)

    def test_unparseable_values_become_none(self) -> None:
        self.assertIsNone(to_epoch_ms("not a date"))
        self.assertIsNone(to_epoch_ms(pd.NaT))
        self.assertIsNone(to_epoch_ms(True))
        self.assertIsNone(to_epoch_ms(None))


class HexColorTests(unittest.TestCase):
    def test_hex_to_rgb(self) -> None:
        self.assertEqual(hex_to_rgb("#FFC300"), (255, 195, 0))
        self.assertEqual(hex_to_rgb("5a1846"), (90, 24, 70))

    def test_rejects_malformed_hex(self) -> None:
        for bad in ("#FFF", "#GGGGGG", "", None):
            with self.assertRaises(LayerConfigError):
                hex_to_rgb(bad)  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
