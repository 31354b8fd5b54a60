"""
Tests for per-event-type aggregation.
"""

import pytest

from stormrank.aggregate import (
    CasualtyRow,
    DamageRow,
    casualties_by_type,
    damage_by_type,
    rows_to_frame,
    top_n,
)


@pytest.fixture
def events(make_event):
    return [
        make_event("TORNADO", injuries=10, fatalities=2, prop_dmg=1, prop_dmg_exp="M"),
        make_event("TORNADO", injuries=5, fatalities=1, crop_dmg=500, crop_dmg_exp="K"),
        make_event("FLOOD", injuries=1, prop_dmg=2, prop_dmg_exp="B"),
        make_event("HAIL", crop_dmg=3, crop_dmg_exp="M"),
        make_event("LIGHTNING", injuries=1),
    ]


class TestCasualties:

    def test_sums_and_order(self, events):
        rows = casualties_by_type(events)
        assert rows[0] == CasualtyRow("TORNADO", injuries=15, fatalities=3, total=18)
        assert [r.total for r in rows] == sorted((r.total for r in rows), reverse=True)

    def test_ties_break_by_event_type(self, events):
        rows = casualties_by_type(events)
        assert [r.event_type for r in rows] == ["TORNADO", "FLOOD", "LIGHTNING", "HAIL"]


class TestDamage:

    def test_sums_resolved_values(self, events):
        rows = damage_by_type(events)
        assert rows[0] == DamageRow("FLOOD", crop_damage=0.0, property_damage=2e9, total=2e9)
        tornado = next(r for r in rows if r.event_type == "TORNADO")
        assert tornado.property_damage == 1_000_000
        assert tornado.crop_damage == 500_000
        assert tornado.total == 1_500_000

    def test_order(self, events):
        assert [r.event_type for r in damage_by_type(events)] == ["FLOOD", "HAIL", "TORNADO", "LIGHTNING"]


class TestHelpers:

    def test_top_n(self, events):
        rows = casualties_by_type(events)
        assert top_n(rows, 2) == rows[:2]
        assert len(top_n(rows)) == len(rows)

    def test_top_n_rejects_negative(self, events):
        with pytest.raises(ValueError, match=">= 0"):
            top_n(casualties_by_type(events), -1)

    def test_rows_to_frame(self, events):
        df = rows_to_frame(damage_by_type(events), DamageRow)
        assert list(df.columns) == ["event_type", "crop_damage", "property_damage", "total"]
        assert len(df) == 4

    def test_rows_to_frame_empty_keeps_columns(self):
        df = rows_to_frame([], CasualtyRow)
        assert list(df.columns) == ["event_type", "injuries", "fatalities", "total"]
        assert df.empty

    def test_empty_input(self):
        assert casualties_by_type([]) == []
        assert damage_by_type([]) == []
