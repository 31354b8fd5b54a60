"""
Tests for the record filter.
"""

from datetime import datetime

import pytest

from stormrank.config import EXCLUDED_REF_NUM
from stormrank.filters import filter_events, has_impact, is_retained


class TestIsRetained:

    def test_start_boundary_is_inclusive(self, make_event):
        assert is_retained(make_event(begin_date=datetime(1996, 1, 1, 0, 0, 0), injuries=1))

    def test_last_second_of_1995_is_excluded(self, make_event):
        assert not is_retained(make_event(begin_date=datetime(1995, 12, 31, 23, 59, 59), injuries=1))

    def test_unparsed_date_is_excluded(self, make_event):
        assert not is_retained(make_event(begin_date=None, fatalities=3))

    def test_outlier_is_excluded(self, make_event):
        e = make_event(ref_num=EXCLUDED_REF_NUM, prop_dmg=115, prop_dmg_exp="B")
        assert not is_retained(e)

    @pytest.mark.parametrize("field", ["fatalities", "injuries", "prop_dmg", "crop_dmg"])
    def test_any_single_impact_is_enough(self, make_event, field):
        assert is_retained(make_event(**{field: 1}))

    def test_no_impact_is_excluded(self, make_event):
        e = make_event()
        assert not has_impact(e)
        assert not is_retained(e)

    def test_custom_window(self, make_event):
        e = make_event(begin_date=datetime(1990, 5, 1), injuries=1)
        assert is_retained(e, start=datetime(1990, 1, 1))


class TestFilterEvents:

    def test_returns_new_subset(self, sample_events):
        original = list(sample_events)
        kept = filter_events(sample_events)
        assert kept is not sample_events
        assert sample_events == original
        assert len(kept) == 7
        assert all(e.ref_num != EXCLUDED_REF_NUM for e in kept)

    def test_accepts_any_iterable(self, sample_events):
        assert len(filter_events(iter(sample_events))) == 7
