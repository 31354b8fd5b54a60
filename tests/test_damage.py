"""
Tests for the damage resolver.
"""

import math

import pytest

from stormrank.damage import multiplier, resolve_damage


class TestMultiplier:

    @pytest.mark.parametrize("code,expected", [
        ("K", 1_000), ("k", 1_000),
        ("M", 1_000_000), ("m", 1_000_000),
        ("B", 1_000_000_000), ("b", 1_000_000_000),
    ])
    def test_known_codes(self, code, expected):
        assert multiplier(code) == expected

    @pytest.mark.parametrize("code", ["", " ", "+", "-", "?", "0", "5", "H", None, math.nan])
    def test_unknown_codes_default_to_one(self, code):
        assert multiplier(code) == 1

    def test_whitespace_is_ignored(self):
        assert multiplier(" K ") == 1_000


class TestResolveDamage:

    def test_millions(self):
        assert resolve_damage(2.5, "M") == 2_500_000

    def test_blank_code(self):
        assert resolve_damage(10, "") == 10

    def test_billions(self):
        assert resolve_damage(3, "B") == 3_000_000_000

    def test_missing_magnitude_is_zero(self):
        assert resolve_damage(None, "B") == 0.0
        assert resolve_damage(math.nan, "K") == 0.0


class TestDerivedValues:
    """StormEvent derives its damage and casualty totals on access."""

    def test_combined_values(self, make_event):
        e = make_event(prop_dmg=2.5, prop_dmg_exp="M", crop_dmg=10, crop_dmg_exp="",
                       injuries=4, fatalities=1)
        assert e.property_damage_value == 2_500_000
        assert e.crop_damage_value == 10
        assert e.combined_damage == 2_500_010
        assert e.combined_casualties == 5

    def test_recomputed_after_mutation(self, make_event):
        e = make_event(prop_dmg=1, prop_dmg_exp="K")
        assert e.combined_damage == 1_000
        e.prop_dmg_exp = "M"
        assert e.combined_damage == 1_000_000
