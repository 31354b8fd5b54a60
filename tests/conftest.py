"""
Shared fixtures for StormRank tests.
"""

from datetime import datetime

import pandas as pd
import pytest

from stormrank.config import USECOLS
from stormrank.models import StormEvent


@pytest.fixture
def make_event():
    """Factory for StormEvent records with harmless defaults."""
    counter = {"ref": 0}

    def _make(event_type="TORNADO", begin_date=datetime(2000, 6, 1), **kwargs):
        counter["ref"] += 1
        kwargs.setdefault("ref_num", counter["ref"])
        return StormEvent(event_type=event_type, begin_date=begin_date, **kwargs)

    return _make


@pytest.fixture
def sample_events(make_event):
    """A small mixed dataset: impactful, harmless, too old and the outlier."""
    return [
        make_event("TSTM WIND", injuries=3, prop_dmg=50, prop_dmg_exp="K"),
        make_event("THUNDERSTORM WIND", fatalities=1, prop_dmg=2, prop_dmg_exp="M"),
        make_event("MARINE TSTM WIND", injuries=1),
        make_event("EXTREME COLD", fatalities=4, crop_dmg=1.5, crop_dmg_exp="m"),
        make_event("RIVER FLOOD", prop_dmg=3, prop_dmg_exp="B", crop_dmg=5, crop_dmg_exp="M"),
        make_event("FLASH FLOOD", fatalities=2, injuries=2),
        make_event("TORNADO", injuries=10, fatalities=1, prop_dmg=1, prop_dmg_exp="B"),
        # no impact
        make_event("HAIL"),
        # before 1996
        make_event("TORNADO", begin_date=datetime(1995, 12, 31, 23, 59, 59), fatalities=50),
        # unparsable date
        make_event("TORNADO", begin_date=None, fatalities=7),
        # known outlier
        make_event("FLOOD", ref_num=605943, prop_dmg=115, prop_dmg_exp="B"),
    ]


def _row(refnum, date, evtype, fat=0, inj=0, prop=0, propexp="", crop=0, cropexp=""):
    return {
        "STATE__": "1.00", "STATE": "AL", "COUNTY": "97",
        "BGN_DATE": date, "BGN_TIME": "0130", "EVTYPE": evtype,
        "FATALITIES": fat, "INJURIES": inj,
        "PROPDMG": prop, "PROPDMGEXP": propexp, "CROPDMG": crop, "CROPDMGEXP": cropexp,
        "REMARKS": "", "REFNUM": refnum,
    }


@pytest.fixture
def storm_csv(tmp_path):
    """A tiny StormData-shaped bz2 file with a few extra, unused columns."""
    rows = [
        _row(1, "4/18/1950 0:00:00", "TORNADO", fat=1, prop=25, propexp="K"),
        _row(2, "1/1/1996 0:00:00", "TSTM WIND", inj=2, prop=10, propexp="K"),
        _row(3, "6/15/2005 0:00:00", "EXTREME COLD", fat=3),
        _row(4, "6/16/2005 0:00:00", "Coastal Erosion", prop=2.5, propexp="M"),
        _row(5, "not a date", "TORNADO", fat=9),
        _row(6, "8/29/2005 0:00:00", "HURRICANE/TYPHOON", fat=15, prop=31, propexp="B", crop=1.5, cropexp="B"),
        _row(7, "3/3/2010 0:00:00", "  ", inj=1),
        _row(605943, "1/1/2006 0:00:00", "FLOOD", prop=115, propexp="B"),
    ]
    path = tmp_path / "StormData.csv.bz2"
    df = pd.DataFrame(rows)
    assert set(USECOLS) <= set(df.columns)
    df.to_csv(path, index=False)
    return path
