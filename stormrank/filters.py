"""
Record filter
=============

Keeps the events that are comparable across event types and that had some
impact. The full event list is never modified; `filter_events` builds a new
working subset.
"""

from __future__ import annotations
from datetime import datetime
from typing import Iterable, List
import logging

from .config import ANALYSIS_START, EXCLUDED_REF_NUM
from .models import StormEvent

logger = logging.getLogger(__name__)

def has_impact(e: StormEvent) -> bool:
    """True if the event caused any casualty or any reported damage."""
    return e.fatalities > 0 or e.injuries > 0 or e.prop_dmg > 0 or e.crop_dmg > 0

def is_retained(e: StormEvent,
                start: datetime = ANALYSIS_START,
                excluded_ref_num: int = EXCLUDED_REF_NUM) -> bool:
    # unparsable dates are loaded as None and never pass
    if e.begin_date is None or e.begin_date < start:
        return False
    if e.ref_num == excluded_ref_num:
        return False
    return has_impact(e)

def filter_events(events: Iterable[StormEvent],
                  start: datetime = ANALYSIS_START,
                  excluded_ref_num: int = EXCLUDED_REF_NUM) -> List[StormEvent]:
    """Return a new list holding only the retained events."""
    events = list(events)
    kept = [e for e in events if is_retained(e, start, excluded_ref_num)]
    logger.info("Kept %d of %d events (start=%s, excluded ref=%s)",
                len(kept), len(events), start.date(), excluded_ref_num)
    return kept
