"""
Pipeline engine (StormRank)
===========================

Ties the stages together:

1) Load dataset -> list of StormEvent records (done by the caller)
2) Filter -> working subset (the full list is left untouched)
3) Normalize event types of the working subset, in place
4) Aggregate the subset into the two ranking tables
5) Export or report the tables

The engine keeps the distinct label count before and after normalization so
the effect of the rule table can be checked on every run.
"""

from __future__ import annotations
from dataclasses import asdict, dataclass, field
from typing import List, Optional
import json
import logging

from .aggregate import CasualtyRow, DamageRow, casualties_by_type, damage_by_type, rows_to_frame, top_n
from .filters import filter_events
from .models import StormEvent
from .normalizer import distinct_count, normalize_events

logger = logging.getLogger(__name__)

ROW_TYPES = {"casualties": CasualtyRow, "damage": DamageRow}
TABLES = tuple(ROW_TYPES)

@dataclass
class StormRank:
    """Storm impact ranking over one loaded dataset.

    `events` holds every loaded record; `selected` is the filtered working
    subset, filled by `prepare()`.
    """
    events: List[StormEvent]
    dataset_path: Optional[str] = None
    selected: List[StormEvent] = field(default_factory=list, init=False)
    distinct_before: int = field(default=0, init=False)
    distinct_after: int = field(default=0, init=False)
    prepared: bool = field(default=False, init=False)

    def prepare(self) -> "StormRank":
        """Filter, then normalize the working subset. Runs once."""
        if self.prepared:
            return self
        self.selected = filter_events(self.events)
        self.distinct_before = distinct_count(self.selected)
        normalize_events(self.selected)
        self.distinct_after = distinct_count(self.selected)
        self.prepared = True
        logger.info("Event types: %d raw -> %d normalized", self.distinct_before, self.distinct_after)
        return self

    # ---------------- Tables ----------------
    def casualty_table(self, n: Optional[int] = None) -> List[CasualtyRow]:
        rows = casualties_by_type(self.prepare().selected)
        return rows if n is None else top_n(rows, n)

    def damage_table(self, n: Optional[int] = None) -> List[DamageRow]:
        rows = damage_by_type(self.prepare().selected)
        return rows if n is None else top_n(rows, n)

    def table(self, name: str, n: Optional[int] = None) -> list:
        name = name.lower()
        if name == "casualties":
            return self.casualty_table(n)
        if name == "damage":
            return self.damage_table(n)
        raise ValueError("table must be: casualties | damage")

    def event_types(self) -> List[str]:
        """Sorted distinct labels of the working subset."""
        return sorted({e.event_type for e in self.prepare().selected})

    # ---------------- Output operations ----------------
    def export_csv(self, path: str, table: str, n: Optional[int] = None) -> None:
        rows_to_frame(self.table(table, n), ROW_TYPES[table.lower()]).to_csv(path, index=False)

    def export_json(self, path: str, table: str, n: Optional[int] = None) -> None:
        """Export a ranking table as a JSON list of objects."""
        payload = [asdict(r) for r in self.table(table, n)]
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
