"""
Aggregation (ranking tables)
============================

Groups events by `event_type` and sums their impact, producing the two
ranking tables the report is built on:

- casualties: injuries, fatalities, total
- damage: crop damage, property damage, total (US$)

Rows are sorted by total, largest first. Ties are broken by event type so the
output is stable between runs.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict, fields
from typing import Dict, Iterable, List, Sequence, Type, Union
import pandas as pd

from .config import TOP_N
from .models import StormEvent

@dataclass(frozen=True)
class CasualtyRow:
    event_type: str
    injuries: int
    fatalities: int
    total: int

@dataclass(frozen=True)
class DamageRow:
    event_type: str
    crop_damage: float
    property_damage: float
    total: float

Row = Union[CasualtyRow, DamageRow]

def _ranked(rows: List[Row]) -> List[Row]:
    return sorted(rows, key=lambda r: (-r.total, r.event_type))

def casualties_by_type(events: Iterable[StormEvent]) -> List[CasualtyRow]:
    """Sum injuries and fatalities per event type."""
    sums: Dict[str, List[int]] = {}
    for e in events:
        acc = sums.setdefault(e.event_type, [0, 0])
        acc[0] += e.injuries
        acc[1] += e.fatalities
    rows = [CasualtyRow(t, inj, fat, inj + fat) for t, (inj, fat) in sums.items()]
    return _ranked(rows)

def damage_by_type(events: Iterable[StormEvent]) -> List[DamageRow]:
    """Sum resolved crop and property damage per event type."""
    sums: Dict[str, List[float]] = {}
    for e in events:
        acc = sums.setdefault(e.event_type, [0.0, 0.0])
        acc[0] += e.crop_damage_value
        acc[1] += e.property_damage_value
    rows = [DamageRow(t, crop, prop, crop + prop) for t, (crop, prop) in sums.items()]
    return _ranked(rows)

def top_n(rows: Sequence[Row], n: int = TOP_N) -> List[Row]:
    """First `n` rows; `n` must not be negative."""
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    return list(rows[:n])

def rows_to_frame(rows: Sequence[Row], row_cls: Type[Row]) -> pd.DataFrame:
    """Tabulate ranking rows; columns follow `row_cls` even when `rows` is empty."""
    return pd.DataFrame([asdict(r) for r in rows], columns=[f.name for f in fields(row_cls)])
