"""
Event type normalizer
=====================

Storm Data's EVTYPE column is free text: the 1950-2011 file holds close to a
thousand spellings ("TSTM WIND", "THUNDERSTORM WINDS", "TSTM WIND/HAIL", ...)
for the 48 event types NWS Directive 10-1605 documents.

This module collapses those spellings with an ordered list of rewrite rules.

Key ideas:
- A rule is a predicate over the label plus the canonical label it writes.
- Predicates are built from small combinators (contains_any, contains_all,
  negate, both) instead of regex lookaheads.
- Rules are applied as a left fold: each rule sees the label produced by the
  previous one, so the order of RULES is part of its meaning.
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import reduce
from typing import Callable, Dict, Iterable, List, Sequence, Union
import logging

from .models import StormEvent

logger = logging.getLogger(__name__)

Predicate = Callable[[str], bool]

# ---------------- Predicate combinators ----------------
def contains_any(*words: str) -> Predicate:
    """True if the upper-cased label contains at least one of `words`."""
    needles = tuple(w.upper() for w in words)
    return lambda label: any(n in label.upper() for n in needles)

def contains_all(*words: str) -> Predicate:
    """True if the upper-cased label contains every one of `words`."""
    needles = tuple(w.upper() for w in words)
    return lambda label: all(n in label.upper() for n in needles)

def negate(pred: Predicate) -> Predicate:
    return lambda label: not pred(label)

def both(*preds: Predicate) -> Predicate:
    """Logical AND of several predicates."""
    return lambda label: all(p(label) for p in preds)

@dataclass(frozen=True)
class Rule:
    """Rewrite `label` to `target` when `predicate(label)` holds."""
    name: str
    predicate: Predicate
    target: str

    def apply(self, label: str) -> str:
        return self.target if self.predicate(label) else label

# Order matters: see module docstring.
RULES: List[Rule] = [
    Rule("tstm", both(contains_any("TSTM"), negate(contains_any("NON", "MARINE"))),
         "THUNDERSTORM WIND"),
    Rule("microburst", contains_any("MICROBURST"), "THUNDERSTORM WIND"),
    Rule("flash flood", both(contains_any("RIVER", "FLASH", "STREAM"), contains_any("FLOOD", "FLD")),
         "FLASH FLOOD"),
    Rule("strong wind", both(contains_any("STRONG WIND"), negate(contains_any("MARINE"))),
         "STRONG WIND"),
    Rule("wildfire", contains_any("FIRE"), "WILDFIRE"),
    Rule("excessive heat", both(contains_any("EXCESSIVE", "RECORD"), contains_any("HEAT")),
         "EXCESSIVE HEAT"),
    Rule("heat wave", contains_any("HEAT WAVE"), "HEAT"),
    # plain cold must not swallow "extreme cold"; handled by exclusion, not order
    Rule("cold", both(contains_any("COLD", "CHILL"), negate(contains_any("EXTREME"))),
         "COLD/WIND CHILL"),
    Rule("extreme cold", both(contains_any("COLD", "CHILL"), contains_any("EXTREME")),
         "EXTREMECOLD/WIND CHILL"),
    Rule("rip current", contains_any("RIP CURRENT"), "RIP CURRENT"),
    Rule("lake-effect snow", contains_all("LAKE", "EFFECT", "SNOW"), "LAKE-EFFECT SNOW"),
    Rule("debris flow", both(contains_any("ROCK", "MUD", "LAND"), contains_any("SLIDE")),
         "DEBRIS FLOW"),
    Rule("hurricane", contains_any("HURRICANE", "TYPHOON"), "HURRICANE (TYPHOON)"),
    Rule("high surf", contains_any("SURF"), "HIGH SURF"),
    Rule("frost/freeze", contains_any("FROST", "FREEZE"), "FROST/FREEZE"),
    Rule("storm surge", contains_any("SURGE"), "STORM SURGE/TIDE"),
    Rule("coastal flood", both(contains_any("COASTAL"), contains_any("FLOOD", "EROSION")),
         "COASTAL FLOOD"),
]

def normalize_label(label: str, rules: Sequence[Rule] = RULES) -> str:
    """Fold every rule, in order, over `label`. Unmatched labels come back as-is."""
    return reduce(lambda current, rule: rule.apply(current), rules, label)

def normalize_events(events: Iterable[StormEvent], rules: Sequence[Rule] = RULES) -> int:
    """Rewrite `event_type` of each event in place.

    Returns the number of events whose label changed.
    """
    cache: Dict[str, str] = {}
    changed = 0
    for e in events:
        before = e.event_type
        if before not in cache:
            cache[before] = normalize_label(before, rules)
        after = cache[before]
        if after != before:
            e.event_type = after
            changed += 1
    logger.info("Normalized %d event labels (%d distinct inputs)", changed, len(cache))
    return changed

def distinct_count(items: Iterable[Union[str, StormEvent]]) -> int:
    """Number of distinct labels among strings or events."""
    return len({i.event_type if isinstance(i, StormEvent) else i for i in items})

def label_mapping(labels: Iterable[str], rules: Sequence[Rule] = RULES) -> Dict[str, str]:
    """Map each distinct raw label to its canonical label."""
    return {lab: normalize_label(lab, rules) for lab in sorted(set(labels))}
