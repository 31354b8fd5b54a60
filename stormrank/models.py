"""
Data model (StormEvent)
=======================

Each row of the Storm Data file is converted into a `StormEvent` object.

Unlike a read-only record, `event_type` is rewritten in place by the
normalizer. Damage and casualty totals are properties so they are always
computed from the current magnitudes and codes.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .damage import resolve_damage

@dataclass
class StormEvent:
    """One Storm Data row."""
    ref_num: int
    event_type: str
    begin_date: Optional[datetime]
    fatalities: int = 0
    injuries: int = 0
    prop_dmg: float = 0.0
    prop_dmg_exp: str = ""
    crop_dmg: float = 0.0
    crop_dmg_exp: str = ""
    state: str = ""
    remarks: str = ""
    # label as loaded, before normalization
    raw_event_type: str = ""

    def __post_init__(self) -> None:
        if not self.raw_event_type:
            self.raw_event_type = self.event_type

    @property
    def property_damage_value(self) -> float:
        return resolve_damage(self.prop_dmg, self.prop_dmg_exp)

    @property
    def crop_damage_value(self) -> float:
        return resolve_damage(self.crop_dmg, self.crop_dmg_exp)

    @property
    def combined_damage(self) -> float:
        """Property plus crop damage, in US$."""
        return self.property_damage_value + self.crop_damage_value

    @property
    def combined_casualties(self) -> int:
        return self.injuries + self.fatalities
