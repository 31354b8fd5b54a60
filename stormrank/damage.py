"""
Damage resolver
===============

Storm Data reports damage as a magnitude (e.g. ``2.5``) plus a one-letter
exponent code (``K``, ``M`` or ``B``). This module turns the pair into an
absolute US$ figure.

Codes outside K/M/B (blank, ``+``, ``?``, digits...) scale by 1.
"""

from __future__ import annotations
from typing import Optional
import math

EXPONENT_MULTIPLIERS = {
    "K": 1_000,
    "M": 1_000_000,
    "B": 1_000_000_000,
}

def multiplier(code: Optional[str]) -> int:
    """Return the scale factor for an exponent code (case-insensitive)."""
    if code is None:
        return 1
    if isinstance(code, float) and math.isnan(code):
        return 1
    return EXPONENT_MULTIPLIERS.get(str(code).strip().upper(), 1)

def resolve_damage(magnitude: Optional[float], code: Optional[str]) -> float:
    """Return ``magnitude * multiplier(code)``; a missing magnitude is 0."""
    if magnitude is None:
        return 0.0
    m = float(magnitude)
    if math.isnan(m):
        return 0.0
    return m * multiplier(code)
