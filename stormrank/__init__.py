"""
StormRank package
=================

Ranks NOAA Storm Data event types by human and economic impact.

- The CLI entry point is in `stormrank/cli.py`.
- Event type normalization rules are in `stormrank/normalizer.py`.
- Damage magnitude/exponent resolution is in `stormrank/damage.py`.
- Dataset loading and caching is in `stormrank/loader.py`.
"""

__version__ = '0.3.0'
