"""
Dataset loader (StormData.csv.bz2 -> StormEvent list)
=====================================================

This module gets the Storm Data file onto disk, reads the columns the
pipeline needs and converts each row into a `StormEvent`.

Key ideas:
- Parsing the ~900k-row compressed CSV is slow, so the pruned DataFrame is
  kept in a cache. The cache is an object passed in by the caller (`PickleCache`,
  `NullCache` or anything with exists/load/store), not a hidden global.
- A missing source file is downloaded once from `DATA_URL`. A failed download
  stops the run: nothing is processed from a partial file.
- Conversion helpers (_to_int/_to_float/_to_str) handle blanks and junk so a
  bad cell never aborts the batch.
"""

from __future__ import annotations
from typing import Callable, List, Optional, Protocol
import logging
import os
import tempfile

import pandas as pd
import requests

from .config import CACHE_PATH, DATA_PATH, DATA_URL, DATE_FORMAT, USECOLS
from .models import StormEvent

logger = logging.getLogger(__name__)

class DatasetUnavailableError(RuntimeError):
    """The source file is missing and could not be fetched."""

# ---------------- Cell conversion ----------------
def _to_int(x) -> int:
    """Convert a cell to int, returning 0 if missing/invalid."""
    if pd.isna(x): return 0
    try: return int(float(x))
    except (TypeError, ValueError): return 0

def _to_float(x) -> float:
    """Convert a cell to float, returning 0.0 if missing/invalid."""
    if pd.isna(x): return 0.0
    try: return float(x)
    except (TypeError, ValueError): return 0.0

def _to_str(x) -> str:
    if pd.isna(x): return ""
    return str(x).strip()

def parse_begin_dates(values: pd.Series) -> pd.Series:
    """Parse BGN_DATE strings ("4/18/1950 0:00:00"); bad values become NaT."""
    return pd.to_datetime(values, format=DATE_FORMAT, errors="coerce")

# ---------------- Cache ----------------
class DatasetCache(Protocol):
    """Anything that can hold one parsed DataFrame."""

    def exists(self) -> bool: ...

    def load(self) -> pd.DataFrame: ...

    def store(self, df: pd.DataFrame) -> None: ...

class PickleCache:
    """Pandas pickle at a fixed path, replaced atomically on store."""

    def __init__(self, path: str = CACHE_PATH):
        self.path = path

    def exists(self) -> bool:
        return os.path.isfile(self.path)

    def load(self) -> pd.DataFrame:
        return pd.read_pickle(self.path)

    def store(self, df: pd.DataFrame) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".stormrank_", suffix=".pkl", dir=directory)
        os.close(fd)
        try:
            df.to_pickle(tmp)
            os.replace(tmp, self.path)
        finally:
            if os.path.exists(tmp):
                os.remove(tmp)
        logger.info("Cached %d rows at %s", len(df), self.path)

class NullCache:
    """Never holds anything; every load re-parses the source."""

    def exists(self) -> bool:
        return False

    def load(self) -> pd.DataFrame:
        raise LookupError("NullCache holds no data")

    def store(self, df: pd.DataFrame) -> None:
        return None

# ---------------- Source file ----------------
def fetch_source(url: str, dest: str, timeout: int = 300) -> str:
    """Download `url` to `dest`. The file only appears once fully written."""
    directory = os.path.dirname(os.path.abspath(dest))
    os.makedirs(directory, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".stormrank_", suffix=".part", dir=directory)
    logger.info("Downloading %s -> %s", url, dest)
    try:
        with os.fdopen(fd, "wb") as f:
            with requests.get(url, stream=True, timeout=timeout) as r:
                r.raise_for_status()
                for chunk in r.iter_content(chunk_size=1024 * 1024):
                    if chunk:
                        f.write(chunk)
        os.replace(tmp, dest)
    except requests.RequestException as e:
        raise DatasetUnavailableError(f"Could not fetch {url}: {e}") from e
    finally:
        if os.path.exists(tmp):
            os.remove(tmp)
    return dest

def read_storm_csv(path: str) -> pd.DataFrame:
    """Read only the USECOLS columns; compression is inferred from the suffix."""
    header = pd.read_csv(path, nrows=0).columns
    missing = [c for c in USECOLS if c not in header]
    if missing:
        raise KeyError(f"Missing required columns {missing}. Available={list(header)}")
    return pd.read_csv(path, usecols=USECOLS, dtype=str, keep_default_na=False, na_values=[""])

def load_storm_data(
    source_path: str = DATA_PATH,
    cache: Optional[DatasetCache] = None,
    fetch: Callable[[str, str], object] = fetch_source,
    url: str = DATA_URL,
) -> pd.DataFrame:
    """Return the pruned Storm Data frame: from cache, else from the source file.

    The source file is fetched first if it does not exist.
    """
    cache = cache if cache is not None else PickleCache()
    if cache.exists():
        logger.info("Using cached dataset")
        return cache.load()

    if not os.path.isfile(source_path):
        fetch(url, source_path)
        if not os.path.isfile(source_path):
            raise DatasetUnavailableError(f"Fetch did not produce {source_path}")

    logger.info("Parsing %s", source_path)
    df = read_storm_csv(source_path)
    logger.info("Parsed %d rows", len(df))
    cache.store(df)
    return df

def frame_to_events(df: pd.DataFrame) -> List[StormEvent]:
    """Convert the pruned frame into StormEvent records (one per row)."""
    dates = parse_begin_dates(df["BGN_DATE"])
    events: List[StormEvent] = []
    for (_, row), when in zip(df.iterrows(), dates):
        label = _to_str(row["EVTYPE"]) or "UNKNOWN"
        events.append(StormEvent(
            ref_num=_to_int(row["REFNUM"]),
            event_type=label,
            begin_date=None if pd.isna(when) else when.to_pydatetime(),
            fatalities=_to_int(row["FATALITIES"]),
            injuries=_to_int(row["INJURIES"]),
            prop_dmg=_to_float(row["PROPDMG"]),
            prop_dmg_exp=_to_str(row["PROPDMGEXP"]),
            crop_dmg=_to_float(row["CROPDMG"]),
            crop_dmg_exp=_to_str(row["CROPDMGEXP"]),
            state=_to_str(row["STATE"]),
            remarks=_to_str(row["REMARKS"]),
        ))
    invalid = sum(1 for e in events if e.begin_date is None)
    if invalid:
        logger.warning("%d rows have an unparsable BGN_DATE", invalid)
    return events

def load_events(
    source_path: str = DATA_PATH,
    cache: Optional[DatasetCache] = None,
    fetch: Callable[[str, str], object] = fetch_source,
    url: str = DATA_URL,
) -> List[StormEvent]:
    return frame_to_events(load_storm_data(source_path, cache=cache, fetch=fetch, url=url))
