"""
StormRank Command Line Interface (CLI)
======================================

Run it like:

    python -m stormrank.cli --data StormData.csv.bz2

The dataset is downloaded if missing, parsed once and cached. The pipeline
(filter, normalize event types, aggregate) runs on startup. Then either:

- a one-shot output is printed (--top N) or written (--report PATH), or
- an interactive REPL starts for browsing the rankings.

The CLI never modifies the source file.
"""

from __future__ import annotations
import argparse
import logging
import shlex
import sys
from typing import List, Optional

from .config import CACHE_PATH, DATA_PATH, DATA_URL, TOP_N
from .engine import StormRank, TABLES
from .loader import DatasetUnavailableError, NullCache, PickleCache, load_events
from .normalizer import label_mapping

HELP = """
Commands:
  help
  stats
  types [prefix]                    (example: types FLOOD)
  map [text]                        raw -> normalized labels (example: map TSTM)

  top casualties [n]                (example: top casualties 10)
  top damage [n]

  export csv|json casualties|damage "<path>"
                                    (example: export csv damage "damage.csv")
  report "<path.docx>"
  quit
"""


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="stormrank", description="Rank storm event types by impact.")
    ap.add_argument("--data", default=DATA_PATH, help="Path to StormData.csv.bz2 (fetched if missing)")
    ap.add_argument("--cache", default=CACHE_PATH, help="Path of the parsed-dataset cache")
    ap.add_argument("--no-cache", action="store_true", help="Always re-parse the source file")
    ap.add_argument("--url", default=DATA_URL, help="Where to fetch the source file from")
    ap.add_argument("--top", type=int, metavar="N", help="Print the top N of both rankings and exit")
    ap.add_argument("--report", metavar="PATH", help="Write a DOCX report and exit")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log progress")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the StormRank CLI.

    1) Load dataset (cache, or parse, or fetch + parse)
    2) Filter + normalize
    3) One-shot output or interactive REPL
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cache = NullCache() if args.no_cache else PickleCache(args.cache)
    print("Loading dataset...")
    try:
        events = load_events(args.data, cache=cache, url=args.url)
    except DatasetUnavailableError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    engine = StormRank(events=events, dataset_path=args.data).prepare()
    print(f"Loaded {len(events)} events, {len(engine.selected)} retained. "
          f"Event types: {engine.distinct_before} raw -> {engine.distinct_after} normalized.")

    if args.top is not None or args.report:
        try:
            if args.top is not None:
                handle(engine, f"top casualties {args.top}")
                handle(engine, f"top damage {args.top}")
            if args.report:
                handle(engine, f"report {shlex.quote(args.report)}")
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return 0

    print("Type 'help' for commands.")
    while True:
        try:
            line = input("stormrank> ").strip()
        except EOFError:
            break
        if not line:
            continue
        if line.lower() in ("quit", "exit"):
            break
        try:
            handle(engine, line)
        except Exception as e:
            print(f"Error: {e}")
    return 0


def handle(engine: StormRank, line: str) -> None:
    """Handle one CLI command line."""
    parts = shlex.split(line)
    cmd = parts[0].lower()

    if cmd == "help":
        print(HELP)
        return

    if cmd == "stats":
        print(f"Loaded: {len(engine.events)} | Retained: {len(engine.selected)}")
        print(f"Event types: {engine.distinct_before} raw -> {engine.distinct_after} normalized")
        return

    if cmd == "types":
        prefix = parts[1].upper() if len(parts) >= 2 else ""
        vals = [v for v in engine.event_types() if v.upper().startswith(prefix)]
        for v in vals[:50]:
            print(v)
        if len(vals) > 50:
            print(f"... ({len(vals)} total, showing 50)")
        return

    if cmd == "map":
        needle = parts[1].upper() if len(parts) >= 2 else ""
        raw = [e.raw_event_type for e in engine.selected if needle in e.raw_event_type.upper()]
        for before, after in label_mapping(raw).items():
            print(f"{before} -> {after}")
        return

    if cmd == "top":
        if len(parts) < 2 or parts[1].lower() not in TABLES:
            raise ValueError("usage: top casualties|damage [n]")
        n = int(parts[2]) if len(parts) >= 3 else TOP_N
        rows = engine.table(parts[1], n)
        print(f"Top {len(rows)} event types by {parts[1].lower()}:")
        _print_rows(rows)
        return

    if cmd == "export":
        # export <csv|json> <casualties|damage> "<path>"
        if len(parts) < 4:
            print('Usage: export csv damage "out.csv"  OR  export json casualties "out.json"')
            return
        fmt, table, out_path = parts[1].lower(), parts[2].lower(), parts[3]
        if table not in TABLES:
            raise ValueError("table must be: casualties | damage")
        if fmt == "csv":
            engine.export_csv(out_path, table)
        elif fmt == "json":
            engine.export_json(out_path, table)
        else:
            print("Unknown export format. Use: csv or json")
            return
        print(f"Exported {table} {fmt.upper()} to {out_path}")
        return

    if cmd == "report":
        from .report import generate_docx_report, ReportConfig, DatasetCitation
        import os
        if len(parts) < 2:
            raise ValueError('usage: report "<path.docx>"')
        fn = os.path.basename(engine.dataset_path) if engine.dataset_path else None
        cfg = ReportConfig(citation=DatasetCitation(file_name=fn))
        generate_docx_report(engine, parts[1], config=cfg)
        print(f"Report written to {parts[1]}")
        return

    print("Unknown command. Type 'help'.")


def _print_rows(rows) -> None:
    for i, r in enumerate(rows, 1):
        if hasattr(r, "fatalities"):
            print(f"{i:>2}. {r.event_type} | injuries={r.injuries:,} fatalities={r.fatalities:,} total={r.total:,}")
        else:
            print(f"{i:>2}. {r.event_type} | crop=${r.crop_damage:,.0f} property=${r.property_damage:,.0f} total=${r.total:,.0f}")


if __name__ == "__main__":
    sys.exit(main())
