from __future__ import annotations

"""
StormRank report generator
--------------------------
This module writes a DOCX report for a prepared `StormRank` engine:

- a stacked bar chart of injuries/fatalities for the top event types,
- a stacked bar chart of crop/property damage for the top event types,
- both ranking tables and a summary of the event type normalization.

python-docx and matplotlib are imported lazily so the pipeline and CLI work
without them until a report is requested.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence, Tuple
import logging
import os
import tempfile

from .config import TOP_N
from .engine import StormRank

logger = logging.getLogger(__name__)


# -----------------------------
# Configuration / citation types
# -----------------------------

@dataclass
class DatasetCitation:
    """Minimal dataset citation metadata for the DOCX report."""
    database_name: str = "Storm Events Database (Storm Data)"
    institutional_author: str = "NOAA National Centers for Environmental Information"
    website: str = "https://www.ncdc.noaa.gov/stormevents/"
    file_name: Optional[str] = None


@dataclass
class ReportConfig:
    title: str = "Storm Impact Report"
    subtitle: str = "Most harmful and most costly weather event types, 1996-2011"
    citation: DatasetCitation = field(default_factory=DatasetCitation)

    # How many event types to show in charts / tables
    top_n: int = TOP_N


def _billions(v: float) -> float:
    return v / 1e9


def _stacked_bar(plt, title: str, labels: List[str], series: Sequence[Tuple[str, List[float]]],
                 ylabel: str, path: str) -> str:
    plt.figure(figsize=(10, 6))
    bottom = [0.0] * len(labels)
    for name, values in series:
        plt.bar(labels, values, bottom=bottom, label=name)
        bottom = [b + v for b, v in zip(bottom, values)]
    plt.xticks(rotation=60, ha="right")
    plt.title(title)
    plt.ylabel(ylabel)
    plt.legend(frameon=False)
    plt.tight_layout()
    plt.savefig(path, dpi=150)
    plt.close()
    return path


# -----------------------------
# Main entry point used by CLI
# -----------------------------

def generate_docx_report(
    engine: StormRank,
    out_path: str,
    *,
    config: Optional[ReportConfig] = None,
) -> str:
    """Generate a DOCX report with charts and ranking tables.

    The engine is prepared (filtered and normalized) first if needed.
    """
    config = config or ReportConfig()

    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    try:
        import matplotlib.pyplot as plt
    except ImportError as e:
        raise ImportError(
            "Missing dependency: matplotlib.\n"
            "Install with: python -m pip install matplotlib"
        ) from e

    engine.prepare()
    if not engine.selected:
        raise ValueError("No events to report on (filtered set is empty).")

    casualties = engine.casualty_table(config.top_n)
    damage = engine.damage_table(config.top_n)

    # -----------------------------
    # 1) Charts
    # -----------------------------
    with tempfile.TemporaryDirectory(prefix="stormrank_report_") as tmpdir:
        charts: List[Tuple[str, str]] = []

        title = f"Top {len(casualties)} event types by casualties"
        charts.append((title, _stacked_bar(
            plt, title,
            [r.event_type for r in casualties],
            [("Fatalities", [float(r.fatalities) for r in casualties]),
             ("Injuries", [float(r.injuries) for r in casualties])],
            "People", os.path.join(tmpdir, "casualties.png"),
        )))

        title = f"Top {len(damage)} event types by economic damage"
        charts.append((title, _stacked_bar(
            plt, title,
            [r.event_type for r in damage],
            [("Property", [_billions(r.property_damage) for r in damage]),
             ("Crop", [_billions(r.crop_damage) for r in damage])],
            "Damage (billion US$)", os.path.join(tmpdir, "damage.png"),
        )))

        # -----------------------------
        # 2) Build DOCX report
        # -----------------------------
        doc = Document()
        style = doc.styles["Normal"]
        style.font.name = "Calibri"
        style.font.size = Pt(11)

        def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
            p = doc.add_paragraph()
            r = p.add_run(text)
            r.bold = bold
            r.italic = italic
            r.font.size = Pt(size)
            p.alignment = WD_ALIGN_PARAGRAPH.CENTER

        def _kv(key: str, value: str) -> None:
            p = doc.add_paragraph()
            r = p.add_run(f"{key}: ")
            r.bold = True
            p.add_run(value)

        def _table(header: List[str], rows: List[List[str]]) -> None:
            t = doc.add_table(rows=1, cols=len(header))
            for i, h in enumerate(header):
                t.rows[0].cells[i].text = h
            for values in rows:
                cells = t.add_row().cells
                for i, v in enumerate(values):
                    cells[i].text = v

        _center_title(config.title, 22, bold=True)
        _center_title(config.subtitle, 12, italic=True)

        doc.add_paragraph("")
        _kv("Records loaded", f"{len(engine.events):,}")
        _kv("Records analysed", f"{len(engine.selected):,}")
        _kv("Distinct event types (raw)", str(engine.distinct_before))
        _kv("Distinct event types (normalized)", str(engine.distinct_after))

        doc.add_heading("Dataset", level=1)
        cit = config.citation
        if cit.file_name:
            doc.add_paragraph(f"Data file used: {cit.file_name}")
        doc.add_paragraph(f"{cit.institutional_author}. {cit.database_name}. {cit.website}.")
        doc.add_paragraph(
            "Only events beginning on or after 1996-01-01 are analysed, the first year "
            "in which all event types were recorded. Events without casualties or damage "
            "are dropped, as is one record whose damage was mis-keyed in billions."
        )

        doc.add_heading("Visualizations", level=1)
        for title, path in charts:
            doc.add_paragraph(title)
            doc.add_picture(path, width=Inches(6.5))

        doc.add_heading("Casualties by event type", level=1)
        _table(
            ["Event type", "Injuries", "Fatalities", "Total"],
            [[r.event_type, f"{r.injuries:,}", f"{r.fatalities:,}", f"{r.total:,}"] for r in casualties],
        )

        doc.add_heading("Economic damage by event type", level=1)
        _table(
            ["Event type", "Crop (US$)", "Property (US$)", "Total (US$)"],
            [[r.event_type, f"{r.crop_damage:,.0f}", f"{r.property_damage:,.0f}", f"{r.total:,.0f}"]
             for r in damage],
        )

        # -----------------------------
        # Reproducibility footer
        # -----------------------------
        from . import __version__ as stormrank_version
        doc.add_heading("Reproducibility footer", level=1)
        doc.add_paragraph(f"StormRank version: {stormrank_version}")
        doc.add_paragraph(f"Report generated at: {datetime.now().isoformat(timespec='seconds')}")

        os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
        doc.save(out_path)
    logger.info("Report written to %s", out_path)
    return out_path
