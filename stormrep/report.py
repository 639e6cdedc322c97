from __future__ import annotations

"""
STORMREP report generator
-------------------------
This module turns the ranked figures into a DOCX report: one table, one bar
chart and a short narrative for each of fatalities, injuries and damage.

Design goals:
- Keep the pipeline usable without report dependencies (lazy imports);
  `narrative` and `format_table` need neither python-docx nor matplotlib.
- Every number quoted in the text comes from the same RankedSelection the
  table and chart are drawn from.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple
import logging
import os
import tempfile

from .engine import ReportFigures
from .models import FATALITIES, INJURIES, TOTAL_DAMAGE, RankedSelection

logger = logging.getLogger(__name__)


# -----------------------------
# Configuration / citation types
# -----------------------------

@dataclass
class DatasetCitation:
    """Dataset citation metadata for the DOCX report."""
    database_name: str = "Storm Events Database"
    institutional_author: str = "NOAA National Centers for Environmental Information"
    location: str = "Asheville, NC, USA"
    website: str = "https://www.ncdc.noaa.gov/stormevents/"
    file_name: Optional[str] = None
    file_note: Optional[str] = "Bzip2-compressed CSV export, events from 1950 onward."


@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "Health and Economic Impact of Severe Weather Events in the United States"
    subtitle: str = "NOAA Storm Events Database, 1970 onward"
    citation: DatasetCitation = field(default_factory=DatasetCitation)

    # Where to keep the PNG charts; a temporary directory if None
    chart_dir: Optional[str] = None
    chart_dpi: int = 200


# Per-metric wording: (table/chart heading, value column heading, chart y label)
_METRIC_TEXT: Dict[str, Tuple[str, str, str]] = {
    FATALITIES: ("Event types with the most fatalities", "Fatalities", "Fatalities"),
    INJURIES: ("Event types with the most injuries", "Injuries", "Injuries"),
    TOTAL_DAMAGE: ("Event types with the greatest property and crop damage",
                   "Damage (US$)", "Damage (US$ billions)"),
}


# -----------------------------
# Formatting helpers
# -----------------------------

def format_dollars(value: float) -> str:
    """$1.23 billion / $4.50 million / $1,234."""
    if abs(value) >= 1e9:
        return f"${value / 1e9:,.2f} billion"
    if abs(value) >= 1e6:
        return f"${value / 1e6:,.2f} million"
    return f"${value:,.0f}"


def format_value(metric: str, value: float) -> str:
    if metric == TOTAL_DAMAGE:
        return format_dollars(value)
    return f"{int(value):,}"


def format_table(selection: RankedSelection) -> str:
    """Plain-text ranked table for the console."""
    heading, value_col, _ = _METRIC_TEXT[selection.metric]
    width = max([len("Event type")] + [len(l) for l in selection.labels()])
    lines = [heading, f"{'#':>2}  {'Event type':<{width}}  {value_col}"]
    for i, row in enumerate(selection, start=1):
        lines.append(f"{i:>2}  {row.event_type:<{width}}  {format_value(selection.metric, row.metric(selection.metric))}")
    if not len(selection):
        lines.append("    (no post-1970 events)")
    return "\n".join(lines)


# -----------------------------
# Narrative text
# -----------------------------

def _leaders_sentence(sel: RankedSelection, noun: str) -> str:
    if len(sel) == 0:
        return f"No event type recorded any {noun} since 1970."
    s = f"Since 1970, {sel.top_label} has caused the most {noun} ({format_value(sel.metric, sel.top_value)})"
    if len(sel) >= 2:
        s += f", followed by {sel.second_label} ({format_value(sel.metric, sel.second_value)})"
    return s + "."


def _damage_sentences(sel: RankedSelection) -> str:
    if len(sel) == 0:
        return "No property or crop damage was recorded since 1970."
    if len(sel) == 1:
        return (f"{sel.top_label} accounts for the greatest property and crop damage since 1970 "
                f"({format_dollars(sel.top_value)}).")
    parts = [
        f"{sel.top_label} ({format_dollars(sel.top_value)}) and {sel.second_label} "
        f"({format_dollars(sel.second_value)}) have caused the greatest property and crop damage "
        f"since 1970, together {format_dollars(sel.combined_top_two)}.",
        "Event types are matched by their exact label, so two labels for the same kind of "
        "storm are reported as separate rows.",
    ]
    if len(sel) >= 3:
        parts.append(f"The next most costly event type is {sel.third_label} "
                     f"at {format_dollars(sel.third_value)}.")
    return " ".join(parts)


def narrative(figures: ReportFigures) -> Dict[str, str]:
    """Sentences quoting the leading event types for each section."""
    return {
        "health": " ".join([
            _leaders_sentence(figures.fatalities, "fatalities"),
            _leaders_sentence(figures.injuries, "injuries"),
        ]),
        "economic": _damage_sentences(figures.damage),
    }


def processing_notes(figures: ReportFigures) -> List[str]:
    notes = [
        f"Rows loaded: {figures.rows_loaded:,}.",
        f"Rows used after date parsing: {figures.rows_used:,}.",
        f"Distinct (period, event type) groups: {figures.groups:,}.",
        "Events that began before 1 January 1970 are excluded from the rankings; "
        "earlier years record only a few event types.",
        "Damage amounts are the magnitude times the exponent code: a number N means 10^N, "
        "blank means 1, K/M/B mean thousand/million/billion. Any other code counts as $0.",
    ]
    if figures.skipped_dates:
        notes.append(f"Rows excluded for an unparseable begin date: {figures.skipped_dates:,}.")
    if figures.unrecognized_codes:
        codes = ", ".join(f"'{c}' ({n:,})" for c, n in figures.unrecognized_codes.most_common())
        notes.append(f"Damage values with unrecognized exponent codes, counted as $0: {codes}.")
    return notes


# -----------------------------
# Charts
# -----------------------------

def bar_chart(selection: RankedSelection, title: str, ylabel: str, path: str, dpi: int = 200) -> str:
    """Render one ranked selection as a bar chart PNG and return its path."""
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError as e:
        raise ImportError(
            "Missing dependency: matplotlib.\n"
            "Install with: python -m pip install matplotlib"
        ) from e

    values = selection.values()
    if selection.metric == TOTAL_DAMAGE:
        values = [v / 1e9 for v in values]

    plt.figure()
    plt.bar(selection.labels(), values)
    plt.xticks(rotation=45, ha="right")
    plt.title(title)
    plt.ylabel(ylabel)
    plt.tight_layout()
    plt.savefig(path, dpi=dpi)
    plt.close()
    return path


# -----------------------------
# Main entry point used by CLI
# -----------------------------

def generate_docx_report(
    figures: ReportFigures,
    out_path: str,
    *,
    config: Optional[ReportConfig] = None,
) -> str:
    """
    Generate a DOCX report + charts from the ranked figures.
    """
    config = config or ReportConfig()

    # Lazy imports: only required when a report is written.
    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    # Pictures are copied into the document as they are added, so a
    # temporary chart directory can go once the document is built.
    with tempfile.TemporaryDirectory(prefix="stormrep_report_") as tmpdir:
        # -----------------------------
        # 1) Charts
        # -----------------------------
        chart_dir = config.chart_dir or tmpdir
        os.makedirs(chart_dir, exist_ok=True)
        charts: Dict[str, str] = {}
        for metric, filename in ((FATALITIES, "top_fatalities.png"),
                                 (INJURIES, "top_injuries.png"),
                                 (TOTAL_DAMAGE, "top_damage.png")):
            heading, _, ylabel = _METRIC_TEXT[metric]
            charts[metric] = bar_chart(figures.rankings[metric], heading, ylabel,
                                       os.path.join(chart_dir, filename), dpi=config.chart_dpi)
        logger.debug("Charts written to %s", chart_dir)

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

        def _ranked_table(sel: RankedSelection) -> None:
            _, value_col, _ = _METRIC_TEXT[sel.metric]
            t = doc.add_table(rows=1, cols=3)
            h = t.rows[0].cells
            h[0].text = "Rank"
            h[1].text = "Event type"
            h[2].text = value_col
            for i, row in enumerate(sel, start=1):
                r = t.add_row().cells
                r[0].text = str(i)
                r[1].text = row.event_type
                r[2].text = format_value(sel.metric, row.metric(sel.metric))

        def _section(metric: str) -> None:
            heading, _, _ = _METRIC_TEXT[metric]
            doc.add_heading(heading, level=3)
            _ranked_table(figures.rankings[metric])
            doc.add_paragraph("")
            doc.add_picture(charts[metric], width=Inches(6.0))

        _center_title(config.title, 20, bold=True)
        _center_title(config.subtitle, 12, italic=True)

        text = narrative(figures)

        doc.add_heading("Synopsis", level=1)
        doc.add_paragraph(text["health"])
        doc.add_paragraph(text["economic"])

        doc.add_heading("Data processing", level=1)
        for note in processing_notes(figures):
            doc.add_paragraph(note, style="List Bullet")

        doc.add_heading("Results", level=1)
        doc.add_heading("Population health", level=2)
        _section(FATALITIES)
        _section(INJURIES)
        doc.add_paragraph(text["health"])

        doc.add_heading("Economic consequences", level=2)
        _section(TOTAL_DAMAGE)
        doc.add_paragraph(text["economic"])

        doc.add_heading("Dataset citation", level=1)
        cit = config.citation
        if cit.file_name:
            doc.add_paragraph(f"Data file used: {cit.file_name}")
        if cit.file_note:
            doc.add_paragraph(f"File note: {cit.file_note}")
        doc.add_paragraph(f"{cit.institutional_author}. {cit.database_name}. {cit.location}. {cit.website}.")

        # -----------------------------
        # Reproducibility footer
        # -----------------------------
        from . import __version__
        doc.add_heading("Reproducibility footer", level=1)
        doc.add_paragraph(f"stormrep version: {__version__}")
        doc.add_paragraph(f"Report generated at: {datetime.now().isoformat(timespec='seconds')}")
        if figures.dataset_path:
            doc.add_paragraph(f"Dataset file: {figures.dataset_path}")

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    logger.info("Report written to %s", out_path)
    return out_path
