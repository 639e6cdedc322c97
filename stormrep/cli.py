"""
STORMREP Command Line Interface (CLI)
=====================================

Runs the whole report in one go:

    python -m stormrep.cli --csv "path/to/repdata_data_StormData.csv.bz2" --out report.docx

Prints the three ranked tables and the narrative, then writes the DOCX
report (unless --no-report). The dataset file is only read, never modified.
"""

from __future__ import annotations
import argparse, logging, os, sys
from typing import List, Optional

from .config import PipelineConfig
from .engine import ReportFigures, run_pipeline
from .loader import LoadError
from .logging_config import setup_logger
from .report import DatasetCitation, ReportConfig, format_table, generate_docx_report, narrative
from .models import METRICS


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="stormrep",
        description="Rank NOAA storm event types by health and economic impact.",
    )
    ap.add_argument("--csv", required=True, help="Path to the (compressed) storm events CSV")
    ap.add_argument("--out", default="storm_report.docx", help="Where to write the DOCX report")
    ap.add_argument("--top-n", type=int, default=6, help="Rows per ranked table (default 6)")
    ap.add_argument("--chart-dir", default=None, help="Keep the chart PNGs in this directory")
    ap.add_argument("--log-dir", default=None, help="Also write a rotating log file here")
    ap.add_argument("--no-report", action="store_true", help="Print the tables only")
    ap.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    return ap


def print_summary(figures: ReportFigures) -> None:
    for metric in METRICS:
        print()
        print(format_table(figures.rankings[metric]))
    text = narrative(figures)
    print()
    print(text["health"])
    print(text["economic"])


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the STORMREP CLI.

    1) Load, normalize, aggregate and rank the dataset
    2) Print the ranked tables and narrative
    3) Write the DOCX report
    """
    args = build_parser().parse_args(argv)
    try:
        config = PipelineConfig(data_path=args.csv, top_n=args.top_n, log_dir=args.log_dir)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    logger = setup_logger(
        "stormrep",
        log_dir=config.log_dir,
        console_level=logging.WARNING if args.quiet else logging.INFO,
    )

    logger.info("Loading dataset %s", config.data_path)
    try:
        figures = run_pipeline(config)
    except LoadError as e:
        logger.error("Could not load dataset: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_summary(figures)

    if not args.no_report:
        cfg = ReportConfig(
            citation=DatasetCitation(file_name=os.path.basename(args.csv)),
            chart_dir=args.chart_dir,
        )
        generate_docx_report(figures, args.out, config=cfg)
        print(f"\nReport written to {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
