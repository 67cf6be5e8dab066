"""
Command-line entry point

    pnl-report report.json -o report.pdf --start 2025-01-01 --end 2025-03-31

Reads a P&L JSON document, writes the PDF (or its base64 text).
Exit code 0 on success, 1 on unreadable input or an invalid report.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

import structlog

from pnl_report.audit.logger import configure_logging
from pnl_report.config.settings import get_settings
from pnl_report.generator import generate_pdf, pdf_to_base64
from pnl_report.models.report import TargetPercentages
from pnl_report.parsing.parser import ReportError


logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pnl-report",
        description="Render a Profit & Loss report JSON document as a PDF",
    )
    parser.add_argument("report", help="Path to the P&L report JSON")
    parser.add_argument("-o", "--output", default=None,
                        help="Output path (default: report path with .pdf or .b64)")
    parser.add_argument("--start", default="", help="Period start, as printed in the header")
    parser.add_argument("--end", default="", help="Period end, as printed in the header")
    parser.add_argument("--location", default=None, help="Location name printed under the title")
    parser.add_argument("--target-cos", default="", help="Cost of Sales target %%")
    parser.add_argument("--target-payroll", default="", help="Payroll target %%")
    parser.add_argument("--target-profit", default="", help="Profit target %%")
    parser.add_argument("--base64", action="store_true",
                        help="Write the PDF as base64 text instead of binary")
    return parser


def _default_output(report_path: Path, as_base64: bool) -> Path:
    return report_path.with_suffix(".b64" if as_base64 else ".pdf")


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(get_settings().app.effective_log_level)

    report_path = Path(args.report)
    try:
        report_data = json.loads(report_path.read_text(encoding="utf-8"))
    except OSError as e:
        print(f"Cannot read {report_path}: {e}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f"Invalid JSON in {report_path}: {e}", file=sys.stderr)
        return 1

    targets = TargetPercentages.from_form(
        cost_of_sales=args.target_cos,
        payroll=args.target_payroll,
        profit=args.target_profit,
    )

    try:
        pdf_bytes = generate_pdf(
            report_data,
            args.start,
            args.end,
            location_name=args.location,
            targets=targets,
        )
    except ReportError as e:
        print(f"Invalid report: {e}", file=sys.stderr)
        return 1

    output_path = Path(args.output) if args.output else _default_output(report_path, args.base64)
    try:
        if args.base64:
            output_path.write_text(pdf_to_base64(pdf_bytes), encoding="ascii")
        else:
            output_path.write_bytes(pdf_bytes)
    except OSError as e:
        print(f"Cannot write {output_path}: {e}", file=sys.stderr)
        return 1

    logger.info("report_written", path=str(output_path), size_bytes=len(pdf_bytes))
    return 0


if __name__ == "__main__":
    sys.exit(main())
