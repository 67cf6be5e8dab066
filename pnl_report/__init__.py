"""
P&L Report - Source Package

Turns a Profit & Loss document from an accounting API into a printable
PDF, one period or one column per month.

DESIGN PRINCIPLES:
1. Parse permissively: odd input degrades, it does not fail
2. One pass, left to right: later rows can see what earlier rows found
3. Layout is data: every distance lives in one constants module
4. Every generation call is logged under one correlation id
"""

__version__ = "1.0.0"
__author__ = "P&L Report Team"

from pnl_report.generator import generate_pdf, generate_pdf_base64, pdf_to_base64
from pnl_report.models.report import TargetPercentages

__all__ = [
    "TargetPercentages",
    "generate_pdf",
    "generate_pdf_base64",
    "pdf_to_base64",
]
