"""
Section Classifier

Maps a top-level report row to the block of the P&L it represents.
The machine `group` tag is checked alongside the human-readable header
text because some companies rename their headers.
"""

from typing import Optional

from pnl_report.models.raw import RawRow
from pnl_report.models.report import SectionType
from pnl_report.parsing.rows import header_label, summary_label


def classify(row: RawRow) -> Optional[SectionType]:
    """
    Classify a top-level row. First match wins.

    Returns None for structural rows with no business meaning.
    """
    header = header_label(row).upper()
    summary = summary_label(row).upper()
    group = row.group

    if header == "INCOME" or group == "Income":
        return SectionType.INCOME

    if "COST OF GOODS SOLD" in header or "COST OF SALES" in header or group == "COGS":
        return SectionType.COST_OF_SALES

    if header == "EXPENSES" or group == "Expenses":
        return SectionType.EXPENSES

    if "OTHER INCOME" in header or group == "OtherIncome":
        return SectionType.OTHER_INCOME

    if summary in ("PROFIT", "NET INCOME") or group == "NetIncome":
        return SectionType.PROFIT

    if "GROSS PROFIT" in summary or "GROSS INCOME" in summary:
        return SectionType.GROSS_PROFIT

    return None
