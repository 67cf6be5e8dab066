"""
Exclusion and Keyword Rules

Business constants for one accounting taxonomy. These are data, not a
general parsing mechanism: the patterns name specific sub-sections and
line items of the chart of accounts the reports come from.

Item-level exclusion is the union of three independent rules:
1. A duplicate payroll sub-section line, excluded everywhere
2. Online subscriptions, excluded only inside "Expense C"
3. Travel + conference lines, excluded only inside "Expense E"

Section-level exclusion removes a whole expense sub-section before any
of its items are looked at.
"""

import re
from dataclasses import dataclass
from typing import Optional

from pnl_report.models.raw import RawRow


# =============================================================================
# PATTERNS
# =============================================================================

PAYROLL_DUPLICATE_PATTERN = re.compile(r"E17\s*[-–]?\s*PAYROLL\s+EXPENSES", re.IGNORECASE)
ONLINE_SUBSCRIPTION_PATTERN = re.compile(r"ONLINE\s+SUBSCRIPTION", re.IGNORECASE)
TRAVEL_PATTERN = re.compile(r"TRAVEL", re.IGNORECASE)
CONFERENCE_PATTERN = re.compile(r"CONFERENCE", re.IGNORECASE)
EXPENSE_C_PATTERN = re.compile(r"EXPENSE\s+C\b", re.IGNORECASE)
EXPENSE_E_PATTERN = re.compile(r"EXPENSE\s+E\b", re.IGNORECASE)
DELETED_SECTION_PATTERN = re.compile(r"\(deleted\)", re.IGNORECASE)

EXCLUDED_EXPENSE_SECTION = "E17 PAYROLL EXPENSES"

PAYROLL_MARKERS = ("PAYROLL", "WAGES", "WAGE")

CLOVER_KEYWORD = "CLOVER"
COURIER_KEYWORD = "COURIER"


# =============================================================================
# EXCLUSION
# =============================================================================

def is_payroll_duplicate(label: str) -> bool:
    return bool(PAYROLL_DUPLICATE_PATTERN.search(label))


def excluded_from_expense_c(label: str, expense_section_header: Optional[str] = None) -> bool:
    if not expense_section_header:
        return False
    return bool(
        EXPENSE_C_PATTERN.search(expense_section_header)
        and ONLINE_SUBSCRIPTION_PATTERN.search(label)
    )


def excluded_from_expense_e(label: str, expense_section_header: Optional[str] = None) -> bool:
    """Both TRAVEL and CONFERENCE must appear; either alone is kept."""
    if not expense_section_header:
        return False
    return bool(
        EXPENSE_E_PATTERN.search(expense_section_header)
        and TRAVEL_PATTERN.search(label)
        and CONFERENCE_PATTERN.search(label)
    )


def should_exclude(label: str, expense_section_header: Optional[str] = None) -> bool:
    """True if the line should be left out of the report."""
    return (
        is_payroll_duplicate(label)
        or excluded_from_expense_c(label, expense_section_header)
        or excluded_from_expense_e(label, expense_section_header)
    )


def should_exclude_expense_section(header: str) -> bool:
    """True if an entire expense sub-section should be skipped."""
    if DELETED_SECTION_PATTERN.search(header):
        return True
    return header.upper() == EXCLUDED_EXPENSE_SECTION


def is_payroll_section(header_label: str, expense_section_header: Optional[str] = None) -> bool:
    """
    Payroll subtrees are always expanded.

    Matches on the row's own header, or on the enclosing expense
    sub-section name.
    """
    upper_header = header_label.upper()
    upper_section = (expense_section_header or "").upper()
    if "PAYROLL" in upper_section:
        return True
    return any(marker in upper_header for marker in PAYROLL_MARKERS)


# =============================================================================
# KEYWORDS
# =============================================================================

@dataclass(frozen=True)
class KeywordsFound:
    """
    Which tracked income keywords have been seen.

    Flags only ever go from False to True; `merge` never clears one.
    """
    clover: bool = False
    courier: bool = False

    @property
    def any(self) -> bool:
        return self.clover or self.courier

    @property
    def both(self) -> bool:
        return self.clover and self.courier

    def merge(self, other: "KeywordsFound") -> "KeywordsFound":
        return KeywordsFound(
            clover=self.clover or other.clover,
            courier=self.courier or other.courier,
        )


def detect_keywords(label: str) -> KeywordsFound:
    upper = label.upper()
    return KeywordsFound(
        clover=CLOVER_KEYWORD in upper,
        courier=COURIER_KEYWORD in upper,
    )


def search_subtree(rows: Optional[list[RawRow]]) -> KeywordsFound:
    """
    Depth-first search of Data and Header labels for tracked keywords.

    Stops as soon as both keywords have been found. Only rows explicitly
    typed "Data" count as data rows here.
    """
    found = KeywordsFound()
    for row in rows or []:
        if row.col_data is not None and row.type == "Data":
            label = row.col_data[0].value if row.col_data else None
            found = found.merge(detect_keywords(label or ""))
            if found.both:
                break

        header_cells = row.header.col_data if row.header is not None else None
        if header_cells is not None:
            label = header_cells[0].value if header_cells else None
            found = found.merge(detect_keywords(label or ""))
            if found.both:
                break

        if row.children is not None:
            found = found.merge(search_subtree(row.children))
            if found.both:
                break

    return found
