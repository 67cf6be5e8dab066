"""
Typed Report Models

The normalized section/item model produced by the parser and consumed
by the renderers. Two parallel families exist:

- Period mode: one value per line (`ReportItem`, `Section`, `PeriodReport`)
- Monthly mode: one value per month plus a total (`MonthlyItem`,
  `MonthlySection`, `MonthlyReport`)

Amounts stay as decimal strings exactly as the accounting API sent them.
Parsing to numbers only happens at render time (percentages, currency
formatting), where unparseable text degrades instead of failing.

The whole model is built fresh per generation call and never mutated
after the parser returns it.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================

class SectionType(str, Enum):
    """Top-level report blocks recognised by the classifier."""
    INCOME = "INCOME"
    COST_OF_SALES = "COST_OF_SALES"
    EXPENSES = "EXPENSES"
    OTHER_INCOME = "OTHER_INCOME"
    PROFIT = "PROFIT"
    GROSS_PROFIT = "GROSS_PROFIT"


class ReportMode(str, Enum):
    PERIOD = "period"
    MONTHLY = "monthly"


# =============================================================================
# PERIOD MODE
# =============================================================================

class ReportItem(BaseModel):
    """
    A single display line in period mode.

    `indent` is only set for nested lines; None means top level.
    """
    model_config = ConfigDict(frozen=True)

    label: str
    value: str
    indent: Optional[int] = Field(default=None, ge=1)


class SectionTotal(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    value: str


class Section(BaseModel):
    """Income, Cost of Sales, Other Income, or one expense sub-section."""

    header: str
    items: list[ReportItem] = Field(default_factory=list)
    total: Optional[SectionTotal] = None
    is_important: bool = False


class ExpensesBlock(BaseModel):
    """Expense sub-sections in source order, plus the grand total."""

    sections: list[Section] = Field(default_factory=list)
    total: Optional[SectionTotal] = None

    @property
    def is_empty(self) -> bool:
        return not self.sections and self.total is None


class PeriodReport(BaseModel):
    """Parsed report for a single reporting period."""

    income: Optional[Section] = None
    cost_of_sales: Optional[Section] = None
    gross_profit: Optional[SectionTotal] = None
    expenses: ExpensesBlock = Field(default_factory=ExpensesBlock)
    other_income: Optional[Section] = None
    profit: Optional[SectionTotal] = None

    @property
    def sections_found(self) -> list[str]:
        """Names of the blocks present, in report order."""
        found = []
        if self.income is not None:
            found.append(SectionType.INCOME.value)
        if self.cost_of_sales is not None:
            found.append(SectionType.COST_OF_SALES.value)
        if self.gross_profit is not None:
            found.append(SectionType.GROSS_PROFIT.value)
        if not self.expenses.is_empty:
            found.append(SectionType.EXPENSES.value)
        if self.other_income is not None:
            found.append(SectionType.OTHER_INCOME.value)
        if self.profit is not None:
            found.append(SectionType.PROFIT.value)
        return found


# =============================================================================
# MONTHLY MODE
# =============================================================================

class MonthlyAmount(BaseModel):
    """Per-month values plus the trailing total column."""
    model_config = ConfigDict(frozen=True)

    values: list[str]
    total: str


class MonthlyItem(BaseModel):
    """A single display line in monthly mode."""
    model_config = ConfigDict(frozen=True)

    label: str
    values: list[str]
    total: str
    indent: Optional[int] = Field(default=None, ge=1)


class MonthlyTotal(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    values: list[str]
    total: str


class MonthlySection(BaseModel):
    header: str
    items: list[MonthlyItem] = Field(default_factory=list)
    total: Optional[MonthlyTotal] = None
    is_important: bool = False


class MonthlyExpensesBlock(BaseModel):
    sections: list[MonthlySection] = Field(default_factory=list)
    total: Optional[MonthlyTotal] = None

    @property
    def is_empty(self) -> bool:
        return not self.sections and self.total is None


class MonthlyReport(BaseModel):
    """Parsed report with one column per month."""

    num_months: int = Field(ge=1)
    income: Optional[MonthlySection] = None
    cost_of_sales: Optional[MonthlySection] = None
    gross_profit: Optional[MonthlyTotal] = None
    expenses: MonthlyExpensesBlock = Field(default_factory=MonthlyExpensesBlock)
    other_income: Optional[MonthlySection] = None
    profit: Optional[MonthlyTotal] = None

    @property
    def sections_found(self) -> list[str]:
        found = []
        if self.income is not None:
            found.append(SectionType.INCOME.value)
        if self.cost_of_sales is not None:
            found.append(SectionType.COST_OF_SALES.value)
        if self.gross_profit is not None:
            found.append(SectionType.GROSS_PROFIT.value)
        if not self.expenses.is_empty:
            found.append(SectionType.EXPENSES.value)
        if self.other_income is not None:
            found.append(SectionType.OTHER_INCOME.value)
        if self.profit is not None:
            found.append(SectionType.PROFIT.value)
        return found


class MonthInfo(BaseModel):
    """A calendar month covered by one report column."""
    model_config = ConfigDict(frozen=True)

    year: int
    month: int = Field(ge=1, le=12)

    @property
    def label(self) -> str:
        """Short column label, e.g. "Jan 2025"."""
        names = [
            "Jan", "Feb", "Mar", "Apr", "May", "Jun",
            "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
        ]
        return f"{names[self.month - 1]} {self.year}"


# =============================================================================
# TARGETS
# =============================================================================

class TargetPercentages(BaseModel):
    """
    Target percentages printed under the Cost of Sales, Payroll and
    Profit totals.

    Each field is independently optional. Use `with_defaults()` before
    rendering so every annotation prints.
    """

    cost_of_sales: Optional[float] = None
    payroll: Optional[float] = None
    profit: Optional[float] = None

    @field_validator('cost_of_sales', 'payroll', 'profit')
    @classmethod
    def reject_nan(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v != v:
            return None
        return v

    def with_defaults(self, defaults=None) -> "TargetPercentages":
        """
        Fill missing targets from settings.

        Args:
            defaults: A TargetSettings instance. Loaded from the
                environment when omitted.
        """
        if defaults is None:
            from pnl_report.config import get_settings
            defaults = get_settings().targets
        return TargetPercentages(
            cost_of_sales=(
                self.cost_of_sales if self.cost_of_sales is not None
                else defaults.cost_of_sales
            ),
            payroll=self.payroll if self.payroll is not None else defaults.payroll,
            profit=self.profit if self.profit is not None else defaults.profit,
        )

    @classmethod
    def from_form(
        cls,
        cost_of_sales: str = "",
        payroll: str = "",
        profit: str = "",
    ) -> Optional["TargetPercentages"]:
        """
        Build targets from raw form strings.

        Empty or unparseable strings leave that target unset.
        Returns None when all three are empty.
        """
        if not cost_of_sales and not payroll and not profit:
            return None

        def _parse(text: str) -> Optional[float]:
            if not text:
                return None
            try:
                return float(text)
            except ValueError:
                return None

        return cls(
            cost_of_sales=_parse(cost_of_sales),
            payroll=_parse(payroll),
            profit=_parse(profit),
        )
