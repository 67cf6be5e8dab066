"""
Item Transformer

Recursive conversion of a section's row tree into a flat list of
display items.

DESIGN DECISION: The traversal is an explicit fold.
`transform(rows, context)` returns `(items, context)` and the caller
threads the returned context into the next sibling. The keyword flags
in the context are an accumulator over one depth-first, left-to-right
pass of the Income subtree: once a keyword is seen, every later row in
the pass sees it too. Nothing is shared or mutated between calls.

Header rows dispatch in priority order:
1. Excluded label        -> nothing
2. Payroll subtree       -> header line (never suppressed) + children
3. Income section        -> keyword bucketing (see _transform_income)
4. Anything else         -> a single line with the resolved value

Period and monthly modes share this dispatch tree and differ only in
what an "amount" is: a single decimal string, or per-month values plus
a total.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Generic, Optional, TypeVar

import structlog

from pnl_report.models.raw import RawRow
from pnl_report.models.report import MonthlyAmount, MonthlyItem, ReportItem
from pnl_report.parsing.rows import (
    DEFAULT_VALUE,
    MISSING_MONTH_VALUE,
    BranchNode,
    LeafNode,
    data_value,
    has_header_monthly_value,
    has_header_value,
    is_valid_value,
    monthly_amount,
    preferred_value,
    summary_cells,
    to_node,
    total_value,
    zero_amount,
)
from pnl_report.parsing.rules import (
    KeywordsFound,
    detect_keywords,
    is_payroll_section,
    search_subtree,
    should_exclude,
)


logger = structlog.get_logger(__name__)

ItemT = TypeVar("ItemT")
AmountT = TypeVar("AmountT")


@dataclass(frozen=True)
class TransformContext:
    """
    State threaded through one transform pass.

    `expense_section_header` scopes the sub-section exclusion rules and
    marks payroll sub-sections.
    """
    indent_level: int = 0
    is_income_section: bool = False
    expense_section_header: Optional[str] = None
    keywords_found: KeywordsFound = field(default_factory=KeywordsFound)

    @property
    def indent(self) -> Optional[int]:
        """Indent attached to items; None at top level."""
        return self.indent_level if self.indent_level > 0 else None

    def nested(self) -> "TransformContext":
        return replace(self, indent_level=self.indent_level + 1)

    def with_keywords(self, found: KeywordsFound) -> "TransformContext":
        return replace(self, keywords_found=self.keywords_found.merge(found))


class ItemTransformer(ABC, Generic[ItemT, AmountT]):
    """
    Shared dispatch tree.

    Subclasses define how an amount is resolved from a row and how an
    item is built from a label and an amount.
    """

    # =========================================================================
    # AMOUNT HOOKS
    # =========================================================================

    @abstractmethod
    def resolve(self, row: RawRow) -> Optional[AmountT]:
        """Preferred amount for a header row, or None if it has no valid value."""

    @abstractmethod
    def default_amount(self) -> AmountT:
        """Amount shown for a payroll header with no valid value."""

    @abstractmethod
    def has_inline_value(self, row: RawRow) -> bool:
        """True if the header row carries any valid inline value."""

    @abstractmethod
    def leaf_amount(self, row: RawRow) -> AmountT:
        """Amount of a data row."""

    @abstractmethod
    def make_item(self, label: str, amount: AmountT, context: TransformContext) -> ItemT:
        """Build a display item at the context's indent."""

    # =========================================================================
    # TRAVERSAL
    # =========================================================================

    def transform(
        self,
        rows: Optional[list[RawRow]],
        context: TransformContext,
    ) -> tuple[list[ItemT], TransformContext]:
        """
        Convert rows into display items.

        Returns the items and the context after the last row, so callers
        can carry keyword state forward.
        """
        items: list[ItemT] = []

        for row in rows or []:
            node = to_node(row)

            if isinstance(node, LeafNode):
                item, context = self._transform_leaf(node, context)
                if item is not None:
                    items.append(item)
            elif isinstance(node, BranchNode):
                produced, context = self._transform_branch(node, context)
                items.extend(produced)
            else:
                logger.debug("row_dropped", reason="unrecognised_shape")

        return items, context

    def _transform_leaf(
        self,
        node: LeafNode,
        context: TransformContext,
    ) -> tuple[Optional[ItemT], TransformContext]:
        if not node.label:
            return None, context

        if should_exclude(node.label, context.expense_section_header):
            logger.debug("row_excluded", label=node.label)
            return None, context

        if context.is_income_section:
            context = context.with_keywords(detect_keywords(node.label))

        return self.make_item(node.label, self.leaf_amount(node.row), context), context

    def _transform_branch(
        self,
        node: BranchNode,
        context: TransformContext,
    ) -> tuple[list[ItemT], TransformContext]:
        if should_exclude(node.label, context.expense_section_header):
            logger.debug("row_excluded", label=node.label)
            return [], context

        if is_payroll_section(node.label, context.expense_section_header):
            return self._transform_payroll(node, context)

        if context.is_income_section:
            return self._transform_income(node, context)

        return self._transform_regular(node, context), context

    def _transform_children(
        self,
        node: BranchNode,
        context: TransformContext,
    ) -> tuple[list[ItemT], TransformContext]:
        """Recurse one level deeper; keyword state flows back, indent does not."""
        items, child_context = self.transform(node.children, context.nested())
        return items, replace(context, keywords_found=child_context.keywords_found)

    # =========================================================================
    # HEADER CASES
    # =========================================================================

    def _transform_payroll(
        self,
        node: BranchNode,
        context: TransformContext,
    ) -> tuple[list[ItemT], TransformContext]:
        """Payroll headers always print, with a zero amount if needed."""
        amount = self.resolve(node.row)
        if amount is None:
            amount = self.default_amount()

        items = [self.make_item(node.label, amount, context)]
        children, context = self._transform_children(node, context)
        return items + children, context

    def _transform_income(
        self,
        node: BranchNode,
        context: TransformContext,
    ) -> tuple[list[ItemT], TransformContext]:
        """
        Keyword bucketing for Income header rows.

        1. Both keywords already seen -> plain header, no expansion
        2. Header names a keyword     -> single line, no expansion
        3. A descendant names one     -> header line + children
        4. No keyword anywhere        -> plain header, no expansion
        """
        if context.keywords_found.both:
            return self._transform_income_plain(node, context), context

        header_keywords = detect_keywords(node.label)
        if header_keywords.any:
            context = context.with_keywords(header_keywords)
            amount = self.resolve(node.row)
            if amount is None:
                return [], context
            return [self.make_item(node.label, amount, context)], context

        nested_keywords = search_subtree(node.children)
        if nested_keywords.any:
            context = context.with_keywords(nested_keywords)
            amount = self.resolve(node.row)
            if amount is not None:
                children, context = self._transform_children(node, context)
                return [self.make_item(node.label, amount, context)] + children, context
            if self.has_inline_value(node.row):
                return self._transform_children(node, context)
            return [], context

        return self._transform_income_plain(node, context), context

    def _transform_income_plain(
        self,
        node: BranchNode,
        context: TransformContext,
    ) -> list[ItemT]:
        label = node.label or node.summary_label
        amount = self.resolve(node.row)
        if not label or amount is None:
            return []
        return [self.make_item(label, amount, context)]

    def _transform_regular(
        self,
        node: BranchNode,
        context: TransformContext,
    ) -> list[ItemT]:
        amount = self.resolve(node.row)
        if amount is None:
            return []

        if node.label:
            return [self.make_item(node.label, amount, context)]

        # The summary label can name a line the header label did not
        if node.summary_label:
            if should_exclude(node.summary_label, context.expense_section_header):
                return []
            return [self.make_item(node.summary_label, amount, context)]

        return []


class PeriodItemTransformer(ItemTransformer[ReportItem, str]):
    """One value per line."""

    def resolve(self, row: RawRow) -> Optional[str]:
        preferred = preferred_value(row)
        if preferred.source == "default":
            return None
        return preferred.value

    def default_amount(self) -> str:
        return DEFAULT_VALUE

    def has_inline_value(self, row: RawRow) -> bool:
        return has_header_value(row)

    def leaf_amount(self, row: RawRow) -> str:
        return data_value(row)

    def make_item(self, label: str, amount: str, context: TransformContext) -> ReportItem:
        return ReportItem(label=label, value=amount, indent=context.indent)


class MonthlyItemTransformer(ItemTransformer[MonthlyItem, MonthlyAmount]):
    """
    Per-month values plus a total per line.

    Every item carries exactly `num_months` values.
    """

    def __init__(self, num_months: int):
        if num_months < 1:
            raise ValueError("num_months must be at least 1")
        self.num_months = num_months

    def resolve(self, row: RawRow) -> Optional[MonthlyAmount]:
        cells = summary_cells(row)
        if cells is not None and is_valid_value(total_value(cells)):
            return monthly_amount(cells, self.num_months)

        header_cells = row.header.col_data if row.header is not None else None
        if header_cells is not None and is_valid_value(total_value(header_cells)):
            return monthly_amount(header_cells, self.num_months)

        return None

    def default_amount(self) -> MonthlyAmount:
        return zero_amount(self.num_months)

    def has_inline_value(self, row: RawRow) -> bool:
        return has_header_monthly_value(row, self.num_months)

    def leaf_amount(self, row: RawRow) -> MonthlyAmount:
        cells = row.col_data or []
        values = [cell.value or MISSING_MONTH_VALUE for cell in cells[1:self.num_months + 1]]
        values.extend([MISSING_MONTH_VALUE] * (self.num_months - len(values)))
        return MonthlyAmount(values=values, total=total_value(cells))

    def make_item(
        self,
        label: str,
        amount: MonthlyAmount,
        context: TransformContext,
    ) -> MonthlyItem:
        return MonthlyItem(
            label=label,
            values=list(amount.values),
            total=amount.total,
            indent=context.indent,
        )
