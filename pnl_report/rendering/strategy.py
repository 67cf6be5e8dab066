"""
Rendering Strategy Interface

DESIGN DECISION: Period and monthly reports share one layout engine.
Each strategy receives a ReportRenderer (cursor + drawing helpers) by
construction of the render call and only decides geometry and order.
Both draw every section in the same fixed order:
section header -> column headers -> items -> section total.
"""

from abc import ABC, abstractmethod

from pnl_report.models.report import ReportMode, TargetPercentages
from pnl_report.rendering.engine import ReportRenderer


class RenderStrategy(ABC):
    """
    Draws a parsed report onto a renderer.

    Implementations keep per-render state (income denominators, column
    geometry) on the instance; use a fresh instance per report.
    """

    mode: ReportMode

    @abstractmethod
    def render(
        self,
        renderer: ReportRenderer,
        report,
        targets: TargetPercentages,
    ) -> None:
        """
        Draw the report body below the title block.

        Args:
            renderer: Drawing helpers positioned below the header
            report: The parsed report for this strategy's mode
            targets: Target percentages; unset fields print no annotation
        """
        pass
