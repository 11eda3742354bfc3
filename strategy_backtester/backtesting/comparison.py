"""
Backtest comparison.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from strategy_backtester.core.exceptions.backtest import EmptyInputError
from strategy_backtester.core.models.backtest import BacktestResult, PerformanceMetrics


@dataclass(frozen=True)
class ComparisonEntry:
    """Summary row for one compared result."""

    name: str
    strategy: str
    metrics: PerformanceMetrics

    def to_dict(self) -> dict[str, Any]:
        """Convert entry to dictionary."""
        return {"name": self.name, "strategy": self.strategy, "metrics": self.metrics.to_dict()}


@dataclass(frozen=True)
class BacktestComparison:
    """Ranking of several results; each field is an index into ``entries``."""

    entries: list[ComparisonEntry]
    best_performer: int
    worst_performer: int
    lowest_drawdown: int
    highest_sharpe: int

    def to_dict(self) -> dict[str, Any]:
        """Convert comparison to dictionary."""
        return {
            "entries": [entry.to_dict() for entry in self.entries],
            "best_performer": self.best_performer,
            "worst_performer": self.worst_performer,
            "lowest_drawdown": self.lowest_drawdown,
            "highest_sharpe": self.highest_sharpe,
        }


def compare_backtests(results: Sequence[BacktestResult]) -> BacktestComparison:
    """
    Rank completed backtests.

    Ties keep the first result seen.

    Raises:
        EmptyInputError: If no results are given
    """
    if not results:
        raise EmptyInputError("backtest comparison")

    entries = [
        ComparisonEntry(
            name=result.config.name,
            strategy=result.config.strategy.display_name,
            metrics=result.metrics,
        )
        for result in results
    ]
    metrics = [entry.metrics for entry in entries]

    return BacktestComparison(
        entries=entries,
        best_performer=_first_extreme([m.total_return for m in metrics], highest=True),
        worst_performer=_first_extreme([m.total_return for m in metrics], highest=False),
        lowest_drawdown=_first_extreme([m.max_drawdown for m in metrics], highest=False),
        highest_sharpe=_first_extreme([m.sharpe_ratio for m in metrics], highest=True),
    )


def _first_extreme(values: Sequence[float], highest: bool) -> int:
    best_index = 0
    best_value = -math.inf if highest else math.inf
    for index, value in enumerate(values):
        if (value > best_value) if highest else (value < best_value):
            best_index, best_value = index, value
    return best_index
