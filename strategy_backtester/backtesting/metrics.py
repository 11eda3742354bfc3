"""
Performance metrics for a completed backtest.

All functions are pure: they take the finished trade log and equity
curve and never mutate them. Numeric degeneracies resolve to defined
values so no public metric is NaN or infinite.
"""

import math
from collections.abc import Sequence
from datetime import date

import numpy as np
import pandas as pd

from strategy_backtester.core.constants import DAYS_PER_YEAR, TRADING_DAYS_PER_YEAR
from strategy_backtester.core.models.backtest import DailyEquitySample, PerformanceMetrics
from strategy_backtester.core.models.trade import Trade


def calculate_metrics(
    daily_equity: Sequence[DailyEquitySample], trades: Sequence[Trade]
) -> PerformanceMetrics:
    """
    Compute the standard metrics record.

    Args:
        daily_equity: Equity curve in walk order
        trades: Trade log in walk order

    Returns:
        PerformanceMetrics; all zeros when either input is empty
    """
    if not daily_equity or not trades:
        return PerformanceMetrics.zero(trade_count=len(trades))

    equity = [sample.equity for sample in daily_equity]
    total = total_return(equity)
    return PerformanceMetrics(
        total_return=total,
        annualized_return=annualized_return(
            total, daily_equity[0].date, daily_equity[-1].date
        ),
        max_drawdown=max_drawdown(equity),
        sharpe_ratio=sharpe_ratio(daily_returns(equity)),
        win_rate=win_rate(trades),
        trade_count=len(trades),
    )


def total_return(equity: Sequence[float]) -> float:
    """Fractional change from the first to the last equity value."""
    if not equity or equity[0] <= 0:
        return 0.0
    return (equity[-1] - equity[0]) / equity[0]


def annualized_return(total: float, first_date: date, last_date: date) -> float:
    """Compound ``total`` over the elapsed fraction of a 365-day year.

    A zero-length span (or an overflowing power) returns ``total``
    unannualized.
    """
    year_fraction = (last_date - first_date).days / DAYS_PER_YEAR
    if year_fraction <= 0:
        return total
    try:
        value = math.pow(1 + total, 1 / year_fraction) - 1
    except (OverflowError, ValueError):
        return total
    return value if math.isfinite(value) else total


def max_drawdown(equity: Sequence[float]) -> float:
    """Largest fractional decline from a running peak."""
    if not equity:
        return 0.0

    worst = 0.0
    peak = equity[0]
    for value in equity:
        if value > peak:
            peak = value
        elif peak > 0:
            worst = max(worst, (peak - value) / peak)
    return worst


def daily_returns(equity: Sequence[float]) -> list[float]:
    """Step returns between consecutive samples, skipping zero bases."""
    series = pd.Series(equity, dtype="float64")
    previous = series.shift(1)
    returns = (series - previous) / previous
    valid = previous.notna() & (previous != 0)
    return returns[valid].tolist()


def sharpe_ratio(returns: Sequence[float]) -> float:
    """Annualized mean/stdev of daily returns (population stdev, zero risk-free rate)."""
    if len(returns) == 0:
        return 0.0

    values = np.asarray(returns, dtype=float)
    std = float(values.std(ddof=0))
    if std == 0 or not math.isfinite(std):
        return 0.0
    return float(values.mean() / std * math.sqrt(TRADING_DAYS_PER_YEAR))


def win_rate(trades: Sequence[Trade]) -> float:
    """Profitable sells over ALL trades, buys included in the denominator."""
    if not trades:
        return 0.0
    winners = sum(1 for trade in trades if trade.is_winning())
    return winners / len(trades)
