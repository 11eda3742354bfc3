"""
Technical Indicators.

This module provides the stateless indicator functions shared by the
technical strategies: trailing moving average, trailing population
standard deviation and Wilder-smoothed RSI.

All functions return one value per complete trailing window, so the
output is shorter than the input. An input too short for a single
window yields an empty list.
"""

from collections.abc import Sequence

import numpy as np
import pandas as pd
from numpy.lib.stride_tricks import sliding_window_view

from strategy_backtester.core.constants import RSI_LOSS_EPSILON
from strategy_backtester.core.models.bar import Bar
from strategy_backtester.core.utils.validation import validate_period


def _trailing_windows(prices: Sequence[float], period: int) -> np.ndarray:
    """Return a (n - period + 1, period) view of trailing windows."""
    validate_period(period)
    values = np.asarray(prices, dtype=float)
    if len(values) < period:
        return np.empty((0, period))
    return sliding_window_view(values, period)


def moving_average(prices: Sequence[float], period: int) -> list[float]:
    """
    Simple moving average over trailing windows.

    Args:
        prices: Price series, oldest first
        period: Window length

    Returns:
        Mean of ``prices[i - period + 1 .. i]`` for each ``i >= period - 1``
    """
    windows = _trailing_windows(prices, period)
    return windows.mean(axis=1).tolist()


def standard_deviation(prices: Sequence[float], period: int) -> list[float]:
    """
    Population standard deviation over trailing windows.

    Each window is measured against its own mean, not a global one.

    Args:
        prices: Price series, oldest first
        period: Window length

    Returns:
        One standard deviation per complete window
    """
    windows = _trailing_windows(prices, period)
    return windows.std(axis=1, ddof=0).tolist()


def relative_strength_index(prices: Sequence[float], period: int) -> list[float]:
    """
    Relative Strength Index with Wilder smoothing.

    Average gain/loss are seeded with the simple mean of the first
    ``period`` price changes and then rolled forward with
    ``avg = (avg * (period - 1) + value) / period``, which is an
    exponential average with ``alpha = 1 / period``. An average loss of
    exactly zero is replaced by a small epsilon.

    Args:
        prices: Price series, oldest first
        period: Lookback period

    Returns:
        RSI values in [0, 100]; empty when fewer than ``period + 1`` prices
    """
    validate_period(period)
    values = np.asarray(prices, dtype=float)
    if len(values) < period + 1:
        return []

    changes = np.diff(values)
    avg_gain = _wilder_average(np.where(changes > 0, changes, 0.0), period)
    avg_loss = _wilder_average(np.where(changes < 0, -changes, 0.0), period)

    rs = avg_gain / np.where(avg_loss == 0, RSI_LOSS_EPSILON, avg_loss)
    return np.clip(100.0 - 100.0 / (1.0 + rs), 0.0, 100.0).tolist()


def rsi(bars: Sequence[Bar], period: int) -> list[float]:
    """RSI over the close prices of a bar series."""
    return relative_strength_index(closes(bars), period)


def _wilder_average(values: np.ndarray, period: int) -> np.ndarray:
    seeded = np.concatenate(([values[:period].mean()], values[period:]))
    return pd.Series(seeded).ewm(alpha=1.0 / period, adjust=False).mean().to_numpy()


def closes(bars: Sequence[Bar]) -> list[float]:
    """Extract close prices from a bar series."""
    return [bar.close for bar in bars]
