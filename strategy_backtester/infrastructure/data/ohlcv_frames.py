"""
Conversions between OHLCV DataFrames and Bar lists.
"""

from collections.abc import Sequence
from datetime import date, datetime

import pandas as pd

from strategy_backtester.core.exceptions.backtest import ValidationError
from strategy_backtester.core.models.bar import Bar
from strategy_backtester.core.utils.dates import to_utc_date

from .ohlcv_validator import OHLCV_COLUMNS


def normalize_timestamps(data: pd.DataFrame) -> pd.DataFrame:
    """
    Return a copy whose ``timestamp`` column is timezone-aware UTC.

    Integer timestamps are read as epoch milliseconds; anything else is
    parsed by pandas. Rows are sorted ascending by timestamp.
    """
    if "timestamp" not in data.columns:
        raise ValidationError("Missing required columns: ['timestamp']")

    result = data.copy()
    column = result["timestamp"]
    if pd.api.types.is_numeric_dtype(column):
        result["timestamp"] = pd.to_datetime(column, unit="ms", utc=True)
    else:
        result["timestamp"] = pd.to_datetime(column, utc=True)

    return result.sort_values("timestamp").reset_index(drop=True)


def filter_by_calendar_range(data: pd.DataFrame, start: date, end: date) -> pd.DataFrame:
    """Keep rows whose UTC calendar day lies in ``[start, end]``."""
    if data.empty:
        return data

    days = data["timestamp"].dt.date
    mask = (days >= _as_date(start)) & (days <= _as_date(end))
    return data[mask].reset_index(drop=True)


def frame_to_bars(data: pd.DataFrame) -> list[Bar]:
    """Convert a normalized OHLCV frame to bars, oldest first."""
    if data.empty:
        return []
    records = data[OHLCV_COLUMNS].to_dict("records")
    return [Bar.from_record(record) for record in records]


def bars_to_frame(bars: Sequence[Bar]) -> pd.DataFrame:
    """Convert bars to an OHLCV frame with a UTC timestamp column."""
    if not bars:
        return pd.DataFrame(columns=OHLCV_COLUMNS)
    frame = pd.DataFrame(
        [
            {
                "timestamp": bar.timestamp,
                "open": bar.open,
                "high": bar.high,
                "low": bar.low,
                "close": bar.close,
                "volume": bar.volume,
            }
            for bar in bars
        ]
    )
    return normalize_timestamps(frame)


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return to_utc_date(value)
    return value
