"""
Bar domain model.
One OHLCV sample for a symbol over a fixed interval.
"""

import numbers
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import pandas as pd

from strategy_backtester.core.exceptions.backtest import ValidationError
from strategy_backtester.core.utils.dates import ensure_utc


@dataclass(frozen=True)
class Bar:
    """Immutable OHLCV bar. Timestamps are normalized to aware UTC."""

    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float

    def __post_init__(self) -> None:
        """Validate bar data after initialization."""
        object.__setattr__(self, "timestamp", ensure_utc(self.timestamp))
        if self.close <= 0:
            raise ValidationError(f"Close price must be positive, got {self.close}")
        if self.volume < 0:
            raise ValidationError(f"Volume must be non-negative, got {self.volume}")

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Bar":
        """Create a bar from a mapping with OHLCV keys.

        The timestamp may be a datetime, an ISO-8601 string or epoch
        milliseconds.
        """
        try:
            timestamp = record["timestamp"]
            if isinstance(timestamp, pd.Timestamp):
                timestamp = timestamp.to_pydatetime()
            elif not isinstance(timestamp, datetime):
                unit = "ms" if isinstance(timestamp, numbers.Number) else None
                timestamp = pd.to_datetime(timestamp, unit=unit, utc=True).to_pydatetime()
            return cls(
                timestamp=timestamp,
                open=float(record["open"]),
                high=float(record["high"]),
                low=float(record["low"]),
                close=float(record["close"]),
                volume=float(record["volume"]),
            )
        except KeyError as e:
            raise ValidationError(f"Bar record missing field: {e.args[0]}") from e
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid bar record: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """Convert bar to dictionary."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }


# Bars grouped by symbol, each list ordered ascending by timestamp
BarsBySymbol = dict[str, list[Bar]]
