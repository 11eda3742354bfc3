"""
Bar timeframe enumerations.

Values double as the directory names of per-timeframe CSV data.
"""

from enum import StrEnum


class Timeframe(StrEnum):
    """Bar intervals offered by the market-data broker."""

    M1 = "1m"
    M5 = "5m"
    M15 = "15m"
    H1 = "1h"
    D1 = "1d"
    W1 = "1w"

    @classmethod
    def from_string(cls, value: str) -> "Timeframe":
        """
        Parse a timeframe in short ("1D") or broker ("1Day") notation.

        Raises:
            ValueError: If timeframe is not supported
        """
        key = value.strip().lower()
        try:
            return cls(_BROKER_ALIASES.get(key, key))
        except ValueError:
            raise ValueError(
                f"Unsupported timeframe: {value}. "
                f"Supported timeframes: {', '.join(tf.value for tf in cls)}"
            ) from None


_BROKER_ALIASES = {
    "1min": "1m",
    "5min": "5m",
    "15min": "15m",
    "1hour": "1h",
    "1day": "1d",
    "1week": "1w",
}
