"""
OHLCV data validation module.

Provides validation for OHLCV market data including structure,
data types, value ranges, and relationship validation.
"""

import pandas as pd
from loguru import logger

from strategy_backtester.core.exceptions.backtest import ValidationError
from strategy_backtester.core.interfaces.data import IDataValidator

OHLCV_COLUMNS = ["timestamp", "open", "high", "low", "close", "volume"]
PRICE_COLUMNS = ["open", "high", "low", "close"]


class OHLCVValidator(IDataValidator):
    """
    OHLCV data validator.

    Features:
    - Data structure validation (required columns, duplicates)
    - Data type validation for numeric columns
    - Value range validation (positive prices, non-negative volume)
    - OHLC relationship validation
    - Data quality checks with warnings
    """

    def validate_data(self, data: pd.DataFrame) -> bool:
        """
        Validate OHLCV data integrity.

        Args:
            data: DataFrame with OHLCV data

        Returns:
            True if data is valid

        Raises:
            ValidationError: If data has integrity issues
        """
        if data.empty:
            return True  # Empty data is valid

        self._validate_data_structure(data)
        self._validate_data_types(data)
        self._validate_data_values(data)
        self._validate_ohlc_relationships(data)
        self._validate_data_quality(data)

        return True

    def _validate_data_structure(self, data: pd.DataFrame) -> None:
        """Validate basic data structure requirements."""
        missing_columns = set(OHLCV_COLUMNS) - set(data.columns)
        if missing_columns:
            raise ValidationError(f"Missing required columns: {sorted(missing_columns)}")

        if data["timestamp"].duplicated().any():
            raise ValidationError("Duplicate timestamps found in data")

    def _validate_data_types(self, data: pd.DataFrame) -> None:
        """Validate data types for numeric columns."""
        for col in PRICE_COLUMNS + ["volume"]:
            if not pd.api.types.is_numeric_dtype(data[col]):
                raise ValidationError(f"Column {col} must be numeric")

        for col in OHLCV_COLUMNS:
            if data[col].isna().any():
                raise ValidationError(f"Column {col} contains NaN values")

    def _validate_data_values(self, data: pd.DataFrame) -> None:
        """Validate value ranges for prices and volume."""
        for col in PRICE_COLUMNS:
            if (data[col] <= 0).any():
                raise ValidationError(f"Column {col} contains non-positive values")

        if (data["volume"] < 0).any():
            raise ValidationError("Volume column contains negative values")

    def _validate_ohlc_relationships(self, data: pd.DataFrame) -> None:
        """Validate OHLC price relationships."""
        invalid_ohlc = (
            (data["high"] < data["low"])
            | (data["high"] < data["open"])
            | (data["high"] < data["close"])
            | (data["low"] > data["open"])
            | (data["low"] > data["close"])
        )

        if invalid_ohlc.any():
            invalid_count = int(invalid_ohlc.sum())
            raise ValidationError(f"Invalid OHLC relationships found in {invalid_count} rows")

    def _validate_data_quality(self, data: pd.DataFrame) -> None:
        """Warn about anomalies that do not invalidate the data."""
        bar_range = (data["high"] - data["low"]) / data["low"]
        extreme_moves = bar_range > 0.5  # More than 50% range within one bar

        if extreme_moves.any():
            logger.warning(
                f"Found {int(extreme_moves.sum())} periods with extreme price movements (>50%)"
            )

        if not data["timestamp"].is_monotonic_increasing:
            logger.warning("Timestamps are not in ascending order")
