"""
Data access interfaces.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import date

import pandas as pd

from strategy_backtester.core.enums import Timeframe
from strategy_backtester.core.models.bar import BarsBySymbol


class IMarketDataProvider(ABC):
    """Abstract interface for historical market data."""

    @abstractmethod
    async def get_historical_bars(
        self, symbols: Sequence[str], timeframe: Timeframe, start: date, end: date
    ) -> BarsBySymbol:
        """Load bars per symbol, each list ascending by timestamp.

        Raises:
            DataFetchError: If data cannot be obtained
        """
        pass


class IDataValidator(ABC):
    """Abstract interface for OHLCV frame validation."""

    @abstractmethod
    def validate_data(self, data: pd.DataFrame) -> bool:
        """Validate data integrity."""
        pass
