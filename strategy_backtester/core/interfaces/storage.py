"""
Result persistence interface.
"""

from abc import ABC, abstractmethod

from strategy_backtester.core.models.backtest import (
    BacktestConfig,
    BacktestResult,
    StoredBacktest,
)


class IResultStore(ABC):
    """Abstract interface for the optional persistence sink."""

    @abstractmethod
    async def store_backtest_result(
        self, config: BacktestConfig, result: BacktestResult
    ) -> StoredBacktest:
        """Persist a completed result.

        Raises:
            PersistenceError: If the result cannot be stored
        """
        pass
