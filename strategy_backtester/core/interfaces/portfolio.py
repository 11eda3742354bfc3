"""
Portfolio ledger interface.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import date

from strategy_backtester.core.models.trade import Trade


class IPortfolio(ABC):
    """Abstract interface for the portfolio ledger."""

    @abstractmethod
    def buy(self, symbol: str, quantity: float, price: float, trade_date: date) -> Trade:
        """Execute a buy order."""
        pass

    @abstractmethod
    def sell(self, symbol: str, quantity: float, price: float, trade_date: date) -> Trade:
        """Execute a sell order."""
        pass

    @abstractmethod
    def mark_to_market(self, current_prices: Mapping[str, float]) -> float:
        """Calculate total equity at the given prices."""
        pass
