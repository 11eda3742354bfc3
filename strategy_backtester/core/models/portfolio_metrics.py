"""
Portfolio valuation.

This module handles mark-to-market equity of a portfolio state.
"""

from collections.abc import Mapping

from .portfolio_core import PortfolioState


class PortfolioMetrics:
    """Read-only valuation of a portfolio state."""

    def __init__(self, state: PortfolioState) -> None:
        """Initialize with portfolio state.

        Args:
            state: The portfolio state to value
        """
        self.state = state

    def mark_to_market(self, current_prices: Mapping[str, float]) -> float:
        """Calculate equity as cash plus the value of every position.

        Symbols without a current price are valued at their entry price.

        Args:
            current_prices: Latest close price per symbol

        Returns:
            Total equity
        """
        equity = self.state.cash
        for symbol, position in self.state.positions.items():
            price = current_prices.get(symbol, position.entry_price)
            equity += position.market_value(price)
        return equity
