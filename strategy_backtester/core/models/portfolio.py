"""
Main Portfolio class - the ledger for one backtest run.

This module provides the main Portfolio interface by composing the focused
components: state, trading operations and valuation.
"""

from collections.abc import Mapping
from datetime import date

from strategy_backtester.core.interfaces.portfolio import IPortfolio
from strategy_backtester.core.utils.decorators import log_trades, validate_inputs

from .portfolio_core import PortfolioState
from .portfolio_metrics import PortfolioMetrics
from .portfolio_trading import PortfolioTrading
from .position import Position
from .trade import Trade


class Portfolio(IPortfolio):
    """Portfolio ledger.

    Orchestrates ledger operations by composing focused components:
    - PortfolioState: Cash and positions
    - PortfolioTrading: Buy/sell operations
    - PortfolioMetrics: Mark-to-market valuation
    """

    def __init__(self, state: PortfolioState) -> None:
        self._state = state
        self._trading = PortfolioTrading(state)
        self._metrics = PortfolioMetrics(state)

    @classmethod
    def with_capital(cls, initial_capital: float) -> "Portfolio":
        """Create a ledger holding only cash."""
        return cls(PortfolioState.with_capital(initial_capital))

    @property
    def cash(self) -> float:
        """Get current cash."""
        return self._state.cash

    @property
    def initial_capital(self) -> float:
        """Get starting cash."""
        return self._state.initial_capital

    @property
    def positions(self) -> Mapping[str, Position]:
        """Get a read-only view of open positions."""
        return dict(self._state.positions)

    @log_trades
    @validate_inputs
    def buy(self, symbol: str, quantity: float, price: float, trade_date: date) -> Trade:
        """Execute a buy order."""
        return self._trading.buy(symbol, quantity, price, trade_date)

    @log_trades
    @validate_inputs
    def sell(self, symbol: str, quantity: float, price: float, trade_date: date) -> Trade:
        """Execute a sell order."""
        return self._trading.sell(symbol, quantity, price, trade_date)

    def mark_to_market(self, current_prices: Mapping[str, float]) -> float:
        """Calculate total equity at the given prices."""
        return self._metrics.mark_to_market(current_prices)

    def get_position_quantity(self, symbol: str) -> float:
        """Get current quantity held for symbol, 0 if none."""
        position = self._state.positions.get(symbol)
        return position.quantity if position else 0.0

    def snapshot(self) -> PortfolioState:
        """Return an independent copy of the current state."""
        return self._state.snapshot()
