"""
Portfolio trading operations.

This module handles buy/sell operations and trade execution
following the Single Responsibility Principle for trading logic.
"""

from datetime import date

from .portfolio_core import PortfolioState
from .portfolio_helpers import OrderValidator, PositionManager, TradeRecorder
from .trade import Trade


class PortfolioTrading:
    """Portfolio trading operations.

    Handles buy/sell operations with weighted-average cost accounting.
    Every failure is raised before any mutation, so a rejected order
    leaves the state untouched.
    """

    def __init__(self, state: PortfolioState) -> None:
        """Initialize with portfolio state.

        Args:
            state: The portfolio state to execute trades against
        """
        self.state = state

    def buy(self, symbol: str, quantity: float, price: float, trade_date: date) -> Trade:
        """Execute a buy order.

        Args:
            symbol: Ticker symbol
            quantity: Number of shares to buy
            price: Price per share
            trade_date: Simulated date of the order

        Returns:
            The executed buy trade

        Raises:
            InsufficientFundsError: If cost exceeds available cash
        """
        cost = quantity * price
        OrderValidator.check_sufficient_funds(
            cost, self.state.cash, f"buying {quantity} shares of {symbol} at {price}"
        )

        self.state.cash -= cost

        if self.state.has_position(symbol):
            PositionManager.add_to_position(self.state.positions[symbol], quantity, price)
        else:
            self.state.add_position(PositionManager.create_position(symbol, quantity, price))

        return TradeRecorder.create_buy_trade(symbol, quantity, price, trade_date, cost)

    def sell(self, symbol: str, quantity: float, price: float, trade_date: date) -> Trade:
        """Execute a sell order.

        Args:
            symbol: Ticker symbol
            quantity: Number of shares to sell
            price: Price per share
            trade_date: Simulated date of the order

        Returns:
            The executed sell trade with realized profit/loss

        Raises:
            PositionNotFoundError: If no position is open for symbol
            InsufficientSharesError: If quantity exceeds the holding
        """
        position = self.state.get_position(symbol)
        OrderValidator.check_sufficient_shares(position, quantity)

        proceeds = quantity * price
        profit_loss = proceeds - position.cost_basis(quantity)

        self.state.cash += proceeds
        if PositionManager.reduce_position(position, quantity):
            self.state.remove_position(symbol)

        return TradeRecorder.create_sell_trade(
            symbol, quantity, price, trade_date, proceeds, profit_loss
        )
