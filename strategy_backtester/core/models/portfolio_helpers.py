"""Helper methods for Portfolio to reduce complexity."""

from datetime import date

from strategy_backtester.core.constants import POSITION_DUST_TOLERANCE
from strategy_backtester.core.enums import TradeSide
from strategy_backtester.core.exceptions.backtest import (
    InsufficientFundsError,
    InsufficientSharesError,
)

from .position import Position
from .trade import Trade


class OrderValidator:
    """Validates order preconditions against the current state."""

    @staticmethod
    def check_sufficient_funds(cost: float, available: float, operation: str) -> None:
        """Check if sufficient cash is available."""
        if cost > available:
            raise InsufficientFundsError(required=cost, available=available, operation=operation)

    @staticmethod
    def check_sufficient_shares(position: Position, quantity: float) -> None:
        """Check if the position holds enough shares to sell."""
        if quantity > position.quantity:
            raise InsufficientSharesError(
                symbol=position.symbol, requested=quantity, held=position.quantity
            )


class PositionManager:
    """Manages position lifecycle."""

    @staticmethod
    def create_position(symbol: str, quantity: float, price: float) -> Position:
        """Create a new position."""
        return Position(symbol=symbol, quantity=quantity, entry_price=price)

    @staticmethod
    def add_to_position(position: Position, quantity: float, price: float) -> None:
        """Increase a position, updating its weighted-average entry price."""
        total_quantity = position.quantity + quantity
        total_cost = position.cost_basis() + quantity * price
        position.entry_price = total_cost / total_quantity
        position.quantity = total_quantity

    @staticmethod
    def reduce_position(position: Position, quantity: float) -> bool:
        """Decrease a position. Entry price is unchanged by partial sells.

        Returns:
            True if the position is now fully closed
        """
        remaining = position.quantity - quantity
        if remaining <= POSITION_DUST_TOLERANCE:
            return True
        position.quantity = remaining
        return False


class TradeRecorder:
    """Creates trade records."""

    @staticmethod
    def create_buy_trade(
        symbol: str, quantity: float, price: float, trade_date: date, cost: float
    ) -> Trade:
        """Create a buy trade record."""
        return Trade(
            symbol=symbol,
            side=TradeSide.BUY,
            quantity=quantity,
            price=price,
            date=trade_date,
            cost=cost,
        )

    @staticmethod
    def create_sell_trade(
        symbol: str,
        quantity: float,
        price: float,
        trade_date: date,
        proceeds: float,
        profit_loss: float,
    ) -> Trade:
        """Create a sell trade record."""
        return Trade(
            symbol=symbol,
            side=TradeSide.SELL,
            quantity=quantity,
            price=price,
            date=trade_date,
            proceeds=proceeds,
            profit_loss=profit_loss,
        )
