"""
Trade domain model.
Append-only record of an executed ledger order.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any

from strategy_backtester.core.enums import TradeSide
from strategy_backtester.core.exceptions.backtest import ValidationError


@dataclass(frozen=True)
class Trade:
    """Represents an executed trade.

    Buys carry ``cost``; sells carry ``proceeds`` and ``profit_loss``.
    """

    symbol: str
    side: TradeSide
    quantity: float
    price: float
    date: date
    cost: float | None = None
    proceeds: float | None = None
    profit_loss: float | None = None

    def __post_init__(self) -> None:
        """Validate trade data after initialization."""
        if self.quantity <= 0:
            raise ValidationError(f"Quantity must be positive, got {self.quantity}")
        if self.price <= 0:
            raise ValidationError(f"Price must be positive, got {self.price}")
        if self.side == TradeSide.BUY and self.cost is None:
            raise ValidationError("Buy trades must record cost")
        if self.side == TradeSide.SELL and (self.proceeds is None or self.profit_loss is None):
            raise ValidationError("Sell trades must record proceeds and profit_loss")

    def is_winning(self) -> bool:
        """Check if this is a sell that realized a profit."""
        return self.side == TradeSide.SELL and (self.profit_loss or 0.0) > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert trade to dictionary."""
        data: dict[str, Any] = {
            "symbol": self.symbol,
            "side": self.side.value,
            "quantity": self.quantity,
            "price": self.price,
            "date": self.date.isoformat(),
        }
        if self.side == TradeSide.BUY:
            data["cost"] = self.cost
        else:
            data["proceeds"] = self.proceeds
            data["profit_loss"] = self.profit_loss
        return data
