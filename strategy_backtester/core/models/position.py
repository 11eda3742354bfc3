"""
Position domain model.
Long-only holding with quantity-weighted average cost basis.
"""

from dataclasses import dataclass

from strategy_backtester.core.exceptions.backtest import ValidationError


@dataclass
class Position:
    """Represents an open holding in one symbol.

    A position only exists while its quantity is positive; the ledger
    removes it the moment it is fully sold.
    """

    symbol: str
    quantity: float
    entry_price: float

    def __post_init__(self) -> None:
        """Validate position data after initialization."""
        if self.quantity <= 0:
            raise ValidationError(f"Position quantity must be positive, got {self.quantity}")
        if self.entry_price <= 0:
            raise ValidationError(f"Entry price must be positive, got {self.entry_price}")

    def market_value(self, current_price: float) -> float:
        """Calculate position value at the given price."""
        return self.quantity * current_price

    def cost_basis(self, quantity: float | None = None) -> float:
        """Calculate cost basis of the whole position or a part of it."""
        if quantity is None:
            quantity = self.quantity
        return quantity * self.entry_price

    def copy(self) -> "Position":
        """Return an independent copy of this position."""
        return Position(symbol=self.symbol, quantity=self.quantity, entry_price=self.entry_price)

    def to_dict(self) -> dict[str, float | str]:
        """Convert position to dictionary."""
        return {
            "symbol": self.symbol,
            "quantity": self.quantity,
            "entry_price": self.entry_price,
        }
