"""
Portfolio core state management.

This module holds the explicit portfolio state value that the ledger
components operate on, following the Single Responsibility Principle
for state management.
"""

from dataclasses import dataclass, field
from typing import Any

from strategy_backtester.core.exceptions.backtest import PositionNotFoundError, ValidationError

from .position import Position


@dataclass
class PortfolioState:
    """Cash and open positions of one backtest run.

    Owned by a single ledger for the lifetime of a run and never shared
    between runs. Mutated only through the ledger components.
    """

    initial_capital: float
    cash: float
    positions: dict[str, Position] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate initial state."""
        if self.initial_capital <= 0:
            raise ValidationError(
                f"Initial capital must be positive, got {self.initial_capital}"
            )
        if self.cash < 0:
            raise ValidationError(f"Cash must be non-negative, got {self.cash}")

    @classmethod
    def with_capital(cls, initial_capital: float) -> "PortfolioState":
        """Create an all-cash state."""
        return cls(initial_capital=initial_capital, cash=initial_capital)

    def has_position(self, symbol: str) -> bool:
        """Check if an open position exists for symbol."""
        return symbol in self.positions

    def get_position(self, symbol: str) -> Position:
        """Return the open position for symbol.

        Raises:
            PositionNotFoundError: If no position is open
        """
        position = self.positions.get(symbol)
        if position is None:
            raise PositionNotFoundError(symbol)
        return position

    def add_position(self, position: Position) -> None:
        """Register a newly opened position."""
        if position.symbol in self.positions:
            raise ValidationError(f"Position already open for symbol: {position.symbol}")
        self.positions[position.symbol] = position

    def remove_position(self, symbol: str) -> Position:
        """Remove and return a position from the portfolio."""
        self.get_position(symbol)
        return self.positions.pop(symbol)

    def snapshot(self) -> "PortfolioState":
        """Return an independent copy of the state."""
        return PortfolioState(
            initial_capital=self.initial_capital,
            cash=self.cash,
            positions={symbol: position.copy() for symbol, position in self.positions.items()},
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert state to dictionary."""
        return {
            "initial_capital": self.initial_capital,
            "cash": self.cash,
            "positions": [position.to_dict() for position in self.positions.values()],
        }
