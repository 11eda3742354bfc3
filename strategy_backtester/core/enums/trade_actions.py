"""
Trade side and decision action enumerations.

This module defines the allowed ledger trade sides and strategy decisions.
"""

from enum import StrEnum


class TradeSide(StrEnum):
    """
    Allowed trade sides.

    Defines the direction of an executed ledger trade.
    """

    BUY = "buy"
    SELL = "sell"


class DecisionAction(StrEnum):
    """
    Allowed strategy decisions.

    Defines what a decision source asks the engine to do for one symbol.
    """

    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"

    @property
    def is_trade(self) -> bool:
        """Check if action results in a ledger order."""
        return self != self.HOLD

    @classmethod
    def from_string(cls, value: str) -> "DecisionAction":
        """
        Convert a case-insensitive string to DecisionAction.

        Args:
            value: Action name such as "BUY" or "hold"

        Returns:
            Corresponding DecisionAction

        Raises:
            ValueError: If action is not supported
        """
        value_lower = value.strip().lower()
        for action in cls:
            if action.value == value_lower:
                return action

        raise ValueError(
            f"Invalid action: {value}. "
            f"Supported actions: {', '.join([action.value for action in cls])}"
        )
