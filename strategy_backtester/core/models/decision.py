"""
Decision domain model.
Per-symbol instruction produced by a decision source for one simulated date.
"""

from dataclasses import dataclass
from typing import Any

from strategy_backtester.core.enums import DecisionAction


@dataclass(frozen=True)
class Decision:
    """A strategy decision for one symbol.

    ``quantity`` may be omitted for sells, meaning the whole holding.
    ``indicator`` and ``value`` carry the signal that produced the decision.
    """

    symbol: str
    action: DecisionAction
    quantity: float | None = None
    reasoning: str | None = None
    indicator: str | None = None
    value: float | None = None

    @classmethod
    def hold(cls, symbol: str, reasoning: str | None = None, **signal: Any) -> "Decision":
        """Create a hold decision."""
        return cls(symbol=symbol, action=DecisionAction.HOLD, reasoning=reasoning, **signal)

    def to_dict(self) -> dict[str, Any]:
        """Convert decision to dictionary."""
        return {
            "symbol": self.symbol,
            "action": self.action.value,
            "quantity": self.quantity,
            "reasoning": self.reasoning,
            "indicator": self.indicator,
            "value": self.value,
        }
