"""
Pydantic schemas for decision oracle responses.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from strategy_backtester.core.enums import DecisionAction
from strategy_backtester.core.models.decision import Decision


class OracleDecision(BaseModel):
    """One trading decision item returned by the oracle."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    symbol: str = Field(..., min_length=1, description="Ticker symbol")
    action: DecisionAction = Field(..., description="buy, sell or hold (any case)")
    quantity: float | None = Field(default=None, ge=0, description="Shares to trade")
    reasoning: str | None = Field(default=None, description="Brief explanation")

    @field_validator("action", mode="before")
    @classmethod
    def normalize_action(cls, v: object) -> object:
        """Accept actions in any letter case."""
        if isinstance(v, str):
            return DecisionAction.from_string(v)
        return v

    @model_validator(mode="after")
    def require_quantity_for_trades(self) -> "OracleDecision":
        """Buy and sell decisions must carry a numeric quantity."""
        if self.action.is_trade and self.quantity is None:
            raise ValueError(f"Quantity must be a number for {self.action.value} action")
        return self

    def to_decision(self) -> Decision:
        """Convert to the domain decision."""
        return Decision(
            symbol=self.symbol,
            action=self.action,
            quantity=self.quantity,
            reasoning=self.reasoning,
            indicator="LLM Analysis",
        )
