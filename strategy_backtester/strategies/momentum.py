"""
Momentum strategy: RSI overbought/oversold.
"""

from collections.abc import Sequence

from strategy_backtester.core.constants import INSUFFICIENT_DATA_REASON
from strategy_backtester.core.enums import DecisionAction
from strategy_backtester.core.models.bar import Bar
from strategy_backtester.core.models.decision import Decision
from strategy_backtester.core.models.strategy_config import MomentumParameters
from strategy_backtester.infrastructure.data.technical_indicators import rsi

from .base import IndicatorDecisionSource


class MomentumDecisionSource(IndicatorDecisionSource):
    """Buys when RSI is oversold and sells when it is overbought."""

    indicator = "RSI"

    def __init__(self, parameters: MomentumParameters | None = None):
        self.parameters = parameters or MomentumParameters()
        # Wilder smoothing depends on every earlier change, so no window
        self.min_bars = self.parameters.lookback_period + 1

    def evaluate_symbol(self, symbol: str, bars: Sequence[Bar]) -> Decision:
        values = rsi(bars, self.parameters.lookback_period)
        if not values:
            return Decision.hold(symbol, reasoning=INSUFFICIENT_DATA_REASON)

        current_rsi = values[-1]
        action = decide_momentum_action(
            current_rsi,
            self.parameters.oversold_threshold,
            self.parameters.overbought_threshold,
        )
        return Decision(
            symbol=symbol,
            action=action,
            quantity=self.parameters.quantity if action.is_trade else None,
            reasoning=f"RSI {current_rsi:.2f}",
            indicator=self.indicator,
            value=current_rsi,
        )


def decide_momentum_action(
    current_rsi: float, oversold_threshold: float, overbought_threshold: float
) -> DecisionAction:
    """Map an RSI reading to an action."""
    if current_rsi <= oversold_threshold:
        return DecisionAction.BUY
    elif current_rsi >= overbought_threshold:
        return DecisionAction.SELL
    return DecisionAction.HOLD
