"""
Trend following strategy: moving average crossover.

Signals fire only on the bar where the short average crosses the long
one; a short average that simply stays above (or below) holds.
"""

from collections.abc import Sequence

from strategy_backtester.core.enums import DecisionAction
from strategy_backtester.core.models.bar import Bar
from strategy_backtester.core.models.decision import Decision
from strategy_backtester.core.models.strategy_config import TrendFollowingParameters
from strategy_backtester.infrastructure.data.technical_indicators import closes, moving_average

from .base import IndicatorDecisionSource


class TrendFollowingDecisionSource(IndicatorDecisionSource):
    """Buys on a golden cross and sells on a death cross."""

    indicator = "MA Crossover"

    def __init__(self, parameters: TrendFollowingParameters | None = None):
        self.parameters = parameters or TrendFollowingParameters()
        # Two long-MA values are needed to see a crossing
        self.min_bars = self.parameters.long_period + 1
        self.window = self.min_bars

    def evaluate_symbol(self, symbol: str, bars: Sequence[Bar]) -> Decision:
        prices = closes(bars)
        short_ma = moving_average(prices, self.parameters.short_period)
        long_ma = moving_average(prices, self.parameters.long_period)

        action = detect_crossover(
            previous_short=short_ma[-2],
            previous_long=long_ma[-2],
            current_short=short_ma[-1],
            current_long=long_ma[-1],
        )
        return Decision(
            symbol=symbol,
            action=action,
            quantity=self.parameters.quantity if action.is_trade else None,
            reasoning=f"Short MA {short_ma[-1]:.2f} / Long MA {long_ma[-1]:.2f}",
            indicator=self.indicator,
            value=short_ma[-1] - long_ma[-1],
        )


def detect_crossover(
    previous_short: float, previous_long: float, current_short: float, current_long: float
) -> DecisionAction:
    """Classify the step between two consecutive MA pairs."""
    if previous_short <= previous_long and current_short > current_long:
        return DecisionAction.BUY
    elif previous_short >= previous_long and current_short < current_long:
        return DecisionAction.SELL
    return DecisionAction.HOLD
