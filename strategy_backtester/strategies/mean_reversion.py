"""
Mean reversion strategy: z-score of price against its moving average.
"""

from collections.abc import Sequence

from strategy_backtester.core.constants import ZSCORE_STDEV_FLOOR
from strategy_backtester.core.enums import DecisionAction
from strategy_backtester.core.models.bar import Bar
from strategy_backtester.core.models.decision import Decision
from strategy_backtester.core.models.strategy_config import MeanReversionParameters
from strategy_backtester.infrastructure.data.technical_indicators import (
    closes,
    moving_average,
    standard_deviation,
)

from .base import IndicatorDecisionSource


class MeanReversionDecisionSource(IndicatorDecisionSource):
    """Buys far below the moving average and sells far above it."""

    indicator = "Z-Score"

    def __init__(self, parameters: MeanReversionParameters | None = None):
        self.parameters = parameters or MeanReversionParameters()
        self.min_bars = self.parameters.lookback_period
        self.window = self.min_bars

    def evaluate_symbol(self, symbol: str, bars: Sequence[Bar]) -> Decision:
        prices = closes(bars)
        period = self.parameters.lookback_period
        current_ma = moving_average(prices, period)[-1]
        current_stdev = standard_deviation(prices, period)[-1]

        if current_stdev <= ZSCORE_STDEV_FLOOR * abs(current_ma):
            # Flat window: rounding noise only, the z-score is undefined
            return Decision.hold(
                symbol, reasoning="Zero price variance", indicator=self.indicator, value=0.0
            )

        z_score = (prices[-1] - current_ma) / current_stdev
        action = decide_mean_reversion_action(z_score, self.parameters.deviation_threshold)
        return Decision(
            symbol=symbol,
            action=action,
            quantity=self.parameters.quantity if action.is_trade else None,
            reasoning=f"Z-score {z_score:.2f} vs MA {current_ma:.2f}",
            indicator=self.indicator,
            value=z_score,
        )


def decide_mean_reversion_action(z_score: float, deviation_threshold: float) -> DecisionAction:
    """Map a z-score to an action."""
    if z_score < -deviation_threshold:
        return DecisionAction.BUY
    elif z_score > deviation_threshold:
        return DecisionAction.SELL
    return DecisionAction.HOLD
