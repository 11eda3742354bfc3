"""
Shared base for indicator-driven decision sources.
"""

from abc import abstractmethod
from collections.abc import Sequence

from loguru import logger

from strategy_backtester.core.constants import INSUFFICIENT_DATA_REASON
from strategy_backtester.core.interfaces.strategy import DecisionContext, IDecisionSource
from strategy_backtester.core.models.bar import Bar
from strategy_backtester.core.models.decision import Decision


class IndicatorDecisionSource(IDecisionSource):
    """
    Decision source computed synchronously from technical indicators.

    Evaluates every configured symbol that has a bar on the current
    date, over the trailing ``window`` bars of that symbol's history up
    to and including the date.
    """

    #: Minimum number of bars needed before a signal can be computed
    min_bars: int = 1
    #: Trailing bars a signal depends on, None for the full history
    window: int | None = None

    async def decide(self, context: DecisionContext) -> list[Decision]:
        """Evaluate each symbol present in the date's market data."""
        return self.evaluate(context)

    def evaluate(self, context: DecisionContext) -> list[Decision]:
        """Synchronous form of ``decide``."""
        decisions = []
        for symbol in context.symbols:
            if symbol not in context.market_data:
                continue
            bars = context.history.get(symbol, ())
            if len(bars) < self.min_bars:
                logger.debug(
                    f"{type(self).__name__}: {symbol} has {len(bars)} bars, needs {self.min_bars}"
                )
                decisions.append(Decision.hold(symbol, reasoning=INSUFFICIENT_DATA_REASON))
                continue
            if self.window is not None:
                bars = bars[-self.window :]
            decisions.append(self.evaluate_symbol(symbol, bars))
        return decisions

    @abstractmethod
    def evaluate_symbol(self, symbol: str, bars: Sequence[Bar]) -> Decision:
        """Produce a decision for one symbol from its bar history."""
        pass
