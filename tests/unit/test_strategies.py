"""
Unit tests for the technical decision sources and the factory.
"""

from collections.abc import Sequence
from datetime import UTC, date, datetime, timedelta

import pytest

from strategy_backtester.core.constants import INSUFFICIENT_DATA_REASON
from strategy_backtester.core.enums import DecisionAction
from strategy_backtester.core.exceptions.backtest import ConfigurationError
from strategy_backtester.core.interfaces.strategy import DecisionContext
from strategy_backtester.core.models.bar import Bar
from strategy_backtester.core.models.decision import Decision
from strategy_backtester.core.models.strategy_config import (
    LLMAssistedParameters,
    MeanReversionParameters,
    MomentumParameters,
    StrategyConfig,
    TrendFollowingParameters,
)
from strategy_backtester.strategies import (
    LLMAssistedDecisionSource,
    MeanReversionDecisionSource,
    MomentumDecisionSource,
    TrendFollowingDecisionSource,
    create_decision_source,
)
from strategy_backtester.strategies.mean_reversion import decide_mean_reversion_action
from strategy_backtester.strategies.momentum import decide_momentum_action
from strategy_backtester.strategies.trend_following import detect_crossover


def make_bars(prices: list[float]) -> list[Bar]:
    start = datetime(2024, 1, 1, tzinfo=UTC)
    return [
        Bar(start + timedelta(days=i), price, price, price, price, 100.0)
        for i, price in enumerate(prices)
    ]


def make_context(history: dict[str, list[Bar]]) -> DecisionContext:
    """Context for the last date of the given histories."""
    return DecisionContext(
        date=date(2024, 2, 1),
        symbols=list(history),
        market_data={symbol: bars[-1:] for symbol, bars in history.items()},
        history=history,
        positions={},
    )


class TestMomentumDecisionSource:
    """Tests for RSI momentum decisions."""

    def test_should_buy_when_oversold(self) -> None:
        """Test a steadily falling series produces a buy."""
        # Arrange
        source = MomentumDecisionSource(MomentumParameters(lookback_period=14))
        context = make_context({"AAPL": make_bars([100.0 - i for i in range(16)])})

        # Act
        decisions = source.evaluate(context)

        # Assert
        assert len(decisions) == 1
        decision = decisions[0]
        assert decision.action == DecisionAction.BUY
        assert decision.quantity == 1.0
        assert decision.indicator == "RSI"
        assert decision.value == pytest.approx(0.0)

    def test_should_sell_when_overbought(self) -> None:
        """Test a steadily rising series produces a sell."""
        source = MomentumDecisionSource()
        context = make_context({"AAPL": make_bars([100.0 + i for i in range(20)])})

        decisions = source.evaluate(context)

        assert decisions[0].action == DecisionAction.SELL

    def test_should_hold_with_insufficient_history(self) -> None:
        """Test fewer than lookback + 1 bars."""
        source = MomentumDecisionSource(MomentumParameters(lookback_period=14))
        context = make_context({"AAPL": make_bars([100.0] * 14)})

        decisions = source.evaluate(context)

        assert decisions[0].action == DecisionAction.HOLD
        assert decisions[0].reasoning == INSUFFICIENT_DATA_REASON

    @pytest.mark.parametrize(
        "value,expected",
        [
            (30.0, DecisionAction.BUY),
            (29.9, DecisionAction.BUY),
            (50.0, DecisionAction.HOLD),
            (70.0, DecisionAction.SELL),
        ],
    )
    def test_should_map_rsi_to_action_inclusively(
        self, value: float, expected: DecisionAction
    ) -> None:
        """Test thresholds are inclusive."""
        assert decide_momentum_action(value, 30.0, 70.0) == expected

    @pytest.mark.asyncio
    async def test_should_skip_symbols_without_bars_on_the_date(self) -> None:
        """Test that symbols absent from the date's data get no decision."""
        source = MomentumDecisionSource(MomentumParameters(lookback_period=2))
        bars = make_bars([1.0, 2.0, 3.0])
        context = DecisionContext(
            date=date(2024, 1, 3),
            symbols=["AAPL", "MSFT"],
            market_data={"AAPL": bars[-1:]},
            history={"AAPL": bars, "MSFT": bars},
            positions={},
        )

        decisions = await source.decide(context)

        assert [decision.symbol for decision in decisions] == ["AAPL"]


class TestMeanReversionDecisionSource:
    """Tests for z-score decisions."""

    def test_should_sell_far_above_average(self) -> None:
        """Test z-score of +2 against threshold 1."""
        # MA 12, stdev 4 -> z = 2
        source = MeanReversionDecisionSource(
            MeanReversionParameters(lookback_period=5, deviation_threshold=1.0)
        )
        context = make_context({"AAPL": make_bars([10.0, 10.0, 10.0, 10.0, 20.0])})

        decision = source.evaluate(context)[0]

        assert decision.action == DecisionAction.SELL
        assert decision.value == pytest.approx(2.0)

    def test_should_buy_far_below_average(self) -> None:
        """Test z-score of -2 against threshold 1."""
        source = MeanReversionDecisionSource(
            MeanReversionParameters(lookback_period=5, deviation_threshold=1.0)
        )
        context = make_context({"AAPL": make_bars([10.0, 10.0, 10.0, 10.0, 2.0])})

        decision = source.evaluate(context)[0]

        assert decision.action == DecisionAction.BUY
        assert decision.value == pytest.approx(-2.0)

    def test_should_hold_on_flat_window(self) -> None:
        """Test zero variance never divides by zero."""
        source = MeanReversionDecisionSource(MeanReversionParameters(lookback_period=5))
        context = make_context({"AAPL": make_bars([10.0] * 5)})

        decision = source.evaluate(context)[0]

        assert decision.action == DecisionAction.HOLD
        assert decision.value == 0.0

    def test_should_hold_on_flat_window_at_large_prices(self) -> None:
        """Test rounding noise in a flat window never triggers a trade."""
        # Arrange
        source = MeanReversionDecisionSource(
            MeanReversionParameters(lookback_period=20, deviation_threshold=0.5)
        )
        context = make_context({"AAPL": make_bars([99999.7] * 20)})

        # Act
        decision = source.evaluate(context)[0]

        # Assert
        assert decision.action == DecisionAction.HOLD
        assert decision.reasoning == "Zero price variance"
        assert decision.value == 0.0

    def test_should_still_trade_on_small_real_moves_at_large_prices(self) -> None:
        """Test genuine variance at a high price level is not treated as flat."""
        source = MeanReversionDecisionSource(
            MeanReversionParameters(lookback_period=5, deviation_threshold=1.0)
        )
        context = make_context({"AAPL": make_bars([100000.0] * 4 + [100010.0])})

        decision = source.evaluate(context)[0]

        assert decision.action == DecisionAction.SELL
        assert decision.value == pytest.approx(2.0)

    def test_should_use_strict_threshold(self) -> None:
        """Test z exactly at the threshold holds."""
        assert decide_mean_reversion_action(2.0, 2.0) == DecisionAction.HOLD
        assert decide_mean_reversion_action(-2.0, 2.0) == DecisionAction.HOLD
        assert decide_mean_reversion_action(-2.01, 2.0) == DecisionAction.BUY


class TestTrendFollowingDecisionSource:
    """Tests for moving average crossover decisions."""

    @pytest.fixture
    def source(self) -> TrendFollowingDecisionSource:
        return TrendFollowingDecisionSource(
            TrendFollowingParameters(short_period=2, long_period=3)
        )

    def test_should_buy_on_golden_cross(self, source: TrendFollowingDecisionSource) -> None:
        """Test short MA crossing above long MA."""
        context = make_context({"AAPL": make_bars([10.0, 10.0, 10.0, 10.0, 13.0])})

        decision = source.evaluate(context)[0]

        assert decision.action == DecisionAction.BUY
        assert decision.quantity == 1.0

    def test_should_hold_while_short_stays_above(
        self, source: TrendFollowingDecisionSource
    ) -> None:
        """Test that being above is not a signal by itself."""
        context = make_context({"AAPL": make_bars([10.0, 10.0, 10.0, 10.0, 13.0, 13.0])})

        decision = source.evaluate(context)[0]

        assert decision.action == DecisionAction.HOLD

    def test_should_sell_on_death_cross(self, source: TrendFollowingDecisionSource) -> None:
        """Test short MA crossing below long MA."""
        context = make_context({"AAPL": make_bars([10.0, 10.0, 10.0, 10.0, 7.0])})

        decision = source.evaluate(context)[0]

        assert decision.action == DecisionAction.SELL

    def test_should_need_two_long_averages(self, source: TrendFollowingDecisionSource) -> None:
        """Test long_period bars are not enough."""
        context = make_context({"AAPL": make_bars([10.0, 11.0, 12.0])})

        decision = source.evaluate(context)[0]

        assert decision.reasoning == INSUFFICIENT_DATA_REASON

    def test_should_detect_crossings_only(self) -> None:
        """Test crossover classification."""
        assert detect_crossover(1.0, 1.0, 2.0, 1.5) == DecisionAction.BUY
        assert detect_crossover(2.0, 1.0, 3.0, 1.0) == DecisionAction.HOLD
        assert detect_crossover(1.0, 1.0, 0.5, 1.0) == DecisionAction.SELL
        assert detect_crossover(0.5, 1.0, 0.4, 1.0) == DecisionAction.HOLD


class TestHistoryWindow:
    """Tests for how much history each source reads."""

    @pytest.mark.parametrize(
        "source_type,parameters,expected_length",
        [
            (MeanReversionDecisionSource, MeanReversionParameters(lookback_period=5), 5),
            (
                TrendFollowingDecisionSource,
                TrendFollowingParameters(short_period=3, long_period=6),
                7,
            ),
            (MomentumDecisionSource, MomentumParameters(lookback_period=5), 100),
        ],
    )
    def test_should_pass_trailing_window_to_evaluation(
        self, source_type: type, parameters: object, expected_length: int
    ) -> None:
        """Test windowed sources only see their trailing bars."""
        # Arrange
        seen: list[int] = []

        class RecordingSource(source_type):  # type: ignore[misc, valid-type]
            def evaluate_symbol(self, symbol: str, bars: Sequence[Bar]) -> Decision:
                seen.append(len(bars))
                return super().evaluate_symbol(symbol, bars)

        history = make_bars([100.0 + (i % 7) for i in range(100)])

        # Act
        RecordingSource(parameters).evaluate(make_context({"AAPL": history}))

        # Assert
        assert seen == [expected_length]

    def test_should_decide_the_same_on_window_and_full_history(self) -> None:
        """Test cutting the history leaves mean reversion signals unchanged."""
        parameters = MeanReversionParameters(lookback_period=5, deviation_threshold=1.0)
        history = make_bars([50.0] * 95 + [10.0, 10.0, 10.0, 10.0, 20.0])

        decision = MeanReversionDecisionSource(parameters).evaluate_symbol("AAPL", history)
        windowed = MeanReversionDecisionSource(parameters).evaluate(
            make_context({"AAPL": history})
        )[0]

        assert windowed.action == decision.action == DecisionAction.SELL
        assert windowed.value == pytest.approx(decision.value)
        assert windowed.value == pytest.approx(2.0)


class TestCreateDecisionSource:
    """Tests for the decision source factory."""

    @pytest.mark.parametrize(
        "parameters,expected_type",
        [
            (MomentumParameters(), MomentumDecisionSource),
            (MeanReversionParameters(), MeanReversionDecisionSource),
            (TrendFollowingParameters(), TrendFollowingDecisionSource),
        ],
    )
    def test_should_build_technical_sources(self, parameters: object, expected_type: type) -> None:
        """Test dispatch on the parameter variant."""
        source = create_decision_source(StrategyConfig(id="s", parameters=parameters))

        assert isinstance(source, expected_type)
        assert source.parameters is parameters

    def test_should_require_oracle_for_llm_strategy(self) -> None:
        """Test the LLM-assisted strategy without an oracle."""
        strategy = StrategyConfig(id="llm", parameters=LLMAssistedParameters())

        with pytest.raises(ConfigurationError, match="needs a decision oracle"):
            create_decision_source(strategy)

    def test_should_build_llm_source_with_oracle(self) -> None:
        """Test the LLM-assisted strategy with an oracle."""
        strategy = StrategyConfig(id="llm", parameters=LLMAssistedParameters())
        oracle = object()

        source = create_decision_source(strategy, oracle)  # type: ignore[arg-type]

        assert isinstance(source, LLMAssistedDecisionSource)
        assert source.oracle is oracle
