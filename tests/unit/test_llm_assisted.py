"""
Unit tests for the LLM-assisted decision source.
Testing oracle output validation and the position cap.
"""

from collections.abc import Mapping, Sequence
from datetime import UTC, date, datetime

import pytest

from strategy_backtester.core.enums import DecisionAction
from strategy_backtester.core.exceptions.backtest import StrategyError
from strategy_backtester.core.interfaces.strategy import (
    DecisionContext,
    IDecisionOracle,
    OracleContext,
)
from strategy_backtester.core.models.bar import Bar
from strategy_backtester.core.models.decision import Decision
from strategy_backtester.core.models.position import Position
from strategy_backtester.core.models.strategy_config import LLMAssistedParameters, StrategyConfig
from strategy_backtester.strategies.llm_assisted import LLMAssistedDecisionSource


class FakeOracle(IDecisionOracle):
    """Oracle returning a canned response and recording requests."""

    def __init__(self, response: object = None, error: Exception | None = None):
        self.response = response if response is not None else []
        self.error = error
        self.contexts: list[OracleContext] = []

    async def get_decision(self, context: OracleContext) -> Sequence[Mapping | Decision]:
        self.contexts.append(context)
        if self.error:
            raise self.error
        return self.response  # type: ignore[return-value]


def make_context(
    symbols: list[str], positions: dict[str, Position] | None = None
) -> DecisionContext:
    bar = Bar(datetime(2024, 1, 2, tzinfo=UTC), 10.0, 10.0, 10.0, 10.0, 100.0)
    data = {symbol: [bar] for symbol in symbols}
    return DecisionContext(
        date=date(2024, 1, 2),
        symbols=symbols,
        market_data=data,
        history=data,
        positions=positions or {},
    )


def make_source(oracle: IDecisionOracle, max_positions: int = 5) -> LLMAssistedDecisionSource:
    strategy = StrategyConfig(
        id="llmAssisted",
        parameters=LLMAssistedParameters(model="gpt-4", max_positions=max_positions),
    )
    return LLMAssistedDecisionSource(oracle, strategy)


class TestOracleRequest:
    """Tests for what is sent to the oracle."""

    @pytest.mark.asyncio
    async def test_should_pass_market_data_positions_and_model(self) -> None:
        """Test oracle context contents."""
        # Arrange
        oracle = FakeOracle()
        positions = {"AAPL": Position("AAPL", 1.0, 9.0)}
        context = make_context(["AAPL", "MSFT"], positions)

        # Act
        await make_source(oracle).decide(context)

        # Assert
        sent = oracle.contexts[0]
        assert sent.symbols == ["AAPL", "MSFT"]
        assert sent.market_data is context.market_data
        assert sent.positions is positions
        assert sent.model == "gpt-4"
        assert sent.strategy.id == "llmAssisted"

    @pytest.mark.asyncio
    async def test_should_expose_strategy_description_for_prompts(self) -> None:
        """Test the oracle can describe the strategy without a custom description."""
        oracle = FakeOracle()

        await make_source(oracle).decide(make_context(["AAPL"]))

        strategy = oracle.contexts[0].strategy
        assert strategy.display_name == "llmAssisted"
        assert strategy.display_description.startswith("Leverages LLM models")


class TestOracleResponseValidation:
    """Tests for validating raw oracle items."""

    @pytest.mark.asyncio
    async def test_should_accept_actions_in_any_case(self) -> None:
        """Test case-insensitive actions and field mapping."""
        oracle = FakeOracle(
            [
                {"symbol": "AAPL", "action": "BUY", "quantity": 3, "reasoning": "dip"},
                {"symbol": "MSFT", "action": "Hold"},
            ]
        )

        decisions = await make_source(oracle).decide(make_context(["AAPL", "MSFT"]))

        assert decisions[0].action == DecisionAction.BUY
        assert decisions[0].quantity == 3.0
        assert decisions[0].reasoning == "dip"
        assert decisions[1].action == DecisionAction.HOLD

    @pytest.mark.asyncio
    async def test_should_reject_trade_without_quantity(self) -> None:
        """Test buy/sell items must carry a numeric quantity."""
        oracle = FakeOracle([{"symbol": "AAPL", "action": "buy"}])

        with pytest.raises(StrategyError, match="Invalid oracle decision"):
            await make_source(oracle).decide(make_context(["AAPL"]))

    @pytest.mark.asyncio
    async def test_should_reject_unknown_action(self) -> None:
        """Test actions outside buy/sell/hold."""
        oracle = FakeOracle([{"symbol": "AAPL", "action": "short", "quantity": 1}])

        with pytest.raises(StrategyError):
            await make_source(oracle).decide(make_context(["AAPL"]))

    @pytest.mark.asyncio
    async def test_should_reject_non_array_response(self) -> None:
        """Test that the response must be a list of items."""
        oracle = FakeOracle({"symbol": "AAPL", "action": "hold"})

        with pytest.raises(StrategyError, match="must be an array"):
            await make_source(oracle).decide(make_context(["AAPL"]))

    @pytest.mark.asyncio
    async def test_should_keep_first_decision_per_symbol(self) -> None:
        """Test duplicate symbols."""
        oracle = FakeOracle(
            [
                {"symbol": "AAPL", "action": "buy", "quantity": 1},
                {"symbol": "AAPL", "action": "sell", "quantity": 1},
            ]
        )

        decisions = await make_source(oracle).decide(make_context(["AAPL"]))

        assert len(decisions) == 1
        assert decisions[0].action == DecisionAction.BUY

    @pytest.mark.asyncio
    async def test_should_drop_unrequested_symbols(self) -> None:
        """Test decisions for symbols that were not asked about."""
        oracle = FakeOracle([{"symbol": "TSLA", "action": "buy", "quantity": 1}])

        decisions = await make_source(oracle).decide(make_context(["AAPL"]))

        assert decisions == []

    @pytest.mark.asyncio
    async def test_should_accept_ready_decisions(self) -> None:
        """Test oracles returning Decision objects."""
        oracle = FakeOracle([Decision("AAPL", DecisionAction.SELL, quantity=2.0)])

        decisions = await make_source(oracle).decide(make_context(["AAPL"]))

        assert decisions[0].action == DecisionAction.SELL
        assert decisions[0].quantity == 2.0

    @pytest.mark.asyncio
    async def test_should_wrap_oracle_failures(self) -> None:
        """Test oracle exceptions become strategy errors."""
        oracle = FakeOracle(error=TimeoutError("model timed out"))

        with pytest.raises(StrategyError, match="model timed out") as exc_info:
            await make_source(oracle).decide(make_context(["AAPL"]))

        assert isinstance(exc_info.value.__cause__, TimeoutError)


class TestPositionCap:
    """Tests for max_positions."""

    @pytest.mark.asyncio
    async def test_should_turn_buys_beyond_cap_into_holds(self) -> None:
        """Test that new symbols beyond the cap are held."""
        # Arrange
        oracle = FakeOracle(
            [
                {"symbol": "AAPL", "action": "buy", "quantity": 1},
                {"symbol": "MSFT", "action": "buy", "quantity": 1},
                {"symbol": "GOOG", "action": "buy", "quantity": 1},
            ]
        )
        positions = {"AAPL": Position("AAPL", 1.0, 10.0)}

        # Act
        decisions = await make_source(oracle, max_positions=2).decide(
            make_context(["AAPL", "MSFT", "GOOG"], positions)
        )

        # Assert - adding to AAPL is allowed, MSFT fills the cap, GOOG is held
        assert [d.action for d in decisions] == [
            DecisionAction.BUY,
            DecisionAction.BUY,
            DecisionAction.HOLD,
        ]
        assert decisions[2].reasoning == "Maximum open positions reached"
