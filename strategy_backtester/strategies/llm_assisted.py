"""
LLM-assisted strategy: decisions from an external oracle.

The oracle is the only I/O-bound decision source; the engine awaits it
once per simulated date.
"""

from collections.abc import Mapping, Sequence

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from strategy_backtester.core.enums import DecisionAction
from strategy_backtester.core.exceptions.backtest import StrategyError
from strategy_backtester.core.interfaces.strategy import (
    DecisionContext,
    IDecisionOracle,
    IDecisionSource,
    OracleContext,
)
from strategy_backtester.core.models.decision import Decision
from strategy_backtester.core.models.strategy_config import LLMAssistedParameters, StrategyConfig
from strategy_backtester.schemas.oracle import OracleDecision


class LLMAssistedDecisionSource(IDecisionSource):
    """
    Decision source backed by an external decision oracle.

    Validates the oracle's answer: every item must have a symbol, a
    buy/sell/hold action and, for trades, a quantity. Only the first
    decision per requested symbol is kept and decisions for symbols
    that were not requested are dropped. Buys that would open more
    than ``max_positions`` distinct positions become holds.
    """

    def __init__(self, oracle: IDecisionOracle, strategy: StrategyConfig):
        if not isinstance(strategy.parameters, LLMAssistedParameters):
            raise StrategyError(
                f"LLM-assisted source needs LLMAssistedParameters, got "
                f"{type(strategy.parameters).__name__}"
            )
        self.oracle = oracle
        self.strategy = strategy
        self.parameters: LLMAssistedParameters = strategy.parameters

    async def decide(self, context: DecisionContext) -> list[Decision]:
        """Ask the oracle for decisions on the date's market data."""
        oracle_context = OracleContext(
            strategy=self.strategy,
            symbols=list(context.symbols),
            market_data=context.market_data,
            positions=context.positions,
            model=self.parameters.model,
        )

        try:
            raw_decisions = await self.oracle.get_decision(oracle_context)
        except StrategyError:
            raise
        except Exception as e:
            logger.error(f"Decision oracle failed on {context.date}: {e}")
            raise StrategyError(f"Failed to get decision from oracle: {e}") from e

        decisions = self._validate(raw_decisions, context.symbols)
        return self._apply_position_cap(decisions, context.positions)

    def _validate(
        self, raw_decisions: Sequence[Mapping | Decision], symbols: Sequence[str]
    ) -> list[Decision]:
        """Validate oracle items and enforce one decision per requested symbol."""
        if isinstance(raw_decisions, str | bytes | Mapping) or not isinstance(
            raw_decisions, Sequence
        ):
            raise StrategyError("Trading decisions must be an array")

        requested = set(symbols)
        seen: set[str] = set()
        decisions = []
        for item in raw_decisions:
            decision = self._to_decision(item)
            if decision.symbol not in requested:
                logger.warning(f"Dropping decision for unrequested symbol {decision.symbol}")
                continue
            if decision.symbol in seen:
                logger.warning(f"Dropping duplicate decision for {decision.symbol}")
                continue
            seen.add(decision.symbol)
            decisions.append(decision)
        return decisions

    @staticmethod
    def _to_decision(item: Mapping | Decision) -> Decision:
        if isinstance(item, Decision):
            item = {
                "symbol": item.symbol,
                "action": item.action.value,
                "quantity": item.quantity,
                "reasoning": item.reasoning,
            }
        try:
            return OracleDecision.model_validate(item).to_decision()
        except PydanticValidationError as e:
            raise StrategyError(f"Invalid oracle decision {item!r}: {e}") from e

    def _apply_position_cap(
        self, decisions: list[Decision], positions: Mapping[str, object]
    ) -> list[Decision]:
        """Turn buys of new symbols beyond ``max_positions`` into holds."""
        open_symbols = set(positions)
        capped = []
        for decision in decisions:
            opens_new = decision.action == DecisionAction.BUY and decision.symbol not in open_symbols
            if opens_new and len(open_symbols) >= self.parameters.max_positions:
                logger.info(
                    f"Position limit {self.parameters.max_positions} reached, "
                    f"holding {decision.symbol}"
                )
                capped.append(
                    Decision.hold(
                        decision.symbol,
                        reasoning="Maximum open positions reached",
                        indicator=decision.indicator,
                    )
                )
                continue
            if opens_new:
                open_symbols.add(decision.symbol)
            capped.append(decision)
        return capped
