"""
Strategy decision interfaces.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date

from strategy_backtester.core.models.bar import Bar
from strategy_backtester.core.models.decision import Decision
from strategy_backtester.core.models.position import Position
from strategy_backtester.core.models.strategy_config import StrategyConfig


@dataclass(frozen=True)
class DecisionContext:
    """Everything a decision source may look at for one simulated date.

    ``market_data`` holds only the date's bars; ``history`` holds every
    bar seen so far up to and including the date. ``positions`` is a
    copy, so sources cannot mutate the ledger.
    """

    date: date
    symbols: Sequence[str]
    market_data: Mapping[str, Sequence[Bar]]
    history: Mapping[str, Sequence[Bar]]
    positions: Mapping[str, Position]


@dataclass(frozen=True)
class OracleContext:
    """Request sent to the external decision oracle."""

    strategy: StrategyConfig
    symbols: Sequence[str]
    market_data: Mapping[str, Sequence[Bar]]
    positions: Mapping[str, Position]
    model: str


class IDecisionSource(ABC):
    """Abstract interface for per-date decision producers."""

    @abstractmethod
    async def decide(self, context: DecisionContext) -> list[Decision]:
        """Produce at most one decision per symbol for the date."""
        pass


class IDecisionOracle(ABC):
    """Abstract interface for the external (LLM) decision oracle.

    Implementations return raw decision items (mappings with ``symbol``,
    ``action``, ``quantity`` and ``reasoning``) or ready ``Decision``
    objects; the LLM-assisted source validates either form.
    """

    @abstractmethod
    async def get_decision(self, context: OracleContext) -> Sequence[Mapping | Decision]:
        """Return trading decisions for the requested symbols."""
        pass
