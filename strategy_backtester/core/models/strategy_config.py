"""
Strategy configuration models.

Each strategy kind carries its own frozen parameter set; the union of
these types is closed and dispatched with exhaustive matching.
"""

from dataclasses import asdict, dataclass
from typing import Any, ClassVar

from strategy_backtester.core.constants import (
    DEFAULT_UNIT_QUANTITY,
    LLM_MAX_POSITIONS_DEFAULT,
    LLM_MODEL_DEFAULT,
    MEAN_REVERSION_DEVIATION_DEFAULT,
    MEAN_REVERSION_LOOKBACK_DEFAULT,
    MOMENTUM_LOOKBACK_DEFAULT,
    MOMENTUM_OVERBOUGHT_DEFAULT,
    MOMENTUM_OVERSOLD_DEFAULT,
    TREND_LONG_PERIOD_DEFAULT,
    TREND_SHORT_PERIOD_DEFAULT,
)
from strategy_backtester.core.enums import StrategyKind
from strategy_backtester.core.exceptions.backtest import ConfigurationError


@dataclass(frozen=True)
class MomentumParameters:
    """RSI overbought/oversold parameters."""

    kind: ClassVar[StrategyKind] = StrategyKind.MOMENTUM

    lookback_period: int = MOMENTUM_LOOKBACK_DEFAULT
    overbought_threshold: float = MOMENTUM_OVERBOUGHT_DEFAULT
    oversold_threshold: float = MOMENTUM_OVERSOLD_DEFAULT
    quantity: float = DEFAULT_UNIT_QUANTITY

    def validate(self) -> None:
        """Validate parameter ranges."""
        _require_period(self.lookback_period, "lookback_period")
        _require_quantity(self.quantity)
        if not 0 <= self.oversold_threshold < self.overbought_threshold <= 100:
            raise ConfigurationError(
                "RSI thresholds must satisfy 0 <= oversold < overbought <= 100, got "
                f"oversold={self.oversold_threshold}, overbought={self.overbought_threshold}"
            )


@dataclass(frozen=True)
class MeanReversionParameters:
    """Z-score against moving average parameters."""

    kind: ClassVar[StrategyKind] = StrategyKind.MEAN_REVERSION

    lookback_period: int = MEAN_REVERSION_LOOKBACK_DEFAULT
    deviation_threshold: float = MEAN_REVERSION_DEVIATION_DEFAULT
    quantity: float = DEFAULT_UNIT_QUANTITY

    def validate(self) -> None:
        """Validate parameter ranges."""
        _require_period(self.lookback_period, "lookback_period")
        _require_quantity(self.quantity)
        if self.deviation_threshold < 0:
            raise ConfigurationError(
                f"deviation_threshold must be non-negative, got {self.deviation_threshold}"
            )


@dataclass(frozen=True)
class TrendFollowingParameters:
    """Moving average crossover parameters."""

    kind: ClassVar[StrategyKind] = StrategyKind.TREND_FOLLOWING

    short_period: int = TREND_SHORT_PERIOD_DEFAULT
    long_period: int = TREND_LONG_PERIOD_DEFAULT
    quantity: float = DEFAULT_UNIT_QUANTITY

    def validate(self) -> None:
        """Validate parameter ranges."""
        _require_period(self.short_period, "short_period")
        _require_period(self.long_period, "long_period")
        _require_quantity(self.quantity)
        if self.short_period >= self.long_period:
            raise ConfigurationError(
                f"short_period ({self.short_period}) must be less than "
                f"long_period ({self.long_period})"
            )


@dataclass(frozen=True)
class LLMAssistedParameters:
    """External decision oracle parameters."""

    kind: ClassVar[StrategyKind] = StrategyKind.LLM_ASSISTED

    model: str = LLM_MODEL_DEFAULT
    max_positions: int = LLM_MAX_POSITIONS_DEFAULT

    def validate(self) -> None:
        """Validate parameter ranges."""
        if not self.model:
            raise ConfigurationError("model is required for the LLM-assisted strategy")
        _require_period(self.max_positions, "max_positions")


StrategyParameters = (
    MomentumParameters
    | MeanReversionParameters
    | TrendFollowingParameters
    | LLMAssistedParameters
)


@dataclass(frozen=True)
class StrategyConfig:
    """Strategy selection for a backtest: an id plus a parameter variant."""

    id: str
    parameters: StrategyParameters
    name: str = ""
    description: str = ""

    @property
    def kind(self) -> StrategyKind:
        """Strategy kind implied by the parameter variant."""
        return self.parameters.kind

    @property
    def display_name(self) -> str:
        """Name shown in comparisons and prompts."""
        return self.name or self.id

    @property
    def display_description(self) -> str:
        """Description shown to the decision oracle."""
        return self.description or self.kind.description

    def validate(self) -> None:
        """Validate identifier and parameters.

        Raises:
            ConfigurationError: If any field is invalid
        """
        if not self.id:
            raise ConfigurationError("Strategy id is required")
        if not isinstance(self.parameters, StrategyParameters):
            raise ConfigurationError(
                f"Unsupported strategy parameters: {type(self.parameters).__name__}"
            )
        self.parameters.validate()

    def to_dict(self) -> dict[str, Any]:
        """Convert strategy config to dictionary."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "name": self.display_name,
            "description": self.description,
            "parameters": asdict(self.parameters),
        }


def _require_period(value: int, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")


def _require_quantity(value: float) -> None:
    if value <= 0:
        raise ConfigurationError(f"quantity must be positive, got {value}")
