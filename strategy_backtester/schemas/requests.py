"""
Pydantic schemas for backtest submission payloads.

Payloads use the dashboard's camelCase field names (``startDate``,
``initialCapital``, ``lookbackPeriod``...); snake_case names are accepted
too. ``to_config`` converts a request into a validated ``BacktestConfig``.
"""

from collections.abc import Mapping
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from strategy_backtester.core.constants import (
    DEFAULT_INITIAL_CAPITAL,
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
from strategy_backtester.core.enums import StrategyKind, Timeframe
from strategy_backtester.core.exceptions.backtest import ConfigurationError
from strategy_backtester.core.models.backtest import BacktestConfig
from strategy_backtester.core.models.strategy_config import (
    LLMAssistedParameters,
    MeanReversionParameters,
    MomentumParameters,
    StrategyConfig,
    StrategyParameters,
    TrendFollowingParameters,
)


class CamelModel(BaseModel):
    """Base model accepting camelCase or snake_case field names."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore", str_strip_whitespace=True
    )


class MomentumParametersRequest(CamelModel):
    lookback_period: int = Field(default=MOMENTUM_LOOKBACK_DEFAULT, gt=0)
    overbought_threshold: float = Field(default=MOMENTUM_OVERBOUGHT_DEFAULT, ge=0, le=100)
    oversold_threshold: float = Field(default=MOMENTUM_OVERSOLD_DEFAULT, ge=0, le=100)
    quantity: float = Field(default=DEFAULT_UNIT_QUANTITY, gt=0)

    def to_parameters(self) -> MomentumParameters:
        return MomentumParameters(**self.model_dump())


class MeanReversionParametersRequest(CamelModel):
    lookback_period: int = Field(default=MEAN_REVERSION_LOOKBACK_DEFAULT, gt=0)
    deviation_threshold: float = Field(default=MEAN_REVERSION_DEVIATION_DEFAULT, ge=0)
    quantity: float = Field(default=DEFAULT_UNIT_QUANTITY, gt=0)

    def to_parameters(self) -> MeanReversionParameters:
        return MeanReversionParameters(**self.model_dump())


class TrendFollowingParametersRequest(CamelModel):
    short_period: int = Field(default=TREND_SHORT_PERIOD_DEFAULT, gt=0)
    long_period: int = Field(default=TREND_LONG_PERIOD_DEFAULT, gt=0)
    quantity: float = Field(default=DEFAULT_UNIT_QUANTITY, gt=0)

    def to_parameters(self) -> TrendFollowingParameters:
        return TrendFollowingParameters(**self.model_dump())


class LLMAssistedParametersRequest(CamelModel):
    model: str = Field(default=LLM_MODEL_DEFAULT, min_length=1)
    max_positions: int = Field(default=LLM_MAX_POSITIONS_DEFAULT, gt=0)

    def to_parameters(self) -> LLMAssistedParameters:
        return LLMAssistedParameters(**self.model_dump())


_PARAMETER_REQUESTS: dict[StrategyKind, type[CamelModel]] = {
    StrategyKind.MOMENTUM: MomentumParametersRequest,
    StrategyKind.MEAN_REVERSION: MeanReversionParametersRequest,
    StrategyKind.TREND_FOLLOWING: TrendFollowingParametersRequest,
    StrategyKind.LLM_ASSISTED: LLMAssistedParametersRequest,
}


class StrategyRequest(CamelModel):
    """Strategy selection: an id such as ``momentum`` plus raw parameters."""

    id: str = Field(..., min_length=1, description="Strategy identifier")
    parameters: dict[str, Any] = Field(default_factory=dict)
    name: str = ""
    description: str = ""

    @field_validator("id")
    @classmethod
    def validate_strategy_id(cls, v: str) -> str:
        """Reject unknown strategy identifiers early."""
        StrategyKind.from_string(v)
        return v

    @property
    def kind(self) -> StrategyKind:
        return StrategyKind.from_string(self.id)

    def build_parameters(self) -> StrategyParameters:
        """Parse ``parameters`` with the model matching the strategy kind."""
        request_model = _PARAMETER_REQUESTS[self.kind]
        return request_model.model_validate(self.parameters).to_parameters()

    def to_config(self) -> StrategyConfig:
        """Convert to a strategy configuration."""
        return StrategyConfig(
            id=self.id,
            parameters=self.build_parameters(),
            name=self.name,
            description=self.description,
        )


class BacktestRequest(CamelModel):
    """
    Backtest submission.

    ``strategy`` may be a bare id with a sibling ``parameters`` object (the
    dashboard form shape) or a full strategy object.
    """

    name: str = Field(..., min_length=1)
    description: str = ""
    strategy: StrategyRequest
    symbols: list[str] = Field(..., min_length=1, description="Ticker symbols")
    start_date: date
    end_date: date
    timeframe: Timeframe = Field(default=Timeframe.D1, description="Bar timeframe")
    initial_capital: float = Field(default=DEFAULT_INITIAL_CAPITAL, gt=0)
    user_id: str | None = None
    model_id: str | None = None

    @model_validator(mode="before")
    @classmethod
    def merge_strategy_parameters(cls, data: Any) -> Any:
        """Fold the form-style ``strategy`` id and ``parameters`` into one object."""
        if isinstance(data, Mapping) and isinstance(data.get("strategy"), str):
            data = dict(data)
            data["strategy"] = {
                "id": data["strategy"],
                "parameters": data.pop("parameters", None) or {},
            }
        return data

    @field_validator("symbols")
    @classmethod
    def normalize_symbols(cls, v: list[str]) -> list[str]:
        """Strip and upper-case symbols."""
        symbols = [symbol.strip().upper() for symbol in v]
        if any(not symbol for symbol in symbols):
            raise ValueError("Symbols must be non-empty")
        return symbols

    @field_validator("timeframe", mode="before")
    @classmethod
    def parse_timeframe(cls, v: Any) -> Any:
        """Accept timeframes in any letter case (``1D``, ``1h``)."""
        if isinstance(v, str):
            return Timeframe.from_string(v)
        return v

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "BacktestRequest":
        """Parse a raw payload.

        Raises:
            ConfigurationError: If the payload is malformed
        """
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid backtest request: {e}") from e

    def to_config(self) -> BacktestConfig:
        """Convert to a validated backtest configuration.

        Raises:
            ConfigurationError: If parameters or the resulting config are invalid
        """
        try:
            strategy = self.strategy.to_config()
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid strategy parameters: {e}") from e

        config = BacktestConfig(
            name=self.name,
            description=self.description,
            strategy=strategy,
            symbols=tuple(self.symbols),
            start_date=self.start_date,
            end_date=self.end_date,
            timeframe=self.timeframe,
            initial_capital=self.initial_capital,
            user_id=self.user_id,
            model_id=self.model_id,
        )
        config.validate()
        return config


def load_backtest_config(payload: Mapping[str, Any]) -> BacktestConfig:
    """Parse and validate a raw backtest payload in one step."""
    return BacktestRequest.from_payload(payload).to_config()
