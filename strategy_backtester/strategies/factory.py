"""
Decision source factory.
"""

from strategy_backtester.core.exceptions.backtest import ConfigurationError
from strategy_backtester.core.interfaces.strategy import IDecisionOracle, IDecisionSource
from strategy_backtester.core.models.strategy_config import (
    LLMAssistedParameters,
    MeanReversionParameters,
    MomentumParameters,
    StrategyConfig,
    TrendFollowingParameters,
)

from .llm_assisted import LLMAssistedDecisionSource
from .mean_reversion import MeanReversionDecisionSource
from .momentum import MomentumDecisionSource
from .trend_following import TrendFollowingDecisionSource


def create_decision_source(
    strategy: StrategyConfig, oracle: IDecisionOracle | None = None
) -> IDecisionSource:
    """
    Build the decision source for a strategy configuration.

    Args:
        strategy: Validated strategy configuration
        oracle: Decision oracle, required for the LLM-assisted strategy

    Returns:
        Decision source for the strategy

    Raises:
        ConfigurationError: If the LLM-assisted strategy has no oracle or the
            parameters are of an unknown type
    """
    parameters = strategy.parameters
    if isinstance(parameters, MomentumParameters):
        return MomentumDecisionSource(parameters)
    elif isinstance(parameters, MeanReversionParameters):
        return MeanReversionDecisionSource(parameters)
    elif isinstance(parameters, TrendFollowingParameters):
        return TrendFollowingDecisionSource(parameters)
    elif isinstance(parameters, LLMAssistedParameters):
        if oracle is None:
            raise ConfigurationError(
                f"Strategy {strategy.id!r} needs a decision oracle but none was provided"
            )
        return LLMAssistedDecisionSource(oracle, strategy)

    raise ConfigurationError(f"Unsupported strategy parameters: {type(parameters).__name__}")
