from .base import IndicatorDecisionSource
from .factory import create_decision_source
from .llm_assisted import LLMAssistedDecisionSource
from .mean_reversion import MeanReversionDecisionSource
from .momentum import MomentumDecisionSource
from .trend_following import TrendFollowingDecisionSource

__all__ = [
    "IndicatorDecisionSource",
    "LLMAssistedDecisionSource",
    "MeanReversionDecisionSource",
    "MomentumDecisionSource",
    "TrendFollowingDecisionSource",
    "create_decision_source",
]
