"""
Strategy kind enumerations.

This module defines the closed set of decision sources a backtest can use.
"""

from enum import StrEnum


class StrategyKind(StrEnum):
    """
    Supported strategy kinds.

    Values follow the identifiers used by the dashboard forms.
    """

    MOMENTUM = "momentum"  # RSI overbought/oversold
    MEAN_REVERSION = "meanReversion"  # Z-score against moving average
    TREND_FOLLOWING = "trendFollowing"  # Moving average crossover
    LLM_ASSISTED = "llmAssisted"  # External decision oracle

    @property
    def description(self) -> str:
        """Human readable description of the strategy."""
        descriptions = {
            StrategyKind.MOMENTUM: (
                "Uses RSI (Relative Strength Index) to identify overbought and "
                "oversold conditions."
            ),
            StrategyKind.MEAN_REVERSION: (
                "Identifies when prices deviate significantly from their moving "
                "average and bets on a return to the mean."
            ),
            StrategyKind.TREND_FOLLOWING: (
                "Uses moving average crossovers to identify and follow market trends."
            ),
            StrategyKind.LLM_ASSISTED: (
                "Leverages LLM models to analyze market data and make trading decisions."
            ),
        }
        return descriptions[self]

    @classmethod
    def from_string(cls, value: str) -> "StrategyKind":
        """
        Convert string to StrategyKind enum.

        Accepts both the camelCase identifiers and snake_case spellings
        (e.g. "meanReversion" or "mean_reversion").

        Args:
            value: String representation of the strategy

        Returns:
            Corresponding StrategyKind enum value

        Raises:
            ValueError: If strategy is not supported
        """
        normalized = value.replace("_", "").replace("-", "").lower()

        for kind in cls:
            if kind.value.lower() == normalized:
                return kind

        raise ValueError(
            f"Unsupported strategy: {value}. "
            f"Supported strategies: {', '.join([kind.value for kind in cls])}"
        )
