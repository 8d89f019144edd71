"""
CONTRACT 3: Scoring & Decision

Input: IndicatorSet + AnalysisConfig
Output: AnalysisResult

Indicator values become bounded scores, the scores are summed (unweighted),
scaled by trading mode, nudged by divergence and compared to a threshold.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from signalpro.core.config import settings
from signalpro.schemas.indicators import DivergenceType, IndicatorSet, SignalType


# =============================================================================
# ENUMS
# =============================================================================


class TradingMode(str, Enum):
    AGGRESSIVE = "aggressive"
    BALANCED = "balanced"
    CONSERVATIVE = "conservative"


# Score multiplier applied to the raw total
MODE_MULTIPLIERS = {
    TradingMode.AGGRESSIVE: 0.8,
    TradingMode.BALANCED: 1.0,
    TradingMode.CONSERVATIVE: 1.5,
}

# Default |score| needed for a directional call
MODE_THRESHOLDS = {
    TradingMode.AGGRESSIVE: 10.0,
    TradingMode.BALANCED: 25.0,
    TradingMode.CONSERVATIVE: 40.0,
}


# =============================================================================
# INPUT: AnalysisConfig
# =============================================================================


class AnalysisConfig(BaseModel):
    """
    Per-call analysis options.
    Sent by: host / SignalService
    Received by: DecisionResolver
    """

    trading_mode: TradingMode = TradingMode.BALANCED
    backtest_threshold: Optional[float] = Field(
        default=None, description="Explicit threshold override (used when finite)"
    )
    divergence_detection: bool = False
    trend_filter: bool = False

    @classmethod
    def from_settings(cls) -> "AnalysisConfig":
        return cls(
            trading_mode=TradingMode(settings.default_trading_mode),
            divergence_detection=settings.divergence_detection,
            trend_filter=settings.trend_filter,
        )


# =============================================================================
# OUTPUT: Scores
# =============================================================================


class IndicatorWeights(BaseModel):
    """Per-indicator weights, reported alongside scores but not applied."""

    model_config = ConfigDict(frozen=True)

    rsi: float = 1.0
    macd: float = 1.0
    stoch_rsi: float = 0.8
    mfi: float = 0.8
    trend: float = 1.2
    occ: float = 1.0
    stc_cci: float = 1.0


class IndicatorScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: float
    weight: float


class DivergenceScore(BaseModel):
    """Informational entry: carries the flag, never a numeric score."""

    model_config = ConfigDict(frozen=True)

    value: Optional[DivergenceType] = None
    weight: float = 0.0


class ScoreSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    rsi: IndicatorScore
    macd: IndicatorScore
    stoch_rsi: IndicatorScore
    mfi: IndicatorScore
    trend: IndicatorScore
    occ: IndicatorScore
    stc_cci: IndicatorScore
    divergence: DivergenceScore

    def numeric_scores(self) -> list[IndicatorScore]:
        """All entries that contribute to the total."""
        return [
            self.rsi,
            self.macd,
            self.stoch_rsi,
            self.mfi,
            self.trend,
            self.occ,
            self.stc_cci,
        ]


class Resolution(BaseModel):
    """Direction and confidence produced by the resolver."""

    direction: SignalType
    confidence: float = Field(..., ge=0, le=100)
    total_score: float
    threshold: float


# =============================================================================
# OUTPUT: AnalysisResult (Complete Response)
# =============================================================================


class AnalysisResult(BaseModel):
    """
    Complete analysis for one candle series.
    Returned by: SignalService.analyze
    Consumed by: DecisionLedger (via a recording payload), host display
    """

    model_config = ConfigDict(frozen=True)

    direction: SignalType
    confidence: float = Field(..., ge=0, le=100)
    indicators: IndicatorSet
    weights: IndicatorWeights
    scores: ScoreSet
    total_score: float
    explanation: str
    timeframe: str
    timestamp: int = Field(..., description="Epoch milliseconds")
