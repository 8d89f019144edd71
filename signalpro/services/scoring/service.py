"""
Scoring Engine & Decision Resolver Implementation

Fixed rule table from indicator values to scores, then a threshold vote.
PURE PYTHON - deterministic and auditable.
"""

import logging
import math

from signalpro.schemas.indicators import (
    DivergenceType,
    IndicatorSet,
    SignalType,
    TrendState,
)
from signalpro.schemas.analysis import (
    MODE_MULTIPLIERS,
    MODE_THRESHOLDS,
    AnalysisConfig,
    DivergenceScore,
    IndicatorScore,
    IndicatorWeights,
    Resolution,
    ScoreSet,
    TradingMode,
)
from signalpro.services.indicators.calculations import ATR_FLOOR, finite_or
from signalpro.services.scoring.interface import (
    DecisionResolverInterface,
    ScoringEngineInterface,
)

logger = logging.getLogger(__name__)

DIVERGENCE_ADJUSTMENT = 20.0
TREND_SCORE = 30.0


def rsi_score(rsi: float) -> float:
    """RSI ladder: oversold is bullish, overbought is bearish."""
    if rsi < 20:
        return 40.0
    if rsi < 30:
        return 30.0
    if rsi < 40:
        return 15.0
    if rsi > 80:
        return -40.0
    if rsi > 70:
        return -30.0
    if rsi > 60:
        return -15.0
    return 0.0


def trend_score(trend: TrendState) -> float:
    if trend == TrendState.UPTREND:
        return TREND_SCORE
    if trend == TrendState.DOWNTREND:
        return -TREND_SCORE
    return 0.0


class ScoringEngine(ScoringEngineInterface):
    """
    Scoring Engine.

    Non-finite inputs are replaced with each indicator's neutral default
    before scoring, so every score is finite.
    """

    def __init__(self, weights: IndicatorWeights = None):
        self.weights = weights or IndicatorWeights()

    @property
    def name(self) -> str:
        return "ScoringEngine"

    def execute(self, input_data: IndicatorSet) -> ScoreSet:
        indicators = input_data
        weights = self.weights

        atr = finite_or(indicators.atr, ATR_FLOOR)
        if atr <= 0:
            atr = ATR_FLOOR

        rsi = finite_or(indicators.rsi.value, 50.0)
        macd = finite_or(indicators.macd.value, 0.0)
        stoch = finite_or(indicators.stoch_rsi.value, 50.0)
        mfi = finite_or(indicators.mfi.value, 50.0)
        occ = finite_or(indicators.occ.value, 0.0)
        stc_cci = finite_or(indicators.stc_cci.value, 0.0)

        return ScoreSet(
            rsi=IndicatorScore(score=rsi_score(rsi), weight=weights.rsi),
            macd=IndicatorScore(score=(macd / atr) * 50, weight=weights.macd),
            stoch_rsi=IndicatorScore(score=(stoch - 50) * 2, weight=weights.stoch_rsi),
            mfi=IndicatorScore(score=(mfi - 50) * 2, weight=weights.mfi),
            trend=IndicatorScore(
                score=trend_score(indicators.trend.value), weight=weights.trend
            ),
            occ=IndicatorScore(score=occ, weight=weights.occ),
            stc_cci=IndicatorScore(score=stc_cci, weight=weights.stc_cci),
            divergence=DivergenceScore(value=indicators.divergence.value, weight=0.0),
        )


class DecisionResolver(DecisionResolverInterface):
    """
    Decision Resolver.

    The total is the plain sum of scores; weights are reported but not
    applied.
    """

    @property
    def name(self) -> str:
        return "DecisionResolver"

    def execute(self, input_data: tuple) -> Resolution:
        scores, indicators, config = input_data
        return self.resolve(scores, indicators, config)

    def total_score(self, scores: ScoreSet, config: AnalysisConfig) -> float:
        total = 0.0
        for entry in scores.numeric_scores():
            if math.isfinite(entry.score):
                total += entry.score
        if not math.isfinite(total):
            total = 0.0

        total *= MODE_MULTIPLIERS.get(config.trading_mode, 1.0)

        if config.divergence_detection:
            if scores.divergence.value == DivergenceType.BULLISH:
                total += DIVERGENCE_ADJUSTMENT
            elif scores.divergence.value == DivergenceType.BEARISH:
                total -= DIVERGENCE_ADJUSTMENT

        return total

    def threshold(self, config: AnalysisConfig) -> float:
        override = config.backtest_threshold
        if override is not None and math.isfinite(override):
            return float(override)
        return MODE_THRESHOLDS.get(config.trading_mode, MODE_THRESHOLDS[TradingMode.BALANCED])

    def resolve(
        self, scores: ScoreSet, indicators: IndicatorSet, config: AnalysisConfig
    ) -> Resolution:
        total = self.total_score(scores, config)
        threshold = self.threshold(config)

        direction = SignalType.NEUTRAL
        if total > threshold:
            direction = SignalType.BUY
        elif total < -threshold:
            direction = SignalType.SELL

        if config.trend_filter:
            trend = indicators.trend.value
            if direction == SignalType.BUY and trend == TrendState.DOWNTREND:
                direction = SignalType.NEUTRAL
            elif direction == SignalType.SELL and trend == TrendState.UPTREND:
                direction = SignalType.NEUTRAL

        # Confidence ignores the trend filter
        max_score = threshold * 2
        if max_score == 0:
            confidence = 100.0 if total != 0 else 0.0
        else:
            confidence = min(100.0, max(0.0, abs(total) / max_score * 100))

        return Resolution(
            direction=direction,
            confidence=confidence,
            total_score=total,
            threshold=threshold,
        )

    def explain(
        self, indicators: IndicatorSet, direction: SignalType, config: AnalysisConfig
    ) -> str:
        reasons = []

        rsi = indicators.rsi.value
        if rsi < 30:
            reasons.append(f"RSI at {rsi:.1f} (oversold)")
        elif rsi > 70:
            reasons.append(f"RSI at {rsi:.1f} (overbought)")

        macd = indicators.macd.value
        if macd > 0:
            reasons.append(f"positive MACD ({macd:.6f})")
        else:
            reasons.append(f"negative MACD ({macd:.6f})")

        reasons.append(f"trend: {indicators.trend.value.value}")

        if indicators.divergence.value:
            reasons.append(f"{indicators.divergence.value.value} divergence")

        main_reason = reasons[0] if reasons else "balanced technical picture"
        return f"{direction.value} based on {main_reason}. Mode: {config.trading_mode.value}"


# Default instances for callers that do not need isolation
_scoring_instance = None
_resolver_instance = None


def get_scoring_engine() -> ScoringEngine:
    """Get or create the shared scoring engine (stateless)."""
    global _scoring_instance
    if _scoring_instance is None:
        _scoring_instance = ScoringEngine()
    return _scoring_instance


def get_decision_resolver() -> DecisionResolver:
    """Get or create the shared decision resolver (stateless)."""
    global _resolver_instance
    if _resolver_instance is None:
        _resolver_instance = DecisionResolver()
    return _resolver_instance
