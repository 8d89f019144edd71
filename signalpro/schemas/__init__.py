"""
SignalPro Schema Contracts

This module defines all contracts between engine components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from signalpro.schemas.market import (
    Candle,
    PreparedSeries,
    Timeframe,
    prepare_series,
)
from signalpro.schemas.indicators import (
    DivergenceIndicator,
    DivergenceType,
    EMALevels,
    IndicatorResult,
    IndicatorSet,
    MACDIndicator,
    OCCIndicator,
    ScalarIndicator,
    SignalType,
    STCCCIIndicator,
    TrendIndicator,
    TrendState,
)
from signalpro.schemas.analysis import (
    AnalysisConfig,
    AnalysisResult,
    IndicatorWeights,
    Resolution,
    ScoreSet,
    TradingMode,
)
from signalpro.schemas.decision import (
    Decision,
    DecisionOutcome,
    DecisionStatus,
    Evaluation,
    EvaluationResult,
    LedgerStats,
    MarketContext,
    RecordDecisionRequest,
    TimeframeStats,
)
from signalpro.schemas.performance import (
    MetricsSnapshot,
    PerformanceBucket,
    PerformanceReport,
    StrategyInsights,
)

__all__ = [
    # Market
    "Candle",
    "PreparedSeries",
    "Timeframe",
    "prepare_series",
    # Indicators
    "DivergenceIndicator",
    "DivergenceType",
    "EMALevels",
    "IndicatorResult",
    "IndicatorSet",
    "MACDIndicator",
    "OCCIndicator",
    "ScalarIndicator",
    "SignalType",
    "STCCCIIndicator",
    "TrendIndicator",
    "TrendState",
    # Analysis
    "AnalysisConfig",
    "AnalysisResult",
    "IndicatorWeights",
    "Resolution",
    "ScoreSet",
    "TradingMode",
    # Decision
    "Decision",
    "DecisionOutcome",
    "DecisionStatus",
    "Evaluation",
    "EvaluationResult",
    "LedgerStats",
    "MarketContext",
    "RecordDecisionRequest",
    "TimeframeStats",
    # Performance
    "MetricsSnapshot",
    "PerformanceBucket",
    "PerformanceReport",
    "StrategyInsights",
]
