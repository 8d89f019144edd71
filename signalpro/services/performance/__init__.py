"""
Performance Analysis

CONTRACT:
    Input:  DecisionLedger history (evaluated decisions)
    Output: PerformanceReport, StrategyInsights

RESPONSIBILITIES:
    - Bucket outcomes by regime, relative volatility and confidence
    - Per-bucket accuracy (neutral excluded) and win rate (neutral included)
    - Plain-text strengths, weaknesses and recommendations
"""

from signalpro.services.performance.reporter import (
    CONFIDENCE_RANGES,
    REGIMES,
    VOLATILITY_RANGES,
    PerformanceReporter,
)
from signalpro.services.performance.insights import (
    StrategyInsightsService,
    build_insights,
)

__all__ = [
    "PerformanceReporter",
    "StrategyInsightsService",
    "build_insights",
    "REGIMES",
    "VOLATILITY_RANGES",
    "CONFIDENCE_RANGES",
]
