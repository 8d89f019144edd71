"""
CONTRACT 5: Performance Monitoring

Input: DecisionOutcome events, ledger history
Output: rolling metrics, bucketed reports, strategy insights

Read-only views; nothing here feeds back into scoring.
"""

from typing import Optional

from pydantic import BaseModel, Field

from signalpro.schemas.decision import DecisionOutcome


# =============================================================================
# Rolling metrics
# =============================================================================


class RollingMetricsSummary(BaseModel):
    total_decisions: int = 0
    recent_accuracy: float = 0.0
    recent_win_rate: float = 0.0
    avg_confidence: float = 0.0
    consecutive_errors: int = Field(default=0, description="Trailing run of failures")
    max_consecutive_errors: int = Field(default=0, description="Longest failure run in window")
    buy_ratio: float = 0.0
    sell_ratio: float = 0.0
    neutral_ratio: float = 0.0


class MetricsSnapshot(BaseModel):
    timestamp: int
    window_size: int
    max_window_size: int
    metrics: RollingMetricsSummary
    recent_decisions: list[DecisionOutcome] = Field(default_factory=list)


class RecentMetrics(BaseModel):
    window_size: int = 0
    accuracy: float = 0.0
    win_rate: float = 0.0
    avg_confidence: float = 0.0


# =============================================================================
# Bucketed reports
# =============================================================================


class PerformanceBucket(BaseModel):
    label: str
    total: int = 0
    correct: int = 0
    incorrect: int = 0
    neutral: int = 0
    accuracy: float = 0.0
    win_rate: float = 0.0


class PerformanceReport(BaseModel):
    by_market_regime: list[PerformanceBucket] = Field(default_factory=list)
    by_volatility_range: list[PerformanceBucket] = Field(default_factory=list)
    by_confidence_range: list[PerformanceBucket] = Field(default_factory=list)


# =============================================================================
# Insights
# =============================================================================


class StrategyInsights(BaseModel):
    summary: str
    positives: list[str] = Field(default_factory=list)
    negatives: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    report: Optional[PerformanceReport] = None
