"""
Strategy Insights

Turns bucketed performance reports into short positive / negative findings
and recommendations. Text only; nothing is fed back into the engine.
"""

from typing import Optional

from signalpro.core.config import settings
from signalpro.schemas.performance import (
    PerformanceBucket,
    PerformanceReport,
    StrategyInsights,
)
from signalpro.services.performance.reporter import PerformanceReporter


def build_insights(
    report: Optional[PerformanceReport],
    min_sample: Optional[int] = None,
    good_accuracy: Optional[float] = None,
    poor_accuracy: Optional[float] = None,
) -> StrategyInsights:
    """Classify each sufficiently sampled bucket as a strength or a weakness."""
    if report is None:
        return StrategyInsights(summary="No data to analyze.")

    min_sample = min_sample if min_sample is not None else settings.insights_min_sample
    good_accuracy = good_accuracy if good_accuracy is not None else settings.insights_good_accuracy
    poor_accuracy = poor_accuracy if poor_accuracy is not None else settings.insights_poor_accuracy

    positives: list[str] = []
    negatives: list[str] = []
    recommendations: list[str] = []

    def classify(bucket: PerformanceBucket, prefix: str) -> None:
        if bucket.total < min_sample:
            return
        if bucket.accuracy >= good_accuracy:
            positives.append(
                f"{prefix} performing well: {bucket.label} (accuracy {bucket.accuracy:.1f}%)"
            )
        elif bucket.accuracy <= poor_accuracy:
            negatives.append(
                f"{prefix} performing poorly: {bucket.label} (accuracy {bucket.accuracy:.1f}%)"
            )
            recommendations.append(
                f"Reduce exposure or add caution in {prefix.lower()} {bucket.label}."
            )

    for bucket in report.by_market_regime:
        classify(bucket, "Regime")
    for bucket in report.by_volatility_range:
        classify(bucket, "Volatility")
    for bucket in report.by_confidence_range:
        classify(bucket, "Confidence")

    if not positives and not negatives:
        recommendations.append(
            "Sample too small or performance neutral. Keep collecting data."
        )

    return StrategyInsights(
        summary="Insights generated from performance reports.",
        positives=positives,
        negatives=negatives,
        recommendations=recommendations,
        report=report,
    )


class StrategyInsightsService:
    """Insights over a live reporter."""

    def __init__(self, reporter: Optional[PerformanceReporter] = None):
        self.reporter = reporter

    def generate(self, limit: int = 1000) -> StrategyInsights:
        if self.reporter is None:
            return StrategyInsights(summary="Performance reporter unavailable.")
        return build_insights(self.reporter.get_all_reports(limit))
