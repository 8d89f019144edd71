"""
Performance Reporter

Groups evaluated decisions by market regime, relative volatility and
confidence, and computes per-bucket accuracy and win rate.
Read-only over a DecisionLedger.
"""

import math
from typing import Callable, Optional

from signalpro.schemas.decision import Decision, DecisionStatus, EvaluationResult
from signalpro.schemas.performance import PerformanceBucket, PerformanceReport
from signalpro.services.evaluation.interface import DecisionLedgerInterface

REGIMES = ["uptrend", "downtrend", "sideways", "unknown"]

# (label, lower bound inclusive, upper bound exclusive)
VOLATILITY_RANGES = [
    ("0% - 0.5%", 0.0, 0.5),
    ("0.5% - 1%", 0.5, 1.0),
    ("1% - 2%", 1.0, 2.0),
    ("2% - 3%", 2.0, 3.0),
    ("> 3%", 3.0, math.inf),
]

CONFIDENCE_RANGES = [
    ("0 - 40", 0.0, 40.0),
    ("40 - 60", 40.0, 60.0),
    ("60 - 80", 60.0, 80.0),
    ("80 - 100", 80.0, 100.0),
]

UNKNOWN = "unknown"


def _update_bucket(bucket: PerformanceBucket, decision: Decision) -> None:
    bucket.total += 1
    result = decision.evaluation.result if decision.evaluation else None
    if result == EvaluationResult.CORRECT:
        bucket.correct += 1
    elif result == EvaluationResult.INCORRECT:
        bucket.incorrect += 1
    else:
        bucket.neutral += 1


def _finalize_bucket(bucket: PerformanceBucket) -> PerformanceBucket:
    decisive = bucket.correct + bucket.incorrect
    bucket.accuracy = bucket.correct / decisive * 100 if decisive else 0.0
    bucket.win_rate = bucket.correct / bucket.total * 100 if bucket.total else 0.0
    return bucket


def _bucket_by_range(
    decisions: list[Decision],
    ranges: list[tuple[str, float, float]],
    value_of: Callable[[Decision], Optional[float]],
) -> list[PerformanceBucket]:
    buckets = [PerformanceBucket(label=label) for label, _, _ in ranges]
    unknown = PerformanceBucket(label=UNKNOWN)

    for decision in decisions:
        value = value_of(decision)
        target = unknown
        if value is not None and math.isfinite(value):
            for bucket, (_, low, high) in zip(buckets, ranges):
                if low <= value < high:
                    target = bucket
                    break
        _update_bucket(target, decision)

    return [_finalize_bucket(b) for b in buckets + [unknown]]


class PerformanceReporter:
    """
    Bucketed performance over a ledger's evaluated decisions.

    Accuracy excludes neutral outcomes; win rate includes them.
    """

    def __init__(self, ledger: DecisionLedgerInterface):
        self.ledger = ledger

    def _evaluated(self, limit: int) -> list[Decision]:
        return [
            d
            for d in self.ledger.get_history(limit)
            if d.status == DecisionStatus.EVALUATED and d.evaluation is not None
        ]

    def by_market_regime(self, limit: int = 1000) -> list[PerformanceBucket]:
        buckets = {regime: PerformanceBucket(label=regime) for regime in REGIMES}
        for decision in self._evaluated(limit):
            regime = decision.market_context.market_regime or UNKNOWN
            _update_bucket(buckets.get(regime, buckets[UNKNOWN]), decision)
        return [_finalize_bucket(b) for b in buckets.values()]

    def by_volatility_range(self, limit: int = 1000) -> list[PerformanceBucket]:
        return _bucket_by_range(
            self._evaluated(limit),
            VOLATILITY_RANGES,
            lambda d: d.market_context.relative_volatility,
        )

    def by_confidence_range(self, limit: int = 1000) -> list[PerformanceBucket]:
        # A confidence of exactly 100 falls outside every range and lands in unknown
        return _bucket_by_range(
            self._evaluated(limit), CONFIDENCE_RANGES, lambda d: d.confidence
        )

    def get_all_reports(self, limit: int = 1000) -> PerformanceReport:
        return PerformanceReport(
            by_market_regime=self.by_market_regime(limit),
            by_volatility_range=self.by_volatility_range(limit),
            by_confidence_range=self.by_confidence_range(limit),
        )
