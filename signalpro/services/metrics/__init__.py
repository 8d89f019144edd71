"""
Rolling Metrics

CONTRACT:
    Input:  DecisionOutcome events (from DecisionLedger observers)
    Output: MetricsSnapshot / RecentMetrics

RESPONSIBILITIES:
    - Bounded FIFO window of evaluated outcomes
    - Accuracy, win rate, confidence, error streaks, direction mix
"""

from signalpro.services.metrics.rolling import RollingMetrics

__all__ = ["RollingMetrics"]
