"""
Rolling Metrics

Keeps a fixed-size FIFO window of evaluated outcomes and computes accuracy,
win rate, error streaks and direction mix on demand.

Observes the decision ledger; never influences decisions.
"""

import logging
from collections import deque
from typing import Optional, Union

from pydantic import ValidationError as PydanticValidationError

from signalpro.core.config import settings
from signalpro.core.timeutils import Clock, now_ms
from signalpro.schemas.indicators import SignalType
from signalpro.schemas.decision import DecisionOutcome
from signalpro.schemas.performance import (
    MetricsSnapshot,
    RecentMetrics,
    RollingMetricsSummary,
)
from signalpro.services.base import ValidationError

logger = logging.getLogger(__name__)


def _accuracy(window: list[DecisionOutcome]) -> float:
    if not window:
        return 0.0
    return sum(1 for d in window if d.success) / len(window) * 100


def _win_rate(window: list[DecisionOutcome]) -> float:
    if not window:
        return 0.0
    return sum(1 for d in window if d.return_pct > 0) / len(window) * 100


def _avg_confidence(window: list[DecisionOutcome]) -> float:
    if not window:
        return 0.0
    return sum(d.confidence for d in window) / len(window)


def _error_streaks(window: list[DecisionOutcome]) -> tuple[int, int]:
    """(trailing failure run, longest failure run)."""
    current = 0
    for d in reversed(window):
        if d.success:
            break
        current += 1

    longest = run = 0
    for d in window:
        run = 0 if d.success else run + 1
        longest = max(longest, run)
    return current, longest


def _distribution(window: list[DecisionOutcome]) -> tuple[float, float, float]:
    if not window:
        return 0.0, 0.0, 0.0
    size = len(window)
    buys = sum(1 for d in window if d.direction == SignalType.BUY)
    sells = sum(1 for d in window if d.direction == SignalType.SELL)
    neutrals = sum(1 for d in window if d.direction == SignalType.NEUTRAL)
    return buys / size * 100, sells / size * 100, neutrals / size * 100


class RollingMetrics:
    """
    Bounded window of recent outcomes.

    Usage:
        metrics = RollingMetrics(window_size=50)
        ledger.subscribe(metrics)
        metrics.get_snapshot().metrics.recent_accuracy
    """

    def __init__(self, window_size: Optional[int] = None, clock: Clock = now_ms):
        self.window_size = (
            window_size if window_size is not None else settings.metrics_window_size
        )
        if self.window_size <= 0:
            raise ValidationError("RollingMetrics", "window_size must be positive")
        self._clock = clock
        self._window: deque[DecisionOutcome] = deque(maxlen=self.window_size)

    def __call__(self, outcome: Union[DecisionOutcome, dict]) -> None:
        self.record(outcome)

    def __len__(self) -> int:
        return len(self._window)

    def record(self, outcome: Union[DecisionOutcome, dict, None]) -> Optional[DecisionOutcome]:
        """Append an outcome; payloads without `success` are ignored with a warning."""
        if isinstance(outcome, dict):
            try:
                outcome = DecisionOutcome.model_validate(outcome)
            except PydanticValidationError:
                logger.warning(f"Invalid outcome ignored: {outcome}")
                return None
        if not isinstance(outcome, DecisionOutcome):
            logger.warning(f"Invalid outcome ignored: {outcome!r}")
            return None

        if outcome.timestamp is None:
            outcome = outcome.model_copy(update={"timestamp": self._clock()})

        # deque(maxlen) drops the oldest entry on overflow
        self._window.append(outcome)
        logger.debug(f"Rolling metrics: {len(self._window)}/{self.window_size} outcomes")
        return outcome

    def _summary(self, window: list[DecisionOutcome]) -> RollingMetricsSummary:
        current, longest = _error_streaks(window)
        buy_ratio, sell_ratio, neutral_ratio = _distribution(window)
        return RollingMetricsSummary(
            total_decisions=len(window),
            recent_accuracy=_accuracy(window),
            recent_win_rate=_win_rate(window),
            avg_confidence=_avg_confidence(window),
            consecutive_errors=current,
            max_consecutive_errors=longest,
            buy_ratio=buy_ratio,
            sell_ratio=sell_ratio,
            neutral_ratio=neutral_ratio,
        )

    def get_snapshot(self) -> MetricsSnapshot:
        window = list(self._window)
        return MetricsSnapshot(
            timestamp=self._clock(),
            window_size=len(window),
            max_window_size=self.window_size,
            metrics=self._summary(window),
            recent_decisions=window[-10:],
        )

    def get_recent_metrics(self, window_size: int = 10) -> RecentMetrics:
        recent = list(self._window)[-window_size:] if window_size > 0 else []
        if not recent:
            return RecentMetrics()
        return RecentMetrics(
            window_size=len(recent),
            accuracy=_accuracy(recent),
            win_rate=_win_rate(recent),
            avg_confidence=_avg_confidence(recent),
        )

    def get_window(self) -> list[DecisionOutcome]:
        return list(self._window)

    def reset(self) -> None:
        self._window.clear()
        logger.info("Rolling metrics reset")
