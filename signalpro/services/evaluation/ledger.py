"""
Decision Ledger Implementation

Records every resolved decision, advances it through
pending -> ready -> evaluated as the host polls, and classifies the outcome
against a later observed price.

There is no internal timer: time only moves when the host calls `advance`
or `advance_and_evaluate` with a fresh timestamp.
"""

import logging
import math
from collections import deque
from typing import Optional, Union

from pydantic import ValidationError as PydanticValidationError

from signalpro.core.config import settings
from signalpro.core.timeutils import MINUTE_MS, Clock, now_ms, resolve_now
from signalpro.schemas.indicators import SignalType
from signalpro.schemas.decision import (
    Decision,
    DecisionOutcome,
    DecisionStatus,
    Evaluation,
    EvaluationResult,
    LedgerStats,
    RecordDecisionRequest,
    TimeframeStats,
)
from signalpro.services.base import ValidationError
from signalpro.services.evaluation.interface import (
    DecisionLedgerInterface,
    OutcomeObserver,
)

logger = logging.getLogger(__name__)

# Minutes to wait before a decision may be judged (about 3 candles)
HORIZON_MINUTES = {
    "1m": 3,
    "5m": 15,
    "15m": 45,
    "1h": 180,
}


def evaluation_horizon_minutes(timeframe: str, default: int = None) -> int:
    """Horizon in minutes for a timeframe; unknown timeframes get the default."""
    if default is None:
        default = settings.default_horizon_minutes
    return HORIZON_MINUTES.get(timeframe, default)


def classify_outcome(
    direction: SignalType, price_change_pct: float, threshold_pct: float = 0.1
) -> EvaluationResult:
    """
    Judge a decision by the price move since it was made.

    Moves within +/- threshold_pct (inclusive) are neutral. NEUTRAL
    decisions are always neutral.
    """
    if direction == SignalType.BUY:
        if price_change_pct > threshold_pct:
            return EvaluationResult.CORRECT
        if price_change_pct < -threshold_pct:
            return EvaluationResult.INCORRECT
        return EvaluationResult.NEUTRAL

    if direction == SignalType.SELL:
        if price_change_pct < -threshold_pct:
            return EvaluationResult.CORRECT
        if price_change_pct > threshold_pct:
            return EvaluationResult.INCORRECT
        return EvaluationResult.NEUTRAL

    return EvaluationResult.NEUTRAL


class DecisionLedger(DecisionLedgerInterface):
    """
    Bounded, insertion-ordered decision history for one instrument.

    Usage:
        ledger = DecisionLedger()
        ledger.subscribe(metrics.record)
        ledger.record_decision(payload)
        ...
        ledger.advance_and_evaluate(current_price=101.2)
    """

    def __init__(
        self,
        capacity: Optional[int] = None,
        threshold_pct: Optional[float] = None,
        default_horizon_minutes: Optional[int] = None,
        clock: Clock = now_ms,
    ):
        self.capacity = capacity if capacity is not None else settings.history_capacity
        if self.capacity <= 0:
            raise ValidationError("DecisionLedger", "capacity must be positive")

        self.threshold_pct = (
            threshold_pct if threshold_pct is not None else settings.evaluation_threshold_pct
        )
        self.default_horizon_minutes = (
            default_horizon_minutes
            if default_horizon_minutes is not None
            else settings.default_horizon_minutes
        )
        self._clock = clock
        self._history: deque[Decision] = deque()
        self._index: dict[str, Decision] = {}
        self._observers: list[OutcomeObserver] = []

    def __len__(self) -> int:
        return len(self._history)

    # =========================================================================
    # OBSERVERS
    # =========================================================================

    def subscribe(self, observer: OutcomeObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: OutcomeObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify(self, outcome: DecisionOutcome) -> None:
        """Forward an outcome to every consumer; failures never undo the transition."""
        if not self._observers:
            logger.warning("No metrics consumer registered; outcome not forwarded")
            return

        for observer in list(self._observers):
            try:
                observer(outcome)
            except Exception as e:
                logger.warning(f"Metrics consumer {observer!r} failed: {e}")

    # =========================================================================
    # RECORD
    # =========================================================================

    def record_decision(
        self, payload: Union[RecordDecisionRequest, dict], now: Optional[int] = None
    ) -> Optional[Decision]:
        if isinstance(payload, dict):
            try:
                payload = RecordDecisionRequest.model_validate(payload)
            except PydanticValidationError as e:
                logger.warning(f"Invalid decision payload ignored: {e.error_count()} error(s)")
                return None
        if not isinstance(payload, RecordDecisionRequest):
            logger.warning(f"Invalid decision payload ignored: {type(payload).__name__}")
            return None

        timestamp = resolve_now(now, self._clock)
        horizon_minutes = evaluation_horizon_minutes(
            payload.timeframe, self.default_horizon_minutes
        )
        horizon_ms = payload.evaluation_horizon_ms or horizon_minutes * MINUTE_MS

        decision = Decision(
            timestamp=timestamp,
            direction=payload.direction,
            confidence=payload.confidence,
            current_price_at_decision=payload.current_price,
            indicator_snapshot=(
                payload.indicators.model_copy(deep=True) if payload.indicators else None
            ),
            timeframe=payload.timeframe,
            explanation=payload.explanation,
            market_context=payload.market_context.model_copy(deep=True),
            evaluation_horizon_ms=horizon_ms,
        )

        self._history.append(decision)
        self._index[decision.id] = decision
        while len(self._history) > self.capacity:
            evicted = self._history.popleft()
            self._index.pop(evicted.id, None)

        logger.info(
            f"Decision recorded: {decision.direction.value} "
            f"({decision.confidence:.0f}% confidence) on {decision.timeframe} "
            f"- horizon {horizon_ms / MINUTE_MS:.0f}min"
        )
        return decision

    # =========================================================================
    # ADVANCE / EVALUATE
    # =========================================================================

    def advance(self, now: Optional[int] = None) -> list[Decision]:
        now = resolve_now(now, self._clock)
        advanced = []
        for decision in self._history:
            if decision.status == DecisionStatus.PENDING and decision.is_due(now):
                decision.mark_ready()
                advanced.append(decision)
        return advanced

    def _resolve(self, decision: Union[Decision, str]) -> Optional[Decision]:
        decision_id = decision if isinstance(decision, str) else decision.id
        return self._index.get(decision_id)

    def _price_change_pct(self, decision: Decision, future_price: float) -> float:
        base = decision.current_price_at_decision
        if base == 0 or not math.isfinite(base) or not math.isfinite(future_price):
            logger.warning(
                f"Cannot compute price change for decision {decision.id} "
                f"(base={base}, future={future_price}); using 0"
            )
            return 0.0
        return (future_price - base) / base * 100

    def evaluate(
        self,
        decision: Union[Decision, str],
        future_price: float,
        now: Optional[int] = None,
    ) -> Optional[EvaluationResult]:
        target = self._resolve(decision)
        if target is None or target.status != DecisionStatus.READY:
            return None

        now = resolve_now(now, self._clock)
        change = self._price_change_pct(target, future_price)
        result = classify_outcome(target.direction, change, self.threshold_pct)

        target.mark_evaluated(
            Evaluation(
                result=result,
                future_price=future_price,
                price_change_pct=change,
                evaluated_at=now,
            )
        )

        logger.info(
            f"Evaluation: {target.direction.value} -> {result.value} "
            f"({change:.2f}% change after {target.evaluation_horizon_ms / MINUTE_MS:.0f}min)"
        )

        self._notify(
            DecisionOutcome(
                timeframe=target.timeframe,
                direction=target.direction,
                success=result == EvaluationResult.CORRECT,
                return_pct=change,
                confidence=target.confidence,
                timestamp=now,
            )
        )
        return result

    def advance_and_evaluate(
        self, current_price: float, now: Optional[int] = None
    ) -> list[Decision]:
        now = resolve_now(now, self._clock)
        self.advance(now)

        ready = [d for d in self._history if d.status == DecisionStatus.READY]
        evaluated = []
        for decision in ready:
            if self.evaluate(decision, current_price, now) is not None:
                evaluated.append(decision)

        if evaluated:
            logger.info(f"Evaluated {len(evaluated)} ready decision(s)")
        return evaluated

    # =========================================================================
    # QUERY
    # =========================================================================

    def get_decision(self, decision_id: str) -> Optional[Decision]:
        """Copy of one decision, or None if unknown or evicted."""
        decision = self._index.get(decision_id)
        return decision.model_copy(deep=True) if decision else None

    def get_stats(self) -> LedgerStats:
        stats = LedgerStats(total=len(self._history))
        for decision in self._history:
            if decision.status == DecisionStatus.PENDING:
                stats.pending += 1
            elif decision.status == DecisionStatus.READY:
                stats.ready += 1
            else:
                stats.evaluated += 1
                _count_result(stats, decision.evaluation.result)

        decisive = stats.correct + stats.incorrect
        stats.accuracy = stats.correct / decisive * 100 if decisive else 0.0
        # Neutral outcomes count against win rate but not accuracy
        stats.win_rate = stats.correct / stats.evaluated * 100 if stats.evaluated else 0.0
        return stats

    def get_history(self, limit: int = 50) -> list[Decision]:
        """Most recent `limit` decisions, newest first (copies)."""
        if limit <= 0:
            return []
        recent = list(self._history)[-limit:]
        return [d.model_copy(deep=True) for d in reversed(recent)]

    def get_timeframe_stats(self) -> dict[str, TimeframeStats]:
        stats: dict[str, TimeframeStats] = {}
        for decision in self._history:
            tf = stats.setdefault(decision.timeframe, TimeframeStats())
            tf.total += 1
            if decision.status == DecisionStatus.PENDING:
                tf.pending += 1
            elif decision.status == DecisionStatus.READY:
                tf.ready += 1
            else:
                tf.evaluated += 1
                _count_result(tf, decision.evaluation.result)

        for tf in stats.values():
            decisive = tf.correct + tf.incorrect
            tf.accuracy = tf.correct / decisive * 100 if decisive else 0.0
        return stats

    def reset(self) -> None:
        self._history.clear()
        self._index.clear()
        logger.info("Decision history cleared")

    clear_history = reset


def _count_result(stats: TimeframeStats, result: EvaluationResult) -> None:
    if result == EvaluationResult.CORRECT:
        stats.correct += 1
    elif result == EvaluationResult.INCORRECT:
        stats.incorrect += 1
    else:
        stats.neutral += 1
