"""
Decision Ledger Interface

Defines the contract for recording and evaluating decisions.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional, Union

from signalpro.schemas.decision import (
    Decision,
    DecisionOutcome,
    EvaluationResult,
    LedgerStats,
    RecordDecisionRequest,
    TimeframeStats,
)

OutcomeObserver = Callable[[DecisionOutcome], None]


class DecisionLedgerInterface(ABC):
    """
    Decision Ledger Contract.

    RECORD: RecordDecisionRequest -> Decision (status pending)
    ADVANCE: pending -> ready once the horizon has elapsed (host-driven)
    EVALUATE: ready -> evaluated against an observed price
    QUERY: stats, per-timeframe stats, newest-first history

    STATES:
        pending ──(horizon elapsed)──▶ ready ──(price observed)──▶ evaluated
    """

    @abstractmethod
    def record_decision(
        self, payload: Union[RecordDecisionRequest, dict], now: Optional[int] = None
    ) -> Optional[Decision]:
        """Append a pending decision. Invalid payloads are a logged no-op."""
        pass

    @abstractmethod
    def advance(self, now: Optional[int] = None) -> list[Decision]:
        """Move every due pending decision to ready."""
        pass

    @abstractmethod
    def evaluate(
        self,
        decision: Union[Decision, str],
        future_price: float,
        now: Optional[int] = None,
    ) -> Optional[EvaluationResult]:
        """Classify a ready decision. Anything not ready returns None."""
        pass

    @abstractmethod
    def advance_and_evaluate(
        self, current_price: float, now: Optional[int] = None
    ) -> list[Decision]:
        """Advance, then evaluate every ready decision at one price."""
        pass

    @abstractmethod
    def subscribe(self, observer: OutcomeObserver) -> None:
        """Register a consumer for evaluation outcomes."""
        pass

    @abstractmethod
    def get_stats(self) -> LedgerStats:
        pass

    @abstractmethod
    def get_history(self, limit: int = 50) -> list[Decision]:
        pass

    @abstractmethod
    def get_timeframe_stats(self) -> dict[str, TimeframeStats]:
        pass

    @abstractmethod
    def reset(self) -> None:
        """Drop all history."""
        pass
