"""
CONTRACT 4: Decision Ledger

Input: RecordDecisionRequest (an AnalysisResult plus market context)
Output: Decision records, Evaluation results, ledger statistics

A Decision moves pending -> ready -> evaluated and never back.
`evaluation` is set if and only if the status is `evaluated`.
"""

from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from signalpro.schemas.indicators import IndicatorSet, SignalType


# =============================================================================
# ENUMS
# =============================================================================


class DecisionStatus(str, Enum):
    PENDING = "pending"
    READY = "ready"
    EVALUATED = "evaluated"


class EvaluationResult(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    NEUTRAL = "neutral"


# =============================================================================
# INPUT: RecordDecisionRequest
# =============================================================================


class MarketContext(BaseModel):
    """Market conditions at decision time, used for bucketed reporting."""

    total_score: Optional[float] = None
    market_regime: Optional[str] = Field(
        default=None, description="uptrend / downtrend / sideways"
    )
    relative_volatility: Optional[float] = Field(
        default=None, description="ATR as % of price"
    )


class RecordDecisionRequest(BaseModel):
    """
    Payload for recording a decision.
    Sent by: SignalService / host
    Received by: DecisionLedger.record_decision
    """

    direction: SignalType
    confidence: float = Field(..., ge=0, le=100)
    current_price: float
    timeframe: str
    indicators: Optional[IndicatorSet] = None
    explanation: str = ""
    market_context: MarketContext = Field(default_factory=MarketContext)
    evaluation_horizon_ms: Optional[int] = Field(
        default=None, description="Explicit horizon override; non-positive uses the timeframe table"
    )

    @field_validator("evaluation_horizon_ms")
    @classmethod
    def _drop_non_positive_horizon(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            return None
        return v


# =============================================================================
# OUTPUT: Decision
# =============================================================================


class Evaluation(BaseModel):
    """Outcome of a decision against a later observed price."""

    model_config = ConfigDict(frozen=True)

    result: EvaluationResult
    future_price: float
    price_change_pct: float
    evaluated_at: int


class Decision(BaseModel):
    """A recorded decision and its lifecycle state."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    timestamp: int = Field(..., description="Recording time, epoch milliseconds")
    direction: SignalType
    confidence: float
    current_price_at_decision: float
    indicator_snapshot: Optional[IndicatorSet] = None
    timeframe: str
    explanation: str = ""
    market_context: MarketContext = Field(default_factory=MarketContext)
    evaluation_horizon_ms: int
    status: DecisionStatus = DecisionStatus.PENDING
    evaluation: Optional[Evaluation] = None

    @model_validator(mode="after")
    def _check_evaluation_matches_status(self) -> "Decision":
        if (self.evaluation is not None) != (self.status == DecisionStatus.EVALUATED):
            raise ValueError("evaluation must be present exactly when status is evaluated")
        return self

    def is_due(self, now: int) -> bool:
        """Whether the evaluation horizon has elapsed at `now`."""
        return now - self.timestamp >= self.evaluation_horizon_ms

    def mark_ready(self) -> None:
        if self.status != DecisionStatus.PENDING:
            raise ValueError(f"cannot move {self.status.value} decision to ready")
        self.status = DecisionStatus.READY

    def mark_evaluated(self, evaluation: Evaluation) -> None:
        if self.status != DecisionStatus.READY:
            raise ValueError(f"cannot evaluate {self.status.value} decision")
        self.evaluation = evaluation
        self.status = DecisionStatus.EVALUATED


# =============================================================================
# OUTPUT: Consumer event + statistics
# =============================================================================


class DecisionOutcome(BaseModel):
    """
    Event forwarded to metrics consumers when a decision is evaluated.
    `success` is the only required field.
    """

    model_config = ConfigDict(populate_by_name=True)

    timeframe: str = "unknown"
    direction: SignalType = SignalType.NEUTRAL
    success: bool
    return_pct: float = Field(default=0.0, alias="return")
    confidence: float = 0.0
    timestamp: Optional[int] = None


class TimeframeStats(BaseModel):
    total: int = 0
    pending: int = 0
    ready: int = 0
    evaluated: int = 0
    correct: int = 0
    incorrect: int = 0
    neutral: int = 0
    accuracy: float = 0.0


class LedgerStats(TimeframeStats):
    """
    Overall ledger statistics.

    accuracy = correct / (correct + incorrect); win_rate = correct / evaluated.
    """

    win_rate: float = 0.0
