"""
Decision Ledger

CONTRACT:
    Input:  RecordDecisionRequest, observed prices, host timestamps
    Output: Decision lifecycle + ledger statistics

RESPONSIBILITIES:
    - Keep a bounded (FIFO-evicting) history of decisions
    - Gate evaluation on a timeframe-dependent horizon
    - Classify outcomes as correct / incorrect / neutral
    - Forward each outcome to registered consumers (best effort)
    - Answer stats / history / per-timeframe queries

One ledger per instrument. No process-wide state.
"""

from signalpro.services.evaluation.interface import (
    DecisionLedgerInterface,
    OutcomeObserver,
)
from signalpro.services.evaluation.ledger import (
    HORIZON_MINUTES,
    DecisionLedger,
    classify_outcome,
    evaluation_horizon_minutes,
)

__all__ = [
    "DecisionLedgerInterface",
    "OutcomeObserver",
    "DecisionLedger",
    "HORIZON_MINUTES",
    "classify_outcome",
    "evaluation_horizon_minutes",
]
