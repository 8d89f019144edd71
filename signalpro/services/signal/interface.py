"""
Signal Service Interface

Orchestrates the pipeline for one instrument.
"""

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Sequence

from signalpro.services.base import BaseService
from signalpro.schemas.market import CandleInput
from signalpro.schemas.analysis import AnalysisConfig, AnalysisResult
from signalpro.schemas.decision import Decision


@dataclass
class SignalRequest:
    """Request for one analysis pass."""

    candles: Sequence[CandleInput]
    timeframe: str = "5m"
    config: AnalysisConfig = field(default_factory=AnalysisConfig)


class SignalServiceInterface(BaseService[SignalRequest, AnalysisResult]):
    """
    Signal Service Contract.

    PIPELINE:
        candles ─▶ IndicatorBank ─▶ ScoringEngine ─▶ DecisionResolver
                                                         │
                                                         ▼
                                   RollingMetrics ◀─ DecisionLedger
    """

    @property
    def name(self) -> str:
        return "SignalService"

    @abstractmethod
    def analyze(
        self,
        candles: Sequence[CandleInput],
        timeframe: str,
        config: Optional[AnalysisConfig] = None,
        now: Optional[int] = None,
    ) -> AnalysisResult:
        """Candles to decision."""
        pass

    @abstractmethod
    def record(
        self,
        result: AnalysisResult,
        evaluation_horizon_ms: Optional[int] = None,
        now: Optional[int] = None,
    ) -> Optional[Decision]:
        """Record an analysis in the ledger."""
        pass

    @abstractmethod
    def advance_and_evaluate(
        self, current_price: float, now: Optional[int] = None
    ) -> list[Decision]:
        """Host polling entry point."""
        pass
