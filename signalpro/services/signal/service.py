"""
Signal Service Implementation

Owns one instrument's pipeline:
    candles → IndicatorBank → ScoringEngine → DecisionResolver
            → DecisionLedger → RollingMetrics

This is the main entry point for hosts. One instance per instrument; hosts
that watch several instruments create several instances.
"""

import logging
from typing import Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from signalpro.core.timeutils import Clock, now_ms, resolve_now
from signalpro.schemas.market import CandleInput, prepare_series
from signalpro.schemas.analysis import AnalysisConfig, AnalysisResult
from signalpro.schemas.decision import Decision, MarketContext, RecordDecisionRequest
from signalpro.services.indicators import IndicatorService, get_indicator_service
from signalpro.services.scoring import (
    DecisionResolver,
    ScoringEngine,
    get_decision_resolver,
    get_scoring_engine,
)
from signalpro.services.evaluation import DecisionLedger
from signalpro.services.metrics import RollingMetrics
from signalpro.services.performance import PerformanceReporter, StrategyInsightsService
from signalpro.services.signal.interface import SignalRequest, SignalServiceInterface

logger = logging.getLogger(__name__)


def analyze(
    candles: Sequence[CandleInput],
    timeframe: str,
    config: Optional[AnalysisConfig] = None,
    now: Optional[int] = None,
) -> AnalysisResult:
    """Stateless analysis of a candle series (last candle = still open)."""
    return run_analysis(
        candles,
        timeframe,
        config or AnalysisConfig(),
        get_indicator_service(),
        get_scoring_engine(),
        get_decision_resolver(),
        resolve_now(now),
    )


def run_analysis(
    candles: Sequence[CandleInput],
    timeframe: str,
    config: AnalysisConfig,
    indicator_service: IndicatorService,
    scoring_engine: ScoringEngine,
    resolver: DecisionResolver,
    timestamp: int,
) -> AnalysisResult:
    series = prepare_series(candles)
    indicators = indicator_service.execute(series)
    scores = scoring_engine.execute(indicators)
    resolution = resolver.resolve(scores, indicators, config)
    explanation = resolver.explain(indicators, resolution.direction, config)

    logger.debug(
        f"Analysis {timeframe}: {resolution.direction.value} "
        f"score={resolution.total_score:.2f} threshold={resolution.threshold:.1f} "
        f"confidence={resolution.confidence:.0f}%"
    )

    return AnalysisResult(
        direction=resolution.direction,
        confidence=resolution.confidence,
        indicators=indicators,
        weights=scoring_engine.weights,
        scores=scores,
        total_score=resolution.total_score,
        explanation=explanation,
        timeframe=timeframe,
        timestamp=timestamp,
    )


def build_record_request(
    result: AnalysisResult, evaluation_horizon_ms: Optional[int] = None
) -> RecordDecisionRequest:
    """Recording payload for an analysis, with its market context."""
    indicators = result.indicators
    return RecordDecisionRequest(
        direction=result.direction,
        confidence=result.confidence,
        current_price=indicators.current_price,
        timeframe=result.timeframe,
        indicators=indicators,
        explanation=result.explanation,
        market_context=MarketContext(
            total_score=result.total_score,
            market_regime=indicators.trend.value.value,
            relative_volatility=indicators.relative_volatility,
        ),
        evaluation_horizon_ms=evaluation_horizon_ms,
    )


class SignalService(SignalServiceInterface):
    """
    Signal Service.

    Holds the only mutable state of the pipeline (ledger history and metrics
    window) for a single instrument.
    """

    def __init__(
        self,
        ledger: Optional[DecisionLedger] = None,
        metrics: Optional[RollingMetrics] = None,
        indicator_service: Optional[IndicatorService] = None,
        scoring_engine: Optional[ScoringEngine] = None,
        resolver: Optional[DecisionResolver] = None,
        clock: Clock = now_ms,
    ):
        self._clock = clock
        self.indicator_service = indicator_service or IndicatorService()
        self.scoring_engine = scoring_engine or ScoringEngine()
        self.resolver = resolver or DecisionResolver()
        self.ledger = ledger or DecisionLedger(clock=clock)
        self.metrics = metrics or RollingMetrics(clock=clock)
        self.ledger.subscribe(self.metrics)
        self.reporter = PerformanceReporter(self.ledger)
        self.insights = StrategyInsightsService(self.reporter)

    @property
    def name(self) -> str:
        return "SignalService"

    def execute(self, input_data: SignalRequest) -> AnalysisResult:
        return self.analyze(input_data.candles, input_data.timeframe, input_data.config)

    def analyze(
        self,
        candles: Sequence[CandleInput],
        timeframe: str,
        config: Optional[AnalysisConfig] = None,
        now: Optional[int] = None,
    ) -> AnalysisResult:
        return run_analysis(
            candles,
            timeframe,
            config or AnalysisConfig(),
            self.indicator_service,
            self.scoring_engine,
            self.resolver,
            resolve_now(now, self._clock),
        )

    def record(
        self,
        result: AnalysisResult,
        evaluation_horizon_ms: Optional[int] = None,
        now: Optional[int] = None,
    ) -> Optional[Decision]:
        try:
            request = build_record_request(result, evaluation_horizon_ms)
        except PydanticValidationError as e:
            logger.warning(f"Analysis not recorded: {e.error_count()} invalid field(s)")
            return None
        return self.ledger.record_decision(request, now=now)

    def advance_and_evaluate(
        self, current_price: float, now: Optional[int] = None
    ) -> list[Decision]:
        return self.ledger.advance_and_evaluate(current_price, now=now)

    def process(
        self,
        candles: Sequence[CandleInput],
        timeframe: str,
        config: Optional[AnalysisConfig] = None,
        now: Optional[int] = None,
    ) -> AnalysisResult:
        """
        One polling cycle: judge due decisions at the live price, then
        analyze the new series and record the result.
        """
        now = resolve_now(now, self._clock)
        result = self.analyze(candles, timeframe, config, now=now)
        self.advance_and_evaluate(result.indicators.current_price, now=now)
        self.record(result, now=now)
        return result

    def reset(self) -> None:
        """Forget all decisions and outcomes (e.g. when switching symbol)."""
        self.ledger.reset()
        self.metrics.reset()
