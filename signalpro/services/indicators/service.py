"""
Indicator Bank Service Implementation

Calculates the ten-indicator battery from a prepared candle series.
Pure Python/NumPy calculations.
"""

import logging
from typing import Sequence

import numpy as np

from signalpro.schemas.market import CandleInput, PreparedSeries, prepare_series
from signalpro.schemas.indicators import (
    DivergenceIndicator,
    DivergenceType,
    EMALevels,
    IndicatorSet,
    MACDIndicator,
    OCCIndicator,
    ScalarIndicator,
    SignalType,
    STCCCIIndicator,
    TrendIndicator,
    TrendState,
)
from signalpro.services.indicators.interface import IndicatorServiceInterface
from signalpro.services.indicators.calculations import (
    atr_value,
    cci_value,
    classify_trend,
    detect_divergence,
    ema_value,
    macd_histogram,
    mfi_value,
    price_change_percent,
    rsi_value,
    schaff_trend_cycle,
    smma,
    stochastic_rsi,
)

logger = logging.getLogger(__name__)

RSI_PERIOD = 14
MFI_PERIOD = 14
ATR_PERIOD = 14
OCC_PERIOD = 8
CCI_PERIOD = 20
STC_MIN_CLOSES = 50
OCC_SCORE = 50.0
STC_CCI_SCORE = 30.0


def _neutral_occ() -> OCCIndicator:
    return OCCIndicator(value=0.0, signal=SignalType.NEUTRAL, strength=0.0, crossover=False)


def _neutral_stc_cci() -> STCCCIIndicator:
    return STCCCIIndicator(value=0.0, signal=SignalType.NEUTRAL, strength=0.0)


def open_close_cross(
    opens: np.ndarray, closes: np.ndarray, period: int = OCC_PERIOD
) -> OCCIndicator:
    """
    Open/Close Cross on SMMA(period) of opens and closes.

    Only a cross between the last two smoothed points counts:
    close crossing above open is BUY (+50), below is SELL (-50).
    """
    if len(opens) < period + 2 or len(closes) < period + 2:
        return _neutral_occ()

    open_ma = smma(opens, period)
    close_ma = smma(closes, period)
    if len(open_ma) < 2 or len(close_ma) < 2:
        return _neutral_occ()

    prev_open, current_open = open_ma[-2], open_ma[-1]
    prev_close, current_close = close_ma[-2], close_ma[-1]

    if prev_close <= prev_open and current_close > current_open:
        signal, score, crossover = SignalType.BUY, OCC_SCORE, True
    elif prev_close >= prev_open and current_close < current_open:
        signal, score, crossover = SignalType.SELL, -OCC_SCORE, True
    else:
        signal, score, crossover = SignalType.NEUTRAL, 0.0, False

    return OCCIndicator(
        value=score,
        signal=signal,
        strength=abs(score),
        crossover=crossover,
        open_ma=float(current_open),
        close_ma=float(current_close),
    )


def stc_cci_vote(
    highs: np.ndarray,
    lows: np.ndarray,
    closes: np.ndarray,
    period: int = CCI_PERIOD,
) -> STCCCIIndicator:
    """
    Three-way vote of STC > 50, CCI > 0 and 5-candle momentum > 0.

    Two or three bullish votes is BUY (+30); one or none is SELL (-30).
    """
    if len(closes) < STC_MIN_CLOSES:
        return _neutral_stc_cci()

    stc = schaff_trend_cycle(closes, 23, 50, 10)
    cci = cci_value(highs, lows, closes, period)
    price_change = price_change_percent(closes, 5)

    bullish_votes = int(stc > 50) + int(cci > 0) + int(price_change > 0)
    if bullish_votes >= 2:
        signal, score = SignalType.BUY, STC_CCI_SCORE
    else:
        signal, score = SignalType.SELL, -STC_CCI_SCORE

    return STCCCIIndicator(
        value=score,
        signal=signal,
        strength=abs(score),
        stc=stc,
        cci=cci,
        price_change=price_change,
    )


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Bank.

    Calculates technical indicators for one instrument's closed candles.
    All calculations are deterministic and reproducible.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    def calculate_for_candles(self, candles: Sequence[CandleInput]) -> IndicatorSet:
        """Prepare raw candles and calculate indicators."""
        return self.execute(prepare_series(candles))

    def execute(self, input_data: PreparedSeries) -> IndicatorSet:
        """Calculate all indicators for a prepared series."""
        closes = np.asarray(input_data.closes, dtype=float)
        opens = np.asarray(input_data.opens, dtype=float)
        highs = np.asarray(input_data.highs, dtype=float)
        lows = np.asarray(input_data.lows, dtype=float)
        volumes = np.asarray(input_data.volumes, dtype=float)

        rsi = rsi_value(closes, RSI_PERIOD)
        atr = atr_value(highs, lows, closes, ATR_PERIOD)

        ema20 = ema_value(closes, 20)
        ema50 = ema_value(closes, 50)
        ema200 = ema_value(closes, 200)
        trend = classify_trend(closes, ema20, ema50, ema200)

        divergence = detect_divergence(closes, rsi)

        indicators = IndicatorSet(
            rsi=ScalarIndicator(value=rsi),
            macd=MACDIndicator(value=macd_histogram(closes), atr=atr),
            stoch_rsi=ScalarIndicator(value=stochastic_rsi(closes, RSI_PERIOD)),
            mfi=ScalarIndicator(value=mfi_value(highs, lows, closes, volumes, MFI_PERIOD)),
            trend=TrendIndicator(value=TrendState(trend)),
            divergence=DivergenceIndicator(
                value=DivergenceType(divergence) if divergence else None
            ),
            occ=open_close_cross(opens, closes, OCC_PERIOD),
            stc_cci=stc_cci_vote(highs, lows, closes, CCI_PERIOD),
            ema=EMALevels(ema20=ema20, ema50=ema50, ema200=ema200),
            atr=atr,
            current_price=input_data.current_price,
            volume=float(volumes[-1]) if len(volumes) else 0.0,
            # Average excludes the last closed candle
            avg_volume=float(np.mean(volumes[:-1])) if len(volumes) > 1 else 0.0,
        )

        logger.debug(
            f"Indicators over {len(closes)} closes: rsi={rsi:.2f} trend={trend} "
            f"divergence={divergence}"
        )
        return indicators


# Default instance for callers that do not need isolation
_service_instance = None


def get_indicator_service() -> IndicatorService:
    """Get or create the shared indicator service (stateless)."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService()
    return _service_instance
