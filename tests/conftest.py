import math
from typing import Optional

import pytest

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

T0 = 1_700_000_000_000


def _candles(closes, start: int = T0, step: int = 60_000, volume: float = 1000.0):
    rows = []
    prev = closes[0]
    for i, close in enumerate(closes):
        open_ = prev
        rows.append(
            [
                start + i * step,
                open_,
                max(open_, close) + 0.5,
                min(open_, close) - 0.5,
                close,
                volume,
            ]
        )
        prev = close
    return rows


def _indicators(
    rsi: float = 50.0,
    macd: float = 0.0,
    atr: float = 1.0,
    stoch: float = 50.0,
    mfi: float = 50.0,
    trend: str = "sideways",
    divergence: Optional[str] = None,
    occ: float = 0.0,
    stc_cci: float = 0.0,
    price: float = 100.0,
) -> IndicatorSet:
    def _signal(score: float) -> SignalType:
        if score > 0:
            return SignalType.BUY
        if score < 0:
            return SignalType.SELL
        return SignalType.NEUTRAL

    return IndicatorSet(
        rsi=ScalarIndicator(value=rsi),
        macd=MACDIndicator(value=macd, atr=atr),
        stoch_rsi=ScalarIndicator(value=stoch),
        mfi=ScalarIndicator(value=mfi),
        trend=TrendIndicator(value=TrendState(trend)),
        divergence=DivergenceIndicator(
            value=DivergenceType(divergence) if divergence else None
        ),
        occ=OCCIndicator(
            value=occ,
            signal=_signal(occ),
            strength=abs(occ) if math.isfinite(occ) else 0.0,
            crossover=occ != 0,
        ),
        stc_cci=STCCCIIndicator(
            value=stc_cci,
            signal=_signal(stc_cci),
            strength=abs(stc_cci) if math.isfinite(stc_cci) else 0.0,
        ),
        ema=EMALevels(ema20=price, ema50=price, ema200=price),
        atr=atr,
        current_price=price,
        volume=1000.0,
        avg_volume=1000.0,
    )


@pytest.fixture
def make_candles():
    """Kline rows [ts, open, high, low, close, volume] from a close path."""
    return _candles


@pytest.fixture
def make_indicators():
    """IndicatorSet with neutral defaults; override any value by keyword."""
    return _indicators


@pytest.fixture
def t0() -> int:
    return T0
