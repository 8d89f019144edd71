"""
CONTRACT 2: Indicator Bank

Input: PreparedSeries
Output: IndicatorSet

Every indicator result is a closed, tagged record. Scalar oscillators carry a
single value; signal-producing indicators carry value + signal + strength.
The `kind` tag lets downstream code branch exhaustively.
"""

import math
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================


class SignalType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    NEUTRAL = "NEUTRAL"


class TrendState(str, Enum):
    UPTREND = "uptrend"
    DOWNTREND = "downtrend"
    SIDEWAYS = "sideways"


class DivergenceType(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"


# =============================================================================
# OUTPUT: Indicator Results
# =============================================================================


class ScalarIndicator(BaseModel):
    """Oscillator reduced to one number (RSI, StochRSI, MFI)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["scalar"] = "scalar"
    value: float


class MACDIndicator(BaseModel):
    """MACD histogram together with the ATR used to normalize it."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["macd"] = "macd"
    value: float = Field(..., description="Last MACD minus last signal")
    atr: float


class TrendIndicator(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["trend"] = "trend"
    value: TrendState


class DivergenceIndicator(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["divergence"] = "divergence"
    value: Optional[DivergenceType] = None


class OCCIndicator(BaseModel):
    """Open/Close Cross of smoothed open and close lines."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["occ"] = "occ"
    value: float = Field(..., description="Score: +50, -50 or 0")
    signal: SignalType
    strength: float = Field(..., ge=0)
    crossover: bool = False
    open_ma: Optional[float] = None
    close_ma: Optional[float] = None


class STCCCIIndicator(BaseModel):
    """Schaff Trend Cycle / CCI / momentum vote."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["stc_cci"] = "stc_cci"
    value: float = Field(..., description="Score: +30, -30 or 0")
    signal: SignalType
    strength: float = Field(..., ge=0)
    stc: Optional[float] = None
    cci: Optional[float] = None
    price_change: Optional[float] = None


IndicatorResult = Annotated[
    Union[
        ScalarIndicator,
        MACDIndicator,
        TrendIndicator,
        DivergenceIndicator,
        OCCIndicator,
        STCCCIIndicator,
    ],
    Field(discriminator="kind"),
]


class EMALevels(BaseModel):
    model_config = ConfigDict(frozen=True)

    ema20: float
    ema50: float
    ema200: float


# =============================================================================
# OUTPUT: IndicatorSet (Complete Response)
# =============================================================================


class IndicatorSet(BaseModel):
    """
    Complete indicator battery for one closed-candle series.
    Returned by: Indicator Bank
    Consumed by: Scoring Engine, Decision Resolver, Decision Ledger (snapshot)
    """

    model_config = ConfigDict(frozen=True)

    rsi: ScalarIndicator
    macd: MACDIndicator
    stoch_rsi: ScalarIndicator
    mfi: ScalarIndicator
    trend: TrendIndicator
    divergence: DivergenceIndicator
    occ: OCCIndicator
    stc_cci: STCCCIIndicator
    ema: EMALevels
    atr: float
    current_price: float
    volume: float
    avg_volume: float

    @property
    def relative_volatility(self) -> Optional[float]:
        """ATR as a percentage of the current price."""
        if not self.current_price or not math.isfinite(self.current_price):
            return None
        value = self.atr / self.current_price * 100
        return value if math.isfinite(value) else None
