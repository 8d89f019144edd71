"""
Indicator Bank

CONTRACT:
    Input:  PreparedSeries (closed candles + live price)
    Output: IndicatorSet

RESPONSIBILITIES:
    - RSI, MACD histogram, Stochastic RSI, MFI
    - EMA 20/50/200 and trend classification
    - ATR (division-safe floor)
    - Divergence heuristic
    - Open/Close Cross and STC-CCI vote

PURE PYTHON - Uses NumPy for calculations.
Short series degrade to neutral defaults; nothing here raises.
"""

from signalpro.services.indicators.interface import IndicatorServiceInterface
from signalpro.services.indicators.service import (
    IndicatorService,
    get_indicator_service,
    open_close_cross,
    stc_cci_vote,
)

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorService",
    "get_indicator_service",
    "open_close_cross",
    "stc_cci_vote",
]
