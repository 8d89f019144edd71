"""
Indicator Bank Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod
from typing import Sequence

from signalpro.services.base import BaseService
from signalpro.schemas.market import CandleInput, PreparedSeries
from signalpro.schemas.indicators import IndicatorSet


class IndicatorServiceInterface(BaseService[PreparedSeries, IndicatorSet]):
    """
    Indicator Bank Contract.

    INPUT: PreparedSeries
        - closed-candle arrays plus the live price

    OUTPUT: IndicatorSet
        - rsi, macd, stoch_rsi, mfi, trend, divergence, occ, stc_cci,
          ema levels, atr, current price, volume, average volume

    Never raises for short series; each indicator falls back to its
    neutral default.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    def execute(self, input_data: PreparedSeries) -> IndicatorSet:
        """Calculate the full indicator battery."""
        pass

    @abstractmethod
    def calculate_for_candles(self, candles: Sequence[CandleInput]) -> IndicatorSet:
        """Prepare raw candles (dropping the open one) and calculate."""
        pass
