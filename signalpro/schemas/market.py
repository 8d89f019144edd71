"""
CONTRACT 1: Candle Input

Input: raw OHLCV rows (oldest first)
Output: PreparedSeries

The last row of a series is the still-open candle. It only supplies the
current price; every indicator is computed from the closed candles before it.
"""

from enum import Enum
from typing import Any, Optional, Sequence, Union

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class Timeframe(str, Enum):
    M1 = "1m"
    M5 = "5m"
    M15 = "15m"
    H1 = "1h"


# =============================================================================
# INPUT: Candle
# =============================================================================


class Candle(BaseModel):
    """Single candlestick data point."""

    timestamp: int = Field(..., description="Open time in epoch milliseconds")
    open: float
    high: float
    low: float
    close: float
    volume: float = Field(default=0.0)

    @classmethod
    def from_row(cls, row: Union["Candle", dict, Sequence[Any]]) -> "Candle":
        """
        Build a candle from a model, a mapping or a kline row.

        Kline rows are ordered [timestamp, open, high, low, close, volume, ...];
        numeric strings are accepted the way exchange APIs send them.
        """
        if isinstance(row, Candle):
            return row
        if isinstance(row, dict):
            return cls.model_validate(row)
        return cls(
            timestamp=int(float(row[0])),
            open=float(row[1]),
            high=float(row[2]),
            low=float(row[3]),
            close=float(row[4]),
            volume=float(row[5]) if len(row) > 5 else 0.0,
        )


CandleInput = Union[Candle, dict, Sequence[Any]]


# =============================================================================
# OUTPUT: PreparedSeries
# =============================================================================


class PreparedSeries(BaseModel):
    """
    Parallel arrays of the closed candles plus the live price.

    Lists rather than numpy arrays so the model stays serializable; the
    indicator bank converts once on entry.
    """

    closes: list[float] = Field(default_factory=list)
    opens: list[float] = Field(default_factory=list)
    highs: list[float] = Field(default_factory=list)
    lows: list[float] = Field(default_factory=list)
    volumes: list[float] = Field(default_factory=list)
    timestamps: list[int] = Field(default_factory=list)
    current_price: float = Field(
        default=0.0, description="Close of the excluded (still-open) candle"
    )
    last_closed_candle: Optional[Candle] = None

    def __len__(self) -> int:
        return len(self.closes)


def prepare_series(candles: Sequence[CandleInput]) -> PreparedSeries:
    """Drop the open candle and split the rest into aligned arrays."""
    rows = [Candle.from_row(c) for c in candles]
    if not rows:
        return PreparedSeries()

    closed = rows[:-1]
    return PreparedSeries(
        closes=[c.close for c in closed],
        opens=[c.open for c in closed],
        highs=[c.high for c in closed],
        lows=[c.low for c in closed],
        volumes=[c.volume for c in closed],
        timestamps=[c.timestamp for c in closed],
        current_price=rows[-1].close,
        last_closed_candle=closed[-1] if closed else None,
    )
