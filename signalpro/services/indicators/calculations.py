"""
Technical Indicator Calculations

Pure Python/NumPy implementations of the indicator battery.
All math is deterministic. Every function degrades to a fixed neutral value
when the series is too short instead of raising.
"""

from typing import Optional, Sequence, Union

import numpy as np

ArrayLike = Union[np.ndarray, Sequence[float]]

# Floor used when ATR cannot be computed; never exactly zero so it can divide.
ATR_FLOOR = 0.0001


def _as_array(data: ArrayLike) -> np.ndarray:
    return np.asarray(data, dtype=float)


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: ArrayLike, period: int) -> np.ndarray:
    """Simple Moving Average."""
    data = _as_array(data)
    if len(data) < period:
        return np.full(len(data), np.nan)

    result = np.full(len(data), np.nan)
    for i in range(period - 1, len(data)):
        result[i] = np.mean(data[i - period + 1 : i + 1])
    return result


def ema(data: ArrayLike, period: int) -> np.ndarray:
    """Exponential Moving Average series; NaN until the window fills."""
    data = _as_array(data)
    if len(data) < period:
        return np.full(len(data), np.nan)

    result = np.full(len(data), np.nan)
    multiplier = 2 / (period + 1)

    # Start with SMA
    result[period - 1] = np.mean(data[:period])

    for i in range(period, len(data)):
        result[i] = (data[i] - result[i - 1]) * multiplier + result[i - 1]

    return result


def ema_value(data: ArrayLike, period: int) -> float:
    """
    Last EMA value.

    A series shorter than `period` returns its last raw value (NaN if empty).
    """
    data = _as_array(data)
    if len(data) == 0:
        return float("nan")
    if len(data) < period:
        return float(data[-1])

    multiplier = 2 / (period + 1)
    value = float(np.mean(data[:period]))
    for price in data[period:]:
        value = (price - value) * multiplier + value
    return float(value)


def smma(data: ArrayLike, period: int) -> np.ndarray:
    """
    Smoothed Moving Average (RMA) series.

    Compact: the first element is the seed at index `period - 1`, so the
    result has `len(data) - period + 1` entries (empty when too short).
    """
    data = _as_array(data)
    if len(data) < period:
        return np.array([], dtype=float)

    result = np.empty(len(data) - period + 1)
    value = float(np.mean(data[:period]))
    result[0] = value
    for j, price in enumerate(data[period:], start=1):
        value = (value * (period - 1) + price) / period
        result[j] = value
    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def rsi_value(closes: ArrayLike, period: int = 14) -> float:
    """
    Relative Strength Index (Wilder).

    Seeded with the plain average gain/loss of the first `period` changes,
    then smoothed with weight (period - 1) / period. No losses at all gives
    100, including a perfectly flat series. Needs period + 1 closes, else 50.
    """
    closes = _as_array(closes)
    if len(closes) < period + 1:
        return 50.0

    deltas = np.diff(closes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = float(np.sum(gains[:period])) / period
    avg_loss = float(np.sum(losses[:period])) / period

    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period

    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return float(100 - (100 / (1 + rs)))


def macd_histogram(
    closes: ArrayLike,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> float:
    """
    MACD minus its signal line at the last closed candle.

    Returns 0 with fewer than `slow_period` closes or fewer than
    `signal_period` defined MACD points.
    """
    closes = _as_array(closes)
    if len(closes) < slow_period:
        return 0.0

    macd_line = ema(closes, fast_period) - ema(closes, slow_period)
    valid = macd_line[~np.isnan(macd_line)]
    if len(valid) < signal_period:
        return 0.0

    signal = ema_value(valid, signal_period)
    return float(valid[-1] - signal)


def stochastic_rsi(
    closes: ArrayLike,
    period: int = 14,
    stoch_period: int = 14,
    k_period: int = 3,
) -> float:
    """
    Stochastic RSI %K.

    The RSI series is built from growing prefixes of the close series (each
    point is the full-history RSI up to that candle), then min/max normalized
    over `stoch_period` and averaged over the last `k_period` points.
    """
    closes = _as_array(closes)
    rsi_values = [rsi_value(closes[: i + 1], period) for i in range(period, len(closes))]
    if len(rsi_values) < stoch_period:
        return 50.0

    stoch_values = []
    for i in range(stoch_period - 1, len(rsi_values)):
        window = rsi_values[i - stoch_period + 1 : i + 1]
        highest = max(window)
        lowest = min(window)
        spread = highest - lowest
        if spread == 0:
            stoch_values.append(50.0)
            continue
        stoch_values.append((rsi_values[i] - lowest) / spread * 100)

    # Divisor stays k_period even when fewer points exist
    return float(sum(stoch_values[-k_period:]) / k_period)


def mfi_value(
    highs: ArrayLike,
    lows: ArrayLike,
    closes: ArrayLike,
    volumes: ArrayLike,
    period: int = 14,
) -> float:
    """
    Money Flow Index over the first `period` transitions of the series.

    No negative flow gives 100. Fewer than `period` closes gives 50.
    """
    closes = _as_array(closes)
    if len(closes) < period:
        return 50.0

    typical_price = (_as_array(highs) + _as_array(lows) + closes) / 3
    raw_money_flow = typical_price * _as_array(volumes)

    positive_flow = 0.0
    negative_flow = 0.0
    for i in range(1, min(period + 1, len(typical_price))):
        if typical_price[i] > typical_price[i - 1]:
            positive_flow += raw_money_flow[i]
        elif typical_price[i] < typical_price[i - 1]:
            negative_flow += raw_money_flow[i]

    if negative_flow == 0:
        return 100.0
    money_ratio = positive_flow / negative_flow
    return float(100 - (100 / (1 + money_ratio)))


def cci(
    highs: ArrayLike, lows: ArrayLike, closes: ArrayLike, period: int = 20
) -> np.ndarray:
    """Commodity Channel Index series."""
    closes = _as_array(closes)
    typical_price = (_as_array(highs) + _as_array(lows) + closes) / 3
    tp_sma = sma(typical_price, period)

    # Mean deviation
    mean_dev = np.full(len(closes), np.nan)
    for i in range(period - 1, len(closes)):
        mean_dev[i] = np.mean(
            np.abs(typical_price[i - period + 1 : i + 1] - tp_sma[i])
        )

    with np.errstate(divide="ignore", invalid="ignore"):
        result = (typical_price - tp_sma) / (0.015 * mean_dev)
    return result


def cci_value(
    highs: ArrayLike, lows: ArrayLike, closes: ArrayLike, period: int = 20
) -> float:
    """Last CCI value; 0 when too short or when the mean deviation is zero."""
    if len(closes) < period:
        return 0.0
    value = cci(highs, lows, closes, period)[-1]
    return float(value) if np.isfinite(value) else 0.0


def schaff_trend_cycle(
    closes: ArrayLike,
    fast_period: int = 23,
    slow_period: int = 50,
    cycle_period: int = 10,
) -> float:
    """
    Schaff Trend Cycle (single stochastic pass over MACD).

    The MACD of the last `2 * cycle_period` prefixes is min/max normalized
    over the final `cycle_period` points. Returns 50 when too short or flat.
    """
    closes = _as_array(closes)
    if len(closes) < slow_period + cycle_period:
        return 50.0

    macd_now = ema_value(closes, fast_period) - ema_value(closes, slow_period)

    macd_series = []
    for i in range(max(0, len(closes) - cycle_period * 2), len(closes)):
        prefix = closes[: i + 1]
        macd_series.append(ema_value(prefix, fast_period) - ema_value(prefix, slow_period))

    recent = macd_series[-cycle_period:]
    highest = max(recent)
    lowest = min(recent)
    spread = highest - lowest
    if spread == 0:
        return 50.0

    return float((macd_now - lowest) / spread * 100)


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def atr_value(
    highs: ArrayLike, lows: ArrayLike, closes: ArrayLike, period: int = 14
) -> float:
    """Average True Range (Wilder). Returns ATR_FLOOR when too short."""
    closes = _as_array(closes)
    if len(closes) < period + 1:
        return ATR_FLOOR

    highs = _as_array(highs)
    lows = _as_array(lows)

    # True Range, from the second candle on
    tr = np.zeros(len(closes) - 1)
    for i in range(1, len(closes)):
        tr[i - 1] = max(
            highs[i] - lows[i],
            abs(highs[i] - closes[i - 1]),
            abs(lows[i] - closes[i - 1]),
        )

    value = float(np.sum(tr[:period])) / period
    for i in range(period, len(tr)):
        value = (value * (period - 1) + tr[i]) / period
    return float(value)


# =============================================================================
# TREND / PATTERN HEURISTICS
# =============================================================================


def classify_trend(
    closes: ArrayLike, ema20: float, ema50: float, ema200: float
) -> str:
    """
    Trend of the last close against the EMA stack.

    200+ closes: full stack ordering. 20-199 closes: last close vs EMA20
    only. Fewer than 20: always sideways.
    """
    closes = _as_array(closes)
    if len(closes) < 20:
        return "sideways"

    price = closes[-1]
    if len(closes) >= 200:
        if price > ema20 > ema50 > ema200:
            return "uptrend"
        if price < ema20 < ema50 < ema200:
            return "downtrend"
        return "sideways"

    if price > ema20:
        return "uptrend"
    if price < ema20:
        return "downtrend"
    return "sideways"


def detect_divergence(
    closes: ArrayLike, rsi: float, lookback: int = 20
) -> Optional[str]:
    """
    Price-extreme vs RSI-level heuristic.

    'bullish' when the last close sits at the window low while RSI > 35,
    'bearish' when it sits at the window high while RSI < 65, else None.
    """
    recent = _as_array(closes)[-lookback:]
    if len(recent) == 0:
        return None

    last = recent[-1]
    if last <= np.min(recent) and rsi > 35:
        return "bullish"
    if last >= np.max(recent) and rsi < 65:
        return "bearish"
    return None


def price_change_percent(closes: ArrayLike, lookback: int = 5) -> float:
    """Raw percentage move from the first to the last of the last `lookback` closes."""
    recent = _as_array(closes)[-lookback:]
    if len(recent) == 0:
        return 0.0
    with np.errstate(divide="ignore", invalid="ignore"):
        return float((recent[-1] - recent[0]) / recent[0] * 100)


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def finite_or(value: Optional[float], default: float) -> float:
    """Return `value` when it is a finite number, else `default`."""
    if value is None:
        return default
    try:
        value = float(value)
    except (TypeError, ValueError):
        return default
    return value if np.isfinite(value) else default
