import numpy as np
import pytest

from signalpro.services.indicators.calculations import (
    ATR_FLOOR,
    atr_value,
    cci_value,
    classify_trend,
    detect_divergence,
    ema,
    ema_value,
    finite_or,
    macd_histogram,
    mfi_value,
    price_change_percent,
    rsi_value,
    schaff_trend_cycle,
    smma,
    stochastic_rsi,
)


def test_rsi_flat_series_is_exactly_100():
    assert rsi_value([100.0] * 30) == 100.0


def test_rsi_needs_period_plus_one_closes():
    assert rsi_value([1.0 + i for i in range(14)]) == 50.0
    assert rsi_value([1.0 + i for i in range(15)]) == 100.0


def test_rsi_falling_series_is_zero():
    assert rsi_value([100.0 - i for i in range(30)]) == pytest.approx(0.0)


def test_rsi_mixed_series_between_bounds():
    closes = [100 + 3 * np.sin(i / 2) for i in range(60)]
    value = rsi_value(closes)
    assert 0 < value < 100


def test_ema_value_seeds_with_simple_average():
    assert ema_value([1.0, 2.0, 3.0], 3) == pytest.approx(2.0)
    # multiplier 2 / (3 + 1) = 0.5
    assert ema_value([1.0, 2.0, 3.0, 4.0], 3) == pytest.approx(3.0)


def test_ema_value_short_series_returns_last_value():
    assert ema_value([5.0, 7.0], 20) == 7.0
    assert np.isnan(ema_value([], 20))


def test_ema_series_is_nan_until_window_fills():
    series = ema([1.0, 2.0, 3.0, 4.0], 3)
    assert np.isnan(series[0]) and np.isnan(series[1])
    assert series[2] == pytest.approx(2.0)
    assert series[3] == pytest.approx(3.0)


def test_smma_series():
    assert list(smma([1.0, 2.0, 3.0, 4.0], 2)) == pytest.approx([1.5, 2.25, 3.125])
    assert len(smma([1.0], 2)) == 0


def test_macd_is_zero_without_enough_history():
    assert macd_histogram([100.0 + i for i in range(25)]) == 0.0
    # 30 closes give only 5 MACD points, short of the 9-point signal
    assert macd_histogram([100.0 + i for i in range(30)]) == 0.0


def test_macd_flat_series_is_zero():
    assert macd_histogram([50.0] * 60) == pytest.approx(0.0)


def test_macd_turns_positive_after_acceleration():
    closes = [100.0] * 40 + [100.0 + i ** 1.5 for i in range(1, 15)]
    assert macd_histogram(closes) > 0


def test_stochastic_rsi_defaults_and_flat_range():
    # 27 closes -> 13 RSI points, one short of the stochastic window
    assert stochastic_rsi([100.0 + i for i in range(27)]) == 50.0
    # Constant RSI gives zero range, which maps to 50
    assert stochastic_rsi([100.0] * 40) == pytest.approx(50.0)


def test_stochastic_rsi_stays_in_range():
    closes = [100 + 5 * np.sin(i / 3) for i in range(80)]
    assert 0 <= stochastic_rsi(closes) <= 100


def test_mfi_defaults_and_no_negative_flow():
    short = [10.0] * 13
    assert mfi_value(short, short, short, short) == 50.0

    closes = [10.0 + i for i in range(20)]
    highs = [c + 1 for c in closes]
    lows = [c - 1 for c in closes]
    volumes = [100.0] * 20
    assert mfi_value(highs, lows, closes, volumes) == 100.0


def test_mfi_only_uses_first_period_transitions():
    # First 15 candles fall, the rest rise: only the falling part counts
    closes = [100.0 - i for i in range(15)] + [90.0 + 5 * i for i in range(30)]
    highs = [c + 1 for c in closes]
    lows = [c - 1 for c in closes]
    volumes = [100.0] * len(closes)
    assert mfi_value(highs, lows, closes, volumes) == pytest.approx(0.0)


def test_atr_floor_and_constant_range():
    assert atr_value([1.0] * 14, [1.0] * 14, [1.0] * 14) == ATR_FLOOR

    closes = [100.0] * 30
    highs = [101.0] * 30
    lows = [99.0] * 30
    assert atr_value(highs, lows, closes) == pytest.approx(2.0)


def test_cci_value_defaults():
    assert cci_value([1.0] * 10, [1.0] * 10, [1.0] * 10) == 0.0
    flat = [100.0] * 30
    assert cci_value([101.0] * 30, [99.0] * 30, flat) == 0.0


def test_cci_positive_for_rising_prices():
    closes = [100.0 + i for i in range(40)]
    highs = [c + 1 for c in closes]
    lows = [c - 1 for c in closes]
    assert cci_value(highs, lows, closes) > 0


def test_schaff_trend_cycle_defaults():
    assert schaff_trend_cycle([100.0 + i for i in range(59)]) == 50.0
    assert schaff_trend_cycle([100.0] * 80) == 50.0


def test_trend_is_sideways_below_twenty_closes():
    rising = [100.0 + i for i in range(19)]
    assert classify_trend(rising, 1.0, 1.0, 1.0) == "sideways"


def test_trend_short_history_uses_ema20_only():
    closes = [100.0 + i for i in range(50)]
    assert classify_trend(closes, ema_value(closes, 20), 0, 0) == "uptrend"
    falling = [200.0 - i for i in range(50)]
    assert classify_trend(falling, ema_value(falling, 20), 0, 0) == "downtrend"


def test_trend_long_history_needs_full_stack():
    closes = [100.0 + i * 0.5 for i in range(250)]
    e20, e50, e200 = (ema_value(closes, p) for p in (20, 50, 200))
    assert classify_trend(closes, e20, e50, e200) == "uptrend"

    falling = [400.0 - i * 0.5 for i in range(250)]
    e20, e50, e200 = (ema_value(falling, p) for p in (20, 50, 200))
    assert classify_trend(falling, e20, e50, e200) == "downtrend"

    # Broken ordering is sideways even with price above EMA20
    assert classify_trend(closes, e20, e200, e50) == "sideways"


def test_divergence_heuristic():
    falling = [120.0 - i for i in range(25)]
    assert detect_divergence(falling, rsi=40) == "bullish"
    assert detect_divergence(falling, rsi=30) is None

    rising = [100.0 + i for i in range(25)]
    assert detect_divergence(rising, rsi=50) == "bearish"
    assert detect_divergence(rising, rsi=70) is None

    assert detect_divergence([], rsi=50) is None


def test_price_change_percent_uses_last_five():
    closes = [1.0, 100.0, 101.0, 102.0, 103.0, 110.0]
    assert price_change_percent(closes) == pytest.approx((110 - 100) / 100 * 100)
    assert price_change_percent([]) == 0.0


def test_finite_or():
    assert finite_or(3.5, 0.0) == 3.5
    assert finite_or(float("nan"), 50.0) == 50.0
    assert finite_or(float("inf"), 0.0) == 0.0
    assert finite_or(None, 1.0) == 1.0
