import numpy as np
import pytest

from signalpro.schemas.indicators import SignalType, TrendState
from signalpro.schemas.market import Candle, prepare_series
from signalpro.services.indicators import (
    IndicatorService,
    open_close_cross,
    stc_cci_vote,
)
from signalpro.services.indicators.calculations import ATR_FLOOR


def test_prepare_series_drops_open_candle(make_candles):
    candles = make_candles([10.0, 11.0, 12.0, 13.0])
    series = prepare_series(candles)

    assert series.closes == [10.0, 11.0, 12.0]
    assert series.current_price == 13.0
    assert series.last_closed_candle.close == 12.0
    assert len(series.timestamps) == 3


def test_prepare_series_handles_tiny_inputs():
    assert len(prepare_series([])) == 0
    single = prepare_series([[0, 1, 2, 0.5, 1.5, 10]])
    assert single.closes == []
    assert single.current_price == 1.5
    assert single.last_closed_candle is None


def test_candle_from_string_row():
    candle = Candle.from_row(["1700000000000", "1.5", "2", "1", "1.75", "300.5", "ignored"])
    assert candle.timestamp == 1700000000000
    assert candle.close == 1.75
    assert candle.volume == 300.5


def test_two_candles_degrade_to_defaults(make_candles):
    indicators = IndicatorService().calculate_for_candles(make_candles([100.0, 101.0]))

    assert indicators.rsi.value == 50.0
    assert indicators.macd.value == 0.0
    assert indicators.stoch_rsi.value == 50.0
    assert indicators.mfi.value == 50.0
    assert indicators.trend.value == TrendState.SIDEWAYS
    assert indicators.occ.signal == SignalType.NEUTRAL
    assert indicators.occ.crossover is False
    assert indicators.stc_cci.value == 0.0
    assert indicators.atr == ATR_FLOOR
    assert indicators.current_price == 101.0
    assert indicators.avg_volume == 0.0


def test_empty_candles_do_not_raise():
    indicators = IndicatorService().calculate_for_candles([])
    assert indicators.current_price == 0.0
    assert indicators.divergence.value is None
    assert indicators.volume == 0.0


def test_full_series_populates_everything(make_candles):
    closes = [100 + 0.3 * i + 2 * np.sin(i / 4) for i in range(260)]
    indicators = IndicatorService().calculate_for_candles(make_candles(closes))

    assert 0 <= indicators.rsi.value <= 100
    assert 0 <= indicators.stoch_rsi.value <= 100
    assert 0 <= indicators.mfi.value <= 100
    assert indicators.atr > ATR_FLOOR
    assert indicators.macd.atr == indicators.atr
    assert indicators.stc_cci.stc is not None
    assert indicators.stc_cci.signal in (SignalType.BUY, SignalType.SELL)
    assert indicators.avg_volume == pytest.approx(1000.0)


def test_occ_bullish_cross():
    opens = np.array([100.0] * 10)
    closes = np.array([99.0] * 9 + [120.0])
    occ = open_close_cross(opens, closes, 8)

    assert occ.signal == SignalType.BUY
    assert occ.value == 50.0
    assert occ.strength == 50.0
    assert occ.crossover is True
    assert occ.close_ma == pytest.approx(101.625)


def test_occ_bearish_cross():
    opens = np.array([100.0] * 10)
    closes = np.array([101.0] * 9 + [80.0])
    occ = open_close_cross(opens, closes, 8)

    assert occ.signal == SignalType.SELL
    assert occ.value == -50.0
    assert occ.crossover is True


def test_occ_without_cross_is_neutral():
    opens = np.array([100.0] * 12)
    closes = np.array([101.0] * 12)
    occ = open_close_cross(opens, closes, 8)

    assert occ.signal == SignalType.NEUTRAL
    assert occ.value == 0.0
    assert occ.crossover is False


def test_occ_needs_period_plus_two_points():
    occ = open_close_cross(np.array([1.0] * 9), np.array([2.0] * 9), 8)
    assert occ.signal == SignalType.NEUTRAL
    assert occ.open_ma is None


def test_stc_cci_needs_fifty_closes():
    closes = np.array([100.0 + i for i in range(49)])
    vote = stc_cci_vote(closes + 1, closes - 1, closes)
    assert vote.signal == SignalType.NEUTRAL
    assert vote.value == 0.0


def test_stc_cci_follows_direction():
    rising = np.array([100.0 + i for i in range(70)])
    vote = stc_cci_vote(rising + 1, rising - 1, rising)
    assert vote.signal == SignalType.BUY
    assert vote.value == 30.0

    falling = np.array([200.0 - i for i in range(70)])
    vote = stc_cci_vote(falling + 1, falling - 1, falling)
    assert vote.signal == SignalType.SELL
    assert vote.value == -30.0
    assert vote.price_change < 0


@pytest.mark.parametrize(
    "stc, cci, change, expected, score",
    [
        (60.0, -5.0, -1.0, SignalType.SELL, -30.0),
        (40.0, 5.0, -1.0, SignalType.SELL, -30.0),
        (40.0, -5.0, 1.0, SignalType.SELL, -30.0),
        (60.0, 5.0, -1.0, SignalType.BUY, 30.0),
        (60.0, -5.0, 1.0, SignalType.BUY, 30.0),
        (40.0, 5.0, 1.0, SignalType.BUY, 30.0),
        # exactly 50 / 0 / 0 are not bullish votes
        (50.0, 0.0, 0.0, SignalType.SELL, -30.0),
    ],
)
def test_stc_cci_vote_counts(monkeypatch, stc, cci, change, expected, score):
    module = "signalpro.services.indicators.service"
    monkeypatch.setattr(f"{module}.schaff_trend_cycle", lambda *args, **kwargs: stc)
    monkeypatch.setattr(f"{module}.cci_value", lambda *args, **kwargs: cci)
    monkeypatch.setattr(f"{module}.price_change_percent", lambda *args, **kwargs: change)

    closes = np.full(60, 100.0)
    vote = stc_cci_vote(closes + 1, closes - 1, closes)

    assert vote.signal == expected
    assert vote.value == score
    assert vote.stc == stc
    assert vote.cci == cci
    assert vote.price_change == change
