import pytest
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from signalpro import AnalysisConfig, TradingMode, analyze
from signalpro.schemas.indicators import (
    IndicatorResult,
    MACDIndicator,
    OCCIndicator,
    SignalType,
    TrendState,
)


def test_flat_series(make_candles, t0):
    result = analyze(make_candles([100.0] * 30), "5m", now=t0)

    assert result.indicators.rsi.value == 100
    assert result.indicators.macd.value == 0
    assert result.scores.rsi.score == -40
    assert result.timeframe == "5m"
    assert result.timestamp == t0
    assert result.indicators.current_price == 100.0


def test_short_series_neutral_defaults(make_candles, t0):
    closes = [100.0 + i for i in range(15)]
    result = analyze(make_candles(closes), "1m", now=t0)

    # fewer than 26 closed candles
    assert result.indicators.macd.value == 0
    assert result.scores.macd.score == 0
    # fewer than 20 closed candles
    assert result.indicators.trend.value == TrendState.SIDEWAYS
    assert result.indicators.divergence.value is None
    assert result.indicators.stc_cci.value == 0
    assert result.indicators.stc_cci.stc is None


def test_empty_series_is_neutral(t0):
    result = analyze([], "5m", now=t0)

    assert result.direction == SignalType.NEUTRAL
    assert result.indicators.current_price == 0
    assert result.indicators.relative_volatility is None
    assert 0 <= result.confidence <= 100


@pytest.mark.parametrize("mode", list(TradingMode))
@pytest.mark.parametrize("step", [-1.0, -0.1, 0.0, 0.1, 1.0])
def test_confidence_in_range(make_candles, t0, mode, step):
    closes = [100.0 + step * i + (0.3 if i % 3 == 0 else -0.2) for i in range(120)]
    result = analyze(
        make_candles(closes), "15m", AnalysisConfig(trading_mode=mode), now=t0
    )

    assert 0 <= result.confidence <= 100
    assert result.direction in set(SignalType)
    assert result.explanation.endswith(f"Mode: {mode.value}")


def test_long_uptrend(make_candles, t0):
    closes = [100.0 + i * 0.5 + (0.4 if i % 2 else -0.4) for i in range(260)]
    result = analyze(make_candles(closes), "1h", now=t0)

    assert result.indicators.trend.value == TrendState.UPTREND
    assert result.scores.trend.score == 30
    assert result.indicators.ema.ema20 > result.indicators.ema.ema50 > result.indicators.ema.ema200


def test_result_is_immutable(make_candles, t0):
    result = analyze(make_candles([100.0] * 30), "5m", now=t0)

    with pytest.raises(PydanticValidationError):
        result.direction = SignalType.BUY
    with pytest.raises(PydanticValidationError):
        result.indicators.rsi.value = 1
    with pytest.raises(PydanticValidationError):
        result.indicators.ema.ema20 = 1
    with pytest.raises(PydanticValidationError):
        result.scores.macd.score = 1
    with pytest.raises(PydanticValidationError):
        result.scores.divergence.value = None


def test_indicator_results_are_tagged():
    adapter = TypeAdapter(IndicatorResult)

    macd = adapter.validate_python({"kind": "macd", "value": 0.5, "atr": 1.2})
    assert isinstance(macd, MACDIndicator)

    occ = adapter.validate_python(
        {"kind": "occ", "value": 50, "signal": "BUY", "strength": 50, "crossover": True}
    )
    assert isinstance(occ, OCCIndicator)
    assert occ.signal == SignalType.BUY

    with pytest.raises(PydanticValidationError):
        adapter.validate_python({"kind": "unknown", "value": 1})


def test_default_config_matches_settings(make_candles, t0):
    assert AnalysisConfig.from_settings() == AnalysisConfig()

    candles = make_candles([100.0 - i * 0.2 for i in range(40)])
    implicit = analyze(candles, "5m", now=t0)
    explicit = analyze(candles, "5m", AnalysisConfig.from_settings(), now=t0)
    assert implicit.total_score == explicit.total_score
