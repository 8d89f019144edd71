import logging

import pytest

from signalpro.schemas.decision import DecisionOutcome
from signalpro.schemas.indicators import SignalType
from signalpro.services.base import ValidationError
from signalpro.services.metrics import RollingMetrics


@pytest.fixture
def metrics(t0):
    return RollingMetrics(window_size=50, clock=lambda: t0)


def _outcome(success, direction="BUY", ret=None, confidence=60.0):
    if ret is None:
        ret = 0.5 if success else -0.5
    return DecisionOutcome(
        direction=direction, success=success, return_pct=ret, confidence=confidence
    )


def test_empty_snapshot(metrics, t0):
    snapshot = metrics.get_snapshot()

    assert snapshot.timestamp == t0
    assert snapshot.window_size == 0
    assert snapshot.max_window_size == 50
    assert snapshot.metrics.recent_accuracy == 0
    assert snapshot.recent_decisions == []


def test_accuracy_and_distribution(metrics):
    metrics.record(_outcome(True, "BUY", confidence=80))
    metrics.record(_outcome(False, "SELL", confidence=40))
    metrics.record(_outcome(True, "SELL", confidence=60))
    metrics.record(_outcome(False, "NEUTRAL", ret=0.0, confidence=20))

    summary = metrics.get_snapshot().metrics
    assert summary.total_decisions == 4
    assert summary.recent_accuracy == pytest.approx(50.0)
    assert summary.recent_win_rate == pytest.approx(50.0)
    assert summary.avg_confidence == pytest.approx(50.0)
    assert summary.buy_ratio == pytest.approx(25.0)
    assert summary.sell_ratio == pytest.approx(50.0)
    assert summary.neutral_ratio == pytest.approx(25.0)


def test_error_streaks(metrics):
    for success in [False, False, False, True, False]:
        metrics.record(_outcome(success))

    summary = metrics.get_snapshot().metrics
    assert summary.consecutive_errors == 1
    assert summary.max_consecutive_errors == 3

    # a correct SELL ends the run
    metrics.record(_outcome(True, "SELL"))
    assert metrics.get_snapshot().metrics.consecutive_errors == 0


def test_window_is_bounded(t0):
    metrics = RollingMetrics(window_size=3, clock=lambda: t0)
    for i in range(5):
        metrics.record(_outcome(i % 2 == 0, confidence=float(i)))

    window = metrics.get_window()
    assert len(window) == 3
    assert [o.confidence for o in window] == [2.0, 3.0, 4.0]


def test_missing_success_is_ignored(metrics, caplog):
    with caplog.at_level(logging.WARNING):
        assert metrics.record({"direction": "BUY", "return": 1.0}) is None
        assert metrics.record(None) is None

    assert len(metrics) == 0
    assert "Invalid outcome ignored" in caplog.text


def test_dict_outcome_with_defaults(metrics, t0):
    outcome = metrics.record({"success": True, "return": 0.25})

    assert outcome.return_pct == 0.25
    assert outcome.timeframe == "unknown"
    assert outcome.direction == SignalType.NEUTRAL
    assert outcome.timestamp == t0


def test_callable_as_consumer(metrics):
    metrics(_outcome(True))
    assert len(metrics) == 1


def test_recent_metrics(metrics):
    for success in [False] * 10 + [True] * 10:
        metrics.record(_outcome(success))

    assert metrics.get_recent_metrics(10).accuracy == pytest.approx(100.0)
    assert metrics.get_recent_metrics(20).accuracy == pytest.approx(50.0)
    assert metrics.get_recent_metrics(0).window_size == 0
    assert len(metrics.get_snapshot().recent_decisions) == 10


def test_reset(metrics):
    metrics.record(_outcome(True))
    metrics.reset()
    assert metrics.get_snapshot().window_size == 0


def test_invalid_window_size():
    with pytest.raises(ValidationError):
        RollingMetrics(window_size=0)
