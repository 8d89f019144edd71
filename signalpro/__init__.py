"""
SignalPro - technical-indicator decision engine.

Candles in, BUY/SELL/NEUTRAL out, and a ledger that later checks whether
each call was right.
"""

from signalpro.core.logging import setup_logging
from signalpro.schemas import AnalysisConfig, AnalysisResult, Candle, TradingMode
from signalpro.services.evaluation import DecisionLedger
from signalpro.services.metrics import RollingMetrics
from signalpro.services.signal import SignalService, analyze

__version__ = "0.1.0"

__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "Candle",
    "DecisionLedger",
    "RollingMetrics",
    "SignalService",
    "TradingMode",
    "analyze",
    "setup_logging",
]
