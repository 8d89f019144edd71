"""
Signal Service

CONTRACT:
    Input:  Candles + timeframe + AnalysisConfig
    Output: AnalysisResult (and, over time, evaluated Decisions)

RESPONSIBILITIES:
    - Orchestrate indicators → scores → decision
    - Record decisions and forward host price polls to the ledger
    - Wire the rolling metrics consumer and performance reporting

This is the main entry point for hosts.
"""

from signalpro.services.signal.interface import SignalRequest, SignalServiceInterface
from signalpro.services.signal.service import (
    SignalService,
    analyze,
    build_record_request,
    run_analysis,
)

__all__ = [
    "SignalRequest",
    "SignalServiceInterface",
    "SignalService",
    "analyze",
    "build_record_request",
    "run_analysis",
]
