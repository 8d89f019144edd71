"""
Scoring Engine & Decision Resolver

CONTRACT:
    Input:  IndicatorSet + AnalysisConfig
    Output: ScoreSet, Resolution (direction + confidence)

RESPONSIBILITIES:
    - Map indicator values to bounded scores (fixed rule table)
    - Sum scores, scale by trading mode, adjust for divergence
    - Compare against the mode or override threshold
    - Apply the optional trend filter
    - Produce a one-line explanation

PURE PYTHON - No randomness, no learned weights.
"""

from signalpro.services.scoring.interface import (
    DecisionResolverInterface,
    ScoringEngineInterface,
)
from signalpro.services.scoring.service import (
    DecisionResolver,
    ScoringEngine,
    get_decision_resolver,
    get_scoring_engine,
    rsi_score,
    trend_score,
)

__all__ = [
    "ScoringEngineInterface",
    "DecisionResolverInterface",
    "ScoringEngine",
    "DecisionResolver",
    "get_scoring_engine",
    "get_decision_resolver",
    "rsi_score",
    "trend_score",
]
