"""
Scoring & Decision Interfaces

Defines the contracts for turning indicators into a decision.
"""

from abc import abstractmethod

from signalpro.services.base import BaseService
from signalpro.schemas.indicators import IndicatorSet, SignalType
from signalpro.schemas.analysis import AnalysisConfig, Resolution, ScoreSet


class ScoringEngineInterface(BaseService[IndicatorSet, ScoreSet]):
    """
    Scoring Engine Contract.

    INPUT: IndicatorSet
    OUTPUT: ScoreSet
        - one bounded score + weight per indicator
        - divergence carried as a flag with weight 0
    """

    @property
    def name(self) -> str:
        return "ScoringEngine"

    @abstractmethod
    def execute(self, input_data: IndicatorSet) -> ScoreSet:
        """Score every indicator."""
        pass


class DecisionResolverInterface(BaseService[tuple, Resolution]):
    """
    Decision Resolver Contract.

    INPUT: (ScoreSet, IndicatorSet, AnalysisConfig)
    OUTPUT: Resolution (direction, confidence, total score, threshold)
    """

    @property
    def name(self) -> str:
        return "DecisionResolver"

    @abstractmethod
    def total_score(self, scores: ScoreSet, config: AnalysisConfig) -> float:
        """Sum, scale by mode and adjust for divergence."""
        pass

    @abstractmethod
    def threshold(self, config: AnalysisConfig) -> float:
        """Effective decision threshold."""
        pass

    @abstractmethod
    def resolve(
        self, scores: ScoreSet, indicators: IndicatorSet, config: AnalysisConfig
    ) -> Resolution:
        """Produce direction and confidence."""
        pass

    @abstractmethod
    def explain(
        self, indicators: IndicatorSet, direction: SignalType, config: AnalysisConfig
    ) -> str:
        """One-line human readable reason."""
        pass
