"""Tender Ranker — Scorer Package.

Heuristic factor scoring, weighted aggregation, ranking and
strength/concern annotation of proposals.
"""

from tender_ranker.scorer.factors import FactorScorer, HeuristicFactorScorer
from tender_ranker.scorer.ranking import RankingEngine, rank

__all__ = [
    "FactorScorer",
    "HeuristicFactorScorer",
    "RankingEngine",
    "rank",
]
