"""Tender Ranker.

Deterministic multi-factor ranking of the proposals submitted against a
single solicitation.
"""

import logging

from tender_ranker.config import DEFAULT_CONFIG, RankingConfig
from tender_ranker.models import FactorScores, Proposal, RankedProposal, Solicitation
from tender_ranker.scorer import RankingEngine, rank

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DEFAULT_CONFIG",
    "FactorScores",
    "Proposal",
    "RankedProposal",
    "RankingConfig",
    "RankingEngine",
    "Solicitation",
    "rank",
]
