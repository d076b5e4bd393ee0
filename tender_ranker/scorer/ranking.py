"""Tender Ranker — Ranking Engine.

Scores every proposal submitted against one solicitation, aggregates the
six factor scores with fixed weights, sorts by the overall score and
attaches a confidence label plus strengths and concerns.

Pipeline: factor scores → weighted overall → stable sort → rank →
confidence → annotate. The whole pipeline is a pure function of its
inputs; proposals are never modified.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from tender_ranker.config import (
    DEFAULT_CONFIG,
    FACTORS,
    TIE_BREAK_EARLIEST_SUBMISSION,
    RankingConfig,
)
from tender_ranker.models import FactorScores, Proposal, RankedProposal, Solicitation
from tender_ranker.scorer.annotator import identify_concerns, identify_strengths
from tender_ranker.scorer.factors import FactorScorer, HeuristicFactorScorer
from tender_ranker.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScoredProposal:
    """Intermediate result between scoring and ranking."""

    proposal: Proposal
    scores: FactorScores
    overall_score: float


def aggregate(scores: FactorScores, weights: Mapping[str, float]) -> float:
    """Weighted sum of the factor scores, clamped to [0, 100].

    Factors are summed in fixed order so results are reproducible
    to the last bit.
    """
    values = scores.to_dict()
    weighted = 0.0
    for factor in FACTORS:
        weighted += values[factor] * weights[factor]
    return min(100.0, max(0.0, weighted))


def confidence_label(
    score: float,
    rank: int,
    total: int,
    config: RankingConfig = DEFAULT_CONFIG,
) -> str:
    """Map an overall score to a confidence label.

    Bands are checked high to low with >=. Rank and total are accepted
    for callers that pass them but do not affect the label.
    """
    for minimum, label in config.confidence_bands:
        if score >= minimum:
            return label
    return config.confidence_floor


def _sort_key_earliest(entry: ScoredProposal) -> tuple[float, int, float]:
    submitted = entry.proposal.date_submitted
    if submitted is None:
        return (-entry.overall_score, 1, 0.0)
    return (-entry.overall_score, 0, submitted.timestamp())


def order_scored(
    entries: Sequence[ScoredProposal], tie_break: str
) -> list[ScoredProposal]:
    """Sort scored proposals best first.

    The sort is stable, so equal scores keep their input order unless
    tie_break is 'earliest_submission', in which case earlier timestamps
    win and undated proposals follow dated ones.
    """
    if tie_break == TIE_BREAK_EARLIEST_SUBMISSION:
        return sorted(entries, key=_sort_key_earliest)
    return sorted(entries, key=lambda entry: entry.overall_score, reverse=True)


class RankingEngine:
    """Ranks the proposals submitted against one solicitation.

    Attributes:
        config: Weights, thresholds, labels and tie-break mode.
        factor_scorer: Produces the six factor scores per proposal.
    """

    def __init__(
        self,
        config: RankingConfig = DEFAULT_CONFIG,
        factor_scorer: Optional[FactorScorer] = None,
    ) -> None:
        """Initialize the ranking engine.

        Args:
            config: RankingConfig, defaults to the built-in values.
            factor_scorer: Alternative factor scorer; the keyword
                heuristics are used when omitted.
        """
        self.config = config
        self.factor_scorer = factor_scorer or HeuristicFactorScorer()

    def score_proposal(
        self, proposal: Proposal, solicitation: Solicitation
    ) -> tuple[FactorScores, float]:
        """Compute factor scores and the overall score for one proposal.

        Args:
            proposal: The proposal to score.
            solicitation: The solicitation it was submitted against.

        Returns:
            (factor scores, overall score).
        """
        scores = self.factor_scorer.score(proposal, solicitation)
        overall = aggregate(scores, self.config.weights)

        logger.debug(
            "Scored %s: budget=%.1f reputation=%.1f technical=%.1f "
            "quality=%.1f timeline=%.1f communication=%.1f → %.2f",
            proposal.proposal_id or proposal.company_name,
            scores.budget, scores.reputation, scores.technical,
            scores.quality, scores.timeline, scores.communication,
            overall,
        )
        return scores, overall

    def rank(
        self, proposals: Sequence[Proposal], solicitation: Solicitation
    ) -> list[RankedProposal]:
        """Rank proposals best first.

        The caller is trusted to pass only proposals for this
        solicitation. An empty list gives an empty result.

        Args:
            proposals: Proposals to rank.
            solicitation: The solicitation they were submitted against.

        Returns:
            One RankedProposal per input, ordered by rank 1..N.
        """
        if not proposals:
            logger.info(
                "No proposals to rank for solicitation %s",
                solicitation.solicitation_id or solicitation.title,
            )
            return []

        scored = []
        for proposal in proposals:
            scores, overall = self.score_proposal(proposal, solicitation)
            scored.append(ScoredProposal(proposal, scores, overall))

        ordered = order_scored(scored, self.config.tie_break)
        total = len(ordered)

        ranked = [
            RankedProposal(
                proposal=entry.proposal,
                overall_score=entry.overall_score,
                rank=position,
                confidence=confidence_label(
                    entry.overall_score, position, total, self.config,
                ),
                strengths=identify_strengths(entry.scores, self.config),
                concerns=identify_concerns(entry.scores, self.config),
                scores=entry.scores,
            )
            for position, entry in enumerate(ordered, start=1)
        ]

        top = ranked[0]
        logger.info(
            "Ranked %d proposals for solicitation %s: top=%s (%.1f, %s)",
            total,
            solicitation.solicitation_id or solicitation.title,
            top.proposal.proposal_id or top.proposal.company_name,
            top.overall_score,
            top.confidence,
        )
        return ranked


def rank(
    proposals: Sequence[Proposal],
    solicitation: Solicitation,
    config: Optional[RankingConfig] = None,
) -> list[RankedProposal]:
    """Rank proposals against a solicitation with the given or default config."""
    return RankingEngine(config or DEFAULT_CONFIG).rank(proposals, solicitation)
