"""Tender Ranker — Factor Scorer.

Six independent heuristic scores per proposal, each in [0, 100]:
budget competitiveness, vendor reputation, technical capability,
proposal quality, timeline feasibility and communication quality.

None of the scoring functions raise on malformed input. Unparseable
budgets give the neutral score and missing text is treated as empty.
"""

from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from tender_ranker.models import FactorScores, Proposal, Solicitation
from tender_ranker.scorer.keywords import (
    BUFFER_WORDS,
    CATEGORY_TABLES,
    COURTESY_PHRASES,
    ENTITY_SUFFIXES,
    MONTH_TIERS,
    PROFESSIONAL_WORDS,
    QUALIFICATION_KEYWORDS,
    TRACK_RECORD_WORDS,
    WEEK_TIERS,
    YEARS_TIERS,
    KeywordTable,
    first_tier,
)
from tender_ranker.utils.logger import get_logger

logger = get_logger(__name__)

MAX_SCORE = 100.0

# ── Budget ────────────────────────────────────────────────
NEUTRAL_BUDGET_SCORE = 50.0
BELOW_MINIMUM_SCORE = 20.0
OVER_MAXIMUM_SCORE = 10.0
# (low, high, score) on the proposed position within [min, max];
# bands overlap, so the narrowest one is listed first
BUDGET_BANDS: tuple[tuple[float, float, float], ...] = (
    (0.70, 0.90, 95.0),
    (0.50, 0.95, 85.0),
    (0.30, 0.99, 75.0),
)
EDGE_BUDGET_SCORE = 60.0

_AMOUNT_NOISE = re.compile(r"[$,\s]")
_DECIMAL = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")

# ── Quality ───────────────────────────────────────────────
COMPLETENESS_POINTS = 30.0
# (minimum description length exclusive, bonus), longest first
DESCRIPTION_LENGTH_BANDS: tuple[tuple[int, float], ...] = (
    (500, 15.0),
    (200, 10.0),
    (50, 5.0),
)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _cap(score: float) -> float:
    return min(MAX_SCORE, max(0.0, score))


def parse_amount(value: Any) -> Optional[float]:
    """Parse a lax decimal string such as '$65,000'.

    Strips '$', thousands separators and whitespace, then accepts only
    a plain ASCII decimal (optionally signed, with an exponent).

    Args:
        value: Raw budget value (usually a string).

    Returns:
        The amount as a float, or None if it is empty, unparseable,
        or not finite.
    """
    if value is None:
        return None
    cleaned = _AMOUNT_NOISE.sub("", str(value))
    if not _DECIMAL.fullmatch(cleaned):
        return None
    amount = float(cleaned)
    if not math.isfinite(amount):
        return None
    return amount


# ═══════════════════════════════════════════════════════════
# Factor functions
# ═══════════════════════════════════════════════════════════


def budget_score(proposal: Proposal, solicitation: Solicitation) -> float:
    """Score how well the proposed budget sits inside the solicitation range.

    Returns the neutral 50.0 if any amount fails to parse or the range is
    empty. A bid at or below the minimum scores 20.0, above the maximum
    10.0; in between the relative position is mapped through BUDGET_BANDS
    with 60.0 for positions outside every band.
    """
    proposed = parse_amount(proposal.proposed_budget)
    minimum = parse_amount(solicitation.minimum_budget)
    maximum = parse_amount(solicitation.maximum_budget)

    if proposed is None or minimum is None or maximum is None or maximum <= minimum:
        logger.debug(
            "Neutral budget score for %s (proposed=%r, range=%r-%r)",
            proposal.proposal_id, proposal.proposed_budget,
            solicitation.minimum_budget, solicitation.maximum_budget,
        )
        return NEUTRAL_BUDGET_SCORE

    if proposed <= minimum:
        return BELOW_MINIMUM_SCORE
    if proposed > maximum:
        return OVER_MAXIMUM_SCORE

    position = (proposed - minimum) / (maximum - minimum)
    for low, high, score in BUDGET_BANDS:
        if low <= position <= high:
            return score
    return EDGE_BUDGET_SCORE


def reputation_score(proposal: Proposal) -> float:
    """Score apparent vendor standing from company name and experience text."""
    score = 50.0

    company = _text(proposal.company_name).lower()
    if ENTITY_SUFFIXES.contains_any(company):
        score += 15.0

    experience = _text(proposal.experience).lower()
    if "years" in experience:
        score += first_tier(experience, YEARS_TIERS) or 0.0

    if TRACK_RECORD_WORDS.contains_any(experience):
        score += 10.0

    return _cap(score)


def technical_score(
    proposal: Proposal,
    solicitation: Solicitation,
    category_tables: tuple[tuple[Callable[[str], bool], KeywordTable], ...] = CATEGORY_TABLES,
) -> float:
    """Score technical capability from keywords in experience + description.

    Category tables apply when their predicate accepts the lowercased
    solicitation category (several may apply); qualification keywords
    always count.
    """
    score = 50.0

    category = _text(solicitation.category).lower()
    combined = f"{_text(proposal.experience)} {_text(proposal.description)}".lower()

    for applies, table in category_tables:
        if applies(category):
            score += table.score(combined)

    score += QUALIFICATION_KEYWORDS.score(combined)
    return _cap(score)


def quality_score(proposal: Proposal) -> float:
    """Score completeness, description length and professional wording."""
    score = 50.0

    required = (
        proposal.title,
        proposal.proposed_budget,
        proposal.timeline,
        proposal.description,
        proposal.company_name,
        proposal.contact_person,
        proposal.email,
    )
    completed = sum(1 for value in required if _text(value).strip())
    score += completed / len(required) * COMPLETENESS_POINTS

    description = _text(proposal.description)
    for min_length, bonus in DESCRIPTION_LENGTH_BANDS:
        if len(description) > min_length:
            score += bonus
            break

    score += PROFESSIONAL_WORDS.score(description.lower())
    return _cap(score)


def timeline_score(proposal: Proposal) -> float:
    """Score the stated delivery timeline.

    Week-based timelines are checked before month-based ones; a mention
    of buffer/contingency/flexibility adds 10 on top.
    """
    score = 70.0
    timeline = _text(proposal.timeline).lower()

    if "week" in timeline:
        tier = first_tier(timeline, WEEK_TIERS)
    elif "month" in timeline:
        tier = first_tier(timeline, MONTH_TIERS)
    else:
        tier = None
    if tier is not None:
        score = tier

    if BUFFER_WORDS.contains_any(timeline):
        score += 10.0

    return _cap(score)


def communication_score(proposal: Proposal) -> float:
    """Score contact details and courteous phrasing."""
    score = 70.0

    if _text(proposal.phone):
        score += 10.0

    email = _text(proposal.email)
    if "@" in email and "." in email:
        score += 10.0

    score += COURTESY_PHRASES.score(_text(proposal.description).lower())
    return _cap(score)


# ═══════════════════════════════════════════════════════════
# Scorer interface
# ═══════════════════════════════════════════════════════════


class FactorScorer(ABC):
    """Produces the six factor scores for one proposal.

    Implementations must be pure and return every score in [0, 100];
    the aggregation, ranking and annotation steps only see FactorScores.
    """

    name = "base"

    @abstractmethod
    def score(self, proposal: Proposal, solicitation: Solicitation) -> FactorScores:
        """Score one proposal against its solicitation."""


class HeuristicFactorScorer(FactorScorer):
    """Keyword and numeric-range heuristics over the proposal text fields.

    Attributes:
        category_tables: (category predicate, keyword table) pairs used
            by the technical score.
    """

    name = "heuristic"

    def __init__(
        self,
        category_tables: tuple[tuple[Callable[[str], bool], KeywordTable], ...] = CATEGORY_TABLES,
    ) -> None:
        self.category_tables = category_tables

    def score(self, proposal: Proposal, solicitation: Solicitation) -> FactorScores:
        return FactorScores(
            budget=budget_score(proposal, solicitation),
            reputation=reputation_score(proposal),
            technical=technical_score(proposal, solicitation, self.category_tables),
            quality=quality_score(proposal),
            timeline=timeline_score(proposal),
            communication=communication_score(proposal),
        )
