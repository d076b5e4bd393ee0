"""Tender Ranker — Report Formatters.

Plain-text rendering of ranking results for the terminal.

Layout principles:
  - One data point per line
  - Section dividers (━━━) between proposals
  - Fixed-width factor bars so columns line up
"""

from __future__ import annotations

from typing import Any, Sequence

from tender_ranker.config import FACTORS
from tender_ranker.models import RankedProposal, Solicitation
from tender_ranker.scorer.factors import parse_amount

# ── Separator line for between sections ──────────────────
_SEP = "━" * 48

_FACTOR_TITLES = {
    "budget": "Budget",
    "reputation": "Reputation",
    "technical": "Technical",
    "quality": "Quality",
    "timeline": "Timeline",
    "communication": "Communication",
}

_CONFIDENCE_MARKS = {
    "High": "●●●",
    "Medium": "●●○",
    "Low": "●○○",
    "Very Low": "○○○",
}


def _progress_bar(value: float, length: int = 10) -> str:
    """Create a text progress bar.

    Args:
        value: Score 0-100.
        length: Number of bar characters.

    Returns:
        String like '▰▰▰▰▰▰▰▰▱▱'.
    """
    value = max(0.0, min(100.0, value))
    filled = round(value / 100 * length)
    return "▰" * filled + "▱" * (length - filled)


def _format_money(amount: Any) -> str:
    parsed = parse_amount(amount)
    if parsed is None:
        return str(amount).strip() if amount else ""
    return f"${parsed:,.0f}"


def _format_budget(min_b: Any, max_b: Any) -> str:
    """Format a solicitation budget range.

    Args:
        min_b: Minimum budget as entered.
        max_b: Maximum budget as entered.

    Returns:
        Formatted budget string, or 'Not specified'.
    """
    low = _format_money(min_b)
    high = _format_money(max_b)
    if low and high:
        if low == high:
            return low
        return f"{low} - {high}"
    if high:
        return f"up to {high}"
    if low:
        return f"{low}+"
    return "Not specified"


def format_summary_line(ranked: RankedProposal) -> str:
    """One-line digest entry: rank, company, score and confidence."""
    name = ranked.proposal.company_name or ranked.proposal.title or "Unnamed proposal"
    return (
        f"#{ranked.rank} {name[:40]} — "
        f"{ranked.overall_score:.1f}/100 ({ranked.confidence})"
    )


def format_ranked_proposal(ranked: RankedProposal) -> str:
    """Format a single ranked proposal as a multi-line card.

    Args:
        ranked: The ranking result to render.

    Returns:
        Plain-text card.
    """
    proposal = ranked.proposal
    name = proposal.company_name or "Unnamed company"
    mark = _CONFIDENCE_MARKS.get(ranked.confidence, "")

    lines = [f"#{ranked.rank}  {name}"]
    if proposal.title:
        lines.append(f"    {proposal.title}")

    budget = _format_money(proposal.proposed_budget)
    if budget:
        lines.append(f"    Bid: {budget}")
    if proposal.timeline:
        lines.append(f"    Timeline: {' '.join(proposal.timeline.split())}")

    lines.append("")
    lines.append(
        f"    Overall  {_progress_bar(ranked.overall_score, 20)} "
        f"{ranked.overall_score:5.1f}"
    )
    lines.append(f"    Confidence: {ranked.confidence} {mark}".rstrip())
    lines.append("")

    values = ranked.scores.to_dict()
    for factor in FACTORS:
        lines.append(
            f"    {_FACTOR_TITLES[factor]:<14}{_progress_bar(values[factor])} "
            f"{values[factor]:5.1f}"
        )

    lines.append("")
    lines.append("    Strengths:")
    for strength in ranked.strengths:
        lines.append(f"      + {strength}")

    if ranked.concerns:
        lines.append("    Concerns:")
        for concern in ranked.concerns:
            lines.append(f"      - {concern}")

    return "\n".join(lines)


def format_ranking_report(
    solicitation: Solicitation, ranked: Sequence[RankedProposal]
) -> str:
    """Format the full ranking report for one solicitation.

    Args:
        solicitation: The solicitation the proposals were ranked against.
        ranked: Ranking results in rank order.

    Returns:
        Plain-text report.
    """
    title = solicitation.title or solicitation.solicitation_id or "Untitled solicitation"
    lines = [
        _SEP,
        title,
        f"Category: {solicitation.category or 'Uncategorized'}",
        f"Budget: {_format_budget(solicitation.minimum_budget, solicitation.maximum_budget)}",
    ]
    if solicitation.deadline:
        lines.append(f"Deadline: {solicitation.deadline}")
    lines.append(_SEP)

    if not ranked:
        lines.append("No proposals submitted.")
        return "\n".join(lines)

    lines.append(f"{len(ranked)} proposal(s) ranked")
    lines.append("")
    for entry in ranked:
        lines.append(format_summary_line(entry))

    for entry in ranked:
        lines.append("")
        lines.append(_SEP)
        lines.append(format_ranked_proposal(entry))

    return "\n".join(lines)
