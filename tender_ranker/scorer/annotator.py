"""Tender Ranker — Strength & Concern Annotator.

Turns factor scores into short human-readable labels.
"""

from __future__ import annotations

from tender_ranker.config import DEFAULT_CONFIG, FACTORS, RankingConfig
from tender_ranker.models import FactorScores


def identify_strengths(
    scores: FactorScores, config: RankingConfig = DEFAULT_CONFIG
) -> list[str]:
    """List strength labels for factors at or above the strength threshold.

    Labels follow the fixed factor order. If no factor qualifies the
    list holds only the fallback strength, so it is never empty.

    Args:
        scores: The proposal's factor scores.
        config: Thresholds and labels.

    Returns:
        Non-empty list of strength labels.
    """
    values = scores.to_dict()
    strengths = [
        config.strength_labels[factor]
        for factor in FACTORS
        if values[factor] >= config.strength_threshold
    ]
    return strengths or [config.fallback_strength]


def identify_concerns(
    scores: FactorScores, config: RankingConfig = DEFAULT_CONFIG
) -> list[str]:
    """List concern labels for factors at or below the concern threshold.

    Args:
        scores: The proposal's factor scores.
        config: Thresholds and labels.

    Returns:
        Concern labels in factor order; may be empty.
    """
    values = scores.to_dict()
    return [
        config.concern_labels[factor]
        for factor in FACTORS
        if values[factor] <= config.concern_threshold
    ]
