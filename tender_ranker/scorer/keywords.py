"""Tender Ranker — Keyword Tables.

Ordered keyword → points tables used by the heuristic factor scorer.
All matching is plain substring containment on lowercased text, and each
keyword counts at most once per text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable


@dataclass(frozen=True)
class KeywordTable:
    """An ordered keyword → points table.

    Attributes:
        name: Short table name used in debug logs.
        entries: (keyword, points) pairs in scan order, keywords unique.
    """

    name: str
    entries: tuple[tuple[str, float], ...]

    @classmethod
    def uniform(cls, name: str, keywords: Iterable[str], points: float) -> "KeywordTable":
        """Build a table where every keyword is worth the same points.

        Duplicate keywords are dropped, keeping first occurrence order.
        """
        unique = dict.fromkeys(keywords)
        return cls(name=name, entries=tuple((kw, float(points)) for kw in unique))

    @property
    def keywords(self) -> tuple[str, ...]:
        return tuple(kw for kw, _ in self.entries)

    def matches(self, text: str) -> list[str]:
        """Return the distinct keywords contained in text, in table order."""
        return [kw for kw, _ in self.entries if kw in text]

    def contains_any(self, text: str) -> bool:
        return any(kw in text for kw, _ in self.entries)

    def score(self, text: str) -> float:
        """Sum the points of every distinct keyword contained in text."""
        return sum(points for kw, points in self.entries if kw in text)


# (tokens, points): the first tier with any token in the text wins
Tier = tuple[tuple[str, ...], float]


def first_tier(text: str, tiers: tuple[Tier, ...]) -> float | None:
    """Return the points of the first tier whose tokens appear in text.

    Args:
        text: Lowercased text to scan.
        tiers: Ordered (tokens, points) pairs.

    Returns:
        The matching tier's points, or None if no tier matches.
    """
    for tokens, points in tiers:
        if any(token in text for token in tokens):
            return points
    return None


# ═══════════════════════════════════════════════════════════
# Reputation
# ═══════════════════════════════════════════════════════════

ENTITY_SUFFIXES = KeywordTable.uniform("entity_suffix", ("inc", "ltd", "corp", "llc"), 15.0)

# Only consulted when the experience text mentions "years"
YEARS_TIERS: tuple[Tier, ...] = (
    (("10", "ten"), 25.0),
    (("5", "five"), 15.0),
    (("3", "three"), 10.0),
)

TRACK_RECORD_WORDS = KeywordTable.uniform(
    "track_record", ("project", "client", "delivered"), 10.0,
)


# ═══════════════════════════════════════════════════════════
# Technical capability
# ═══════════════════════════════════════════════════════════

TECH_KEYWORDS = KeywordTable.uniform(
    "technology",
    (
        "software", "development", "programming", "database", "api",
        "cloud", "mobile", "web", "system", "application",
        "technical", "coding", "algorithm", "architecture",
    ),
    3.0,
)

PROCUREMENT_KEYWORDS = KeywordTable.uniform(
    "procurement",
    (
        "supplier", "vendor", "logistics", "supply",
        "procurement", "sourcing", "contract", "negotiation",
    ),
    3.0,
)

QUALIFICATION_KEYWORDS = KeywordTable.uniform(
    "qualification",
    (
        "certified", "certification", "degree", "qualification",
        "trained", "expert", "specialist", "professional",
    ),
    5.0,
)


def is_technology_category(category: str) -> bool:
    return any(token in category for token in ("it", "technology", "consulting"))


def is_procurement_category(category: str) -> bool:
    return "procurement" in category


# Every rule whose predicate accepts the lowercased category contributes
CATEGORY_TABLES: tuple[tuple[Callable[[str], bool], KeywordTable], ...] = (
    (is_technology_category, TECH_KEYWORDS),
    (is_procurement_category, PROCUREMENT_KEYWORDS),
)


# ═══════════════════════════════════════════════════════════
# Proposal quality & communication
# ═══════════════════════════════════════════════════════════

PROFESSIONAL_WORDS = KeywordTable.uniform(
    "professional_language",
    (
        "deliver", "ensure", "experience", "professional",
        "quality", "commitment", "expertise", "solution",
    ),
    2.0,
)

COURTESY_PHRASES = KeywordTable.uniform(
    "courtesy",
    ("please", "thank you", "look forward", "pleased to", "happy to"),
    3.0,
)


# ═══════════════════════════════════════════════════════════
# Timeline
# ═══════════════════════════════════════════════════════════

WEEK_TIERS: tuple[Tier, ...] = (
    (("1", "one"), 60.0),
    (("2", "two"), 75.0),
    (("3", "three", "4", "four"), 90.0),
)

MONTH_TIERS: tuple[Tier, ...] = (
    (("1", "one"), 85.0),
    (("2", "two", "3", "three"), 90.0),
    (("6", "six"), 70.0),
)

BUFFER_WORDS = KeywordTable.uniform(
    "buffer", ("buffer", "contingency", "flexible"), 10.0,
)
