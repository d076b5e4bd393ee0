"""Tender Ranker — Factor Scorer Tests.

Covers the six factor scores, the budget parser and the keyword tables,
including the malformed-input fallbacks.

Run: python scripts/test_scorer.py
 or: pytest scripts/test_scorer.py
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from tender_ranker.models import Proposal, Solicitation
from tender_ranker.scorer.factors import (
    HeuristicFactorScorer,
    budget_score,
    communication_score,
    parse_amount,
    quality_score,
    reputation_score,
    technical_score,
    timeline_score,
)
from tender_ranker.scorer.keywords import (
    PROCUREMENT_KEYWORDS,
    TECH_KEYWORDS,
    KeywordTable,
    first_tier,
    is_technology_category,
)
from tender_ranker.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def make_solicitation(**kwargs: object) -> Solicitation:
    """Build a Solicitation with a 100-200 budget range by default."""
    defaults = {
        "solicitation_id": "S-1",
        "title": "Test solicitation",
        "category": "Landscaping",
        "minimum_budget": "100",
        "maximum_budget": "200",
    }
    defaults.update(kwargs)
    return Solicitation(**defaults)


def make_proposal(**kwargs: object) -> Proposal:
    """Build an otherwise empty Proposal with the given fields."""
    defaults = {"proposal_id": "P-1"}
    defaults.update(kwargs)
    return Proposal(**defaults)


# ═══════════════════════════════════════════════════════════
# Budget
# ═══════════════════════════════════════════════════════════


def test_parse_amount_strips_currency_and_separators() -> None:
    assert parse_amount("$65,000") == 65000.0
    assert parse_amount(" 1 250.50 ") == 1250.5
    assert parse_amount("N/A") is None
    assert parse_amount("") is None
    assert parse_amount(None) is None
    assert parse_amount("inf") is None
    assert parse_amount("nan") is None


def test_parse_amount_accepts_only_plain_decimals() -> None:
    assert parse_amount("-12.5") == -12.5
    assert parse_amount(".5") == 0.5
    assert parse_amount("1.5e3") == 1500.0
    assert parse_amount("1_50") is None
    assert parse_amount("١٥٠") is None
    assert parse_amount("１５０") is None
    assert parse_amount("0x96") is None
    assert parse_amount("1e999") is None


def test_budget_digit_group_underscores_are_neutral() -> None:
    solicitation = make_solicitation()
    assert budget_score(make_proposal(proposed_budget="1_50"), solicitation) == 50.0
    assert budget_score(make_proposal(proposed_budget="١٥٠"), solicitation) == 50.0
    assert budget_score(
        make_proposal(proposed_budget="150"), make_solicitation(minimum_budget="1_00")
    ) == 50.0


@pytest.mark.parametrize(
    ("proposed", "expected"),
    [
        ("100", 20.0),
        ("99", 20.0),
        ("200.01", 10.0),
        ("170", 95.0),
        ("190", 95.0),
        ("100.01", 60.0),
        ("150", 85.0),
        ("195", 85.0),
        ("130", 75.0),
        ("199", 75.0),
        ("200", 60.0),
        ("$1,70", 95.0),
    ],
)
def test_budget_bands(proposed: str, expected: float) -> None:
    score = budget_score(make_proposal(proposed_budget=proposed), make_solicitation())
    assert score == expected


def test_budget_malformed_fields_are_neutral() -> None:
    solicitation = make_solicitation()
    assert budget_score(make_proposal(proposed_budget="N/A"), solicitation) == 50.0
    assert budget_score(make_proposal(proposed_budget=""), solicitation) == 50.0
    assert budget_score(
        make_proposal(proposed_budget="150"), make_solicitation(minimum_budget="abc")
    ) == 50.0
    assert budget_score(
        make_proposal(proposed_budget="150"), make_solicitation(maximum_budget="")
    ) == 50.0


def test_budget_empty_range_is_neutral() -> None:
    proposal = make_proposal(proposed_budget="150")
    assert budget_score(proposal, make_solicitation(maximum_budget="100")) == 50.0
    assert budget_score(proposal, make_solicitation(maximum_budget="50")) == 50.0


# ═══════════════════════════════════════════════════════════
# Reputation
# ═══════════════════════════════════════════════════════════


def test_reputation_base_and_entity_suffix() -> None:
    assert reputation_score(make_proposal()) == 50.0
    assert reputation_score(make_proposal(company_name="Acme Inc.")) == 65.0
    assert reputation_score(make_proposal(company_name="Northwind LLC")) == 65.0


def test_reputation_years_tiers_require_years() -> None:
    assert reputation_score(make_proposal(experience="10 years in the field")) == 75.0
    assert reputation_score(make_proposal(experience="Five years in the field")) == 65.0
    assert reputation_score(make_proposal(experience="three years in the field")) == 60.0
    assert reputation_score(make_proposal(experience="10 of us on staff")) == 50.0


def test_reputation_track_record_and_cap() -> None:
    assert reputation_score(make_proposal(experience="Many happy client teams")) == 60.0
    full = make_proposal(
        company_name="Global Corp",
        experience="10 years, delivered every project on time for each client",
    )
    assert reputation_score(full) == 100.0


# ═══════════════════════════════════════════════════════════
# Technical
# ═══════════════════════════════════════════════════════════


def test_technical_counts_distinct_tech_keywords_for_it_categories() -> None:
    proposal = make_proposal(
        experience="software software software",
        description="cloud database",
    )
    solicitation = make_solicitation(category="IT Services")
    assert technical_score(proposal, solicitation) == 59.0


def test_technical_ignores_tech_keywords_outside_matching_categories() -> None:
    proposal = make_proposal(description="cloud database software")
    assert technical_score(proposal, make_solicitation(category="Landscaping")) == 50.0


def test_technical_category_match_is_substring() -> None:
    # "facilities" contains "it"
    proposal = make_proposal(description="cloud")
    assert technical_score(proposal, make_solicitation(category="Facilities")) == 53.0


def test_technical_procurement_and_qualifications() -> None:
    proposal = make_proposal(
        experience="Certified buyer",
        description="supplier negotiation",
    )
    solicitation = make_solicitation(category="Procurement")
    assert technical_score(proposal, solicitation) == 61.0


def test_technical_both_category_tables_can_apply() -> None:
    proposal = make_proposal(description="software supplier")
    assert technical_score(proposal, make_solicitation(category="IT Procurement")) == 56.0


def test_technical_is_capped() -> None:
    text = " ".join(TECH_KEYWORDS.keywords) + " certified degree expert specialist"
    proposal = make_proposal(description=text)
    assert technical_score(proposal, make_solicitation(category="Technology")) == 100.0


def test_technical_accepts_alternate_category_tables() -> None:
    tables = ((lambda category: True, KeywordTable.uniform("x", ("widget",), 7.0)),)
    proposal = make_proposal(description="widget widget")
    assert technical_score(proposal, make_solicitation(), tables) == 57.0


# ═══════════════════════════════════════════════════════════
# Quality
# ═══════════════════════════════════════════════════════════


def test_quality_empty_proposal() -> None:
    assert quality_score(make_proposal()) == 50.0


def test_quality_whitespace_fields_are_blank() -> None:
    proposal = make_proposal(title="   ", email="\n", company_name="Acme")
    assert quality_score(proposal) == pytest.approx(50.0 + 30.0 / 7)


def test_quality_full_completeness() -> None:
    proposal = make_proposal(
        title="Bid",
        proposed_budget="150",
        timeline="2 weeks",
        description="Short",
        company_name="Acme",
        contact_person="Dana",
        email="dana@acme.example",
    )
    assert quality_score(proposal) == pytest.approx(80.0)


@pytest.mark.parametrize(
    ("length", "bonus"),
    [(50, 0.0), (51, 5.0), (200, 5.0), (201, 10.0), (500, 10.0), (501, 15.0)],
)
def test_quality_description_length_bands(length: int, bonus: float) -> None:
    proposal = make_proposal(description="x" * length)
    assert quality_score(proposal) == pytest.approx(50.0 + 30.0 / 7 + bonus)


def test_quality_professional_words() -> None:
    proposal = make_proposal(description="We Ensure Quality")
    assert quality_score(proposal) == pytest.approx(50.0 + 30.0 / 7 + 4.0)


# ═══════════════════════════════════════════════════════════
# Timeline
# ═══════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    ("timeline", "expected"),
    [
        ("", 70.0),
        ("ASAP", 70.0),
        ("1 week", 60.0),
        ("two weeks", 75.0),
        ("3 weeks", 90.0),
        ("Four weeks", 90.0),
        ("several weeks", 70.0),
        ("1 month", 85.0),
        ("3 months", 90.0),
        ("6 months", 70.0),
        ("12 months", 85.0),
        ("nine months", 70.0),
        ("2 weeks, flexible", 85.0),
        ("flexible", 80.0),
        ("3 months plus contingency", 100.0),
    ],
)
def test_timeline_score(timeline: str, expected: float) -> None:
    assert timeline_score(make_proposal(timeline=timeline)) == expected


def test_timeline_week_checked_before_month() -> None:
    assert timeline_score(make_proposal(timeline="2 weeks then 6 months support")) == 75.0


# ═══════════════════════════════════════════════════════════
# Communication
# ═══════════════════════════════════════════════════════════


def test_communication_contact_details() -> None:
    assert communication_score(make_proposal()) == 70.0
    assert communication_score(make_proposal(phone="555-0100")) == 80.0
    assert communication_score(make_proposal(email="a@b.co")) == 80.0
    assert communication_score(make_proposal(email="no-at-sign.example")) == 70.0
    assert communication_score(make_proposal(email="user@localhost")) == 70.0


def test_communication_courtesy_phrases_and_cap() -> None:
    assert communication_score(make_proposal(description="Thank you!")) == 73.0
    polite = make_proposal(
        phone="555-0100",
        email="a@b.co",
        description="Please note we are pleased to and happy to help. "
                    "Thank you, we look forward to it.",
    )
    assert communication_score(polite) == 100.0


# ═══════════════════════════════════════════════════════════
# Keyword tables & scorer object
# ═══════════════════════════════════════════════════════════


def test_keyword_table_counts_each_keyword_once() -> None:
    table = KeywordTable.uniform("t", ("api", "web", "api"), 3.0)
    assert table.keywords == ("api", "web")
    assert table.matches("rapid api web") == ["api", "web"]
    assert table.score("api api api") == 3.0


def test_keyword_tables_have_expected_sizes() -> None:
    assert len(TECH_KEYWORDS.entries) == 14
    assert len(PROCUREMENT_KEYWORDS.entries) == 8


def test_first_tier_returns_first_matching_tier() -> None:
    tiers = ((("a",), 1.0), (("b",), 2.0))
    assert first_tier("b a", tiers) == 1.0
    assert first_tier("b", tiers) == 2.0
    assert first_tier("c", tiers) is None


def test_category_predicate() -> None:
    assert is_technology_category("it services")
    assert is_technology_category("management consulting")
    assert not is_technology_category("landscaping")


def test_scorer_never_raises_on_missing_fields() -> None:
    proposal = make_proposal(
        company_name=None, experience=None, description=None,
        timeline=None, phone=None, email=None, proposed_budget=None,
    )
    scores = HeuristicFactorScorer().score(proposal, Solicitation(category=None))
    for value in scores.to_dict().values():
        assert 0.0 <= value <= 100.0
    assert scores.budget == 50.0


def main() -> None:
    """Run every zero-argument test in this module and report the tally."""
    setup_logging()
    passed = 0
    failed = 0
    for name, test in sorted(globals().items()):
        if not name.startswith("test_") or not callable(test):
            continue
        if hasattr(test, "pytestmark"):
            logger.info("  ⏭  %s (parametrized, run with pytest)", name)
            continue
        try:
            test()
        except AssertionError as exc:
            failed += 1
            logger.error("  ❌ FAILED: %s %s", name, exc)
        except Exception as exc:
            failed += 1
            logger.error("  ❌ ERROR: %s %s: %s", name, type(exc).__name__, exc)
        else:
            passed += 1
            logger.info("  ✅ %s", name)

    logger.info("Results: %d passed, %d failed", passed, failed)
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
