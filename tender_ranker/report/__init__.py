"""Tender Ranker — Report Package.

Plain-text rendering of ranking results.
"""

from tender_ranker.report.formatters import (
    format_ranked_proposal,
    format_ranking_report,
    format_summary_line,
)

__all__ = [
    "format_ranked_proposal",
    "format_ranking_report",
    "format_summary_line",
]
