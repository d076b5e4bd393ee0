"""Tender Ranker — Command Line Runner.

Loads a solicitation and its proposals from a JSON document, ranks the
proposals and prints a text report (or JSON).

Input document:
    {"solicitation": {...}, "proposals": [{...}, ...]}

Usage:
    python -m tender_ranker.main proposals.json
    python -m tender_ranker.main proposals.json --json
    python -m tender_ranker.main proposals.json --settings my_settings.yaml --env .env
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

import yaml

from tender_ranker.config import DEFAULT_CONFIG, SETTINGS_PATH, AppConfig, load_config
from tender_ranker.models import Proposal, Solicitation
from tender_ranker.report.formatters import format_ranking_report
from tender_ranker.scorer.ranking import RankingEngine
from tender_ranker.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def parse_document(data: Any) -> tuple[Solicitation, list[Proposal]]:
    """Build the input records from a decoded JSON document.

    Args:
        data: Decoded JSON content.

    Returns:
        (solicitation, proposals) in document order.

    Raises:
        ValueError: If the document shape is wrong.
    """
    if not isinstance(data, dict):
        raise ValueError("Input document must be a JSON object")

    raw_solicitation = data.get("solicitation", data.get("tender"))
    if not isinstance(raw_solicitation, dict):
        raise ValueError("Input document is missing a 'solicitation' object")

    raw_proposals = data.get("proposals", [])
    if not isinstance(raw_proposals, list):
        raise ValueError("'proposals' must be a list")

    proposals = []
    for index, item in enumerate(raw_proposals):
        if not isinstance(item, dict):
            raise ValueError(f"proposals[{index}] must be an object")
        proposals.append(Proposal.from_dict(item))

    return Solicitation.from_dict(raw_solicitation), proposals


def load_document(path: Path) -> tuple[Solicitation, list[Proposal]]:
    """Read and parse an input JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON or has the wrong shape.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return parse_document(data)


def _resolve_config(settings_path: Optional[Path], env_path: Optional[Path]) -> AppConfig:
    if settings_path is not None or SETTINGS_PATH.exists():
        return load_config(settings_path, env_path=env_path)
    logger.debug("No settings file at %s, using built-in defaults", SETTINGS_PATH)
    return AppConfig(ranking=DEFAULT_CONFIG)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tender-ranker",
        description="Rank the proposals submitted against a solicitation.",
    )
    parser.add_argument("input", type=Path, help="JSON file with solicitation and proposals")
    parser.add_argument(
        "--settings", type=Path, default=None,
        help="Settings YAML (defaults to the settings.yaml shipped with the package)",
    )
    parser.add_argument(
        "--env", type=Path, default=None,
        help=".env file to load (defaults to .env in the project root)",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point.

    Logging is configured here, after the settings and .env are loaded,
    so the configured level and log directory apply.

    Returns:
        Process exit code: 0 on success, 1 on input or config errors.
    """
    args = _build_parser().parse_args(argv)

    try:
        config = _resolve_config(args.settings, args.env)
        setup_logging(config.log_level, config.log_dir)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        setup_logging()
        logger.error("Cannot load settings: %s", exc)
        return 1

    try:
        solicitation, proposals = load_document(args.input)
    except (OSError, ValueError) as exc:
        logger.error("Cannot rank %s: %s", args.input, exc)
        return 1

    ranked = RankingEngine(config.ranking).rank(proposals, solicitation)

    if args.json:
        print(json.dumps([entry.to_dict() for entry in ranked], indent=2, ensure_ascii=False))
    else:
        print(format_ranking_report(solicitation, ranked))
    return 0


if __name__ == "__main__":
    sys.exit(main())
