"""Tender Ranker — Configuration Loader.

Holds the immutable ranking configuration (factor weights, annotation
thresholds, confidence bands, labels) and loads overrides from a YAML
settings file. Environment variables referenced via ${VAR_NAME} syntax
are resolved after loading the project's .env file.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

import yaml
from dotenv import load_dotenv

from tender_ranker.utils.logger import LOG_DIR_ENV, get_logger

logger = get_logger(__name__)

# ── Path Constants ────────────────────────────────────────
PACKAGE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_DIR.parent
SETTINGS_PATH = PACKAGE_DIR / "settings.yaml"

# ── Environment Variable Pattern ─────────────────────────
ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)}")

# ── Factor names, in annotation order ────────────────────
FACTORS: tuple[str, ...] = (
    "budget",
    "reputation",
    "technical",
    "quality",
    "timeline",
    "communication",
)

TIE_BREAK_INPUT_ORDER = "input_order"
TIE_BREAK_EARLIEST_SUBMISSION = "earliest_submission"
TIE_BREAK_MODES = (TIE_BREAK_INPUT_ORDER, TIE_BREAK_EARLIEST_SUBMISSION)

# ── Built-in defaults ────────────────────────────────────
DEFAULT_WEIGHTS: dict[str, float] = {
    "budget": 0.25,
    "reputation": 0.20,
    "technical": 0.20,
    "quality": 0.15,
    "timeline": 0.10,
    "communication": 0.10,
}

DEFAULT_STRENGTH_LABELS: dict[str, str] = {
    "budget": "Competitive pricing",
    "reputation": "Strong track record",
    "technical": "Technical expertise",
    "quality": "Comprehensive proposal",
    "timeline": "Realistic timeline",
    "communication": "Professional communication",
}

DEFAULT_CONCERN_LABELS: dict[str, str] = {
    "budget": "Budget concerns",
    "reputation": "Limited experience shown",
    "technical": "Technical capability unclear",
    "quality": "Incomplete proposal",
    "timeline": "Timeline may be unrealistic",
    "communication": "Communication issues",
}

# (minimum overall score, label), checked high-to-low
DEFAULT_CONFIDENCE_BANDS: tuple[tuple[float, str], ...] = (
    (85.0, "High"),
    (70.0, "Medium"),
    (55.0, "Low"),
)
DEFAULT_CONFIDENCE_FLOOR = "Very Low"
DEFAULT_FALLBACK_STRENGTH = "Meets basic requirements"


def _check_factor_keys(data: Mapping[str, Any], section: str) -> None:
    """Require exactly the six factor names as keys.

    Raises:
        ValueError: If a factor is missing or an unknown key is present.
    """
    missing = [name for name in FACTORS if name not in data]
    if missing:
        raise ValueError(
            f"Missing required configuration keys in '{section}': {', '.join(missing)}"
        )
    unknown = [str(key) for key in data if key not in FACTORS]
    if unknown:
        raise ValueError(f"Unknown factors in '{section}': {', '.join(unknown)}")


def _check_weights(data: Mapping[str, Any], section: str) -> dict[str, float]:
    """Validate a factor → weight mapping.

    Returns:
        Weights as floats, in factor order.

    Raises:
        ValueError: If a factor is missing, unknown, or the sum is not 1.0.
    """
    _check_factor_keys(data, section)
    weights = {name: float(data[name]) for name in FACTORS}
    total = sum(weights.values())
    if not (0.99 <= total <= 1.01):
        raise ValueError(
            f"Scoring weights must sum to 1.0, got {total:.4f}. "
            f"Current weights: {weights}"
        )
    return weights


# ═══════════════════════════════════════════════════════════
# Configuration Dataclasses
# ═══════════════════════════════════════════════════════════


@dataclass(frozen=True)
class RankingConfig:
    """Weights, thresholds and labels used by the ranking engine.

    Weights, label mappings and the tie-break mode are validated on
    construction, and mapping fields are wrapped in read-only proxies so a
    shared instance (such as DEFAULT_CONFIG) cannot be altered in place.

    Attributes:
        weights: Factor name → aggregation weight (sums to 1.0).
        strength_threshold: Factor score at or above which a strength is listed.
        concern_threshold: Factor score at or below which a concern is listed.
        confidence_bands: Ordered (minimum score, label) pairs, highest first.
        confidence_floor: Label used when no band matches.
        strength_labels: Factor name → strength label.
        concern_labels: Factor name → concern label.
        fallback_strength: Sole strength when no factor crosses the threshold.
        tie_break: 'input_order' or 'earliest_submission'.
    """

    weights: Mapping[str, float] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))
    strength_threshold: float = 80.0
    concern_threshold: float = 40.0
    confidence_bands: tuple[tuple[float, str], ...] = DEFAULT_CONFIDENCE_BANDS
    confidence_floor: str = DEFAULT_CONFIDENCE_FLOOR
    strength_labels: Mapping[str, str] = field(
        default_factory=lambda: dict(DEFAULT_STRENGTH_LABELS)
    )
    concern_labels: Mapping[str, str] = field(
        default_factory=lambda: dict(DEFAULT_CONCERN_LABELS)
    )
    fallback_strength: str = DEFAULT_FALLBACK_STRENGTH
    tie_break: str = TIE_BREAK_INPUT_ORDER

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "weights", MappingProxyType(_check_weights(self.weights, "weights"))
        )
        for name in ("strength_labels", "concern_labels"):
            labels = getattr(self, name)
            _check_factor_keys(labels, name)
            object.__setattr__(self, name, MappingProxyType(dict(labels)))
        if self.tie_break not in TIE_BREAK_MODES:
            raise ValueError(
                f"Invalid tie_break '{self.tie_break}'. "
                f"Expected one of: {', '.join(TIE_BREAK_MODES)}"
            )
        bands = tuple(
            sorted(
                ((float(minimum), str(label)) for minimum, label in self.confidence_bands),
                key=lambda band: band[0],
                reverse=True,
            )
        )
        object.__setattr__(self, "confidence_bands", bands)


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration container."""

    ranking: RankingConfig
    log_level: str = "INFO"
    log_dir: Optional[str] = None


DEFAULT_CONFIG = RankingConfig()


# ═══════════════════════════════════════════════════════════
# YAML Loading & Environment Variable Resolution
# ═══════════════════════════════════════════════════════════


def _resolve_env_vars(value: Any) -> Any:
    """Recursively resolve ${VAR_NAME} references in YAML values.

    Args:
        value: A string, dict, list, or primitive from parsed YAML.

    Returns:
        The same structure with all ${VAR_NAME} placeholders replaced
        by their environment variable values.

    Raises:
        ValueError: If a referenced environment variable is not set.
    """
    if isinstance(value, str):
        matches = ENV_VAR_PATTERN.findall(value)
        for var_name in matches:
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(
                    f"Environment variable '${{{var_name}}}' is required but not set. "
                    f"Add it to your .env file or export it in your shell."
                )
            value = value.replace(f"${{{var_name}}}", env_value)
        return value
    elif isinstance(value, dict):
        return {k: _resolve_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_resolve_env_vars(item) for item in value]
    return value


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load and parse a YAML file with UTF-8 encoding.

    Args:
        path: Absolute or relative path to the YAML file.

    Returns:
        Parsed YAML content as a dictionary.

    Raises:
        FileNotFoundError: If the YAML file does not exist.
        ValueError: If the file is empty or not a mapping.
        yaml.YAMLError: If the file contains invalid YAML.
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        raise ValueError(f"Configuration file is empty: {path}")
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")

    logger.debug("Loaded configuration from %s", path)
    return data


# ═══════════════════════════════════════════════════════════
# Dataclass Builders
# ═══════════════════════════════════════════════════════════


def _build_weights(data: dict[str, Any]) -> dict[str, float]:
    """Validate the 'weights' section.

    Args:
        data: Factor name → weight mapping from settings.yaml.

    Returns:
        Weights as floats, in factor order.

    Raises:
        ValueError: If a factor is missing, unknown, or the sum is not 1.0.
    """
    if not isinstance(data, dict):
        raise ValueError("Configuration section 'ranking.weights' must be a mapping")
    return _check_weights(data, "ranking.weights")


def _build_labels(
    data: dict[str, Any] | None, defaults: dict[str, str], section: str
) -> dict[str, str]:
    """Merge label overrides onto the defaults.

    Args:
        data: Optional factor name → label mapping.
        defaults: Built-in labels.
        section: Section name for error messages.

    Returns:
        Complete factor → label mapping.
    """
    labels = dict(defaults)
    if not data:
        return labels
    unknown = [str(key) for key in data if key not in FACTORS]
    if unknown:
        raise ValueError(f"Unknown factors in '{section}': {', '.join(unknown)}")
    labels.update({key: str(value) for key, value in data.items()})
    return labels


def _build_confidence_bands(data: list[Any] | None) -> tuple[tuple[float, str], ...]:
    """Parse the confidence band list.

    Args:
        data: List of {min_score, label} dicts, or None for defaults.

    Returns:
        Tuple of (minimum score, label) pairs.
    """
    if data is None:
        return DEFAULT_CONFIDENCE_BANDS
    if not isinstance(data, list):
        raise ValueError("'ranking.confidence.bands' must be a list")

    bands = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ValueError(f"'ranking.confidence.bands[{index}]' must be a mapping")
        _validate_keys(entry, ["min_score", "label"], f"ranking.confidence.bands[{index}]")
        bands.append((float(entry["min_score"]), str(entry["label"])))
    return tuple(bands)


def _build_ranking_config(data: dict[str, Any]) -> RankingConfig:
    """Build a RankingConfig from a raw settings dictionary.

    Only 'weights' is required; every other key falls back to the
    built-in default.

    Args:
        data: The 'ranking' section of settings.yaml.

    Returns:
        A validated RankingConfig instance.

    Raises:
        ValueError: On missing keys, bad weights or an unknown tie-break mode.
    """
    _validate_keys(data, ["weights"], "ranking")

    thresholds = data.get("thresholds") or {}
    confidence = data.get("confidence") or {}
    tie_break = str(data.get("tie_break", TIE_BREAK_INPUT_ORDER))

    return RankingConfig(
        weights=_build_weights(data["weights"]),
        strength_threshold=float(thresholds.get("strength", 80.0)),
        concern_threshold=float(thresholds.get("concern", 40.0)),
        confidence_bands=_build_confidence_bands(confidence.get("bands")),
        confidence_floor=str(confidence.get("floor", DEFAULT_CONFIDENCE_FLOOR)),
        strength_labels=_build_labels(
            data.get("strength_labels"), DEFAULT_STRENGTH_LABELS, "ranking.strength_labels"
        ),
        concern_labels=_build_labels(
            data.get("concern_labels"), DEFAULT_CONCERN_LABELS, "ranking.concern_labels"
        ),
        fallback_strength=str(data.get("fallback_strength", DEFAULT_FALLBACK_STRENGTH)),
        tie_break=tie_break,
    )


def _validate_keys(data: dict[str, Any], required: list[str], section: str) -> None:
    """Validate that all required keys exist in a config section.

    Args:
        data: The configuration dictionary to validate.
        required: List of required key names.
        section: Human-readable section name for error messages.

    Raises:
        ValueError: If any required key is missing.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Configuration section '{section}' must be a mapping")
    missing = [key for key in required if key not in data]
    if missing:
        raise ValueError(
            f"Missing required configuration keys in '{section}': {', '.join(missing)}"
        )


# ═══════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════


def load_config(
    settings_path: Path | None = None,
    env_path: Path | None = None,
) -> AppConfig:
    """Load the application configuration.

    Loads settings.yaml, resolves environment variables, validates the
    ranking section and returns a typed AppConfig instance. The log
    directory is 'logging.dir' when set, otherwise $TENDER_RANKER_LOG_DIR
    as it stands after the .env file is loaded.

    Args:
        settings_path: Override path to settings.yaml. Defaults to the
            settings.yaml shipped inside the package.
        env_path: Override path to .env file. Defaults to project root .env.

    Returns:
        A fully validated AppConfig instance.

    Raises:
        FileNotFoundError: If the settings file is missing.
        ValueError: If required fields are missing or env vars are unset.
    """
    env_file = env_path or (PROJECT_ROOT / ".env")
    load_dotenv(env_file)
    logger.debug("Loaded environment from %s", env_file)

    settings_file = Path(settings_path) if settings_path else SETTINGS_PATH
    settings = _resolve_env_vars(_load_yaml(settings_file))

    _validate_keys(settings, ["ranking"], "settings")
    logging_section = settings.get("logging") or {}
    log_dir = logging_section.get("dir") or os.environ.get(LOG_DIR_ENV)

    config = AppConfig(
        ranking=_build_ranking_config(settings["ranking"]),
        log_level=str(logging_section.get("level", "INFO")).upper(),
        log_dir=str(log_dir) if log_dir else None,
    )

    logger.info("Configuration loaded from %s", settings_file)
    logger.debug("Weights: %s", dict(config.ranking.weights))
    logger.debug("Tie-break mode: %s", config.ranking.tie_break)

    return config
