from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

DEFAULT_SCORING_CONFIG_PATH = Path(__file__).resolve().parents[1] / "scoring" / "scoring.yaml"


def scoring_config_path() -> Path:
    override = (os.getenv("SCORING_CONFIG_PATH") or "").strip()
    return Path(override) if override else DEFAULT_SCORING_CONFIG_PATH


@lru_cache(maxsize=1)
def get_scoring_config() -> dict[str, Any]:
    """Score weights from scoring/scoring.yaml (or $SCORING_CONFIG_PATH), read once per process."""
    path = scoring_config_path()
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise RuntimeError(f"Scoring config not found at '{path}'.") from exc
    except OSError as exc:
        raise RuntimeError(f"Failed to read scoring config '{path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in scoring config '{path}': {exc}") from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(f"Invalid scoring config '{path}': expected a top-level mapping.")
    return parsed


def get_scoring_value(path: str, default: Any = None) -> Any:
    """Nested value by dot path, e.g. 'ats.contact.email'; ``default`` when any segment is missing."""
    current: Any = get_scoring_config()
    for key in path.split(".") if path else ():
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current if path else default
