"""Storage helpers for the client code to country mapping."""
from __future__ import annotations

from pathlib import Path
import json
import logging
from typing import Any

from factor_reports.config import SETTINGS
from factor_reports.infrastructure.lookups.client_countries import CLIENT_COUNTRIES

logger = logging.getLogger(__name__)

DEFAULT_PATH = SETTINGS.client_country_override_path


def _normalize_mapping(raw: dict[str, Any] | None) -> dict[str, str]:
    normalized: dict[str, str] = {}
    if not isinstance(raw, dict):
        return normalized
    for key, value in raw.items():
        if key is None:
            continue
        code = str(key).strip().upper()
        if not code:
            continue
        normalized[code] = "" if value is None else str(value).strip()
    return normalized


def load_mapping(path: Path | None = None) -> dict[str, str]:
    """Bundled client countries with the JSON override applied on top."""
    override_path = path or DEFAULT_PATH
    mapping = _normalize_mapping(CLIENT_COUNTRIES)
    if not override_path.exists():
        return mapping
    try:
        data = json.loads(override_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        logger.warning("Ignoring unreadable client country override %s: %s", override_path, exc)
        return mapping
    mapping.update(_normalize_mapping(data))
    return mapping


def save_mapping(mapping: dict[str, str], path: Path | None = None) -> dict[str, str]:
    override_path = path or DEFAULT_PATH
    normalized = _normalize_mapping(mapping)
    override_path.write_text(
        json.dumps(normalized, ensure_ascii=False, indent=2, sort_keys=True),
        encoding="utf-8",
    )
    logger.info("Saved %d client country entries to %s", len(normalized), override_path)
    merged = _normalize_mapping(CLIENT_COUNTRIES)
    merged.update(normalized)
    return merged
