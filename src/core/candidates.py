"""Candidate file loader: YAML/JSON rows -> localized Candidate models.

Text fields may be given flat on the row or per locale under ``profile_en``
and ``profile_no``. A blank localized value falls back to English, then to
the flat value. Experience entries may carry ``titles`` / ``durations``
dicts keyed by locale. Text of the other locales is kept as search aliases
so a query in either language finds the candidate.
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from src.core.config import SUPPORTED_LOCALES
from src.core.schemas import Candidate

logger = logging.getLogger(__name__)

FALLBACK_LOCALE = "en"

LOCALIZED_FIELDS = (
    "profession",
    "experience",
    "medical_experience",
    "non_medical_experience",
    "education",
    "languages",
    "cover_letter_summary",
    "cover_letter",
)


def load_candidates(path: str | Path, locale: str = FALLBACK_LOCALE) -> list[Candidate]:
    """Load and localize every candidate in a YAML or JSON file.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: for an unsupported locale or a file that is not a list of rows
            (pydantic.ValidationError, a ValueError, for malformed rows).
    """
    _check_locale(locale)
    path = Path(path)
    if not path.exists():
        msg = f"Candidates file not found: {path}"
        raise FileNotFoundError(msg)

    text = path.read_text(encoding="utf-8")
    raw: Any = json.loads(text) if path.suffix.lower() == ".json" else yaml.safe_load(text)
    if isinstance(raw, dict):
        raw = raw.get("candidates")
    if raw is None:
        raw = []
    if not isinstance(raw, list):
        msg = f"{path}: expected a list of candidates"
        raise ValueError(msg)

    candidates = [candidate_from_row(row, locale) for row in raw]
    logger.info("Loaded %d candidates from %s (locale=%s)", len(candidates), path, locale)
    return candidates


def candidate_from_row(row: dict[str, Any], locale: str = FALLBACK_LOCALE) -> Candidate:
    """Build a Candidate for one locale from a raw data row."""
    _check_locale(locale)
    if not isinstance(row, dict):
        msg = f"candidate row must be a mapping, got {type(row).__name__}"
        raise ValueError(msg)

    data: dict[str, Any] = {
        k: v for k, v in row.items()
        if not k.startswith("profile_") and k not in ("birth_year", "experiences")
    }
    if "id" in data:
        data["id"] = str(data["id"])
    if data.get("birth_date") is None and row.get("birth_year") is not None:
        data["birth_date"] = row["birth_year"]

    for field in LOCALIZED_FIELDS:
        value = _localized_value(row, field, locale)
        if value is not None:
            data[field] = value
    if "languages" in data:
        data["languages"] = _coerce_string_list(data["languages"])

    data["experiences"] = [
        _localize_experience(entry, locale) for entry in row.get("experiences") or []
    ]
    data["search_aliases"] = _search_aliases(row, locale)
    return Candidate.model_validate(data)


def _localized_value(row: dict[str, Any], field: str, locale: str) -> Any:
    for source in (row.get(f"profile_{locale}"), row.get(f"profile_{FALLBACK_LOCALE}"), row):
        if isinstance(source, dict) and not _is_blank(source.get(field)):
            return source[field]
    return None


def _localize_experience(entry: dict[str, Any], locale: str) -> dict[str, Any]:
    if not isinstance(entry, dict):
        msg = f"experience entry must be a mapping, got {type(entry).__name__}"
        raise ValueError(msg)
    result = {k: v for k, v in entry.items() if k not in ("titles", "durations")}
    titles = _translations(entry, "titles")
    durations = _translations(entry, "durations")
    if not _is_blank(titles.get(locale)):
        result["title"] = titles[locale]
    if not _is_blank(durations.get(locale)):
        result["duration"] = durations[locale]
    return result


def _translations(entry: dict[str, Any], key: str) -> dict[str, Any]:
    value = entry.get(key) or {}
    if not isinstance(value, dict):
        msg = f"experience {key} must be a mapping of locale to text, got {type(value).__name__}"
        raise ValueError(msg)
    return value


def _search_aliases(row: dict[str, Any], locale: str) -> list[str]:
    """Text of every other locale, so a query in either language finds the candidate."""
    aliases: list[str] = []
    for other in SUPPORTED_LOCALES:
        if other == locale:
            continue
        profile = row.get(f"profile_{other}")
        if isinstance(profile, dict):
            for field in LOCALIZED_FIELDS:
                value = profile.get(field)
                if _is_blank(value):
                    continue
                if field == "languages":
                    aliases.extend(_coerce_string_list(value))
                else:
                    aliases.append(str(value))
        for entry in row.get("experiences") or []:
            for key in ("titles", "durations"):
                text = _translations(entry, key).get(other)
                if not _is_blank(text):
                    aliases.append(str(text))
    return aliases


def _coerce_string_list(value: Any) -> list[str]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, list):
        return not value
    return False


def _check_locale(locale: str) -> None:
    if locale not in SUPPORTED_LOCALES:
        msg = f"locale must be one of {list(SUPPORTED_LOCALES)}, got '{locale}'"
        raise ValueError(msg)
