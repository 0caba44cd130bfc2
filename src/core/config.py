"""Configuration models and YAML loader for the candidate search."""

import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from src.core import vocabulary
from src.core.schemas import CareSetting

SUPPORTED_LOCALES = ("en", "no")


def _default_care_settings() -> dict[CareSetting, list[str]]:
    return {
        CareSetting(tag): list(triggers)
        for tag, triggers in vocabulary.CARE_SETTING_TRIGGERS
    }


class VocabularyConfig(BaseModel):
    """Word tables and patterns used by the query parser."""

    stopwords: list[str] = Field(default_factory=lambda: sorted(vocabulary.STOPWORDS))
    noise_words: list[str] = Field(default_factory=lambda: sorted(vocabulary.NOISE_WORDS))
    care_settings: dict[CareSetting, list[str]] = Field(default_factory=_default_care_settings)
    age_less_than_pattern: str = vocabulary.AGE_LESS_THAN_PATTERN
    age_greater_than_pattern: str = vocabulary.AGE_GREATER_THAN_PATTERN
    min_keyword_length: int = Field(default=vocabulary.MIN_KEYWORD_LENGTH, ge=1)

    @field_validator("age_less_than_pattern", "age_greater_than_pattern")
    @classmethod
    def pattern_has_number_group(cls, v: str) -> str:
        try:
            compiled = re.compile(v)
        except re.error as e:
            msg = f"invalid age pattern {v!r}: {e}"
            raise ValueError(msg) from e
        if compiled.groups < 1:
            msg = f"age pattern {v!r} must capture the number in a group"
            raise ValueError(msg)
        return v

    @field_validator("care_settings")
    @classmethod
    def triggers_not_blank(cls, v: dict[CareSetting, list[str]]) -> dict[CareSetting, list[str]]:
        return {
            tag: [t.lower().strip() for t in triggers if t.strip()]
            for tag, triggers in v.items()
        }


class CandidateSourceConfig(BaseModel):
    """Where candidate records are read from."""

    path: str = "data/candidates.yaml"
    locale: str = "en"

    @field_validator("locale")
    @classmethod
    def locale_supported(cls, v: str) -> str:
        v = v.lower().strip()
        if v not in SUPPORTED_LOCALES:
            msg = f"locale must be one of {list(SUPPORTED_LOCALES)}, got '{v}'"
            raise ValueError(msg)
        return v


class DatabaseConfig(BaseModel):
    """Search log database configuration."""

    path: str = "data/search_log.db"


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    candidates: CandidateSourceConfig = Field(default_factory=CandidateSourceConfig)
    vocabulary: VocabularyConfig = Field(default_factory=VocabularyConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
