"""Core data models for the candidate directory search."""

import re
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

_YEAR_RE = re.compile(r"^\s*(\d{4})(?:-\d{1,2}(?:-\d{1,2})?)?(?:[T ].*)?\s*$")


class CareSetting(str, Enum):
    """Clinical context of a piece of candidate experience."""

    DOMICILIO_GERIATRICO = "domicilio_geriatrico"
    HOSPITALARIO = "hospitalario"
    URGENCIAS = "urgencias"


class CandidateExperience(BaseModel):
    """One structured experience entry, tagged with a single care setting."""

    model_config = ConfigDict(frozen=True)

    title: str
    duration: str = ""
    care_setting: CareSetting


class Candidate(BaseModel):
    """A candidate record as supplied by the data source, already localized.

    Frozen — the search pipeline only ever reads it.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    full_name: str
    profession: str = ""
    experience: str = ""
    medical_experience: str = ""
    non_medical_experience: str = ""
    cover_letter_summary: str = ""
    cover_letter: str = ""
    education: str = ""
    languages: list[str] = Field(default_factory=list)
    experiences: list[CandidateExperience] = Field(default_factory=list)
    birth_date: str | None = None
    status: str = "activo"
    email: str = ""
    # Text from the other locales; searched, never displayed.
    search_aliases: list[str] = Field(default_factory=list)

    @field_validator("birth_date", mode="before")
    @classmethod
    def coerce_birth_date(cls, v: object) -> object:
        if isinstance(v, date):
            return v.isoformat()
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def birth_year(self) -> int | None:
        """Year parsed from birth_date, or None when missing or unparseable."""
        if not self.birth_date:
            return None
        match = _YEAR_RE.match(self.birth_date)
        if match is None:
            return None
        year = int(match.group(1))
        return year if year > 0 else None

    @property
    def care_settings(self) -> set[CareSetting]:
        return {e.care_setting for e in self.experiences}


class SearchCriteria(BaseModel):
    """Structured filter produced from one free-text query.

    Created per search and discarded after filtering.
    """

    model_config = ConfigDict(frozen=True)

    raw_query: str = ""
    keywords: frozenset[str] = frozenset()
    required_care_settings: frozenset[CareSetting] = frozenset()
    age_less_than: int | None = None
    age_greater_than: int | None = None

    @property
    def is_empty(self) -> bool:
        """True when the criteria match every candidate."""
        return (
            not self.keywords
            and not self.required_care_settings
            and self.age_less_than is None
            and self.age_greater_than is None
        )


class SearchLog(BaseModel):
    """An employer search recorded in the search log."""

    model_config = ConfigDict(frozen=True)

    id: int
    employer_username: str
    query: str
    candidate_names: list[str] = Field(default_factory=list)
    searched_at: datetime
    updated_at: datetime | None = None
