"""Candidate matching and the filter chain applied to the candidate list.

Matcher clauses (all conjunctive):
  1. Care settings — every required setting present among experience entries
  2. Age           — strict bounds; unknown birth year passes both
  3. Keywords      — every keyword is a substring of the searchable text

Filter order on the listing:
  1. CareSettingSectionFilter — section picked in the filter bar
  2. CandidateNamesFilter     — explicit name list, replaces 3 when present
  3. CriteriaFilter           — parsed free-text query
"""

import logging
from collections.abc import Callable, Iterable
from datetime import date

from src.core.schemas import Candidate, CareSetting, SearchCriteria
from src.core.text import normalize_text

logger = logging.getLogger(__name__)

# A filter is a callable that takes candidates and returns a subset.
Filter = Callable[[list[Candidate]], list[Candidate]]


def candidate_age(candidate: Candidate, today: date | None = None) -> int | None:
    """Age in whole years as current year minus birth year, None if unknown."""
    birth_year = candidate.birth_year
    if birth_year is None:
        return None
    return (today or date.today()).year - birth_year


def build_search_text(candidate: Candidate) -> str:
    """Normalized blob of every searchable text field of a candidate."""
    chunks = [
        candidate.full_name,
        candidate.profession,
        " ".join(candidate.languages),
        candidate.education,
        candidate.cover_letter_summary,
        candidate.cover_letter,
        candidate.experience,
        candidate.medical_experience,
        candidate.non_medical_experience,
    ]
    for entry in candidate.experiences:
        chunks.append(entry.title)
        chunks.append(entry.duration)
    chunks.extend(candidate.search_aliases)
    return normalize_text(" ".join(chunks))


def candidate_matches_criteria(
    candidate: Candidate,
    criteria: SearchCriteria,
    today: date | None = None,
) -> bool:
    """Return True if the candidate satisfies every clause of the criteria.

    A candidate without a parseable birth date is never excluded by an age
    bound.
    """
    if criteria.required_care_settings and not (
        criteria.required_care_settings <= candidate.care_settings
    ):
        return False

    if criteria.age_less_than is not None or criteria.age_greater_than is not None:
        age = candidate_age(candidate, today)
        if age is not None:
            if criteria.age_less_than is not None and not age < criteria.age_less_than:
                return False
            if criteria.age_greater_than is not None and not age > criteria.age_greater_than:
                return False

    if not criteria.keywords:
        return True

    text = build_search_text(candidate)
    return all(kw in text for kw in criteria.keywords)


class CareSettingSectionFilter:
    """Keep candidates with at least one experience entry in the selected section.

    If no section is selected, the filter is a no-op.
    """

    def __init__(self, section: CareSetting | None) -> None:
        self._section = section

    def __call__(self, candidates: list[Candidate]) -> list[Candidate]:
        if self._section is None:
            return candidates
        result = [c for c in candidates if self._section in c.care_settings]
        removed = len(candidates) - len(result)
        if removed:
            logger.debug("CareSettingSectionFilter: removed %d candidates", removed)
        return result


class CandidateNamesFilter:
    """Keep only candidates whose full name is in the list (trimmed, case-insensitive).

    If the list is empty, the filter is a no-op.
    """

    def __init__(self, names: Iterable[str]) -> None:
        self._names = {n.strip().casefold() for n in names if n.strip()}

    @property
    def active(self) -> bool:
        return bool(self._names)

    def __call__(self, candidates: list[Candidate]) -> list[Candidate]:
        if not self._names:
            return candidates
        result = [c for c in candidates if c.full_name.strip().casefold() in self._names]
        removed = len(candidates) - len(result)
        if removed:
            logger.debug("CandidateNamesFilter: removed %d candidates", removed)
        return result


class CriteriaFilter:
    """Keep candidates matching parsed search criteria."""

    def __init__(self, criteria: SearchCriteria, today: date | None = None) -> None:
        self._criteria = criteria
        self._today = today

    def __call__(self, candidates: list[Candidate]) -> list[Candidate]:
        if self._criteria.is_empty:
            return candidates
        result = [
            c for c in candidates
            if candidate_matches_criteria(c, self._criteria, self._today)
        ]
        removed = len(candidates) - len(result)
        if removed:
            logger.debug("CriteriaFilter: removed %d candidates", removed)
        return result


def run_filter_chain(
    candidates: list[Candidate],
    filters: list[Filter],
) -> list[Candidate]:
    """Apply filters in order, returning the surviving candidates."""
    result = candidates
    for f in filters:
        result = f(result)
    return result
