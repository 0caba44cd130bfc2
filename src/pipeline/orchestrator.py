"""Orchestrator: wires query parsing, the filter chain, and the search log.

Data flow for one search:
  1. Parse query -> SearchCriteria
  2. Filter chain -> matched candidates
  3. Search log (only for a named employer and a non-blank query)
"""

import json
import logging
import sqlite3
from collections import Counter
from datetime import date

from src.core.config import VocabularyConfig
from src.core.db import record_search_query
from src.core.schemas import Candidate, CareSetting, SearchCriteria
from src.pipeline.matcher import (
    CandidateNamesFilter,
    CareSettingSectionFilter,
    CriteriaFilter,
    Filter,
    run_filter_chain,
)
from src.pipeline.query_parser import parse_search_query

logger = logging.getLogger(__name__)


class SearchResult:
    """Summary of a single search over the candidate list."""

    def __init__(
        self,
        query: str,
        criteria: SearchCriteria,
        total_count: int,
        matched: list[Candidate],
        log_id: int | None = None,
    ) -> None:
        self.query = query
        self.criteria = criteria
        self.total_count = total_count
        self.matched = matched
        self.log_id = log_id


def run_search(
    query: str,
    candidates: list[Candidate],
    *,
    section: CareSetting | None = None,
    candidate_names: list[str] | None = None,
    conn: sqlite3.Connection | None = None,
    employer: str | None = None,
    vocabulary: VocabularyConfig | None = None,
    today: date | None = None,
) -> SearchResult:
    """Run one search over an in-memory candidate list."""
    normalized_query = query.strip()
    criteria = parse_search_query(normalized_query, vocabulary)

    filters = _build_filters(criteria, section, candidate_names or [], today)
    matched = run_filter_chain(candidates, filters)
    logger.info(
        "Search '%s': %d candidates, %d matched", normalized_query, len(candidates), len(matched),
    )

    log_id: int | None = None
    if conn is not None and employer and normalized_query:
        log = record_search_query(
            conn, employer, normalized_query, [c.full_name for c in matched],
        )
        if log is not None:
            log_id = log.id
            logger.debug("Recorded search log %d for '%s'", log.id, log.employer_username)

    return SearchResult(
        query=normalized_query,
        criteria=criteria,
        total_count=len(candidates),
        matched=matched,
        log_id=log_id,
    )


def care_setting_sections(candidates: list[Candidate]) -> list[tuple[CareSetting, int]]:
    """Count candidates per care setting, in enum order, omitting empty sections."""
    counts: Counter[CareSetting] = Counter()
    for c in candidates:
        counts.update(c.care_settings)
    return [(setting, counts[setting]) for setting in CareSetting if counts[setting]]


def export_results_json(result: SearchResult) -> str:
    """Export a search result as a JSON string."""
    criteria = result.criteria
    data = {
        "query": result.query,
        "criteria": {
            "keywords": sorted(criteria.keywords),
            "required_care_settings": sorted(s.value for s in criteria.required_care_settings),
            "age_less_than": criteria.age_less_than,
            "age_greater_than": criteria.age_greater_than,
        },
        "total_count": result.total_count,
        "matched_count": len(result.matched),
        "candidates": [
            {
                "id": c.id,
                "full_name": c.full_name,
                "profession": c.profession,
                "birth_year": c.birth_year,
                "care_settings": sorted(s.value for s in c.care_settings),
                "languages": c.languages,
            }
            for c in result.matched
        ],
    }
    return json.dumps(data, indent=2, ensure_ascii=False)


def _build_filters(
    criteria: SearchCriteria,
    section: CareSetting | None,
    candidate_names: list[str],
    today: date | None,
) -> list[Filter]:
    """Build the filter chain. An explicit name list replaces the query filter."""
    names_filter = CandidateNamesFilter(candidate_names)
    filters: list[Filter] = [CareSettingSectionFilter(section)]
    if names_filter.active:
        filters.append(names_filter)
    else:
        filters.append(CriteriaFilter(criteria, today))
    return filters
