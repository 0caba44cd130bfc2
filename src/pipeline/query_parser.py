"""Free-text query parser: operator search string -> SearchCriteria.

Stage order (each stage removes what it consumed from the working text):
  1. NFC-compose and lowercase
  2. Age "less than N"    — first match only
  3. Age "greater than N" — first match only
  4. Care settings        — table order; a word consumed by one tag cannot
                            trigger a later one
  5. Tokenize on non-alphanumeric runs
  6. Drop stopwords, noise words, numbers and short tokens
  7. Strip diacritics and collect into a set
"""

import logging
import re
import unicodedata
from functools import lru_cache

from src.core.config import VocabularyConfig
from src.core.schemas import CareSetting, SearchCriteria
from src.core.text import normalize_text, strip_diacritics

logger = logging.getLogger(__name__)

_TOKEN_SPLIT_RE = re.compile(r"[\W_]+")


class QueryParser:
    """Compiled form of a VocabularyConfig. Parsing is pure and thread-safe."""

    def __init__(self, vocabulary: VocabularyConfig) -> None:
        self._age_less = re.compile(vocabulary.age_less_than_pattern)
        self._age_greater = re.compile(vocabulary.age_greater_than_pattern)
        self._stopwords = frozenset(normalize_text(w) for w in vocabulary.stopwords)
        self._noise_words = frozenset(normalize_text(w) for w in vocabulary.noise_words)
        self._min_length = vocabulary.min_keyword_length
        self._care_settings: list[tuple[CareSetting, re.Pattern[str]]] = [
            (tag, _trigger_pattern(triggers))
            for tag, triggers in vocabulary.care_settings.items()
            if triggers
        ]

    def parse(self, query: str) -> SearchCriteria:
        """Parse a raw query. Never raises; unrecognised input yields no signal."""
        lowered = unicodedata.normalize("NFC", query).lower()
        text = lowered
        if not text.strip():
            return SearchCriteria(raw_query=lowered)

        age_less_than, text = _extract_number(self._age_less, text)
        age_greater_than, text = _extract_number(self._age_greater, text)

        settings: set[CareSetting] = set()
        for tag, pattern in self._care_settings:
            text, removed = pattern.subn(" ", text)
            if removed:
                settings.add(tag)

        keywords = frozenset(
            strip_diacritics(token)
            for token in _TOKEN_SPLIT_RE.split(text)
            if self._keep(token)
        )

        criteria = SearchCriteria(
            raw_query=lowered,
            keywords=keywords,
            required_care_settings=frozenset(settings),
            age_less_than=age_less_than,
            age_greater_than=age_greater_than,
        )
        logger.debug(
            "Parsed %r: keywords=%s settings=%s age<%s age>%s",
            criteria.raw_query,
            sorted(criteria.keywords),
            sorted(s.value for s in criteria.required_care_settings),
            age_less_than,
            age_greater_than,
        )
        return criteria

    def _keep(self, token: str) -> bool:
        if len(token) < self._min_length or token.isdigit():
            return False
        normalized = strip_diacritics(token)
        return normalized not in self._stopwords and normalized not in self._noise_words


def parse_search_query(query: str, vocabulary: VocabularyConfig | None = None) -> SearchCriteria:
    """Parse a query with the given vocabulary, or the built-in one."""
    parser = QueryParser(vocabulary) if vocabulary is not None else _default_parser()
    return parser.parse(query)


@lru_cache(maxsize=1)
def _default_parser() -> QueryParser:
    return QueryParser(VocabularyConfig())


def _extract_number(pattern: re.Pattern[str], text: str) -> tuple[int | None, str]:
    """Return (number, text with the first match replaced by a space)."""
    match = pattern.search(text)
    if match is None:
        return None, text
    digits = match.group(1)
    if not digits or not digits.isdecimal():
        return None, text
    return int(digits), f"{text[:match.start()]} {text[match.end():]}"


def _trigger_pattern(triggers: list[str]) -> re.Pattern[str]:
    """Match every word containing any trigger; longest triggers tried first."""
    ordered = sorted(set(triggers), key=len, reverse=True)
    alternation = "|".join(re.escape(t) for t in ordered)
    return re.compile(rf"\b\w*(?:{alternation})\w*")
