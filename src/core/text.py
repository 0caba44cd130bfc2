"""Text normalization shared by the query parser and the matcher."""

import unicodedata


def strip_diacritics(text: str) -> str:
    """Drop combining marks after canonical decomposition ("Pediatría" -> "Pediatria")."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_text(text: str) -> str:
    """Lowercase and strip diacritics. Idempotent."""
    return strip_diacritics(text.lower())
