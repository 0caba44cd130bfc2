"""Default vocabulary tables for the free-text query parser.

These are data, not logic: VocabularyConfig starts from them and a
settings.yaml can replace any of them.
"""

# Short connector words (Spanish, English, Norwegian).
STOPWORDS: frozenset[str] = frozenset({
    "de", "la", "el", "que", "y", "en", "para", "con", "del", "los", "las",
    "un", "una", "unos", "unas", "por", "se", "su", "sus", "lo", "al", "a",
    "the", "and", "or", "of", "to", "for", "with", "in", "an",
    "og", "i", "på", "med", "til", "av", "et", "som", "eller",
})

# Academic-credential words that carry no discriminating signal.
NOISE_WORDS: frozenset[str] = frozenset({
    "carrera", "universitaria", "universitario", "universidad",
    "licenciatura", "grado", "titulacion", "titulación", "titulo", "título",
    "master", "máster", "maestria", "maestría", "formacion", "formación",
    "degree", "university", "bachelor", "masters", "diploma",
    "utdanning", "universitet", "bachelorgrad", "mastergrad",
})

# Care-setting tag -> trigger stems, checked in this order.
CARE_SETTING_TRIGGERS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("domicilio_geriatrico", (
        "domicili", "geriatr", "geriátr", "residencia", "home care",
        "homecare", "geriatric", "elderly", "nursing home",
        "sykehjem", "hjemmetjeneste", "hjemmesykepleie", "eldreomsorg",
    )),
    ("hospitalario", (
        "hospital", "sykehus",
    )),
    ("urgencias", (
        "urgencia", "emergencia", "emergenc", "triaje", "triage",
        "akuttmottak", "legevakt",
    )),
)

AGE_LESS_THAN_PATTERN = (
    r"\b(?:menor(?:es)?|younger|less|under|yngre)"
    r"(?:\s+(?:de|than|enn))?\s+(\d{1,3})"
)

AGE_GREATER_THAN_PATTERN = (
    r"\b(?:mayor(?:es)?|older|greater|over|eldre)"
    r"(?:\s+(?:de|than|enn))?\s+(\d{1,3})"
)

MIN_KEYWORD_LENGTH = 3
