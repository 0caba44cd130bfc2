"""Tests for the free-text query parser."""

import pytest

from src.core.config import VocabularyConfig
from src.core.schemas import CareSetting
from src.pipeline.query_parser import QueryParser, parse_search_query


class TestEmptyQuery:
    @pytest.mark.parametrize("query", ["", "   ", "\t\n"])
    def test_blank_matches_everything(self, query: str) -> None:
        criteria = parse_search_query(query)
        assert criteria.keywords == frozenset()
        assert criteria.required_care_settings == frozenset()
        assert criteria.age_less_than is None
        assert criteria.age_greater_than is None
        assert criteria.is_empty

    def test_only_punctuation_yields_no_signal(self) -> None:
        criteria = parse_search_query("¿¡!!! @@@ ### ...")
        assert criteria.is_empty

    def test_only_stopwords_yields_no_signal(self) -> None:
        assert parse_search_query("de la y the and").is_empty


class TestAgeExtraction:
    def test_greater_than(self) -> None:
        criteria = parse_search_query("mayores de 40")
        assert criteria.age_greater_than == 40
        assert criteria.age_less_than is None
        assert criteria.keywords == frozenset()
        assert criteria.required_care_settings == frozenset()

    def test_less_than(self) -> None:
        criteria = parse_search_query("menores de 35")
        assert criteria.age_less_than == 35
        assert criteria.keywords == frozenset()

    def test_connector_is_optional(self) -> None:
        criteria = parse_search_query("mayor 30")
        assert criteria.age_greater_than == 30

    def test_both_bounds(self) -> None:
        criteria = parse_search_query("mayores de 30 menores de 50")
        assert criteria.age_greater_than == 30
        assert criteria.age_less_than == 50
        assert criteria.keywords == frozenset()

    def test_english_phrases(self) -> None:
        criteria = parse_search_query("nurse older than 30 younger than 45")
        assert criteria.age_greater_than == 30
        assert criteria.age_less_than == 45
        assert criteria.keywords == frozenset({"nurse"})

    def test_norwegian_phrases(self) -> None:
        criteria = parse_search_query("eldre enn 25")
        assert criteria.age_greater_than == 25

    def test_number_not_kept_as_keyword(self) -> None:
        criteria = parse_search_query("enfermera mayores de 40")
        assert criteria.keywords == frozenset({"enfermera"})
        assert "40" not in criteria.keywords

    def test_phrase_without_number_is_a_keyword(self) -> None:
        criteria = parse_search_query("mayores de")
        assert criteria.age_greater_than is None
        assert criteria.keywords == frozenset({"mayores"})

    def test_first_match_wins(self) -> None:
        criteria = parse_search_query("mayores de 30 mayores de 60")
        assert criteria.age_greater_than == 30

    def test_phrase_inside_word_ignored(self) -> None:
        criteria = parse_search_query("turnover 30")
        assert criteria.age_greater_than is None


class TestCareSettingExtraction:
    def test_emergency_and_hospital(self) -> None:
        criteria = parse_search_query("urgencias y hospital")
        assert criteria.required_care_settings == frozenset(
            {CareSetting.URGENCIAS, CareSetting.HOSPITALARIO}
        )
        assert criteria.keywords == frozenset()

    def test_inflected_forms_fully_consumed(self) -> None:
        criteria = parse_search_query("hospitalarias")
        assert criteria.required_care_settings == frozenset({CareSetting.HOSPITALARIO})
        assert criteria.keywords == frozenset()

    def test_geriatric_with_accent(self) -> None:
        criteria = parse_search_query("enfermera con experiencia en geriatría")
        assert criteria.required_care_settings == frozenset({CareSetting.DOMICILIO_GERIATRICO})
        assert criteria.keywords == frozenset({"enfermera", "experiencia"})

    def test_decomposed_trigger_consumed(self) -> None:
        criteria = parse_search_query("enfermera geria\u0301trica")
        assert criteria.required_care_settings == frozenset({CareSetting.DOMICILIO_GERIATRICO})
        assert criteria.keywords == frozenset({"enfermera"})

    def test_multi_word_trigger(self) -> None:
        criteria = parse_search_query("home care nurse")
        assert criteria.required_care_settings == frozenset({CareSetting.DOMICILIO_GERIATRICO})
        assert criteria.keywords == frozenset({"nurse"})

    def test_norwegian_trigger(self) -> None:
        criteria = parse_search_query("sykepleier på sykehus")
        assert criteria.required_care_settings == frozenset({CareSetting.HOSPITALARIO})
        assert criteria.keywords == frozenset({"sykepleier"})

    def test_setting_word_not_a_keyword(self) -> None:
        criteria = parse_search_query("enfermera urgencias")
        assert criteria.required_care_settings == frozenset({CareSetting.URGENCIAS})
        assert criteria.keywords == frozenset({"enfermera"})

    def test_word_consumed_by_earlier_tag_does_not_trigger_later(self) -> None:
        vocab = VocabularyConfig(
            care_settings={
                CareSetting.DOMICILIO_GERIATRICO: ["casa"],
                CareSetting.HOSPITALARIO: ["casa"],
            },
        )
        criteria = parse_search_query("casa", vocab)
        assert criteria.required_care_settings == frozenset({CareSetting.DOMICILIO_GERIATRICO})

    def test_every_occurrence_removed(self) -> None:
        criteria = parse_search_query("urgencias pediatria emergencias")
        assert criteria.required_care_settings == frozenset({CareSetting.URGENCIAS})
        assert criteria.keywords == frozenset({"pediatria"})


class TestKeywordFiltering:
    def test_diacritics_stripped(self) -> None:
        assert parse_search_query("Pediatría").keywords == frozenset({"pediatria"})

    def test_noise_words_dropped(self) -> None:
        criteria = parse_search_query("grado en enfermería por la universidad")
        assert criteria.keywords == frozenset({"enfermeria"})

    def test_noise_words_dropped_without_accent(self) -> None:
        assert parse_search_query("titulacion maestria").keywords == frozenset()

    def test_numbers_dropped(self) -> None:
        assert parse_search_query("enfermera 2020").keywords == frozenset({"enfermera"})

    def test_short_tokens_dropped(self) -> None:
        assert parse_search_query("ap uci").keywords == frozenset({"uci"})

    def test_duplicates_collapsed(self) -> None:
        criteria = parse_search_query("Enfermera enfermera ENFERMERA")
        assert criteria.keywords == frozenset({"enfermera"})

    def test_accented_and_plain_collapse(self) -> None:
        criteria = parse_search_query("pediatría pediatria")
        assert criteria.keywords == frozenset({"pediatria"})

    def test_decomposed_accent_kept_in_one_token(self) -> None:
        assert parse_search_query("pediatri\u0301a").keywords == frozenset({"pediatria"})

    def test_decomposed_accent_raw_query_composed(self) -> None:
        assert parse_search_query("Pediatri\u0301a").raw_query == "pediatr\u00eda"

    def test_split_on_punctuation(self) -> None:
        criteria = parse_search_query("enfermera,pediatría;turno-noche_fijo")
        assert criteria.keywords == frozenset(
            {"enfermera", "pediatria", "turno", "noche", "fijo"}
        )

    def test_raw_query_lowercased(self) -> None:
        assert parse_search_query("Enfermera URGENCIAS").raw_query == "enfermera urgencias"

    def test_custom_min_keyword_length(self) -> None:
        vocab = VocabularyConfig(min_keyword_length=2)
        assert parse_search_query("ap", vocab).keywords == frozenset({"ap"})


class TestQueryParser:
    def test_reusable(self) -> None:
        parser = QueryParser(VocabularyConfig())
        first = parser.parse("enfermera")
        second = parser.parse("fisioterapeuta")
        assert first.keywords == frozenset({"enfermera"})
        assert second.keywords == frozenset({"fisioterapeuta"})

    def test_custom_stopwords(self) -> None:
        parser = QueryParser(VocabularyConfig(stopwords=["enfermera"]))
        assert parser.parse("enfermera pediatria").keywords == frozenset({"pediatria"})

    def test_empty_trigger_list_ignored(self) -> None:
        parser = QueryParser(VocabularyConfig(care_settings={CareSetting.URGENCIAS: []}))
        criteria = parser.parse("urgencias")
        assert criteria.required_care_settings == frozenset()
        assert criteria.keywords == frozenset({"urgencias"})

    def test_optional_number_group_does_not_raise(self) -> None:
        vocab = VocabularyConfig(age_greater_than_pattern=r"senior(\d+)?")
        criteria = QueryParser(vocab).parse("senior nurse")
        assert criteria.age_greater_than is None
