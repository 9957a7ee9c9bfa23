"""
Tests for translation sets and capitalization styles.
"""
import pytest

from string_translator.core.exceptions import CacheReadError
from string_translator.core.models import CapitalizationStyle, TranslationSet, default_target_language


@pytest.fixture
def translation_set():
    return TranslationSet(
        id=0,
        language="it",
        translations={"apple": "mela", "banana": "banana", "blueberry": "mirtillo", "coconut": "noce di cocco"}
    )


def test_get_missing_translations(translation_set):
    assert translation_set.get_missing_translations({}) is None
    assert translation_set.get_missing_translations({"apple": "mela", "banana": "banana"}) is None
    assert translation_set.get_missing_translations({"apple": "", "banana": ""}) is None

    assert translation_set.get_missing_translations(
        {"apple": "mela", "banana": "banana", "cherry": "ciliegia"}
    ) == {"cherry": "ciliegia"}
    assert translation_set.get_missing_translations(
        {"cherry": "ciliegia", "grape": "uva", "kiwi": "kiwi"}
    ) == {"cherry": "ciliegia", "grape": "uva", "kiwi": "kiwi"}


def test_translations_are_read_only(translation_set):
    with pytest.raises(TypeError):
        translation_set.translations["apple"] = "pomo"


def test_source_mapping_is_copied():
    source = {"dog": "cane"}
    translation_set = TranslationSet(id=1, language="it", translations=source)
    source["dog"] = "gatto"

    assert translation_set.translations["dog"] == "cane"


def test_dict_round_trip(translation_set):
    data = translation_set.to_dict()

    assert data == {"id": 0, "language": "it", "translations": dict(translation_set.translations)}
    assert TranslationSet.from_dict(data) == translation_set


@pytest.mark.parametrize("record", [
    {"language": "it", "translations": {}},
    {"id": 1, "translations": {}},
    {"id": 1, "language": "it"},
    {"id": "1", "language": "it", "translations": {}},
    {"id": True, "language": "it", "translations": {}},
    {"id": 1, "language": "", "translations": {}},
    {"id": 1, "language": "it", "translations": {"dog": 3}},
    {"id": 1, "language": "it", "translations": ["dog"]},
    None,
])
def test_from_dict_rejects_malformed_records(record):
    with pytest.raises(CacheReadError):
        TranslationSet.from_dict(record)


def test_description(translation_set):
    assert str(translation_set) == (
        "Translation ID: 0\n"
        "Language: it\n\n"
        "apple: mela\n"
        "banana: banana\n"
        "blueberry: mirtillo\n"
        "coconut: noce di cocco\n"
    )


def test_equal_sets_hash_alike():
    first = TranslationSet(id=1, language="it", translations={"a": "b"})
    second = TranslationSet(id=1, language="it", translations={"a": "b"})

    assert first == second
    assert hash(first) == hash(second)


@pytest.mark.parametrize("style, expected", [
    (CapitalizationStyle.NONE, "noce di cocco"),
    (CapitalizationStyle.FIRST, "Noce di cocco"),
    (CapitalizationStyle.ALL_FIRST, "Noce Di Cocco"),
    (CapitalizationStyle.ALL, "NOCE DI COCCO"),
])
def test_capitalization(style, expected):
    assert style.apply("noce di cocco") == expected


def test_capitalization_keeps_spacing_and_empty_text():
    assert CapitalizationStyle.ALL_FIRST.apply("a  b") == "A  B"
    assert CapitalizationStyle.FIRST.apply("") == ""
    assert CapitalizationStyle.FIRST.apply("iPhone case") == "IPhone case"


def test_default_target_language(monkeypatch):
    monkeypatch.setattr("locale.getlocale", lambda: ("it_IT", "UTF-8"))
    assert default_target_language() == "it"

    monkeypatch.setattr("locale.getlocale", lambda: (None, None))
    assert default_target_language() == "en"

    monkeypatch.setattr("locale.getlocale", lambda: ("C", None))
    assert default_target_language() == "en"


def test_all_first_is_not_title_case():
    assert CapitalizationStyle.ALL_FIRST.apply("usb cable for iPhone") == "Usb Cable For IPhone"
    assert CapitalizationStyle.ALL_FIRST.apply("new\tline") == "New\tline"
