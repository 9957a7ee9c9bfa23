"""
Pytest configuration and fixtures.
"""
import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple
from unittest.mock import Mock

from string_translator.cache.cache_manager import SQLiteTranslationCache
from string_translator.core.interfaces import ITranslationService, TranslatorDelegate
from string_translator.core.translator import Translator


ENGLISH_INPUT_STRINGS = {
    "apple": "apple",
    "banana": "banana",
    "blueberry": "blueberry",
    "coconut": "coconut",
    "cherry": "cherry",
    "grape": "grape",
    "kiwi": "kiwi",
    "lemon": "lemon",
    "orange": "orange",
    "peach": "peach",
    "pear": "pear",
    "pineapple": "pineapple",
    "strawberry": "strawberry",
    "watermelon": "watermelon",
}

ITALIAN_TRANSLATIONS = {
    "apple": "mela",
    "banana": "banana",
    "blueberry": "mirtillo",
    "coconut": "noce di cocco",
    "cherry": "ciliegia",
    "grape": "uva",
    "kiwi": "kiwi",
    "lemon": "limone",
    "orange": "arancia",
    "peach": "pesca",
    "pear": "pera",
    "pineapple": "ananas",
    "strawberry": "fragola",
    "watermelon": "anguria",
}


class FakeTranslationService(ITranslationService):
    """Service that answers from a fixed table and records every call."""

    def __init__(self, translations: Optional[Mapping[str, str]] = None, error: Optional[Exception] = None):
        self.translations = dict(translations or ITALIAN_TRANSLATIONS)
        self.error = error
        self.calls: List[Tuple[str, str, Dict[str, str]]] = []

    @property
    def name(self) -> str:
        return "fake"

    def translate(self, source_language, target_language, input_strings):
        self.calls.append((source_language, target_language, dict(input_strings)))
        if self.error is not None:
            raise self.error
        return {key: self.translations.get(key, f"{text}_{target_language}") for key, text in input_strings.items()}


class RecordingDelegate(TranslatorDelegate):
    """Delegate that keeps every notification."""

    def __init__(self):
        self.completed = []
        self.errors = []
        self.log_events = []

    def on_translation_complete(self, translator, translation_set):
        self.completed.append(translation_set)

    def on_translation_error(self, translator, error):
        self.errors.append(error)

    def on_log_event(self, translator, message):
        self.log_events.append(message)


@pytest.fixture
def temp_dir():
    """Create temporary directory."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path)


@pytest.fixture
def english_strings():
    return dict(ENGLISH_INPUT_STRINGS)


@pytest.fixture
def italian_translations():
    return dict(ITALIAN_TRANSLATIONS)


@pytest.fixture
def fake_service():
    return FakeTranslationService()


@pytest.fixture
def sqlite_cache(temp_dir):
    cache = SQLiteTranslationCache(temp_dir / "cache.db")
    yield cache
    cache.close()


@pytest.fixture
def delegate():
    return RecordingDelegate()


@pytest.fixture
def translator(fake_service, sqlite_cache, delegate):
    """English to Italian translator over a fresh SQLite cache."""
    t = Translator(
        service=fake_service,
        cache=sqlite_cache,
        source_language="en",
        target_language="it",
        delegate=delegate
    )
    yield t
    t.close()


@pytest.fixture
def mock_google_response():
    """Build a mock requests.Response for the Google Translate API."""
    def build(texts=None, status_code=200, json_error=None):
        response = Mock()
        response.status_code = status_code
        response.text = ""
        if json_error is not None:
            response.json.side_effect = json_error
        else:
            response.json.return_value = {
                "data": {"translations": [{"translatedText": t} for t in (texts or [])]}
            }
        return response
    return build


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Setup test environment variables."""
    monkeypatch.setenv("TESTING", "true")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    for name in ("RAPIDAPI_KEY", "TRANSLATOR_SOURCE_LANG", "TRANSLATOR_TARGET_LANG", "TRANSLATOR_CACHE_BACKEND"):
        monkeypatch.delenv(name, raising=False)
