"""
Tests for the Translator cache decisions and notifications.
"""
import gc
import threading

import pytest

from string_translator.core.exceptions import (
    CacheWriteError, ConfigurationError, IncompleteTranslationError,
    InvalidSourceFileError, MissingInputError, UnknownTranslationError
)
from string_translator.core.models import CapitalizationStyle, TranslationSet
from string_translator.core.translator import Translator
from string_translator.parsers.strings_parser import ManualInputSource, StringsFileSource

from conftest import FakeTranslationService, RecordingDelegate


# ===== Source language shortcut =====

def test_same_language_returns_input_without_service_call(translator, fake_service, english_strings):
    result = translator.resolve(english_strings, "en", "en", min_id=3)

    assert result == TranslationSet(id=3, language="en", translations=english_strings)
    assert fake_service.calls == []
    assert translator.current_translation_set == result


def test_same_language_set_is_persisted(translator, sqlite_cache, english_strings):
    translator.resolve(english_strings, "en", "en")

    assert sqlite_cache.get("en") == TranslationSet(id=0, language="en", translations=english_strings)


def test_same_language_supersedes_cached_set(translator, sqlite_cache, fake_service):
    sqlite_cache.put(TranslationSet(id=9, language="en", translations={"dog": "hound"}))

    result = translator.resolve({"dog": "dog"}, "en", "en", min_id=1)

    assert result.id == 1
    assert sqlite_cache.get("en") == result
    assert fake_service.calls == []


# ===== Cache decisions =====

def test_miss_calls_service_and_caches(translator, fake_service, sqlite_cache, english_strings, italian_translations):
    result = translator.resolve(english_strings, "en", "it")

    assert len(fake_service.calls) == 1
    assert fake_service.calls[0] == ("en", "it", english_strings)
    assert dict(result.translations) == italian_translations
    assert sqlite_cache.get("it") == result


def test_second_resolve_hits_cache(translator, fake_service, english_strings):
    first = translator.resolve(english_strings, "en", "it")
    second = translator.resolve(english_strings, "en", "it")

    assert second == first
    assert len(fake_service.calls) == 1


def test_cached_set_with_lower_id_is_stale(translator, fake_service, sqlite_cache):
    sqlite_cache.put(TranslationSet(id=1, language="it", translations={"dog": "cane"}))

    result = translator.resolve({"dog": "dog"}, "en", "it", min_id=2)

    assert len(fake_service.calls) == 1
    assert result.id == 2
    assert sqlite_cache.get("it").id == 2


def test_cached_set_missing_key_is_stale(translator, fake_service, sqlite_cache):
    sqlite_cache.put(TranslationSet(id=5, language="it", translations={"dog": "cane"}))

    result = translator.resolve({"dog": "dog", "cat": "cat"}, "en", "it", min_id=5)

    assert len(fake_service.calls) == 1
    assert set(result.translations) == {"dog", "cat"}


def test_hit_ignores_input_values(translator, fake_service, sqlite_cache):
    cached = TranslationSet(id=2, language="it", translations={"dog": "cane"})
    sqlite_cache.put(cached)

    result = translator.resolve({"dog": "x"}, "en", "it", min_id=1)

    assert result == cached
    assert fake_service.calls == []


def test_hit_tolerates_extra_cached_keys(translator, fake_service, sqlite_cache):
    cached = TranslationSet(id=0, language="it", translations={"dog": "cane", "cat": "gatto"})
    sqlite_cache.put(cached)

    result = translator.resolve({"dog": "dog"}, "en", "it")

    assert result == cached
    assert dict(sqlite_cache.get("it").translations) == {"dog": "cane", "cat": "gatto"}
    assert fake_service.calls == []


@pytest.mark.parametrize("cached_id, min_id, keys, expect_hit", [
    (2, 2, {"dog"}, True),
    (2, 0, {"dog"}, True),
    (2, 3, {"dog"}, False),
    (2, 1, {"dog", "cat"}, False),
    (0, 0, set(), True),
])
def test_hit_iff_id_fresh_and_keys_covered(fake_service, sqlite_cache, cached_id, min_id, keys, expect_hit):
    sqlite_cache.put(TranslationSet(id=cached_id, language="it", translations={"dog": "cane"}))
    translator = Translator(fake_service, sqlite_cache, "en", "it")
    input_strings = {key: key for key in keys} or {"dog": "dog"}

    translator.resolve(input_strings, "en", "it", min_id=min_id)

    assert (fake_service.calls == []) == expect_hit


# ===== Failures =====

def test_empty_input_fails_before_any_work(translator, fake_service, sqlite_cache, delegate):
    with pytest.raises(MissingInputError):
        translator.resolve({}, "en", "it")

    assert fake_service.calls == []
    assert sqlite_cache.get("it") is None
    assert len(delegate.errors) == 1
    assert delegate.completed == []


def test_service_error_leaves_state_untouched(sqlite_cache, english_strings, delegate):
    service = FakeTranslationService()
    translator = Translator(service, sqlite_cache, "en", "it", delegate=delegate)
    previous = translator.resolve(english_strings, "en", "it")

    service.error = IncompleteTranslationError(expected=15, received=14)
    with pytest.raises(IncompleteTranslationError):
        translator.resolve(dict(english_strings, mango="mango"), "en", "it", min_id=1)

    assert translator.current_translation_set == previous
    assert sqlite_cache.get("it") == previous
    assert delegate.errors == [service.error]


def test_unexpected_error_is_wrapped_as_unknown(sqlite_cache, delegate):
    service = FakeTranslationService(error=RuntimeError("boom"))
    translator = Translator(service, sqlite_cache, "en", "it", delegate=delegate)

    with pytest.raises(UnknownTranslationError) as exc_info:
        translator.resolve({"dog": "dog"}, "en", "it")

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert delegate.errors == [exc_info.value]


def test_cache_write_failure_does_not_adopt_set(fake_service, delegate):
    class BrokenCache(object):
        def get(self, language):
            return None

        def put(self, translation_set):
            raise CacheWriteError("disk full")

        def clear(self):
            return 0

    translator = Translator(fake_service, BrokenCache(), "en", "it", delegate=delegate)

    with pytest.raises(CacheWriteError):
        translator.resolve({"dog": "dog"}, "en", "it")

    assert translator.current_translation_set is None


# ===== Notifications =====

def test_delegate_gets_one_result_and_log_events(translator, delegate, english_strings):
    result = translator.resolve(english_strings, "en", "it")

    assert delegate.completed == [result]
    assert delegate.errors == []
    assert any("No cached translation set found" in event for event in delegate.log_events)

    translator.resolve(english_strings, "en", "it")
    assert "Found cached translation set" in delegate.log_events[-1]


def test_stale_branches_are_logged(translator, delegate, sqlite_cache):
    sqlite_cache.put(TranslationSet(id=1, language="it", translations={"dog": "cane"}))

    translator.resolve({"dog": "dog"}, "en", "it", min_id=4)
    assert "higher than the cached translation set" in delegate.log_events[-1]

    translator.resolve({"dog": "dog", "cat": "cat"}, "en", "it", min_id=4)
    assert "missing some keys" in delegate.log_events[-1]


def test_delegate_is_held_weakly(fake_service, sqlite_cache):
    delegate = RecordingDelegate()
    translator = Translator(fake_service, sqlite_cache, "en", "it", delegate=delegate)
    assert translator.delegate is delegate

    del delegate
    gc.collect()

    assert translator.delegate is None
    translator.resolve({"dog": "dog"}, "en", "it")


# ===== Input sources =====

def test_update_translations_uses_input_source(translator, fake_service, english_strings):
    translator.input_source = ManualInputSource(english_strings)

    result = translator.update_translations()

    assert result.id == 0
    assert fake_service.calls[0][2] == english_strings


def test_update_translations_reports_loader_errors(translator, delegate, temp_dir):
    translator.input_source = StringsFileSource(temp_dir / "Missing.strings")

    with pytest.raises(InvalidSourceFileError):
        translator.update_translations()

    assert len(delegate.errors) == 1


def test_update_translations_without_source(translator):
    with pytest.raises(ConfigurationError):
        translator.update_translations()


def test_update_translations_follows_target_language(translator, fake_service):
    translator.input_source = ManualInputSource({"dog": "dog"})
    translator.target_language = "fr"

    result = translator.update_translations(translation_id=7)

    assert result.language == "fr"
    assert result.id == 7
    assert fake_service.calls[0][1] == "fr"


def test_update_translations_async(translator, english_strings, italian_translations, delegate):
    translator.input_source = ManualInputSource(english_strings)

    future = translator.update_translations_async()
    result = future.result(timeout=5)

    assert dict(result.translations) == italian_translations
    assert delegate.completed == [result]


def test_async_failure_is_carried_by_future(translator):
    translator.input_source = ManualInputSource({})

    future = translator.update_translations_async()

    with pytest.raises(MissingInputError):
        future.result(timeout=5)


def test_concurrent_requests_are_not_coalesced(sqlite_cache):
    release = threading.Event()

    class SlowService(FakeTranslationService):
        def translate(self, source_language, target_language, input_strings):
            release.wait(timeout=5)
            return super().translate(source_language, target_language, input_strings)

    service = SlowService()
    translator = Translator(service, sqlite_cache, "en", "it", input_source=ManualInputSource({"dog": "dog"}))

    first = translator.update_translations_async(1)
    second = translator.update_translations_async(1)
    release.set()
    first.result(timeout=5)
    second.result(timeout=5)
    translator.close()

    assert len(service.calls) == 2
    assert sqlite_cache.get("it").id == 1


# ===== Lookup =====

def test_lookup_without_current_set_returns_key(translator):
    assert translator.lookup("apple", CapitalizationStyle.NONE) == "apple"
    assert translator.lookup("apple") == "Apple"


def test_lookup_applies_capitalization(translator, english_strings):
    translator.resolve(english_strings, "en", "it")

    assert translator.lookup("coconut", CapitalizationStyle.NONE) == "noce di cocco"
    assert translator.lookup("coconut", CapitalizationStyle.FIRST) == "Noce di cocco"
    assert translator.lookup("coconut", CapitalizationStyle.ALL_FIRST) == "Noce Di Cocco"
    assert translator.lookup("coconut", CapitalizationStyle.ALL) == "NOCE DI COCCO"


def test_lookup_fallback_is_capitalized_too(translator, english_strings):
    translator.resolve(english_strings, "en", "it")

    assert translator.lookup("mango split", CapitalizationStyle.ALL_FIRST) == "Mango Split"
    assert translator.lookup("mango", CapitalizationStyle.ALL) == "MANGO"


def test_clear_cache(translator, sqlite_cache, english_strings):
    translator.resolve(english_strings, "en", "it")

    assert translator.clear_cache() == 1
    assert sqlite_cache.get("it") is None


def test_result_delivery_is_serialized_with_adoption(fake_service, sqlite_cache, delegate):
    first_adopted = threading.Event()
    release_first = threading.Event()

    class PausingTranslator(Translator):
        def _adopt(self, translation_set, persist):
            adopted = super()._adopt(translation_set, persist)
            if translation_set.id == 1:
                first_adopted.set()
                release_first.wait(timeout=5)
            return adopted

    translator = PausingTranslator(fake_service, sqlite_cache, "en", "it", delegate=delegate)

    first = threading.Thread(target=translator.resolve, args=({"dog": "dog"}, "en", "it", 1))
    first.start()
    assert first_adopted.wait(timeout=5)

    second = threading.Thread(target=translator.resolve, args=({"dog": "dog"}, "en", "it", 2))
    second.start()
    second.join(timeout=5)
    release_first.set()
    first.join(timeout=5)

    assert [result.id for result in delegate.completed] == [1, 2]
    assert delegate.completed[-1] == translator.current_translation_set
    assert sqlite_cache.get("it") == translator.current_translation_set


class FailingDelegate(RecordingDelegate):
    def on_log_event(self, translator, message):
        raise RuntimeError("log sink down")

    def on_translation_error(self, translator, error):
        super().on_translation_error(translator, error)
        raise RuntimeError("error sink down")


def test_failing_log_consumer_does_not_abort_request(fake_service, sqlite_cache):
    failing = FailingDelegate()
    translator = Translator(fake_service, sqlite_cache, "en", "it", delegate=failing)

    result = translator.resolve({"dog": "dog"}, "en", "it")

    assert len(fake_service.calls) == 1
    assert sqlite_cache.get("it") == result
    assert failing.completed == [result]
    assert failing.errors == []


def test_failing_error_consumer_keeps_typed_error(fake_service, sqlite_cache):
    failing = FailingDelegate()
    translator = Translator(fake_service, sqlite_cache, "en", "it", delegate=failing)

    with pytest.raises(MissingInputError):
        translator.resolve({}, "en", "it")

    assert len(failing.errors) == 1
