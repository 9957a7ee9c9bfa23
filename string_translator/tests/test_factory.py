"""
Tests for assembling translators from configuration.
"""
import pytest

from string_translator.cache.cache_manager import JsonFileTranslationCache, SQLiteTranslationCache
from string_translator.core.exceptions import ConfigurationError
from string_translator.core.factory import TranslatorFactory, get_translator_factory
from string_translator.engines.google_engine import GoogleTranslateEngine
from string_translator.parsers.strings_parser import StringsFileSource
from string_translator.utils.config_manager import AppConfig, CacheConfig, EngineConfig

from conftest import FakeTranslationService


@pytest.fixture
def factory():
    return TranslatorFactory()


@pytest.fixture
def app_config(temp_dir):
    return AppConfig(
        engine=EngineConfig(api_key="test-key"),
        cache=CacheConfig(db_path=str(temp_dir / "cache.db"), directory=str(temp_dir / "sets")),
        source_language="en",
        target_language="it",
    )


@pytest.mark.parametrize("backend, cache_class", [
    ("sqlite", SQLiteTranslationCache),
    ("json", JsonFileTranslationCache),
])
def test_create_cache(factory, app_config, backend, cache_class):
    app_config.cache.backend = backend

    cache = factory.create_cache(app_config.cache)

    assert isinstance(cache, cache_class)
    cache.close()


def test_unknown_backend(factory, app_config):
    app_config.cache.backend = "redis"

    with pytest.raises(ConfigurationError) as exc_info:
        factory.create_cache(app_config.cache)

    assert "json, sqlite" in str(exc_info.value)


def test_register_cache(factory, app_config, sqlite_cache):
    factory.register_cache("memory", lambda config: sqlite_cache)
    app_config.cache.backend = "memory"

    assert factory.create_cache(app_config.cache) is sqlite_cache
    assert "memory" in factory.list_cache_backends()


def test_google_service_requires_key(factory):
    with pytest.raises(ConfigurationError):
        factory.create_service(EngineConfig())


def test_create_google_service(factory, app_config):
    service = factory.create_service(app_config.engine)

    assert isinstance(service, GoogleTranslateEngine)
    service.close()


def test_unknown_service(factory, app_config):
    with pytest.raises(ConfigurationError):
        factory.create_service(app_config.engine, name="deepl")


def test_create_translator(factory, app_config, temp_dir):
    app_config.strings_file = str(temp_dir / "Localizable.strings")
    service = FakeTranslationService()

    translator = factory.create_translator(app_config, service=service)

    assert translator.service is service
    assert translator.source_language == "en"
    assert translator.target_language == "it"
    assert isinstance(translator.input_source, StringsFileSource)
    translator.close()


def test_global_factory_is_shared():
    assert get_translator_factory() is get_translator_factory()
