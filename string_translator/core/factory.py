"""
Factory for assembling a Translator from configuration.

Cache backends and translation services are looked up in small registries
so callers (and tests) can plug in their own implementations.
"""
import logging
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .exceptions import ConfigurationError
from .interfaces import IInputSource, ITranslationCache, ITranslationService, TranslatorDelegate
from .translator import Translator
from ..cache.cache_manager import JsonFileTranslationCache, SQLiteTranslationCache
from ..engines.google_engine import GoogleTranslateEngine
from ..parsers.strings_parser import StringsFileSource
from ..utils.config_manager import AppConfig, CacheConfig, EngineConfig


logger = logging.getLogger(__name__)


CacheBuilder = Callable[[CacheConfig], ITranslationCache]
ServiceBuilder = Callable[[EngineConfig], ITranslationService]


def _build_sqlite_cache(config: CacheConfig) -> ITranslationCache:
    return SQLiteTranslationCache(Path(config.db_path))


def _build_json_cache(config: CacheConfig) -> ITranslationCache:
    return JsonFileTranslationCache(Path(config.directory))


def _build_google_service(config: EngineConfig) -> ITranslationService:
    if not config.api_key:
        raise ConfigurationError(
            "RapidAPI key not configured. Set engine.api_key or RAPIDAPI_KEY.",
            component="engine"
        )
    return GoogleTranslateEngine(
        api_key=config.api_key,
        api_url=config.api_url,
        api_host=config.api_host,
        timeout=config.timeout
    )


class TranslatorFactory:
    """Thread-safe registry of cache backends and translation services."""

    def __init__(self):
        self._lock = threading.RLock()
        self._caches: Dict[str, CacheBuilder] = {
            'sqlite': _build_sqlite_cache,
            'json': _build_json_cache,
        }
        self._services: Dict[str, ServiceBuilder] = {
            'google': _build_google_service,
        }

    def register_cache(self, name: str, builder: CacheBuilder) -> None:
        with self._lock:
            self._caches[name] = builder
        logger.debug(f"Registered cache backend: {name}")

    def register_service(self, name: str, builder: ServiceBuilder) -> None:
        with self._lock:
            self._services[name] = builder
        logger.debug(f"Registered translation service: {name}")

    def list_cache_backends(self) -> List[str]:
        with self._lock:
            return sorted(self._caches)

    def create_cache(self, config: CacheConfig) -> ITranslationCache:
        """
        Create the cache backend named by ``config.backend``.

        Raises:
            ConfigurationError: If the backend is unknown
        """
        with self._lock:
            builder = self._caches.get(config.backend)
        if builder is None:
            raise ConfigurationError(
                f"Unknown cache backend '{config.backend}'. "
                f"Available: {', '.join(self.list_cache_backends())}",
                component="cache"
            )
        return builder(config)

    def create_service(self, config: EngineConfig, name: str = 'google') -> ITranslationService:
        with self._lock:
            builder = self._services.get(name)
        if builder is None:
            raise ConfigurationError(f"Unknown translation service '{name}'", component="engine")
        return builder(config)

    def create_translator(
        self,
        config: AppConfig,
        input_source: Optional[IInputSource] = None,
        delegate: Optional[TranslatorDelegate] = None,
        service: Optional[ITranslationService] = None,
        cache: Optional[ITranslationCache] = None
    ) -> Translator:
        """
        Create a Translator wired from ``config``.

        ``service`` and ``cache`` override the configured components. When no
        input source is given, ``config.strings_file`` is used if set.
        """
        if input_source is None and config.strings_file:
            input_source = StringsFileSource(Path(config.strings_file))

        translator = Translator(
            service=service or self.create_service(config.engine),
            cache=cache or self.create_cache(config.cache),
            source_language=config.source_language,
            target_language=config.target_language,
            input_source=input_source,
            delegate=delegate
        )
        logger.info(
            f"Translator created: {config.source_language} -> {config.target_language} "
            f"(cache={config.cache.backend})"
        )
        return translator


# ===== Global Factory Instance =====

_factory: Optional[TranslatorFactory] = None
_factory_lock = threading.Lock()


def get_translator_factory() -> TranslatorFactory:
    """Get global factory instance."""
    global _factory
    if _factory is None:
        with _factory_lock:
            if _factory is None:
                _factory = TranslatorFactory()
    return _factory


def create_translator(config: AppConfig, **kwargs) -> Translator:
    """Create a Translator with the global factory."""
    return get_translator_factory().create_translator(config, **kwargs)
