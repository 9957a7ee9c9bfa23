"""
Translator
==========

Resolves keyed source strings into a target language, calling the remote
service only when the cached set for that language is missing, older than
the requested translation ID, or lacks some of the requested keys.
"""
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Mapping, Optional
import logging
import threading
import weakref

from .interfaces import IInputSource, ITranslationCache, ITranslationService, TranslatorDelegate
from .models import CapitalizationStyle, TranslationSet
from .exceptions import ConfigurationError, MissingInputError, TranslationSystemError, wrap_error


logger = logging.getLogger(__name__)


class Translator:
    """
    Translates input strings and keeps the current translation set.

    One instance owns one current set. Concurrent requests are not
    coalesced: two requests for the same language both reach the service
    and the one that completes last becomes current. Callers that care
    must serialize their own requests.
    """

    def __init__(
        self,
        service: ITranslationService,
        cache: ITranslationCache,
        source_language: str,
        target_language: str,
        input_source: Optional[IInputSource] = None,
        delegate: Optional[TranslatorDelegate] = None
    ):
        """
        Args:
            service: Remote translation service
            cache: Store for translation sets, one per language
            source_language: ISO 639-1 code of the input strings
            target_language: ISO 639-1 code to translate to. After changing it,
                ``update_translations`` must be called.
            input_source: Supplier of input strings for ``update_translations``
            delegate: Optional notification handler, held weakly
        """
        self.service = service
        self.cache = cache
        self._source_language = source_language
        self.target_language = target_language
        self.input_source = input_source
        self.delegate = delegate

        self._current_translation_set: Optional[TranslationSet] = None
        self._lock = threading.RLock()
        self._executor: Optional[ThreadPoolExecutor] = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def source_language(self) -> str:
        return self._source_language

    @property
    def delegate(self) -> Optional[TranslatorDelegate]:
        return self._delegate_ref() if self._delegate_ref is not None else None

    @delegate.setter
    def delegate(self, delegate: Optional[TranslatorDelegate]) -> None:
        self._delegate_ref = weakref.ref(delegate) if delegate is not None else None

    @property
    def current_translation_set(self) -> Optional[TranslationSet]:
        with self._lock:
            return self._current_translation_set

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    def lookup(self, key: str, capitalization: CapitalizationStyle = CapitalizationStyle.FIRST) -> str:
        """
        Get the translation for ``key`` in the current set.

        If no translation is found, the key itself is returned. Either way
        the result is formatted with ``capitalization``.
        """
        current = self.current_translation_set
        text = key
        if current is not None:
            text = current.translations.get(key, key)
        return capitalization.apply(text)

    # ------------------------------------------------------------------
    # Translation
    # ------------------------------------------------------------------

    def resolve(
        self,
        input_strings: Mapping[str, str],
        source_language: str,
        target_language: str,
        min_id: int = 0
    ) -> TranslationSet:
        """
        Resolve input strings to a translation set in ``target_language``.

        If the languages match, the input strings are returned as the set.
        If a cached set has an ID of at least ``min_id`` and covers every
        input key, it is returned. Otherwise the service is called and its
        result is cached.

        Args:
            input_strings: Key to source text; must not be empty
            source_language: ISO 639-1 code of the input strings
            target_language: ISO 639-1 code to translate to
            min_id: Lowest acceptable translation ID for a cached set

        Returns:
            The new current translation set

        Raises:
            TranslationSystemError: Reported to the delegate first
        """
        try:
            return self._resolve(input_strings, source_language, target_language, min_id)
        except Exception as e:
            raise self._report_error(e)

    def _resolve(
        self,
        input_strings: Mapping[str, str],
        source_language: str,
        target_language: str,
        min_id: int
    ) -> TranslationSet:
        if not input_strings:
            raise MissingInputError()

        if target_language == source_language:
            self._log_event(
                f'Input language "{source_language}" matches output language '
                f'"{target_language}". Returning input strings.'
            )
            translation_set = TranslationSet(id=min_id, language=target_language, translations=input_strings)
            return self._adopt(translation_set, persist=True)

        cached = self.cache.get(target_language)

        if cached is None:
            self._log_event(f'No cached translation set found. Performing translation for "{target_language}".')
        elif min_id > cached.id:
            self._log_event(
                f'Provided translation ID ({min_id}) is higher than the cached translation set '
                f'({cached.id}). Performing translation for "{target_language}".'
            )
        else:
            missing = cached.get_missing_translations(input_strings)
            if missing is None:
                self._log_event(f'Found cached translation set for "{target_language}". Returning cached translations.')
                return self._adopt(cached, persist=False)

            self._log_event(
                f'Cached translation set is missing some keys ({sorted(missing)}). '
                f'Performing translation for "{target_language}".'
            )

        translations = self.service.translate(source_language, target_language, input_strings)
        translation_set = TranslationSet(id=min_id, language=target_language, translations=translations)
        return self._adopt(translation_set, persist=True)

    def _adopt(self, translation_set: TranslationSet, persist: bool) -> TranslationSet:
        """Persist (optionally), make ``translation_set`` current and deliver it as one step."""
        with self._lock:
            if persist:
                self.cache.put(translation_set)
            self._current_translation_set = translation_set
            self._notify_complete(translation_set)
        return translation_set

    def update_translations(self, translation_id: Optional[int] = None) -> TranslationSet:
        """
        Translate the configured input strings to ``target_language``.

        Args:
            translation_id: A cached set must meet or exceed this ID to be
                used. A client can increment it whenever the input strings
                change. None accepts any cached set for the language.

        Returns:
            The new current translation set
        """
        if self.input_source is None:
            raise self._report_error(ConfigurationError("Translator has no input source", component="translator"))

        try:
            input_strings = self.input_source.get_input_strings()
        except Exception as e:
            raise self._report_error(e)

        return self.resolve(
            input_strings,
            self.source_language,
            self.target_language,
            translation_id if translation_id is not None else 0
        )

    def update_translations_async(self, translation_id: Optional[int] = None) -> 'Future[TranslationSet]':
        """
        Run ``update_translations`` on a background thread.

        The request cannot be cancelled once started. Results also reach
        the delegate, if one is set.
        """
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="translator")
            return self._executor.submit(self.update_translations, translation_id)

    def clear_cache(self) -> int:
        """Remove every cached translation set."""
        return self.cache.clear()

    def close(self) -> None:
        """Wait for background requests and release the executor."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def _log_event(self, message: str) -> None:
        logger.info(message)
        delegate = self.delegate
        if delegate is not None:
            try:
                delegate.on_log_event(self, message)
            except Exception as e:
                logger.warning(f"Delegate failed to handle log event: {e}", exc_info=True)

    def _notify_complete(self, translation_set: TranslationSet) -> None:
        delegate = self.delegate
        if delegate is not None:
            try:
                delegate.on_translation_complete(self, translation_set)
            except Exception as e:
                logger.warning(f"Delegate failed to handle translation result: {e}", exc_info=True)

    def _report_error(self, error: Exception) -> TranslationSystemError:
        """Deliver ``error`` to the delegate and return it for raising."""
        if not isinstance(error, TranslationSystemError):
            error = wrap_error(error)

        logger.error(f"Translation failed: {error}")
        with self._lock:
            delegate = self.delegate
            if delegate is not None:
                try:
                    delegate.on_translation_error(self, error)
                except Exception as e:
                    logger.warning(f"Delegate failed to handle translation error: {e}", exc_info=True)
        return error
