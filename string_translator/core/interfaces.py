"""
Core interfaces for the string translator.

Defines the contracts between the translator and its collaborators:
translation services, cache stores, input sources and delegates.
"""
from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional, TYPE_CHECKING

from .models import TranslationSet

if TYPE_CHECKING:
    from .exceptions import TranslationSystemError
    from .translator import Translator


# ============================================================================
# TRANSLATION SERVICE INTERFACE
# ============================================================================

class ITranslationService(ABC):
    """Interface for remote translation services."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name (e.g., 'google')."""
        pass

    @abstractmethod
    def translate(
        self,
        source_language: str,
        target_language: str,
        input_strings: Mapping[str, str]
    ) -> Dict[str, str]:
        """
        Translate keyed input strings into another language.

        Args:
            source_language: ISO 639-1 code of the input language
            target_language: ISO 639-1 code of the output language
            input_strings: Key to source text

        Returns:
            Key to translated text, with exactly the keys of ``input_strings``

        Raises:
            EngineError: If translation fails
        """
        pass

    def close(self) -> None:
        """Release network resources (optional)."""
        pass


# ============================================================================
# CACHE INTERFACE
# ============================================================================

class ITranslationCache(ABC):
    """
    Interface for translation set stores.

    One record per language code, last write wins, no expiry.
    """

    @abstractmethod
    def get(self, language: str) -> Optional[TranslationSet]:
        """
        Get the stored set for a language.

        Returns:
            The most recently stored set, or None
        """
        pass

    @abstractmethod
    def put(self, translation_set: TranslationSet) -> None:
        """
        Store a set, replacing any previous record for its language.

        Raises:
            CacheWriteError: If the set cannot be persisted
        """
        pass

    @abstractmethod
    def clear(self) -> int:
        """
        Remove all records.

        Returns:
            Number of records removed
        """
        pass

    def close(self) -> None:
        """Release storage resources (optional)."""
        pass


# ============================================================================
# INPUT SOURCE INTERFACE
# ============================================================================

class IInputSource(ABC):
    """Interface for suppliers of source-language strings."""

    @abstractmethod
    def get_input_strings(self) -> Dict[str, str]:
        """
        Get key to source text pairs.

        Raises:
            MissingInputError: If a manual mapping is empty
            InvalidSourceFileError: If a strings file cannot be read
            EmptySourceFileError: If a strings file has no entries
        """
        pass


# ============================================================================
# DELEGATE INTERFACE
# ============================================================================

class TranslatorDelegate:
    """
    Receives translator notifications.

    All methods are optional. Exactly one of ``on_translation_complete`` or
    ``on_translation_error`` is called per request.
    """

    def on_translation_complete(self, translator: 'Translator', translation_set: TranslationSet) -> None:
        """Called when translation completes, regardless of if an API call was made."""
        pass

    def on_translation_error(self, translator: 'Translator', error: 'TranslationSystemError') -> None:
        """Called when translation fails."""
        pass

    def on_log_event(self, translator: 'Translator', message: str) -> None:
        """Called when a loggable event occurs."""
        pass
