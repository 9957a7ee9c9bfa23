"""
Core translation system: models, errors, interfaces and the Translator.
"""
from .exceptions import (
    TranslationSystemError,
    MissingInputError,
    SourceError,
    InvalidSourceFileError,
    EmptySourceFileError,
    EngineError,
    InvalidParametersError,
    InvalidResponseError,
    IncompleteTranslationError,
    FailedDecodingError,
    UnknownTranslationError,
    CacheError,
    CacheReadError,
    CacheWriteError,
    ConfigurationError,
)
from .models import TranslationSet, CapitalizationStyle, default_target_language
from .interfaces import ITranslationService, ITranslationCache, IInputSource, TranslatorDelegate
from .translator import Translator
from .factory import TranslatorFactory, get_translator_factory, create_translator

__all__ = [
    "TranslationSystemError", "MissingInputError",
    "SourceError", "InvalidSourceFileError", "EmptySourceFileError",
    "EngineError", "InvalidParametersError", "InvalidResponseError",
    "IncompleteTranslationError", "FailedDecodingError", "UnknownTranslationError",
    "CacheError", "CacheReadError", "CacheWriteError", "ConfigurationError",
    "TranslationSet", "CapitalizationStyle", "default_target_language",
    "ITranslationService", "ITranslationCache", "IInputSource", "TranslatorDelegate",
    "Translator",
    "TranslatorFactory", "get_translator_factory", "create_translator",
]
