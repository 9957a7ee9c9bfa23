"""String Translator - Cached translation of keyed UI strings."""
__version__ = "1.0.0"
__author__ = "String Translator Team"

from string_translator.core.models import TranslationSet, CapitalizationStyle
from string_translator.core.translator import Translator
from string_translator.core.interfaces import TranslatorDelegate
from string_translator.core.factory import create_translator

__all__ = [
    "Translator",
    "TranslatorDelegate",
    "TranslationSet",
    "CapitalizationStyle",
    "create_translator",
]
