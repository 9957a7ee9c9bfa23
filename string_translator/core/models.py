"""
Core Data Models
================

Translation sets, capitalization styles and language helpers shared by the
translator, the cache backends and the CLI.
"""
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional
import locale
import re

from .exceptions import CacheReadError


# ============================================================================
# CONSTANTS
# ============================================================================

DEFAULT_LANGUAGE = "en"

_LANGUAGE_CODE_PATTERN = re.compile(r'^[a-zA-Z]{2,3}$')


def default_target_language() -> str:
    """
    Get the two-letter language of the current process locale.

    Falls back to ``DEFAULT_LANGUAGE`` when the locale is unset or not
    language-shaped (e.g. ``C`` or ``POSIX``).
    """
    try:
        name = locale.getlocale()[0]
    except ValueError:
        name = None
    if not name:
        return DEFAULT_LANGUAGE

    code = name[:2].lower()
    return code if _LANGUAGE_CODE_PATTERN.match(code) else DEFAULT_LANGUAGE


# ============================================================================
# ENUMS
# ============================================================================

class CapitalizationStyle(Enum):
    """
    Formatting applied to looked-up strings.

    ``ALL_FIRST`` upper-cases the first character of each space-separated
    word and leaves the rest of the word and the spacing as they are. It
    does not lower-case the remainder the way title-casing does.
    """
    NONE = "none"
    FIRST = "first"
    ALL_FIRST = "all-first"
    ALL = "all"

    def apply(self, text: str) -> str:
        """Apply this style to ``text``."""
        if self is CapitalizationStyle.NONE:
            return text
        if self is CapitalizationStyle.FIRST:
            return text[:1].upper() + text[1:]
        if self is CapitalizationStyle.ALL_FIRST:
            return ' '.join(word[:1].upper() + word[1:] for word in text.split(' '))
        return text.upper()


# ============================================================================
# TRANSLATION SET
# ============================================================================

@dataclass(frozen=True)
class TranslationSet:
    """
    Contains a set of translations in a specific language.

    Instances are immutable: ``translations`` is exposed as a read-only
    mapping, and a translator replaces its current set rather than editing it.
    """
    id: int
    language: str
    translations: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            raise TypeError(f"id must be int, got {type(self.id).__name__}")
        if not isinstance(self.language, str) or not self.language:
            raise ValueError("language must be a non-empty string")
        object.__setattr__(self, 'translations', MappingProxyType(dict(self.translations)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TranslationSet):
            return NotImplemented
        return (
            self.id == other.id
            and self.language == other.language
            and dict(self.translations) == dict(other.translations)
        )

    def __hash__(self) -> int:
        return hash((self.id, self.language, frozenset(self.translations.items())))

    def get_missing_translations(self, input_strings: Mapping[str, str]) -> Optional[Dict[str, str]]:
        """
        Return the input strings whose keys have no translation in this set.

        Args:
            input_strings: Key/source-text pairs to check for

        Returns:
            Dictionary with all missing entries, or None if nothing is missing
        """
        missing = {k: v for k, v in input_strings.items() if k not in self.translations}
        return missing or None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted record layout."""
        return {
            'id': self.id,
            'language': self.language,
            'translations': dict(self.translations),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'TranslationSet':
        """
        Build a set from a persisted record.

        Raises:
            CacheReadError: If a field is missing or has the wrong type
        """
        try:
            set_id = data['id']
            language = data['language']
            translations = data['translations']
        except (KeyError, TypeError) as e:
            raise CacheReadError(f"Malformed translation record: missing {e}")

        if not isinstance(translations, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in translations.items()
        ):
            raise CacheReadError("Malformed translation record: translations must map str to str")

        try:
            return cls(id=set_id, language=language, translations=translations)
        except (TypeError, ValueError) as e:
            raise CacheReadError(f"Malformed translation record: {e}")

    def __str__(self) -> str:
        description = f"Translation ID: {self.id}\n"
        description += f"Language: {self.language}\n\n"
        for key in sorted(self.translations):
            description += f"{key}: {self.translations[key]}\n"
        return description
