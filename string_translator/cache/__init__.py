"""Translation set cache backends."""
from .cache_manager import SQLiteTranslationCache, JsonFileTranslationCache

__all__ = ["SQLiteTranslationCache", "JsonFileTranslationCache"]
