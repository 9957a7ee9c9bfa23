"""Translation engines."""
from .google_engine import GoogleTranslateEngine

__all__ = ["GoogleTranslateEngine"]
