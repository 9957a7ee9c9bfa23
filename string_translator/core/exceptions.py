"""
Custom exceptions for the string translator.
Provides clear error hierarchy and meaningful error messages.

Every failure of a translation request is reported as one of these types,
so callers only ever need to catch ``TranslationSystemError``.
"""

from contextlib import contextmanager
from typing import Optional, Dict, Any, Type
import logging

__all__ = [
    # Base
    'TranslationSystemError',
    # Input
    'MissingInputError',
    # Source files
    'SourceError', 'InvalidSourceFileError', 'EmptySourceFileError',
    # Engine
    'EngineError', 'InvalidParametersError', 'InvalidResponseError',
    'IncompleteTranslationError', 'FailedDecodingError', 'UnknownTranslationError',
    # Cache
    'CacheError', 'CacheReadError', 'CacheWriteError',
    # Configuration
    'ConfigurationError',
    # Utilities
    'error_context', 'wrap_error',
]


# ============================================================================
# BASE EXCEPTION
# ============================================================================

class TranslationSystemError(Exception):
    """
    Base exception for all string translator errors.

    All custom exceptions inherit from this class for unified error handling.
    """

    default_message = "Translation failed."

    def __init__(self, message: Optional[str] = None, **context: Any) -> None:
        """
        Initialize exception with message and optional context.

        Args:
            message: Error message (class default if omitted)
            **context: Additional context information
        """
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """String representation with context."""
        context = {k: v for k, v in self.context.items() if v is not None}
        if not context:
            return self.message

        context_str = ', '.join(f"{k}={v}" for k, v in context.items())
        return f"{self.message} ({context_str})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'context': self.context
        }


# ============================================================================
# INPUT EXCEPTIONS
# ============================================================================

class MissingInputError(TranslationSystemError):
    """Raised when a translation is requested for an empty set of input strings."""
    default_message = "Missing input strings."


# ============================================================================
# SOURCE FILE EXCEPTIONS
# ============================================================================

class SourceError(TranslationSystemError):
    """Base exception for input string loader errors."""

    def __init__(self, message: Optional[str] = None, file_name: Optional[str] = None, **context: Any) -> None:
        super().__init__(message, file_name=file_name, **context)
        self.file_name = file_name


class InvalidSourceFileError(SourceError):
    """Raised when a strings file cannot be found, read or parsed."""
    default_message = "Could not read strings file."


class EmptySourceFileError(SourceError):
    """Raised when a strings file parses but contains no entries."""
    default_message = "Strings file is empty."


# ============================================================================
# ENGINE EXCEPTIONS
# ============================================================================

class EngineError(TranslationSystemError):
    """Base exception for translation service errors."""
    pass


class InvalidParametersError(EngineError):
    """Raised when the API request cannot be built from the given parameters."""
    default_message = "Invalid parameters in API request."


class InvalidResponseError(EngineError):
    """Raised when the API answers with a non-success status."""

    default_message = "Invalid response."

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None, **context: Any) -> None:
        super().__init__(message, status_code=status_code, **context)
        self.status_code = status_code


class IncompleteTranslationError(EngineError):
    """Raised when the API returns a different number of texts than requested."""

    default_message = "Translation was started but could not complete."

    def __init__(
        self,
        message: Optional[str] = None,
        expected: Optional[int] = None,
        received: Optional[int] = None,
        **context: Any
    ) -> None:
        super().__init__(message, expected=expected, received=received, **context)
        self.expected = expected
        self.received = received


class FailedDecodingError(EngineError):
    """Raised when the API response body cannot be decoded."""
    default_message = "Failed to decode API response."


class UnknownTranslationError(EngineError):
    """Raised for any failure that does not fit another category."""
    default_message = "An unknown error occurred."


# ============================================================================
# CACHE EXCEPTIONS
# ============================================================================

class CacheError(TranslationSystemError):
    """Base exception for cache errors."""
    pass


class CacheReadError(CacheError):
    """Raised when a cached record cannot be decoded."""
    pass


class CacheWriteError(CacheError):
    """Raised when a translation set cannot be persisted."""
    pass


# ============================================================================
# CONFIGURATION EXCEPTIONS
# ============================================================================

class ConfigurationError(TranslationSystemError):
    """Raised when component configuration is invalid."""

    def __init__(self, message: Optional[str] = None, component: Optional[str] = None, **context: Any) -> None:
        super().__init__(message, component=component, **context)
        self.component = component


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================

def wrap_error(
    error: Exception,
    error_class: Type[TranslationSystemError] = UnknownTranslationError,
    message: Optional[str] = None
) -> TranslationSystemError:
    """
    Wrap an exception in a custom exception type.

    Args:
        error: Original exception
        error_class: Exception class to wrap with
        message: Optional custom message

    Returns:
        Wrapped exception with ``__cause__`` set to the original

    Raises:
        TypeError: If error_class is not a TranslationSystemError subclass
    """
    if not issubclass(error_class, TranslationSystemError):
        raise TypeError(
            f"error_class must be subclass of TranslationSystemError, "
            f"got {error_class.__name__}"
        )

    error_msg = f"{message}: {error}" if message else str(error)
    wrapped = error_class(error_msg or None)
    wrapped.__cause__ = error
    return wrapped


@contextmanager
def error_context(
    operation: str,
    error_class: Type[TranslationSystemError] = UnknownTranslationError,
    logger: Optional[logging.Logger] = None
):
    """
    Context manager for consistent error handling and wrapping.

    Errors that already belong to the hierarchy pass through untouched,
    anything else is wrapped in ``error_class``.

    Example:
        >>> with error_context("reading strings file", InvalidSourceFileError):
        ...     load()
    """
    try:
        yield
    except TranslationSystemError:
        raise
    except KeyboardInterrupt:
        raise
    except Exception as e:
        if logger:
            logger.error(f"Error during {operation}: {e}", exc_info=True)

        raise wrap_error(e, error_class, f"Error during {operation}")
