"""
Google Translate Engine (RapidAPI)
==================================

Translates a keyed set of strings in a single request. Texts are sent as
repeated ``q`` parameters ordered by source text, and the response is
mapped back to keys by position.
"""
from typing import Dict, List, Mapping, Optional, Tuple
import logging
import requests
from requests.adapters import HTTPAdapter

from ..core.interfaces import ITranslationService
from ..core.exceptions import (
    ConfigurationError, FailedDecodingError, IncompleteTranslationError,
    InvalidParametersError, InvalidResponseError, UnknownTranslationError
)


logger = logging.getLogger(__name__)


# ============================================================================
# CONFIGURATION
# ============================================================================

class GoogleTranslateConfig:
    API_HOST = "google-translate1.p.rapidapi.com"
    API_URL = "https://google-translate1.p.rapidapi.com/language/translate/v2"
    DEFAULT_TIMEOUT = 10.0


# ============================================================================
# ALIGNMENT
# ============================================================================

def sort_by_source_text(input_strings: Mapping[str, str]) -> List[Tuple[str, str]]:
    """
    Order key/text pairs by source text.

    The API correlates request position with response position, so the
    same ordering must be used to build the request and to read the reply.
    """
    return sorted(input_strings.items(), key=lambda item: item[1])


def build_request_payload(
    source_language: str,
    target_language: str,
    texts: List[str]
) -> List[Tuple[str, str]]:
    """
    Build the form fields for a translate request.

    Raises:
        InvalidParametersError: If a language code is blank or a text is not a string
    """
    if not isinstance(source_language, str) or not source_language.strip():
        raise InvalidParametersError(source_language=source_language)
    if not isinstance(target_language, str) or not target_language.strip():
        raise InvalidParametersError(target_language=target_language)

    payload = [("source", source_language), ("target", target_language)]
    for i, text in enumerate(texts):
        if not isinstance(text, str):
            raise InvalidParametersError(f"texts[{i}] must be str, got {type(text).__name__}")
        payload.append(("q", text))
    return payload


def parse_translations(body: object) -> List[str]:
    """
    Extract translated texts from a decoded response body.

    Expected shape: ``{"data": {"translations": [{"translatedText": str}, ...]}}``

    Raises:
        FailedDecodingError: If the body has a different shape
    """
    try:
        items = body["data"]["translations"]
        texts = [item["translatedText"] for item in items]
    except (KeyError, TypeError) as e:
        raise FailedDecodingError(f"Failed to decode API response: {e!r}")

    if not all(isinstance(text, str) for text in texts):
        raise FailedDecodingError("Failed to decode API response: translatedText must be str")
    return texts


# ============================================================================
# GOOGLE TRANSLATE ENGINE
# ============================================================================

class GoogleTranslateEngine(ITranslationService):
    """
    Google Translate API client through RapidAPI.

    Each call is attempted exactly once; failures are raised as typed
    ``EngineError`` subclasses.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = GoogleTranslateConfig.API_URL,
        api_host: str = GoogleTranslateConfig.API_HOST,
        timeout: float = GoogleTranslateConfig.DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None
    ):
        if not api_key or not api_key.strip():
            raise ConfigurationError("API key required", component="google_engine")
        if timeout <= 0:
            raise ConfigurationError(f"Invalid timeout: {timeout}", component="google_engine")

        self.api_key = api_key
        self.api_url = api_url
        self.api_host = api_host
        self.timeout = timeout

        self._session = session or self._create_session()
        self._owns_session = session is None

        # Usage tracking
        self._total_requests = 0
        self._total_texts = 0
        self._total_errors = 0

        logger.info(f"Google Translate engine initialized: {self.api_host}")

    def _create_session(self) -> requests.Session:
        """Session with a single keep-alive connection and no transport retries."""
        session = requests.Session()
        adapter = HTTPAdapter(max_retries=0)
        session.mount('https://', adapter)
        session.mount('http://', adapter)
        return session

    @property
    def name(self) -> str:
        return "google"

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "x-rapidapi-host": self.api_host,
            "x-rapidapi-key": self.api_key,
            "content-type": "application/x-www-form-urlencoded",
        }

    def translate(
        self,
        source_language: str,
        target_language: str,
        input_strings: Mapping[str, str]
    ) -> Dict[str, str]:
        """
        Translate input strings into another language.

        All texts go out in one request; splitting them into separate
        requests was found to cut results off.

        Args:
            source_language: ISO 639-1 code of the input language
            target_language: ISO 639-1 code of the output language
            input_strings: Key to source text

        Returns:
            Key to translated text
        """
        sorted_items = sort_by_source_text(input_strings)
        sorted_keys = [key for key, _ in sorted_items]
        sorted_texts = [text for _, text in sorted_items]

        payload = build_request_payload(source_language, target_language, sorted_texts)

        translated_texts = self._perform_request(payload)

        if len(translated_texts) != len(sorted_keys):
            self._total_errors += 1
            raise IncompleteTranslationError(expected=len(sorted_keys), received=len(translated_texts))

        self._total_requests += 1
        self._total_texts += len(sorted_texts)
        logger.debug(f"Translated {len(sorted_texts)} texts {source_language} -> {target_language}")

        return dict(zip(sorted_keys, translated_texts))

    def _perform_request(self, payload: List[Tuple[str, str]]) -> List[str]:
        """Send the request and decode the translated texts."""
        try:
            response = self._session.post(
                self.api_url,
                data=payload,
                headers=self.headers,
                timeout=self.timeout
            )
        except (requests.exceptions.InvalidURL, requests.exceptions.MissingSchema,
                requests.exceptions.InvalidSchema) as e:
            self._total_errors += 1
            raise InvalidParametersError(f"Invalid request URL: {e}")
        except requests.Timeout:
            self._total_errors += 1
            raise UnknownTranslationError(f"Timeout after {self.timeout}s")
        except requests.RequestException as e:
            self._total_errors += 1
            raise UnknownTranslationError(f"Request failed: {e}")

        if response.status_code != 200:
            self._handle_error_response(response)

        try:
            body = response.json()
        except ValueError as e:
            self._total_errors += 1
            raise FailedDecodingError(f"Failed to decode API response: {e}")

        try:
            return parse_translations(body)
        except FailedDecodingError:
            self._total_errors += 1
            raise

    def _handle_error_response(self, response: requests.Response) -> None:
        """Handle HTTP errors."""
        status = response.status_code
        self._total_errors += 1

        try:
            error_data = response.json()
            error_msg = error_data.get('message', response.text)
        except Exception:
            error_msg = response.text or f"HTTP {status}"

        logger.warning(f"Translate request failed (HTTP {status}): {error_msg}")
        raise InvalidResponseError(status_code=status)

    def get_usage_stats(self) -> Dict[str, int]:
        """Get usage statistics."""
        return {
            'total_requests': self._total_requests,
            'total_texts': self._total_texts,
            'total_errors': self._total_errors,
        }

    def close(self) -> None:
        """Close session."""
        if self._owns_session and hasattr(self, '_session'):
            try:
                self._session.close()
                logger.debug(f"Closed session for {self.name}")
            except Exception as e:
                logger.warning(f"Error closing session: {e}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
