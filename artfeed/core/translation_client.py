"""MyMemory translation client. Best effort: callers keep the source text on TranslationError."""
import logging

import httpx

from artfeed.config import SOURCE_LANG, TARGET_LANG, TRANSLATE_MAX_CHARS, TRANSLATE_URL
from artfeed.core.errors import TranslationError

logger = logging.getLogger(__name__)


class TranslationClient:
    def __init__(
        self,
        http: httpx.AsyncClient,
        url: str = TRANSLATE_URL,
        source_lang: str = SOURCE_LANG,
        target_lang: str = TARGET_LANG,
        max_chars: int = TRANSLATE_MAX_CHARS,
    ) -> None:
        self._http = http
        self._url = url
        self._langpair = f"{source_lang}|{target_lang}"
        self._max_chars = max_chars

    async def translate(self, text: str) -> str:
        """Return text translated into the target language.

        Blank text comes back unchanged. Raises TranslationError on transport
        failure, a non-success status, an over-long input or a missing result.
        """
        if not text or not text.strip():
            return text
        if len(text) > self._max_chars:
            raise TranslationError(f"Text longer than {self._max_chars} chars")
        try:
            response = await self._http.get(
                self._url, params={"q": text, "langpair": self._langpair}
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise TranslationError(f"Translation request failed: {e}") from e
        except ValueError as e:
            raise TranslationError(f"Translation response is not JSON: {e}") from e

        if not isinstance(payload, dict):
            raise TranslationError("Translation response is not an object")
        status = payload.get("responseStatus")
        if status is not None and str(status) != "200":
            raise TranslationError(f"Translation status {status}")
        data = payload.get("responseData")
        if not isinstance(data, dict):
            raise TranslationError(f"Translation responseData is not an object: {data!r}")
        translated = data.get("translatedText")
        if not translated or not isinstance(translated, str):
            raise TranslationError("Translation missing translatedText")
        return translated
