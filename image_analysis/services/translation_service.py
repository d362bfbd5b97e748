"""DeepL Translation Service

Translates English label names to Portuguese. Names are sent as one
joined phrase and the translated phrase is split back into per-label
translations.
"""

import asyncio
import logging
import os
from typing import Any, Optional

import deepl

from ..errors import ConfigurationError, TranslationError

logger = logging.getLogger(__name__)

SOURCE_LANGUAGE = "en"
TARGET_LANGUAGE = "pt"

CONNECTIVE = " and "
# No trailing space: items after the first keep a leading space until stripped.
TRANSLATED_CONNECTIVE = " e"

STRATEGY_JOINED = "joined"
STRATEGY_PER_LABEL = "per_label"
STRATEGIES = (STRATEGY_JOINED, STRATEGY_PER_LABEL)

# DeepL rejects the bare "PT" target.
DEEPL_LANGUAGE_CODES = {
    "en": "EN",
    "pt": "PT-BR",
}


def join_names(names: list[str]) -> str:
    """Join label names into a single phrase for translation."""
    return CONNECTIVE.join(names)


def split_translation(text: str) -> list[str]:
    """Split a translated phrase back into per-label names.

    The split is positional and unchecked: a translation that does not
    reuse the connective yields fewer items than were sent, and a word
    starting with "e" after a space splits too early.

    Args:
        text: Translated phrase.

    Returns:
        Stripped, non-empty fragments in order.
    """
    parts = (part.strip() for part in text.split(TRANSLATED_CONNECTIVE))
    return [part for part in parts if part]


class TranslationService:
    """Service for translating labels using DeepL API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        strategy: str = STRATEGY_JOINED,
        timeout: Optional[float] = 10.0,
        translator: Optional[deepl.Translator] = None,
    ):
        """Initialize the translation service.

        Args:
            api_key: DeepL API key. If not provided, reads from DEEPL_API_KEY env.
            strategy: "joined" sends one phrase and splits the result;
                "per_label" sends the names as a list and keeps pairing.
            timeout: Minimum per-request timeout in seconds for DeepL calls.
                None keeps the SDK default.
            translator: Optional pre-built DeepL translator.
        """
        if strategy not in STRATEGIES:
            raise ConfigurationError(
                f"Unknown translation strategy '{strategy}'. "
                f"Expected one of: {', '.join(STRATEGIES)}"
            )
        self.api_key = api_key or os.environ.get("DEEPL_API_KEY")
        self.strategy = strategy
        self.timeout = timeout
        self.source_lang = DEEPL_LANGUAGE_CODES[SOURCE_LANGUAGE]
        self.target_lang = DEEPL_LANGUAGE_CODES[TARGET_LANGUAGE]
        self._translator = translator

    @property
    def translator(self) -> deepl.Translator:
        """Get or create the DeepL translator.

        Returns:
            DeepL Translator instance.
        """
        if self._translator is None:
            if not self.api_key:
                raise ConfigurationError(
                    "DeepL API key not provided. "
                    "Set DEEPL_API_KEY environment variable or pass api_key parameter."
                )
            if self.timeout is not None:
                # Module-level setting; DeepL has no per-client timeout.
                deepl.http_client.min_connection_timeout = self.timeout
            self._translator = deepl.Translator(self.api_key)
        return self._translator

    def _translate_text(self, text: Any) -> Any:
        return self.translator.translate_text(
            text,
            source_lang=self.source_lang,
            target_lang=self.target_lang,
        )

    @staticmethod
    def _result_text(result: Any) -> str:
        text = getattr(result, "text", None)
        if not text:
            raise TranslationError("Translation result has no text")
        return text

    async def translate(self, names: list[str]) -> list[str]:
        """Translate label names to Portuguese.

        Args:
            names: English label names, in label order.

        Returns:
            Translated names. With the joined strategy the length is not
            guaranteed to match ``names``.

        Raises:
            TranslationError: If the API call fails or returns no text.
        """
        if not names:
            logger.debug("No labels to translate")
            return []

        if self.strategy == STRATEGY_PER_LABEL:
            return await self._translate_each(names)

        text = join_names(names)
        try:
            result = await asyncio.to_thread(self._translate_text, text)
        except ConfigurationError:
            raise
        except Exception as e:
            raise TranslationError(f"Translation failed: {e}") from e

        translated = self._result_text(result)
        logger.debug(f"Translated: {text} -> {translated}")

        parts = split_translation(translated)
        if len(parts) != len(names):
            logger.warning(
                f"Translation split into {len(parts)} items for {len(names)} labels"
            )
        return parts

    async def _translate_each(self, names: list[str]) -> list[str]:
        try:
            results = await asyncio.to_thread(self._translate_text, list(names))
        except ConfigurationError:
            raise
        except Exception as e:
            raise TranslationError(f"Batch translation failed: {e}") from e

        translated = [self._result_text(r) for r in results]
        for original, text in zip(names, translated):
            logger.debug(f"Translated: {original} -> {text}")
        return translated
