"""Localized display strings"""

import logging
from functools import lru_cache

from storefront_search.core.config import settings

logger = logging.getLogger(__name__)

DEFAULT_RESOURCES: dict[str, dict[str, str]] = {
    "en": {
        "Search.DidYouMean": "Did you mean?",
        "Search.TopCategories": "Top categories",
        "Search.TopManufacturers": "Top brands",
        "Search.SearchTermMinimumLengthIsNCharacters": "Search term minimum length is {0} characters",
    },
    "de": {
        "Search.DidYouMean": "Meinten Sie?",
        "Search.TopCategories": "Top-Kategorien",
        "Search.TopManufacturers": "Top-Marken",
        "Search.SearchTermMinimumLengthIsNCharacters": "Der Suchbegriff muss mindestens {0} Zeichen lang sein",
    },
}


class Translator:
    """Resource string lookup with fallback to the default language"""

    def __init__(
        self,
        resources: dict[str, dict[str, str]] | None = None,
        default_language: str = "en",
    ):
        self.resources = resources if resources is not None else DEFAULT_RESOURCES
        self.default_language = default_language

    def translate(self, key: str, *args, language_code: str | None = None) -> str:
        """
        Resolve a resource key and format its {0}-style placeholders.

        Unknown languages fall back to the default language, unknown keys
        return the key itself.
        """
        value = None
        if language_code:
            value = self.resources.get(language_code, {}).get(key)
        if value is None:
            value = self.resources.get(self.default_language, {}).get(key)
        if value is None:
            logger.warning(f"Missing resource string: {key}")
            return key

        return value.format(*args) if args else value


@lru_cache
def get_translator() -> Translator:
    """Get cached translator instance"""
    return Translator(default_language=settings.DEFAULT_LANGUAGE)
