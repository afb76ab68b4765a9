"""
Locale context: the active locale, its text direction and translation lookup.

The context is built per request from a preferences mapping (the cookie jar
in HTTP) so it never lives as a process-wide global.
"""
import logging
from dataclasses import dataclass
from typing import MutableMapping, Optional

from config import DEFAULT_LOCALE, LOCALE_COOKIE_NAME
from .translations import (
    SUPPORTED_LOCALES, get_language, get_translation, is_rtl, normalize_locale
)

logger = logging.getLogger(__name__)


class UnsupportedLocaleError(ValueError):
    """Raised when switching to a locale the translation table does not carry."""
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Unsupported locale: {code}")


@dataclass
class DocumentMeta:
    """Document-level language metadata (`<html lang dir>`)."""
    lang: str
    dir: str


class LocaleContext:
    """Current locale plus translate/direction helpers."""

    def __init__(
        self,
        preferences: MutableMapping[str, str],
        default_locale: str = DEFAULT_LOCALE,
        preference_key: str = LOCALE_COOKIE_NAME,
    ):
        self._preferences = preferences
        self._key = preference_key
        self.default_locale = normalize_locale(default_locale) or SUPPORTED_LOCALES[0]
        # Read before anything renders so the first response has the right direction
        stored = normalize_locale(preferences.get(preference_key))
        self.locale = stored or self.default_locale
        self.document = self._document_for(self.locale)

    @staticmethod
    def _document_for(code: str) -> DocumentMeta:
        return DocumentMeta(lang=code, dir="rtl" if is_rtl(code) else "ltr")

    @property
    def is_rtl(self) -> bool:
        return is_rtl(self.locale)

    @property
    def current_language(self) -> dict:
        return get_language(self.locale)

    def translate(self, key: str) -> str:
        return get_translation(key, self.locale)

    t = translate

    def set_locale(self, code: Optional[str]) -> DocumentMeta:
        """Switch locale, persist the choice and update document metadata."""
        normalized = normalize_locale(code)
        if normalized is None:
            raise UnsupportedLocaleError(str(code))
        self.locale = normalized
        self._preferences[self._key] = normalized
        self.document = self._document_for(normalized)
        logger.debug(f"Locale switched to {normalized}")
        return self.document
