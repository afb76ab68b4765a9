"""
Internationalization package: translation table and locale context.
"""
from .translations import get_translation, localized_value, LANGUAGES, SUPPORTED_LOCALES
from .context import LocaleContext, DocumentMeta, UnsupportedLocaleError

__all__ = [
    "get_translation",
    "localized_value",
    "LANGUAGES",
    "SUPPORTED_LOCALES",
    "LocaleContext",
    "DocumentMeta",
    "UnsupportedLocaleError",
]
