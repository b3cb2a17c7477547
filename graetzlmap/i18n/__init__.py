"""Two-language (de/en) support: localized text fields and the UI string table."""

from .text import (
    DEFAULT_LANGUAGE,
    SUPPORTED_LANGUAGES,
    PlainText,
    Localized,
    Text,
    normalize_text,
    resolve_text,
    all_text_values,
    negotiate_language,
)
from .translations import TRANSLATIONS, t, string_table

__all__ = [
    "DEFAULT_LANGUAGE",
    "SUPPORTED_LANGUAGES",
    "PlainText",
    "Localized",
    "Text",
    "normalize_text",
    "resolve_text",
    "all_text_values",
    "negotiate_language",
    "TRANSLATIONS",
    "t",
    "string_table",
]
