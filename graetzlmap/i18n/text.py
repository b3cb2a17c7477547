"""
Localized text fields.

Descriptions and titles arrive either as a plain string or as a ``{"de": ..., "en": ...}``
map. They are normalized once into ``PlainText`` or ``Localized`` and resolved from there.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

DEFAULT_LANGUAGE = "de"
SUPPORTED_LANGUAGES = ("de", "en")


@dataclass(frozen=True)
class PlainText:
    value: str

    def resolve(self, lang: str = DEFAULT_LANGUAGE, fallback: str = DEFAULT_LANGUAGE) -> str:
        return self.value

    def to_json(self) -> str:
        return self.value


@dataclass(frozen=True)
class Localized:
    values: Dict[str, str] = field(default_factory=dict)

    def resolve(self, lang: str = DEFAULT_LANGUAGE, fallback: str = DEFAULT_LANGUAGE) -> str:
        for candidate in (lang, fallback):
            text = self.values.get(candidate)
            if text:
                return text
        for text in self.values.values():
            if text:
                return text
        return ""

    def to_json(self) -> Dict[str, str]:
        return dict(self.values)


Text = Union[PlainText, Localized]


def normalize_text(raw: Any) -> Text:
    """Turn a raw JSON value into a ``Text``. ``None`` becomes empty plain text."""
    if isinstance(raw, (PlainText, Localized)):
        return raw
    if raw is None:
        return PlainText("")
    if isinstance(raw, str):
        return PlainText(raw)
    if isinstance(raw, dict):
        return Localized({str(k): str(v) for k, v in raw.items() if isinstance(v, str)})
    return PlainText(str(raw))


def resolve_text(raw: Any, lang: str = DEFAULT_LANGUAGE, fallback: str = DEFAULT_LANGUAGE) -> str:
    return normalize_text(raw).resolve(lang, fallback)


def all_text_values(raw: Any) -> List[str]:
    """Every language variant of a text, used for language independent search."""
    text = normalize_text(raw)
    if isinstance(text, Localized):
        return [v for v in text.values.values() if v]
    return [text.value] if text.value else []


def negotiate_language(explicit: Optional[str] = None, accept_language: Optional[str] = None,
                       default: str = DEFAULT_LANGUAGE, supported=SUPPORTED_LANGUAGES) -> str:
    """Pick a UI language from a query parameter, then the Accept-Language header."""
    if explicit:
        lang = explicit.split("-")[0].strip().lower()
        if lang in supported:
            return lang
    if accept_language:
        weighted = []
        for index, part in enumerate(accept_language.split(",")):
            piece = part.strip()
            if not piece:
                continue
            tag, _, params = piece.partition(";")
            quality = 1.0
            if params.strip().startswith("q="):
                try:
                    quality = float(params.strip()[2:])
                except ValueError:
                    quality = 0.0
            weighted.append((-quality, index, tag.split("-")[0].strip().lower()))
        for _, _, lang in sorted(weighted):
            if lang in supported:
                return lang
    return default
