"""UI string table for the map frontend."""

from typing import Any, Dict

from .text import DEFAULT_LANGUAGE, resolve_text

TRANSLATIONS: Dict[str, Dict[str, Dict[str, str]]] = {
    "header": {
        "subtitle": {"de": "Entdecke Wiens Grätzln", "en": "Discover Vienna's Neighborhoods"},
    },
    "nav": {
        "list": {"de": "Liste", "en": "List"},
        "walkthrough": {"de": "Grätzlwalk", "en": "Neighborhood Walk"},
        "selectGraetzl": {"de": "Grätzl auswählen", "en": "Select Neighborhood"},
        "searchPOI": {"de": "POI suchen", "en": "Search POI"},
        "filterCategories": {"de": "Kategorien filtern", "en": "Filter Categories"},
    },
    "placeholder": {
        "noList": {"de": "Keine Liste ausgewählt", "en": "No list selected"},
        "noWalk": {"de": "Kein Walk ausgewählt", "en": "No walk selected"},
        "allGraetzl": {"de": "Alle Grätzl werden angezeigt", "en": "All neighborhoods shown"},
        "searchPOI": {"de": "POI nach Name suchen...", "en": "Search POI by name..."},
        "searchCategories": {"de": "Kategorien suchen...", "en": "Search categories..."},
        "noResults": {"de": "Keine POIs gefunden", "en": "No POIs found"},
    },
    "button": {
        "clearSelection": {"de": "Auswahl löschen", "en": "Clear selection"},
        "selectAll": {"de": "Alle auswählen", "en": "Select all"},
        "deselectAll": {"de": "Alle abwählen", "en": "Deselect all"},
        "showAll": {"de": "Alle anzeigen", "en": "Show all"},
        "close": {"de": "Schließen", "en": "Close"},
    },
    "category": {
        "allCategories": {"de": "Alle Kategorien", "en": "All Categories"},
    },
    "sidebar": {
        "list": {"de": "Liste", "en": "List"},
        "walkthrough": {"de": "Walk", "en": "Walk"},
    },
    "language": {
        "switchTo": {"de": "English", "en": "Deutsch"},
    },
}


def t(key_path: str, lang: str = DEFAULT_LANGUAGE) -> str:
    """Translate a dotted key such as ``"nav.list"``; unknown keys come back unchanged."""
    value: Any = TRANSLATIONS
    for key in key_path.split("."):
        if not isinstance(value, dict) or key not in value:
            return key_path
        value = value[key]
    if not isinstance(value, dict) or not all(isinstance(v, str) for v in value.values()):
        return key_path
    return resolve_text(value, lang)


def string_table(lang: str = DEFAULT_LANGUAGE) -> Dict[str, Dict[str, str]]:
    """The whole table flattened to one language."""
    return {
        section: {key: resolve_text(value, lang) for key, value in entries.items()}
        for section, entries in TRANSLATIONS.items()
    }
