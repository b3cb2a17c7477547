"""
UI string table endpoint
"""
from fastapi import APIRouter, Request

from graetzlmap.core.exceptions import NotFoundError
from graetzlmap.i18n import string_table

router = APIRouter(prefix="/api/i18n", tags=["i18n"])


@router.get("/{lang}")
def get_strings(lang: str, request: Request):
    supported = request.app.state.settings.i18n.supported_languages
    if lang.lower() not in supported:
        raise NotFoundError("Language", lang)
    return {"lang": lang.lower(), "strings": string_table(lang.lower())}
