from typing import Optional

from fastapi import Header, Query

from app.utils.helpers import resolve_locale


def get_locale(
    locale: Optional[str] = Query(None),
    accept_language: Optional[str] = Header(None),
) -> str:
    return resolve_locale(locale, accept_language)
