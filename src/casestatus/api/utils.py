"""Template setup and locale helpers shared by the HTML routes."""

import gettext
import os
import re
from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates
from markupsafe import Markup, escape

TEMPLATES_DIR = Path(os.getenv("TEMPLATES_DIR", Path(__file__).resolve().parent.parent / "templates"))
TRANSLATIONS_DIR = Path(os.getenv("TRANSLATIONS_DIR", "translations"))

SUPPORTED_LOCALES = ("es", "en")
DEFAULT_LOCALE = "es"

_EMPHASIS = re.compile(r"\*(.+?)\*")


def emphasize(value: str | None) -> Markup:
    """Escape text, then render *text* as <strong>text</strong>."""
    if not value:
        return Markup("")
    escaped = str(escape(value))
    return Markup(_EMPHASIS.sub(r"<strong>\1</strong>", escaped))


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["emphasize"] = emphasize


def get_locale(request: Request) -> str:
    """Get locale from query param (?lang=en) or Accept-Language header. Default: es."""
    lang = request.query_params.get("lang", "").lower()
    if lang in SUPPORTED_LOCALES:
        return lang

    accept_lang = request.headers.get("accept-language", "").split(",")[0].split("-")[0].lower()
    if accept_lang in SUPPORTED_LOCALES:
        return accept_lang

    return DEFAULT_LOCALE


def get_translation_function(locale: str):
    """Get gettext translation function for locale (identity when no catalog exists)."""
    translation = gettext.translation(
        "messages",
        localedir=str(TRANSLATIONS_DIR),
        languages=[locale],
        fallback=True,
    )
    return translation.gettext


def render(request: Request, name: str, context: dict, status_code: int = 200):
    """Render a template with locale and gettext bound."""
    locale = get_locale(request)
    return templates.TemplateResponse(
        request,
        name,
        {"lang": locale, "_": get_translation_function(locale), **context},
        status_code=status_code,
    )
