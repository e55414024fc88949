"""Translation lookup for emails and calendar text.

Catalogs are compiled gettext files under ``locales/<locale>/LC_MESSAGES/<namespace>.mo``.
Missing catalogs fall back to the untranslated (English) message ids.
"""

from __future__ import annotations

import gettext
from functools import lru_cache
from pathlib import Path
from typing import Callable, Optional

DEFAULT_LOCALE = "en"
LOCALE_DIR = Path(__file__).resolve().parent.parent / "locales"

Translator = Callable[[str], str]


def resolve_locale(locale: Optional[str]) -> str:
    return locale or DEFAULT_LOCALE


@lru_cache(maxsize=64)
def get_translation(locale: Optional[str], namespace: str = "common") -> Translator:
    translation = gettext.translation(
        namespace,
        localedir=str(LOCALE_DIR),
        languages=[resolve_locale(locale), DEFAULT_LOCALE],
        fallback=True,
    )
    return translation.gettext
