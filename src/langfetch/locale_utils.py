"""Locale utilities bridging langfetch codes and CLDR locales.

langfetch language codes are historical site codes, not BCP-47 tags: "uk" is
English, "ua" is Ukrainian, "cz" is Czech and "kz" is Kazakh. This module
maps them to CLDR identifiers so Babel can supply display names, and maps
the host's POSIX locale back to a supported code for default detection.

Python 3.13+.
"""

from __future__ import annotations

import functools
import os
from collections.abc import Mapping
from typing import TYPE_CHECKING

from langfetch.constants import ENV_LANGUAGE, MAX_LOCALE_CACHE_SIZE
from langfetch.enums import LanguageCode

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "clear_locale_cache",
    "code_from_locale",
    "detect_language_code",
    "display_name",
    "get_babel_locale",
    "get_system_locale",
    "normalize_locale",
    "to_cldr",
]

_CLDR_BY_CODE: dict[LanguageCode, str] = {
    LanguageCode.BG: "bg",
    LanguageCode.CZ: "cs",
    LanguageCode.KZ: "kk",
    LanguageCode.LT: "lt",
    LanguageCode.LV: "lv",
    LanguageCode.PL: "pl",
    LanguageCode.RU: "ru",
    LanguageCode.SK: "sk",
    LanguageCode.UA: "uk",
    LanguageCode.UK: "en",
    LanguageCode.UZ: "uz",
}

_CODE_BY_CLDR: dict[str, LanguageCode] = {cldr: code for code, cldr in _CLDR_BY_CODE.items()}


def normalize_locale(locale_code: str) -> str:
    """Convert a BCP-47 or POSIX locale string to lowercase POSIX form.

    Strips any encoding (".UTF-8") or modifier ("@euro") suffix.

    Example:
        >>> normalize_locale("uk-UA")
        'uk_ua'
        >>> normalize_locale("cs_CZ.UTF-8")
        'cs_cz'
    """
    base = locale_code.split(".", 1)[0].split("@", 1)[0]
    return base.replace("-", "_").lower()


def to_cldr(code: str) -> str:
    """Return the CLDR language identifier for a langfetch code.

    Raises:
        ValueError: If code is not a supported language code
    """
    try:
        return _CLDR_BY_CODE[LanguageCode(code)]
    except ValueError:
        msg = f"No CLDR mapping for language code: {code!r}"
        raise ValueError(msg) from None


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def get_babel_locale(code: str) -> Locale:
    """Get the Babel Locale for a langfetch code, cached.

    Raises:
        ValueError: If code is not a supported language code
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(to_cldr(code))


def clear_locale_cache() -> None:
    """Drop cached Babel Locale objects."""
    get_babel_locale.cache_clear()


def display_name(code: str, in_language: str | None = None) -> str:
    """Human-readable name of a language.

    Args:
        code: langfetch language code
        in_language: langfetch code of the language to write the name in.
            Defaults to the language itself (native name).

    Returns:
        Display name, e.g. display_name("cz", "uk") == "Czech"

    Raises:
        ValueError: If either code is not supported
    """
    locale = get_babel_locale(code)
    target = get_babel_locale(in_language) if in_language is not None else locale
    return locale.get_display_name(target) or code


def code_from_locale(locale_code: str) -> LanguageCode | None:
    """Map a host locale string to a supported language code.

    Only the language subtag is considered: "uk_UA" -> UA, "en_GB" -> UK.

    Returns:
        Matching LanguageCode, or None if the language is not supported
    """
    language = normalize_locale(locale_code).split("_", 1)[0]
    return _CODE_BY_CLDR.get(language)


def get_system_locale(environ: Mapping[str, str] | None = None) -> str | None:
    """Detect the host locale from environment variables.

    Detection order: LC_ALL, LC_MESSAGES, LANG. The "C" and "POSIX"
    pseudo-locales are ignored.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Normalized POSIX locale (e.g. "uk_ua"), or None if undetermined
    """
    env = os.environ if environ is None else environ
    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = env.get(var)
        if value and value not in ("C", "POSIX") and not value.startswith(("C.", "POSIX.")):
            return normalize_locale(value)
    return None


def detect_language_code(environ: Mapping[str, str] | None = None) -> LanguageCode | None:
    """Find a language code for this process without explicit configuration.

    Sources, in order:
    1. LANGFETCH_LANGUAGE, if it holds a supported code
    2. The host locale (see get_system_locale), mapped via code_from_locale

    Returns:
        Supported LanguageCode, or None if nothing usable was found
    """
    env = os.environ if environ is None else environ

    explicit = env.get(ENV_LANGUAGE)
    if explicit is not None and explicit in LanguageCode:
        return LanguageCode(explicit)

    system_locale = get_system_locale(env)
    if system_locale is None:
        return None
    return code_from_locale(system_locale)
