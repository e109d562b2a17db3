"""Enumerations for langfetch type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, so ``LanguageCode.RU == "ru"`` and
members can be passed anywhere a plain code string is accepted.

Python 3.13+.
"""

from enum import StrEnum


class LanguageCode(StrEnum):
    """Supported language codes.

    The set is closed: codes outside this enumeration are rejected by
    registry validation.
    """

    BG = "bg"
    """Bulgarian."""

    CZ = "cz"
    """Czech."""

    KZ = "kz"
    """Kazakh."""

    LT = "lt"
    """Lithuanian."""

    LV = "lv"
    """Latvian."""

    PL = "pl"
    """Polish."""

    RU = "ru"
    """Russian."""

    SK = "sk"
    """Slovak."""

    UA = "ua"
    """Ukrainian."""

    UK = "uk"
    """English."""

    UZ = "uz"
    """Uzbek."""


class LoadStatus(StrEnum):
    """Outcome of loading a single language resource.

    StrEnum provides automatic string conversion: str(LoadStatus.SUCCESS) == "success"
    """

    SUCCESS = "success"
    """Resource fetched and parsed as a flat mapping."""

    NOT_FOUND = "not_found"
    """Resource does not exist (HTTP 404 or missing file)."""

    ERROR = "error"
    """Transport failure or non-success response."""

    INVALID = "invalid"
    """Resource fetched but is not a JSON object."""


__all__ = [
    "LanguageCode",
    "LoadStatus",
]
