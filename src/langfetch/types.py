"""Type aliases for the language data domain.

Python 3.13+. Zero external dependencies.
"""

__all__ = [
    "LangData",
    "LangKey",
    "LangSource",
    "Location",
]

type Location = str
"""Resource location: root + code + ".json" (URL or filesystem path)."""

type LangSource = str
"""Raw text of a language resource, before parsing."""

type LangKey = str | int
"""Key of a language data element. Integer keys are looked up by their string form."""

type LangData = dict[str, str]
"""Flat mapping of language data element keys to translated strings."""
