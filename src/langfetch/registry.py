"""Language code registry.

Holds the closed set of supported language codes and, per code, the ordered
list of codes to consult when that language's data is missing a key or
fails to load. Everything here is immutable and safe to read from anywhere.

Fallback lists are flat: the fallbacks of a fallback are never consulted, so
a table can reference codes in both directions (lt -> lv, lv -> lt) without
creating a cycle.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from langfetch.constants import DEFAULT_LANGUAGE
from langfetch.enums import LanguageCode
from langfetch.errors import InvalidLanguageCodeError
from langfetch.locale_utils import display_name

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    "LanguageRegistry",
    "DEFAULT_FALLBACKS",
    "DEFAULT_REGISTRY",
    # Module-level shortcuts bound to DEFAULT_REGISTRY
    "list_codes",
    "is_valid",
    "validate_strict",
    "fallbacks_for",
    "dedupe",
]

_L = LanguageCode

DEFAULT_FALLBACKS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    _L.BG: (_L.RU, _L.UK),
    _L.CZ: (_L.SK, _L.UK),
    _L.KZ: (_L.RU, _L.UK),
    _L.LT: (_L.LV, _L.RU, _L.UK),
    _L.LV: (_L.LT, _L.RU, _L.UK),
    _L.PL: (_L.UK,),
    _L.RU: (_L.UK,),
    _L.SK: (_L.CZ, _L.UK),
    _L.UA: (_L.RU, _L.UK),
    _L.UK: (),
    _L.UZ: (_L.RU, _L.UK),
})
"""Fallback chains used by DEFAULT_REGISTRY. English ("uk") ends every chain."""


@dataclass(frozen=True, slots=True)
class LanguageRegistry:
    """Closed set of language codes with per-code fallback chains.

    Attributes:
        codes: Supported codes in their listing order
        fallbacks: Code -> ordered fallback codes. Codes without an entry
            have no fallbacks.
        default: Code used when a caller supplies none or an invalid one

    Example:
        >>> registry = LanguageRegistry(
        ...     codes=("en", "de"),
        ...     fallbacks={"de": ("en",)},
        ...     default="en",
        ... )
        >>> registry.fallbacks_for("de")
        ('en',)
    """

    codes: tuple[str, ...] = tuple(LanguageCode)
    fallbacks: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: DEFAULT_FALLBACKS)
    default: str = DEFAULT_LANGUAGE
    _code_set: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Freeze inputs and check that every referenced code is supported.

        Raises:
            ValueError: If codes is empty, the default is unsupported, or a
                fallback table entry names an unsupported code
        """
        codes = tuple(str(code) for code in self.codes)
        if not codes:
            msg = "At least one language code is required"
            raise ValueError(msg)
        code_set = frozenset(codes)

        if self.default not in code_set:
            msg = f"Default language '{self.default}' is not among the supported codes"
            raise ValueError(msg)

        table: dict[str, tuple[str, ...]] = {}
        for code, chain in self.fallbacks.items():
            unknown = [c for c in (code, *chain) if c not in code_set]
            if unknown:
                msg = f"Fallback table entry '{code}' references unsupported codes: {unknown}"
                raise ValueError(msg)
            table[str(code)] = tuple(str(c) for c in chain)

        object.__setattr__(self, "codes", codes)
        object.__setattr__(self, "fallbacks", MappingProxyType(table))
        object.__setattr__(self, "default", str(self.default))
        object.__setattr__(self, "_code_set", code_set)

    def list_codes(self) -> tuple[str, ...]:
        """Return all supported codes."""
        return self.codes

    def is_valid(self, code: object) -> bool:
        """Check whether code is a supported language code."""
        return isinstance(code, str) and code in self._code_set

    def validate_strict(self, code: object) -> str:
        """Return code unchanged if supported.

        Raises:
            InvalidLanguageCodeError: If code is not supported
        """
        if not self.is_valid(code):
            raise InvalidLanguageCodeError(code)
        return code  # type: ignore[return-value]

    def fallbacks_for(self, code: object) -> tuple[str, ...]:
        """Return the fallback chain for code.

        Returns an empty tuple for codes without a chain and for invalid
        codes; callers are expected to validate first.
        """
        if not self.is_valid(code):
            return ()
        return self.fallbacks.get(code, ())  # type: ignore[arg-type]

    def describe(self, in_language: str | None = None) -> dict[str, str]:
        """Map every supported code to its display name.

        Args:
            in_language: Code of the language to write names in
                (default: the registry default)

        Codes Babel has no data for map to themselves.
        """
        target = self.default if in_language is None else in_language
        names: dict[str, str] = {}
        for code in self.codes:
            try:
                names[code] = display_name(code, target)
            except ValueError:
                names[code] = code
        return names


DEFAULT_REGISTRY = LanguageRegistry()


def list_codes() -> tuple[str, ...]:
    """Supported codes of DEFAULT_REGISTRY."""
    return DEFAULT_REGISTRY.list_codes()


def is_valid(code: object) -> bool:
    """Check code against DEFAULT_REGISTRY."""
    return DEFAULT_REGISTRY.is_valid(code)


def validate_strict(code: object) -> str:
    """Validate code against DEFAULT_REGISTRY, raising InvalidLanguageCodeError."""
    return DEFAULT_REGISTRY.validate_strict(code)


def fallbacks_for(code: object) -> tuple[str, ...]:
    """Fallback chain of code in DEFAULT_REGISTRY."""
    return DEFAULT_REGISTRY.fallbacks_for(code)


def dedupe(codes: Iterable[str]) -> tuple[str, ...]:
    """Remove duplicate codes, keeping first occurrences in order."""
    # dict.fromkeys() removes duplicates while maintaining insertion order
    return tuple(dict.fromkeys(codes))
