"""Hypothesis strategies for langfetch property-based testing."""

from tests.strategies.language import (
    fallback_tables,
    invalid_codes,
    lang_keys,
    language_codes,
    partitioned_data,
)

__all__ = [
    "fallback_tables",
    "invalid_codes",
    "lang_keys",
    "language_codes",
    "partitioned_data",
]
