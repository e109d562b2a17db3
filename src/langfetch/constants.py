"""Shared constants for langfetch.

Centralizes defaults used by the registry, the fetchers and the resolver.
Placing them here avoids circular imports and provides a single source of
truth.

Constants are grouped by domain:
- Language defaults: default code and resource roots
- Resource layout: file extension and request headers
- Limits: timeouts and size caps for fetched resources

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Language defaults
    "DEFAULT_LANGUAGE",
    "DEFAULT_ROOT",
    "LIBRARY_ROOT",
    # Resource layout
    "FILE_EXTENSION",
    "REQUEST_CONTENT_TYPE",
    "REQUEST_ACCEPT",
    # Limits
    "DEFAULT_TIMEOUT",
    "MAX_RESOURCE_SIZE",
    "MAX_LOCALE_CACHE_SIZE",
    # Environment variables
    "ENV_ROOT",
    "ENV_LANGUAGE",
    "ENV_AUTOLOAD",
    "ENV_TIMEOUT",
]

# ============================================================================
# LANGUAGE DEFAULTS
# ============================================================================

# English. Used whenever a resolver gets no code or an unsupported one.
DEFAULT_LANGUAGE: str = "uk"

# Folder of language files used when no root is configured.
DEFAULT_ROOT: str = "/lang/"

# Folder holding the language files shipped with the library itself.
LIBRARY_ROOT: str = "/libs/balov/js/lang/"

# ============================================================================
# RESOURCE LAYOUT
# ============================================================================

# Language resources live at: root + code + FILE_EXTENSION
FILE_EXTENSION: str = ".json"

# Deployed resource servers were always sent three Content-Type values in a
# row; only the last one reached the wire, so that is the one we send.
REQUEST_CONTENT_TYPE: str = "application/x-www-form-urlencoded; charset=utf-8"

REQUEST_ACCEPT: str = "application/json"

# ============================================================================
# LIMITS
# ============================================================================

# Seconds. Applied per request by HttpResourceFetcher.
DEFAULT_TIMEOUT: float = 10.0

# Language files are small flat objects; anything above 10 MiB is rejected
# before parsing.
MAX_RESOURCE_SIZE: int = 10 * 1024 * 1024

# Bound for the Babel Locale lru_cache in locale_utils.
MAX_LOCALE_CACHE_SIZE: int = 64

# ============================================================================
# ENVIRONMENT VARIABLES
# ============================================================================

ENV_ROOT: str = "LANGFETCH_ROOT"
ENV_LANGUAGE: str = "LANGFETCH_LANGUAGE"
ENV_AUTOLOAD: str = "LANGFETCH_AUTOLOAD"
ENV_TIMEOUT: str = "LANGFETCH_TIMEOUT"
