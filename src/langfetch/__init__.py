"""langfetch - fallback-chained language data for multilanguage sites.

Resolves a language code to one flat mapping of translated strings, merged
from per-language JSON files (root + code + ".json") with fallback chains,
fetched once per resolver and cached for its lifetime.

Public API:
    LanguageData - Resolver: load, merge, cache and look up language data
    LanguageRegistry - Supported language codes and fallback chains
    LanguageCode - Enumeration of supported codes
    ResolverConfig - Frozen resolver configuration
    ResolverCache - Caller-held cache of per-section resolvers
    HttpResourceFetcher, FileResourceFetcher - Resource fetchers

Exceptions:
    LangFetchError - Base exception class
    InvalidLanguageCodeError - Unsupported code under strict validation
    InvalidKeyError - Empty key passed to get()
    InvalidCallbackError - Non-callable passed to map()
    FetchError, ResourceNotFoundError, ParseError - Per-resource failures

Submodules:
    langfetch.registry - Language code registry
    langfetch.resolver - LanguageData
    langfetch.loading - Fetchers, codec, load results
    langfetch.locale_utils - Babel-backed display names and locale detection
"""

from .cache import ResolverCache
from .config import ResolverConfig
from .enums import LanguageCode, LoadStatus
from .errors import (
    FetchError,
    InvalidCallbackError,
    InvalidKeyError,
    InvalidLanguageCodeError,
    LangFetchError,
    ParseError,
    ResourceNotFoundError,
)
from .loading import (
    FileResourceFetcher,
    HttpResourceFetcher,
    LoadSummary,
    ResourceFetcher,
    ResourceLoadResult,
)
from .registry import DEFAULT_REGISTRY, LanguageRegistry
from .resolver import LanguageData

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("langfetch")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "DEFAULT_REGISTRY",
    "FetchError",
    "FileResourceFetcher",
    "HttpResourceFetcher",
    "InvalidCallbackError",
    "InvalidKeyError",
    "InvalidLanguageCodeError",
    "LangFetchError",
    "LanguageCode",
    "LanguageData",
    "LanguageRegistry",
    "LoadStatus",
    "LoadSummary",
    "ParseError",
    "ResolverCache",
    "ResolverConfig",
    "ResourceFetcher",
    "ResourceLoadResult",
    "ResourceNotFoundError",
    "__version__",
]
