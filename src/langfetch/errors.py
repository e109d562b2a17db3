"""Exception hierarchy for langfetch.

Two families of errors exist:

Programmer errors, raised to the caller:
    InvalidKeyError - get() called with an empty key
    InvalidCallbackError - map() called with a non-callable visitor

Per-resource errors, recovered inside the load pipeline:
    InvalidLanguageCodeError - strict validation of an unsupported code
    FetchError / ResourceNotFoundError - a location could not be retrieved
    ParseError - a location did not contain a flat JSON object

Resolvers never let per-resource errors escape load() or load_sync(); they
are recorded as ResourceLoadResult entries instead.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

__all__ = [
    "FetchError",
    "InvalidCallbackError",
    "InvalidKeyError",
    "InvalidLanguageCodeError",
    "LangFetchError",
    "ParseError",
    "ResourceNotFoundError",
]


class LangFetchError(Exception):
    """Base exception for all langfetch errors."""


class InvalidLanguageCodeError(LangFetchError, ValueError):
    """Language code is not in the supported set.

    Attributes:
        code: The rejected value
    """

    def __init__(self, code: object) -> None:
        """Initialize InvalidLanguageCodeError.

        Args:
            code: The rejected value (may be any type, including None)
        """
        self.code = code
        super().__init__(f"Got invalid language code: {code}")


class InvalidKeyError(LangFetchError, ValueError):
    """Language data element key is empty or otherwise falsy."""

    def __init__(self, key: object) -> None:
        self.key = key
        super().__init__(f"Got incorrect language data element key: ({key!r})")


class InvalidCallbackError(LangFetchError, TypeError):
    """Visitor passed to map() is not callable."""

    def __init__(self, callback: object) -> None:
        self.callback = callback
        super().__init__(f"Got incorrect callback: {type(callback).__name__}")


class FetchError(LangFetchError):
    """Language resource could not be retrieved.

    Raised by fetchers for transport failures and non-success responses.

    Attributes:
        location: Location that failed
        status_code: HTTP status code, if the failure was an HTTP response
    """

    def __init__(
        self,
        message: str,
        *,
        location: str,
        status_code: int | None = None,
    ) -> None:
        """Initialize FetchError.

        Args:
            message: Human-readable reason
            location: Location that failed
            status_code: HTTP status code (None for transport or disk errors)
        """
        super().__init__(message)
        self.location = location
        self.status_code = status_code


class ResourceNotFoundError(FetchError):
    """Language resource does not exist (HTTP 404 or missing file).

    Expected for fallback languages without a file; recorded as NOT_FOUND
    rather than ERROR.
    """


class ParseError(LangFetchError):
    """Language resource is not a flat JSON object.

    Attributes:
        location: Location whose body failed to parse (empty if unknown)
    """

    def __init__(self, message: str, *, location: str = "") -> None:
        super().__init__(message)
        self.location = location
