"""Resource loading infrastructure for LanguageData.

Provides the protocol for language resource fetchers, an HTTP implementation
built on httpx, a filesystem implementation with path-traversal checks, the
JSON codec for language files, and result/summary data structures for
tracking load attempts.

Components:
    ResourceFetcher - Protocol for fetching resource text (structural typing)
    HttpResourceFetcher - httpx-based fetcher (blocking and async)
    FileResourceFetcher - Disk-based fetcher for directory roots
    default_fetcher_for - Picks a fetcher from the shape of a root
    parse_mapping - Decodes a language file into a flat mapping
    ResourceLoadResult - Immutable result of a single location load attempt
    LoadSummary - Immutable aggregate of all load results of a resolver

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, NoReturn, Protocol

import httpx

from langfetch.constants import (
    DEFAULT_TIMEOUT,
    MAX_RESOURCE_SIZE,
    REQUEST_ACCEPT,
    REQUEST_CONTENT_TYPE,
)
from langfetch.enums import LoadStatus
from langfetch.errors import FetchError, ParseError, ResourceNotFoundError
from langfetch.types import LangSource, Location

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "ResourceFetcher",
    # Concrete fetchers
    "HttpResourceFetcher",
    "FileResourceFetcher",
    "default_fetcher_for",
    # Codec
    "parse_mapping",
    # Load result types
    "ResourceLoadResult",
    "LoadSummary",
]


class ResourceFetcher(Protocol):
    """Protocol for retrieving the raw text of a language resource.

    Implementations provide a blocking fetch() for the deprecated synchronous
    path and a coroutine afetch() for the regular asynchronous path. Both
    raise FetchError (ResourceNotFoundError when the resource does not exist).

    This is a Protocol (structural typing) rather than ABC so that test
    doubles and custom transports need no base class.

    Example:
        >>> class DictFetcher:
        ...     def __init__(self, files: dict[str, str]) -> None:
        ...         self.files = files
        ...     def fetch(self, location: str) -> str:
        ...         try:
        ...             return self.files[location]
        ...         except KeyError:
        ...             raise ResourceNotFoundError("missing", location=location) from None
        ...     async def afetch(self, location: str) -> str:
        ...         return self.fetch(location)
    """

    def fetch(self, location: Location) -> LangSource:
        """Fetch resource text, blocking the calling thread.

        Raises:
            ResourceNotFoundError: If the resource does not exist
            FetchError: On any other failure
        """

    async def afetch(self, location: Location) -> LangSource:
        """Fetch resource text without blocking the event loop.

        Raises:
            ResourceNotFoundError: If the resource does not exist
            FetchError: On any other failure
        """


@dataclass(frozen=True, slots=True)
class HttpResourceFetcher:
    """Fetches language resources over HTTP(S) with httpx.

    A short-lived client is opened per request, so the fetcher holds no
    connections and can be shared freely.

    Attributes:
        base_url: Prefix for relative locations such as "/lang/ru.json"
        timeout: Request timeout in seconds
        max_size: Largest accepted body in bytes
        transport: Optional httpx transport for the blocking client
        async_transport: Optional httpx transport for the async client.
            Defaults to ``transport`` when that also supports async use
            (httpx.MockTransport does).

    Example:
        >>> fetcher = HttpResourceFetcher(base_url="https://example.com")
        >>> text = await fetcher.afetch("/lang/ru.json")
    """

    base_url: str = ""
    timeout: float = DEFAULT_TIMEOUT
    max_size: int = MAX_RESOURCE_SIZE
    transport: httpx.BaseTransport | None = None
    async_transport: httpx.AsyncBaseTransport | None = None
    headers: dict[str, str] = field(
        init=False,
        repr=False,
        default_factory=lambda: {
            "Accept": REQUEST_ACCEPT,
            "Content-Type": REQUEST_CONTENT_TYPE,
        },
    )

    def __post_init__(self) -> None:
        if self.async_transport is None and isinstance(self.transport, httpx.AsyncBaseTransport):
            object.__setattr__(self, "async_transport", self.transport)

    def _check_status(self, location: Location, response: httpx.Response) -> None:
        if response.status_code == httpx.codes.NOT_FOUND:
            msg = f"Language resource not found. URL: {location}"
            raise ResourceNotFoundError(msg, location=location, status_code=response.status_code)
        if response.status_code != httpx.codes.OK:
            msg = f"Failed at loading language data (HTTP {response.status_code}). URL: {location}"
            raise FetchError(msg, location=location, status_code=response.status_code)
        declared = response.headers.get("Content-Length", "")
        if declared.isdigit() and int(declared) > self.max_size:
            self._oversize(location, response, int(declared))

    def _oversize(self, location: Location, response: httpx.Response, size: int) -> NoReturn:
        msg = f"Language resource exceeds {self.max_size} bytes ({size}+ bytes). URL: {location}"
        raise FetchError(msg, location=location, status_code=response.status_code)

    def _append_chunk(
        self, location: Location, response: httpx.Response, body: bytearray, chunk: bytes
    ) -> None:
        # Stop reading as soon as the cap is passed, whatever Content-Length said.
        body.extend(chunk)
        if len(body) > self.max_size:
            self._oversize(location, response, len(body))

    @staticmethod
    def _decode(response: httpx.Response, body: bytearray) -> LangSource:
        return bytes(body).decode(response.encoding or "utf-8", errors="replace")

    def fetch(self, location: Location) -> LangSource:
        """Fetch resource text with a blocking httpx.Client.

        The body is streamed and abandoned once it passes max_size.
        """
        try:
            with (
                httpx.Client(
                    base_url=self.base_url,
                    timeout=self.timeout,
                    transport=self.transport,
                    headers=self.headers,
                ) as client,
                client.stream("GET", location) as response,
            ):
                self._check_status(location, response)
                body = bytearray()
                for chunk in response.iter_bytes():
                    self._append_chunk(location, response, body, chunk)
                return self._decode(response, body)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            msg = f"Failed at loading language data synchronously. URL: {location}: {e}"
            raise FetchError(msg, location=location) from e

    async def afetch(self, location: Location) -> LangSource:
        """Fetch resource text with an httpx.AsyncClient."""
        try:
            async with (
                httpx.AsyncClient(
                    base_url=self.base_url,
                    timeout=self.timeout,
                    transport=self.async_transport,
                    headers=self.headers,
                ) as client,
                client.stream("GET", location) as response,
            ):
                self._check_status(location, response)
                body = bytearray()
                async for chunk in response.aiter_bytes():
                    self._append_chunk(location, response, body, chunk)
                return self._decode(response, body)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            msg = f"Failed at loading language data asynchronously. URL: {location}: {e}"
            raise FetchError(msg, location=location) from e


@dataclass(frozen=True, slots=True)
class FileResourceFetcher:
    """Reads language resources from the local filesystem.

    Locations are filesystem paths (root + code + ".json"). The async path
    runs the blocking read in a worker thread.

    Security:
        When root_dir is set, every resolved location must stay inside it;
        locations escaping it through ".." or symlinks raise FetchError.

    Attributes:
        root_dir: Directory locations are confined to (None disables the check)
        max_size: Largest accepted file in bytes
    """

    root_dir: str | None = None
    max_size: int = MAX_RESOURCE_SIZE
    _resolved_root: Path | None = field(init=False, repr=False, default=None)

    def __post_init__(self) -> None:
        if self.root_dir is not None:
            object.__setattr__(self, "_resolved_root", Path(self.root_dir).resolve())

    def _resolve(self, location: Location) -> Path:
        path = Path(location).resolve()
        if self._resolved_root is not None and not path.is_relative_to(self._resolved_root):
            msg = f"Path traversal detected: '{location}' escapes '{self.root_dir}'"
            raise FetchError(msg, location=location)
        return path

    def fetch(self, location: Location) -> LangSource:
        """Read resource text from disk."""
        try:
            path = self._resolve(location)
            size = path.stat().st_size
            if size > self.max_size:
                msg = f"Language resource exceeds {self.max_size} bytes ({size} bytes): {location}"
                raise FetchError(msg, location=location)
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            msg = f"Language resource not found: {location}"
            raise ResourceNotFoundError(msg, location=location) from e
        except (OSError, ValueError) as e:
            # ValueError covers undecodable bytes and paths the OS rejects (NUL).
            msg = f"Failed at reading language data: {location}: {e}"
            raise FetchError(msg, location=location) from e

    async def afetch(self, location: Location) -> LangSource:
        """Read resource text from disk in a worker thread."""
        return await asyncio.to_thread(self.fetch, location)


def default_fetcher_for(root: str, *, timeout: float = DEFAULT_TIMEOUT) -> ResourceFetcher:
    """Choose a fetcher for a resource root.

    Roots starting with "http://" or "https://" get an HttpResourceFetcher;
    anything else is treated as a directory on the local filesystem.
    """
    if root.startswith(("http://", "https://")):
        return HttpResourceFetcher(timeout=timeout)
    return FileResourceFetcher()


def parse_mapping(text: LangSource, *, location: Location = "") -> dict[str, Any]:
    """Decode a language resource into a flat mapping.

    Only the top-level shape is checked: the document must be a JSON object.
    Values are kept as decoded.

    Raises:
        ParseError: If text is not JSON or its top level is not an object
    """
    try:
        data = json.loads(text)
    except (ValueError, TypeError, RecursionError) as e:
        # ValueError also covers integers past the interpreter digit limit.
        msg = f"Language resource is not valid JSON: {location or '<text>'}: {e}"
        raise ParseError(msg, location=location) from e
    if not isinstance(data, dict):
        msg = (
            f"Language resource must be a JSON object, got {type(data).__name__}: "
            f"{location or '<text>'}"
        )
        raise ParseError(msg, location=location)
    return data


@dataclass(frozen=True, slots=True)
class ResourceLoadResult:
    """Result of loading a single language resource.

    Attributes:
        language: Language code of the resource
        location: Location that was fetched
        status: Load status (success, not_found, error, invalid)
        error: Exception for any non-success status, None otherwise
        key_count: Number of keys the resource contributed before merging
    """

    language: str
    location: Location
    status: LoadStatus
    error: Exception | None = None
    key_count: int = 0

    @property
    def is_success(self) -> bool:
        """Check if resource loaded and parsed."""
        return self.status == LoadStatus.SUCCESS

    @property
    def is_not_found(self) -> bool:
        """Check if resource was missing (expected for partial translations)."""
        return self.status == LoadStatus.NOT_FOUND

    @property
    def is_error(self) -> bool:
        """Check if resource could not be fetched."""
        return self.status == LoadStatus.ERROR

    @property
    def is_invalid(self) -> bool:
        """Check if resource was fetched but did not parse as a flat mapping."""
        return self.status == LoadStatus.INVALID


@dataclass(frozen=True, slots=True)
class LoadSummary:
    """Immutable aggregate of the load results of one resolver.

    Attributes:
        results: Individual load results in load-set order

    Example:
        >>> lang = await LanguageData.get_ready_instance("ru", "https://example.com/lang/")
        >>> summary = lang.get_load_summary()
        >>> for result in summary.get_errors():
        ...     print(f"Failed: {result.location}: {result.error}")
    """

    results: tuple[ResourceLoadResult, ...]

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"LoadSummary(total={self.total_attempted}, "
            f"ok={self.successful}, "
            f"not_found={self.not_found}, "
            f"errors={self.errors}, "
            f"invalid={self.invalid})"
        )

    @property
    def total_attempted(self) -> int:
        """Total number of load attempts."""
        return len(self.results)

    @property
    def successful(self) -> int:
        """Number of successful loads."""
        return sum(1 for r in self.results if r.is_success)

    @property
    def not_found(self) -> int:
        """Number of resources not found."""
        return sum(1 for r in self.results if r.is_not_found)

    @property
    def errors(self) -> int:
        """Number of fetch errors."""
        return sum(1 for r in self.results if r.is_error)

    @property
    def invalid(self) -> int:
        """Number of resources that failed to parse."""
        return sum(1 for r in self.results if r.is_invalid)

    def get_errors(self) -> tuple[ResourceLoadResult, ...]:
        """Get all results that failed to fetch or parse."""
        return tuple(r for r in self.results if r.is_error or r.is_invalid)

    def get_not_found(self) -> tuple[ResourceLoadResult, ...]:
        """Get all results where the resource was missing."""
        return tuple(r for r in self.results if r.is_not_found)

    def get_successful(self) -> tuple[ResourceLoadResult, ...]:
        """Get all successful load results."""
        return tuple(r for r in self.results if r.is_success)

    def get_by_language(self, language: str) -> tuple[ResourceLoadResult, ...]:
        """Get all results for a specific language code."""
        return tuple(r for r in self.results if r.language == language)

    @property
    def has_errors(self) -> bool:
        """Check if any resource failed to fetch or parse."""
        return self.errors > 0 or self.invalid > 0

    @property
    def all_successful(self) -> bool:
        """Check if every attempted resource loaded and parsed.

        Returns:
            True if there are no errors, no invalid resources and nothing missing
        """
        return self.errors == 0 and self.invalid == 0 and self.not_found == 0
