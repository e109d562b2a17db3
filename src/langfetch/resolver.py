"""Language data resolver with fallback chains.

LanguageData binds one primary language code to a resource root. On first
use it fetches the primary language file together with the files of every
fallback language, merges them into one flat mapping where the primary
language wins, and keeps that mapping for the lifetime of the instance.

Loading Behavior:
    Construction performs no I/O. Data is loaded by ``await load()`` (the
    regular path, also reachable as prepare() and wait_until_ready()), or on
    first get()/get_all()/map() through the blocking path.

    Per-location failures never escape: a missing file, an HTTP error or a
    malformed document only removes that location's contribution and is
    recorded in the LoadSummary. The worst case is an empty mapping.

Concurrency:
    At most one asynchronous load runs per instance. Callers arriving while
    it is in flight await the same task (single-flight). The shared task is
    shielded, so cancelling one waiting caller does not cancel the load.
    The blocking path is serialized by a lock.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Self

from langfetch.constants import DEFAULT_ROOT, DEFAULT_TIMEOUT, FILE_EXTENSION, LIBRARY_ROOT
from langfetch.deprecation import deprecated
from langfetch.enums import LoadStatus
from langfetch.errors import (
    FetchError,
    InvalidCallbackError,
    InvalidKeyError,
    InvalidLanguageCodeError,
    ParseError,
    ResourceNotFoundError,
)
from langfetch.loading import (
    LoadSummary,
    ResourceFetcher,
    ResourceLoadResult,
    default_fetcher_for,
    parse_mapping,
)
from langfetch.locale_utils import detect_language_code
from langfetch.registry import DEFAULT_REGISTRY, LanguageRegistry, dedupe
from langfetch.types import LangData, LangKey, Location

if TYPE_CHECKING:
    from langfetch.config import ResolverConfig

__all__ = ["LanguageData"]

logger = logging.getLogger(__name__)

type _Loaded = tuple[ResourceLoadResult, dict[str, Any]]


class LanguageData:
    """Multilanguage string data for one primary language.

    Example:
        >>> lang = await LanguageData.get_ready_instance("ru", "https://example.com/lang/profile/")
        >>> lang.get("achievements")
        'Достижения'
        >>> lang.get("missing-key")
        ''

    Attributes:
        language: Primary language code (validated; defaults to English "uk")
        root: Prefix of resource locations
    """

    __slots__ = (
        "__weakref__",
        "_autoload_task",
        "_data",
        "_fetcher",
        "_inflight",
        "_language",
        "_load_results",
        "_registry",
        "_root",
        "_sync_lock",
    )

    def __init__(
        self,
        language: str | None = None,
        root: str | None = None,
        *,
        registry: LanguageRegistry | None = None,
        fetcher: ResourceFetcher | None = None,
        autoload: bool = False,
        detect: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Create a resolver. Performs no I/O.

        Args:
            language: Primary language code. None or an unsupported code
                falls back to the registry default.
            root: Prefix of resource locations (default "/lang/")
            registry: Supported codes and fallback chains (default registry)
            fetcher: Resource fetcher (default chosen from the shape of root)
            autoload: Start loading in the background on the running event
                loop. Failures are logged as warnings and swallowed.
            detect: When language is missing or unsupported, try the
                environment (LANGFETCH_LANGUAGE, then the host locale) before
                using the default.
            timeout: Request timeout for the default HTTP fetcher
        """
        self._registry = registry if registry is not None else DEFAULT_REGISTRY
        self._language = self._find_language_code(language, detect=detect)
        self._root = root or DEFAULT_ROOT
        self._fetcher = (
            fetcher if fetcher is not None else default_fetcher_for(self._root, timeout=timeout)
        )
        self._data: LangData | None = None
        self._inflight: asyncio.Task[None] | None = None
        self._autoload_task: asyncio.Task[Self] | None = None
        self._load_results: tuple[ResourceLoadResult, ...] = ()
        self._sync_lock = threading.Lock()

        if autoload:
            self._start_autoload()

    def _find_language_code(self, language: str | None, *, detect: bool) -> str:
        """Pick the primary language code for the instance."""
        try:
            return self._registry.validate_strict(language)
        except InvalidLanguageCodeError:
            if language is not None:
                logger.warning(
                    "Unsupported language code %r, using '%s'", language, self._registry.default
                )

        if detect:
            detected = detect_language_code()
            if detected is not None and self._registry.is_valid(detected):
                return str(detected)

        return self._registry.default

    # ------------------------------------------------------------------
    # Construction surface
    # ------------------------------------------------------------------

    @classmethod
    def from_config(
        cls,
        config: ResolverConfig,
        *,
        registry: LanguageRegistry | None = None,
        fetcher: ResourceFetcher | None = None,
    ) -> Self:
        """Build a resolver from a ResolverConfig."""
        return cls(
            config.language,
            config.root,
            registry=registry,
            fetcher=fetcher,
            autoload=config.autoload,
            timeout=config.timeout,
        )

    @classmethod
    async def get_ready_instance(
        cls,
        language: str | None = None,
        root: str | None = None,
        **kwargs: Any,
    ) -> Self:
        """Build a resolver and wait until its data is loaded.

        The standard entry point for consumers. Keyword arguments are passed
        to the constructor.
        """
        return await cls(language, root, **kwargs).prepare()

    @staticmethod
    async def get_ready_instance_by_class(
        clss: type[LanguageData],
        language: str | None = None,
        root: str | None = None,
        **kwargs: Any,
    ) -> LanguageData:
        """Build a ready instance of a LanguageData subclass.

        Raises:
            InvalidCallbackError: If clss is not LanguageData or a subclass
        """
        if not (isinstance(clss, type) and issubclass(clss, LanguageData)):
            raise InvalidCallbackError(clss)
        return await clss.get_ready_instance(language, root, **kwargs)

    @staticmethod
    def get_library_root() -> str:
        """Return the folder of the language files shipped with the library."""
        return LIBRARY_ROOT

    # ------------------------------------------------------------------
    # Load planning
    # ------------------------------------------------------------------

    def resolve_load_set(self) -> tuple[str, ...]:
        """Return the primary code followed by its fallbacks, without duplicates.

        Earlier codes take precedence when merging.
        """
        return dedupe((self._language, *self._registry.fallbacks_for(self._language)))

    def _location_for(self, code: str) -> Location:
        return f"{self._root}{code}{FILE_EXTENSION}"

    def _plan(self) -> tuple[tuple[str, Location], ...]:
        return tuple(
            (code, self._location_for(code))
            for code in self.resolve_load_set()
            if self._registry.is_valid(code)
        )

    def build_locations(self) -> tuple[Location, ...]:
        """Return one resource location per code of the load set."""
        return tuple(location for _, location in self._plan())

    # ------------------------------------------------------------------
    # Asynchronous loading
    # ------------------------------------------------------------------

    async def load(self) -> Self:
        """Load and merge language data, once.

        Returns immediately when data is already loaded, joins the running
        load when one is in flight, and otherwise starts a new one. Never
        fails because of an individual resource; the merged mapping may be
        empty.

        Returns:
            This instance
        """
        if self._data is not None:
            return self

        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._load_all())
        else:
            logger.debug("Joining in-flight load for '%s'", self._language)

        await asyncio.shield(self._inflight)
        return self

    async def prepare(self) -> Self:
        """Load language data asynchronously and return the instance."""
        return await self.load()

    async def wait_until_ready(self) -> Self:
        """Wait for language data, whichever way loading was started.

        Returns the instance at once if data is present, waits for the
        autoload (or any other in-flight load) if one runs, and starts a load
        otherwise.
        """
        return await self.load()

    async def _load_all(self) -> None:
        try:
            loaded = await asyncio.gather(
                *(self._load_one_async(code, location) for code, location in self._plan())
            )
            merged: LangData = {}
            # Lowest precedence first, so higher-precedence codes overwrite.
            for _, mapping in reversed(loaded):
                merged.update(mapping)
            self._store(merged, tuple(result for result, _ in loaded))
        finally:
            self._inflight = None

    async def _load_one_async(self, code: str, location: Location) -> _Loaded:
        try:
            text = await self._fetcher.afetch(location)
        except FetchError as e:
            return self._failed(code, location, e), {}
        return self._parsed(code, location, text)

    # ------------------------------------------------------------------
    # Blocking loading
    # ------------------------------------------------------------------

    @deprecated(removal_version="2.0.0", alternative="await LanguageData.load()")
    def load_sync(self) -> Self:
        """Load and merge language data, blocking the calling thread.

        Resources are fetched one after another in load-set order; the first
        value seen for a key wins. Never fails; the worst case is an empty
        mapping.

        Returns:
            This instance
        """
        self._populate_sync()
        return self

    def _populate_sync(self) -> LangData:
        with self._sync_lock:
            if self._data is not None:
                return self._data

            merged: LangData = {}
            results: list[ResourceLoadResult] = []
            for code, location in self._plan():
                try:
                    text = self._fetcher.fetch(location)
                except FetchError as e:
                    results.append(self._failed(code, location, e))
                    continue
                result, mapping = self._parsed(code, location, text)
                results.append(result)
                for key, value in mapping.items():
                    merged.setdefault(key, value)

            return self._store(merged, tuple(results))

    # ------------------------------------------------------------------
    # Shared load helpers
    # ------------------------------------------------------------------

    def _failed(self, code: str, location: Location, error: FetchError) -> ResourceLoadResult:
        if isinstance(error, ResourceNotFoundError):
            logger.debug("Language resource missing: %s", location)
            status = LoadStatus.NOT_FOUND
        else:
            logger.warning("Failed to fetch language resource %s: %s", location, error)
            status = LoadStatus.ERROR
        return ResourceLoadResult(language=code, location=location, status=status, error=error)

    def _parsed(self, code: str, location: Location, text: str) -> _Loaded:
        try:
            mapping = parse_mapping(text, location=location)
        except ParseError as e:
            logger.warning("Failed to parse language resource %s: %s", location, e)
            return (
                ResourceLoadResult(
                    language=code, location=location, status=LoadStatus.INVALID, error=e
                ),
                {},
            )
        logger.debug("Loaded %d keys from %s", len(mapping), location)
        result = ResourceLoadResult(
            language=code, location=location, status=LoadStatus.SUCCESS, key_count=len(mapping)
        )
        return result, mapping

    def _store(self, merged: LangData, results: tuple[ResourceLoadResult, ...]) -> LangData:
        # Set exactly once; a load that lost the race keeps the first result.
        if self._data is None:
            self._data = merged
            self._load_results = results
            summary = LoadSummary(results=results)
            logger.info(
                "Language data for '%s' loaded: %d keys, %d/%d resources",
                self._language,
                len(merged),
                summary.successful,
                summary.total_attempted,
            )
        return self._data

    def _start_autoload(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(
                "No running event loop; language data for '%s' loads on first access",
                self._language,
            )
            return
        self._autoload_task = loop.create_task(self.load())
        self._autoload_task.add_done_callback(_log_autoload_failure)

    # ------------------------------------------------------------------
    # Lookup surface
    # ------------------------------------------------------------------

    def _get_data(self) -> LangData:
        if self._data is not None:
            return self._data
        return self._populate_sync()

    def get(self, key: LangKey) -> str:
        """Return a language data element.

        Loads data through the blocking path on first use. Missing keys and
        values that are not strings or numbers yield "".

        Args:
            key: Element key. Integer keys are looked up by their string form.

        Raises:
            InvalidKeyError: If key is empty, None or otherwise falsy
        """
        if not key:
            raise InvalidKeyError(key)
        data = self._get_data()

        try:
            value = data.get(key if isinstance(key, str) else str(key))
        except (TypeError, ValueError):
            return ""
        match value:
            case str():
                return value
            case bool():
                return ""
            case int() | float():
                return str(value)
            case _:
                return ""

    def get_all(self) -> LangData:
        """Return a copy of all language data, loading it on first use."""
        return dict(self._get_data())

    def map(self, func: Callable[[Any, str, LangData], Any]) -> list[Any]:
        """Call func(value, key, data) for every element, in mapping order.

        Returns:
            Results of the calls, in the same order

        Raises:
            InvalidCallbackError: If func is not callable
        """
        if not callable(func):
            raise InvalidCallbackError(func)
        data = self.get_all()
        return [func(value, key, data) for key, value in data.items()]

    for_each = map

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def language(self) -> str:
        """Primary language code."""
        return self._language

    @property
    def root(self) -> str:
        """Prefix of resource locations."""
        return self._root

    @property
    def registry(self) -> LanguageRegistry:
        """Registry the instance validates against."""
        return self._registry

    @property
    def is_loaded(self) -> bool:
        """Check whether the merged mapping is populated."""
        return self._data is not None

    @property
    def is_loading(self) -> bool:
        """Check whether an asynchronous load is in flight."""
        return self._inflight is not None

    def get_load_summary(self) -> LoadSummary:
        """Get the per-location results of the load that populated the data.

        Empty until data is loaded.
        """
        return LoadSummary(results=self._load_results)

    def __repr__(self) -> str:
        """Return string representation for debugging.

        Example:
            >>> LanguageData("ru", "/lang/")
            LanguageData(language='ru', root='/lang/', loaded=False)
        """
        return (
            f"{type(self).__name__}(language={self._language!r}, "
            f"root={self._root!r}, loaded={self.is_loaded})"
        )


def _log_autoload_failure(task: asyncio.Task[Any]) -> None:
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.warning("Failed at autoloading language data: %s", error)
