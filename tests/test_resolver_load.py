"""Tests for LanguageData asynchronous loading.

Covers load-set planning, merge precedence, per-location failure recovery,
single-flight coalescing and autoloading.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import pytest

from langfetch import LanguageData, LoadStatus
from langfetch.errors import FetchError, InvalidCallbackError, ParseError
from langfetch.registry import LanguageRegistry

if TYPE_CHECKING:
    from tests.conftest import MakeFetcher

# Documents json.loads refuses with ValueError or RecursionError, not JSONDecodeError.
HUGE_INTEGER_DOC = '{"a": ' + "1" * 5000 + "}"
DEEPLY_NESTED_DOC = '{"a": ' + "[" * 100_000 + "]" * 100_000 + "}"


def loc(code: str, root: str = "/lang/") -> str:
    return f"{root}{code}.json"


class TestConstruction:
    """Test resolver construction (no I/O)."""

    def test_valid_code_kept(self, make_fetcher: MakeFetcher) -> None:
        """A supported code becomes the primary language."""
        fetcher = make_fetcher({})
        lang = LanguageData("ru", fetcher=fetcher)

        assert lang.language == "ru"
        assert lang.root == "/lang/"
        assert not lang.is_loaded
        assert fetcher.calls == []

    @pytest.mark.parametrize("code", [None, "", "xx", "RU", "en"])
    def test_invalid_code_uses_default(self, code: str | None) -> None:
        """Missing or unsupported codes fall back to English."""
        assert LanguageData(code).language == "uk"

    def test_invalid_code_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        """Recovering from an unsupported code is logged."""
        with caplog.at_level(logging.WARNING, logger="langfetch"):
            LanguageData("xx")

        assert "Unsupported language code 'xx'" in caplog.text

    def test_custom_root(self) -> None:
        """An explicit root replaces the default one."""
        assert LanguageData("ru", "/lang/user-profile/").root == "/lang/user-profile/"

    def test_detect_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """detect=True consults LANGFETCH_LANGUAGE before the default."""
        monkeypatch.setenv("LANGFETCH_LANGUAGE", "pl")

        assert LanguageData(detect=True).language == "pl"
        assert LanguageData().language == "uk"

    def test_explicit_code_beats_detection(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A valid explicit code is used even with detect=True."""
        monkeypatch.setenv("LANGFETCH_LANGUAGE", "pl")

        assert LanguageData("ru", detect=True).language == "ru"

    def test_library_root(self) -> None:
        """The library's own language folder is fixed."""
        assert LanguageData.get_library_root() == "/libs/balov/js/lang/"

    def test_repr(self) -> None:
        """repr shows language, root and load state."""
        assert repr(LanguageData("ru", "/x/")) == "LanguageData(language='ru', root='/x/', loaded=False)"


class TestLoadPlanning:
    """Test resolve_load_set and build_locations."""

    def test_load_set_primary_first(self) -> None:
        """Primary code comes first, then its fallbacks."""
        assert LanguageData("ua").resolve_load_set() == ("ua", "ru", "uk")

    def test_default_code_load_set(self) -> None:
        """English alone when it is the primary code."""
        assert LanguageData().resolve_load_set() == ("uk",)

    def test_duplicates_removed(self) -> None:
        """Duplicated and self-referencing fallbacks appear once."""
        custom = LanguageRegistry(
            codes=("a", "b", "c"),
            fallbacks={"a": ("b", "a", "c", "b")},
            default="c",
        )

        assert LanguageData("a", registry=custom).resolve_load_set() == ("a", "b", "c")

    def test_locations(self) -> None:
        """Locations are root + code + ".json" in load-set order."""
        lang = LanguageData("lt", "https://example.com/lang/")

        assert lang.build_locations() == (
            "https://example.com/lang/lt.json",
            "https://example.com/lang/lv.json",
            "https://example.com/lang/ru.json",
            "https://example.com/lang/uk.json",
        )


class TestMergePrecedence:
    """Test how loaded resources are merged."""

    @pytest.mark.asyncio
    async def test_primary_wins(self, make_fetcher: MakeFetcher) -> None:
        """Primary values override fallback values; fallbacks fill gaps."""
        fetcher = make_fetcher({"ru": {"a": "1"}, "uk": {"a": "2", "b": "3"}})
        lang = await LanguageData("ru", fetcher=fetcher).load()

        assert lang.get_all() == {"a": "1", "b": "3"}

    @pytest.mark.asyncio
    async def test_earlier_fallback_wins(self, make_fetcher: MakeFetcher) -> None:
        """Among fallbacks, earlier chain entries take precedence."""
        fetcher = make_fetcher({
            "ua": {"x": "ua"},
            "ru": {"x": "ru", "y": "ru"},
            "uk": {"x": "uk", "y": "uk", "z": "uk"},
        })
        lang = await LanguageData("ua", fetcher=fetcher).load()

        assert lang.get_all() == {"x": "ua", "y": "ru", "z": "uk"}

    @pytest.mark.asyncio
    async def test_missing_primary_file(self, make_fetcher: MakeFetcher) -> None:
        """A missing primary file falls through to the fallbacks."""
        fetcher = make_fetcher({"uk": {"a": "2"}})
        lang = await LanguageData("ru", fetcher=fetcher).load()

        assert lang.get_all() == {"a": "2"}
        assert lang.is_loaded

    @pytest.mark.asyncio
    async def test_all_fetches_fail(self, make_fetcher: MakeFetcher) -> None:
        """No resources at all yields an empty mapping, not an error."""
        fetcher = make_fetcher({}, errors={"ru": FetchError("boom", location=loc("ru"))})
        lang = await LanguageData("ru", fetcher=fetcher).load()

        assert lang.get_all() == {}
        assert lang.get("a") == ""

    @pytest.mark.asyncio
    async def test_malformed_resource_skipped(self, make_fetcher: MakeFetcher) -> None:
        """Documents that are not JSON objects contribute nothing."""
        fetcher = make_fetcher({"ua": "not json", "ru": '["a", "b"]', "uk": {"a": "en"}})
        lang = await LanguageData("ua", fetcher=fetcher).load()

        assert lang.get_all() == {"a": "en"}

    @pytest.mark.parametrize(
        "document", [HUGE_INTEGER_DOC, DEEPLY_NESTED_DOC], ids=["digits", "depth"]
    )
    @pytest.mark.asyncio
    async def test_undecodable_fallback_keeps_primary(
        self, make_fetcher: MakeFetcher, document: str
    ) -> None:
        """A fallback the decoder refuses is dropped; the primary still loads."""
        fetcher = make_fetcher({"ru": {"a": "1"}, "uk": document})
        lang = await LanguageData("ru", fetcher=fetcher).load()

        assert lang.get_all() == {"a": "1"}
        assert lang.get("a") == "1"
        assert lang.get_load_summary().get_by_language("uk")[0].is_invalid


class TestLoadSummary:
    """Test per-location load results."""

    @pytest.mark.asyncio
    async def test_statuses_recorded(self, make_fetcher: MakeFetcher) -> None:
        """Each location gets a result with the matching status."""
        fetcher = make_fetcher(
            {"ru": "{oops", "uk": {"a": "1", "b": "2"}},
            errors={"ua": FetchError("HTTP 500", location=loc("ua"), status_code=500)},
        )
        lang = await LanguageData("ua", fetcher=fetcher).load()
        summary = lang.get_load_summary()

        assert [r.status for r in summary.results] == [
            LoadStatus.ERROR,
            LoadStatus.INVALID,
            LoadStatus.SUCCESS,
        ]
        assert isinstance(summary.results[1].error, ParseError)
        assert summary.results[2].key_count == 2
        assert summary.has_errors
        assert not summary.all_successful
        assert repr(summary) == "LoadSummary(total=3, ok=1, not_found=0, errors=1, invalid=1)"

    @pytest.mark.asyncio
    async def test_missing_file_is_not_found(self, make_fetcher: MakeFetcher) -> None:
        """Missing resources are NOT_FOUND, not errors."""
        lang = await LanguageData("ru", fetcher=make_fetcher({"uk": {}})).load()
        summary = lang.get_load_summary()

        assert summary.not_found == 1
        assert summary.get_not_found()[0].location == "/lang/ru.json"
        assert not summary.has_errors

    def test_summary_empty_before_load(self) -> None:
        """No results exist before data is loaded."""
        assert LanguageData("ru").get_load_summary().total_attempted == 0

    @pytest.mark.asyncio
    async def test_fetch_failure_logged(self, make_fetcher: MakeFetcher, caplog: pytest.LogCaptureFixture) -> None:
        """Fetch errors are logged as warnings."""
        fetcher = make_fetcher({}, errors={"uk": FetchError("HTTP 500", location=loc("uk"))})

        with caplog.at_level(logging.WARNING, logger="langfetch"):
            await LanguageData("uk", fetcher=fetcher).load()

        assert "Failed to fetch language resource /lang/uk.json" in caplog.text


class TestSingleFlight:
    """Test coalescing and caching of loads."""

    @pytest.mark.asyncio
    async def test_concurrent_loads_fetch_once(self, make_fetcher: MakeFetcher) -> None:
        """Overlapping load() calls share one fetch per location."""
        fetcher = make_fetcher({"ru": {"a": "1"}, "uk": {"b": "2"}}, delay=0.01)
        lang = LanguageData("ru", fetcher=fetcher)

        first, second = await asyncio.gather(lang.load(), lang.load())

        assert first is second is lang
        assert sorted(fetcher.calls) == ["/lang/ru.json", "/lang/uk.json"]

    @pytest.mark.asyncio
    async def test_in_flight_marker_cleared(self, make_fetcher: MakeFetcher) -> None:
        """is_loading is true only while the load runs."""
        lang = LanguageData("ru", fetcher=make_fetcher({"ru": {}}, delay=0.01))

        task = asyncio.ensure_future(lang.load())
        await asyncio.sleep(0)
        assert lang.is_loading

        await task
        assert not lang.is_loading
        assert lang.is_loaded

    @pytest.mark.asyncio
    async def test_loaded_instance_not_refetched(self, make_fetcher: MakeFetcher) -> None:
        """Later loads and lookups are served from the cache."""
        fetcher = make_fetcher({"ru": {"a": "1"}, "uk": {}})
        lang = await LanguageData("ru", fetcher=fetcher).load()
        calls = list(fetcher.calls)

        await lang.load()
        await lang.prepare()
        await lang.wait_until_ready()
        lang.get("a")
        lang.get_all()

        assert fetcher.calls == calls

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_cancel_load(self, make_fetcher: MakeFetcher) -> None:
        """Cancelling one caller leaves the shared load running."""
        lang = LanguageData("uk", fetcher=make_fetcher({"uk": {"a": "1"}}, delay=0.02))

        waiter = asyncio.ensure_future(lang.load())
        await asyncio.sleep(0)
        waiter.cancel()
        await lang.wait_until_ready()

        assert lang.get("a") == "1"

    @pytest.mark.asyncio
    async def test_unexpected_error_allows_retry(self, make_fetcher: MakeFetcher) -> None:
        """An error outside the per-location recovery propagates and clears the marker."""
        fetcher = make_fetcher({"uk": {"a": "1"}}, errors={"uk": RuntimeError("transport bug")})
        lang = LanguageData("uk", fetcher=fetcher)

        with pytest.raises(RuntimeError, match="transport bug"):
            await lang.load()
        assert not lang.is_loading
        assert not lang.is_loaded

        fetcher.errors.clear()
        await lang.load()
        assert lang.get("a") == "1"


class TestReadyInstances:
    """Test the ready-instance constructors."""

    @pytest.mark.asyncio
    async def test_get_ready_instance(self, make_fetcher: MakeFetcher) -> None:
        """get_ready_instance returns a loaded resolver."""
        fetcher = make_fetcher({"ru": {"a": "1"}}, root="/lang/user-profile/")
        lang = await LanguageData.get_ready_instance("ru", "/lang/user-profile/", fetcher=fetcher)

        assert lang.is_loaded
        assert lang.get("a") == "1"

    @pytest.mark.asyncio
    async def test_get_ready_instance_by_class(self, make_fetcher: MakeFetcher) -> None:
        """Subclasses are built and loaded by class."""

        class ProfileLang(LanguageData):
            pass

        lang = await LanguageData.get_ready_instance_by_class(
            ProfileLang, "ru", fetcher=make_fetcher({"ru": {"a": "1"}})
        )

        assert isinstance(lang, ProfileLang)
        assert lang.get("a") == "1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("clss", [int, None, "LanguageData", LanguageData("ru")])
    async def test_get_ready_instance_by_bad_class(self, clss: object) -> None:
        """Anything other than a LanguageData class is rejected."""
        with pytest.raises(InvalidCallbackError):
            await LanguageData.get_ready_instance_by_class(clss, "ru")  # type: ignore[arg-type]


class TestAutoload:
    """Test background loading at construction."""

    @pytest.mark.asyncio
    async def test_autoload_starts_on_running_loop(self, make_fetcher: MakeFetcher) -> None:
        """autoload=True loads without an explicit call."""
        fetcher = make_fetcher({"ru": {"a": "1"}}, delay=0.01)
        lang = LanguageData("ru", fetcher=fetcher, autoload=True)

        await lang.wait_until_ready()
        await lang.load()

        assert lang.get("a") == "1"
        assert fetcher.calls.count("/lang/ru.json") == 1

    def test_autoload_without_loop_defers(self, make_fetcher: MakeFetcher) -> None:
        """Without a running loop nothing is fetched until first access."""
        fetcher = make_fetcher({"ru": {"a": "1"}})
        lang = LanguageData("ru", fetcher=fetcher, autoload=True)

        assert fetcher.calls == []
        assert lang.get("a") == "1"

    @pytest.mark.asyncio
    async def test_autoload_failure_logged_and_swallowed(
        self, make_fetcher: MakeFetcher, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Autoload failures become warnings, not crashes."""
        fetcher = make_fetcher({}, errors={"uk": RuntimeError("transport bug")})

        with caplog.at_level(logging.WARNING, logger="langfetch"):
            lang = LanguageData("uk", fetcher=fetcher, autoload=True)
            await asyncio.sleep(0.05)

        assert "Failed at autoloading language data: transport bug" in caplog.text
        assert not lang.is_loaded
