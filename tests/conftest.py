"""Pytest configuration for the langfetch test suite.

Single Source of Truth for Hypothesis max_examples:
- dev: Local development with 200 examples (thorough property testing)
- ci: CI runs with 50 examples (fast feedback)
- verbose: Debug mode with progress output (100 examples)

Profile auto-detection:
- CI=true environment variable -> "ci" profile
- HYPOTHESIS_PROFILE env var -> explicit override
- Otherwise -> "dev" profile (local development)

Override manually: HYPOTHESIS_PROFILE=verbose pytest tests/

Shared fixtures:
- make_fetcher: builds an in-memory FakeFetcher from code -> mapping data
"""

from __future__ import annotations

import asyncio
import json
import os
from collections.abc import Callable, Mapping
from typing import Any

import pytest
from hypothesis import HealthCheck, Phase, Verbosity, settings

from langfetch.constants import DEFAULT_ROOT, FILE_EXTENSION
from langfetch.errors import ResourceNotFoundError

# =============================================================================
# HYPOTHESIS PROFILES - SINGLE SOURCE OF TRUTH
# =============================================================================

settings.register_profile(
    "dev",
    max_examples=200,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)

settings.register_profile(
    "ci",
    max_examples=50,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=True,
    print_blob=True,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)

settings.register_profile(
    "verbose",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    verbosity=Verbosity.verbose,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)


def _detect_profile() -> str:
    """Detect appropriate Hypothesis profile based on execution context.

    Priority:
    1. HYPOTHESIS_PROFILE env var (explicit override)
    2. CI=true env var
    3. Default to "dev" (local development)
    """
    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit
    if os.environ.get("CI") == "true":
        return "ci"
    return "dev"


settings.load_profile(_detect_profile())


# =============================================================================
# FAKE FETCHER
# =============================================================================


class FakeFetcher:
    """In-memory ResourceFetcher recording every requested location.

    Attributes:
        files: Location -> raw text
        errors: Location -> exception raised instead of returning text
        delay: Seconds afetch() sleeps before answering
        calls: Locations requested, in order (both fetch paths)
    """

    def __init__(
        self,
        files: Mapping[str, str],
        *,
        errors: Mapping[str, Exception] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.files = dict(files)
        self.errors = dict(errors or {})
        self.delay = delay
        self.calls: list[str] = []

    def _get(self, location: str) -> str:
        self.calls.append(location)
        if location in self.errors:
            raise self.errors[location]
        try:
            return self.files[location]
        except KeyError:
            raise ResourceNotFoundError(f"missing: {location}", location=location) from None

    def fetch(self, location: str) -> str:
        return self._get(location)

    async def afetch(self, location: str) -> str:
        if self.delay:
            await asyncio.sleep(self.delay)
        return self._get(location)


def location(code: str, root: str = DEFAULT_ROOT) -> str:
    """Location of a language resource under root."""
    return f"{root}{code}{FILE_EXTENSION}"


type MakeFetcher = Callable[..., FakeFetcher]


@pytest.fixture
def make_fetcher() -> MakeFetcher:
    """Factory for FakeFetcher keyed by language code.

    Values may be mappings (serialized as JSON) or raw strings (served as-is,
    for malformed documents). ``errors`` maps codes to exceptions.

    Example:
        fetcher = make_fetcher({"ru": {"a": "1"}, "uk": "not json"})
    """

    def factory(
        data: Mapping[str, Mapping[str, Any] | str],
        *,
        root: str = DEFAULT_ROOT,
        errors: Mapping[str, Exception] | None = None,
        delay: float = 0.0,
    ) -> FakeFetcher:
        files = {
            location(code, root): body if isinstance(body, str) else json.dumps(body)
            for code, body in data.items()
        }
        located_errors = {location(code, root): e for code, e in (errors or {}).items()}
        return FakeFetcher(files, errors=located_errors, delay=delay)

    return factory
