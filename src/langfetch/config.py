"""Resolver configuration.

Provides a single frozen dataclass carrying everything needed to build a
LanguageData resolver, so callers can keep one configuration per site
section and hand it to a factory instead of subclassing.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from langfetch.constants import (
    DEFAULT_ROOT,
    DEFAULT_TIMEOUT,
    ENV_AUTOLOAD,
    ENV_LANGUAGE,
    ENV_ROOT,
    ENV_TIMEOUT,
)

__all__ = ["ResolverConfig"]

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, slots=True)
class ResolverConfig:
    """Immutable configuration for a LanguageData resolver.

    Attributes:
        root: Prefix of language resource locations (URL or directory,
            normally ending with a separator). Locations are root + code + ".json".
        language: Primary language code. None or an unsupported code makes
            the resolver use the registry default.
        autoload: Start loading in the background right after construction
        timeout: Per-request timeout in seconds for HTTP fetchers

    Example:
        >>> config = ResolverConfig(root="https://cdn.example.com/lang/profile/", language="ru")
        >>> resolver = LanguageData.from_config(config)
    """

    root: str = DEFAULT_ROOT
    language: str | None = None
    autoload: bool = False
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If root is empty or timeout is not positive
        """
        if not self.root:
            msg = "root must be a non-empty location prefix"
            raise ValueError(msg)
        if self.timeout <= 0:
            msg = f"timeout must be positive, got {self.timeout}"
            raise ValueError(msg)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ResolverConfig:
        """Build a configuration from LANGFETCH_* environment variables.

        Variables:
            LANGFETCH_ROOT: resource root (default "/lang/")
            LANGFETCH_LANGUAGE: primary language code
            LANGFETCH_AUTOLOAD: "1", "true", "yes" or "on" enables autoload
            LANGFETCH_TIMEOUT: request timeout in seconds

        Raises:
            ValueError: If LANGFETCH_TIMEOUT is not a positive number
        """
        env = os.environ if environ is None else environ
        timeout_raw = env.get(ENV_TIMEOUT)
        return cls(
            root=env.get(ENV_ROOT) or DEFAULT_ROOT,
            language=env.get(ENV_LANGUAGE) or None,
            autoload=env.get(ENV_AUTOLOAD, "").strip().lower() in _TRUE_VALUES,
            timeout=float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT,
        )
