"""Caller-held cache of resolvers, one per site section.

Pages often need several independent sets of strings (user profile, forum,
checkout), each under its own root. Instead of one subclass or singleton per
section, callers keep a ResolverCache and ask it for the section's resolver;
the first request builds it from the section's ResolverConfig and later
requests return the same instance, so each section loads its data once.

Python 3.13+.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import TYPE_CHECKING

from langfetch.resolver import LanguageData

if TYPE_CHECKING:
    from langfetch.config import ResolverConfig
    from langfetch.loading import ResourceFetcher
    from langfetch.registry import LanguageRegistry

__all__ = ["ResolverCache"]


class ResolverCache:
    """Mapping of section name to LanguageData resolver.

    Example:
        >>> cache = ResolverCache({
        ...     "profile": ResolverConfig(root="https://example.com/lang/profile/", language="ru"),
        ...     "forum": ResolverConfig(root="https://example.com/lang/forum/", language="ru"),
        ... })
        >>> profile = await cache.get_ready("profile")
        >>> profile is cache.get_or_create("profile")
        True
    """

    __slots__ = ("_configs", "_factory", "_fetcher", "_lock", "_registry", "_resolvers")

    def __init__(
        self,
        configs: Mapping[str, ResolverConfig] | None = None,
        *,
        factory: type[LanguageData] = LanguageData,
        registry: LanguageRegistry | None = None,
        fetcher: ResourceFetcher | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            configs: Known sections and their configurations
            factory: LanguageData class (or subclass) used to build resolvers
            registry: Registry passed to every resolver (default registry if None)
            fetcher: Fetcher passed to every resolver (chosen per root if None)
        """
        self._configs: dict[str, ResolverConfig] = dict(configs or {})
        self._factory = factory
        self._registry = registry
        self._fetcher = fetcher
        self._resolvers: dict[str, LanguageData] = {}
        self._lock = threading.Lock()

    def register(self, section: str, config: ResolverConfig) -> None:
        """Add or replace the configuration of a section.

        Replacing a configuration drops the section's cached resolver.
        """
        with self._lock:
            self._configs[section] = config
            self._resolvers.pop(section, None)

    def get_or_create(self, section: str, config: ResolverConfig | None = None) -> LanguageData:
        """Return the section's resolver, building it on first request.

        Args:
            section: Section name
            config: Configuration to register if the section is unknown

        Raises:
            KeyError: If the section is unknown and no config is given
        """
        with self._lock:
            resolver = self._resolvers.get(section)
            if resolver is not None:
                return resolver

            if config is not None and section not in self._configs:
                self._configs[section] = config
            try:
                section_config = self._configs[section]
            except KeyError:
                msg = f"No configuration registered for section '{section}'"
                raise KeyError(msg) from None

            resolver = self._factory.from_config(
                section_config, registry=self._registry, fetcher=self._fetcher
            )
            self._resolvers[section] = resolver
            return resolver

    async def get_ready(self, section: str, config: ResolverConfig | None = None) -> LanguageData:
        """Return the section's resolver once its data is loaded."""
        return await self.get_or_create(section, config).prepare()

    def clear(self) -> None:
        """Forget all built resolvers. Registered configurations are kept."""
        with self._lock:
            self._resolvers.clear()

    def __contains__(self, section: object) -> bool:
        return section in self._resolvers

    def __len__(self) -> int:
        return len(self._resolvers)
