"""LanguageData Example - Fallback-Chained Language Data.

Demonstrates real-world usage of LanguageData for partially translated
sites:

1. Ukrainian page falling back to Russian and English
2. Watching which resources loaded (LoadSummary)
3. Many sections of one site sharing a ResolverCache
4. A custom fetcher (in-memory, e.g. a database or CMS)

Language files are written to a temporary directory, so the example runs
without a web server. For remote files, use an "https://" root.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import json
import logging
import tempfile
from pathlib import Path

from langfetch import LanguageData, ResolverCache, ResolverConfig
from langfetch.errors import ResourceNotFoundError


def write_files(root: Path, files: dict[str, dict[str, str]]) -> str:
    """Write code -> mapping as root/<code>.json and return the root prefix."""
    root.mkdir(parents=True, exist_ok=True)
    for code, data in files.items():
        (root / f"{code}.json").write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return f"{root}/"


async def example_1_fallback_chain(base: Path) -> None:
    """Example 1: ua -> ru -> uk fallback."""
    print("=" * 60)
    print("Example 1: Fallback Chain (ua -> ru -> uk)")
    print("=" * 60)

    root = write_files(base / "profile", {
        "ua": {"achievements": "Досягнення"},
        "ru": {"achievements": "Достижения", "articles": "Статьи"},
        "uk": {"achievements": "Achievements", "articles": "Articles", "friends": "Friends"},
    })

    lang = await LanguageData.get_ready_instance("ua", root)

    print(f"\nLoad set: {lang.resolve_load_set()}")
    for key in ("achievements", "articles", "friends", "missing"):
        print(f"  {key}: {lang.get(key)!r}")


async def example_2_load_summary(base: Path) -> None:
    """Example 2: Inspecting load results."""
    print("\n" + "=" * 60)
    print("Example 2: Load Summary")
    print("=" * 60)

    root = write_files(base / "forum", {"lt": {"reply": "Atsakyti"}, "uk": {"reply": "Reply"}})
    (base / "forum" / "lv.json").write_text("{not json", encoding="utf-8")

    lang = await LanguageData("lt", root).load()
    summary = lang.get_load_summary()

    print(f"\n{summary!r}")
    for result in summary.results:
        print(f"  {result.language}: {result.status}")


async def example_3_sections(base: Path) -> None:
    """Example 3: One resolver per site section."""
    print("\n" + "=" * 60)
    print("Example 3: ResolverCache")
    print("=" * 60)

    cache = ResolverCache({
        "profile": ResolverConfig(root=f"{base / 'profile'}/", language="ru"),
        "forum": ResolverConfig(root=f"{base / 'forum'}/", language="ru"),
    })

    profile, forum = await asyncio.gather(cache.get_ready("profile"), cache.get_ready("forum"))
    print(f"\n  profile.articles: {profile.get('articles')}")
    print(f"  forum.reply: {forum.get('reply')}")
    print(f"  same instance on reuse: {profile is cache.get_or_create('profile')}")


async def example_4_custom_fetcher() -> None:
    """Example 4: Serving language data from memory."""
    print("\n" + "=" * 60)
    print("Example 4: Custom Fetcher")
    print("=" * 60)

    class MemoryFetcher:
        def __init__(self, files: dict[str, dict[str, str]]) -> None:
            self.files = files

        def fetch(self, location: str) -> str:
            try:
                return json.dumps(self.files[location])
            except KeyError:
                raise ResourceNotFoundError(f"missing: {location}", location=location) from None

        async def afetch(self, location: str) -> str:
            return self.fetch(location)

    fetcher = MemoryFetcher({"cms:pl.json": {"cart": "Koszyk"}, "cms:uk.json": {"cart": "Cart", "pay": "Pay"}})
    lang = await LanguageData.get_ready_instance("pl", "cms:", fetcher=fetcher)

    print()
    for line in lang.map(lambda value, key, _data: f"  {key}: {value}"):
        print(line)


async def main() -> None:
    with tempfile.TemporaryDirectory() as tmp_dir:
        base = Path(tmp_dir)
        await example_1_fallback_chain(base)
        await example_2_load_summary(base)
        await example_3_sections(base)
    await example_4_custom_fetcher()

    print("\n" + "=" * 60)
    print("[SUCCESS] All examples complete!")
    print("=" * 60)


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(main())
