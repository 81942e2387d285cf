import asyncio
import random

from external.base import BaseSource
from searchers.meta_searcher import MetaSearcher, shuffle_candidates


class StaticSource(BaseSource):
    def __init__(self, settings, name, urls):
        super().__init__(client=None, settings=settings)
        self.name = name
        self.urls = urls

    async def _fetch(self, limit):
        return [self.make_candidate(f"{self.name} {i}", url) for i, url in enumerate(self.urls)]


class BrokenSource(BaseSource):
    name = "broken"

    async def _fetch(self, limit):
        raise ConnectionError("provider is down")


class MisbehavingSource:
    """Ignores the never-raise contract entirely."""

    async def fetch(self, limit):
        raise RuntimeError("unexpected")


def test_two_of_four_sources_failing(settings):
    a = StaticSource(settings, "a", ["https://a/1", "https://a/2"])
    b = StaticSource(settings, "b", ["https://b/1"])
    searcher = MetaSearcher([a, BrokenSource(None, settings), b, MisbehavingSource()])

    candidates = asyncio.run(searcher.fetch_all(10))

    assert [c.source_url for c in candidates] == ["https://a/1", "https://a/2", "https://b/1"]


def test_sources_run_concurrently(settings):
    class SleepySource(StaticSource):
        async def _fetch(self, limit):
            await asyncio.sleep(0.2)
            return await super()._fetch(limit)

    sources = [SleepySource(settings, str(i), [f"https://{i}/x"]) for i in range(5)]

    async def go():
        loop = asyncio.get_running_loop()
        started = loop.time()
        result = await MetaSearcher(sources).fetch_all(10)
        return result, loop.time() - started

    result, elapsed = asyncio.run(go())
    assert len(result) == 5
    assert elapsed < 0.8


def test_limit_is_applied_per_source(settings):
    a = StaticSource(settings, "a", [f"https://a/{i}" for i in range(5)])
    b = StaticSource(settings, "b", [f"https://b/{i}" for i in range(5)])
    candidates = asyncio.run(MetaSearcher([a, b]).fetch_all(2))
    assert [c.source_url for c in candidates] == ["https://a/0", "https://a/1", "https://b/0", "https://b/1"]


def test_shuffle_is_a_seeded_permutation(settings, make_candidate):
    items = [make_candidate(f"https://x/{i}") for i in range(20)]

    shuffled = shuffle_candidates(items, random.Random(7))

    assert sorted(c.source_url for c in shuffled) == sorted(c.source_url for c in items)
    assert shuffled != items
    assert shuffled == shuffle_candidates(items, random.Random(7))
    # input is left alone
    assert items[0].source_url == "https://x/0"

    source = StaticSource(settings, "a", [c.source_url for c in items])
    fetched = asyncio.run(MetaSearcher([source]).fetch_all(20, shuffle=True, rng=random.Random(7)))
    assert [c.source_url for c in fetched] == [c.source_url for c in shuffle_candidates(
        [source.make_candidate(f"a {i}", c.source_url) for i, c in enumerate(items)], random.Random(7))]
