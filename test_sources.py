import asyncio
import logging

import httpx

from external import ArxivAPI, HackerNewsAPI, NewsAPIBusiness, OpenAlexAPI, ScienceDailyRSS, build_sources
from external.base import BUSINESS, EDUCATION, SCIENCE, TECHNOLOGY, BaseSource
from external.openalex import full_text_url, rebuild_abstract

from conftest import ABSTRACT, RecordingTransport, mock_client

ATOM = f"""<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>arXiv Query</title>
  <entry>
    <id>http://arxiv.org/abs/2401.00001v1</id>
    <title>Distilling  Reasoning
      Models</title>
    <summary>  {ABSTRACT}  </summary>
    <link href="http://arxiv.org/abs/2401.00001v1" rel="alternate" type="text/html"/>
    <link title="pdf" href="http://arxiv.org/pdf/2401.00001v1" rel="related" type="application/pdf"/>
  </entry>
  <entry>
    <id>http://arxiv.org/abs/2401.00002v1</id>
    <title>Second Paper</title>
    <summary>Short.</summary>
    <link href="http://arxiv.org/abs/2401.00002v1" rel="alternate" type="text/html"/>
  </entry>
</feed>
"""

RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>ScienceDaily: Top Science News</title>
    <item>
      <title>Reefs recover faster than expected</title>
      <link>https://www.sciencedaily.com/releases/2024/03/240303120000.htm</link>
      <description>Coral &lt;b&gt;reefs&lt;/b&gt; bounce back after bleaching.</description>
    </item>
    <item>
      <title>No link here</title>
      <description>Dropped, there is nothing to key it on.</description>
    </item>
  </channel>
</rss>
"""


def _run(source_cls, transport, settings, limit=10, **kwargs):
    async def go():
        async with mock_client(transport) as client:
            return await source_cls(client, settings, **kwargs).fetch(limit)
    return asyncio.run(go())


def test_arxiv_parses_atom_and_prefers_pdf_links(settings):
    transport = RecordingTransport({
        ArxivAPI.BASE: lambda r: httpx.Response(200, text=ATOM),
    })
    candidates = _run(ArxivAPI, transport, settings)

    assert [c.source_url for c in candidates] == [
        "http://arxiv.org/pdf/2401.00001v1",
        "https://arxiv.org/pdf/2401.00002v1.pdf",
    ]
    first = candidates[0]
    assert first.title == "Distilling Reasoning Models"
    assert first.raw_abstract == ABSTRACT
    assert first.provider == "arXiv"
    assert first.category == EDUCATION

    params = transport.requests[0].url.params
    assert params["search_query"] == "cat:cs.AI"
    assert params["sortBy"] == "submittedDate"
    assert params["max_results"] == "10"


def test_arxiv_malformed_payload_is_empty(settings):
    transport = RecordingTransport({
        ArxivAPI.BASE: lambda r: httpx.Response(200, text="<<< definitely not xml"),
    })
    assert _run(ArxivAPI, transport, settings) == []


def test_openalex_abstract_and_url_selection(settings):
    assert rebuild_abstract({"world": [1], "Hello": [0], "again": [2]}) == "Hello world again"
    assert rebuild_abstract(None) is None

    assert full_text_url({"open_access": {"oa_url": "https://oa.example/1"}, "doi": "10.1/x"}) == "https://oa.example/1"
    assert full_text_url({"primary_location": {"pdf_url": "https://pdf.example/1.pdf"}}) == "https://pdf.example/1.pdf"
    assert full_text_url({"locations": [None, {"landing_page_url": "https://landing.example"}]}) == "https://landing.example"
    assert full_text_url({"doi": "10.1/x"}) == "https://doi.org/10.1/x"
    assert full_text_url({}) is None

    work = {
        "display_name": "Open  Work",
        "open_access": {"oa_url": "https://oa.example/work"},
        "abstract_inverted_index": {"Open": [0], "science": [1]},
    }
    transport = RecordingTransport({
        OpenAlexAPI.BASE: lambda r: httpx.Response(200, json={"results": [work, {"display_name": "no url"}]}),
    })
    candidates = _run(OpenAlexAPI, transport, settings)

    assert len(candidates) == 1
    assert candidates[0].title == "Open Work"
    assert candidates[0].raw_abstract == "Open science"
    assert candidates[0].category == SCIENCE
    assert transport.requests[0].url.params["mailto"] == settings.CONTACT_EMAIL


def test_hackernews_skips_failed_items(settings):
    item = "https://hacker-news.firebaseio.com/v0/item/{}.json"
    transport = RecordingTransport({
        HackerNewsAPI.TOP_STORIES: lambda r: httpx.Response(200, json=[1, 2, 3, 4]),
        item.format(1): lambda r: httpx.Response(200, json={"id": 1, "title": "Show HN: a thing", "url": "https://thing.example"}),
        item.format(2): lambda r: httpx.Response(500, text="boom"),
        item.format(3): lambda r: httpx.Response(200, json={"id": 3, "title": "Ask HN: anything?"}),
    })
    candidates = _run(HackerNewsAPI, transport, settings, limit=3)

    assert [c.source_url for c in candidates] == [
        "https://thing.example",
        "https://news.ycombinator.com/item?id=3",
    ]
    assert all(c.category == TECHNOLOGY for c in candidates)
    # only `limit` items are requested
    assert item.format(4) not in transport.urls


def test_sciencedaily_rss(settings):
    transport = RecordingTransport({
        ScienceDailyRSS.FEED: lambda r: httpx.Response(200, text=RSS),
    })
    candidates = _run(ScienceDailyRSS, transport, settings)

    assert len(candidates) == 1
    assert candidates[0].raw_abstract == "Coral reefs bounce back after bleaching."
    assert candidates[0].category == SCIENCE


def test_newsapi_without_key_is_disabled_and_logs_once(settings, caplog):
    caplog.set_level(logging.WARNING)
    transport = RecordingTransport()

    async def go():
        async with mock_client(transport) as client:
            source = NewsAPIBusiness(client, settings)
            return await source.fetch(5), await source.fetch(5)

    first, second = asyncio.run(go())

    assert first == [] and second == []
    assert transport.requests == []
    assert sum("missing credentials" in r.getMessage() for r in caplog.records) == 1


def test_newsapi_with_key(settings):
    settings = settings.model_copy(update={"NEWSAPI_KEY": "secret"})
    payload = {
        "status": "ok",
        "articles": [
            {"title": "[Removed]", "url": "https://removed.com"},
            {"title": "Markets rally", "url": "https://news.example.com/markets", "description": "Stocks closed higher."},
            {"title": "No url", "url": None},
        ],
    }
    transport = RecordingTransport({
        NewsAPIBusiness.BASE: lambda r: httpx.Response(200, json=payload),
    })
    candidates = _run(NewsAPIBusiness, transport, settings)

    assert [c.title for c in candidates] == ["Markets rally"]
    assert candidates[0].category == BUSINESS
    request = transport.requests[0]
    assert request.headers["X-Api-Key"] == "secret"
    assert request.url.params["category"] == "business"


def test_provider_errors_become_empty_results(settings):
    settings = settings.model_copy(update={"NEWSAPI_KEY": "secret"})
    error_payload = RecordingTransport({
        NewsAPIBusiness.BASE: lambda r: httpx.Response(200, json={"status": "error", "code": "apiKeyInvalid", "message": "bad key"}),
    })
    server_error = RecordingTransport({
        NewsAPIBusiness.BASE: lambda r: httpx.Response(503, text="unavailable"),
    })

    def unreachable(request):
        raise httpx.ConnectError("connection refused", request=request)

    assert _run(NewsAPIBusiness, error_payload, settings) == []
    assert _run(NewsAPIBusiness, server_error, settings) == []
    assert _run(NewsAPIBusiness, RecordingTransport(default=unreachable), settings) == []


class SlowSource(BaseSource):
    name = "slow"

    async def _fetch(self, limit):
        await asyncio.sleep(1)
        return []


def test_source_timeout_is_swallowed(settings):
    settings = settings.model_copy(update={"SOURCE_TIMEOUT": 0.05})
    assert _run(SlowSource, RecordingTransport(), settings) == []


def test_non_positive_limit_fetches_nothing(settings):
    transport = RecordingTransport()
    assert _run(ArxivAPI, transport, settings, limit=0) == []
    assert transport.requests == []


def test_registration_order(settings):
    async def go():
        async with mock_client(RecordingTransport()) as client:
            return [s.name for s in build_sources(client, settings)]

    assert asyncio.run(go()) == ["arXiv", "OpenAlex", "Hacker News", "ScienceDaily", "NewsAPI Business"]
