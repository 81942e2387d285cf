"""Shared fixtures: throwaway sqlite store, candidate factory, mocked http and LLM."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional

import httpx
import pytest

from config.config import Settings
from core.Candidate import Candidate
from db.database import make_engine
from db.init_db import init_db
from db.repository import ArticleRepository
from services.llm import SummarizerUnavailable

ABSTRACT = (
    "We study how small language models can be distilled from larger ones while keeping "
    "most of their reasoning ability, and report results on three public benchmarks."
)


class FakeSummarizer:
    """Stands in for the LLM collaborator; records every call."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: List[tuple] = []

    @property
    def enabled(self) -> bool:
        return True

    async def summarize(self, title: str, text: str, max_words: int) -> str:
        self.calls.append((title, text, max_words))
        if self.fail:
            raise SummarizerUnavailable("llm down")
        return f"Summary of {title}"

    async def close(self) -> None:
        pass


class RecordingTransport:
    """MockTransport handler that remembers requested urls and answers from a route table."""

    def __init__(self, routes: Optional[dict] = None, default: Optional[Callable[[httpx.Request], httpx.Response]] = None) -> None:
        self.routes = routes or {}
        self.default = default
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url).split("?")[0]
        route = self.routes.get(url)
        if callable(route):
            return route(request)
        if route is not None:
            return route
        if self.default is not None:
            return self.default(request)
        return httpx.Response(404, text="not found")

    @property
    def urls(self) -> List[str]:
        return [str(r.url) for r in self.requests]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'articles.db'}",
        NEWSAPI_KEY=None,
        LLM_API_KEY=None,
        MAX_RETRIES=1,
        RETRY_MIN_WAIT=0,
        RETRY_MAX_WAIT=0,
        SOURCE_TIMEOUT=5.0,
        PAGE_FETCH_TIMEOUT=5.0,
        ENRICH_BATCH_PAUSE=0,
        SHUFFLE_RESULTS=False,
    )


@pytest.fixture
def engine(settings: Settings) -> Iterable[Any]:
    engine = make_engine(settings.DATABASE_URL)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def repository(engine) -> ArticleRepository:
    return ArticleRepository(engine)


@pytest.fixture
def make_candidate() -> Callable[..., Candidate]:
    def _builder(url: str = "https://example.com/a", **overrides: Any) -> Candidate:
        base: dict[str, Any] = {
            "title": "Paper A",
            "source_url": url,
            "provider": "arXiv",
            "category": "Education",
            "raw_abstract": None,
        }
        base.update(overrides)
        return Candidate(**base)

    return _builder


@pytest.fixture
def summarizer() -> FakeSummarizer:
    return FakeSummarizer()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)
