"""
external
────────
Thin async adapters around the external content providers. Every adapter
implements `fetch(limit) -> list[Candidate]` and never raises.

The set is closed: `build_sources` registers them in a fixed order, which is
also the order the aggregator concatenates their results in.
"""

from typing import List

import httpx

from config.config import Settings
from .base import BaseSource, CATEGORIES
from .arxiv import ArxivAPI
from .openalex import OpenAlexAPI
from .hackernews import HackerNewsAPI
from .sciencedaily import ScienceDailyRSS
from .newsapi import NewsAPIBusiness

# specify the order here
_SOURCE_CLASSES = [
    ArxivAPI,
    OpenAlexAPI,
    HackerNewsAPI,
    ScienceDailyRSS,
    NewsAPIBusiness,
]

def build_sources(client: httpx.AsyncClient, settings: Settings) -> List[BaseSource]:
    return [cls(client, settings) for cls in _SOURCE_CLASSES]

__all__ = [
    "ArxivAPI",
    "BaseSource",
    "CATEGORIES",
    "HackerNewsAPI",
    "NewsAPIBusiness",
    "OpenAlexAPI",
    "ScienceDailyRSS",
    "build_sources",
]
