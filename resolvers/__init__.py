"""
ResolverManager - central lookup that tries a
stack of concrete text resolvers in priority order.
"""

from __future__ import annotations
from typing import List, Optional
import logging

import httpx

from config.config import Settings
from core.Candidate import Candidate
from resolvers.base import BaseResolver, Resolved
from resolvers.abstract_resolver import AbstractResolver
from resolvers.content_resolver import PageContentResolver
from resolvers.scrape_resolver import ScrapeResolver

logger = logging.getLogger(__name__)

class ResolverManager:
    """
    Try each registered resolver in order until one returns usable text.
    """

    def __init__(self, chain: List[BaseResolver]) -> None:
        self._chain = chain

    @classmethod
    def default(cls, client: httpx.AsyncClient, settings: Settings) -> "ResolverManager":
        # specify the order here, cheapest first
        return cls([
            AbstractResolver(settings),
            PageContentResolver(settings),
            ScrapeResolver(client, settings),
        ])

    async def resolve(self, candidate: Candidate, page_content: Optional[str] = None) -> Optional[Resolved]:
        for resolver in self._chain:
            try:
                result = await resolver.resolve(candidate, page_content)
                if result:
                    return result
            except Exception as exc:
                logger.warning(f"[resolver:{resolver.name}] {exc}")
        return None

__all__ = ["BaseResolver", "Resolved", "ResolverManager"]
