"""
core.pipeline
─────────────
One page of the feed, end to end:

    sources -> merge -> cache lookup -> summaries attached -> page
                                     +-> background enrichment (new / placeholder-only)

The foreground path only reads: cached summaries for known articles and a
zero-io placeholder for new ones. Scraping, LLM calls and writes all happen
on the scheduler after the page has been returned.
"""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from api.assembler import ArticleItem, assemble_page
from config.config import Settings
from dedupe import CacheLookup, Resolution, merge_candidates
from resolvers.enricher import Enricher
from searchers.meta_searcher import MetaSearcher
from workers.scheduler import EnrichmentScheduler

logger = logging.getLogger(__name__)

def clamp_limit(limit: Optional[int], settings: Settings) -> int:
    if limit is None:
        return settings.MAX_PER_SOURCE
    return max(1, min(int(limit), settings.MAX_PER_SOURCE))

class ArticlePipeline:
    def __init__(
        self,
        searcher: MetaSearcher,
        cache: CacheLookup,
        enricher: Enricher,
        scheduler: Optional[EnrichmentScheduler],
        settings: Settings,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.searcher = searcher
        self.cache = cache
        self.enricher = enricher
        self.scheduler = scheduler
        self.settings = settings
        self.rng = rng

    async def fetch_page(self, limit: int, generate_summaries: bool = True, shuffle: Optional[bool] = None) -> Dict[str, Any]:
        limit = clamp_limit(limit, self.settings)
        if shuffle is None:
            shuffle = self.settings.SHUFFLE_RESULTS

        candidates = merge_candidates(await self.searcher.fetch_all(limit, shuffle=shuffle, rng=self.rng))

        try:
            resolution = await self.cache.resolve(candidates)
        except SQLAlchemyError:
            logger.exception("Cache lookup failed, treating every candidate as new")
            resolution = Resolution(new=list(candidates))

        records = {c.source_url: r for c, r in resolution.known}
        now = datetime.now(timezone.utc)
        items = []
        for candidate in candidates:
            record = records.get(candidate.source_url)
            if record is not None and record.summary:
                summary = record.summary
            else:
                summary = self.enricher.placeholder(candidate).summary
            items.append(ArticleItem.from_candidate(candidate, summary, record, now))

        page = assemble_page(items)

        stale = resolution.needs_enrichment
        if generate_summaries and self.scheduler is not None and stale:
            self.scheduler.schedule(stale)
        logger.info(
            f"Page assembled: {len(items)} articles, {len(resolution.known)} cached, "
            f"{len(stale)} need enrichment{'' if generate_summaries else ' (not scheduled)'}"
        )
        return page
