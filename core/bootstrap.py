"""
Wire the pipeline's collaborators once per process and tear them down again.

    async with open_pipeline(settings) as pipeline:
        page = await pipeline.fetch_page(10)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from config.config import Settings
from core.pipeline import ArticlePipeline
from db.database import make_engine
from db.init_db import init_db
from db.repository import ArticleRepository
from db.writer import PersistenceWriter
from dedupe import CacheLookup
from external import build_sources
from resolvers import ResolverManager
from resolvers.enricher import Enricher
from searchers.meta_searcher import MetaSearcher
from services.llm import LLMSummarizer
from utils.http import build_client
from workers.scheduler import EnrichmentScheduler

logger = logging.getLogger(__name__)

@asynccontextmanager
async def open_pipeline(settings: Settings) -> AsyncIterator[ArticlePipeline]:
    client = build_client(settings)
    engine = make_engine(settings.DATABASE_URL)
    summarizer = LLMSummarizer(settings)
    scheduler = None
    try:
        init_db(engine)
        repository = ArticleRepository(engine)
        enricher = Enricher(ResolverManager.default(client, settings), summarizer, settings)
        scheduler = EnrichmentScheduler(
            enricher,
            PersistenceWriter(repository),
            batch_size=settings.ENRICH_BATCH_SIZE,
            pause=settings.ENRICH_BATCH_PAUSE,
        )
        scheduler.start()
        pipeline = ArticlePipeline(
            searcher=MetaSearcher(build_sources(client, settings)),
            cache=CacheLookup(repository),
            enricher=enricher,
            scheduler=scheduler,
            settings=settings,
        )
        logger.info(f"Pipeline ready ({len(pipeline.searcher.sources)} sources, LLM {'on' if summarizer.enabled else 'off'})")
        yield pipeline
    finally:
        # queued enrichment finishes before the shared clients go away
        if scheduler is not None:
            await scheduler.stop()
        await summarizer.close()
        await client.aclose()
        engine.dispose()
