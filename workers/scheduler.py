"""
workers.scheduler
─────────────────
Background enrichment queue. The request path hands over the candidates that
still need a real summary and returns immediately; one consumer task works
through them in small concurrent batches with a pause in between, so bursts
of new articles don't hammer the page hosts or the LLM endpoint.

Each task is Enricher -> PersistenceWriter. A failed task is logged here and
left alone; the record keeps its placeholder (or stays absent) and the next
request that sees the URL schedules it again.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from core.Candidate import Candidate
from db.writer import PersistenceWriter
from resolvers.enricher import Enricher

logger = logging.getLogger(__name__)

@dataclass
class EnrichmentJob:
    candidates: List[Candidate]
    page_content: Dict[str, str] = field(default_factory=dict) # source_url -> text already extracted by the caller

class EnrichmentScheduler:
    def __init__(self, enricher: Enricher, writer: PersistenceWriter, batch_size: int = 2, pause: float = 1.0):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.enricher = enricher
        self.writer = writer
        self.batch_size = batch_size
        self.pause = pause
        self.processed = 0
        self.failed = 0
        self._queue: asyncio.Queue = asyncio.Queue()
        self._pending: Set[str] = set()
        self._consumer: Optional[asyncio.Task] = None
        self._last_batch_done: Optional[float] = None # loop time

    @property
    def pending(self) -> int:
        return len(self._pending)

    @property
    def running(self) -> bool:
        return self._consumer is not None and not self._consumer.done()

    def start(self) -> None:
        if self.running:
            return
        self._consumer = asyncio.create_task(self._consume(), name="enrichment-scheduler")
        logger.info(f"Enrichment scheduler started (batch_size={self.batch_size}, pause={self.pause}s)")

    def schedule(self, candidates: List[Candidate], page_content: Optional[Dict[str, str]] = None) -> int:
        """Queue candidates for enrichment without waiting; returns how many were accepted."""
        fresh = []
        for candidate in candidates:
            # already queued or in flight from an overlapping request
            if candidate.source_url in self._pending:
                continue
            self._pending.add(candidate.source_url)
            fresh.append(candidate)

        if fresh:
            self._queue.put_nowait(EnrichmentJob(fresh, dict(page_content or {})))
            logger.info(f"Scheduled {len(fresh)} candidates for enrichment ({len(candidates) - len(fresh)} already pending)")
        return len(fresh)

    async def join(self) -> None:
        await self._queue.join()

    async def stop(self) -> None:
        if self._consumer is None:
            return
        if not self._consumer.done():
            await self._queue.put(None) # poison pill
            await self._consumer
        self._consumer = None
        logger.info(f"Enrichment scheduler stopped (processed={self.processed}, failed={self.failed})")

    async def _consume(self) -> None:
        while True:
            job = await self._queue.get()
            try:
                if job is None:
                    break
                await self._run_job(job)
            except Exception:
                logger.exception("Enrichment job crashed")
            finally:
                if job is not None:
                    for candidate in job.candidates:
                        self._pending.discard(candidate.source_url)
                self._queue.task_done()

    async def _run_job(self, job: EnrichmentJob) -> None:
        loop = asyncio.get_running_loop()
        batches = [job.candidates[i:i + self.batch_size] for i in range(0, len(job.candidates), self.batch_size)]
        for batch in batches:
            # the pause is measured from the previous batch, whichever job it belonged to
            if self._last_batch_done is not None and self.pause > 0:
                wait = self.pause - (loop.time() - self._last_batch_done)
                if wait > 0:
                    await asyncio.sleep(wait)
            try:
                results = await asyncio.gather(
                    *(self._enrich_one(c, job.page_content.get(c.source_url)) for c in batch),
                    return_exceptions=True,
                )
            finally:
                self._last_batch_done = loop.time()
            for candidate, result in zip(batch, results):
                self._pending.discard(candidate.source_url)
                if isinstance(result, BaseException):
                    self.failed += 1
                    logger.error(f"Enrichment failed for {candidate.source_url}: {result!r}", exc_info=result)
                elif result:
                    self.processed += 1
                else:
                    self.failed += 1

    async def _enrich_one(self, candidate: Candidate, page_content: Optional[str]) -> bool:
        result = await self.enricher.summarize(candidate, page_content)
        # storage errors are logged by the writer; the record keeps its old state until the next request
        record = await self.writer.upsert_safely(candidate, result.summary, result.is_placeholder)
        if record is None:
            return False
        logger.debug(f"Stored {result.source} summary for {record.source_url} (id={record.id})")
        return True
