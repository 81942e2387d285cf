"""
dedupe.cache_lookup
───────────────────
Split a batch of candidates into the ones we already have a record for and
the new ones, using a single batched lookup on source url.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from core.Candidate import Candidate
from core.Record import Record
from db.repository import ArticleRepository
from dedupe.candidate_merger import merge_candidates

logger = logging.getLogger(__name__)

@dataclass
class Resolution:
    known: List[Tuple[Candidate, Record]] = field(default_factory=list)
    new: List[Candidate] = field(default_factory=list)

    @property
    def needs_enrichment(self) -> List[Candidate]:
        """New candidates plus known ones whose record has no real summary yet."""
        stale = [c for c, record in self.known if not record.has_real_summary]
        return self.new + stale

class CacheLookup:
    def __init__(self, repository: ArticleRepository):
        self.repository = repository

    async def resolve(self, candidates: List[Candidate]) -> Resolution:
        unique = merge_candidates(candidates)
        if not unique:
            return Resolution()

        # one query for the whole batch, and it must finish before either branch is built
        loop = asyncio.get_running_loop()
        records = await loop.run_in_executor(
            None, self.repository.find_by_urls, [c.source_url for c in unique]
        )
        by_url = {r.source_url: r for r in records}

        resolution = Resolution()
        for candidate in unique:
            record = by_url.get(candidate.source_url)
            if record is not None:
                resolution.known.append((candidate, record))
            else:
                resolution.new.append(candidate)

        logger.info(f"Cache lookup: {len(resolution.known)} known, {len(resolution.new)} new")
        return resolution
