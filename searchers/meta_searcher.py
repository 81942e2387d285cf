"""
searchers.meta_searcher
───────────────────────
Fan-out to each content source concurrently and concatenate whatever comes
back. Sources swallow their own failures; a source that raises anyway is
logged and counted as empty so the others still succeed.
"""

import asyncio
import logging
import random
from typing import List, Optional, Sequence

from core.Candidate import Candidate
from external.base import BaseSource

logger = logging.getLogger(__name__)

def shuffle_candidates(items: List[Candidate], rng: Optional[random.Random] = None) -> List[Candidate]:
    """Fisher–Yates shuffle of a copy of `items`."""
    rng = rng or random.Random()
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled

class MetaSearcher:

    def __init__(self, sources: Sequence[BaseSource]):
        self.sources = list(sources)

    async def fetch_all(self, limit: int, shuffle: bool = False, rng: Optional[random.Random] = None) -> List[Candidate]:
        """Run every source in parallel; results are in registration order unless shuffled."""
        async def _safe_call(source: BaseSource) -> List[Candidate]:
            try:
                return await source.fetch(limit)
            except Exception as exc:
                logger.error(f"{source.__class__.__name__} failed: {exc}", exc_info=True)
                return []

        grouped = await asyncio.gather(*(_safe_call(src) for src in self.sources))
        # flatten
        candidates = [c for group in grouped for c in group]
        logger.info(f"Fetched {len(candidates)} candidates from {len(self.sources)} sources")

        if shuffle:
            candidates = shuffle_candidates(candidates, rng)
        return candidates
