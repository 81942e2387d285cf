import asyncio
import functools
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from core.Candidate import Candidate
from core.Record import Record
from .repository import ArticleRepository

logger = logging.getLogger(__name__)

class PersistenceWriter:
    """Async front for the repository's write path; blocking calls run in the default executor."""

    def __init__(self, repository: ArticleRepository):
        self.repository = repository

    async def upsert(self, candidate: Candidate, summary: Optional[str], is_placeholder: bool = False) -> Record:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            functools.partial(self.repository.upsert, candidate, summary, is_placeholder),
        )

    async def upsert_safely(self, candidate: Candidate, summary: Optional[str], is_placeholder: bool = False) -> Optional[Record]:
        try:
            return await self.upsert(candidate, summary, is_placeholder)
        except SQLAlchemyError:
            logger.exception(f"Failed to persist {candidate.source_url}")
            return None
