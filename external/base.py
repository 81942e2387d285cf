from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import List

import httpx

from config.config import Settings
from core.Candidate import Candidate

logger = logging.getLogger(__name__)

# closed taxonomy the feed renders tabs for
EDUCATION = "Education"
SCIENCE = "Science"
TECHNOLOGY = "Technology & Computing"
BUSINESS = "Business & Finance"

CATEGORIES = (EDUCATION, SCIENCE, TECHNOLOGY, BUSINESS)


class BaseSource(ABC):
    """
    One external content provider. `fetch` never raises: any failure is logged
    and turns into an empty list so the other providers still count.
    """
    name: str = "base"
    category: str = SCIENCE
    default_title: str = "Untitled"

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self.client = client
        self.settings = settings
        self._disabled_logged = False

    @property
    def enabled(self) -> bool:
        return True

    async def fetch(self, limit: int) -> List[Candidate]:
        if limit < 1:
            return []
        if not self.enabled:
            if not self._disabled_logged:
                logger.warning(f"[{self.name}] missing credentials, source disabled")
                self._disabled_logged = True
            return []
        try:
            candidates = await asyncio.wait_for(self._fetch(limit), timeout=self.settings.SOURCE_TIMEOUT)
        except asyncio.TimeoutError:
            logger.error(f"[{self.name}] timed out after {self.settings.SOURCE_TIMEOUT}s")
            return []
        except Exception as exc:
            logger.error(f"[{self.name}] fetch failed: {exc}")
            return []
        logger.info(f"[{self.name}] fetched {len(candidates[:limit])} candidates")
        return candidates[:limit]

    @abstractmethod
    async def _fetch(self, limit: int) -> List[Candidate]:
        pass

    def make_candidate(self, title: str | None, url: str | None, raw_abstract: str | None = None) -> Candidate | None:
        url = (url or "").strip()
        if not url:
            return None
        title = " ".join((title or "").split()) or self.default_title
        abstract = " ".join((raw_abstract or "").split()) or None
        return Candidate(
            title=title,
            source_url=url,
            provider=self.name,
            category=self.category,
            raw_abstract=abstract,
        )
