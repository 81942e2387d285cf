from typing import List

import feedparser

from core.Candidate import Candidate
from external.base import BaseSource, SCIENCE
from utils.extraction import html_to_text
from utils.http import get


class ScienceDailyRSS(BaseSource):
    FEED = "https://www.sciencedaily.com/rss/top/science.xml"
    name = "ScienceDaily"
    category = SCIENCE
    default_title = "ScienceDaily Story"

    async def _fetch(self, limit: int) -> List[Candidate]:
        r = await get(self.client, self.FEED, settings=self.settings)
        feed = feedparser.parse(r.text)
        if feed.bozo and not feed.entries:
            raise ValueError(f"unparseable RSS payload: {feed.bozo_exception}")

        candidates = []
        for entry in feed.entries[:limit]:
            description = entry.get("summary") or entry.get("description")
            candidate = self.make_candidate(
                entry.get("title"),
                entry.get("link"),
                html_to_text(description) if description else None,
            )
            if candidate:
                candidates.append(candidate)
        return candidates
