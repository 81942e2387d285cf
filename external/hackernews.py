import asyncio
import logging
from typing import List

from core.Candidate import Candidate
from external.base import BaseSource, TECHNOLOGY
from utils.http import get

logger = logging.getLogger(__name__)


class HackerNewsAPI(BaseSource):
    TOP_STORIES = "https://hacker-news.firebaseio.com/v0/topstories.json"
    ITEM = "https://hacker-news.firebaseio.com/v0/item/{id}.json"
    DISCUSSION = "https://news.ycombinator.com/item?id={id}"
    name = "Hacker News"
    category = TECHNOLOGY
    default_title = "Hacker News Story"

    async def _item(self, story_id: int):
        r = await get(self.client, self.ITEM.format(id=story_id), settings=self.settings)
        return r.json()

    async def _fetch(self, limit: int) -> List[Candidate]:
        r = await get(self.client, self.TOP_STORIES, settings=self.settings)
        top_ids = r.json() or []

        # one failed item shouldn't cost the whole listing
        results = await asyncio.gather(*(self._item(i) for i in top_ids[:limit]), return_exceptions=True)

        candidates = []
        for story in results:
            if isinstance(story, Exception):
                logger.warning(f"[{self.name}] item fetch failed: {story}")
                continue
            if not isinstance(story, dict):
                continue
            url = story.get("url")
            if not url and story.get("id"):
                url = self.DISCUSSION.format(id=story["id"])
            candidate = self.make_candidate(story.get("title"), url)
            if candidate:
                candidates.append(candidate)
        return candidates
