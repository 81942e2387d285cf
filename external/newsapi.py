from typing import List

from core.Candidate import Candidate
from external.base import BaseSource, BUSINESS
from utils.http import get


class NewsAPIBusiness(BaseSource):
    BASE = "https://newsapi.org/v2/top-headlines"
    name = "NewsAPI Business"
    category = BUSINESS
    default_title = "Business News"

    @property
    def enabled(self) -> bool:
        return bool(self.settings.NEWSAPI_KEY)

    async def _fetch(self, limit: int) -> List[Candidate]:
        r = await get(
            self.client, self.BASE, settings=self.settings,
            headers={"X-Api-Key": self.settings.NEWSAPI_KEY},
            country="us",
            category="business",
            pageSize=min(limit, 100),
        )
        payload = r.json() or {}
        if payload.get("status") == "error":
            raise ValueError(f"NewsAPI error: {payload.get('code')}: {payload.get('message')}")

        candidates = []
        for item in (payload.get("articles") or [])[:limit]:
            if not isinstance(item, dict):
                continue
            # takedowns stay in the listing as placeholders
            if item.get("title") == "[Removed]":
                continue
            candidate = self.make_candidate(item.get("title"), item.get("url"), item.get("description"))
            if candidate:
                candidates.append(candidate)
        return candidates
