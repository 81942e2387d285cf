import re
from typing import List, Optional

import feedparser

from core.Candidate import Candidate
from external.base import BaseSource, EDUCATION
from utils.http import get

_ABS_PREFIX = re.compile(r"^https?://(export\.)?arxiv\.org/abs/")

def arxiv_id(entry_id: str) -> str:
    return _ABS_PREFIX.sub("", entry_id or "").strip()

def pdf_url(entry) -> Optional[str]:
    for link in entry.get("links", []):
        if link.get("type") == "application/pdf" and link.get("href"):
            return link["href"]
    ident = arxiv_id(entry.get("id", ""))
    if ident:
        return f"https://arxiv.org/pdf/{ident}.pdf"
    return None

def abstract_url(entry) -> str:
    for link in entry.get("links", []):
        if link.get("rel") == "alternate" and link.get("href"):
            return link["href"]
    ident = arxiv_id(entry.get("id", ""))
    if ident:
        return f"https://arxiv.org/abs/{ident}"
    return entry.get("id", "")


class ArxivAPI(BaseSource):
    BASE = "http://export.arxiv.org/api/query"
    name = "arXiv"
    category = EDUCATION
    default_title = "arXiv Article"

    def __init__(self, client, settings, subject: str = "cs.AI") -> None:
        super().__init__(client, settings)
        self.subject = subject

    async def _fetch(self, limit: int) -> List[Candidate]:
        r = await get(
            self.client, self.BASE, settings=self.settings,
            search_query=f"cat:{self.subject}",
            start=0,
            max_results=min(limit, 200),
            sortBy="submittedDate",
            sortOrder="descending",
        )
        feed = feedparser.parse(r.text)
        if feed.bozo and not feed.entries:
            raise ValueError(f"unparseable Atom payload: {feed.bozo_exception}")

        candidates = []
        for entry in feed.entries[:limit]:
            # the abstract page blocks scraping, so the pdf link is the stored url and the abstract travels along
            url = pdf_url(entry) or abstract_url(entry)
            candidate = self.make_candidate(entry.get("title"), url, entry.get("summary"))
            if candidate:
                candidates.append(candidate)
        return candidates
