from typing import List, Optional

from core.Candidate import Candidate
from external.base import BaseSource, SCIENCE
from utils.http import get

def rebuild_abstract(inverted_index: Optional[dict]) -> Optional[str]:
    """OpenAlex ships abstracts as {word: [positions]}; put the words back in order."""
    if not inverted_index:
        return None
    positions = []
    for word, offsets in inverted_index.items():
        for offset in offsets or []:
            positions.append((offset, word))
    if not positions:
        return None
    return " ".join(word for _, word in sorted(positions))

def full_text_url(work: dict) -> Optional[str]:
    """open access url first, then landing pages, then pdfs, then the doi."""
    oa_url = (work.get("open_access") or {}).get("oa_url")
    if oa_url:
        return oa_url

    primary = work.get("primary_location") or {}
    if primary.get("landing_page_url"):
        return primary["landing_page_url"]
    if primary.get("pdf_url"):
        return primary["pdf_url"]

    for location in work.get("locations") or []:
        location = location or {}
        if location.get("landing_page_url"):
            return location["landing_page_url"]
        if location.get("pdf_url"):
            return location["pdf_url"]

    doi = work.get("doi")
    if doi:
        return doi if doi.startswith("http") else f"https://doi.org/{doi}"
    return None


class OpenAlexAPI(BaseSource):
    BASE = "https://api.openalex.org/works"
    name = "OpenAlex"
    category = SCIENCE
    default_title = "OpenAlex Work"

    async def _fetch(self, limit: int) -> List[Candidate]:
        r = await get(
            self.client, self.BASE, settings=self.settings,
            mailto=self.settings.CONTACT_EMAIL,
            filter="is_oa:true,has_abstract:true",
            sort="publication_date:desc",
            per_page=min(limit, 200),
            page=1,
        )
        works = r.json().get("results") or []

        candidates = []
        for work in works:
            if not isinstance(work, dict):
                continue
            candidate = self.make_candidate(
                work.get("display_name") or work.get("title"),
                full_text_url(work),
                rebuild_abstract(work.get("abstract_inverted_index")),
            )
            if candidate:
                candidates.append(candidate)
        return candidates
