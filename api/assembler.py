from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel

from core.Candidate import Candidate
from core.Record import Record

class ArticleItem(BaseModel):
    id: Union[int, str]
    title: str
    article_url: str
    content: Optional[str] = None
    thumbnail_url: Optional[str] = None
    source: str
    category: str
    created_at: str

    @classmethod
    def from_candidate(cls, candidate: Candidate, summary: Optional[str], record: Optional[Record] = None, now: Optional[datetime] = None) -> "ArticleItem":
        # unsaved items are keyed by their url until the background writer gives them an id
        created = record.created_at if record is not None and record.created_at else (now or datetime.now(timezone.utc))
        # sqlite hands back naive datetimes; they were stored as utc
        created = created.replace(tzinfo=timezone.utc) if created.tzinfo is None else created.astimezone(timezone.utc)
        return cls(
            id=record.id if record is not None else candidate.source_url,
            title=candidate.title,
            article_url=candidate.source_url,
            content=summary,
            thumbnail_url=record.thumbnail_url if record is not None else None,
            source=candidate.provider,
            category=candidate.category,
            created_at=created.isoformat(),
        )

def assemble_page(items: List[ArticleItem]) -> Dict[str, Any]:
    """Single-page payload: the sources have no real pagination."""
    count = len(items)
    return {
        "articles": [item.model_dump() for item in items],
        "meta": {
            "count": count,
            "page": 1,
            "per_page": count,
            "total_pages": 1,
        },
    }
