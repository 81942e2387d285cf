from sqlalchemy import and_, case, false, func, or_, select, true
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from typing import Any, Dict, Iterable, List, Optional

from core.Candidate import Candidate
from core.Record import Record
from .models import ArticleRecord

# columns callers may change through update(); source_url is the identity and never moves
_UPDATABLE = {"title", "summary", "summary_is_placeholder", "provider", "category", "thumbnail_url"}

def _to_record(row: Any) -> Record:
    return Record(
        id=row.id,
        source_url=row.source_url,
        title=row.title,
        summary=row.summary,
        summary_is_placeholder=bool(row.summary_is_placeholder),
        provider=row.provider,
        category=row.category,
        thumbnail_url=row.thumbnail_url,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )

class ArticleRepository:
    """
    URL-keyed article store. All reads are batched; the write path is
    idempotent per source_url thanks to the unique constraint.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def find_by_urls(self, urls: Iterable[str]) -> List[Record]:
        urls = list(dict.fromkeys(u for u in urls if u))
        if not urls:
            return []
        with Session(self.engine) as s:
            rows = s.scalars(select(ArticleRecord).where(ArticleRecord.source_url.in_(urls))).all()
            return [_to_record(r) for r in rows]

    def get(self, record_id: int) -> Optional[Record]:
        with Session(self.engine) as s:
            row = s.get(ArticleRecord, record_id)
            return _to_record(row) if row else None

    def insert(self, candidate: Candidate, summary: Optional[str] = None, is_placeholder: bool = False) -> Record:
        with Session(self.engine, expire_on_commit=False) as s:
            row = ArticleRecord(
                source_url=candidate.source_url,
                title=candidate.title,
                summary=summary,
                summary_is_placeholder=is_placeholder,
                provider=candidate.provider,
                category=candidate.category,
            )
            s.add(row)
            s.commit()
            s.refresh(row)
            return _to_record(row)

    def update(self, record_id: int, fields: Dict[str, Any]) -> Record:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"cannot update fields: {sorted(unknown)}")
        with Session(self.engine, expire_on_commit=False) as s:
            row = s.get(ArticleRecord, record_id)
            if row is None:
                raise LookupError(f"no article with id {record_id}")
            for field, value in fields.items():
                setattr(row, field, value)
            row.updated_at = func.now()
            s.commit()
            s.refresh(row)
            return _to_record(row)

    def upsert(self, candidate: Candidate, summary: Optional[str], is_placeholder: bool) -> Record:
        """
        Insert, or on a source_url conflict update in place: the title always
        follows the latest candidate, the summary only moves up in rank
        (absent < placeholder < real) and a real summary is never replaced.
        """
        table = ArticleRecord.__table__
        stmt = self._insert_for_dialect()(table).values(
            source_url=candidate.source_url,
            title=candidate.title,
            summary=summary,
            summary_is_placeholder=bool(is_placeholder and summary),
            provider=candidate.provider,
            category=candidate.category,
        )
        excluded = stmt.excluded
        upgrade = or_(
            table.c.summary.is_(None),
            and_(
                table.c.summary_is_placeholder == true(),
                excluded.summary_is_placeholder == false(),
                excluded.summary.is_not(None),
            ),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.source_url],
            set_={
                "title": excluded.title,
                "summary": case((upgrade, excluded.summary), else_=table.c.summary),
                "summary_is_placeholder": case((upgrade, excluded.summary_is_placeholder), else_=table.c.summary_is_placeholder),
                "provider": func.coalesce(table.c.provider, excluded.provider),
                "category": func.coalesce(table.c.category, excluded.category),
                "updated_at": func.now(),
            },
        )
        with self.engine.begin() as conn:
            conn.execute(stmt)
            row = conn.execute(select(table).where(table.c.source_url == candidate.source_url)).one()
            return _to_record(row)

    def _insert_for_dialect(self):
        dialect = self.engine.dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            raise NotImplementedError(f"upsert is not supported on {dialect}")
        return insert
