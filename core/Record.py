from dataclasses import dataclass
from datetime import datetime
from typing import Optional

@dataclass(frozen=True)
class Record:
    id: int
    source_url: str
    title: str
    summary: Optional[str]
    summary_is_placeholder: bool
    provider: Optional[str]
    category: Optional[str]
    thumbnail_url: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @property
    def has_real_summary(self) -> bool:
        return bool(self.summary) and not self.summary_is_placeholder
