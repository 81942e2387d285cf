from dataclasses import dataclass
from typing import Optional

@dataclass(frozen=True)
class Candidate:
    title: str
    source_url: str # natural key, identical urls from different providers are the same article
    provider: str
    category: str
    raw_abstract: Optional[str] = None # provider supplied abstract/description, when there is one
