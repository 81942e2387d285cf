from core.Candidate import Candidate
from abc import ABC, abstractmethod
from typing import Optional

class Resolved:
    """
    Represents text good enough to summarize, and where it came from
    """
    def __init__(self, candidate: Candidate, text: str, source: str) -> None:
        self.candidate = candidate
        self.text = text
        self.source = source

    def __str__(self) -> str:
        return f"Resolved({self.candidate.title}, {self.source}, {len(self.text)} chars)"

class BaseResolver(ABC):
    """
    Each resolver gets a candidate and returns either 'Resolved' or None (nothing usable from this source).
    """
    name = "base"

    @abstractmethod
    async def resolve(self, candidate: Candidate, page_content: Optional[str] = None) -> Optional[Resolved]:
        pass
