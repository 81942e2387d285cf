from typing import Optional

from config.config import Settings
from core.Candidate import Candidate
from resolvers.base import BaseResolver, Resolved
from utils.quality import is_usable_text

class PageContentResolver(BaseResolver):
    """
    Page text some earlier step of the same request already extracted, so no fetch is needed.
    """
    name = "page_content"

    def __init__(self, settings: Settings):
        self.settings = settings

    async def resolve(self, candidate: Candidate, page_content: Optional[str] = None) -> Optional[Resolved]:
        if is_usable_text(
            page_content,
            self.settings.MIN_TEXT_LENGTH,
            self.settings.MAX_SYMBOL_RATIO,
            self.settings.MAX_SINGLE_CHAR_TOKEN_RATIO,
        ):
            return Resolved(candidate=candidate, text=page_content, source=self.name)
        return None
