from typing import Optional

from config.config import Settings
from core.Candidate import Candidate
from resolvers.base import BaseResolver, Resolved
from utils.quality import is_usable_text

class AbstractResolver(BaseResolver):
    """
    Cheapest route: the abstract/description the provider already sent with the listing.
    """
    name = "abstract"

    def __init__(self, settings: Settings):
        self.settings = settings

    async def resolve(self, candidate: Candidate, page_content: Optional[str] = None) -> Optional[Resolved]:
        if is_usable_text(
            candidate.raw_abstract,
            self.settings.MIN_TEXT_LENGTH,
            self.settings.MAX_SYMBOL_RATIO,
            self.settings.MAX_SINGLE_CHAR_TOKEN_RATIO,
        ):
            return Resolved(candidate=candidate, text=candidate.raw_abstract, source=self.name)
        return None
