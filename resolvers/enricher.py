"""
Enricher
────────
Derive a short summary for a candidate. Text comes from the resolver chain
(abstract, page content already in hand, scraped page); whatever survives is
sent to the LLM. A failed LLM call falls back to truncating that text, and a
candidate with no usable text at all gets a templated sentence. The result is
never empty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from config.config import Settings
from core.Candidate import Candidate
from resolvers import ResolverManager
from services.llm import LLMSummarizer, SummarizerUnavailable
from utils.quality import is_usable_text, truncate

logger = logging.getLogger(__name__)

PLACEHOLDER_TEMPLATE = "This is an educational article from {provider}. Visit the link to learn about this topic."
FALLBACK_TEMPLATE = 'This article titled "{title}" from {provider} discusses important findings. Read the full article for detailed information.'

@dataclass(frozen=True)
class EnrichmentResult:
    summary: str
    source: str # llm | truncated | template
    is_placeholder: bool

class Enricher:
    def __init__(self, resolvers: ResolverManager, summarizer: LLMSummarizer, settings: Settings) -> None:
        self.resolvers = resolvers
        self.summarizer = summarizer
        self.settings = settings

    def placeholder(self, candidate: Candidate) -> EnrichmentResult:
        """Zero-io summary for the request path, shown until background enrichment lands."""
        if is_usable_text(
            candidate.raw_abstract,
            self.settings.MIN_TEXT_LENGTH,
            self.settings.MAX_SYMBOL_RATIO,
            self.settings.MAX_SINGLE_CHAR_TOKEN_RATIO,
        ):
            return EnrichmentResult(
                summary=truncate(candidate.raw_abstract, self.settings.FALLBACK_SUMMARY_CHARS),
                source="abstract",
                is_placeholder=True,
            )
        return EnrichmentResult(
            summary=PLACEHOLDER_TEMPLATE.format(provider=candidate.provider),
            source="template",
            is_placeholder=True,
        )

    def fallback(self, candidate: Candidate) -> EnrichmentResult:
        return EnrichmentResult(
            summary=FALLBACK_TEMPLATE.format(title=candidate.title, provider=candidate.provider),
            source="template",
            is_placeholder=True,
        )

    async def summarize(self, candidate: Candidate, page_content: Optional[str] = None) -> EnrichmentResult:
        resolved = await self.resolvers.resolve(candidate, page_content)
        if resolved is None:
            logger.info(f"No usable text for {candidate.source_url}, using templated summary")
            return self.fallback(candidate)

        try:
            summary = await self.summarizer.summarize(candidate.title, resolved.text, self.settings.LLM_MAX_WORDS)
            return EnrichmentResult(summary=summary, source="llm", is_placeholder=False)
        except SummarizerUnavailable as e:
            logger.warning(f"Summarization failed for {candidate.source_url} ({resolved.source} text): {e}")

        return EnrichmentResult(
            summary=truncate(resolved.text, self.settings.FALLBACK_SUMMARY_CHARS),
            source="truncated",
            is_placeholder=False,
        )
