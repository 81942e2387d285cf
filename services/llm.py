"""
LLM summarization collaborator
──────────────────────────────
`summarize(title, text, max_words) -> str` against any OpenAI-compatible chat
completions endpoint (DeepSeek by default). Callers must expect it to fail and
keep a fallback; it raises `SummarizerUnavailable` for every failure mode.
"""

from __future__ import annotations

import logging
from typing import Optional

from openai import AsyncOpenAI

from config.config import Settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an expert at summarizing scientific and technical articles. Generate a concise, informative summary that:
- Is {min_words}-{max_words} words long
- Captures the main research question, methodology, and key findings
- Uses clear, accessible language
- Highlights why the work matters
- Avoids technical jargon when possible

Return only the summary text, without any introductory phrases or meta-commentary."""


class SummarizerUnavailable(Exception):
    pass


class LLMSummarizer:
    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None) -> None:
        self.settings = settings
        if client is None and settings.LLM_API_KEY:
            client = AsyncOpenAI(
                api_key=settings.LLM_API_KEY,
                base_url=settings.LLM_BASE_URL,
                timeout=settings.LLM_TIMEOUT,
                max_retries=0,
            )
        self.client = client
        if self.client is None:
            logger.warning("LLM_API_KEY is not set, summaries will use the truncation fallback")

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def summarize(self, title: str, text: str, max_words: int) -> str:
        if self.client is None:
            raise SummarizerUnavailable("no LLM client configured")

        content = text if len(text) <= self.settings.MAX_CONTENT_CHARS else text[:self.settings.MAX_CONTENT_CHARS] + "..."
        try:
            response = await self.client.chat.completions.create(
                model=self.settings.LLM_MODEL,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT.format(min_words=max(1, max_words - 50), max_words=max_words)},
                    {"role": "user", "content": f"Article Title: {title}\n\nContent to summarize:\n{content}\n\nGenerate a concise summary:"},
                ],
                max_tokens=self.settings.LLM_MAX_TOKENS,
                temperature=self.settings.LLM_TEMPERATURE,
            )
        except Exception as e:
            raise SummarizerUnavailable(f"completion failed: {e}") from e

        summary = (response.choices[0].message.content or "").strip() if response.choices else ""
        if not summary:
            raise SummarizerUnavailable("empty completion")
        return summary

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()
