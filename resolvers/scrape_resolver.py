"""
Resolver that fetches the candidate's page and pulls the article text out of it.

Never used for binary documents (pdf links) or for hosts that refuse scrapers;
those candidates rely on their provider abstract or the templated fallback.
Redirects are followed by hand so every hop goes through the same url checks,
and the body is streamed so non-html or oversized responses are never read in full.
"""

import ipaddress
import logging
import re
from typing import Optional
from urllib.parse import urljoin, urlparse

import httpx

from config.config import Settings
from core.Candidate import Candidate
from resolvers.base import BaseResolver, Resolved
from utils.extraction import extract_article_text
from utils.quality import is_usable_text

logger = logging.getLogger(__name__)

# abstract pages on these hosts block scraping, their api already gave us the abstract
BLOCKED_HOSTS = {"arxiv.org", "www.arxiv.org", "export.arxiv.org"}

_BLOCKED_EXTENSIONS = (".pdf", ".ps", ".zip", ".gz", ".epub", ".doc", ".docx")

# publisher download links: .../article/1/pdf, ?format=pdf, ?download=pdf
_PDF_QUERY_HINT = re.compile(r"(^|[=&/._-])pdf($|[=&/._-])")

def _is_private_host(host: str) -> bool:
    if host in ("localhost", "localhost.localdomain"):
        return True
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return False
    return ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_unspecified or ip.is_reserved

def scrape_block_reason(url: str) -> Optional[str]:
    """Return why a url must not be scraped, or None when it is fine to fetch."""
    p = urlparse(url or "")
    if p.scheme not in ("http", "https"):
        return "bad_scheme"
    host = (p.hostname or "").lower()
    if not host:
        return "missing_host"
    if _is_private_host(host):
        return "private_host"
    if host in BLOCKED_HOSTS:
        return "blocked_host"
    path = p.path.lower().rstrip("/")
    if path.endswith(_BLOCKED_EXTENSIONS) or path.endswith("/pdf") or "/pdf/" in path:
        return "binary_document"
    if _PDF_QUERY_HINT.search(p.query.lower()):
        return "binary_document"
    return None

class ScrapeResolver(BaseResolver):
    name = "scrape"

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self.client = client
        self.settings = settings

    async def resolve(self, candidate: Candidate, page_content: Optional[str] = None) -> Optional[Resolved]:
        url = candidate.source_url
        try:
            html = await self.fetch_html(url)
        except httpx.HTTPError as e:
            logger.info(f"[scrape] fetch failed for {url}: {e}")
            return None
        if html is None:
            return None

        text = extract_article_text(
            html,
            min_paragraph_length=self.settings.MIN_PARAGRAPH_LENGTH,
            max_chars=self.settings.MAX_CONTENT_CHARS,
        )
        if not is_usable_text(
            text,
            self.settings.MIN_TEXT_LENGTH,
            self.settings.MAX_SYMBOL_RATIO,
            self.settings.MAX_SINGLE_CHAR_TOKEN_RATIO,
        ):
            logger.info(f"[scrape] rejected low quality extraction for {url}")
            return None
        return Resolved(candidate=candidate, text=text, source=self.name)

    async def fetch_html(self, url: str) -> Optional[str]:
        """Html of the page at `url`, or None when any hop is blocked or the response isn't a page."""
        for _ in range(self.settings.MAX_REDIRECTS + 1):
            reason = scrape_block_reason(url)
            if reason:
                logger.debug(f"[scrape] skipping {url}: {reason}")
                return None

            async with self.client.stream(
                "GET", url, timeout=self.settings.PAGE_FETCH_TIMEOUT, follow_redirects=False
            ) as r:
                if r.is_redirect:
                    location = r.headers.get("location")
                    if not location:
                        return None
                    url = urljoin(str(r.url), location)
                    continue

                r.raise_for_status()
                content_type = r.headers.get("content-type", "")
                if content_type and "html" not in content_type.lower():
                    logger.info(f"[scrape] {url} is {content_type}, not html")
                    return None

                body = bytearray()
                async for chunk in r.aiter_bytes():
                    body += chunk
                    if len(body) > self.settings.MAX_PAGE_BYTES:
                        logger.info(f"[scrape] {url} is larger than {self.settings.MAX_PAGE_BYTES} bytes")
                        return None
                return body.decode(r.encoding or "utf-8", errors="replace")

        logger.info(f"[scrape] too many redirects for {url}")
        return None
