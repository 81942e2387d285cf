"""
Visible article text extraction
───────────────────────────────
Turn a fetched HTML page into the plain paragraph text of its article body,
dropping page chrome (navigation, headers, sharing widgets, cookie banners,
timestamps) so that what reaches the summarizer is prose.

    from utils.extraction import extract_article_text

    text = extract_article_text(html, min_paragraph_length=40, max_chars=5000)
"""

from __future__ import annotations

import re
from typing import List, Optional

from bs4 import BeautifulSoup

_CHROME_TAGS = ["script", "style", "noscript", "nav", "header", "footer", "aside", "form", "iframe", "svg"]

# tried in order after <article>
_CONTENT_SELECTORS = [
    "main",
    "[role=main]",
    "[itemprop=articleBody]",
    ".article-body",
    ".article-content",
    ".post-content",
    ".entry-content",
    ".story-body",
    "#story_text",
    "#text",
    "#content",
    ".content",
]

_BOILERPLATE_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"^(share|tweet|email|print)( this)?\b",
        r"\bsubscribe\b",
        r"\bsign (up|in)\b",
        r"\bnewsletter\b",
        r"\bcookies?\b.*\b(accept|consent|policy|use)\b",
        r"\ball rights reserved\b",
        r"^(posted|published|updated|last updated)( on)?\b",
        r"^(skip to|jump to|back to top|read more|related (stories|articles))\b",
        r"^advertisement$",
    )
]

_TIMESTAMP = re.compile(
    r"^\W*("
    r"\d{1,2}[:.]\d{2}(\s*[ap]\.?m\.?)?"
    r"|\d{4}-\d{2}-\d{2}([ t]\d{2}:\d{2}(:\d{2})?)?"
    r"|(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?\s+\d{1,2},?\s+\d{4}"
    r"|\d{1,2}\s+(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?\s+\d{4}"
    r")\W*$",
    re.IGNORECASE,
)


def html_to_text(fragment: str) -> str:
    """Plain text for small html snippets such as feed descriptions."""
    return " ".join(BeautifulSoup(fragment, "html.parser").get_text(" ").split())


def is_boilerplate(paragraph: str, min_length: int = 40, max_chrome_length: int = 200) -> bool:
    if len(paragraph) < min_length:
        return True
    if _TIMESTAMP.match(paragraph):
        return True
    # widgets and bylines are short; long paragraphs mentioning "subscribe" are prose
    if len(paragraph) > max_chrome_length:
        return False
    return any(p.search(paragraph) for p in _BOILERPLATE_PATTERNS)


def _content_root(soup: BeautifulSoup):
    article = soup.find("article")
    if article is not None and article.find("p") is not None:
        return article
    for selector in _CONTENT_SELECTORS:
        node = soup.select_one(selector)
        if node is not None and node.find("p") is not None:
            return node
    return soup.body or soup


def extract_paragraphs(html: str, min_paragraph_length: int = 40) -> List[str]:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_CHROME_TAGS):
        tag.decompose()

    root = _content_root(soup)
    paragraphs = []
    for p in root.find_all("p"):
        text = " ".join(p.get_text(" ").split())
        if text and not is_boilerplate(text, min_paragraph_length):
            paragraphs.append(text)
    return paragraphs


def extract_article_text(html: str, min_paragraph_length: int = 40, max_chars: int = 5000) -> Optional[str]:
    if not html or not html.strip():
        return None
    text = " ".join(extract_paragraphs(html, min_paragraph_length))
    if not text:
        return None
    return text[:max_chars]
