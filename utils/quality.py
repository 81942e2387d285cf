"""
Content quality predicates
──────────────────────────
Cheap heuristics for spotting text that is not worth summarizing: scraped
pages that came back as mojibake, symbol soup or letter-by-letter fragments.

Each predicate is standalone so thresholds can be tuned (and tested) one at a
time; `is_usable_text` combines them with the configured limits.
"""

from __future__ import annotations

from typing import Optional

DEFAULT_MIN_LENGTH = 50
DEFAULT_MAX_SYMBOL_RATIO = 0.5
DEFAULT_MAX_SINGLE_CHAR_TOKEN_RATIO = 0.5


def symbol_ratio(text: str) -> float:
    """Share of non-whitespace characters that are not alphanumeric."""
    chars = [ch for ch in text if not ch.isspace()]
    if not chars:
        return 1.0
    symbols = sum(1 for ch in chars if not ch.isalnum())
    return symbols / len(chars)


def single_char_token_ratio(text: str) -> float:
    """Share of whitespace separated tokens that are a single character."""
    tokens = text.split()
    if not tokens:
        return 1.0
    return sum(1 for token in tokens if len(token) == 1) / len(tokens)


def is_garbled(
    text: str,
    max_symbol_ratio: float = DEFAULT_MAX_SYMBOL_RATIO,
    max_single_char_ratio: float = DEFAULT_MAX_SINGLE_CHAR_TOKEN_RATIO,
) -> bool:
    # broken encodings show up as either symbol soup or letters split by spaces
    return (
        symbol_ratio(text) > max_symbol_ratio
        or single_char_token_ratio(text) > max_single_char_ratio
    )


def is_usable_text(
    text: Optional[str],
    min_length: int = DEFAULT_MIN_LENGTH,
    max_symbol_ratio: float = DEFAULT_MAX_SYMBOL_RATIO,
    max_single_char_ratio: float = DEFAULT_MAX_SINGLE_CHAR_TOKEN_RATIO,
) -> bool:
    if not text:
        return False
    stripped = text.strip()
    if len(stripped) < min_length:
        return False
    return not is_garbled(stripped, max_symbol_ratio, max_single_char_ratio)


def truncate(text: str, max_chars: int) -> str:
    text = " ".join(text.split())
    if len(text) <= max_chars:
        return text
    return text[:max_chars].rstrip() + "..."
