from typing import List
from core.Candidate import Candidate

def merge_candidates(candidates: List[Candidate]) -> List[Candidate]:
    """Merge duplicate candidates based on source url, first occurrence wins."""
    seen_urls = set()
    unique_candidates = []

    for candidate in candidates:
        if candidate.source_url and candidate.source_url not in seen_urls:
            seen_urls.add(candidate.source_url)
            unique_candidates.append(candidate)

    return unique_candidates
