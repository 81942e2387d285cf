from .candidate_merger import merge_candidates
from .cache_lookup import CacheLookup, Resolution

__all__ = ["CacheLookup", "Resolution", "merge_candidates"]
