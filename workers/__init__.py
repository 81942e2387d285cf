from .scheduler import EnrichmentJob, EnrichmentScheduler

__all__ = ["EnrichmentJob", "EnrichmentScheduler"]
