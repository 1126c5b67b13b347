"""
Question sourcing: local store, remote bank and synthetic fallback.
"""

from .cache import CacheKey, ResultCache
from .config import ConfigError, SourcingConfig
from .generator import generate
from .orchestrator import QuestionSourcer, SourcingReport, dedupe_by_text
from .prefetch import Prefetcher, PrefetchSummary, SubjectCoverage
from .remote import RemoteQuestionClient, normalize_response, subject_variants

__all__ = [
    "CacheKey",
    "ResultCache",
    "ConfigError",
    "SourcingConfig",
    "generate",
    "QuestionSourcer",
    "SourcingReport",
    "dedupe_by_text",
    "Prefetcher",
    "PrefetchSummary",
    "SubjectCoverage",
    "RemoteQuestionClient",
    "normalize_response",
    "subject_variants",
]
