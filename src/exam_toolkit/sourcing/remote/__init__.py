"""Remote question bank client and response normalization."""

from .client import ConnectionStatus, RemoteFetchError, RemoteQuestionClient
from .normalizer import normalize_response
from .variants import subject_variants

__all__ = [
    "ConnectionStatus",
    "RemoteFetchError",
    "RemoteQuestionClient",
    "normalize_response",
    "subject_variants",
]
