"""
Question and result persistence.

QuestionStore/ResultStore are the ports; memory and JSONL implementations
are provided.
"""

from .base import QuestionStore, ResultStore, StoreError, SubjectLocks
from .jsonl import JsonlQuestionStore, JsonlResultStore
from .memory import MemoryQuestionStore, MemoryResultStore

__all__ = [
    "QuestionStore",
    "ResultStore",
    "StoreError",
    "SubjectLocks",
    "JsonlQuestionStore",
    "JsonlResultStore",
    "MemoryQuestionStore",
    "MemoryResultStore",
]
