"""
Module: sourcing.cache

Purpose:
    In-memory cache of normalized remote fetch results with a fixed
    time-to-live. Expiry is lazy: stale entries are dropped when read.

Key Classes:
    - CacheKey: (exam type, subject, year, page)
    - CacheEntry: Cached value with creation/expiry timestamps
    - ResultCache: Thread-safe TTL cache

Used By:
    - sourcing.remote.client: RemoteQuestionClient
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, NamedTuple, Optional

from ..core.models.questions import ExamType, Question

logger = logging.getLogger(__name__)


class CacheKey(NamedTuple):
    exam_type: ExamType
    subject: str
    year: Optional[int]
    page: int

    def __str__(self) -> str:
        return f"{self.exam_type.value}-{self.subject}-{self.year or 'all'}-{self.page}"


@dataclass(frozen=True)
class CacheEntry:
    value: List[Question]
    created_at: float
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


@dataclass(frozen=True)
class CacheStats:
    size: int
    keys: List[str]
    question_count: int


class ResultCache:
    """
    TTL cache for remote fetch results.

    A disabled cache never stores anything: get() always misses and put()
    is a no-op.

    Example:
        >>> cache = ResultCache(enabled=True, ttl_seconds=3600)
        >>> cache.put(key, questions)
        >>> cache.get(key)  # Cache hit until the hour is up
    """

    def __init__(
        self,
        enabled: bool = True,
        ttl_seconds: float = 24 * 3600,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.enabled = enabled
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[CacheKey, CacheEntry] = {}

    def get(self, key: CacheKey) -> Optional[List[Question]]:
        if not self.enabled:
            return None
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                logger.debug(f"Cache MISS: {key}")
                return None
            if not entry.is_valid(self._clock()):
                del self._entries[key]
                logger.debug(f"Cache EXPIRED: {key}")
                return None
        logger.debug(f"Cache HIT: {key}")
        return list(entry.value)

    def put(self, key: CacheKey, value: List[Question]) -> None:
        if not self.enabled:
            return
        now = self._clock()
        with self._lock:
            self._entries[key] = CacheEntry(list(value), now, now + self.ttl_seconds)
        logger.debug(f"Cache STORE: {key} ({len(value)} questions)")

    def clear(self, exam_type: Optional[ExamType] = None) -> int:
        """Remove all entries, or only those of one exam type. Returns count removed."""
        with self._lock:
            if exam_type is None:
                removed = len(self._entries)
                self._entries.clear()
            else:
                exam_type = ExamType.parse(exam_type)
                doomed = [k for k in self._entries if k.exam_type is exam_type]
                for key in doomed:
                    del self._entries[key]
                removed = len(doomed)
        logger.info(f"Cleared {removed} cache entries" + (f" for {exam_type.value}" if exam_type else ""))
        return removed

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                size=len(self._entries),
                keys=[str(k) for k in self._entries],
                question_count=sum(len(e.value) for e in self._entries.values()),
            )

    def __len__(self) -> int:
        return len(self._entries)
