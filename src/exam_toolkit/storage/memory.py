"""
In-process stores.

Used by tests and by single-process deployments that seed from a JSONL
export. State lives in a list guarded by a re-entrant lock.
"""

from __future__ import annotations

import threading
from typing import Callable, Iterable, List, Optional, Tuple, TypeVar

from ..core.models.questions import Question
from ..core.models.results import ExamResult
from .base import QuestionStore, ResultStore

T = TypeVar("T")


class MemoryQuestionStore(QuestionStore):
    """QuestionStore backed by a Python list."""

    def __init__(self, questions: Optional[Iterable[Question]] = None) -> None:
        super().__init__()
        self._lock = threading.RLock()
        self._questions: List[Question] = []
        if questions:
            self.put_many(questions)

    def _read_all(self) -> List[Question]:
        with self._lock:
            return list(self._questions)

    def _modify(self, modifier: Callable[[List[Question]], Tuple[List[Question], T]]) -> T:
        with self._lock:
            updated, value = modifier(list(self._questions))
            self._questions = updated
            return value

    def __len__(self) -> int:
        return len(self._questions)


class MemoryResultStore(ResultStore):
    """ResultStore backed by a Python list."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._results: List[ExamResult] = []

    def _read_all(self) -> List[ExamResult]:
        with self._lock:
            return list(self._results)

    def _modify(self, modifier: Callable[[List[ExamResult]], Tuple[List[ExamResult], T]]) -> T:
        with self._lock:
            updated, value = modifier(list(self._results))
            self._results = updated
            return value
