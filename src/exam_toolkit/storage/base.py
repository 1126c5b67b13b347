"""
Module: storage.base

Purpose:
    Persistence ports for questions and results. Concrete stores implement
    two primitives (read everything, atomically modify everything); the
    query and mutation operations are written once on top of them.

Key Classes:
    - QuestionStore: Question persistence port
    - ResultStore: Exam result persistence port
    - SubjectLocks: Per (exam type, subject) in-process locks

Used By:
    - storage.memory, storage.jsonl
    - sourcing.orchestrator, sourcing.prefetch: Pool writes run under subject_lock
    - builder.grading, builder.service
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple, TypeVar

from ..core.models.questions import ExamType, Question
from ..core.models.results import ExamResult

T = TypeVar("T")


class StoreError(Exception):
    """Error reading or writing a store."""
    pass


class SubjectLocks:
    """Lazily created lock per (exam type, lower-cased subject)."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[Tuple[ExamType, str], threading.Lock] = {}

    def get(self, exam_type: ExamType, subject: str) -> threading.Lock:
        key = (ExamType.parse(exam_type), subject.strip().lower())
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock


def _subject_filter(exam_type: ExamType, subject: Optional[str]) -> Callable[[Question], bool]:
    exam_type = ExamType.parse(exam_type)

    def matches(q: Question) -> bool:
        if q.exam_type is not exam_type:
            return False
        return subject is None or q.matches_subject(subject)

    return matches


class QuestionStore(ABC):
    """
    Question persistence port.

    Subject matching is case-insensitive throughout. put() is an upsert by id.
    """

    def __init__(self) -> None:
        self._subject_locks = SubjectLocks()

    # ─────────────────────────────────────────────────────────────────────
    # Primitives
    # ─────────────────────────────────────────────────────────────────────

    @abstractmethod
    def _read_all(self) -> List[Question]:
        """Return every stored question, in insertion order."""

    @abstractmethod
    def _modify(self, modifier: Callable[[List[Question]], Tuple[List[Question], T]]) -> T:
        """Atomically replace the stored list with modifier's first return value."""

    # ─────────────────────────────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────────────────────────────

    def query(self, exam_type: ExamType, subject: Optional[str] = None) -> List[Question]:
        """Questions of an exam type, optionally restricted to one subject."""
        matches = _subject_filter(exam_type, subject)
        return [q for q in self._read_all() if matches(q)]

    def count(self, exam_type: ExamType, subject: Optional[str] = None) -> int:
        return len(self.query(exam_type, subject))

    def get_by_id(self, question_id: str) -> Optional[Question]:
        for q in self._read_all():
            if q.id == question_id:
                return q
        return None

    def last_updated(self, exam_type: ExamType, subject: Optional[str] = None) -> Optional[str]:
        """Latest created_at among matching questions, or None if there are none."""
        stamps = [q.created_at for q in self.query(exam_type, subject)]
        return max(stamps) if stamps else None

    # ─────────────────────────────────────────────────────────────────────
    # Writes
    # ─────────────────────────────────────────────────────────────────────

    def put(self, question: Question) -> None:
        self.put_many([question])

    def put_many(self, questions: Iterable[Question]) -> int:
        """Upsert questions by id. Returns the number written."""
        incoming = list(questions)
        if not incoming:
            return 0

        def upsert(existing: List[Question]) -> Tuple[List[Question], int]:
            by_id = {q.id: q for q in incoming}
            kept = [by_id.pop(q.id, q) for q in existing]
            kept.extend(by_id.values())
            return kept, len(incoming)

        return self._modify(upsert)

    def delete_by_id(self, question_id: str) -> bool:
        def delete(existing: List[Question]) -> Tuple[List[Question], bool]:
            kept = [q for q in existing if q.id != question_id]
            return kept, len(kept) != len(existing)

        return self._modify(delete)

    def replace_for_subject(
        self,
        exam_type: ExamType,
        subject: str,
        questions: Iterable[Question],
    ) -> int:
        """Drop every question for (exam_type, subject), then insert questions."""
        matches = _subject_filter(exam_type, subject)
        incoming = list(questions)

        def replace(existing: List[Question]) -> Tuple[List[Question], int]:
            ids = {q.id for q in incoming}
            kept = [q for q in existing if not matches(q) and q.id not in ids]
            return kept + incoming, len(incoming)

        return self._modify(replace)

    def clear_for_exam_type(self, exam_type: ExamType) -> int:
        """Delete every question of an exam type. Returns the number removed."""
        matches = _subject_filter(exam_type, None)

        def clear(existing: List[Question]) -> Tuple[List[Question], int]:
            kept = [q for q in existing if not matches(q)]
            return kept, len(existing) - len(kept)

        return self._modify(clear)

    @contextmanager
    def subject_lock(self, exam_type: ExamType, subject: str) -> Iterator[None]:
        """Serialize read-merge-persist sequences for one subject pool."""
        with self._subject_locks.get(exam_type, subject):
            yield


class ResultStore(ABC):
    """Exam result persistence port."""

    @abstractmethod
    def _read_all(self) -> List[ExamResult]:
        """Return every stored result, in insertion order."""

    @abstractmethod
    def _modify(self, modifier: Callable[[List[ExamResult]], Tuple[List[ExamResult], T]]) -> T:
        """Atomically replace the stored list with modifier's first return value."""

    def add(self, result: ExamResult) -> None:
        def append(existing: List[ExamResult]) -> Tuple[List[ExamResult], None]:
            if any(r.id == result.id for r in existing):
                raise StoreError(f"Duplicate result id: {result.id}")
            return existing + [result], None

        self._modify(append)

    def get(self, result_id: str) -> Optional[ExamResult]:
        for r in self._read_all():
            if r.id == result_id:
                return r
        return None

    def by_student(self, student_id: str) -> List[ExamResult]:
        """Results for a student, newest first."""
        results = [r for r in self._read_all() if r.student_id == student_id]
        return sorted(results, key=lambda r: r.completed_at, reverse=True)

    def by_exam_type(self, exam_type: ExamType) -> List[ExamResult]:
        exam_type = ExamType.parse(exam_type)
        results = [r for r in self._read_all() if r.exam_type is exam_type]
        return sorted(results, key=lambda r: r.completed_at, reverse=True)

    def delete(self, result_id: str) -> bool:
        def delete(existing: List[ExamResult]) -> Tuple[List[ExamResult], bool]:
            kept = [r for r in existing if r.id != result_id]
            return kept, len(kept) != len(existing)

        return self._modify(delete)
