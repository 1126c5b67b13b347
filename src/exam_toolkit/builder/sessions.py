"""
Module: builder.sessions

Purpose:
    Create exam sessions and record answers. Pools for the subjects of one
    session are sourced concurrently, joined in request order, composed,
    and frozen as the session snapshot.

Key Classes:
    - SessionManager: create_session / record_answer / get_session

Dependencies:
    - concurrent.futures (std): per-subject sourcing
    - sourcing.QuestionSourcer
    - builder.composer.ExamComposer

Used By:
    - builder.service.ExamService
"""

from __future__ import annotations

import logging
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Sequence, Union

from ..core.models.questions import ExamType, Question
from ..core.models.sessions import ExamSession
from ..sourcing.orchestrator import QuestionSourcer
from .composer import ExamComposer

logger = logging.getLogger(__name__)

MAX_SOURCING_WORKERS = 4


def _as_subjects(subject_or_subjects: Union[str, Sequence[str], None]) -> List[str]:
    if subject_or_subjects is None:
        return []
    if isinstance(subject_or_subjects, str):
        return [subject_or_subjects]
    return list(subject_or_subjects)


class SessionManager:
    """
    In-process registry of exam sessions.

    Example:
        >>> manager = SessionManager(sourcer, ExamComposer())
        >>> session = manager.create_session("S1", "Ada", ExamType.JAMB, ["English Language", "Physics"])
        >>> manager.record_answer(session.id, session.snapshot[0].id, "b")
        True
    """

    def __init__(
        self,
        sourcer: QuestionSourcer,
        composer: Optional[ExamComposer] = None,
        max_workers: int = MAX_SOURCING_WORKERS,
    ):
        self.sourcer = sourcer
        self.composer = composer or ExamComposer()
        self.max_workers = max_workers
        self._sessions: Dict[str, ExamSession] = {}
        self._lock = threading.RLock()

    # ─────────────────────────────────────────────────────────────────────
    # Creation
    # ─────────────────────────────────────────────────────────────────────

    def _source_pools(self, exam_type: ExamType, subjects: List[str]) -> Dict[str, List[Question]]:
        if len(subjects) <= 1:
            return {s: self.sourcer.source(exam_type, s) for s in subjects}

        workers = min(self.max_workers, len(subjects))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="sourcing") as executor:
            futures = [executor.submit(self.sourcer.source, exam_type, s) for s in subjects]
            # Join in request order
            return {s: f.result() for s, f in zip(subjects, futures)}

    def create_session(
        self,
        student_id: str,
        student_name: str,
        exam_type: ExamType,
        subject_or_subjects: Union[str, Sequence[str], None],
    ) -> ExamSession:
        """
        Source, compose and freeze a new in-progress session.

        A session whose sourcing produced nothing is still created with
        total_questions == 0; callers check session.can_start.
        """
        exam_type = ExamType.parse(exam_type)
        subjects = _as_subjects(subject_or_subjects)

        if subjects:
            pools = self._source_pools(exam_type, subjects)
            snapshot = self.composer.compose(exam_type, subjects, pools)
        else:
            snapshot = self.sourcer.source(exam_type)

        session = ExamSession(
            id=f"SESSION-{uuid.uuid4().hex[:12]}",
            student_id=student_id,
            student_name=student_name,
            exam_type=exam_type,
            subjects=tuple(subjects),
            snapshot=tuple(snapshot),
        )
        with self._lock:
            self._sessions[session.id] = session

        if session.can_start:
            logger.info(
                f"Created session {session.id} for {student_id}: "
                f"{session.total_questions} {exam_type.value} questions"
            )
        else:
            logger.warning(f"Created session {session.id} with no questions for {subjects or exam_type.value}")
        return session

    # ─────────────────────────────────────────────────────────────────────
    # Answers and lookup
    # ─────────────────────────────────────────────────────────────────────

    def record_answer(self, session_id: str, question_id: str, value: str) -> bool:
        """
        Upsert an answer.

        Returns:
            False (and logs) when the session is unknown, no longer in
            progress, or the question is not part of its snapshot.
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                logger.warning(f"Answer for unknown session {session_id}")
                return False
            if not session.is_in_progress:
                logger.warning(f"Answer for {session.status.value} session {session_id} ignored")
                return False
            if question_id not in session.question_ids():
                logger.warning(f"Question {question_id} is not part of session {session_id}")
                return False
            session.answers[question_id] = value
            return True

    def get_session(self, session_id: str) -> Optional[ExamSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def sessions_for_student(self, student_id: str) -> List[ExamSession]:
        with self._lock:
            sessions = [s for s in self._sessions.values() if s.student_id == student_id]
        return sorted(sessions, key=lambda s: s.start_time, reverse=True)

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the registry lock (used to make grading a single transition)."""
        with self._lock:
            yield
