"""
Module: builder.grading

Purpose:
    Score the objective portion of a session from its frozen snapshot and
    record the result exactly once.

Key Functions:
    - score_snapshot(): Pure scoring of (snapshot, answers)
    - letter_grade(): Percentage -> A-F
    - grade_answers(): Score an answers mapping against the store by id

Key Classes:
    - GradeSummary: score, total, percentage, grade
    - GradingEngine: Session transition guard + result persistence

Used By:
    - builder.service.ExamService
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable, Mapping, Optional

from ..common.thresholds import GRADE_BANDS
from ..core.models.questions import Question
from ..core.models.results import ExamResult
from ..core.models.sessions import ExamSession, SessionStatus
from ..storage.base import QuestionStore, ResultStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GradeSummary:
    score: int
    total: int
    percentage: float
    grade: str


def letter_grade(percentage: float) -> str:
    for lower_bound, grade in GRADE_BANDS.bands:
        if percentage >= lower_bound:
            return grade
    return GRADE_BANDS.fail_grade


def _is_correct(question: Question, answer: Optional[str]) -> bool:
    if answer is None:
        return False
    return str(answer).strip().lower() == question.correct_answer


def _summarize(score: int, total: int) -> GradeSummary:
    percentage = score / total * 100 if total else 0.0
    return GradeSummary(score, total, percentage, letter_grade(percentage))


def score_snapshot(snapshot: Iterable[Question], answers: Mapping[str, str]) -> GradeSummary:
    """
    Score objective questions; essays are ignored.

    Answer comparison is case-insensitive. Percentage is 0 when the
    snapshot has no objective questions.
    """
    objective = [q for q in snapshot if q.is_objective]
    score = sum(1 for q in objective if _is_correct(q, answers.get(q.id)))
    return _summarize(score, len(objective))


def grade_answers(answers: Mapping[str, str], store: QuestionStore) -> GradeSummary:
    """
    Score an answers mapping by looking each question up in the store.

    Unknown ids and essay questions do not count toward the total.
    """
    score = total = 0
    for question_id, answer in answers.items():
        question = store.get_by_id(question_id)
        if question is None or not question.is_objective:
            continue
        total += 1
        if _is_correct(question, answer):
            score += 1
    return _summarize(score, total)


class GradingEngine:
    """
    Grades sessions and persists results.

    A session moves from in-progress to completed exactly once. Grading a
    completed session returns its stored result without writing a new one.
    """

    def __init__(
        self,
        results: ResultStore,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.results = results
        self._clock = clock

    def grade(self, session: Optional[ExamSession], school_id: Optional[str] = None) -> Optional[ExamResult]:
        if session is None:
            return None

        if session.status is SessionStatus.COMPLETED:
            if session.result_id is None:
                return None
            logger.info(f"Session {session.id} already graded; returning stored result")
            return self.results.get(session.result_id)

        summary = score_snapshot(session.snapshot, session.answers)
        now = self._clock()
        result = ExamResult(
            id=f"RESULT-{uuid.uuid4().hex[:12]}",
            session_id=session.id,
            student_id=session.student_id,
            student_name=session.student_name,
            school_id=school_id,
            exam_type=session.exam_type,
            subject=session.subject,
            subjects=session.subjects,
            score=summary.score,
            total_questions=summary.total,
            percentage=summary.percentage,
            grade=summary.grade,
            completed_at=now.isoformat(),
        )
        self.results.add(result)

        session.status = SessionStatus.COMPLETED
        session.score = summary.score
        session.end_time = now
        session.result_id = result.id

        logger.info(
            f"Graded session {session.id}: {summary.score}/{summary.total} "
            f"({summary.percentage:.1f}%, {summary.grade})"
        )
        return result
