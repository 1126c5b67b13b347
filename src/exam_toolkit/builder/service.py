"""
Module: builder.service

Purpose:
    Inbound facade over sourcing, sessions and grading. HTTP handlers or
    the CLI call this rather than the individual components.

Key Classes:
    - ExamService

Used By:
    - cli
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from ..core.models.questions import ExamType, Question
from ..core.models.results import ExamResult
from ..core.models.sessions import ExamSession
from ..sourcing.config import SourcingConfig
from ..sourcing.orchestrator import QuestionSourcer
from ..sourcing.remote.client import RemoteQuestionClient
from ..storage.base import QuestionStore, ResultStore
from ..storage.jsonl import JsonlQuestionStore, JsonlResultStore
from ..storage.memory import MemoryQuestionStore, MemoryResultStore
from .composer import ExamComposer
from .grading import GradeSummary, GradingEngine, grade_answers
from .sessions import SessionManager

logger = logging.getLogger(__name__)

QUESTIONS_FILE = "questions.jsonl"
RESULTS_FILE = "results.jsonl"


class ExamService:
    """
    Exam engine facade.

    Example:
        >>> service = ExamService.from_config(SourcingConfig.from_env(), Path("data"))
        >>> session = service.create_session("S1", "Ada", "jamb", "Physics")
        >>> service.record_answer(session.id, session.snapshot[0].id, "a")
        >>> result = service.grade(session.id, school_id="SCH1")
    """

    def __init__(
        self,
        questions: QuestionStore,
        results: ResultStore,
        sourcer: QuestionSourcer,
        composer: Optional[ExamComposer] = None,
    ):
        self.questions = questions
        self.results = results
        self.sourcer = sourcer
        self.sessions = SessionManager(sourcer, composer)
        self.grading = GradingEngine(results)

    @classmethod
    def from_config(
        cls,
        config: SourcingConfig,
        data_dir: Optional[Path] = None,
        composer: Optional[ExamComposer] = None,
    ) -> "ExamService":
        """Wire the default stack; JSONL stores under data_dir, else in memory."""
        if data_dir is not None:
            questions: QuestionStore = JsonlQuestionStore(Path(data_dir) / QUESTIONS_FILE)
            results: ResultStore = JsonlResultStore(Path(data_dir) / RESULTS_FILE)
        else:
            questions = MemoryQuestionStore()
            results = MemoryResultStore()

        client = RemoteQuestionClient(config) if config.remote_enabled else None
        sourcer = QuestionSourcer(questions, config, client)
        return cls(questions, results, sourcer, composer)

    # ─────────────────────────────────────────────────────────────────────
    # Questions
    # ─────────────────────────────────────────────────────────────────────

    def source_questions(self, exam_type: ExamType, subject: Optional[str] = None) -> List[Question]:
        return self.sourcer.source(ExamType.parse(exam_type), subject)

    def public_questions(self, exam_type: ExamType, subject: Optional[str] = None) -> List[Dict[str, Any]]:
        """Stored questions without their correct answers."""
        return [q.to_public_dict() for q in self.questions.query(ExamType.parse(exam_type), subject)]

    def last_updated(self, exam_type: ExamType, subject: Optional[str] = None) -> Optional[str]:
        return self.questions.last_updated(ExamType.parse(exam_type), subject)

    # ─────────────────────────────────────────────────────────────────────
    # Sessions
    # ─────────────────────────────────────────────────────────────────────

    def create_session(
        self,
        student_id: str,
        student_name: str,
        exam_type: ExamType,
        subject_or_subjects: Union[str, Sequence[str], None],
    ) -> ExamSession:
        return self.sessions.create_session(student_id, student_name, exam_type, subject_or_subjects)

    def record_answer(self, session_id: str, question_id: str, value: str) -> bool:
        return self.sessions.record_answer(session_id, question_id, value)

    def get_session(self, session_id: str) -> Optional[ExamSession]:
        return self.sessions.get_session(session_id)

    # ─────────────────────────────────────────────────────────────────────
    # Grading and results
    # ─────────────────────────────────────────────────────────────────────

    def grade(self, session_id: str, school_id: Optional[str] = None) -> Optional[ExamResult]:
        """Grade a session; None when it does not exist."""
        with self.sessions.locked():
            return self.grading.grade(self.sessions.get_session(session_id), school_id)

    def grade_answers(self, answers: Dict[str, str]) -> GradeSummary:
        return grade_answers(answers, self.questions)

    def results_for_student(self, student_id: str) -> List[ExamResult]:
        return self.results.by_student(student_id)

    def results_for_exam_type(self, exam_type: ExamType) -> List[ExamResult]:
        return self.results.by_exam_type(ExamType.parse(exam_type))

    def delete_result(self, result_id: str) -> bool:
        return self.results.delete(result_id)
