"""
Module: sessions

Purpose:
    ExamSession - one candidate attempt. The question snapshot and total are
    fixed at creation; only answers and completion fields change afterwards.

Key Classes:
    - SessionStatus: in-progress / completed
    - ExamSession: Candidate attempt with frozen snapshot

Used By:
    - builder.sessions: SessionManager
    - builder.grading: GradingEngine
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional, Tuple

from .questions import ExamType, Question


class SessionStatus(str, Enum):
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


@dataclass
class ExamSession:
    """
    Candidate exam attempt.

    Attributes:
        id: Session identifier
        student_id / student_name: Candidate
        exam_type: Exam format
        subjects: Subjects in request order (one for single-subject sessions)
        snapshot: Ordered questions, frozen at creation
        total_questions: len(snapshot), frozen at creation
        answers: question id -> chosen letter (or essay text)
        status: in-progress until graded
        score: Objective score once graded
        result_id: Id of the stored ExamResult once graded
    """

    id: str
    student_id: str
    student_name: str
    exam_type: ExamType
    subjects: Tuple[str, ...]
    snapshot: Tuple[Question, ...]
    start_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    answers: Dict[str, str] = field(default_factory=dict)
    status: SessionStatus = SessionStatus.IN_PROGRESS
    end_time: Optional[datetime] = None
    score: Optional[int] = None
    result_id: Optional[str] = None
    total_questions: int = field(init=False)

    def __post_init__(self) -> None:
        self.snapshot = tuple(self.snapshot)
        self.subjects = tuple(self.subjects)
        self.total_questions = len(self.snapshot)

    @property
    def subject(self) -> str:
        """Display subject: the single subject, or a comma-joined list."""
        return ", ".join(self.subjects)

    @property
    def is_in_progress(self) -> bool:
        return self.status is SessionStatus.IN_PROGRESS

    @property
    def can_start(self) -> bool:
        """A session with an empty snapshot cannot be sat."""
        return self.total_questions > 0

    def question_ids(self) -> frozenset:
        return frozenset(q.id for q in self.snapshot)
