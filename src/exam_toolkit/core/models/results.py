"""
Module: results

Purpose:
    ExamResult - immutable record of a graded session.

Used By:
    - builder.grading
    - storage (result stores)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .questions import ExamType


def _legacy_subjects(subject: str) -> Tuple[str, ...]:
    # Records written before subjects were stored keep only the display string
    return (subject,) if subject else ()


@dataclass(frozen=True)
class ExamResult:
    """
    Graded attempt (immutable).

    Attributes:
        score: Number of correct objective answers
        total_questions: Number of objective questions in the snapshot
        percentage: score / total * 100, or 0 when there were none
        grade: Letter grade A-F
        completed_at: ISO-8601 timestamp
        subject: Display subject (comma-joined for multi-subject sessions)
        subjects: Subjects in request order
    """

    id: str
    session_id: str
    student_id: str
    student_name: str
    exam_type: ExamType
    subject: str
    score: int
    total_questions: int
    percentage: float
    grade: str
    completed_at: str
    school_id: Optional[str] = None
    subjects: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "subjects", tuple(self.subjects))
        if self.score < 0 or self.score > self.total_questions:
            raise ValueError(
                f"score must be within 0..{self.total_questions}, got {self.score}"
            )
        if not isinstance(self.exam_type, ExamType):
            object.__setattr__(self, "exam_type", ExamType.parse(self.exam_type))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "session_id": self.session_id,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "school_id": self.school_id,
            "exam_type": self.exam_type.value,
            "subject": self.subject,
            "subjects": list(self.subjects),
            "score": self.score,
            "total_questions": self.total_questions,
            "percentage": self.percentage,
            "grade": self.grade,
            "completed_at": self.completed_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExamResult":
        return cls(
            id=data["id"],
            session_id=data["session_id"],
            student_id=data["student_id"],
            student_name=data.get("student_name", ""),
            school_id=data.get("school_id"),
            exam_type=ExamType.parse(data["exam_type"]),
            subject=data["subject"],
            subjects=tuple(data["subjects"]) if "subjects" in data else _legacy_subjects(data["subject"]),
            score=int(data["score"]),
            total_questions=int(data["total_questions"]),
            percentage=float(data["percentage"]),
            grade=data["grade"],
            completed_at=data["completed_at"],
        )
