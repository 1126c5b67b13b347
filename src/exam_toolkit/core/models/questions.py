"""
Module: questions

Purpose:
    Provides the Question dataclass - the unit of content flowing from the
    sourcing cascade into exam composition and grading. Immutable, validated
    on construction so malformed objective/essay combinations never reach a
    session snapshot.

Key Classes:
    - ExamType: Supported exam formats (entrance, JAMB, WAEC)
    - QuestionKind: Objective (multiple choice) or essay
    - OptionSet: The four labelled choices of an objective question
    - Question: Complete question representation

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - storage: Question stores
    - sourcing: Normalizer, generator, orchestrator
    - builder: Composer, sessions, grading
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

ANSWER_LETTERS = ("a", "b", "c", "d")


class ExamType(str, Enum):
    """Exam format identifier."""

    ENTRANCE = "common-entrance"
    JAMB = "jamb"
    WAEC = "waec"

    @property
    def is_national(self) -> bool:
        """True for the formats backed by a remote bank and a target count."""
        return self in (ExamType.JAMB, ExamType.WAEC)

    @classmethod
    def parse(cls, value: "ExamType | str") -> "ExamType":
        """
        Parse an exam type from its value, case-insensitively.

        Raises:
            ValueError: If value does not name a known exam type.
        """
        if isinstance(value, ExamType):
            return value
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value == normalized or member.name.lower() == normalized:
                return member
        raise ValueError(f"Unknown exam type: {value!r}")


class QuestionKind(str, Enum):
    """Question kind. Only objective questions are auto-graded."""

    OBJECTIVE = "objective"
    ESSAY = "essay"


@dataclass(frozen=True)
class OptionSet:
    """Four labelled choices, keys a-d."""

    a: str = ""
    b: str = ""
    c: str = ""
    d: str = ""

    def get(self, letter: str) -> str:
        if letter not in ANSWER_LETTERS:
            raise KeyError(letter)
        return getattr(self, letter)

    def to_dict(self) -> Dict[str, str]:
        return {"a": self.a, "b": self.b, "c": self.c, "d": self.d}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OptionSet":
        return cls(**{k: str(data.get(k, "") or "") for k in ANSWER_LETTERS})


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Question:
    """
    Complete question representation (immutable).

    Attributes:
        id: Stable identifier like "JAMB-MATHEMATICS-001"
        subject: Subject name, matched case-insensitively
        exam_type: Exam format the question belongs to
        kind: Objective or essay
        number: Display number within its source paper
        text: Question stem
        year: Exam year
        options: Choices a-d (objective only)
        correct_answer: One of a-d (objective only)
        explanation: Worked explanation shown after grading
        essay_answer: Model answer (essay only)
        created_at: ISO-8601 timestamp of when the question was stored

    Invariants:
        - Objective questions carry options and a correct answer in a-d
        - Essay questions never carry a correct answer
    """

    id: str
    subject: str
    exam_type: ExamType
    kind: QuestionKind
    number: int
    text: str
    year: int
    options: Optional[OptionSet] = None
    correct_answer: Optional[str] = None
    explanation: str = ""
    essay_answer: Optional[str] = None
    created_at: str = field(default_factory=_now_iso)

    def __post_init__(self) -> None:
        """Validate question data."""
        if not self.id:
            raise ValueError("id cannot be empty")
        if not self.subject:
            raise ValueError("subject cannot be empty")
        if not self.text or not self.text.strip():
            raise ValueError(f"Question {self.id}: text cannot be empty")
        if not isinstance(self.exam_type, ExamType):
            object.__setattr__(self, "exam_type", ExamType.parse(self.exam_type))
        if not isinstance(self.kind, QuestionKind):
            object.__setattr__(self, "kind", QuestionKind(self.kind))

        if self.kind is QuestionKind.OBJECTIVE:
            if self.options is None:
                raise ValueError(f"Question {self.id}: objective question requires options")
            if self.correct_answer not in ANSWER_LETTERS:
                raise ValueError(
                    f"Question {self.id}: correct_answer must be one of a-d, "
                    f"got {self.correct_answer!r}"
                )
        elif self.correct_answer is not None:
            raise ValueError(f"Question {self.id}: essay question cannot have a correct_answer")

    @property
    def is_objective(self) -> bool:
        return self.kind is QuestionKind.OBJECTIVE

    def matches_subject(self, subject: str) -> bool:
        """Case-insensitive subject comparison."""
        return self.subject.strip().lower() == subject.strip().lower()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return {
            "id": self.id,
            "subject": self.subject,
            "exam_type": self.exam_type.value,
            "kind": self.kind.value,
            "number": self.number,
            "text": self.text,
            "year": self.year,
            "options": self.options.to_dict() if self.options else None,
            "correct_answer": self.correct_answer,
            "explanation": self.explanation,
            "essay_answer": self.essay_answer,
            "created_at": self.created_at,
        }

    def to_public_dict(self) -> Dict[str, Any]:
        """Serialize without the correct answer, for candidates."""
        data = self.to_dict()
        data.pop("correct_answer")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Question":
        """Deserialize from dictionary."""
        options = data.get("options")
        return cls(
            id=data["id"],
            subject=data["subject"],
            exam_type=ExamType.parse(data["exam_type"]),
            kind=QuestionKind(data.get("kind", QuestionKind.OBJECTIVE.value)),
            number=int(data.get("number", 0)),
            text=data["text"],
            year=int(data["year"]),
            options=OptionSet.from_dict(options) if options else None,
            correct_answer=data.get("correct_answer"),
            explanation=data.get("explanation", ""),
            essay_answer=data.get("essay_answer"),
            created_at=data.get("created_at") or _now_iso(),
        )
