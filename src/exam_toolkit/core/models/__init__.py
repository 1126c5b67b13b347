"""
Core data models.

All models are dataclasses; questions and results are frozen.
"""

from .questions import ANSWER_LETTERS, ExamType, OptionSet, Question, QuestionKind
from .results import ExamResult
from .sessions import ExamSession, SessionStatus

__all__ = [
    "ANSWER_LETTERS",
    "ExamType",
    "OptionSet",
    "Question",
    "QuestionKind",
    "ExamResult",
    "ExamSession",
    "SessionStatus",
]
