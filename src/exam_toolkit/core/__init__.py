"""Core models and utilities shared by storage, sourcing and builder."""

from .models import ExamResult, ExamSession, ExamType, OptionSet, Question, QuestionKind, SessionStatus

__all__ = [
    "ExamResult",
    "ExamSession",
    "ExamType",
    "OptionSet",
    "Question",
    "QuestionKind",
    "SessionStatus",
]
