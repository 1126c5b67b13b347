"""
Exam building: composition, sessions and grading.
"""

from .composer import ExamComposer
from .grading import GradeSummary, GradingEngine, grade_answers, letter_grade, score_snapshot
from .service import ExamService
from .sessions import SessionManager

__all__ = [
    "ExamComposer",
    "GradeSummary",
    "GradingEngine",
    "grade_answers",
    "letter_grade",
    "score_snapshot",
    "ExamService",
    "SessionManager",
]
