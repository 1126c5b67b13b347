"""Common utilities shared across the toolkit."""

from __future__ import annotations

from .subjects import (
    CORE_LANGUAGE_SUBJECT,
    SubjectDefinition,
    UnknownSubjectError,
    is_core_language,
    resolve_subject,
    subject_names,
    subjects_by_category,
    subjects_for_exam,
)
from .thresholds import FORMAT_TARGETS, GRADE_BANDS, SOURCING_THRESHOLDS

__all__ = [
    # subjects
    "CORE_LANGUAGE_SUBJECT",
    "SubjectDefinition",
    "UnknownSubjectError",
    "is_core_language",
    "resolve_subject",
    "subject_names",
    "subjects_by_category",
    "subjects_for_exam",
    # thresholds
    "FORMAT_TARGETS",
    "GRADE_BANDS",
    "SOURCING_THRESHOLDS",
]
