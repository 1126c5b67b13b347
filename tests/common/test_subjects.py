"""
Unit tests for the subject catalogue.
"""

import pytest

from exam_toolkit.common import (
    CORE_LANGUAGE_SUBJECT,
    UnknownSubjectError,
    is_core_language,
    resolve_subject,
    subject_names,
    subjects_by_category,
)
from exam_toolkit.core.models import ExamType


class TestSubjectCatalogue:
    def test_subject_names_when_entrance_then_nine_subjects(self):
        names = subject_names(ExamType.ENTRANCE)

        assert len(names) == 9
        assert "Quantitative Reasoning" in names

    def test_subject_names_when_national_then_core_language_first(self):
        """Both national exams list the core-language subject first."""
        assert subject_names("jamb")[0] == CORE_LANGUAGE_SUBJECT
        assert subject_names("waec")[0] == CORE_LANGUAGE_SUBJECT

    def test_subjects_by_category_when_commercial_then_only_commercial(self):
        subjects = subjects_by_category(ExamType.WAEC, "Commercial")

        assert subjects
        assert all(s.category == "Commercial" for s in subjects)
        assert "Economics" in [s.name for s in subjects]

    def test_resolve_subject_when_lowercase_then_canonical_name(self):
        assert resolve_subject(ExamType.JAMB, "further mathematics") == "Further Mathematics"

    def test_resolve_subject_when_catalogue_id_then_canonical_name(self):
        assert resolve_subject(ExamType.WAEC, "waec-phy") == "Physics"

    def test_resolve_subject_when_not_offered_then_raises_error(self):
        with pytest.raises(UnknownSubjectError):
            resolve_subject(ExamType.ENTRANCE, "Physics")

    @pytest.mark.parametrize("subject,expected", [
        ("English Language", True),
        ("english language", True),
        ("English", False),
        ("Mathematics", False),
    ])
    def test_is_core_language_when_checked_then_exact_case_insensitive(self, subject, expected):
        assert is_core_language(subject) is expected
