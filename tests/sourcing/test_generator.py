"""
Unit tests for the synthetic question generator.
"""

from collections import Counter

from exam_toolkit.core.models import ExamType, QuestionKind
from exam_toolkit.sourcing.generator import ESSAY_EXPLANATION, generate, subject_slug, year_for_index


class TestGenerate:
    def test_generate_when_jamb_then_sixty_objective(self):
        questions = generate(ExamType.JAMB, "Physics")

        assert len(questions) == 60
        assert all(q.kind is QuestionKind.OBJECTIVE for q in questions)
        assert questions[0].id == "JAMB-PHYSICS-001"
        assert questions[-1].id == "JAMB-PHYSICS-060"
        assert questions[0].text == "What is a fundamental concept in Physics?"

    def test_generate_when_jamb_then_answers_cycle_through_templates(self):
        answers = [q.correct_answer for q in generate(ExamType.JAMB, "Physics")[:6]]

        assert answers == ["a", "b", "c", "d", "a", "a"]

    def test_generate_when_waec_then_fifty_objective_ten_essay(self):
        questions = generate(ExamType.WAEC, "Literature-in-English")
        kinds = Counter(q.kind for q in questions)

        assert kinds[QuestionKind.OBJECTIVE] == 50
        assert kinds[QuestionKind.ESSAY] == 10
        essays = [q for q in questions if q.kind is QuestionKind.ESSAY]
        assert essays[0].id == "WAEC-LITERATURE-IN-ENGLISH-ESS-001"
        assert [q.number for q in essays] == list(range(51, 61))
        assert all(q.explanation == ESSAY_EXPLANATION for q in essays)
        assert all(q.essay_answer for q in essays)

    def test_generate_when_entrance_then_empty(self):
        assert generate(ExamType.ENTRANCE, "Mathematics") == []

    def test_generate_when_called_twice_then_identical_content(self):
        first = [(q.id, q.text, q.year) for q in generate(ExamType.WAEC, "Physics")]
        second = [(q.id, q.text, q.year) for q in generate(ExamType.WAEC, "Physics")]

        assert first == second


class TestHelpers:
    def test_subject_slug_when_punctuation_then_collapsed(self):
        assert subject_slug("Social & Citizenship Studies") == "SOCIAL-CITIZENSHIP-STUDIES"

    def test_year_for_index_when_sixty_questions_then_spans_2024_to_2000(self):
        years = [year_for_index(i, 60) for i in range(60)]

        assert years[0] == 2024
        assert years[-1] == 2000
        assert years == sorted(years, reverse=True)
