"""
Module: sourcing.generator

Purpose:
    Deterministic synthetic questions used when neither the local store
    nor the remote bank can supply enough for a subject. Output depends
    only on (exam type, subject).

Key Functions:
    - generate(): JAMB -> 60 objective; WAEC -> 50 objective + 10 essay;
      entrance -> []
    - subject_slug(): "Literature-in-English" -> "LITERATURE-IN-ENGLISH"

Used By:
    - sourcing.orchestrator: Generator and safety-net stages
    - sourcing.prefetch: Offline fallback
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Sequence

from ..common.thresholds import FORMAT_TARGETS
from ..core.models.questions import ExamType, OptionSet, Question, QuestionKind

logger = logging.getLogger(__name__)

ESSAY_EXPLANATION = (
    "Essay questions are evaluated based on content, organization, grammar, "
    "vocabulary, and adherence to the question requirements."
)

_NON_ALNUM = re.compile(r"[^a-z0-9]+", re.IGNORECASE)


@dataclass(frozen=True)
class _ObjectiveTemplate:
    text: str
    label: str  # Option prefix, e.g. "Definition" -> "Definition A".."Definition D"
    answer: str
    explanation: str

    def render(self, subject: str) -> tuple[str, OptionSet, str]:
        options = OptionSet(*(f"{self.label} {letter}" for letter in "ABCD"))
        return self.text.format(subject=subject), options, self.explanation.format(subject=subject)


@dataclass(frozen=True)
class _EssayTemplate:
    text: str
    answer: str


JAMB_TEMPLATES: Sequence[_ObjectiveTemplate] = (
    _ObjectiveTemplate("What is a fundamental concept in {subject}?", "Definition", "a",
                       "Choose the most accurate definition of {subject}"),
    _ObjectiveTemplate("Which statement best describes {subject}?", "Statement", "b",
                       "Best description of {subject}"),
    _ObjectiveTemplate("Which example is most related to {subject}?", "Example", "c",
                       "Choose the example that best demonstrates {subject}"),
    _ObjectiveTemplate("How is {subject} applied in everyday life?", "Application", "d",
                       "Practical application of {subject}"),
    _ObjectiveTemplate("Identify the correct relationship in {subject}.", "Relation", "a",
                       "Choose the correct relationship"),
)

WAEC_TEMPLATES: Sequence[_ObjectiveTemplate] = (
    _ObjectiveTemplate("Which statement best describes {subject}?", "Option", "a",
                       "Best description of {subject}"),
    _ObjectiveTemplate("Identify the correct concept in {subject}.", "Concept", "b",
                       "Identify the correct concept for {subject}"),
    _ObjectiveTemplate("Which example is most related to {subject}?", "Example", "c",
                       "Choose the example that best demonstrates {subject}"),
    _ObjectiveTemplate("How is {subject} applied in everyday life?", "Application", "d",
                       "Practical application of {subject}"),
    _ObjectiveTemplate("Select the correct relationship in {subject}.", "Relation", "a",
                       "Choose the correct relationship"),
)

WAEC_ESSAY_TEMPLATES: Sequence[_EssayTemplate] = (
    _EssayTemplate("Discuss the importance of {subject} in society.",
                   "A structured essay discussing the importance of {subject} in society."),
    _EssayTemplate("Write an essay on challenges facing {subject} and suggest solutions.",
                   "An essay outlining challenges and suggesting practical solutions for {subject}."),
    _EssayTemplate("Explain the fundamental principles of {subject}.",
                   "A detailed explanation of the core principles of {subject}."),
    _EssayTemplate("Evaluate recent developments in {subject}.",
                   "An evaluative essay on recent developments in {subject}."),
    _EssayTemplate("Describe a practical experiment or project related to {subject}.",
                   "A description of a practical project or experiment with steps and "
                   "expected outcomes for {subject}."),
)


def subject_slug(subject: str) -> str:
    return _NON_ALNUM.sub("-", subject).upper()


def year_for_index(index: int, count: int) -> int:
    """Spread `count` questions across the generated year span, newest first."""
    span = FORMAT_TARGETS.generated_year_span
    offset = min(int(index // (count / span)), span - 1)
    return FORMAT_TARGETS.generated_newest_year - offset


def _objective(
    exam_type: ExamType,
    subject: str,
    templates: Sequence[_ObjectiveTemplate],
    count: int,
    id_format: str,
) -> List[Question]:
    questions = []
    for i in range(count):
        text, options, explanation = templates[i % len(templates)].render(subject)
        questions.append(Question(
            id=id_format.format(n=i + 1),
            subject=subject,
            exam_type=exam_type,
            kind=QuestionKind.OBJECTIVE,
            number=i + 1,
            text=text,
            year=year_for_index(i, count),
            options=options,
            correct_answer=templates[i % len(templates)].answer,
            explanation=explanation,
        ))
    return questions


def _essays(subject: str, count: int, first_number: int) -> List[Question]:
    slug = subject_slug(subject)
    questions = []
    for i in range(count):
        template = WAEC_ESSAY_TEMPLATES[i % len(WAEC_ESSAY_TEMPLATES)]
        questions.append(Question(
            id=f"WAEC-{slug}-ESS-{i + 1:03d}",
            subject=subject,
            exam_type=ExamType.WAEC,
            kind=QuestionKind.ESSAY,
            number=first_number + i,
            text=template.text.format(subject=subject),
            year=year_for_index(i, count),
            explanation=ESSAY_EXPLANATION,
            essay_answer=template.answer.format(subject=subject),
        ))
    return questions


def generate(exam_type: ExamType, subject: str) -> List[Question]:
    """
    Generate the synthetic question set for a subject.

    Returns:
        JAMB: 60 objective. WAEC: 50 objective then 10 essay (numbered 51-60).
        Entrance exams have no synthetic set and return [].
    """
    exam_type = ExamType.parse(exam_type)
    slug = subject_slug(subject)

    if exam_type is ExamType.JAMB:
        questions = _objective(
            exam_type, subject, JAMB_TEMPLATES,
            FORMAT_TARGETS.generated_jamb_objective,
            f"JAMB-{slug}-{{n:03d}}",
        )
    elif exam_type is ExamType.WAEC:
        count = FORMAT_TARGETS.generated_waec_objective
        questions = _objective(
            exam_type, subject, WAEC_TEMPLATES, count,
            f"WAEC-{slug}-OBJ-{{n:03d}}",
        )
        questions += _essays(subject, FORMAT_TARGETS.generated_waec_essay, count + 1)
    else:
        return []

    logger.info(f"Generated {len(questions)} {exam_type.value} questions for {subject}")
    return questions
