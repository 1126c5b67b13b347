"""
Subject catalogue per exam type.

Names are the canonical display spellings; stores and the remote bank are
matched case-insensitively, and the remote client additionally tries
spelling variants (see sourcing.remote.variants).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..core.models.questions import ExamType

# Format-A sessions with this subject target a larger question count.
CORE_LANGUAGE_SUBJECT = "English Language"


class UnknownSubjectError(ValueError):
    """Subject is not offered for the requested exam type."""
    pass


@dataclass(frozen=True)
class SubjectDefinition:
    """Catalogue entry for a subject."""

    id: str
    name: str
    exam_type: ExamType
    category: Optional[str] = None
    description: str = ""


def _entrance(id: str, name: str, description: str) -> SubjectDefinition:
    return SubjectDefinition(id, name, ExamType.ENTRANCE, description=description)


def _waec(id: str, name: str, category: str) -> SubjectDefinition:
    return SubjectDefinition(f"waec-{id}", name, ExamType.WAEC, category, f"WAEC {name}")


def _jamb(id: str, name: str) -> SubjectDefinition:
    return SubjectDefinition(f"jamb-{id}", name, ExamType.JAMB, description=f"JAMB {name}")


_CATALOGUE: Dict[ExamType, Tuple[SubjectDefinition, ...]] = {
    ExamType.ENTRANCE: (
        _entrance("eng", "English", "English Language and Comprehension"),
        _entrance("math", "Mathematics", "Mathematical Concepts and Problem Solving"),
        _entrance("sci", "Science", "Basic Sciences including Physics, Chemistry, and Biology"),
        _entrance("soc", "Social & Citizenship Studies", "Social Studies and Citizenship Education"),
        _entrance("crs", "CRS", "Christian Religious Studies"),
        _entrance("isl", "Islamic Studies", "Islamic Religious Education"),
        _entrance("qr", "Quantitative Reasoning", "Numerical and Logical Reasoning"),
        _entrance("vr", "Verbal Reasoning", "Language and Logical Reasoning"),
        _entrance("phe", "Physical Health Education", "Physical Education and Health"),
    ),
    ExamType.WAEC: (
        _waec("eng", "English Language", "Arts/Humanities"),
        _waec("math", "Mathematics", "Science"),
        _waec("phy", "Physics", "Science"),
        _waec("chem", "Chemistry", "Science"),
        _waec("bio", "Biology", "Science"),
        _waec("agric", "Agricultural Science", "Science"),
        _waec("fm", "Further Mathematics", "Science"),
        _waec("geog", "Geography", "Science"),
        _waec("lit", "Literature-in-English", "Arts/Humanities"),
        _waec("gov", "Government", "Arts/Humanities"),
        _waec("hist", "History", "Arts/Humanities"),
        _waec("crs", "Christian Religious Studies", "Arts/Humanities"),
        _waec("isl", "Islamic Religious Studies", "Arts/Humanities"),
        _waec("yor", "Yoruba", "Arts/Humanities"),
        _waec("igbo", "Igbo", "Arts/Humanities"),
        _waec("hausa", "Hausa", "Arts/Humanities"),
        _waec("fine-arts", "Fine Arts", "Arts/Humanities"),
        _waec("music", "Music", "Arts/Humanities"),
        _waec("fin-acc", "Financial Accounting", "Commercial"),
        _waec("commerce", "Commerce", "Commercial"),
        _waec("econ", "Economics", "Commercial"),
        _waec("marketing", "Marketing", "Commercial"),
        _waec("office-practice", "Office Practice", "Commercial"),
        _waec("bookkeeping", "Bookkeeping", "Commercial"),
    ),
    ExamType.JAMB: (
        _jamb("eng", "English Language"),
        _jamb("math", "Mathematics"),
        _jamb("phy", "Physics"),
        _jamb("chem", "Chemistry"),
        _jamb("bio", "Biology"),
        _jamb("agric", "Agricultural Science"),
        _jamb("fm", "Further Mathematics"),
        _jamb("geog", "Geography"),
        _jamb("lit", "Literature-in-English"),
        _jamb("hist", "History"),
        _jamb("crs", "Christian Religious Studies"),
        _jamb("isl", "Islamic Religious Studies"),
        _jamb("yor", "Yoruba"),
        _jamb("igbo", "Igbo"),
        _jamb("hausa", "Hausa"),
        _jamb("fine-arts", "Fine Arts"),
        _jamb("music", "Music"),
        _jamb("fin-acc", "Financial Accounting"),
        _jamb("marketing", "Marketing"),
        _jamb("office-practice", "Office Practice"),
        _jamb("bookkeeping", "Bookkeeping"),
        _jamb("econ", "Economics"),
        _jamb("comm", "Commerce"),
        _jamb("gov", "Government"),
    ),
}


def subjects_for_exam(exam_type: ExamType | str) -> List[SubjectDefinition]:
    """Return the catalogue for an exam type, in display order."""
    return list(_CATALOGUE[ExamType.parse(exam_type)])


def subject_names(exam_type: ExamType | str) -> List[str]:
    return [s.name for s in subjects_for_exam(exam_type)]


def subjects_by_category(exam_type: ExamType | str, category: str) -> List[SubjectDefinition]:
    """Filter a catalogue by stream (Science, Arts/Humanities, Commercial)."""
    return [s for s in subjects_for_exam(exam_type) if s.category == category]


def resolve_subject(exam_type: ExamType | str, name: str) -> str:
    """
    Return the canonical catalogue spelling of a subject.

    Raises:
        UnknownSubjectError: If the subject is not offered for exam_type.
    """
    wanted = name.strip().lower()
    for subject in subjects_for_exam(exam_type):
        if subject.name.lower() == wanted or subject.id.lower() == wanted:
            return subject.name
    raise UnknownSubjectError(f"{name!r} is not a {ExamType.parse(exam_type).value} subject")


def is_core_language(subject: str) -> bool:
    return subject.strip().lower() == CORE_LANGUAGE_SUBJECT.lower()
