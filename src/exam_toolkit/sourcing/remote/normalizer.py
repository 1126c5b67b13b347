"""
Module: sourcing.remote.normalizer

Purpose:
    Convert the remote bank's loosely-shaped JSON into Question objects.
    Pure; never raises. Entries that cannot form a valid question are
    dropped individually.

Accepted shapes:
    - [ {...}, ... ]
    - {"data": [ {...}, ... ]}
    - {"data": {"question": ..., ...}}      (single question)
    - {"questions": [ ... ]}
    - {"data": {"questions": [ ... ]}}

Key Functions:
    - normalize_response(): Payload -> list[Question]
    - extract_entries(): Payload -> raw entry list

Used By:
    - sourcing.remote.client
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ...core.models.questions import (
    ANSWER_LETTERS,
    ExamType,
    OptionSet,
    Question,
    QuestionKind,
)

logger = logging.getLogger(__name__)

DEFAULT_EXPLANATION = "No explanation available."
UNKNOWN_SUBJECT = "Unknown"

_WHITESPACE = re.compile(r"\s+")


def _first(entry: Mapping[str, Any], *keys: str) -> Any:
    """First truthy value among keys, or None."""
    for key in keys:
        value = entry.get(key)
        if value not in (None, "", [], {}):
            return value
    return None


def extract_entries(payload: Any) -> List[Any]:
    """Locate the list of raw question entries in a response payload."""
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []

    data = payload.get("data")
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        if data.get("question"):
            return [data]
        if isinstance(data.get("questions"), list):
            return data["questions"]
    if isinstance(payload.get("questions"), list):
        return payload["questions"]
    return []


def _options(raw: Any) -> Optional[OptionSet]:
    if isinstance(raw, Mapping):
        def pick(i: int, letter: str) -> str:
            value = _first(raw, letter, letter.upper(), str(i))
            if value is None:
                value = raw.get(i)
            return str(value) if value is not None else ""

        return OptionSet(*(pick(i, letter) for i, letter in enumerate(ANSWER_LETTERS)))
    if isinstance(raw, Sequence) and not isinstance(raw, str):
        values = [str(v) if v is not None else "" for v in list(raw)[:4]]
        values += [""] * (4 - len(values))
        return OptionSet(*values)
    return None


def _year(entry: Mapping[str, Any]) -> int:
    raw = _first(entry, "examyear", "year")
    try:
        return int(raw)
    except (TypeError, ValueError):
        return date.today().year


def _normalize_entry(
    entry: Any,
    index: int,
    exam_type: ExamType,
    subject: Optional[str],
) -> Optional[Question]:
    if not isinstance(entry, Mapping):
        return None

    text = _first(entry, "question", "questionText", "text")
    if not isinstance(text, str) or not text.strip():
        return None

    entry_subject = _first(entry, "subject", "category", "subject_name")
    entry_subject = str(entry_subject) if entry_subject else (subject or UNKNOWN_SUBJECT)

    raw_id = entry.get("id")
    if raw_id in (None, ""):
        qid = f"{exam_type.value.upper()}-{_WHITESPACE.sub('-', entry_subject)}-{index + 1}"
    else:
        qid = str(raw_id)

    kind_raw = str(_first(entry, "questionType", "type") or "").strip().lower()
    kind = QuestionKind.ESSAY if kind_raw == QuestionKind.ESSAY.value else QuestionKind.OBJECTIVE

    number = _first(entry, "number", "questionNumber")
    try:
        number = int(number)
    except (TypeError, ValueError):
        number = index + 1

    options = _options(_first(entry, "option", "options", "choices", "optionsMap"))
    answer: Optional[str] = None
    if kind is QuestionKind.OBJECTIVE:
        answer = str(_first(entry, "answer", "correct_answer", "correctAnswer") or "a").strip().lower()
        if answer not in ANSWER_LETTERS:
            logger.debug(f"Dropping {qid}: answer {answer!r} is not a-d")
            return None
        if options is None:
            options = OptionSet()

    essay_answer = _first(entry, "essay_answer", "sample_answer", "essayAnswer")

    try:
        return Question(
            id=qid,
            subject=entry_subject,
            exam_type=exam_type,
            kind=kind,
            number=number,
            text=text.strip(),
            year=_year(entry),
            options=options if kind is QuestionKind.OBJECTIVE else None,
            correct_answer=answer,
            explanation=str(_first(entry, "explanation", "solution", "hint") or DEFAULT_EXPLANATION),
            essay_answer=str(essay_answer) if essay_answer else None,
        )
    except ValueError as e:
        logger.debug(f"Dropping entry {index}: {e}")
        return None


def normalize_response(
    payload: Any,
    exam_type: ExamType,
    subject: Optional[str] = None,
) -> List[Question]:
    """
    Normalize a remote payload into questions.

    Args:
        payload: Decoded JSON body.
        exam_type: Exam type the request was made for.
        subject: Requested subject, used when entries carry none.

    Returns:
        Valid questions in payload order; [] for unrecognised shapes.
    """
    exam_type = ExamType.parse(exam_type)
    entries = extract_entries(payload)
    if not entries:
        logger.warning("Invalid or empty remote response structure")
        return []

    questions = []
    for index, entry in enumerate(entries):
        question = _normalize_entry(entry, index, exam_type, subject)
        if question is not None:
            questions.append(question)

    dropped = len(entries) - len(questions)
    if dropped:
        logger.info(f"Dropped {dropped} of {len(entries)} malformed remote entries")
    return questions
