"""
Serialization Utilities

JSONL encode/decode for questions and results. The file stores hold an
exclusive lock while calling these, so they operate on text rather than
paths.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Iterable, TypeVar

from ..models.questions import Question
from ..models.results import ExamResult

T = TypeVar("T")


class SerializationError(ValueError):
    """A stored line could not be decoded."""

    def __init__(self, message: str, source: str = "", line_no: int = 0):
        self.source = source
        self.line_no = line_no
        super().__init__(f"{source}:{line_no}: {message}" if source else message)


# ─────────────────────────────────────────────────────────────────────────────
# Generic JSONL
# ─────────────────────────────────────────────────────────────────────────────

def _decode_lines(
    lines: Iterable[str],
    factory: Callable[[dict[str, Any]], T],
    source: str,
) -> list[T]:
    records = []
    for line_no, line in enumerate(lines, 1):
        line = line.strip()
        if not line:
            continue
        try:
            records.append(factory(json.loads(line)))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise SerializationError(str(e), source=source, line_no=line_no) from e
    return records


def _encode_records(records: Iterable[Any]) -> str:
    return "".join(
        json.dumps(record.to_dict(), ensure_ascii=False) + "\n" for record in records
    )


# ─────────────────────────────────────────────────────────────────────────────
# Questions
# ─────────────────────────────────────────────────────────────────────────────

def decode_questions(lines: Iterable[str], source: str = "") -> list[Question]:
    """
    Decode questions from JSONL lines.

    Raises:
        SerializationError: If any line is malformed or fails validation
    """
    return _decode_lines(lines, Question.from_dict, source)


def encode_questions(questions: Iterable[Question]) -> str:
    """Encode questions as JSONL text (one object per line)."""
    return _encode_records(questions)


# ─────────────────────────────────────────────────────────────────────────────
# Results
# ─────────────────────────────────────────────────────────────────────────────

def decode_results(lines: Iterable[str], source: str = "") -> list[ExamResult]:
    return _decode_lines(lines, ExamResult.from_dict, source)


def encode_results(results: Iterable[ExamResult]) -> str:
    return _encode_records(results)
