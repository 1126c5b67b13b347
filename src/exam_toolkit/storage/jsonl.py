"""
Module: storage.jsonl

Purpose:
    File-backed stores: one JSON object per line. Every mutation is a
    locked read-modify-write of the whole file, so concurrent processes see
    a consistent file.

Key Classes:
    - JsonlQuestionStore
    - JsonlResultStore

Dependencies:
    - storage.file_locking (portalocker)
    - core.utils.serialization

Used By:
    - builder.service.ExamService.from_config
    - cli
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Tuple, TypeVar

from ..core.models.questions import Question
from ..core.models.results import ExamResult
from ..core.utils.serialization import (
    SerializationError,
    decode_questions,
    decode_results,
    encode_questions,
    encode_results,
)
from .base import QuestionStore, ResultStore, StoreError
from .file_locking import locked_read_modify_write_text, locked_read_text


T = TypeVar("T")


class JsonlQuestionStore(QuestionStore):
    """QuestionStore persisted to a JSONL file."""

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = Path(path)

    def _decode(self, content: str) -> List[Question]:
        try:
            return decode_questions(content.splitlines(), source=str(self.path))
        except SerializationError as e:
            raise StoreError(f"Corrupt question store: {e}") from e

    def _read_all(self) -> List[Question]:
        return self._decode(locked_read_text(self.path))

    def _modify(self, modifier: Callable[[List[Question]], Tuple[List[Question], T]]) -> T:
        def rewrite(content: str) -> Tuple[str, T]:
            updated, value = modifier(self._decode(content))
            return encode_questions(updated), value

        return locked_read_modify_write_text(self.path, rewrite)


class JsonlResultStore(ResultStore):
    """ResultStore persisted to a JSONL file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _decode(self, content: str) -> List[ExamResult]:
        try:
            return decode_results(content.splitlines(), source=str(self.path))
        except SerializationError as e:
            raise StoreError(f"Corrupt result store: {e}") from e

    def _read_all(self) -> List[ExamResult]:
        return self._decode(locked_read_text(self.path))

    def _modify(self, modifier: Callable[[List[ExamResult]], Tuple[List[ExamResult], T]]) -> T:
        def rewrite(content: str) -> Tuple[str, T]:
            updated, value = modifier(self._decode(content))
            return encode_results(updated), value

        return locked_read_modify_write_text(self.path, rewrite)
