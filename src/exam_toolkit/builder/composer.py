"""
Module: builder.composer

Purpose:
    Apply exam-format rules to sourced pools. Pure given its inputs and
    its random generator; pass a seeded generator for reproducible papers.

Key Classes:
    - ExamComposer: compose_subject / compose

Format rules:
    - Entrance: pool as-is, no slicing
    - JAMB: shuffle, truncate to 60 (core-language subject) or 40
    - WAEC: up to 50 objective + up to 10 essay, top up from the unselected
      remainder to 60, final shuffle
    - Multi-subject national sessions: compose per subject, concatenate,
      shuffle once

Used By:
    - builder.sessions: SessionManager.create_session
"""

from __future__ import annotations

import logging
import random
from typing import List, Mapping, Optional, Sequence

from ..common.subjects import is_core_language
from ..common.thresholds import FORMAT_TARGETS
from ..core.models.questions import ExamType, Question, QuestionKind

logger = logging.getLogger(__name__)


class ExamComposer:
    """
    Format-aware exam composer.

    Args:
        rng: Random generator used for every shuffle. Defaults to an
            unseeded random.Random.

    Example:
        >>> composer = ExamComposer.seeded(42)
        >>> paper = composer.compose_subject(ExamType.JAMB, "Physics", pool)
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    @classmethod
    def seeded(cls, seed: int) -> "ExamComposer":
        return cls(random.Random(seed))

    def _shuffled(self, items: Sequence[Question]) -> List[Question]:
        out = list(items)
        self.rng.shuffle(out)
        return out

    def target_count(self, exam_type: ExamType, subject: str) -> Optional[int]:
        """Maximum questions per subject, or None for the entrance exam."""
        exam_type = ExamType.parse(exam_type)
        if exam_type is ExamType.JAMB:
            if is_core_language(subject):
                return FORMAT_TARGETS.jamb_core_language
            return FORMAT_TARGETS.jamb_default
        if exam_type is ExamType.WAEC:
            return FORMAT_TARGETS.waec_total
        return None

    def compose_subject(
        self,
        exam_type: ExamType,
        subject: str,
        pool: Sequence[Question],
    ) -> List[Question]:
        """Compose one subject's questions. Never pads beyond the pool."""
        exam_type = ExamType.parse(exam_type)

        if exam_type is ExamType.JAMB:
            target = self.target_count(exam_type, subject)
            return self._shuffled(pool)[:target]

        if exam_type is ExamType.WAEC:
            return self._compose_waec(pool)

        return list(pool)

    def _compose_waec(self, pool: Sequence[Question]) -> List[Question]:
        objective = [q for q in pool if q.kind is QuestionKind.OBJECTIVE]
        essay = [q for q in pool if q.kind is QuestionKind.ESSAY]

        selected = (
            self._shuffled(objective)[:FORMAT_TARGETS.waec_objective]
            + self._shuffled(essay)[:FORMAT_TARGETS.waec_essay]
        )

        shortfall = FORMAT_TARGETS.waec_total - len(selected)
        if shortfall > 0:
            chosen = {id(q) for q in selected}
            remaining = [q for q in pool if id(q) not in chosen]
            selected += self._shuffled(remaining)[:shortfall]

        return self._shuffled(selected)[:FORMAT_TARGETS.waec_total]

    def compose(
        self,
        exam_type: ExamType,
        subjects: Sequence[str],
        pools: Mapping[str, Sequence[Question]],
    ) -> List[Question]:
        """
        Compose a whole session.

        Args:
            exam_type: Exam format.
            subjects: Subjects in request order, or a single subject name.
            pools: Sourced pool per subject.

        Returns:
            Ordered snapshot. National multi-subject papers are shuffled
            across subjects; single-subject and entrance papers keep
            per-subject order.
        """
        exam_type = ExamType.parse(exam_type)
        if isinstance(subjects, str):
            subjects = [subjects]
        combined: List[Question] = []
        for subject in subjects:
            part = self.compose_subject(exam_type, subject, pools.get(subject, ()))
            logger.debug(f"Composed {len(part)} {subject} questions")
            combined.extend(part)

        if exam_type.is_national and len(subjects) > 1:
            combined = self._shuffled(combined)
        return combined
