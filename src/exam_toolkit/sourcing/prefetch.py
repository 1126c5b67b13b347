"""
Module: sourcing.prefetch

Purpose:
    Bulk tooling over the remote bank: fill the local store for every
    national-exam subject ahead of time, and compare remote against local
    coverage. Subjects are processed one at a time with a short delay to
    stay under upstream rate limits.

Key Classes:
    - Prefetcher: prefetch_all / prefetch_subject / diagnose
    - PrefetchSummary, SubjectCoverage

Used By:
    - cli: `exam-toolkit prefetch`, `exam-toolkit diag`
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

from ..common.subjects import subject_names
from ..core.models.questions import ExamType, Question
from ..storage.base import QuestionStore
from . import generator
from .config import SourcingConfig
from .remote.client import RemoteQuestionClient

logger = logging.getLogger(__name__)

SUBJECT_DELAY = 0.15
DIAG_DELAY = 0.1

NATIONAL_EXAMS = (ExamType.JAMB, ExamType.WAEC)


@dataclass
class PrefetchSummary:
    """Per exam type: questions persisted per subject and subjects that failed."""

    persisted: Dict[ExamType, Dict[str, int]] = field(default_factory=dict)
    generated: Dict[ExamType, List[str]] = field(default_factory=dict)
    failures: Dict[ExamType, List[str]] = field(default_factory=dict)
    empty_after: Dict[ExamType, List[str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not any(self.failures.values()) and not any(self.empty_after.values())


@dataclass(frozen=True)
class SubjectCoverage:
    exam_type: ExamType
    subject: str
    remote_count: int
    local_count: int

    @property
    def missing(self) -> bool:
        return self.remote_count == 0 and self.local_count == 0


class Prefetcher:
    """
    Fill the local store from the remote bank.

    Example:
        >>> summary = Prefetcher(store, config, client).prefetch_all()
        >>> summary.ok
        True
    """

    def __init__(
        self,
        store: QuestionStore,
        config: SourcingConfig,
        client: RemoteQuestionClient,
        generate: Callable[[ExamType, str], List[Question]] = generator.generate,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.store = store
        self.config = config
        self.client = client
        self._generate = generate
        self._sleep = sleep

    def _replace(self, exam_type: ExamType, subject: str, questions: List[Question]) -> int:
        # Same per-subject lock as the sourcing cascade's merges
        with self.store.subject_lock(exam_type, subject):
            return self.store.replace_for_subject(exam_type, subject, questions)

    def prefetch_subject(self, exam_type: ExamType, subject: str) -> tuple[int, bool]:
        """
        Replace one subject's stored pool with a fresh remote fetch.

        Returns:
            (questions persisted, whether the generator was used)
        """
        logger.info(f"Fetching {exam_type.value} - {subject} ({self.config.bank_size} questions)")
        fetched = self.client.fetch_multi_page(
            exam_type, subject, total=self.config.bank_size, page_size=self.config.page_size
        )
        if fetched:
            return self._replace(exam_type, subject, fetched), False

        if self.config.allow_local_fallback:
            logger.warning(f"Remote returned no questions for {exam_type.value} - {subject}; generating")
            generated = self._generate(exam_type, subject)
            return self._replace(exam_type, subject, generated), True

        logger.error(f"No questions for {exam_type.value} - {subject} and fallback is disabled")
        return 0, False

    def prefetch_all(
        self,
        exam_types: Iterable[ExamType] = NATIONAL_EXAMS,
        subjects: Optional[Dict[ExamType, List[str]]] = None,
    ) -> PrefetchSummary:
        """Prefetch every catalogue subject of each exam type, then verify counts."""
        exam_types = [ExamType.parse(e) for e in exam_types]
        summary = PrefetchSummary()

        if self.config.require_remote:
            for exam_type in exam_types:
                removed = self.store.clear_for_exam_type(exam_type)
                logger.info(f"Remote required: cleared {removed} local {exam_type.value} questions")

        for exam_type in exam_types:
            names = (subjects or {}).get(exam_type) or subject_names(exam_type)
            persisted = summary.persisted.setdefault(exam_type, {})
            generated = summary.generated.setdefault(exam_type, [])
            failures = summary.failures.setdefault(exam_type, [])

            logger.info(f"{exam_type.value.upper()} subjects to prefetch ({len(names)})")
            for subject in names:
                count, used_generator = self.prefetch_subject(exam_type, subject)
                persisted[subject] = count
                if used_generator:
                    generated.append(subject)
                if count == 0:
                    failures.append(subject)
                self._sleep(SUBJECT_DELAY)

            summary.empty_after[exam_type] = [
                s for s in names if self.store.count(exam_type, s) == 0
            ]

        for exam_type, names in summary.empty_after.items():
            if names:
                logger.warning(f"{exam_type.value.upper()} subjects with zero persisted questions: {', '.join(names)}")
        return summary

    def diagnose(self, exam_type: ExamType, subjects: Optional[List[str]] = None) -> List[SubjectCoverage]:
        """Compare a one-question remote probe against the local count per subject."""
        exam_type = ExamType.parse(exam_type)
        coverage = []
        for subject in subjects or subject_names(exam_type):
            remote = self.client.fetch(exam_type, subject, page_size=1, page=1)
            local = self.store.count(exam_type, subject)
            coverage.append(SubjectCoverage(exam_type, subject, len(remote), local))
            logger.info(f"{subject} | remote: {len(remote)} | local: {local}")
            self._sleep(DIAG_DELAY)
        return coverage
