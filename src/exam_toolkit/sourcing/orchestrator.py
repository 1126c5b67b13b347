"""
Module: sourcing.orchestrator

Purpose:
    The sourcing cascade: local store -> remote bank -> synthetic generator
    -> safety net. Each stage may add to the subject pool; the cascade stops
    at the first stage that leaves the pool sufficient. Whatever a stage
    obtains is persisted before the pool is returned, so later requests for
    the same subject are served locally.

Key Classes:
    - QuestionSourcer: Runs the cascade for one (exam type, subject)
    - SourcingReport: Pool plus per-stage counts

Algorithm:
    1. Local: query the store. Entrance exams (and requests without a
       subject) stop here.
    2. Remote: when the pool is under min_pool_size (or require_remote is
       set), fetch bank_size questions page by page, drop exact-text
       duplicates, persist the delta.
    3. Generator: when the pool is under fallback_threshold and fallback is
       allowed (and remote is not required), generate, drop exact-text
       duplicates, persist the delta.
    4. Safety net: when the pool is still empty and fallback is allowed,
       generate and persist without deduplication.

    Deltas are merged under the store's per-subject lock, against a fresh
    read of the pool, so concurrent sourcers of one subject cannot persist
    the same text twice.

Dependencies:
    - storage.QuestionStore
    - sourcing.remote.RemoteQuestionClient
    - sourcing.generator

Used By:
    - builder.sessions: SessionManager
    - builder.service: ExamService.source_questions
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..core.models.questions import ExamType, Question
from ..storage.base import QuestionStore
from . import generator
from .config import SourcingConfig
from .remote.client import RemoteQuestionClient

logger = logging.getLogger(__name__)


def dedupe_by_text(candidates: List[Question], existing: List[Question]) -> List[Question]:
    """
    Candidates whose text is not already in existing.

    Comparison is exact on the question text. Repeats within candidates are
    kept: the generator reuses a handful of templates across its fixed-size
    set.
    """
    existing_texts = {q.text for q in existing}
    return [q for q in candidates if q.text not in existing_texts]


@dataclass
class SourcingReport:
    """Outcome of one cascade run."""

    exam_type: ExamType
    subject: Optional[str]
    questions: List[Question] = field(default_factory=list)
    local_count: int = 0
    remote_added: int = 0
    generated_added: int = 0
    safety_net_used: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.questions


class QuestionSourcer:
    """
    Question sourcing cascade.

    Args:
        store: Local question store (read and written).
        config: Thresholds and fallback policy.
        client: Remote client; None disables the remote stage.
        generate: Synthetic generator (exam_type, subject) -> questions.

    Example:
        >>> sourcer = QuestionSourcer(store, config, client)
        >>> pool = sourcer.source(ExamType.JAMB, "Physics")
    """

    def __init__(
        self,
        store: QuestionStore,
        config: SourcingConfig,
        client: Optional[RemoteQuestionClient] = None,
        generate: Callable[[ExamType, str], List[Question]] = generator.generate,
    ):
        self.store = store
        self.config = config
        self.client = client
        self._generate = generate

    def source(self, exam_type: ExamType, subject: Optional[str] = None) -> List[Question]:
        """Return the usable pool for a subject; [] only when every stage is exhausted."""
        return self.source_with_report(exam_type, subject).questions

    def source_with_report(
        self,
        exam_type: ExamType,
        subject: Optional[str] = None,
    ) -> SourcingReport:
        exam_type = ExamType.parse(exam_type)
        report = SourcingReport(exam_type, subject)

        stages = (
            self._local_stage,
            self._remote_stage,
            self._generator_stage,
            self._safety_net_stage,
        )
        for stage in stages:
            if stage(report):
                break

        logger.info(
            f"Sourced {len(report.questions)} {exam_type.value} questions"
            f"{' for ' + subject if subject else ''} "
            f"(local={report.local_count}, remote=+{report.remote_added}, "
            f"generated=+{report.generated_added}"
            f"{', safety net' if report.safety_net_used else ''})"
        )
        return report

    # ─────────────────────────────────────────────────────────────────────
    # Stages: each returns True when the cascade should stop
    # ─────────────────────────────────────────────────────────────────────

    def _local_stage(self, report: SourcingReport) -> bool:
        report.questions = self.store.query(report.exam_type, report.subject)
        report.local_count = len(report.questions)
        if report.local_count:
            logger.debug(f"Using {report.local_count} local questions")
        # Entrance exams and whole-exam-type reads are served from the store alone
        return not report.exam_type.is_national or report.subject is None

    def _remote_stage(self, report: SourcingReport) -> bool:
        short = len(report.questions) < self.config.min_pool_size
        if self.client is None or not (short or self.config.require_remote):
            return not short

        fetched = self.client.fetch_multi_page(
            report.exam_type,
            report.subject,
            total=self.config.bank_size,
            page_size=self.config.page_size,
        )
        if fetched:
            report.remote_added = self._merge(report, fetched, dedupe=True)
        else:
            logger.info(f"Remote bank returned nothing for {report.subject}")
        return len(report.questions) >= self.config.fallback_threshold

    def _generator_stage(self, report: SourcingReport) -> bool:
        if len(report.questions) >= self.config.fallback_threshold:
            return True
        if self.config.require_remote or not self.config.allow_local_fallback:
            return bool(report.questions)

        logger.warning(
            f"Only {len(report.questions)} questions for {report.subject}; generating more"
        )
        generated = self._generate(report.exam_type, report.subject)
        report.generated_added = self._merge(report, generated, dedupe=True)
        return bool(report.questions)

    def _safety_net_stage(self, report: SourcingReport) -> bool:
        if not self.config.allow_local_fallback:
            logger.warning(f"No questions available for {report.subject} and fallback is disabled")
            return True

        logger.warning(f"No questions found at all for {report.subject}; generating fresh set")
        generated = self._generate(report.exam_type, report.subject)
        report.generated_added += self._merge(report, generated, dedupe=False)
        report.safety_net_used = True
        return True

    # ─────────────────────────────────────────────────────────────────────
    # Persistence
    # ─────────────────────────────────────────────────────────────────────

    def _merge(self, report: SourcingReport, batch: List[Question], dedupe: bool) -> int:
        """Persist the new part of batch and extend the pool. Returns count added."""
        with self.store.subject_lock(report.exam_type, report.subject):
            current = self.store.query(report.exam_type, report.subject)
            delta = dedupe_by_text(batch, current) if dedupe else list(batch)
            if delta:
                self.store.put_many(delta)
                current_ids = {q.id for q in current}
                current = current + [q for q in delta if q.id not in current_ids]
            report.questions = current
        logger.debug(f"Persisted {len(delta)} new {report.subject} questions")
        return len(delta)
