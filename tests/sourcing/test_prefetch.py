"""
Unit tests for bulk prefetch and coverage diagnostics.
"""

from unittest.mock import Mock

import pytest

from exam_toolkit.core.models import ExamType
from exam_toolkit.sourcing import Prefetcher, SourcingConfig
from exam_toolkit.sourcing.prefetch import SUBJECT_DELAY
from exam_toolkit.storage import MemoryQuestionStore

from conftest import make_objective


@pytest.fixture
def store():
    return MemoryQuestionStore()


@pytest.fixture
def client():
    client = Mock()
    client.fetch_multi_page.return_value = []
    client.fetch.return_value = []
    return client


def _prefetcher(store, client, sleep, **config):
    return Prefetcher(store, SourcingConfig(api_url="https://bank.example", **config), client, sleep=sleep)


class TestPrefetcher:
    def test_prefetch_subject_when_remote_returns_then_subject_replaced(self, store, client, fake_sleep):
        store.put(make_objective("OLD", subject="Physics"))
        client.fetch_multi_page.return_value = [make_objective("NEW1"), make_objective("NEW2")]

        count, used_generator = _prefetcher(store, client, fake_sleep).prefetch_subject(ExamType.JAMB, "Physics")

        assert (count, used_generator) == (2, False)
        assert {q.id for q in store.query(ExamType.JAMB, "Physics")} == {"NEW1", "NEW2"}

    def test_prefetch_subject_when_remote_empty_and_fallback_then_generated(self, store, client, fake_sleep):
        count, used_generator = _prefetcher(store, client, fake_sleep).prefetch_subject(ExamType.WAEC, "Music")

        assert (count, used_generator) == (60, True)

    def test_prefetch_subject_when_remote_empty_and_no_fallback_then_zero(self, store, client, fake_sleep):
        prefetcher = _prefetcher(store, client, fake_sleep, allow_local_fallback=False)

        assert prefetcher.prefetch_subject(ExamType.JAMB, "Music") == (0, False)
        assert store.count(ExamType.JAMB) == 0

    def test_prefetch_all_when_require_remote_then_exam_type_cleared_first(self, store, client, fake_sleep):
        store.put(make_objective("STALE", subject="Geography"))
        prefetcher = _prefetcher(store, client, fake_sleep, require_remote=True, allow_local_fallback=False)

        summary = prefetcher.prefetch_all([ExamType.JAMB], subjects={ExamType.JAMB: ["Physics"]})

        assert store.get_by_id("STALE") is None
        assert summary.failures[ExamType.JAMB] == ["Physics"]
        assert summary.empty_after[ExamType.JAMB] == ["Physics"]
        assert not summary.ok

    def test_prefetch_all_when_subjects_succeed_then_ok_and_delayed(self, store, client, fake_sleep, sleeps):
        client.fetch_multi_page.side_effect = lambda exam_type, subject, **kw: [
            make_objective(f"{subject}-1", subject=subject, exam_type=exam_type)
        ]
        prefetcher = _prefetcher(store, client, fake_sleep)

        summary = prefetcher.prefetch_all(
            [ExamType.JAMB], subjects={ExamType.JAMB: ["Physics", "Biology"]}
        )

        assert summary.ok
        assert summary.persisted[ExamType.JAMB] == {"Physics": 1, "Biology": 1}
        assert sleeps == [SUBJECT_DELAY, SUBJECT_DELAY]

    def test_diagnose_when_neither_source_has_subject_then_marked_missing(self, store, client, fake_sleep):
        store.put(make_objective("P1", subject="Physics"))
        prefetcher = _prefetcher(store, client, fake_sleep)

        coverage = prefetcher.diagnose(ExamType.JAMB, ["Physics", "Music"])

        assert [(c.subject, c.local_count, c.missing) for c in coverage] == [
            ("Physics", 1, False),
            ("Music", 0, True),
        ]
        client.fetch.assert_any_call(ExamType.JAMB, "Music", page_size=1, page=1)


class LockCheckingStore(MemoryQuestionStore):
    """Records whether the subject lock was held on each replace."""

    def __init__(self):
        super().__init__()
        self.lock_held = []

    def replace_for_subject(self, exam_type, subject, questions):
        self.lock_held.append(self._subject_locks.get(exam_type, subject).locked())
        return super().replace_for_subject(exam_type, subject, questions)


class TestPrefetchLocking:
    def test_prefetch_subject_when_remote_returns_then_replaced_under_subject_lock(self, client, fake_sleep):
        store = LockCheckingStore()
        client.fetch_multi_page.return_value = [make_objective("NEW1")]

        _prefetcher(store, client, fake_sleep).prefetch_subject(ExamType.JAMB, "Physics")

        assert store.lock_held == [True]

    def test_prefetch_subject_when_generated_then_replaced_under_subject_lock(self, client, fake_sleep):
        store = LockCheckingStore()

        _prefetcher(store, client, fake_sleep).prefetch_subject(ExamType.JAMB, "Physics")

        assert store.lock_held == [True]
