"""
Unit tests for question and result stores.

Every QuestionStore/ResultStore test runs against both the in-memory and
the JSONL implementation.
"""

import threading

import pytest

from exam_toolkit.core.models import ExamResult, ExamType
from exam_toolkit.storage import (
    JsonlQuestionStore,
    JsonlResultStore,
    MemoryQuestionStore,
    MemoryResultStore,
    StoreError,
)

from conftest import make_essay, make_objective


@pytest.fixture(params=["memory", "jsonl"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryQuestionStore()
    return JsonlQuestionStore(tmp_path / "questions.jsonl")


@pytest.fixture(params=["memory", "jsonl"])
def result_store(request, tmp_path):
    if request.param == "memory":
        return MemoryResultStore()
    return JsonlResultStore(tmp_path / "results.jsonl")


def _result(rid: str, student: str = "ST1", exam_type=ExamType.JAMB, completed_at="2026-01-01T00:00:00") -> ExamResult:
    return ExamResult(
        id=rid, session_id=f"S-{rid}", student_id=student, student_name="Ada",
        exam_type=exam_type, subject="Physics", score=1, total_questions=2,
        percentage=50.0, grade="F", completed_at=completed_at,
    )


class TestQuestionStore:
    """Behaviour shared by every QuestionStore."""

    def test_query_when_empty_then_returns_empty_list(self, store):
        assert store.query(ExamType.JAMB, "Physics") == []

    def test_query_when_subject_case_differs_then_matches(self, store):
        """Subject filter is case-insensitive."""
        store.put(make_objective("q1", subject="Physics"))

        assert [q.id for q in store.query(ExamType.JAMB, "PHYSICS")] == ["q1"]

    def test_query_when_other_exam_type_then_excluded(self, store):
        store.put(make_objective("q1", exam_type=ExamType.JAMB))
        store.put(make_objective("q2", exam_type=ExamType.WAEC))

        assert [q.id for q in store.query(ExamType.WAEC)] == ["q2"]

    def test_put_when_id_exists_then_replaces_in_place(self, store):
        """put() is an upsert by id that keeps insertion order."""
        store.put_many([make_objective("q1"), make_objective("q2")])

        store.put(make_objective("q1", text="Updated"))

        questions = store.query(ExamType.JAMB)
        assert [q.id for q in questions] == ["q1", "q2"]
        assert questions[0].text == "Updated"

    def test_get_by_id_when_missing_then_none(self, store):
        assert store.get_by_id("nope") is None

    def test_delete_by_id_when_present_then_true_and_removed(self, store):
        store.put(make_objective("q1"))

        assert store.delete_by_id("q1") is True
        assert store.delete_by_id("q1") is False
        assert store.get_by_id("q1") is None

    def test_replace_for_subject_when_called_then_only_that_subject_replaced(self, store):
        store.put_many([
            make_objective("p1", subject="Physics"),
            make_objective("c1", subject="Chemistry"),
        ])

        store.replace_for_subject(ExamType.JAMB, "physics", [make_objective("p2", subject="Physics")])

        assert [q.id for q in store.query(ExamType.JAMB, "Physics")] == ["p2"]
        assert [q.id for q in store.query(ExamType.JAMB, "Chemistry")] == ["c1"]

    def test_clear_for_exam_type_when_called_then_returns_removed_count(self, store):
        store.put_many([
            make_objective("j1", exam_type=ExamType.JAMB),
            make_objective("j2", exam_type=ExamType.JAMB),
            make_essay("w1", exam_type=ExamType.WAEC),
        ])

        removed = store.clear_for_exam_type(ExamType.JAMB)

        assert removed == 2
        assert store.count(ExamType.JAMB) == 0
        assert store.count(ExamType.WAEC) == 1

    def test_last_updated_when_questions_stored_then_latest_created_at(self, store):
        from dataclasses import replace

        store.put_many([
            replace(make_objective("q1"), created_at="2026-01-01T00:00:00+00:00"),
            replace(make_objective("q2"), created_at="2026-03-01T00:00:00+00:00"),
        ])

        assert store.last_updated(ExamType.JAMB, "Physics") == "2026-03-01T00:00:00+00:00"
        assert store.last_updated(ExamType.WAEC) is None

    def test_subject_lock_when_same_subject_different_case_then_same_lock(self, store):
        """Case variants of a subject share one lock."""
        acquired = []

        with store.subject_lock(ExamType.JAMB, "Physics"):
            t = threading.Thread(
                target=lambda: acquired.append(
                    store._subject_locks.get(ExamType.JAMB, "physics").acquire(blocking=False)
                )
            )
            t.start()
            t.join()

        assert acquired == [False]


class TestJsonlQuestionStore:
    def test_put_when_new_instance_then_data_persisted(self, tmp_path):
        path = tmp_path / "questions.jsonl"
        JsonlQuestionStore(path).put(make_objective("q1"))

        reopened = JsonlQuestionStore(path)

        assert reopened.get_by_id("q1") is not None

    def test_read_when_file_corrupt_then_raises_store_error(self, tmp_path):
        path = tmp_path / "questions.jsonl"
        path.write_text("{broken\n", encoding="utf-8")

        with pytest.raises(StoreError, match="Corrupt question store"):
            JsonlQuestionStore(path).query(ExamType.JAMB)


class TestResultStore:
    def test_add_when_duplicate_id_then_raises_store_error(self, result_store):
        result_store.add(_result("R1"))

        with pytest.raises(StoreError, match="Duplicate result id"):
            result_store.add(_result("R1"))

    def test_by_student_when_several_then_newest_first(self, result_store):
        result_store.add(_result("R1", completed_at="2026-01-01T00:00:00"))
        result_store.add(_result("R2", completed_at="2026-02-01T00:00:00"))
        result_store.add(_result("R3", student="OTHER"))

        assert [r.id for r in result_store.by_student("ST1")] == ["R2", "R1"]

    def test_by_exam_type_when_mixed_then_filtered(self, result_store):
        result_store.add(_result("R1", exam_type=ExamType.JAMB))
        result_store.add(_result("R2", exam_type=ExamType.WAEC))

        assert [r.id for r in result_store.by_exam_type("waec")] == ["R2"]

    def test_delete_when_present_then_removed(self, result_store):
        result_store.add(_result("R1"))

        assert result_store.delete("R1") is True
        assert result_store.get("R1") is None
        assert result_store.delete("R1") is False
