import pytest
import sys
from pathlib import Path
from unittest.mock import Mock

# Add src to sys.path so we can import exam_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from exam_toolkit.core.models import ExamType, OptionSet, Question, QuestionKind  # noqa: E402


def make_objective(
    qid: str,
    subject: str = "Physics",
    exam_type: ExamType = ExamType.JAMB,
    answer: str = "a",
    text: str | None = None,
    number: int = 1,
) -> Question:
    """Build a minimal valid objective question."""
    return Question(
        id=qid,
        subject=subject,
        exam_type=exam_type,
        kind=QuestionKind.OBJECTIVE,
        number=number,
        text=text or f"Question text {qid}",
        year=2020,
        options=OptionSet("w", "x", "y", "z"),
        correct_answer=answer,
        explanation="Because.",
    )


def make_essay(
    qid: str,
    subject: str = "Physics",
    exam_type: ExamType = ExamType.WAEC,
    text: str | None = None,
) -> Question:
    """Build a minimal valid essay question."""
    return Question(
        id=qid,
        subject=subject,
        exam_type=exam_type,
        kind=QuestionKind.ESSAY,
        number=51,
        text=text or f"Essay text {qid}",
        year=2020,
        essay_answer="Model answer.",
    )


def json_response(payload, status: int = 200, headers: dict | None = None) -> Mock:
    """Mock requests.Response returning payload from .json()."""
    response = Mock()
    response.status_code = status
    response.headers = headers or {}
    response.json.return_value = payload
    response.text = str(payload)
    return response


# Common test fixtures
@pytest.fixture
def sleeps() -> list:
    """Records sleep durations instead of sleeping."""
    return []


@pytest.fixture
def fake_sleep(sleeps):
    return sleeps.append
