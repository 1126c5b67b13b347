"""
Unit tests for RemoteQuestionClient.

The requests session is a Mock and sleep is recorded, so retry and
backoff behaviour is checked without network access or delays.
"""

from unittest.mock import Mock

import pytest
import requests

from exam_toolkit.core.models import ExamType
from exam_toolkit.sourcing import ResultCache, SourcingConfig
from exam_toolkit.sourcing.remote import RemoteQuestionClient

from conftest import json_response


def _entries(start: int, count: int) -> list:
    return [
        {"id": f"Q{i}", "question": f"Question {i}", "option": {"a": "1", "b": "2", "c": "3", "d": "4"}, "answer": "a"}
        for i in range(start, start + count)
    ]


@pytest.fixture
def config():
    return SourcingConfig(api_url="https://bank.example/api", api_key="k3y", max_retries=4, page_delay=0.1)


@pytest.fixture
def session():
    session = Mock()
    session.headers = {}
    return session


@pytest.fixture
def client(config, session, fake_sleep):
    return RemoteQuestionClient(config, session=session, sleep=fake_sleep)


class TestFetch:
    def test_fetch_when_no_base_url_then_empty_without_request(self, session, fake_sleep):
        client = RemoteQuestionClient(SourcingConfig(), session=session, sleep=fake_sleep)

        assert client.fetch(ExamType.JAMB, "Physics") == []
        session.get.assert_not_called()

    def test_init_when_api_key_then_both_auth_headers_set(self, client, session):
        assert session.headers["AccessToken"] == "k3y"
        assert session.headers["Authorization"] == "Bearer k3y"
        assert session.headers["Accept"] == "application/json"

    def test_fetch_when_small_page_then_q_endpoint(self, client, session):
        session.get.return_value = json_response({"data": _entries(1, 2)})

        questions = client.fetch(ExamType.JAMB, "Physics", year=2019, page_size=40, page=3)

        assert len(questions) == 2
        url = session.get.call_args.args[0]
        params = session.get.call_args.kwargs["params"]
        assert url == "https://bank.example/api/q"
        assert params == {"subject": "physics", "page": 3, "limit": 40, "year": 2019}
        assert session.get.call_args.kwargs["timeout"] == 20.0

    def test_fetch_when_large_page_then_m_endpoint(self, client, session):
        session.get.return_value = json_response(_entries(1, 1))

        client.fetch(ExamType.WAEC, "Physics", page_size=1000)

        assert session.get.call_args.args[0] == "https://bank.example/api/m/1000"

    def test_fetch_when_429_with_retry_after_then_waits_and_retries_same_variant(self, client, session, sleeps):
        """HTTP 429 with Retry-After: 2 waits at least 2s, then retries."""
        session.get.side_effect = [
            json_response({}, status=429, headers={"Retry-After": "2"}),
            json_response({"data": _entries(1, 3)}),
        ]

        questions = client.fetch(ExamType.JAMB, "Physics")

        assert len(questions) == 3
        assert sleeps and sleeps[0] >= 2
        variants = [c.kwargs["params"]["subject"] for c in session.get.call_args_list]
        assert variants == ["physics", "physics"]

    def test_fetch_when_429_without_header_then_linear_backoff(self, client, session, sleeps):
        session.get.side_effect = [
            json_response({}, status=429),
            json_response({}, status=429),
            json_response(_entries(1, 1)),
        ]

        client.fetch(ExamType.JAMB, "Physics")

        assert sleeps == [2.0, 4.0]

    def test_fetch_when_server_error_then_retried(self, client, session, sleeps):
        session.get.side_effect = [json_response({}, status=503), json_response(_entries(1, 1))]

        assert len(client.fetch(ExamType.JAMB, "Physics")) == 1
        assert sleeps == [1.0]

    def test_fetch_when_timeouts_exhaust_retries_then_next_variant(self, client, session, sleeps):
        """A variant that keeps timing out is abandoned after max_retries."""
        session.get.side_effect = [requests.Timeout("slow")] * 4 + [json_response(_entries(1, 1))]

        questions = client.fetch(ExamType.JAMB, "English Language")

        assert len(questions) == 1
        assert sleeps == [1.0, 2.0, 3.0]
        subjects = [c.kwargs["params"]["subject"] for c in session.get.call_args_list]
        assert subjects[:4] == ["english language"] * 4
        assert subjects[4] == "english-language"

    def test_fetch_when_client_error_then_variant_skipped_without_retry(self, client, session, sleeps):
        session.get.side_effect = [json_response({}, status=404), json_response(_entries(1, 2))]

        questions = client.fetch(ExamType.JAMB, "English Language")

        assert len(questions) == 2
        assert sleeps == []
        assert session.get.call_count == 2

    def test_fetch_when_body_not_json_then_variant_skipped(self, client, session):
        bad = json_response(None)
        bad.json.side_effect = ValueError("no json")
        session.get.side_effect = [bad, json_response(_entries(1, 1))]

        assert len(client.fetch(ExamType.JAMB, "English Language")) == 1

    def test_fetch_when_every_variant_fails_then_empty_list(self, client, session):
        session.get.return_value = json_response({}, status=400)

        assert client.fetch(ExamType.JAMB, "Mathematics") == []

    def test_fetch_when_cache_enabled_then_second_call_served_from_cache(self, config, session, fake_sleep):
        client = RemoteQuestionClient(
            config, cache=ResultCache(enabled=True), session=session, sleep=fake_sleep
        )
        session.get.return_value = json_response(_entries(1, 2))

        first = client.fetch(ExamType.JAMB, "Physics")
        second = client.fetch(ExamType.JAMB, "Physics")

        assert [q.id for q in second] == [q.id for q in first]
        assert session.get.call_count == 1


class TestFetchMultiPage:
    def test_fetch_multi_page_when_pages_available_then_in_order_and_truncated(self, client, session, sleeps):
        session.get.side_effect = [
            json_response(_entries(1, 100)),
            json_response(_entries(101, 100)),
            json_response(_entries(201, 100)),
        ]

        questions = client.fetch_multi_page(ExamType.JAMB, "Physics", total=250, page_size=100)

        assert len(questions) == 250
        assert questions[0].id == "Q1"
        assert questions[-1].id == "Q250"
        pages = [c.kwargs["params"]["page"] for c in session.get.call_args_list]
        assert pages == [1, 2, 3]
        assert sleeps == [0.1, 0.1]

    def test_fetch_multi_page_when_page_empty_then_stops(self, client, session):
        session.get.side_effect = [json_response(_entries(1, 10))] + [json_response([])] * 10

        questions = client.fetch_multi_page(ExamType.JAMB, "Physics", total=100, page_size=10)

        assert len(questions) == 10


class TestCheckConnection:
    def test_check_connection_when_not_configured_then_failure(self, session, fake_sleep):
        status = RemoteQuestionClient(SourcingConfig(), session=session).check_connection()

        assert status.success is False
        assert status.message == "API URL not configured"

    def test_check_connection_when_questions_returned_then_success(self, client, session):
        session.get.return_value = json_response(_entries(1, 5))

        status = client.check_connection()

        assert status.success is True
        assert status.question_count == 5
