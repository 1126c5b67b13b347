"""
Module: sourcing.remote.client

Purpose:
    HTTP client for the remote past-question bank. Retries transient
    failures, walks subject spelling variants, normalizes and caches
    results. Never raises to its caller: exhaustion yields [].

Key Classes:
    - RemoteQuestionClient: fetch / fetch_multi_page / fetch_year_range
    - ConnectionStatus: Result of check_connection()

Retry policy (per subject variant):
    - 429: wait Retry-After seconds, else 2 x attempt; retry
    - 5xx, timeout, connection error: wait 1 x attempt; retry
    - other 4xx, non-JSON body: abandon variant
    - up to max_retries attempts

Dependencies:
    - requests: HTTP session
    - sourcing.remote.normalizer, sourcing.remote.variants
    - sourcing.cache.ResultCache

Used By:
    - sourcing.orchestrator: Remote stage of the cascade
    - sourcing.prefetch: Bulk prefetch and diagnostics
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import requests

from ...common.thresholds import SOURCING_THRESHOLDS
from ...core.models.questions import ExamType, Question
from ..cache import CacheKey, ResultCache
from ..config import SourcingConfig
from .normalizer import normalize_response
from .variants import subject_variants

logger = logging.getLogger(__name__)

USER_AGENT = "exam-toolkit/remote-client"
YEAR_RANGE_DELAY = 0.1


class RemoteFetchError(Exception):
    """A subject variant could not be fetched. Internal to the client."""

    def __init__(self, message: str, status: Optional[int] = None, retryable: bool = False):
        super().__init__(message)
        self.status = status
        self.retryable = retryable


@dataclass(frozen=True)
class ConnectionStatus:
    success: bool
    message: str
    question_count: int = 0


def _retry_after_seconds(response: requests.Response) -> Optional[float]:
    raw = response.headers.get("Retry-After")
    if raw is None:
        return None
    try:
        return max(0.0, float(raw))
    except ValueError:
        return None


class RemoteQuestionClient:
    """
    Client for the remote question bank.

    Args:
        config: Base URLs, key, timeouts and retry count.
        cache: Result cache; a disabled cache is created from config if None.
        session: requests.Session (injected in tests).
        sleep: Sleep function (injected in tests).

    Example:
        >>> client = RemoteQuestionClient(SourcingConfig.from_env())
        >>> client.fetch(ExamType.JAMB, "Mathematics", page_size=60)
    """

    def __init__(
        self,
        config: SourcingConfig,
        cache: Optional[ResultCache] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.cache = cache if cache is not None else ResultCache(
            enabled=config.enable_cache, ttl_seconds=config.cache_ttl_seconds
        )
        self.session = session or requests.Session()
        self.session.headers.update(self._headers())
        self._sleep = sleep

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
        if self.config.api_key:
            headers["AccessToken"] = self.config.api_key
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    # ─────────────────────────────────────────────────────────────────────
    # Single page
    # ─────────────────────────────────────────────────────────────────────

    def fetch(
        self,
        exam_type: ExamType,
        subject: str,
        year: Optional[int] = None,
        page_size: int = 60,
        page: int = 1,
    ) -> List[Question]:
        """
        Fetch one page of questions for a subject.

        Returns:
            Normalized questions from the first variant that yields any,
            or [] when none do (or remote is not configured).
        """
        exam_type = ExamType.parse(exam_type)
        base_url = self.config.base_url_for(exam_type)
        if not base_url:
            logger.warning("No remote question bank configured; using local questions only")
            return []

        key = CacheKey(exam_type, subject, year, page)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        if page_size > SOURCING_THRESHOLDS.remote_multi_page_limit:
            endpoint = f"{base_url}/m/{page_size}"
        else:
            endpoint = f"{base_url}/q"

        variants = subject_variants(subject)
        for variant in variants:
            params: Dict[str, Any] = {"subject": variant, "page": page, "limit": page_size}
            if year:
                params["year"] = year

            try:
                payload = self._get_json(endpoint, params)
            except RemoteFetchError as e:
                logger.warning(f"Variant '{variant}' failed for {exam_type.value}/{subject}: {e}")
                continue

            questions = normalize_response(payload, exam_type, subject)
            if questions:
                self.cache.put(key, questions)
                logger.info(
                    f"Fetched {len(questions)} {exam_type.value} questions for "
                    f"{subject} page {page} (variant: {variant})"
                )
                return questions

        logger.warning(f"No remote result for '{subject}' after trying {len(variants)} variants")
        return []

    def _get_json(self, url: str, params: Dict[str, Any]) -> Any:
        """
        GET with retries; return the decoded JSON body.

        Raises:
            RemoteFetchError: Variant should be abandoned.
        """
        retries = self.config.max_retries
        for attempt in range(1, retries + 1):
            try:
                response = self.session.get(url, params=params, timeout=self.config.request_timeout)
            except (requests.Timeout, requests.ConnectionError) as e:
                if attempt == retries:
                    raise RemoteFetchError(f"network error after {retries} attempts: {e}", retryable=True) from e
                logger.warning(f"Request failed, retry {attempt}/{retries}: {e}")
                self._sleep(1.0 * attempt)
                continue
            except requests.RequestException as e:
                raise RemoteFetchError(f"request error: {e}") from e

            status = response.status_code
            if status == 429:
                wait = _retry_after_seconds(response)
                if wait is None:
                    wait = 2.0 * attempt
                logger.warning(f"Rate limited; waiting {wait:.1f}s")
                self._sleep(wait)
                continue
            if status >= 500:
                logger.warning(f"Server error {status}; retrying")
                self._sleep(1.0 * attempt)
                continue
            if status >= 400:
                raise RemoteFetchError(f"HTTP {status}: {response.text[:200]}", status=status)

            try:
                return response.json()
            except ValueError as e:
                raise RemoteFetchError(f"non-JSON body: {response.text[:200]}", status=status) from e

        raise RemoteFetchError(f"max retries exceeded ({retries})", retryable=True)

    # ─────────────────────────────────────────────────────────────────────
    # Multi page
    # ─────────────────────────────────────────────────────────────────────

    def fetch_multi_page(
        self,
        exam_type: ExamType,
        subject: str,
        year: Optional[int] = None,
        total: int = 60,
        page_size: int = 60,
    ) -> List[Question]:
        """
        Fetch up to `total` questions across consecutive pages.

        Pages are requested in increasing order. Stops once `total` is
        reached or a page comes back empty. Result is truncated to `total`.
        """
        pages = math.ceil(total / page_size)
        collected: List[Question] = []
        logger.info(f"Fetching up to {total} {subject} questions across {pages} pages")

        for page in range(1, pages + 1):
            batch = self.fetch(exam_type, subject, year=year, page_size=page_size, page=page)
            if not batch:
                break
            collected.extend(batch)
            if len(collected) >= total:
                break
            if page < pages:
                self._sleep(self.config.page_delay)

        return collected[:total]

    def fetch_year_range(
        self,
        exam_type: ExamType,
        subject: str,
        start_year: int,
        end_year: int,
        per_year: int = 60,
    ) -> Dict[int, List[Question]]:
        """Fetch one page per year; years with no questions are omitted."""
        by_year: Dict[int, List[Question]] = {}
        for year in range(start_year, end_year + 1):
            questions = self.fetch(exam_type, subject, year=year, page_size=per_year)
            if questions:
                by_year[year] = questions
                logger.info(f"{year}: {len(questions)} questions")
            self._sleep(YEAR_RANGE_DELAY)
        return by_year

    # ─────────────────────────────────────────────────────────────────────
    # Diagnostics
    # ─────────────────────────────────────────────────────────────────────

    def check_connection(
        self,
        exam_type: ExamType = ExamType.JAMB,
        subject: str = "Mathematics",
    ) -> ConnectionStatus:
        """Probe the bank with a small request."""
        if not self.config.base_url_for(ExamType.parse(exam_type)):
            return ConnectionStatus(False, "API URL not configured")
        questions = self.fetch(exam_type, subject, page_size=5)
        if questions:
            return ConnectionStatus(True, "API connection successful", len(questions))
        return ConnectionStatus(False, "API returned no questions")

    def close(self) -> None:
        self.session.close()
