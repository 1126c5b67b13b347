"""
Module: sourcing.config

Purpose:
    Configuration dataclass for the sourcing cascade and remote client.
    Immutable configuration with validation on construction, loadable from
    the environment (and an optional .env file via python-dotenv).

Key Classes:
    - SourcingConfig: Remote bank location, paging, cache and fallback policy

Key Functions:
    - SourcingConfig.from_env(): Build from EXAM_* environment variables

Dependencies:
    - python-dotenv: .env loading

Used By:
    - sourcing.remote.client: RemoteQuestionClient
    - sourcing.orchestrator: QuestionSourcer
    - builder.service: ExamService.from_config
    - cli
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from ..common.thresholds import SOURCING_THRESHOLDS
from ..core.models.questions import ExamType

ENV_PREFIX = "EXAM_"


class ConfigError(ValueError):
    """Invalid configuration value."""
    pass


def _env_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    normalized = value.strip().lower()
    if normalized in ("1", "true", "yes", "on"):
        return True
    if normalized in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"Expected a boolean, got {value!r}")


def _env_number(value: Optional[str], default, kind=int):
    if value is None or value.strip() == "":
        return default
    try:
        return kind(value)
    except ValueError as e:
        raise ConfigError(f"Expected {kind.__name__}, got {value!r}") from e


@dataclass(frozen=True)
class SourcingConfig:
    """
    Configuration for question sourcing (immutable).

    Attributes:
        api_url: Base URL of the remote question bank ("" disables remote)
        api_key: Access token sent with every request
        waec_url / jamb_url: Per-exam base URL overrides
        bank_size: Questions requested per subject by the multi-page fetch
        page_size: Questions per remote page
        enable_cache: Whether remote results are cached in memory
        cache_hours: Cache entry lifetime
        require_remote: Remote-only mode; the generator is never used
        allow_local_fallback: Whether generated questions may fill gaps
        request_timeout: Seconds per HTTP request
        max_retries: Attempts per subject variant
        page_delay: Seconds between consecutive page requests
        min_pool_size: Local pool size below which the remote stage runs
        fallback_threshold: Pool size below which the generator stage runs

    Example:
        >>> config = SourcingConfig(api_url="https://questions.example.org/api/v2")
    """

    api_url: str = ""
    api_key: str = ""
    waec_url: str = ""
    jamb_url: str = ""

    bank_size: int = 20000
    page_size: int = 1000

    enable_cache: bool = False
    cache_hours: float = 24.0

    require_remote: bool = False
    allow_local_fallback: bool = True

    request_timeout: float = 20.0
    max_retries: int = 4
    page_delay: float = 0.1

    min_pool_size: int = SOURCING_THRESHOLDS.min_pool_size
    fallback_threshold: int = SOURCING_THRESHOLDS.fallback_threshold

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.bank_size <= 0:
            raise ConfigError(f"bank_size must be positive: {self.bank_size}")
        if self.page_size <= 0:
            raise ConfigError(f"page_size must be positive: {self.page_size}")
        if self.cache_hours < 0:
            raise ConfigError(f"cache_hours must be non-negative: {self.cache_hours}")
        if self.max_retries < 1:
            raise ConfigError(f"max_retries must be at least 1: {self.max_retries}")
        if self.request_timeout <= 0:
            raise ConfigError(f"request_timeout must be positive: {self.request_timeout}")
        if self.fallback_threshold > self.min_pool_size:
            raise ConfigError(
                f"fallback_threshold ({self.fallback_threshold}) cannot exceed "
                f"min_pool_size ({self.min_pool_size})"
            )

    @property
    def remote_enabled(self) -> bool:
        return bool(self.api_url or self.waec_url or self.jamb_url)

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_hours * 3600

    def base_url_for(self, exam_type: ExamType) -> str:
        """Per-exam override if set, else the shared base URL."""
        override = {ExamType.WAEC: self.waec_url, ExamType.JAMB: self.jamb_url}.get(exam_type, "")
        return (override or self.api_url).rstrip("/")

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        env_file: Optional[Path] = None,
    ) -> "SourcingConfig":
        """
        Build configuration from EXAM_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ (tests).
            env_file: .env file to load first; defaults to dotenv's search.

        Raises:
            ConfigError: If a variable cannot be parsed.
        """
        if environ is None:
            load_dotenv(dotenv_path=env_file)
            environ = os.environ

        def get(name: str) -> Optional[str]:
            return environ.get(ENV_PREFIX + name)

        return cls(
            api_url=get("QUESTIONS_API_URL") or "",
            api_key=get("QUESTIONS_API_KEY") or "",
            waec_url=get("WAEC_API_URL") or "",
            jamb_url=get("JAMB_API_URL") or "",
            bank_size=_env_number(get("QUESTION_BANK_SIZE"), 20000),
            page_size=_env_number(get("QUESTION_PAGE_SIZE"), 1000),
            enable_cache=_env_bool(get("ENABLE_QUESTION_CACHE"), False),
            cache_hours=_env_number(get("CACHE_DURATION_HOURS"), 24.0, float),
            require_remote=_env_bool(get("REQUIRE_API"), False),
            allow_local_fallback=_env_bool(get("ALLOW_LOCAL_FALLBACK"), True),
            request_timeout=_env_number(get("REQUEST_TIMEOUT"), 20.0, float),
            max_retries=_env_number(get("MAX_RETRIES"), 4),
        )
