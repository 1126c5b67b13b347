"""
Command-line entry point.

Subcommands:
    prefetch   Fill the local store from the remote bank for every
               JAMB/WAEC subject (generator fallback when allowed).
    diag       Compare remote availability against local counts.
    check      Probe the remote bank with a small request.

Configuration comes from EXAM_* environment variables (or a .env file).
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .common.logging_utils import configure_logging, detach_handler
from .core.models.questions import ExamType
from .sourcing.config import ConfigError, SourcingConfig
from .sourcing.prefetch import NATIONAL_EXAMS, Prefetcher
from .sourcing.remote.client import RemoteQuestionClient
from .storage.jsonl import JsonlQuestionStore

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path("data")


def _exam_types(values: Optional[List[str]]) -> List[ExamType]:
    if not values:
        return list(NATIONAL_EXAMS)
    return [ExamType.parse(v) for v in values]


def _cmd_prefetch(args: argparse.Namespace, config: SourcingConfig) -> int:
    if not config.remote_enabled:
        logger.error("EXAM_QUESTIONS_API_URL is not set; nothing to prefetch from")
        return 1

    store = JsonlQuestionStore(args.data_dir / "questions.jsonl")
    client = RemoteQuestionClient(config)
    try:
        summary = Prefetcher(store, config, client).prefetch_all(_exam_types(args.exam))
    finally:
        client.close()

    for exam_type, failures in summary.failures.items():
        if failures:
            logger.warning(f"{exam_type.value.upper()} failures: {', '.join(failures)}")
    if summary.ok:
        logger.info("All subjects have at least one persisted question")
    return 0 if summary.ok else 2


def _cmd_diag(args: argparse.Namespace, config: SourcingConfig) -> int:
    store = JsonlQuestionStore(args.data_dir / "questions.jsonl")
    client = RemoteQuestionClient(config)
    missing = []
    try:
        prefetcher = Prefetcher(store, config, client)
        for exam_type in _exam_types(args.exam):
            logger.info(f"=== Checking {exam_type.value.upper()} subjects ===")
            for coverage in prefetcher.diagnose(exam_type):
                if coverage.missing:
                    missing.append(f"{exam_type.value}:{coverage.subject}")
    finally:
        client.close()

    if missing:
        logger.warning(f"Subjects with no questions (remote and local): {', '.join(missing)}")
        return 2
    logger.info("All subjects returned at least one question from remote or local store")
    return 0


def _cmd_check(args: argparse.Namespace, config: SourcingConfig) -> int:
    client = RemoteQuestionClient(config)
    try:
        status = client.check_connection()
    finally:
        client.close()
    level = logging.INFO if status.success else logging.ERROR
    logger.log(level, f"{status.message} ({status.question_count} questions)")
    return 0 if status.success else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="exam-toolkit", description="Practice exam question tooling")
    parser.add_argument("--data-dir", type=Path, default=DEFAULT_DATA_DIR, help="Directory holding questions.jsonl")
    parser.add_argument("--env-file", type=Path, default=None, help=".env file to load")
    parser.add_argument("--log-level", default="INFO", help="Logging level")

    sub = parser.add_subparsers(dest="command", required=True)

    prefetch = sub.add_parser("prefetch", help="Fill the local store from the remote bank")
    prefetch.add_argument("--exam", action="append", choices=[e.value for e in NATIONAL_EXAMS],
                          help="Exam type (repeatable; default: jamb and waec)")
    prefetch.set_defaults(handler=_cmd_prefetch)

    diag = sub.add_parser("diag", help="Compare remote and local coverage per subject")
    diag.add_argument("--exam", action="append", choices=[e.value for e in NATIONAL_EXAMS])
    diag.set_defaults(handler=_cmd_diag)

    check = sub.add_parser("check", help="Probe the remote bank")
    check.set_defaults(handler=_cmd_check)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    log_handler = configure_logging(args.log_level)
    try:
        try:
            config = SourcingConfig.from_env(env_file=args.env_file)
        except ConfigError as e:
            logger.error(f"Invalid configuration: {e}")
            return 1
        return args.handler(args, config)
    finally:
        detach_handler(log_handler)


if __name__ == "__main__":
    sys.exit(main())
