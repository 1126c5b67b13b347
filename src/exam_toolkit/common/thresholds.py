"""Centralized threshold and magic number configuration.

Target counts, grade bands and sourcing pool thresholds used by the
sourcing cascade, the composer and the grading engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class FormatTargets:
    """Question counts per exam format."""

    jamb_default: int = 40
    jamb_core_language: int = 60  # English Language papers are longer
    waec_objective: int = 50
    waec_essay: int = 10
    generated_jamb_objective: int = 60
    generated_waec_objective: int = 50
    generated_waec_essay: int = 10
    generated_year_span: int = 25  # Generated years run newest_year..newest_year-24
    generated_newest_year: int = 2024

    @property
    def waec_total(self) -> int:
        return self.waec_objective + self.waec_essay


@dataclass(frozen=True)
class SourcingThresholds:
    """Pool sizes that trigger the remote and generator stages."""

    min_pool_size: int = 40  # Below this a national subject goes remote
    fallback_threshold: int = 20  # Below this the generator tops up
    remote_multi_page_limit: int = 40  # page_size above this uses /m/{limit}


@dataclass(frozen=True)
class GradeBands:
    """Lower percentage bounds per letter grade, highest first."""

    bands: Tuple[Tuple[float, str], ...] = (
        (90.0, "A"),
        (80.0, "B"),
        (70.0, "C"),
        (60.0, "D"),
    )
    fail_grade: str = "F"


FORMAT_TARGETS = FormatTargets()
SOURCING_THRESHOLDS = SourcingThresholds()
GRADE_BANDS = GradeBands()
