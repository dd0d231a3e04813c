from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

from academetrics.core.rounding import round_half_up, round_optional

Scope = Union[int, str]
OVERALL = "overall"


@dataclass(frozen=True)
class GradeEntry:
    points: float
    weight: float


@dataclass(frozen=True)
class GPAResult:
    scope: Scope
    value: Optional[float]

    @property
    def display(self) -> str:
        return "N/A" if self.value is None else f"{self.value:.2f}"


def weighted_average(entries: Iterable[GradeEntry], *, round_to: Optional[int] = 2) -> Optional[float]:
    """
    Σ(points * weight) / Σ(weight), or None when there is nothing to weigh.
    """
    weighted = 0.0
    total_weight = 0.0
    for entry in entries:
        weighted += entry.points * entry.weight
        total_weight += entry.weight

    if total_weight == 0:
        return None
    return round_optional(weighted / total_weight, round_to)


def calculate_sgpa(entries: Iterable[GradeEntry], *, round_to: Optional[int] = 2) -> Optional[float]:
    return weighted_average(entries, round_to=round_to)


def calculate_cgpa(sgpas: Iterable[Optional[float]], *, round_to: int = 2) -> Optional[float]:
    """
    Two-stage CGPA: every SGPA is rounded first, then the rounded values are
    averaged with equal weight per semester.
    """
    rounded = [round_half_up(sgpa, round_to) for sgpa in sgpas if sgpa is not None]
    if not rounded:
        return None
    return round_half_up(sum(rounded) / len(rounded), round_to)


def calculate_cgpa_precise(
    semester_entries: Iterable[Iterable[GradeEntry]], *, round_to: int = 2
) -> Optional[float]:
    """
    Single-stage CGPA: one credit-weighted average over every course of every
    semester, rounded once.
    """
    return weighted_average(
        (entry for semester in semester_entries for entry in semester),
        round_to=round_to,
    )


def semester_results(
    entries_by_semester: Iterable[Tuple[int, Iterable[GradeEntry]]], *, round_to: int = 2
) -> Tuple[GPAResult, ...]:
    return tuple(
        GPAResult(semester, calculate_sgpa(entries, round_to=round_to))
        for semester, entries in entries_by_semester
    )
