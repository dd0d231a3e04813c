from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from academetrics.core.grades import DEFAULT_GRADE_TABLE, GradeTable
from academetrics.core.rounding import round_half_up


@dataclass(frozen=True)
class PercentageBand:
    label: str
    upper_inclusive: Optional[float]

    def contains(self, percentage: float) -> bool:
        return self.upper_inclusive is None or percentage <= self.upper_inclusive


# Checked in order; the first band whose upper bound admits the score wins.
PERCENTAGE_BANDS: Tuple[PercentageBand, ...] = (
    PercentageBand("0-60", 60),
    PercentageBand("61-70", 70),
    PercentageBand("71-80", 80),
    PercentageBand("81-90", 90),
    PercentageBand("91-100", None),
)


@dataclass(frozen=True)
class DistributionBucket:
    label: str
    count: int

    def share(self, sample_size: int, *, round_to: int = 2) -> float:
        if sample_size <= 0:
            return 0.0
        return round_half_up((self.count / sample_size) * 100, round_to)


@dataclass(frozen=True)
class CohortStatistics:
    average: Optional[float]
    highest: Optional[float]
    lowest: Optional[float]
    sample_size: int

    @classmethod
    def empty(cls) -> "CohortStatistics":
        return cls(average=None, highest=None, lowest=None, sample_size=0)


@dataclass(frozen=True)
class CohortSummary:
    statistics: CohortStatistics
    percentage_distribution: Tuple[DistributionBucket, ...]
    grade_distribution: Tuple[DistributionBucket, ...]


@dataclass(frozen=True)
class MultiCourseSummary:
    courses: Dict[str, CohortSummary]
    combined: CohortSummary


def summarize(percentages: Sequence[float], *, round_to: int = 2) -> CohortStatistics:
    if not percentages:
        return CohortStatistics.empty()
    return CohortStatistics(
        average=round_half_up(sum(percentages) / len(percentages), round_to),
        highest=max(percentages),
        lowest=min(percentages),
        sample_size=len(percentages),
    )


def band_index(percentage: float, bands: Sequence[PercentageBand] = PERCENTAGE_BANDS) -> int:
    # nan fails every comparison; it grades as the bottom row, so it sits in the bottom band
    if math.isnan(percentage):
        return 0
    for idx, band in enumerate(bands):
        if band.contains(percentage):
            return idx
    return len(bands) - 1


def percentage_distribution(
    percentages: Iterable[float], bands: Sequence[PercentageBand] = PERCENTAGE_BANDS
) -> Tuple[DistributionBucket, ...]:
    counts = [0] * len(bands)
    for pct in percentages:
        counts[band_index(pct, bands)] += 1
    return tuple(DistributionBucket(band.label, count) for band, count in zip(bands, counts))


def grade_distribution(
    percentages: Iterable[float], table: GradeTable = DEFAULT_GRADE_TABLE
) -> Tuple[DistributionBucket, ...]:
    counts = [0] * len(table)
    for pct in percentages:
        counts[table.index_of(table.grade_for(pct))] += 1
    return tuple(DistributionBucket(grade.label, count) for grade, count in zip(table.grades, counts))


def aggregate(
    percentages: Iterable[float],
    table: GradeTable = DEFAULT_GRADE_TABLE,
    bands: Sequence[PercentageBand] = PERCENTAGE_BANDS,
    *,
    round_to: int = 2,
) -> CohortSummary:
    scores = list(percentages)
    return CohortSummary(
        statistics=summarize(scores, round_to=round_to),
        percentage_distribution=percentage_distribution(scores, bands),
        grade_distribution=grade_distribution(scores, table),
    )


def merge_distributions(*distributions: Sequence[DistributionBucket]) -> Tuple[DistributionBucket, ...]:
    if not distributions:
        return ()

    labels = [bucket.label for bucket in distributions[0]]
    counts = [0] * len(labels)
    for distribution in distributions:
        if [bucket.label for bucket in distribution] != labels:
            raise ValueError("Cannot merge distributions with different buckets")
        for idx, bucket in enumerate(distribution):
            counts[idx] += bucket.count
    return tuple(DistributionBucket(label, count) for label, count in zip(labels, counts))


def aggregate_courses(
    scores_by_course: Mapping[str, Iterable[float]],
    table: GradeTable = DEFAULT_GRADE_TABLE,
    bands: Sequence[PercentageBand] = PERCENTAGE_BANDS,
    *,
    round_to: int = 2,
) -> MultiCourseSummary:
    courses: Dict[str, CohortSummary] = {}
    all_scores: List[float] = []
    for course_id, scores in scores_by_course.items():
        course_scores = list(scores)
        all_scores.extend(course_scores)
        courses[course_id] = aggregate(course_scores, table, bands, round_to=round_to)

    if courses:
        percentage_merged = merge_distributions(*(s.percentage_distribution for s in courses.values()))
        grade_merged = merge_distributions(*(s.grade_distribution for s in courses.values()))
    else:
        empty = aggregate([], table, bands)
        percentage_merged = empty.percentage_distribution
        grade_merged = empty.grade_distribution

    # mean of course means is not the cohort mean, so statistics come from the union
    combined = CohortSummary(
        statistics=summarize(all_scores, round_to=round_to),
        percentage_distribution=percentage_merged,
        grade_distribution=grade_merged,
    )
    return MultiCourseSummary(courses=courses, combined=combined)


def percentile_rank(score: float, percentages: Iterable[float]) -> Optional[int]:
    cohort = list(percentages)
    if not cohort:
        return None
    below = sum(1 for pct in cohort if pct < score)
    return int(round_half_up((below / len(cohort)) * 100, 0))


def decile_distribution(percentages: Iterable[float]) -> Tuple[DistributionBucket, ...]:
    counts = [0] * 10
    for pct in percentages:
        if not 0 <= pct <= 100:
            continue
        counts[min(int(pct // 10), 9)] += 1
    return tuple(DistributionBucket(f"{idx * 10}-{(idx + 1) * 10}", count) for idx, count in enumerate(counts))
