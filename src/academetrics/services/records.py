from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Iterable, List, Optional, TypeVar

from academetrics.core.grades import percentage_of

K = TypeVar("K", bound=Hashable)


@dataclass(frozen=True)
class ScoreRecord:
    student_id: str
    course_id: str
    raw_score: float
    semester: int
    max_score: float = 100
    credit_weight: float = 1
    course_name: str = ""
    batch_year: Optional[int] = None

    @property
    def percentage(self) -> float:
        pct = percentage_of(self.raw_score, self.max_score)
        # a non-positive max_score has no meaningful percentage; grade it as zero
        return 0.0 if pct is None else pct

    @property
    def subject(self) -> str:
        return self.course_name or self.course_id


def group_by(records: Iterable[ScoreRecord], key: Callable[[ScoreRecord], K]) -> Dict[K, List[ScoreRecord]]:
    groups: Dict[K, List[ScoreRecord]] = OrderedDict()
    for record in records:
        groups.setdefault(key(record), []).append(record)
    return groups


def by_semester(records: Iterable[ScoreRecord]) -> Dict[int, List[ScoreRecord]]:
    groups = group_by(records, lambda r: r.semester)
    return OrderedDict(sorted(groups.items()))


def by_course(records: Iterable[ScoreRecord]) -> Dict[str, List[ScoreRecord]]:
    return group_by(records, lambda r: r.course_id)


def by_student(records: Iterable[ScoreRecord]) -> Dict[str, List[ScoreRecord]]:
    return group_by(records, lambda r: r.student_id)
