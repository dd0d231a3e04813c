from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, Optional, Sequence, Tuple


class GradeScaleError(ValueError):
    pass


@dataclass(frozen=True)
class Grade:
    letter: str
    points: int

    @property
    def label(self) -> str:
        return f"{self.letter} ({self.points})"


@dataclass(frozen=True)
class GradeThreshold:
    letter: str
    points: int
    min_percentage: float

    @property
    def grade(self) -> Grade:
        return Grade(self.letter, self.points)


@dataclass(frozen=True)
class GradeTable:
    """
    Ordered grading scale, highest band first.
    The last row doubles as the fallback for anything below every threshold.
    """

    thresholds: Tuple[GradeThreshold, ...]

    def __post_init__(self) -> None:
        if not self.thresholds:
            raise GradeScaleError("Grade table needs at least one threshold")

        letters = [row.letter for row in self.thresholds]
        if len(set(letters)) != len(letters):
            raise GradeScaleError(f"Duplicate letters in grade table: {', '.join(letters)}")

        for upper, lower in zip(self.thresholds, self.thresholds[1:]):
            if lower.min_percentage >= upper.min_percentage:
                raise GradeScaleError(
                    f"Thresholds must be strictly descending: {upper.letter} ({upper.min_percentage}) "
                    f"is not above {lower.letter} ({lower.min_percentage})"
                )

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, object]]) -> "GradeTable":
        thresholds = []
        for idx, row in enumerate(rows):
            try:
                thresholds.append(
                    GradeThreshold(
                        letter=str(row["letter"]),
                        points=int(row["points"]),
                        min_percentage=float(row["min_percentage"]),
                    )
                )
            except KeyError as exc:
                raise GradeScaleError(f"rows[{idx}] is missing {exc.args[0]}") from exc
            except (TypeError, ValueError) as exc:
                raise GradeScaleError(f"rows[{idx}] has an invalid value") from exc
        return cls(tuple(thresholds))

    def __iter__(self) -> Iterator[GradeThreshold]:
        return iter(self.thresholds)

    def __len__(self) -> int:
        return len(self.thresholds)

    @property
    def grades(self) -> Tuple[Grade, ...]:
        return tuple(row.grade for row in self.thresholds)

    @property
    def letters(self) -> Tuple[str, ...]:
        return tuple(row.letter for row in self.thresholds)

    def grade_for(self, percentage: float) -> Grade:
        for row in self.thresholds:
            if percentage >= row.min_percentage:
                return row.grade
        return self.thresholds[-1].grade

    def index_of(self, grade: Grade) -> int:
        return self.letters.index(grade.letter)


DEFAULT_GRADE_TABLE = GradeTable(
    (
        GradeThreshold("A+", 10, 90),
        GradeThreshold("A", 9, 80),
        GradeThreshold("B+", 8, 70),
        GradeThreshold("B", 7, 60),
        GradeThreshold("C+", 6, 55),
        GradeThreshold("C", 5, 50),
        GradeThreshold("D", 4, 45),
        GradeThreshold("F", 3, 0),
    )
)


def grade_from_percentage(percentage: float, table: GradeTable = DEFAULT_GRADE_TABLE) -> Grade:
    return table.grade_for(percentage)


def percentage_of(raw_score: float, max_score: float = 100) -> Optional[float]:
    if max_score <= 0:
        return None
    return (raw_score / max_score) * 100


def grade_labels(table: GradeTable = DEFAULT_GRADE_TABLE) -> Sequence[str]:
    return [grade.label for grade in table.grades]
