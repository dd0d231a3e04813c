from dataclasses import dataclass
import logging
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from academetrics.config.settings import settings
from academetrics.core.cohort import (
    CohortSummary,
    MultiCourseSummary,
    aggregate,
    aggregate_courses,
    percentile_rank,
)
from academetrics.core.gpa import (
    OVERALL,
    GPAResult,
    GradeEntry,
    calculate_cgpa,
    calculate_cgpa_precise,
    semester_results,
)
from academetrics.core.grades import DEFAULT_GRADE_TABLE, Grade, GradeTable
from academetrics.core.rounding import round_half_up
from academetrics.services.records import ScoreRecord, by_course, by_semester, by_student, group_by


logger = logging.getLogger(__name__)

CGPA_POLICIES = ("two_stage", "single_stage")

Table = List[List[str]]


class PerformanceServiceError(Exception):
    pass


@dataclass(frozen=True)
class GradedRecord:
    record: ScoreRecord
    percentage: float
    grade: Grade


@dataclass(frozen=True)
class AcademicSummary:
    sgpa: Tuple[GPAResult, ...]
    cgpa: GPAResult


@dataclass(frozen=True)
class SubjectAverage:
    semester: int
    subject: str
    average: float


@dataclass(frozen=True)
class StudentGPA:
    student_id: str
    cgpa: GPAResult


@dataclass(frozen=True)
class StudentPosition:
    percentage: float
    grade: Grade
    percentile: Optional[int]


class PerformanceService:
    def __init__(
        self,
        grade_table: GradeTable = DEFAULT_GRADE_TABLE,
        cgpa_policy: str = "two_stage",
        round_to: int = 2,
    ) -> None:
        if cgpa_policy not in CGPA_POLICIES:
            raise PerformanceServiceError(
                f"Unsupported CGPA policy: {cgpa_policy}. Use {' or '.join(CGPA_POLICIES)}."
            )
        if round_to < 0:
            raise PerformanceServiceError("round_to must be zero or greater")

        self.grade_table = grade_table
        self.cgpa_policy = cgpa_policy
        self.round_to = round_to

    @classmethod
    def from_settings(cls) -> "PerformanceService":
        return cls(
            grade_table=settings.grade_table(),
            cgpa_policy=settings.cgpa_policy,
            round_to=settings.round_to,
        )

    def grade_record(self, record: ScoreRecord) -> GradedRecord:
        percentage = record.percentage
        return GradedRecord(record, percentage, self.grade_table.grade_for(percentage))

    def _entries(self, records: Iterable[ScoreRecord]) -> List[GradeEntry]:
        return [
            GradeEntry(self.grade_table.grade_for(r.percentage).points, r.credit_weight)
            for r in records
        ]

    def student_academic_data(self, records: Iterable[ScoreRecord]) -> AcademicSummary:
        semesters = by_semester(records)
        sgpa = semester_results(
            ((semester, self._entries(rows)) for semester, rows in semesters.items()),
            round_to=self.round_to,
        )

        if self.cgpa_policy == "single_stage":
            value = calculate_cgpa_precise(
                (self._entries(rows) for rows in semesters.values()),
                round_to=self.round_to,
            )
        else:
            value = calculate_cgpa((result.value for result in sgpa), round_to=self.round_to)

        logger.debug("Computed %d SGPA values, CGPA=%s (%s)", len(sgpa), value, self.cgpa_policy)
        return AcademicSummary(sgpa=sgpa, cgpa=GPAResult(OVERALL, value))

    def batch_averages(self, records: Iterable[ScoreRecord]) -> List[SubjectAverage]:
        groups = group_by(records, lambda r: (r.semester, r.subject))
        return [
            SubjectAverage(
                semester=semester,
                subject=subject,
                average=round_half_up(sum(r.percentage for r in rows) / len(rows), self.round_to),
            )
            for (semester, subject), rows in groups.items()
        ]

    def course_summary(self, records: Iterable[ScoreRecord]) -> CohortSummary:
        return aggregate((r.percentage for r in records), self.grade_table, round_to=self.round_to)

    def batch_performance(self, records: Iterable[ScoreRecord]) -> MultiCourseSummary:
        courses = by_course(records)
        logger.debug("Aggregating batch performance across %d courses", len(courses))
        return aggregate_courses(
            {course_id: [r.percentage for r in rows] for course_id, rows in courses.items()},
            self.grade_table,
            round_to=self.round_to,
        )

    def batch_cgpa(self, records: Iterable[ScoreRecord]) -> List[StudentGPA]:
        return [
            StudentGPA(student_id, self.student_academic_data(rows).cgpa)
            for student_id, rows in by_student(records).items()
        ]

    def student_position(self, percentage: float, cohort: Iterable[ScoreRecord]) -> StudentPosition:
        return StudentPosition(
            percentage=percentage,
            grade=self.grade_table.grade_for(percentage),
            percentile=percentile_rank(percentage, (r.percentage for r in cohort)),
        )

    # Report tables: header row first, every cell already formatted for CSV/PDF/Excel/Word writers.

    def course_grade_table(
        self, records: Iterable[ScoreRecord], student_names: Optional[Mapping[str, str]] = None
    ) -> Table:
        names = student_names or {}
        rows: Table = [["Roll Number", "Name", "Score", "Max Score", "Percentage", "Grade"]]
        for graded in map(self.grade_record, records):
            record = graded.record
            rows.append(
                [
                    record.student_id,
                    names.get(record.student_id, ""),
                    _number(record.raw_score),
                    _number(record.max_score),
                    self._percent(graded.percentage),
                    graded.grade.letter,
                ]
            )
        return rows

    def student_grade_table(self, records: Iterable[ScoreRecord]) -> Table:
        rows: Table = [["Course", "Semester", "Score", "Max Score", "Percentage", "Grade", "Grade Points"]]
        ordered = sorted(records, key=lambda r: r.semester)
        for graded in map(self.grade_record, ordered):
            record = graded.record
            rows.append(
                [
                    record.subject,
                    str(record.semester),
                    _number(record.raw_score),
                    _number(record.max_score),
                    self._percent(graded.percentage),
                    graded.grade.letter,
                    str(graded.grade.points),
                ]
            )
        return rows

    def batch_cgpa_table(
        self, records: Iterable[ScoreRecord], student_names: Optional[Mapping[str, str]] = None
    ) -> Table:
        names = student_names or {}
        rows: Table = [["Roll Number", "Name", "CGPA"]]
        for entry in self.batch_cgpa(records):
            rows.append([entry.student_id, names.get(entry.student_id, ""), entry.cgpa.display])
        return rows

    def academic_report_table(self, records: Sequence[ScoreRecord]) -> Table:
        summary = self.student_academic_data(records)
        rows: Table = [["Academic Summary"], [f"CGPA: {summary.cgpa.display}"], []]
        rows.append(["Semester-wise SGPA"])
        for result in summary.sgpa:
            rows.append([f"Semester {result.scope}: {result.display}"])
        rows.append([])
        rows.append(["Semester", "Subject", "Score"])
        for record in sorted(records, key=lambda r: (r.semester, r.subject)):
            rows.append([str(record.semester), record.subject, _number(record.raw_score)])
        return rows

    def _percent(self, value: float) -> str:
        return f"{round_half_up(value, self.round_to):.{self.round_to}f}"


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
