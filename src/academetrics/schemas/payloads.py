from typing import List, Optional, Union

from pydantic import BaseModel, Field

from academetrics.core.cohort import CohortStatistics, CohortSummary, DistributionBucket
from academetrics.core.gpa import GPAResult
from academetrics.core.grades import Grade
from academetrics.services.performance_service import AcademicSummary
from academetrics.services.records import ScoreRecord


class ScoreRecordPayload(BaseModel):
    student_id: str = Field(min_length=1)
    course_id: str = Field(min_length=1)
    raw_score: float = Field(ge=0)
    max_score: float = Field(default=100, gt=0)
    semester: int = Field(ge=1, le=8)
    credit_weight: float = Field(default=1, ge=1)
    course_name: str = ""
    batch_year: Optional[int] = None

    def to_record(self) -> ScoreRecord:
        return ScoreRecord(
            student_id=self.student_id,
            course_id=self.course_id,
            raw_score=self.raw_score,
            max_score=self.max_score,
            semester=self.semester,
            credit_weight=self.credit_weight,
            course_name=self.course_name,
            batch_year=self.batch_year,
        )


class GradePayload(BaseModel):
    letter: str
    points: int
    label: str

    @classmethod
    def from_domain(cls, grade: Grade) -> "GradePayload":
        return cls(letter=grade.letter, points=grade.points, label=grade.label)


class GPAResultPayload(BaseModel):
    scope: Union[int, str]
    value: Optional[float]
    display: str

    @classmethod
    def from_domain(cls, result: GPAResult) -> "GPAResultPayload":
        return cls(scope=result.scope, value=result.value, display=result.display)


class CohortStatisticsPayload(BaseModel):
    average: Optional[float]
    highest: Optional[float]
    lowest: Optional[float]
    sample_size: int

    @classmethod
    def from_domain(cls, stats: CohortStatistics) -> "CohortStatisticsPayload":
        return cls(
            average=stats.average,
            highest=stats.highest,
            lowest=stats.lowest,
            sample_size=stats.sample_size,
        )


class DistributionBucketPayload(BaseModel):
    label: str
    count: int
    share: float

    @classmethod
    def from_domain(cls, bucket: DistributionBucket, sample_size: int) -> "DistributionBucketPayload":
        return cls(label=bucket.label, count=bucket.count, share=bucket.share(sample_size))


class CohortSummaryPayload(BaseModel):
    statistics: CohortStatisticsPayload
    percentage_distribution: List[DistributionBucketPayload]
    grade_distribution: List[DistributionBucketPayload]

    @classmethod
    def from_domain(cls, summary: CohortSummary) -> "CohortSummaryPayload":
        size = summary.statistics.sample_size
        return cls(
            statistics=CohortStatisticsPayload.from_domain(summary.statistics),
            percentage_distribution=[
                DistributionBucketPayload.from_domain(b, size) for b in summary.percentage_distribution
            ],
            grade_distribution=[DistributionBucketPayload.from_domain(b, size) for b in summary.grade_distribution],
        )


class AcademicSummaryPayload(BaseModel):
    cgpa: GPAResultPayload
    sgpa: List[GPAResultPayload] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, summary: AcademicSummary) -> "AcademicSummaryPayload":
        return cls(
            cgpa=GPAResultPayload.from_domain(summary.cgpa),
            sgpa=[GPAResultPayload.from_domain(result) for result in summary.sgpa],
        )
