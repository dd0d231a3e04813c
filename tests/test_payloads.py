import unittest

from pydantic import ValidationError

from academetrics.core.cohort import aggregate
from academetrics.core.grades import grade_from_percentage
from academetrics.schemas.payloads import (
    AcademicSummaryPayload,
    CohortSummaryPayload,
    GradePayload,
    ScoreRecordPayload,
)
from academetrics.services.performance_service import PerformanceService


class ScoreRecordPayloadTests(unittest.TestCase):
    def test_defaults_and_conversion(self):
        payload = ScoreRecordPayload.model_validate(
            {"student_id": "21CS001", "course_id": "c1", "raw_score": 45, "semester": 3}
        )
        record = payload.to_record()
        self.assertEqual(record.max_score, 100)
        self.assertEqual(record.credit_weight, 1)
        self.assertEqual(record.semester, 3)
        self.assertAlmostEqual(record.percentage, 45.0)

    def test_rejects_out_of_range_fields(self):
        base = {"student_id": "21CS001", "course_id": "c1", "raw_score": 45, "semester": 3}
        for override in (
            {"semester": 0},
            {"semester": 9},
            {"credit_weight": 0},
            {"max_score": 0},
            {"raw_score": -1},
            {"student_id": ""},
        ):
            with self.subTest(override=override):
                with self.assertRaises(ValidationError):
                    ScoreRecordPayload.model_validate({**base, **override})


class OutputPayloadTests(unittest.TestCase):
    def test_grade_payload(self):
        dumped = GradePayload.from_domain(grade_from_percentage(90)).model_dump()
        self.assertEqual(dumped, {"letter": "A+", "points": 10, "label": "A+ (10)"})

    def test_cohort_summary_payload(self):
        dumped = CohortSummaryPayload.from_domain(aggregate([60, 61, 100])).model_dump()
        self.assertEqual(
            dumped["statistics"],
            {"average": 73.67, "highest": 100.0, "lowest": 60.0, "sample_size": 3},
        )
        self.assertEqual(dumped["percentage_distribution"][0], {"label": "0-60", "count": 1, "share": 33.33})
        self.assertEqual(len(dumped["grade_distribution"]), 8)

    def test_empty_cohort_payload(self):
        dumped = CohortSummaryPayload.from_domain(aggregate([])).model_dump()
        self.assertIsNone(dumped["statistics"]["average"])
        self.assertEqual({b["share"] for b in dumped["grade_distribution"]}, {0.0})

    def test_academic_summary_payload(self):
        service = PerformanceService()
        empty = AcademicSummaryPayload.from_domain(service.student_academic_data([]))
        self.assertEqual(empty.model_dump(), {"cgpa": {"scope": "overall", "value": None, "display": "N/A"}, "sgpa": []})

        records = [
            ScoreRecordPayload(student_id="s1", course_id="c1", raw_score=92, semester=1).to_record(),
            ScoreRecordPayload(student_id="s1", course_id="c2", raw_score=61, semester=2).to_record(),
        ]
        dumped = AcademicSummaryPayload.from_domain(service.student_academic_data(records)).model_dump()
        self.assertEqual([entry["scope"] for entry in dumped["sgpa"]], [1, 2])
        self.assertEqual(dumped["cgpa"]["display"], "8.50")


if __name__ == "__main__":
    unittest.main()
