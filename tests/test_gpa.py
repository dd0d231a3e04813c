import unittest

from academetrics.core.gpa import (
    OVERALL,
    GPAResult,
    GradeEntry,
    calculate_cgpa,
    calculate_cgpa_precise,
    calculate_sgpa,
    semester_results,
    weighted_average,
)
from academetrics.core.rounding import round_half_up, round_optional


class GPATests(unittest.TestCase):
    def test_weighted_average(self):
        self.assertEqual(weighted_average([GradeEntry(10, 1), GradeEntry(8, 1)]), 9.0)

    def test_sgpa(self):
        courses = [GradeEntry(9, 4), GradeEntry(8, 5), GradeEntry(10, 2)]
        self.assertEqual(calculate_sgpa(courses), 8.73)

    def test_empty_input_has_no_value(self):
        self.assertIsNone(weighted_average([]))
        self.assertIsNone(weighted_average([GradeEntry(9, 0), GradeEntry(7, 0)]))
        self.assertIsNone(calculate_sgpa([]))

    def test_large_and_non_finite_points(self):
        self.assertEqual(weighted_average([GradeEntry(1e30, 1)]), 1e30)
        self.assertEqual(weighted_average([GradeEntry(float("inf"), 1)]), float("inf"))
        self.assertEqual(calculate_cgpa([1e30, 1e30]), 1e30)

    def test_unrounded_result(self):
        value = weighted_average([GradeEntry(10, 1), GradeEntry(9, 2)], round_to=None)
        self.assertAlmostEqual(value, 28 / 3)

    def test_cgpa_rounds_each_semester_first(self):
        sem1 = [GradeEntry(8, 1), GradeEntry(7, 1), GradeEntry(8, 1)]
        sem2 = [GradeEntry(8, 1), GradeEntry(8, 1), GradeEntry(9, 1)]
        raw = [calculate_sgpa(sem1, round_to=None), calculate_sgpa(sem2, round_to=None)]
        self.assertEqual([round_half_up(v) for v in raw], [7.67, 8.33])
        self.assertEqual(calculate_cgpa(raw), 8.0)

    def test_cgpa_weights_semesters_equally(self):
        sem1 = [GradeEntry(10, 4)]
        sem2 = [GradeEntry(6, 1), GradeEntry(7, 1)]
        sgpas = [calculate_sgpa(sem1), calculate_sgpa(sem2)]
        self.assertEqual(calculate_cgpa(sgpas), 8.25)
        self.assertEqual(calculate_cgpa_precise([sem1, sem2]), 8.83)

    def test_cgpa_skips_semesters_without_value(self):
        self.assertEqual(calculate_cgpa([None, 8.0, 9.0]), 8.5)
        self.assertIsNone(calculate_cgpa([]))
        self.assertIsNone(calculate_cgpa([None]))
        self.assertIsNone(calculate_cgpa_precise([]))

    def test_semester_results(self):
        results = semester_results([(1, [GradeEntry(10, 3)]), (2, [])])
        self.assertEqual(results, (GPAResult(1, 10.0), GPAResult(2, None)))

    def test_result_display(self):
        self.assertEqual(GPAResult(OVERALL, 9.0).display, "9.00")
        self.assertEqual(GPAResult(OVERALL, None).display, "N/A")


class RoundingTests(unittest.TestCase):
    def test_half_up(self):
        self.assertEqual(round_half_up(2.675), 2.68)
        self.assertEqual(round_half_up(0.125), 0.13)
        self.assertEqual(round_half_up(73.6666), 73.67)
        self.assertEqual(round_half_up(49.5, 0), 50.0)

    def test_large_and_non_finite_values(self):
        self.assertEqual(round_half_up(1e30), 1e30)
        self.assertEqual(round_half_up(123456789012345678901234567890.5, 0), 1.2345678901234568e29)
        self.assertEqual(round_half_up(float("-inf")), float("-inf"))
        nan = round_half_up(float("nan"))
        self.assertNotEqual(nan, nan)

    def test_optional(self):
        self.assertIsNone(round_optional(None))
        self.assertEqual(round_optional(1.005), 1.01)
        self.assertEqual(round_optional(1.005, None), 1.005)


if __name__ == "__main__":
    unittest.main()
