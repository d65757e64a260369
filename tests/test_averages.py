import unittest

from studydesk.domain.logic.averages import (
    Decision,
    recompute_semester,
    recompute_unit,
    recompute_year,
    semester_status,
    unit_average,
    weighted_mean,
    year_status,
)
from studydesk.domain.logic.grading import classify
from studydesk.domain.models.defaults import default_semester, default_year
from studydesk.domain.models.entities import (
    INCOMPLETE,
    AcademicYear,
    Complete,
    Module,
    ScoreSet,
    Semester,
    SemesterResult,
    Unit,
)


def exam_module(module_id, exam, coefficient=1):
    return Module(id=module_id, name=module_id, coefficient=coefficient, scores=ScoreSet(exam=exam))


def unit_of(unit_id, *modules, coefficient=1):
    return Unit(id=unit_id, name=unit_id, coefficient=coefficient, modules=modules)


class WeightedMeanTests(unittest.TestCase):
    def test_weighted_mean(self):
        self.assertAlmostEqual(weighted_mean([(Complete(15), 3), (Complete(16), 2)]).value, 15.4, places=9)

    def test_rejects_incomplete_entries(self):
        self.assertEqual(weighted_mean([(Complete(15), 3), (INCOMPLETE, 2)]), INCOMPLETE)

    def test_rejects_empty_and_zero_coefficients(self):
        self.assertEqual(weighted_mean([]), INCOMPLETE)
        self.assertEqual(weighted_mean([(Complete(12), 0), (Complete(14), 0)]), INCOMPLETE)

    def test_rejects_negative_coefficients(self):
        self.assertEqual(weighted_mean([(Complete(12), 3), (Complete(14), -1)]), INCOMPLETE)

    def test_rejects_non_finite_coefficients(self):
        self.assertEqual(weighted_mean([(Complete(10), float("inf")), (Complete(12), 1)]), INCOMPLETE)
        self.assertEqual(weighted_mean([(Complete(10), float("nan")), (Complete(12), 1)]), INCOMPLETE)

    def test_overflowing_coefficient_total(self):
        self.assertEqual(weighted_mean([(Complete(10), 1e308), (Complete(12), 1e308)]), INCOMPLETE)


class UnitAverageTests(unittest.TestCase):
    def test_weighted_by_module_coefficient(self):
        unit = unit_of("u", exam_module("a", 15, 3), exam_module("b", 16, 2))
        self.assertAlmostEqual(unit_average(unit).value, 15.4, places=9)

    def test_one_incomplete_module_nulls_the_unit(self):
        unit = unit_of("u", exam_module("a", 15), exam_module("b", None))
        computed = recompute_unit(unit)
        self.assertEqual(computed.modules[0].average, Complete(15.0))
        self.assertEqual(computed.average, INCOMPLETE)

    def test_infinite_module_coefficient_nulls_the_unit(self):
        unit = unit_of("u", exam_module("a", 15, float("inf")), exam_module("b", 10))
        computed = recompute_unit(unit)
        self.assertEqual(computed.average, INCOMPLETE)
        self.assertIsNone(classify(computed.average))

    def test_zero_coefficient_guard(self):
        unit = unit_of("u", exam_module("a", 15, 0), exam_module("b", 12, 0))
        self.assertEqual(unit_average(unit), INCOMPLETE)

    def test_empty_unit(self):
        self.assertEqual(unit_average(unit_of("u")), INCOMPLETE)


class SemesterAverageTests(unittest.TestCase):
    def setUp(self):
        self.semester = Semester(
            id="s1",
            name="Semester 1",
            units=(
                unit_of("u1", exam_module("a", 15, 3), exam_module("b", 16, 2), coefficient=2),
                unit_of("u2", exam_module("c", 9), coefficient=1),
            ),
        )

    def test_semester_average(self):
        computed = recompute_semester(self.semester)
        self.assertAlmostEqual(computed.average.value, (15.4 * 2 + 9) / 3, places=9)
        self.assertEqual(semester_status(computed), Decision.ADMIS)

    def test_incomplete_unit_nulls_the_semester(self):
        broken = unit_of("u3", exam_module("d", 25))
        computed = recompute_semester(Semester(id="s", name="S", units=self.semester.units + (broken,)))
        self.assertEqual(computed.average, INCOMPLETE)
        self.assertIsNone(semester_status(computed))

    def test_recompute_is_idempotent(self):
        once = recompute_semester(self.semester)
        twice = recompute_semester(once)
        self.assertEqual(once, twice)
        self.assertEqual(once.average.value, twice.average.value)

    def test_recompute_does_not_mutate_input(self):
        recompute_semester(self.semester)
        self.assertEqual(self.semester.average, INCOMPLETE)
        self.assertEqual(self.semester.units[0].modules[0].average, INCOMPLETE)

    def test_seed_semester_starts_incomplete(self):
        computed = recompute_semester(default_semester())
        self.assertEqual(computed.average, INCOMPLETE)
        self.assertEqual(len(computed.units), 5)


class YearAverageTests(unittest.TestCase):
    def test_entered_semester_averages(self):
        computed = recompute_year(default_year())
        self.assertEqual(computed.average, Complete(15.0))
        self.assertEqual(year_status(computed), Decision.ADMIS)

    def test_missing_semester_nulls_year_and_status(self):
        year = AcademicYear(
            name="2025-2026",
            semesters=(
                SemesterResult(id="s1", name="S1", entered_average=14.75),
                SemesterResult(id="s2", name="S2", entered_average=None),
            ),
        )
        computed = recompute_year(year)
        self.assertEqual(computed.average, INCOMPLETE)
        self.assertIsNone(year_status(computed))

    def test_failing_year(self):
        year = AcademicYear(
            name="2025-2026",
            semesters=(
                SemesterResult(id="s1", name="S1", entered_average=8.0, coefficient=2),
                SemesterResult(id="s2", name="S2", entered_average=12.0, coefficient=1),
            ),
        )
        computed = recompute_year(year)
        self.assertAlmostEqual(computed.average.value, 28 / 3, places=9)
        self.assertEqual(year_status(computed), Decision.A_RATTRAPER)

    def test_entered_average_outside_scale(self):
        year = AcademicYear(name="Y", semesters=(SemesterResult(id="s1", name="S1", entered_average=21.0),))
        self.assertEqual(recompute_year(year).average, INCOMPLETE)

    def test_semester_sourced_from_full_computation(self):
        semester = Semester(id="s", name="S1", units=(unit_of("u", exam_module("a", 12)),))
        year = AcademicYear(
            name="Y",
            semesters=(
                SemesterResult(id="s1", name="S1", semester=semester, entered_average=3.0),
                SemesterResult(id="s2", name="S2", entered_average=14.0),
            ),
        )
        computed = recompute_year(year)
        self.assertEqual(computed.semesters[0].average, Complete(12.0))
        self.assertEqual(computed.semesters[0].semester.average, Complete(12.0))
        self.assertEqual(computed.average, Complete(13.0))


if __name__ == "__main__":
    unittest.main()
