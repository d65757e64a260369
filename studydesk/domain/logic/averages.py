from __future__ import annotations

import math
from dataclasses import replace
from enum import Enum
from typing import Iterable

from studydesk.domain.logic.grading import recompute_module
from studydesk.domain.logic.validation import is_score
from studydesk.domain.models.entities import (
    INCOMPLETE,
    AcademicYear,
    Average,
    Complete,
    Semester,
    SemesterResult,
    Unit,
)

PASS_THRESHOLD = 10.0


class Decision(str, Enum):
    ADMIS = "Admis"
    A_RATTRAPER = "À rattraper"


def weighted_mean(entries: Iterable[tuple[Average, float]]) -> Average:
    """
    entries: iterable of (average, coefficient)
    mean = Σ(average * coefficient) / Σ(coefficient)

    Every average must be Complete and every coefficient finite and
    non-negative; an empty input or a zero coefficient total gives Incomplete.
    """
    weighted = 0.0
    total_coefficient = 0.0
    for average, coefficient in entries:
        if not isinstance(average, Complete) or not (math.isfinite(coefficient) and coefficient >= 0):
            return INCOMPLETE
        weighted += average.value * coefficient
        total_coefficient += coefficient
    if not 0 < total_coefficient < math.inf:
        return INCOMPLETE
    mean = weighted / total_coefficient
    return Complete(mean) if math.isfinite(mean) else INCOMPLETE


def decision_for(average: Average) -> Decision | None:
    if not isinstance(average, Complete):
        return None
    return Decision.ADMIS if average.value >= PASS_THRESHOLD else Decision.A_RATTRAPER


def recompute_unit(unit: Unit) -> Unit:
    modules = tuple(recompute_module(m) for m in unit.modules)
    average = weighted_mean((m.average, m.coefficient) for m in modules)
    return replace(unit, modules=modules, average=average)


def unit_average(unit: Unit) -> Average:
    return recompute_unit(unit).average


def recompute_semester(semester: Semester) -> Semester:
    units = tuple(recompute_unit(u) for u in semester.units)
    average = weighted_mean((u.average, u.coefficient) for u in units)
    return replace(semester, units=units, average=average)


def semester_status(semester: Semester) -> Decision | None:
    """Informational only; the binding decision is taken on the year."""
    return decision_for(semester.average)


def recompute_semester_result(entry: SemesterResult) -> SemesterResult:
    if entry.semester is not None:
        semester = recompute_semester(entry.semester)
        return replace(entry, semester=semester, average=semester.average)
    if is_score(entry.entered_average):
        return replace(entry, average=Complete(float(entry.entered_average)))
    return replace(entry, average=INCOMPLETE)


def recompute_year(year: AcademicYear) -> AcademicYear:
    semesters = tuple(recompute_semester_result(s) for s in year.semesters)
    average = weighted_mean((s.average, s.coefficient) for s in semesters)
    return replace(year, semesters=semesters, average=average)


def year_status(year: AcademicYear) -> Decision | None:
    return decision_for(year.average)
