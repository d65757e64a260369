from __future__ import annotations

from dataclasses import dataclass

from studydesk.domain.logic.grading import GradeBand, classify
from studydesk.domain.models.entities import Average, Complete, Semester


@dataclass(frozen=True)
class UnitSummary:
    id: str
    name: str
    coefficient: float
    average: float | None
    module_count: int
    completed_modules: int


@dataclass(frozen=True)
class SemesterSummary:
    total_coefficient: float
    total_modules: int
    completed_modules: int
    units: tuple[UnitSummary, ...]
    distribution: dict[GradeBand, int]


@dataclass(frozen=True)
class Notice:
    title: str
    description: str
    is_error: bool = False


def summarize_semester(semester: Semester) -> SemesterSummary:
    distribution = {band: 0 for band in GradeBand}
    units = []
    for unit in semester.units:
        completed = 0
        for module in unit.modules:
            band = classify(module.average)
            if band is not None:
                completed += 1
                distribution[band] += 1
        units.append(
            UnitSummary(
                id=unit.id,
                name=unit.name,
                coefficient=unit.coefficient,
                average=unit.average.value if isinstance(unit.average, Complete) else None,
                module_count=len(unit.modules),
                completed_modules=completed,
            )
        )
    return SemesterSummary(
        total_coefficient=sum(u.coefficient for u in semester.units),
        total_modules=sum(u.module_count for u in units),
        completed_modules=sum(u.completed_modules for u in units),
        units=tuple(units),
        distribution=distribution,
    )


def format_average(average: Average) -> str:
    if isinstance(average, Complete):
        return f"{average.value:.2f}/20"
    return "N/A"


def calculation_notice(label: str, average: Average) -> Notice:
    if isinstance(average, Complete):
        return Notice("Calculation complete", f"{label} average: {format_average(average)}")
    return Notice("Calculation incomplete", f"{label}: some grades are missing or invalid", is_error=True)
