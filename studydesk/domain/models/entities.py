from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class Complete:
    value: float


@dataclass(frozen=True)
class Incomplete:
    pass


Average = Union[Complete, Incomplete]

INCOMPLETE = Incomplete()


def average_value(average: Average) -> float | None:
    return average.value if isinstance(average, Complete) else None


@dataclass(frozen=True)
class ScoreSet:
    exam: float | None = None
    practical: float | None = None
    lab: float | None = None


@dataclass(frozen=True)
class Module:
    id: str
    name: str
    coefficient: float = 1.0
    has_practical: bool = False
    has_lab: bool = False
    scores: ScoreSet = field(default_factory=ScoreSet)
    average: Average = INCOMPLETE


@dataclass(frozen=True)
class Unit:
    id: str
    name: str
    coefficient: float = 1.0
    modules: tuple[Module, ...] = ()
    average: Average = INCOMPLETE


@dataclass(frozen=True)
class Semester:
    id: str
    name: str
    units: tuple[Unit, ...] = ()
    average: Average = INCOMPLETE


@dataclass(frozen=True)
class SemesterResult:
    id: str
    name: str
    coefficient: float = 1.0
    entered_average: float | None = None
    semester: Semester | None = None
    average: Average = INCOMPLETE


@dataclass(frozen=True)
class AcademicYear:
    name: str
    semesters: tuple[SemesterResult, ...] = ()
    average: Average = INCOMPLETE


@dataclass(frozen=True)
class CalendarTask:
    id: str
    title: str
    date: str
    time: str
    description: str = ""
    duration: int = 60
    priority: str = "medium"
    completed: bool = False
