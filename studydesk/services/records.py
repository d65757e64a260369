from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError

from studydesk.config.settings import settings
from studydesk.domain.logic.averages import recompute_semester, recompute_year, semester_status, year_status
from studydesk.domain.logic.grading import classify
from studydesk.domain.logic.report import summarize_semester
from studydesk.domain.models.entities import (
    AcademicYear,
    CalendarTask,
    Module,
    ScoreSet,
    Semester,
    SemesterResult,
    Unit,
    average_value,
)
from studydesk.services.storage import Storage

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class ScoresRecord(BaseModel):
    exam: Optional[float] = None
    practical: Optional[float] = None
    lab: Optional[float] = None


class ModuleRecord(BaseModel):
    id: str
    name: str
    coefficient: Optional[float] = 1.0
    has_practical: bool = False
    has_lab: bool = False
    scores: ScoresRecord = Field(default_factory=ScoresRecord)
    average: Optional[float] = None
    status: Optional[str] = None


class UnitRecord(BaseModel):
    id: str
    name: str
    coefficient: Optional[float] = 1.0
    modules: List[ModuleRecord] = Field(default_factory=list)
    average: Optional[float] = None


class SemesterTreeRecord(BaseModel):
    id: str
    name: str
    units: List[UnitRecord] = Field(default_factory=list)
    average: Optional[float] = None


class SemesterRecord(BaseModel):
    semester: SemesterTreeRecord
    semester_average: Optional[float] = None
    semester_status: Optional[str] = None
    calculation_timestamp: datetime
    total_coefficient: Optional[float] = 0.0
    total_modules: int = 0
    completed_modules: int = 0
    grade_distribution: Dict[str, int] = Field(default_factory=dict)


class SemesterResultRecord(BaseModel):
    id: str
    name: str
    coefficient: Optional[float] = 1.0
    entered_average: Optional[float] = None
    semester: Optional[SemesterTreeRecord] = None
    average: Optional[float] = None


class YearRecord(BaseModel):
    academic_year: str
    semesters: List[SemesterResultRecord] = Field(default_factory=list)
    annual_average: Optional[float] = None
    status: Optional[str] = None
    calculation_timestamp: datetime


class TaskRecord(BaseModel):
    id: str
    title: str
    description: str = ""
    date: str
    time: str
    duration: int = 60
    priority: Literal["low", "medium", "high"] = "medium"
    completed: bool = False


class TasksRecord(BaseModel):
    tasks: List[TaskRecord] = Field(default_factory=list)


def _stored_number(value: float) -> float | None:
    """JSON has no NaN or infinity; such values are stored as null."""
    return value if math.isfinite(value) else None


def _loaded_coefficient(value: float | None) -> float:
    return math.nan if value is None else value


def _module_to_record(module: Module) -> ModuleRecord:
    band = classify(module.average)
    return ModuleRecord(
        id=module.id,
        name=module.name,
        coefficient=_stored_number(module.coefficient),
        has_practical=module.has_practical,
        has_lab=module.has_lab,
        scores=ScoresRecord(
            exam=module.scores.exam,
            practical=module.scores.practical,
            lab=module.scores.lab,
        ),
        average=average_value(module.average),
        status=band.value if band else None,
    )


def semester_tree_to_record(semester: Semester) -> SemesterTreeRecord:
    return SemesterTreeRecord(
        id=semester.id,
        name=semester.name,
        units=[
            UnitRecord(
                id=u.id,
                name=u.name,
                coefficient=_stored_number(u.coefficient),
                modules=[_module_to_record(m) for m in u.modules],
                average=average_value(u.average),
            )
            for u in semester.units
        ],
        average=average_value(semester.average),
    )


def semester_tree_from_record(record: SemesterTreeRecord) -> Semester:
    """Raw inputs only; stored averages are dropped and must be recomputed."""
    return Semester(
        id=record.id,
        name=record.name,
        units=tuple(
            Unit(
                id=u.id,
                name=u.name,
                coefficient=_loaded_coefficient(u.coefficient),
                modules=tuple(
                    Module(
                        id=m.id,
                        name=m.name,
                        coefficient=_loaded_coefficient(m.coefficient),
                        has_practical=m.has_practical,
                        has_lab=m.has_lab,
                        scores=ScoreSet(exam=m.scores.exam, practical=m.scores.practical, lab=m.scores.lab),
                    )
                    for m in u.modules
                ),
            )
            for u in record.units
        ),
    )


def task_to_record(task: CalendarTask) -> TaskRecord:
    return TaskRecord(
        id=task.id,
        title=task.title,
        description=task.description,
        date=task.date,
        time=task.time,
        duration=task.duration,
        priority=task.priority,
        completed=task.completed,
    )


def task_from_record(record: TaskRecord) -> CalendarTask:
    return CalendarTask(
        id=record.id,
        title=record.title,
        description=record.description,
        date=record.date,
        time=record.time,
        duration=record.duration,
        priority=record.priority,
        completed=record.completed,
    )


class RecordStore:
    def __init__(
        self,
        storage: Storage,
        semester_key: str = "semesterData",
        year_key: str = "yearlyData",
        tasks_key: str = "calendarTasks",
        last_update_key: str = "lastSemesterUpdate",
    ) -> None:
        self.storage = storage
        self.semester_key = semester_key
        self.year_key = year_key
        self.tasks_key = tasks_key
        self.last_update_key = last_update_key

    @classmethod
    def from_settings(cls) -> "RecordStore":
        return cls(
            Storage(settings.db_path),
            semester_key=settings.semester_key,
            year_key=settings.year_key,
            tasks_key=settings.tasks_key,
            last_update_key=settings.last_update_key,
        )

    def _read(self, key: str, model: Type[RecordT]) -> RecordT | None:
        raw = self.storage.get(key)
        if raw is None:
            return None
        try:
            return model.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Ignoring malformed record %r: %d error(s)", key, exc.error_count())
            return None

    def load_semester(self) -> Semester | None:
        record = self._read(self.semester_key, SemesterRecord)
        if record is None:
            return None
        return recompute_semester(semester_tree_from_record(record.semester))

    def last_calculation(self) -> datetime | None:
        record = self._read(self.semester_key, SemesterRecord)
        return record.calculation_timestamp if record else None

    def save_semester(self, semester: Semester, now: datetime | None = None) -> Semester:
        semester = recompute_semester(semester)
        summary = summarize_semester(semester)
        status = semester_status(semester)
        timestamp = now or datetime.now(timezone.utc)
        record = SemesterRecord(
            semester=semester_tree_to_record(semester),
            semester_average=average_value(semester.average),
            semester_status=status.value if status else None,
            calculation_timestamp=timestamp,
            total_coefficient=_stored_number(summary.total_coefficient),
            total_modules=summary.total_modules,
            completed_modules=summary.completed_modules,
            grade_distribution={band.value: count for band, count in summary.distribution.items()},
        )
        self.storage.set(self.semester_key, record.model_dump_json())
        self.storage.set(self.last_update_key, timestamp.isoformat())
        logger.info("Saved semester %r (%d/%d modules complete)", semester.name, summary.completed_modules, summary.total_modules)
        return semester

    def clear_semester(self) -> None:
        self.storage.delete(self.semester_key)
        self.storage.delete(self.last_update_key)
        logger.info("Cleared saved semester data")

    def load_year(self) -> AcademicYear | None:
        record = self._read(self.year_key, YearRecord)
        if record is None:
            return None
        entries = tuple(
            SemesterResult(
                id=s.id,
                name=s.name,
                coefficient=_loaded_coefficient(s.coefficient),
                entered_average=s.entered_average,
                semester=semester_tree_from_record(s.semester) if s.semester else None,
            )
            for s in record.semesters
        )
        return recompute_year(AcademicYear(name=record.academic_year, semesters=entries))

    def save_year(self, year: AcademicYear, now: datetime | None = None) -> AcademicYear:
        year = recompute_year(year)
        status = year_status(year)
        record = YearRecord(
            academic_year=year.name,
            semesters=[
                SemesterResultRecord(
                    id=s.id,
                    name=s.name,
                    coefficient=_stored_number(s.coefficient),
                    entered_average=s.entered_average,
                    semester=semester_tree_to_record(s.semester) if s.semester else None,
                    average=average_value(s.average),
                )
                for s in year.semesters
            ],
            annual_average=average_value(year.average),
            status=status.value if status else None,
            calculation_timestamp=now or datetime.now(timezone.utc),
        )
        self.storage.set(self.year_key, record.model_dump_json())
        logger.info("Saved academic year %r", year.name)
        return year

    def load_tasks(self) -> tuple[CalendarTask, ...] | None:
        record = self._read(self.tasks_key, TasksRecord)
        if record is None:
            return None
        return tuple(task_from_record(t) for t in record.tasks)

    def save_tasks(self, tasks: tuple[CalendarTask, ...]) -> None:
        record = TasksRecord(tasks=[task_to_record(t) for t in tasks])
        self.storage.set(self.tasks_key, record.model_dump_json())
