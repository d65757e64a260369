"""Copy-on-write edits over the grade tree.

Every helper returns a new tree; untouched units and modules are shared with
the input. Averages along the edited path are reset to INCOMPLETE when a grading
input changes (anything but a display name); callers recompute on their
calculate action.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable, TypeVar
from uuid import uuid4

from studydesk.domain.models.entities import (
    INCOMPLETE,
    AcademicYear,
    Module,
    ScoreSet,
    Semester,
    SemesterResult,
    Unit,
)

T = TypeVar("T")
TreeT = TypeVar("TreeT", Semester, AcademicYear)

SCORE_FIELDS = ("exam", "practical", "lab")
MODULE_FIELDS = ("name", "coefficient", "has_practical", "has_lab")
UNIT_FIELDS = ("name", "coefficient")
RESULT_FIELDS = ("name", "coefficient", "entered_average", "semester")


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex[:12]}"


def _check_fields(changes: dict[str, Any], allowed: tuple[str, ...]) -> None:
    unknown = sorted(set(changes) - set(allowed))
    if unknown:
        raise ValueError(f"Unsupported fields: {', '.join(unknown)}")


def _replace_child(items: tuple[T, ...], item_id: str, update: Callable[[T], T]) -> tuple[T, ...]:
    for index, item in enumerate(items):
        if item.id == item_id:
            return items[:index] + (update(item),) + items[index + 1 :]
    raise KeyError(item_id)


def _drop_child(items: tuple[T, ...], item_id: str) -> tuple[T, ...]:
    kept = tuple(item for item in items if item.id != item_id)
    if len(kept) == len(items):
        raise KeyError(item_id)
    return kept


def _touches_grades(changes: dict[str, Any]) -> bool:
    return any(key != "name" for key in changes)


def _edit_unit(
    semester: Semester, unit_id: str, update: Callable[[Unit], Unit], stale: bool = True
) -> Semester:
    if not stale:
        return replace(semester, units=_replace_child(semester.units, unit_id, update))

    def apply(unit: Unit) -> Unit:
        return replace(update(unit), average=INCOMPLETE)

    return replace(semester, units=_replace_child(semester.units, unit_id, apply), average=INCOMPLETE)


def add_unit(semester: Semester, name: str | None = None, coefficient: float = 1.0) -> Semester:
    unit = Unit(id=new_id("unit"), name=name or f"Unit {len(semester.units) + 1}", coefficient=coefficient)
    return replace(semester, units=semester.units + (unit,), average=INCOMPLETE)


def update_unit(semester: Semester, unit_id: str, **changes: Any) -> Semester:
    _check_fields(changes, UNIT_FIELDS)
    return _edit_unit(semester, unit_id, lambda u: replace(u, **changes), _touches_grades(changes))


def remove_unit(semester: Semester, unit_id: str) -> Semester:
    return replace(semester, units=_drop_child(semester.units, unit_id), average=INCOMPLETE)


def add_module(
    semester: Semester,
    unit_id: str,
    name: str | None = None,
    coefficient: float = 1.0,
    has_practical: bool = False,
    has_lab: bool = False,
) -> Semester:
    def append(unit: Unit) -> Unit:
        module = Module(
            id=new_id("mod"),
            name=name or f"Module {len(unit.modules) + 1}",
            coefficient=coefficient,
            has_practical=has_practical,
            has_lab=has_lab,
        )
        return replace(unit, modules=unit.modules + (module,))

    return _edit_unit(semester, unit_id, append)


def update_module(semester: Semester, unit_id: str, module_id: str, **changes: Any) -> Semester:
    _check_fields(changes, MODULE_FIELDS)
    stale = _touches_grades(changes)
    if stale:
        changes["average"] = INCOMPLETE

    def apply(unit: Unit) -> Unit:
        return replace(unit, modules=_replace_child(unit.modules, module_id, lambda m: replace(m, **changes)))

    return _edit_unit(semester, unit_id, apply, stale)


def set_score(semester: Semester, unit_id: str, module_id: str, component: str, value: float | None) -> Semester:
    if component not in SCORE_FIELDS:
        raise ValueError(f"Unknown score component: {component}")

    def apply(unit: Unit) -> Unit:
        def rescore(module: Module) -> Module:
            scores: ScoreSet = replace(module.scores, **{component: value})
            return replace(module, scores=scores, average=INCOMPLETE)

        return replace(unit, modules=_replace_child(unit.modules, module_id, rescore))

    return _edit_unit(semester, unit_id, apply)


def remove_module(semester: Semester, unit_id: str, module_id: str) -> Semester:
    return _edit_unit(semester, unit_id, lambda u: replace(u, modules=_drop_child(u.modules, module_id)))


def add_semester_result(
    year: AcademicYear,
    name: str | None = None,
    coefficient: float = 1.0,
    entered_average: float | None = None,
) -> AcademicYear:
    entry = SemesterResult(
        id=new_id("sem"),
        name=name or f"Semester {len(year.semesters) + 1}",
        coefficient=coefficient,
        entered_average=entered_average,
    )
    return replace(year, semesters=year.semesters + (entry,), average=INCOMPLETE)


def update_semester_result(year: AcademicYear, result_id: str, **changes: Any) -> AcademicYear:
    _check_fields(changes, RESULT_FIELDS)
    if not _touches_grades(changes):
        return replace(year, semesters=_replace_child(year.semesters, result_id, lambda s: replace(s, **changes)))
    semesters = _replace_child(year.semesters, result_id, lambda s: replace(s, average=INCOMPLETE, **changes))
    return replace(year, semesters=semesters, average=INCOMPLETE)


def remove_semester_result(year: AcademicYear, result_id: str) -> AcademicYear:
    return replace(year, semesters=_drop_child(year.semesters, result_id), average=INCOMPLETE)


def rename(tree: TreeT, name: str) -> TreeT:
    """Display names carry no grading input, so derived averages are kept."""
    return replace(tree, name=name)


def relink_semester(year: AcademicYear, semester: Semester) -> AcademicYear:
    """Refresh every year entry linked to this semester with its latest tree."""
    if not any(s.semester is not None and s.semester.id == semester.id for s in year.semesters):
        return year
    semesters = tuple(
        replace(s, semester=semester, average=INCOMPLETE)
        if s.semester is not None and s.semester.id == semester.id
        else s
        for s in year.semesters
    )
    return replace(year, semesters=semesters, average=INCOMPLETE)
