from __future__ import annotations

from studydesk.domain.models.entities import AcademicYear, Module, Semester, SemesterResult, Unit


def _module(module_id: str, name: str, coefficient: float, has_lab: bool) -> Module:
    return Module(id=module_id, name=name, coefficient=coefficient, has_practical=True, has_lab=has_lab)


def default_semester() -> Semester:
    return Semester(
        id="semester-1",
        name="Semester 1",
        units=(
            Unit(
                id="unit1",
                name="Unit 1",
                coefficient=6,
                modules=(
                    _module("mod1", "Biotechnologie Pharmaceutique", 3, True),
                    _module("mod2", "Production des Enzymes", 3, True),
                ),
            ),
            Unit(id="unit2", name="Unit 2", coefficient=3, modules=(_module("mod3", "Physiologie Bactérienne", 3, True),)),
            Unit(
                id="unit3",
                name="Unit 3",
                coefficient=5,
                modules=(
                    _module("mod4", "Clonage", 3, True),
                    _module("mod5", "Transposons", 2, False),
                ),
            ),
            Unit(id="unit4", name="Unit 4", coefficient=2, modules=(_module("mod6", "Sequencage ADN", 2, False),)),
            Unit(id="unit5", name="Unit 5", coefficient=1, modules=(_module("mod7", "Legislation", 1, False),)),
        ),
    )


def default_year() -> AcademicYear:
    return AcademicYear(
        name="2025-2026",
        semesters=(
            SemesterResult(id="s1", name="Semester 1", coefficient=1, entered_average=14.75),
            SemesterResult(id="s2", name="Semester 2", coefficient=1, entered_average=15.25),
        ),
    )
