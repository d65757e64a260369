from __future__ import annotations

import math
from dataclasses import replace
from enum import Enum

from studydesk.domain.logic.validation import ScoreCheck, check_score
from studydesk.domain.models.entities import INCOMPLETE, Average, Complete, Incomplete, Module


class GradeBand(str, Enum):
    TRES_BIEN = "Très Bien"
    BIEN = "Bien"
    ASSEZ_BIEN = "Assez Bien"
    PASSABLE = "Passable"
    A_RATTRAPER = "À rattraper"


# Lower bounds, checked from the top band down.
GRADE_BANDS: list[tuple[float, GradeBand]] = [
    (16.0, GradeBand.TRES_BIEN),
    (14.0, GradeBand.BIEN),
    (12.0, GradeBand.ASSEZ_BIEN),
    (10.0, GradeBand.PASSABLE),
]


def classify(average: float | Average | None) -> GradeBand | None:
    if average is None or isinstance(average, Incomplete):
        return None
    value = average.value if isinstance(average, Complete) else float(average)
    if math.isnan(value):
        return None
    for low, band in GRADE_BANDS:
        if value >= low:
            return band
    return GradeBand.A_RATTRAPER


def _weighted_components(module: Module) -> float:
    exam = module.scores.exam
    practical = module.scores.practical
    lab = module.scores.lab
    if module.has_practical and module.has_lab:
        return exam * 0.6 + practical * 0.2 + lab * 0.2
    if module.has_practical:
        return (exam * 2 + practical) / 3
    if module.has_lab:
        return (exam * 2 + lab) / 3
    return float(exam)


def module_average(module: Module) -> Average:
    checks = (
        check_score(module.scores.exam, True),
        check_score(module.scores.practical, True) if module.has_practical else ScoreCheck.ABSENT,
        check_score(module.scores.lab, True) if module.has_lab else ScoreCheck.ABSENT,
    )
    if ScoreCheck.INVALID in checks:
        return INCOMPLETE
    return Complete(_weighted_components(module))


def recompute_module(module: Module) -> Module:
    return replace(module, average=module_average(module))
