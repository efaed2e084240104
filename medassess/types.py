"""Shared enums and type aliases."""

from enum import Enum


class ConditionGrade(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class AnalysisSource(str, Enum):
    MODEL = "model"
    HEURISTIC = "heuristic"
