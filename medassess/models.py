"""Core data types flowing through the analysis pipeline."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from medassess.types import AnalysisSource, ConditionGrade


class AnalysisRequest(BaseModel):
    """One uploaded image. Built once per upload and dropped after analysis."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(repr=False)
    filename: str
    size: int
    mime_type: str = "image/jpeg"

    @classmethod
    def from_bytes(cls, data: bytes, filename: str, mime_type: str = "image/jpeg") -> AnalysisRequest:
        return cls(data=data, filename=filename, size=len(data), mime_type=mime_type)


class RawClassification(BaseModel):
    """Classifier output, shared by the vision model client and the heuristic fallback."""

    model_config = ConfigDict(populate_by_name=True)

    equipment: str = Field(min_length=1)
    condition: ConditionGrade
    description: str | None = None
    visible_issues: list[str] | None = Field(default=None, alias="visibleIssues")
    confidence: int | float | str | None = None
    source: AnalysisSource = AnalysisSource.MODEL


class AnalysisResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    equipment: str
    detected_type: str
    condition: ConditionGrade
    description: str
    confidence: str
    analysis_source: str
    estimated_value: str
    recommendations: list[str]
    key_considerations: list[str]
    next_steps: list[str]
    visible_issues: list[str]
    note: str
    timestamp: str
