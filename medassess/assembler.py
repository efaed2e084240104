"""Response assembler — merges a classification with the knowledge base.

Pure over its inputs: it never calls a classifier, so the decision of which
classifier to trust stays in the pipeline.
"""

from __future__ import annotations

import math
import random
from datetime import datetime, timezone

from medassess.errors import InternalAssemblyError
from medassess.knowledge import lookup_profile
from medassess.models import AnalysisResult, RawClassification
from medassess.types import AnalysisSource

SOURCE_LABELS: dict[AnalysisSource, str] = {
    AnalysisSource.MODEL: "Google Gemini AI",
    AnalysisSource.HEURISTIC: "Enhanced Demo Analysis",
}

SOURCE_NOTES: dict[AnalysisSource, str] = {
    AnalysisSource.MODEL: "AI-powered analysis completed",
    AnalysisSource.HEURISTIC: "Enhanced demo analysis",
}

QUALITATIVE_CONFIDENCE: dict[str, int] = {"high": 90, "medium": 75, "low": 50}

RECOMMENDATIONS = [
    "Verify equipment service history and maintenance records",
    "Check for manufacturer recalls or safety notices",
    "Test all functions before purchase",
    "Inspect for physical damage or wear",
    "Consider professional inspection for expensive equipment",
]

KEY_CONSIDERATIONS = [
    "Check overall physical condition",
    "Test all primary functions",
    "Verify safety certifications",
    "Inspect for wear and tear",
]

NEXT_STEPS = [
    "Compare prices with similar equipment online",
    "Contact seller for detailed service history",
    "Arrange for professional testing if possible",
    "Check warranty and return policy",
]

DEFAULT_VISIBLE_ISSUES = ["No specific issues detected"]


def format_confidence(value: int | float | str | None, rng: random.Random | None = None) -> str:
    """Render a confidence as ``"NN%"``, synthesising one in [75, 95) when unusable."""
    if isinstance(value, bool) or (isinstance(value, float) and not math.isfinite(value)):
        value = None
    if isinstance(value, float) and 0 < value <= 1:
        value *= 100
    if isinstance(value, (int, float)) and 0 < value <= 100:
        return f"{int(value)}%"
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("%"):
            text = text[:-1].strip()
            try:
                pct = float(text)
            except ValueError:
                pct = 0.0
            if 0 < pct <= 100:
                return f"{int(pct)}%"
            return f"{(rng or random).randint(75, 94)}%"
        try:
            return format_confidence(float(text), rng)
        except ValueError:
            pass
        if text.lower() in QUALITATIVE_CONFIDENCE:
            return f"{QUALITATIVE_CONFIDENCE[text.lower()]}%"
    return f"{(rng or random).randint(75, 94)}%"


def assemble(
    classification: RawClassification,
    *,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> AnalysisResult:
    if not isinstance(classification, RawClassification):
        raise InternalAssemblyError(
            f"Expected RawClassification, got {type(classification).__name__}"
        )
    if not classification.equipment:
        raise InternalAssemblyError("Classification has no equipment category")

    grade = classification.condition
    profile = lookup_profile(classification.equipment)
    timestamp = (now or datetime.now(timezone.utc)).isoformat()

    return AnalysisResult(
        equipment=profile.name,
        detected_type=classification.equipment,
        condition=grade,
        description=classification.description or profile.narrative(grade),
        confidence=format_confidence(classification.confidence, rng),
        analysis_source=SOURCE_LABELS[classification.source],
        estimated_value=profile.price_range(grade),
        recommendations=list(RECOMMENDATIONS),
        key_considerations=list(KEY_CONSIDERATIONS),
        next_steps=list(NEXT_STEPS),
        visible_issues=list(classification.visible_issues or DEFAULT_VISIBLE_ISSUES),
        note=SOURCE_NOTES[classification.source],
        timestamp=timestamp,
    )
