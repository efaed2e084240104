"""Turn free-form model text into a RawClassification.

Models often wrap the requested JSON in prose or code fences, so the first
balanced ``{...}`` span is pulled out and parsed. When that fails the raw
text is scanned for equipment and condition keywords instead.
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from medassess.knowledge import GENERIC_CATEGORY
from medassess.models import RawClassification
from medassess.types import AnalysisSource, ConditionGrade

logger = logging.getLogger(__name__)

# Order matters: first match wins.
EQUIPMENT_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("microscope", ("microscope", "lens", "optic", "magnification", "objective")),
    ("stethoscope", ("stethoscope", "chest", "heart", "sound", "acoustic", "tube")),
    ("defibrillator", ("defibrillator", "aed", "heart", "shock", "paddle", "emergency")),
    ("ultrasound", ("ultrasound", "sonogram", "probe", "transducer", "imaging", "scan")),
    ("monitor", ("monitor", "screen", "display", "vital", "patient monitor", "ecg", "ekg")),
    ("wheelchair", ("wheelchair", "wheel", "chair", "mobility")),
    ("bed", ("bed", "hospital bed", "medical bed")),
]

CONDITION_KEYWORDS: list[tuple[ConditionGrade, tuple[str, ...]]] = [
    (ConditionGrade.EXCELLENT, ("excellent", "like new", "perfect")),
    (ConditionGrade.FAIR, ("fair", "average", "moderate")),
    (ConditionGrade.POOR, ("poor", "bad", "broken")),
]

EXCERPT_LENGTH = 150


def extract_json_span(text: str) -> str | None:
    """Return the first top-level balanced ``{...}`` substring of *text*, verbatim."""
    depth = 0
    start = -1
    in_string = False
    escaped = False
    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"' and depth > 0:
            in_string = True
        elif ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def keyword_fallback(text: str) -> RawClassification:
    """Build a classification from keywords when the model text holds no usable JSON."""
    lowered = text.lower()

    equipment = GENERIC_CATEGORY
    for category, keywords in EQUIPMENT_KEYWORDS:
        if any(kw in lowered for kw in keywords):
            equipment = category
            break

    condition = ConditionGrade.GOOD
    for grade, keywords in CONDITION_KEYWORDS:
        if any(kw in lowered for kw in keywords):
            condition = grade
            break

    return RawClassification(
        equipment=equipment,
        condition=condition,
        description="AI analysis completed. " + text[:EXCERPT_LENGTH] + "...",
        visible_issues=["Analysis completed from AI response"],
        confidence="medium",
        source=AnalysisSource.MODEL,
    )


def parse_model_text(text: str) -> RawClassification:
    """Parse model output; never raises, degrading to the keyword scan instead."""
    span = extract_json_span(text)
    if span is None:
        logger.info("No JSON object in model output, using keyword fallback")
        return keyword_fallback(text)

    try:
        data = json.loads(span)
    except json.JSONDecodeError as e:
        logger.info("Model JSON did not parse (%s), using keyword fallback", e)
        return keyword_fallback(text)

    if not isinstance(data, dict):
        return keyword_fallback(text)

    data.pop("source", None)
    try:
        return RawClassification.model_validate({**data, "source": AnalysisSource.MODEL})
    except ValidationError as e:
        logger.warning("Model JSON violates classification contract: %s", e.errors()[:3])
        return keyword_fallback(text)
