"""Test response assembly and knowledge base lookup."""

import random
from datetime import datetime, timezone

import pytest

from medassess.assembler import (
    DEFAULT_VISIBLE_ISSUES,
    KEY_CONSIDERATIONS,
    NEXT_STEPS,
    RECOMMENDATIONS,
    assemble,
    format_confidence,
)
from medassess.errors import InternalAssemblyError
from medassess.knowledge import EQUIPMENT_PROFILES, GENERIC_CATEGORY, known_categories, lookup_profile
from medassess.models import RawClassification
from medassess.types import AnalysisSource, ConditionGrade

REQUIRED_KEYS = {
    "equipment", "detectedType", "condition", "description", "confidence",
    "analysisSource", "estimatedValue", "recommendations", "keyConsiderations",
    "nextSteps", "visibleIssues", "note", "timestamp",
}


def _raw(equipment="wheelchair", condition="good", **kw) -> RawClassification:
    return RawClassification(equipment=equipment, condition=condition, **kw)


@pytest.mark.parametrize("category", known_categories() + [GENERIC_CATEGORY])
@pytest.mark.parametrize("grade", list(ConditionGrade))
def test_all_keys_populated(category, grade):
    result = assemble(_raw(category, grade))
    dumped = result.model_dump(by_alias=True, mode="json")

    assert set(dumped) == REQUIRED_KEYS
    assert all(dumped[k] not in (None, "", []) for k in REQUIRED_KEYS)
    assert dumped["condition"] == grade.value
    assert dumped["estimatedValue"] == EQUIPMENT_PROFILES[category].price_ranges[grade]
    assert dumped["equipment"] == EQUIPMENT_PROFILES[category].name


def test_wheelchair_excellent():
    result = assemble(_raw("wheelchair", "excellent", confidence=88))
    assert result.equipment == "Wheelchair"
    assert result.detected_type == "wheelchair"
    assert result.estimated_value == "$300 - $800"
    assert result.confidence == "88%"
    assert result.description.startswith("Like new condition")


def test_unknown_category_uses_generic_profile():
    result = assemble(_raw("toaster", "poor"))
    assert result.equipment == "Medical Device"
    assert result.detected_type == "toaster"
    assert result.estimated_value == "Minimal value"


def test_lookup_normalises_case_and_whitespace():
    assert lookup_profile("  Microscope ").name == "Laboratory Microscope"
    assert lookup_profile("defibrillator") is EQUIPMENT_PROFILES[GENERIC_CATEGORY]


def test_knowledge_base_is_read_only():
    with pytest.raises(TypeError):
        EQUIPMENT_PROFILES["toaster"] = EQUIPMENT_PROFILES[GENERIC_CATEGORY]  # type: ignore[index]
    with pytest.raises(TypeError):
        EQUIPMENT_PROFILES["wheelchair"].price_ranges[ConditionGrade.GOOD] = "free"  # type: ignore[index]


def test_own_description_and_issues_pass_through():
    result = assemble(_raw(description="Rust on the footrest", visible_issues=["rust", "loose brake"]))
    assert result.description == "Rust on the footrest"
    assert result.visible_issues == ["rust", "loose brake"]


def test_default_visible_issues():
    assert assemble(_raw()).visible_issues == DEFAULT_VISIBLE_ISSUES


def test_fixed_guidance_lists():
    result = assemble(_raw())
    assert result.recommendations == RECOMMENDATIONS
    assert result.key_considerations == KEY_CONSIDERATIONS
    assert result.next_steps == NEXT_STEPS
    result.recommendations.append("mutated")
    assert "mutated" not in RECOMMENDATIONS


def test_source_labels():
    model = assemble(_raw(source=AnalysisSource.MODEL))
    demo = assemble(_raw(source=AnalysisSource.HEURISTIC))
    assert model.analysis_source == "Google Gemini AI"
    assert model.note == "AI-powered analysis completed"
    assert demo.analysis_source == "Enhanced Demo Analysis"
    assert demo.note == "Enhanced demo analysis"


def test_timestamp_is_iso8601():
    now = datetime(2026, 3, 1, 12, 30, tzinfo=timezone.utc)
    result = assemble(_raw(), now=now)
    assert result.timestamp == "2026-03-01T12:30:00+00:00"
    assert datetime.fromisoformat(assemble(_raw()).timestamp).tzinfo is not None


@pytest.mark.parametrize(
    "value, expected",
    [
        (87, "87%"),
        (100, "100%"),
        (87.6, "87%"),
        (0.92, "92%"),
        ("64", "64%"),
        ("70%", "70%"),
        (" 85 % ", "85%"),
        ("high", "90%"),
        ("Medium", "75%"),
        ("low", "50%"),
    ],
)
def test_format_confidence(value, expected):
    assert format_confidence(value) == expected


@pytest.mark.parametrize(
    "value", [None, "", "unsure", True, float("nan"), 0, -5, 250, 100.5, "0", "-3", "250%", "abc%"],
)
def test_missing_confidence_is_synthesised(value):
    rng = random.Random(7)
    for _ in range(50):
        pct = format_confidence(value, rng)
        assert pct.endswith("%")
        assert 75 <= int(pct[:-1]) < 95


@pytest.mark.parametrize("bad", [None, {"equipment": "bed", "condition": "good"}, "wheelchair"])
def test_invalid_input_raises(bad):
    with pytest.raises(InternalAssemblyError):
        assemble(bad)  # type: ignore[arg-type]
