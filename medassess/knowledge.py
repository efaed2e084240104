"""Equipment knowledge base: display names, condition narratives, price ranges.

The table is built once at import time and never mutated, so concurrent
requests read it without locking.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from medassess.types import ConditionGrade

GENERIC_CATEGORY = "medical equipment"


@dataclass(frozen=True)
class EquipmentProfile:
    name: str
    conditions: Mapping[ConditionGrade, str]
    price_ranges: Mapping[ConditionGrade, str]

    def narrative(self, grade: ConditionGrade) -> str:
        return self.conditions[grade]

    def price_range(self, grade: ConditionGrade) -> str:
        return self.price_ranges[grade]


def _profile(name: str, conditions: dict[str, str], prices: dict[str, str]) -> EquipmentProfile:
    return EquipmentProfile(
        name=name,
        conditions=MappingProxyType({ConditionGrade(k): v for k, v in conditions.items()}),
        price_ranges=MappingProxyType({ConditionGrade(k): v for k, v in prices.items()}),
    )


EQUIPMENT_PROFILES: Mapping[str, EquipmentProfile] = MappingProxyType({
    "wheelchair": _profile(
        "Wheelchair",
        {
            "excellent": "Like new condition, all components working perfectly, minimal wear on wheels and frame.",
            "good": "Minor cosmetic wear, fully functional, wheels and brakes in good condition.",
            "fair": "Noticeable wear, may need wheel or brake adjustment, still operational.",
            "poor": "Significant wear, safety concerns, requires repair or replacement of major components.",
        },
        {"excellent": "$300 - $800", "good": "$150 - $300", "fair": "$50 - $150", "poor": "Under $50"},
    ),
    "microscope": _profile(
        "Laboratory Microscope",
        {
            "excellent": "Optics crystal clear, mechanical stages smooth, illumination working perfectly.",
            "good": "Minor scratches on body, optics slightly dusty but fully functional.",
            "fair": "Noticeable wear, some mechanical stiffness, optics may need cleaning.",
            "poor": "Significant damage, misaligned optics, mechanical issues.",
        },
        {"excellent": "$2,000 - $5,000", "good": "$800 - $2,000", "fair": "$300 - $800", "poor": "Under $300"},
    ),
    "stethoscope": _profile(
        "Medical Stethoscope",
        {
            "excellent": "Like new condition, perfect acoustic quality, tubing flexible.",
            "good": "Minor cosmetic wear, good acoustic performance.",
            "fair": "Reduced acoustic quality, tubing stiffening.",
            "poor": "Compromised functionality, cracked tubing.",
        },
        {"excellent": "$100 - $300", "good": "$50 - $100", "fair": "$20 - $50", "poor": "Under $20"},
    ),
    GENERIC_CATEGORY: _profile(
        "Medical Device",
        {
            "excellent": "Like new condition, fully functional, no visible damage.",
            "good": "Good working condition, minor cosmetic wear.",
            "fair": "Operational but shows significant wear.",
            "poor": "Poor condition, requires repair or replacement.",
        },
        {
            "excellent": "Varies by device",
            "good": "Varies by device",
            "fair": "Varies by device",
            "poor": "Minimal value",
        },
    ),
})


def lookup_profile(category: str) -> EquipmentProfile:
    """Return the profile for a category, or the generic one when it is unknown."""
    profile = EQUIPMENT_PROFILES.get(category)
    if profile is None:
        profile = EQUIPMENT_PROFILES.get(category.strip().lower())
    return profile or EQUIPMENT_PROFILES[GENERIC_CATEGORY]


def known_categories() -> list[str]:
    return [c for c in EQUIPMENT_PROFILES if c != GENERIC_CATEGORY]
