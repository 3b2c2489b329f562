"""Staple ingredient recommendations based on what is missing."""

from hungry_owl.domain.models import SkillLevel
from hungry_owl.domain.staples import (
    DEFAULT_STAPLE_CATALOG,
    StapleCatalog,
    StapleRecommendation,
    StapleSuggestion,
)
from hungry_owl.services.matching import names_overlap

WELL_STOCKED_MESSAGE = "Great job! Your pantry is well-stocked for your skill level."
RECOMMEND_MESSAGE = "Adding these items would help you make more recipes."
_WELL_STOCKED_MAX_MISSING = 2
_MAX_RECOMMENDATIONS = 5


def recommend_staples(
    availability: frozenset[str],
    skill_level: SkillLevel,
    catalog: StapleCatalog = DEFAULT_STAPLE_CATALOG,
) -> StapleRecommendation:
    """Suggest up to five staples the user lacks for their skill tier."""
    candidates: list[StapleSuggestion] = list(catalog.core)
    if skill_level != SkillLevel.BEGINNER:
        candidates.extend(catalog.intermediate)

    missing = [
        staple
        for staple in candidates
        if not names_overlap(staple.name.lower(), availability)
    ]
    if len(missing) <= _WELL_STOCKED_MAX_MISSING:
        return StapleRecommendation(
            recommendations=[], is_well_stocked=True, message=WELL_STOCKED_MESSAGE
        )
    return StapleRecommendation(
        recommendations=missing[:_MAX_RECOMMENDATIONS],
        is_well_stocked=False,
        message=RECOMMEND_MESSAGE,
    )
