"""Score generated recipes against what the user has available."""

import math
from collections.abc import Iterable

from hungry_owl.domain.recipes import GeneratedRecipe, RecipeIngredient, RecipeMatch


def names_overlap(name: str, availability: Iterable[str]) -> bool:
    """Return True when ``name`` and some available name contain one another.

    Containment runs both ways so "chicken" matches "chicken breast" and
    "chicken breast" matches "chicken". Both sides are expected lower-cased.
    """
    return any(entry in name or name in entry for entry in availability)


def score_recipe(
    ingredients: Iterable[RecipeIngredient], availability: frozenset[str]
) -> RecipeMatch:
    """Compute the match percentage and missing required ingredients."""
    required = [
        ingredient.name.lower()
        for ingredient in ingredients
        if not ingredient.optional
    ]
    if not required:
        return RecipeMatch(match_percentage=100, missing=[])

    missing = [name for name in required if not names_overlap(name, availability)]
    matched = len(required) - len(missing)
    return RecipeMatch(
        match_percentage=_round_half_up(100 * matched / len(required)),
        missing=missing,
    )


def annotate_recipes(
    recipes: list[GeneratedRecipe], availability: frozenset[str]
) -> list[GeneratedRecipe]:
    """Attach match scores to recipes and sort best match first."""
    annotated: list[GeneratedRecipe] = []
    for recipe in recipes:
        match = score_recipe(recipe.ingredients, availability)
        annotated.append(
            recipe.model_copy(
                update={
                    "match_percentage": match.match_percentage,
                    "missing_ingredients": match.missing,
                }
            )
        )
    return sorted(annotated, key=lambda item: item.match_percentage or 0, reverse=True)


def _round_half_up(value: float) -> int:
    # round() uses banker's rounding; 50% of an odd count must round up.
    return math.floor(value + 0.5)
