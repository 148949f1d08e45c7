"""Interpretation request variants."""

from dataclasses import dataclass

from meal_interpreter.domain.nutrition import NutritionRecord


@dataclass(frozen=True)
class NewMeal:
    """Describe a meal from scratch."""

    description: str


@dataclass(frozen=True)
class RefineMeal:
    """Apply a modification instruction to a previously parsed record."""

    description: str
    prior: NutritionRecord


MealRequest = NewMeal | RefineMeal


def meal_request(
    description: str, existing: NutritionRecord | None = None
) -> MealRequest:
    """Select the request variant from the presence of a prior record."""
    if existing is None:
        return NewMeal(description=description)
    return RefineMeal(description=description, prior=existing)
