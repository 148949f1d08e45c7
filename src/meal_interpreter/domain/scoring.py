"""Meal grading domain models."""

from dataclasses import dataclass, field
from enum import StrEnum


class Goal(StrEnum):
    """User's nutrition goal."""

    LOSE_WEIGHT = "LOSE_WEIGHT"
    BUILD_MUSCLE = "BUILD_MUSCLE"
    MAINTAIN = "MAINTAIN"
    EXPLORING = "EXPLORING"


@dataclass(frozen=True)
class UserProfile:
    """Goal and daily calorie target used to grade a meal."""

    goal: Goal = Goal.MAINTAIN
    daily_calorie_target: float | None = None


@dataclass(frozen=True)
class MacroBreakdown:
    """Share of macro calories, in whole percent."""

    protein: int
    carbs: int
    fat: int


@dataclass(frozen=True)
class MealGrade:
    """Letter grade with feedback for a meal."""

    grade: str
    score: int
    color: str
    summary: str
    macro_breakdown: MacroBreakdown
    feedback: list[str] = field(default_factory=list)
    positives: list[str] = field(default_factory=list)
