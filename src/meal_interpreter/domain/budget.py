"""Daily budget domain models."""

from dataclasses import dataclass
from enum import StrEnum


class Sex(StrEnum):
    MALE = "male"
    FEMALE = "female"


class ActivityLevel(StrEnum):
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


@dataclass(frozen=True)
class Biometrics:
    """Body stats in imperial units with a weight goal."""

    weight_lbs: float
    height_in: float
    age: int
    sex: Sex
    activity_level: ActivityLevel
    target_weight_lbs: float
    weeks_to_goal: float


@dataclass(frozen=True)
class DailyBudget:
    """Rounded daily calorie and macro targets."""

    calories: int
    protein: int
    carbs: int
    fat: int


@dataclass(frozen=True)
class Progress:
    """Consumption against a target."""

    consumed: float
    target: float
    remaining: float
    percentage: float
    is_over: bool
