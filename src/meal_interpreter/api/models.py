"""Pydantic models for HTTP payloads."""

from pydantic import BaseModel, ConfigDict, Field

from meal_interpreter.domain.budget import ActivityLevel, Biometrics, Sex
from meal_interpreter.domain.nutrition import NutritionRecord
from meal_interpreter.domain.scoring import Goal, UserProfile


class ParseMealRequest(BaseModel):
    """Meal description, optionally with the record it refines."""

    model_config = ConfigDict(populate_by_name=True)

    meal_description: str = Field(alias="mealDescription")
    existing_data: NutritionRecord | None = Field(default=None, alias="existingData")


class ProfilePayload(BaseModel):
    """User goal used for meal grading."""

    model_config = ConfigDict(populate_by_name=True)

    goal: Goal = Goal.MAINTAIN
    daily_calorie_target: float | None = Field(
        default=None, gt=0, alias="dailyCalorieTarget"
    )

    def to_domain(self) -> UserProfile:
        return UserProfile(
            goal=self.goal, daily_calorie_target=self.daily_calorie_target
        )


class GradeMealRequest(BaseModel):
    """Parsed meal plus the profile to grade it against."""

    meal: NutritionRecord
    profile: ProfilePayload = Field(default_factory=ProfilePayload)


class BudgetRequest(BaseModel):
    """Onboarding biometrics in imperial units."""

    model_config = ConfigDict(populate_by_name=True)

    weight: float = Field(gt=0)
    height: float = Field(gt=0)
    age: int = Field(gt=0)
    sex: Sex
    activity_level: ActivityLevel = Field(alias="activityLevel")
    target_weight: float = Field(gt=0, alias="targetWeight")
    weeks_to_goal: float = Field(gt=0, alias="weeksToGoal")

    def to_domain(self) -> Biometrics:
        return Biometrics(
            weight_lbs=self.weight,
            height_in=self.height,
            age=self.age,
            sex=self.sex,
            activity_level=self.activity_level,
            target_weight_lbs=self.target_weight,
            weeks_to_goal=self.weeks_to_goal,
        )


class DescribeImageRequest(BaseModel):
    """Meal photo as base64 or an image data URL."""

    model_config = ConfigDict(populate_by_name=True)

    image_data: str = Field(alias="imageData")


class ProgressRequest(BaseModel):
    """Amount consumed against a daily target."""

    consumed: float = Field(ge=0)
    target: float = Field(gt=0)
