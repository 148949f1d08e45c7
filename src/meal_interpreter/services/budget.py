"""Daily calorie and macro budget calculations."""

from meal_interpreter.domain.budget import (
    ActivityLevel,
    Biometrics,
    DailyBudget,
    Progress,
    Sex,
)

ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

_KG_PER_LB = 0.453592
_CM_PER_IN = 2.54
_KCAL_PER_LB = 3500
_MIN_CALORIES = {Sex.MALE: 1500, Sex.FEMALE: 1200}


def calculate_bmr(weight_lbs: float, height_in: float, age: int, sex: Sex) -> float:
    """Mifflin-St Jeor basal metabolic rate."""
    weight_kg = weight_lbs * _KG_PER_LB
    height_cm = height_in * _CM_PER_IN
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    return base + 5 if sex == Sex.MALE else base - 161


def calculate_tdee(bmr: float, activity_level: ActivityLevel) -> float:
    """Total daily energy expenditure."""
    return bmr * ACTIVITY_MULTIPLIERS[activity_level]


def calculate_daily_budget(biometrics: Biometrics) -> DailyBudget:
    """Derive a daily calorie budget and macro split from biometrics."""
    if biometrics.weeks_to_goal <= 0:
        raise ValueError("weeks_to_goal must be positive")
    bmr = calculate_bmr(
        biometrics.weight_lbs, biometrics.height_in, biometrics.age, biometrics.sex
    )
    tdee = calculate_tdee(bmr, biometrics.activity_level)

    pounds_per_week = (
        biometrics.weight_lbs - biometrics.target_weight_lbs
    ) / biometrics.weeks_to_goal
    daily_deficit = pounds_per_week * _KCAL_PER_LB / 7
    daily_calories = max(tdee - daily_deficit, _MIN_CALORIES[biometrics.sex])

    # 1 g protein per lb, 25% of calories from fat, carbs take the rest.
    protein_g = biometrics.weight_lbs * 1.0
    fat_calories = daily_calories * 0.25
    carb_calories = daily_calories - protein_g * 4 - fat_calories

    return DailyBudget(
        calories=round(daily_calories),
        protein=round(protein_g),
        carbs=round(carb_calories / 4),
        fat=round(fat_calories / 9),
    )


def calculate_progress(consumed: float, target: float) -> Progress:
    """Percentage of a target consumed, capped at 100."""
    if target <= 0:
        raise ValueError("target must be positive")
    percentage = consumed / target * 100
    return Progress(
        consumed=consumed,
        target=target,
        remaining=target - consumed,
        percentage=min(percentage, 100.0),
        is_over=consumed > target,
    )
