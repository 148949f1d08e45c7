"""Goal-aware meal grading."""

from meal_interpreter.domain.nutrition import NutritionRecord
from meal_interpreter.domain.scoring import Goal, MacroBreakdown, MealGrade, UserProfile

VEGETABLES = (
    "broccoli", "spinach", "kale", "lettuce", "carrot", "tomato", "cucumber",
    "bell pepper", "pepper", "zucchini", "asparagus", "cauliflower",
    "brussels sprouts", "cabbage", "celery", "eggplant", "green beans",
    "mushroom", "onion", "peas", "radish", "squash", "sweet potato", "potato",
    "arugula", "bok choy", "collard greens", "artichoke", "beets", "chard",
    "fennel", "leeks", "parsnip", "turnip", "watercress", "salad", "greens",
    "vegetables", "veggie", "scallion", "bean sprouts", "sprouts",
    "bamboo shoots", "water chestnuts", "snow peas", "daikon", "lotus root",
    "seaweed", "nori", "kombu",
)  # fmt: skip

FRUITS = (
    "apple", "banana", "orange", "strawberry", "blueberry", "raspberry",
    "grape", "mango", "pineapple", "watermelon", "cantaloupe", "honeydew",
    "peach", "pear", "plum", "cherry", "kiwi", "papaya", "avocado",
    "blackberry", "cranberry", "pomegranate", "grapefruit", "lemon", "lime",
    "fruit",
)  # fmt: skip

_GRADE_BANDS = (
    (95, "A+"), (90, "A"), (85, "A-"),
    (80, "B+"), (75, "B"), (70, "B-"),
    (65, "C+"), (60, "C"), (55, "C-"),
    (50, "D+"), (45, "D"), (40, "D-"),
)  # fmt: skip

_GRADE_COLORS = {
    "A": "#10B981",
    "B": "#3B82F6",
    "C": "#F59E0B",
    "D": "#F97316",
}
_FAILING_COLOR = "#EF4444"
_DEFAULT_MEAL_CALORIES = 600


def score_to_grade(score: float) -> str:
    """Map a 0-100 score to a letter grade."""
    for threshold, grade in _GRADE_BANDS:
        if score >= threshold:
            return grade
    return "F"


def grade_to_color(grade: str) -> str:
    """Display color for a letter grade."""
    return _GRADE_COLORS.get(grade[:1], _FAILING_COLOR)


def classify_food(food: str) -> tuple[bool, bool]:
    """Return (is_vegetable, is_fruit) by keyword match."""
    lowered = food.lower()
    return (
        any(name in lowered for name in VEGETABLES),
        any(name in lowered for name in FRUITS),
    )


def score_meal(  # noqa: PLR0912, PLR0915
    record: NutritionRecord, profile: UserProfile
) -> MealGrade:
    """Grade a meal against the user's goal and calorie target."""
    totals = record.totals
    goal = profile.goal
    score = 100
    feedback: list[str] = []
    positives: list[str] = []

    protein_kcal = totals.protein * 4
    carbs_kcal = totals.carbs * 4
    fat_kcal = totals.fat * 9
    macro_kcal = protein_kcal + carbs_kcal + fat_kcal
    protein_pct = protein_kcal / macro_kcal * 100 if macro_kcal > 0 else 0.0
    carbs_pct = carbs_kcal / macro_kcal * 100 if macro_kcal > 0 else 0.0
    fat_pct = fat_kcal / macro_kcal * 100 if macro_kcal > 0 else 0.0

    ideal_calories = (
        profile.daily_calorie_target / 3
        if profile.daily_calorie_target
        else _DEFAULT_MEAL_CALORIES
    )
    calorie_ratio = totals.calories / ideal_calories
    if calorie_ratio > 1.5:
        score -= 25
        feedback.append(
            f"High calories for one meal ({round(calorie_ratio * 100)}% of target)"
        )
    elif calorie_ratio < 0.5 and goal != Goal.LOSE_WEIGHT:
        score -= 15
        feedback.append("Quite low in calories - consider adding more food")
    elif 0.8 <= calorie_ratio <= 1.2:
        positives.append("Perfect calorie amount")

    if goal == Goal.BUILD_MUSCLE:
        if protein_pct < 20:
            score -= 30
            feedback.append(
                f"Low protein ({round(protein_pct)}%) - "
                "aim for 25%+ for muscle building"
            )
        elif protein_pct >= 30:
            positives.append(f"Excellent protein ({round(protein_pct)}%)")
        elif protein_pct >= 25:
            positives.append("Good protein content")
        else:
            score -= 10
            feedback.append("Could use a bit more protein for muscle building")
    elif goal == Goal.LOSE_WEIGHT:
        if protein_pct < 15:
            score -= 25
            feedback.append("Add more protein for satiety and muscle preservation")
        elif protein_pct >= 25:
            positives.append(f"Great protein ({round(protein_pct)}%) for weight loss")
        else:
            positives.append("Good protein content")
    elif protein_pct < 12:
        score -= 15
        feedback.append("Add more protein for balanced nutrition")
    elif protein_pct >= 20:
        positives.append("Excellent protein balance")

    if fat_pct > 45:
        score -= 20
        feedback.append(f"Very high fat ({round(fat_pct)}%) - may feel sluggish")
    elif fat_pct < 15 and goal != Goal.LOSE_WEIGHT:
        score -= 10
        feedback.append("Low fat - add healthy fats (avocado, nuts, olive oil)")
    elif 25 <= fat_pct <= 35:
        positives.append("Balanced fat content")

    if goal == Goal.LOSE_WEIGHT and carbs_pct > 50:
        score -= 15
        feedback.append("High carbs - consider reducing for better weight loss")
    elif goal == Goal.BUILD_MUSCLE and carbs_pct < 30:
        score -= 10
        feedback.append("Add more carbs for energy and recovery")

    veggie_count = 0
    fruit_count = 0
    for item in record.items:
        is_veggie, is_fruit = classify_food(item.food)
        veggie_count += is_veggie
        fruit_count += is_fruit
    if veggie_count == 0 and fruit_count == 0:
        score -= 12
        feedback.append("Add vegetables for fiber and micronutrients")
    elif veggie_count >= 2:
        positives.append("Great veggie variety")
    elif veggie_count == 1:
        positives.append("Includes vegetables")
    else:
        positives.append("Includes fruit")

    if len(record.items) == 1 and totals.calories > 800:
        score -= 10
        feedback.append("Large single item - consider adding variety")
    elif len(record.items) >= 3:
        positives.append("Good meal variety")

    final_score = max(0, score)
    grade = score_to_grade(final_score)
    return MealGrade(
        grade=grade,
        score=final_score,
        color=grade_to_color(grade),
        summary=_summary(grade, goal),
        macro_breakdown=MacroBreakdown(
            protein=round(protein_pct),
            carbs=round(carbs_pct),
            fat=round(fat_pct),
        ),
        feedback=feedback,
        positives=positives,
    )


def _summary(grade: str, goal: Goal) -> str:
    if grade.startswith("A"):
        if goal == Goal.BUILD_MUSCLE:
            return "High protein, balanced macros - perfect for muscle building!"
        if goal == Goal.LOSE_WEIGHT:
            return "High protein, good satiety - excellent for weight loss!"
        return "Well-balanced and nutritious meal!"
    if grade.startswith("B"):
        return "Good meal! A few tweaks could make it perfect."
    if grade.startswith("C"):
        return "Decent meal, but room for improvement."
    if grade.startswith("D"):
        return "Consider adjusting portions or ingredients."
    return "Let's work on improving this meal together!"
