"""Instruction text sent to the language model."""

import json

from meal_interpreter.domain.requests import MealRequest, NewMeal, RefineMeal

_RECORD_SHAPE = """{
  "items": [
    {
      "food": "food name",
      "quantity": "amount",
      "calories": number,
      "protein": number,
      "carbs": number,
      "fat": number
    }
  ],
  "totals": {
    "calories": number,
    "protein": number,
    "carbs": number,
    "fat": number
  }
}"""

_REFINEMENT_RULES = """Apply the instruction as a change to the current meal.
Do not look for a new meal.
- A bare count or multiplier ("3 of those", "I had 3") multiplies every item's
  quantity and macros by that number.
- "half" or "50%" multiplies every item by 0.5. "double" multiplies every item by 2.
- "add X" keeps every current item and appends a new item for X, estimated on its own.
- "remove X" or "without X" deletes the matching item and leaves the others untouched.
- Items the instruction does not mention keep their current values.
- "totals" must equal the sum of all items after the change."""


def build_prompt(request: MealRequest) -> str:
    """Return the model instruction for a request variant."""
    match request:
        case NewMeal(description=description):
            return _new_meal_prompt(description)
        case RefineMeal(description=description, prior=prior):
            return _refine_meal_prompt(description, json.dumps(prior.model_dump()))
    raise TypeError(f"Unsupported meal request: {request!r}")


def _new_meal_prompt(description: str) -> str:
    return (
        "You are a nutrition expert. Parse the following meal description and "
        "return ONLY a valid JSON object with nutritional information. "
        "Do not include any markdown formatting or additional text.\n\n"
        f"Meal: {json.dumps(description)}\n\n"
        "Return the response in this exact JSON structure:\n"
        f"{_RECORD_SHAPE}\n\n"
        "Be as accurate as possible with standard serving sizes. "
        "Calories are kcal; protein, carbs and fat are grams. "
        "Return ONLY the JSON, no other text."
    )


def _refine_meal_prompt(instruction: str, prior_json: str) -> str:
    return (
        "You are a nutrition expert. The user already logged the meal below. "
        "Treat it as correct and return it updated by the user's instruction.\n\n"
        f"Current meal:\n{prior_json}\n\n"
        f"Instruction: {json.dumps(instruction)}\n\n"
        f"{_REFINEMENT_RULES}\n\n"
        "Return ONLY a valid JSON object in this exact structure, "
        "with no markdown formatting or additional text:\n"
        f"{_RECORD_SHAPE}"
    )
