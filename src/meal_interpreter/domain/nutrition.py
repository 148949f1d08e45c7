"""Nutrition domain models."""

import math
from collections.abc import Iterable
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    field_validator,
    model_serializer,
    model_validator,
)

MACRO_FIELDS = ("calories", "protein", "carbs", "fat")


class Macros(BaseModel):
    """Calories (kcal) plus protein, carbs and fat in grams."""

    model_config = ConfigDict(frozen=True)

    calories: float = Field(ge=0.0, allow_inf_nan=False)
    protein: float = Field(ge=0.0, allow_inf_nan=False)
    carbs: float = Field(ge=0.0, allow_inf_nan=False)
    fat: float = Field(ge=0.0, allow_inf_nan=False)

    @field_validator(*MACRO_FIELDS, mode="before")
    @classmethod
    def _reject_booleans(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("must be a number, not a boolean")
        return value

    @classmethod
    def zero(cls) -> "Macros":
        """Return an all-zero macro profile."""
        return cls(calories=0.0, protein=0.0, carbs=0.0, fat=0.0)

    @classmethod
    def sum_of(cls, values: Iterable["Macros"]) -> "Macros":
        """Element-wise sum of macro profiles."""
        total = cls.zero()
        for value in values:
            total = total + value
        return total

    def __add__(self, other: "Macros") -> "Macros":
        return Macros(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
        )

    def is_close(self, other: "Macros", tolerance: float = 0.5) -> bool:
        """Compare two profiles field by field within an absolute tolerance."""
        return all(
            math.isclose(getattr(self, name), getattr(other, name), abs_tol=tolerance)
            for name in MACRO_FIELDS
        )


class FoodItem(BaseModel):
    """Single food in a meal with its own macros.

    On the wire the macro fields sit next to ``food`` and ``quantity``; a
    nested ``macros`` object is accepted as well.
    """

    model_config = ConfigDict(frozen=True)

    food: str = Field(min_length=1)
    quantity: str = ""
    macros: Macros

    @model_validator(mode="before")
    @classmethod
    def _lift_flat_macros(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "macros" in data:
            return data
        lifted = {key: value for key, value in data.items() if key not in MACRO_FIELDS}
        lifted["macros"] = {
            name: data[name] for name in MACRO_FIELDS if name in data
        }
        return lifted

    @field_validator("food", mode="before")
    @classmethod
    def _strip_food(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity_as_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, int | float) and not isinstance(value, bool):
            return f"{value:g}"
        return value

    @model_serializer(mode="wrap")
    def _flatten_macros(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        macros = data.pop("macros", {})
        return {**data, **macros}


class NutritionRecord(BaseModel):
    """Itemized meal breakdown plus aggregate totals."""

    model_config = ConfigDict(frozen=True)

    items: list[FoodItem] = Field(min_length=1)
    totals: Macros

    def items_sum(self) -> Macros:
        """Sum of all item macros."""
        return Macros.sum_of(item.macros for item in self.items)

    def with_reconciled_totals(self) -> "NutritionRecord":
        """Return a copy whose totals equal the sum of the items."""
        return NutritionRecord(items=list(self.items), totals=self.items_sum())
