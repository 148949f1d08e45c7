"""Turn raw model text into a validated nutrition record."""

import json
import logging
import re

from pydantic import ValidationError

from meal_interpreter.domain.errors import MalformedModelOutput
from meal_interpreter.domain.nutrition import NutritionRecord

_FENCE_PATTERN = re.compile(r"```(?:json|JSON)?[ \t]*\n?")
_TOTALS_TOLERANCE = 1.0

_logger = logging.getLogger(__name__)


def extract_record(raw_text: str) -> NutritionRecord:
    """Locate, parse and validate the JSON record inside a model reply."""
    payload = _locate_json_object(raw_text)
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise MalformedModelOutput(
            f"Model output is not valid JSON: {exc}", raw_text
        ) from exc
    if not isinstance(data, dict):
        raise MalformedModelOutput("Model output is not a JSON object", raw_text)
    try:
        return NutritionRecord.model_validate(data)
    except ValidationError as exc:
        raise MalformedModelOutput(
            f"Model output is not a nutrition record: {_summarize(exc)}", raw_text
        ) from exc


def reconcile_totals(record: NutritionRecord, raw_text: str = "") -> NutritionRecord:
    """Replace totals with the sum of the items."""
    try:
        reconciled = record.with_reconciled_totals()
    except ValidationError as exc:
        raise MalformedModelOutput(
            f"Item macros do not add up to valid totals: {_summarize(exc)}", raw_text
        ) from exc
    if not record.totals.is_close(reconciled.totals, tolerance=_TOTALS_TOLERANCE):
        _logger.warning(
            "Model totals drifted from item sum: reported=%s computed=%s",
            record.totals.calories,
            reconciled.totals.calories,
        )
    return reconciled


def _locate_json_object(raw_text: str) -> str:
    """Strip code fences and cut the text down to the outermost braces."""
    cleaned = _FENCE_PATTERN.sub("", raw_text).strip()
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end < start:
        raise MalformedModelOutput("No JSON object found in model output", raw_text)
    return cleaned[start : end + 1]


def _summarize(exc: ValidationError) -> str:
    errors = exc.errors()
    parts = [
        f"{'.'.join(str(loc) for loc in error['loc']) or 'record'}: {error['msg']}"
        for error in errors[:3]
    ]
    if len(errors) > 3:
        parts.append(f"and {len(errors) - 3} more")
    return "; ".join(parts)
