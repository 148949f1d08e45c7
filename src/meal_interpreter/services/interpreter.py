"""Meal interpretation service backed by a language model."""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Protocol

from meal_interpreter.domain.errors import (
    InterpretError,
    InvalidInput,
    ModelUnavailable,
)
from meal_interpreter.domain.nutrition import NutritionRecord
from meal_interpreter.domain.requests import NewMeal, meal_request
from meal_interpreter.services.extraction import extract_record, reconcile_totals
from meal_interpreter.services.prompts import build_prompt

_logger = logging.getLogger(__name__)


class LanguageModelClient(Protocol):
    """Interface for single-shot text completion."""

    async def complete(self, *, model: str, prompt: str) -> str:
        """Return the model's text reply to a prompt."""


@dataclass
class MealInterpreter:
    """Service that prompts the model and validates its nutrition records."""

    client: LanguageModelClient
    model: str
    timeout_seconds: float = 20.0
    retry_attempts: int = 0
    retry_delay_seconds: float = 0.5

    async def interpret(
        self, description: str, existing: NutritionRecord | None = None
    ) -> NutritionRecord:
        """Parse a new meal, or refine ``existing`` by the description."""
        cleaned = description.strip() if isinstance(description, str) else ""
        if not cleaned:
            raise InvalidInput("Meal description must not be empty")

        request = meal_request(cleaned, existing)
        mode = "new" if isinstance(request, NewMeal) else "refine"
        started = time.perf_counter()
        raw_text = await self._complete_with_retry(build_prompt(request), mode=mode)
        record = reconcile_totals(extract_record(raw_text), raw_text)
        _logger.info(
            "Meal interpreted: mode=%s model=%s items=%s elapsed=%.2fs",
            mode,
            self.model,
            len(record.items),
            time.perf_counter() - started,
        )
        return record

    async def _complete_with_retry(self, prompt: str, *, mode: str) -> str:
        """Call the model, retrying transport failures a bounded number of times."""
        attempt = 0
        while True:
            try:
                return await self._complete_once(prompt)
            except ModelUnavailable as exc:
                attempt += 1
                _logger.warning(
                    "Model call failed (mode=%s attempt %s/%s): %s",
                    mode,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)

    async def _complete_once(self, prompt: str) -> str:
        try:
            return await asyncio.wait_for(
                self.client.complete(model=self.model, prompt=prompt),
                timeout=self.timeout_seconds,
            )
        except TimeoutError as exc:
            raise ModelUnavailable(
                f"Model did not answer within {self.timeout_seconds:g}s"
            ) from exc
        except InterpretError:
            raise
        except Exception as exc:
            raise ModelUnavailable(f"Model request failed: {exc}") from exc
