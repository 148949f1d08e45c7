"""Shared test fixtures."""

import asyncio
import json
from dataclasses import dataclass, field

import pytest

from meal_interpreter.config import Settings
from meal_interpreter.containers import AppContainer
from meal_interpreter.domain.nutrition import NutritionRecord
from meal_interpreter.services.interpreter import LanguageModelClient, MealInterpreter
from meal_interpreter.services.vision import ImageDescriber, VisionClient

PNG_BASE64 = "iVBORw0KGgpyZXN0"

EGGS_AND_TOAST = {
    "items": [
        {
            "food": "eggs",
            "quantity": "2 large",
            "calories": 140,
            "protein": 12,
            "carbs": 1,
            "fat": 10,
        },
        {
            "food": "toast",
            "quantity": "1 slice",
            "calories": 80,
            "protein": 3,
            "carbs": 15,
            "fat": 1,
        },
    ],
    "totals": {"calories": 220, "protein": 15, "carbs": 16, "fat": 11},
}


def eggs_and_toast() -> NutritionRecord:
    return NutritionRecord.model_validate(EGGS_AND_TOAST)


@dataclass
class FakeLanguageModelClient(LanguageModelClient):
    """Fake model that replays canned replies and records prompts."""

    replies: list[str] = field(default_factory=lambda: [json.dumps(EGGS_AND_TOAST)])
    prompts: list[str] = field(default_factory=list)
    models: list[str] = field(default_factory=list)

    async def complete(self, *, model: str, prompt: str) -> str:
        self.prompts.append(prompt)
        self.models.append(model)
        if len(self.replies) > 1:
            return self.replies.pop(0)
        return self.replies[0]


@dataclass
class FailingLanguageModelClient(LanguageModelClient):
    """Fake model whose transport always fails."""

    error: Exception = field(default_factory=lambda: ConnectionError("refused"))
    calls: int = 0

    async def complete(self, *, model: str, prompt: str) -> str:
        self.calls += 1
        raise self.error


@dataclass
class SlowLanguageModelClient(LanguageModelClient):
    """Fake model that never answers in time."""

    delay_seconds: float = 5.0

    async def complete(self, *, model: str, prompt: str) -> str:
        await asyncio.sleep(self.delay_seconds)
        return json.dumps(EGGS_AND_TOAST)


@dataclass
class FakeVisionClient(VisionClient):
    """Fake vision model returning a fixed description."""

    description: str = "2 poached eggs, 1 slice brown bread"
    image_urls: list[str] = field(default_factory=list)

    async def describe(self, *, model: str, image_data_url: str, prompt: str) -> str:
        self.image_urls.append(image_data_url)
        return self.description


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key="openai-key")


@pytest.fixture
def language_model() -> FakeLanguageModelClient:
    return FakeLanguageModelClient()


@pytest.fixture
def vision_client() -> FakeVisionClient:
    return FakeVisionClient()


@pytest.fixture
def container(
    settings: Settings,
    language_model: FakeLanguageModelClient,
    vision_client: FakeVisionClient,
) -> AppContainer:
    meal_interpreter = MealInterpreter(
        client=language_model,
        model=settings.openai_model,
        timeout_seconds=settings.model_timeout_seconds,
    )
    image_describer = ImageDescriber(
        client=vision_client, model=settings.openai_vision_model
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        meal_interpreter=meal_interpreter,
        image_describer=image_describer,
        close_resources=close_resources,
    )
