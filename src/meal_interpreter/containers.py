"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from meal_interpreter.adapters.openai_text_client import OpenAITextClient
from meal_interpreter.adapters.openai_vision_client import OpenAIVisionClient
from meal_interpreter.config import Settings
from meal_interpreter.services.interpreter import MealInterpreter
from meal_interpreter.services.vision import ImageDescriber


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    meal_interpreter: MealInterpreter
    image_describer: ImageDescriber
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    openai_client = OpenAITextClient.create(
        api_key=resolved_settings.openai_api_key,
        timeout_seconds=max(
            resolved_settings.model_timeout_seconds,
            resolved_settings.vision_timeout_seconds,
        ),
        store=resolved_settings.openai_store,
    )
    meal_interpreter = MealInterpreter(
        client=openai_client,
        model=resolved_settings.openai_model,
        timeout_seconds=resolved_settings.model_timeout_seconds,
        retry_attempts=resolved_settings.model_retry_attempts,
        retry_delay_seconds=resolved_settings.model_retry_delay_seconds,
    )
    image_describer = ImageDescriber(
        client=OpenAIVisionClient(
            client=openai_client.client, store=resolved_settings.openai_store
        ),
        model=resolved_settings.openai_vision_model,
        timeout_seconds=resolved_settings.vision_timeout_seconds,
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        meal_interpreter=meal_interpreter,
        image_describer=image_describer,
        close_resources=close_resources,
    )
