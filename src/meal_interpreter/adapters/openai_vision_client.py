"""OpenAI Responses API client for meal photos."""

from dataclasses import dataclass

from openai import APIError, AsyncOpenAI

from meal_interpreter.domain.errors import ModelUnavailable
from meal_interpreter.services.vision import VisionClient


@dataclass
class OpenAIVisionClient(VisionClient):
    """Vision client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    store: bool = False

    async def describe(self, *, model: str, image_data_url: str, prompt: str) -> str:
        """Send the prompt with one image and return the text reply."""
        try:
            response = await self.client.responses.create(
                model=model,
                input=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "input_text", "text": prompt},
                            {"type": "input_image", "image_url": image_data_url},
                        ],
                    }
                ],
                store=self.store,
            )
        except APIError as exc:
            raise ModelUnavailable(f"OpenAI vision request failed: {exc}") from exc
        output_text = response.output_text
        if not output_text:
            raise ModelUnavailable("OpenAI returned an empty response")
        return output_text
