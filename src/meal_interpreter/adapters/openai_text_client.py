"""OpenAI Responses API client for meal interpretation."""

from dataclasses import dataclass

import httpx
from openai import APIError, AsyncOpenAI

from meal_interpreter.domain.errors import ModelUnavailable
from meal_interpreter.services.interpreter import LanguageModelClient


@dataclass
class OpenAITextClient(LanguageModelClient):
    """Language model client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    store: bool = False

    @classmethod
    def create(
        cls, api_key: str, timeout_seconds: float, store: bool = False
    ) -> "OpenAITextClient":
        """Create an OpenAI client with a managed httpx session."""
        http_client = httpx.AsyncClient(timeout=timeout_seconds)
        return cls(
            client=AsyncOpenAI(
                api_key=api_key,
                http_client=http_client,
                max_retries=0,
            ),
            store=store,
        )

    async def complete(self, *, model: str, prompt: str) -> str:
        """Send one prompt and return the text of the reply."""
        try:
            response = await self.client.responses.create(
                model=model,
                input=prompt,
                store=self.store,
            )
        except APIError as exc:
            raise ModelUnavailable(f"OpenAI request failed: {exc}") from exc
        output_text = response.output_text
        if not output_text:
            raise ModelUnavailable("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
