"""Meal photo to text description using a vision model."""

import asyncio
import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Protocol

from meal_interpreter.domain.errors import (
    InterpretError,
    InvalidInput,
    ModelUnavailable,
)

_DATA_URL_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,")

DESCRIBE_PROMPT = """Analyze this food image and list ONLY the food items with quantities in METRIC units.

Format as a simple list, like a person describing what they ate:
- Start directly with food items
- Use METRIC measurements ONLY: grams (g), milliliters (ml), pieces
- Include quantities (e.g., "2 poached eggs", "60ml hollandaise sauce", "170g chicken breast")
- Include cooking methods when visible (grilled, fried, poached, etc.)
- Be specific but concise

Example good output:
"2 poached eggs, 60ml hollandaise sauce, 2 hash browns, 60g grilled halloumi cheese, 250ml baked beans, small watercress salad, 4 slices brown bread, 10g butter"

DO NOT include:
- Introductory phrases like "Okay, here's..." or "Looks like..."
- Meal names or descriptions
- Analysis or commentary"""  # noqa: E501

_logger = logging.getLogger(__name__)


class VisionClient(Protocol):
    """Interface for describing an image with a vision model."""

    async def describe(self, *, model: str, image_data_url: str, prompt: str) -> str:
        """Return the model's text description of an image."""


@dataclass
class ImageDescriber:
    """Service that turns a meal photo into a meal description."""

    client: VisionClient
    model: str
    timeout_seconds: float = 30.0

    async def describe(self, image_data: str) -> str:
        """Describe the foods in a base64 image or image data URL."""
        data_url = _to_data_url(image_data)
        try:
            description = await asyncio.wait_for(
                self.client.describe(
                    model=self.model, image_data_url=data_url, prompt=DESCRIBE_PROMPT
                ),
                timeout=self.timeout_seconds,
            )
        except TimeoutError as exc:
            raise ModelUnavailable(
                f"Vision model did not answer within {self.timeout_seconds:g}s"
            ) from exc
        except InterpretError:
            raise
        except Exception as exc:
            raise ModelUnavailable(f"Vision request failed: {exc}") from exc
        cleaned = description.strip().strip('"').strip()
        if not cleaned:
            raise ModelUnavailable("Vision model returned an empty description")
        _logger.info("Image described: model=%s chars=%s", self.model, len(cleaned))
        return cleaned


def _to_data_url(image_data: str) -> str:
    """Normalize raw base64 or a data URL into a data URL with a real MIME type."""
    payload = _DATA_URL_PREFIX.sub("", image_data.strip()) if image_data else ""
    if not payload:
        raise InvalidInput("Image data is required")
    try:
        image_bytes = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidInput("Image data is not valid base64") from exc
    return f"data:{_detect_mime_type(image_bytes)};base64,{payload}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
