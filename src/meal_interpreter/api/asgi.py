"""ASGI entrypoint for the meal interpreter API.

Importing this module builds the container from the environment, so
``OPENAI_API_KEY`` (or an ``.env`` file) must be present.
"""

from meal_interpreter.api.app import create_app
from meal_interpreter.containers import build_container

app = create_app(build_container())
