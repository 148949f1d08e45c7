"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from meal_interpreter.api.models import (
    BudgetRequest,
    DescribeImageRequest,
    GradeMealRequest,
    ParseMealRequest,
    ProgressRequest,
)
from meal_interpreter.app_logging import configure_logging
from meal_interpreter.containers import AppContainer
from meal_interpreter.domain.errors import (
    InterpretError,
    InvalidInput,
    MalformedModelOutput,
    ModelUnavailable,
)
from meal_interpreter.services.budget import (
    calculate_daily_budget,
    calculate_progress,
)
from meal_interpreter.services.scoring import score_meal

_ERROR_STATUS: dict[type[InterpretError], int] = {
    InvalidInput: 422,
    ModelUnavailable: 503,
    MalformedModelOutput: 502,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(InterpretError)
    async def interpret_error_handler(
        request: Request, exc: InterpretError
    ) -> JSONResponse:
        status_code = _ERROR_STATUS.get(type(exc), 500)
        if isinstance(exc, MalformedModelOutput):
            logger.warning(
                "Malformed model output on %s: %s snippet=%r",
                request.url.path,
                exc.message,
                exc.raw_snippet,
            )
        else:
            logger.warning("%s on %s: %s", exc.kind, request.url.path, exc.message)
        return JSONResponse(
            status_code=status_code,
            content={
                "success": False,
                "error": {"kind": exc.kind, "message": exc.message},
            },
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message = _describe_validation_errors(exc.errors())
        logger.warning("invalid_input on %s: %s", request.url.path, message)
        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "error": {"kind": InvalidInput.kind, "message": message},
            },
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/meals/parse")
    async def parse_meal(
        payload: ParseMealRequest, request: Request
    ) -> dict[str, object]:
        """Parse a meal description, or refine previously parsed data."""
        state_container: AppContainer = request.app.state.container
        record = await state_container.meal_interpreter.interpret(
            payload.meal_description, payload.existing_data
        )
        return {"success": True, "data": record.model_dump()}

    @app.post("/meals/describe-image")
    async def describe_image(
        payload: DescribeImageRequest, request: Request
    ) -> dict[str, object]:
        """Turn a meal photo into a description for /meals/parse."""
        state_container: AppContainer = request.app.state.container
        description = await state_container.image_describer.describe(
            payload.image_data
        )
        return {"success": True, "description": description}

    @app.post("/meals/grade")
    async def grade_meal(payload: GradeMealRequest) -> dict[str, object]:
        """Grade a parsed meal against the user's goal."""
        grade = score_meal(payload.meal, payload.profile.to_domain())
        return asdict(grade)

    @app.post("/budget")
    async def daily_budget(payload: BudgetRequest) -> dict[str, int]:
        """Compute the daily calorie and macro budget from biometrics."""
        return asdict(calculate_daily_budget(payload.to_domain()))

    @app.post("/progress")
    async def progress(payload: ProgressRequest) -> dict[str, object]:
        """Report consumption against a daily target."""
        return asdict(calculate_progress(payload.consumed, payload.target))

    return app


def _describe_validation_errors(errors: Sequence[Any]) -> str:
    """Condense request validation errors into one readable line."""
    parts = []
    for error in errors[:3]:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        location = ".".join(loc)
        parts.append(f"{location or 'body'}: {error.get('msg', 'invalid')}")
    if len(errors) > 3:
        parts.append(f"and {len(errors) - 3} more")
    return "; ".join(parts) or "Invalid request"
