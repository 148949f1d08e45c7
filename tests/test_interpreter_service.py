"""Tests for the meal interpreter service."""

import asyncio
import json

import pytest

from meal_interpreter.domain.errors import (
    InvalidInput,
    MalformedModelOutput,
    ModelUnavailable,
)
from meal_interpreter.domain.nutrition import NutritionRecord
from meal_interpreter.services.interpreter import MealInterpreter
from tests.conftest import (
    EGGS_AND_TOAST,
    FailingLanguageModelClient,
    FakeLanguageModelClient,
    SlowLanguageModelClient,
    eggs_and_toast,
)

SINGLE_MUFFIN = {
    "items": [
        {
            "food": "blueberry muffin",
            "quantity": "1 medium",
            "calories": 200,
            "protein": 4,
            "carbs": 30,
            "fat": 8,
        }
    ],
    "totals": {"calories": 200, "protein": 4, "carbs": 30, "fat": 8},
}


def _interpreter(client, **kwargs) -> MealInterpreter:  # type: ignore[no-untyped-def]
    return MealInterpreter(client=client, model="gpt-test", **kwargs)


def test_new_meal_returns_items_and_consistent_totals() -> None:
    client = FakeLanguageModelClient()

    record = asyncio.run(_interpreter(client).interpret("  2 eggs and toast  "))

    assert len(record.items) == 2
    assert record.totals.is_close(record.items_sum(), tolerance=1e-9)
    assert client.models == ["gpt-test"]
    assert '"2 eggs and toast"' in client.prompts[0]
    assert "Current meal" not in client.prompts[0]


@pytest.mark.parametrize("description", ["", "   ", "\n\t"])
def test_blank_description_is_rejected_without_model_call(description: str) -> None:
    client = FakeLanguageModelClient()

    with pytest.raises(InvalidInput):
        asyncio.run(_interpreter(client).interpret(description))

    assert client.prompts == []


def test_refine_double_scales_every_field() -> None:
    prior = NutritionRecord.model_validate(SINGLE_MUFFIN)
    doubled = {
        "items": [
            {
                "food": "blueberry muffin",
                "quantity": "2 medium",
                "calories": 400,
                "protein": 8,
                "carbs": 60,
                "fat": 16,
            }
        ],
        "totals": {"calories": 200, "protein": 4, "carbs": 30, "fat": 8},
    }
    client = FakeLanguageModelClient(replies=[json.dumps(doubled)])

    record = asyncio.run(_interpreter(client).interpret("double", prior))

    assert record.items[0].macros.calories == pytest.approx(400)
    assert record.totals.calories == pytest.approx(400)
    assert record.totals.protein == pytest.approx(8)
    assert record.totals.carbs == pytest.approx(60)
    assert record.totals.fat == pytest.approx(16)
    assert "Current meal" in client.prompts[0]
    assert json.dumps(prior.model_dump()) in client.prompts[0]


def test_refine_remove_keeps_only_remaining_item() -> None:
    prior = eggs_and_toast()
    only_eggs = {
        "items": [EGGS_AND_TOAST["items"][0]],
        "totals": EGGS_AND_TOAST["totals"],
    }
    client = FakeLanguageModelClient(replies=[json.dumps(only_eggs)])

    record = asyncio.run(_interpreter(client).interpret("remove the toast", prior))

    assert [item.food for item in record.items] == ["eggs"]
    assert record.totals == prior.items[0].macros
    assert len(prior.items) == 2


def test_prose_reply_raises_malformed_output() -> None:
    client = FakeLanguageModelClient(
        replies=["I'm sorry, but I can't help estimate that meal."]
    )

    with pytest.raises(MalformedModelOutput):
        asyncio.run(_interpreter(client).interpret("a mystery casserole"))


def test_fenced_reply_is_parsed() -> None:
    fenced = "```json\n" + json.dumps(EGGS_AND_TOAST) + "\n```"
    client = FakeLanguageModelClient(replies=[fenced])

    record = asyncio.run(_interpreter(client).interpret("2 eggs and toast"))

    assert record.totals.calories == pytest.approx(220)


def test_transport_failure_raises_model_unavailable() -> None:
    client = FailingLanguageModelClient()

    with pytest.raises(ModelUnavailable) as exc_info:
        asyncio.run(_interpreter(client).interpret("2 eggs and toast"))

    assert isinstance(exc_info.value.__cause__, ConnectionError)
    assert client.calls == 1


def test_timeout_raises_model_unavailable() -> None:
    client = SlowLanguageModelClient(delay_seconds=5.0)

    with pytest.raises(ModelUnavailable, match="did not answer"):
        asyncio.run(_interpreter(client, timeout_seconds=0.01).interpret("toast"))


def test_transport_failure_retries_when_configured() -> None:
    client = FailingLanguageModelClient()
    interpreter = _interpreter(client, retry_attempts=2, retry_delay_seconds=0)

    with pytest.raises(ModelUnavailable):
        asyncio.run(interpreter.interpret("toast"))

    assert client.calls == 3


def test_malformed_output_is_not_retried() -> None:
    client = FakeLanguageModelClient(replies=["not json", json.dumps(EGGS_AND_TOAST)])
    interpreter = _interpreter(client, retry_attempts=2, retry_delay_seconds=0)

    with pytest.raises(MalformedModelOutput):
        asyncio.run(interpreter.interpret("toast"))

    assert len(client.prompts) == 1


def test_model_unavailable_from_client_passes_through() -> None:
    error = ModelUnavailable("rate limited")
    client = FailingLanguageModelClient(error=error)

    with pytest.raises(ModelUnavailable) as exc_info:
        asyncio.run(_interpreter(client).interpret("toast"))

    assert exc_info.value is error


def test_overflowing_item_sum_raises_malformed_output() -> None:
    huge = {**EGGS_AND_TOAST["items"][0], "calories": 1e308}
    reply = json.dumps({"items": [huge, huge], "totals": EGGS_AND_TOAST["totals"]})
    client = FakeLanguageModelClient(replies=[reply])

    with pytest.raises(MalformedModelOutput):
        asyncio.run(_interpreter(client).interpret("two enormous omelettes"))


def test_cancellation_propagates_without_a_record() -> None:
    interpreter = _interpreter(SlowLanguageModelClient(delay_seconds=5.0))

    async def run_and_cancel() -> asyncio.Task:
        task = asyncio.create_task(interpreter.interpret("2 eggs and toast"))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        return task

    task = asyncio.run(run_and_cancel())

    assert task.cancelled()
