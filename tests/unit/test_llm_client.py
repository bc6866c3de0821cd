"""Tests for the narrative generator client.

All tests are deterministic and do not make real network calls.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from backend.app.config import ProviderConfig
from backend.app.llm.client import (
    MAX_NARRATIVE_CHARS,
    NarrativeGenerationError,
    OpenAINarrativeClient,
    get_narrative_client,
)
from backend.app.llm.prompts import build_user_prompt
from backend.app.models.plan import PlanRequest


def _completion(content: str | None) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


def _client_returning(response: object) -> tuple[OpenAINarrativeClient, AsyncMock]:
    openai_client = MagicMock()
    create = AsyncMock(return_value=response)
    openai_client.chat.completions.create = create
    return OpenAINarrativeClient(api_key="test-key", client=openai_client), create


def test_user_prompt_mentions_all_request_fields(plan_request: PlanRequest) -> None:
    prompt = build_user_prompt(plan_request)

    assert "American citizen" in prompt
    assert "Citizen status" in prompt
    assert "Toronto, Canada" in prompt
    assert "New York City, USA" in prompt
    assert "by car" in prompt
    assert "Required Documents" in prompt


@pytest.mark.asyncio
async def test_generate_returns_stripped_text(plan_request: PlanRequest) -> None:
    client, create = _client_returning(_completion("  Bring your passport.\n"))

    text = await client.generate(plan_request)

    assert text == "Bring your passport."
    kwargs = create.call_args.kwargs
    assert kwargs["model"] == "gpt-4.1-nano"
    assert kwargs["max_tokens"] == 1000
    assert kwargs["temperature"] == 0.7
    assert kwargs["messages"][0]["role"] == "system"
    assert kwargs["messages"][1]["content"] == build_user_prompt(plan_request)


@pytest.mark.asyncio
async def test_generate_empty_response_raises(plan_request: PlanRequest) -> None:
    client, _ = _client_returning(_completion("   "))

    with pytest.raises(NarrativeGenerationError):
        await client.generate(plan_request)


@pytest.mark.asyncio
async def test_generate_no_choices_raises(plan_request: PlanRequest) -> None:
    response = MagicMock()
    response.choices = []
    client, _ = _client_returning(response)

    with pytest.raises(NarrativeGenerationError):
        await client.generate(plan_request)


@pytest.mark.asyncio
async def test_generate_wraps_api_errors(plan_request: PlanRequest) -> None:
    openai_client = MagicMock()
    openai_client.chat.completions.create = AsyncMock(side_effect=RuntimeError("rate limited"))
    client = OpenAINarrativeClient(api_key="test-key", client=openai_client)

    with pytest.raises(NarrativeGenerationError, match="rate limited"):
        await client.generate(plan_request)


@pytest.mark.asyncio
async def test_generate_truncates_oversized_output(plan_request: PlanRequest) -> None:
    client, _ = _client_returning(_completion("a" * (MAX_NARRATIVE_CHARS + 500)))

    text = await client.generate(plan_request)

    assert text.endswith("[Truncated]")
    assert len(text) <= MAX_NARRATIVE_CHARS + len("\n\n[Truncated]")


def test_factory_without_key_returns_none() -> None:
    assert get_narrative_client(ProviderConfig()) is None


def test_factory_with_key_builds_openai_client() -> None:
    client = get_narrative_client(ProviderConfig(openai_api_key="sk-test", openai_model="m"))

    assert isinstance(client, OpenAINarrativeClient)
    assert client.model == "m"
