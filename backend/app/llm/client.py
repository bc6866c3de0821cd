"""Narrative generator client with OpenAI integration.

Security: the API key comes from ProviderConfig, never hardcoded.
When no key is configured no client is built and the plan aggregator
goes straight to its fallback narrative.
"""

import logging
from typing import Protocol

from openai import AsyncOpenAI

from backend.app.config import ProviderConfig
from backend.app.llm.prompts import SYSTEM_PROMPT, build_user_prompt
from backend.app.models.plan import PlanRequest

logger = logging.getLogger(__name__)

# Hard cap on stored narrative size
MAX_NARRATIVE_CHARS = 10000


class NarrativeGenerationError(Exception):
    """Narrative generator call failed or returned nothing usable."""

    pass


class NarrativeClient(Protocol):
    """Protocol for narrative generator implementations."""

    async def generate(self, request: PlanRequest) -> str:
        """Generate free-text travel advice for a plan request.

        Raises:
            NarrativeGenerationError: If no narrative could be produced
        """
        ...


class OpenAINarrativeClient:
    """OpenAI-compatible chat completion client."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4.1-nano",
        base_url: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        client: AsyncOpenAI | None = None,
    ):
        """Initialize narrative client.

        Args:
            api_key: API key for the completion endpoint
            model: Model name
            base_url: Optional OpenAI-compatible base URL
            max_tokens: Completion length bound
            temperature: Sampling temperature
            client: Optional preconstructed AsyncOpenAI (for testing)
        """
        self.client = client or AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def generate(self, request: PlanRequest) -> str:
        """Generate narrative using the chat completions API."""
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_user_prompt(request)},
                ],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as e:
            raise NarrativeGenerationError(f"{type(e).__name__}: {e}") from e

        text = (response.choices[0].message.content or "") if response.choices else ""

        # Validation: Check for empty response
        if not text.strip():
            raise NarrativeGenerationError("narrative generator returned an empty response")

        # Validation: Check for unreasonably long response
        if len(text) > MAX_NARRATIVE_CHARS:
            logger.warning(
                f"Narrative unexpectedly large ({len(text)} chars), "
                f"truncating to {MAX_NARRATIVE_CHARS}"
            )
            text = text[:MAX_NARRATIVE_CHARS] + "\n\n[Truncated]"

        return text.strip()


def get_narrative_client(config: ProviderConfig) -> NarrativeClient | None:
    """Factory for the narrative client.

    Returns:
        OpenAINarrativeClient if an API key is configured, None otherwise
    """
    if not config.narrative_configured:
        logger.warning("No narrative generator API key configured, narrative will fall back")
        return None

    logger.info("Using OpenAI-compatible client for narrative generation")
    return OpenAINarrativeClient(
        api_key=config.openai_api_key,
        model=config.openai_model,
        base_url=config.openai_base_url,
        max_tokens=config.narrative_max_tokens,
        temperature=config.narrative_temperature,
    )
