"""Anthropic Messages API client used by the api planner mode."""

import json
import logging

import httpx

from ..common.errors import TicketGenerationError

logger = logging.getLogger("llemy.llm")


class AnthropicClient:
    """Generates todo documents with a single Messages API call."""

    API_VERSION = "2023-06-01"

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 8192,
        base_url: str = "https://api.anthropic.com",
        timeout: float = 300.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._api_key = api_key
        self._model = model
        self._max_tokens = max_tokens
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def generate_ticket(self, prompt: str) -> str:
        """
        Ask the model for a todo document.

        Args:
            prompt: Planning prompt built from the policy and plan document.

        Returns:
            The text of the first content block.

        Raises:
            TicketGenerationError: Missing key, non-200 status, or unexpected body.
        """
        if not self._api_key:
            raise TicketGenerationError("ANTHROPIC_API_KEY environment variable not set")

        try:
            response = await self._client.post(
                "/v1/messages",
                headers={
                    "x-api-key": self._api_key,
                    "anthropic-version": self.API_VERSION,
                    "content-type": "application/json",
                },
                json={
                    "model": self._model,
                    "max_tokens": self._max_tokens,
                    "messages": [{"role": "user", "content": prompt}],
                },
            )
        except httpx.HTTPError as e:
            raise TicketGenerationError(f"Claude API request failed: {e}") from e

        if response.status_code != 200:
            raise TicketGenerationError(f"Claude API error: {response.status_code} {response.text}")

        try:
            data = response.json()
        except json.JSONDecodeError as e:
            raise TicketGenerationError(f"Failed to parse Claude API response: {e}") from e

        content = data.get("content") if isinstance(data, dict) else None
        first = content[0] if isinstance(content, list) and content else None
        text = first.get("text") if isinstance(first, dict) else None
        if not isinstance(text, str) or not text:
            raise TicketGenerationError("Invalid Claude API response format")

        logger.debug(f"Claude returned {len(text)} characters")
        return text

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
