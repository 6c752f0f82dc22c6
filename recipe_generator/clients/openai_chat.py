"""Chat completion client for recipe generation.

Sends one composed prompt to an OpenAI-compatible `/chat/completions`
endpoint and returns the first choice's text. No retries, no streaming.
"""

import asyncio
import json
from typing import Any, Optional

import aiohttp

from recipe_generator.prompts.prompts import SYSTEM_INSTRUCTION
from recipe_generator.utils.config import Config, config as default_config
from recipe_generator.utils.errors import (
    UpstreamHttpError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from recipe_generator.utils.logger import logger


class OpenAIChatClient:
    """Single-shot chat completion client.

    The API key is injected at construction and only ever placed in the
    Authorization header.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        max_tokens: int = 1500,
        temperature: float = 0.8,
        timeout_seconds: float = 30.0,
        base_url: str = "https://api.openai.com/v1",
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Bearer credential. May be empty; generate() then fails fast.
            model: Chat model id.
            max_tokens: Completion token ceiling.
            temperature: Sampling temperature.
            timeout_seconds: Total timeout for the round trip.
            base_url: API root, without trailing slash.
            session: Optional shared aiohttp session. Not closed by this client.
        """
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout_seconds = timeout_seconds
        self.base_url = base_url.rstrip("/")
        self._session = session

    @classmethod
    def from_config(cls, cfg: Optional[Config] = None, session: Optional[aiohttp.ClientSession] = None) -> "OpenAIChatClient":
        cfg = cfg or default_config
        return cls(
            api_key=cfg.OPENAI_API_KEY,
            model=cfg.OPENAI_MODEL,
            max_tokens=cfg.MAX_TOKENS,
            temperature=cfg.TEMPERATURE,
            timeout_seconds=cfg.REQUEST_TIMEOUT_SECONDS,
            base_url=cfg.OPENAI_BASE_URL,
            session=session,
        )

    def build_payload(self, prompt: str) -> dict[str, Any]:
        """Request body for the chat completion call."""
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_INSTRUCTION},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    async def generate(self, prompt: str) -> str:
        """Send the prompt and return the raw completion text.

        Raises:
            UpstreamUnavailableError: No API key configured, or endpoint unreachable.
            UpstreamHttpError: Non-success status or a body without choices[0].message.content.
            UpstreamTimeoutError: No answer within timeout_seconds.
        """
        if not self.api_key:
            raise UpstreamUnavailableError("OpenAI API key not configured")

        payload = self.build_payload(prompt)
        logger.info(f"Sending request to chat completion API (model={self.model})...")

        try:
            if self._session is not None:
                return await self._post(self._session, payload)
            async with aiohttp.ClientSession() as session:
                return await self._post(session, payload)
        except asyncio.TimeoutError as e:
            logger.error(f"Chat completion timed out after {self.timeout_seconds:g}s")
            raise UpstreamTimeoutError(self.timeout_seconds) from e
        except aiohttp.ClientError as e:
            logger.error(f"Chat completion request failed: {e}")
            raise UpstreamUnavailableError(f"Could not reach generation API: {e}") from e

    async def _post(self, session: aiohttp.ClientSession, payload: dict[str, Any]) -> str:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        async with session.post(
            f"{self.base_url}/chat/completions",
            json=payload,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
        ) as response:
            body = await response.text()
            if response.status >= 400:
                logger.error(f"Chat completion API error: {response.status} - {body}")
                raise UpstreamHttpError(response.status, body)

        try:
            content = json.loads(body)["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected chat completion response shape: {body[:500]}")
            raise UpstreamHttpError(
                response.status, body, message="Generation API returned an unexpected response"
            ) from e

        if not isinstance(content, str):
            raise UpstreamHttpError(
                response.status, body, message="Generation API returned no text content"
            )

        logger.info("Chat completion response received")
        return content
