from __future__ import annotations

import logging
from typing import Protocol

from groq import AsyncGroq

from ..pipeline.errors import MissingConfigError
from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    async def generate(
        self,
        prompt: str,
        *,
        max_tokens: int = ...,
        temperature: float = ...,
    ) -> str: ...


class GroqTextGenerator:
    """
    Prompt-in, text-out wrapper around the Groq chat completions API.

    Pipeline stages only ever need ``generate(prompt) -> str``, so anything
    exposing that coroutine (a fake in tests, another vendor) can be passed
    in its place.
    """

    def __init__(
        self,
        config: LLMConfig = DEFAULT_LLM_CONFIG,
        client: AsyncGroq | None = None,
    ) -> None:
        self.config = config
        self._client = client

    @property
    def is_configured(self) -> bool:
        return self.config.enabled and bool(self.config.api_key)

    def _get_client(self) -> AsyncGroq:
        if not self.is_configured:
            raise MissingConfigError("GROQ_API_KEY")
        if self._client is None:
            self._client = AsyncGroq(api_key=self.config.api_key, timeout=self.config.timeout)
        return self._client

    async def generate(
        self,
        prompt: str,
        *,
        max_tokens: int = 300,
        temperature: float = 0.3,
    ) -> str:
        client = self._get_client()
        response = await client.chat.completions.create(
            model=self.config.model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
            temperature=temperature,
        )
        content = (response.choices[0].message.content or "").strip()
        logger.debug("Groq generation returned %d chars", len(content))
        return content
