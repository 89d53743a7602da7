import time
import asyncio
import logging
from dataclasses import dataclass
import httpx
import openai
from openai import AsyncOpenAI
from examiner.core.exceptions import AITimeoutError, TransportError
from examiner.services.openai_settings import AIClientConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are an expert thesis examiner. Respond with a single JSON object only."


@dataclass(frozen=True)
class AICompletion:
    text: str
    tokens_used: int | None = None
    # Seconds spent on the request itself, excluding time queued for a slot.
    elapsed_seconds: float = 0.0


class AIClient:
    """Single-attempt client for the evaluation model.

    No internal retries: one request per call, bounded by the configured
    deadline. Concurrent calls share a semaphore sized by ``max_concurrency``.
    """

    def __init__(self, config: AIClientConfig, client: AsyncOpenAI | None = None):
        self.config = config
        self._client = client
        self._semaphore = asyncio.Semaphore(config.max_concurrency)

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            try:
                self._client = AsyncOpenAI(
                    api_key=self.config.api_key or None,
                    base_url=self.config.base_url or None,
                    timeout=httpx.Timeout(
                        self.config.timeout_seconds,
                        connect=min(10.0, self.config.timeout_seconds),
                    ),
                    max_retries=0,
                )
            except openai.OpenAIError as e:
                raise TransportError(f"AI client is not configured: {e}") from e
        return self._client

    async def complete(self, prompt: str) -> AICompletion:
        client = self._get_client()
        timeout = self.config.timeout_seconds

        async with self._semaphore:
            logger.debug("Calling %s (%d prompt chars)", self.config.model, len(prompt))
            started = time.monotonic()
            try:
                completion = await asyncio.wait_for(
                    client.chat.completions.create(
                        model=self.config.model,
                        messages=[
                            {"role": "system", "content": SYSTEM_PROMPT},
                            {"role": "user", "content": prompt},
                        ],
                        max_tokens=self.config.max_tokens,
                    ),
                    timeout=timeout,
                )
            except (asyncio.TimeoutError, openai.APITimeoutError) as e:
                raise AITimeoutError(f"AI request timed out after {timeout:g} seconds") from e
            except openai.APIConnectionError as e:
                raise TransportError(f"AI endpoint unreachable: {e}") from e
            except openai.APIStatusError as e:
                raise TransportError(f"AI endpoint returned HTTP {e.status_code}: {e.message}") from e
            elapsed = time.monotonic() - started

        if not completion.choices:
            raise TransportError("AI endpoint returned no choices")

        text = completion.choices[0].message.content or ""
        usage = getattr(completion, "usage", None)
        tokens_used = usage.total_tokens if usage else None
        return AICompletion(text=text, tokens_used=tokens_used, elapsed_seconds=elapsed)

    async def call(self, prompt: str) -> str:
        completion = await self.complete(prompt)
        return completion.text
