"""
Groq LLM Provider Implementation
Chat completions on Groq, mapped onto the generation result contract
"""
import os
import time
from typing import Dict, List, Optional

import groq
from groq import AsyncGroq

from app.domain.interfaces.llm_provider import LLMProvider
from app.domain.models.generation import GenerationError, GenerationResult


class GroqLLMProvider(LLMProvider):
    """
    Groq LLM provider

    Guidance replies are longer than voice turns, so the default token
    budget is much higher than a realtime agent would use.
    """

    def __init__(self):
        self._client: Optional[AsyncGroq] = None
        self._config: dict = {}
        self._model: str = "llama-3.3-70b-versatile"
        self._temperature: float = 0.4
        self._max_tokens: int = 2000
        self._timeout: float = 30.0

    async def initialize(self, config: dict) -> None:
        """Initialize Groq client with configuration"""
        self._config = config
        api_key = config.get("api_key") or os.getenv("GROQ_API_KEY")

        if not api_key:
            raise ValueError("Groq API key not found in config or environment")

        self._model = config.get("model", self._model)
        self._temperature = config.get("temperature", self._temperature)
        self._max_tokens = config.get("max_tokens", self._max_tokens)
        self._timeout = config.get("timeout", self._timeout)

        self._client = AsyncGroq(api_key=api_key, timeout=self._timeout, max_retries=0)

    async def generate(
        self,
        standing_instructions: str,
        history: List[Dict[str, str]],
        trailing_user_content: str,
    ) -> GenerationResult:
        if not self._client:
            raise RuntimeError("Groq client not initialized. Call initialize() first.")

        # System channel carries the standing instructions
        groq_messages = [{"role": "system", "content": standing_instructions}]
        groq_messages.extend(history)
        groq_messages.append({"role": "user", "content": trailing_user_content})

        start = time.perf_counter()
        try:
            completion = await self._client.chat.completions.create(
                model=self._model,
                messages=groq_messages,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except (groq.APIConnectionError, groq.APITimeoutError) as e:
            return GenerationResult.failure(
                GenerationError.unavailable(str(e)),
                latency_ms=(time.perf_counter() - start) * 1000,
            )
        except groq.APIStatusError as e:
            return GenerationResult.failure(
                GenerationError.backend_error(_status_message(e)),
                latency_ms=(time.perf_counter() - start) * 1000,
            )

        latency_ms = (time.perf_counter() - start) * 1000
        choices = getattr(completion, "choices", None) or []
        if not choices or choices[0].message is None:
            return GenerationResult.failure(
                GenerationError.backend_error("Response had no choices"), latency_ms=latency_ms
            )

        text = choices[0].message.content
        if not text or not text.strip():
            return GenerationResult.failure(GenerationError.empty_response(), latency_ms=latency_ms)

        return GenerationResult.success(text, latency_ms=latency_ms)

    async def cleanup(self) -> None:
        """Release resources"""
        if self._client:
            await self._client.close()
            self._client = None

    @property
    def name(self) -> str:
        """Provider name"""
        return "groq"


def _status_message(error: "groq.APIStatusError") -> Optional[str]:
    """Pull the short `error.message` out of a Groq error body"""
    body = getattr(error, "body", None)
    if isinstance(body, dict):
        inner = body.get("error", body)
        if isinstance(inner, dict) and inner.get("message"):
            return str(inner["message"])
    return None
