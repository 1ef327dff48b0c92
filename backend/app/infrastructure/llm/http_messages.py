"""
HTTP Messages Provider
Text generation over a messages-style HTTP API.

Request:  {model, max_tokens, system, messages: [{role, content}]}
Response: {content: [{text}]} or {error: {message}}
"""
import os
import time
import logging
from typing import Any, Dict, List, Optional

import httpx

from app.domain.interfaces.llm_provider import LLMProvider
from app.domain.models.generation import GenerationError, GenerationResult

logger = logging.getLogger(__name__)


class HttpMessagesProvider(LLMProvider):
    """Generation backend reached with a single POST per turn"""

    DEFAULT_URL = "https://api.anthropic.com/v1/messages"

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client
        self._owns_client = client is None
        self._url: str = self.DEFAULT_URL
        self._model: str = "claude-sonnet-4-20250514"
        self._max_tokens: int = 2000
        self._timeout: float = 30.0
        self._headers: Dict[str, str] = {}

    async def initialize(self, config: dict) -> None:
        """Configure endpoint, model and auth headers"""
        self._url = config.get("url") or self.DEFAULT_URL
        self._model = config.get("model", self._model)
        self._max_tokens = config.get("max_tokens", self._max_tokens)
        self._timeout = config.get("timeout", self._timeout)

        self._headers = {"content-type": "application/json"}
        api_key = config.get("api_key") or os.getenv("LLM_API_KEY")
        if api_key:
            self._headers["x-api-key"] = api_key
        if config.get("api_version"):
            self._headers["anthropic-version"] = config["api_version"]

        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True

    def build_request(
        self,
        standing_instructions: str,
        history: List[Dict[str, str]],
        trailing_user_content: str,
    ) -> Dict[str, Any]:
        """Request body for one turn"""
        return {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "system": standing_instructions,
            "messages": [*history, {"role": "user", "content": trailing_user_content}],
        }

    async def generate(
        self,
        standing_instructions: str,
        history: List[Dict[str, str]],
        trailing_user_content: str,
    ) -> GenerationResult:
        if self._client is None:
            raise RuntimeError("HTTP client not initialized. Call initialize() first.")

        body = self.build_request(standing_instructions, history, trailing_user_content)
        start = time.perf_counter()

        try:
            response = await self._client.post(self._url, json=body, headers=self._headers)
        except httpx.TransportError as e:
            logger.error(f"Generation backend unreachable: {e}")
            return GenerationResult.failure(
                GenerationError.unavailable(str(e)),
                latency_ms=(time.perf_counter() - start) * 1000,
            )

        latency_ms = (time.perf_counter() - start) * 1000
        try:
            data = response.json()
        except ValueError:
            logger.error(f"Generation backend returned non-JSON body (status={response.status_code})")
            return GenerationResult.failure(GenerationError.backend_error(), latency_ms=latency_ms)

        return parse_messages_response(data, latency_ms=latency_ms)

    async def cleanup(self) -> None:
        """Release resources"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    @property
    def name(self) -> str:
        return "http_messages"


def parse_messages_response(data: Any, latency_ms: Optional[float] = None) -> GenerationResult:
    """
    Map a decoded response body onto a GenerationResult.

    Text comes from the first content block; an `error` object becomes a
    backend error carrying its message; anything else is malformed.
    """
    if not isinstance(data, dict):
        return GenerationResult.failure(GenerationError.backend_error(), latency_ms=latency_ms)

    content = data.get("content")
    if isinstance(content, list):
        if not content:
            return GenerationResult.failure(GenerationError.empty_response(), latency_ms=latency_ms)
        first = content[0]
        text = first.get("text") if isinstance(first, dict) else None
        if isinstance(text, str) and text.strip():
            return GenerationResult.success(text, latency_ms=latency_ms)
        if isinstance(first, dict) and (text is None or isinstance(text, str)):
            return GenerationResult.failure(GenerationError.empty_response(), latency_ms=latency_ms)

    error = data.get("error")
    if error is not None:
        message = error.get("message") if isinstance(error, dict) else None
        logger.warning(f"Generation backend returned an error: {message}")
        return GenerationResult.failure(
            GenerationError.backend_error(message if isinstance(message, str) else None),
            latency_ms=latency_ms,
        )

    return GenerationResult.failure(GenerationError.backend_error(), latency_ms=latency_ms)
