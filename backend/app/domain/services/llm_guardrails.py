"""
LLM Guardrails Service
Turns generation failures into neutral, user-safe replies.

Raw backend detail never reaches the conversation log; only the short
message field of an error-shaped response is surfaced, and trimmed.
"""
import re
import logging
from typing import Optional
from pydantic import BaseModel, Field

from app.domain.models.generation import GenerationError, GenerationErrorKind

logger = logging.getLogger(__name__)


class LLMGuardrailsConfig(BaseModel):
    """Configuration for LLM guardrails"""
    max_error_message_chars: int = Field(default=120, ge=20, le=500, description="Max backend message length shown")


class LLMGuardrails:
    """Fallback replies for each generation failure kind. No retries."""

    UNAVAILABLE_RESPONSE = "Oops, I'm having some connection issues. Please try again in a moment."
    BACKEND_ERROR_RESPONSE = "Sorry, I ran into a problem on my side. Please try again."
    BACKEND_ERROR_WITH_MESSAGE = "Sorry, I encountered an error: {message}. Please try again."
    EMPTY_RESPONSE = "I'm having trouble processing that right now. Could you try asking in a different way?"

    def __init__(self, config: LLMGuardrailsConfig = None):
        self.config = config or LLMGuardrailsConfig()

    def fallback_response(self, error: GenerationError) -> str:
        """
        Args:
            error: Failure returned by the generation client

        Returns:
            Text to show in place of the assistant reply
        """
        logger.warning(f"Generation failed ({error.kind.value}), using fallback response")

        if error.kind == GenerationErrorKind.UNAVAILABLE:
            return self.UNAVAILABLE_RESPONSE

        if error.kind == GenerationErrorKind.BACKEND_ERROR:
            message = self.sanitize_message(error.message)
            if message:
                return self.BACKEND_ERROR_WITH_MESSAGE.format(message=message)
            return self.BACKEND_ERROR_RESPONSE

        return self.EMPTY_RESPONSE

    def sanitize_message(self, message: Optional[str]) -> Optional[str]:
        """Collapse whitespace, drop trailing punctuation and cap length"""
        if not message:
            return None

        cleaned = re.sub(r"\s+", " ", message).strip().rstrip(".")
        if not cleaned:
            return None

        limit = self.config.max_error_message_chars
        if len(cleaned) > limit:
            cleaned = cleaned[:limit - 3].rstrip() + "..."
        return cleaned


# Singleton instance for easy access
_guardrails_instance: Optional[LLMGuardrails] = None


def get_guardrails(config: LLMGuardrailsConfig = None) -> LLMGuardrails:
    """Get or create guardrails singleton"""
    global _guardrails_instance
    if _guardrails_instance is None or config is not None:
        _guardrails_instance = LLMGuardrails(config)
    return _guardrails_instance
