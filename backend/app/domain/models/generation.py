"""
Generation Domain Models
Typed result of a single text-generation call
"""
from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum


class GenerationErrorKind(str, Enum):
    """Failure modes of the generation backend"""
    UNAVAILABLE = "unavailable"        # Transport failure or timeout
    BACKEND_ERROR = "backend_error"    # Error-shaped or malformed body
    EMPTY_RESPONSE = "empty_response"  # Well-formed but no text


class GenerationError(BaseModel):
    """A generation failure. `message` is the backend's short message, if any."""
    kind: GenerationErrorKind
    message: Optional[str] = None

    @classmethod
    def unavailable(cls, message: Optional[str] = None) -> "GenerationError":
        return cls(kind=GenerationErrorKind.UNAVAILABLE, message=message)

    @classmethod
    def backend_error(cls, message: Optional[str] = None) -> "GenerationError":
        return cls(kind=GenerationErrorKind.BACKEND_ERROR, message=message)

    @classmethod
    def empty_response(cls) -> "GenerationError":
        return cls(kind=GenerationErrorKind.EMPTY_RESPONSE)


class GenerationResult(BaseModel):
    """Either generated text or a typed error, never both"""
    text: Optional[str] = None
    error: Optional[GenerationError] = None
    latency_ms: Optional[float] = Field(None, ge=0)

    @property
    def ok(self) -> bool:
        return self.error is None and self.text is not None

    @classmethod
    def success(cls, text: str, latency_ms: Optional[float] = None) -> "GenerationResult":
        return cls(text=text, latency_ms=latency_ms)

    @classmethod
    def failure(cls, error: GenerationError, latency_ms: Optional[float] = None) -> "GenerationResult":
        return cls(error=error, latency_ms=latency_ms)
