"""
Unit tests for LLM Guardrails
Tests fallback replies for each generation failure kind
"""
import pytest
from app.domain.services.llm_guardrails import (
    LLMGuardrails,
    LLMGuardrailsConfig,
    get_guardrails
)
from app.domain.models.generation import GenerationError


class TestFallbackResponses:
    """Test fallback reply selection"""

    def test_unavailable(self):
        """Test transport failures get the connection apology"""
        guardrails = LLMGuardrails()
        response = guardrails.fallback_response(GenerationError.unavailable("Connection refused"))

        assert response == LLMGuardrails.UNAVAILABLE_RESPONSE
        assert "try again" in response.lower()
        # Raw transport detail is never shown
        assert "refused" not in response

    def test_backend_error_with_message(self):
        """Test the backend's short message is surfaced"""
        guardrails = LLMGuardrails()
        response = guardrails.fallback_response(GenerationError.backend_error("Overloaded"))

        assert response == "Sorry, I encountered an error: Overloaded. Please try again."

    def test_backend_error_without_message(self):
        """Test generic text when the backend gave no message"""
        guardrails = LLMGuardrails()
        response = guardrails.fallback_response(GenerationError.backend_error())

        assert response == LLMGuardrails.BACKEND_ERROR_RESPONSE

    def test_empty_response(self):
        """Test empty generations ask the RM to rephrase"""
        guardrails = LLMGuardrails()
        response = guardrails.fallback_response(GenerationError.empty_response())

        assert response == LLMGuardrails.EMPTY_RESPONSE

    def test_fallbacks_are_distinct(self):
        """Test each failure kind reads differently"""
        guardrails = LLMGuardrails()
        responses = {
            guardrails.fallback_response(GenerationError.unavailable()),
            guardrails.fallback_response(GenerationError.backend_error()),
            guardrails.fallback_response(GenerationError.empty_response()),
        }
        assert len(responses) == 3


class TestSanitizeMessage:
    """Test backend message cleanup"""

    def test_collapses_whitespace(self):
        guardrails = LLMGuardrails()
        assert guardrails.sanitize_message("rate   limit\n exceeded") == "rate limit exceeded"

    def test_strips_trailing_period(self):
        """Test no doubled period once formatted"""
        guardrails = LLMGuardrails()
        response = guardrails.fallback_response(GenerationError.backend_error("Overloaded."))

        assert ".." not in response

    def test_truncates_long_messages(self):
        """Test long messages are capped with an ellipsis"""
        guardrails = LLMGuardrails(LLMGuardrailsConfig(max_error_message_chars=40))
        message = guardrails.sanitize_message("x" * 200)

        assert len(message) == 40
        assert message.endswith("...")

    def test_blank_message_is_none(self):
        guardrails = LLMGuardrails()
        assert guardrails.sanitize_message("   ") is None
        assert guardrails.sanitize_message(None) is None


class TestGuardrailsConfig:
    """Test guardrails configuration"""

    def test_default_config(self):
        config = LLMGuardrailsConfig()
        assert config.max_error_message_chars == 120

    def test_config_bounds(self):
        """Test limits are validated"""
        with pytest.raises(ValueError):
            LLMGuardrailsConfig(max_error_message_chars=5)


class TestSingleton:
    """Test singleton pattern"""

    def test_get_guardrails_returns_same_instance(self):
        """Test singleton returns same instance"""
        g1 = get_guardrails()
        g2 = get_guardrails()
        assert g1 is g2

    def test_get_guardrails_with_config_creates_new(self):
        """Test passing config creates new instance"""
        g1 = get_guardrails()
        g2 = get_guardrails(LLMGuardrailsConfig(max_error_message_chars=60))
        assert g2.config.max_error_message_chars == 60
        assert g1 is not g2
