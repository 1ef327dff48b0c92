"""
Provider Validation Module
Validates provider configuration on startup
"""
import os
import logging
from typing import List, Optional, Tuple
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of a configuration validation check."""
    provider: str
    setting: str
    is_valid: bool
    message: str


class ProviderValidator:
    """
    Validates provider configuration at startup.

    Only the active LLM provider's key is required; the reminder store
    is checked for the settings its backend needs.
    """

    LLM_ENV_VARS = {
        "http_messages": ("LLM_API_KEY", "HTTP messages LLM provider"),
        "groq": ("GROQ_API_KEY", "Groq LLM provider"),
    }

    def __init__(self, llm_provider: str, reminder_store: str, strict: bool = False):
        """
        Args:
            llm_provider: Active LLM provider name
            reminder_store: Reminder store backend name
            strict: If True, treat warnings as errors
        """
        self.llm_provider = llm_provider
        self.reminder_store = reminder_store
        self.strict = strict
        self.results: List[ValidationResult] = []

    def validate_all(self) -> Tuple[bool, List[ValidationResult]]:
        """
        Validate provider configuration.

        Returns:
            Tuple of (all_valid, list of results)
        """
        self.results = []

        if self.llm_provider not in self.LLM_ENV_VARS:
            self._add_error("llm", "provider", f"Unknown LLM provider '{self.llm_provider}'")
        else:
            env_var, description = self.LLM_ENV_VARS[self.llm_provider]
            if os.getenv(env_var):
                self._add_success("llm", env_var, f"{description} configured")
            else:
                self._add_error("llm", env_var, f"{description} requires {env_var} to be set")

        if self.reminder_store == "redis":
            if os.getenv("REDIS_URL"):
                self._add_success("reminders", "REDIS_URL", "Redis reminder store configured")
            else:
                self._add_warning("reminders", "REDIS_URL", "REDIS_URL not set, using default localhost URL")
        elif self.reminder_store == "memory":
            self._add_warning("reminders", "REMINDER_STORE", "Reminders are kept in memory and lost on restart")

        errors = [r for r in self.results if not r.is_valid]
        return len(errors) == 0, self.results

    def _add_success(self, provider: str, setting: str, message: str):
        self.results.append(ValidationResult(provider=provider, setting=setting, is_valid=True, message=message))

    def _add_error(self, provider: str, setting: str, message: str):
        self.results.append(ValidationResult(provider=provider, setting=setting, is_valid=False, message=message))

    def _add_warning(self, provider: str, setting: str, message: str):
        self.results.append(ValidationResult(
            provider=provider,
            setting=setting,
            is_valid=not self.strict,  # Warnings become errors in strict mode
            message=f"WARNING: {message}"
        ))

    def log_results(self):
        """Log all validation results."""
        for r in self.results:
            if not r.is_valid:
                logger.error(f"  ✗ [{r.provider}] {r.message}")
            elif "WARNING" in r.message:
                logger.warning(f"  ⚠ [{r.provider}] {r.message}")
            else:
                logger.info(f"  ✓ [{r.provider}] {r.message}")

    def get_error_summary(self) -> Optional[str]:
        """Get summary of errors for exception message."""
        errors = [r for r in self.results if not r.is_valid]
        if not errors:
            return None

        lines = ["Provider configuration errors:"]
        for r in errors:
            lines.append(f"  - {r.setting}: {r.message}")
        return "\n".join(lines)


def validate_providers_on_startup(llm_provider: str, reminder_store: str, strict: bool = False) -> None:
    """
    Validate providers at startup.

    Raises:
        RuntimeError: If required configuration is missing
    """
    validator = ProviderValidator(llm_provider, reminder_store, strict=strict)
    all_valid, _ = validator.validate_all()
    validator.log_results()

    if not all_valid:
        raise RuntimeError(validator.get_error_summary())

    logger.info("All provider configurations validated successfully")
