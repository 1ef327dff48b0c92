"""
LLM Provider Interface
Abstract base class for text-generation backends
"""
from abc import ABC, abstractmethod
from typing import Dict, List

from app.domain.models.generation import GenerationResult


class LLMProvider(ABC):
    """Abstract base class for text-generation backends"""

    @abstractmethod
    async def initialize(self, config: dict) -> None:
        """Initialize the provider with configuration"""
        pass

    @abstractmethod
    async def generate(
        self,
        standing_instructions: str,
        history: List[Dict[str, str]],
        trailing_user_content: str,
    ) -> GenerationResult:
        """
        Run one generation call.

        Args:
            standing_instructions: System instruction text
            history: Prior messages as {role, content}, oldest first
            trailing_user_content: Assembled context for this turn

        Returns:
            GenerationResult with text, or a typed error. Transport and
            backend failures are returned, not raised.
        """
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Release resources"""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name"""
        pass
