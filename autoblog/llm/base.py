"""Base class for text-generation backends."""

from abc import ABC, abstractmethod


class TextBackend(ABC):
    """
    A generative text service.
    Implementations raise BackendError when the service fails.
    """

    name: str = "backend"

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """
        Produce text for a prompt.

        Args:
            prompt: Natural-language instruction

        Returns:
            The model's answer, stripped of surrounding whitespace
        """
        pass
