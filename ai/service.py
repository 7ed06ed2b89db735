from abc import ABC, abstractmethod
from typing import Optional


class AIService(ABC):
    """
    Base class for text-generation services.

    A single capability: a system directive plus a user prompt in, the
    generated text out.  Implementations return ``None`` when the reply
    carries no content and raise on transport / auth / quota failures.
    """

    provider: str = ""
    model: str = ""

    @abstractmethod
    def generate(self, system_prompt: str, prompt: str) -> Optional[str]:
        """Send the directive and prompt to the LLM and return its response."""
        ...
