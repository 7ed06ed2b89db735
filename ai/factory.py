import os
from typing import Optional

from ai.service import AIService
from ai.openai_service import OpenAIService
from ai.gemini_service import GeminiService
from ai.claude_service import ClaudeService
from errors import GenerationFailedError


def _make_service(provider: str, model: Optional[str] = None) -> AIService:
    """Instantiate the appropriate AIService for a provider name."""
    provider = provider.lower().strip()
    kwargs = {"model": model} if model else {}
    if provider == "gemini":
        return GeminiService(**kwargs)
    if provider in ("claude", "anthropic"):
        return ClaudeService(**kwargs)
    if provider == "openai":
        return OpenAIService(**kwargs)
    raise ValueError(f"Unknown AI provider: {provider!r}")


def get_generation_service() -> AIService:
    """
    Return the AIService used for feedback generation.

    The provider is chosen via the AI_PROVIDER env var:
      - "openai"     → OpenAIService  (default)
      - "gemini"     → GeminiService
      - "claude"     → ClaudeService

    AI_MODEL, when set, overrides the provider's default model.

    Raises ``ValueError`` for an unknown provider and
    ``GenerationFailedError`` when the provider client cannot be created
    (e.g. a missing API key).
    """
    provider = os.getenv("AI_PROVIDER", "openai")
    model = os.getenv("AI_MODEL") or None
    try:
        return _make_service(provider, model)
    except ValueError:
        raise
    except Exception as exc:
        raise GenerationFailedError(
            f"Cannot create the {provider.strip()!r} client: {exc}"
        ) from exc
