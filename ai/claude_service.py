"""
AIService implementation backed by the Anthropic Claude API.

The system directive goes in the ``system`` parameter, the prompt as the
single user message.  Text blocks of the reply are concatenated; a reply
without text blocks yields ``None``.

Reads ANTHROPIC_API_KEY from the environment.

Retries transient errors (rate-limit, overloaded, connection, timeout)
with exponential backoff via tenacity.
"""

from __future__ import annotations

import logging
from typing import Optional

from anthropic import (
    Anthropic,
    APIConnectionError,
    APITimeoutError,
    RateLimitError,
    InternalServerError,
)
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from ai.service import AIService

logger = logging.getLogger(__name__)

_DEFAULT_MODEL = "claude-sonnet-4-5"
_MAX_TOKENS = 16384

# Retry configuration
_MAX_RETRIES = 4
_MIN_WAIT_SECONDS = 2
_MAX_WAIT_SECONDS = 60

# Transient exception types that should trigger a retry.
_RETRYABLE_EXCEPTIONS = (
    APIConnectionError,
    APITimeoutError,
    RateLimitError,
    InternalServerError,
)

_retry_decorator = retry(
    retry=retry_if_exception_type(_RETRYABLE_EXCEPTIONS),
    stop=stop_after_attempt(_MAX_RETRIES),
    wait=wait_exponential(multiplier=1, min=_MIN_WAIT_SECONDS, max=_MAX_WAIT_SECONDS),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)


class ClaudeService(AIService):
    """AIService backed by the Anthropic Claude API."""

    provider = "claude"

    def __init__(self, model: str = _DEFAULT_MODEL):
        self.model = model
        self._client = Anthropic()  # reads ANTHROPIC_API_KEY from env

    @_retry_decorator
    def generate(self, system_prompt: str, prompt: str) -> Optional[str]:
        message = self._client.messages.create(
            model=self.model,
            max_tokens=_MAX_TOKENS,
            system=system_prompt,
            messages=[{"role": "user", "content": prompt}],
        )
        texts = [
            block.text
            for block in (message.content or [])
            if getattr(block, "type", None) == "text"
        ]
        return "".join(texts) if texts else None
