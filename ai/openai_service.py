import logging
from typing import Optional

from openai import OpenAI, APIConnectionError, APITimeoutError, RateLimitError, InternalServerError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from ai.service import AIService

logger = logging.getLogger(__name__)

_DEFAULT_MODEL = "gpt-4.1"
_MAX_COMPLETION_TOKENS = 12000

_MAX_RETRIES = 4
_MIN_WAIT_SECONDS = 2
_MAX_WAIT_SECONDS = 60

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


class OpenAIService(AIService):
    """AIService backed by the OpenAI chat completions API."""

    provider = "openai"

    def __init__(self, model: str = _DEFAULT_MODEL):
        self.model = model
        self._client = OpenAI()  # reads OPENAI_API_KEY from env

    @_retry_decorator
    def generate(self, system_prompt: str, prompt: str) -> Optional[str]:
        response = self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            max_completion_tokens=_MAX_COMPLETION_TOKENS,
        )
        if not response.choices:
            return None
        return response.choices[0].message.content
