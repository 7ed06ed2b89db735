"""
Process-wide configuration for the feedback pipeline.

Values come from the environment (``.env`` is loaded by the CLI entry
point):

  FEEDBACK_PROMPT_VARIANT:  "resumen" (default) or "informe"
  FEEDBACK_RESPONSE_MODE:   "json" (default) or "file"

Provider selection lives in ``ai.factory`` (AI_PROVIDER / AI_MODEL).
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from extractors.payload import DEFAULT_SHEET_NAMES
from prompts.feedback import (
    DEFAULT_PROMPT_VARIANT,
    USER_PROMPT_TEMPLATE,
    get_system_prompt,
)


class ResponseMode(str, Enum):
    JSON = "json"
    FILE = "file"


class FeedbackConfig(BaseModel):
    """Immutable settings injected into ``FeedbackPipeline``."""

    model_config = ConfigDict(frozen=True)

    system_prompt: str
    user_prompt_template: str = USER_PROMPT_TEMPLATE
    sheet_names: Tuple[str, ...] = DEFAULT_SHEET_NAMES
    response_mode: ResponseMode = ResponseMode.JSON

    @property
    def roster_sheet(self) -> Optional[str]:
        """The first configured sheet holds the student roster."""
        return self.sheet_names[0] if self.sheet_names else None


def load_config(
    prompt_variant: Optional[str] = None,
    response_mode: Optional[str] = None,
) -> FeedbackConfig:
    """
    Build a ``FeedbackConfig``; explicit arguments win over the environment.

    Raises ``ValueError`` for an unknown variant or mode.
    """
    variant = prompt_variant or os.getenv(
        "FEEDBACK_PROMPT_VARIANT", DEFAULT_PROMPT_VARIANT
    )
    mode = response_mode or os.getenv("FEEDBACK_RESPONSE_MODE", ResponseMode.JSON.value)

    return FeedbackConfig(
        system_prompt=get_system_prompt(variant),
        response_mode=ResponseMode(mode.lower().strip()),
    )
