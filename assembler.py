"""
RequestAssembler: pairs the fixed system directive with the user message
that carries the canonical payload.

The payload is passed through verbatim; checking its content is left to
the generative service.
"""

from __future__ import annotations

from dto.generation import GenerationRequest
from prompts.feedback import USER_PROMPT_TEMPLATE, get_user_prompt


class RequestAssembler:
    def __init__(self, system_prompt: str, user_prompt_template: str = USER_PROMPT_TEMPLATE):
        self._system_prompt = system_prompt
        self._user_prompt_template = user_prompt_template

    def assemble(self, payload: str) -> GenerationRequest:
        return GenerationRequest(
            system_prompt=self._system_prompt,
            user_prompt=get_user_prompt(payload, self._user_prompt_template),
        )
