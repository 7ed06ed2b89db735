from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict


class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    system_prompt: str
    user_prompt: str


class GenerationResult(BaseModel):
    content: Optional[str] = None
    provider: Optional[str] = None
    model: Optional[str] = None

    @property
    def has_content(self) -> bool:
        return bool(self.content)


class PackagedResponse(BaseModel):
    """Caller-facing body produced from a generation result."""

    body: bytes
    media_type: str
    filename: Optional[str] = None  # set only for attachments

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")

    @property
    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": self.media_type}
        if self.filename is not None:
            headers["Content-Disposition"] = (
                f'attachment; filename="{self.filename}"'
            )
        return headers
