"""
ResponsePackager: relays the generated content to the caller.

  JSON mode  → UTF-8 text body, ``application/json``
  FILE mode  → raw bytes as an attachment named ``resultado_<upload>``

The content is not reformatted or checked against any schema.
"""

from __future__ import annotations

import logging
from pathlib import PurePath
from typing import Optional

from config import ResponseMode
from dto.generation import GenerationResult, PackagedResponse
from errors import EmptyGenerationError

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"
FILE_MEDIA_TYPE = "text/csv"
ATTACHMENT_PREFIX = "resultado_"


def attachment_filename(upload_name: Optional[str]) -> str:
    """``resultado_<basename of the upload>``, or ``resultado`` if unknown."""
    base = PurePath(upload_name).name if upload_name else ""
    if not base:
        return ATTACHMENT_PREFIX.rstrip("_")
    return f"{ATTACHMENT_PREFIX}{base}"


class ResponsePackager:
    def __init__(self, mode: ResponseMode = ResponseMode.JSON):
        self._mode = mode

    @property
    def mode(self) -> ResponseMode:
        return self._mode

    def package(
        self,
        result: GenerationResult,
        upload_name: Optional[str] = None,
    ) -> PackagedResponse:
        if not result.has_content:
            raise EmptyGenerationError("The generation result has no content")

        body = result.content.encode("utf-8")

        if self._mode is ResponseMode.FILE:
            filename = attachment_filename(upload_name)
            logger.info("Packaged %d byte(s) as attachment '%s'", len(body), filename)
            return PackagedResponse(
                body=body,
                media_type=FILE_MEDIA_TYPE,
                filename=filename,
            )

        logger.info("Packaged %d byte(s) as JSON", len(body))
        return PackagedResponse(body=body, media_type=JSON_MEDIA_TYPE)
