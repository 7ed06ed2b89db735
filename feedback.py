"""
Competency feedback generator: pipeline and CLI entry point.

Usage:
    python feedback.py <excel_file> [-o <output>] [-m json|file]
                       [-v resumen|informe] [--validate]

Reads the roster and the two competency-evaluation sheets of a workbook,
turns them into the canonical TSV payload, asks the configured generative
service for feedback and writes its reply unchanged.

Steps per run (strictly sequential):
  1. Extract:   open the workbook, build the sheet sections, close it
  2. Assemble:  system directive + user message with the payload
  3. Generate:  one call to the AIService
  4. Package:   JSON text or attachment bytes
"""

from __future__ import annotations

import argparse
import io
import logging
import os
import sys
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

import dotenv
import openpyxl
from openpyxl import Workbook

from ai.factory import get_generation_service
from ai.service import AIService
from assembler import RequestAssembler
from config import FeedbackConfig, ResponseMode, load_config
from dto.generation import GenerationRequest, GenerationResult, PackagedResponse
from dto.payload import SheetSection
from errors import ExtractionError, FeedbackError, GenerationFailedError
from extractors.payload import TabularPayloadBuilder
from relay import ResponsePackager
from validation import roster_names, validate_feedback

logger = logging.getLogger(__name__)

WorkbookSource = Union[str, os.PathLike, bytes, BinaryIO]


# -------------------------------------------------------------------
# Workbook loading
# -------------------------------------------------------------------


def open_workbook(source: WorkbookSource) -> Workbook:
    """
    Open *source* (path, raw bytes or binary file object) with cached
    formula values.  Raises ``ExtractionError`` if it is not a readable
    spreadsheet.
    """
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)
    try:
        return openpyxl.load_workbook(source, data_only=True)
    except Exception as exc:
        raise ExtractionError(f"Cannot open the file as a spreadsheet: {exc}") from exc


# -------------------------------------------------------------------
# Pipeline
# -------------------------------------------------------------------


class FeedbackPipeline:
    """
    One instance can serve many runs; every run keeps its workbook,
    payload, request and result local.
    """

    def __init__(self, service: AIService, config: FeedbackConfig):
        self._service = service
        self._builder = TabularPayloadBuilder(config.sheet_names)
        self._assembler = RequestAssembler(
            config.system_prompt, config.user_prompt_template
        )
        self._packager = ResponsePackager(config.response_mode)

    def extract_sections(self, source: WorkbookSource) -> List[SheetSection]:
        wb = open_workbook(source)
        try:
            return self._builder.build_sections(wb)
        except Exception as exc:
            raise ExtractionError(f"Failed to read the workbook: {exc}") from exc
        finally:
            wb.close()

    def extract_payload(self, source: WorkbookSource) -> str:
        return self._builder.render(self.extract_sections(source))

    def build_request(self, sections: List[SheetSection]) -> GenerationRequest:
        payload = self._builder.render(sections)
        logger.info(
            "Canonical payload: %d section(s), %d character(s)",
            len(sections),
            len(payload),
        )
        return self._assembler.assemble(payload)

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """Single round trip to the service; failures are not retried here."""
        logger.info(
            "Requesting generation from %s (%s)",
            self._service.provider or type(self._service).__name__,
            self._service.model or "default model",
        )
        try:
            content = self._service.generate(request.system_prompt, request.user_prompt)
        except Exception as exc:
            raise GenerationFailedError(f"Generation request failed: {exc}") from exc

        return GenerationResult(
            content=content,
            provider=self._service.provider or None,
            model=self._service.model or None,
        )

    def package(
        self,
        result: GenerationResult,
        upload_name: Optional[str] = None,
    ) -> PackagedResponse:
        return self._packager.package(result, upload_name)

    def run(
        self,
        source: WorkbookSource,
        upload_name: Optional[str] = None,
    ) -> PackagedResponse:
        sections = self.extract_sections(source)
        request = self.build_request(sections)
        result = self.generate(request)
        return self.package(result, upload_name)


# -------------------------------------------------------------------
# CLI
# -------------------------------------------------------------------


def _default_output_path(excel_path: str, response: PackagedResponse) -> str:
    if response.filename:
        return response.filename
    return f"{Path(excel_path).stem}_resultado.json"


def main() -> None:
    dotenv.load_dotenv()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    parser = argparse.ArgumentParser(
        description="Generate competency feedback from an evaluation workbook.",
    )
    parser.add_argument(
        "excel_file",
        help="Path to the .xlsx file with the Lista and evaluation sheets",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output file path (default: <input_name>_resultado.json, "
        "or resultado_<input_name> in file mode)",
    )
    parser.add_argument(
        "-m",
        "--mode",
        choices=[m.value for m in ResponseMode],
        default=None,
        help="Response mode (default: FEEDBACK_RESPONSE_MODE or json)",
    )
    parser.add_argument(
        "-v",
        "--variant",
        default=None,
        help="System prompt variant: resumen or informe "
        "(default: FEEDBACK_PROMPT_VARIANT or resumen)",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Check the generated JSON against the expected schema and roster",
    )
    args = parser.parse_args()

    excel_path = args.excel_file
    if not os.path.isfile(excel_path):
        logger.error("File not found: %s", excel_path)
        sys.exit(1)

    try:
        config = load_config(prompt_variant=args.variant, response_mode=args.mode)
        pipeline = FeedbackPipeline(get_generation_service(), config)

        sections = pipeline.extract_sections(excel_path)
        result = pipeline.generate(pipeline.build_request(sections))
        response = pipeline.package(result, Path(excel_path).name)
    except (FeedbackError, ValueError):
        logger.exception("Feedback generation failed for %s", excel_path)
        sys.exit(1)

    output_path = args.output or _default_output_path(excel_path, response)
    with open(output_path, "wb") as f:
        f.write(response.body)
    logger.info("Output written to %s", output_path)

    if args.validate:
        issues = validate_feedback(
            response.text, roster_names(sections, config.roster_sheet)
        )
        for issue in issues:
            logger.warning("  %s", issue)
        if issues:
            sys.exit(2)
        logger.info("Output matches the expected schema and roster")


if __name__ == "__main__":
    main()
