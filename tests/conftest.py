from __future__ import annotations

import io
from typing import Dict, List, Optional, Sequence

import openpyxl
import pytest

from ai.service import AIService
from config import FeedbackConfig, ResponseMode
from prompts.feedback import SUMMARY_SYSTEM_PROMPT


class FakeAIService(AIService):
    """Records every call and replies with a canned answer (or raises)."""

    provider = "fake"
    model = "fake-1"

    def __init__(self, reply: Optional[str] = '{"students": [], "notes": ""}', error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[tuple] = []

    def generate(self, system_prompt: str, prompt: str) -> Optional[str]:
        self.calls.append((system_prompt, prompt))
        if self.error is not None:
            raise self.error
        return self.reply


def build_workbook(sheets: Dict[str, Sequence[Sequence]]) -> openpyxl.Workbook:
    """In-memory workbook with one sheet per entry, in insertion order."""
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(title=name)
        for row in rows:
            ws.append(list(row))
    return wb


def workbook_bytes(sheets: Dict[str, Sequence[Sequence]]) -> bytes:
    buf = io.BytesIO()
    build_workbook(sheets).save(buf)
    return buf.getvalue()


@pytest.fixture
def fake_service_cls():
    return FakeAIService


@pytest.fixture
def make_workbook():
    return build_workbook


@pytest.fixture
def make_workbook_bytes():
    return workbook_bytes


@pytest.fixture
def json_config() -> FeedbackConfig:
    return FeedbackConfig(system_prompt=SUMMARY_SYSTEM_PROMPT)


@pytest.fixture
def file_config() -> FeedbackConfig:
    return FeedbackConfig(
        system_prompt=SUMMARY_SYSTEM_PROMPT,
        response_mode=ResponseMode.FILE,
    )


@pytest.fixture
def evaluation_sheets() -> Dict[str, List[List]]:
    return {
        "Lista": [["Ana", "123"], ["Beto", "456"]],
        "Ev. Fuentes de Datos Segura": [["Nombre", "Ind1", "Ind2"], ["Ana", "4", "3"]],
    }


EXPECTED_PAYLOAD = (
    "Sheet: Lista\nAna\t123\nBeto\t456\n\n"
    "Sheet: Ev. Fuentes de Datos Segura\nNombre\tInd1\tInd2\nAna\t4\t3\n\n"
)


@pytest.fixture
def expected_payload() -> str:
    return EXPECTED_PAYLOAD
