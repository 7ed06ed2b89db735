"""
TabularPayloadBuilder: concatenates the sheets of interest into the
canonical payload.

Sections always follow the configured order, whatever the order of the
sheets inside the workbook.  Sheets that are missing are skipped without a
placeholder; sheets that were not asked for are ignored.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from dto.payload import SheetSection
from extractors.sheet import SheetTableExtractor

logger = logging.getLogger(__name__)

ROSTER_SHEET = "Lista"
DATA_SOURCES_SHEET = "Ev. Fuentes de Datos Segura"
TEAMWORK_SHEET = "Ev. Trabajo en Equipo"

DEFAULT_SHEET_NAMES = (ROSTER_SHEET, DATA_SOURCES_SHEET, TEAMWORK_SHEET)


def _get_sheet(wb: Workbook, name: str) -> Optional[Worksheet]:
    """Exact-name lookup; ``None`` when the workbook has no such sheet."""
    if name not in wb.sheetnames:
        return None
    return wb[name]


class TabularPayloadBuilder:
    """Builds the multi-section TSV payload from a workbook."""

    def __init__(
        self,
        sheet_names: Sequence[str] = DEFAULT_SHEET_NAMES,
        extractor: Optional[SheetTableExtractor] = None,
    ):
        self._sheet_names = tuple(sheet_names)
        self._extractor = extractor or SheetTableExtractor()

    @property
    def sheet_names(self) -> tuple:
        return self._sheet_names

    def build_sections(self, wb: Workbook) -> List[SheetSection]:
        sections: List[SheetSection] = []
        for name in self._sheet_names:
            ws = _get_sheet(wb, name)
            if ws is None:
                logger.info("Sheet '%s' not found, section skipped", name)
                continue
            rows = self._extractor.extract(ws)
            logger.info("Sheet '%s': %d row(s)", name, len(rows))
            sections.append(SheetSection(name=name, rows=rows))
        return sections

    @staticmethod
    def render(sections: Sequence[SheetSection]) -> str:
        return "".join(section.render() for section in sections)

    def build(self, wb: Workbook) -> str:
        """Return the canonical payload; ``""`` when no sheet is present."""
        return self.render(self.build_sections(wb))
