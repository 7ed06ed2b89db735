"""
SheetTableExtractor: flattens one worksheet into TSV row strings.

Policy:
  - rows keep their original order; absent and fully blank rows are
    dropped without leaving an empty line behind
  - each row spans up to its last non-empty cell, so sparse trailing
    columns never produce trailing tabs
  - empty cells inside that span stay as empty fields
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from openpyxl.worksheet.worksheet import Worksheet

from extractors.cell import coerce_cell_value

logger = logging.getLogger(__name__)

CELL_SEPARATOR = "\t"


class SheetTableExtractor:
    """
    Converts a worksheet into an ordered list of TSV rows.

    Usage::

        extractor = SheetTableExtractor()
        rows = extractor.extract(ws)   # ["Ana\\t123", "Beto\\t456"]
    """

    def extract(self, ws: Optional[Worksheet]) -> List[str]:
        """Return the non-blank rows of *ws*; an absent sheet yields ``[]``."""
        if ws is None:
            return []

        rows: List[str] = []
        dropped = 0
        for values in ws.iter_rows(values_only=True):
            line = self.format_row(values)
            if line is None:
                dropped += 1
                continue
            rows.append(line)

        logger.debug(
            "  Sheet '%s': %d row(s) kept, %d blank row(s) dropped",
            ws.title,
            len(rows),
            dropped,
        )
        return rows

    @staticmethod
    def format_row(values: Iterable[Any]) -> Optional[str]:
        """
        Join one row's values with tabs.

        Returns ``None`` when every cell coerces to an empty string.
        """
        cells = [coerce_cell_value(v) for v in values]

        last = len(cells)
        while last > 0 and not cells[last - 1]:
            last -= 1
        if last == 0:
            return None

        return CELL_SEPARATOR.join(cells[:last])
