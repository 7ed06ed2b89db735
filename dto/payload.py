"""
Canonical payload DTOs.

    CanonicalPayload (str)
      └─ sections: List[SheetSection]
           └─ rows: List[str]   (TSV, no trailing newline)
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel

SECTION_HEADER = "Sheet: {name}"


class SheetSection(BaseModel):
    """One named block of the canonical payload."""

    name: str
    rows: List[str] = []

    def render(self) -> str:
        """Header line, one line per row, then one blank separator line."""
        header = SECTION_HEADER.format(name=self.name)
        body = "".join(f"{row}\n" for row in self.rows)
        return f"{header}\n{body}\n"
