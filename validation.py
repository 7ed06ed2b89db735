"""
Opt-in structural check of a generated feedback document.

The pipeline relays the generated text verbatim; this module is a separate
downstream step that reports problems without altering the output:
  - the text must contain a JSON object matching ``FeedbackReport``
  - every roster student must appear exactly once (trim + case-insensitive)
  - no student may appear that is not on the roster
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import List, Optional, Sequence

from pydantic import ValidationError

from ai.response_parser import parse_llm_json
from dto.feedback import FeedbackReport
from dto.payload import SheetSection
from extractors.payload import ROSTER_SHEET
from extractors.sheet import CELL_SEPARATOR

logger = logging.getLogger(__name__)

_ROSTER_HEADER_LABELS = frozenset({"nombre", "nombres", "name"})


def _normalise_name(name: str) -> str:
    return name.strip().casefold()


def roster_names(
    sections: Sequence[SheetSection],
    roster_sheet: Optional[str] = ROSTER_SHEET,
) -> List[str]:
    """Column A of the roster section, skipping a leading header label."""
    for section in sections:
        if section.name != roster_sheet:
            continue
        names = []
        for row in section.rows:
            first = row.split(CELL_SEPARATOR, 1)[0].strip()
            if not first:
                continue
            if not names and _normalise_name(first) in _ROSTER_HEADER_LABELS:
                continue
            names.append(first)
        return names
    return []


def validate_feedback(raw: str, roster: Optional[Sequence[str]] = None) -> List[str]:
    """
    Return a list of human-readable issues; an empty list means valid.

    *roster*, when given, enables the name cross-check.
    """
    data = parse_llm_json(raw)
    if data is None:
        return ["Output does not contain valid JSON"]
    if not isinstance(data, dict):
        return ["Output root must be a JSON object"]

    try:
        report = FeedbackReport.model_validate(data)
    except ValidationError as exc:
        return [
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()
        ]

    issues: List[str] = []
    if roster is None:
        return issues

    produced = Counter(_normalise_name(s.name) for s in report.students)
    expected = {_normalise_name(n): n for n in roster}

    for key, original in expected.items():
        count = produced.get(key, 0)
        if count == 0:
            issues.append(f"Roster student missing from output: {original}")
        elif count > 1:
            issues.append(f"Roster student appears {count} times: {original}")

    for student in report.students:
        if _normalise_name(student.name) not in expected:
            issues.append(f"Student not on the roster: {student.name}")

    if issues:
        logger.warning("Feedback validation found %d issue(s)", len(issues))
    return issues
