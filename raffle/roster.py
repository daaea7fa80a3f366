"""Participant roster ingestion from CSV."""

from __future__ import annotations

import csv
import io
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from .models import Participant

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = 2


@dataclass
class RosterResult:
    """Outcome of parsing a roster.

    Attributes
    ----------
    success : bool
        ``True`` when at least one participant was read.
    participants : list[Participant]
        Participants in file order; empty on failure.
    error : Optional[str]
        Human-readable reason when ``success`` is ``False``.
    """

    success: bool
    participants: list[Participant] = field(default_factory=list)
    error: Optional[str] = None


def parse_roster(text: str, *, now_ms: Optional[int] = None) -> RosterResult:
    """Parse CSV text with a header row and exactly two columns.

    The first column is the full name and the second the position. Blank
    lines are skipped, and rows missing either value after trimming are
    dropped. Participant ids are ``participant-<row>-<ms>``.
    """
    stamp = int(time.time() * 1000) if now_ms is None else now_ms
    try:
        reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
        headers = list(reader.fieldnames or [])
        rows = [row for row in reader if any((value or "").strip() for value in _values(row))]
    except csv.Error as exc:
        return RosterResult(False, error=f"Could not read the roster: {exc}")

    if not rows:
        return RosterResult(False, error="The roster file is empty")
    if len(headers) != REQUIRED_COLUMNS:
        return RosterResult(
            False,
            error=(
                f"The roster must have exactly {REQUIRED_COLUMNS} columns. "
                f"Found {len(headers)} columns."
            ),
        )

    name_column, position_column = headers
    participants: list[Participant] = []
    for index, row in enumerate(rows):
        full_name = (row.get(name_column) or "").strip()
        position = (row.get(position_column) or "").strip()
        if full_name and position:
            participants.append(
                Participant(
                    id=f"participant-{index}-{stamp}",
                    full_name=full_name,
                    position=position,
                )
            )

    if not participants:
        return RosterResult(False, error="No valid participants were found in the roster")
    logger.info(f"Loaded {len(participants)} participants from roster")
    return RosterResult(True, participants)


def load_roster(path: Union[str, Path]) -> RosterResult:
    """Read and parse a roster file encoded as UTF-8 (with or without BOM)."""
    try:
        text = Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        return RosterResult(False, error=f"Could not read the roster: {exc}")
    return parse_roster(text)


def _values(row: dict) -> list[str]:
    values: list[str] = []
    for key, value in row.items():
        # Surplus cells are collected as a list under the ``None`` key.
        if key is None and isinstance(value, list):
            values.extend(value)
        elif isinstance(value, str):
            values.append(value)
    return values


__all__ = ["RosterResult", "load_roster", "parse_roster"]
