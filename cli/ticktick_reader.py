#!/usr/bin/env python3
"""
TickTick Backup Reader

Reads a TickTick CSV backup into TaskRecord objects. The export starts with a
few metadata lines (date, version, status legend); the real table begins at
the header row that names "Folder Name" and "List Name".

Usage:
    from ticktick_reader import read_ticktick_export

    records = read_ticktick_export(Path("backup.csv"))
"""

import csv
import io
import logging
from pathlib import Path
from typing import Dict, List, Sequence

from conversion import TaskRecord

logger = logging.getLogger(__name__)

HEADER_SENTINELS = ("Folder Name", "List Name")


class TickTickParseError(ValueError):
    """The export has no recognizable table or the CSV is malformed."""


def find_header_index(lines: Sequence[str]) -> int:
    """Index of the header row, or -1 when there is none."""
    for i, line in enumerate(lines):
        if all(name in line for name in HEADER_SENTINELS):
            return i
    return -1


def parse_ticktick_csv(text: str) -> List[Dict[str, str]]:
    """
    Parse the CSV part of an export.

    Returns:
        One dict per non-empty row, keyed by column header
    """
    lines = text.splitlines(keepends=True)
    start = find_header_index(lines)
    if start == -1:
        raise TickTickParseError("Could not find the TickTick header row (Folder Name, List Name)")

    if start:
        logger.debug(f"Skipping {start} metadata lines before the header row")

    reader = csv.DictReader(io.StringIO("".join(lines[start:])), strict=True)
    rows = []
    try:
        for row in reader:
            values = {key: value for key, value in row.items() if key is not None}
            if not any(value and value.strip() for value in values.values()):
                continue
            rows.append(values)
    except csv.Error as e:
        raise TickTickParseError(f"Malformed CSV near line {reader.line_num + start}: {e}") from e

    return rows


def read_ticktick_export(path: Path) -> List[TaskRecord]:
    """Read and parse a backup file. OSError propagates for unreadable files."""
    text = Path(path).read_text(encoding="utf-8-sig")
    rows = parse_ticktick_csv(text)
    records = [TaskRecord.from_row(row) for row in rows]
    logger.info(f"Read {len(records)} records from {path}")
    return records
