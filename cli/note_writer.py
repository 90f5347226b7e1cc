#!/usr/bin/env python3
"""
Note Writer

Writes converted documents and Denote notes below an output directory:

    <output>/org/ticktick-backup.org
    <output>/org/ticktick-backup_archive.org
    <output>/denote/<one file per note>

Note files are written concurrently on worker threads, one worker per filename.
Each file is written and then stamped with its creation time; a failed file
never stops the rest, and a failed stamp leaves the written file counted.
"""

import asyncio
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from rich.console import Console

from conversion import NoteDescriptor

console = Console()
logger = logging.getLogger(__name__)


@dataclass
class WriteReport:
    """Outcome of writing a batch of notes"""
    written: int = 0
    failed: List[Tuple[str, str]] = field(default_factory=list)
    unstamped: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.written + len(self.failed)


class NoteWriter:
    """Owns all file system access for a conversion run."""

    def __init__(
        self,
        output_dir: Path,
        org_dir: str = "org",
        denote_dir: str = "denote",
        max_concurrent: int = 8,
    ):
        self.output_dir = Path(output_dir)
        self.org_dir = self.output_dir / org_dir
        self.denote_dir = self.output_dir / denote_dir
        self.max_concurrent = max(1, max_concurrent)

    def prepare(self) -> None:
        """Ensure both output subdirectories exist."""
        self.org_dir.mkdir(parents=True, exist_ok=True)
        self.denote_dir.mkdir(parents=True, exist_ok=True)

    def write_document(self, name: str, content: str) -> Path:
        path = self.org_dir / name
        path.write_text(content, encoding="utf-8")
        logger.debug(f"Wrote {path}")
        return path

    def _stamp(self, path: Path, note: NoteDescriptor) -> None:
        stamp = note.timestamp.timestamp()
        os.utime(path, (stamp, stamp))

    def _write_note(self, note: NoteDescriptor, report: WriteReport) -> Path:
        path = self.denote_dir / note.filename
        path.write_text(note.content, encoding="utf-8")
        if note.timestamp is not None:
            try:
                self._stamp(path, note)
            except OSError as e:
                # The file is on disk, only its time is wrong
                logger.warning(f"Could not set timestamp on {note.filename}: {e}")
                report.unstamped.append((note.filename, str(e)))
        return path

    async def _write_group(
        self,
        notes: Sequence[NoteDescriptor],
        semaphore: asyncio.Semaphore,
        report: WriteReport,
    ) -> None:
        # Notes sharing a filename are written in order, so the last one wins
        async with semaphore:
            for note in notes:
                try:
                    await asyncio.to_thread(self._write_note, note, report)
                    report.written += 1
                except Exception as e:
                    logger.error(f"Error writing note {note.filename}: {e}")
                    console.print(f"[red]Error writing denote file {note.filename}: {e}[/red]")
                    report.failed.append((note.filename, str(e)))

    async def write_notes(self, notes: Sequence[NoteDescriptor]) -> WriteReport:
        """Write every note; the report is complete once all writes finished."""
        report = WriteReport()
        if not notes:
            return report

        by_filename: Dict[str, List[NoteDescriptor]] = {}
        for note in notes:
            by_filename.setdefault(note.filename, []).append(note)

        semaphore = asyncio.Semaphore(self.max_concurrent)
        await asyncio.gather(*(self._write_group(group, semaphore, report) for group in by_filename.values()))
        if report.unstamped:
            console.print(f"[yellow]{len(report.unstamped)} denote files kept their write time[/yellow]")
        return report
