"""
Conversion Pipeline

Runs classification, Org rendering and Denote note building over one batch of
TickTick records. No I/O happens here: the result is handed to NoteWriter.
"""

import logging
import random
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from .classifier import RecordClassifier
from .denote_builder import DenoteBuilder, SignatureGenerator
from .models import ConversionResult, ConversionSettings, Diagnostic, NoteDescriptor, TaskRecord
from .org_renderer import OrgRenderer

logger = logging.getLogger(__name__)


class TickTickConverter:
    """
    Converts TickTick records into Org documents and Denote notes.

    Usage:
        converter = TickTickConverter(ConversionSettings(with_signature=True))
        result = converter.convert(records)
        result.outline, result.archive_outline, result.notes
    """

    def __init__(
        self,
        settings: Optional[ConversionSettings] = None,
        now: Optional[datetime] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings or ConversionSettings()
        self.now = now or datetime.now()
        self.classifier = RecordClassifier(
            self.settings.checklist_policy,
            self.settings.checklist_folder,
        )
        self.renderer = OrgRenderer()
        self.builder = DenoteBuilder(
            with_signature=self.settings.with_signature,
            now=self.now,
            signatures=SignatureGenerator(rng=rng),
        )

    def convert(self, records: Sequence[TaskRecord]) -> ConversionResult:
        diagnostics: List[Diagnostic] = []
        partition = self.classifier.classify(records, diagnostics)

        if self.settings.archive:
            active = [t for t in partition.regular_tasks if not t.is_archived]
            archived = partition.archived
        else:
            active = list(partition.regular_tasks)
            archived = []

        today = self.now.date()
        outline = self.renderer.render_document(active, today)
        archive_outline = None
        if archived:
            archive_outline = self.renderer.render_document(archived, today, archive=True)

        notes: List[NoteDescriptor] = []
        for group in partition.checklist_groups:
            notes.append(self.builder.build_checklist(group))
        for record in partition.notes:
            notes.append(self.builder.build_note(record))

        diagnostics.extend(_duplicate_filenames(notes))

        logger.info(
            f"Converted {len(records)} records: {len(active)} active tasks, "
            f"{len(archived)} archived tasks, {len(notes)} notes"
        )

        return ConversionResult(
            outline=outline,
            archive_outline=archive_outline,
            notes=notes,
            partition=partition,
            diagnostics=diagnostics,
            active_count=len(active),
            archived_count=len(archived),
        )


def _duplicate_filenames(notes: Sequence[NoteDescriptor]) -> List[Diagnostic]:
    seen: Dict[str, int] = {}
    for note in notes:
        seen[note.filename] = seen.get(note.filename, 0) + 1
    return [
        Diagnostic(
            code="duplicate-filename",
            message=f"{count} notes share the filename {filename}; use signatures to keep them apart",
        )
        for filename, count in seen.items()
        if count > 1
    ]


def convert_records(
    records: Sequence[TaskRecord],
    settings: Optional[ConversionSettings] = None,
    now: Optional[datetime] = None,
) -> ConversionResult:
    """Convenience wrapper around TickTickConverter."""
    return TickTickConverter(settings, now=now).convert(records)
