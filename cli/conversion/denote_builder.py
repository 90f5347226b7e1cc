"""
Denote Note Builder

Turns TickTick notes and checklist groups into Denote files. Filenames follow
the Denote convention:

    DATE[==SIGNATURE]--TITLE__KEYWORDS.org

where DATE is the creation time as ``YYYYMMDDTHHMMSS`` and SIGNATURE is an
optional random token used only to keep names unique.
"""

import logging
import random
import string
from datetime import datetime
from typing import List, Optional, Set

from .models import ChecklistGroup, ChecklistNode, NoteDescriptor, TaskRecord
from .normalizers import (
    compact_date_token,
    format_timestamp,
    keywordize,
    normalize_date,
    org_tag_annotation,
    parse_timestamp,
    slugify,
)

logger = logging.getLogger(__name__)

DENOTE_EXTENSION = ".org"
SIGNATURE_ALPHABET = string.ascii_lowercase + string.digits
BULLET_GLYPHS = ("•", "◦", "▪", "▫", "‣", "-", "*")


class SignatureGenerator:
    """Short random base-36 tokens, never repeated within one run."""

    def __init__(self, length: int = 8, rng: Optional[random.Random] = None):
        self.length = length
        self._rng = rng or random.Random()
        self._issued: Set[str] = set()

    def next(self) -> str:
        while True:
            token = "".join(self._rng.choice(SIGNATURE_ALPHABET) for _ in range(self.length))
            if token not in self._issued:
                self._issued.add(token)
                return token


def denote_identifier(created: datetime, signature: Optional[str] = None) -> str:
    identifier = compact_date_token(created)
    if signature:
        identifier += f"=={signature}"
    return identifier


def denote_filename(
    title: str,
    tags: List[str],
    created: datetime,
    signature: Optional[str] = None,
) -> str:
    """Build a Denote filename. Pure for a given signature."""
    filename = denote_identifier(created, signature)

    slug = slugify(title)
    if slug:
        filename += f"--{slug}"

    keywords = [kw for kw in (keywordize(tag) for tag in tags) if kw]
    if keywords:
        filename += "__" + "_".join(keywords)

    return filename + DENOTE_EXTENSION


def _bulleted(line: str) -> Optional[str]:
    """Text after a leading bullet glyph, or None when the line has none."""
    for glyph in BULLET_GLYPHS:
        if line.startswith(glyph):
            return line[len(glyph):].strip()
    return None


def checklist_content_lines(content: str, indent: str = "") -> List[str]:
    """
    Lay out free text under a checklist item.

    Lines starting with a bullet glyph (TickTick wraps embedded checklist
    items that way) become unchecked sub-items; other lines are kept as text.
    """
    lines = []
    for raw_line in content.replace("\r", "").split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        item = _bulleted(line)
        if item is not None:
            lines.append(f"{indent}- [ ] {item}")
        else:
            lines.append(f"{indent}{line}")
    return lines


class DenoteBuilder:
    """
    Builds NoteDescriptors for notes and checklist groups.

    Usage:
        builder = DenoteBuilder(with_signature=False, now=datetime(2024, 1, 1, 12, 0))
        note = builder.build_note(record)
        checklist = builder.build_checklist(group)
    """

    def __init__(
        self,
        with_signature: bool = False,
        now: Optional[datetime] = None,
        signatures: Optional[SignatureGenerator] = None,
    ):
        self.with_signature = with_signature
        self.now = (now or datetime.now()).replace(second=0, microsecond=0)
        self.signatures = signatures or SignatureGenerator()

    def build_note(self, record: TaskRecord) -> NoteDescriptor:
        title = record.title or "Untitled Note"
        body = record.content.replace("\r", "") if record.content else ""
        return self._assemble(
            title=title,
            tags=record.tag_list,
            created_raw=record.created_time,
            body=body,
            source="TickTick",
            folder=record.folder,
            list_name=record.list_name,
        )

    def build_checklist(self, group: ChecklistGroup) -> NoteDescriptor:
        sections = []
        if group.intro:
            sections.append("\n".join(checklist_content_lines(group.intro)))

        item_lines = []
        for node, depth in group.walk():
            item_lines.extend(self._checklist_item_lines(node, depth))
        if item_lines:
            sections.append("\n".join(item_lines))

        return self._assemble(
            title=group.title,
            tags=group.tags,
            created_raw=group.created_time,
            body="\n\n".join(sections),
            source="TickTick Checklist",
            folder=group.folder,
            list_name=group.list_name,
        )

    def _checklist_item_lines(self, node: ChecklistNode, depth: int) -> List[str]:
        record = node.record
        indent = "  " * depth
        mark = "X" if record.is_done else " "
        if record.title:
            text = record.title
            rest = record.content if record.content and record.content != record.title else ""
        elif record.content:
            # First content line stands in for the title
            first, _, rest = record.content.replace("\r", "").strip().partition("\n")
            text = first.strip()
        else:
            text, rest = "Unnamed item", ""

        lines = [f"{indent}- [{mark}] {text}"]
        if rest:
            lines.extend(checklist_content_lines(rest, indent + "  "))
        return lines

    def _resolve_created(self, created_raw: Optional[str]) -> Optional[datetime]:
        created = parse_timestamp(created_raw)
        if created_raw and created is None:
            logger.warning(f"Unparseable creation date {created_raw!r}, using current time")
        return created

    def _assemble(
        self,
        title: str,
        tags: List[str],
        created_raw: Optional[str],
        body: str,
        source: str,
        folder: Optional[str],
        list_name: Optional[str],
    ) -> NoteDescriptor:
        created = self._resolve_created(created_raw)
        stamp = created or self.now
        signature = self.signatures.next() if self.with_signature else None

        filename = denote_filename(title, tags, stamp, signature)
        date_line = normalize_date(created_raw) if created_raw else None

        header = [
            f"#+TITLE: {title}",
            f"#+DATE: {date_line or format_timestamp(self.now)}",
            f"#+FILETAGS: {org_tag_annotation(tags)}".rstrip(),
            f"#+IDENTIFIER: {denote_identifier(stamp, signature)}",
        ]

        footer = ["#+begin_comment", f"Source: {source}"]
        if folder:
            footer.append(f"Folder: {folder}")
        if list_name:
            footer.append(f"List: {list_name}")
        if created_raw:
            footer.append(f"Created: {created_raw}")
        footer.append("#+end_comment")

        content = "\n".join(header) + "\n\n" + body + "\n\n" + "\n".join(footer) + "\n"
        return NoteDescriptor(filename=filename, content=content, timestamp=created)
