"""
Data models for the TickTick conversion pipeline
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .normalizers import split_tags


NOTE_KIND = "NOTE"
CHECKLIST_KIND = "CHECKLIST"

STATUS_DONE = "1"
STATUS_ARCHIVED = "2"

CHECKLIST_FLAG = "Y"
PRIORITY_NONE = "0"

DEFAULT_TITLE = "Untitled"
DEFAULT_FOLDER = "Inbox"
DEFAULT_LIST = "Default"


class ChecklistPolicy(str, Enum):
    """How checklist items are separated from regular tasks"""
    NONE = "none"
    FLAT = "flat"
    TREE = "tree"


class TaskStatus(str, Enum):
    """Org-mode keyword for a regular task"""
    TODO = "TODO"
    DONE = "DONE"
    ARCHIVED = "ARCHIVED"


class TaskRecord(BaseModel):
    """One row of a TickTick CSV backup. Every column is optional."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    kind: Optional[str] = Field(default=None, alias="Kind")
    title: Optional[str] = Field(default=None, alias="Title")
    status: Optional[str] = Field(default=None, alias="Status")
    folder: Optional[str] = Field(default=None, alias="Folder Name")
    list_name: Optional[str] = Field(default=None, alias="List Name")
    tags: Optional[str] = Field(default=None, alias="Tags")
    start_date: Optional[str] = Field(default=None, alias="Start Date")
    due_date: Optional[str] = Field(default=None, alias="Due Date")
    repeat: Optional[str] = Field(default=None, alias="Repeat")
    content: Optional[str] = Field(default=None, alias="Content")
    priority: Optional[str] = Field(default=None, alias="Priority")
    reminder: Optional[str] = Field(default=None, alias="Reminder")
    timezone: Optional[str] = Field(default=None, alias="Timezone")
    created_time: Optional[str] = Field(default=None, alias="Created Time")
    completed_time: Optional[str] = Field(default=None, alias="Completed Time")
    task_id: Optional[str] = Field(default=None, alias="taskId")
    parent_id: Optional[str] = Field(default=None, alias="parentId")
    is_checklist: Optional[str] = Field(default=None, alias="Is Check list")

    @field_validator("*", mode="before")
    @classmethod
    def blank_is_missing(cls, v: Any) -> Optional[str]:
        # Exports leave unused columns empty
        if v is None:
            return None
        if not isinstance(v, str):
            v = str(v)
        return v if v.strip() else None

    @classmethod
    def from_row(cls, row: dict) -> "TaskRecord":
        return cls.model_validate(row)

    @property
    def is_note(self) -> bool:
        return (self.kind or "").strip().upper() == NOTE_KIND

    @property
    def is_checklist_kind(self) -> bool:
        return (self.kind or "").strip().upper() == CHECKLIST_KIND

    @property
    def display_title(self) -> str:
        return self.title or DEFAULT_TITLE

    @property
    def folder_or_default(self) -> str:
        return self.folder or DEFAULT_FOLDER

    @property
    def list_or_default(self) -> str:
        return self.list_name or DEFAULT_LIST

    @property
    def tag_list(self) -> List[str]:
        return split_tags(self.tags)

    @property
    def is_done(self) -> bool:
        return (self.status or "").strip() == STATUS_DONE

    @property
    def is_archived(self) -> bool:
        return (self.status or "").strip() == STATUS_ARCHIVED


@dataclass
class ChecklistNode:
    """A checklist record and its children, in input order"""
    record: TaskRecord
    children: List["ChecklistNode"] = field(default_factory=list)

    def walk(self, depth: int = 0) -> Iterator[Tuple["ChecklistNode", int]]:
        """Pre-order traversal yielding (node, depth)."""
        stack = [(self, depth)]
        while stack:
            node, level = stack.pop()
            yield node, level
            stack.extend((child, level + 1) for child in reversed(node.children))


@dataclass
class ChecklistGroup:
    """Everything that ends up in one checklist note"""
    title: str
    folder: Optional[str] = None
    list_name: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    created_time: Optional[str] = None
    intro: Optional[str] = None
    items: List[ChecklistNode] = field(default_factory=list)

    def walk(self) -> Iterator[Tuple[ChecklistNode, int]]:
        for item in self.items:
            yield from item.walk()

    @property
    def records(self) -> List[TaskRecord]:
        return [node.record for node, _ in self.walk()]


@dataclass
class Diagnostic:
    """A per-record problem that was resolved with a default"""
    code: str
    message: str
    task_id: Optional[str] = None


@dataclass
class ClassificationPartition:
    """Disjoint buckets of one input batch, each in input order"""
    notes: List[TaskRecord] = field(default_factory=list)
    checklist_items: List[TaskRecord] = field(default_factory=list)
    regular_tasks: List[TaskRecord] = field(default_factory=list)
    checklist_groups: List[ChecklistGroup] = field(default_factory=list)

    @property
    def todo(self) -> List[TaskRecord]:
        return [t for t in self.regular_tasks if not t.is_done and not t.is_archived]

    @property
    def done(self) -> List[TaskRecord]:
        return [t for t in self.regular_tasks if t.is_done]

    @property
    def archived(self) -> List[TaskRecord]:
        return [t for t in self.regular_tasks if t.is_archived]

    @property
    def total(self) -> int:
        return len(self.notes) + len(self.checklist_items) + len(self.regular_tasks)


@dataclass(frozen=True)
class NoteDescriptor:
    """A Denote file ready to be written"""
    filename: str
    content: str
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class ConversionSettings:
    """Options that change what the pipeline produces"""
    checklist_policy: ChecklistPolicy = ChecklistPolicy.TREE
    checklist_folder: str = "Checklists"
    with_signature: bool = False
    archive: bool = True


@dataclass
class ConversionResult:
    """Output of one pipeline run"""
    outline: str
    archive_outline: Optional[str]
    notes: List[NoteDescriptor]
    partition: ClassificationPartition
    diagnostics: List[Diagnostic] = field(default_factory=list)
    active_count: int = 0
    archived_count: int = 0
