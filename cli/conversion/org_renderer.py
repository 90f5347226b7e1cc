"""
Org-mode Outline Renderer

Renders regular tasks as an Org-mode outline grouped by folder and list:

    * Tasks
    ** <Folder>
    *** <List>
    **** TODO <Title> :tag:
         SCHEDULED: <2024-01-15 09:00 +1w>
         :PROPERTIES:
         ...
         :END:
"""

from datetime import date
from typing import Dict, List, Sequence

from .classifier import status_keyword
from .models import CHECKLIST_FLAG, PRIORITY_NONE, TaskRecord
from .normalizers import normalize_date, normalize_recurrence, org_tag_annotation

ACTIVE_TITLE = "TickTick Tasks Backup"
ARCHIVE_TITLE = "TickTick Archived Tasks"


class OrgRenderer:
    """Builds the active and archive Org documents."""

    def __init__(self, indent: str = "     "):
        self.indent = indent

    def render_document(self, tasks: Sequence[TaskRecord], today: date, archive: bool = False) -> str:
        title = ARCHIVE_TITLE if archive else ACTIVE_TITLE
        heading = "Archived Tasks" if archive else "Tasks"
        header = f"#+TITLE: {title}\n#+DATE: {today.isoformat()}\n\n* {heading}\n\n"
        return header + self.render(tasks, archive)

    def render(self, tasks: Sequence[TaskRecord], archive: bool = False) -> str:
        """Render tasks grouped by (folder, list), keeping first-seen order."""
        grouped: Dict[str, Dict[str, List[TaskRecord]]] = {}
        for task in tasks:
            lists = grouped.setdefault(task.folder_or_default, {})
            lists.setdefault(task.list_or_default, []).append(task)

        parts = []
        for folder, lists in grouped.items():
            parts.append(f"** {folder}\n")
            for list_name, entries in lists.items():
                parts.append(f"*** {list_name}\n")
                for task in entries:
                    parts.append(self.render_entry(task, archive))
        return "".join(parts)

    def render_entry(self, task: TaskRecord, archive: bool = False) -> str:
        keyword = status_keyword(task, archive).value
        headline = f"**** {keyword} {task.display_title}"
        tags = org_tag_annotation(task.tag_list)
        if tags:
            headline += f" {tags}"

        lines = [headline]
        lines.extend(self._scheduling_lines(task))
        lines.extend(self._body_lines(task))
        lines.extend(self._property_lines(task))
        return "\n".join(lines) + "\n\n"

    def _scheduling_lines(self, task: TaskRecord) -> List[str]:
        scheduled = normalize_date(task.start_date)
        deadline = normalize_date(task.due_date)
        recurrence = normalize_recurrence(task.repeat)
        suffix = f" {recurrence}" if recurrence else ""

        if scheduled and deadline and scheduled == deadline:
            return [f"{self.indent}SCHEDULED: <{scheduled}{suffix}>"]

        lines = []
        if scheduled:
            lines.append(f"{self.indent}SCHEDULED: <{scheduled}{suffix}>")
        if deadline:
            lines.append(f"{self.indent}DEADLINE: <{deadline}{suffix}>")
        return lines

    def _body_lines(self, task: TaskRecord) -> List[str]:
        if not task.content:
            return []
        text = task.content.replace("\r", "")
        return [f"{self.indent}{line.strip()}" for line in text.split("\n") if line.strip()]

    def _property_lines(self, task: TaskRecord) -> List[str]:
        properties = []
        if task.priority and task.priority.strip() != PRIORITY_NONE:
            properties.append(("PRIORITY", task.priority))
        if task.reminder:
            properties.append(("REMINDER", task.reminder))
        if task.repeat:
            properties.append(("REPEAT", normalize_recurrence(task.repeat) or task.repeat))
        if task.created_time:
            properties.append(("CREATED", task.created_time))
        if task.completed_time:
            properties.append(("COMPLETED", task.completed_time))
        if task.timezone:
            properties.append(("TIMEZONE", task.timezone))
        if task.task_id:
            properties.append(("TICKTICK_ID", task.task_id))
        if task.parent_id:
            properties.append(("PARENT_ID", task.parent_id))
        if task.is_checklist == CHECKLIST_FLAG:
            properties.append(("IS_CHECKLIST", "Yes"))

        lines = [f"{self.indent}:PROPERTIES:"]
        lines.extend(f"{self.indent}:{name}: {value}" for name, value in properties)
        lines.append(f"{self.indent}:END:")
        return lines
