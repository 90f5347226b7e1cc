"""
Record Classification

Splits a flat TickTick record list into notes, checklist items and regular
tasks, and rebuilds checklist groups according to the configured policy.

Policies:
- none: no checklist separation, every non-note record is a task
- flat: records in the checklist folder are grouped by list name
- tree: parent/child records (and Kind=CHECKLIST) are rebuilt as trees
"""

import logging
from typing import Dict, List, Optional, Sequence, Set

from .models import (
    ChecklistGroup,
    ChecklistNode,
    ChecklistPolicy,
    ClassificationPartition,
    Diagnostic,
    TaskRecord,
    TaskStatus,
)

logger = logging.getLogger(__name__)

CHECKLIST_TAG = "checklist"


def status_keyword(task: TaskRecord, archive: bool = False) -> TaskStatus:
    """Org keyword for a task; archived tasks read as DONE inside the archive."""
    if task.is_done:
        return TaskStatus.DONE
    if task.is_archived:
        return TaskStatus.DONE if archive else TaskStatus.ARCHIVED
    return TaskStatus.TODO


class ChecklistStrategy:
    """Decides which records are checklist items and how they are grouped."""

    policy: ChecklistPolicy

    def select(self, records: Sequence[TaskRecord]) -> Set[int]:
        """Return positions of checklist records. Notes are never selected."""
        raise NotImplementedError

    def group(
        self,
        records: Sequence[TaskRecord],
        selected: Set[int],
        diagnostics: List[Diagnostic],
    ) -> List[ChecklistGroup]:
        raise NotImplementedError


class NoChecklistStrategy(ChecklistStrategy):
    policy = ChecklistPolicy.NONE

    def select(self, records: Sequence[TaskRecord]) -> Set[int]:
        return set()

    def group(self, records, selected, diagnostics) -> List[ChecklistGroup]:
        return []


class FlatListStrategy(ChecklistStrategy):
    """Every record in the checklist folder is an item; one group per list."""

    policy = ChecklistPolicy.FLAT

    def __init__(self, checklist_folder: str):
        self.checklist_folder = checklist_folder

    def select(self, records: Sequence[TaskRecord]) -> Set[int]:
        return {
            pos for pos, record in enumerate(records)
            if not record.is_note and record.folder == self.checklist_folder
        }

    def group(self, records, selected, diagnostics) -> List[ChecklistGroup]:
        by_list: Dict[str, List[TaskRecord]] = {}
        for pos in sorted(selected):
            record = records[pos]
            by_list.setdefault(record.list_or_default, []).append(record)

        groups = []
        for list_name, items in by_list.items():
            created = next((r.created_time for r in items if r.created_time), None)
            groups.append(ChecklistGroup(
                title=list_name,
                folder=self.checklist_folder,
                list_name=list_name,
                tags=[CHECKLIST_TAG],
                created_time=created,
                items=[ChecklistNode(record) for record in items],
            ))
        return groups


class ParentTreeStrategy(ChecklistStrategy):
    """Records linked through parentId form checklist trees."""

    policy = ChecklistPolicy.TREE

    def select(self, records: Sequence[TaskRecord]) -> Set[int]:
        referenced = {r.parent_id for r in records if r.parent_id}
        children = _children_by_parent_id(records)

        selected = set()
        for pos, record in enumerate(records):
            if record.is_note:
                continue
            if (record.is_checklist_kind
                    or record.parent_id
                    or (record.task_id and record.task_id in referenced)):
                selected.add(pos)

        # Propagate to every descendant
        stack = list(selected)
        while stack:
            pos = stack.pop()
            task_id = records[pos].task_id
            if not task_id:
                continue
            for child in children.get(task_id, []):
                if child not in selected and not records[child].is_note:
                    selected.add(child)
                    stack.append(child)

        return selected

    def group(self, records, selected, diagnostics) -> List[ChecklistGroup]:
        ordered = sorted(selected)
        by_id: Dict[str, int] = {}
        for pos in ordered:
            task_id = records[pos].task_id
            if task_id and task_id not in by_id:
                by_id[task_id] = pos

        def valid_parent(pos: int) -> Optional[int]:
            parent_id = records[pos].parent_id
            if not parent_id:
                return None
            parent = by_id.get(parent_id)
            return parent if parent != pos else None

        children: Dict[int, List[int]] = {}
        for pos in ordered:
            parent = valid_parent(pos)
            if parent is not None:
                children.setdefault(parent, []).append(pos)
            elif records[pos].parent_id:
                diagnostics.append(Diagnostic(
                    code="unresolved-parent",
                    message=f"parentId {records[pos].parent_id} does not name a checklist record",
                    task_id=records[pos].task_id,
                ))

        visited: Set[int] = set()

        def build(pos: int) -> ChecklistNode:
            visited.add(pos)
            root = ChecklistNode(records[pos])
            stack = [(pos, root)]
            while stack:
                parent_pos, parent = stack.pop()
                attached = []
                for child in children.get(parent_pos, []):
                    if child not in visited:
                        visited.add(child)
                        node = ChecklistNode(records[child])
                        parent.children.append(node)
                        attached.append((child, node))
                stack.extend(reversed(attached))
            return root

        groups = []
        for pos in ordered:
            if pos in visited or valid_parent(pos) is not None:
                continue
            groups.append(self._group_from_root(build(pos)))

        # Whatever is left only hangs off a parent cycle
        for pos in ordered:
            if pos in visited:
                continue
            logger.warning(f"Breaking parentId cycle at task {records[pos].task_id}")
            diagnostics.append(Diagnostic(
                code="parent-cycle",
                message="parentId cycle broken by promoting this record to a checklist root",
                task_id=records[pos].task_id,
            ))
            groups.append(self._group_from_root(build(pos)))

        return groups

    def _group_from_root(self, root: ChecklistNode) -> ChecklistGroup:
        record = root.record
        tags = record.tag_list
        if CHECKLIST_TAG not in tags:
            tags.append(CHECKLIST_TAG)

        created = record.created_time
        if not created:
            created = next(
                (node.record.created_time for node, _ in root.walk() if node.record.created_time),
                None,
            )

        return ChecklistGroup(
            title=record.title or "Untitled Checklist",
            folder=record.folder,
            list_name=record.list_name,
            tags=tags,
            created_time=created,
            intro=record.content,
            items=root.children,
        )


def _children_by_parent_id(records: Sequence[TaskRecord]) -> Dict[str, List[int]]:
    children: Dict[str, List[int]] = {}
    for pos, record in enumerate(records):
        if record.parent_id:
            children.setdefault(record.parent_id, []).append(pos)
    return children


def get_checklist_strategy(policy: ChecklistPolicy, checklist_folder: str = "Checklists") -> ChecklistStrategy:
    policy = ChecklistPolicy(policy)
    if policy == ChecklistPolicy.NONE:
        return NoChecklistStrategy()
    if policy == ChecklistPolicy.FLAT:
        return FlatListStrategy(checklist_folder)
    return ParentTreeStrategy()


class RecordClassifier:
    """
    Partitions records into notes, checklist items and regular tasks.

    Usage:
        classifier = RecordClassifier(ChecklistPolicy.TREE)
        partition = classifier.classify(records)
    """

    def __init__(
        self,
        policy: ChecklistPolicy = ChecklistPolicy.TREE,
        checklist_folder: str = "Checklists",
        strategy: Optional[ChecklistStrategy] = None,
    ):
        self.strategy = strategy or get_checklist_strategy(policy, checklist_folder)

    def classify(
        self,
        records: Sequence[TaskRecord],
        diagnostics: Optional[List[Diagnostic]] = None,
    ) -> ClassificationPartition:
        if diagnostics is None:
            diagnostics = []

        selected = self.strategy.select(records)
        partition = ClassificationPartition()

        for pos, record in enumerate(records):
            if record.is_note:
                partition.notes.append(record)
            elif pos in selected:
                partition.checklist_items.append(record)
            else:
                partition.regular_tasks.append(record)

        partition.checklist_groups = self.strategy.group(records, selected, diagnostics)

        logger.debug(
            f"Classified {len(records)} records ({self.strategy.policy.value} policy): "
            f"{len(partition.notes)} notes, {len(partition.checklist_items)} checklist items, "
            f"{len(partition.regular_tasks)} tasks, {len(partition.checklist_groups)} checklists"
        )
        return partition
