"""
TickTick conversion pipeline

Classifies TickTick backup records and renders them as Org-mode outlines and
Denote notes.
"""

from .models import (
    ChecklistGroup,
    ChecklistNode,
    ChecklistPolicy,
    ClassificationPartition,
    ConversionResult,
    ConversionSettings,
    Diagnostic,
    NoteDescriptor,
    TaskRecord,
    TaskStatus,
)
from .classifier import RecordClassifier, get_checklist_strategy, status_keyword
from .org_renderer import OrgRenderer
from .denote_builder import DenoteBuilder, SignatureGenerator, denote_filename, denote_identifier
from .pipeline import TickTickConverter, convert_records

__all__ = [
    'ChecklistGroup',
    'ChecklistNode',
    'ChecklistPolicy',
    'ClassificationPartition',
    'ConversionResult',
    'ConversionSettings',
    'Diagnostic',
    'NoteDescriptor',
    'TaskRecord',
    'TaskStatus',
    'RecordClassifier',
    'get_checklist_strategy',
    'status_keyword',
    'OrgRenderer',
    'DenoteBuilder',
    'SignatureGenerator',
    'denote_filename',
    'denote_identifier',
    'TickTickConverter',
    'convert_records',
]
