"""
Pytest configuration and fixtures for the TickTick converter tests
"""
import csv
import io
import pytest
from datetime import datetime
from pathlib import Path
import sys

# Add the cli directory to the Python path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "cli"))

from conversion import TaskRecord

EXPORT_COLUMNS = [
    "Folder Name", "List Name", "Title", "Kind", "Tags", "Content", "Is Check list",
    "Start Date", "Due Date", "Reminder", "Repeat", "Priority", "Status",
    "Created Time", "Completed Time", "Order", "Timezone", "Is All Day",
    "Is Floating", "Column Name", "Column Order", "View Mode", "taskId", "parentId",
]

EXPORT_PREAMBLE = (
    '"Date: 2024-03-01+0000"\n'
    '"Version: 7.1"\n'
    '"Status: \n0 Normal\n1 Completed\n2 Archived"\n'
)


@pytest.fixture
def fixed_now():
    """A fixed clock so output is reproducible"""
    return datetime(2024, 3, 1, 12, 34, 56)


@pytest.fixture
def make_record():
    """Build a TaskRecord from attribute names"""
    def _make(**fields):
        return TaskRecord(**fields)
    return _make


@pytest.fixture
def sample_rows():
    """Rows covering tasks, notes, a checklist tree and an archived task"""
    return [
        {"Folder Name": "Work", "List Name": "Projects", "Title": "Write report", "Kind": "TEXT",
         "Tags": "work, writing", "Status": "0", "Start Date": "2024-01-15T09:00:00+0000",
         "Due Date": "2024-01-15T09:00:00+0000", "Repeat": "FREQ=WEEKLY;INTERVAL=1", "Priority": "3",
         "Created Time": "2024-01-10T08:00:00+0000", "taskId": "t1"},
        {"Folder Name": "Work", "List Name": "Projects", "Title": "Send invoice", "Kind": "TEXT",
         "Status": "1", "Due Date": "2024-01-20T17:00:00+0000", "Completed Time": "2024-01-19T10:00:00+0000",
         "taskId": "t2"},
        {"Folder Name": "", "List Name": "", "Title": "Old idea", "Kind": "TEXT", "Status": "2",
         "taskId": "t3"},
        {"Folder Name": "Home", "List Name": "Shopping", "Title": "Groceries", "Kind": "TEXT",
         "Tags": "errands", "Content": "For the weekend", "Status": "0",
         "Created Time": "2024-02-01T10:00:00+0000", "taskId": "p1"},
        {"Folder Name": "Home", "List Name": "Shopping", "Title": "Milk", "Kind": "TEXT", "Status": "1",
         "taskId": "c1", "parentId": "p1"},
        {"Folder Name": "Home", "List Name": "Shopping", "Title": "Fruit", "Kind": "TEXT", "Status": "0",
         "taskId": "c2", "parentId": "p1"},
        {"Folder Name": "Home", "List Name": "Shopping", "Title": "Apples", "Kind": "TEXT", "Status": "0",
         "taskId": "g1", "parentId": "c2"},
        {"Folder Name": "Journal", "List Name": "Notes", "Title": "Café déjà vu!", "Kind": "NOTE",
         "Tags": "ideas", "Content": "First line\r\nSecond line", "Status": "0",
         "Created Time": "2024-01-05T07:30:00+0000", "taskId": "n1"},
    ]


@pytest.fixture
def sample_records(sample_rows):
    return [TaskRecord.from_row(row) for row in sample_rows]


def render_export(rows, preamble: str = EXPORT_PREAMBLE) -> str:
    """Serialize rows the way TickTick writes its backup"""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow({column: row.get(column, "") for column in EXPORT_COLUMNS})
    return preamble + buffer.getvalue()


@pytest.fixture
def sample_export_text(sample_rows):
    return render_export(sample_rows)


@pytest.fixture
def sample_export_file(tmp_path, sample_export_text):
    path = tmp_path / "ticktick-backup.csv"
    path.write_text(sample_export_text, encoding="utf-8")
    return path


@pytest.fixture
def export_text():
    """Function turning rows into backup text"""
    return render_export
