from dataclasses import dataclass, field, fields
from typing import Any, List, Optional


TASK_STATUSES = ['todo', 'in_progress', 'blocked', 'done']
TASK_PRIORITIES = ['high', 'medium', 'low']
DOCUMENT_CATEGORIES = ['All', 'Research', 'Strategy', 'Daily', 'Other']
DAY_LABELS = ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']
COLORS = ['blue', 'green', 'purple', 'orange', 'yellow', 'red']


def color_key(color):
    key = (color or '').lower()
    return key if key in COLORS else 'neutral'


class Row:
    """Store rows come back as dicts; unknown columns are ignored, missing ones defaulted"""

    @classmethod
    def from_row(cls, row: dict):
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in (row or {}).items() if k in known}
        if 'id' in values and values['id'] is not None:
            values['id'] = str(values['id'])
        return cls(**values)

    @classmethod
    def from_rows(cls, rows):
        return [cls.from_row(row) for row in rows or []]


@dataclass
class Task(Row):
    id: Optional[str] = None
    title: str = ''
    description: Optional[str] = None
    status: str = 'todo'
    priority: str = 'medium'
    waiting_on: Optional[str] = None
    due_date: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def is_blocked(self):
        return self.status == 'blocked'


@dataclass
class AgentActivity(Row):
    id: Optional[str] = None
    summary: str = ''
    detail: Optional[str] = None
    category: Optional[str] = None
    created_at: Optional[str] = None


@dataclass
class StockRecommendation(Row):
    id: Optional[str] = None
    date: Optional[str] = None
    tickers: List[str] = field(default_factory=list)
    heat_map: Optional[dict] = None
    new_picks: Any = None
    summary: str = ''
    raw_data: Any = None
    created_at: Optional[str] = None


@dataclass
class ScheduledTask(Row):
    id: Optional[str] = None
    name: str = ''
    schedule_type: str = 'cron'
    cron_human: Optional[str] = None
    days_of_week: Optional[List[str]] = None
    time_of_day: Optional[str] = None
    color: Optional[str] = None
    status: Optional[str] = None
    next_run: Optional[str] = None
    last_run: Optional[str] = None


@dataclass
class Document(Row):
    id: Optional[str] = None
    title: str = ''
    filename: str = ''
    content: str = ''
    category: str = 'Other'
    word_count: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class Project(Row):
    id: Optional[str] = None
    name: str = ''
    description: Optional[str] = None
    status: str = 'planning'
    priority: str = 'medium'
    progress: Any = None
    launch_date: Optional[str] = None
    repo_url: Optional[str] = None
    color: Optional[str] = None
    created_at: Optional[str] = None
