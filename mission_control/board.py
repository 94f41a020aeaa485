import logging
from dataclasses import dataclass, asdict
from typing import Callable, List, Optional

from .formatting import normalize_date_input, round_half_up
from .models import Task, TASK_STATUSES, TASK_PRIORITIES
from .store import StoreClient, StoreError, CONFIG_MISSING

logger = logging.getLogger(__name__)

TASKS_TABLE = 'tasks'


def percent_done(done_count: int, total_count: int) -> int:
    if total_count <= 0:
        return 0
    return round_half_up(done_count / total_count * 100)


class TaskBoard:
    """
    In-memory task list for one board render, plus the columns and stats derived from it.
    The editor never touches the list directly; it reports back through on_task_saved / on_task_deleted.
    """

    def __init__(self, tasks: Optional[List[Task]] = None):
        self.tasks = list(tasks or [])

    def on_task_saved(self, saved: Task):
        for i, task in enumerate(self.tasks):
            if task.id == saved.id:
                self.tasks[i] = saved
                return
        self.tasks.insert(0, saved)

    def on_task_deleted(self, task_id):
        task_id = str(task_id)
        self.tasks = [task for task in self.tasks if task.id != task_id]

    def get(self, task_id) -> Optional[Task]:
        task_id = str(task_id)
        return next((task for task in self.tasks if task.id == task_id), None)

    def _with_status(self, status):
        return [task for task in self.tasks if task.status == status]

    @property
    def backlog(self):
        return self._with_status('todo')

    @property
    def in_progress(self):
        return self._with_status('in_progress')

    @property
    def blocked(self):
        return self._with_status('blocked')

    @property
    def done(self):
        return self._with_status('done')

    @property
    def percent_done(self):
        return percent_done(len(self.done), len(self.tasks))

    def stats(self):
        return [
            ('Blocked', f"{len(self.blocked)}"),
            ('In Progress', f"{len(self.in_progress)}"),
            ('Completed', f"{len(self.done)}"),
            ('Done', f"{self.percent_done}%"),
        ]


@dataclass
class TaskForm:
    title: str = ''
    description: str = ''
    status: str = 'todo'
    priority: str = 'medium'
    waiting_on: str = ''
    due_date: str = ''

    @classmethod
    def from_task(cls, task: Optional[Task]):
        if task is None:
            return cls()
        return cls(
            title=task.title or '',
            description=task.description or '',
            status=task.status or 'todo',
            priority=task.priority or 'medium',
            waiting_on=task.waiting_on or '',
            due_date=normalize_date_input(task.due_date),
        )

    @classmethod
    def from_form(cls, form):
        defaults = cls()
        submitted = cls(**{
            name: (form.get(name) if form.get(name) is not None else getattr(defaults, name))
            for name in asdict(defaults)
        })
        # Unknown choices fall back to the defaults
        if submitted.status not in TASK_STATUSES:
            submitted.status = defaults.status
        if submitted.priority not in TASK_PRIORITIES:
            submitted.priority = defaults.priority
        return submitted

    @property
    def shows_waiting_on(self):
        return self.status == 'blocked'


CLOSED = 'closed'
OPEN = 'open'
SAVING = 'saving'
DELETING = 'deleting'


class TaskEditor:
    """
    Side-panel form for a single task.

    closed -> open (create or edit) -> saving/deleting -> closed on success,
    back to open on failure so the user can retry or cancel.
    """

    def __init__(self, store: StoreClient,
                 on_save: Optional[Callable[[Task], None]] = None,
                 on_delete: Optional[Callable[[str], None]] = None):
        self.store = store
        self.on_save = on_save
        self.on_delete = on_delete
        self.state = CLOSED
        self.task: Optional[Task] = None
        self.form = TaskForm()
        self.error: Optional[str] = None

    @property
    def is_open(self):
        return self.state != CLOSED

    @property
    def is_editing(self):
        return bool(self.task and self.task.id)

    @property
    def is_busy(self):
        return self.state in (SAVING, DELETING)

    @property
    def can_submit(self):
        return bool(self.form.title.strip()) and not self.is_busy

    def open(self, task: Optional[Task] = None):
        self.task = task
        self.form = TaskForm.from_task(task)
        self.error = None
        self.state = OPEN

    def close(self):
        self.state = CLOSED
        self.task = None
        self.form = TaskForm()

    def build_payload(self) -> dict:
        form = self.form
        return {
            'title': form.title.strip(),
            'description': form.description.strip() or None,
            'status': form.status,
            'priority': form.priority,
            'waiting_on': (form.waiting_on.strip() or None) if form.shows_waiting_on else None,
            'due_date': form.due_date or None,
        }

    def _fail(self, action, e: StoreError):
        if e.kind == CONFIG_MISSING:
            logger.error(f"Task {action} aborted: {e.message}")
        else:
            logger.error(f"Task {action} failed: {e.message}")
        self.error = e.message
        self.state = OPEN
        return False

    def save(self) -> bool:
        if not self.is_open or not self.can_submit:
            return False

        payload = self.build_payload()
        self.state = SAVING
        try:
            if self.is_editing:
                row = self.store.update(TASKS_TABLE, self.task.id, payload)
            else:
                row = self.store.insert(TASKS_TABLE, payload)
        except StoreError as e:
            return self._fail('save', e)

        saved = Task.from_row(row)
        logger.info(f"Task saved: {saved.id} ({saved.title})")
        if self.on_save:
            self.on_save(saved)
        self.close()
        return True

    def delete(self, confirmed: bool = False) -> bool:
        if not self.is_open or not self.is_editing or self.is_busy:
            return False
        if not confirmed:
            return False

        task_id = self.task.id
        self.state = DELETING
        try:
            self.store.delete(TASKS_TABLE, task_id)
        except StoreError as e:
            return self._fail('delete', e)

        logger.info(f"Task deleted: {task_id}")
        if self.on_delete:
            self.on_delete(task_id)
        self.close()
        return True
