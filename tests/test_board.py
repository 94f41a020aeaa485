from mission_control.board import TaskBoard, TaskEditor, TaskForm, percent_done, CLOSED, OPEN
from mission_control.models import Task
from tests.conftest import FakeStore


def test_percent_done():
    assert percent_done(0, 0) == 0
    assert percent_done(3, 4) == 75
    assert percent_done(1, 3) == 33
    assert percent_done(1, 2) == 50


def test_board_partitions_by_status():
    board = TaskBoard([
        Task(id='1', status='blocked'),
        Task(id='2', status='todo'),
        Task(id='3', status='done'),
    ])
    assert [t.id for t in board.blocked] == ['1']
    assert [t.id for t in board.backlog] == ['2']
    assert board.in_progress == []
    assert [t.id for t in board.done] == ['3']
    assert board.percent_done == 33
    assert board.stats() == [('Blocked', '1'), ('In Progress', '0'), ('Completed', '1'), ('Done', '33%')]


def test_board_reconciles_saved_and_deleted_tasks():
    board = TaskBoard([Task(id='1', title='a'), Task(id='2', title='b')])

    board.on_task_saved(Task(id='2', title='b2'))
    assert [(t.id, t.title) for t in board.tasks] == [('1', 'a'), ('2', 'b2')]

    board.on_task_saved(Task(id='3', title='new'))
    assert [t.id for t in board.tasks] == ['3', '1', '2']

    board.on_task_deleted('1')
    assert [t.id for t in board.tasks] == ['3', '2']


def test_form_seeds_from_defaults_and_task():
    assert TaskForm.from_task(None) == TaskForm(status='todo', priority='medium')
    form = TaskForm.from_task(Task(id='1', title='x', status='blocked', waiting_on='legal',
                                   due_date='2026-11-01T00:00:00+00:00'))
    assert form.waiting_on == 'legal'
    assert form.due_date == '2026-11-01'


def test_editor_rejects_blank_title_without_request():
    store = FakeStore()
    editor = TaskEditor(store)
    editor.open()
    editor.form.title = '   '

    assert editor.can_submit is False
    assert editor.save() is False
    assert store.writes == []
    assert editor.state == OPEN


def test_editor_drops_waiting_on_unless_blocked():
    editor = TaskEditor(FakeStore())
    editor.open(Task(id='1', title='Ship', status='blocked', waiting_on='design review'))
    assert editor.build_payload()['waiting_on'] == 'design review'

    editor.form.status = 'in_progress'
    payload = editor.build_payload()
    assert payload['waiting_on'] is None


def test_editor_payload_trims_and_nulls_empty_fields():
    editor = TaskEditor(FakeStore())
    editor.open()
    editor.form.title = '  Draft launch plan  '
    editor.form.description = '   '
    assert editor.build_payload() == {
        'title': 'Draft launch plan',
        'description': None,
        'status': 'todo',
        'priority': 'medium',
        'waiting_on': None,
        'due_date': None,
    }


def test_editor_create_calls_on_save_and_closes():
    store = FakeStore()
    saved = []
    editor = TaskEditor(store, on_save=saved.append)
    editor.open()
    editor.form.title = 'New thing'

    assert editor.save() is True
    assert editor.state == CLOSED
    assert store.writes[0][0] == 'POST'
    assert saved[0].title == 'New thing'
    assert saved[0].id is not None


def test_editor_update_patches_existing_task():
    store = FakeStore({'tasks': [{'id': '9', 'title': 'Old', 'status': 'todo', 'priority': 'low'}]})
    saved = []
    editor = TaskEditor(store, on_save=saved.append)
    editor.open(Task.from_row(store.tables['tasks'][0]))
    editor.form.title = 'Renamed'

    assert editor.save() is True
    method, table, payload, row_id = store.writes[0]
    assert (method, table, row_id) == ('PATCH', 'tasks', '9')
    assert saved[0].title == 'Renamed'


def test_editor_write_failure_stays_open():
    store = FakeStore(fail_writes=True)
    saved = []
    editor = TaskEditor(store, on_save=saved.append)
    editor.open()
    editor.form.title = 'Will fail'

    assert editor.save() is False
    assert editor.state == OPEN
    assert editor.is_busy is False
    assert editor.error == 'permission denied for table tasks'
    assert saved == []


def test_editor_missing_config_aborts():
    store = FakeStore(configured=False)
    editor = TaskEditor(store)
    editor.open()
    editor.form.title = 'x'

    assert editor.save() is False
    assert editor.is_open


def test_editor_delete_requires_edit_mode_and_confirmation():
    store = FakeStore({'tasks': [{'id': '5', 'title': 'Doomed'}]})
    deleted = []
    editor = TaskEditor(store, on_delete=deleted.append)

    editor.open()
    assert editor.delete(confirmed=True) is False

    editor.open(Task(id='5', title='Doomed'))
    assert editor.delete(confirmed=False) is False
    assert store.writes == []

    assert editor.delete(confirmed=True) is True
    assert deleted == ['5']
    assert editor.state == CLOSED
    assert store.tables['tasks'] == []


def test_editor_delete_failure_stays_open():
    store = FakeStore(fail_writes=True)
    deleted = []
    editor = TaskEditor(store, on_delete=deleted.append)
    editor.open(Task(id='5', title='Sticky'))

    assert editor.delete(confirmed=True) is False
    assert editor.state == OPEN
    assert deleted == []
