from flask import Blueprint, render_template, request, flash, redirect, url_for

from .. import get_store
from ..board import TaskBoard, TaskEditor, TaskForm
from ..models import Task, AgentActivity, TASK_STATUSES, TASK_PRIORITIES

tasks_bp = Blueprint('tasks', __name__)

ACTIVITY_LIMIT = 10


def load_board(store):
    tasks_result = (store.table('tasks')
                    .select('*')
                    .order('created_at', ascending=False)
                    .execute())
    activity_result = (store.table('agent_activity')
                       .select('*')
                       .order('created_at', ascending=False)
                       .limit(ACTIVITY_LIMIT)
                       .execute())
    return TaskBoard(Task.from_rows(tasks_result.rows)), AgentActivity.from_rows(activity_result.rows)


def make_editor(store, board):
    return TaskEditor(store, on_save=board.on_task_saved, on_delete=board.on_task_deleted)


def render_board(board, activity, editor):
    return render_template('tasks/board.html',
                           board=board,
                           activity=activity,
                           editor=editor,
                           statuses=TASK_STATUSES,
                           priorities=TASK_PRIORITIES)


@tasks_bp.route('/tasks')
def task_board():
    store = get_store()
    board, activity = load_board(store)
    editor = make_editor(store, board)

    edit_id = request.args.get('edit')
    if edit_id:
        task = board.get(edit_id)
        if task:
            editor.open(task)
        else:
            flash("That task no longer exists", 'error')
    elif request.args.get('new'):
        editor.open()

    return render_board(board, activity, editor)


@tasks_bp.route('/tasks/save', methods=['POST'])
def save_task():
    store = get_store()
    board, activity = load_board(store)
    editor = make_editor(store, board)

    task_id = request.form.get('id')
    task = (board.get(task_id) or Task(id=task_id)) if task_id else None
    editor.open(task)
    editor.form = TaskForm.from_form(request.form)

    if not editor.form.title.strip():
        flash("Title is required", 'error')
    elif editor.save():
        flash("Task saved", 'success')
        return redirect(url_for('tasks.task_board'))
    else:
        flash(f"Could not save task: {editor.error}", 'error')
    return render_board(board, activity, editor)


@tasks_bp.route('/tasks/<task_id>/delete', methods=['POST'])
def delete_task(task_id):
    store = get_store()
    board, activity = load_board(store)
    editor = make_editor(store, board)
    editor.open(board.get(task_id) or Task(id=task_id))

    if request.form.get('confirmed') != 'yes':
        flash("Delete not confirmed", 'error')
    elif editor.delete(confirmed=True):
        flash("Task deleted", 'success')
        return redirect(url_for('tasks.task_board'))
    else:
        flash(f"Could not delete task: {editor.error}", 'error')
    return render_board(board, activity, editor)
