from flask import Blueprint, render_template, current_app

from .. import get_store
from ..formatting import format_relative_future, parse_timestamp, utcnow
from ..models import ScheduledTask, DAY_LABELS, color_key

calendar_bp = Blueprint('calendar', __name__)


def always_running_label(task: ScheduledTask):
    return f"{task.name} * {task.cron_human}" if task.cron_human else task.name


def tasks_for_day(tasks, day):
    return [task for task in tasks if isinstance(task.days_of_week, list) and day in task.days_of_week]


def weekly_grid(tasks):
    return [(day, tasks_for_day(tasks, day)) for day in DAY_LABELS]


def order_next_up(tasks, ascending=True):
    """Tasks with a next run, soonest first (or farthest first); unparseable times go last"""
    timed = [task for task in tasks if parse_timestamp(task.next_run)]
    untimed = [task for task in tasks if task.next_run and not parse_timestamp(task.next_run)]
    timed.sort(key=lambda task: parse_timestamp(task.next_run), reverse=not ascending)
    return timed + untimed


def next_up(tasks, now=None, ascending=True):
    now = now or utcnow()
    return [(task, format_relative_future(task.next_run, now)) for task in order_next_up(tasks, ascending)]


def build_calendar(tasks, now=None, ascending=True):
    return {
        'always_running': [
            (task, always_running_label(task)) for task in tasks if task.schedule_type == 'always'
        ],
        'week': weekly_grid(tasks),
        'next_up': next_up(tasks, now, ascending),
    }


@calendar_bp.route('/calendar')
def calendar():
    store = get_store()
    ascending = current_app.config.get('CALENDAR_NEXT_UP_ORDER', 'asc') != 'desc'

    result = (store.table('scheduled_tasks')
              .select('*')
              .order('next_run', ascending=ascending, nulls_first=False)
              .execute())
    tasks = ScheduledTask.from_rows(result.rows)

    return render_template('calendar.html', color_key=color_key, **build_calendar(tasks, ascending=ascending))
