import math
from datetime import timedelta
from flask import Blueprint, render_template

from .. import get_store
from ..formatting import format_date, parse_timestamp, round_half_up, utcnow
from ..models import Project, color_key

projects_bp = Blueprint('projects', __name__)

LAUNCH_WINDOW = timedelta(days=60)


def get_progress(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        return 0
    if math.isinf(value):
        return 100 if value > 0 else 0
    return min(100, max(0, round_half_up(value)))


def is_launching_soon(launch_date, now=None):
    moment = parse_timestamp(launch_date)
    if moment is None:
        return False
    now = now or utcnow()
    diff = moment - now
    return timedelta(0) <= diff <= LAUNCH_WINDOW


def project_summary(projects, now=None):
    now = now or utcnow()
    return [
        ('In Progress', sum(1 for p in projects if p.status == 'in_progress')),
        ('Blocked', sum(1 for p in projects if p.status == 'blocked')),
        ('Launching Soon', sum(1 for p in projects if is_launching_soon(p.launch_date, now))),
        ('Done', sum(1 for p in projects if p.status == 'done')),
    ]


def project_card(project: Project):
    return {
        'project': project,
        'progress': get_progress(project.progress),
        'status_label': (project.status or '').replace('_', ' '),
        'launch_label': format_date(project.launch_date, keep_raw=True),
        'color': color_key(project.color),
    }


@projects_bp.route('/projects')
def projects_board():
    store = get_store()
    result = (store.table('projects')
              .select('*')
              .order('created_at', ascending=False)
              .execute())
    projects = Project.from_rows(result.rows)

    return render_template('projects.html',
                           stats=project_summary(projects),
                           cards=[project_card(project) for project in projects])
