import math
from datetime import date, timedelta
from flask import Blueprint, render_template

from .. import get_store
from ..formatting import format_long_date
from ..models import Task, StockRecommendation

feed_bp = Blueprint('feed', __name__)

FEED_WINDOW_DAYS = 30
TEASER_SIZE = 3


def normalize_heat_map(heat_map):
    """Ticker -> count mapping as (ticker, count) pairs, hottest first"""
    if not isinstance(heat_map, dict):
        return []

    entries = []
    for ticker, count in heat_map.items():
        if isinstance(count, bool) or not isinstance(count, (int, float)) \
                or (isinstance(count, float) and not math.isfinite(count)):
            continue
        entries.append((str(ticker), max(0, int(count))))
    return sorted(entries, key=lambda entry: entry[1], reverse=True)


def _first_present(obj, *keys, default=''):
    for key in keys:
        value = obj.get(key)
        if value:
            return str(value)
    return default


def _pick_from_mapping(obj):
    return {
        'ticker': _first_present(obj, 'ticker', 'name', default='?'),
        'thesis': _first_present(obj, 'thesis', 'catalyst', 'note'),
        'action': _first_present(obj, 'action', default='BUY'),
    }


def _pick_from_scalar(value):
    return {'ticker': str(value), 'thesis': '', 'action': 'BUY'}


def normalize_pick(entry):
    # Agents have written picks as bare tickers and as objects with a few different field names
    if isinstance(entry, dict):
        return _pick_from_mapping(entry)
    if entry is None:
        return _pick_from_scalar('?')
    return _pick_from_scalar(entry)


def normalize_new_picks(new_picks):
    if not isinstance(new_picks, (list, tuple)):
        return []
    return [normalize_pick(entry) for entry in new_picks]


def heat_badge_class(count):
    if count >= 3:
        return 'heat-hot'
    if count == 2:
        return 'heat-warm'
    return 'heat-mild'


def teaser_tasks(tasks, size=TEASER_SIZE):
    return [task for task in tasks if task.status in ('blocked', 'in_progress')][:size]


def build_briefing(record: StockRecommendation):
    return {
        'record': record,
        'date_label': format_long_date(record.date),
        'tickers': ", ".join(str(t) for t in record.tickers or []),
        'heat_entries': [
            (ticker, count, heat_badge_class(count))
            for ticker, count in normalize_heat_map(record.heat_map)
        ],
        'new_picks': normalize_new_picks(record.new_picks),
    }


@feed_bp.route('/')
def index():
    store = get_store()
    start_date = (date.today() - timedelta(days=FEED_WINDOW_DAYS)).isoformat()

    result = (store.table('stock_recommendations')
              .select('id, date, tickers, heat_map, new_picks, summary, raw_data, created_at')
              .gte('date', start_date)
              .order('date', ascending=False)
              .execute())
    records = StockRecommendation.from_rows(result.rows)

    # Lexical order: high < low < medium
    tasks_result = (store.table('tasks')
                    .select('*')
                    .neq('status', 'done')
                    .order('priority', ascending=True)
                    .execute())
    tasks = Task.from_rows(tasks_result.rows)

    return render_template('index.html',
                           briefings=[build_briefing(record) for record in records],
                           teaser=teaser_tasks(tasks),
                           window_days=FEED_WINDOW_DAYS)
